"""Error taxonomy shared by the codec modules."""


class CodecError(RuntimeError):
    """Base class for encoding and parsing failures."""


class ValidationError(CodecError):
    """Raised when a descriptor is malformed or incomplete."""


class ParseError(CodecError):
    """Raised when cardano-cli output does not have the expected shape."""
