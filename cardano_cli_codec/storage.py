"""File storage used for scripts, metadata and cardano-cli outputs."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class FileStore(Protocol):
    def write(self, path: str, content: str) -> str:
        ...

    def read(self, path: str) -> str:
        ...


class LocalFileStore:
    """Read and write plain text files, resolving relative paths against ``root``."""

    def __init__(self, root: str | Path | None = None) -> None:
        self.root = Path(root).expanduser() if root is not None else None

    def _resolve(self, path: str) -> Path:
        candidate = Path(path).expanduser()
        if self.root is not None and not candidate.is_absolute():
            return self.root / candidate
        return candidate

    def write(self, path: str, content: str) -> str:
        target = self._resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)
        logger.debug("Wrote %d characters to %s", len(content), target)
        return path

    def read(self, path: str) -> str:
        return self._resolve(path).read_text()
