"""Domain models for cardano-cli transaction building and UTXO queries.

Descriptors are frozen value objects built by the caller for a single encode
call. Each one knows how to validate itself; the encoders in
:mod:`cardano_cli_codec.flags` assume validation already ran and only care
about grammar.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, Optional, Tuple

from .assets import ACTION_MINT, LOVELACE, MINT_ACTIONS, AssetBundle
from .errors import ValidationError

TX_HASH_PATTERN = re.compile(r"^[0-9a-fA-F]{64}$")


def _require_text(value: Any, message: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(message)
    return value


def _require_non_negative_int(value: Any, message: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError(message)
    return value


@dataclass(frozen=True)
class ExecutionUnits:
    """Script execution budget as a (memory, steps) pair."""

    memory: int
    steps: int

    @classmethod
    def from_pair(cls, pair: "ExecutionUnits | Tuple[int, int] | list[int]") -> "ExecutionUnits":
        if isinstance(pair, ExecutionUnits):
            return pair
        if len(pair) != 2:
            raise ValidationError(f"Execution units need exactly two elements, got {list(pair)}")
        return cls(memory=pair[0], steps=pair[1])

    def validate(self) -> None:
        _require_non_negative_int(self.memory, f"Execution memory must be a non-negative integer: {self.memory!r}")
        _require_non_negative_int(self.steps, f"Execution steps must be a non-negative integer: {self.steps!r}")

    def render(self) -> str:
        return f'"({self.memory},{self.steps})"'


@dataclass(frozen=True)
class ScriptFile:
    """Inline script content plus the path it must be written to before use."""

    out_file_path: str
    content: str

    def validate(self) -> None:
        if not self.out_file_path or not self.content:
            raise ValidationError("Script file path and content are needed")


@dataclass(frozen=True)
class TxIn:
    tx_hash: str
    tx_index: int
    assets: Optional[AssetBundle] = None
    script: Optional[ScriptFile] = None
    datum: Optional[str] = None
    datum_hash: Optional[str] = None
    redeemer: Optional[str] = None
    execution_units: Optional[ExecutionUnits] = None

    def validate(self) -> None:
        if not isinstance(self.tx_hash, str) or not TX_HASH_PATTERN.match(self.tx_hash):
            raise ValidationError(f"Tx hash must be 64 hex characters: {self.tx_hash!r}")
        _require_non_negative_int(self.tx_index, f"Tx index must be a non-negative integer: {self.tx_index!r}")
        if self.script is not None:
            self.script.validate()
        if self.execution_units is not None:
            self.execution_units.validate()

    @property
    def reference(self) -> str:
        return f"{self.tx_hash}#{self.tx_index}"


@dataclass(frozen=True)
class TxOut:
    address: str
    assets: AssetBundle
    datum_hash: Optional[str] = None

    def validate(self, base_asset: str = LOVELACE) -> None:
        _require_text(self.address, "Output address must be a non-empty string")
        if self.assets.base_quantity(base_asset) <= 0:
            raise ValidationError(f"Must send some {base_asset} to {self.address}")


@dataclass(frozen=True)
class MintAction:
    """One mint or burn entry; ``quantity`` is always the positive magnitude."""

    action: str
    asset_id: str
    quantity: int
    policy_script_file_path: str
    redeemer: Optional[str] = None
    execution_units: Optional[ExecutionUnits] = None

    def validate(self) -> None:
        quantity_ok = (
            isinstance(self.quantity, int)
            and not isinstance(self.quantity, bool)
            and self.quantity > 0
        )
        if self.action not in MINT_ACTIONS or not self.asset_id or not quantity_ok:
            raise ValidationError(
                f"Must provide valid action, asset and quantity: "
                f"action={self.action!r} asset={self.asset_id!r} quantity={self.quantity!r}"
            )
        _require_text(
            self.policy_script_file_path,
            f"Mint action for {self.asset_id} needs a policy script file path",
        )
        if self.execution_units is not None:
            self.execution_units.validate()

    @property
    def signed_quantity(self) -> int:
        return self.quantity if self.action == ACTION_MINT else -self.quantity


@dataclass(frozen=True)
class Withdrawal:
    staking_address: str
    reward: int
    script: Optional[ScriptFile] = None
    datum: Optional[str] = None
    redeemer: Optional[str] = None
    execution_units: Optional[ExecutionUnits] = None

    def validate(self) -> None:
        _require_text(self.staking_address, "Withdrawal needs a staking address")
        _require_non_negative_int(self.reward, f"Withdrawal reward must be a non-negative integer: {self.reward!r}")
        if self.script is not None:
            self.script.validate()
        if self.execution_units is not None:
            self.execution_units.validate()


@dataclass(frozen=True)
class Certificate:
    cert: str
    script: Optional[ScriptFile] = None
    datum: Optional[str] = None
    redeemer: Optional[str] = None
    execution_units: Optional[ExecutionUnits] = None

    def validate(self) -> None:
        _require_text(self.cert, "Certificate payload must be a non-empty string")
        if self.script is not None:
            self.script.validate()
        if self.execution_units is not None:
            self.execution_units.validate()


@dataclass(frozen=True)
class Metadata:
    """Transaction metadata; non-string content is serialised as JSON."""

    out_file_path: str
    content: Any

    def validate(self) -> None:
        if not self.out_file_path or self.content is None or self.content == "":
            raise ValidationError("Metadata file path and content are needed")

    def rendered_content(self) -> str:
        if isinstance(self.content, str):
            return self.content
        return json.dumps(self.content)


@dataclass(frozen=True)
class AuxScript:
    script: ScriptFile

    def validate(self) -> None:
        self.script.validate()


@dataclass(frozen=True)
class ValidityWindow:
    invalid_before: Optional[int] = None
    invalid_hereafter: Optional[int] = None
    script_invalid: bool = False

    def validate(self) -> None:
        for label, slot in (
            ("invalid-before", self.invalid_before),
            ("invalid-hereafter", self.invalid_hereafter),
        ):
            if slot is not None:
                _require_non_negative_int(slot, f"{label} slot must be a non-negative integer: {slot!r}")


@dataclass(frozen=True)
class RawTransaction:
    """Everything ``cardano-cli transaction build-raw`` needs for one body."""

    tx_ins: Tuple[TxIn, ...]
    tx_outs: Tuple[TxOut, ...]
    protocol_params_file_path: str
    out_file_path: str
    fee: int
    tx_in_collaterals: Tuple[TxIn, ...] = ()
    mints: Tuple[MintAction, ...] = ()
    withdrawals: Tuple[Withdrawal, ...] = ()
    certificates: Tuple[Certificate, ...] = ()
    metadata: Optional[Metadata] = None
    aux_scripts: Tuple[AuxScript, ...] = ()
    validity: ValidityWindow = field(default_factory=ValidityWindow)
    era: Optional[str] = None

    def validate(self, base_asset: str = LOVELACE) -> None:
        for tx_in in self.tx_ins:
            tx_in.validate()
        for tx_out in self.tx_outs:
            tx_out.validate(base_asset)
        for collateral in self.tx_in_collaterals:
            collateral.validate()
        for cert in self.certificates:
            cert.validate()
        for withdrawal in self.withdrawals:
            withdrawal.validate()
        for action in self.mints:
            action.validate()
        for aux in self.aux_scripts:
            aux.validate()
        if self.metadata is not None:
            self.metadata.validate()
        self.validity.validate()
        _require_non_negative_int(self.fee, f"Fee must be a non-negative integer: {self.fee!r}")
        _require_text(self.out_file_path, "Raw transaction needs an out-file path")
        _require_text(self.protocol_params_file_path, "Raw transaction needs a protocol parameters file path")


@dataclass(frozen=True)
class UtxoRecord:
    """One row of a ``cardano-cli query utxo`` listing."""

    tx_hash: str
    tx_index: int
    assets: AssetBundle
    datum_hash: Optional[str] = None

    @property
    def reference(self) -> str:
        return f"{self.tx_hash}#{self.tx_index}"

    def to_tx_in(self) -> TxIn:
        return TxIn(tx_hash=self.tx_hash, tx_index=self.tx_index, assets=self.assets, datum_hash=self.datum_hash)

    def to_dict(self) -> dict[str, Any]:
        return {
            "tx_hash": self.tx_hash,
            "tx_index": self.tx_index,
            "datum_hash": self.datum_hash,
            "assets": self.assets.to_dict(),
        }


@dataclass(frozen=True)
class WalletInfo:
    balance: AssetBundle
    utxos: Tuple[UtxoRecord, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "balance": self.balance.to_dict(),
            "utxos": [utxo.to_dict() for utxo in self.utxos],
        }


@dataclass(frozen=True)
class QueryTip:
    """Parsed ``cardano-cli query tip`` response."""

    era: str
    sync_progress: str
    hash: str
    epoch: int
    slot: int
    block: int


@dataclass(frozen=True)
class KeyPair:
    vkey_file_path: str
    skey_file_path: str


@dataclass(frozen=True)
class PaymentAddress:
    address: str
    address_file_path: str
