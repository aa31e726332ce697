"""Load :class:`RawTransaction` descriptors from YAML documents.

A descriptor is a plain mapping so that operators can keep transaction
templates next to their scripts::

    era: babbage
    fee: 180000
    out_file: tx.raw
    protocol_params_file: protocol.json
    tx_ins:
      - tx_hash: 5291500d8b0b859625956de43370f2d2ceb46ba3189bca962ba954f6dc8dee7e
        tx_index: 1
    tx_outs:
      - address: addr_test1vz2exa3va5pddrw33ldxtsnfpp4p0g92ep9np3fvz37a39saqac6q
        assets: {lovelace: 1400000, policy.token: 2}
    mints:
      - action: mint
        asset: policy.token
        quantity: 2
        policy_script_file: policy.script

Structural problems raise :class:`DescriptorError`; semantic checks such as
the mandatory lovelace amount happen later in the encoder.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar

import yaml

from .assets import AssetBundle, AssetError
from .errors import ValidationError
from .model import (
    AuxScript,
    Certificate,
    ExecutionUnits,
    Metadata,
    MintAction,
    RawTransaction,
    ScriptFile,
    TxIn,
    TxOut,
    ValidityWindow,
    Withdrawal,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DescriptorError(RuntimeError):
    """Raised when a transaction descriptor is missing required information."""


def load_transaction(path: str | Path) -> RawTransaction:
    """Load a transaction descriptor from ``path``."""

    path = Path(path)
    if not path.exists():
        raise DescriptorError(f"Descriptor file does not exist: {path}")

    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as exc:  # pragma: no cover - PyYAML handles details
        raise DescriptorError(f"Failed to parse descriptor YAML: {exc}") from exc

    tx = transaction_from_mapping(data)
    logger.debug(
        "Loaded descriptor %s with %d inputs and %d outputs", path, len(tx.tx_ins), len(tx.tx_outs)
    )
    return tx


def transaction_from_mapping(data: Any) -> RawTransaction:
    if not isinstance(data, dict):
        raise DescriptorError("Descriptor must contain a mapping at the top level")

    validity = data.get("validity") or {}
    if not isinstance(validity, dict):
        raise DescriptorError("validity must be a mapping")

    metadata_block = data.get("metadata")
    metadata = None
    if metadata_block is not None:
        _require_mapping(metadata_block, "metadata")
        metadata = Metadata(
            out_file_path=_require_str(metadata_block, "out_file", "metadata needs out_file"),
            content=metadata_block.get("content"),
        )

    return RawTransaction(
        tx_ins=_parse_list(data, "tx_ins", _parse_tx_in),
        tx_outs=_parse_list(data, "tx_outs", _parse_tx_out),
        protocol_params_file_path=_require_str(
            data, "protocol_params_file", "Descriptor must define protocol_params_file"
        ),
        out_file_path=_require_str(data, "out_file", "Descriptor must define out_file"),
        fee=_require_int(data, "fee", "Descriptor must define an integer fee"),
        tx_in_collaterals=_parse_list(data, "collaterals", _parse_tx_in),
        mints=_parse_list(data, "mints", _parse_mint),
        withdrawals=_parse_list(data, "withdrawals", _parse_withdrawal),
        certificates=_parse_list(data, "certificates", _parse_certificate),
        metadata=metadata,
        aux_scripts=_parse_list(
            data, "aux_scripts", lambda item, label: AuxScript(_parse_script(item, label))
        ),
        validity=ValidityWindow(
            invalid_before=_optional_int(validity, "invalid_before", "validity"),
            invalid_hereafter=_optional_int(validity, "invalid_hereafter", "validity"),
            script_invalid=bool(validity.get("script_invalid", False)),
        ),
        era=_optional_str(data, "era", "descriptor"),
    )


def _parse_list(
    data: dict[str, Any], key: str, parse_item: Callable[[Any, str], T]
) -> tuple[T, ...]:
    raw = data.get(key) or []
    if not isinstance(raw, list):
        raise DescriptorError(f"{key} must be a list")
    return tuple(parse_item(item, f"{key}[{index}]") for index, item in enumerate(raw))


def _parse_script(item: Any, label: str) -> ScriptFile:
    _require_mapping(item, label)
    return ScriptFile(
        out_file_path=_require_str(item, "out_file", f"{label} needs out_file"),
        content=_require_str(item, "content", f"{label} needs content"),
    )


def _parse_optional_script(item: dict[str, Any], label: str) -> Optional[ScriptFile]:
    block = item.get("script")
    if block is None:
        return None
    return _parse_script(block, f"{label}.script")


def _parse_execution_units(item: dict[str, Any], label: str) -> Optional[ExecutionUnits]:
    raw = item.get("execution_units")
    if raw is None:
        return None
    if not isinstance(raw, list):
        raise DescriptorError(f"{label}.execution_units must be a [memory, steps] pair")
    try:
        return ExecutionUnits.from_pair(raw)
    except ValidationError as exc:
        raise DescriptorError(f"{label}.execution_units: {exc}") from exc


def _parse_tx_in(item: Any, label: str) -> TxIn:
    _require_mapping(item, label)
    assets = item.get("assets")
    return TxIn(
        tx_hash=_require_str(item, "tx_hash", f"{label} needs tx_hash"),
        tx_index=_require_int(item, "tx_index", f"{label} needs an integer tx_index"),
        assets=_parse_bundle(assets, label) if assets is not None else None,
        script=_parse_optional_script(item, label),
        datum=_optional_str(item, "datum", label),
        datum_hash=_optional_str(item, "datum_hash", label),
        redeemer=_optional_str(item, "redeemer", label),
        execution_units=_parse_execution_units(item, label),
    )


def _parse_tx_out(item: Any, label: str) -> TxOut:
    _require_mapping(item, label)
    assets = item.get("assets")
    if not isinstance(assets, dict):
        raise DescriptorError(f"{label}.assets must be a mapping of asset to quantity")
    return TxOut(
        address=_require_str(item, "address", f"{label} needs address"),
        assets=_parse_bundle(assets, label),
        datum_hash=_optional_str(item, "datum_hash", label),
    )


def _parse_mint(item: Any, label: str) -> MintAction:
    _require_mapping(item, label)
    return MintAction(
        action=_require_str(item, "action", f"{label} needs action"),
        asset_id=_require_str(item, "asset", f"{label} needs asset"),
        quantity=_require_int(item, "quantity", f"{label} needs an integer quantity"),
        policy_script_file_path=_require_str(
            item, "policy_script_file", f"{label} needs policy_script_file"
        ),
        redeemer=_optional_str(item, "redeemer", label),
        execution_units=_parse_execution_units(item, label),
    )


def _parse_withdrawal(item: Any, label: str) -> Withdrawal:
    _require_mapping(item, label)
    return Withdrawal(
        staking_address=_require_str(item, "staking_address", f"{label} needs staking_address"),
        reward=_require_int(item, "reward", f"{label} needs an integer reward"),
        script=_parse_optional_script(item, label),
        datum=_optional_str(item, "datum", label),
        redeemer=_optional_str(item, "redeemer", label),
        execution_units=_parse_execution_units(item, label),
    )


def _parse_certificate(item: Any, label: str) -> Certificate:
    _require_mapping(item, label)
    return Certificate(
        cert=_require_str(item, "cert", f"{label} needs cert"),
        script=_parse_optional_script(item, label),
        datum=_optional_str(item, "datum", label),
        redeemer=_optional_str(item, "redeemer", label),
        execution_units=_parse_execution_units(item, label),
    )


def _parse_bundle(raw: Any, label: str) -> AssetBundle:
    try:
        return AssetBundle({str(asset): quantity for asset, quantity in dict(raw).items()})
    except (AssetError, TypeError, ValueError) as exc:
        raise DescriptorError(f"{label}.assets: {exc}") from exc


def _require_mapping(value: Any, label: str) -> None:
    if not isinstance(value, dict):
        raise DescriptorError(f"{label} must be a mapping")


def _require_str(data: dict[str, Any], key: str, error: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise DescriptorError(error)
    return value


def _require_int(data: dict[str, Any], key: str, error: str) -> int:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise DescriptorError(error)
    return value


def _optional_int(data: dict[str, Any], key: str, label: str) -> Optional[int]:
    if data.get(key) is None:
        return None
    return _require_int(data, key, f"{label}.{key} must be an integer")


def _optional_str(data: dict[str, Any], key: str, label: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    # Datums and redeemers are JSON-ish literals; YAML may hand us numbers.
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    if not isinstance(value, str):
        raise DescriptorError(f"{label}.{key} must be a string")
    return value
