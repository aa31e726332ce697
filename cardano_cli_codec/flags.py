"""Flag-grammar encoders for ``cardano-cli transaction build-raw``.

Every encoder turns one transaction component into a :class:`FlagBuilder`
fragment: an ordered list of shell-ready tokens plus the inline files that
must exist on disk before the command runs. Encoders never touch the
filesystem themselves; :class:`~cardano_cli_codec.encoder.TransactionEncoder`
persists the collected writes once every fragment encoded successfully.

Examples of the produced grammar::

    --tx-in 5291...dee7e#1 --tx-in-redeemer-value '42'
    --tx-out addr_test1...+4800000+"10 policy.nft1+32 policy.nft2"
    --mint="5 p1.a+-2 p2.b" --mint-script-file p1.script --mint-script-file p2.script
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from .assets import LOVELACE
from .model import (
    AuxScript,
    Certificate,
    ExecutionUnits,
    Metadata,
    MintAction,
    ScriptFile,
    TxIn,
    TxOut,
    ValidityWindow,
    Withdrawal,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileWrite:
    """Content that must be persisted to ``path`` before the command runs."""

    path: str
    content: str


class FlagBuilder:
    """Accumulates tokens and pending file writes for one component."""

    def __init__(self) -> None:
        self.tokens: List[str] = []
        self.writes: List[FileWrite] = []

    def add(self, *tokens: str) -> "FlagBuilder":
        self.tokens.extend(tokens)
        return self

    def add_script(self, flag: str, script: ScriptFile) -> "FlagBuilder":
        self.writes.append(FileWrite(script.out_file_path, script.content))
        return self.add(flag, script.out_file_path)

    def add_quoted(self, flag: str, value: Optional[str]) -> "FlagBuilder":
        # Values are passed verbatim inside single quotes, as the tool expects.
        if value:
            self.add(flag, f"'{value}'")
        return self

    def add_execution_units(self, flag: str, units: Optional[ExecutionUnits]) -> "FlagBuilder":
        if units is not None:
            self.add(flag, units.render())
        return self

    def extend(self, other: "FlagBuilder") -> "FlagBuilder":
        self.tokens.extend(other.tokens)
        self.writes.extend(other.writes)
        return self

    def render(self) -> str:
        return " ".join(self.tokens)

    def __bool__(self) -> bool:
        return bool(self.tokens)


def quote_assets(pairs: Iterable[tuple[str, int]]) -> str:
    """Return ``"<q> <a>+<q> <a>"`` or an empty string when ``pairs`` is empty."""

    joined = "+".join(f"{quantity} {asset}" for asset, quantity in pairs)
    return f'"{joined}"' if joined else ""


def encode_tx_ins(tx_ins: Sequence[TxIn], *, collateral: bool = False) -> FlagBuilder:
    builder = FlagBuilder()
    in_flag = "--tx-in-collateral" if collateral else "--tx-in"
    for tx_in in tx_ins:
        builder.add(in_flag, tx_in.reference)
        if tx_in.script is not None:
            builder.add_script("--tx-in-script-file", tx_in.script)
        builder.add_quoted("--tx-in-datum-value", tx_in.datum)
        builder.add_quoted("--tx-in-redeemer-value", tx_in.redeemer)
        builder.add_execution_units("--tx-in-execution-units", tx_in.execution_units)
    return builder


def encode_tx_out_value(tx_out: TxOut, base_asset: str = LOVELACE) -> str:
    """Return the ``<address>+<coin>[+"<assets>"]`` token for one output."""

    value = f"{tx_out.address}+{tx_out.assets.base_quantity(base_asset)}"
    quoted = quote_assets(tx_out.assets.non_base_items(base_asset))
    if quoted:
        value += f"+{quoted}"
    return value


def encode_tx_outs(tx_outs: Sequence[TxOut], base_asset: str = LOVELACE) -> FlagBuilder:
    builder = FlagBuilder()
    for tx_out in tx_outs:
        builder.add("--tx-out", encode_tx_out_value(tx_out, base_asset))
        if tx_out.datum_hash:
            builder.add("--tx-out-datum-hash", tx_out.datum_hash)
    return builder


def encode_mint_terms(actions: Sequence[MintAction]) -> str:
    """Return the merged ``[-]<q> <asset>`` list joined by ``+``."""

    return "+".join(f"{action.signed_quantity} {action.asset_id}" for action in actions)


def encode_mints(actions: Sequence[MintAction]) -> FlagBuilder:
    builder = FlagBuilder()
    if not actions:
        return builder
    builder.add(f'--mint="{encode_mint_terms(actions)}"')
    # Script, redeemer and budget stay per action even though quantities merge.
    for action in actions:
        builder.add("--mint-script-file", action.policy_script_file_path)
        builder.add_quoted("--mint-redeemer-value", action.redeemer)
        builder.add_execution_units("--mint-execution-units", action.execution_units)
    return builder


def encode_withdrawals(withdrawals: Sequence[Withdrawal]) -> FlagBuilder:
    builder = FlagBuilder()
    for withdrawal in withdrawals:
        builder.add("--withdrawal", f"{withdrawal.staking_address}+{withdrawal.reward}")
        if withdrawal.script is not None:
            builder.add_script("--withdrawal-script-file", withdrawal.script)
        builder.add_quoted("--withdrawal-script-datum-value", withdrawal.datum)
        builder.add_quoted("--withdrawal-script-redeemer-value", withdrawal.redeemer)
        builder.add_execution_units("--withdrawal-execution-units", withdrawal.execution_units)
    return builder


def encode_certificates(certificates: Sequence[Certificate]) -> FlagBuilder:
    builder = FlagBuilder()
    for cert in certificates:
        builder.add("--certificate", cert.cert)
        if cert.script is not None:
            builder.add_script("--certificate-script-file", cert.script)
        builder.add_quoted("--certificate-script-datum-value", cert.datum)
        builder.add_quoted("--certificate-script-redeemer-value", cert.redeemer)
        builder.add_execution_units("--certificate-execution-units", cert.execution_units)
    return builder


def encode_metadata(metadata: Optional[Metadata]) -> FlagBuilder:
    builder = FlagBuilder()
    if metadata is None:
        return builder
    builder.writes.append(FileWrite(metadata.out_file_path, metadata.rendered_content()))
    return builder.add("--metadata-json-file", metadata.out_file_path)


def encode_aux_scripts(aux_scripts: Sequence[AuxScript]) -> FlagBuilder:
    builder = FlagBuilder()
    for aux in aux_scripts:
        builder.add_script("--auxiliary-script-file", aux.script)
    return builder


def encode_validity(window: ValidityWindow) -> FlagBuilder:
    builder = FlagBuilder()
    if window.script_invalid:
        builder.add("--script-invalid")
    if window.invalid_before is not None:
        builder.add("--invalid-before", str(window.invalid_before))
    if window.invalid_hereafter is not None:
        builder.add("--invalid-hereafter", str(window.invalid_hereafter))
    return builder


def encode_era(era: Optional[str]) -> FlagBuilder:
    """Accept ``--alonzo-era`` or the bare ``alonzo`` and emit the flag form."""

    builder = FlagBuilder()
    if not era:
        return builder
    flag = era if era.startswith("--") else f"--{era.lower()}-era"
    return builder.add(flag)
