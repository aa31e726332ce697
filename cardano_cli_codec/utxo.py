"""Parse ``cardano-cli query utxo`` listings and aggregate balances.

A listing looks like::

                               TxHash                                 TxIx        Amount
    --------------------------------------------------------------------------------------
    5291...dee7e     0        3414523 lovelace + TxOutDatumNone
    5291...dee7e     1        1400000 lovelace + 2 5380...7470.756e646566696e6564 + TxOutDatumNone
    a784...23265     0        8413071 lovelace + TxOutDatumHash ScriptDataInAlonzoEra "9e1199a9..."

The first two lines are always headers. Each data row carries the tx hash,
the output index, and ``+``-joined amount segments ending with a datum marker.
"""

from __future__ import annotations

import json
import logging
from typing import Iterable, List, Optional, Tuple

from .assets import LOVELACE, AssetBundle
from .errors import ParseError
from .model import UtxoRecord, WalletInfo

logger = logging.getLogger(__name__)

DATUM_NONE_MARKER = "TxOutDatumNone"
DATUM_HASH_MARKER = "TxOutDatumHash"
HEADER_LINES = 2


def _parse_int(raw: str, *, what: str, line_no: int) -> int:
    try:
        value = int(raw)
    except ValueError as exc:
        raise ParseError(f"Line {line_no}: {what} is not an integer: {raw!r}") from exc
    if value < 0:
        raise ParseError(f"Line {line_no}: {what} must not be negative: {value}")
    return value


def _parse_datum_segment(segment: str, line_no: int) -> Optional[str]:
    if DATUM_NONE_MARKER in segment:
        return None
    # TxOutDatumHash <era> "<hash>"
    parts = segment.split()
    if len(parts) < 3:
        raise ParseError(f"Line {line_no}: datum hash marker without a hash: {segment!r}")
    raw_hash = parts[2]
    if raw_hash.startswith('"'):
        try:
            return json.loads(raw_hash)
        except json.JSONDecodeError as exc:
            raise ParseError(f"Line {line_no}: malformed datum hash {raw_hash!r}") from exc
    return raw_hash


def _parse_asset_segment(segment: str, line_no: int) -> Tuple[str, int]:
    quantity_raw, _, asset = segment.strip().partition(" ")
    asset = asset.strip()
    if not asset:
        raise ParseError(f"Line {line_no}: amount segment without an asset id: {segment!r}")
    return asset, _parse_int(quantity_raw, what=f"quantity of {asset}", line_no=line_no)


def parse_utxo_row(row: str, line_no: int = 0) -> UtxoRecord:
    """Parse a single data row of the listing."""

    columns = row.split()
    if len(columns) < 3:
        raise ParseError(f"Line {line_no}: expected hash, index and amount columns: {row!r}")
    tx_hash = columns[0]
    tx_index = _parse_int(columns[1], what="tx index", line_no=line_no)

    datum_hash: Optional[str] = None
    assets = AssetBundle()
    for segment in " ".join(columns[2:]).split("+"):
        if DATUM_NONE_MARKER in segment or DATUM_HASH_MARKER in segment:
            datum_hash = _parse_datum_segment(segment, line_no)
            continue
        asset, quantity = _parse_asset_segment(segment, line_no)
        if asset in assets:
            # Should not happen, but summing keeps the row's value intact.
            logger.warning("Asset %s repeated in UTXO %s#%s; summing", asset, tx_hash, tx_index)
        assets = assets.merge({asset: quantity})

    return UtxoRecord(tx_hash=tx_hash, tx_index=tx_index, assets=assets, datum_hash=datum_hash)


def parse_utxo_table(text: str) -> List[UtxoRecord]:
    """Return one :class:`UtxoRecord` per data row, preserving row order.

    Blank output or a listing with only the two header lines yields an empty
    list. Any other malformed shape raises :class:`ParseError`.
    """

    if not text or not text.strip():
        return []
    lines = text.strip().splitlines()
    if len(lines) < HEADER_LINES:
        raise ParseError(f"UTXO listing must start with {HEADER_LINES} header lines, got {len(lines)}")

    records: List[UtxoRecord] = []
    for line_no, line in enumerate(lines[HEADER_LINES:], start=HEADER_LINES + 1):
        if not line.strip():
            continue
        records.append(parse_utxo_row(line, line_no))
    logger.debug("Parsed %d UTXO rows", len(records))
    return records


def aggregate_balance(utxos: Iterable[UtxoRecord], base_asset: str = LOVELACE) -> AssetBundle:
    """Sum all UTXO bundles; the base coin is always present, zero when empty."""

    balance = AssetBundle({base_asset: 0})
    for utxo in utxos:
        balance = balance.merge(utxo.assets)
    return balance


def wallet_info_from_listing(text: str, base_asset: str = LOVELACE) -> WalletInfo:
    utxos = parse_utxo_table(text)
    return WalletInfo(balance=aggregate_balance(utxos, base_asset), utxos=tuple(utxos))
