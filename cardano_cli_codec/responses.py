"""Scalar extraction from single-line cardano-cli responses."""

from __future__ import annotations

import json
from typing import Any

from .errors import ParseError
from .model import QueryTip


def parse_single_line(output: str, *, what: str = "value") -> str:
    """Return the trimmed output, failing when it is empty."""

    value = (output or "").strip()
    if not value:
        raise ParseError(f"cardano-cli returned no {what}")
    return value


def parse_min_fee(output: str) -> int:
    """Parse ``calculate-min-fee`` output such as ``"174345 Lovelace"``."""

    first = parse_single_line(output, what="min fee").split()[0]
    try:
        return int(first)
    except ValueError as exc:
        raise ParseError(f"Min fee is not an integer: {first!r}") from exc


def parse_tx_id(output: str) -> str:
    return parse_single_line(output, what="transaction id")


def parse_query_tip(output: str) -> QueryTip:
    """Parse the JSON document printed by ``query tip``."""

    try:
        data: Any = json.loads(output)
    except json.JSONDecodeError as exc:
        raise ParseError(f"query tip returned malformed JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ParseError("query tip must return a JSON object")
    try:
        return QueryTip(
            era=str(data["era"]),
            sync_progress=str(data.get("syncProgress", "")),
            hash=str(data["hash"]),
            epoch=int(data["epoch"]),
            slot=int(data["slot"]),
            block=int(data["block"]),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ParseError(f"query tip response is missing fields: {exc}") from exc
