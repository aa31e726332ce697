"""Compose the full ``transaction build-raw`` argument list."""

from __future__ import annotations

import logging
from typing import Dict, List, Sequence

from .assets import LOVELACE
from .flags import (
    FileWrite,
    FlagBuilder,
    encode_aux_scripts,
    encode_certificates,
    encode_era,
    encode_metadata,
    encode_mints,
    encode_tx_ins,
    encode_tx_outs,
    encode_validity,
    encode_withdrawals,
)
from .errors import ValidationError
from .model import RawTransaction
from .storage import FileStore

logger = logging.getLogger(__name__)


class TransactionEncoder:
    """Turn a :class:`RawTransaction` into cardano-cli flag tokens.

    The encoder validates the whole descriptor first, then builds each
    component in the order ``build-raw`` accepts, and only then persists
    inline scripts and metadata through ``store``. If validation or any
    write fails the caller never receives a command line.
    """

    def __init__(self, store: FileStore | None = None, base_asset: str = LOVELACE) -> None:
        self.store = store
        self.base_asset = base_asset

    def build_fragments(self, tx: RawTransaction) -> List[FlagBuilder]:
        """Validate ``tx`` and return its fragments in grammar order."""

        tx.validate(self.base_asset)
        fee_and_files = FlagBuilder().add(
            "--fee",
            str(tx.fee),
            "--out-file",
            tx.out_file_path,
            "--protocol-params-file",
            tx.protocol_params_file_path,
        )
        return [
            encode_era(tx.era),
            encode_tx_ins(tx.tx_ins),
            encode_tx_outs(tx.tx_outs, self.base_asset),
            encode_tx_ins(tx.tx_in_collaterals, collateral=True),
            encode_certificates(tx.certificates),
            encode_withdrawals(tx.withdrawals),
            encode_mints(tx.mints),
            encode_aux_scripts(tx.aux_scripts),
            encode_metadata(tx.metadata),
            encode_validity(tx.validity),
            fee_and_files,
        ]

    def encode_tokens(self, tx: RawTransaction) -> List[str]:
        combined = FlagBuilder()
        for fragment in self.build_fragments(tx):
            combined.extend(fragment)
        writes = collect_writes(combined.writes)
        if writes:
            if self.store is None:
                raise ValidationError(
                    f"{len(writes)} inline file(s) need persisting but no file store is configured"
                )
            for write in writes:
                self.store.write(write.path, write.content)
        logger.debug("Encoded build-raw with %d tokens and %d file writes", len(combined.tokens), len(writes))
        return combined.tokens

    def encode(self, tx: RawTransaction) -> str:
        """Return the single-space joined argument string for ``tx``."""

        return " ".join(self.encode_tokens(tx))


def collect_writes(writes: Sequence[FileWrite]) -> List[FileWrite]:
    """Deduplicate writes by path, rejecting conflicting content for one path."""

    by_path: Dict[str, FileWrite] = {}
    for write in writes:
        existing = by_path.get(write.path)
        if existing is None:
            by_path[write.path] = write
        elif existing.content != write.content:
            raise ValidationError(f"Conflicting content for inline file {write.path}")
    return list(by_path.values())
