"""Thin facade over the ``cardano-cli`` executable.

Each helper maps directly onto one cardano-cli subcommand: the fixed commands
(key generation, policy id, tip, protocol parameters) are forwarded as-is,
while ``build-raw`` goes through :class:`TransactionEncoder` and the UTXO and
min-fee responses go through the parsers in this package. No ledger rules are
checked here; the node remains the source of truth.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Sequence

from .assets import LOVELACE
from .config import CliConfig, load_cli_config
from .encoder import TransactionEncoder
from .errors import ValidationError
from .model import (
    KeyPair,
    PaymentAddress,
    QueryTip,
    RawTransaction,
    UtxoRecord,
    WalletInfo,
)
from .responses import parse_min_fee, parse_query_tip, parse_single_line, parse_tx_id
from .runner import CommandRunner, SubprocessRunner
from .storage import FileStore, LocalFileStore
from .utxo import aggregate_balance, parse_utxo_table

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MinFeeRequest:
    tx_body_file_path: str
    protocol_params_file_path: str
    tx_in_count: int
    tx_out_count: int
    witness_count: int


class CardanoCli:
    """Run cardano-cli subcommands and decode their responses."""

    def __init__(
        self,
        cli_path: str = "cardano-cli",
        network: str = "--mainnet",
        *,
        runner: CommandRunner | None = None,
        store: FileStore | None = None,
        era: str | None = None,
        base_asset: str = LOVELACE,
    ) -> None:
        self.cli_path = cli_path
        self.network = network
        self.era = era
        self.base_asset = base_asset
        self.runner = runner or SubprocessRunner()
        self.store = store or LocalFileStore()
        self.encoder = TransactionEncoder(self.store, base_asset=base_asset)

    @classmethod
    def from_config(cls, config: CliConfig | None = None, **kwargs) -> "CardanoCli":
        """Instantiate from :func:`load_cli_config` (environment or YAML)."""

        config = config or load_cli_config()
        kwargs.setdefault("store", LocalFileStore(config.work_dir))
        kwargs.setdefault("runner", SubprocessRunner(cwd=config.work_dir))
        return cls(config.cli_path, config.network, era=config.era, **kwargs)

    def _run(self, *parts: str) -> str:
        command = " ".join(part for part in (self.cli_path, *parts) if part)
        return self.runner.run(command).stdout

    # Keys and addresses ---------------------------------------------------

    def generate_address_keys(self, vkey_out_file_path: str, skey_out_file_path: str) -> KeyPair:
        self._run(
            "address key-gen",
            f"--verification-key-file {vkey_out_file_path}",
            f"--signing-key-file {skey_out_file_path}",
        )
        return KeyPair(vkey_file_path=vkey_out_file_path, skey_file_path=skey_out_file_path)

    def build_payment_address(
        self, payment_vkey_file_path: str, address_out_file_path: str
    ) -> PaymentAddress:
        self._run(
            "address build",
            self.network,
            f"--payment-verification-key-file {payment_vkey_file_path}",
            f"--out-file {address_out_file_path}",
        )
        address = parse_single_line(self.store.read(address_out_file_path), what="payment address")
        return PaymentAddress(address=address, address_file_path=address_out_file_path)

    def calculate_key_hash(self, payment_vkey_file_path: str) -> str:
        output = self._run(
            "address key-hash", f"--payment-verification-key-file {payment_vkey_file_path}"
        )
        return parse_single_line(output, what="key hash")

    # Policies and chain state ---------------------------------------------

    def generate_policy_id(self, policy_script_file_path: str, policy_id_out_file_path: str) -> str:
        output = self._run("transaction policyid", f"--script-file {policy_script_file_path}")
        policy_id = parse_single_line(output, what="policy id")
        self.store.write(policy_id_out_file_path, policy_id)
        return policy_id

    def generate_protocol_parameters(self, protocol_out_file_path: str) -> str:
        self._run(
            "query protocol-parameters",
            self.network,
            "--cardano-mode",
            f"--out-file {protocol_out_file_path}",
        )
        return protocol_out_file_path

    def query_tip(self) -> QueryTip:
        return parse_query_tip(self._run("query tip", self.network, "--cardano-mode"))

    def query_utxo(self, wallet_address: str) -> list[UtxoRecord]:
        output = self._run(
            "query utxo", self.network, f"--address {wallet_address}", "--cardano-mode"
        )
        return parse_utxo_table(output)

    def query_wallet_info(self, wallet_address: str) -> WalletInfo:
        utxos = self.query_utxo(wallet_address)
        return WalletInfo(balance=aggregate_balance(utxos, self.base_asset), utxos=tuple(utxos))

    # Transactions -----------------------------------------------------------

    def build_raw_command(self, tx: RawTransaction) -> str:
        """Validate, persist inline files, and return the full build-raw command."""

        if tx.era is None and self.era is not None:
            tx = replace(tx, era=self.era)
        return " ".join([self.cli_path, "transaction build-raw", self.encoder.encode(tx)])

    def build_raw_transaction(self, tx: RawTransaction) -> str:
        command = self.build_raw_command(tx)
        self.runner.run(command)
        return tx.out_file_path

    def calculate_min_fee(self, request: MinFeeRequest) -> int:
        output = self._run(
            "transaction calculate-min-fee",
            self.network,
            f"--tx-body-file {request.tx_body_file_path}",
            f"--tx-in-count {request.tx_in_count}",
            f"--tx-out-count {request.tx_out_count}",
            f"--witness-count {request.witness_count}",
            f"--protocol-params-file {request.protocol_params_file_path}",
        )
        return parse_min_fee(output)

    def sign_transaction(
        self,
        tx_body_file_path: str,
        skey_file_paths: Sequence[str],
        signed_out_file_path: str,
    ) -> str:
        if not skey_file_paths:
            raise ValidationError("At least one signing key file is required")
        signing = " ".join(f"--signing-key-file {path}" for path in skey_file_paths)
        self._run(
            "transaction sign",
            self.network,
            f"--tx-body-file {tx_body_file_path}",
            signing,
            f"--out-file {signed_out_file_path}",
        )
        return signed_out_file_path

    def submit_transaction(self, signed_tx_file_path: str) -> str:
        """Submit a signed transaction and return its id."""

        self._run("transaction submit", self.network, f"--tx-file {signed_tx_file_path}")
        txid = self.query_transaction_id(tx_file_path=signed_tx_file_path)
        logger.info("Submitted transaction %s", txid)
        return txid

    def query_transaction_id(
        self, *, tx_file_path: str | None = None, tx_body_file_path: str | None = None
    ) -> str:
        if tx_file_path:
            tx_option = f"--tx-file {tx_file_path}"
        elif tx_body_file_path:
            tx_option = f"--tx-body-file {tx_body_file_path}"
        else:
            raise ValidationError("Must provide one of: tx_file_path or tx_body_file_path")
        return parse_tx_id(self._run("transaction txid", tx_option))
