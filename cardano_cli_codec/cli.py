"""Command-line interface for the cardano-cli codec.

The offline commands (``parse-utxo``, ``balance``, ``encode-tx`` and
``policy-script``) only read and write local files, which makes them handy
for checking a descriptor or a saved listing before anything touches a node.
The remaining commands shell out to cardano-cli through :class:`CardanoCli`.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Sequence, TextIO

from .assets import LOVELACE, lovelace_to_ada
from .client import CardanoCli, MinFeeRequest
from .config import ConfigurationError, load_cli_config
from .descriptor import DescriptorError, load_transaction
from .errors import CodecError
from .model import UtxoRecord, WalletInfo
from .policy import render_policy_script
from .runner import CommandError
from .storage import LocalFileStore
from .utxo import aggregate_balance, parse_utxo_table

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class CLIError(RuntimeError):
    """Raised when CLI arguments are invalid."""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="cardano-cli transaction codec")
    parser.add_argument("--config", default=None, help="Path to a YAML config file")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_utxo_parser = subparsers.add_parser(
        "parse-utxo", help="parse a saved `query utxo` listing"
    )
    parse_utxo_parser.add_argument(
        "listing", nargs="?", default="-", help="Listing file (default: stdin)"
    )
    parse_utxo_parser.add_argument("--json", dest="as_json", action="store_true", help="Emit JSON")

    balance_parser = subparsers.add_parser(
        "balance", help="sum every asset across a saved `query utxo` listing"
    )
    balance_parser.add_argument(
        "listing", nargs="?", default="-", help="Listing file (default: stdin)"
    )

    encode_parser = subparsers.add_parser(
        "encode-tx", help="print the build-raw command for a YAML descriptor"
    )
    encode_parser.add_argument("descriptor", help="Transaction descriptor YAML")
    encode_parser.add_argument(
        "--run",
        action="store_true",
        help="Execute the command with cardano-cli instead of only printing it",
    )

    wallet_parser = subparsers.add_parser(
        "wallet-info", help="query the node for an address' UTXOs and balance"
    )
    wallet_parser.add_argument("--address", required=True, help="Wallet address")
    wallet_parser.add_argument("--json", dest="as_json", action="store_true", help="Emit JSON")

    fee_parser = subparsers.add_parser("min-fee", help="calculate the minimum fee of a tx body")
    fee_parser.add_argument("--tx-body-file", required=True)
    fee_parser.add_argument("--protocol-params-file", required=True)
    fee_parser.add_argument("--tx-in-count", type=int, required=True)
    fee_parser.add_argument("--tx-out-count", type=int, required=True)
    fee_parser.add_argument("--witness-count", type=int, required=True)

    txid_parser = subparsers.add_parser("txid", help="print the id of a transaction file")
    txid_group = txid_parser.add_mutually_exclusive_group(required=True)
    txid_group.add_argument("--tx-file")
    txid_group.add_argument("--tx-body-file")

    policy_parser = subparsers.add_parser(
        "policy-script", help="render a time-locked single-signature policy script"
    )
    policy_parser.add_argument("--key-hash", required=True, help="Payment key hash")
    policy_parser.add_argument("--before-slot", type=int, required=True, help="Last valid slot")
    policy_parser.add_argument("--out-file", default=None, help="Write here instead of stdout")

    return parser


def _read_listing(source: str, stdin: TextIO) -> str:
    if source == "-":
        return stdin.read()
    try:
        with open(source, encoding="utf-8") as handle:
            return handle.read()
    except OSError as exc:
        raise CLIError(f"cannot read listing {source}: {exc}") from exc


def _print_utxos(utxos: Sequence[UtxoRecord]) -> None:
    if not utxos:
        print("No UTXOs found.")
        return
    print(f"Found {len(utxos)} UTXOs")
    for index, utxo in enumerate(utxos):
        assets = " + ".join(f"{qty} {asset}" for asset, qty in utxo.assets.items())
        datum = f" datum={utxo.datum_hash}" if utxo.datum_hash else ""
        print(f"{index:>3} | {utxo.reference} | {assets}{datum}")


def _print_balance(balance: dict[str, int]) -> None:
    for asset, quantity in balance.items():
        if asset == LOVELACE:
            print(f"{asset}: {quantity} ({lovelace_to_ada(quantity):.6f} ADA)")
            continue
        print(f"{asset}: {quantity}")


def _cli_from_args(args: argparse.Namespace) -> CardanoCli:
    config = load_cli_config(config_path=args.config)
    return CardanoCli.from_config(config)


def cmd_parse_utxo(args: argparse.Namespace) -> None:
    utxos = parse_utxo_table(_read_listing(args.listing, sys.stdin))
    if args.as_json:
        print(json.dumps([utxo.to_dict() for utxo in utxos], indent=2))
        return
    _print_utxos(utxos)


def cmd_balance(args: argparse.Namespace) -> None:
    utxos = parse_utxo_table(_read_listing(args.listing, sys.stdin))
    _print_balance(aggregate_balance(utxos).to_dict())


def cmd_encode_tx(args: argparse.Namespace) -> None:
    tx = load_transaction(args.descriptor)
    cli = _cli_from_args(args)
    if args.run:
        out_file = cli.build_raw_transaction(tx)
        print(f"Raw transaction written to {out_file}")
        return
    print(cli.build_raw_command(tx))


def cmd_wallet_info(args: argparse.Namespace) -> None:
    info: WalletInfo = _cli_from_args(args).query_wallet_info(args.address)
    if args.as_json:
        print(json.dumps(info.to_dict(), indent=2))
        return
    _print_utxos(info.utxos)
    _print_balance(info.balance.to_dict())


def cmd_min_fee(args: argparse.Namespace) -> None:
    request = MinFeeRequest(
        tx_body_file_path=args.tx_body_file,
        protocol_params_file_path=args.protocol_params_file,
        tx_in_count=args.tx_in_count,
        tx_out_count=args.tx_out_count,
        witness_count=args.witness_count,
    )
    print(_cli_from_args(args).calculate_min_fee(request))


def cmd_txid(args: argparse.Namespace) -> None:
    print(
        _cli_from_args(args).query_transaction_id(
            tx_file_path=args.tx_file, tx_body_file_path=args.tx_body_file
        )
    )


def cmd_policy_script(args: argparse.Namespace) -> None:
    rendered = render_policy_script(args.key_hash, args.before_slot)
    if args.out_file:
        LocalFileStore().write(args.out_file, rendered)
        print(f"Policy script written to {args.out_file}")
        return
    print(rendered)


COMMANDS = {
    "parse-utxo": cmd_parse_utxo,
    "balance": cmd_balance,
    "encode-tx": cmd_encode_tx,
    "wallet-info": cmd_wallet_info,
    "min-fee": cmd_min_fee,
    "txid": cmd_txid,
    "policy-script": cmd_policy_script,
}


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    try:
        handler = COMMANDS.get(args.command)
        if handler is None:  # pragma: no cover - argparse enforces choices
            raise CLIError(f"Unknown command: {args.command}")
        handler(args)
    except KeyboardInterrupt:  # pragma: no cover - interactive use
        logger.info("Interrupted by user")
    except (
        CLIError,
        CodecError,
        CommandError,
        ConfigurationError,
        DescriptorError,
        OSError,
    ) as exc:
        parser.exit(1, f"error: {exc}\n")


if __name__ == "__main__":
    main(sys.argv[1:])
