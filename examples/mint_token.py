"""Mint a native token end to end with a time-locked single-signature policy.

The flow mirrors what an operator does by hand: generate keys, lock a policy
a few thousand slots into the future, draft the transaction with a zero fee,
ask the node for the minimum fee, rebuild with the real fee, then sign and
submit. Everything is written under ``WORK_DIR``.

Run with a synced node reachable through ``CARDANO_NODE_SOCKET_PATH`` and the
network configured via ``~/.cardano-codec.yaml`` or ``CARDANO_TESTNET_MAGIC``.
"""

from __future__ import annotations

import logging
from pathlib import Path

from cardano_cli_codec import (
    ACTION_MINT,
    LOVELACE,
    AssetBundle,
    CardanoCli,
    MintAction,
    RawTransaction,
    TxOut,
)
from cardano_cli_codec.client import MinFeeRequest
from cardano_cli_codec.config import load_cli_config
from cardano_cli_codec.policy import DEFAULT_POLICY_LOCK_SLOTS, render_policy_script
from cardano_cli_codec.storage import LocalFileStore

logger = logging.getLogger(__name__)

WORK_DIR = Path("mint-work")
TOKEN_NAME = "6d79746f6b656e"  # "mytoken" in hex
TOKEN_QUANTITY = 1000


def _draft(
    wallet_address: str,
    cli: CardanoCli,
    policy_id: str,
    fee: int,
) -> RawTransaction:
    info = cli.query_wallet_info(wallet_address)
    asset_id = f"{policy_id}.{TOKEN_NAME}"
    balance = info.balance.merge({asset_id: TOKEN_QUANTITY})
    change = balance.with_quantity(LOVELACE, balance.base_quantity() - fee)
    return RawTransaction(
        tx_ins=tuple(utxo.to_tx_in() for utxo in info.utxos),
        tx_outs=(TxOut(wallet_address, change),),
        protocol_params_file_path="protocol.json",
        out_file_path="tx.raw",
        fee=fee,
        mints=(MintAction(ACTION_MINT, asset_id, TOKEN_QUANTITY, "policy.script"),),
    )


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    WORK_DIR.mkdir(parents=True, exist_ok=True)
    config = load_cli_config(overrides={"work_dir": str(WORK_DIR)})
    store = LocalFileStore(config.work_dir)
    cli = CardanoCli.from_config(config, store=store)

    keys = cli.generate_address_keys("payment.vkey", "payment.skey")
    address = cli.build_payment_address(keys.vkey_file_path, "payment.addr")
    cli.generate_protocol_parameters("protocol.json")

    key_hash = cli.calculate_key_hash(keys.vkey_file_path)
    lock_slot = cli.query_tip().slot + DEFAULT_POLICY_LOCK_SLOTS
    store.write("policy.script", render_policy_script(key_hash, lock_slot))
    policy_id = cli.generate_policy_id("policy.script", "policy.id")
    logger.info("Policy %s locks at slot %d", policy_id, lock_slot)

    draft = _draft(address.address, cli, policy_id, fee=0)
    cli.build_raw_transaction(draft)
    fee = cli.calculate_min_fee(
        MinFeeRequest(
            tx_body_file_path=draft.out_file_path,
            protocol_params_file_path=draft.protocol_params_file_path,
            tx_in_count=len(draft.tx_ins),
            tx_out_count=len(draft.tx_outs),
            witness_count=1,
        )
    )

    final = _draft(address.address, cli, policy_id, fee=fee)
    cli.build_raw_transaction(final)
    signed = cli.sign_transaction(final.out_file_path, [keys.skey_file_path], "tx.signed")
    logger.info("Submitted %s", cli.submit_transaction(signed))


if __name__ == "__main__":
    main()
