"""Encode cardano-cli transaction flags and decode its UTXO listings."""

from .assets import (
    ACTION_BURN,
    ACTION_MINT,
    ADA_COIN2TOKEN,
    EMPTY_BUNDLE,
    LOVELACE,
    AssetBundle,
    AssetError,
    lovelace_to_ada,
    merge,
)
from .client import CardanoCli, MinFeeRequest
from .encoder import TransactionEncoder
from .errors import CodecError, ParseError, ValidationError
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
    UtxoRecord,
    ValidityWindow,
    WalletInfo,
    Withdrawal,
)
from .responses import parse_min_fee, parse_tx_id
from .utxo import aggregate_balance, parse_utxo_table

__all__ = [
    "ACTION_BURN",
    "ACTION_MINT",
    "ADA_COIN2TOKEN",
    "EMPTY_BUNDLE",
    "LOVELACE",
    "AssetBundle",
    "AssetError",
    "lovelace_to_ada",
    "merge",
    "CardanoCli",
    "MinFeeRequest",
    "TransactionEncoder",
    "AuxScript",
    "Certificate",
    "CodecError",
    "ExecutionUnits",
    "Metadata",
    "MintAction",
    "ParseError",
    "RawTransaction",
    "ScriptFile",
    "TxIn",
    "TxOut",
    "UtxoRecord",
    "ValidationError",
    "ValidityWindow",
    "WalletInfo",
    "Withdrawal",
    "parse_min_fee",
    "parse_tx_id",
    "aggregate_balance",
    "parse_utxo_table",
]
