from __future__ import annotations

import pytest

from cardano_cli_codec.assets import LOVELACE, AssetBundle
from cardano_cli_codec.flags import encode_tx_out_value
from cardano_cli_codec.errors import ParseError
from cardano_cli_codec.model import TxOut, UtxoRecord
from cardano_cli_codec.utxo import aggregate_balance, parse_utxo_row, parse_utxo_table, wallet_info_from_listing

HEADER = (
    "                           TxHash                                 TxIx        Amount\n"
    "--------------------------------------------------------------------------------------\n"
)
HASH_A = "5291500d8b0b859625956de43370f2d2ceb46ba3189bca962ba954f6dc8dee7e"
HASH_B = "a784adbd1878e3d58dae91aee6f76fef2a9940e7b336580b78d096c6e7723265"
NFT = "53806701cc6fa0bcbfbfd80962a4fb9978c50db79c516b3ba08e5470.756e646566696e6564"

LISTING = HEADER + (
    f"{HASH_A}     0        3414523 lovelace + TxOutDatumNone\n"
    f"{HASH_A}     1        1400000 lovelace + 2 {NFT} + TxOutDatumNone\n"
    f'{HASH_B}     0        8413071 lovelace + TxOutDatumHash ScriptDataInAlonzoEra "9e1199a988ba72ffd6e9c269cadb3b53b5f360ff99f112d9b2ee30c4d74ad88b"\n'
)


def test_headers_only_listing_is_empty() -> None:
    assert parse_utxo_table(HEADER) == []


def test_blank_output_is_empty() -> None:
    assert parse_utxo_table("") == []
    assert parse_utxo_table("   \n") == []


def test_parses_rows_in_order() -> None:
    records = parse_utxo_table(LISTING)
    assert [record.reference for record in records] == [f"{HASH_A}#0", f"{HASH_A}#1", f"{HASH_B}#0"]


def test_row_with_native_asset() -> None:
    record = parse_utxo_table(LISTING)[1]
    assert record == UtxoRecord(
        tx_hash=HASH_A,
        tx_index=1,
        assets=AssetBundle({LOVELACE: 1400000, NFT: 2}),
        datum_hash=None,
    )


def test_datum_hash_is_captured_without_quotes() -> None:
    record = parse_utxo_table(LISTING)[2]
    assert record.datum_hash == "9e1199a988ba72ffd6e9c269cadb3b53b5f360ff99f112d9b2ee30c4d74ad88b"
    assert record.assets == {LOVELACE: 8413071}


def test_repeated_asset_in_one_row_is_summed() -> None:
    record = parse_utxo_row(f"{HASH_A} 0 10 lovelace + 3 p.x + 4 p.x + TxOutDatumNone")
    assert record.assets == {LOVELACE: 10, "p.x": 7}


def test_blank_lines_between_rows_are_ignored() -> None:
    listing = HEADER + f"{HASH_A} 0 5 lovelace + TxOutDatumNone\n\n{HASH_B} 2 6 lovelace + TxOutDatumNone\n"
    assert len(parse_utxo_table(listing)) == 2


@pytest.mark.parametrize(
    "row",
    [
        f"{HASH_A} zero 5 lovelace + TxOutDatumNone",
        f"{HASH_A} 0 five lovelace + TxOutDatumNone",
        f"{HASH_A} 0 5 + TxOutDatumNone",
        f"{HASH_A} 0",
        f"{HASH_A} 0 5 lovelace + TxOutDatumHash",
    ],
)
def test_malformed_rows_raise(row: str) -> None:
    with pytest.raises(ParseError):
        parse_utxo_table(HEADER + row + "\n")


def test_single_line_listing_raises() -> None:
    with pytest.raises(ParseError):
        parse_utxo_table("TxHash TxIx Amount")


def test_balance_aggregation_sums_assets() -> None:
    utxos = [
        UtxoRecord(HASH_A, 0, AssetBundle({LOVELACE: 90})),
        UtxoRecord(HASH_B, 0, AssetBundle({LOVELACE: 30, "nft1": 1})),
    ]
    assert aggregate_balance(utxos) == {LOVELACE: 120, "nft1": 1}


def test_empty_balance_reports_zero_lovelace() -> None:
    assert aggregate_balance([]) == {LOVELACE: 0}


def test_wallet_info_from_listing() -> None:
    info = wallet_info_from_listing(LISTING)
    assert len(info.utxos) == 3
    assert info.balance == {LOVELACE: 3414523 + 1400000 + 8413071, NFT: 2}


def test_output_encoding_round_trips_through_listing() -> None:
    bundle = AssetBundle({LOVELACE: 1400000, NFT: 2, "p.other": 7})
    value = encode_tx_out_value(TxOut("addr_test1xyz", bundle))
    # addr+1400000+"2 nft+7 p.other" -> listing amount column
    _, coin, quoted = value.split("+", 2)
    amounts = " + ".join([f"{coin} lovelace", *quoted.strip('"').split("+")])
    listing = HEADER + f"{HASH_A}     0        {amounts} + TxOutDatumNone\n"
    assert parse_utxo_table(listing)[0].assets == bundle
