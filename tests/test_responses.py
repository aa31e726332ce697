import pytest

from cardano_cli_codec.errors import ParseError, ValidationError
from cardano_cli_codec.policy import build_policy_script, parse_policy_script, render_policy_script
from cardano_cli_codec.responses import parse_min_fee, parse_query_tip, parse_tx_id


def test_min_fee_ignores_unit_suffix() -> None:
    assert parse_min_fee("174345 Lovelace\n") == 174345
    assert parse_min_fee("  180000\n") == 180000


@pytest.mark.parametrize("output", ["", "\n", "lovelace 12"])
def test_min_fee_rejects_unexpected_output(output: str) -> None:
    with pytest.raises(ParseError):
        parse_min_fee(output)


def test_tx_id_is_trimmed() -> None:
    txid = "a784adbd1878e3d58dae91aee6f76fef2a9940e7b336580b78d096c6e7723265"
    assert parse_tx_id(f"{txid}\n") == txid


def test_tx_id_rejects_empty_output() -> None:
    with pytest.raises(ParseError):
        parse_tx_id("   ")


def test_query_tip_maps_fields() -> None:
    tip = parse_query_tip(
        '{"era": "Alonzo", "syncProgress": "100.00", "hash": "d8f8", '
        '"epoch": 212, "slot": 61352931, "block": 3645785}'
    )
    assert tip.era == "Alonzo"
    assert tip.slot == 61352931
    assert tip.block == 3645785


def test_query_tip_rejects_missing_fields() -> None:
    with pytest.raises(ParseError):
        parse_query_tip('{"era": "Alonzo"}')


def test_policy_script_round_trip() -> None:
    rendered = render_policy_script("abcd", 61362931)
    parsed = parse_policy_script(rendered)
    assert parsed.slot == 61362931
    assert parsed.key_hash == "abcd"


def test_policy_script_shape() -> None:
    assert build_policy_script("ff", 5) == {
        "type": "all",
        "scripts": [{"type": "before", "slot": 5}, {"type": "sig", "keyHash": "ff"}],
    }


def test_policy_script_requires_key_hash() -> None:
    with pytest.raises(ValidationError):
        build_policy_script("", 5)
