from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from cardano_cli_codec import cli

HASH = "5291500d8b0b859625956de43370f2d2ceb46ba3189bca962ba954f6dc8dee7e"
LISTING = (
    "    TxHash    TxIx    Amount\n"
    "----------------------------\n"
    f"{HASH}     0        90 lovelace + TxOutDatumNone\n"
    f"{HASH}     1        30 lovelace + 1 nft1 + TxOutDatumNone\n"
)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("cardano_cli_codec.config.DEFAULT_CONFIG_PATH", tmp_path / "none.yaml")
    for name in ("CLI_PATH", "NETWORK", "TESTNET_MAGIC", "ERA", "WORK_DIR"):
        monkeypatch.delenv(f"CARDANO_{name}", raising=False)
        monkeypatch.delenv(f"CARDANO_CODEC_{name}", raising=False)


def _write_descriptor(path: Path, extra: str = "") -> Path:
    path.write_text(
        f"""
fee: 170000
out_file: tx.raw
protocol_params_file: protocol.json
tx_ins:
  - tx_hash: {HASH}
    tx_index: 0
tx_outs:
  - address: addr_test1dest
    assets: {{lovelace: 1000000}}
{extra}"""
    )
    return path


def test_parse_utxo_json(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    listing = tmp_path / "utxo.txt"
    listing.write_text(LISTING)

    cli.main(["parse-utxo", str(listing), "--json"])

    rows = json.loads(capsys.readouterr().out)
    assert [row["tx_index"] for row in rows] == [0, 1]
    assert rows[1]["assets"] == {"lovelace": 30, "nft1": 1}


def test_balance_reads_stdin(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO(LISTING))

    cli.main(["balance"])

    assert capsys.readouterr().out.splitlines() == ["lovelace: 120 (0.000120 ADA)", "nft1: 1"]



def test_encode_tx_prints_command(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    descriptor = _write_descriptor(tmp_path / "tx.yaml")

    cli.main(["encode-tx", str(descriptor)])

    assert capsys.readouterr().out.strip() == (
        f"cardano-cli transaction build-raw --tx-in {HASH}#0 --tx-out addr_test1dest+1000000"
        " --fee 170000 --out-file tx.raw --protocol-params-file protocol.json"
    )


def test_encode_tx_applies_configured_era(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv("CARDANO_ERA", "babbage")
    descriptor = _write_descriptor(tmp_path / "tx.yaml")

    cli.main(["encode-tx", str(descriptor)])

    out = capsys.readouterr().out.strip()
    assert out.startswith(f"cardano-cli transaction build-raw --babbage-era --tx-in {HASH}#0")


def test_encode_tx_reports_failed_file_write(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv("CARDANO_WORK_DIR", str(tmp_path))
    (tmp_path / "sub").write_text("a regular file where a directory should be")
    descriptor = _write_descriptor(
        tmp_path / "tx.yaml",
        "metadata:\n  out_file: sub/meta.json\n  content: {a: 1}\n",
    )

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["encode-tx", str(descriptor)])

    assert excinfo.value.code == 1
    captured = capsys.readouterr()
    assert captured.err.startswith("error:")
    assert captured.out == ""


def test_validation_failure_exits_with_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    descriptor = tmp_path / "tx.yaml"
    descriptor.write_text(
        f"""
fee: 0
out_file: tx.raw
protocol_params_file: protocol.json
tx_ins:
  - tx_hash: {HASH}
    tx_index: 0
tx_outs:
  - address: addr_test1dest
    assets: {{policy.token: 1}}
"""
    )

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["encode-tx", str(descriptor)])

    assert excinfo.value.code == 1
    assert "Must send some lovelace" in capsys.readouterr().err


def test_malformed_listing_exits_with_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    listing = tmp_path / "utxo.txt"
    listing.write_text("header\n----\nabc notanindex 5 lovelace\n")

    with pytest.raises(SystemExit):
        cli.main(["parse-utxo", str(listing)])

    assert "error:" in capsys.readouterr().err


def test_policy_script_writes_file(tmp_path: Path) -> None:
    out_file = tmp_path / "policy" / "policy.script"

    cli.main(["policy-script", "--key-hash", "abcd", "--before-slot", "100", "--out-file", str(out_file)])

    assert json.loads(out_file.read_text())["scripts"][0] == {"type": "before", "slot": 100}


def test_policy_script_reports_blocked_out_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tmp_path / "policy").write_text("")
    out_file = tmp_path / "policy" / "policy.script"

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["policy-script", "--key-hash", "abcd", "--before-slot", "100", "--out-file", str(out_file)])

    assert excinfo.value.code == 1
    assert "error:" in capsys.readouterr().err
