from pathlib import Path

import pytest

from cardano_cli_codec.config import CliConfig, ConfigurationError, load_cli_config


def test_load_cli_config_prefers_environment_over_yaml(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        """
        cli:
          cli_path: /file/cardano-cli
          network: --mainnet
          era: alonzo
          work_dir: /file/work
        """
    )

    env_map = {
        "CARDANO_CLI_PATH": "/env/cardano-cli",
        "CARDANO_TESTNET_MAGIC": "1097911063",
        "CARDANO_CODEC_ERA": "babbage",
    }

    config = load_cli_config(config_path=config_path, env=env_map)

    assert isinstance(config, CliConfig)
    assert config.cli_path == "/env/cardano-cli"
    assert config.network == "--testnet-magic 1097911063"
    assert config.era == "babbage"
    assert config.work_dir == Path("/file/work")


def test_load_cli_config_reads_yaml_when_env_missing(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / ".cardano-codec.yaml"
    monkeypatch.setattr("cardano_cli_codec.config.DEFAULT_CONFIG_PATH", config_path)

    config_path.write_text(
        """
        cli:
          cli_path: /yaml/cardano-cli
          testnet_magic: 2
        """
    )

    config = load_cli_config(env={})

    assert config.cli_path == "/yaml/cardano-cli"
    assert config.network == "--testnet-magic 2"
    assert config.era is None


def test_defaults_apply_without_any_source(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("cardano_cli_codec.config.DEFAULT_CONFIG_PATH", tmp_path / "missing.yaml")
    config = load_cli_config(env={})
    assert config.cli_path == "cardano-cli"
    assert config.network == "--mainnet"


def test_overrides_win(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("cardano_cli_codec.config.DEFAULT_CONFIG_PATH", tmp_path / "missing.yaml")
    config = load_cli_config(env={"CARDANO_NETWORK": "--mainnet"}, overrides={"testnet_magic": 42})
    assert config.network == "--testnet-magic 42"


def test_explicit_missing_config_is_an_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError):
        load_cli_config(config_path=tmp_path / "nope.yaml", env={})


def test_invalid_testnet_magic_is_an_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("cardano_cli_codec.config.DEFAULT_CONFIG_PATH", tmp_path / "missing.yaml")
    with pytest.raises(ConfigurationError):
        load_cli_config(env={"CARDANO_TESTNET_MAGIC": "preview"})
