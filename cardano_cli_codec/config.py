"""Shared configuration loader for the cardano-cli codec."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml


class ConfigurationError(RuntimeError):
    """Raised when configuration is invalid."""


DEFAULT_CONFIG_PATH = Path.home() / ".cardano-codec.yaml"
DEFAULT_CLI_PATH = "cardano-cli"
DEFAULT_NETWORK = "--mainnet"
ENV_PREFIXES = ("CARDANO_", "CARDANO_CODEC_")


@dataclass
class CliConfig:
    """Where cardano-cli lives and which network/era it talks to."""

    cli_path: str = DEFAULT_CLI_PATH
    network: str = DEFAULT_NETWORK
    era: str | None = None
    work_dir: Path = field(default_factory=lambda: Path("."))


def _load_config_file(path: Path, *, required: bool) -> dict[str, Any]:
    if not path.exists():
        if required:
            raise ConfigurationError(f"Config file not found: {path}")
        return {}

    try:
        loaded = yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as exc:  # pragma: no cover - delegated to PyYAML
        raise ConfigurationError(f"Invalid YAML in config file {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise ConfigurationError(f"Expected {path} to contain a YAML object with a 'cli' section")
    return loaded


def _env_value(env_map: Mapping[str, str], name: str) -> str | None:
    for prefix in ENV_PREFIXES:
        value = env_map.get(f"{prefix}{name}")
        if value:
            return value
    return None


def _first_value(*values: Any, default: Any = None) -> Any:
    for value in values:
        if value is not None:
            return value
    return default


def network_from_magic(raw: Any, *, source: str) -> str | None:
    """Turn a testnet magic number into the ``--testnet-magic N`` argument."""

    if raw is None:
        return None
    try:
        magic = int(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid testnet magic in {source}: {raw}") from exc
    return f"--testnet-magic {magic}"


def load_cli_config(
    *,
    config_path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> CliConfig:
    """Load cardano-cli settings from overrides, environment and optional YAML.

    Precedence is overrides, then ``CARDANO_*`` (or ``CARDANO_CODEC_*``)
    environment variables, then the ``cli`` section of the YAML file, then
    built-in defaults. A testnet magic always wins over a literal network
    string from the same source.
    """

    env_map = os.environ if env is None else env
    explicit_path = config_path is not None
    path = Path(config_path).expanduser() if config_path is not None else DEFAULT_CONFIG_PATH

    file_config = _load_config_file(path, required=explicit_path)
    cli_section = file_config.get("cli", {})
    if not isinstance(cli_section, dict):
        raise ConfigurationError(f"Expected 'cli' to be a mapping in {path}")

    override_map = dict(overrides or {})

    resolved_network = _first_value(
        network_from_magic(override_map.get("testnet_magic"), source="overrides"),
        override_map.get("network"),
        network_from_magic(_env_value(env_map, "TESTNET_MAGIC"), source="environment"),
        _env_value(env_map, "NETWORK"),
        network_from_magic(cli_section.get("testnet_magic"), source=f"{path} cli.testnet_magic"),
        cli_section.get("network"),
        DEFAULT_NETWORK,
    )
    resolved_cli_path = _first_value(
        override_map.get("cli_path"),
        _env_value(env_map, "CLI_PATH"),
        cli_section.get("cli_path"),
        DEFAULT_CLI_PATH,
    )
    resolved_era = _first_value(
        override_map.get("era"), _env_value(env_map, "ERA"), cli_section.get("era")
    )
    resolved_work_dir = _first_value(
        override_map.get("work_dir"),
        _env_value(env_map, "WORK_DIR"),
        cli_section.get("work_dir"),
        ".",
    )

    if not isinstance(resolved_cli_path, str) or not resolved_cli_path.strip():
        raise ConfigurationError("cli_path must be a non-empty string")
    if not isinstance(resolved_network, str) or not resolved_network.startswith("--"):
        raise ConfigurationError(
            f"network must be a cardano-cli flag such as --mainnet, got {resolved_network!r}"
        )

    return CliConfig(
        cli_path=resolved_cli_path,
        network=resolved_network,
        era=resolved_era,
        work_dir=Path(str(resolved_work_dir)).expanduser(),
    )
