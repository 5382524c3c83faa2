"""Settings resolution for the hello world client."""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore[no-redef]

import tomli_w
from solders.keypair import Keypair

from .constants import (
    ALLOWED_COMMITMENT,
    CLUSTER_URLS,
    DEFAULT_COMMITMENT,
    DEFAULT_CONFIRM_TIMEOUT,
    DEFAULT_RPC_URL,
    FEE_ALLOWANCE_LAMPORTS,
    SETTINGS_FILENAME,
)
from .errors import ConfigurationError

DEFAULT_KEYPAIR_PATH = Path.home() / ".config" / "solana" / "id.json"

# Keys of the Solana CLI config that map onto Settings.
_SOLANA_CLI_KEYS = ("json_rpc_url", "keypair_path", "commitment")


@dataclass
class Settings:
    rpc_url: str = DEFAULT_RPC_URL
    payer: str = str(DEFAULT_KEYPAIR_PATH)
    commitment: str = DEFAULT_COMMITMENT
    confirm_timeout: float = DEFAULT_CONFIRM_TIMEOUT
    fee_allowance: int = FEE_ALLOWANCE_LAMPORTS


def load_settings(path: str | Path) -> Dict[str, Any]:
    """Read the ``[cluster]`` and ``[workflow]`` tables of a settings file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")
    try:
        data = tomllib.loads(path.read_text())
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"Invalid settings file {path}: {exc}") from exc
    merged: Dict[str, Any] = {}
    for table in ("cluster", "workflow"):
        section = data.get(table)
        if isinstance(section, dict):
            merged.update(section)
    return merged


def save_settings(path: str | Path, settings: Settings) -> None:
    values = asdict(settings)
    data = {
        "cluster": {key: values[key] for key in ("rpc_url", "payer", "commitment")},
        "workflow": {key: values[key] for key in ("confirm_timeout", "fee_allowance")},
    }
    Path(path).write_bytes(tomli_w.dumps(data).encode())


def solana_cli_config_path(env: Optional[Mapping[str, str]] = None) -> Path:
    env = os.environ if env is None else env
    override = env.get("SOLANA_CONFIG") or env.get("SOLANA_CONFIG_FILE")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "solana" / "cli" / "config.yml"


def load_solana_cli_config(env: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Return the RPC URL, keypair path and commitment set by ``solana config set``.

    Only flat ``key: value`` lines are read. Empty values and keys the client
    does not use are dropped, and ``keypair_path`` comes back with ``~``
    expanded. A missing or unreadable file yields an empty mapping.
    """
    try:
        text = solana_cli_config_path(env).read_text()
    except OSError:
        return {}
    cfg: Dict[str, str] = {}
    for raw in text.splitlines():
        key, sep, value = raw.partition(":")
        key = key.strip()
        if not sep or key not in _SOLANA_CLI_KEYS:
            continue
        value = value.strip().strip("\"'")
        if value:
            cfg[key] = value
    if "keypair_path" in cfg:
        cfg["keypair_path"] = str(Path(cfg["keypair_path"]).expanduser())
    return cfg


def _resolve_path(base: Optional[Path], raw: str) -> str:
    expanded = Path(raw).expanduser()
    if expanded.is_absolute() or base is None:
        return str(expanded)
    return str((base.parent / expanded).resolve())


def resolve_settings(
    overrides: Optional[Mapping[str, Any]] = None,
    config_path: str | Path | None = None,
    env: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Merge flags, environment, settings file and Solana CLI config.

    ``overrides`` holds explicit values (``None`` means unset). A missing
    ``config_path`` falls back to ``helloworld.toml`` in the working directory
    when that file exists.
    """
    env = os.environ if env is None else env
    overrides = {k: v for k, v in (overrides or {}).items() if v is not None}

    file_path: Optional[Path] = Path(config_path) if config_path else None
    if file_path is None and Path(SETTINGS_FILENAME).exists():
        file_path = Path(SETTINGS_FILENAME)
    file_values = load_settings(file_path) if file_path is not None else {}
    solana_cfg = load_solana_cli_config(env)

    cluster = overrides.pop("cluster", None)
    if cluster is not None and "rpc_url" not in overrides:
        if cluster not in CLUSTER_URLS:
            raise ConfigurationError(f"Unknown cluster '{cluster}' (expected {'|'.join(CLUSTER_URLS)})")
        overrides["rpc_url"] = CLUSTER_URLS[cluster]

    settings = Settings()
    rpc_url = (
        overrides.get("rpc_url")
        or env.get("HELLOWORLD_RPC_URL")
        or file_values.get("rpc_url")
        or solana_cfg.get("json_rpc_url")
    )
    if rpc_url:
        settings.rpc_url = str(rpc_url)

    payer = overrides.get("payer") or env.get("HELLOWORLD_PAYER_KEYPAIR")
    if payer:
        settings.payer = str(Path(payer).expanduser())
    elif isinstance(file_values.get("payer"), str) and file_values["payer"]:
        settings.payer = _resolve_path(file_path, file_values["payer"])
    elif solana_cfg.get("keypair_path"):
        settings.payer = solana_cfg["keypair_path"]

    commitment = (
        overrides.get("commitment")
        or env.get("HELLOWORLD_COMMITMENT")
        or file_values.get("commitment")
        or solana_cfg.get("commitment")
    )
    if commitment:
        settings.commitment = str(commitment).strip().lower()
    if settings.commitment not in ALLOWED_COMMITMENT:
        raise ConfigurationError(f"commitment must be one of {sorted(ALLOWED_COMMITMENT)}")

    timeout = overrides.get("confirm_timeout", file_values.get("confirm_timeout"))
    if timeout is not None:
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ConfigurationError("confirm_timeout must be a positive number of seconds")
        settings.confirm_timeout = float(timeout)

    allowance = overrides.get("fee_allowance", file_values.get("fee_allowance"))
    if allowance is not None:
        if isinstance(allowance, bool) or not isinstance(allowance, int) or allowance < 0:
            raise ConfigurationError("fee_allowance must be a non-negative integer")
        settings.fee_allowance = allowance

    return settings


def load_keypair(path: str | Path) -> Keypair:
    path = Path(path).expanduser()
    try:
        raw = json.loads(path.read_text())
    except FileNotFoundError as exc:
        raise ConfigurationError(f"Payer keypair not found: {path}") from exc
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Unable to read payer keypair {path}: {exc}") from exc
    if not isinstance(raw, list) or len(raw) != 64:
        raise ConfigurationError(f"Payer keypair {path} must be a JSON array of 64 bytes")
    try:
        return Keypair.from_bytes(bytes(raw))
    except ValueError as exc:
        raise ConfigurationError(f"Invalid payer keypair {path}: {exc}") from exc
