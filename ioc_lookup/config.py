"""Configuration snapshot: searcher states, scanner API keys, general settings.

Sources, lowest precedence first:

1. a JSON config file (``$IOC_LOOKUP_CONFIG`` or
   ``$XDG_CONFIG_HOME/ioc-lookup/config.json``)::

       {
         "searcher_states": {"Shodan": false},
         "api_keys": {"urlscan.io": "..."},
         "general": {"enable_idn": true},
         "timeout": 30
       }

2. environment variables (optionally from a ``.env`` file).

Settings are read fresh per operation and never written back.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Scanner name -> environment variable holding its key.
API_KEY_ENV: dict[str, str] = {
    "urlscan.io": "URLSCAN_API_KEY",
    "VirusTotal": "VIRUSTOTAL_API_KEY",
    "HybridAnalysis": "HYBRIDANALYSIS_API_KEY",
}

ENABLE_IDN_ENV = "IOC_LOOKUP_ENABLE_IDN"
CONFIG_PATH_ENV = "IOC_LOOKUP_CONFIG"

DEFAULT_TIMEOUT = 30


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class Settings:
    searcher_states: Mapping[str, bool] = field(default_factory=dict)
    api_keys: Mapping[str, str] = field(default_factory=dict)
    enable_idn: bool = False
    timeout: int = DEFAULT_TIMEOUT

    def api_key(self, scanner: str) -> Optional[str]:
        return self.api_keys.get(scanner) or None


def _truthy(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def load_env_files() -> Optional[Path]:
    """Load the first .env found (cwd, then home). Existing env vars win."""
    for env_path in [Path(".env"), Path.home() / ".env", Path.home() / ".ioc-lookup.env"]:
        if env_path.exists():
            load_dotenv(env_path)
            return env_path
    return None


def default_config_path(environ: Optional[Mapping[str, str]] = None) -> Path:
    env = os.environ if environ is None else environ
    explicit = env.get(CONFIG_PATH_ENV)
    if explicit:
        return Path(explicit).expanduser()
    base = env.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / "ioc-lookup" / "config.json"


def _read_file(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config root must be an object: {path}")
    return data


def _str_map(value: Any, key: str) -> dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{key}' must be an object")
    return {str(k): str(v) for k, v in value.items() if v is not None}


def _bool_map(value: Any, key: str) -> dict[str, bool]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{key}' must be an object")
    return {str(k): bool(v) for k, v in value.items()}


def settings_from_dict(data: Mapping[str, Any]) -> Settings:
    general = data.get("general") or {}
    if not isinstance(general, dict):
        raise ConfigError("'general' must be an object")

    timeout = data.get("timeout", DEFAULT_TIMEOUT)
    if not isinstance(timeout, int) or timeout <= 0:
        raise ConfigError("'timeout' must be a positive integer")

    return Settings(
        searcher_states=_bool_map(data.get("searcher_states"), "searcher_states"),
        api_keys=_str_map(data.get("api_keys"), "api_keys"),
        enable_idn=bool(general.get("enable_idn", False)),
        timeout=timeout,
    )


def load_settings(
    path: Optional[Path] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
    use_dotenv: bool = True,
) -> Settings:
    """Read a fresh Settings snapshot.

    A missing config file is not an error; a malformed one raises ConfigError.
    """
    if use_dotenv and environ is None:
        load_env_files()
    env = os.environ if environ is None else environ

    path = path or default_config_path(env)
    data: dict[str, Any] = {}
    if path.exists():
        logger.debug("Loading config from %s", path)
        data = _read_file(path)

    base = settings_from_dict(data)

    api_keys = dict(base.api_keys)
    for scanner, var in API_KEY_ENV.items():
        value = env.get(var, "").strip()
        if value:
            api_keys[scanner] = value

    enable_idn = base.enable_idn
    if env.get(ENABLE_IDN_ENV):
        enable_idn = _truthy(env[ENABLE_IDN_ENV])

    return Settings(
        searcher_states=dict(base.searcher_states),
        api_keys=api_keys,
        enable_idn=enable_idn,
        timeout=base.timeout,
    )
