# src/chatwire/config_loader.py

from __future__ import annotations
from pathlib import Path
from typing import Any, Dict
import yaml

from .core.models import BackendName
from .streaming.decoder import ON_MALFORMED


class ConfigError(ValueError):
    pass


def _require(d: Dict[str, Any], dotted: str, typ: type) -> Any:
    cur: Any = d
    for k in dotted.split("."):
        if not isinstance(cur, dict) or k not in cur:
            raise ConfigError(f"Missing config key: {dotted}")
        cur = cur[k]
    if typ is bool and not isinstance(cur, bool):
        raise ConfigError(f"'{dotted}' must be a boolean")
    if typ is str and not isinstance(cur, str):
        raise ConfigError(f"'{dotted}' must be a string")
    return cur


def load_config(path: Path) -> Dict[str, Any]:
    if not path or not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    raw = yaml.safe_load(path.read_text())
    if not isinstance(raw, dict) or not raw:
        raise ConfigError(f"Config is empty or invalid YAML: {path}")

    # Validate required keys (no defaults here)
    _require(raw, "backend.name", str)
    _require(raw, "backend.model", str)
    _require(raw, "runtime.stream", bool)

    # Normalise enumerations
    name = str(raw["backend"]["name"]).strip().lower()
    known = sorted(b.value for b in BackendName)
    if name not in known:
        raise ConfigError(f"Unknown backend.name '{name}' (expected one of {known}).")
    raw["backend"]["name"] = name

    providers = raw.get("providers") or {}
    if not isinstance(providers, dict):
        raise ConfigError("'providers' must be a mapping of backend name -> settings")
    for pname, pcfg in providers.items():
        if pcfg is None:
            continue
        if not isinstance(pcfg, dict):
            raise ConfigError(f"'providers.{pname}' must be a mapping")
        policy = str(pcfg.get("on_malformed", "raise")).lower()
        if policy not in ON_MALFORMED:
            raise ConfigError(f"'providers.{pname}.on_malformed' must be one of {list(ON_MALFORMED)}")

    # Credentials are never read from YAML; they come from the secrets resolver
    return raw
