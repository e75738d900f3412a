# src/chatwire/config.py

from __future__ import annotations
import os
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

from .secrets.sources import SecretsResolver

ENV_PREFIX = "CHATWIRE"


@dataclass(frozen=True)
class BackendSettings:
    """
    Everything an adapter needs, resolved once at process start and passed
    into the adapter constructor. Empty strings mean "not configured";
    health_check() decides which ones are required.
    """
    model: str = ""
    url: str = ""
    api_key: str = ""
    api_version: str = ""
    deployment_id: str = ""
    timeout: Optional[float] = None
    on_malformed: str = "raise"

    def with_overrides(self, **changes: Any) -> "BackendSettings":
        return replace(self, **changes)


def _env(provider: str, key: str) -> Optional[str]:
    val = os.getenv(f"{ENV_PREFIX}_{provider.upper()}_{key}")
    return val.strip() if val else None


def settings_from_config(cfg: Dict[str, Any], secrets: Optional[SecretsResolver] = None) -> BackendSettings:
    """
    Build BackendSettings for cfg['backend']['name'] from:
      providers.<name>.* in YAML  <  CHATWIRE_<NAME>_* env vars
    The credential comes from the secrets resolver only.
    """
    provider = cfg["backend"]["name"]
    provider_cfg = (cfg.get("providers") or {}).get(provider) or {}

    def pick(key: str) -> str:
        env_val = _env(provider, key.upper())
        if env_val:
            return env_val
        return str(provider_cfg.get(key) or "")

    api_key = (secrets.secret(provider, "api_key") if secrets else None) or ""
    timeout = provider_cfg.get("timeout")

    return BackendSettings(
        model=str(cfg["backend"]["model"]),
        url=pick("url").rstrip("/"),
        api_key=api_key,
        api_version=pick("api_version"),
        deployment_id=pick("deployment_id"),
        timeout=float(timeout) if timeout is not None else None,
        on_malformed=str(provider_cfg.get("on_malformed") or "raise").lower(),
    )
