from __future__ import annotations
from pathlib import Path
from typing import Any, Dict
from dotenv import load_dotenv

from .config import settings_from_config
from .config_loader import load_config
from .backends.registry import BackendRegistry
from .secrets.sources import SecretsResolver


def build_backend(cfg: Dict[str, Any], **backend_kwargs):
    """Resolve the configured backend with settings read once from cfg/env/secrets."""
    BackendRegistry.ensure_imports()  # make sure built-ins register

    secrets_cfg = cfg.get("secrets") or {}
    resolver = SecretsResolver(
        method=secrets_cfg.get("method", "env"),
        mapping=secrets_cfg.get("mapping", {}),
    )
    settings = settings_from_config(cfg, resolver)

    name = cfg["backend"]["name"]
    provider_cfg = (cfg.get("providers") or {}).get(name) or {}
    if name == "echo" and "token_delay" in provider_cfg:
        backend_kwargs.setdefault("token_delay", float(provider_cfg["token_delay"]))

    return BackendRegistry.resolve(name, settings, **backend_kwargs)


def build_app(config_path: Path) -> Dict[str, Any]:
    """
    Composition root: load .env and YAML, build the backend.
    Returns: dict with cfg and backend. health_check() is left to the caller.
    """
    load_dotenv()
    cfg = load_config(config_path)
    backend = build_backend(cfg)
    return {
        "cfg": cfg,
        "backend": backend,
    }
