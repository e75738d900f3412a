# src/chatwire/secrets/sources.py

from __future__ import annotations
from typing import Protocol, Optional, Dict, Iterable, List, Union
import os, getpass, logging

try:
    import keyring as _keyring
except Exception:
    _keyring = None  # optional

logger = logging.getLogger(__name__)

class SecretSource(Protocol):
    def get(self, service: str) -> Optional[str]: ...

class EnvSource:
    def get(self, service: str) -> Optional[str]:
        # 1) mapping value used as the exact env var name
        val = os.getenv(service)
        if val:
            return val.strip()
        # 2) derived names, most specific first
        key = service.upper()
        for name in (f"CHATWIRE_{key}_API_KEY", f"{key}_API_KEY", key):
            val = os.getenv(name)
            if val:
                return val.strip()
        return None

class SystemKeyringSource:
    """Looks under service=<service> for a handful of conventional account names."""

    def get(self, service: str) -> Optional[str]:
        if _keyring is None:
            return None
        if hasattr(_keyring, "get_credential"):
            try:
                cred = _keyring.get_credential(service, None)
                if cred and getattr(cred, "password", None):
                    return cred.password.strip()
            except Exception as e:
                # No usable backend (e.g. NoKeyringError) counts as a miss
                logger.debug("keyring lookup for %s failed: %s", service, e)
        for account in ("api_key", "default", service, getpass.getuser()):
            try:
                val = _keyring.get_password(service, account)
            except Exception as e:
                logger.debug("keyring lookup for %s/%s failed: %s", service, account, e)
                continue
            if val:
                return val.strip()
        return None

_ALLOWED_METHODS = {"env", "keyring"}

def _normalise_methods(method: Union[str, Iterable[str]]) -> List[str]:
    methods = [method] if isinstance(method, str) else list(method)
    norm: List[str] = []
    for m in methods:
        key = str(m).strip().lower()
        if key not in _ALLOWED_METHODS:
            raise ValueError(f"Unknown secrets method '{m}'. Allowed: {sorted(_ALLOWED_METHODS)}")
        if key not in norm:
            norm.append(key)
    return norm

def build_secret_sources(method: Union[str, Iterable[str]]) -> List[SecretSource]:
    sources: List[SecretSource] = []
    for name in _normalise_methods(method):
        if name == "env":
            sources.append(EnvSource())
        elif name == "keyring":
            sources.append(SystemKeyringSource())
    return sources

class SecretsResolver:
    """
    Resolve backend credentials using one or more methods in order.
    mapping: per-backend map of names -> service/env-key
      e.g. { "azureai": { "api_key": "AZURE_OPENAI_KEY" } }
    Unmapped backends fall back to the backend name as the service.
    """
    def __init__(self, method: Union[str, Iterable[str]] = "env", mapping: Dict[str, Dict[str, str]] | None = None):
        self._sources = build_secret_sources(method)
        self._map = mapping or {}

    def secret(self, provider: str, name: str = "api_key") -> Optional[str]:
        service = (self._map.get(provider) or {}).get(name, provider)
        for src in self._sources:
            val = src.get(service)
            if val:
                return val
        return None
