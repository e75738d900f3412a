from __future__ import annotations
from typing import Dict, Type, Callable, Union
from importlib import import_module

from chatwire.config import BackendSettings
from chatwire.core.errors import UnsupportedBackendError
from chatwire.core.models import BackendName

class BackendRegistry:
    _classes: Dict[BackendName, Type] = {}

    @classmethod
    def register(cls, name: Union[str, BackendName]) -> Callable[[Type], Type]:
        key = BackendName.parse(name)
        def deco(klass: Type) -> Type:
            klass.backend_name = key
            cls._classes[key] = klass
            return klass
        return deco

    @classmethod
    def get(cls, name: Union[str, BackendName]) -> Type:
        try:
            key = BackendName.parse(name)
        except ValueError:
            raise UnsupportedBackendError(f"No backend implemented for '{name}'") from None
        if key not in cls._classes:
            raise UnsupportedBackendError(f"No backend implemented for '{name}'")
        return cls._classes[key]

    @classmethod
    def resolve(cls, name: Union[str, BackendName], settings: BackendSettings, **kwargs):
        """Fresh adapter per call; nothing is cached."""
        return cls.get(name).create(settings, **kwargs)

    @classmethod
    def names(cls) -> list[str]:
        return sorted(k.value for k in cls._classes)

    @classmethod
    def ensure_imports(cls) -> None:
        """
        Import built-in adapters so their @register decorators run.
        Call once at bootstrap before get().
        """
        import_module("chatwire.backends.azureai")
        import_module("chatwire.backends.openai")
        import_module("chatwire.backends.ollama")
        import_module("chatwire.backends.echo")
