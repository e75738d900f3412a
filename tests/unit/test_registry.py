# tests/unit/test_registry.py

from __future__ import annotations
import sys
from pathlib import Path
import pytest

# Make "src" importable
sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from chatwire.backends.registry import BackendRegistry  # type: ignore
from chatwire.config import BackendSettings
from chatwire.core.errors import ProviderClientError, UnsupportedBackendError
from chatwire.core.models import BackendName


def test_registry_knows_all_builtins():
    BackendRegistry.ensure_imports()
    assert BackendRegistry.names() == ["azureai", "echo", "ollama", "openai"]


def test_registry_case_insensitive_and_enum_lookup():
    BackendRegistry.ensure_imports()
    assert BackendRegistry.get("AzureAI") is BackendRegistry.get(BackendName.AZUREAI)
    assert BackendRegistry.get("azureai").backend_name is BackendName.AZUREAI


def test_resolve_builds_fresh_instances():
    BackendRegistry.ensure_imports()
    s = BackendSettings(url="https://a", api_key="k")
    a = BackendRegistry.resolve("azureai", s)
    b = BackendRegistry.resolve("azureai", s)
    assert a is not b
    assert a.name() is BackendName.AZUREAI
    assert a.settings is s


@pytest.mark.parametrize("name", ["langchain", "does-not-exist", ""])
def test_registry_unknown_raises(name):
    with pytest.raises(UnsupportedBackendError):
        BackendRegistry.get(name)
    # non-retryable by classification
    assert issubclass(UnsupportedBackendError, ProviderClientError)
