# src/chatwire/backends/ollama.py
from __future__ import annotations
from typing import Dict, List

from chatwire.backends.base import OpenAICompatibleBackend
from chatwire.backends.registry import BackendRegistry
from chatwire.config import BackendSettings

DEFAULT_URL = "http://localhost:11434"


@BackendRegistry.register("ollama")
class OllamaBackend(OpenAICompatibleBackend):
    """Local Ollama through its OpenAI-compatible endpoint. No token required."""
    requires_api_key = False

    @classmethod
    def create(cls, settings: BackendSettings, **kwargs) -> "OllamaBackend":
        if not settings.url:
            settings = settings.with_overrides(url=DEFAULT_URL)
        return cls(settings, **kwargs)

    def completion_url(self) -> str:
        return f"{self.settings.url}/v1/chat/completions"

    def auth_headers(self) -> Dict[str, str]:
        if self.settings.api_key:
            return {"Authorization": f"Bearer {self.settings.api_key}"}
        return {}

    async def list_models(self) -> List[str]:
        data = await self.transport.get_json(f"{self.settings.url}/api/tags", headers=self.auth_headers())
        return [str(m["name"]) for m in (data or {}).get("models", []) if isinstance(m, dict) and m.get("name")]
