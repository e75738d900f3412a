# src/chatwire/backends/openai.py
from __future__ import annotations
from typing import Dict, List

from chatwire.backends.base import OpenAICompatibleBackend
from chatwire.backends.registry import BackendRegistry
from chatwire.config import BackendSettings

DEFAULT_URL = "https://api.openai.com"


@BackendRegistry.register("openai")
class OpenAIBackend(OpenAICompatibleBackend):

    @classmethod
    def create(cls, settings: BackendSettings, **kwargs) -> "OpenAIBackend":
        if not settings.url:
            settings = settings.with_overrides(url=DEFAULT_URL)
        return cls(settings, **kwargs)

    def completion_url(self) -> str:
        return f"{self.settings.url}/v1/chat/completions"

    def auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.settings.api_key}"}

    async def list_models(self) -> List[str]:
        data = await self.transport.get_json(f"{self.settings.url}/v1/models", headers=self.auth_headers())
        ids = [str(m.get("id")) for m in (data or {}).get("data", []) if isinstance(m, dict) and m.get("id")]
        return sorted(i for i in ids if "gpt" in i)
