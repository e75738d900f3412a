# src/chatwire/backends/azureai.py
from __future__ import annotations
from typing import Dict, List

from chatwire.backends.base import OpenAICompatibleBackend
from chatwire.backends.registry import BackendRegistry

DEFAULT_MODELS = ["gpt-35-turbo"]


@BackendRegistry.register("azureai")
class AzureAIBackend(OpenAICompatibleBackend):
    """
    Azure OpenAI deployments. The deployment, not the model field, picks the
    model server-side, so list_models does not hit the network.
    """

    def completion_url(self) -> str:
        s = self.settings
        return (
            f"{s.url}/openai/deployments/{s.deployment_id}/chat/completions"
            f"?api-version={s.api_version}"
        )

    def auth_headers(self) -> Dict[str, str]:
        return {"api-key": self.settings.api_key}

    async def list_models(self) -> List[str]:
        if self.settings.model:
            return [self.settings.model]
        return list(DEFAULT_MODELS)
