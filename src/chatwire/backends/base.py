# src/chatwire/backends/base.py
from __future__ import annotations
import logging
from typing import Dict, List, Optional

from chatwire.config import BackendSettings
from chatwire.core.context import append_message, load_context
from chatwire.core.errors import ConfigurationError
from chatwire.core.events import EventChannel
from chatwire.core.models import BackendName, BackendPrompt, CompletionRequest, MessageRequest
from chatwire.streaming.accumulator import accumulate
from chatwire.streaming.decoder import iter_chunks
from chatwire.streaming.framer import iter_lines
from chatwire.transport.http import HttpTransport

logger = logging.getLogger(__name__)


class OpenAICompatibleBackend:
    """
    Shared streaming completion for providers speaking the chat-completions
    wire format. Subclasses supply the URL, auth headers and model list.
    """
    backend_name: BackendName
    requires_api_key = True

    def __init__(self, settings: BackendSettings, *, transport: Optional[HttpTransport] = None):
        self.settings = settings
        self.transport = transport or HttpTransport(timeout=settings.timeout)

    @classmethod
    def create(cls, settings: BackendSettings, **kwargs) -> "OpenAICompatibleBackend":
        return cls(settings, **kwargs)

    @property
    def model(self) -> str:
        return self.settings.model

    def name(self) -> BackendName:
        return self.backend_name

    async def health_check(self) -> None:
        label = self.backend_name.value
        if not self.settings.url:
            raise ConfigurationError(f"{label} URL is not defined")
        if self.requires_api_key and not self.settings.api_key:
            raise ConfigurationError(f"{label} token is not defined")

    async def list_models(self) -> List[str]:
        raise NotImplementedError

    # ----- provider specifics -----

    def completion_url(self) -> str:
        raise NotImplementedError

    def auth_headers(self) -> Dict[str, str]:
        raise NotImplementedError

    # ----- shared flow -----

    def build_request(self, messages) -> CompletionRequest:
        return CompletionRequest(
            model=self.settings.model,
            messages=[MessageRequest(**m) for m in messages],
            stream=True,
        )

    async def get_completion(self, prompt: BackendPrompt, channel: EventChannel) -> None:
        messages = load_context(prompt.backend_context)
        append_message(messages, "user", prompt.text)

        req = self.build_request(messages)
        headers = {"Content-Type": "application/json", **self.auth_headers()}
        url = self.completion_url()
        logger.debug("POST %s (model=%s, messages=%d)", url, req.model, len(req.messages))

        async with self.transport.stream_post(url, headers, req.model_dump()) as body:
            lines = iter_lines(body)
            chunks = iter_chunks(lines, on_malformed=self.settings.on_malformed)
            await accumulate(chunks, messages, channel)
