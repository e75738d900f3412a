from __future__ import annotations
import asyncio
from typing import AsyncIterator, List, Optional

from chatwire.backends.registry import BackendRegistry
from chatwire.config import BackendSettings
from chatwire.core.context import append_message, load_context
from chatwire.core.events import EventChannel
from chatwire.core.models import BackendName, BackendPrompt, StreamChunk
from chatwire.streaming.accumulator import accumulate

_LOREM_50 = (
    "Lorem ipsum dolor sit amet consectetur adipiscing elit sed do eiusmod tempor "
    "incididunt ut labore et dolore magna aliqua Curabitur non nulla sit amet nisl "
    "tempor convallis quis ac lectus Phasellus viverra nulla ut metus varius laoreet "
    "Quisque rutrum Aenean imperdiet Etiam ultricies nisi vel augue Curabitur ullamcorper ultricies nisi"
).split()

@BackendRegistry.register("echo")
class EchoBackend:
    """
    Offline stub that streams a fixed 50-word lorem ipsum, one word per
    fragment, through the same accumulator as the network backends.
    """

    def __init__(self, settings: Optional[BackendSettings] = None, token_delay: float = 0.0,
                 words: Optional[List[str]] = None):
        self.settings = settings or BackendSettings(model="echo-lorem")
        self.token_delay = float(token_delay)
        self.words = list(words) if words is not None else list(_LOREM_50)

    @classmethod
    def create(cls, settings: BackendSettings, **kwargs) -> "EchoBackend":
        return cls(settings, **kwargs)

    @property
    def model(self) -> str:
        return self.settings.model or "echo-lorem"

    def name(self) -> BackendName:
        return BackendName.ECHO

    async def health_check(self) -> None:
        return None

    async def list_models(self) -> List[str]:
        return [self.model]

    async def _chunks(self) -> AsyncIterator[StreamChunk]:
        last_idx = len(self.words) - 1
        for i, w in enumerate(self.words):
            yield StreamChunk(text=w + ("" if i == last_idx else " "))
            if self.token_delay > 0:
                await asyncio.sleep(self.token_delay)

    async def get_completion(self, prompt: BackendPrompt, channel: EventChannel) -> None:
        messages = load_context(prompt.backend_context)
        append_message(messages, "user", prompt.text)
        await accumulate(self._chunks(), messages, channel)
