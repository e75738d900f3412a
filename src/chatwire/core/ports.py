from __future__ import annotations
from typing import List, Protocol

from .events import EventChannel
from .models import BackendName, BackendPrompt

class Backend(Protocol):
    """
    Interface the chat client uses to talk to any completion backend.
    """

    def name(self) -> BackendName:
        ...

    async def health_check(self) -> None:
        """
        Validate required settings (no network). Raises ConfigurationError.
        """
        ...

    async def list_models(self) -> List[str]:
        ...

    async def get_completion(self, prompt: BackendPrompt, channel: EventChannel) -> None:
        """
        Streaming call. Sends one BackendResponse per fragment, then exactly one
        done=True response carrying the updated context. On error nothing
        terminal is sent and the exception propagates.
        """
        ...
