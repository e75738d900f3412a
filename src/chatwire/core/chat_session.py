from __future__ import annotations
import asyncio
from typing import AsyncIterator

from .errors import DeliveryError
from .events import EventChannel
from .models import BackendPrompt
from .ports import Backend

class ChatSession:
    """
    Caller side of the backend contract: owns the serialized context between
    turns and replaces it only when a turn ends with its terminal response.
    """

    def __init__(self, backend: Backend, context: str = ""):
        self.backend = backend
        self.context = context

    def reset(self) -> None:
        self.context = ""

    async def run_turn_stream(self, user_text: str) -> AsyncIterator[str]:
        prompt = BackendPrompt(text=user_text, backend_context=self.context)
        channel = EventChannel()
        task = asyncio.create_task(self.backend.get_completion(prompt, channel))

        try:
            while True:
                recv = asyncio.ensure_future(channel.recv())
                await asyncio.wait({recv, task}, return_when=asyncio.FIRST_COMPLETED)
                if not recv.done():
                    # Producer finished first: drain what is queued, then surface its outcome
                    recv.cancel()
                    for ev in channel.drain():
                        if ev.done:
                            self.context = ev.context or ""
                        else:
                            yield ev.text
                    await task
                    return
                ev = recv.result()
                if ev.done:
                    self.context = ev.context or ""
                    await task
                    return
                yield ev.text
        finally:
            # Closing the channel is how an abandoned turn is cancelled
            channel.close()
            if not task.done():
                try:
                    await task
                except DeliveryError:
                    pass

    async def run_turn(self, user_text: str) -> str:
        parts = [piece async for piece in self.run_turn_stream(user_text)]
        return "".join(parts)
