from __future__ import annotations
import asyncio
from typing import AsyncIterator, List, Optional

from .errors import DeliveryError
from .models import BackendResponse


class EventChannel:
    """
    Unbounded single-producer channel carrying BackendResponse records
    from an adapter to its caller.

    - send() never blocks; it raises DeliveryError once the receiver has closed.
    - close() is called by the receiver and is the only way to cancel a call.
    - `async for` on the channel stops after the done=True record.
    """

    def __init__(self) -> None:
        self._queue: "asyncio.Queue[BackendResponse]" = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, event: BackendResponse) -> None:
        if self._closed:
            raise DeliveryError("Event receiver has been closed")
        self._queue.put_nowait(event)

    def close(self) -> None:
        self._closed = True

    async def recv(self) -> BackendResponse:
        return await self._queue.get()

    def try_recv(self) -> Optional[BackendResponse]:
        try:
            return self._queue.get_nowait()
        except asyncio.QueueEmpty:
            return None

    def drain(self) -> List[BackendResponse]:
        """Everything already queued, without waiting."""
        out: List[BackendResponse] = []
        while True:
            ev = self.try_recv()
            if ev is None:
                return out
            out.append(ev)

    def __aiter__(self) -> AsyncIterator[BackendResponse]:
        async def gen():
            while True:
                ev = await self.recv()
                yield ev
                if ev.done:
                    return
        return gen()
