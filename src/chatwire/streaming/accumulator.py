# src/chatwire/streaming/accumulator.py
from __future__ import annotations
import logging
from typing import AsyncIterable, List

from chatwire.core.context import Message, append_message, dump_context
from chatwire.core.events import EventChannel
from chatwire.core.models import Author, BackendResponse, StreamChunk

logger = logging.getLogger(__name__)


async def accumulate(
    chunks: AsyncIterable[StreamChunk],
    messages: List[Message],
    channel: EventChannel,
    author: Author = Author.MODEL,
) -> str:
    """
    Republish each fragment as it arrives, then append the full reply to
    `messages` and send the single terminal response with the new context.

    Errors from the chunk source or the channel propagate before the terminal
    response is sent, so the caller's context stays as it was.
    """
    parts: List[str] = []
    async for chunk in chunks:
        if not chunk.text:
            continue
        parts.append(chunk.text)
        channel.send(BackendResponse(author=author, text=chunk.text, done=False))

    reply = "".join(parts)
    append_message(messages, "assistant", reply)
    channel.send(BackendResponse(author=author, text="", done=True, context=dump_context(messages)))
    logger.info("Completion finished (%d fragments, %d chars)", len(parts), len(reply))
    return reply
