# src/chatwire/streaming/decoder.py
from __future__ import annotations
import logging
from typing import AsyncIterable, AsyncIterator, Optional

from pydantic import ValidationError

from chatwire.core.errors import DecodeError
from chatwire.core.models import CompletionResponse, StreamChunk

logger = logging.getLogger(__name__)

SENTINEL = "[DONE]"
DATA_PREFIX = "data:"
# SSE fields we never need; a comment line starts with ':'
_IGNORED_FIELDS = ("event:", "id:", "retry:")

ON_MALFORMED = ("raise", "skip")

_DONE = StreamChunk(done=True)


def decode_line(line: str, on_malformed: str = "raise") -> Optional[StreamChunk]:
    """
    Decode one framed line.
    Returns a done chunk for the sentinel, None for lines carrying nothing
    (blank keep-alives, SSE fields), otherwise a chunk holding zero-or-one fragment.
    """
    cleaned = line.strip()
    if cleaned == SENTINEL:
        return _DONE
    if cleaned.startswith(DATA_PREFIX):
        cleaned = cleaned[len(DATA_PREFIX):].strip()
        if cleaned == SENTINEL:
            return _DONE
    if not cleaned:
        return None
    if cleaned.startswith(":") or cleaned.startswith(_IGNORED_FIELDS):
        return None

    try:
        res = CompletionResponse.model_validate_json(cleaned)
    except ValidationError as e:
        if on_malformed == "skip":
            logger.warning("Skipping malformed stream line: %r", cleaned[:200])
            return None
        raise DecodeError(f"Malformed completion chunk: {cleaned[:200]!r}") from e

    logger.debug("Completion chunk: %s", res)
    if not res.choices:
        # e.g. Azure's leading prompt_filter_results chunk
        return StreamChunk(text=None)
    return StreamChunk(text=res.choices[0].delta.content)


async def iter_chunks(lines: AsyncIterable[str], on_malformed: str = "raise") -> AsyncIterator[StreamChunk]:
    """Yield decoded chunks in line order; stop at the sentinel without pulling further lines."""
    if on_malformed not in ON_MALFORMED:
        raise ValueError(f"on_malformed must be one of {ON_MALFORMED}, got '{on_malformed}'")
    async for line in lines:
        chunk = decode_line(line, on_malformed)
        if chunk is None:
            continue
        if chunk.done:
            return
        yield chunk
