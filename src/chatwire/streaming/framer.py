# src/chatwire/streaming/framer.py
from __future__ import annotations
import codecs
from typing import AsyncIterable, AsyncIterator

from chatwire.core.errors import DecodeError


async def iter_lines(byte_chunks: AsyncIterable[bytes]) -> AsyncIterator[str]:
    """
    Turn an arbitrary chunking of a UTF-8 byte stream into complete lines.

    Chunk boundaries may split a line or a multi-byte character; both are
    carried over to the next chunk. Lines are split on '\\n' with a trailing
    '\\r' removed, and are otherwise yielded as-is (the decoder trims).
    A final unterminated line is yielded when the stream ends.
    """
    decoder = codecs.getincrementaldecoder("utf-8")(errors="strict")
    buf = ""

    async for chunk in byte_chunks:
        try:
            buf += decoder.decode(chunk)
        except UnicodeDecodeError as e:
            raise DecodeError(f"Response stream is not valid UTF-8: {e}") from e

        while True:
            idx = buf.find("\n")
            if idx < 0:
                break
            line, buf = buf[:idx], buf[idx + 1:]
            yield line.rstrip("\r")

    try:
        buf += decoder.decode(b"", final=True)
    except UnicodeDecodeError as e:
        raise DecodeError(f"Response stream ended inside a UTF-8 sequence: {e}") from e
    if buf:
        yield buf.rstrip("\r")
