"""Incremental decoder for newline-delimited JSON response bodies.

Hidden design decisions:
- A single growable text buffer owns every partial line between reads
- Bytes are decoded incrementally so multi-byte characters may straddle reads
- A malformed line becomes a token of its own instead of ending the stream
"""

import codecs
from collections.abc import AsyncIterable, AsyncIterator, Iterator

from pydantic import ValidationError

from .models import DecodeFailure, GenerateChunk, StreamToken


class DecodeBuffer:
    """Accumulates raw bytes and hands out complete lines.

    Scoped to one streaming call; discard it when the call ends.
    """

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._text = ""

    def __len__(self) -> int:
        return len(self._text)

    def append(self, data: bytes) -> None:
        """Add one network read to the buffer."""
        self._text += self._decoder.decode(data)

    def drain_lines(self) -> Iterator[str]:
        """Yield every complete line, trimmed, skipping blank ones."""
        while True:
            newline = self._text.find("\n")
            if newline < 0:
                return
            line = self._text[:newline].strip()
            self._text = self._text[newline + 1:]
            if line:
                yield line

    def flush(self) -> str:
        """Return whatever is left (trimmed) and empty the buffer."""
        self._text += self._decoder.decode(b"", final=True)
        remaining = self._text.strip()
        self._text = ""
        return remaining


def _describe(error: ValidationError) -> str:
    return "; ".join(detail["msg"] for detail in error.errors())


def decode_line(line: str, final: bool = False) -> StreamToken:
    """Decode one line into a record, or a failure token carrying the line."""
    try:
        return GenerateChunk.model_validate_json(line)
    except ValidationError as e:
        return DecodeFailure(line=line, error=_describe(e), final=final)


async def decode_stream(chunks: AsyncIterable[bytes]) -> AsyncIterator[StreamToken]:
    """Turn an async sequence of byte chunks into response tokens.

    Tokens come out in arrival order. Iteration ends right after a record
    with ``done`` set; bytes after it are never read. If the byte source
    ends first, the unterminated remainder is decoded as one last record.
    Exceptions raised by ``chunks`` propagate unchanged.
    """
    buffer = DecodeBuffer()
    async for data in chunks:
        buffer.append(data)
        for line in buffer.drain_lines():
            token = decode_line(line)
            yield token
            if isinstance(token, GenerateChunk) and token.done:
                return

    remaining = buffer.flush()
    if remaining:
        yield decode_line(remaining, final=True)
