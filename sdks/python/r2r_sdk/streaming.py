"""Lazy byte stream over a streamed HTTP response body."""

import codecs
from collections.abc import AsyncIterator, Awaitable, Callable

from .exceptions import TransportError
from .logging_config import get_logger

logger = get_logger(__name__)


class ByteStream:
    """
    Async iterator of raw response chunks.

    Chunks are forwarded exactly as the transport yields them; framing of
    whatever the server writes into the body is left to the caller. The
    release callback runs exactly once, whether the stream is exhausted,
    fails mid-read, or is closed early.

    Usage:
        async with await client.rag(request) as stream:
            async for chunk in stream:
                ...
    """

    def __init__(
        self,
        chunks: AsyncIterator[bytes],
        release: Callable[[], Awaitable[None]],
    ):
        self._chunks = chunks
        self._release = release
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def __aiter__(self) -> "ByteStream":
        return self

    async def __anext__(self) -> bytes:
        while not self._closed:
            try:
                chunk = await self._chunks.__anext__()
            except StopAsyncIteration:
                await self.aclose()
                raise
            except Exception as exc:
                logger.error("Stream read failed", error=str(exc))
                await self.aclose()
                raise TransportError(f"Error reading response stream: {exc}") from exc
            except BaseException:
                # Cancellation still releases the response.
                await self.aclose()
                raise
            if chunk:
                return chunk
        raise StopAsyncIteration

    async def aclose(self) -> None:
        """Release the underlying response. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        close_chunks = getattr(self._chunks, "aclose", None)
        try:
            if close_chunks is not None:
                await close_chunks()
        finally:
            await self._release()

    async def __aenter__(self) -> "ByteStream":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def read(self) -> bytes:
        """Drain the remaining stream into a single bytes object."""
        return b"".join([chunk async for chunk in self])

    async def iter_text(self, encoding: str = "utf-8") -> AsyncIterator[str]:
        """Decode chunks incrementally; multi-byte characters may span chunks."""
        decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        async for chunk in self:
            text = decoder.decode(chunk)
            if text:
                yield text
        tail = decoder.decode(b"", final=True)
        if tail:
            yield tail
