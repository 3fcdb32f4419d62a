"""SSE transport: bridges a StreamSession to an sse-starlette response.

Jobs run in a worker thread and write through QueueSink, which hands each
frame to the event loop. The response drains the queue; when the consumer
disconnects sse-starlette tears down the generator, whose ``finally``
cancels the session.
"""

import asyncio

from sse_starlette.sse import EventSourceResponse

from ..core.constants import STREAM_HEADERS
from ..core.errors import TransportClosed
from ..core.session import StreamSession

_END_OF_STREAM = object()


class QueueSink:
    """Thread-safe sink feeding an asyncio.Queue owned by ``loop``."""

    def __init__(self, loop: asyncio.AbstractEventLoop, queue: asyncio.Queue):
        self._loop = loop
        self._queue = queue

    def write(self, frame: bytes) -> None:
        self._put(frame)

    def close(self) -> None:
        self._put(_END_OF_STREAM)

    def _put(self, item) -> None:
        try:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, item)
        except RuntimeError as e:
            # "Event loop is closed": the server is gone
            raise TransportClosed(str(e)) from e


class SSEStream:
    """One streaming response plus the session that feeds it."""

    def __init__(self, loop: asyncio.AbstractEventLoop, ping_seconds: int = 15):
        self._queue: asyncio.Queue = asyncio.Queue()
        self.session = StreamSession(QueueSink(loop, self._queue))
        self.ping_seconds = ping_seconds
        self.headers = {k: v for k, v in STREAM_HEADERS.items() if k != "Content-Type"}

    async def frames(self):
        """Yield encoded frames until the session closes or the consumer leaves."""
        try:
            while True:
                item = await self._queue.get()
                if item is _END_OF_STREAM:
                    return
                yield item
        finally:
            self.session.cancel()

    def response(self) -> EventSourceResponse:
        return EventSourceResponse(
            self.frames(),
            headers=self.headers,
            ping=self.ping_seconds,
            sep="\n",
        )


def create_sse_stream(ping_seconds: int = 15) -> SSEStream:
    """Create a stream bound to the running event loop."""
    return SSEStream(asyncio.get_running_loop(), ping_seconds=ping_seconds)
