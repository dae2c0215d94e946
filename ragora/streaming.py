"""
Ragora SDK - Server-Sent Events Streaming

Turns the raw byte stream of a streaming chat response into chunks:

- SSEDecoder reassembles ``event:`` / ``data:`` frames across arbitrary
  chunk boundaries, including splits inside multi-byte UTF-8 sequences.
- interpret_chat_event / interpret_agent_event map one frame to zero or
  one chunk.
- ChatStream / AsyncChatStream pull bytes from an httpx response one read
  at a time and hand out chunks in order. The response is closed on every
  exit path.

Malformed frames are dropped; only transport failures reach the caller.
"""

from __future__ import annotations

import codecs
import json
import logging
from collections import deque
from dataclasses import dataclass, field
from typing import (
    Any,
    AsyncIterator,
    Awaitable,
    Callable,
    Deque,
    Dict,
    Iterator,
    List,
    Optional,
)

import httpx

from .errors import StreamError, TimeoutError
from .models import (
    AgentChatStreamChunk,
    ChatStreamChunk,
    as_dict,
    as_list,
    as_optional_str,
    as_str,
    is_record,
    parse_sources,
)


logger = logging.getLogger("ragora.streaming")

DONE_SENTINEL = "[DONE]"
DEFAULT_EVENT = "message"
METADATA_EVENTS = frozenset({"ragora_metadata", "ragora_complete"})


# ============================================================
# Framing
# ============================================================

@dataclass
class SSEEvent:
    """One reconstructed SSE frame."""
    event: str = DEFAULT_EVENT
    data_lines: List[str] = field(default_factory=list)

    @property
    def data(self) -> str:
        """Data lines joined with newlines."""
        return "\n".join(self.data_lines)

    @property
    def is_done(self) -> bool:
        return self.data == DONE_SENTINEL


class SSEDecoder:
    """
    Incremental SSE framer.

    Feed it byte chunks as they arrive; it returns every frame completed
    by that chunk. Call ``flush()`` once the body ends to recover a final
    frame the server did not terminate with a blank line.

    Example:
        >>> decoder = SSEDecoder()
        >>> decoder.feed(b'data: {"a"')
        []
        >>> decoder.feed(b': 1}\\n\\n')
        [SSEEvent(event='message', data_lines=['{"a": 1}'])]
    """

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""
        self._event = DEFAULT_EVENT
        self._data_lines: List[str] = []

    def feed(self, chunk: bytes) -> List[SSEEvent]:
        """Decode a chunk and return the frames it completes."""
        if not chunk:
            return []
        self._buffer += self._decoder.decode(chunk)
        return self._drain_lines()

    def flush(self) -> List[SSEEvent]:
        """
        Finish the stream.

        Trailing text without a newline is handled as one last line, and a
        frame still holding data lines is returned as if a blank line had
        closed it.
        """
        self._buffer += self._decoder.decode(b"", final=True)
        events = self._drain_lines()

        if self._buffer:
            remainder = self._buffer.rstrip("\r")
            self._buffer = ""
            if remainder:
                self._process_line(remainder)

        if self._data_lines:
            events.append(self._take_event())
        return events

    def _drain_lines(self) -> List[SSEEvent]:
        if "\n" not in self._buffer:
            return []

        *lines, self._buffer = self._buffer.split("\n")
        events = []
        for line in lines:
            event = self._process_line(line.rstrip("\r"))
            if event is not None:
                events.append(event)
        return events

    def _process_line(self, line: str) -> Optional[SSEEvent]:
        if not line:
            return self._take_event()

        if line.startswith("event:"):
            self._event = line[6:].strip() or DEFAULT_EVENT
        elif line.startswith("data:"):
            self._data_lines.append(line[5:].lstrip())
        # comments, id: and retry: lines are ignored
        return None

    def _take_event(self) -> SSEEvent:
        event = SSEEvent(event=self._event, data_lines=self._data_lines)
        self._event = DEFAULT_EVENT
        self._data_lines = []
        return event


# ============================================================
# Interpretation
# ============================================================

def _load_payload(event: SSEEvent) -> Optional[Dict[str, Any]]:
    payload = event.data
    if not payload:
        return None

    try:
        data = json.loads(payload)
    except ValueError:
        logger.debug(f"Skipping SSE frame with invalid JSON (event={event.event})")
        return None

    if not is_record(data):
        logger.debug(f"Skipping SSE frame with non-object payload (event={event.event})")
        return None
    return data


def _first_choice(data: Dict[str, Any]) -> Dict[str, Any]:
    choices = as_list(data.get("choices"))
    return as_dict(choices[0]) if choices else {}


def interpret_chat_event(event: SSEEvent) -> Optional[ChatStreamChunk]:
    """
    Map a chat completion frame to a chunk.

    ``ragora_metadata`` and ``ragora_complete`` frames only carry
    sources. Every other event name is read as an OpenAI-style content
    delta, with any sources it carries attached. Frames with nothing to
    report return None.
    """
    data = _load_payload(event)
    if data is None:
        return None

    sources = parse_sources(data)

    if event.event in METADATA_EVENTS:
        if not sources:
            return None
        return ChatStreamChunk(content="", finish_reason=None, sources=sources)

    choice = _first_choice(data)
    content = as_str(as_dict(choice.get("delta")).get("content"))
    finish_reason = choice.get("finish_reason")
    if not isinstance(finish_reason, str):
        finish_reason = None

    # keep-alive
    if not content and not finish_reason and not sources:
        return None

    return ChatStreamChunk(content=content, finish_reason=finish_reason, sources=sources)


def interpret_agent_event(event: SSEEvent) -> Optional[AgentChatStreamChunk]:
    """
    Map an agent chat frame to a chunk.

    Content comes from an OpenAI-style delta or a top-level ``content``
    field. A frame is final on ``ragora_complete``, a finish reason, or
    ``"done": true``.
    """
    data = _load_payload(event)
    if data is None:
        return None

    choice = _first_choice(data)
    delta = as_dict(choice.get("delta"))
    content = as_str(delta.get("content")) or as_str(data.get("content"))

    stats = data.get("ragora_stats", data.get("stats"))
    stats = stats if is_record(stats) else None
    session_id = as_optional_str(data.get("session_id"))

    finish_reason = choice.get("finish_reason")
    done = (
        event.event == "ragora_complete"
        or (isinstance(finish_reason, str) and bool(finish_reason))
        or data.get("done") is True
    )

    if not content and session_id is None and stats is None and not done:
        return None

    return AgentChatStreamChunk(
        content=content,
        session_id=session_id,
        stats=stats,
        done=done,
    )


# ============================================================
# Stream cursors
# ============================================================

class _StreamState:
    """Frame decoding and chunk buffering shared by both cursors."""

    def __init__(self, interpret: Callable[[SSEEvent], Any]):
        self._interpret = interpret
        self._decoder = SSEDecoder()
        self._pending: Deque[Any] = deque()
        self._received: List[str] = []
        self._finished = False
        self._closed = False

    @property
    def finished(self) -> bool:
        """True once the sentinel or end of body was seen."""
        return self._finished

    @property
    def partial_content(self) -> str:
        """Content yielded so far."""
        return "".join(self._received)

    def _consume(self, events: List[SSEEvent]) -> None:
        for event in events:
            if event.is_done:
                logger.debug("Stream finished with [DONE]")
                self._finished = True
                return

            item = self._interpret(event)
            if item is None:
                continue
            self._pending.append(item)
            content = getattr(item, "content", "")
            if content:
                self._received.append(content)

    def _advance(self, chunk: Optional[bytes]) -> None:
        """Decode one read; None marks the end of the body."""
        if chunk is None:
            self._finished = True
            self._consume(self._decoder.flush())
        else:
            self._consume(self._decoder.feed(chunk))

    def _stream_error(self, error: Exception) -> StreamError:
        return StreamError(
            f"Stream interrupted: {error}",
            partial_content=self.partial_content,
        )


class ChatStream(_StreamState):
    """
    Iterator over the chunks of a streaming response.

    The HTTP request is sent on the first pull. Every later pull returns
    a buffered chunk if there is one, otherwise reads the next piece of
    the body, decodes every frame it completes, and buffers the resulting
    chunks. Use it as a context manager, or call ``close()``, to release
    the connection when abandoning the stream early. A stream dropped
    without either is closed when it is garbage-collected.

    Example:
        >>> with client.chat_stream(messages) as stream:
        ...     for chunk in stream:
        ...         print(chunk.content, end="", flush=True)
    """

    def __init__(
        self,
        open_response: Callable[[], httpx.Response],
        interpret: Callable[[SSEEvent], Any] = interpret_chat_event,
    ):
        super().__init__(interpret)
        self._open_response = open_response
        self._response: Optional[httpx.Response] = None
        self._byte_iter: Optional[Iterator[bytes]] = None

    def __iter__(self) -> ChatStream:
        return self

    def __next__(self) -> Any:
        while not self._pending:
            if self._finished or self._closed:
                self._release()
                raise StopIteration
            self._read()
        return self._pending.popleft()

    def _read(self) -> None:
        if self._byte_iter is None:
            try:
                self._response = self._open_response()
            except Exception:
                self._closed = True
                raise
            self._byte_iter = self._response.iter_bytes()
            logger.debug("Stream opened")

        try:
            self._advance(next(self._byte_iter, None))
        except httpx.TimeoutException as e:
            self.close()
            raise TimeoutError("Timed out waiting for stream data") from e
        except httpx.RequestError as e:
            self.close()
            raise self._stream_error(e) from e
        except BaseException:
            self.close()
            raise

        if self._finished:
            self._release()

    def _release(self) -> None:
        if self._byte_iter is not None and hasattr(self._byte_iter, "close"):
            self._byte_iter.close()
        if self._response is not None and not self._response.is_closed:
            self._response.close()
            logger.debug("Stream closed")

    def close(self) -> None:
        """Abandon the stream and release the connection."""
        self._closed = True
        self._pending.clear()
        self._release()

    def __enter__(self) -> ChatStream:
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def __del__(self) -> None:
        # abandoned without close(); nothing to do if never opened
        if getattr(self, "_response", None) is not None:
            self.close()


class AsyncChatStream(_StreamState):
    """
    Async iterator over the chunks of a streaming response.

    Same pull model as ChatStream, over an ``httpx.AsyncClient`` response.
    There is no close on garbage collection: leave the loop early only
    inside ``async with`` or follow it with ``aclose()``.

    Example:
        >>> async with client.chat_stream(messages) as stream:
        ...     async for chunk in stream:
        ...         print(chunk.content, end="", flush=True)
    """

    def __init__(
        self,
        open_response: Callable[[], Awaitable[httpx.Response]],
        interpret: Callable[[SSEEvent], Any] = interpret_chat_event,
    ):
        super().__init__(interpret)
        self._open_response = open_response
        self._response: Optional[httpx.Response] = None
        self._byte_iter: Optional[AsyncIterator[bytes]] = None

    def __aiter__(self) -> AsyncChatStream:
        return self

    async def __anext__(self) -> Any:
        while not self._pending:
            if self._finished or self._closed:
                await self._release()
                raise StopAsyncIteration
            await self._read()
        return self._pending.popleft()

    async def _read(self) -> None:
        if self._byte_iter is None:
            try:
                self._response = await self._open_response()
            except Exception:
                self._closed = True
                raise
            self._byte_iter = self._response.aiter_bytes()
            logger.debug("Stream opened")

        try:
            try:
                chunk: Optional[bytes] = await self._byte_iter.__anext__()
            except StopAsyncIteration:
                chunk = None
            self._advance(chunk)
        except httpx.TimeoutException as e:
            await self.aclose()
            raise TimeoutError("Timed out waiting for stream data") from e
        except httpx.RequestError as e:
            await self.aclose()
            raise self._stream_error(e) from e
        except BaseException:
            await self.aclose()
            raise

        if self._finished:
            await self._release()

    async def _release(self) -> None:
        if self._byte_iter is not None and hasattr(self._byte_iter, "aclose"):
            await self._byte_iter.aclose()
        if self._response is not None and not self._response.is_closed:
            await self._response.aclose()
            logger.debug("Stream closed")

    async def aclose(self) -> None:
        """Abandon the stream and release the connection."""
        self._closed = True
        self._pending.clear()
        await self._release()

    async def __aenter__(self) -> AsyncChatStream:
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()
