"""Producer/consumer relay for one chat turn.

A producer task pulls fragments from the completion provider, accumulates
them and puts them on a bounded queue. The consumer is whoever iterates the
TurnStream (the HTTP response body); it drains the queue and emits each
fragment as UTF-8 bytes as soon as it arrives.

Queue items are fragments, a ProviderFailure, or the end marker. The
completion callback (assistant message write) runs on the consumer side when
it takes the end marker, after every fragment has been handed out and before
the stream finishes. A consumer that stops early never reaches it, so an
abandoned turn is not persisted however far the producer got.
"""

import asyncio
import contextlib
import logging
from collections.abc import AsyncGenerator, AsyncIterator, Awaitable, Callable

from pdfchat.errors import ProviderFailure, StorageError

logger = logging.getLogger(__name__)

_END = object()
_UNSET = object()


class TurnStream:
    """Relays a single turn's fragments while accumulating the full text.

    Owns its queue, accumulator and producer task; nothing is shared with
    other turns.
    """

    def __init__(
        self,
        fragments: AsyncIterator[str],
        on_complete: Callable[[str], Awaitable[None]],
        *,
        queue_size: int = 32,
        timeout: float | None = None,
        label: str = "",
    ) -> None:
        """Initialize the relay.

        Args:
            fragments: Provider fragment stream. Not consumed until start().
            on_complete: Called with the full text once the consumer has taken every fragment.
            queue_size: How many fragments the producer may run ahead.
            timeout: Budget in seconds for the whole provider stream, or None.
            label: Identifier used in log lines (usually the chat id).
        """
        self._fragments = fragments
        self._on_complete = on_complete
        self._queue: asyncio.Queue[object] = asyncio.Queue(maxsize=queue_size)
        self._timeout = timeout
        self._label = label
        self._parts: list[str] = []
        self._producer: asyncio.Task[None] | None = None
        self._head: object = _UNSET
        self.completed = False

    @property
    def text(self) -> str:
        """Text accumulated so far."""
        return "".join(self._parts)

    async def _pull(self) -> None:
        try:
            async with asyncio.timeout(self._timeout):
                async for fragment in self._fragments:
                    # Empty deltas are no-ops
                    if not fragment:
                        continue
                    self._parts.append(fragment)
                    await self._queue.put(fragment)
        finally:
            aclose = getattr(self._fragments, "aclose", None)
            if aclose is not None:
                await aclose()

    async def _produce(self) -> None:
        try:
            await self._pull()
        except ProviderFailure as e:
            logger.error(f"Provider stream failed for turn {self._label}: {e}")
            await self._queue.put(e)
            return
        except TimeoutError:
            logger.error(f"Provider stream timed out for turn {self._label} after {self._timeout}s")
            await self._queue.put(ProviderFailure(f"Provider stream timed out after {self._timeout}s"))
            return
        except Exception as e:
            logger.exception(f"Provider stream raised for turn {self._label}")
            failure = ProviderFailure(f"Provider stream failed: {e}")
            failure.__cause__ = e
            await self._queue.put(failure)
            return

        await self._queue.put(_END)

    async def _complete(self) -> None:
        """Hand the full text to the completion callback once everything is delivered."""
        text = self.text
        try:
            await self._on_complete(text)
        except StorageError as e:
            # Already-sent fragments are not retracted
            logger.error(f"Failed to persist assistant message for turn {self._label}: {e}")
        except Exception:
            logger.exception(f"Completion callback raised for turn {self._label}")
        else:
            logger.info(
                f"Turn {self._label} complete: {len(self._parts)} fragments, {len(text)} chars"
            )
        self.completed = True

    async def start(self) -> None:
        """Start the producer and wait for its first item.

        A provider failure that happens before any fragment is produced is
        raised here, before the caller has committed to a streamed response.

        Raises:
            ProviderFailure: If the provider fails before the first fragment.
        """
        if self._producer is not None:
            return

        self._producer = asyncio.create_task(self._produce())
        try:
            head = await self._queue.get()
        except BaseException:
            await self.aclose()
            raise

        if isinstance(head, ProviderFailure):
            await self._producer
            raise head
        self._head = head

    async def _next_item(self) -> object:
        if self._head is not _UNSET:
            item, self._head = self._head, _UNSET
            return item
        return await self._queue.get()

    async def __aiter__(self) -> AsyncGenerator[bytes]:
        await self.start()
        try:
            while True:
                item = await self._next_item()
                if item is _END:
                    await self._complete()
                    return
                if isinstance(item, ProviderFailure):
                    raise item
                yield item.encode("utf-8")
        finally:
            await self.aclose()

    async def aclose(self) -> None:
        """Stop pulling from the provider. An unfinished turn is not persisted."""
        if self._producer is None or self._producer.done():
            return

        logger.info(f"Turn {self._label} aborted by consumer")
        self._producer.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._producer
