"""
Merged Stream - Fan a request out to every source and merge the results.

Each iteration starts one task per source. Items are pushed onto a shared
queue as soon as a source produces them; the consumer counts sources down
as their terminal signals arrive and stops when none remain.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, AsyncIterator, Callable, Generic, Optional, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SignalKind(Enum):
    ITEM = "item"
    ERROR = "error"
    DONE = "done"


@dataclass
class _Signal:
    kind: SignalKind
    source: str
    payload: Any = None


@dataclass
class SourceFailure:
    """A contained per-source failure."""
    source: str
    error: Exception

    def __str__(self) -> str:
        return f"{self.source}: {self.error}"


@dataclass
class StreamStats:
    """Counters for the latest iteration of a stream."""
    items: int = 0
    finished_sources: list[str] = field(default_factory=list)
    completed: bool = False


class MergedStream(Generic[T]):
    """
    Async iterable merging the output of several sources.

    The source key set is fixed at construction. With ``fatal_errors``
    the first source failure is raised to the consumer; otherwise
    failures are logged, kept in ``errors`` and passed to ``on_error``,
    and the stream completes once every source has finished.
    """

    def __init__(
        self,
        sources: Sequence[str],
        producer: Callable[[str], AsyncIterator[T]],
        fatal_errors: bool = False,
        on_error: Optional[Callable[[SourceFailure], None]] = None,
        name: str = "merged",
    ):
        self.sources: tuple[str, ...] = tuple(dict.fromkeys(sources))
        self.fatal_errors = fatal_errors
        self.name = name
        self.errors: list[SourceFailure] = []
        self.stats = StreamStats()
        self._producer = producer
        self._on_error = on_error

    def __aiter__(self) -> AsyncIterator[T]:
        return self._run()

    async def collect(self) -> list[T]:
        """Consume the stream into a list."""
        return [item async for item in self]

    async def _pump(self, source: str, queue: asyncio.Queue) -> None:
        try:
            async for item in self._producer(source):
                queue.put_nowait(_Signal(SignalKind.ITEM, source, item))
        except Exception as e:
            queue.put_nowait(_Signal(SignalKind.ERROR, source, e))
        finally:
            queue.put_nowait(_Signal(SignalKind.DONE, source))

    def _contain(self, failure: SourceFailure) -> None:
        logger.warning(f"{self.name}: source {failure.source} failed: {failure.error}")
        self.errors.append(failure)
        if self._on_error:
            self._on_error(failure)

    async def _run(self) -> AsyncIterator[T]:
        self.errors = []
        self.stats = StreamStats()

        remaining = len(self.sources)
        if remaining == 0:
            self.stats.completed = True
            logger.debug(f"{self.name}: no sources, completing immediately")
            return

        queue: asyncio.Queue = asyncio.Queue()
        tasks = [
            asyncio.create_task(self._pump(source, queue))
            for source in self.sources
        ]
        logger.debug(f"{self.name}: fanned out to {remaining} source(s)")

        try:
            while remaining:
                signal = await queue.get()

                if signal.kind is SignalKind.ITEM:
                    self.stats.items += 1
                    yield signal.payload
                elif signal.kind is SignalKind.ERROR:
                    if self.fatal_errors:
                        logger.error(f"{self.name}: source {signal.source} failed: {signal.payload}")
                        raise signal.payload
                    self._contain(SourceFailure(signal.source, signal.payload))
                else:
                    self.stats.finished_sources.append(signal.source)
                    remaining -= 1

            self.stats.completed = True
            logger.info(
                f"{self.name}: completed with {self.stats.items} item(s) from "
                f"{len(self.sources)} source(s), {len(self.errors)} failed"
            )
        finally:
            pending = [task for task in tasks if not task.done()]
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)
