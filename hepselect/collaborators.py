"""Boundaries with the event generator and the output writer.

The generator and the transcoder live outside this package. They are plugged
into a run through the two small interfaces below; the adapters cover the
common cases of wrapping a callable or an in-memory sequence.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, List, Optional

from .models import Event


class SourceExhausted(Exception):
    """Raised by a finite event source once it has nothing left to give."""


class EventSource(ABC):
    @abstractmethod
    def next_event(self) -> Optional[Event]:
        """Return the next generated event, or None on a transient failure."""
        ...


class EventSink(ABC):
    @abstractmethod
    def write(self, event: Event, sequence_number: int) -> None:
        ...

    def finish(self) -> None:
        """Called once after the last event of a run."""


class CallableSource(EventSource):
    def __init__(self, produce: Callable[[], Optional[Event]]) -> None:
        self._produce = produce

    def next_event(self) -> Optional[Event]:
        return self._produce()


class IterableSource(EventSource):
    """Serve events from an iterable; ``None`` items stand for failed attempts."""

    def __init__(self, events: Iterable[Optional[Event]]) -> None:
        self._it: Iterator[Optional[Event]] = iter(events)
        self.n_served = 0

    def next_event(self) -> Optional[Event]:
        try:
            ev = next(self._it)
        except StopIteration:
            raise SourceExhausted(f"source exhausted after {self.n_served} attempts") from None
        self.n_served += 1
        return ev


class CallableSink(EventSink):
    def __init__(self, write: Callable[[Event, int], None], finish: Optional[Callable[[], None]] = None) -> None:
        self._write = write
        self._finish = finish

    def write(self, event: Event, sequence_number: int) -> None:
        self._write(event, sequence_number)

    def finish(self) -> None:
        if self._finish is not None:
            self._finish()


@dataclass(frozen=True)
class WrittenRecord:
    sequence_number: int
    event_number: int
    n_particles: int
    n_vertices: int


class RecordingSink(EventSink):
    """Keep a summary line per written event.

    Events themselves are not retained: they belong to the run loop iteration
    that produced them.
    """

    def __init__(self) -> None:
        self.records: List[WrittenRecord] = []
        self.finished = False

    def write(self, event: Event, sequence_number: int) -> None:
        self.records.append(
            WrittenRecord(
                sequence_number=sequence_number,
                event_number=event.event_number,
                n_particles=len(event.particles),
                n_vertices=len(event.vertices),
            )
        )

    def finish(self) -> None:
        self.finished = True

    @property
    def sequence_numbers(self) -> List[int]:
        return [r.sequence_number for r in self.records]

    def __len__(self) -> int:
        return len(self.records)
