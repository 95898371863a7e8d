"""Events flowing from the marker view to the map view-model.

The view never calls back into the view-model directly; it posts one of the
event types below to an `EventChannel` and the view-model drains the channel
when it is ready to handle them.
"""

from __future__ import annotations

from dataclasses import dataclass
import queue
from typing import Union


@dataclass(frozen=True)
class MarkerClicked:
    """The marker for `identifier` was selected."""

    identifier: str


@dataclass(frozen=True)
class MapClicked:
    """Empty map space was clicked; clears the selection."""


@dataclass(frozen=True)
class PhotosChanged:
    """The photo store changed and markers must be rebuilt."""


MapEvent = Union[MarkerClicked, MapClicked, PhotosChanged]


class EventChannel:
    """Thread-safe FIFO of `MapEvent` values."""

    def __init__(self) -> None:
        self._queue: queue.SimpleQueue[MapEvent] = queue.SimpleQueue()

    def post(self, event: MapEvent) -> None:
        """Append `event` to the channel."""
        self._queue.put(event)

    def drain(self) -> list[MapEvent]:
        """Remove and return every pending event in posting order."""
        events: list[MapEvent] = []
        while True:
            try:
                events.append(self._queue.get_nowait())
            except queue.Empty:
                return events

    def empty(self) -> bool:
        """True when no events are pending."""
        return self._queue.empty()
