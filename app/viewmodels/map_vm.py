"""ViewModel for the photo markers shown by the map view."""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from app.events import EventChannel, MapClicked, MapEvent, MarkerClicked, PhotosChanged
from app.viewmodels.photo_vm import PhotoVM
from core.models import PhotoRecord
from core.services.interfaces import IPhotoRepository

DEFAULT_START_ZOOM = 13.0


@dataclass(frozen=True)
class Marker:
    """A plotted photo position."""

    identifier: str
    latitude: float
    longitude: float


@dataclass(frozen=True)
class CameraPosition:
    """Where the view should centre and how far to zoom in."""

    latitude: float
    longitude: float
    zoom: float = DEFAULT_START_ZOOM


class MapVM:
    """Keeps markers in sync with the photo store and tracks the selection.

    Events arrive through an `EventChannel`; call `process_events` from the
    thread that owns the view to apply them.
    """

    def __init__(
        self,
        repo: IPhotoRepository,
        channel: EventChannel,
        start_zoom: float = DEFAULT_START_ZOOM,
        fallback_position: tuple[float, float] | None = None,
    ) -> None:
        """Create a MapVM.

        Args:
            repo: Photo store providing `load_all()`.
            channel: Channel the view posts `MapEvent`s to.
            start_zoom: Zoom level used for the initial camera position.
            fallback_position: Initial centre when no photo was just shared.
        """
        self._repo = repo
        self._channel = channel
        self._start_zoom = start_zoom
        self._photos: dict[str, PhotoRecord] = {}
        self._markers: dict[str, Marker] = {}
        self.selected: str | None = None
        self._pending_camera: CameraPosition | None = None
        if fallback_position is not None:
            self._pending_camera = CameraPosition(*fallback_position, zoom=start_zoom)

    @property
    def channel(self) -> EventChannel:
        return self._channel

    @property
    def markers(self) -> list[Marker]:
        """Markers in the order their photos were stored."""
        return list(self._markers.values())

    def update_camera(self, latitude: float, longitude: float) -> None:
        """Centre the initial view on the given position (e.g. a shared photo)."""
        logger.debug("updateCamera({}, {})", latitude, longitude)
        self._pending_camera = CameraPosition(latitude, longitude, zoom=self._start_zoom)

    def start_position(self) -> CameraPosition | None:
        """Return the pending initial camera position once, then None."""
        camera, self._pending_camera = self._pending_camera, None
        return camera

    def reload(self) -> None:
        """Rebuild markers from the store, keeping the selection if possible."""
        photos = self._repo.load_all()
        logger.info("Loading {} photos", len(photos))
        self._photos = {}
        self._markers = {}
        for photo in photos:
            self._photos[photo.identifier] = photo
            self._markers[photo.identifier] = Marker(
                photo.identifier, photo.latitude, photo.longitude
            )
        if self.selected is not None and self.selected not in self._markers:
            logger.debug("Selected photo {} no longer stored", self.selected)
            self.selected = None

    def process_events(self) -> list[MapEvent]:
        """Apply all pending channel events and return them."""
        events = self._channel.drain()
        for event in events:
            self.handle(event)
        return events

    def handle(self, event: MapEvent) -> None:
        """Apply a single event."""
        if isinstance(event, MarkerClicked):
            if event.identifier in self._markers:
                self.selected = event.identifier
            else:
                logger.warning("Click on unknown marker {}", event.identifier)
        elif isinstance(event, MapClicked):
            self.selected = None
        elif isinstance(event, PhotosChanged):
            self.reload()
        else:
            raise TypeError(f"Unsupported map event: {event!r}")

    def info_window(self, identifier: str | None = None) -> PhotoVM | None:
        """Info panel contents for `identifier` (default: the selection)."""
        key = identifier if identifier is not None else self.selected
        if key is None:
            return None
        photo = self._photos.get(key)
        return PhotoVM(photo) if photo is not None else None
