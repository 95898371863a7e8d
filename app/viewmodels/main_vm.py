"""ViewModel for importing shared photos into the photo store."""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from app.events import PhotosChanged
from app.viewmodels.map_vm import MapVM
from core.errors import (
    DivisionByZeroError,
    MalformedDateTimeError,
    NoExifSegmentError,
    NotAnImageError,
)
from core.models import NoGPSData
from core.services.interfaces import ImportResult, ImportStatus, IPhotoRepository
from infrastructure.image_service import ImageService
from infrastructure.photo_extractor import extract


class MainVM:
    """Main application view-model.

    Mediates between the share entry point, the extractor, the photo store
    and the map view-model.
    """

    def __init__(
        self,
        repo: IPhotoRepository,
        map_vm: MapVM,
        image_service: ImageService | None = None,
    ) -> None:
        """Create a MainVM.

        Args:
            repo: Photo store; change notifications are forwarded to the map.
            map_vm: Map view-model centred on freshly shared photos.
            image_service: Thumbnail builder (defaults to `ImageService()`).
        """
        self._repo = repo
        self._map_vm = map_vm
        self._img = image_service or ImageService()
        self.last_result: ImportResult | None = None
        self._repo.add_listener(lambda: map_vm.channel.post(PhotosChanged()))

    @property
    def map_vm(self) -> MapVM:
        return self._map_vm

    def import_photo(self, path: str | Path) -> ImportResult:
        """Extract, thumbnail and store the image at `path`."""
        key = str(path)
        try:
            data = Path(path).read_bytes()
            outcome = extract(data, key)
        except OSError as ex:
            logger.error("Failed to open file {}: {}", key, ex)
            return self._finish(ImportResult(key, ImportStatus.UNREADABLE, message=str(ex)))
        except (NotAnImageError, NoExifSegmentError) as ex:
            logger.warning("No EXIF data in {}: {}", key, ex)
            return self._finish(ImportResult(key, ImportStatus.NO_EXIF, message=str(ex)))
        except (MalformedDateTimeError, DivisionByZeroError) as ex:
            logger.error("Corrupt EXIF data in {}: {}", key, ex)
            return self._finish(ImportResult(key, ImportStatus.CORRUPT, message=str(ex)))

        if isinstance(outcome, NoGPSData):
            return self._finish(ImportResult(key, ImportStatus.NO_GPS, message=outcome.reason))

        try:
            thumbnail = self._img.make_thumbnail(data)
        except (OSError, ValueError) as ex:
            logger.error("couldn't get thumbnail of {}: {}", key, ex)
            thumbnail = None
        record = outcome.with_thumbnail(thumbnail)

        self._repo.insert(record)
        self._map_vm.update_camera(record.latitude, record.longitude)
        return self._finish(ImportResult(key, ImportStatus.STORED, record=record))

    def _finish(self, result: ImportResult) -> ImportResult:
        logger.info("Import of {} finished: {}", result.path, result.status.value)
        self.last_result = result
        return result

    def clear_all(self) -> int:
        """Delete every stored photo."""
        return self._repo.delete_all()
