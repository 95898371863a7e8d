"""UI/view constants centralized for reuse across view modules."""

from __future__ import annotations

from PySide6.QtCore import Qt

# Marker list columns
HEADERS: list[str] = [
    "Photo",
    "Latitude",
    "Longitude",
    "Date",
]

COL_NAME: int = 0
COL_LATITUDE: int = 1
COL_LONGITUDE: int = 2
COL_DATE: int = 3

# Data roles
IDENTIFIER_ROLE: int = Qt.UserRole  # marker identifier on the name item

# Stacked pages
PAGE_MARKERS: int = 0
PAGE_NO_LOCATION: int = 1

# Info panel / polling
INFO_THUMB_MAX_WIDTH: int = 512
EVENT_POLL_INTERVAL_MS: int = 100
WINDOW_SIZE_RATIO: float = 0.5

IMAGE_FILE_FILTER: str = "Images (*.jpg *.jpeg *.png *.tif *.tiff *.webp);;All files (*)"
