"""SQLite persistence for decoded photo records.

One `photo` table holds every imported photo. The schema carries a version in
`PRAGMA user_version`; the table is not migrated, any version mismatch drops
and recreates it.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
import sqlite3
import threading

from loguru import logger

from core.models import PhotoRecord
from core.services.interfaces import IPhotoRepository

DATABASE_VERSION = 1
DATABASE_NAME = "photos.db"
TABLE_NAME = "photo"

COLUMNS = [
    "uri",
    "thumbnail",
    "gps_latitude",
    "gps_latitude_ref",
    "gps_longitude",
    "gps_longitude_ref",
    "date",
    "time",
    "make",
    "model",
]

CREATE_ENTRIES = f"""
CREATE TABLE IF NOT EXISTS {TABLE_NAME} (
    _id INTEGER PRIMARY KEY,
    uri TEXT,
    thumbnail BLOB,
    gps_latitude REAL,
    gps_latitude_ref TEXT,
    gps_longitude REAL,
    gps_longitude_ref TEXT,
    date TEXT,
    time TEXT,
    make TEXT,
    model TEXT
)
"""

DELETE_ENTRIES = f"DROP TABLE IF EXISTS {TABLE_NAME}"


def _to_row(record: PhotoRecord) -> tuple:
    return (
        record.identifier,
        record.thumbnail,
        record.latitude,
        record.latitude_ref,
        record.longitude,
        record.longitude_ref,
        record.date,
        record.time,
        record.make,
        record.model,
    )


def _from_row(row: sqlite3.Row) -> PhotoRecord:
    thumbnail = row["thumbnail"]
    return PhotoRecord(
        identifier=row["uri"],
        thumbnail=bytes(thumbnail) if thumbnail is not None else None,
        latitude=row["gps_latitude"],
        latitude_ref=row["gps_latitude_ref"] or "",
        longitude=row["gps_longitude"],
        longitude_ref=row["gps_longitude_ref"] or "",
        date=row["date"] or "",
        time=row["time"] or "",
        make=row["make"] or "",
        model=row["model"] or "",
    )


class SqlitePhotoRepository(IPhotoRepository):
    """Insert, query-all and delete-all over the `photo` table.

    Construct one instance per process and pass it to whoever needs it. The
    connection is shared between threads and guarded by a lock.
    """

    def __init__(self, db_path: str | Path = DATABASE_NAME) -> None:
        self._path = str(db_path)
        if self._path != ":memory:":
            Path(self._path).parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._listeners: list[Callable[[], None]] = []
        self._conn = sqlite3.connect(self._path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._ensure_schema()

    def _ensure_schema(self) -> None:
        with self._lock, self._conn:
            version = self._conn.execute("PRAGMA user_version").fetchone()[0]
            if version not in (0, DATABASE_VERSION):
                logger.warning(
                    "Photo database version {} != {}, dropping photo table",
                    version,
                    DATABASE_VERSION,
                )
                self._conn.execute(DELETE_ENTRIES)
            self._conn.execute(CREATE_ENTRIES)
            self._conn.execute(f"PRAGMA user_version = {DATABASE_VERSION}")

    @property
    def path(self) -> str:
        """Database file path (or ":memory:")."""
        return self._path

    def add_listener(self, callback: Callable[[], None]) -> None:
        """Register `callback` to run after insert/delete_all."""
        self._listeners.append(callback)

    def _notify_change(self) -> None:
        for callback in list(self._listeners):
            callback()

    def insert(self, record: PhotoRecord) -> int:
        """Store `record` and return its row id."""
        placeholders = ", ".join("?" for _ in COLUMNS)
        sql = f"INSERT INTO {TABLE_NAME} ({', '.join(COLUMNS)}) VALUES ({placeholders})"
        with self._lock, self._conn:
            cursor = self._conn.execute(sql, _to_row(record))
            row_id = int(cursor.lastrowid)
        logger.info("Stored photo {} as row {}", record.identifier, row_id)
        self._notify_change()
        return row_id

    def load_all(self) -> list[PhotoRecord]:
        """Return every stored record in insertion order."""
        sql = f"SELECT _id, {', '.join(COLUMNS)} FROM {TABLE_NAME} ORDER BY _id"
        with self._lock:
            rows = self._conn.execute(sql).fetchall()
        photos = [_from_row(row) for row in rows]
        logger.debug("{} photos loaded from db", len(photos))
        return photos

    def get(self, identifier: str) -> PhotoRecord | None:
        """Return the most recently stored record for `identifier`."""
        sql = (
            f"SELECT _id, {', '.join(COLUMNS)} FROM {TABLE_NAME} "
            "WHERE uri = ? ORDER BY _id DESC LIMIT 1"
        )
        with self._lock:
            row = self._conn.execute(sql, (identifier,)).fetchone()
        return _from_row(row) if row is not None else None

    def delete_all(self) -> int:
        """Remove every stored record and return the number of rows removed."""
        with self._lock, self._conn:
            cursor = self._conn.execute(f"DELETE FROM {TABLE_NAME}")
            count = cursor.rowcount
        logger.info("Deleted {} photos", count)
        self._notify_change()
        return count

    def close(self) -> None:
        """Close the underlying connection."""
        with self._lock:
            self._conn.close()
