from __future__ import annotations

import sqlite3

from core.models import PhotoRecord
from infrastructure.sqlite_repository import DATABASE_VERSION, SqlitePhotoRepository


def _record(identifier: str = "/sdcard/DCIM/IMG_1.jpg", **overrides) -> PhotoRecord:
    fields = dict(
        identifier=identifier,
        thumbnail=b"\xff\xd8\xff\xe0thumb",
        latitude=40.446111,
        latitude_ref="N",
        longitude=-79.982222,
        longitude_ref="W",
        date="2015:06:01",
        time="12:30:45",
        make="LGE",
        model="Nexus 5",
    )
    fields.update(overrides)
    return PhotoRecord(**fields)


def test_empty_store_loads_nothing(repo):
    assert repo.load_all() == []
    assert repo.get("missing") is None


def test_insert_and_load_round_trip(repo):
    first = _record()
    second = _record("/sdcard/DCIM/IMG_2.jpg", thumbnail=None, make="", model="")

    assert repo.insert(first) == 1
    assert repo.insert(second) == 2

    assert repo.load_all() == [first, second]


def test_longitude_ref_is_kept(repo):
    repo.insert(_record(longitude_ref="E", longitude=79.9))
    assert repo.load_all()[0].longitude_ref == "E"


def test_get_returns_latest_for_identifier(repo):
    repo.insert(_record(time="10:00:00"))
    repo.insert(_record(time="11:00:00"))
    assert repo.get("/sdcard/DCIM/IMG_1.jpg").time == "11:00:00"


def test_delete_all(repo):
    repo.insert(_record("a"))
    repo.insert(_record("b"))
    assert repo.delete_all() == 2
    assert repo.load_all() == []
    assert repo.delete_all() == 0


def test_listeners_notified_on_change(repo):
    calls = []
    repo.add_listener(lambda: calls.append("changed"))
    repo.insert(_record())
    repo.delete_all()
    repo.load_all()
    assert calls == ["changed", "changed"]


def test_data_survives_reopen(tmp_path):
    path = tmp_path / "nested" / "photos.db"
    repo = SqlitePhotoRepository(path)
    repo.insert(_record())
    repo.close()

    reopened = SqlitePhotoRepository(path)
    try:
        assert reopened.load_all() == [_record()]
    finally:
        reopened.close()


def test_version_mismatch_drops_table(tmp_path):
    path = tmp_path / "photos.db"
    conn = sqlite3.connect(path)
    conn.execute("CREATE TABLE photo (_id INTEGER PRIMARY KEY, legacy TEXT)")
    conn.execute("INSERT INTO photo (legacy) VALUES ('old row')")
    conn.execute(f"PRAGMA user_version = {DATABASE_VERSION + 1}")
    conn.commit()
    conn.close()

    repo = SqlitePhotoRepository(path)
    try:
        assert repo.load_all() == []
        repo.insert(_record())
        assert len(repo.load_all()) == 1
    finally:
        repo.close()

    conn = sqlite3.connect(path)
    assert conn.execute("PRAGMA user_version").fetchone()[0] == DATABASE_VERSION
    conn.close()
