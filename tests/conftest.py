"""
Test Configuration File

Unified setup for Python path, avoiding sys.path.insert in each test file.
Provides the QApplication fixture required for PyQt6 tests and shared fakes
for the media controller, the system volume and the catalog database.
"""

import os
import sys
from concurrent.futures import Future
from pathlib import Path

import pytest

# Headless environments have no display; use Qt's offscreen platform
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

# Add the src directory to the Python path
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))


@pytest.fixture(scope="session")
def qapp():
    """
    Create QApplication for all tests.

    Uses session scope to avoid creating multiple QApplication instances.
    """
    from PyQt6.QtWidgets import QApplication

    # Check if a QApplication instance already exists
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app


class FakeMediaController:
    """Records every call made on it"""

    def __init__(self):
        self.calls = []
        self.is_connected = True
        self.is_playing = False
        self.release_count = 0

    def play(self):
        self.calls.append(("play",))
        self.is_playing = True

    def pause(self):
        self.calls.append(("pause",))
        self.is_playing = False

    def seek_to_next(self):
        self.calls.append(("seek_to_next",))

    def seek_to_previous(self):
        self.calls.append(("seek_to_previous",))

    def set_media_items(self, items, start_index, start_position_ms):
        self.calls.append(("set_media_items", [song.id for song in items], start_index, start_position_ms))

    def prepare(self):
        self.calls.append(("prepare",))

    def send_custom_command(self, command):
        self.calls.append(("custom", command))

    def release(self):
        self.release_count += 1


class ControllerFactory:
    """
    Controller builder whose futures the test completes by hand

    auto_complete=True resolves every build immediately with a new controller.
    """

    def __init__(self, auto_complete: bool = False):
        self.auto_complete = auto_complete
        self.futures = []
        self.controllers = []

    @property
    def build_calls(self) -> int:
        return len(self.futures)

    def __call__(self) -> Future:
        future: Future = Future()
        self.futures.append(future)
        if self.auto_complete:
            self.complete(future)
        return future

    def complete(self, future: Future = None) -> FakeMediaController:
        controller = FakeMediaController()
        self.controllers.append(controller)
        (future or self.futures[-1]).set_result(controller)
        return controller

    def fail(self, error: Exception) -> None:
        self.futures[-1].set_exception(error)


class FakeVolumeService:
    """System volume with 15 steps"""

    def __init__(self, level: int = 5, max_volume: int = 15):
        self.level = level
        self.max_volume = max_volume
        self.adjustments = []

    def get_max_volume(self) -> int:
        return self.max_volume

    def get_volume(self) -> int:
        return self.level

    def set_volume(self, level: int) -> None:
        self.level = level

    def adjust_volume(self, steps: int) -> None:
        self.adjustments.append(steps)
        self.level = max(0, min(self.max_volume, self.level + steps))


def seed_catalog(db) -> None:
    """
    Small catalog:
        artists 1 (Beta Band), 2 (Alpha)
        album 10 "Zebra" by Beta Band: songs 1 (track 2), 2 (track 1)
        album 11 "apple" by Alpha: songs 3, 4
        favorites: 2, 4
        playlist "p1" = [3, 1, 4]
    """
    db.execute("INSERT INTO artists (id, name) VALUES (1, 'Beta Band')")
    db.execute("INSERT INTO artists (id, name) VALUES (2, 'Alpha')")
    db.execute("INSERT INTO albums (id, title, artist_id, artist_name) VALUES (10, 'Zebra', 1, 'Beta Band')")
    db.execute("INSERT INTO albums (id, title, artist_id, artist_name) VALUES (11, 'apple', 2, 'Alpha')")
    songs = [
        (1, "Second", 1, "Beta Band", 10, "Zebra", 2, 0),
        (2, "First", 1, "Beta Band", 10, "Zebra", 1, 1),
        (3, "Red", 2, "Alpha", 11, "apple", 1, 0),
        (4, "Green", 2, "Alpha", 11, "apple", 2, 1),
    ]
    for song_id, title, artist_id, artist, album_id, album, track, favorite in songs:
        db.insert("songs", {
            "id": song_id,
            "title": title,
            "artist_id": artist_id,
            "artist_name": artist,
            "album_id": album_id,
            "album_name": album,
            "track_number": track,
            "duration_ms": 180_000,
            "is_favorite": favorite,
        })
    db.execute("INSERT INTO user_playlists (id, name) VALUES ('p1', 'Mix')")
    for position, song_id in enumerate(["3", "1", "4"]):
        db.insert("playlist_songs", {"playlist_id": "p1", "song_id": song_id, "position": position})


@pytest.fixture
def catalog_db(tmp_path):
    from core.database import DatabaseManager

    db = DatabaseManager(str(tmp_path / "catalog.db"))
    seed_catalog(db)
    yield db
    db.close()


@pytest.fixture
def browse_adapter(catalog_db):
    from services.browse_catalog import BrowseCatalogAdapter
    from services.catalog_service import SqliteMusicCatalog, SqlitePlaylistStore

    return BrowseCatalogAdapter(SqliteMusicCatalog(catalog_db), SqlitePlaylistStore(catalog_db))


@pytest.fixture
def main_thread():
    from core.main_thread import MainThreadExecutor

    executor = MainThreadExecutor()
    yield executor
    executor.shutdown()


@pytest.fixture
def controller_factory():
    return ControllerFactory()


@pytest.fixture
def volume_service():
    return FakeVolumeService()


@pytest.fixture
def seed():
    """Seeds a DatabaseManager with the small catalog above"""
    return seed_catalog
