"""
Catalog Service Module

SQLite-backed read-only catalog and playlist store consumed by the wear
browse adapter.
"""

from typing import List
import logging

from core.database import DatabaseManager
from models.album import Album
from models.artist import Artist
from models.song import Song
from models.user_playlist import UserPlaylist

logger = logging.getLogger(__name__)

_SONG_COLUMNS = """id, title, artist_id, artist_name, album_artist, album_id, album_name,
                   track_number, duration_ms, file_path, is_favorite"""


class SqliteMusicCatalog:
    """
    Music catalog over the local database

    Songs, albums and artists are keyed by numeric id. Every query returns a
    point-in-time list; concurrent reads from several threads are safe.

    Usage example:
        catalog = SqliteMusicCatalog(db)
        albums = catalog.get_all_albums()
        songs = catalog.get_songs_for_album(albums[0].id)
    """

    def __init__(self, db: DatabaseManager):
        self._db = db

    def get_all_songs(self) -> List[Song]:
        """Get all songs in insertion order"""
        rows = self._db.fetch_all(f"SELECT {_SONG_COLUMNS} FROM songs ORDER BY id")
        return [Song.from_row(row) for row in rows]

    def get_favorite_songs(self) -> List[Song]:
        """Get favorite songs in insertion order"""
        rows = self._db.fetch_all(
            f"SELECT {_SONG_COLUMNS} FROM songs WHERE is_favorite = 1 ORDER BY id"
        )
        return [Song.from_row(row) for row in rows]

    def get_all_albums(self) -> List[Album]:
        """Get all albums with their song counts"""
        rows = self._db.fetch_all(
            """SELECT a.id, a.title, a.artist_name,
                      (SELECT COUNT(*) FROM songs s WHERE s.album_id = a.id) AS song_count
               FROM albums a ORDER BY a.title COLLATE NOCASE, a.id"""
        )
        return [Album.from_row(row) for row in rows]

    def get_all_artists(self) -> List[Artist]:
        """Get all artists with their song counts"""
        rows = self._db.fetch_all(
            """SELECT ar.id, ar.name,
                      (SELECT COUNT(*) FROM songs s WHERE s.artist_id = ar.id) AS song_count
               FROM artists ar ORDER BY ar.name COLLATE NOCASE, ar.id"""
        )
        return [Artist.from_row(row) for row in rows]

    def get_songs_for_album(self, album_id: int) -> List[Song]:
        """Get album songs in track order"""
        rows = self._db.fetch_all(
            f"""SELECT {_SONG_COLUMNS} FROM songs WHERE album_id = ?
                ORDER BY COALESCE(track_number, 0), id""",
            (album_id,)
        )
        return [Song.from_row(row) for row in rows]

    def get_songs_for_artist(self, artist_id: int) -> List[Song]:
        """Get artist songs"""
        rows = self._db.fetch_all(
            f"""SELECT {_SONG_COLUMNS} FROM songs WHERE artist_id = ?
                ORDER BY album_name COLLATE NOCASE, COALESCE(track_number, 0), id""",
            (artist_id,)
        )
        return [Song.from_row(row) for row in rows]

    def get_songs_by_ids(self, song_ids: List[str]) -> List[Song]:
        """
        Bulk fetch songs by id

        The result order is unspecified; callers that need a particular
        order must project it themselves.
        """
        numeric_ids = sorted({int(song_id) for song_id in song_ids if str(song_id).isdigit()})
        songs: List[Song] = []
        # Stay well below SQLite's host parameter limit
        batch_size = 500
        for start in range(0, len(numeric_ids), batch_size):
            batch = numeric_ids[start:start + batch_size]
            placeholders = ', '.join('?' for _ in batch)
            rows = self._db.fetch_all(
                f"SELECT {_SONG_COLUMNS} FROM songs WHERE id IN ({placeholders})",
                tuple(batch)
            )
            songs.extend(Song.from_row(row) for row in rows)
        return songs


class SqlitePlaylistStore:
    """User playlists over the local database"""

    def __init__(self, db: DatabaseManager):
        self._db = db

    def get_user_playlists(self) -> List[UserPlaylist]:
        """Get all user playlists with their ordered song ids"""
        playlist_rows = self._db.fetch_all(
            "SELECT id, name FROM user_playlists ORDER BY created_at, rowid"
        )
        song_rows = self._db.fetch_all(
            "SELECT playlist_id, song_id FROM playlist_songs ORDER BY playlist_id, position"
        )

        song_ids_by_playlist = {}
        for row in song_rows:
            song_ids_by_playlist.setdefault(row["playlist_id"], []).append(row["song_id"])

        return [
            UserPlaylist(
                id=row["id"],
                name=row["name"],
                song_ids=song_ids_by_playlist.get(row["id"], []),
            )
            for row in playlist_rows
        ]
