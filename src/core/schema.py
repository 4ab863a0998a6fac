"""
Database Schema Definitions

Contains the music catalog table structure and index definitions.
"""

from __future__ import annotations

# Table structure SQL statements
TABLE_STATEMENTS = [
    # Artists table
    """
    CREATE TABLE IF NOT EXISTS artists (
        id INTEGER PRIMARY KEY,
        name TEXT NOT NULL
    )
    """,

    # Albums table
    """
    CREATE TABLE IF NOT EXISTS albums (
        id INTEGER PRIMARY KEY,
        title TEXT NOT NULL,
        artist_id INTEGER,
        artist_name TEXT,
        FOREIGN KEY (artist_id) REFERENCES artists(id) ON DELETE SET NULL
    )
    """,

    # Songs table
    """
    CREATE TABLE IF NOT EXISTS songs (
        id INTEGER PRIMARY KEY,
        title TEXT NOT NULL,
        artist_id INTEGER,
        artist_name TEXT,
        album_artist TEXT,
        album_id INTEGER,
        album_name TEXT,
        track_number INTEGER,
        duration_ms INTEGER DEFAULT 0,
        file_path TEXT,
        is_favorite INTEGER DEFAULT 0,
        date_added TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        FOREIGN KEY (artist_id) REFERENCES artists(id) ON DELETE SET NULL,
        FOREIGN KEY (album_id) REFERENCES albums(id) ON DELETE SET NULL
    )
    """,

    # User playlists table
    """
    CREATE TABLE IF NOT EXISTS user_playlists (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,

    # Playlist-song relation table; song_id is not a foreign key so
    # playlists keep ids of songs that were removed from the catalog
    """
    CREATE TABLE IF NOT EXISTS playlist_songs (
        playlist_id TEXT NOT NULL,
        song_id TEXT NOT NULL,
        position INTEGER NOT NULL,
        PRIMARY KEY (playlist_id, position),
        FOREIGN KEY (playlist_id) REFERENCES user_playlists(id) ON DELETE CASCADE
    )
    """,
]

# Index SQL statements
INDEX_STATEMENTS = [
    "CREATE INDEX IF NOT EXISTS idx_songs_album ON songs(album_id)",
    "CREATE INDEX IF NOT EXISTS idx_songs_artist ON songs(artist_id)",
    "CREATE INDEX IF NOT EXISTS idx_songs_favorite ON songs(is_favorite)",
    "CREATE INDEX IF NOT EXISTS idx_playlist_songs_playlist ON playlist_songs(playlist_id)",
]


def get_all_schema_statements() -> list[str]:
    """Get all schema statements (tables + indexes)"""
    return TABLE_STATEMENTS + INDEX_STATEMENTS
