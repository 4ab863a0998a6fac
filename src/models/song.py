"""
Song data model
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Song:
    """
    Song data model

    Catalog songs carry numeric ids; the id is kept as a string because it
    travels on the wire and is compared against playlist id lists.
    """

    id: str
    title: str = ""
    artist_name: str = ""
    album_artist: str = ""
    album_name: str = ""
    artist_id: Optional[int] = None
    album_id: Optional[int] = None
    track_number: Optional[int] = None
    duration_ms: int = 0
    file_path: str = ""
    is_favorite: bool = False

    @property
    def display_artist(self) -> str:
        """Artist shown under the title"""
        return self.artist_name or self.album_artist

    @classmethod
    def from_row(cls, row: dict) -> 'Song':
        """Create Song object from a catalog row"""
        return cls(
            id=str(row['id']),
            title=row.get('title') or '',
            artist_name=row.get('artist_name') or '',
            album_artist=row.get('album_artist') or '',
            album_name=row.get('album_name') or '',
            artist_id=row.get('artist_id'),
            album_id=row.get('album_id'),
            track_number=row.get('track_number'),
            duration_ms=row.get('duration_ms') or 0,
            file_path=row.get('file_path') or '',
            is_favorite=bool(row.get('is_favorite')),
        )
