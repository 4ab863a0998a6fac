"""
Album data model
"""

from dataclasses import dataclass


@dataclass
class Album:
    """
    Album data model
    """

    id: int
    title: str = ""
    artist: str = ""
    song_count: int = 0

    @classmethod
    def from_row(cls, row: dict) -> 'Album':
        """Create Album object from a catalog row"""
        return cls(
            id=int(row['id']),
            title=row.get('title') or '',
            artist=row.get('artist_name') or '',
            song_count=row.get('song_count') or 0,
        )
