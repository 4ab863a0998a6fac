"""
Artist data model
"""

from dataclasses import dataclass


@dataclass
class Artist:
    """
    Artist data model
    """

    id: int
    name: str = ""
    song_count: int = 0

    @classmethod
    def from_row(cls, row: dict) -> 'Artist':
        """Create Artist object from a catalog row"""
        return cls(
            id=int(row['id']),
            name=row.get('name') or '',
            song_count=row.get('song_count') or 0,
        )
