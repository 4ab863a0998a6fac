"""
User playlist data model
"""

from dataclasses import dataclass, field
from typing import List


@dataclass
class UserPlaylist:
    """
    User playlist

    song_ids is the authoritative play order; it may reference songs that
    no longer exist in the catalog.
    """

    id: str
    name: str = ""
    song_ids: List[str] = field(default_factory=list)

    @property
    def song_count(self) -> int:
        return len(self.song_ids)
