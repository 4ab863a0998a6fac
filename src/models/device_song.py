"""
Device song data model
"""

from dataclasses import dataclass


@dataclass
class DeviceSong:
    """Audio file stored on the local device"""

    song_id: str
    title: str
    artist: str
    album: str
    duration_ms: int
    file_path: str
