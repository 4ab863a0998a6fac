"""
Device Library Module

Scans audio files stored on the device itself so they can be browsed next to
the phone's catalog.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional

from mutagen import File as MutagenFile

from models.device_song import DeviceSong
from models.wear_messages import LibraryItem, LibraryItemType

logger = logging.getLogger(__name__)


class DeviceMusicScanner:
    """
    Device Music Scanner

    Usage example:
        scanner = DeviceMusicScanner(["/sdcard/Music"])
        songs = scanner.scan()
    """

    SUPPORTED_FORMATS = {'.mp3', '.flac', '.wav', '.ogg', '.m4a',
                         '.aac', '.wma', '.ape', '.opus'}

    def __init__(self, directories: Iterable[str]):
        self._directories = [Path(d) for d in directories]

    def scan(self) -> List[DeviceSong]:
        """
        Scan all directories

        Returns:
            Playable songs sorted by title, case-insensitive. Files that cannot
            be parsed or report no duration are skipped.
        """
        songs = []
        for file_path in self._iter_audio_files():
            song = self._read_song(file_path, len(songs) + 1)
            if song is not None:
                songs.append(song)

        songs.sort(key=lambda s: s.title.casefold())
        logger.info("Found %d songs on device", len(songs))
        return songs

    def _iter_audio_files(self):
        for directory in self._directories:
            if not directory.is_dir():
                logger.warning("Device music directory does not exist: %s", directory)
                continue
            for file_path in sorted(directory.rglob("*")):
                if file_path.is_file() and file_path.suffix.lower() in self.SUPPORTED_FORMATS:
                    yield file_path

    @staticmethod
    def _read_song(file_path: Path, number: int) -> Optional[DeviceSong]:
        try:
            audio = MutagenFile(str(file_path), easy=True)
        except Exception as e:
            logger.debug("Parsing failed: %s, Error: %s", file_path, e)
            return None

        if audio is None or audio.info is None:
            return None

        duration_ms = int(audio.info.length * 1000)
        if duration_ms <= 0:
            return None

        return DeviceSong(
            song_id=f"device:{number}",
            title=_first_tag(audio, 'title').strip() or file_path.stem,
            artist=_first_tag(audio, 'artist'),
            album=_first_tag(audio, 'album'),
            duration_ms=duration_ms,
            file_path=str(file_path),
        )


def _first_tag(audio, key: str) -> str:
    tags = getattr(audio, 'tags', None)
    if not tags or not hasattr(tags, 'get'):
        return ''
    values = tags.get(key) or ['']
    return str(values[0])


def to_library_items(songs: Iterable[DeviceSong]) -> List[LibraryItem]:
    """Map device songs to browse items"""
    return [
        LibraryItem(id=song.song_id, title=song.title, subtitle=song.artist, type=LibraryItemType.SONG)
        for song in songs
    ]
