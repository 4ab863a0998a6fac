"""
Device music scanner tests

WAV files are written with the standard wave module; mutagen reads their
duration. Untagged files fall back to the file name for the title.
"""

from __future__ import annotations

import wave
from pathlib import Path

from models.wear_messages import LibraryItemType


def _write_wav(path: Path, seconds: float) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    frame_rate = 8000
    with wave.open(str(path), "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(2)
        wav.setframerate(frame_rate)
        wav.writeframes(b"\x00\x00" * int(frame_rate * seconds))


def test_scan_sorts_by_title_case_insensitive(tmp_path: Path):
    from services.device_library import DeviceMusicScanner

    _write_wav(tmp_path / "music" / "beta.wav", 1.0)
    _write_wav(tmp_path / "music" / "Alpha.wav", 0.5)
    _write_wav(tmp_path / "music" / "nested" / "charlie.wav", 0.25)

    songs = DeviceMusicScanner([str(tmp_path / "music")]).scan()

    assert [song.title for song in songs] == ["Alpha", "beta", "charlie"]
    assert songs[0].duration_ms == 500
    assert all(song.song_id.startswith("device:") for song in songs)
    assert len({song.song_id for song in songs}) == 3


def test_zero_length_and_unreadable_files_are_skipped(tmp_path: Path):
    from services.device_library import DeviceMusicScanner

    _write_wav(tmp_path / "silent.wav", 0)
    _write_wav(tmp_path / "ok.wav", 0.1)
    (tmp_path / "broken.mp3").write_bytes(b"not audio at all")
    (tmp_path / "notes.txt").write_text("ignore me")

    songs = DeviceMusicScanner([str(tmp_path)]).scan()

    assert [song.title for song in songs] == ["ok"]


def test_missing_directory_yields_nothing(tmp_path: Path):
    from services.device_library import DeviceMusicScanner

    assert DeviceMusicScanner([str(tmp_path / "missing")]).scan() == []


def test_songs_map_to_song_items(tmp_path: Path):
    from services.device_library import DeviceMusicScanner, to_library_items

    _write_wav(tmp_path / "track.wav", 0.2)

    items = to_library_items(DeviceMusicScanner([str(tmp_path)]).scan())

    assert len(items) == 1
    assert items[0].type == LibraryItemType.SONG
    assert items[0].title == "track"
    assert items[0].id.startswith("device:")
