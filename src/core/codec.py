"""
Wear Message Codec

Serializes typed message payloads to UTF-8 JSON bytes and back.

Decoding ignores unknown fields so an older phone can talk to a newer watch,
and never raises anything but DecodeError: the caller logs it and drops the
message.
"""

from __future__ import annotations

import json
from typing import Optional, Type, TypeVar, Union

from core.errors import DecodeError
from models.wear_messages import (
    BrowseRequest,
    BrowseResponse,
    PlaybackCommand,
    PlayerStateSnapshot,
    VolumeCommand,
)


Message = Union[PlaybackCommand, VolumeCommand, BrowseRequest, BrowseResponse, PlayerStateSnapshot]
T = TypeVar("T", PlaybackCommand, VolumeCommand, BrowseRequest, BrowseResponse, PlayerStateSnapshot)


class WearCodec:
    """
    JSON codec for wear messages

    Usage example:
        codec = WearCodec()
        data = codec.encode(BrowseRequest("r1", BrowseType.ROOT))
        request = codec.decode(data, BrowseRequest)
    """

    ENCODING = "utf-8"

    def encode(self, value: Message) -> bytes:
        """Encode a message to bytes"""
        return json.dumps(value.to_dict(), ensure_ascii=False, separators=(",", ":")).encode(self.ENCODING)

    def decode(self, data: bytes, message_type: Type[T]) -> T:
        """
        Decode bytes into a message of the given type

        Raises:
            DecodeError: payload is not valid UTF-8 JSON, is not an object,
                is nested too deeply, misses a required field or carries a value
                of the wrong type.
        """
        try:
            payload = json.loads(bytes(data).decode(self.ENCODING))
        except (TypeError, ValueError, RecursionError) as e:
            raise DecodeError(f"Malformed {message_type.__name__} payload: {e}") from e

        if not isinstance(payload, dict):
            raise DecodeError(f"{message_type.__name__} payload must be a JSON object")

        try:
            return message_type.from_dict(payload)
        except KeyError as e:
            raise DecodeError(f"{message_type.__name__} is missing field {e}") from e
        except (TypeError, ValueError) as e:
            raise DecodeError(f"Invalid {message_type.__name__}: {e}") from e

    def encode_player_state(self, snapshot: Optional[PlayerStateSnapshot]) -> str:
        """Encode the state JSON string; None yields the empty cleared marker"""
        if snapshot is None:
            return ""
        return json.dumps(snapshot.to_dict(), ensure_ascii=False, separators=(",", ":"))

    def decode_player_state(
        self,
        state_json: str,
        cover_image: Optional[bytes] = None,
    ) -> Optional[PlayerStateSnapshot]:
        """Decode the state JSON string; the empty marker yields None"""
        if not state_json:
            return None
        snapshot = self.decode(state_json.encode(self.ENCODING), PlayerStateSnapshot)
        snapshot.cover_image = cover_image
        return snapshot
