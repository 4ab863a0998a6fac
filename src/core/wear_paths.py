"""
Wear Data Layer Paths

Shared constants for the message and data-item addresses used between the
phone and the watch.
"""


class WearDataPaths:
    """Logical addresses and data-map keys"""

    # Data item path for player state (phone -> watch)
    PLAYER_STATE = "/player_state"

    # Message path for playback commands (watch -> phone)
    PLAYBACK_COMMAND = "/playback_command"

    # Message path for volume commands (watch -> phone)
    VOLUME_COMMAND = "/volume_command"

    # Message paths for library browsing
    BROWSE_REQUEST = "/browse_request"
    BROWSE_RESPONSE = "/browse_response"

    # Keys within the player state data item
    KEY_ALBUM_ART = "album_art"
    KEY_STATE_JSON = "state_json"
    KEY_TIMESTAMP = "timestamp"  # only used to force delivery of identical payloads
