"""
Volume Adapter Module

Applies watch volume commands to the system media volume.
"""

import logging

from app.protocols import IVolumeService
from models.wear_messages import VolumeCommand, VolumeDirection

logger = logging.getLogger(__name__)


def scale_percent(value: int, device_max: int) -> int:
    """
    Map a 0..100 percentage onto 0..device_max

    Halves round up: 50% of 15 steps is 8.
    """
    if device_max <= 0:
        return 0
    target = (value * device_max * 2 + 100) // 200
    return max(0, min(device_max, target))


class VolumeAdapter:
    """
    Volume Adapter

    An absolute value overrides the direction. No feedback is returned; the
    watch sees the result in the next published player state.
    """

    def __init__(self, volume_service: IVolumeService):
        self._volume = volume_service

    def apply(self, command: VolumeCommand) -> None:
        """Apply a volume command"""
        if command.value is not None:
            device_max = self._volume.get_max_volume()
            target = scale_percent(command.value, device_max)
            logger.debug("Setting volume to %d/%d (%d%%)", target, device_max, command.value)
            self._volume.set_volume(target)
        elif command.direction == VolumeDirection.UP:
            self._volume.adjust_volume(1)
        elif command.direction == VolumeDirection.DOWN:
            self._volume.adjust_volume(-1)
        else:
            logger.debug("Ignoring empty volume command")
