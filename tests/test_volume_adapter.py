"""
Volume adapter tests
"""

import pytest

from models.wear_messages import VolumeCommand, VolumeDirection
from services.volume_adapter import VolumeAdapter, scale_percent


@pytest.mark.parametrize("value,device_max,expected", [
    (50, 15, 8),    # 7.5 rounds up
    (10, 15, 2),    # 1.5 rounds up
    (0, 15, 0),
    (100, 15, 15),
    (33, 30, 10),   # 9.9
    (50, 0, 0),
])
def test_scale_percent(value, device_max, expected):
    assert scale_percent(value, device_max) == expected


class TestVolumeAdapter:
    """Volume command application"""

    def test_absolute_value_sets_scaled_level(self, volume_service):
        VolumeAdapter(volume_service).apply(VolumeCommand(value=50))

        assert volume_service.level == 8
        assert volume_service.adjustments == []

    def test_value_overrides_direction(self, volume_service):
        VolumeAdapter(volume_service).apply(VolumeCommand(direction=VolumeDirection.DOWN, value=100))

        assert volume_service.level == 15
        assert volume_service.adjustments == []

    def test_direction_adjusts_one_step(self, volume_service):
        adapter = VolumeAdapter(volume_service)

        adapter.apply(VolumeCommand(direction=VolumeDirection.UP))
        adapter.apply(VolumeCommand(direction=VolumeDirection.DOWN))
        adapter.apply(VolumeCommand(direction=VolumeDirection.DOWN))

        assert volume_service.adjustments == [1, -1, -1]
        assert volume_service.level == 4

    def test_empty_command_is_noop(self, volume_service):
        VolumeAdapter(volume_service).apply(VolumeCommand())

        assert volume_service.level == 5
        assert volume_service.adjustments == []
