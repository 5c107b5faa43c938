"""
Tests for fly-to camera journeys and presets.
"""

import math

import pytest

from spatial_core.journey import CAMERA_PRESETS, CameraJourney, CameraPose


def _dist(a, b):
    return math.sqrt(sum((x - y) ** 2 for x, y in zip(a, b)))


class TestCameraJourney:
    def test_fly_to_keeps_distance_along_view_direction(self):
        journey = CameraJourney()
        end = journey.fly_to((10.0, 0.0, 0.0))

        assert end.look_at == (10.0, 0.0, 0.0)
        assert _dist(end.position, end.look_at) == pytest.approx(15.0)
        # Same direction as the starting view ray
        start_dir = [p - t for p, t in zip((0.0, 30.0, 40.0), (10.0, 0.0, 0.0))]
        end_dir = [p - t for p, t in zip(end.position, end.look_at)]
        cross = (
            start_dir[1] * end_dir[2] - start_dir[2] * end_dir[1],
            start_dir[2] * end_dir[0] - start_dir[0] * end_dir[2],
            start_dir[0] * end_dir[1] - start_dir[1] * end_dir[0],
        )
        assert cross == pytest.approx((0.0, 0.0, 0.0), abs=1e-9)

    def test_flight_progress_and_arrival(self):
        arrivals = []
        journey = CameraJourney(duration=1.5, on_arrival=lambda: arrivals.append(True))
        start = journey.pose
        end = journey.fly_to((10.0, 0.0, 0.0))

        mid = journey.advance(0.75)
        assert journey.is_transitioning
        halfway = tuple((a + b) / 2 for a, b in zip(start.position, end.position))
        assert mid.position == pytest.approx(halfway)

        final = journey.advance(1.0)
        assert final == end
        assert not journey.is_transitioning
        assert arrivals == [True]

        assert journey.advance(1.0) == end
        assert arrivals == [True]

    def test_fly_to_preset(self):
        journey = CameraJourney()
        journey.fly_to_preset("top")
        for _ in range(20):
            journey.advance(0.1)
        assert journey.pose == CAMERA_PRESETS["top"]

        with pytest.raises(KeyError):
            journey.fly_to_preset("nope")

    def test_auto_orbit_circles_target_when_idle(self):
        journey = CameraJourney(auto_orbit=True, orbit_speed=0.5)
        pose = journey.advance(1.0)

        assert pose.look_at == (0.0, 0.0, 0.0)
        assert pose.position[1] == pytest.approx(30.0)
        assert pose.position[0] == pytest.approx(40.0 * math.sin(0.5))
        assert pose.position[2] == pytest.approx(40.0 * math.cos(0.5))

    def test_target_at_camera_position(self):
        journey = CameraJourney(pose=CameraPose(position=(1.0, 2.0, 3.0), look_at=(0.0, 0.0, 0.0)), distance=5.0)
        assert journey.end_position_for((1.0, 2.0, 3.0)) == (1.0, 2.0, 8.0)
