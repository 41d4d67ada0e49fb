"""Tests for shared time and distance utilities."""

import pytest

from barbershop.utils import add_minutes, distance_km, minutes_to_time, time_to_minutes

BOGOTA = (4.6097, -74.0817)
MEDELLIN = (6.2057, -75.5670)
CALI = (3.4516, -76.5320)


class TestTimeToMinutes:
    def test_opening_time(self):
        assert time_to_minutes("08:00") == 480

    def test_closing_time(self):
        assert time_to_minutes("20:00") == 1200

    def test_midnight(self):
        assert time_to_minutes("00:00") == 0

    def test_last_minute_of_day(self):
        assert time_to_minutes("23:59") == 1439

    def test_malformed_input_raises(self):
        with pytest.raises(ValueError):
            time_to_minutes("ten am")


class TestAddMinutes:
    def test_one_hour(self):
        assert add_minutes("09:00", 60) == "10:00"

    def test_carries_into_next_hour(self):
        assert add_minutes("10:45", 30) == "11:15"

    def test_zero_minutes(self):
        assert add_minutes("14:30", 0) == "14:30"

    def test_wraps_past_midnight(self):
        assert add_minutes("23:50", 20) == "00:10"

    def test_output_is_zero_padded(self):
        assert add_minutes("08:05", 0) == "08:05"

    def test_minutes_to_time_wraps(self):
        assert minutes_to_time(1440 + 75) == "01:15"


class TestDistanceKm:
    def test_identical_points_are_zero(self):
        assert distance_km(*BOGOTA, *BOGOTA) == 0

    def test_symmetric(self):
        assert distance_km(*BOGOTA, *MEDELLIN) == pytest.approx(distance_km(*MEDELLIN, *BOGOTA))

    def test_bogota_to_medellin(self):
        # Roughly 240 km as the crow flies
        assert 230 < distance_km(*BOGOTA, *MEDELLIN) < 250

    def test_triangle_inequality(self):
        direct = distance_km(*BOGOTA, *CALI)
        via_medellin = distance_km(*BOGOTA, *MEDELLIN) + distance_km(*MEDELLIN, *CALI)
        assert direct <= via_medellin + 1e-9

    def test_one_degree_of_latitude(self):
        assert distance_km(0, 0, 1, 0) == pytest.approx(111.19, abs=0.01)
