import math

import pytest

from routing import battery_consumption, distance, distance_between, eta


@pytest.fixture
def hub():
    # Central hub in Ho Chi Minh City
    return (10.7587229, 106.682131)


def test_distance_is_zero_for_identical_points(hub):
    assert distance(*hub, *hub) == 0.0
    assert distance(-33.8688, 151.2093, -33.8688, 151.2093) == 0.0


def test_distance_is_symmetric(hub):
    other = (10.7769, 106.7009)
    assert distance(*hub, *other) == pytest.approx(distance(*other, *hub))
    assert distance_between(hub, other) == pytest.approx(distance_between(other, hub))


def test_distance_one_degree_of_longitude_on_equator():
    """
    On the equator one degree of longitude is 2*pi*R/360.
    """
    expected = 6371 * math.pi / 180
    assert distance(0, 0, 0, 1) == pytest.approx(expected)


def test_distance_matches_known_city_pair():
    # Paris -> London is roughly 344 km as the crow flies
    assert distance(48.8566, 2.3522, 51.5074, -0.1278) == pytest.approx(343.5, abs=1.0)


def test_eta_rounds_up_to_whole_minutes():
    assert eta(50, 50) == 60
    assert eta(1, 50) == 2  # 1.2 minutes
    assert eta(25) == 30  # default 50 km/h


def test_eta_zero_distance():
    assert eta(0, 50) == 0


@pytest.mark.parametrize("speed", [0, -10])
def test_eta_rejects_non_positive_speed(speed):
    with pytest.raises(ValueError):
        eta(5, speed)


def test_battery_consumption_linear_model():
    # 2% per km + 0.5% per kg
    assert battery_consumption(10, 2) == pytest.approx(21.0)
    assert battery_consumption(0, 0) == 0
    assert battery_consumption(0, 4) == pytest.approx(2.0)
