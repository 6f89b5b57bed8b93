from __future__ import annotations

import pytest

from concrete_ops.common.geo import Geofence, ShopLocation, format_distance, haversine_meters

SHOP = ShopLocation(name="Shop", latitude=33.97121, longitude=-84.18066)


def test_haversine_zero_and_known_distance():
    assert haversine_meters(SHOP.latitude, SHOP.longitude, SHOP.latitude, SHOP.longitude) == 0
    # one degree of latitude is roughly 111.2 km
    assert haversine_meters(0, 0, 1, 0) == pytest.approx(111_195, rel=1e-3)


@pytest.mark.parametrize(
    "meters, expected",
    [(0, "0m"), (42.4, "42m"), (999.4, "999m"), (1000, "1.00km"), (2345.6, "2.35km")],
)
def test_format_distance(meters, expected):
    assert format_distance(meters) == expected


def test_within_radius_is_inclusive():
    fence = Geofence(SHOP, allowed_radius_meters=100)
    assert fence.check(SHOP.latitude, SHOP.longitude).is_within_range
    assert not fence.check(SHOP.latitude + 0.01, SHOP.longitude).is_within_range


def test_bypass_accepts_anywhere():
    fence = Geofence(SHOP, allowed_radius_meters=100, bypass=True)
    assert fence.check(0.0, 0.0).is_within_range
