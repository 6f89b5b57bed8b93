"""Shop geofence used to verify clock-in/clock-out locations."""
from __future__ import annotations

import math
from dataclasses import dataclass

from ..core.constants import DEFAULT_ALLOWED_RADIUS_METERS, EARTH_RADIUS_METERS


@dataclass(frozen=True)
class ShopLocation:
    name: str
    latitude: float
    longitude: float


@dataclass(frozen=True)
class LocationCheck:
    is_within_range: bool
    distance: float
    distance_formatted: str


def haversine_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


def format_distance(meters: float) -> str:
    if meters < 1000:
        return f"{round(meters)}m"
    return f"{meters / 1000:.2f}km"


class Geofence:
    def __init__(
        self,
        shop: ShopLocation,
        *,
        allowed_radius_meters: float = DEFAULT_ALLOWED_RADIUS_METERS,
        bypass: bool = False,
    ):
        self.shop = shop
        self.allowed_radius_meters = float(allowed_radius_meters)
        self._bypass = bool(bypass)

    def check(self, latitude: float, longitude: float) -> LocationCheck:
        if self._bypass:
            return LocationCheck(is_within_range=True, distance=0.0, distance_formatted="0m (bypassed)")

        distance = haversine_meters(latitude, longitude, self.shop.latitude, self.shop.longitude)
        return LocationCheck(
            is_within_range=distance <= self.allowed_radius_meters,
            distance=distance,
            distance_formatted=format_distance(distance),
        )
