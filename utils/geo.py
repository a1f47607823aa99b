# 📦 utils/geo.py
# ─────────────────────────────
# Distance and travel-time estimates for the HTTP boundary

from math import radians, sin, cos, sqrt, atan2
from typing import Optional

from engine.similarity import round_half_up, to_number

WALKING_SPEED_KMH = 4.8
DRIVING_SPEED_KMH = 30.0
WALKING_RADIUS_KM = 5.0


def haversine_km(a_lat: float, a_lon: float, b_lat: float, b_lon: float) -> float:
    """Calculate haversine distance between two lat/lon points."""
    R = 6371.0
    φ1, φ2 = map(radians, (a_lat, b_lat))
    dφ, dλ = radians(b_lat - a_lat), radians(b_lon - a_lon)
    a = sin(dφ / 2)**2 + cos(φ1) * cos(φ2) * sin(dλ / 2)**2
    return R * 2 * atan2(sqrt(a), sqrt(1 - a))


def distance_km(a_lat, a_lon, b_lat, b_lon) -> Optional[float]:
    """Distance in km, or None if any coordinate is unknown."""
    coords = [to_number(v) for v in (a_lat, a_lon, b_lat, b_lon)]
    if any(c is None for c in coords):
        return None
    return haversine_km(*coords)


def approximate_travel_minutes(km: Optional[float]) -> Optional[int]:
    """Walk under WALKING_RADIUS_KM, otherwise drive through the city."""
    if km is None:
        return None
    speed = WALKING_SPEED_KMH if km < WALKING_RADIUS_KM else DRIVING_SPEED_KMH
    return round_half_up(km / speed * 60)
