"""
Nearest-feature lookups for SafeZone.

Linear nearest-anchor search over zones and responder posts.
"""

from typing import Optional, Sequence, Tuple
from .models import GeoPoint, ResponderPost, SafetyZone
from safezone.common.geo import haversine_distance

def _distance(a: GeoPoint, b: GeoPoint) -> float:
    return haversine_distance(a.latitude, a.longitude, b.latitude, b.longitude)

def find_nearest_zone(point: GeoPoint,
                      zones: Sequence[SafetyZone],
                      max_distance_km: Optional[float] = None) -> Optional[Tuple[SafetyZone, float]]:
    """
    좌표에서 가장 가까운 안전 구역을 찾습니다.

    동일 거리일 경우 먼저 나온 구역을 반환합니다.

    Args:
        point: 기준 좌표
        zones: 후보 구역 목록
        max_distance_km: 최대 허용 거리 (None이면 제한 없음)

    Returns:
        (구역, 거리 km) 또는 후보가 없으면 None
    """
    best: Optional[Tuple[SafetyZone, float]] = None

    for zone in zones:
        d = _distance(point, zone.anchor)
        if best is None or d < best[1]:
            best = (zone, d)

    if best is None:
        return None
    if max_distance_km is not None and best[1] > max_distance_km:
        return None
    return best

def find_nearest_post(point: GeoPoint,
                      posts: Sequence[ResponderPost]) -> Optional[Tuple[ResponderPost, float]]:
    """
    좌표에서 가장 가까운 대응 거점을 찾습니다.

    Args:
        point: 기준 좌표
        posts: 대응 거점 목록

    Returns:
        (거점, 거리 km) 또는 거점이 없으면 None
    """
    best: Optional[Tuple[ResponderPost, float]] = None

    for post in posts:
        d = _distance(point, post.location)
        if best is None or d < best[1]:
            best = (post, d)

    return best
