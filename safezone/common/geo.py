"""
Geographic utilities for SafeZone.

This module provides geographic calculations including
great-circle distance, coordinate validation, jurisdiction
bounds checks and polygon anchor points.
"""

import math
from typing import List, Sequence, Tuple

# 지구 반지름 (킬로미터)
EARTH_RADIUS_KM = 6371.0

def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    두 지점 간의 Haversine 거리를 계산합니다 (킬로미터).

    Args:
        lat1: 첫 번째 지점의 위도
        lon1: 첫 번째 지점의 경도
        lat2: 두 번째 지점의 위도
        lon2: 두 번째 지점의 경도

    Returns:
        두 지점 간의 거리 (킬로미터)
    """
    # 도를 라디안으로 변환
    lat1_rad = math.radians(lat1)
    lon1_rad = math.radians(lon1)
    lat2_rad = math.radians(lat2)
    lon2_rad = math.radians(lon2)

    # 위도와 경도의 차이
    dlat = lat2_rad - lat1_rad
    dlon = lon2_rad - lon1_rad

    # Haversine 공식
    a = (math.sin(dlat / 2) ** 2 +
         math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon / 2) ** 2)
    # 부동소수점 오차로 1을 살짝 넘는 경우 방지
    c = 2 * math.asin(math.sqrt(min(1.0, a)))

    return c * EARTH_RADIUS_KM

def validate_coordinates(lat: float, lon: float) -> bool:
    """
    좌표가 유효한지 확인합니다.

    NaN/inf는 모든 비교에서 거짓이 되므로 명시적으로 거부합니다.

    Args:
        lat: 위도
        lon: 경도

    Returns:
        좌표가 유효하면 True
    """
    if not (math.isfinite(lat) and math.isfinite(lon)):
        return False
    return -90 <= lat <= 90 and -180 <= lon <= 180

def within_bounds(lat: float, lon: float, *, north: float, south: float,
                  east: float, west: float) -> bool:
    """
    좌표가 경계 사각형 안에 있는지 확인합니다 (경계 포함).

    Args:
        lat: 위도
        lon: 경도
        north: 북쪽 경계 위도
        south: 남쪽 경계 위도
        east: 동쪽 경계 경도
        west: 서쪽 경계 경도

    Returns:
        유한한 좌표이고 사각형 안에 있으면 True
    """
    if not (math.isfinite(lat) and math.isfinite(lon)):
        return False
    return south <= lat <= north and west <= lon <= east

def polygon_centroid(ring: Sequence[Sequence[float]]) -> Tuple[float, float]:
    """
    폴리곤 링의 대표점(꼭짓점 평균)을 계산합니다.

    GeoJSON 순서 [경도, 위도]를 따르며, 닫는 꼭짓점(첫 점과 동일)은 제외합니다.

    Args:
        ring: 폴리곤의 꼭짓점들 [[경도, 위도], ...]

    Returns:
        (위도, 경도)

    Raises:
        ValueError: 꼭짓점이 없는 경우
    """
    points: List[Tuple[float, float]] = [(float(p[0]), float(p[1])) for p in ring]
    if len(points) > 1 and points[0] == points[-1]:
        points = points[:-1]
    if not points:
        raise ValueError("empty polygon ring")

    lon = sum(p[0] for p in points) / len(points)
    lat = sum(p[1] for p in points) / len(points)
    return lat, lon
