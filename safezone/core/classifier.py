"""
Zone classification for SafeZone.

This module maps raw coordinates to a zone type with a base score
and a human-readable reason, using nearest-feature distance checks
against curated point sets plus a jurisdiction bounding box.

Rules are evaluated strictly in order; the first match wins:
jurisdiction > restricted > forest > city (safe) > moderate > unsafe.
"""

from datetime import datetime, timezone
from typing import Optional, Sequence
from .models import (
    CityAnchor, GeoPoint, LocationSafety, NamedArea, RegionBounds, ZoneClassification
)
from .regions import FOREST_ZONES, NORTHEAST_BOUNDS, NORTHEAST_CITIES, RESTRICTED_ZONES
from safezone.common.geo import haversine_distance, within_bounds

# 규칙별 기본 점수
SCORE_OUTSIDE_JURISDICTION = 0
SCORE_RESTRICTED = 20
SCORE_FOREST = 60
SCORE_SAFE_CITY = 90
SCORE_MODERATE = 70
SCORE_UNSAFE = 40

# 날씨 보정 단계 (앞 단계 우선)
WEATHER_PENALTIES = (
    (("heavy rain", "heavy-rain", "storm", "cyclone"), 30),
    (("snow", "hail"), 25),
    (("rain", "fog", "mist"), 15),
)

class ZoneClassifier:
    """좌표 기반 구역 분류기 (순수 함수, I/O 없음)"""

    def __init__(self,
                 bounds: RegionBounds = NORTHEAST_BOUNDS,
                 restricted: Sequence[NamedArea] = RESTRICTED_ZONES,
                 forests: Sequence[NamedArea] = FOREST_ZONES,
                 cities: Sequence[CityAnchor] = NORTHEAST_CITIES,
                 *,
                 restricted_radius_km: float = 10.0,
                 forest_radius_km: float = 5.0,
                 city_radius_km: float = 20.0,
                 moderate_radius_km: float = 50.0):
        """
        초기화합니다.

        Args:
            bounds: 관할 구역 경계
            restricted: 제한구역 목록 (등록 순서 = 우선순위)
            forests: 산림 보호구역 목록
            cities: 도시 기준점 목록
            restricted_radius_km: 제한구역 반경 (킬로미터)
            forest_radius_km: 산림 반경 (킬로미터)
            city_radius_km: 도시 반경 (킬로미터)
            moderate_radius_km: 보통 구역 판정용 최근접 도시 거리 (킬로미터)
        """
        self.bounds = bounds
        self.restricted = tuple(restricted)
        self.forests = tuple(forests)
        self.cities = tuple(cities)
        self.restricted_radius_km = restricted_radius_km
        self.forest_radius_km = forest_radius_km
        self.city_radius_km = city_radius_km
        self.moderate_radius_km = moderate_radius_km

    def classify(self, point: GeoPoint) -> ZoneClassification:
        """
        좌표를 구역 유형으로 분류합니다.

        Args:
            point: 분류할 좌표

        Returns:
            분류 결과 (예외를 발생시키지 않음)
        """
        lat, lon = point.latitude, point.longitude

        # 1. 관할 구역 검사 (NaN/inf 포함, 최우선)
        if not within_bounds(lat, lon, north=self.bounds.north, south=self.bounds.south,
                             east=self.bounds.east, west=self.bounds.west):
            return ZoneClassification(
                zone_type="restricted",
                score=SCORE_OUTSIDE_JURISDICTION,
                reason=f"Outside {self.bounds.name} jurisdiction",
            )

        # 2. 국경/제한구역
        for area in self.restricted:
            if self._distance(lat, lon, area.anchor) < self.restricted_radius_km:
                return ZoneClassification(
                    zone_type="restricted",
                    score=SCORE_RESTRICTED,
                    reason=area.description or f"Restricted area: {area.name}",
                )

        # 3. 산림/국립공원
        for forest in self.forests:
            if self._distance(lat, lon, forest.anchor) < self.forest_radius_km:
                return ZoneClassification(
                    zone_type="forest",
                    score=SCORE_FOREST,
                    reason=f"Near {forest.name} - {forest.description}",
                )

        # 4. 주요 도시 (안전 구역)
        for city in self.cities:
            if self._distance(lat, lon, city.anchor) < self.city_radius_km:
                return ZoneClassification(
                    zone_type="safe",
                    score=SCORE_SAFE_CITY,
                    reason=f"Near {city.name}, {city.state} - Tourist-friendly area",
                )

        # 5. 도시 접근 가능한 농촌 지역
        nearest_city_km = min(
            (self._distance(lat, lon, city.anchor) for city in self.cities),
            default=float("inf"),
        )
        if nearest_city_km < self.moderate_radius_km:
            return ZoneClassification(
                zone_type="moderate",
                score=SCORE_MODERATE,
                reason="Rural area with moderate infrastructure",
            )

        # 6. 원격 지역
        return ZoneClassification(
            zone_type="unsafe",
            score=SCORE_UNSAFE,
            reason="Remote area with limited infrastructure and connectivity",
        )

    def evaluate_location(self,
                          point: GeoPoint,
                          *,
                          hour: int,
                          weather: Optional[str] = None,
                          evaluated_at: Optional[datetime] = None) -> LocationSafety:
        """
        실시간 위치를 평가합니다 (분류 후 시간/날씨 보정).

        Args:
            point: 평가할 좌표
            hour: 현지 시각 (0-23)
            weather: 날씨 설명 (없으면 보정하지 않음)
            evaluated_at: 평가 시각 (없으면 현재 UTC)

        Returns:
            위치 평가 결과
        """
        zone = self.classify(point)
        score = adjust_for_time(zone.score, hour)
        if weather:
            score = adjust_for_weather(score, weather)

        return LocationSafety(
            location=point,
            zone_type=zone.zone_type,
            base_score=zone.score,
            score=max(0, min(100, score)),
            reason=zone.reason,
            evaluated_at=evaluated_at or datetime.now(timezone.utc),
        )

    @staticmethod
    def _distance(lat: float, lon: float, anchor: GeoPoint) -> float:
        return haversine_distance(lat, lon, anchor.latitude, anchor.longitude)

def adjust_for_time(score: int, hour: int) -> int:
    """
    시간대에 따라 점수를 보정합니다.

    Args:
        score: 기본 점수
        hour: 현지 시각 (0-23)

    Returns:
        보정된 점수 (0 이상)
    """
    hour = int(hour) % 24

    # 야간 (22시 - 06시)
    if hour >= 22 or hour <= 6:
        return max(score - 20, 0)

    # 이른 아침 / 늦은 저녁
    if 6 <= hour <= 8 or 19 <= hour <= 22:
        return max(score - 10, 0)

    return score

def adjust_for_weather(score: int, conditions: str) -> int:
    """
    날씨 설명에 따라 점수를 보정합니다 (대소문자 무시, 부분 문자열 일치).

    Args:
        score: 기본 점수
        conditions: 날씨 설명 문자열

    Returns:
        보정된 점수 (0 이상)
    """
    weather = (conditions or "").lower()

    for keywords, penalty in WEATHER_PENALTIES:
        if any(k in weather for k in keywords):
            return max(score - penalty, 0)

    return score
