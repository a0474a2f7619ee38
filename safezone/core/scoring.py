"""
Safety scoring for SafeZone.

This module fuses six weighted, normalized signals into a bounded
0-100 risk score per geographic anchor:

    incidents (0.30)  news (0.20)  density (0.15)  terrain (0.10)
    time of day (0.05)  police proximity (0.20, subtractive)

Incidents are decayed by distance and then by age, news by age only,
density by distance inside a hard 2 km cutoff. Higher scores mean
higher risk. Confidence is an evidence-coverage heuristic (how many
signal types contributed), not a statistical interval.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Mapping, Optional, Sequence, Tuple
from zoneinfo import ZoneInfo
from .decay import clamp, normalize, spatial_decay, temporal_decay
from .models import (
    AlertRecord, ComputedSafetyScore, GeoPoint, NewsRecord, ResponderPost,
    SafetyCategory, SafetyInputs, ScoreFactors, TrackedLocation
)
from safezone.common.geo import haversine_distance

DEFAULT_WEIGHTS: Dict[str, float] = {
    "incidents": 0.30,
    "news": 0.20,
    "police_proximity": 0.20,
    "density": 0.15,
    "terrain": 0.10,
    "time_of_day": 0.05,
}

DEFAULT_RANGES: Dict[str, Tuple[float, float]] = {
    "incidents": (0.0, 5.0),
    "news": (0.0, 10.0),
    "police_distance": (0.0, 20.0),
    "density": (0.0, 20.0),
}

# 구역 유형별 지형 위험도
TERRAIN_RISKS: Dict[str, float] = {
    "safe": 0.1,
    "moderate": 0.5,
    "unsafe": 0.9,
    "forest": 0.6,
    "restricted": 0.8,
}
DEFAULT_TERRAIN_RISK = 0.5

# 경보 우선순위별 기본 영향도 (low/medium 은 normal 취급)
INCIDENT_IMPACT: Dict[str, float] = {"high": 1.5, "critical": 2.0}
DEFAULT_INCIDENT_IMPACT = 1.0

# 뉴스 범주별 기본 영향도
NEWS_IMPACT: Dict[str, float] = {"emergency": 1.0, "alert": 0.8, "safety": 0.3}
DEFAULT_NEWS_IMPACT = 0.5

# 점수 범주 임계값
SAFE_THRESHOLD = 20
MODERATE_THRESHOLD = 50

def terrain_risk(zone_type: Optional[str]) -> float:
    """구역 유형의 지형 위험도를 반환합니다 (알 수 없으면 0.5)."""
    return TERRAIN_RISKS.get((zone_type or "").lower(), DEFAULT_TERRAIN_RISK)

def time_risk(hour: int) -> float:
    """
    시각별 위험도를 반환합니다.

    Args:
        hour: 현지 시각 (0-23)

    Returns:
        심야 0.7, 새벽/저녁 0.4, 주간 0.2
    """
    if hour >= 22 or hour <= 5:
        return 0.7
    if hour >= 18 or hour <= 7:
        return 0.4
    return 0.2

def incident_impact(priority: Optional[str]) -> float:
    return INCIDENT_IMPACT.get((priority or "").lower(), DEFAULT_INCIDENT_IMPACT)

def news_impact(category: Optional[str]) -> float:
    return NEWS_IMPACT.get((category or "").lower(), DEFAULT_NEWS_IMPACT)

def categorize(score: float) -> SafetyCategory:
    """
    점수를 범주로 변환합니다.

    Args:
        score: 0-100 범위로 제한된 점수

    Returns:
        20 이하 safe, 50 이하 moderate, 그 외 unsafe
    """
    if score <= SAFE_THRESHOLD:
        return "safe"
    if score <= MODERATE_THRESHOLD:
        return "moderate"
    return "unsafe"

def _hours_between(earlier: datetime, later: datetime) -> float:
    return (later - earlier).total_seconds() / 3600.0

@dataclass(frozen=True)
class SignalSnapshot:
    """한 번의 스윕에서 모든 구역이 공유하는 일괄 조회 결과"""
    read_at: datetime
    alerts: Tuple[AlertRecord, ...] = ()
    news: Tuple[NewsRecord, ...] = ()
    posts: Tuple[ResponderPost, ...] = ()
    tracked: Tuple[TrackedLocation, ...] = ()

class SafetyScorer:
    """가중 신호 융합 점수 계산기 (순수, I/O 없음)"""

    def __init__(self,
                 *,
                 weights: Optional[Mapping[str, float]] = None,
                 ranges: Optional[Mapping[str, Tuple[float, float]]] = None,
                 time_half_life_hours: float = 24.0,
                 spatial_half_life_km: float = 5.0,
                 density_radius_km: float = 2.0,
                 police_sentinel_km: float = 50.0,
                 tz: str = "Asia/Kolkata"):
        """
        초기화합니다.

        Args:
            weights: 신호별 가중치 (합 1.0)
            ranges: 정규화 범위 {신호: (min, max)}
            time_half_life_hours: 시간 반감기 (시간)
            spatial_half_life_km: 거리 반감기 (킬로미터)
            density_radius_km: 밀집도 집계 반경 (킬로미터, 경계 포함)
            police_sentinel_km: 대응 거점이 없을 때 사용할 거리 (킬로미터)
            tz: 시각 위험도 계산에 쓰는 현지 시간대
        """
        self.weights = dict(DEFAULT_WEIGHTS, **(weights or {}))
        self.ranges = dict(DEFAULT_RANGES, **(ranges or {}))
        self.time_half_life_hours = time_half_life_hours
        self.spatial_half_life_km = spatial_half_life_km
        self.density_radius_km = density_radius_km
        self.police_sentinel_km = police_sentinel_km
        self.tz = ZoneInfo(tz)

    # ---- 신호 집계 ----

    def incident_score(self, anchor: GeoPoint, alerts: Sequence[AlertRecord], now: datetime) -> float:
        """거리 감쇠 후 시간 감쇠를 적용한 경보 영향도 합계"""
        total = 0.0
        for alert in alerts:
            distance = self._distance(anchor, alert.location)
            hours_ago = _hours_between(alert.created_at, now)

            impact = incident_impact(alert.priority)
            # 적용 순서 고정: 거리 → 시간
            impact = spatial_decay(impact, distance, self.spatial_half_life_km)
            impact = temporal_decay(impact, hours_ago, self.time_half_life_hours)
            total += impact
        return total

    def news_score(self, news: Sequence[NewsRecord], now: datetime) -> float:
        """시간 감쇠만 적용한 뉴스 영향도 합계 (뉴스에는 위치가 없음)"""
        total = 0.0
        for item in news:
            hours_ago = _hours_between(item.published_at, now)
            total += temporal_decay(news_impact(item.category), hours_ago, self.time_half_life_hours)
        return total

    def police_distance(self, anchor: GeoPoint, posts: Sequence[ResponderPost]) -> float:
        """가장 가까운 대응 거점까지의 거리 (없으면 sentinel)"""
        nearest = min((self._distance(anchor, p.location) for p in posts), default=None)
        return self.police_sentinel_km if nearest is None else nearest

    def tourist_density(self, anchor: GeoPoint, tracked: Sequence[TrackedLocation]) -> float:
        """반경 안의 추적 위치 수 (거리 감쇠 적용, 반경 밖은 감쇠 전에 제외)"""
        total = 0.0
        for loc in tracked:
            distance = self._distance(anchor, loc.location)
            if distance <= self.density_radius_km:
                total += spatial_decay(1.0, distance, self.spatial_half_life_km)
        return total

    def local_hour(self, now: datetime) -> int:
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return now.astimezone(self.tz).hour

    def calculate_inputs(self, anchor: GeoPoint, zone_type: Optional[str],
                         snapshot: SignalSnapshot, now: Optional[datetime] = None) -> SafetyInputs:
        """
        기준점에 대한 원시 집계 값을 계산합니다.

        Args:
            anchor: 구역 기준점
            zone_type: 구역 유형 (지형 위험도)
            snapshot: 스윕 공유 조회 결과
            now: 기준 시각 (없으면 snapshot.read_at)

        Returns:
            정규화 전 입력 값
        """
        now = now or snapshot.read_at
        return SafetyInputs(
            incidents=self.incident_score(anchor, snapshot.alerts, now),
            news_alerts=self.news_score(snapshot.news, now),
            police_distance=self.police_distance(anchor, snapshot.posts),
            tourist_density=self.tourist_density(anchor, snapshot.tracked),
            terrain_risk=terrain_risk(zone_type),
            time_risk=time_risk(self.local_hour(now)),
        )

    # ---- 점수 계산 ----

    def compute_score(self, inputs: SafetyInputs, terrain: Optional[float] = None,
                      now: Optional[datetime] = None) -> ComputedSafetyScore:
        """
        원시 입력을 0-100 점수, 신뢰도, 범주로 변환합니다.

        Args:
            inputs: 원시 집계 값
            terrain: 지형 위험도 (None이면 inputs.terrain_risk)
            now: last_updated 로 기록할 시각

        Returns:
            계산된 안전 점수
        """
        w = self.weights
        terrain_value = clamp(inputs.terrain_risk if terrain is None else terrain, 0.0, 1.0)

        n_incidents = normalize(inputs.incidents, *self.ranges["incidents"])
        n_news = normalize(inputs.news_alerts, *self.ranges["news"])
        # 가까울수록 안전 (1 - 정규화 거리)
        n_police = 1 - normalize(inputs.police_distance, *self.ranges["police_distance"])
        n_density = normalize(inputs.tourist_density, *self.ranges["density"])
        n_time = clamp(inputs.time_risk, 0.0, 1.0)

        raw = 100 * (
            n_incidents * w["incidents"]
            + n_news * w["news"]
            + terrain_value * w["terrain"]
            + n_time * w["time_of_day"]
            + n_density * w["density"]
        ) - 100 * w["police_proximity"] * n_police
        score = clamp(raw, 0.0, 100.0)

        # 근거 범위 기반 신뢰도
        confidence = 0.5
        confidence += 0.20 if inputs.incidents > 0 else 0.0
        confidence += 0.15 if inputs.news_alerts > 0 else 0.0
        confidence += 0.15 if inputs.police_distance < self.police_sentinel_km else 0.0
        confidence += 0.10 if inputs.tourist_density > 0 else 0.0
        confidence = clamp(confidence, 0.0, 1.0)

        return ComputedSafetyScore(
            score=score,
            confidence=confidence,
            factors=ScoreFactors(
                incidents=n_incidents,
                news=n_news,
                police_proximity=n_police,
                density=n_density,
                terrain=terrain_value,
                time_of_day=n_time,
            ),
            category=categorize(score),
            last_updated=now or datetime.now(timezone.utc),
        )

    def score_anchor(self, anchor: GeoPoint, zone_type: Optional[str],
                     snapshot: SignalSnapshot, now: Optional[datetime] = None) -> ComputedSafetyScore:
        """기준점 하나를 집계부터 점수까지 계산합니다."""
        now = now or snapshot.read_at
        inputs = self.calculate_inputs(anchor, zone_type, snapshot, now)
        return self.compute_score(inputs, now=now)

    def _distance(self, a: GeoPoint, b: GeoPoint) -> float:
        return haversine_distance(a.latitude, a.longitude, b.latitude, b.longitude)
