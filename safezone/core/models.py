"""
Core domain models for SafeZone.

This module defines the core domain models using Pydantic v2
for type safety and validation.
"""

from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

# 구역 유형 정의
ZoneType = Literal["safe", "moderate", "unsafe", "forest", "restricted"]

# 점수 범주 정의 (구역 유형과 별개)
SafetyCategory = Literal["safe", "moderate", "unsafe"]

class GeoPoint(BaseModel):
    """좌표 값 타입 (불변)

    범위 검증은 하지 않습니다. 범위를 벗어난 좌표도 분류기의
    관할 구역 검사까지 그대로 전달되어야 합니다.
    """
    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float

class NamedArea(BaseModel):
    """반경 기반 영역 (산림 보호구역, 국경 제한구역)"""
    model_config = ConfigDict(frozen=True)

    name: str
    state: str
    anchor: GeoPoint
    description: str

class CityAnchor(BaseModel):
    """관광 안전 도시 기준점"""
    model_config = ConfigDict(frozen=True)

    name: str
    anchor: GeoPoint
    state: str

class RegionBounds(BaseModel):
    """관할 구역 경계 사각형"""
    model_config = ConfigDict(frozen=True)

    north: float
    south: float
    east: float
    west: float
    name: str = "Northeast India"

class ZoneClassification(BaseModel):
    """좌표 분류 결과"""
    model_config = ConfigDict(frozen=True)

    zone_type: ZoneType
    score: int = Field(ge=0, le=100)
    reason: str = Field(min_length=1)

class LocationSafety(BaseModel):
    """실시간 위치 평가 결과 (분류 + 시간/날씨 보정)"""
    location: GeoPoint
    zone_type: ZoneType
    base_score: int
    score: int = Field(ge=0, le=100)
    reason: str
    evaluated_at: datetime

class SafetyZone(BaseModel):
    """저장소에서 읽어 온 안전 구역 (정규화된 기준점 포함)"""
    id: str
    name: str = ""
    state: str = ""
    zone_type: str = "moderate"
    anchor: GeoPoint
    risk_level: int = 0
    description: Optional[str] = None

class AlertRecord(BaseModel):
    """활성 긴급 경보 (패닉 알림)"""
    id: Optional[str] = None
    location: GeoPoint
    priority: str = "high"
    created_at: datetime

class NewsRecord(BaseModel):
    """안전 관련 뉴스"""
    id: Optional[str] = None
    category: str
    published_at: datetime
    title: Optional[str] = None

class ResponderPost(BaseModel):
    """대응 거점 (경찰서)"""
    id: Optional[str] = None
    name: Optional[str] = None
    location: GeoPoint

class TrackedLocation(BaseModel):
    """최근 추적된 사용자 위치"""
    location: GeoPoint
    seen_at: Optional[datetime] = None

class SafetyInputs(BaseModel):
    """정규화 전 원시 집계 값"""
    incidents: float = 0.0
    news_alerts: float = 0.0
    police_distance: float = 50.0
    tourist_density: float = 0.0
    terrain_risk: float = 0.5
    time_risk: float = 0.2

class ScoreFactors(BaseModel):
    """정규화된 요인별 값 (0-1)"""
    model_config = ConfigDict(frozen=True)

    incidents: float
    news: float
    police_proximity: float
    density: float
    terrain: float
    time_of_day: float

class ComputedSafetyScore(BaseModel):
    """구역별 계산된 안전 점수 (캐시 항목)"""
    model_config = ConfigDict(frozen=True)

    score: float = Field(ge=0, le=100)
    confidence: float = Field(ge=0, le=1)
    factors: ScoreFactors
    category: SafetyCategory
    last_updated: datetime
