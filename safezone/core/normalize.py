"""
Normalization functions for SafeZone.

This module contains pure functions for converting raw storage rows
into internal domain models. Coordinates arrive in several shapes
({center: {lat, lng}}, {lat, lng}, GeoJSON Point/Polygon, JSON strings,
decimal-string latitude/longitude columns); all of them are reduced to
one canonical GeoPoint here so scoring never sees ambiguous shapes.
"""

import json
import math
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional
from dateutil import parser as date_parser
from .errors import RecordNormalizationError
from .models import (
    AlertRecord, GeoPoint, NewsRecord, ResponderPost, SafetyZone, TrackedLocation
)
from safezone.common.geo import polygon_centroid

_LAT_KEYS = ("lat", "latitude")
_LON_KEYS = ("lng", "lon", "longitude")

def _first(raw: Mapping[str, Any], keys) -> Any:
    for k in keys:
        if raw.get(k) is not None:
            return raw[k]
    return None

def _point(lat: float, lon: float) -> GeoPoint:
    # 레코드 좌표는 유한값만 허용
    if not (math.isfinite(lat) and math.isfinite(lon)):
        raise RecordNormalizationError(f"non-finite coordinates: ({lat}, {lon})")
    return GeoPoint(latitude=lat, longitude=lon)

def to_geo_point(raw: Any) -> GeoPoint:
    """
    다양한 좌표 표현을 GeoPoint로 정규화합니다.

    Args:
        raw: GeoPoint, 딕셔너리, GeoJSON, 또는 그 JSON 문자열

    Returns:
        정규화된 GeoPoint

    Raises:
        RecordNormalizationError: 좌표를 해석할 수 없거나 유한하지 않은 경우
    """
    if isinstance(raw, GeoPoint):
        _point(raw.latitude, raw.longitude)
        return raw

    # 문자열로 저장된 GeoJSON (seed 데이터 형식)
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise RecordNormalizationError(f"invalid coordinate JSON: {e}") from e

    if not isinstance(raw, Mapping):
        raise RecordNormalizationError(f"unsupported coordinate shape: {type(raw).__name__}")

    try:
        # {center: {lat, lng}}
        center = raw.get("center")
        if center is not None:
            return to_geo_point(center)

        # GeoJSON
        geo_type = raw.get("type")
        if geo_type == "Point":
            lon, lat = raw["coordinates"][0], raw["coordinates"][1]
            return _point(float(lat), float(lon))
        if geo_type == "Polygon":
            lat, lon = polygon_centroid(raw["coordinates"][0])
            return _point(lat, lon)

        # {lat, lng} / {latitude, longitude}
        lat = _first(raw, _LAT_KEYS)
        lon = _first(raw, _LON_KEYS)
        if lat is not None and lon is not None:
            return _point(float(lat), float(lon))
    except (KeyError, IndexError, TypeError, ValueError) as e:
        raise RecordNormalizationError(f"malformed coordinates: {e}") from e

    raise RecordNormalizationError(f"no coordinates found in keys {sorted(raw.keys())}")

def to_datetime(value: Any) -> datetime:
    """
    타임스탬프를 UTC aware datetime으로 변환합니다.

    Args:
        value: datetime, ISO 8601 문자열, 또는 epoch 초

    Returns:
        UTC 기준 datetime (naive 값은 UTC로 간주)
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, (int, float)):
        dt = datetime.fromtimestamp(value, tz=timezone.utc)
    elif isinstance(value, str) and value:
        try:
            dt = date_parser.isoparse(value)
        except ValueError as e:
            raise RecordNormalizationError(f"invalid timestamp: {value!r}") from e
    else:
        raise RecordNormalizationError(f"missing timestamp: {value!r}")

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)

def _location_of(raw: Mapping[str, Any]) -> GeoPoint:
    # 행 자체에 latitude/longitude 컬럼이 있거나 location/coordinates 필드가 있음
    for key in ("location", "coordinates"):
        if raw.get(key) is not None:
            return to_geo_point(raw[key])
    return to_geo_point(raw)

def _opt_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)

def to_zone(raw: Dict[str, Any]) -> SafetyZone:
    """저장소의 안전 구역 행을 SafetyZone으로 변환합니다."""
    zone_id = raw.get("id")
    if zone_id is None or str(zone_id) == "":
        raise RecordNormalizationError("zone without id")

    anchor = to_geo_point(raw.get("anchor") or raw.get("coordinates") or raw)
    return SafetyZone(
        id=str(zone_id),
        name=str(raw.get("name") or ""),
        state=str(raw.get("state") or ""),
        zone_type=str(raw.get("zoneType") or raw.get("zone_type") or "moderate").lower(),
        anchor=anchor,
        risk_level=int(raw.get("riskLevel") or raw.get("risk_level") or 0),
        description=raw.get("description"),
    )

def to_alert(raw: Dict[str, Any]) -> AlertRecord:
    """패닉 알림 행을 AlertRecord로 변환합니다."""
    return AlertRecord(
        id=_opt_str(raw.get("id")),
        location=_location_of(raw),
        priority=str(raw.get("priority") or "high").lower(),
        created_at=to_datetime(raw.get("createdAt") or raw.get("created_at")),
    )

def to_news(raw: Dict[str, Any]) -> NewsRecord:
    """뉴스 행을 NewsRecord로 변환합니다."""
    return NewsRecord(
        id=_opt_str(raw.get("id")),
        category=str(raw.get("category") or "info").lower(),
        published_at=to_datetime(raw.get("publishedAt") or raw.get("published_at")),
        title=raw.get("title"),
    )

def to_responder_post(raw: Dict[str, Any]) -> ResponderPost:
    """경찰서 행을 ResponderPost로 변환합니다."""
    return ResponderPost(
        id=_opt_str(raw.get("id")),
        name=raw.get("name"),
        location=_location_of(raw),
    )

def to_tracked_location(raw: Dict[str, Any]) -> TrackedLocation:
    """사용자 위치 행을 TrackedLocation으로 변환합니다."""
    seen = raw.get("timestamp") or raw.get("seen_at")
    return TrackedLocation(
        location=_location_of(raw),
        seen_at=to_datetime(seen) if seen is not None else None,
    )
