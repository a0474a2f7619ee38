"""
SQLite-based safety records store for SafeZone.

This module implements the records port on top of SQLite. It keeps
the tables the scoring sweep reads (zones, panic alerts, news,
police stations, tracked tourist locations) and offers insert
helpers used by seeding and tests.

Timestamps are stored as fixed-width UTC ISO strings so that text
comparison in SQL matches chronological order.
"""

import json
import uuid
import aiosqlite
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence
from safezone.core.models import GeoPoint, NamedArea, CityAnchor
from safezone.core.regions import FOREST_ZONES, NORTHEAST_CITIES, RESTRICTED_ZONES
from safezone.observability.logging_setup import get_logger

log = get_logger("safezone.records")

Row = Dict[str, Any]

# SQLite 스키마
SCHEMA = """
CREATE TABLE IF NOT EXISTS safety_zones (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    state TEXT NOT NULL DEFAULT '',
    zone_type TEXT NOT NULL,
    coordinates TEXT NOT NULL,
    description TEXT,
    risk_level INTEGER NOT NULL DEFAULT 0,
    is_active INTEGER NOT NULL DEFAULT 1,
    created_at TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS panic_alerts (
    id TEXT PRIMARY KEY,
    tourist_id TEXT,
    latitude REAL NOT NULL,
    longitude REAL NOT NULL,
    status TEXT NOT NULL DEFAULT 'active',
    priority TEXT NOT NULL DEFAULT 'high',
    created_at TEXT NOT NULL,
    resolved_at TEXT
);
CREATE INDEX IF NOT EXISTS idx_panic_alerts_created ON panic_alerts(status, created_at);
CREATE TABLE IF NOT EXISTS news_updates (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    category TEXT NOT NULL,
    state TEXT,
    published_at TEXT NOT NULL,
    is_active INTEGER NOT NULL DEFAULT 1
);
CREATE INDEX IF NOT EXISTS idx_news_published ON news_updates(published_at);
CREATE TABLE IF NOT EXISTS police_stations (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    state TEXT NOT NULL DEFAULT '',
    latitude REAL NOT NULL,
    longitude REAL NOT NULL,
    is_active INTEGER NOT NULL DEFAULT 1
);
CREATE TABLE IF NOT EXISTS tourist_locations (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    tourist_id TEXT,
    latitude REAL NOT NULL,
    longitude REAL NOT NULL,
    timestamp TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_tourist_locations_ts ON tourist_locations(timestamp);
"""

# 시드 구역 위험도
SEED_RISK_LEVELS = {"safe": 10, "forest": 40, "restricted": 80}
# 시드 폴리곤 반폭 (도)
SEED_HALF_WIDTH_DEG = 0.01

def _ts(dt: Optional[datetime] = None) -> str:
    """UTC 고정 폭 ISO 문자열로 변환합니다."""
    dt = dt or datetime.now(timezone.utc)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f+00:00")

def square_polygon(anchor: GeoPoint, half_width_deg: float = SEED_HALF_WIDTH_DEG) -> Dict[str, Any]:
    """
    기준점을 중심으로 하는 정사각형 GeoJSON Polygon을 만듭니다.

    Args:
        anchor: 중심 좌표
        half_width_deg: 반폭 (도)

    Returns:
        [lon, lat] 순서의 닫힌 링을 가진 GeoJSON Polygon
    """
    lat, lon, h = anchor.latitude, anchor.longitude, half_width_deg
    ring = [
        [lon - h, lat - h], [lon + h, lat - h],
        [lon + h, lat + h], [lon - h, lat + h],
        [lon - h, lat - h],
    ]
    return {"type": "Polygon", "coordinates": [ring]}

class SQLiteRecordsStore:
    """SQLite 기반 안전 레코드 저장소 (SafetyRecordsPort 구현)"""

    def __init__(self, path: str):
        """
        초기화합니다.

        Args:
            path: SQLite 데이터베이스 파일 경로
        """
        self.path = path
        log.info(f"SQLiteRecordsStore 초기화: {path}")

    async def init(self) -> None:
        """데이터베이스를 초기화합니다."""
        async with aiosqlite.connect(self.path) as db:
            await db.executescript(SCHEMA)
            await db.commit()
        log.info("SQLiteRecordsStore 스키마 초기화 완료")

    async def _fetch(self, sql: str, params: Sequence[Any] = ()) -> List[Row]:
        async with aiosqlite.connect(self.path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(sql, params)
            rows = await cursor.fetchall()
            return [dict(r) for r in rows]

    async def _execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        async with aiosqlite.connect(self.path) as db:
            cursor = await db.execute(sql, params)
            await db.commit()
            return cursor.rowcount

    # ---- SafetyRecordsPort ----

    async def list_active_alerts(self, since: datetime) -> List[Row]:
        return await self._fetch(
            "SELECT id, latitude, longitude, priority, created_at FROM panic_alerts "
            "WHERE status = 'active' AND created_at >= ? ORDER BY created_at",
            (_ts(since),)
        )

    async def list_news(self, since: datetime) -> List[Row]:
        return await self._fetch(
            "SELECT id, title, category, published_at FROM news_updates "
            "WHERE is_active = 1 AND published_at >= ? ORDER BY published_at",
            (_ts(since),)
        )

    async def list_responder_posts(self) -> List[Row]:
        return await self._fetch(
            "SELECT id, name, latitude, longitude FROM police_stations WHERE is_active = 1"
        )

    async def list_recent_tracked_locations(self, since: datetime) -> List[Row]:
        return await self._fetch(
            "SELECT latitude, longitude, timestamp FROM tourist_locations "
            "WHERE timestamp >= ? ORDER BY timestamp",
            (_ts(since),)
        )

    async def list_zones(self) -> List[Row]:
        """
        활성 안전 구역을 등록 순서대로 조회합니다.

        coordinates 컬럼은 GeoJSON 문자열 그대로 반환합니다.
        """
        return await self._fetch(
            "SELECT id, name, state, zone_type, coordinates, description, risk_level "
            "FROM safety_zones WHERE is_active = 1 ORDER BY rowid"
        )

    # ---- 쓰기 헬퍼 ----

    async def add_zone(self,
                       name: str,
                       zone_type: str,
                       coordinates: Dict[str, Any],
                       *,
                       state: str = "",
                       description: Optional[str] = None,
                       risk_level: int = 0,
                       zone_id: Optional[str] = None) -> str:
        """
        안전 구역을 추가합니다.

        Args:
            name: 구역 이름
            zone_type: 구역 유형
            coordinates: GeoJSON 도형 (문자열로 저장)
            state: 주(state) 이름
            description: 설명
            risk_level: 위험 수준 (0-100)
            zone_id: 구역 ID (없으면 생성)

        Returns:
            구역 ID
        """
        zone_id = zone_id or uuid.uuid4().hex
        await self._execute(
            "INSERT INTO safety_zones (id, name, state, zone_type, coordinates, description, risk_level, created_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
            (zone_id, name, state, zone_type, json.dumps(coordinates), description, risk_level, _ts())
        )
        return zone_id

    async def deactivate_zone(self, zone_id: str) -> bool:
        return await self._execute("UPDATE safety_zones SET is_active = 0 WHERE id = ?", (zone_id,)) > 0

    async def add_alert(self,
                        latitude: float,
                        longitude: float,
                        *,
                        priority: str = "high",
                        created_at: Optional[datetime] = None,
                        status: str = "active",
                        tourist_id: Optional[str] = None,
                        alert_id: Optional[str] = None) -> str:
        """패닉 알림을 추가하고 ID를 반환합니다."""
        alert_id = alert_id or uuid.uuid4().hex
        await self._execute(
            "INSERT INTO panic_alerts (id, tourist_id, latitude, longitude, status, priority, created_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?)",
            (alert_id, tourist_id, latitude, longitude, status, priority, _ts(created_at))
        )
        return alert_id

    async def resolve_alert(self, alert_id: str, resolved_at: Optional[datetime] = None) -> bool:
        """패닉 알림을 해결 상태로 변경합니다."""
        updated = await self._execute(
            "UPDATE panic_alerts SET status = 'resolved', resolved_at = ? WHERE id = ?",
            (_ts(resolved_at), alert_id)
        )
        return updated > 0

    async def add_news(self,
                       title: str,
                       category: str,
                       *,
                       published_at: Optional[datetime] = None,
                       state: Optional[str] = None,
                       news_id: Optional[str] = None) -> str:
        news_id = news_id or uuid.uuid4().hex
        await self._execute(
            "INSERT INTO news_updates (id, title, category, state, published_at) VALUES (?, ?, ?, ?, ?)",
            (news_id, title, category, state, _ts(published_at))
        )
        return news_id

    async def add_police_station(self,
                                 name: str,
                                 latitude: float,
                                 longitude: float,
                                 *,
                                 state: str = "",
                                 station_id: Optional[str] = None) -> str:
        station_id = station_id or uuid.uuid4().hex
        await self._execute(
            "INSERT INTO police_stations (id, name, state, latitude, longitude) VALUES (?, ?, ?, ?, ?)",
            (station_id, name, state, latitude, longitude)
        )
        return station_id

    async def add_tourist_location(self,
                                   latitude: float,
                                   longitude: float,
                                   *,
                                   timestamp: Optional[datetime] = None,
                                   tourist_id: Optional[str] = None) -> None:
        await self._execute(
            "INSERT INTO tourist_locations (tourist_id, latitude, longitude, timestamp) VALUES (?, ?, ?, ?)",
            (tourist_id, latitude, longitude, _ts(timestamp))
        )

    async def count_zones(self) -> int:
        async with aiosqlite.connect(self.path) as db:
            cursor = await db.execute("SELECT COUNT(*) FROM safety_zones")
            result = await cursor.fetchone()
            return result[0] if result else 0

    async def seed_default_zones(self,
                                 cities: Sequence[CityAnchor] = NORTHEAST_CITIES,
                                 forests: Sequence[NamedArea] = FOREST_ZONES,
                                 restricted: Sequence[NamedArea] = RESTRICTED_ZONES) -> int:
        """
        구역 테이블이 비어 있으면 기본 기준점으로 채웁니다.

        Returns:
            추가된 구역 수 (이미 데이터가 있으면 0)
        """
        if await self.count_zones() > 0:
            log.info("안전 구역이 이미 존재하여 시드를 건너뜀")
            return 0

        added = 0
        for city in cities:
            await self.add_zone(
                f"{city.name} Tourist Zone", "safe", square_polygon(city.anchor),
                state=city.state, description="Tourist-friendly city area",
                risk_level=SEED_RISK_LEVELS["safe"],
            )
            added += 1
        for forest in forests:
            await self.add_zone(
                forest.name, "forest", square_polygon(forest.anchor),
                state=forest.state, description=forest.description,
                risk_level=SEED_RISK_LEVELS["forest"],
            )
            added += 1
        for area in restricted:
            await self.add_zone(
                area.name, "restricted", square_polygon(area.anchor),
                state=area.state, description=area.description,
                risk_level=SEED_RISK_LEVELS["restricted"],
            )
            added += 1

        log.info(f"기본 안전 구역 시드 완료: {added}개")
        return added
