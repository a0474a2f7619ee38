"""
SQLite 레코드 저장소 단위 테스트

이 모듈은 SQLite 기반 안전 레코드 저장소의 조회 필터,
쓰기 헬퍼 및 시드 기능을 테스트합니다.
"""

import json
import pytest
from datetime import datetime, timedelta, timezone
from safezone.adapters.storage.sqlite_records import SQLiteRecordsStore, square_polygon, _ts
from safezone.core.models import GeoPoint
from safezone.core.normalize import to_alert, to_zone
from safezone.core.regions import FOREST_ZONES, NORTHEAST_CITIES, RESTRICTED_ZONES

NOW = datetime(2025, 3, 1, 6, 30, tzinfo=timezone.utc)


@pytest.fixture
async def store(temp_db_path):
    """초기화된 저장소"""
    s = SQLiteRecordsStore(temp_db_path)
    await s.init()
    return s


class TestTimestampFormat:
    """타임스탬프 저장 형식 테스트"""

    def test_fixed_width_utc(self):
        """고정 폭 UTC 문자열"""
        a = _ts(datetime(2025, 1, 1, tzinfo=timezone.utc))
        b = _ts(datetime(2025, 1, 1, 0, 0, 0, 500000, tzinfo=timezone.utc))
        assert len(a) == len(b)
        assert a < b
        assert a.endswith("+00:00")

    def test_offset_converted(self):
        """오프셋이 있는 시각은 UTC로 변환"""
        ist = timezone(timedelta(hours=5, minutes=30))
        assert _ts(datetime(2025, 1, 1, 5, 30, tzinfo=ist)) == _ts(datetime(2025, 1, 1, tzinfo=timezone.utc))


class TestSQLiteRecordsStore:
    """SQLite 레코드 저장소 테스트"""

    @pytest.mark.asyncio
    async def test_empty_tables(self, store):
        """초기 상태는 비어 있음"""
        assert await store.list_zones() == []
        assert await store.list_active_alerts(NOW - timedelta(days=7)) == []
        assert await store.count_zones() == 0

    @pytest.mark.asyncio
    async def test_active_alerts_filter(self, store):
        """활성 상태이고 기간 안의 경보만 조회"""
        recent = await store.add_alert(26.1, 91.7, priority="critical", created_at=NOW - timedelta(hours=1))
        await store.add_alert(26.1, 91.7, created_at=NOW - timedelta(days=10))
        resolved = await store.add_alert(26.1, 91.7, created_at=NOW - timedelta(hours=2))
        assert await store.resolve_alert(resolved)

        rows = await store.list_active_alerts(NOW - timedelta(days=7))
        assert [r["id"] for r in rows] == [recent]

        alert = to_alert(rows[0])
        assert alert.priority == "critical"
        assert alert.created_at == NOW - timedelta(hours=1)
        assert alert.location == GeoPoint(latitude=26.1, longitude=91.7)

    @pytest.mark.asyncio
    async def test_resolve_unknown_alert(self, store):
        """없는 경보 해결 시 False"""
        assert not await store.resolve_alert("missing")

    @pytest.mark.asyncio
    async def test_news_filter(self, store):
        """기간 안의 뉴스만 조회"""
        await store.add_news("Old", "alert", published_at=NOW - timedelta(days=30))
        await store.add_news("Landslide", "emergency", published_at=NOW - timedelta(hours=3))
        rows = await store.list_news(NOW - timedelta(days=7))
        assert [r["title"] for r in rows] == ["Landslide"]
        assert rows[0]["category"] == "emergency"

    @pytest.mark.asyncio
    async def test_police_and_tracked(self, store):
        """경찰서 및 추적 위치 조회"""
        await store.add_police_station("Paltan Bazar PS", 26.18, 91.75, state="Assam")
        await store.add_tourist_location(26.1, 91.7, timestamp=NOW - timedelta(hours=1))
        await store.add_tourist_location(26.1, 91.7, timestamp=NOW - timedelta(days=2))

        posts = await store.list_responder_posts()
        assert len(posts) == 1
        assert posts[0]["name"] == "Paltan Bazar PS"

        tracked = await store.list_recent_tracked_locations(NOW - timedelta(hours=24))
        assert len(tracked) == 1

    @pytest.mark.asyncio
    async def test_zone_roundtrip_and_deactivate(self, store):
        """구역 저장 후 GeoJSON 문자열로 조회, 비활성화 시 제외"""
        anchor = GeoPoint(latitude=26.1445, longitude=91.7362)
        zone_id = await store.add_zone("Guwahati", "safe", square_polygon(anchor), state="Assam", risk_level=10)

        rows = await store.list_zones()
        assert len(rows) == 1
        assert isinstance(rows[0]["coordinates"], str)
        zone = to_zone(rows[0])
        assert zone.id == zone_id
        assert zone.anchor.latitude == pytest.approx(anchor.latitude)
        assert zone.anchor.longitude == pytest.approx(anchor.longitude)

        assert await store.deactivate_zone(zone_id)
        assert await store.list_zones() == []

    @pytest.mark.asyncio
    async def test_seed_default_zones(self, store):
        """기본 구역 시드는 비어 있을 때만 실행"""
        added = await store.seed_default_zones()
        expected = len(NORTHEAST_CITIES) + len(FOREST_ZONES) + len(RESTRICTED_ZONES)
        assert added == expected
        assert await store.seed_default_zones() == 0

        rows = await store.list_zones()
        assert len(rows) == expected
        types = {r["zone_type"] for r in rows}
        assert types == {"safe", "forest", "restricted"}
        # 등록 순서 유지
        assert rows[0]["name"] == "Guwahati Tourist Zone"
        assert json.loads(rows[0]["coordinates"])["type"] == "Polygon"
