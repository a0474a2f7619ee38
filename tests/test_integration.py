"""
통합 테스트

SQLite 레코드 저장소, 점수 서비스, HTTP 앱을 실제로 연결하여
시드 → 신호 추가 → 스윕 → 조회 흐름을 검증합니다.
"""

import asyncio
import pytest
from datetime import timedelta
from fastapi.testclient import TestClient
from safezone.adapters.storage.sqlite_records import SQLiteRecordsStore
from safezone.core.models import GeoPoint
from safezone.main import build_service, build_settings
from safezone.observability.health import create_app


@pytest.fixture
async def seeded_store(temp_db_path):
    """기본 구역이 시드된 저장소"""
    store = SQLiteRecordsStore(temp_db_path)
    await store.init()
    await store.seed_default_zones()
    return store


class TestBuildSettings:
    """환경 변수 설정 테스트"""

    def test_env_overrides(self, monkeypatch):
        """환경 변수가 기본값을 덮어씀"""
        monkeypatch.setenv("REFRESH_INTERVAL_SEC", "60")
        monkeypatch.setenv("RECORDS_DB_PATH", "/tmp/x.db")
        monkeypatch.setenv("JSON_LOGS", "true")
        monkeypatch.setenv("CITY_RADIUS_KM", "15")
        s = build_settings()
        assert s.scheduler.refresh_interval_sec == 60.0
        assert s.storage.records_db_path == "/tmp/x.db"
        assert s.observability.json_logs is True
        assert s.classifier.city_radius_km == 15.0

    def test_defaults(self, monkeypatch):
        """환경 변수가 없으면 기본값"""
        for name in ("REFRESH_INTERVAL_SEC", "RECORDS_DB_PATH", "LOG_LEVEL", "HTTP_PORT"):
            monkeypatch.delenv(name, raising=False)
        s = build_settings()
        assert s.scheduler.refresh_interval_sec == 300.0
        assert s.observability.http_port == 8099
        assert s.scoring.weights.incidents == 0.30


class TestEndToEnd:
    """저장소 + 서비스 통합 테스트"""

    @pytest.mark.asyncio
    async def test_sweep_over_sqlite(self, seeded_store, sample_settings, fixed_now):
        """시드 구역 전체 점수 계산 및 경보 반영"""
        service = build_service(sample_settings, seeded_store)
        service.clock = lambda: fixed_now

        before = await service.recompute_all()
        zones = await seeded_store.list_zones()
        assert len(before.scores) == len(zones)

        guwahati = next(z for z in service.zones if z.name == "Guwahati Tourist Zone")
        baseline = before.scores[guwahati.id].score

        await seeded_store.add_alert(26.15, 91.74, priority="critical", created_at=fixed_now - timedelta(hours=1))
        await seeded_store.add_police_station("Paltan Bazar PS", 26.1445, 91.7362)
        after = await service.recompute_all()

        score = after.scores[guwahati.id]
        assert score.factors.incidents > 0
        assert score.factors.police_proximity == pytest.approx(1.0, abs=1e-3)
        assert score.confidence > before.scores[guwahati.id].confidence
        assert score.score != baseline

    @pytest.mark.asyncio
    async def test_restricted_zone_terrain(self, seeded_store, sample_settings, fixed_now):
        """제한구역 시드는 restricted 지형 위험도"""
        service = build_service(sample_settings, seeded_store)
        service.clock = lambda: fixed_now
        snapshot = await service.recompute_all()

        zone, distance, score = service.get_zone_for_point(GeoPoint(latitude=28.5, longitude=94.0))
        assert zone.zone_type == "restricted"
        assert distance < 10
        assert score is snapshot.scores[zone.id]
        assert score.factors.terrain == 0.8

    def test_http_over_sqlite(self, temp_db_path, sample_settings):
        """HTTP 재계산 후 점수 조회"""
        store = SQLiteRecordsStore(temp_db_path)
        asyncio.run(store.init())
        asyncio.run(store.seed_default_zones())

        service = build_service(sample_settings, store)
        client = TestClient(create_app(sample_settings, service))

        assert client.post("/zones/recompute").status_code == 200
        data = client.get("/zones/scores").json()
        assert data["count"] > 0
        assert client.get("/ready").status_code == 200
