"""
테스트 설정 및 픽스처

이 모듈은 pytest 설정과 공통 픽스처를 제공합니다.
"""

import pytest
import tempfile
import os
from datetime import datetime, timezone
from unittest.mock import AsyncMock
from safezone.settings import Settings
from safezone.core.models import GeoPoint


# 06:30 UTC = 12:00 IST (주간)
FIXED_NOW = datetime(2025, 3, 1, 6, 30, tzinfo=timezone.utc)


@pytest.fixture
def temp_db_path():
    """임시 데이터베이스 파일 경로"""
    with tempfile.NamedTemporaryFile(suffix='.db', delete=False) as f:
        temp_path = f.name
    yield temp_path
    # 테스트 후 파일 정리
    if os.path.exists(temp_path):
        os.unlink(temp_path)


@pytest.fixture
def sample_settings():
    """테스트용 설정"""
    settings = Settings()
    settings.observability.service_name = "test-service"
    settings.observability.build_version = "1.0.0"
    settings.observability.log_level = "INFO"
    settings.observability.http_port = 8080
    settings.scheduler.read_max_retries = 0
    settings.scheduler.read_backoff_initial_sec = 0.0
    return settings


@pytest.fixture
def fixed_now():
    """고정 기준 시각 (IST 정오)"""
    return FIXED_NOW


@pytest.fixture
def guwahati():
    """Guwahati 도심 좌표"""
    return GeoPoint(latitude=26.1445, longitude=91.7362)


@pytest.fixture
def mock_records():
    """빈 결과를 반환하는 레코드 포트"""
    records = AsyncMock()
    records.list_zones.return_value = []
    records.list_active_alerts.return_value = []
    records.list_news.return_value = []
    records.list_responder_posts.return_value = []
    records.list_recent_tracked_locations.return_value = []
    return records
