"""
구역 분류기 단위 테스트

이 모듈은 좌표 분류 규칙의 순서, 기본 점수, 사유 문자열과
시간/날씨 보정 함수를 테스트합니다.
"""

import pytest
from datetime import datetime, timezone
from hypothesis import given, strategies as st
from safezone.core.classifier import ZoneClassifier, adjust_for_time, adjust_for_weather
from safezone.core.models import CityAnchor, GeoPoint, NamedArea, RegionBounds
from safezone.core.regions import NORTHEAST_BOUNDS


def pt(lat, lng):
    return GeoPoint(latitude=lat, longitude=lng)


@pytest.fixture
def classifier():
    """기본 Northeast India 분류기"""
    return ZoneClassifier()


class TestEndToEndScenarios:
    """대표 시나리오 테스트"""

    def test_guwahati_city_center_is_safe(self, classifier):
        """Guwahati 도심은 safe 90"""
        result = classifier.classify(pt(26.1445, 91.7362))
        assert result.zone_type == "safe"
        assert result.score == 90
        assert "Guwahati" in result.reason

    def test_china_border_is_restricted(self, classifier):
        """중국 국경 인근은 restricted 20"""
        result = classifier.classify(pt(28.5, 94.0))
        assert result.zone_type == "restricted"
        assert result.score == 20

    def test_outside_jurisdiction(self, classifier):
        """관할 구역 밖은 restricted 0"""
        result = classifier.classify(pt(0, 0))
        assert result.zone_type == "restricted"
        assert result.score == 0
        assert result.reason == "Outside Northeast India jurisdiction"

    def test_time_adjustment(self):
        """야간 보정 적용, 주간은 그대로"""
        assert adjust_for_time(90, 23) == 70
        assert adjust_for_time(90, 12) == 90


class TestRuleOrdering:
    """규칙 우선순위 테스트"""

    def test_restricted_beats_city(self, classifier):
        """Dawki/Agartala 는 도시이면서 국경 → restricted"""
        dawki = classifier.classify(pt(25.1167, 91.7667))
        agartala = classifier.classify(pt(23.8315, 91.2868))
        assert dawki.zone_type == "restricted"
        assert dawki.reason == "Dawki border and surrounding areas"
        assert agartala.zone_type == "restricted"
        assert agartala.score == 20

    def test_forest(self, classifier):
        """Kaziranga 인근은 forest 60"""
        result = classifier.classify(pt(26.5775, 93.1717))
        assert result.zone_type == "forest"
        assert result.score == 60
        assert result.reason.startswith("Near Kaziranga National Park - ")

    def test_moderate_rural(self, classifier):
        """도시에서 20-50km 떨어진 농촌 → moderate 70"""
        result = classifier.classify(pt(26.4445, 91.7362))
        assert result.zone_type == "moderate"
        assert result.score == 70
        assert result.reason == "Rural area with moderate infrastructure"

    def test_remote_unsafe(self, classifier):
        """모든 도시에서 50km 이상 → unsafe 40"""
        result = classifier.classify(pt(28.9, 96.5))
        assert result.zone_type == "unsafe"
        assert result.score == 40
        assert result.reason == "Remote area with limited infrastructure and connectivity"

    def test_bounds_edge_is_inside(self, classifier):
        """경계선 위의 점은 관할 구역 내부"""
        result = classifier.classify(pt(29.0, 97.0))
        assert result.score != 0

    def test_nan_is_outside_jurisdiction(self, classifier):
        """NaN 좌표는 관할 구역 밖으로 분류"""
        result = classifier.classify(pt(float("nan"), 92.0))
        assert result.zone_type == "restricted"
        assert result.score == 0

    def test_registration_order_decides_ties(self):
        """반경이 겹치면 먼저 등록된 영역이 선택됨"""
        first = NamedArea(name="A", state="S", anchor=pt(26.0, 92.0), description="first area")
        second = NamedArea(name="B", state="S", anchor=pt(26.0, 92.0), description="second area")
        c = ZoneClassifier(NORTHEAST_BOUNDS, [first, second], [], [])
        assert c.classify(pt(26.0, 92.0)).reason == "first area"

    def test_radius_is_strict(self):
        """반경 경계는 미포함 (거리 < 반경)"""
        city = CityAnchor(name="X", state="S", anchor=pt(26.0, 92.0))
        c = ZoneClassifier(NORTHEAST_BOUNDS, [], [], [city], city_radius_km=0.0)
        assert c.classify(pt(26.0, 92.0)).zone_type == "moderate"

    def test_custom_region_name(self):
        """관할 구역 이름이 사유에 반영됨"""
        bounds = RegionBounds(north=1, south=0, east=1, west=0, name="Test Box")
        c = ZoneClassifier(bounds, [], [], [])
        assert c.classify(pt(5, 5)).reason == "Outside Test Box jurisdiction"


class TestClassifierProperties:
    """분류기 속성 기반 테스트"""

    @given(
        lat=st.floats(allow_nan=True, allow_infinity=True),
        lng=st.floats(allow_nan=True, allow_infinity=True),
    )
    def test_never_raises_and_valid(self, lat, lng):
        """어떤 입력에도 예외 없이 유효한 결과 반환"""
        result = ZoneClassifier().classify(pt(lat, lng))
        assert result.zone_type in ("safe", "moderate", "unsafe", "forest", "restricted")
        assert 0 <= result.score <= 100
        assert result.reason

    @given(
        lat=st.floats(min_value=-90, max_value=90).filter(lambda v: not 23.0 <= v <= 29.0),
        lng=st.floats(min_value=-180, max_value=180),
    )
    def test_outside_bounds_always_zero(self, lat, lng):
        """관할 구역 밖은 항상 점수 0"""
        result = ZoneClassifier().classify(pt(lat, lng))
        assert result.score == 0
        assert result.zone_type == "restricted"

    @given(
        lat=st.floats(min_value=23.0, max_value=29.0),
        lng=st.floats(min_value=88.0, max_value=97.0),
    )
    def test_deterministic(self, lat, lng):
        """같은 입력은 같은 결과"""
        c = ZoneClassifier()
        assert c.classify(pt(lat, lng)) == c.classify(pt(lat, lng))


class TestTimeAdjustment:
    """시간 보정 테스트"""

    @pytest.mark.parametrize("hour,expected", [
        (0, 70), (3, 70), (6, 70), (7, 80), (8, 80), (9, 90),
        (12, 90), (18, 90), (19, 80), (21, 80), (22, 70), (23, 70),
    ])
    def test_hour_table(self, hour, expected):
        """시간대별 감점"""
        assert adjust_for_time(90, hour) == expected

    def test_floor_at_zero(self):
        """점수는 0 미만으로 내려가지 않음"""
        assert adjust_for_time(10, 23) == 0
        assert adjust_for_time(5, 7) == 0

    @given(score=st.integers(min_value=0, max_value=100), hour=st.integers(min_value=0, max_value=23))
    def test_never_increases(self, score, hour):
        """보정은 점수를 올리지 않음"""
        adjusted = adjust_for_time(score, hour)
        assert 0 <= adjusted <= score


class TestWeatherAdjustment:
    """날씨 보정 테스트"""

    @pytest.mark.parametrize("conditions,expected", [
        ("Heavy Rain", 60),
        ("thunderSTORM", 60),
        ("Cyclone warning", 60),
        ("light snow", 65),
        ("hail", 65),
        ("rain", 75),
        ("Foggy morning", 75),
        ("mist", 75),
        ("clear sky", 90),
        ("", 90),
    ])
    def test_conditions(self, conditions, expected):
        """심각한 단계 우선, 대소문자 무시"""
        assert adjust_for_weather(90, conditions) == expected

    def test_floor_at_zero(self):
        """점수는 0 미만으로 내려가지 않음"""
        assert adjust_for_weather(20, "storm") == 0


class TestEvaluateLocation:
    """실시간 위치 평가 테스트"""

    def test_classify_then_adjust(self, classifier):
        """분류 후 야간/날씨 보정 적용"""
        at = datetime(2025, 1, 1, tzinfo=timezone.utc)
        result = classifier.evaluate_location(pt(26.1445, 91.7362), hour=23, weather="rain", evaluated_at=at)
        assert result.zone_type == "safe"
        assert result.base_score == 90
        assert result.score == 55
        assert result.evaluated_at == at
        assert "Guwahati" in result.reason

    def test_no_weather(self, classifier):
        """날씨가 없으면 시간 보정만"""
        result = classifier.evaluate_location(pt(26.1445, 91.7362), hour=12)
        assert result.score == 90

    def test_outside_stays_zero(self, classifier):
        """관할 구역 밖은 0 유지"""
        result = classifier.evaluate_location(pt(0, 0), hour=2, weather="storm")
        assert result.score == 0
