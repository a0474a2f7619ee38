"""
최근접 조회 단위 테스트
"""

import pytest
from safezone.core.lookup import find_nearest_post, find_nearest_zone
from safezone.core.models import GeoPoint, ResponderPost, SafetyZone


def zone(zone_id, lat, lng):
    return SafetyZone(id=zone_id, anchor=GeoPoint(latitude=lat, longitude=lng))


class TestFindNearestZone:
    """최근접 구역 조회 테스트"""

    def test_picks_nearest(self):
        """가장 가까운 구역 선택"""
        zones = [zone("far", 27.0, 93.0), zone("near", 26.15, 91.74)]
        found = find_nearest_zone(GeoPoint(latitude=26.1445, longitude=91.7362), zones)
        assert found is not None
        assert found[0].id == "near"
        assert found[1] < 1.0

    def test_tie_keeps_first(self):
        """동일 거리면 먼저 나온 구역"""
        zones = [zone("a", 26.0, 92.0), zone("b", 26.0, 92.0)]
        assert find_nearest_zone(GeoPoint(latitude=26.0, longitude=92.0), zones)[0].id == "a"

    def test_empty(self):
        """후보가 없으면 None"""
        assert find_nearest_zone(GeoPoint(latitude=26.0, longitude=92.0), []) is None

    def test_max_distance(self):
        """최대 거리를 넘으면 None"""
        zones = [zone("a", 27.0, 92.0)]
        point = GeoPoint(latitude=26.0, longitude=92.0)
        assert find_nearest_zone(point, zones, max_distance_km=50) is None
        assert find_nearest_zone(point, zones, max_distance_km=200)[0].id == "a"


class TestFindNearestPost:
    """최근접 대응 거점 조회 테스트"""

    def test_nearest_post(self):
        """가장 가까운 거점과 거리"""
        posts = [ResponderPost(id="1", location=GeoPoint(latitude=26.5, longitude=92.0)),
                 ResponderPost(id="2", location=GeoPoint(latitude=26.1, longitude=92.0))]
        post, distance = find_nearest_post(GeoPoint(latitude=26.0, longitude=92.0), posts)
        assert post.id == "2"
        assert distance == pytest.approx(11.12, abs=0.05)

    def test_no_posts(self):
        """거점이 없으면 None"""
        assert find_nearest_post(GeoPoint(latitude=26.0, longitude=92.0), []) is None
