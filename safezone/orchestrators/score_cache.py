"""
Zone score cache for SafeZone.

The cache holds one immutable snapshot of zone scores. A sweep builds
a new mapping off to the side and publishes it with a single
reference assignment, so readers always see either the previous
complete snapshot or the new complete one.
"""

from datetime import datetime, timedelta
from types import MappingProxyType
from typing import Dict, Mapping, Optional
from safezone.core.models import ComputedSafetyScore

class ScoreSnapshot:
    """스윕 한 번의 결과 (불변)"""

    __slots__ = ("scores", "completed_at")

    def __init__(self, scores: Mapping[str, ComputedSafetyScore], completed_at: Optional[datetime]):
        self.scores: Mapping[str, ComputedSafetyScore] = MappingProxyType(dict(scores))
        self.completed_at = completed_at

EMPTY_SNAPSHOT = ScoreSnapshot({}, None)

class ZoneScoreCache:
    """구역 ID → 계산된 점수 캐시"""

    def __init__(self):
        self._snapshot: ScoreSnapshot = EMPTY_SNAPSHOT

    @property
    def snapshot(self) -> ScoreSnapshot:
        return self._snapshot

    @property
    def completed_at(self) -> Optional[datetime]:
        """마지막으로 성공한 스윕의 완료 시각 (없으면 None)"""
        return self._snapshot.completed_at

    def publish(self, scores: Mapping[str, ComputedSafetyScore], completed_at: datetime) -> ScoreSnapshot:
        """
        새 스냅샷을 게시합니다.

        Args:
            scores: 전체 구역 점수
            completed_at: 스윕 완료 시각

        Returns:
            게시된 스냅샷
        """
        snapshot = ScoreSnapshot(scores, completed_at)
        self._snapshot = snapshot
        return snapshot

    def get(self, zone_id: str) -> Optional[ComputedSafetyScore]:
        return self._snapshot.scores.get(zone_id)

    def all(self) -> Dict[str, ComputedSafetyScore]:
        """현재 스냅샷의 복사본을 반환합니다."""
        return dict(self._snapshot.scores)

    def __len__(self) -> int:
        return len(self._snapshot.scores)

    def is_stale(self, now: datetime, max_age: timedelta) -> bool:
        """
        캐시가 오래되었는지 확인합니다.

        Args:
            now: 현재 시각
            max_age: 허용 최대 경과 시간

        Returns:
            스윕이 한 번도 없었거나 max_age 이상 지났으면 True
        """
        completed = self._snapshot.completed_at
        if completed is None:
            return True
        return now - completed >= max_age
