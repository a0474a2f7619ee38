"""
Safety records port interface.

This module defines the protocol for reading the raw records the
scoring engine consumes. Implementations return plain row
dictionaries; normalization to domain models happens in the core.
"""

from datetime import datetime
from typing import Any, Dict, List, Protocol

Row = Dict[str, Any]

class SafetyRecordsPort(Protocol):
    """안전 레코드 조회 포트 인터페이스"""

    async def list_active_alerts(self, since: datetime) -> List[Row]:
        """
        활성 상태의 긴급 경보를 조회합니다.

        Args:
            since: 이 시각 이후 생성된 경보만

        Returns:
            경보 행 목록 (위치, priority, createdAt)
        """
        ...

    async def list_news(self, since: datetime) -> List[Row]:
        """
        뉴스를 조회합니다.

        Args:
            since: 이 시각 이후 게시된 뉴스만

        Returns:
            뉴스 행 목록 (category, publishedAt)
        """
        ...

    async def list_responder_posts(self) -> List[Row]:
        """
        활성 대응 거점(경찰서)을 조회합니다.

        Returns:
            거점 행 목록 (위치)
        """
        ...

    async def list_recent_tracked_locations(self, since: datetime) -> List[Row]:
        """
        최근 추적된 사용자 위치를 조회합니다.

        Args:
            since: 이 시각 이후 기록된 위치만

        Returns:
            위치 행 목록
        """
        ...

    async def list_zones(self) -> List[Row]:
        """
        활성 안전 구역을 조회합니다.

        Returns:
            구역 행 목록 (id, zoneType, coordinates)
        """
        ...
