"""
Periodic task runner for SafeZone.

This module runs an async callable on a fixed interval until stopped.
A failing run is logged and the loop continues with the next tick.
"""

import asyncio
from typing import Awaitable, Callable, Optional
from safezone.observability.logging_setup import get_logger

log = get_logger("safezone.scheduler")

class PeriodicTask:
    """고정 주기 비동기 작업 실행기"""

    def __init__(self,
                 func: Callable[[], Awaitable[object]],
                 interval_sec: float,
                 *,
                 name: str = "periodic",
                 run_on_start: bool = True):
        """
        초기화합니다.

        Args:
            func: 주기적으로 실행할 비동기 함수
            interval_sec: 실행 간격 (초)
            name: 로그용 작업 이름
            run_on_start: 시작 직후 한 번 실행할지 여부
        """
        if interval_sec <= 0:
            raise ValueError("interval_sec must be positive")
        self.func = func
        self.interval_sec = interval_sec
        self.name = name
        self.run_on_start = run_on_start
        self.runs = 0
        self._task: Optional[asyncio.Task] = None
        self._stop = asyncio.Event()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_once(self) -> None:
        """작업을 한 번 실행합니다 (예외는 로그만 남김)."""
        self.runs += 1
        try:
            await self.func()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            log.error(f"{self.name} 실행 실패: {e}")

    async def _loop(self) -> None:
        if self.run_on_start:
            await self.run_once()
        while not self._stop.is_set():
            try:
                await asyncio.wait_for(self._stop.wait(), timeout=self.interval_sec)
            except asyncio.TimeoutError:
                await self.run_once()

    def start(self) -> asyncio.Task:
        """루프를 시작합니다 (이미 실행 중이면 기존 태스크 반환)."""
        if self.running:
            return self._task
        self._stop = asyncio.Event()
        self._task = asyncio.create_task(self._loop())
        log.info(f"{self.name} 시작 (간격 {self.interval_sec}초)")
        return self._task

    async def stop(self, timeout: float = 5.0) -> None:
        """
        루프를 정지합니다. 진행 중인 실행은 timeout 동안 기다린 뒤 취소합니다.

        Args:
            timeout: 대기 시간 (초)
        """
        if self._task is None:
            return
        self._stop.set()
        try:
            await asyncio.wait_for(self._task, timeout=timeout)
        except asyncio.TimeoutError:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        finally:
            self._task = None
        log.info(f"{self.name} 정지")
