"""
Safety scoring service for SafeZone.

This module coordinates the records port, the pure scorer and the
zone classifier. It runs periodic sweeps that recompute every zone
score from one batched read and publishes the results to the score
cache, and it answers on-demand location queries.

Sweep semantics:
- one batched read per sweep, retried with backoff; if it still
  fails the sweep fails and the cache is left untouched
- a zone whose computation fails keeps its previous cached value
- concurrent sweep requests share the sweep already in flight
"""

import asyncio
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple
from safezone.core.normalize import to_alert, to_news, to_responder_post, to_tracked_location, to_zone
from safezone.core.classifier import ZoneClassifier
from safezone.core.errors import RecordNormalizationError, SweepError
from safezone.core.lookup import find_nearest_zone
from safezone.core.models import ComputedSafetyScore, GeoPoint, LocationSafety, SafetyZone
from safezone.core.scoring import SafetyScorer, SignalSnapshot
from safezone.common.retry import retry_with_backoff
from safezone.orchestrators.scheduler import PeriodicTask
from safezone.orchestrators.score_cache import ScoreSnapshot, ZoneScoreCache
from safezone.ports.records import SafetyRecordsPort
from safezone.observability import metrics
from safezone.observability.logging_setup import get_logger

log = get_logger("safezone.scoring")

Clock = Callable[[], datetime]

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

class SafetyScoringService:
    """구역 점수 스윕 및 위치 평가 서비스"""

    def __init__(self,
                 records: SafetyRecordsPort,
                 scorer: SafetyScorer,
                 classifier: ZoneClassifier,
                 *,
                 cache: Optional[ZoneScoreCache] = None,
                 refresh_interval_sec: float = 300.0,
                 run_on_start: bool = True,
                 incident_lookback_hours: float = 168.0,
                 news_lookback_hours: float = 168.0,
                 density_lookback_hours: float = 24.0,
                 read_max_retries: int = 2,
                 read_backoff_initial_sec: float = 0.5,
                 read_backoff_max_sec: float = 5.0,
                 clock: Clock = utcnow):
        """
        초기화합니다.

        Args:
            records: 안전 레코드 조회 포트
            scorer: 점수 계산기
            classifier: 구역 분류기
            cache: 점수 캐시 (없으면 새로 생성)
            refresh_interval_sec: 스윕 주기 (초)
            run_on_start: 시작 직후 스윕 실행 여부
            incident_lookback_hours: 경보 조회 기간 (시간)
            news_lookback_hours: 뉴스 조회 기간 (시간)
            density_lookback_hours: 추적 위치 조회 기간 (시간)
            read_max_retries: 일괄 조회 재시도 횟수
            read_backoff_initial_sec: 재시도 기본 지연 (초)
            read_backoff_max_sec: 재시도 최대 지연 (초)
            clock: 현재 시각 함수 (UTC aware)
        """
        self.records = records
        self.scorer = scorer
        self.classifier = classifier
        self.cache = cache or ZoneScoreCache()
        self.refresh_interval_sec = refresh_interval_sec
        self.incident_lookback = timedelta(hours=incident_lookback_hours)
        self.news_lookback = timedelta(hours=news_lookback_hours)
        self.density_lookback = timedelta(hours=density_lookback_hours)
        self.read_max_retries = read_max_retries
        self.read_backoff_initial_sec = read_backoff_initial_sec
        self.read_backoff_max_sec = read_backoff_max_sec
        self.clock = clock

        self._zones: Tuple[SafetyZone, ...] = ()
        self._inflight: Optional[asyncio.Future] = None
        self._scheduler = PeriodicTask(
            self.recompute_all,
            refresh_interval_sec,
            name="score-sweep",
            run_on_start=run_on_start,
        )
        self.start_time = time.time()

        log.info("안전 점수 서비스 초기화됨")

    # ---- 수명 주기 ----

    @property
    def ready(self) -> bool:
        """첫 스윕이 성공했는지 여부"""
        return self.cache.completed_at is not None

    def start(self) -> asyncio.Task:
        """주기적 스윕을 시작합니다."""
        return self._scheduler.start()

    async def stop(self, timeout: float = 5.0) -> None:
        """
        주기적 스윕을 정지합니다.

        timeout 안에 끝나지 않은 스윕은 취소되며, 정지 후에는 캐시가 게시되지 않습니다.

        Args:
            timeout: 진행 중인 스윕 대기 시간 (초)
        """
        await self._scheduler.stop(timeout=timeout)

        inflight = self._inflight
        if inflight is None:
            return
        if not inflight.done():
            inflight.cancel()
        try:
            await inflight
        except asyncio.CancelledError:
            log.warning("진행 중인 스윕 취소됨")
        except Exception as e:
            log.warning(f"정지 중 스윕 실패: {e}")

    # ---- 스윕 ----

    async def recompute_all(self) -> ScoreSnapshot:
        """
        모든 구역 점수를 다시 계산합니다.

        이미 진행 중인 스윕이 있으면 그 결과를 함께 기다립니다.

        Returns:
            게시된 스냅샷

        Raises:
            SweepError: 일괄 조회가 재시도 후에도 실패한 경우
        """
        if self._inflight is None or self._inflight.done():
            self._inflight = asyncio.ensure_future(self._sweep())
        return await asyncio.shield(self._inflight)

    async def _read_all(self, now: datetime) -> Tuple[List[Dict[str, Any]], ...]:
        return await asyncio.gather(
            self.records.list_zones(),
            self.records.list_active_alerts(now - self.incident_lookback),
            self.records.list_news(now - self.news_lookback),
            self.records.list_responder_posts(),
            self.records.list_recent_tracked_locations(now - self.density_lookback),
        )

    async def read_signals(self, now: datetime) -> Tuple[List[Dict[str, Any]], SignalSnapshot]:
        """
        스윕용 데이터를 한 번에 조회하고 정규화합니다.

        Args:
            now: 기준 시각

        Returns:
            (구역 원시 행 목록, 공유 신호 스냅샷)
        """
        zone_rows, alert_rows, news_rows, post_rows, tracked_rows = await retry_with_backoff(
            lambda: self._read_all(now),
            max_retries=self.read_max_retries,
            base_delay=self.read_backoff_initial_sec,
            max_delay=self.read_backoff_max_sec,
            operation_name="안전 레코드 일괄 조회",
        )
        signals = SignalSnapshot(
            read_at=now,
            alerts=_normalize_rows(alert_rows, to_alert, "alert"),
            news=_normalize_rows(news_rows, to_news, "news"),
            posts=_normalize_rows(post_rows, to_responder_post, "police_station"),
            tracked=_normalize_rows(tracked_rows, to_tracked_location, "tourist_location"),
        )
        return zone_rows, signals

    async def _sweep(self) -> ScoreSnapshot:
        t0 = time.perf_counter()
        now = self.clock()

        try:
            zone_rows, signals = await self.read_signals(now)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            metrics.sweeps_total.labels(status="failed").inc()
            log.error(f"스윕 실패, 기존 캐시 유지: {e}")
            raise SweepError(f"batched read failed: {e}") from e

        previous = self.cache.snapshot.scores
        previous_zones = {z.id: z for z in self._zones}
        scores: Dict[str, ComputedSafetyScore] = {}
        zones: List[SafetyZone] = []
        failures = 0

        for raw in zone_rows:
            zone_id = str(raw.get("id", ""))
            try:
                zone = to_zone(raw)
                scores[zone.id] = self.scorer.score_anchor(zone.anchor, zone.zone_type, signals, now)
                zones.append(zone)
            except Exception as e:
                failures += 1
                metrics.zone_score_failures.inc()
                log.warning(f"구역 점수 계산 실패 zone_id:{zone_id} error:{e}")
                if zone_id in previous:
                    scores[zone_id] = previous[zone_id]
                    if zone_id in previous_zones:
                        zones.append(previous_zones[zone_id])

        completed_at = self.clock()
        snapshot = self.cache.publish(scores, completed_at)
        self._zones = tuple(zones)

        elapsed = time.perf_counter() - t0
        metrics.sweep_seconds.observe(elapsed)
        metrics.sweeps_total.labels(status="ok").inc()
        metrics.cached_zone_scores.set(len(snapshot.scores))
        metrics.score_cache_age_seconds.set(0)

        log.info(f"스윕 완료 zones:{len(scores)} failures:{failures} elapsed:{elapsed:.3f}s")
        return snapshot

    # ---- 조회 ----

    def get_zone_score(self, zone_id: str) -> Optional[ComputedSafetyScore]:
        """캐시된 구역 점수 (없으면 None)"""
        return self.cache.get(zone_id)

    def get_all_zone_scores(self) -> Dict[str, ComputedSafetyScore]:
        return self.cache.all()

    def should_update_scores(self, now: Optional[datetime] = None) -> bool:
        """마지막 스윕 이후 갱신 주기가 지났는지 확인합니다."""
        return self.cache.is_stale(now or self.clock(), timedelta(seconds=self.refresh_interval_sec))

    @property
    def zones(self) -> Tuple[SafetyZone, ...]:
        """마지막 스윕에서 점수를 계산한 구역 목록"""
        return self._zones

    def refresh_gauges(self) -> None:
        """시간에 따라 변하는 게이지를 갱신합니다."""
        metrics.uptime_seconds.set(time.time() - self.start_time)
        completed = self.cache.completed_at
        if completed is not None:
            metrics.score_cache_age_seconds.set((self.clock() - completed).total_seconds())

    def get_zone_for_point(self, point: GeoPoint,
                           max_distance_km: Optional[float] = None
                           ) -> Optional[Tuple[SafetyZone, float, Optional[ComputedSafetyScore]]]:
        """
        좌표에서 가장 가까운 구역과 그 캐시 점수를 찾습니다.

        Args:
            point: 기준 좌표
            max_distance_km: 최대 허용 거리 (None이면 제한 없음)

        Returns:
            (구역, 거리 km, 캐시 점수) 또는 None
        """
        found = find_nearest_zone(point, self._zones, max_distance_km)
        if found is None:
            return None
        zone, distance = found
        return zone, distance, self.cache.get(zone.id)

    # ---- 위치 평가 ----

    def evaluate_location(self, point: GeoPoint, *,
                          hour: Optional[int] = None,
                          weather: Optional[str] = None) -> LocationSafety:
        """
        좌표를 분류하고 시간/날씨 보정을 적용합니다.

        Args:
            point: 평가할 좌표
            hour: 현지 시각 (없으면 서비스 시간대의 현재 시각)
            weather: 날씨 설명

        Returns:
            위치 평가 결과
        """
        now = self.clock()
        if hour is None:
            hour = self.scorer.local_hour(now)

        with metrics.classify_seconds.time():
            result = self.classifier.evaluate_location(point, hour=hour, weather=weather, evaluated_at=now)
        metrics.classifications_total.labels(zone_type=result.zone_type).inc()
        return result

    async def score_location(self, point: GeoPoint) -> ComputedSafetyScore:
        """
        임의 좌표의 위험 점수를 즉시 계산합니다 (캐시 미사용).

        지형 위험도는 좌표 분류 결과의 구역 유형을 사용합니다.

        Args:
            point: 기준 좌표

        Returns:
            계산된 점수

        Raises:
            SweepError: 조회가 재시도 후에도 실패한 경우
        """
        now = self.clock()
        try:
            _, signals = await self.read_signals(now)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            raise SweepError(f"batched read failed: {e}") from e

        zone = self.classifier.classify(point)
        return self.scorer.score_anchor(point, zone.zone_type, signals, now)

def _normalize_rows(rows: Sequence[Dict[str, Any]], fn: Callable[[Dict[str, Any]], Any], kind: str) -> tuple:
    """정규화할 수 없는 행은 경고 후 제외합니다."""
    out = []
    for raw in rows:
        try:
            out.append(fn(raw))
        except (RecordNormalizationError, ValueError) as e:
            log.warning(f"{kind} 레코드 정규화 실패, 제외 id:{raw.get('id')} error:{e}")
    return tuple(out)
