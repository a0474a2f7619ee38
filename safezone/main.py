# safezone/main.py
import os, asyncio, signal
from typing import Optional
from safezone.settings import Settings
from safezone.core.scoring import SafetyScorer
from safezone.features.anchor_datasets import build_classifier
from safezone.adapters.storage.sqlite_records import SQLiteRecordsStore
from safezone.orchestrators.scoring_service import SafetyScoringService
from safezone.observability.server import build_http_server
from safezone.observability.logging_setup import setup_logger, get_logger

def _b(name, default=False): return os.getenv(name, str(default)).lower() in ("1","true","yes","on")

def build_settings() -> Settings:
    s = Settings()
    # 플래그
    s.dry_run = _b("DRY_RUN", s.dry_run)

    # 관할 구역 / 데이터셋
    s.region.name = os.getenv("REGION_NAME", s.region.name)
    s.region.dataset_dir = os.getenv("DATASET_DIR", s.region.dataset_dir)

    # 분류기
    s.classifier.restricted_radius_km = float(os.getenv("RESTRICTED_RADIUS_KM", s.classifier.restricted_radius_km))
    s.classifier.forest_radius_km = float(os.getenv("FOREST_RADIUS_KM", s.classifier.forest_radius_km))
    s.classifier.city_radius_km = float(os.getenv("CITY_RADIUS_KM", s.classifier.city_radius_km))
    s.classifier.moderate_radius_km = float(os.getenv("MODERATE_RADIUS_KM", s.classifier.moderate_radius_km))

    # 점수
    s.scoring.time_half_life_hours = float(os.getenv("TIME_HALF_LIFE_HOURS", s.scoring.time_half_life_hours))
    s.scoring.spatial_half_life_km = float(os.getenv("SPATIAL_HALF_LIFE_KM", s.scoring.spatial_half_life_km))
    s.scoring.incident_lookback_hours = float(os.getenv("INCIDENT_LOOKBACK_HOURS", s.scoring.incident_lookback_hours))
    s.scoring.news_lookback_hours = float(os.getenv("NEWS_LOOKBACK_HOURS", s.scoring.news_lookback_hours))
    s.scoring.timezone = os.getenv("SCORING_TIMEZONE", s.scoring.timezone)

    # 스케줄러
    s.scheduler.refresh_interval_sec = float(os.getenv("REFRESH_INTERVAL_SEC", s.scheduler.refresh_interval_sec))
    s.scheduler.run_on_start = _b("RUN_ON_START", s.scheduler.run_on_start)
    s.scheduler.read_max_retries = int(os.getenv("READ_MAX_RETRIES", s.scheduler.read_max_retries))

    # 저장소
    s.storage.records_db_path = os.getenv("RECORDS_DB_PATH", s.storage.records_db_path)
    s.storage.seed_zones = _b("SEED_ZONES", s.storage.seed_zones)

    # 관측성
    s.observability.metrics_enabled = _b("METRICS_ENABLED", s.observability.metrics_enabled)
    s.observability.http_port = int(os.getenv("HTTP_PORT", s.observability.http_port))
    s.observability.log_level = os.getenv("LOG_LEVEL", s.observability.log_level)
    s.observability.json_logs = _b("JSON_LOGS", s.observability.json_logs)

    return s

def build_scorer(s: Settings) -> SafetyScorer:
    sc = s.scoring
    return SafetyScorer(
        weights=sc.weights.model_dump(),
        ranges=sc.ranges,
        time_half_life_hours=sc.time_half_life_hours,
        spatial_half_life_km=sc.spatial_half_life_km,
        density_radius_km=sc.density_radius_km,
        police_sentinel_km=sc.police_sentinel_km,
        tz=sc.timezone,
    )

def build_service(s: Settings, records) -> SafetyScoringService:
    return SafetyScoringService(
        records,
        build_scorer(s),
        build_classifier(s),
        refresh_interval_sec=s.scheduler.refresh_interval_sec,
        run_on_start=s.scheduler.run_on_start,
        incident_lookback_hours=s.scoring.incident_lookback_hours,
        news_lookback_hours=s.scoring.news_lookback_hours,
        density_lookback_hours=s.scoring.density_lookback_hours,
        read_max_retries=s.scheduler.read_max_retries,
        read_backoff_initial_sec=s.scheduler.read_backoff_initial_sec,
        read_backoff_max_sec=s.scheduler.read_backoff_max_sec,
    )

async def start_http(s: Settings, service: SafetyScoringService) -> Optional[asyncio.Task]:
    if s.observability.http_port <= 0: return None
    return asyncio.create_task(build_http_server(s, service).serve())

async def main():
    s = build_settings()
    setup_logger(level=s.observability.log_level, json_logs=s.observability.json_logs)
    log = get_logger("safezone.main")
    log.info("설정 로드 완료")

    records = SQLiteRecordsStore(s.storage.records_db_path); await records.init()
    if s.storage.seed_zones and not s.dry_run:
        await records.seed_default_zones()

    service = build_service(s, records)
    log.info("안전 점수 서비스 생성 완료")

    http_task = await start_http(s, service)
    if http_task:
        log.info("HTTP 서버 시작됨")

    stop = asyncio.Future()
    try:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            try: loop.add_signal_handler(sig, lambda: (not stop.done()) and stop.set_result(True))
            except NotImplementedError: pass
    except RuntimeError: pass

    log.info("점수 스윕 시작")
    service.start()
    await stop

    log.info("종료 중")
    await service.stop()
    if http_task: http_task.cancel()

def run():
    asyncio.run(main())

if __name__ == "__main__":
    asyncio.run(main())
