"""
HTTP endpoints for SafeZone.

This module implements health, readiness, metrics and info endpoints
plus read-only query endpoints over the scoring service.
"""

import time
from typing import Optional
from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import Response, JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from safezone.core.errors import SweepError
from safezone.core.models import ComputedSafetyScore, GeoPoint
from safezone.orchestrators.scoring_service import SafetyScoringService
from safezone.settings import Settings
from safezone.observability.logging_setup import get_logger

log = get_logger("safezone.http")

def _score_payload(zone_id: str, score: ComputedSafetyScore) -> dict:
    return {"zone_id": zone_id, **score.model_dump(mode="json")}

def create_app(settings: Settings, service: SafetyScoringService) -> FastAPI:
    """FastAPI 애플리케이션을 생성합니다."""
    app = FastAPI(
        title=settings.observability.service_name,
        version=settings.observability.build_version,
        description="SafeZone Tourist Safety Scoring Service"
    )

    start_time = time.time()

    @app.get("/health")
    async def health():
        """헬스 체크 엔드포인트"""
        return JSONResponse({
            "status": "ok",
            "service": settings.observability.service_name,
            "timestamp": time.time()
        })

    @app.get("/ready")
    async def ready():
        """레디니스 체크 엔드포인트 (첫 스윕 성공 후 준비 완료)"""
        completed = service.cache.completed_at
        body = {
            "status": "ready" if service.ready else "not_ready",
            "service": settings.observability.service_name,
            "zones": len(service.cache),
            "last_sweep": completed.isoformat() if completed else None,
            "timestamp": time.time()
        }
        return JSONResponse(body, status_code=200 if service.ready else 503)

    @app.get("/metrics")
    async def metrics():
        """Prometheus 메트릭 엔드포인트"""
        if not settings.observability.metrics_enabled:
            raise HTTPException(status_code=503, detail="Metrics disabled")

        try:
            service.refresh_gauges()
            return Response(
                generate_latest(),
                media_type=CONTENT_TYPE_LATEST
            )
        except Exception as e:
            log.error(f"메트릭 생성 오류: {e}")
            raise HTTPException(status_code=500, detail="Metrics generation failed")

    @app.get("/info")
    async def info():
        """서비스 정보 엔드포인트"""
        uptime = time.time() - start_time
        return JSONResponse({
            "service": settings.observability.service_name,
            "version": settings.observability.build_version,
            "build_date": settings.observability.build_date,
            "uptime_seconds": int(uptime),
            "region": settings.region.name,
            "refresh_interval_sec": settings.scheduler.refresh_interval_sec,
            "metrics_enabled": settings.observability.metrics_enabled,
            "log_level": settings.observability.log_level
        })

    @app.get("/classify")
    async def classify(lat: float = Query(...),
                       lng: float = Query(...),
                       hour: Optional[int] = Query(default=None, ge=0, le=23),
                       weather: Optional[str] = Query(default=None)):
        """좌표를 분류하고 시간/날씨 보정 점수를 반환합니다."""
        result = service.evaluate_location(GeoPoint(latitude=lat, longitude=lng), hour=hour, weather=weather)
        return result.model_dump(mode="json")

    @app.get("/zones/scores")
    async def zone_scores():
        """캐시된 전체 구역 점수"""
        scores = service.get_all_zone_scores()
        return {"count": len(scores), "scores": [_score_payload(k, v) for k, v in scores.items()]}

    @app.get("/zones/nearest")
    async def nearest_zone(lat: float = Query(...),
                           lng: float = Query(...),
                           max_distance_km: Optional[float] = Query(default=None, gt=0)):
        """가장 가까운 구역과 캐시 점수"""
        found = service.get_zone_for_point(GeoPoint(latitude=lat, longitude=lng), max_distance_km)
        if found is None:
            raise HTTPException(status_code=404, detail="No zone found")
        zone, distance, score = found
        return {
            "zone": zone.model_dump(mode="json"),
            "distance_km": round(distance, 3),
            "score": score.model_dump(mode="json") if score else None,
        }

    @app.get("/zones/{zone_id}/score")
    async def zone_score(zone_id: str):
        """구역 하나의 캐시 점수"""
        score = service.get_zone_score(zone_id)
        if score is None:
            raise HTTPException(status_code=404, detail="Score not available")
        return _score_payload(zone_id, score)

    @app.post("/zones/recompute")
    async def recompute():
        """즉시 스윕을 실행합니다."""
        try:
            snapshot = await service.recompute_all()
        except SweepError as e:
            log.error(f"수동 스윕 실패: {e}")
            raise HTTPException(status_code=503, detail="Sweep failed")
        return {
            "ok": True,
            "zones": len(snapshot.scores),
            "completed_at": snapshot.completed_at.isoformat() if snapshot.completed_at else None,
        }

    @app.get("/")
    async def root():
        """루트 엔드포인트"""
        return JSONResponse({
            "service": settings.observability.service_name,
            "version": settings.observability.build_version,
            "endpoints": {
                "health": "/health",
                "ready": "/ready",
                "metrics": "/metrics",
                "info": "/info",
                "classify": "/classify",
                "zone_scores": "/zones/scores",
                "zone_score": "/zones/{zone_id}/score",
                "nearest_zone": "/zones/nearest",
                "recompute": "/zones/recompute"
            }
        })

    return app
