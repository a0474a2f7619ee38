"""
HTTP server runner for SafeZone.

This module provides the uvicorn server used by the entry point
to expose the FastAPI app alongside the sweep scheduler.
"""

import uvicorn
from safezone.observability.health import create_app
from safezone.orchestrators.scoring_service import SafetyScoringService
from safezone.settings import Settings
from safezone.observability.logging_setup import get_logger

log = get_logger("safezone.observability")

def build_http_server(settings: Settings, service: SafetyScoringService,
                      host: str = "0.0.0.0", port: int = None) -> uvicorn.Server:
    """
    HTTP 서버를 구성합니다.

    Args:
        settings: 애플리케이션 설정
        service: 점수 서비스
        host: 바인딩할 호스트
        port: 바인딩할 포트 (None이면 설정에서 가져옴)

    Returns:
        uvicorn 서버 (serve() 로 실행)
    """
    if port is None:
        port = settings.observability.http_port

    app = create_app(settings, service)
    log.info(f"HTTP 서버 구성 host:{host} port:{port}")

    return uvicorn.Server(uvicorn.Config(
        app,
        host=host,
        port=port,
        log_level=settings.observability.log_level.lower(),
        access_log=True
    ))

async def run_http_server(settings: Settings, service: SafetyScoringService,
                          host: str = "0.0.0.0", port: int = None) -> None:
    """HTTP 서버를 실행합니다 (종료될 때까지 대기)."""
    server = build_http_server(settings, service, host, port)
    await server.serve()
