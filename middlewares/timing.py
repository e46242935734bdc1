import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from config.settings import settings

logger = logging.getLogger(__name__)


class TimingMiddleware(BaseHTTPMiddleware):
    """응답 헤더에 X-Latency-Ms 추가, 느린 요청은 경고 로그"""

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        # 에러 핸들러도 같은 기준 시각으로 지연 시간을 계산
        request.state.started_at = start
        response = await call_next(request)
        latency_ms = int((time.perf_counter() - start) * 1000)
        response.headers["X-Latency-Ms"] = str(latency_ms)
        if latency_ms > settings.SLOW_REQUEST_MS:
            logger.warning("Slow request %s %s took %d ms", request.method, request.url.path, latency_ms)
        return response
