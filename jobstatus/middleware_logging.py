import logging
import time
from typing import Callable
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

logger = logging.getLogger("jobstatus.request")


def configure_logging(level: str = "INFO") -> None:
    # no-op if the root logger already has handlers (uvicorn, pytest)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("jobstatus").setLevel(level)


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable):
        start = time.perf_counter()
        client = request.client.host if request.client else "-"
        method = request.method
        path = request.url.path
        job_id = request.query_params.get("jobId") or "-"
        wait = request.query_params.get("wait", "-")

        try:
            response = await call_next(request)
            duration_ms = (time.perf_counter() - start) * 1000.0
            logger.info(
                "client=%s method=%s path=%s job_id=%s wait=%s status=%s duration_ms=%.2f",
                client, method, path, job_id, wait, response.status_code, duration_ms
            )
            return response
        except Exception:
            duration_ms = (time.perf_counter() - start) * 1000.0
            logger.exception(
                "client=%s method=%s path=%s job_id=%s wait=%s status=%s duration_ms=%.2f UNHANDLED",
                client, method, path, job_id, wait, 500, duration_ms
            )
            raise

def register_request_logging(app):
    app.add_middleware(RequestLogMiddleware)
