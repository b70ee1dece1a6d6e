from jobstatus.config import Settings, VERSION, get_settings
from jobstatus.core.driver import ProgressDriver
from jobstatus.core.registry import JobRegistry
from jobstatus.core.sweeper import Sweeper

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from contextlib import asynccontextmanager
from typing import Optional
import logging

import uvicorn

from .middleware_logging import configure_logging, register_request_logging
from .error_handlers import register_error_handlers
from .routers.health import router as health_router
from .routers.jobs import router as jobs_router

logger = logging.getLogger("jobstatus.app")


# =========================
# ---- Lifespan ----
# =========================
@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.sweeper.start()
    logger.info("Server is running on port %s", app.state.settings.PORT)
    try:
        yield
    finally:
        await app.state.sweeper.stop()
        await app.state.driver.shutdown()


# =========================
# ---- App Init ----
# =========================
def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(title="Job Status Service", version=VERSION, lifespan=lifespan)

    registry = JobRegistry(ttl=settings.COMPLETED_JOB_TTL_SECONDS, max_jobs=settings.MAX_JOBS)
    app.state.settings = settings
    app.state.registry = registry
    app.state.driver = ProgressDriver(
        registry,
        increment=settings.PROGRESS_INCREMENT,
        period=settings.progress_period,
    )
    app.state.sweeper = Sweeper(registry, interval=settings.SWEEP_INTERVAL_SECONDS)

    register_request_logging(app)
    register_error_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root():
        return {"message": "Submit a job with POST /submit, then poll GET /checkStatus?jobId=<id>"}

    app.include_router(jobs_router)
    app.include_router(health_router)
    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
