# jobstatus/routers/health.py
from fastapi import APIRouter, Request

from jobstatus.config import VERSION

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    state = request.app.state
    registry = state.registry
    return {
        "status": "ok",
        "version": VERSION,
        "jobs": len(registry),
        "activeDrivers": state.driver.active,
        "sweeper": "running" if state.sweeper.running else "stopped",
        "settings": state.settings.to_api(),
    }
