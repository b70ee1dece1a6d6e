# jobstatus/config.py
from functools import lru_cache
from pathlib import Path
from typing import Optional
import os
from dotenv import load_dotenv

ROOT = Path(__file__).resolve().parents[1]
VERSION = "0.1.0"

# Load in ascending precedence; later overrides earlier
load_dotenv(ROOT / ".env")
load_dotenv(ROOT / ".env.local", override=True)
load_dotenv(ROOT / "jobstatus" / ".env", override=True)
load_dotenv(ROOT / "jobstatus" / ".env.local", override=True)

STATUS_MODES = ("immediate", "long-poll")
RESPONSE_FORMATS = ("json", "text")


def _env(name: str, default: str) -> str:
    val = os.getenv(name, default)
    return val.strip() if isinstance(val, str) else default


class Settings:
    def __init__(self, **overrides):
        # Server
        self.HOST: str = _env("HOST", "0.0.0.0")
        self.PORT: int = int(_env("PORT", "8080"))
        self.LOG_LEVEL: str = _env("LOG_LEVEL", "INFO").upper()

        # CORS
        self.ALLOWED_ORIGINS: list[str] = [
            s.strip() for s in _env("ALLOWED_ORIGINS", "http://localhost:5173").split(",") if s.strip()
        ]

        # Progress driver
        self.PROGRESS_INCREMENT: int = int(_env("PROGRESS_INCREMENT", "5"))
        self.PROGRESS_PERIOD_MS: int = int(_env("PROGRESS_PERIOD_MS", "2000"))

        # Status endpoint
        self.POLL_INTERVAL_MS: int = int(_env("POLL_INTERVAL_MS", "1000"))
        self.LONG_POLL_TIMEOUT_SECONDS: float = float(_env("LONG_POLL_TIMEOUT_SECONDS", "0"))
        self.STATUS_MODE: str = _env("STATUS_MODE", "immediate").lower()
        self.RESPONSE_FORMAT: str = _env("RESPONSE_FORMAT", "json").lower()

        # Registry lifecycle
        self.COMPLETED_JOB_TTL_SECONDS: float = float(_env("COMPLETED_JOB_TTL_SECONDS", "300"))
        self.SWEEP_INTERVAL_SECONDS: float = float(_env("SWEEP_INTERVAL_SECONDS", "30"))
        self.MAX_JOBS: int = int(_env("MAX_JOBS", "10000"))

        for key, value in overrides.items():
            if not hasattr(self, key):
                raise ValueError(f"Unknown setting: {key}")
            setattr(self, key, value)

        self.validate()

    def validate(self) -> None:
        if self.PROGRESS_INCREMENT <= 0:
            raise ValueError("PROGRESS_INCREMENT must be positive")
        if self.PROGRESS_PERIOD_MS <= 0:
            raise ValueError("PROGRESS_PERIOD_MS must be positive")
        if self.POLL_INTERVAL_MS <= 0:
            raise ValueError("POLL_INTERVAL_MS must be positive")
        if self.LONG_POLL_TIMEOUT_SECONDS < 0:
            raise ValueError("LONG_POLL_TIMEOUT_SECONDS must be >= 0")
        if self.STATUS_MODE not in STATUS_MODES:
            raise ValueError(f"STATUS_MODE must be one of {STATUS_MODES}, got {self.STATUS_MODE!r}")
        if self.RESPONSE_FORMAT not in RESPONSE_FORMATS:
            raise ValueError(f"RESPONSE_FORMAT must be one of {RESPONSE_FORMATS}, got {self.RESPONSE_FORMAT!r}")
        if self.SWEEP_INTERVAL_SECONDS <= 0:
            raise ValueError("SWEEP_INTERVAL_SECONDS must be positive")
        if self.MAX_JOBS <= 0:
            raise ValueError("MAX_JOBS must be positive")

    # seconds, for asyncio
    @property
    def progress_period(self) -> float:
        return self.PROGRESS_PERIOD_MS / 1000.0

    @property
    def poll_interval(self) -> float:
        return self.POLL_INTERVAL_MS / 1000.0

    @property
    def long_poll_timeout(self) -> Optional[float]:
        return self.LONG_POLL_TIMEOUT_SECONDS or None

    def to_api(self) -> dict:
        return {
            "port": self.PORT,
            "allowedOrigins": self.ALLOWED_ORIGINS,
            "progress": {
                "increment": self.PROGRESS_INCREMENT,
                "period_ms": self.PROGRESS_PERIOD_MS,
            },
            "status": {
                "mode": self.STATUS_MODE,
                "format": self.RESPONSE_FORMAT,
                "poll_interval_ms": self.POLL_INTERVAL_MS,
                "long_poll_timeout_s": self.LONG_POLL_TIMEOUT_SECONDS,
            },
            "registry": {
                "completed_ttl_s": self.COMPLETED_JOB_TTL_SECONDS,
                "sweep_interval_s": self.SWEEP_INTERVAL_SECONDS,
                "max_jobs": self.MAX_JOBS,
            },
        }


@lru_cache
def get_settings() -> Settings:
    return Settings()
