from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Optional
import uuid, time

MIN_PROGRESS = 0
MAX_PROGRESS = 100


class JobState(str, Enum):
    running = "running"
    complete = "complete"


def new_job_id() -> str:
    return f"job:{uuid.uuid4().hex}"


@dataclass
class Job:
    id: str = field(default_factory=new_job_id)
    progress: int = MIN_PROGRESS
    created_at: float = field(default_factory=time.time)
    # set once, when progress first hits MAX_PROGRESS
    completed_at: Optional[float] = None

    @property
    def state(self) -> JobState:
        return JobState.complete if self.progress >= MAX_PROGRESS else JobState.running

    @property
    def is_complete(self) -> bool:
        return self.state is JobState.complete

    def to_api(self) -> dict:
        d = asdict(self)
        d["state"] = self.state.value
        return d
