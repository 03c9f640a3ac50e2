from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


class JobState(str, Enum):
    QUEUED = "queued"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    UNKNOWN = "unknown"  # any status string the server adds later

    @classmethod
    def _missing_(cls, value):
        return cls.UNKNOWN

    @property
    def is_terminal(self) -> bool:
        return self in (JobState.COMPLETED, JobState.FAILED)


class UploadResult(BaseModel):
    id: Optional[str] = None


class GenerationRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    job_id: str
    author: str = "yarGen"
    reference: Optional[str] = None
    show_scores: bool = False
    exclude_opcodes: bool = False

    def payload(self) -> Dict[str, Any]:
        data = self.model_dump()
        # reference is left out entirely when not set
        if not data["reference"]:
            del data["reference"]
        return data


class JobInfo(BaseModel):
    status: str
    error: Optional[str] = None

    @property
    def state(self) -> JobState:
        return JobState(self.status)
