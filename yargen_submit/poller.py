import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from .errors import JobFailedError, JobTimeoutError
from .models import JobInfo, JobState

logger = logging.getLogger(__name__)

TransitionCallback = Callable[[Optional[str], str], None]


class PollState(str, Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


@dataclass
class PollOutcome:
    state: PollState
    job: JobInfo
    polls: int
    elapsed: float


class JobPoller:
    """Polls one job at a fixed interval until it is terminal or the deadline passes.

    The first query happens right away. ``max_wait`` is wall-clock time from the
    start of ``wait()``; the loop stops once it is used up, even if the job is
    still running server-side.
    """

    def __init__(
        self,
        get_job: Callable[[str], JobInfo],
        interval: float = 3.0,
        on_transition: Optional[TransitionCallback] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.get_job = get_job
        self.interval = interval
        self.on_transition = on_transition
        self.clock = clock
        self.sleep = sleep
        self.state = PollState.RUNNING

    def wait(self, job_id: str, max_wait: int) -> PollOutcome:
        start = self.clock()
        last_status: Optional[str] = None
        polls = 0
        self.state = PollState.RUNNING

        while self.clock() - start < max_wait:
            job = self.get_job(job_id)
            polls += 1

            if last_status is None:
                logger.debug("Job %s initial status: %s", job_id, job.status)
            elif job.status != last_status:
                if self.on_transition is not None:
                    self.on_transition(last_status, job.status)
            last_status = job.status

            state = job.state
            if state is JobState.COMPLETED:
                self.state = PollState.COMPLETED
                return PollOutcome(self.state, job, polls, self.clock() - start)
            if state is JobState.FAILED:
                self.state = PollState.FAILED
                raise JobFailedError(job_id, job.error or "")

            self.sleep(self.interval)

        self.state = PollState.TIMED_OUT
        logger.debug("Job %s still %r after %d polls", job_id, last_status, polls)
        raise JobTimeoutError(job_id, max_wait)
