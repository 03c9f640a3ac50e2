import logging
import os
import time
from pathlib import Path
from typing import BinaryIO, Callable, Optional, Union

import httpx

from .config import SubmitConfig
from .errors import SampleNotFoundError
from .models import GenerationRequest
from .poller import JobPoller
from .sink import write_artifact
from .transport import YarGenClient

logger = logging.getLogger(__name__)


def _log_transition(previous: Optional[str], current: str) -> None:
    logger.info("    Status: %s", current)


def submit_sample(
    sample_path: Union[str, Path],
    config: SubmitConfig,
    reference: Optional[str] = None,
    show_scores: bool = False,
    exclude_opcodes: bool = False,
    output: Optional[Union[str, Path]] = None,
    stream: Optional[BinaryIO] = None,
    http: Optional[httpx.Client] = None,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> bytes:
    """Upload a sample, generate rules for it and write them to the sink.

    Steps run strictly in order and the first failure aborts the run with a
    ``SubmitError``. Returns the rule set that was written.
    """
    sample_path = str(sample_path)
    if not os.path.exists(sample_path):
        raise SampleNotFoundError(sample_path)

    with YarGenClient(config.server_url, timeout=config.http_timeout, http=http) as client:
        logger.info("[*] Checking server at %s ...", config.server_url)
        client.health_check()

        logger.info("[+] Submitting: %s", os.path.basename(sample_path))
        job_id = client.upload(sample_path)

        logger.info("[+] Job ID: %s", job_id)
        logger.info("[*] Starting rule generation...")
        client.start_generation(
            GenerationRequest(
                job_id=job_id,
                author=config.author,
                reference=reference,
                show_scores=show_scores,
                exclude_opcodes=exclude_opcodes,
            )
        )

        logger.info("[*] Waiting for generation (max %ds)...", config.max_wait)
        poller = JobPoller(
            client.get_job,
            interval=config.poll_interval,
            on_transition=_log_transition,
            clock=clock,
            sleep=sleep,
        )
        outcome = poller.wait(job_id, config.max_wait)
        logger.debug("Job %s completed after %d polls (%.1fs)", job_id, outcome.polls, outcome.elapsed)

        rules = client.fetch_artifact(job_id)

    write_artifact(rules, output=output, stream=stream)
    if output:
        logger.info("[+] Rules saved to: %s", output)
    return rules
