import logging
import os
from typing import Optional

import httpx
from pydantic import BaseModel, ValidationError

from .errors import (
    ArtifactFetchError,
    GenerationStartError,
    ResponseDecodeError,
    ServerUnreachableError,
    TransportError,
    UploadError,
)
from .models import GenerationRequest, JobInfo, UploadResult

logger = logging.getLogger(__name__)

HEALTH_PATH = "/api/health"
UPLOAD_PATH = "/api/upload"
GENERATE_PATH = "/api/generate"


def _job_path(job_id: str) -> str:
    return f"/api/jobs/{job_id}"


def _rules_path(job_id: str) -> str:
    return f"/api/rules/{job_id}"


def _status_text(resp: httpx.Response) -> str:
    return f"{resp.status_code} {resp.reason_phrase}".strip()


def _decode(model: type, resp: httpx.Response, what: str) -> BaseModel:
    try:
        return model.model_validate_json(resp.content)
    except ValidationError as exc:
        raise ResponseDecodeError(f"invalid {what} response: {exc.errors()[0]['msg']}") from exc


class YarGenClient:
    """Blocking client for the yarGen job API.

    Every call is a single request; nothing is retried here. Pass ``http`` to
    reuse an existing ``httpx.Client`` (its ``base_url`` must point at the
    server); otherwise one is created for ``server_url`` and closed with the
    client.
    """

    def __init__(self, server_url: str, timeout: float = 60.0, http: Optional[httpx.Client] = None):
        self.server_url = server_url.rstrip("/")
        self._owns_http = http is None
        self._http = http if http is not None else httpx.Client(base_url=self.server_url, timeout=timeout)

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "YarGenClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            return self._http.request(method, path, **kwargs)
        except httpx.RequestError as exc:
            raise TransportError(f"{method} {self.server_url}{path} failed: {exc}") from exc

    def health_check(self) -> None:
        # liveness only: an error status still proves the server is there
        try:
            resp = self._http.get(HEALTH_PATH)
        except httpx.RequestError as exc:
            logger.debug("Health check against %s failed: %s", self.server_url, exc)
            raise ServerUnreachableError(self.server_url) from exc
        logger.debug("Health check returned %s", resp.status_code)

    def upload(self, path: str) -> str:
        try:
            fh = open(path, "rb")
        except OSError as exc:
            raise UploadError(f"upload failed: {exc}") from exc
        with fh:
            resp = self._request("POST", UPLOAD_PATH, files={"file": (os.path.basename(path), fh)})

        if resp.status_code != httpx.codes.OK:
            raise UploadError(f"upload failed: {_status_text(resp)}")

        result = _decode(UploadResult, resp, "upload")
        if not result.id:
            raise UploadError("no job ID received")
        return result.id

    def start_generation(self, request: GenerationRequest) -> None:
        resp = self._request("POST", GENERATE_PATH, json=request.payload())
        if resp.status_code != httpx.codes.OK:
            raise GenerationStartError(f"generation failed: {_status_text(resp)}")

    def get_job(self, job_id: str) -> JobInfo:
        resp = self._request("GET", _job_path(job_id))
        return _decode(JobInfo, resp, "job status")

    def fetch_artifact(self, job_id: str) -> bytes:
        resp = self._request("GET", _rules_path(job_id))
        if resp.status_code != httpx.codes.OK:
            raise ArtifactFetchError(f"fetching rules for job {job_id} failed: {_status_text(resp)}")
        return resp.content
