"""Fixtures: an in-process fake yarGen server and a fake clock.

The fake server speaks the same endpoints as the real one. Each GET of a job
returns the next status from ``statuses``; the last one repeats forever.
"""

import threading
import uuid
from typing import Dict, List, Optional

import pytest
from fastapi import FastAPI, File, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse, Response
from fastapi.testclient import TestClient

RULES = b'rule sample_rule {\n  strings:\n    $s1 = "evil" fullword ascii\n  condition:\n    $s1\n}\n'


class FakeYarGen:
    def __init__(self):
        self.statuses: List[str] = ["queued", "running", "completed"]
        self.error: Optional[str] = None
        self.rules: bytes = RULES
        self.upload_status = 200
        self.upload_body: Optional[dict] = None
        self.generate_status = 200
        self.health_status = 200

        self.uploads: Dict[str, bytes] = {}
        self.upload_names: List[str] = []
        self.generate_requests: List[dict] = []
        self.status_polls = 0
        self.rules_fetches = 0
        self.calls: List[str] = []
        self._lock = threading.Lock()

    def next_status(self) -> dict:
        with self._lock:
            idx = min(self.status_polls, len(self.statuses) - 1)
            self.status_polls += 1
            status = self.statuses[idx]
        body = {"status": status}
        if status == "failed" and self.error:
            body["error"] = self.error
        return body

    def build_app(self) -> FastAPI:
        app = FastAPI(title="fake yarGen")
        state = self

        @app.middleware("http")
        async def record(request: Request, call_next):
            state.calls.append(f"{request.method} {request.url.path}")
            return await call_next(request)

        @app.get("/api/health")
        def health():
            return JSONResponse({"status": "ok"}, status_code=state.health_status)

        @app.post("/api/upload")
        async def upload(file: UploadFile = File(...)):
            if state.upload_status != 200:
                return JSONResponse({"detail": "rejected"}, status_code=state.upload_status)
            job_id = uuid.uuid4().hex
            state.uploads[job_id] = await file.read()
            state.upload_names.append(file.filename)
            if state.upload_body is not None:
                return state.upload_body
            return {"id": job_id}

        @app.post("/api/generate")
        async def generate(request: Request):
            state.generate_requests.append(await request.json())
            if state.generate_status != 200:
                return JSONResponse({"detail": "busy"}, status_code=state.generate_status)
            return {"status": "started"}

        @app.get("/api/jobs/{job_id}")
        def get_job(job_id: str):
            return state.next_status()

        @app.get("/api/rules/{job_id}")
        def get_rules(job_id: str):
            state.rules_fetches += 1
            if not state.rules:
                raise HTTPException(status_code=404, detail="rules not found")
            return Response(content=state.rules, media_type="text/plain")

        return app


class FakeClock:
    def __init__(self):
        self.now = 0.0
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_server() -> FakeYarGen:
    return FakeYarGen()


@pytest.fixture
def http(fake_server):
    with TestClient(fake_server.build_app()) as client:
        yield client


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sample(tmp_path):
    p = tmp_path / "sample.exe"
    p.write_bytes(b"MZ\x90\x00" + bytes(range(256)) * 4)
    return p
