import os
from dataclasses import dataclass

DEFAULT_SERVER_URL = "http://127.0.0.1:8080"
DEFAULT_AUTHOR = "yarGen"
DEFAULT_POLL_INTERVAL_SEC = 3.0
DEFAULT_MAX_WAIT_SEC = 600
DEFAULT_HTTP_TIMEOUT_SEC = 60.0


@dataclass(frozen=True)
class SubmitConfig:
    server_url: str = DEFAULT_SERVER_URL
    author: str = DEFAULT_AUTHOR
    poll_interval: float = DEFAULT_POLL_INTERVAL_SEC
    max_wait: int = DEFAULT_MAX_WAIT_SEC
    http_timeout: float = DEFAULT_HTTP_TIMEOUT_SEC

    def __post_init__(self):
        if self.poll_interval <= 0:
            raise ValueError(f"poll interval must be positive, got {self.poll_interval}")
        if self.max_wait < 0:
            raise ValueError(f"max wait must not be negative, got {self.max_wait}")
        if self.http_timeout <= 0:
            raise ValueError(f"http timeout must be positive, got {self.http_timeout}")
        # "http://host:8080/" and "http://host:8080" address the same endpoints
        object.__setattr__(self, "server_url", self.server_url.rstrip("/"))

    @classmethod
    def from_env(cls) -> "SubmitConfig":
        return cls(
            server_url=os.environ.get("YARGEN_SERVER_URL", DEFAULT_SERVER_URL),
            author=os.environ.get("YARGEN_AUTHOR", DEFAULT_AUTHOR),
            poll_interval=float(os.environ.get("YARGEN_POLL_INTERVAL_SEC", str(DEFAULT_POLL_INTERVAL_SEC))),
            max_wait=int(os.environ.get("YARGEN_MAX_WAIT_SEC", str(DEFAULT_MAX_WAIT_SEC))),
            http_timeout=float(os.environ.get("YARGEN_HTTP_TIMEOUT_SEC", str(DEFAULT_HTTP_TIMEOUT_SEC))),
        )
