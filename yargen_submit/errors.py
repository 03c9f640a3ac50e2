class SubmitError(Exception):
    """Base class for every failure of a submission run."""


class SampleNotFoundError(SubmitError):
    def __init__(self, path: str):
        super().__init__(f"File not found: {path}")
        self.path = path


class ServerUnreachableError(SubmitError):
    def __init__(self, server_url: str):
        super().__init__(f"yarGen server not running at {server_url}")
        self.server_url = server_url


class UploadError(SubmitError):
    pass


class GenerationStartError(SubmitError):
    pass


class JobFailedError(SubmitError):
    def __init__(self, job_id: str, message: str = ""):
        text = f"generation failed: {message}" if message else "generation failed"
        super().__init__(text)
        self.job_id = job_id
        self.server_message = message


class JobTimeoutError(SubmitError):
    def __init__(self, job_id: str, max_wait: int):
        super().__init__(f"timeout after {max_wait} seconds (job: {job_id})")
        self.job_id = job_id
        self.max_wait = max_wait


class ResponseDecodeError(SubmitError):
    pass


class ArtifactFetchError(SubmitError):
    pass


class TransportError(SubmitError):
    pass


class OutputWriteError(SubmitError):
    pass
