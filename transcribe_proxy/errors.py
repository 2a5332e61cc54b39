"""
Errors raised while proxying a transcription request.

Every class carries the HTTP status the API answers with.
"""


class TranscribeProxyError(Exception):
    status_code = 500


class InputError(TranscribeProxyError):
    """Malformed request body or audio encoding"""
    status_code = 400


class DependencyError(TranscribeProxyError):
    """S3, Transcribe or the result fetch failed"""

    def __init__(self, dependency: str, message: str):
        self.dependency = dependency
        super().__init__(f"{dependency} failed: {message}")


class JobFailedError(TranscribeProxyError):
    """Transcribe reported the job as FAILED"""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Transcription failed: {reason}")


class TranscriptionTimeoutError(TranscribeProxyError):
    status_code = 504

    def __init__(self, max_wait_seconds: int):
        self.max_wait_seconds = max_wait_seconds
        super().__init__(f"Transcription timeout after {max_wait_seconds} seconds")


class ResultParseError(TranscribeProxyError):
    """Result document missing or malformed"""
