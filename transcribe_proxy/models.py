"""
Transcription Records

Key Types:
- TranscriptionRequest: decoded inbound call
- JobHandle: a submitted Transcribe job and the media it points at
- JobSnapshot: one status check of a job
- TranscriptionResult: transcript plus averaged confidence
- TempObjectRef: uploaded audio awaiting cleanup
"""
from dataclasses import dataclass
from typing import Optional
import enum


class JobStatus(enum.Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"

    @classmethod
    def from_transcribe(cls, raw: str) -> "JobStatus":
        """Map a TranscriptionJobStatus value onto the three states we act on"""
        value = (raw or "").strip().upper()
        if value == "COMPLETED":
            return cls.COMPLETED
        if value == "FAILED":
            return cls.FAILED
        return cls.IN_PROGRESS


class PollState(enum.Enum):
    SUBMITTED = "submitted"
    POLLING = "polling"
    COMPLETED = "completed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True)
class TranscriptionRequest:
    audio_data: bytes
    session_id: str
    language_code: str = "en-US"


@dataclass(frozen=True)
class TempObjectRef:
    bucket: str
    key: str

    @property
    def uri(self) -> str:
        return f"s3://{self.bucket}/{self.key}"


@dataclass(frozen=True)
class JobHandle:
    job_name: str
    media_uri: str


@dataclass(frozen=True)
class JobSnapshot:
    status: JobStatus
    result_uri: Optional[str] = None
    failure_reason: Optional[str] = None


@dataclass(frozen=True)
class TranscriptionResult:
    transcript: str
    confidence: float = 0.0

    def to_dict(self, job_name: str) -> dict:
        return {
            "transcript": self.transcript,
            "job_name": job_name,
            "confidence": self.confidence,
        }
