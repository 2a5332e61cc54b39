"""
Request orchestration: upload -> start job -> poll -> fetch -> cleanup.

Any failure before the result is assembled propagates as a
TranscribeProxyError; the temporary S3 object is released on every exit
path once it exists, and a failed release is only logged.
"""
from __future__ import annotations

import base64
import binascii
import logging
import re
import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, Mapping, Tuple

from transcribe_proxy.errors import InputError, TranscribeProxyError
from transcribe_proxy.models import JobHandle, TempObjectRef, TranscriptionRequest, TranscriptionResult
from transcribe_proxy.services import aws_service, result_service
from transcribe_proxy.services.aws_service import AwsClients
from transcribe_proxy.services.poller import JobPoller

logger = logging.getLogger(__name__)

JOB_SUFFIX_LENGTH = 8


@dataclass(frozen=True)
class ProxySettings:
    bucket: str
    job_name_prefix: str = "opic"
    temp_key_prefix: str = "temp/"
    media_format: str = "webm"
    content_type: str = "audio/webm"
    default_language_code: str = "en-US"
    result_fetch_timeout: float = 10

    @classmethod
    def from_mapping(cls, cfg: Mapping[str, Any]) -> "ProxySettings":
        """Build from a Flask config mapping"""
        return cls(
            bucket=(cfg.get("TEMP_BUCKET") or "").strip(),
            job_name_prefix=cfg.get("JOB_NAME_PREFIX", "opic"),
            temp_key_prefix=cfg.get("TEMP_KEY_PREFIX", "temp/"),
            media_format=cfg.get("MEDIA_FORMAT", "webm"),
            content_type=cfg.get("AUDIO_CONTENT_TYPE", "audio/webm"),
            default_language_code=cfg.get("DEFAULT_LANGUAGE_CODE", "en-US"),
            result_fetch_timeout=float(cfg.get("RESULT_FETCH_TIMEOUT", 10)),
        )


def decode_audio(audio_b64: Any) -> bytes:
    if not isinstance(audio_b64, str):
        raise InputError("audio_data must be a base64 string")
    logger.debug("Audio data length: %d chars", len(audio_b64))
    try:
        data = base64.b64decode(audio_b64, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InputError(f"audio_data is not valid base64: {e}") from e
    if not data:
        raise InputError("audio_data is empty")
    return data


def parse_request(payload: Any, default_language_code: str = "en-US") -> TranscriptionRequest:
    if not isinstance(payload, dict):
        raise InputError("Request body must be a JSON object")
    if "audio_data" not in payload:
        raise InputError("Missing audio_data")
    session_id = payload.get("session_id")
    if not isinstance(session_id, str) or not session_id.strip():
        raise InputError("Missing session_id")
    language_code = payload.get("language_code") or default_language_code
    if not isinstance(language_code, str):
        raise InputError("language_code must be a string")

    return TranscriptionRequest(
        audio_data=decode_audio(payload.get("audio_data")),
        session_id=session_id.strip(),
        language_code=language_code.strip(),
    )


def new_job_name(prefix: str, session_id: str) -> str:
    # Transcribe job names only allow [0-9a-zA-Z._-]
    safe = re.sub(r"[^0-9a-zA-Z._-]", "", session_id or "")
    return f"{prefix}-{safe}-{uuid.uuid4().hex[:JOB_SUFFIX_LENGTH]}"


@contextmanager
def temp_object(s3, ref: TempObjectRef) -> Iterator[TempObjectRef]:
    """Yield the uploaded object and delete it afterwards, whatever happened."""
    try:
        yield ref
    finally:
        try:
            aws_service.delete_object(s3, ref)
        except Exception as e:
            # The bucket lifecycle policy expires anything we leave behind
            logger.warning("Failed to delete temp file (lifecycle will handle): %s", e)


class TranscriptionService:
    """Runs one transcription request end to end."""

    def __init__(self, clients: AwsClients, settings: ProxySettings, sleep: Callable[[float], None] = time.sleep):
        self._clients = clients
        self._settings = settings
        self._sleep = sleep

    def transcribe(self, request: TranscriptionRequest) -> Tuple[str, TranscriptionResult]:
        settings = self._settings
        if not settings.bucket:
            raise TranscribeProxyError("TEMP_BUCKET not set")

        job_name = new_job_name(settings.job_name_prefix, request.session_id)
        ref = TempObjectRef(bucket=settings.bucket, key=f"{settings.temp_key_prefix}{job_name}.{settings.media_format}")
        logger.debug("Decoded audio size: %d bytes", len(request.audio_data))

        aws_service.put_audio(self._clients.s3, ref, request.audio_data, settings.content_type)

        with temp_object(self._clients.s3, ref):
            handle = JobHandle(job_name=job_name, media_uri=ref.uri)
            aws_service.start_transcription(
                self._clients.transcribe,
                handle,
                media_format=settings.media_format,
                language_code=request.language_code,
            )
            poller = JobPoller(
                get_status=lambda name: aws_service.get_transcription_status(self._clients.transcribe, name),
                fetch_result=lambda uri: result_service.fetch_transcript_result(
                    self._clients.http, uri, timeout=settings.result_fetch_timeout
                ),
                sleep=self._sleep,
            )
            result = poller.wait(handle.job_name)

        logger.debug("Transcript: %s", result.transcript)
        return job_name, result

    def handle_payload(self, payload: Any) -> Dict[str, Any]:
        """Parse an inbound JSON body and return the success response body."""
        request = parse_request(payload, self._settings.default_language_code)
        logger.info("Processing transcription for session: %s", request.session_id)
        job_name, result = self.transcribe(request)
        return result.to_dict(job_name)
