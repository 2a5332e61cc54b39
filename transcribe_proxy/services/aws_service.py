"""AWS operations wrapper.

S3 holds the uploaded audio; Transcribe runs the speech-to-text job.
Clients are built once per process and shared read-only across requests.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Optional

import boto3
import requests
from botocore.exceptions import BotoCoreError, ClientError

from transcribe_proxy.errors import DependencyError
from transcribe_proxy.models import JobHandle, JobSnapshot, JobStatus, TempObjectRef

logger = logging.getLogger(__name__)

AWS_ERRORS = (BotoCoreError, ClientError)


@dataclass(frozen=True)
class AwsClients:
    s3: Any
    transcribe: Any
    http: requests.Session


@lru_cache(maxsize=None)
def get_clients(region: Optional[str] = None) -> AwsClients:
    region = (region or "").strip() or None
    return AwsClients(
        s3=boto3.client("s3", region_name=region),
        transcribe=boto3.client("transcribe", region_name=region),
        http=requests.Session(),
    )


def put_audio(s3, ref: TempObjectRef, data: bytes, content_type: str) -> None:
    try:
        s3.put_object(Bucket=ref.bucket, Key=ref.key, Body=data, ContentType=content_type)
    except AWS_ERRORS as e:
        raise DependencyError("S3 upload", str(e)) from e
    logger.info("Audio uploaded to s3://%s/%s", ref.bucket, ref.key)


def delete_object(s3, ref: TempObjectRef) -> None:
    s3.delete_object(Bucket=ref.bucket, Key=ref.key)


def start_transcription(transcribe, handle: JobHandle, media_format: str, language_code: str) -> None:
    try:
        transcribe.start_transcription_job(
            TranscriptionJobName=handle.job_name,
            Media={"MediaFileUri": handle.media_uri},
            MediaFormat=media_format,
            LanguageCode=language_code,
        )
    except AWS_ERRORS as e:
        raise DependencyError("Transcribe start", str(e)) from e
    logger.info("Transcription job started: %s (%s)", handle.job_name, language_code)


def get_transcription_status(transcribe, job_name: str) -> JobSnapshot:
    try:
        r = transcribe.get_transcription_job(TranscriptionJobName=job_name)
    except AWS_ERRORS as e:
        raise DependencyError("Transcribe status", str(e)) from e
    job = (r or {}).get("TranscriptionJob") or {}
    status = JobStatus.from_transcribe(job.get("TranscriptionJobStatus"))
    result_uri = ((job.get("Transcript") or {}).get("TranscriptFileUri") or "").strip() or None
    reason = job.get("FailureReason")
    return JobSnapshot(status=status, result_uri=result_uri, failure_reason=reason)
