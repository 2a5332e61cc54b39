"""
Test Configuration and Fixtures
"""
import base64
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from transcribe_proxy import create_app
from transcribe_proxy.services.aws_service import AwsClients
from transcribe_proxy.services.transcription_service import ProxySettings, TranscriptionService

RESULT_URI = "https://s3.us-east-1.amazonaws.com/aws-transcribe-us-east-1-prod/result.json"
AUDIO_BYTES = b"\x1aE\xdf\xa3fake-webm-audio\x00\xff"
AUDIO_B64 = base64.b64encode(AUDIO_BYTES).decode("ascii")


def job_response(status, uri=None, reason=None):
    """Shape of transcribe.get_transcription_job()"""
    job = {"TranscriptionJobName": "job", "TranscriptionJobStatus": status}
    if uri:
        job["Transcript"] = {"TranscriptFileUri": uri}
    if reason:
        job["FailureReason"] = reason
    return {"TranscriptionJob": job}


def result_document(transcript="hello world", items=None):
    """Shape of the JSON file Transcribe publishes"""
    if items is None:
        items = [
            {"type": "pronunciation", "alternatives": [{"confidence": "0.92", "content": "hello"}]},
        ]
    return {
        "jobName": "job",
        "status": "COMPLETED",
        "results": {
            "transcripts": [{"transcript": transcript}],
            "items": items,
        },
    }


def client_error(operation, code="InternalError"):
    return ClientError({"Error": {"Code": code, "Message": f"{operation} broke"}}, operation)


class FakeSleep:
    """Records requested sleeps instead of blocking"""

    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)

    @property
    def total(self):
        return sum(self.calls)


@pytest.fixture
def fake_sleep():
    return FakeSleep()


@pytest.fixture
def clients():
    """AWS and HTTP clients with a job that completes on the first check"""
    s3 = MagicMock()
    transcribe = MagicMock()
    transcribe.get_transcription_job.return_value = job_response("COMPLETED", uri=RESULT_URI)

    http = MagicMock()
    http_response = MagicMock()
    http_response.json.return_value = result_document()
    http.get.return_value = http_response

    return AwsClients(s3=s3, transcribe=transcribe, http=http)


@pytest.fixture
def settings():
    return ProxySettings(bucket="test-temp-bucket")


@pytest.fixture
def service(clients, settings, fake_sleep):
    return TranscriptionService(clients, settings, sleep=fake_sleep)


@pytest.fixture
def app(service):
    """Create application for testing"""
    app = create_app('testing')
    app.extensions["transcription_service"] = service
    yield app


@pytest.fixture
def client(app):
    """Create test client"""
    return app.test_client()
