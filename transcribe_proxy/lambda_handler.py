"""
API Gateway proxy entry point.

Runs the same orchestration as the Flask blueprint for deployments that
invoke the proxy as a Lambda function.
"""
import base64
import json
import logging
import os
from functools import lru_cache
from typing import Any, Dict

from flask import Config

from config import get_config
from transcribe_proxy.api import CORS_HEADERS, error_body
from transcribe_proxy.errors import InputError, TranscribeProxyError
from transcribe_proxy.services.aws_service import get_clients
from transcribe_proxy.services.transcription_service import ProxySettings, TranscriptionService

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def load_config() -> Config:
    cfg = Config(os.getcwd())
    cfg.from_object(get_config())
    logging.getLogger("transcribe_proxy").setLevel(cfg.get("LOG_LEVEL", "INFO"))
    return cfg


@lru_cache(maxsize=1)
def get_service() -> TranscriptionService:
    cfg = load_config()
    return TranscriptionService(get_clients(cfg.get("AWS_REGION")), ProxySettings.from_mapping(cfg))


def create_response(status_code: int, body: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json", **CORS_HEADERS},
        "body": json.dumps(body),
    }


def parse_event_body(event: Dict[str, Any]) -> Any:
    raw = event.get("body") or ""
    if event.get("isBase64Encoded"):
        try:
            raw = base64.b64decode(raw).decode("utf-8")
        except (ValueError, UnicodeDecodeError) as e:
            raise InputError(f"Request body is not valid base64: {e}") from e
    try:
        return json.loads(raw)
    except ValueError as e:
        raise InputError(f"Request body is not valid JSON: {e}") from e


def event_method(event: Dict[str, Any]) -> str:
    # REST APIs set httpMethod; HTTP APIs (payload v2) nest it under requestContext
    method = event.get("httpMethod") or ((event.get("requestContext") or {}).get("http") or {}).get("method")
    return (method or "").upper()


def lambda_handler(event: Dict[str, Any], context: Any = None) -> Dict[str, Any]:
    if event_method(event) == "OPTIONS":
        return create_response(200, {})
    try:
        payload = parse_event_body(event)
        return create_response(200, get_service().handle_payload(payload))
    except TranscribeProxyError as e:
        logger.error("Transcription error: %s", e, exc_info=e if e.status_code >= 500 else None)
        return create_response(e.status_code, error_body(e))
    except Exception:
        logger.exception("Unhandled error while transcribing")
        return create_response(500, {"error": "Internal server error"})
