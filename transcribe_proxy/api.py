"""
API Blueprint - transcription proxy endpoint
"""
from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request
from werkzeug.exceptions import HTTPException

from transcribe_proxy.errors import TranscribeProxyError
from transcribe_proxy.services.aws_service import get_clients
from transcribe_proxy.services.transcription_service import ProxySettings, TranscriptionService

api_bp = Blueprint('api', __name__)

CORS_HEADERS: Dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, X-Api-Key",
}


def get_service() -> TranscriptionService:
    """Service bound to this app; clients are shared process-wide."""
    service = current_app.extensions.get("transcription_service")
    if service is None:
        clients = get_clients(current_app.config.get("AWS_REGION"))
        service = TranscriptionService(clients, ProxySettings.from_mapping(current_app.config))
        current_app.extensions["transcription_service"] = service
    return service


def error_body(e: Exception) -> Dict[str, Any]:
    return {"error": str(e)}


@api_bp.after_app_request
def add_cors_headers(response):
    response.headers.update(CORS_HEADERS)
    return response


@api_bp.route("/transcribe", methods=["POST", "OPTIONS"])
def transcribe():
    if request.method == "OPTIONS":
        return jsonify({}), 200
    payload = request.get_json(force=True, silent=True)
    body = get_service().handle_payload(payload)
    return jsonify(body), 200


@api_bp.errorhandler(TranscribeProxyError)
def handle_proxy_error(e: TranscribeProxyError):
    current_app.logger.error("Transcription error: %s", e, exc_info=e if e.status_code >= 500 else None)
    return jsonify(error_body(e)), e.status_code


@api_bp.app_errorhandler(HTTPException)
def handle_http_error(e: HTTPException):
    return jsonify({"error": e.description}), e.code


@api_bp.errorhandler(Exception)
def handle_unexpected_error(e: Exception):
    current_app.logger.exception("Unhandled error while transcribing")
    return jsonify({"error": "Internal server error"}), 500
