"""Transcribe result document fetching and parsing."""
from __future__ import annotations

import logging
import math
from typing import Any, Dict

import requests

from transcribe_proxy.errors import DependencyError, ResultParseError
from transcribe_proxy.models import TranscriptionResult

logger = logging.getLogger(__name__)

SCORED_ITEM_TYPE = "pronunciation"


def fetch_result_document(http: requests.Session, uri: str, timeout: float = 10) -> Dict[str, Any]:
    """GET the result file Transcribe published and decode it as JSON.

    Not retried: the job already succeeded, so a failing fetch is exceptional.
    """
    try:
        r = http.get(uri, timeout=timeout)
        r.raise_for_status()
    except requests.RequestException as e:
        raise DependencyError("Result fetch", str(e)) from e
    try:
        data = r.json()
    except ValueError as e:
        raise ResultParseError(f"Result document is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ResultParseError("Result document is not a JSON object")
    return data


def extract_transcript(data: Dict[str, Any]) -> str:
    results = data.get("results")
    if not isinstance(results, dict):
        raise ResultParseError("Result document has no 'results' object")
    transcripts = results.get("transcripts")
    if not isinstance(transcripts, list) or not transcripts:
        raise ResultParseError("Result document has no transcripts")
    first = transcripts[0]
    txt = first.get("transcript") if isinstance(first, dict) else None
    if not isinstance(txt, str):
        raise ResultParseError("First transcript entry has no transcript text")
    return txt


def average_confidence(data: Dict[str, Any]) -> float:
    """
    Mean confidence of the first alternative of every pronunciation item.

    Punctuation carries no score and is skipped. Confidence is a secondary
    metric, so any structural problem degrades to 0.0 instead of failing.
    """
    try:
        items = (data.get("results") or {}).get("items") or []
        total = 0.0
        count = 0
        for item in items:
            if item.get("type") != SCORED_ITEM_TYPE:
                continue
            alternatives = item.get("alternatives") or []
            if not alternatives:
                continue
            # Transcribe serializes confidence as a string
            total += float(alternatives[0]["confidence"])
            count += 1
        if count == 0:
            return 0.0
        avg = total / count
        if not math.isfinite(avg):
            return 0.0
        return min(max(avg, 0.0), 1.0)
    except Exception as e:
        logger.warning("Failed to calculate confidence: %s", e)
        return 0.0


def fetch_transcript_result(http: requests.Session, uri: str, timeout: float = 10) -> TranscriptionResult:
    data = fetch_result_document(http, uri, timeout=timeout)
    transcript = extract_transcript(data)
    return TranscriptionResult(transcript=transcript, confidence=average_confidence(data))
