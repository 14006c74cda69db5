"""
Error classifier - turns raw HTTP/network failures into actionable diagnoses.

Detection order (first match wins):
1. cross-origin policy
2. network unreachable
3. HTTP status ("HTTP <code>" in the message)
4. malformed JSON response
5. timeout
6. unknown

A bare "failed to fetch" style failure carries no signal telling a CORS block
apart from an unreachable host. It is reported as CORS, so it never reaches
the network check.
"""
import json
import re
import traceback
from dataclasses import dataclass, field, replace
from typing import List, Optional

import requests

from gristsync.errors.catalog import (
    FETCH_FROM_SOURCE,
    GENERAL,
    SYNC_TO_DESTINATION,
    ErrorKind,
    lookup,
)
from gristsync.errors.exceptions import GristSyncError, HttpStatusError

HTTP_STATUS_PATTERN = re.compile(r"HTTP (\d{3})")

CORS_MARKERS = ("cors", "cross-origin", "access-control-allow-origin")
FETCH_FAILURE_MARKERS = ("failed to fetch", "network request failed")
NETWORK_MARKERS = ("network", "networkerror", "connection", "refused", "econnrefused", "offline")
TIMEOUT_MARKERS = ("timeout", "timed out")

STATUS_KINDS = {
    401: ErrorKind.UNAUTHORIZED,
    403: ErrorKind.FORBIDDEN,
    404: ErrorKind.NOT_FOUND,
    422: ErrorKind.UNPROCESSABLE,
    500: ErrorKind.SERVER_ERROR,
    502: ErrorKind.SERVER_ERROR,
    503: ErrorKind.SERVER_ERROR,
    504: ErrorKind.SERVER_ERROR,
}

CONTEXT_ALIASES = {
    "api_fetch": FETCH_FROM_SOURCE,
    "fetch": FETCH_FROM_SOURCE,
    "grist_sync": SYNC_TO_DESTINATION,
    "sync": SYNC_TO_DESTINATION,
}


@dataclass(frozen=True)
class ErrorDiagnosis:
    """Human-readable explanation of a failure."""

    kind: ErrorKind
    title: str
    message: str
    explanation: str
    remediation_steps: List[str] = field(default_factory=list)
    technical_detail: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "kind": self.kind.value,
            "title": self.title,
            "message": self.message,
            "explanation": self.explanation,
            "remediation_steps": list(self.remediation_steps),
            "technical_detail": self.technical_detail,
        }


def _message_of(error: BaseException) -> str:
    return str(error) if error is not None else ""


def _is_cors_error(error: BaseException, message: str) -> bool:
    if isinstance(error, HttpStatusError):
        return False
    return any(marker in message for marker in CORS_MARKERS + FETCH_FAILURE_MARKERS)


def _is_network_error(error: BaseException, message: str) -> bool:
    if isinstance(error, (HttpStatusError, requests.Timeout)):
        return False
    if isinstance(error, (requests.ConnectionError, ConnectionError)):
        return True
    return any(marker in message for marker in NETWORK_MARKERS)


def _http_status_of(error: BaseException, raw_message: str) -> Optional[int]:
    if isinstance(error, HttpStatusError):
        return error.status_code
    match = HTTP_STATUS_PATTERN.search(raw_message)
    if match:
        return int(match.group(1))
    return None


def _is_invalid_json(error: BaseException, raw_message: str) -> bool:
    if isinstance(error, json.JSONDecodeError):
        return True
    return "JSON" in raw_message or "parse" in raw_message


def _is_timeout(error: BaseException, message: str) -> bool:
    if isinstance(error, (requests.Timeout, TimeoutError)):
        return True
    return any(marker in message for marker in TIMEOUT_MARKERS)


def _technical_trace(error: BaseException) -> str:
    if getattr(error, "__traceback__", None) is not None:
        return "".join(traceback.format_exception(type(error), error, error.__traceback__)).strip()
    return repr(error)


def _build(kind: ErrorKind, context: str, technical_detail: Optional[str], **values) -> ErrorDiagnosis:
    entry = lookup(kind, context)
    return ErrorDiagnosis(
        kind=kind,
        title=entry["title"].format(**values),
        message=entry["message"].format(**values),
        explanation=entry["explanation"].format(**values),
        remediation_steps=[step.format(**values) for step in entry["remediation"]],
        technical_detail=technical_detail,
    )


def normalize_context(context: Optional[str]) -> str:
    """Map a free-form context tag onto a catalog context."""
    if not context:
        return GENERAL
    return CONTEXT_ALIASES.get(context, context)


def classify_error(error: BaseException, context: str = GENERAL) -> ErrorDiagnosis:
    """
    Classify a caught failure.

    Args:
        error: The exception that was caught
        context: Call-site tag, e.g. "fetch-from-source" or "sync-to-destination".
            It only changes the wording, never the detected kind.

    Returns:
        ErrorDiagnosis with kind, texts and remediation steps
    """
    if isinstance(error, GristSyncError) and error.diagnosis is not None:
        return error.diagnosis

    context = normalize_context(context)
    raw_message = _message_of(error)
    message = raw_message.lower()

    if _is_cors_error(error, message):
        return _build(ErrorKind.CORS, context, raw_message or "CORS policy violation")

    if _is_network_error(error, message):
        return _build(ErrorKind.NETWORK, context, raw_message or "Network request failed")

    status = _http_status_of(error, raw_message)
    if status is not None:
        kind = STATUS_KINDS.get(status, ErrorKind.UNKNOWN_HTTP)
        return _build(kind, context, raw_message, status=status)

    if _is_invalid_json(error, raw_message):
        return _build(ErrorKind.INVALID_JSON, context, raw_message)

    if _is_timeout(error, message):
        return _build(ErrorKind.TIMEOUT, context, raw_message)

    diagnosis = _build(ErrorKind.UNKNOWN, context, _technical_trace(error))
    if raw_message:
        diagnosis = replace(diagnosis, message=raw_message)
    return diagnosis


def format_error_long(diagnosis: ErrorDiagnosis) -> str:
    """Title, explanation and bulleted remediation, for the sync log."""
    steps = "\n".join(f"  - {step}" for step in diagnosis.remediation_steps)
    return f"❌ {diagnosis.title}\n\n{diagnosis.explanation}\n\n💡 Solutions:\n{steps}"


def format_error_short(diagnosis: ErrorDiagnosis) -> str:
    """Message plus the first remediation step."""
    if not diagnosis.remediation_steps:
        return diagnosis.message
    return f"{diagnosis.message} - {diagnosis.remediation_steps[0]}"
