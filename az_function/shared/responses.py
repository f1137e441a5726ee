import json
from typing import Any, Dict, Optional, Tuple

import azure.functions as func

from .errors import AirtableError, ConfigurationError

CORS_HEADERS: Dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
    "Access-Control-Max-Age": "86400",
}

INTERNAL_ERROR = (500, "Internal server error")

# Upstream status -> (caller status, error category)
STATUS_CATEGORIES: Dict[int, Tuple[int, str]] = {
    401: (401, "Authentication error"),
    403: (403, "Permission denied"),
    404: (404, "Resource not found"),
    422: (422, "Invalid request"),
    429: (429, "Rate limit exceeded"),
}

# Legacy message matching, used only for exceptions raised outside the Airtable client.
_MESSAGE_MARKERS = (
    (("401", "Unauthorized"), 401),
    (("403", "Forbidden"), 403),
    (("404", "Not Found"), 404),
    (("422", "Unprocessable"), 422),
    (("429", "Too Many Requests"), 429),
)


def classify_error(exc: Exception) -> Tuple[int, str]:
    """Pick the caller-facing status code and error category for a failed fetch."""
    if isinstance(exc, ConfigurationError):
        return 500, "Server configuration error"
    if isinstance(exc, AirtableError):
        if exc.status_code is None:
            return INTERNAL_ERROR
        return STATUS_CATEGORIES.get(exc.status_code, INTERNAL_ERROR)
    message = str(exc)
    for markers, code in _MESSAGE_MARKERS:
        if any(m in message for m in markers):
            return STATUS_CATEGORIES[code]
    return INTERNAL_ERROR


def json_response(status_code: int, payload: Any, headers: Optional[Dict[str, str]] = None) -> func.HttpResponse:
    hdrs = dict(CORS_HEADERS)
    if headers:
        hdrs.update(headers)
    body = json.dumps(payload, ensure_ascii=False).encode("utf-8")
    return func.HttpResponse(status_code=status_code, mimetype="application/json", body=body, headers=hdrs)


def preflight_response() -> func.HttpResponse:
    return func.HttpResponse(status_code=200, mimetype="application/json", headers=dict(CORS_HEADERS))


def error_response(
    status_code: int,
    error: str,
    message: str,
    headers: Optional[Dict[str, str]] = None,
    extra: Optional[Dict[str, Any]] = None,
) -> func.HttpResponse:
    payload: Dict[str, Any] = {"success": False, "error": error, "message": message}
    if extra:
        payload.update(extra)
    return json_response(status_code, payload, headers=headers)
