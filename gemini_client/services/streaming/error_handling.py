import logging
from typing import Any, Optional

import httpx
import orjson

from ...core.errors import ApiError, TransportError

logger = logging.getLogger("GeminiClient.StreamProcessors.ErrorHandling")


def describe_status(status_code: int) -> str:
    if status_code == 400:
        return "Bad request (400): check the model name and request parameters."
    if status_code == 401:
        return "Authentication failed (401): check the API key."
    if status_code == 403:
        return "Access denied (403): check API key permissions or quota."
    if status_code == 404:
        return "Endpoint not found (404): check the model name and API address."
    if status_code == 429:
        return "Too many requests (429): the API is rate limiting this key."
    if status_code >= 500:
        return f"Gemini server error ({status_code})."
    return f"HTTP error {status_code}"


def map_transport_error(error: httpx.HTTPError, request_id: Optional[str] = None) -> TransportError:
    log_prefix = f"RID-{request_id}"

    if isinstance(error, httpx.TimeoutException):
        message = "Request to Gemini API timed out."
    elif isinstance(error, httpx.ConnectError):
        message = f"Could not connect to Gemini API: {error}"
    elif isinstance(error, (httpx.ReadError, httpx.RemoteProtocolError)):
        message = f"Connection to Gemini API was interrupted: {error}"
    elif isinstance(error, httpx.RequestError):
        message = f"Network error: {error}"
    else:
        message = f"HTTP error: {type(error).__name__} - {error}"

    logger.error(f"{log_prefix}: Transport error: {type(error).__name__} - {error}")
    return TransportError(message)


def api_error_from_payload(status_code: int, data: Any, request_id: Optional[str] = None) -> ApiError:
    """
    Build an ApiError from a decoded error body:
    {"error": {"code": 400, "message": "...", "status": "INVALID_ARGUMENT", "details": [...]}}
    Streamed errors sometimes arrive wrapped in a one-element list.
    """
    if isinstance(data, list) and data:
        data = data[0]

    error = data.get("error") if isinstance(data, dict) else None
    if not isinstance(error, dict):
        return ApiError(status_code=status_code, message=describe_status(status_code))

    code = error.get("code")
    if isinstance(code, int) and status_code < 400:
        status_code = code
    message = error.get("message") or describe_status(status_code)
    details = error.get("details") if isinstance(error.get("details"), list) else None

    logger.error(f"RID-{request_id}: Gemini API error {status_code} ({error.get('status')}): {str(message)[:200]}")
    return ApiError(status_code=status_code, message=str(message), status=error.get("status"), details=details)


def api_error_from_body(status_code: int, body: bytes, request_id: Optional[str] = None) -> ApiError:
    try:
        data = orjson.loads(body) if body else None
    except orjson.JSONDecodeError:
        text = body.decode(errors="ignore").strip()
        logger.error(f"RID-{request_id}: Gemini upstream error {status_code}: {text[:200]}")
        return ApiError(status_code=status_code, message=text[:500] or describe_status(status_code))
    return api_error_from_payload(status_code, data, request_id)
