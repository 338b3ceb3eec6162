"""
Headers for Gemini REST API requests.
"""

from __future__ import annotations

from typing import Dict

from ...core.config import APP_VERSION


def build_gemini_headers(api_key: str, stream: bool = False) -> Dict[str, str]:
    """
    - Content-Type: application/json
    - x-goog-api-key: <api_key> (kept out of the URL so it never lands in logs)
    - Accept: text/event-stream for streamed calls
    """
    headers: Dict[str, str] = {
        "Content-Type": "application/json",
        "x-goog-api-key": api_key,
        "User-Agent": f"gemini-client/{APP_VERSION}",
    }
    if stream:
        headers["Accept"] = "text/event-stream,application/json"
    else:
        headers["Accept"] = "application/json"
    return headers
