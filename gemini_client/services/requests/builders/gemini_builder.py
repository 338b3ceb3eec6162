# -*- coding: utf-8 -*-
"""
Gemini REST API request preparation (thin, focused).

- Normalizes model names to the "models/<name>" resource form.
- Builds the generateContent / streamGenerateContent (SSE) URL.
- Encodes the immutable request snapshot as the JSON body with orjson.
"""

from __future__ import annotations

import logging
from typing import Dict, Tuple

import orjson

from ....core.config import GEMINI_API_BASE_URL, GEMINI_API_VERSION
from ....core.errors import ValidationError
from ....models.api_models import GenerateContentRequest
from ..headers import build_gemini_headers

logger = logging.getLogger("GeminiClient.Services.Requests.GeminiBuilder")


def normalize_model_name(model: str) -> str:
    """'gemini-2.0-flash' -> 'models/gemini-2.0-flash'; tuned models keep their prefix."""
    model = (model or "").strip().strip("/")
    if not model:
        raise ValidationError("Model name must not be empty")
    if model.startswith("models/") or model.startswith("tunedModels/"):
        return model
    return f"models/{model}"


def build_target_url(
    model: str,
    stream: bool,
    base_url: str = GEMINI_API_BASE_URL,
    api_version: str = GEMINI_API_VERSION,
) -> str:
    """
    {base}/{version}/{model}:generateContent
    {base}/{version}/{model}:streamGenerateContent?alt=sse
    """
    base = base_url.rstrip("/")
    # proxies are sometimes configured with the version already in the path
    if not base.endswith(f"/{api_version}"):
        base = f"{base}/{api_version}"
    endpoint = "streamGenerateContent" if stream else "generateContent"
    url = f"{base}/{normalize_model_name(model)}:{endpoint}"
    if stream:
        url = f"{url}?alt=sse"
    return url


def prepare_gemini_rest_api_request(
    request: GenerateContentRequest,
    api_key: str,
    model: str,
    request_id: str,
    stream: bool = False,
    base_url: str = GEMINI_API_BASE_URL,
    api_version: str = GEMINI_API_VERSION,
) -> Tuple[str, Dict[str, str], bytes]:
    """
    Build a Gemini REST API request:
    - Target URL (generateContent, or streamGenerateContent with alt=sse)
    - Headers with x-goog-api-key
    - orjson-encoded body from the request snapshot
    """
    log_prefix = f"RID-{request_id}"

    target_url = build_target_url(model, stream, base_url, api_version)
    headers = build_gemini_headers(api_key, stream=stream)
    payload = request.to_payload()

    logger.info(f"{log_prefix}: Prepared Gemini REST API request. URL: {target_url} "
                f"Payload keys: {list(payload.keys())}, contents: {len(payload.get('contents', []))}, "
                f"tools: {[t.kind for t in request.tools]}")
    if "generationConfig" in payload:
        logger.debug(f"{log_prefix}: generationConfig in REST payload: {payload['generationConfig']}")

    return target_url, headers, orjson.dumps(payload)
