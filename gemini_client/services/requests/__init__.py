"""
Requests building package.
"""

from .builders import (
    ContentBuilder,
    build_target_url,
    normalize_model_name,
    prepare_gemini_rest_api_request,
)
from .headers import build_gemini_headers

__all__ = [
    "ContentBuilder",
    "build_target_url",
    "normalize_model_name",
    "prepare_gemini_rest_api_request",
    "build_gemini_headers",
]
