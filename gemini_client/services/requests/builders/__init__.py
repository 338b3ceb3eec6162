# -*- coding: utf-8 -*-
"""
Request builders package.

Contains the fluent ContentBuilder and the thin Gemini REST request
preparation helpers.
"""
from .content_builder import ContentBuilder
from .gemini_builder import (
    build_target_url,
    normalize_model_name,
    prepare_gemini_rest_api_request,
)

__all__ = [
    "ContentBuilder",
    "build_target_url",
    "normalize_model_name",
    "prepare_gemini_rest_api_request",
]
