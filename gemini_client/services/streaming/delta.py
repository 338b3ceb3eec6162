"""
Delta utilities: turn one streamed GenerationResponse chunk into a StreamFragment.

Provides:
- fragment_from_chunk(chunk, processing_state, request_id) -> StreamFragment
  Only the first candidate is followed. Thought parts go to `thought`, other
  text to `text`. Each functionCall part arrives complete and becomes one
  tool-call fragment keyed by its id, or by a positional "call_<n>" when the
  API sends no id. A finishReason (or a prompt block) marks the fragment final.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import orjson

from ...models.api_models import FunctionCallPart, GenerationResponse, TextPart
from .assembler import StreamFragment, ToolCallFragment

logger = logging.getLogger("GeminiClient.StreamProcessors.Delta")


def fragment_from_chunk(
    chunk: GenerationResponse,
    processing_state: Dict[str, Any],
    request_id: Optional[str] = None,
) -> StreamFragment:
    log_prefix = f"RID-{request_id}"
    texts: List[str] = []
    thoughts: List[str] = []
    tool_calls: List[ToolCallFragment] = []
    finish_reason: Optional[str] = None

    candidate = chunk.candidates[0] if chunk.candidates else None
    if candidate is not None:
        finish_reason = candidate.finish_reason
        parts = candidate.content.parts if candidate.content is not None else ()
        for part in parts:
            if isinstance(part, TextPart):
                if part.thought:
                    thoughts.append(part.text)
                else:
                    texts.append(part.text)
            elif isinstance(part, FunctionCallPart):
                index = processing_state.get("tool_call_count", 0)
                processing_state["tool_call_count"] = index + 1
                call = part.function_call
                tool_calls.append(ToolCallFragment(
                    call_id=call.id or f"call_{index}",
                    name=call.name,
                    arguments_delta=orjson.dumps(call.args).decode("utf-8"),
                ))
            else:
                logger.debug(f"{log_prefix}: Skipping non-text part in stream: {type(part).__name__}")

    if finish_reason is None and chunk.prompt_feedback is not None and chunk.prompt_feedback.block_reason:
        finish_reason = chunk.prompt_feedback.block_reason
        logger.warning(f"{log_prefix}: Prompt blocked by the API: {finish_reason}")

    return StreamFragment(
        text="".join(texts),
        thought="".join(thoughts),
        tool_calls=tuple(tool_calls),
        final=finish_reason is not None,
        finish_reason=finish_reason,
        usage_metadata=chunk.usage_metadata,
    )
