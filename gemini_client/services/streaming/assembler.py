"""
Streaming response assembly.

Fragments are merged in strict arrival order:
- text and thought deltas are concatenated
- tool-call argument pieces are concatenated per call id (first-seen order)
- the first fragment marked final closes the stream

A stream that stops (or whose transport fails) before the final fragment
surfaces TruncatedStreamError carrying the partial aggregate.
"""

from __future__ import annotations

import logging
from typing import Any, AsyncIterable, AsyncIterator, Dict, Optional, Tuple

import httpx
import orjson
from pydantic import BaseModel

from ...core.errors import FunctionCallError, TransportError, TruncatedStreamError
from ...models.api_models import UsageMetadata
from ...models.tools import FunctionCall

logger = logging.getLogger("GeminiClient.StreamProcessors.Assembler")


class ToolCallFragment(BaseModel):
    call_id: str
    name: Optional[str] = None
    arguments_delta: str = ""
    model_config = {"frozen": True}


class StreamFragment(BaseModel):
    """One partial unit of a streamed response."""
    text: str = ""
    thought: str = ""
    tool_calls: Tuple[ToolCallFragment, ...] = ()
    final: bool = False
    finish_reason: Optional[str] = None
    usage_metadata: Optional[UsageMetadata] = None
    model_config = {"frozen": True}


class ToolCall(BaseModel):
    id: str
    name: Optional[str] = None
    arguments: str = ""
    model_config = {"frozen": True}

    def parsed_arguments(self) -> Any:
        if not self.arguments:
            return {}
        try:
            return orjson.loads(self.arguments)
        except orjson.JSONDecodeError as e:
            raise FunctionCallError(f"Arguments of tool call '{self.id}' are not valid JSON: {e}") from e

    def to_function_call(self) -> FunctionCall:
        return FunctionCall(name=self.name or "", args=self.parsed_arguments(), id=self.id)


class StreamAggregate(BaseModel):
    """Snapshot of everything assembled so far."""
    text: str = ""
    thoughts: str = ""
    tool_calls: Tuple[ToolCall, ...] = ()
    finish_reason: Optional[str] = None
    usage_metadata: Optional[UsageMetadata] = None
    fragment_count: int = 0
    complete: bool = False
    model_config = {"frozen": True}

    def tool_call(self, call_id: str) -> Optional[ToolCall]:
        return next((c for c in self.tool_calls if c.id == call_id), None)


class StreamAssembler:
    def __init__(self, request_id: Optional[str] = None):
        self.log_prefix = f"RID-{request_id}" if request_id else "RID-local"
        self._text = ""
        self._thoughts = ""
        # first-seen order; only calls touched by a fragment are rebuilt
        self._tool_calls: Dict[str, ToolCall] = {}
        self._tool_call_tuple: Tuple[ToolCall, ...] = ()
        self._finish_reason: Optional[str] = None
        self._usage_metadata: Optional[UsageMetadata] = None
        self._fragment_count = 0
        self._complete = False

    @property
    def complete(self) -> bool:
        return self._complete

    def feed(self, fragment: StreamFragment) -> StreamAggregate:
        if self._complete:
            logger.warning(f"{self.log_prefix}: Ignoring fragment received after the final fragment")
            return self.snapshot()

        self._fragment_count += 1
        if fragment.text:
            self._text += fragment.text
        if fragment.thought:
            self._thoughts += fragment.thought

        for piece in fragment.tool_calls:
            current = self._tool_calls.get(piece.call_id)
            if current is None:
                current = ToolCall(id=piece.call_id)
            self._tool_calls[piece.call_id] = ToolCall(
                id=piece.call_id,
                name=piece.name or current.name,
                arguments=current.arguments + piece.arguments_delta,
            )
        if fragment.tool_calls:
            self._tool_call_tuple = tuple(self._tool_calls.values())

        if fragment.usage_metadata is not None:
            self._usage_metadata = fragment.usage_metadata
        if fragment.finish_reason:
            self._finish_reason = fragment.finish_reason
        if fragment.final:
            self._complete = True
            logger.debug(f"{self.log_prefix}: Final fragment received after {self._fragment_count} fragment(s), "
                         f"finish_reason={self._finish_reason}")

        return self.snapshot()

    def snapshot(self) -> StreamAggregate:
        return StreamAggregate(
            text=self._text,
            thoughts=self._thoughts,
            tool_calls=self._tool_call_tuple,
            finish_reason=self._finish_reason,
            usage_metadata=self._usage_metadata,
            fragment_count=self._fragment_count,
            complete=self._complete,
        )

    def finish(self) -> StreamAggregate:
        """Return the final aggregate, or raise TruncatedStreamError if no final fragment arrived."""
        aggregate = self.snapshot()
        if not self._complete:
            logger.warning(f"{self.log_prefix}: Stream ended without a final fragment "
                           f"({aggregate.fragment_count} fragments, {len(aggregate.text)} chars)")
            raise TruncatedStreamError(aggregate)
        return aggregate


async def assemble(
    fragments: AsyncIterable[StreamFragment],
    assembler: Optional[StreamAssembler] = None,
) -> AsyncIterator[StreamAggregate]:
    """
    Consume `fragments` in arrival order, yielding a snapshot after each one.

    Stops reading at the final fragment and closes the source. Raises
    TruncatedStreamError (chained to the transport failure, if any) when the
    source ends or breaks before the final fragment.
    """
    assembler = assembler or StreamAssembler()
    try:
        async for fragment in fragments:
            yield assembler.feed(fragment)
            if assembler.complete:
                break
    except TransportError as e:
        raise TruncatedStreamError(assembler.snapshot(), f"Stream interrupted: {e}") from e
    except httpx.HTTPError as e:
        raise TruncatedStreamError(assembler.snapshot(), f"Stream interrupted: {type(e).__name__}: {e}") from e
    finally:
        aclose = getattr(fragments, "aclose", None)
        if aclose is not None:
            await aclose()
    assembler.finish()
