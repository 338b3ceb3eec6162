import logging
from typing import Any, AsyncIterator, Dict, Optional

import httpx
import orjson
from pydantic import ValidationError as PydanticValidationError

from ...core.config import SSE_DATA_PREFIX, SSE_DONE_MARKER
from ...models.api_models import GenerationResponse
from .assembler import StreamAggregate, StreamAssembler, StreamFragment, assemble
from .delta import fragment_from_chunk
from .error_handling import api_error_from_payload, map_transport_error

logger = logging.getLogger("GeminiClient.StreamProcessors")


def parse_sse_line(line: str, request_id: Optional[str] = None, status_code: int = 200) -> Optional[GenerationResponse]:
    """
    Parse one line of a streamGenerateContent body.

    Accepts SSE ("data: {...}") and bare JSON-per-line. Blank lines, SSE
    comments/fields, "[DONE]" and non-JSON lines yield None. An error object
    raises ApiError.
    """
    log_prefix = f"RID-{request_id}"
    line = line.strip()
    if not line:
        return None

    if line.startswith(SSE_DATA_PREFIX):
        json_str = line[len(SSE_DATA_PREFIX):].strip()
    elif line.startswith("{"):
        json_str = line
    else:
        # event:, id:, retry:, ": keep-alive"
        return None

    if not json_str or json_str == SSE_DONE_MARKER:
        return None

    try:
        data = orjson.loads(json_str)
    except orjson.JSONDecodeError:
        logger.warning(f"{log_prefix}: Skipping non-JSON line in Gemini stream: {line[:200]}")
        return None

    # streamed errors sometimes arrive wrapped in a one-element list
    if isinstance(data, list) and len(data) == 1:
        data = data[0]

    if isinstance(data, dict) and "error" in data:
        raise api_error_from_payload(status_code, data, request_id)

    try:
        return GenerationResponse.model_validate(data)
    except PydanticValidationError as e:
        logger.warning(f"{log_prefix}: Skipping malformed Gemini stream chunk: {e.error_count()} error(s)")
        return None


class ResponseStream:
    """
    A streamed generateContent call.

    Iterating yields a StreamAggregate snapshot after every fragment. Reading
    stops at the final fragment; the HTTP response is closed on completion,
    on error, on cancellation, and by aclose() / leaving `async with`.
    """

    def __init__(self, response: httpx.Response, request_id: str):
        self._response = response
        self.request_id = request_id
        self._assembler = StreamAssembler(request_id)
        self._iterator: Optional[AsyncIterator[StreamAggregate]] = None

    @property
    def aggregate(self) -> StreamAggregate:
        return self._assembler.snapshot()

    @property
    def status_code(self) -> int:
        return self._response.status_code

    async def chunks(self) -> AsyncIterator[GenerationResponse]:
        """Raw parsed chunks, in arrival order."""
        try:
            async for line in self._response.aiter_lines():
                chunk = parse_sse_line(line, self.request_id, self._response.status_code)
                if chunk is not None:
                    yield chunk
        except httpx.HTTPError as e:
            raise map_transport_error(e, self.request_id) from e
        finally:
            await self._response.aclose()

    async def fragments(self) -> AsyncIterator[StreamFragment]:
        processing_state: Dict[str, Any] = {}
        chunks = self.chunks()
        try:
            async for chunk in chunks:
                yield fragment_from_chunk(chunk, processing_state, self.request_id)
        finally:
            await chunks.aclose()

    def __aiter__(self) -> AsyncIterator[StreamAggregate]:
        if self._iterator is None:
            self._iterator = assemble(self.fragments(), self._assembler)
        return self._iterator

    async def collect(self) -> StreamAggregate:
        """Drain the stream and return the final aggregate."""
        final = self._assembler.snapshot()
        async for aggregate in self:
            final = aggregate
        return final

    async def aclose(self) -> None:
        if self._iterator is not None:
            await self._iterator.aclose()
        await self._response.aclose()

    async def __aenter__(self) -> "ResponseStream":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
