"""
Gemini API client.

`Gemini` is the public entry point: it owns the API key, the target model and
an httpx.AsyncClient, and hands out ContentBuilders. `GeminiClient` is the
transport underneath: one POST per call, no retries, errors mapped onto the
gemini_client error hierarchy.
"""
import logging
import uuid
from typing import Optional

import httpx
import orjson
from pydantic import ValidationError as PydanticValidationError

from .core.config import (
    DEFAULT_MODEL,
    GEMINI_API_BASE_URL,
    GEMINI_API_KEY_ENV,
    GEMINI_API_VERSION,
    PRO_MODEL,
)
from .core.errors import ApiError, MissingApiKeyError
from .core.http_client import close_http_client, create_http_client
from .core.logging_utils import mask_api_key
from .models.api_models import GenerateContentRequest, GenerationResponse
from .services.requests.builders import (
    ContentBuilder,
    normalize_model_name,
    prepare_gemini_rest_api_request,
)
from .services.streaming.error_handling import (
    api_error_from_body,
    api_error_from_payload,
    map_transport_error,
)
from .services.streaming.processor import ResponseStream

logger = logging.getLogger("GeminiClient.Client")


def new_request_id() -> str:
    return uuid.uuid4().hex[:12]


class GeminiClient:
    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str = GEMINI_API_BASE_URL,
        api_version: str = GEMINI_API_VERSION,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key
        self.model = normalize_model_name(model)
        self.base_url = base_url
        self.api_version = api_version
        self._http_client = http_client
        self._owns_http_client = http_client is None

    @property
    def http_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = create_http_client()
        return self._http_client

    def _prepare(self, request: GenerateContentRequest, request_id: str, stream: bool):
        return prepare_gemini_rest_api_request(
            request,
            api_key=self.api_key,
            model=self.model,
            request_id=request_id,
            stream=stream,
            base_url=self.base_url,
            api_version=self.api_version,
        )

    async def generate_content_raw(self, request: GenerateContentRequest) -> GenerationResponse:
        request_id = new_request_id()
        log_prefix = f"RID-{request_id}"
        target_url, headers, body = self._prepare(request, request_id, stream=False)

        try:
            response = await self.http_client.post(target_url, headers=headers, content=body)
        except httpx.HTTPError as e:
            raise map_transport_error(e, request_id) from e

        if not response.is_success:
            raise api_error_from_body(response.status_code, response.content, request_id)

        try:
            data = orjson.loads(response.content)
        except orjson.JSONDecodeError as e:
            logger.error(f"{log_prefix}: Gemini returned a non-JSON body ({len(response.content)} bytes)")
            raise ApiError(response.status_code, f"Invalid JSON in response: {e}") from e

        if isinstance(data, dict) and "error" in data:
            raise api_error_from_payload(response.status_code, data, request_id)

        try:
            result = GenerationResponse.model_validate(data)
        except PydanticValidationError as e:
            raise ApiError(response.status_code, f"Unexpected response shape: {e}") from e

        logger.info(f"{log_prefix}: Gemini response received. candidates={len(result.candidates)}, "
                    f"finish_reason={result.finish_reason}")
        return result

    async def generate_content_stream(self, request: GenerateContentRequest) -> ResponseStream:
        request_id = new_request_id()
        log_prefix = f"RID-{request_id}"
        target_url, headers, body = self._prepare(request, request_id, stream=True)

        http_request = self.http_client.build_request("POST", target_url, headers=headers, content=body)
        try:
            response = await self.http_client.send(http_request, stream=True)
        except httpx.HTTPError as e:
            raise map_transport_error(e, request_id) from e

        if not response.is_success:
            try:
                error_body = await response.aread()
            except httpx.HTTPError as e:
                raise map_transport_error(e, request_id) from e
            finally:
                await response.aclose()
            raise api_error_from_body(response.status_code, error_body, request_id)

        logger.info(f"{log_prefix}: Gemini stream opened (status {response.status_code})")
        return ResponseStream(response, request_id)

    async def aclose(self) -> None:
        if self._owns_http_client:
            await close_http_client(self._http_client)
            self._http_client = None


class Gemini:
    """
    Client for the Gemini API.

        async with Gemini() as gemini:
            response = await (
                gemini.generate_content()
                .with_system_prompt("You are terse.")
                .with_user_message("Hello")
                .execute()
            )
            print(response.text())
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        *,
        base_url: str = GEMINI_API_BASE_URL,
        api_version: str = GEMINI_API_VERSION,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        key = api_key or GEMINI_API_KEY_ENV
        if not key:
            raise MissingApiKeyError()
        self._client = GeminiClient(
            key,
            model,
            base_url=base_url,
            api_version=api_version,
            http_client=http_client,
        )
        logger.info(f"Gemini client ready. model={self._client.model}, key={mask_api_key(key)}, base='{base_url}'")

    @classmethod
    def pro(cls, api_key: Optional[str] = None, **kwargs) -> "Gemini":
        return cls(api_key, PRO_MODEL, **kwargs)

    @classmethod
    def with_model(cls, api_key: Optional[str], model: str, **kwargs) -> "Gemini":
        return cls(api_key, model, **kwargs)

    @property
    def model(self) -> str:
        return self._client.model

    def generate_content(self) -> ContentBuilder:
        """Start building a content generation request."""
        return ContentBuilder(self._client)

    async def generate(self, request: GenerateContentRequest) -> GenerationResponse:
        return await self._client.generate_content_raw(request)

    async def stream(self, request: GenerateContentRequest) -> ResponseStream:
        return await self._client.generate_content_stream(request)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "Gemini":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
