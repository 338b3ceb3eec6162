# -*- coding: utf-8 -*-
"""
Fluent builder for generateContent requests.

Configuration calls mutate only the builder and return it for chaining.
Singletons (system prompt, each generation parameter, function calling mode)
are last-write-wins; messages, tools and safety settings are append-only.
build() validates everything and returns a frozen GenerateContentRequest.
"""

from __future__ import annotations

import base64
import copy
import logging
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Tuple, Union

from pydantic import ValidationError as PydanticValidationError

from ....core.errors import ValidationError
from ....models.api_models import (
    Blob,
    Content,
    FunctionCallingConfig,
    FunctionCallingMode,
    GenerateContentRequest,
    GenerationConfig,
    GenerationResponse,
    HarmBlockThreshold,
    HarmCategory,
    InlineDataPart,
    Message,
    Role,
    SafetySetting,
    TextPart,
    ToolConfig,
)
from ....models.tools import FunctionDeclaration, Tool

if TYPE_CHECKING:
    from ....client import GeminiClient
    from ...streaming.processor import ResponseStream

logger = logging.getLogger("GeminiClient.Services.Requests.ContentBuilder")


class ContentBuilder:
    def __init__(self, client: Optional["GeminiClient"] = None):
        self._client = client
        self._system_prompt: Optional[str] = None
        self._contents: List[Message] = []
        self._generation_params: Dict[str, Any] = {}
        self._tools: List[Tool] = []
        self._function_calling: Optional[Dict[str, Any]] = None
        self._safety_settings: List[Tuple[Any, Any]] = []

    # --- messages ---

    def with_system_prompt(self, text: str) -> "ContentBuilder":
        self._system_prompt = text
        return self

    def with_user_message(self, text: str) -> "ContentBuilder":
        return self.with_message(Message.user(text))

    def with_model_message(self, text: str) -> "ContentBuilder":
        return self.with_message(Message.model(text))

    def with_message(self, message: Message) -> "ContentBuilder":
        """Append a message; a system-role message sets the system prompt instead."""
        if message.role == Role.SYSTEM:
            return self.with_system_prompt(message.text)
        self._contents.append(message)
        return self

    def with_messages(self, messages: Iterable[Message]) -> "ContentBuilder":
        for message in messages:
            self.with_message(message)
        return self

    def with_function_response(self, name: str, response: Any) -> "ContentBuilder":
        return self.with_message(Message.function(name, response))

    def with_function_response_str(self, name: str, response: str) -> "ContentBuilder":
        return self.with_message(Message.function_str(name, response))

    def with_inline_data(self, mime_type: str, data: Union[bytes, str]) -> "ContentBuilder":
        """
        Attach inline media (image, audio, pdf...) to the last user message,
        or start a new user message when the last turn is not the user's.
        `data` is raw bytes or an already base64-encoded string.
        """
        if isinstance(data, bytes):
            data = base64.b64encode(data).decode("ascii")
        part = InlineDataPart(inline_data=Blob(mime_type=mime_type, data=data))

        if self._contents and self._contents[-1].role == Role.USER:
            last = self._contents[-1]
            self._contents[-1] = Message(role=Role.USER, parts=last.parts + (part,))
        else:
            self._contents.append(Message(role=Role.USER, parts=(part,)))
        return self

    # --- generation parameters ---

    def with_generation_config(self, config: GenerationConfig) -> "ContentBuilder":
        """Replace all generation parameters set so far."""
        self._generation_params = config.model_dump(exclude_none=True)
        return self

    def _set_param(self, name: str, value: Any) -> "ContentBuilder":
        self._generation_params[name] = value
        return self

    def with_temperature(self, temperature: float) -> "ContentBuilder":
        return self._set_param("temperature", temperature)

    def with_top_p(self, top_p: float) -> "ContentBuilder":
        return self._set_param("top_p", top_p)

    def with_top_k(self, top_k: int) -> "ContentBuilder":
        return self._set_param("top_k", top_k)

    def with_max_output_tokens(self, max_output_tokens: int) -> "ContentBuilder":
        return self._set_param("max_output_tokens", max_output_tokens)

    def with_candidate_count(self, candidate_count: int) -> "ContentBuilder":
        return self._set_param("candidate_count", candidate_count)

    def with_stop_sequences(self, stop_sequences: Iterable[str]) -> "ContentBuilder":
        return self._set_param("stop_sequences", list(stop_sequences))

    def with_response_mime_type(self, mime_type: str) -> "ContentBuilder":
        return self._set_param("response_mime_type", mime_type)

    def with_response_schema(self, schema: Dict[str, Any]) -> "ContentBuilder":
        return self._set_param("response_schema", copy.deepcopy(schema))

    def with_thinking_budget(self, thinking_budget: int, include_thoughts: Optional[bool] = None) -> "ContentBuilder":
        thinking: Dict[str, Any] = {"thinking_budget": thinking_budget}
        if include_thoughts is not None:
            thinking["include_thoughts"] = include_thoughts
        return self._set_param("thinking_config", thinking)

    # --- tools ---

    def with_tool(self, tool: Tool) -> "ContentBuilder":
        self._tools.append(tool)
        return self

    def with_function(self, function: FunctionDeclaration) -> "ContentBuilder":
        return self.with_tool(Tool.function(function))

    def with_google_search(self) -> "ContentBuilder":
        return self.with_tool(Tool.google_search())

    def with_code_execution(self) -> "ContentBuilder":
        return self.with_tool(Tool.code_execution())

    def with_function_calling_mode(
        self,
        mode: Union[FunctionCallingMode, str],
        allowed_function_names: Optional[Iterable[str]] = None,
    ) -> "ContentBuilder":
        if isinstance(mode, str):
            mode = mode.upper()
        self._function_calling = {"mode": mode}
        if allowed_function_names is not None:
            self._function_calling["allowed_function_names"] = list(allowed_function_names)
        return self

    def with_safety_setting(
        self,
        category: Union[HarmCategory, str],
        threshold: Union[HarmBlockThreshold, str],
    ) -> "ContentBuilder":
        self._safety_settings.append((category, threshold))
        return self

    # --- finalization ---

    def build(self) -> GenerateContentRequest:
        """
        Snapshot the accumulated state into an immutable request.

        Raises ValidationError when there is no message or a parameter is
        out of range. The builder stays usable; later calls never touch
        requests built earlier.
        """
        if not self._contents:
            raise ValidationError("A request needs at least one message")

        try:
            generation_config = None
            if self._generation_params:
                generation_config = GenerationConfig(**copy.deepcopy(self._generation_params))
            tool_config = None
            if self._function_calling is not None:
                tool_config = ToolConfig(function_calling_config=FunctionCallingConfig(**self._function_calling))
            safety_settings = tuple(
                SafetySetting(category=category, threshold=threshold)
                for category, threshold in self._safety_settings
            )
            system_instruction = None
            if self._system_prompt is not None:
                system_instruction = Content(parts=(TextPart(text=self._system_prompt),))

            return GenerateContentRequest(
                contents=tuple(m.model_copy(deep=True) for m in self._contents),
                system_instruction=system_instruction,
                tools=tuple(t.model_copy(deep=True) for t in self._tools),
                tool_config=tool_config,
                safety_settings=safety_settings,
                generation_config=generation_config,
            )
        except PydanticValidationError as e:
            logger.warning(f"Rejected invalid request: {e.error_count()} validation error(s)")
            raise ValidationError(f"Invalid request: {e}") from e

    def _require_client(self) -> "GeminiClient":
        if self._client is None:
            raise ValidationError("This builder is not bound to a client; use Gemini.generate_content()")
        return self._client

    async def execute(self) -> GenerationResponse:
        client = self._require_client()
        return await client.generate_content_raw(self.build())

    async def execute_stream(self) -> "ResponseStream":
        client = self._require_client()
        return await client.generate_content_stream(self.build())
