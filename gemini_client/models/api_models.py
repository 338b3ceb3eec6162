from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union, Annotated

from pydantic import BaseModel, Field

from .tools import FunctionCall, FunctionResponse, Tool

# --- Content parts ---

class TextPart(BaseModel):
    text: str
    thought: Optional[bool] = None
    model_config = {"populate_by_name": True, "frozen": True}

class Blob(BaseModel):
    mime_type: str = Field(alias="mimeType")
    data: str  # base64
    model_config = {"populate_by_name": True, "frozen": True}

class InlineDataPart(BaseModel):
    inline_data: Blob = Field(alias="inlineData")
    model_config = {"populate_by_name": True, "frozen": True}

class FunctionCallPart(BaseModel):
    function_call: FunctionCall = Field(alias="functionCall")
    model_config = {"populate_by_name": True, "frozen": True}

class FunctionResponsePart(BaseModel):
    function_response: FunctionResponse = Field(alias="functionResponse")
    model_config = {"populate_by_name": True, "frozen": True}

class RawPart(BaseModel):
    """Any part kind this client does not model (executableCode, fileData, ...), kept verbatim."""
    model_config = {"extra": "allow", "frozen": True}

Part = Annotated[
    Union[TextPart, InlineDataPart, FunctionCallPart, FunctionResponsePart, RawPart],
    Field(union_mode="left_to_right"),
]

# --- Messages ---

class Role(str, Enum):
    USER = "user"
    MODEL = "model"
    FUNCTION = "function"
    SYSTEM = "system"

class Content(BaseModel):
    parts: Tuple[Part, ...] = ()
    role: Optional[str] = None
    model_config = {"populate_by_name": True, "frozen": True}

    def text_parts(self, thoughts: bool = False) -> List[str]:
        return [
            p.text for p in self.parts
            if isinstance(p, TextPart) and bool(p.thought) == thoughts
        ]

    def function_calls(self) -> List[FunctionCall]:
        return [p.function_call for p in self.parts if isinstance(p, FunctionCallPart)]

class Message(Content):
    """One conversation turn: a role plus ordered parts."""
    role: Role

    @property
    def text(self) -> str:
        return "".join(self.text_parts())

    @classmethod
    def user(cls, text: str) -> "Message":
        return cls(role=Role.USER, parts=(TextPart(text=text),))

    @classmethod
    def model(cls, text: str) -> "Message":
        return cls(role=Role.MODEL, parts=(TextPart(text=text),))

    @classmethod
    def system(cls, text: str) -> "Message":
        return cls(role=Role.SYSTEM, parts=(TextPart(text=text),))

    @classmethod
    def function(cls, name: str, response: Any) -> "Message":
        return cls(
            role=Role.FUNCTION,
            parts=(FunctionResponsePart(function_response=FunctionResponse(name=name, response=response)),),
        )

    @classmethod
    def function_str(cls, name: str, response: str) -> "Message":
        return cls(
            role=Role.FUNCTION,
            parts=(FunctionResponsePart(function_response=FunctionResponse.from_str(name, response)),),
        )

# --- Generation parameters ---

class ThinkingConfig(BaseModel):
    include_thoughts: Optional[bool] = Field(None, alias="includeThoughts")
    thinking_budget: Optional[int] = Field(None, alias="thinkingBudget", ge=0, le=24576)
    model_config = {"populate_by_name": True, "frozen": True}

class GenerationConfig(BaseModel):
    temperature: Optional[float] = Field(None, ge=0.0, le=2.0)
    top_p: Optional[float] = Field(None, alias="topP", ge=0.0, le=1.0)
    top_k: Optional[int] = Field(None, alias="topK", gt=0)
    max_output_tokens: Optional[int] = Field(None, alias="maxOutputTokens", gt=0)
    candidate_count: Optional[int] = Field(None, alias="candidateCount", gt=0)
    stop_sequences: Optional[List[str]] = Field(None, alias="stopSequences")
    response_mime_type: Optional[str] = Field(None, alias="responseMimeType")
    response_schema: Optional[Dict[str, Any]] = Field(None, alias="responseSchema")
    thinking_config: Optional[ThinkingConfig] = Field(None, alias="thinkingConfig")
    model_config = {"populate_by_name": True, "frozen": True}

class FunctionCallingMode(str, Enum):
    AUTO = "AUTO"
    ANY = "ANY"
    NONE = "NONE"

class FunctionCallingConfig(BaseModel):
    mode: FunctionCallingMode
    allowed_function_names: Optional[List[str]] = Field(None, alias="allowedFunctionNames")
    model_config = {"populate_by_name": True, "frozen": True}

class ToolConfig(BaseModel):
    function_calling_config: Optional[FunctionCallingConfig] = Field(None, alias="functionCallingConfig")
    model_config = {"populate_by_name": True, "frozen": True}

class HarmCategory(str, Enum):
    HARASSMENT = "HARM_CATEGORY_HARASSMENT"
    HATE_SPEECH = "HARM_CATEGORY_HATE_SPEECH"
    SEXUALLY_EXPLICIT = "HARM_CATEGORY_SEXUALLY_EXPLICIT"
    DANGEROUS_CONTENT = "HARM_CATEGORY_DANGEROUS_CONTENT"
    CIVIC_INTEGRITY = "HARM_CATEGORY_CIVIC_INTEGRITY"

class HarmBlockThreshold(str, Enum):
    BLOCK_LOW_AND_ABOVE = "BLOCK_LOW_AND_ABOVE"
    BLOCK_MEDIUM_AND_ABOVE = "BLOCK_MEDIUM_AND_ABOVE"
    BLOCK_ONLY_HIGH = "BLOCK_ONLY_HIGH"
    BLOCK_NONE = "BLOCK_NONE"
    OFF = "OFF"

class SafetySetting(BaseModel):
    category: HarmCategory
    threshold: HarmBlockThreshold
    model_config = {"populate_by_name": True, "frozen": True}

# --- Request ---

class GenerateContentRequest(BaseModel):
    """Immutable snapshot of everything a builder accumulated."""
    contents: Tuple[Message, ...] = Field(min_length=1)
    system_instruction: Optional[Content] = Field(None, alias="systemInstruction")
    tools: Tuple[Tool, ...] = ()
    tool_config: Optional[ToolConfig] = Field(None, alias="toolConfig")
    safety_settings: Tuple[SafetySetting, ...] = Field((), alias="safetySettings")
    generation_config: Optional[GenerationConfig] = Field(None, alias="generationConfig")
    model_config = {"populate_by_name": True, "frozen": True}

    @property
    def system_prompt(self) -> Optional[str]:
        if self.system_instruction is None:
            return None
        return "".join(self.system_instruction.text_parts())

    def to_payload(self) -> Dict[str, Any]:
        """camelCase JSON body for generateContent / streamGenerateContent."""
        payload = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        for key in ("tools", "safetySettings"):
            if not payload.get(key):
                payload.pop(key, None)
        return payload

# --- Response ---

class SafetyRating(BaseModel):
    category: str
    probability: Optional[str] = None
    blocked: Optional[bool] = None
    model_config = {"populate_by_name": True}

class CitationSource(BaseModel):
    start_index: Optional[int] = Field(None, alias="startIndex")
    end_index: Optional[int] = Field(None, alias="endIndex")
    uri: Optional[str] = None
    title: Optional[str] = None
    license: Optional[str] = None
    publication_date: Optional[Any] = Field(None, alias="publicationDate")
    model_config = {"populate_by_name": True}

class CitationMetadata(BaseModel):
    citation_sources: List[CitationSource] = Field(default_factory=list, alias="citationSources")
    model_config = {"populate_by_name": True}

class Candidate(BaseModel):
    content: Optional[Content] = None
    finish_reason: Optional[str] = Field(None, alias="finishReason")
    safety_ratings: List[SafetyRating] = Field(default_factory=list, alias="safetyRatings")
    citation_metadata: Optional[CitationMetadata] = Field(None, alias="citationMetadata")
    grounding_metadata: Optional[Dict[str, Any]] = Field(None, alias="groundingMetadata")
    index: Optional[int] = None
    model_config = {"populate_by_name": True}

class UsageMetadata(BaseModel):
    prompt_token_count: Optional[int] = Field(None, alias="promptTokenCount")
    candidates_token_count: Optional[int] = Field(None, alias="candidatesTokenCount")
    thoughts_token_count: Optional[int] = Field(None, alias="thoughtsTokenCount")
    total_token_count: Optional[int] = Field(None, alias="totalTokenCount")
    model_config = {"populate_by_name": True}

class PromptFeedback(BaseModel):
    block_reason: Optional[str] = Field(None, alias="blockReason")
    safety_ratings: List[SafetyRating] = Field(default_factory=list, alias="safetyRatings")
    model_config = {"populate_by_name": True}

class GenerationResponse(BaseModel):
    candidates: List[Candidate] = Field(default_factory=list)
    prompt_feedback: Optional[PromptFeedback] = Field(None, alias="promptFeedback")
    usage_metadata: Optional[UsageMetadata] = Field(None, alias="usageMetadata")
    model_version: Optional[str] = Field(None, alias="modelVersion")
    model_config = {"populate_by_name": True, "protected_namespaces": ()}

    def _first_content(self) -> Optional[Content]:
        if not self.candidates:
            return None
        return self.candidates[0].content

    def text(self) -> str:
        """Concatenated non-thought text of the first candidate ('' when absent)."""
        content = self._first_content()
        return "".join(content.text_parts()) if content else ""

    def thoughts(self) -> str:
        content = self._first_content()
        return "".join(content.text_parts(thoughts=True)) if content else ""

    def function_calls(self) -> List[FunctionCall]:
        calls: List[FunctionCall] = []
        for candidate in self.candidates:
            if candidate.content is not None:
                calls.extend(candidate.content.function_calls())
        return calls

    @property
    def finish_reason(self) -> Optional[str]:
        return self.candidates[0].finish_reason if self.candidates else None
