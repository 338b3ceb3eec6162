"""
gemini_client: an async client for the Gemini generateContent API.
"""

from .client import Gemini, GeminiClient
from .core.config import APP_VERSION as __version__
from .core.errors import (
    ApiError,
    FunctionCallError,
    GeminiError,
    MissingApiKeyError,
    TransportError,
    TruncatedStreamError,
    ValidationError,
)
from .models import (
    Candidate,
    Content,
    FunctionCall,
    FunctionCallingMode,
    FunctionDeclaration,
    FunctionParameters,
    FunctionResponse,
    GenerateContentRequest,
    GenerationConfig,
    GenerationResponse,
    HarmBlockThreshold,
    HarmCategory,
    Message,
    PropertyDetails,
    Role,
    SafetySetting,
    Tool,
    UsageMetadata,
    value_to_function_parameters,
)
from .services.requests import ContentBuilder
from .services.streaming import (
    ResponseStream,
    StreamAggregate,
    StreamAssembler,
    StreamFragment,
    ToolCall,
    ToolCallFragment,
    assemble,
)

__all__ = [
    "Gemini",
    "GeminiClient",
    "ContentBuilder",
    "ResponseStream",
    "StreamAggregate",
    "StreamAssembler",
    "StreamFragment",
    "ToolCall",
    "ToolCallFragment",
    "assemble",
    "GeminiError",
    "ValidationError",
    "MissingApiKeyError",
    "TransportError",
    "ApiError",
    "TruncatedStreamError",
    "FunctionCallError",
    "Candidate",
    "Content",
    "FunctionCall",
    "FunctionCallingMode",
    "FunctionDeclaration",
    "FunctionParameters",
    "FunctionResponse",
    "GenerateContentRequest",
    "GenerationConfig",
    "GenerationResponse",
    "HarmBlockThreshold",
    "HarmCategory",
    "Message",
    "PropertyDetails",
    "Role",
    "SafetySetting",
    "Tool",
    "UsageMetadata",
    "value_to_function_parameters",
]
