from .api_models import (
    Blob,
    Candidate,
    CitationMetadata,
    CitationSource,
    Content,
    FunctionCallingConfig,
    FunctionCallingMode,
    FunctionCallPart,
    FunctionResponsePart,
    GenerateContentRequest,
    GenerationConfig,
    GenerationResponse,
    HarmBlockThreshold,
    HarmCategory,
    InlineDataPart,
    Message,
    Part,
    PromptFeedback,
    RawPart,
    Role,
    SafetyRating,
    SafetySetting,
    TextPart,
    ThinkingConfig,
    ToolConfig,
    UsageMetadata,
)
from .tools import (
    FunctionCall,
    FunctionDeclaration,
    FunctionParameters,
    FunctionResponse,
    PropertyDetails,
    Tool,
    value_to_function_parameters,
)
