"""Canonical messages and their conversion to provider formats."""

from promptshape.core.config import ConversionSettings, GenerationParams, SettingsLoader
from promptshape.core.detector import ApiFormat, detect_format_from_model
from promptshape.core.errors import (
    FormatConversionError,
    InvalidMessageError,
    ResponseParseError,
    SettingsError,
)
from promptshape.core.models import (
    DEFAULT_NAMES,
    CanonicalMessage,
    ContentPart,
    FunctionCall,
    ImageUrlPart,
    NamesContext,
    PassthroughPart,
    TextPart,
    ToolCall,
    ToolCallIdPart,
    ToolCallsPart,
    VideoUrlPart,
)
from promptshape.core.request import ProviderRequest, build_request
from promptshape.core.tools import ToolDefinition, extract_tool_calls
from promptshape.core.transpiler import Transpiler, get_transpiler
from promptshape.core.transpilers import (
    ClaudePrompt,
    GooglePrompt,
    convert_claude_messages,
    convert_google_messages,
    convert_openai_messages,
)

__all__ = [
    "DEFAULT_NAMES",
    "ApiFormat",
    "CanonicalMessage",
    "ClaudePrompt",
    "ContentPart",
    "ConversionSettings",
    "FormatConversionError",
    "FunctionCall",
    "GenerationParams",
    "GooglePrompt",
    "ImageUrlPart",
    "InvalidMessageError",
    "NamesContext",
    "PassthroughPart",
    "ProviderRequest",
    "ResponseParseError",
    "SettingsError",
    "SettingsLoader",
    "TextPart",
    "ToolCall",
    "ToolCallIdPart",
    "ToolCallsPart",
    "ToolDefinition",
    "Transpiler",
    "VideoUrlPart",
    "build_request",
    "convert_claude_messages",
    "convert_google_messages",
    "convert_openai_messages",
    "detect_format_from_model",
    "extract_tool_calls",
    "get_transpiler",
]
