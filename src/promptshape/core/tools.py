"""Tool definitions and tool-call extraction across formats.

Tools are declared once in the OpenAI function-tool shape and reshaped for
Gemini (``functionDeclarations``) and Claude (``input_schema``).
"""

import logging
from collections.abc import Sequence
from typing import Any, Literal

from pydantic import BaseModel, Field

from promptshape.core.detector import ApiFormat
from promptshape.core.models import ToolCall
from promptshape.core.transpiler import get_transpiler

logger = logging.getLogger(__name__)


class FunctionDefinition(BaseModel):
    name: str
    description: str = ""
    parameters: dict[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}}
    )


class ToolDefinition(BaseModel):
    """A function tool in OpenAI shape."""

    type: Literal["function"] = "function"
    function: FunctionDefinition


ToolInput = ToolDefinition | dict[str, Any]


def _definitions(tools: Sequence[ToolInput]) -> list[ToolDefinition]:
    return [ToolDefinition.model_validate(tool) for tool in tools]


def convert_tools_to_openai(tools: Sequence[ToolInput]) -> list[dict[str, Any]]:
    """Normalize *tools* to OpenAI ``tools`` entries."""
    return [tool.model_dump() for tool in _definitions(tools)]


def convert_tools_to_gemini(tools: Sequence[ToolInput]) -> dict[str, Any]:
    """Convert *tools* into one Gemini tool with ``functionDeclarations``."""
    return {
        "functionDeclarations": [
            {
                "name": tool.function.name,
                "description": tool.function.description,
                "parameters": tool.function.parameters,
            }
            for tool in _definitions(tools)
        ]
    }


def convert_tools_to_claude(tools: Sequence[ToolInput]) -> list[dict[str, Any]]:
    """Convert *tools* into Claude tool definitions."""
    return [
        {
            "name": tool.function.name,
            "description": tool.function.description,
            "input_schema": tool.function.parameters,
        }
        for tool in _definitions(tools)
    ]


def extract_tool_calls(response: dict[str, Any], api_format: ApiFormat) -> list[ToolCall]:
    """Return the tool calls in a provider *response* (empty if none).

    Raises:
        ResponseParseError: If the response lacks the format's basic structure.
    """
    message = get_transpiler(api_format).from_provider(response)
    tool_calls = message.tool_calls or []
    logger.debug("Extracted %d %s tool call(s)", len(tool_calls), api_format)
    return tool_calls
