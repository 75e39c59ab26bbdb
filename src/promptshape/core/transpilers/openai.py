"""OpenAI transpiler — CMS already is the chat-completions shape."""

from collections.abc import Sequence
from typing import Any

from promptshape.core.config import ConversionSettings
from promptshape.core.errors import ResponseParseError
from promptshape.core.models import (
    CanonicalMessage,
    FunctionCall,
    MessageInput,
    ToolCall,
    validate_messages,
)


def convert_openai_messages(messages: Sequence[MessageInput]) -> list[dict[str, Any]]:
    """Validate *messages* and serialize them back as chat-completions messages.

    Unset fields are dropped, as is the Claude-only ``cache_control``.
    """
    return [
        message.model_dump(exclude_none=True, exclude={"cache_control"})
        for message in validate_messages(messages)
    ]


class OpenAITranspiler:
    """Converts between CMS and OpenAI's chat completion format."""

    def to_provider(
        self, messages: Sequence[MessageInput], settings: ConversionSettings
    ) -> dict[str, Any]:
        """Return ``{"messages": [...]}``; settings do not affect this format."""
        return {"messages": convert_openai_messages(messages)}

    def from_provider(self, response: dict[str, Any]) -> CanonicalMessage:
        """Convert an OpenAI chat completion response to a CanonicalMessage."""
        try:
            message = response["choices"][0]["message"]
        except (KeyError, IndexError, TypeError) as exc:
            raise ResponseParseError("openai", "no choices") from exc

        tool_calls: list[ToolCall] | None = None
        if message.get("tool_calls"):
            try:
                tool_calls = [
                    ToolCall(
                        id=tc["id"],
                        function=FunctionCall(
                            name=tc["function"]["name"],
                            arguments=tc["function"].get("arguments", ""),
                        ),
                    )
                    for tc in message["tool_calls"]
                ]
            except (KeyError, TypeError, AttributeError, ValueError) as exc:
                raise ResponseParseError("openai", f"malformed tool call: {exc!r}") from exc

        return CanonicalMessage(
            role="assistant",
            content=message.get("content"),
            tool_calls=tool_calls,
        )
