"""Claude transpiler — system prompt extraction, prefill and role alternation.

Key differences from CMS:
- Leading system messages become a separate list of system text blocks.
- The first turn must come from the user; a placeholder is inserted if not.
- Consecutive same-role turns are merged, except in tool-calling mode where
  the tool protocol needs them kept apart.
- Tool calls and tool results are tool_use / tool_result content blocks.
"""

import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, assert_never

from pydantic import BaseModel

from promptshape.core.config import ConversionSettings
from promptshape.core.errors import ResponseParseError
from promptshape.core.models import (
    DEFAULT_NAMES,
    CanonicalMessage,
    ContentPart,
    FunctionCall,
    ImageUrlPart,
    MessageInput,
    NamesContext,
    PassthroughPart,
    TextPart,
    ToolCall,
    ToolCallIdPart,
    ToolCallsPart,
    VideoUrlPart,
    validate_messages,
)
from promptshape.core.naming import apply_example_prefix, prefix_text_parts
from promptshape.utils.parsing import parse_data_uri, try_parse_json

logger = logging.getLogger(__name__)

PLACEHOLDER_USER_TEXT = "system: System message was here"

_DEFAULT_IMAGE_MIME = "image/png"


class ClaudePrompt(BaseModel):
    """Converted Claude prompt."""

    messages: list[dict[str, Any]]
    system_prompt: list[dict[str, Any]]


@dataclass
class _Turn:
    role: str
    content: list[dict[str, Any]]
    cache_control: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"role": self.role, "content": self.content}
        if self.cache_control is not None:
            result["cache_control"] = self.cache_control
        return result


def convert_claude_messages(
    messages: Sequence[MessageInput],
    prefill_text: str | None = None,
    use_system_prompt: bool = True,
    use_tool_calling: bool = False,
    names: NamesContext = DEFAULT_NAMES,
) -> ClaudePrompt:
    """Convert canonical messages to Claude ``messages`` + system blocks.

    Every leading system message moves into the system prompt when
    *use_system_prompt* is set. *prefill_text* becomes a trailing assistant
    turn unless tool calling is on.
    """
    working = validate_messages(messages)

    system_prompt: list[dict[str, Any]] = []
    if use_system_prompt:
        leading = 0
        for message in working:
            if message.role != "system":
                break
            block: dict[str, Any] = {
                "type": "text",
                "text": apply_example_prefix(message.text, message.name, names),
            }
            if message.name:
                block["cache_control"] = {"type": "ephemeral"}
            system_prompt.append(block)
            leading += 1
        working = working[leading:]

    turns = [_message_to_turn(message, names) for message in working]

    if prefill_text and not use_tool_calling:
        # The prefill is always last; never cache it.
        turns.append(_Turn("assistant", [{"type": "text", "text": prefill_text}]))

    if turns and turns[0].role != "user":
        turns.insert(0, _Turn("user", [{"type": "text", "text": PLACEHOLDER_USER_TEXT}]))

    if not use_tool_calling:
        turns = _merge_turns(turns)

    return ClaudePrompt(messages=[turn.to_dict() for turn in turns], system_prompt=system_prompt)


def _message_to_turn(message: CanonicalMessage, names: NamesContext) -> _Turn:
    if isinstance(message.content, list):
        parts: list[ContentPart] = list(message.content)
    elif message.content:
        parts = [TextPart(text=message.content)]
    else:
        parts = []
    parts = prefix_text_parts(parts, message.name, names)

    blocks: list[dict[str, Any]] = []
    for part in parts:
        blocks.extend(_part_to_claude(part))

    if message.role == "tool" and message.tool_call_id:
        result_block = {
            "type": "tool_result",
            "tool_use_id": message.tool_call_id,
            "content": blocks,
        }
        return _Turn("user", [result_block], message.cache_control)

    if message.role == "assistant":
        # tool_calls already given as a content part are not repeated
        if not any(isinstance(part, ToolCallsPart) for part in parts):
            for tool_call in message.tool_calls or []:
                blocks.append(_tool_use_block(tool_call))
        return _Turn("assistant", blocks, message.cache_control)

    # system past the leading block, and tool output without a call id
    return _Turn("user", blocks, message.cache_control)


def _part_to_claude(part: ContentPart) -> list[dict[str, Any]]:
    if isinstance(part, TextPart):
        return [{"type": "text", "text": part.text}]

    if isinstance(part, ImageUrlPart):
        url = part.image_url.url
        data_uri = parse_data_uri(url)
        if data_uri is not None:
            source: dict[str, Any] = {
                "type": "base64",
                "media_type": data_uri.mime_type or _DEFAULT_IMAGE_MIME,
                "data": data_uri.data,
            }
        elif url.startswith(("http://", "https://")):
            source = {"type": "url", "url": url}
        else:
            logger.warning("Skipping image part: not a base64 data URI or http(s) URL")
            return []
        return [{"type": "image", "source": source}]

    if isinstance(part, VideoUrlPart):
        logger.warning("Skipping video part: Claude does not accept video input")
        return []

    if isinstance(part, ToolCallsPart):
        return [_tool_use_block(tool_call) for tool_call in part.tool_calls]

    if isinstance(part, ToolCallIdPart):
        return [{"type": "tool_result", "tool_use_id": part.tool_call_id, "content": part.content}]

    if isinstance(part, PassthroughPart):
        return [part.model_dump()]

    assert_never(part)


def _tool_use_block(tool_call: ToolCall) -> dict[str, Any]:
    raw = tool_call.function.arguments
    if isinstance(raw, dict):
        arguments: dict[str, Any] = raw
    elif not raw:
        arguments = {}
    else:
        parsed = try_parse_json(raw)
        arguments = parsed if isinstance(parsed, dict) else {"raw": raw}
    return {
        "type": "tool_use",
        "id": tool_call.id,
        "name": tool_call.function.name,
        "input": arguments,
    }


def _merge_turns(turns: list[_Turn]) -> list[_Turn]:
    """Merge consecutive turns with the same role.

    A merged turn carries the ``cache_control`` of its last constituent.
    """
    merged: list[_Turn] = []
    for turn in turns:
        if merged and merged[-1].role == turn.role:
            previous = merged[-1]
            merged[-1] = _Turn(previous.role, previous.content + turn.content, turn.cache_control)
        else:
            merged.append(turn)
    return merged


class ClaudeTranspiler:
    """Converts between CMS and Claude's messages API format."""

    def to_provider(
        self, messages: Sequence[MessageInput], settings: ConversionSettings
    ) -> dict[str, Any]:
        """Return the ``messages`` / ``system`` body fields.

        ``system`` is omitted when no system blocks were extracted.
        """
        prompt = convert_claude_messages(
            messages,
            prefill_text=settings.prefill or None,
            use_system_prompt=settings.use_system_prompt,
            use_tool_calling=settings.use_tool_calling,
            names=settings.names,
        )
        body: dict[str, Any] = {"messages": prompt.messages}
        if prompt.system_prompt:
            body["system"] = prompt.system_prompt
        return body

    def from_provider(self, response: dict[str, Any]) -> CanonicalMessage:
        """Convert a Claude messages API response to a CanonicalMessage."""
        blocks = response.get("content")
        if not isinstance(blocks, list):
            raise ResponseParseError("claude", "no content blocks")

        texts: list[str] = []
        tool_calls: list[ToolCall] = []
        try:
            for block in blocks:
                if block.get("type") == "text":
                    texts.append(block["text"])
                elif block.get("type") == "tool_use":
                    tool_calls.append(
                        ToolCall(
                            id=block["id"],
                            function=FunctionCall(
                                name=block["name"],
                                arguments=json.dumps(block.get("input", {})),
                            ),
                        )
                    )
        except (KeyError, TypeError, AttributeError, ValueError) as exc:
            raise ResponseParseError("claude", f"malformed content block: {exc!r}") from exc

        return CanonicalMessage(
            role="assistant",
            content="".join(texts) if texts else None,
            tool_calls=tool_calls or None,
        )
