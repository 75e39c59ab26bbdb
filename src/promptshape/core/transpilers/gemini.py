"""Gemini transpiler — builds generateContent ``contents`` and ``system_instruction``.

Key differences from CMS:
- Role "assistant" becomes "model"; "system" and "tool" become "user".
- Consecutive same-role turns are merged into one entry.
- Tool calls use Gemini's functionCall/functionResponse parts, and a tool
  result is matched to its function name through the call id.
- Images and videos travel as inlineData parts cut out of data URIs.
"""

import json
import logging
from collections.abc import Sequence
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

_ROLES = {"system": "user", "tool": "user", "user": "user", "assistant": "model"}

_DEFAULT_IMAGE_MIME = "image/png"
_DEFAULT_VIDEO_MIME = "video/mp4"


class GooglePrompt(BaseModel):
    """Converted Gemini prompt."""

    contents: list[dict[str, Any]]
    system_instruction: dict[str, Any]


def convert_google_messages(
    messages: Sequence[MessageInput],
    use_system_prompt: bool,
    names: NamesContext = DEFAULT_NAMES,
) -> GooglePrompt:
    """Convert canonical messages to Gemini ``contents`` + ``system_instruction``.

    With *use_system_prompt*, leading system messages move into the system
    instruction, but at least one message is always left in ``contents``.
    """
    working = validate_messages(messages)

    system_texts: list[str] = []
    if use_system_prompt:
        while len(working) > 1 and working[0].role == "system":
            head = working.pop(0)
            system_texts.append(apply_example_prefix(head.text, head.name, names))

    # call id -> function name, scoped to this conversion
    tool_names: dict[str, str] = {}
    contents: list[dict[str, Any]] = []

    for message in working:
        role = _ROLES[message.role]
        parts = prefix_text_parts(_content_parts(message), message.name, names)

        gemini_parts: list[dict[str, Any]] = []
        for part in parts:
            gemini_parts.extend(_part_to_gemini(part, tool_names))

        if contents and contents[-1]["role"] == role:
            _merge_parts(contents[-1]["parts"], gemini_parts)
        else:
            contents.append({"role": role, "parts": gemini_parts})

    return GooglePrompt(
        contents=contents,
        system_instruction={"parts": [{"text": text} for text in system_texts]},
    )


def _content_parts(message: CanonicalMessage) -> list[ContentPart]:
    """Turn string content into a single synthesized part."""
    if isinstance(message.content, list):
        return list(message.content)
    if message.tool_calls:
        return [ToolCallsPart(tool_calls=message.tool_calls)]
    if message.tool_call_id:
        return [ToolCallIdPart(tool_call_id=message.tool_call_id, content=message.content or "")]
    return [TextPart(text=message.content or "")]


def _part_to_gemini(part: ContentPart, tool_names: dict[str, str]) -> list[dict[str, Any]]:
    """Map one content part to zero or more Gemini parts."""
    if isinstance(part, TextPart):
        return [{"text": part.text}]

    if isinstance(part, ToolCallIdPart):
        name = tool_names.get(part.tool_call_id)
        if name is None:
            logger.debug("No tool call recorded for id %s", part.tool_call_id)
            name = "unknown"
        return [
            {
                "functionResponse": {
                    "name": name,
                    "response": {"name": name, "content": part.content},
                }
            }
        ]

    if isinstance(part, ToolCallsPart):
        calls: list[dict[str, Any]] = []
        for tool_call in part.tool_calls:
            raw = tool_call.function.arguments
            parsed = try_parse_json(raw)
            calls.append(
                {
                    "functionCall": {
                        "name": tool_call.function.name,
                        "args": parsed if parsed is not None else raw,
                    }
                }
            )
            tool_names[tool_call.id] = tool_call.function.name
        return calls

    if isinstance(part, ImageUrlPart):
        return _inline_data(part.image_url.url, _DEFAULT_IMAGE_MIME, "image")

    if isinstance(part, VideoUrlPart):
        return _inline_data(part.video_url.url, _DEFAULT_VIDEO_MIME, "video")

    if isinstance(part, PassthroughPart):
        logger.debug("Skipping content part of type %s", part.type)
        return []

    assert_never(part)


def _inline_data(url: str, default_mime: str, kind: str) -> list[dict[str, Any]]:
    data_uri = parse_data_uri(url)
    if data_uri is None:
        logger.warning("Skipping %s part: not a base64 data URI", kind)
        return []
    return [
        {
            "inlineData": {
                "mimeType": data_uri.mime_type or default_mime,
                "data": data_uri.data,
            }
        }
    ]


def _merge_parts(existing: list[dict[str, Any]], new: list[dict[str, Any]]) -> None:
    """Fold *new* parts into the previous same-role entry's *existing* parts.

    Text joins the first existing text part with a blank line; media and
    function parts are always appended.
    """
    for part in new:
        if "text" in part:
            if not part["text"]:
                continue
            target = next((p for p in existing if "text" in p), None)
            if target is None:
                existing.append(part)
            else:
                target["text"] += "\n\n" + part["text"]
        else:
            existing.append(part)


class GeminiTranspiler:
    """Converts between CMS and Gemini's generateContent format."""

    def to_provider(
        self, messages: Sequence[MessageInput], settings: ConversionSettings
    ) -> dict[str, Any]:
        """Return the ``contents`` / ``system_instruction`` body fields.

        ``system_instruction`` is omitted when it would have no parts.
        """
        prompt = convert_google_messages(messages, settings.use_system_prompt, settings.names)
        body: dict[str, Any] = {"contents": prompt.contents}
        if prompt.system_instruction["parts"]:
            body["system_instruction"] = prompt.system_instruction
        return body

    def from_provider(self, response: dict[str, Any]) -> CanonicalMessage:
        """Convert a Gemini generateContent response to a CanonicalMessage."""
        try:
            parts = response["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError) as exc:
            raise ResponseParseError("gemini", "no candidate content") from exc

        texts: list[str] = []
        tool_calls: list[ToolCall] = []
        try:
            for part in parts:
                if "text" in part:
                    texts.append(part["text"])
                elif "functionCall" in part:
                    fc = part["functionCall"]
                    tool_calls.append(
                        ToolCall(
                            function=FunctionCall(
                                name=fc["name"],
                                arguments=json.dumps(fc.get("args", {})),
                            )
                        )
                    )
        except (KeyError, TypeError, AttributeError, ValueError) as exc:
            raise ResponseParseError("gemini", f"malformed part: {exc!r}") from exc

        return CanonicalMessage(
            role="assistant",
            content="".join(texts) if texts else None,
            tool_calls=tool_calls or None,
        )
