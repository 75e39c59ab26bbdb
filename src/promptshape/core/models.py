"""Canonical Message Schema (CMS) — the input format every converter consumes.

Messages follow the OpenAI chat shape: a role, a content string or list of
typed content parts, and optional name / tool fields. Provider converters
validate the caller's messages into these models, so conversion always works
on fresh objects and never on the caller's data.
"""

from collections.abc import Callable, Mapping, Sequence
from typing import Annotated, Any, Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, ValidationError

from promptshape.core.errors import InvalidMessageError

Role = Literal["system", "user", "assistant", "tool"]

# ---------------------------------------------------------------------------
# Tool Calling
# ---------------------------------------------------------------------------


class FunctionCall(BaseModel):
    """The function half of a tool call. ``arguments`` is JSON text."""

    name: str
    arguments: str | dict[str, Any] = ""


class ToolCall(BaseModel):
    """A tool invocation emitted by an assistant message."""

    id: str = Field(default_factory=lambda: f"call_{uuid4().hex[:12]}")
    type: Literal["function"] = "function"
    function: FunctionCall


# ---------------------------------------------------------------------------
# Content Parts — tagged union discriminated by ``type``
# ---------------------------------------------------------------------------


class MediaUrl(BaseModel):
    model_config = ConfigDict(extra="allow")

    url: str


class TextPart(BaseModel):
    """Plain text content part."""

    type: Literal["text"] = "text"
    text: str


class ImageUrlPart(BaseModel):
    """Image part, usually a ``data:<mime>;base64,<data>`` URI."""

    type: Literal["image_url"] = "image_url"
    image_url: MediaUrl


class VideoUrlPart(BaseModel):
    """Video part, same data-URI convention as images."""

    type: Literal["video_url"] = "video_url"
    video_url: MediaUrl


class ToolCallsPart(BaseModel):
    """Synthesized from a message's ``tool_calls`` field."""

    type: Literal["tool_calls"] = "tool_calls"
    tool_calls: list[ToolCall]


class ToolCallIdPart(BaseModel):
    """Synthesized from a tool-result message's ``tool_call_id`` field."""

    type: Literal["tool_call_id"] = "tool_call_id"
    tool_call_id: str
    content: str = ""


class PassthroughPart(BaseModel):
    """Any part type this package does not interpret, kept verbatim."""

    model_config = ConfigDict(extra="allow")

    type: str


_KNOWN_PART_TYPES = frozenset({"text", "image_url", "video_url", "tool_calls", "tool_call_id"})


def _part_tag(value: Any) -> str:
    # Parts without a type are text parts.
    if isinstance(value, Mapping):
        part_type = value.get("type") or "text"
    else:
        part_type = getattr(value, "type", None) or "text"
    return part_type if part_type in _KNOWN_PART_TYPES else "passthrough"


ContentPart = Annotated[
    Annotated[TextPart, Tag("text")]
    | Annotated[ImageUrlPart, Tag("image_url")]
    | Annotated[VideoUrlPart, Tag("video_url")]
    | Annotated[ToolCallsPart, Tag("tool_calls")]
    | Annotated[ToolCallIdPart, Tag("tool_call_id")]
    | Annotated[PassthroughPart, Tag("passthrough")],
    Discriminator(_part_tag),
]


# ---------------------------------------------------------------------------
# Canonical Message
# ---------------------------------------------------------------------------


class CanonicalMessage(BaseModel):
    """A single chat message in OpenAI shape.

    Roles:
    - system: instruction/context messages
    - user: human input
    - assistant: LLM-generated messages (may include tool_calls)
    - tool: tool execution results (carry tool_call_id)
    """

    role: Role
    content: str | list[ContentPart] | None = None
    name: str | None = None
    tool_calls: list[ToolCall] | None = None
    tool_call_id: str | None = None
    cache_control: dict[str, Any] | None = None

    @property
    def text(self) -> str:
        """Content as plain text; text parts are concatenated."""
        if self.content is None:
            return ""
        if isinstance(self.content, str):
            return self.content
        return "".join(part.text for part in self.content if isinstance(part, TextPart))

    @classmethod
    def system(cls, text: str, name: str | None = None) -> "CanonicalMessage":
        """Create a system message."""
        return cls(role="system", content=text, name=name)

    @classmethod
    def user(cls, text: str, name: str | None = None) -> "CanonicalMessage":
        """Create a user message."""
        return cls(role="user", content=text, name=name)

    @classmethod
    def assistant(
        cls,
        text: str | None = None,
        tool_calls: list[ToolCall] | None = None,
        name: str | None = None,
    ) -> "CanonicalMessage":
        """Create an assistant message."""
        return cls(role="assistant", content=text, tool_calls=tool_calls, name=name)

    @classmethod
    def tool(cls, tool_call_id: str, text: str) -> "CanonicalMessage":
        """Create a tool-result message."""
        return cls(role="tool", content=text, tool_call_id=tool_call_id)


MessageInput = CanonicalMessage | Mapping[str, Any]


def validate_messages(messages: Sequence[MessageInput]) -> list[CanonicalMessage]:
    """Validate *messages* into fresh :class:`CanonicalMessage` objects.

    Dicts are parsed; model instances are deep-copied so that nothing the
    caller holds is shared with the conversion.

    Raises:
        InvalidMessageError: If *messages* is not a sequence or an entry does
            not match the schema (e.g. a missing or unknown role).
    """
    if isinstance(messages, (str, bytes, Mapping)) or not isinstance(messages, Sequence):
        raise InvalidMessageError(
            f"messages must be a sequence of messages, got {type(messages).__name__}"
        )

    result: list[CanonicalMessage] = []
    for index, raw in enumerate(messages):
        if isinstance(raw, CanonicalMessage):
            result.append(raw.model_copy(deep=True))
            continue
        try:
            result.append(CanonicalMessage.model_validate(raw))
        except ValidationError as exc:
            raise InvalidMessageError(str(exc), index=index) from exc
    return result


# ---------------------------------------------------------------------------
# Names Context — speaker labels for example dialogue
# ---------------------------------------------------------------------------


class NamesContext(BaseModel):
    """Speaker names used when prefixing example dialogue turns.

    ``group_name_matcher`` overrides the default group check, which tests
    whether a text already starts with ``"<group name>: "``. With no group
    names and no matcher, nothing counts as group-authored.
    """

    model_config = ConfigDict(frozen=True)

    user_name: str = ""
    char_name: str = ""
    group_names: list[str] = Field(default_factory=lambda: list[str]())
    group_name_matcher: Callable[[str], bool] | None = Field(default=None, exclude=True)

    def starts_with_group_name(self, text: str) -> bool:
        """Return True if *text* already opens with a group member's label."""
        if self.group_name_matcher is not None:
            return self.group_name_matcher(text)
        return any(text.startswith(f"{name}: ") for name in self.group_names)


DEFAULT_NAMES = NamesContext()
