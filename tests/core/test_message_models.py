"""Tests for the canonical message schema."""

import pytest

from promptshape.core.errors import InvalidMessageError
from promptshape.core.models import (
    DEFAULT_NAMES,
    CanonicalMessage,
    ImageUrlPart,
    NamesContext,
    PassthroughPart,
    TextPart,
    ToolCallIdPart,
    validate_messages,
)


class TestContentParts:
    def test_parts_discriminated_by_type(self) -> None:
        msg = CanonicalMessage.model_validate(
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": "hi"},
                    {"type": "image_url", "image_url": {"url": "data:image/png;base64,AA"}},
                    {"type": "tool_call_id", "tool_call_id": "call_1", "content": "ok"},
                ],
            }
        )
        assert isinstance(msg.content, list)
        assert [type(part) for part in msg.content] == [TextPart, ImageUrlPart, ToolCallIdPart]

    def test_typeless_part_is_text(self) -> None:
        msg = CanonicalMessage.model_validate({"role": "user", "content": [{"text": "hi"}]})
        assert msg.content == [TextPart(text="hi")]

    def test_unknown_type_is_passthrough(self) -> None:
        msg = CanonicalMessage.model_validate(
            {"role": "user", "content": [{"type": "input_audio", "input_audio": {"data": "x"}}]}
        )
        assert isinstance(msg.content, list)
        part = msg.content[0]
        assert isinstance(part, PassthroughPart)
        assert part.model_dump() == {"type": "input_audio", "input_audio": {"data": "x"}}


class TestCanonicalMessage:
    def test_text_from_string(self) -> None:
        assert CanonicalMessage.user("hello").text == "hello"

    def test_text_from_parts(self) -> None:
        msg = CanonicalMessage(role="user", content=[TextPart(text="a"), TextPart(text="b")])
        assert msg.text == "ab"

    def test_text_from_none(self) -> None:
        assert CanonicalMessage.assistant().text == ""

    def test_tool_factory(self) -> None:
        msg = CanonicalMessage.tool("call_1", "42")
        assert msg.role == "tool"
        assert msg.tool_call_id == "call_1"

    def test_tool_call_id_generated(self) -> None:
        msg = CanonicalMessage.model_validate(
            {"role": "assistant", "tool_calls": [{"function": {"name": "f", "arguments": "{}"}}]}
        )
        assert msg.tool_calls is not None
        assert msg.tool_calls[0].id.startswith("call_")


class TestValidateMessages:
    def test_dicts_validated(self) -> None:
        result = validate_messages([{"role": "user", "content": "hi"}])
        assert result == [CanonicalMessage.user("hi")]

    def test_instances_copied(self) -> None:
        original = CanonicalMessage(role="user", content=[TextPart(text="hi")])
        result = validate_messages([original])
        assert result[0] == original
        assert result[0] is not original
        assert result[0].content is not original.content

    def test_unknown_role(self) -> None:
        with pytest.raises(InvalidMessageError) as exc_info:
            validate_messages([{"role": "narrator", "content": "hi"}])
        assert exc_info.value.index == 0

    @pytest.mark.parametrize("value", ["hello", {"role": "user"}, 42, None])
    def test_non_sequence(self, value: object) -> None:
        with pytest.raises(InvalidMessageError, match="sequence"):
            validate_messages(value)  # type: ignore[arg-type]

    def test_tuple_accepted(self) -> None:
        assert len(validate_messages(({"role": "user", "content": "hi"},))) == 1


class TestNamesContext:
    def test_default_never_matches_group(self) -> None:
        assert DEFAULT_NAMES.starts_with_group_name("Anyone: hi") is False

    def test_group_names(self) -> None:
        names = NamesContext(group_names=["Dana", "Eve"])
        assert names.starts_with_group_name("Eve: hi")
        assert not names.starts_with_group_name("Eve hi")

    def test_matcher_overrides_group_names(self) -> None:
        names = NamesContext(group_names=["Dana"], group_name_matcher=lambda text: False)
        assert not names.starts_with_group_name("Dana: hi")

    def test_matcher_excluded_from_dump(self) -> None:
        names = NamesContext(user_name="Bob", group_name_matcher=lambda text: True)
        assert "group_name_matcher" not in names.model_dump()
