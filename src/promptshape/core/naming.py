"""Speaker-name prefixing for named and example dialogue turns.

Example dialogue is tagged with the sentinel names ``example_user`` and
``example_assistant``; those get the real user / character name as a
``"Name: "`` prefix. Any other name is used as its own prefix. A prefix is
never added twice.
"""

from collections.abc import Sequence

from promptshape.core.models import ContentPart, NamesContext, TextPart

EXAMPLE_USER = "example_user"
EXAMPLE_ASSISTANT = "example_assistant"


def _with_prefix(text: str, speaker: str) -> str:
    prefix = f"{speaker}: "
    return text if text.startswith(prefix) else prefix + text


def apply_example_prefix(text: str, name: str | None, names: NamesContext) -> str:
    """Prefix example dialogue with the user or character name.

    Character lines that already open with a group member's label are left
    alone. Names other than the two example sentinels pass *text* through.
    """
    if name == EXAMPLE_USER and names.user_name:
        return _with_prefix(text, names.user_name)
    if name == EXAMPLE_ASSISTANT and names.char_name:
        if names.starts_with_group_name(text):
            return text
        return _with_prefix(text, names.char_name)
    return text


def apply_speaker_prefix(text: str, name: str, names: NamesContext) -> str:
    """Prefix *text* with the label for speaker *name*."""
    if name in (EXAMPLE_USER, EXAMPLE_ASSISTANT):
        return apply_example_prefix(text, name, names)
    return _with_prefix(text, name)


def prefix_text_parts(
    parts: Sequence[ContentPart], name: str | None, names: NamesContext
) -> list[ContentPart]:
    """Return *parts* with every text part labelled for speaker *name*."""
    if not name:
        return list(parts)
    return [
        part.model_copy(update={"text": apply_speaker_prefix(part.text, name, names)})
        if isinstance(part, TextPart)
        else part
        for part in parts
    ]
