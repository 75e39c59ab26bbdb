"""Transpiler protocol — converts between CMS and provider-specific formats.

Each format (google, claude, openai) has a concrete transpiler that builds
the provider's request body fields from canonical messages and reads the
provider's response back into a CanonicalMessage.
"""

from collections.abc import Sequence
from typing import Any, Protocol

from promptshape.core.config import ConversionSettings
from promptshape.core.detector import ApiFormat
from promptshape.core.models import CanonicalMessage, MessageInput
from promptshape.core.transpilers.claude import ClaudeTranspiler
from promptshape.core.transpilers.gemini import GeminiTranspiler
from promptshape.core.transpilers.openai import OpenAITranspiler


class Transpiler(Protocol):
    """Protocol for provider-specific message format transpilers."""

    def to_provider(
        self, messages: Sequence[MessageInput], settings: ConversionSettings
    ) -> dict[str, Any]:
        """Convert canonical messages to the message-bearing body fields.

        Model name and tool definitions are added by the caller.
        """
        ...

    def from_provider(self, response: dict[str, Any]) -> CanonicalMessage:
        """Convert a provider's raw response into a CanonicalMessage."""
        ...


def get_transpiler(api_format: ApiFormat) -> Transpiler:
    """Return the transpiler for *api_format* (OpenAI for anything unknown)."""
    mapping: dict[str, Transpiler] = {
        "openai": OpenAITranspiler(),
        "claude": ClaudeTranspiler(),
        "google": GeminiTranspiler(),
    }
    return mapping.get(api_format, OpenAITranspiler())
