"""Provider-specific transpiler implementations."""

from promptshape.core.transpilers.claude import ClaudePrompt, ClaudeTranspiler, convert_claude_messages
from promptshape.core.transpilers.gemini import GeminiTranspiler, GooglePrompt, convert_google_messages
from promptshape.core.transpilers.openai import OpenAITranspiler, convert_openai_messages

__all__ = [
    "ClaudePrompt",
    "ClaudeTranspiler",
    "GeminiTranspiler",
    "GooglePrompt",
    "OpenAITranspiler",
    "convert_claude_messages",
    "convert_google_messages",
    "convert_openai_messages",
]
