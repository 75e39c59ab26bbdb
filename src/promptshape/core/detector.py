"""Pick the request format for a model name."""

import logging
from typing import Literal

logger = logging.getLogger(__name__)

ApiFormat = Literal["google", "claude", "openai"]

API_FORMATS: tuple[ApiFormat, ...] = ("google", "claude", "openai")


def detect_format_from_model(model: str | None) -> ApiFormat:
    """Map a model identifier to the wire format it speaks.

    Matching is a case-insensitive substring test: ``gemini`` selects
    ``google``, ``claude`` selects ``claude``, and everything else (including
    an empty name) falls back to the OpenAI-compatible format.
    """
    if not model:
        return "openai"

    lowered = model.lower()
    if "gemini" in lowered:
        logger.debug("Model %s uses the google format", model)
        return "google"
    if "claude" in lowered:
        logger.debug("Model %s uses the claude format", model)
        return "claude"

    logger.debug("Model %s uses the default openai format", model)
    return "openai"
