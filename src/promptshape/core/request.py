"""Request assembly — detect the format, convert, and shape the request body."""

import logging
from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel

from promptshape.core.config import ConversionSettings
from promptshape.core.detector import ApiFormat
from promptshape.core.models import MessageInput, validate_messages
from promptshape.core.tools import (
    ToolInput,
    convert_tools_to_claude,
    convert_tools_to_gemini,
    convert_tools_to_openai,
)
from promptshape.core.transpiler import get_transpiler
from promptshape.utils.telemetry import (
    ATTR_FORMAT,
    ATTR_MESSAGES_IN,
    ATTR_MESSAGES_OUT,
    ATTR_MODEL,
    ATTR_SYSTEM_PARTS,
    ATTR_TOOLS,
    get_tracer,
)

logger = logging.getLogger(__name__)

_tracer = get_tracer(__name__)

_GEMINI_MODEL_PREFIX = "models/"

_GEMINI_PARAM_NAMES = {
    "temperature": "temperature",
    "top_k": "topK",
    "top_p": "topP",
    "max_tokens": "maxOutputTokens",
}


class ProviderRequest(BaseModel):
    """The outbound request for one provider: endpoint path plus JSON body."""

    api_format: ApiFormat
    model: str
    path: str
    body: dict[str, Any]


def build_request(
    messages: Sequence[MessageInput],
    settings: ConversionSettings,
    tools: Sequence[ToolInput] | None = None,
) -> ProviderRequest:
    """Convert *messages* into the request for ``settings.model``.

    The format comes from ``settings.format`` when set, otherwise it is
    detected from the model name.

    Raises:
        InvalidMessageError: If *messages* does not match the canonical schema.
    """
    api_format = settings.api_format
    validated = validate_messages(messages)

    with _tracer.start_as_current_span("promptshape.build_request") as span:
        span.set_attribute(ATTR_MODEL, settings.model)
        span.set_attribute(ATTR_FORMAT, api_format)
        span.set_attribute(ATTR_MESSAGES_IN, len(validated))
        span.set_attribute(ATTR_TOOLS, len(tools or ()))

        body = get_transpiler(api_format).to_provider(validated, settings)
        params = settings.params.for_format(api_format)

        if api_format == "google":
            model = settings.model.removeprefix(_GEMINI_MODEL_PREFIX)
            path = f"/v1beta/models/{model}:generateContent"
            if tools:
                body["tools"] = [convert_tools_to_gemini(tools)]
            body["generationConfig"] = {
                _GEMINI_PARAM_NAMES[key]: value for key, value in params.items()
            }
            system_parts = len(body.get("system_instruction", {}).get("parts", []))
            span.set_attribute(ATTR_MESSAGES_OUT, len(body["contents"]))
        elif api_format == "claude":
            model = settings.model
            path = "/v1/messages"
            body = {"model": model, **body, **params}
            if tools:
                body["tools"] = convert_tools_to_claude(tools)
            system_parts = len(body.get("system", []))
            span.set_attribute(ATTR_MESSAGES_OUT, len(body["messages"]))
        else:
            model = settings.model
            path = "/v1/chat/completions"
            body = {"model": model, **body, **params}
            if tools:
                body["tools"] = convert_tools_to_openai(tools)
            system_parts = sum(1 for message in body["messages"] if message.get("role") == "system")
            span.set_attribute(ATTR_MESSAGES_OUT, len(body["messages"]))
        span.set_attribute(ATTR_SYSTEM_PARTS, system_parts)

    logger.debug("Built %s request for model %s", api_format, model or "(unset)")
    return ProviderRequest(api_format=api_format, model=model, path=path, body=body)
