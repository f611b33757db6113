"""
Playground Service - invocation boundary

Runs Request Validator → Structured Agent and converts every outcome into a
PlaygroundState. Nothing raised by the agent escapes this module: each
failure becomes a single human-readable message plus an error code.
"""

from typing import Any, Dict, List, Mapping, Optional, Tuple, Type, Union

from pydantic import ValidationError

from playground.agents.structured import (
    ConfigurationError,
    ContentKind,
    InvocationError,
    StructuredAgentInput,
    run_structured_agent,
)
from playground.agents.structured.prompts import (
    DEFAULT_IMAGE_SCHEMA,
    DEFAULT_IMAGE_SYSTEM_PROMPT,
    DEFAULT_TEXT_SCHEMA,
    DEFAULT_TEXT_SYSTEM_PROMPT,
    SAMPLE_TEXTS,
    default_schema_source,
)
from playground.schemas.playground import (
    ImagePlaygroundForm,
    PlaygroundDefaultsResponse,
    PlaygroundModeDefaults,
    PlaygroundState,
    TextPlaygroundForm,
)
from playground.utils.logging import get_logger

logger = get_logger(__name__)

FieldErrors = Dict[str, List[str]]

CONFIGURATION_ERROR_MESSAGE = "The playground is not configured. Please contact the administrator."
UNKNOWN_ERROR_MESSAGE = "An unknown error occurred."

_FORMS: Dict[ContentKind, Type[Union[ImagePlaygroundForm, TextPlaygroundForm]]] = {
    "image": ImagePlaygroundForm,
    "text": TextPlaygroundForm,
}

_CONTENT_FIELDS: Dict[ContentKind, str] = {
    "image": "image_url",
    "text": "user_text",
}


def validate_playground_form(
    content_kind: ContentKind,
    raw_fields: Mapping[str, Any]
) -> Tuple[Optional[StructuredAgentInput], Optional[FieldErrors]]:
    """
    Check the raw form fields of one playground.

    Returns:
        (request, None) when every required field is present and non-empty,
        (None, field_errors) otherwise, with one entry per failing field.
    """
    form_class = _FORMS[content_kind]
    content_field = _CONTENT_FIELDS[content_kind]
    fields = {name: raw_fields.get(name) for name in form_class.model_fields}

    try:
        form = form_class.model_validate(fields)
    except ValidationError as e:
        field_errors: FieldErrors = {}
        for error in e.errors(include_url=False):
            name = str(error["loc"][0]) if error["loc"] else "form"
            field_errors.setdefault(name, []).append(error["msg"])
        return None, field_errors

    request: StructuredAgentInput = {
        "content_kind": content_kind,
        "content": getattr(form, content_field),
        "instruction": form.system_prompt,
        "schema_source": form.json_schema,
    }
    return request, None


async def analyze(content_kind: ContentKind, raw_fields: Mapping[str, Any]) -> PlaygroundState:
    """
    Validate a playground submission and, if valid, run the structured agent.

    Never raises: every failure is reported in the returned state.
    """
    request, field_errors = validate_playground_form(content_kind, raw_fields)
    if field_errors:
        logger.info(f"Playground submission rejected: fields={sorted(field_errors)}")
        return PlaygroundState(field_errors=field_errors, error_code="validation_error")

    assert request is not None

    try:
        result = await run_structured_agent(request)
    except ConfigurationError as e:
        logger.error(f"Playground misconfigured: {e.message}")
        return PlaygroundState(error=CONFIGURATION_ERROR_MESSAGE, error_code=e.code)
    except InvocationError as e:
        logger.warning(f"Structured invocation failed: code={e.code}")
        return PlaygroundState(error=e.message, error_code=e.code)
    except Exception as e:
        logger.error(f"Unexpected playground error: {e}", exc_info=True)
        return PlaygroundState(error=UNKNOWN_ERROR_MESSAGE, error_code="unknown_error")

    return PlaygroundState(data=result)


def get_playground_defaults() -> PlaygroundDefaultsResponse:
    """Prefill values for both playground forms."""
    return PlaygroundDefaultsResponse(
        image=PlaygroundModeDefaults(
            system_prompt=DEFAULT_IMAGE_SYSTEM_PROMPT,
            json_schema=default_schema_source(DEFAULT_IMAGE_SCHEMA),
        ),
        text=PlaygroundModeDefaults(
            system_prompt=DEFAULT_TEXT_SYSTEM_PROMPT,
            json_schema=default_schema_source(DEFAULT_TEXT_SCHEMA),
            sample_texts=list(SAMPLE_TEXTS),
        ),
    )
