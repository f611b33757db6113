"""
Pydantic schemas for the playground endpoints.

Form models double as the Request Validator: every required field gets a
field-specific message when absent or blank, and all failing fields are
reported together.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError

from playground.agents.structured.content import is_remote_url, parse_data_url


def _require_text(value: Any, message: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise PydanticCustomError("empty_field", message)
    return value


# --- Request (form) models ---

class _PlaygroundForm(BaseModel):
    """Fields shared by both playgrounds."""
    system_prompt: str = Field(
        default=None,
        validate_default=True,
        description="Natural-language instruction for the model"
    )
    json_schema: str = Field(
        default=None,
        validate_default=True,
        description="JSON-Schema subset describing the expected output"
    )

    @field_validator("system_prompt", mode="before")
    @classmethod
    def _system_prompt_not_empty(cls, value: Any) -> str:
        return _require_text(value, "System prompt cannot be empty.")

    @field_validator("json_schema", mode="before")
    @classmethod
    def _json_schema_not_empty(cls, value: Any) -> str:
        return _require_text(value, "JSON schema cannot be empty.")


class ImagePlaygroundForm(_PlaygroundForm):
    """Form for POST /playground/image."""
    image_url: str = Field(
        default=None,
        validate_default=True,
        description="http(s) image URL or base64 image data URL"
    )

    @field_validator("image_url", mode="before")
    @classmethod
    def _image_url_usable(cls, value: Any) -> str:
        value = _require_text(value, "Image URL cannot be empty.").strip()
        if is_remote_url(value):
            return value
        try:
            parse_data_url(value)
        except ValueError:
            raise PydanticCustomError(
                "invalid_image_url",
                "Image URL must be an http(s) URL or a base64 image data URL."
            )
        return value


class TextPlaygroundForm(_PlaygroundForm):
    """Form for POST /playground/text."""
    user_text: str = Field(
        default=None,
        validate_default=True,
        description="Free text to analyze"
    )

    @field_validator("user_text", mode="before")
    @classmethod
    def _user_text_not_empty(cls, value: Any) -> str:
        return _require_text(value, "User text cannot be empty.")


# --- Response models ---

class PlaygroundState(BaseModel):
    """
    Result of one playground submission.

    Exactly one of the following is set:
    - data: the model's JSON object, validated against the user's schema
    - error (+ error_code): a single human-readable failure message
    - field_errors: per-field messages when required inputs are missing
    """
    data: Optional[Dict[str, Any]] = Field(None, description="Validated structured result")
    error: Optional[str] = Field(None, description="Human-readable failure message")
    error_code: Optional[str] = Field(
        None,
        description="Failure category (e.g. 'schema_error', 'invalid_json', 'response_mismatch')"
    )
    field_errors: Optional[Dict[str, List[str]]] = Field(
        None,
        description="Field name → validation messages"
    )


class PlaygroundModeDefaults(BaseModel):
    """Prefill values for one playground form."""
    system_prompt: str
    json_schema: str
    sample_texts: List[str] = Field(default_factory=list)


class PlaygroundDefaultsResponse(BaseModel):
    """Response model for GET /playground/defaults."""
    image: PlaygroundModeDefaults
    text: PlaygroundModeDefaults
