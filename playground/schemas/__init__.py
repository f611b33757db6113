"""
Pydantic schemas for API request and response validation.

All FastAPI endpoints use Pydantic models with explicit types. The only
`Any` is PlaygroundState.data, which carries the user-defined JSON shape.
"""

from playground.schemas.health import HealthResponse
from playground.schemas.playground import (
    ImagePlaygroundForm,
    PlaygroundDefaultsResponse,
    PlaygroundModeDefaults,
    PlaygroundState,
    TextPlaygroundForm,
)

__all__ = [
    "HealthResponse",
    "ImagePlaygroundForm",
    "TextPlaygroundForm",
    "PlaygroundState",
    "PlaygroundModeDefaults",
    "PlaygroundDefaultsResponse",
]
