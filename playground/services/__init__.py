"""
Service layer for the Intent-to-JSON Playground backend.

Services sit between routes (HTTP layer) and the structured agent:
- Validate submissions before any provider call
- Call the agent and map its outcome into a PlaygroundState
"""

from .playground_service import (
    analyze,
    get_playground_defaults,
    validate_playground_form,
)

__all__ = [
    "analyze",
    "get_playground_defaults",
    "validate_playground_form",
]
