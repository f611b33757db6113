"""
Structured Agent Type Definitions

Input/output contracts for the schema-validated invocation.
All types are JSON-serializable and compatible with Pydantic.
"""

from typing import Any, Dict, Literal, TypedDict

ContentKind = Literal["image", "text"]


class StructuredAgentInput(TypedDict):
    """A request that already passed field validation."""
    content_kind: ContentKind
    content: str  # image URL (http(s) or data:) or literal user text
    instruction: str  # user's system prompt
    schema_source: str  # JSON-Schema subset, never evaluated


# The validated reply: the model's JSON object, unchanged
StructuredAgentOutput = Dict[str, Any]
