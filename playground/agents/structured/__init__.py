"""
Structured Agent Package

Schema-validated model invocation: the user supplies content (image or text),
an instruction and a schema-source; the agent asks Gemini for a JSON object and
only returns it once it satisfies the schema.

Main Components:
- types: TypedDict definitions for the invocation request
- errors: one exception per failure category
- schema_compiler: JSON-Schema subset → pydantic model (non-evaluating)
- content: user content → Gemini parts
- prompts: schema restatement and playground defaults
- agent: main runner that orchestrates the Gemini call

Usage:
    from playground.agents.structured import run_structured_agent

    result = await run_structured_agent({
        "content_kind": "text",
        "content": "I love this phone",
        "instruction": "Classify the sentiment.",
        "schema_source": '{"type": "object", "properties": {"sentiment": {"type": "string"}}}',
    })
"""

from playground.agents.structured.agent import run_structured_agent
from playground.agents.structured.errors import (
    ConfigurationError,
    EmptyResponseError,
    InvocationError,
    MalformedJSONError,
    ProviderError,
    SchemaCompilationError,
    SchemaMismatchError,
)
from playground.agents.structured.schema_compiler import (
    compile_schema,
    validate_against,
)
from playground.agents.structured.types import (
    ContentKind,
    StructuredAgentInput,
    StructuredAgentOutput,
)

__all__ = [
    # Main runner
    "run_structured_agent",
    # Types
    "ContentKind",
    "StructuredAgentInput",
    "StructuredAgentOutput",
    # Errors
    "InvocationError",
    "ConfigurationError",
    "SchemaCompilationError",
    "ProviderError",
    "EmptyResponseError",
    "MalformedJSONError",
    "SchemaMismatchError",
    # Schema compiler
    "compile_schema",
    "validate_against",
]
