"""
Structured Agent Prompt Templates

The user writes the instruction; this module only adds the schema
restatement that tells the model which shape to answer in, the fixed text
that accompanies image content, and the playground defaults a client can
prefill its form with.
"""

import json
from typing import Dict, List

# =============================================================================
# SYSTEM INSTRUCTION BUILDER
# =============================================================================

SCHEMA_RESTATEMENT_HEADER = (
    "You must respond in a valid JSON format, adhering to the following JSON schema:"
)

IMAGE_USER_PROMPT = (
    "Here is the image to analyze. Please operate as defined in the system message."
)


def build_system_instruction(instruction: str, schema_source: str) -> str:
    """
    Concatenate the user's instruction with the schema restatement.

    The schema is restated verbatim so the model sees exactly the text the
    reply will be validated against.
    """
    return f"{instruction}\n\n{SCHEMA_RESTATEMENT_HEADER}\n\n{schema_source}"


# =============================================================================
# PLAYGROUND DEFAULTS
# =============================================================================

DEFAULT_IMAGE_SYSTEM_PROMPT = """Analyze the image to identify and count all animals and fruits.

Your response must be a valid JSON object. Each category must be an array of objects, each containing a "name" and "count". If a category is empty, return an empty array [].

If the image is unusable (e.g., blurry, irrelevant), set "isTaskRefused" to true and provide a "refusalReason"."""

DEFAULT_TEXT_SYSTEM_PROMPT = """Analyze the user's text and extract relevant information.

Your response must be a valid JSON object following the provided schema.

If the text is unusable or cannot be processed, set "isTaskRefused" to true and provide a "refusalReason"."""

_NAME_COUNT_ITEM = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "count": {"type": "integer", "minimum": 0},
    },
}

DEFAULT_IMAGE_SCHEMA: Dict = {
    "type": "object",
    "properties": {
        "isTaskRefused": {"type": "boolean"},
        "refusalReason": {"type": ["string", "null"]},
        "animals": {"type": "array", "items": _NAME_COUNT_ITEM},
        "fruits": {"type": "array", "items": _NAME_COUNT_ITEM},
    },
}

DEFAULT_TEXT_SCHEMA: Dict = {
    "type": "object",
    "properties": {
        "isTaskRefused": {"type": "boolean"},
        "refusalReason": {"type": ["string", "null"]},
        "sentiment": {"type": "string", "enum": ["positive", "negative", "neutral"]},
        "topics": {"type": "array", "items": {"type": "string"}},
        "entities": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "type": {"type": "string"},
                },
            },
        },
    },
}

SAMPLE_TEXTS: List[str] = [
    "I love the new iPhone 15! Apple really outdid themselves this time. "
    "The camera quality is amazing and the battery life is incredible.",
    "The weather in San Francisco today is terrible. "
    "It's been raining all morning and I forgot my umbrella at home.",
    "Breaking: Tesla announces new factory in Austin, Texas. "
    "CEO Elon Musk says this will create 10,000 new jobs.",
]


def default_schema_source(schema: Dict) -> str:
    """Pretty-print a default schema the way it is shown in the form."""
    return json.dumps(schema, indent=2)
