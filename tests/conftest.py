"""
Pytest configuration for playground backend tests.

Sets up test environment and global fixtures.
"""
import os
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

# Disable config validation during tests
# This allows tests to run without requiring real environment variables
os.environ["VALIDATE_CONFIG"] = "false"

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("GOOGLE_API_KEY", "test-google-api-key")


PEOPLE_SCHEMA = """{
  "type": "object",
  "properties": {
    "sentiment": {"type": "string", "enum": ["positive", "negative", "neutral"]},
    "topics": {"type": "array", "items": {"type": "string"}},
    "score": {"type": "number"},
    "refusalReason": {"type": ["string", "null"]}
  }
}"""

CONFORMING_REPLY = (
    '{"sentiment": "positive", "topics": ["phones", "cameras"], '
    '"score": 0.9, "refusalReason": null}'
)

# 1x1 transparent PNG
PNG_DATA_URL = (
    "data:image/png;base64,"
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="
)


def make_gemini_response(text):
    """Build a stand-in for a google-genai GenerateContentResponse."""
    response = MagicMock()
    if text is None:
        response.candidates = []
        response.text = None
    else:
        response.candidates = [MagicMock()]
        response.text = text
    return response


@pytest.fixture
def gemini_client():
    """
    Patch genai.Client inside the agent module.

    Yields the mocked client; set
    ``gemini_client.aio.models.generate_content.return_value`` (or
    ``side_effect``) to control the reply.
    """
    with patch("playground.agents.structured.agent.genai.Client") as client_class:
        client = client_class.return_value
        client.aio.models.generate_content = AsyncMock(
            return_value=make_gemini_response(CONFORMING_REPLY)
        )
        client.aio.aclose = AsyncMock()
        yield client
