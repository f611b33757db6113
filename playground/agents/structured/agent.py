"""
Structured Agent Runner

Single-shot, schema-validated model invocation. Every call:
1. Checks the provider credential
2. Compiles the user's schema-source into a validator (never evaluated as code)
3. Sends instruction + schema restatement + user content to Gemini in JSON mode
4. Parses the reply as JSON
5. Validates the parsed object against the compiled schema

Each step has its own exception (see errors.py). Nothing is cached between
calls and nothing is retried.
"""

import logging

from google import genai
from google.genai import types

from playground.agents.structured.content import build_user_parts
from playground.agents.structured.errors import (
    ConfigurationError,
    EmptyResponseError,
    MalformedJSONError,
    ProviderError,
)
from playground.agents.structured.prompts import build_system_instruction
from playground.agents.structured.schema_compiler import (
    compile_schema,
    load_strict_json,
    validate_against,
)
from playground.agents.structured.types import StructuredAgentInput, StructuredAgentOutput
from playground.config import settings
from playground.utils.logging import preview

logger = logging.getLogger(__name__)


async def run_structured_agent(request: StructuredAgentInput) -> StructuredAgentOutput:
    """
    Invoke the model and return its reply validated against the user's schema.

    Args:
        request: A request that already passed field validation

    Returns:
        The model's JSON object, unchanged field-for-field

    Raises:
        ConfigurationError: GOOGLE_API_KEY is not set (no network attempt)
        SchemaCompilationError: schema-source is not a usable schema (no network attempt)
        ProviderError: the Gemini call failed; message is the provider's
        EmptyResponseError: Gemini answered without content
        MalformedJSONError: the content is not JSON
        SchemaMismatchError: the JSON does not satisfy the schema
    """
    logger.info(f"Structured invocation started: content_kind={request['content_kind']}")

    if not settings.GOOGLE_API_KEY:
        logger.error("GOOGLE_API_KEY not configured")
        raise ConfigurationError(
            "GOOGLE_API_KEY is not configured. "
            "Please set it in your .env file to use the playground."
        )

    schema_model = compile_schema(request["schema_source"])
    logger.debug("Schema compiled")

    config = types.GenerateContentConfig(
        system_instruction=build_system_instruction(
            request["instruction"], request["schema_source"]
        ),
        temperature=settings.GEMINI_TEMPERATURE,
        response_mime_type="application/json"
    )

    contents = build_user_parts(request["content_kind"], request["content"])

    client = genai.Client(api_key=settings.GOOGLE_API_KEY)
    try:
        response = await client.aio.models.generate_content(
            model=settings.GEMINI_MODEL,
            contents=contents,  # type: ignore
            config=config
        )
    except Exception as e:
        logger.error(f"Gemini call failed: {type(e).__name__}")
        raise ProviderError(str(e)) from e
    finally:
        # One client per invocation; release its async HTTP session
        await client.aio.aclose()

    if not response.candidates or not response.candidates[0].content:
        logger.error("No response from model")
        raise EmptyResponseError("No content in model response")

    response_text = (response.text or "").strip()
    if not response_text:
        logger.error("Model returned an empty body")
        raise EmptyResponseError("No content in model response")

    logger.debug(f"Raw response text: {preview(response_text)}")

    try:
        parsed = load_strict_json(response_text)
    except ValueError as e:
        logger.error(f"Failed to parse JSON response: {e}")
        raise MalformedJSONError(f"Model returned invalid JSON: {e}") from e

    result = validate_against(schema_model, parsed)

    logger.info("Structured invocation completed")
    return result
