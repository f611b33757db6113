"""
Playground API endpoints.

Flow for both playgrounds:
1. Parse form fields (image URL or uploaded image / user text, system prompt, JSON schema)
2. Validate required fields (per-field errors, no provider call)
3. Call the structured agent (compile schema → Gemini → parse → validate)
4. Map the outcome to PlaygroundState and an HTTP status
"""

from typing import Annotated, Optional

from fastapi import APIRouter, File, Form, HTTPException, Response, UploadFile, status

from playground.agents.structured.content import build_data_url
from playground.config import settings
from playground.schemas.playground import PlaygroundDefaultsResponse, PlaygroundState
from playground.services import analyze, get_playground_defaults
from playground.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/playground", tags=["playground"])

ERROR_STATUS = {
    "validation_error": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "schema_error": status.HTTP_400_BAD_REQUEST,
    "response_mismatch": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "provider_error": status.HTTP_502_BAD_GATEWAY,
    "empty_response": status.HTTP_502_BAD_GATEWAY,
    "invalid_json": status.HTTP_502_BAD_GATEWAY,
    "configuration_error": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "unknown_error": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _status_for(state: PlaygroundState) -> int:
    if state.error_code is None:
        return status.HTTP_200_OK
    return ERROR_STATUS.get(state.error_code, status.HTTP_500_INTERNAL_SERVER_ERROR)


async def _read_uploaded_image(image: UploadFile) -> str:
    """Validate an uploaded image and turn it into a data URL."""
    if not image.content_type or not image.content_type.startswith("image/"):
        logger.warning(f"Invalid content type: {image.content_type}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": "invalid_file_type",
                "details": "File must be an image (JPEG, PNG, etc.)"
            }
        )

    image_bytes = await image.read()

    max_size_bytes = settings.MAX_UPLOAD_MB * 1024 * 1024
    if len(image_bytes) > max_size_bytes:
        logger.warning(f"Image too large: {len(image_bytes)} bytes")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": "file_too_large",
                "details": f"Image must be smaller than {settings.MAX_UPLOAD_MB}MB"
            }
        )

    logger.info(f"Using uploaded image: filename={image.filename}, size={len(image_bytes)} bytes")
    return build_data_url(image.content_type, image_bytes)


@router.post(
    "/image",
    response_model=PlaygroundState,
    summary="Image intent to JSON",
    description="""
    Analyze an image with a custom instruction and output schema.

    The image is given either as `image_url` (http(s) URL or base64 data URL)
    or as an uploaded `image` file, used when `image_url` is empty.

    Responses:
    - 200 with `data` when the model reply satisfies the schema
    - 422 with `field_errors` when a required field is empty
    - 400 / 422 / 502 / 500 with `error` and `error_code` otherwise
    """
)
async def analyze_image(
    response: Response,
    image_url: Annotated[Optional[str], Form()] = None,
    system_prompt: Annotated[Optional[str], Form()] = None,
    json_schema: Annotated[Optional[str], Form()] = None,
    image: Annotated[Optional[UploadFile], File(description="Image file to analyze")] = None,
) -> PlaygroundState:
    if (not image_url or not image_url.strip()) and image is not None and image.filename:
        image_url = await _read_uploaded_image(image)

    state = await analyze(
        "image",
        {
            "image_url": image_url,
            "system_prompt": system_prompt,
            "json_schema": json_schema,
        }
    )
    response.status_code = _status_for(state)
    return state


@router.post(
    "/text",
    response_model=PlaygroundState,
    summary="Text intent to JSON",
    description="""
    Analyze free text with a custom instruction and output schema.

    Same response contract as POST /playground/image.
    """
)
async def analyze_text(
    response: Response,
    user_text: Annotated[Optional[str], Form()] = None,
    system_prompt: Annotated[Optional[str], Form()] = None,
    json_schema: Annotated[Optional[str], Form()] = None,
) -> PlaygroundState:
    state = await analyze(
        "text",
        {
            "user_text": user_text,
            "system_prompt": system_prompt,
            "json_schema": json_schema,
        }
    )
    response.status_code = _status_for(state)
    return state


@router.get(
    "/defaults",
    response_model=PlaygroundDefaultsResponse,
    summary="Default form values",
    description="Default instructions, schemas and sample texts for both playgrounds."
)
async def playground_defaults() -> PlaygroundDefaultsResponse:
    return get_playground_defaults()
