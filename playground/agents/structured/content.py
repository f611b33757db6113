"""
User content → Gemini parts.

Image content arrives as an image reference: either an http(s) URL the
provider fetches itself, or a ``data:`` URL whose base64 payload is sent
inline. Text content is sent as a single text part.
"""

import base64
import binascii
import mimetypes
import re
from typing import List, Tuple
from urllib.parse import urlsplit

from google.genai import types

from playground.agents.structured.prompts import IMAGE_USER_PROMPT
from playground.agents.structured.types import ContentKind

DATA_URL_PATTERN = re.compile(r"^data:(?P<mime>image/[\w.+-]+);base64,(?P<payload>.+)$", re.DOTALL)

DEFAULT_IMAGE_MIME = "image/jpeg"


def is_remote_url(url: str) -> bool:
    return url.startswith(("http://", "https://"))


def parse_data_url(url: str) -> Tuple[str, bytes]:
    """
    Split a base64 image data URL into (mime_type, raw bytes).

    Raises:
        ValueError: if the URL is not an image data URL or the payload
            is not valid base64.
    """
    match = DATA_URL_PATTERN.match(url.strip())
    if not match:
        raise ValueError("not a base64 image data URL")
    try:
        data = base64.b64decode(match.group("payload"), validate=True)
    except binascii.Error as e:
        raise ValueError(f"invalid base64 payload: {e}") from e
    if not data:
        raise ValueError("empty image payload")
    return match.group("mime"), data


def guess_image_mime(url: str) -> str:
    """Image mime type from a URL's path; jpeg when unknown or not an image."""
    path = urlsplit(url).path
    mime_type = mimetypes.guess_type(path)[0]
    if not mime_type or not mime_type.startswith("image/"):
        return DEFAULT_IMAGE_MIME
    return mime_type


def build_data_url(mime_type: str, data: bytes) -> str:
    """Encode uploaded image bytes as a data URL."""
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('utf-8')}"


def build_user_parts(content_kind: ContentKind, content: str) -> List[types.Part]:
    """Build the user turn for one invocation."""
    if content_kind == "text":
        return [types.Part(text=content)]

    if is_remote_url(content):
        mime_type = guess_image_mime(content)
        image_part = types.Part.from_uri(file_uri=content, mime_type=mime_type)
    else:
        mime_type, data = parse_data_url(content)
        image_part = types.Part(inline_data=types.Blob(mime_type=mime_type, data=data))

    return [types.Part(text=IMAGE_USER_PROMPT), image_part]
