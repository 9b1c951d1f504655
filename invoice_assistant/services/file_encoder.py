import base64
import mimetypes
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from ..core.errors import FileReadError

DEFAULT_MIME_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class EncodedFile:
    """Transport-safe payload for an inline binary request part"""

    filename: str
    mime_type: str
    data: str  # base64, no data-URL prefix
    size: int


def guess_mime_type(filename: str | None) -> str:
    if not filename:
        return DEFAULT_MIME_TYPE
    mime_type, _ = mimetypes.guess_type(filename)
    return mime_type or DEFAULT_MIME_TYPE


def encode_bytes(content: bytes | None, filename: str = "upload", mime_type: str | None = None) -> EncodedFile:
    """
    Base64-encode uploaded file content.

    Args:
        content: Raw file bytes
        filename: Original file name (used for logging and mime fallback)
        mime_type: Declared content type; guessed from the name when missing

    Raises:
        FileReadError: if there is nothing to encode
    """
    if not content:
        raise FileReadError(f"Could not read file '{filename}': file is empty")

    if not mime_type or mime_type == DEFAULT_MIME_TYPE:
        mime_type = guess_mime_type(filename)

    encoded = base64.b64encode(content).decode("ascii")
    logger.debug("Encoded upload", filename=filename, mime_type=mime_type, size=len(content))
    return EncodedFile(filename=filename, mime_type=mime_type, data=encoded, size=len(content))


def encode_path(path: str | Path, mime_type: str | None = None) -> EncodedFile:
    """Read a file from disk and encode it"""
    path = Path(path)
    try:
        content = path.read_bytes()
    except OSError as e:
        raise FileReadError(f"Could not read file '{path.name}': {e}") from e
    return encode_bytes(content, filename=path.name, mime_type=mime_type)
