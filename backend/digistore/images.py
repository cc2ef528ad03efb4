import base64
import mimetypes
from typing import Optional


class ImageUploadError(ValueError):
    pass


def to_data_url(content: bytes, content_type: Optional[str] = None, filename: Optional[str] = None) -> str:
    """Inline an uploaded image as a ``data:<mime>;base64,...`` string."""
    mime = content_type or ""
    if not mime or mime == "application/octet-stream":
        mime = (mimetypes.guess_type(filename or "")[0]) or ""
    if not mime.startswith("image/"):
        raise ImageUploadError("Only image files can be uploaded.")
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{mime};base64,{encoded}"


def resolve_image(
    content: Optional[bytes],
    content_type: Optional[str],
    filename: Optional[str],
    current: str = "",
) -> str:
    # A fresh upload wins; otherwise keep the value the form already had.
    if content:
        return to_data_url(content, content_type, filename)
    return current or ""
