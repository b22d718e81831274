"""
Upload normalization: every upload becomes (bytes, mime type) the generation
backend can take as an inline image part.
"""
import io

import fitz  # PyMuPDF
from PIL import Image

from sql_localizer.errors import LocalizerError

IMAGE_TYPES = {"image/jpeg": "JPEG", "image/jpg": "JPEG", "image/png": "PNG"}
PDF_TYPE = "application/pdf"
UPLOAD_EXTENSIONS = ["jpg", "jpeg", "png", "pdf"]


def normalize_image(data: bytes, mime_type: str) -> tuple[bytes, str]:
    """Re-encode an uploaded image so the declared mime type matches the bytes."""
    fmt = IMAGE_TYPES.get(mime_type)
    if fmt is None:
        raise LocalizerError(f"Unsupported file type: {mime_type}")
    image = Image.open(io.BytesIO(data))
    if fmt == "JPEG" and image.mode not in ("RGB", "L"):
        image = image.convert("RGB")
    bio = io.BytesIO()
    image.save(bio, format=fmt)
    return bio.getvalue(), "image/png" if fmt == "PNG" else "image/jpeg"


def pdf_page_count(pdf_bytes: bytes) -> int:
    with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
        return doc.page_count


def render_pdf_page(pdf_bytes: bytes, page_index: int, scale: float = 1.2) -> bytes:
    """Render one PDF page as PNG bytes."""
    with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
        page = doc.load_page(page_index)
        pix = page.get_pixmap(matrix=fitz.Matrix(scale, scale))
        img = Image.frombytes("RGB", [pix.width, pix.height], pix.samples)
    bio = io.BytesIO()
    img.save(bio, format="PNG")
    return bio.getvalue()
