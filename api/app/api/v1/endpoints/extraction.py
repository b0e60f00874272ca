"""
Underlined text extraction endpoint.
"""
from fastapi import APIRouter, UploadFile, File
from typing import Optional
import logging

from app.core.exceptions import ValidationError
from app.schemas.external import UnderlinedText, UnderlinedTextResponse
from app.services.extraction_service import extract_underlined_text

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/extract-underlined", tags=["extract-underlined"])


@router.post("", response_model=UnderlinedTextResponse)
def extract_underlined(image: Optional[UploadFile] = File(None)):
    """
    Extract underlined phrases, with surrounding context, from a photographed page.

    The phrases can be used as card texts.
    """
    if image is None:
        raise ValidationError("No image file uploaded")

    file_content = image.file.read()
    logger.info(f"Extracting underlined text from '{image.filename}' ({len(file_content)} bytes)")
    items = extract_underlined_text(file_content)
    return UnderlinedTextResponse(items=[UnderlinedText(**item) for item in items])
