"""
Underlined text extraction from photographed pages, using the Gemini API.
"""
import base64
import io
import json
import logging
from typing import Dict, List

import requests
from PIL import Image as PILImage, ImageOps, UnidentifiedImageError

from app.core.config import settings
from app.core.exceptions import ValidationError, ExternalServiceError

logger = logging.getLogger(__name__)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"

SYSTEM_INSTRUCTION = (
    "You are the image analyzer. Your task is to identify underlined phrases in the text "
    "in the uploaded picture. The phrase is underlined only when the line is exactly under "
    "the phrase. The specific word should appear in the phrase only if it is explicitly underlined."
)

USER_PROMPT = (
    "Please examine the image and list all phrases that are underlined. For each underlined "
    "phrase you identify: 1/ Write out the phrase exactly as it appears. 2/ Provide a brief "
    "snippet of the surrounding text for context. 3/ List the phrases in the order they appear "
    "in the image, from the top to the bottom in JSON format "
    '(example "[{"phrase":"xxx","context":"yyy"}]"). Return only JSON.'
)


def prepare_image(file_content: bytes) -> bytes:
    """
    Validate an uploaded image and convert it to JPEG.

    Applies EXIF orientation so photos taken sideways are read upright.

    Raises:
        ValidationError: If the file is empty or not an image
    """
    if not file_content:
        raise ValidationError("No image file uploaded")
    try:
        img = PILImage.open(io.BytesIO(file_content))
        img = ImageOps.exif_transpose(img)
        # Convert to RGB if necessary (handles RGBA, P, etc.)
        if img.mode != 'RGB':
            img = img.convert('RGB')
    except (UnidentifiedImageError, OSError) as e:
        raise ValidationError(f"Invalid image file: {str(e)}") from e

    output = io.BytesIO()
    img.save(output, format="JPEG", quality=90)
    return output.getvalue()


def strip_code_fences(text: str) -> str:
    """Remove a markdown code block around the model's reply, if any."""
    text = text.strip()
    if text.startswith('```'):
        lines = text.split('\n')
        text = '\n'.join(lines[1:])
        if text.rstrip().endswith('```'):
            text = text.rstrip()[:-3]
    return text.strip()


def parse_underlined_items(text: str) -> List[Dict[str, str]]:
    """
    Parse the model's JSON array of {phrase, context} objects.

    Entries without a phrase are dropped.

    Raises:
        ExternalServiceError: If the reply is not a JSON array
    """
    try:
        data = json.loads(strip_code_fences(text))
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse extraction JSON response: {e}")
        logger.error(f"Response text: {text[:500]}")
        raise ExternalServiceError(f"Extraction service returned invalid JSON: {str(e)}") from e

    if not isinstance(data, list):
        raise ExternalServiceError("Extraction service did not return a JSON array")

    items = []
    for entry in data:
        if not isinstance(entry, dict):
            continue
        phrase = str(entry.get("phrase", "")).strip()
        if not phrase:
            continue
        items.append({"phrase": phrase, "context": str(entry.get("context", "")).strip()})
    return items


def extract_underlined_text(file_content: bytes) -> List[Dict[str, str]]:
    """
    Find underlined phrases in an image.

    Args:
        file_content: Raw uploaded image bytes

    Returns:
        List of {"phrase", "context"} dicts in reading order

    Raises:
        ValidationError: If the upload is not a valid image
        ExternalServiceError: If the API is not configured, fails, or replies with bad JSON
    """
    image_bytes = prepare_image(file_content)

    api_key = settings.google_gemini_api_key
    if not api_key:
        raise ExternalServiceError("Google Gemini API key not configured")

    model_name = settings.gemini_model
    payload = {
        "systemInstruction": {"parts": [{"text": SYSTEM_INSTRUCTION}]},
        "contents": [{
            "parts": [
                {
                    "inline_data": {
                        "mime_type": "image/jpeg",
                        "data": base64.b64encode(image_bytes).decode("ascii"),
                    }
                },
                {"text": USER_PROMPT},
            ]
        }],
        "generationConfig": {
            "temperature": 0.0,
            "maxOutputTokens": 2048,
        },
    }

    try:
        response = requests.post(
            f"{GEMINI_BASE_URL}/{model_name}:generateContent",
            json=payload,
            headers={"Content-Type": "application/json", "x-goog-api-key": api_key},
            timeout=settings.external_request_timeout
        )
        response.raise_for_status()
        data = response.json()
    except requests.exceptions.RequestException as e:
        error_msg = f"Gemini API request failed: {str(e)}"
        if getattr(e, 'response', None) is not None:
            error_msg += f" - Status: {e.response.status_code}"
        logger.error(error_msg)
        raise ExternalServiceError(error_msg) from e
    except ValueError as e:
        logger.error(f"Gemini API returned invalid JSON: {str(e)}")
        raise ExternalServiceError("Gemini API returned invalid JSON") from e

    candidates = data.get('candidates') if isinstance(data, dict) else None
    if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
        logger.error(f"Unexpected extraction response format: {str(data)[:500]}")
        raise ExternalServiceError("Extraction response missing candidates")
    content = candidates[0].get('content')
    parts = content.get('parts') if isinstance(content, dict) else None
    if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
        raise ExternalServiceError("Extraction response missing content or parts")

    text = str(parts[0].get('text') or '').strip()
    if not text:
        raise ExternalServiceError("Extraction service returned empty response")

    items = parse_underlined_items(text)
    logger.info(f"Extracted {len(items)} underlined phrase(s) with {model_name}")
    return items
