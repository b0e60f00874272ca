"""
Schemas for translation suggestions and underlined text extraction.
"""
from pydantic import BaseModel, Field
from typing import List


class TranslationSuggestionRequest(BaseModel):
    text: str = Field("", description="Text to translate")
    target_language: str = Field("", description="Target language ISO-2 code (e.g., 'en')")


class TranslationSuggestionResponse(BaseModel):
    translation: str


class UnderlinedText(BaseModel):
    phrase: str
    context: str = ""


class UnderlinedTextResponse(BaseModel):
    items: List[UnderlinedText]
