"""
Card, translation and example schemas.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class ExamplePayload(BaseModel):
    """A usage sentence pair submitted with a translation."""
    text: str = Field(..., description="Snippet in the card's source language")
    translation: str = Field(..., description="Same snippet in the translation's language")


class TranslationPayload(BaseModel):
    """A translation submitted when creating or updating a card."""
    text: str = Field(..., description="Translated text")
    language_id: int = Field(..., description="Language ID of the translation")
    examples: List[ExamplePayload] = Field(default_factory=list)


class CreateCardRequest(BaseModel):
    """Request to create a card with its translations and examples."""
    text: str = Field(..., description="Card text in the source language")
    language_id: Optional[int] = Field(None, description="Source language ID")
    translations: List[TranslationPayload] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "text": "ciao",
                "language_id": 2,
                "translations": [
                    {
                        "text": "hello",
                        "language_id": 1,
                        "examples": [{"text": "Ciao, come stai?", "translation": "Hello, how are you?"}]
                    }
                ]
            }
        }


class UpdateCardRequest(BaseModel):
    """Request to update a card. The translation list replaces the existing one."""
    text: str = Field(..., description="Card text in the source language")
    translations: List[TranslationPayload] = Field(default_factory=list)


class ExampleResponse(BaseModel):
    id: int
    text: str
    translation: str

    class Config:
        from_attributes = True


class TranslationResponse(BaseModel):
    id: int
    text: str
    language_id: int
    examples: List[ExampleResponse] = []

    class Config:
        from_attributes = True


class CardResponse(BaseModel):
    """Card with nested translations and examples."""
    id: int
    text: str
    language_id: Optional[int] = None
    card_set_id: int
    created_at: Optional[datetime] = None
    translations: List[TranslationResponse] = []

    class Config:
        from_attributes = True


class CardsResponse(BaseModel):
    cards: List[CardResponse]
