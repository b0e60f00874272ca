"""
Example model.
"""
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, TYPE_CHECKING
from datetime import datetime, timezone

if TYPE_CHECKING:
    from app.models.translation import Translation


class Example(SQLModel, table=True):
    """Example table - a usage sentence pair attached to a translation."""
    __tablename__ = "examples"

    id: Optional[int] = Field(default=None, primary_key=True)
    text: str  # Snippet in the card's source language
    translation: str  # Same snippet in the translation's language
    translation_id: int = Field(foreign_key="translations.id", index=True)
    card_id: int = Field(foreign_key="cards.id", index=True)  # Denormalized from the translation
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Relationships
    translation_ref: "Translation" = Relationship(back_populates="examples")
