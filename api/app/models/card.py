"""
Card model.
"""
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime, timezone

if TYPE_CHECKING:
    from app.models.card_set import CardSet
    from app.models.translation import Translation


class Card(SQLModel, table=True):
    """Card table - a single vocabulary entry in a source language."""
    __tablename__ = "cards"

    id: Optional[int] = Field(default=None, primary_key=True)
    text: str
    language_id: Optional[int] = Field(default=None, foreign_key="languages.id")  # Source language
    card_set_id: int = Field(foreign_key="card_sets.id", index=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Relationships
    card_set: "CardSet" = Relationship(back_populates="cards")
    translations: List["Translation"] = Relationship(
        back_populates="card",
        sa_relationship_kwargs={"order_by": "Translation.id"}
    )
