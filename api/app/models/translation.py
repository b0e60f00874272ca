"""
Translation model.
"""
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime, timezone

if TYPE_CHECKING:
    from app.models.card import Card
    from app.models.example import Example


class Translation(SQLModel, table=True):
    """Translation table - a card's text rendered in another language."""
    __tablename__ = "translations"

    id: Optional[int] = Field(default=None, primary_key=True)
    text: str
    language_id: int = Field(foreign_key="languages.id", index=True)
    card_id: int = Field(foreign_key="cards.id", index=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Relationships
    card: "Card" = Relationship(back_populates="translations")
    examples: List["Example"] = Relationship(
        back_populates="translation_ref",
        sa_relationship_kwargs={"order_by": "Example.id"}
    )
