"""
CardSet model.
"""
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime, timezone

if TYPE_CHECKING:
    from app.models.card import Card


class CardSet(SQLModel, table=True):
    """CardSet table - a named collection of cards."""
    __tablename__ = "card_sets"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    description: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Relationships
    cards: List["Card"] = Relationship(back_populates="card_set")
