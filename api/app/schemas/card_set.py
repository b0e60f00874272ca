"""
Card set schemas.
"""
from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime


class CardSetResponse(BaseModel):
    """Card set response schema."""
    id: int
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    cards_count: int = 0


class CreateCardSetRequest(BaseModel):
    """Request schema for creating a card set."""
    name: str
    description: Optional[str] = None


class UpdateCardSetRequest(BaseModel):
    """Request schema for updating a card set."""
    name: Optional[str] = None
    description: Optional[str] = None


class CardSetsResponse(BaseModel):
    """Response schema for card sets list."""
    card_sets: List[CardSetResponse]
