"""
Practice event model.
"""
from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime, timezone


class PracticeStat(SQLModel, table=True):
    """
    Practice stats table - append-only log with one row per quiz answer.

    card_id and translation_id are plain references (no foreign key) so the log
    outlives deleted cards.
    """
    __tablename__ = "practice_stats"

    id: Optional[int] = Field(default=None, primary_key=True)
    card_id: int = Field(index=True)
    translation_id: int = Field(index=True)
    language_id: int = Field(foreign_key="languages.id", index=True)
    result: bool  # True when the answer was correct
    practice_mode: str  # 'flashcard', 'multipleChoice' or 'chainReaction'
    practice_date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), index=True)
