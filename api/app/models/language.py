"""
Language model.
"""
from sqlmodel import SQLModel, Field
from typing import Optional


class Language(SQLModel, table=True):
    """Language table - immutable reference data for supported languages."""
    __tablename__ = "languages"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str  # English, Italian, Spanish, etc.
    iso_2: str = Field(unique=True, index=True, max_length=2)  # e.g., 'en', 'it', 'es'
    flag_emoji: Optional[str] = None
