from pydantic import BaseModel
from typing import List, Optional


class LanguageResponse(BaseModel):
    """Language response schema."""
    id: int
    name: str
    iso_2: str
    flag_emoji: Optional[str] = None

    class Config:
        from_attributes = True


class LanguagesResponse(BaseModel):
    """List of languages response schema."""
    languages: List[LanguageResponse]
