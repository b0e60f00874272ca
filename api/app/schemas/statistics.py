"""
Statistics schemas.
"""
from pydantic import BaseModel
from typing import List, Optional
import datetime


class DailyCount(BaseModel):
    date: datetime.date
    count: int


class LanguageStatistics(BaseModel):
    language_id: int
    name: str
    flag_emoji: Optional[str] = None
    count: int
    success_ratio: float


class StatisticsResponse(BaseModel):
    """Aggregated practice statistics."""
    daily_counts: List[DailyCount]
    heatmap: List[DailyCount]
    total_practiced: int
    overall_success_ratio: float
    per_language: List[LanguageStatistics]
    current_streak: int
    longest_streak: int
