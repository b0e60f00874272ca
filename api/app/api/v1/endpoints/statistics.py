"""
Practice statistics endpoint.
"""
from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.database import get_session
from app.schemas.statistics import StatisticsResponse, DailyCount, LanguageStatistics
from app.services import card_service
from app.services.statistics_service import compute_statistics

router = APIRouter(prefix="/statistics", tags=["statistics"])


@router.get("", response_model=StatisticsResponse)
async def get_statistics(
    session: Session = Depends(get_session)
):
    """
    Get practice statistics computed from the practice log.

    Returns daily counts for the last 7 days, a 365-day heatmap, the overall
    success ratio, per-language figures and the current and longest streaks.
    """
    events = card_service.list_practice_events(session)
    languages = card_service.list_languages(session)
    stats = compute_statistics(events, languages)

    return StatisticsResponse(
        daily_counts=[DailyCount(date=day, count=count) for day, count in stats.daily_counts],
        heatmap=[DailyCount(date=day, count=count) for day, count in stats.heatmap],
        total_practiced=stats.total_practiced,
        overall_success_ratio=stats.overall_success_ratio,
        per_language=[
            LanguageStatistics(
                language_id=summary.language_id,
                name=summary.name,
                flag_emoji=summary.flag_emoji,
                count=summary.count,
                success_ratio=summary.success_ratio,
            )
            for summary in stats.per_language
        ],
        current_streak=stats.current_streak,
        longest_streak=stats.longest_streak,
    )
