"""
Statistics service.

Aggregates the practice log into dashboard figures. Pure functions over the
event list: nothing is stored, so nothing can drift from the log.

Calendar days are UTC dates of each event's stored instant; naive
timestamps are taken to be UTC.
"""
import logging
from collections import Counter, defaultdict
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from app.models.models import Language, PracticeStat

logger = logging.getLogger(__name__)

WEEK_DAYS = 7
HEATMAP_DAYS = 365
UNKNOWN_FLAG = "🏳️"


@dataclass
class LanguageSummary:
    language_id: int
    name: str
    flag_emoji: Optional[str]
    count: int
    success_ratio: float


@dataclass
class Statistics:
    daily_counts: List[Tuple[date, int]]
    heatmap: List[Tuple[date, int]]
    total_practiced: int
    overall_success_ratio: float
    per_language: List[LanguageSummary]
    current_streak: int
    longest_streak: int


def event_day(practiced_at: datetime) -> date:
    """UTC calendar day of an event."""
    if practiced_at.tzinfo is not None:
        practiced_at = practiced_at.astimezone(timezone.utc)
    return practiced_at.date()


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def success_ratio(successful: int, total: int) -> float:
    """Percentage of successful answers; 0 when there are none."""
    if total == 0:
        return 0.0
    return successful / total * 100


def count_by_day(events: Iterable[PracticeStat]) -> Counter:
    return Counter(event_day(event.practice_date) for event in events)


def trailing_window(counts: Dict[date, int], today: date, days: int) -> List[Tuple[date, int]]:
    """Counts for the last `days` days ending today, oldest first, missing days as 0."""
    return [
        (day, counts.get(day, 0))
        for day in (today - timedelta(days=offset) for offset in range(days - 1, -1, -1))
    ]


def compute_streaks(days: Iterable[date], today: date) -> Tuple[int, int]:
    """
    Compute (current_streak, longest_streak) from practiced days.

    Walks the distinct days in ascending order: a gap of exactly one day
    extends the streak, a longer gap restarts it at 1. The current streak is
    0 when the last practiced day is neither today nor yesterday.
    """
    current_streak = 0
    longest_streak = 0
    previous: Optional[date] = None

    for day in sorted(days):
        if previous is None:
            current_streak = 1
        else:
            gap = (day - previous).days
            if gap == 1:
                current_streak += 1
            elif gap > 1:
                current_streak = 1
            # gap == 0: same day, unchanged
        longest_streak = max(longest_streak, current_streak)
        previous = day

    if previous is not None and previous not in (today, today - timedelta(days=1)):
        current_streak = 0

    return current_streak, longest_streak


def summarize_languages(
    events: Sequence[PracticeStat],
    languages: Sequence[Language]
) -> List[LanguageSummary]:
    """Count and success ratio per language, most practiced first."""
    by_id = {lang.id: lang for lang in languages}
    totals: Dict[int, int] = defaultdict(int)
    successes: Dict[int, int] = defaultdict(int)
    for event in events:
        totals[event.language_id] += 1
        if event.result:
            successes[event.language_id] += 1

    summaries = []
    for language_id, total in totals.items():
        language = by_id.get(language_id)
        if language is None:
            logger.warning(f"Statistics: language {language_id} not found, using a placeholder label")
        summaries.append(LanguageSummary(
            language_id=language_id,
            name=language.name if language else f"Language {language_id}",
            flag_emoji=language.flag_emoji if language else UNKNOWN_FLAG,
            count=total,
            success_ratio=success_ratio(successes[language_id], total),
        ))
    summaries.sort(key=lambda s: (-s.count, s.name))
    return summaries


def compute_statistics(
    events: Sequence[PracticeStat],
    languages: Sequence[Language] = (),
    today: Optional[date] = None
) -> Statistics:
    """
    Aggregate the practice log.

    Args:
        events: Practice events in any order
        languages: Languages used to label the per-language figures
        today: Reference day (UTC); defaults to the current UTC date

    Returns:
        Statistics with 7-day daily counts, 365-day heatmap, overall success
        ratio, per-language summaries and streaks
    """
    if today is None:
        today = utc_today()

    counts = count_by_day(events)
    successful = sum(1 for event in events if event.result)
    current_streak, longest_streak = compute_streaks(counts.keys(), today)

    return Statistics(
        daily_counts=trailing_window(counts, today, WEEK_DAYS),
        heatmap=trailing_window(counts, today, HEATMAP_DAYS),
        total_practiced=len(events),
        overall_success_ratio=success_ratio(successful, len(events)),
        per_language=summarize_languages(events, languages),
        current_streak=current_streak,
        longest_streak=longest_streak,
    )
