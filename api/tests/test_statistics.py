from datetime import date, datetime, timedelta, timezone

from app.models.models import Language, PracticeStat
from app.services.statistics_service import (
    compute_statistics,
    compute_streaks,
    event_day,
    success_ratio,
    UNKNOWN_FLAG,
)

API = "/api/v1"
TODAY = date(2024, 3, 10)


def stat(day, result=True, language_id=1, hour=12):
    return PracticeStat(
        card_id=1,
        translation_id=1,
        language_id=language_id,
        result=result,
        practice_mode="flashcard",
        practice_date=datetime(day.year, day.month, day.day, hour),
    )


def test_streak_of_consecutive_days():
    days = [TODAY - timedelta(days=2), TODAY - timedelta(days=1), TODAY]
    assert compute_streaks(days, TODAY) == (3, 3)


def test_streak_broken_by_gap():
    days = [TODAY - timedelta(days=2), TODAY]
    assert compute_streaks(days, TODAY) == (1, 1)


def test_streak_ending_yesterday_is_current():
    days = [TODAY - timedelta(days=2), TODAY - timedelta(days=1)]
    assert compute_streaks(days, TODAY) == (2, 2)


def test_streak_lapses_after_missed_day():
    days = [TODAY - timedelta(days=5), TODAY - timedelta(days=4), TODAY - timedelta(days=3)]
    assert compute_streaks(days, TODAY) == (0, 3)


def test_no_practice_no_streak():
    assert compute_streaks([], TODAY) == (0, 0)


def test_success_ratio():
    assert success_ratio(0, 0) == 0.0
    assert success_ratio(3, 4) == 75.0


def test_event_day_uses_utc():
    late_evening = datetime(2024, 3, 9, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
    assert event_day(late_evening) == date(2024, 3, 10)
    assert event_day(datetime(2024, 3, 9, 23, 30)) == date(2024, 3, 9)


def test_empty_log():
    stats = compute_statistics([], today=TODAY)

    assert stats.total_practiced == 0
    assert stats.overall_success_ratio == 0.0
    assert stats.per_language == []
    assert stats.current_streak == 0
    assert stats.longest_streak == 0
    assert len(stats.daily_counts) == 7
    assert all(count == 0 for _, count in stats.daily_counts)
    assert len(stats.heatmap) == 365


def test_compute_statistics():
    english = Language(id=1, name="English", iso_2="en", flag_emoji="🇬🇧")
    italian = Language(id=2, name="Italian", iso_2="it", flag_emoji="🇮🇹")
    events = [
        stat(TODAY, result=True, language_id=1),
        stat(TODAY, result=False, language_id=1),
        stat(TODAY - timedelta(days=1), result=True, language_id=2),
        stat(TODAY - timedelta(days=30), result=True, language_id=1),
    ]

    stats = compute_statistics(events, [english, italian], today=TODAY)

    assert stats.total_practiced == 4
    assert stats.overall_success_ratio == 75.0
    assert stats.daily_counts[-1] == (TODAY, 2)
    assert stats.daily_counts[-2] == (TODAY - timedelta(days=1), 1)
    assert stats.daily_counts[0][0] == TODAY - timedelta(days=6)
    assert sum(count for _, count in stats.heatmap) == 4
    assert stats.current_streak == 2
    assert stats.longest_streak == 2

    assert [(s.name, s.count) for s in stats.per_language] == [("English", 3), ("Italian", 1)]
    assert round(stats.per_language[0].success_ratio, 2) == 66.67
    assert stats.per_language[1].flag_emoji == "🇮🇹"


def test_unknown_language_gets_placeholder():
    stats = compute_statistics([stat(TODAY, language_id=77)], [], today=TODAY)
    summary = stats.per_language[0]
    assert summary.name == "Language 77"
    assert summary.flag_emoji == UNKNOWN_FLAG


def test_statistics_endpoint_empty(client):
    response = client.get(f"{API}/statistics")
    assert response.status_code == 200

    body = response.json()
    assert body["total_practiced"] == 0
    assert body["overall_success_ratio"] == 0.0
    assert len(body["daily_counts"]) == 7
    assert len(body["heatmap"]) == 365
    assert body["current_streak"] == 0


def test_statistics_endpoint(client, db, languages):
    now = datetime.now(timezone.utc)
    db.add(PracticeStat(card_id=1, translation_id=1, language_id=languages["it"], result=True,
                        practice_mode="flashcard", practice_date=now))
    db.add(PracticeStat(card_id=2, translation_id=2, language_id=languages["it"], result=False,
                        practice_mode="chainReaction", practice_date=now - timedelta(days=1)))
    db.commit()

    body = client.get(f"{API}/statistics").json()

    assert body["total_practiced"] == 2
    assert body["overall_success_ratio"] == 50.0
    assert body["current_streak"] == 2
    assert body["per_language"][0]["name"] == "Italian"
    assert body["per_language"][0]["count"] == 2
    assert body["daily_counts"][-1]["count"] == 1
