"""Unit tests for weekly bucketing of chat thread activity."""

from datetime import datetime, timedelta, timezone, UTC

import pytest

from models.chat_thread import ThreadActivity
from services.reporting_service import (
    build_weekly_summaries,
    summary_window,
    week_end,
    week_start,
)

# Wednesday
NOW = datetime(2025, 3, 19, 15, 0, tzinfo=UTC)


def at(*args, **kwargs) -> datetime:
    return datetime(*args, tzinfo=UTC, **kwargs)


def activity(created_at, user_id=None, user_name=None) -> ThreadActivity:
    return ThreadActivity(created_at=created_at, user_id=user_id, user_name=user_name)


def test_week_start_is_monday_midnight_utc():
    assert week_start(NOW) == at(2025, 3, 17)
    assert week_start(at(2025, 3, 17)) == at(2025, 3, 17)
    assert week_start(at(2025, 3, 23, 23, 59, 59)) == at(2025, 3, 17)


def test_week_start_converts_to_utc_first():
    # Monday 01:00 in UTC+2 is still Sunday in UTC
    local = datetime(2025, 3, 17, 1, 0, tzinfo=timezone(timedelta(hours=2)))

    assert week_start(local) == at(2025, 3, 10)


def test_week_start_treats_naive_as_utc():
    assert week_start(datetime(2025, 3, 19, 12, 0)) == at(2025, 3, 17)


def test_week_end_is_last_millisecond_of_sunday():
    assert week_end(at(2025, 3, 17)) == at(2025, 3, 23, 23, 59, 59, 999000)


def test_summary_window():
    start, end = summary_window(6, NOW)

    assert start == at(2025, 2, 10)
    assert end == at(2025, 3, 23, 23, 59, 59, 999000)


def test_empty_activity_is_zero_filled_newest_first():
    summaries = build_weekly_summaries([], weeks_back=6, now=NOW)

    assert [s.week_start for s in summaries] == [
        at(2025, 3, 17),
        at(2025, 3, 10),
        at(2025, 3, 3),
        at(2025, 2, 24),
        at(2025, 2, 17),
        at(2025, 2, 10),
    ]
    assert all(s.conversations == 0 and s.unique_users == 0 for s in summaries)


def test_weeks_are_contiguous():
    summaries = build_weekly_summaries([], weeks_back=12, now=NOW)

    for newer, older in zip(summaries, summaries[1:]):
        assert newer.week_start - older.week_start == timedelta(weeks=1)
        assert older.week_end + timedelta(milliseconds=1) == newer.week_start


def test_single_week_covers_current_week():
    (summary,) = build_weekly_summaries(
        [activity(at(2025, 3, 17, 0, 0), "u1")], weeks_back=1, now=NOW
    )

    assert summary.week_start == at(2025, 3, 17)
    assert summary.conversations == 1
    assert summary.unique_users == 1


def test_counts_conversations_and_distinct_users_per_week():
    rows = [
        activity(at(2025, 3, 18, 9), "u1"),
        activity(at(2025, 3, 18, 10), "u1"),
        activity(at(2025, 3, 19, 11), "u2"),
        activity(at(2025, 3, 11, 8), "u1"),
        activity(at(2025, 2, 10, 0), user_name="legacy"),
    ]

    summaries = build_weekly_summaries(rows, weeks_back=6, now=NOW)
    by_week = {s.week_start: s for s in summaries}

    assert by_week[at(2025, 3, 17)].conversations == 3
    assert by_week[at(2025, 3, 17)].unique_users == 2
    assert by_week[at(2025, 3, 10)].conversations == 1
    assert by_week[at(2025, 3, 10)].unique_users == 1
    assert by_week[at(2025, 2, 10)].conversations == 1
    assert by_week[at(2025, 2, 10)].unique_users == 1
    assert by_week[at(2025, 3, 3)].conversations == 0


def test_sunday_last_millisecond_belongs_to_that_week():
    rows = [
        activity(at(2025, 3, 16, 23, 59, 59, 999000), "u1"),
        activity(at(2025, 3, 17, 0, 0), "u2"),
    ]

    summaries = build_weekly_summaries(rows, weeks_back=2, now=NOW)

    assert [(s.week_start, s.conversations) for s in summaries] == [
        (at(2025, 3, 17), 1),
        (at(2025, 3, 10), 1),
    ]


def test_rows_outside_window_are_ignored():
    rows = [
        activity(at(2025, 2, 9, 23, 59), "early"),
        activity(at(2025, 3, 24, 0, 0), "future"),
    ]

    summaries = build_weekly_summaries(rows, weeks_back=6, now=NOW)

    assert sum(s.conversations for s in summaries) == 0


def test_threads_without_user_count_only_as_conversations():
    rows = [activity(at(2025, 3, 18)), activity(at(2025, 3, 18), user_id="")]

    (summary,) = build_weekly_summaries(rows, weeks_back=1, now=NOW)

    assert summary.conversations == 2
    assert summary.unique_users == 0


def test_user_id_takes_precedence_over_user_name():
    rows = [
        activity(at(2025, 3, 18), user_id="hash-1", user_name="alice"),
        activity(at(2025, 3, 18), user_id="hash-1", user_name="alice-renamed"),
        activity(at(2025, 3, 18), user_name="hash-1"),
    ]

    (summary,) = build_weekly_summaries(rows, weeks_back=1, now=NOW)

    assert summary.unique_users == 1


@pytest.mark.parametrize("weeks_back", [1, 6, 52])
def test_returns_exactly_weeks_back_entries(weeks_back):
    assert len(build_weekly_summaries([], weeks_back=weeks_back, now=NOW)) == weeks_back
