"""Tests for pawjournal.analytics.aggregator."""

from datetime import timedelta

import pytest

from pawjournal.analytics.aggregator import (
    WindowAggregator,
    aggregate_window,
    is_poor_digestion,
    parse_duration_minutes,
    previous_window,
    trailing_window,
)
from pawjournal.events.store import InMemoryEventStore


def _window(now, days=7):
    return trailing_window(now, days)


class TestParseDuration:
    @pytest.mark.parametrize(
        "raw, expected",
        [("30", 30), (" 45 ", 45), (20, 20), (None, 0), ("", 0), ("half an hour", 0), ("-5", 0), (True, 0)],
    )
    def test_values(self, raw, expected):
        assert parse_duration_minutes(raw) == expected


class TestPoorDigestion:
    @pytest.mark.parametrize(
        "quality, notes, expected",
        [
            ("Poor", "", True),
            ("bad", None, True),
            ("Normal", "some diarrhea after lunch", True),
            ("", "Vomited twice", True),
            ("Normal", "all good", False),
            (None, None, False),
        ],
    )
    def test_heuristic(self, make_event, quality, notes, expected):
        event = make_event("Digestion", digestion_quality=quality, notes=notes)
        assert is_poor_digestion(event) is expected

    def test_other_categories_ignored(self, make_event):
        assert not is_poor_digestion(make_event("Note", notes="diarrhea"))


class TestAggregateWindow:
    @pytest.mark.smoke
    def test_counts(self, make_event, now):
        events = [
            make_event("Meal", timestamp=now - timedelta(hours=1), meal_type="Breakfast"),
            make_event("Meal", timestamp=now - timedelta(days=1), meal_type="Dinner"),
            make_event("Walk", timestamp=now - timedelta(hours=2), duration_minutes="30"),
            make_event("Playtime", timestamp=now - timedelta(hours=3), duration_minutes="15"),
            make_event("Walk", timestamp=now - timedelta(hours=4), duration_minutes="a while"),
            make_event("Symptom", timestamp=now - timedelta(days=2), symptom_type="Vomiting"),
            make_event("Mood", timestamp=now - timedelta(hours=5), mood_level=4),
            make_event("Mood", timestamp=now - timedelta(days=1), mood_level=2),
            make_event("Digestion", timestamp=now - timedelta(days=2), digestion_quality="poor"),
            make_event("Digestion", timestamp=now - timedelta(days=3), digestion_quality="normal"),
            make_event("Water", timestamp=now - timedelta(hours=6)),
        ]
        start, end = _window(now)
        agg = aggregate_window(events, "pet-1", start, end)

        assert agg.total_events == 11
        assert agg.meals_count == 2
        assert agg.activity_minutes == 45
        assert len(agg.symptom_events) == 1
        assert agg.average_mood == 3.0
        assert len(agg.poor_digestion_events) == 1
        assert agg.water_count == 1
        assert agg.logged_days == 4
        assert agg.days == 7

    def test_excludes_other_pets_and_out_of_range(self, make_event, now):
        start, end = _window(now)
        events = [
            make_event("Meal", timestamp=now, pet_id="pet-2"),
            make_event("Meal", timestamp=start - timedelta(seconds=1)),
            make_event("Meal", timestamp=end),
            make_event("Meal", timestamp=start),
        ]
        agg = aggregate_window(events, "pet-1", start, end)
        assert agg.total_events == 1

    def test_empty(self, now):
        start, end = _window(now)
        agg = aggregate_window([], "pet-1", start, end)
        assert agg.is_empty
        assert agg.average_mood is None
        assert agg.symptom_events == ()

    def test_mood_without_level_skipped(self, make_event, now):
        start, end = _window(now)
        agg = aggregate_window([make_event("Mood", timestamp=now)], "pet-1", start, end)
        assert agg.total_events == 1
        assert agg.average_mood is None

    @pytest.mark.smoke
    def test_idempotent_and_order_independent(self, make_event, now):
        events = [
            make_event("Symptom", timestamp=now - timedelta(days=d), symptom_type="Itching") for d in range(3)
        ] + [make_event("Meal", timestamp=now - timedelta(days=d), meal_type="Dinner") for d in range(3)]
        start, end = _window(now)
        first = aggregate_window(events, "pet-1", start, end)
        second = aggregate_window(list(reversed(events)), "pet-1", start, end)
        assert first == second
        assert first == aggregate_window(events, "pet-1", start, end)


class TestWindows:
    def test_trailing_window_includes_now(self, now):
        start, end = trailing_window(now, 7)
        assert start <= now < end
        assert end - start == timedelta(days=7)

    def test_previous_window_adjacent(self, now):
        start, end = trailing_window(now, 7)
        prev_start, prev_end = previous_window(start, end)
        assert prev_end == start
        assert prev_end - prev_start == end - start


class TestWindowAggregator:
    def test_week_over_week(self, make_event, now):
        store = InMemoryEventStore(
            [
                make_event("Walk", timestamp=now - timedelta(days=1), duration_minutes="40"),
                make_event("Walk", timestamp=now - timedelta(days=8), duration_minutes="60"),
                make_event("Walk", timestamp=now - timedelta(days=20), duration_minutes="90"),
            ]
        )
        current, previous = WindowAggregator(store).week_over_week("pet-1", now)
        assert current.activity_minutes == 40
        assert previous.activity_minutes == 60
        assert previous.range_end == current.range_start

    def test_aggregate_queries_store(self, make_event, now):
        store = InMemoryEventStore([make_event("Water", timestamp=now)])
        start, end = _window(now)
        assert WindowAggregator(store).aggregate("pet-1", start, end).water_count == 1
