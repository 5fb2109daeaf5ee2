"""Tests for the adaptive timeline builder."""

from datetime import date, timedelta

from storepulse.services.horizon import compute_horizon
from storepulse.services.timeline_builder import build_timeline, interval_injection_dates
from storepulse.services.timeline_types import Granularity

from conftest import NOW, TODAY, product, promotion, views


def _timeline(events):
    return build_timeline(compute_horizon(events, NOW), events)


def _keys(timeline):
    return [point.date_key for point in timeline]


class TestFallback:
    def test_zero_events_gives_seven_trailing_days(self) -> None:
        timeline = _timeline([])

        assert _keys(timeline) == [(TODAY - timedelta(days=offset)).isoformat() for offset in range(6, -1, -1)]
        assert timeline[-1].label == "Today"
        assert all(point.granularity == Granularity.DAILY for point in timeline)

    def test_window_starting_after_horizon_falls_back(self) -> None:
        timeline = _timeline([product("p1", date(2027, 3, 1))])

        assert len(timeline) == 7
        assert timeline[-1].date_key == TODAY.isoformat()


class TestRegions:
    def test_short_future_promotion_example(self) -> None:
        # BOGO running today -> today + 10 days: endpoints and midpoint are injected
        timeline = _timeline([promotion("promo-1", TODAY, date(2026, 10, 27))])

        assert _keys(timeline) == [
            "2026-10-17",
            "2026-10-18",
            "2026-10-22",
            "2026-10-24",
            "2026-10-27",
        ]
        assert timeline[0].label == "Today"
        assert timeline[-1].label == "Oct 27"

    def test_old_product_gets_monthly_bucket(self) -> None:
        timeline = _timeline([product("p1", TODAY - timedelta(days=40))])

        first = timeline[0]
        assert first.date_key == "2026-09-01"
        assert first.granularity == Granularity.MONTHLY
        assert first.label == "Sep"

        daily = [point for point in timeline if "2026-09-17" <= point.date_key <= "2026-10-17"]
        assert len(daily) == 31
        assert all(point.granularity == Granularity.DAILY for point in daily)

        future = [point for point in timeline if point.date_key > "2026-10-17"]
        assert [(point.date_key, point.granularity) for point in future] == [
            ("2026-10-18", Granularity.DAILY),
            ("2026-10-24", Granularity.DAILY),
            ("2026-10-31", Granularity.DAILY),
            ("2026-11-01", Granularity.MONTHLY),
            ("2026-11-17", Granularity.DAILY),
        ]
        assert len(timeline) == 37

    def test_previous_year_month_label_has_year(self) -> None:
        timeline = _timeline([product("p1", date(2025, 12, 3))])

        assert timeline[0].date_key == "2025-12-01"
        assert timeline[0].label == "Dec 2025"

    def test_daily_points_start_at_earliest_event_within_last_month(self) -> None:
        timeline = _timeline([views(date(2026, 10, 10), 5)])

        daily_past = [point.date_key for point in timeline if point.date_key <= "2026-10-17"]
        assert daily_past[0] == "2026-10-10"
        assert len(daily_past) == 8

    def test_long_historical_promotion_spans_month_buckets(self) -> None:
        timeline = _timeline([promotion("promo-1", date(2026, 6, 10), date(2026, 8, 20))])

        monthly = [point.date_key for point in timeline if point.granularity == Granularity.MONTHLY]
        assert monthly[:3] == ["2026-06-01", "2026-07-01", "2026-08-01"]

    def test_short_future_promotion_injects_every_day(self) -> None:
        timeline = _timeline([promotion("promo-1", date(2026, 10, 20), date(2026, 10, 23))])

        assert _keys(timeline) == [
            "2026-10-17",
            "2026-10-18",
            "2026-10-20",
            "2026-10-21",
            "2026-10-22",
            "2026-10-23",
        ]


class TestInvariants:
    EVENTS = [
        product("p1", date(2026, 3, 14)),
        product("p2", date(2026, 10, 2)),
        promotion("a", date(2026, 6, 10), date(2026, 8, 20)),
        promotion("b", date(2026, 10, 12), date(2026, 11, 9), deal_type="BUNDLE"),
        promotion("c", date(2026, 8, 1), None, deal_type="VOUCHER"),
        views(date(2026, 10, 15), 12),
    ]

    def test_sorted_unique_and_reindexed(self) -> None:
        timeline = _timeline(self.EVENTS)
        keys = _keys(timeline)

        assert keys == sorted(keys)
        assert len(keys) == len(set(keys))
        assert [point.index for point in timeline] == list(range(len(timeline)))

    def test_no_point_beyond_horizon(self) -> None:
        horizon = compute_horizon(self.EVENTS, NOW)
        timeline = build_timeline(horizon, self.EVENTS)

        assert horizon.horizon_end == date(2026, 11, 9)
        assert max(point.day for point in timeline) == horizon.horizon_end

    def test_every_past_event_is_covered(self) -> None:
        timeline = _timeline(self.EVENTS)
        keys = set(_keys(timeline))
        one_month_ago = date(2026, 9, 17)

        for event in self.EVENTS:
            for day in (event.start, event.end):
                if day is None or day > TODAY:
                    continue
                bucket = day.replace(day=1) if day < one_month_ago else day
                assert bucket.isoformat() in keys

    def test_first_insertion_wins_for_duplicate_keys(self) -> None:
        # Nov 1 is both a promotion date (daily) and a future month start
        events = [promotion("a", date(2026, 10, 28), date(2026, 11, 1))]
        timeline = _timeline(events)

        nov_first = [point for point in timeline if point.date_key == "2026-11-01"]
        assert len(nov_first) == 1
        assert nov_first[0].granularity == Granularity.DAILY
        assert nov_first[0].label == "Nov 1"


def test_interval_injection_dates() -> None:
    short = promotion("a", date(2026, 10, 1), date(2026, 10, 8))
    long = promotion("b", date(2026, 10, 1), date(2026, 10, 11))
    open_ended = promotion("c", date(2026, 10, 1), None)

    assert len(interval_injection_dates(short, TODAY)) == 8
    assert interval_injection_dates(long, TODAY) == [
        date(2026, 10, 1),
        date(2026, 10, 6),
        date(2026, 10, 11),
    ]
    assert interval_injection_dates(open_ended, TODAY)[-1] == TODAY
