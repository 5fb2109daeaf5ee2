"""Tests for the event normalizer."""

from datetime import date, datetime, timezone

from storepulse.services.dates import add_months, to_calendar_date
from storepulse.services.normalizer import normalize_events, normalize_records, resolve_deal_type
from storepulse.services.timeline_types import EntityType

from conftest import NOW


class TestProducts:
    def test_product_becomes_point_event(self) -> None:
        events = normalize_events(
            [{"id": "p1", "name": "Mug", "createdAt": "2026-10-05T10:00:00Z"}], [], [], NOW
        )

        assert len(events) == 1
        event = events[0]
        assert event.entity_type == EntityType.PRODUCT
        assert event.id == "p1"
        assert event.start == date(2026, 10, 5)
        assert event.end is None
        assert event.title == "Mug"

    def test_unparsable_created_at_is_dropped(self) -> None:
        events = normalize_events(
            [
                {"id": "p1", "createdAt": "not-a-date"},
                {"id": "p2", "createdAt": None},
                {"id": "p3", "createdAt": "2026-10-01"},
            ],
            [],
            [],
            NOW,
        )

        assert [event.id for event in events] == ["p3"]

    def test_offset_timestamp_uses_utc_calendar_day(self) -> None:
        events = normalize_events(
            [{"id": "p1", "createdAt": "2026-10-05T23:30:00-05:00"}], [], [], NOW
        )

        assert events[0].start == date(2026, 10, 6)


class TestPromotions:
    def test_promotion_interval(self) -> None:
        events = normalize_events(
            [],
            [
                {
                    "id": "promo-1",
                    "title": "Beans BOGO",
                    "dealType": "BOGO",
                    "startsAt": datetime(2026, 10, 1, 8, tzinfo=timezone.utc),
                    "endsAt": "2026-10-20T00:00:00Z",
                }
            ],
            [],
            NOW,
        )

        event = events[0]
        assert event.entity_type == EntityType.PROMOTION_INTERVAL
        assert event.start == date(2026, 10, 1)
        assert event.end == date(2026, 10, 20)
        assert event.attributes["dealType"] == "BOGO"

    def test_missing_start_is_discarded(self) -> None:
        events = normalize_events(
            [], [{"id": "promo-1", "dealType": "BOGO", "endsAt": "2026-10-20"}], [], NOW
        )

        assert events == []

    def test_open_ended_promotion_keeps_null_end(self) -> None:
        events = normalize_events(
            [], [{"id": "promo-1", "dealType": "VOUCHER", "startsAt": "2026-10-01"}], [], NOW
        )

        assert events[0].end is None

    def test_bad_end_or_reversed_interval_is_dropped(self) -> None:
        events = normalize_events(
            [],
            [
                {"id": "bad-end", "dealType": "BOGO", "startsAt": "2026-10-01", "endsAt": "soon"},
                {"id": "reversed", "dealType": "BOGO", "startsAt": "2026-10-10", "endsAt": "2026-10-01"},
            ],
            [],
            NOW,
        )

        assert events == []

    def test_legacy_type_is_mapped_to_deal_type(self) -> None:
        events = normalize_events(
            [],
            [
                {"id": "a", "type": "percentage", "startsAt": "2026-10-01"},
                {"id": "b", "type": "PERCENTAGE", "startsAt": "2026-10-01"},
                {"id": "c", "type": "fixed", "startsAt": "2026-10-01"},
                {"id": "d", "startsAt": "2026-10-01"},
            ],
            [],
            NOW,
        )

        assert [(event.id, event.attributes["dealType"]) for event in events] == [
            ("a", "PERCENTAGE_DISCOUNT"),
            ("b", "PERCENTAGE_DISCOUNT"),
            ("c", "FIXED_DISCOUNT"),
        ]

    def test_explicit_deal_type_wins_over_legacy_type(self) -> None:
        assert resolve_deal_type({"dealType": "BUNDLE", "type": "percentage"}) == "BUNDLE"


class TestViewSamples:
    def test_date_count_pairs(self) -> None:
        events = normalize_events([], [], [("2026-10-15", 12), ["2026-10-16", "3"], "junk", None], NOW)

        assert [(event.start, event.attributes["count"]) for event in events] == [
            (date(2026, 10, 15), 12),
            (date(2026, 10, 16), 3),
        ]

    def test_view_breakdown_is_kept(self) -> None:
        events = normalize_events(
            [], [], [{"date": "2026-10-15", "count": 5, "storeViews": 2, "productViews": 3}], NOW
        )

        assert events[0].attributes == {"date": "2026-10-15", "count": 5, "storeViews": 2, "productViews": 3}

    def test_list_of_samples(self) -> None:
        events = normalize_events(
            [], [], [{"date": "2026-10-15", "count": 12}, {"date": "2026-10-16", "count": None}], NOW
        )

        assert [(event.start, event.end, event.attributes["count"]) for event in events] == [
            (date(2026, 10, 15), date(2026, 10, 15), 12),
            (date(2026, 10, 16), date(2026, 10, 16), 0),
        ]
        assert all(event.entity_type == EntityType.VIEW_SAMPLE for event in events)

    def test_mapping_of_samples(self) -> None:
        events = normalize_events([], [], {"2026-10-15": 7, "garbage": 3}, NOW)

        assert len(events) == 1
        assert events[0].attributes["count"] == 7


def test_records_that_are_not_mappings_are_skipped() -> None:
    events = normalize_events(
        [None, "p1", {"id": "p2", "createdAt": "2026-10-01"}],
        [None, 42, {"id": "promo-1", "dealType": "BOGO", "startsAt": "2026-10-02"}],
        None,
        NOW,
    )

    assert [event.id for event in events] == ["p2", "promo-1"]


def test_product_with_epoch_created_at() -> None:
    events = normalize_events([{"id": "p1", "createdAt": 1792022400000}], [], [], NOW)

    assert events[0].start == date(2026, 10, 15)


def test_output_keeps_stream_order() -> None:
    events = normalize_events(
        [{"id": "p1", "createdAt": "2026-10-10"}],
        [{"id": "promo-1", "dealType": "BOGO", "startsAt": "2026-09-01"}],
        [{"date": "2026-08-01", "count": 1}],
        NOW,
    )

    assert [event.entity_type for event in events] == [
        EntityType.PRODUCT,
        EntityType.PROMOTION_INTERVAL,
        EntityType.VIEW_SAMPLE,
    ]


def test_mixed_records_ignore_unknown_entity_types() -> None:
    events = normalize_records(
        [
            {"entityType": "product", "id": "p1", "createdAt": "2026-10-10"},
            {"entityType": "review", "id": "r1", "createdAt": "2026-10-10"},
            {"entityType": "PromotionInterval", "id": "x", "dealType": "BOGO", "startsAt": "2026-10-01"},
            {"entityType": "ViewSample", "date": "2026-10-11", "count": 4},
        ],
        NOW,
    )

    assert [event.id for event in events] == ["p1", "x", "views-2026-10-11"]


def test_to_calendar_date_rejects_other_types() -> None:
    assert to_calendar_date(object()) is None
    assert to_calendar_date(True) is None
    assert to_calendar_date("") is None


def test_to_calendar_date_accepts_epoch_milliseconds() -> None:
    assert to_calendar_date(1792022400000) == date(2026, 10, 15)
    assert to_calendar_date(1792022400500.0) == date(2026, 10, 15)
    assert to_calendar_date(float("inf")) is None


def test_to_calendar_date_accepts_any_fraction_length() -> None:
    assert to_calendar_date("2026-10-05T10:00:00.1Z") == date(2026, 10, 5)
    assert to_calendar_date("2026-10-05T23:59:59.1234567+00:00") == date(2026, 10, 5)


def test_add_months_clamps_day() -> None:
    assert add_months(date(2027, 1, 31), 1) == date(2027, 2, 28)
    assert add_months(date(2026, 3, 31), -1) == date(2026, 2, 28)
    assert add_months(date(2026, 12, 15), 1) == date(2027, 1, 15)
