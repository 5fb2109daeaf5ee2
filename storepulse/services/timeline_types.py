"""Value types passed between the analytics timeline components."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Optional


class EntityType(str, enum.Enum):
    PRODUCT = "product"
    PROMOTION_INTERVAL = "promotion"
    VIEW_SAMPLE = "view"


class Granularity(str, enum.Enum):
    DAILY = "daily"
    MONTHLY = "monthly"


class ChartType(str, enum.Enum):
    LINE = "line"
    BAR = "bar"


class MetricKind(str, enum.Enum):
    COUNT = "count"
    SUM = "sum"


class MonthlyMode(str, enum.Enum):
    """How a monthly bucket is reduced.

    SNAPSHOT reads the month-end value and falls back to the best day of the
    month when that is zero. TOTAL aggregates everything active in the month.
    """

    SNAPSHOT = "snapshot"
    TOTAL = "total"


@dataclass(frozen=True)
class DomainEvent:
    entity_type: EntityType
    id: str
    start: date
    end: Optional[date] = None
    attributes: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def is_interval(self) -> bool:
        return self.entity_type == EntityType.PROMOTION_INTERVAL

    def effective_end(self, today: date) -> date:
        """Last active day; open-ended promotions run until today."""
        if self.end is not None:
            return self.end
        if self.is_interval:
            return max(self.start, today)
        return self.start

    def is_active_on(self, day: date, today: date) -> bool:
        if not self.is_interval:
            return self.start == day
        return self.start <= day <= self.effective_end(today)

    @property
    def title(self) -> str:
        for name in ("title", "name"):
            value = self.attributes.get(name)
            if value:
                return str(value)
        return ""


@dataclass(frozen=True)
class Horizon:
    earliest: date
    horizon_end: date
    today: date


@dataclass(frozen=True)
class TimelinePoint:
    date_key: str
    label: str
    granularity: Granularity
    index: int = 0

    @property
    def day(self) -> date:
        return date.fromisoformat(self.date_key)


PointLabeler = Callable[[Optional[DomainEvent], float], str]


@dataclass(frozen=True)
class SeriesDefinition:
    key: str
    label: str
    color: str
    chart_type: ChartType
    match_predicate: Callable[[DomainEvent], bool]
    metric: MetricKind = MetricKind.COUNT
    value_attribute: Optional[str] = None
    monthly_mode: MonthlyMode = MonthlyMode.SNAPSHOT
    point_label: Optional[PointLabeler] = None


@dataclass(frozen=True)
class AggregatedPoint:
    value: float
    label: str
    date: date
    point_label: str
    drill_down: Optional[DomainEvent] = None


@dataclass(frozen=True)
class AggregatedSeries:
    key: str
    label: str
    color: str
    chart_type: ChartType
    points: list[AggregatedPoint]

    @property
    def is_empty(self) -> bool:
        return all(point.value == 0 for point in self.points)
