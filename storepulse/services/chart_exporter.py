"""Chart data exporter: final assembly of aggregated series for rendering."""

from __future__ import annotations

from typing import Optional, Sequence

from storepulse.schemas.analytics import ChartPoint, ChartSeries
from storepulse.services.timeline_types import AggregatedPoint, AggregatedSeries, SeriesDefinition


def assemble_series(definition: SeriesDefinition, points: list[AggregatedPoint]) -> AggregatedSeries:
    return AggregatedSeries(
        key=definition.key,
        label=definition.label,
        color=definition.color,
        chart_type=definition.chart_type,
        points=points,
    )


def export_chart_data(
    series: Sequence[AggregatedSeries], order: Optional[Sequence[str]] = None
) -> list[AggregatedSeries]:
    """Drop all-zero series and return the rest in caller order.

    ``order`` is a list of series keys; series not named there keep their
    input position after the named ones.
    """
    visible = [item for item in series if not item.is_empty]
    if not order:
        return visible

    rank = {key: position for position, key in enumerate(order)}
    fallback = len(rank)
    return sorted(visible, key=lambda item: rank.get(item.key, fallback))


def to_response(series: Sequence[AggregatedSeries]) -> list[ChartSeries]:
    """Convert aggregated series to the wire schema."""
    return [
        ChartSeries(
            key=item.key,
            label=item.label,
            color=item.color,
            chartType=item.chart_type.value,
            points=[
                ChartPoint(
                    value=point.value,
                    label=point.label,
                    date=point.date,
                    pointLabel=point.point_label,
                    drillDownId=point.drill_down.id if point.drill_down is not None else None,
                )
                for point in item.points
            ],
        )
        for item in series
    ]
