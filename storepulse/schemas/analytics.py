"""Analytics schemas for the timeline dashboard."""

from datetime import date
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field


class ChartPoint(BaseModel):
    """A single point of a chart series."""

    value: Union[int, float] = Field(..., ge=0)
    label: str
    date: date
    point_label: str = Field("", alias="pointLabel")
    drill_down_id: Optional[str] = Field(None, alias="drillDownId")

    class Config:
        populate_by_name = True


class ChartSeries(BaseModel):
    """One metric track plotted across the shared timeline."""

    key: str
    label: str
    color: str
    chart_type: Literal["line", "bar"] = Field(..., alias="chartType")
    points: list[ChartPoint]

    class Config:
        populate_by_name = True


class SeriesCatalogEntry(BaseModel):
    """Series that can be requested through ``seriesKeys``."""

    key: str
    label: str
    color: str
    chart_type: Literal["line", "bar"] = Field(..., alias="chartType")

    class Config:
        populate_by_name = True


class InsightCard(BaseModel):
    """Smart insight card shown above the charts."""

    type: str = Field(..., description="Type: bestDay, popularDeal, engagement, stockAlert")
    title: str
    description: str
    icon: Optional[str] = None
    color: Optional[str] = None


class SummaryMetric(BaseModel):
    """A labelled count inside a summary card."""

    label: str
    value: int = Field(..., ge=0)


class MetricSummary(BaseModel):
    """Overview card for one metric: a deal type, products or views."""

    key: str
    title: str
    icon: str
    color: str
    metrics: list[SummaryMetric]
