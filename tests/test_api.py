"""HTTP tests for the analytics routes with the repository replaced by a fake."""

import pytest
from fastapi.testclient import TestClient

from storepulse.api.deps import get_analytics_repository, get_now
from storepulse.main import app
from storepulse.utils.exceptions import NotFoundException

from conftest import NOW

STORE_ID = "6f1c2b7e-3d4a-4f5b-9c8d-0e1f2a3b4c5d"

PRODUCTS = [
    {"id": "p1", "name": "Oat Milk", "createdAt": "2026-10-02T09:00:00Z", "stock": 8},
]
PROMOTIONS = [
    {"id": "promo-1", "title": "Beans BOGO", "dealType": "BOGO",
     "startsAt": "2026-10-17T00:00:00Z", "endsAt": "2026-10-27T00:00:00Z"},
]
VIEWS = [{"date": "2026-10-15", "count": 12}]


class FakeRepository:
    def __init__(self, products=None, promotions=None, views=None):
        self.records = (products or [], promotions or [], views or [])
        self.calls = []

    async def fetch_store_records(self, store_id):
        self.calls.append(store_id)
        if store_id != STORE_ID:
            raise NotFoundException(f"Store {store_id} not found")
        return self.records


@pytest.fixture
def repository():
    return FakeRepository(PRODUCTS, PROMOTIONS, VIEWS)


@pytest.fixture
def client(repository):
    app.dependency_overrides[get_analytics_repository] = lambda: repository
    app.dependency_overrides[get_now] = lambda: NOW
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_timeline_requires_store_id(client) -> None:
    response = client.get("/analytics/timeline")

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "VALIDATION_ERROR"


def test_unknown_store_is_not_found(client) -> None:
    response = client.get("/analytics/timeline", params={"storeId": "00000000-0000-0000-0000-000000000000"})

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


def test_timeline_returns_series_with_data(client, repository) -> None:
    response = client.get("/analytics/timeline", params={"storeId": STORE_ID})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert [series["key"] for series in body["data"]] == ["promotion-BOGO", "products", "views"]
    assert repository.calls == [STORE_ID]

    bogo = body["data"][0]
    assert bogo["chartType"] == "line"
    today = next(point for point in bogo["points"] if point["date"] == "2026-10-17")
    assert today == {
        "value": 1,
        "label": "Today",
        "date": "2026-10-17",
        "pointLabel": "Beans BOGO",
        "drillDownId": "promo-1",
    }


def test_series_keys_filter_and_order(client) -> None:
    response = client.get(
        "/analytics/timeline",
        params={"storeId": STORE_ID, "seriesKeys": "views, products,unknown"},
    )

    assert response.status_code == 200
    assert [series["key"] for series in response.json()["data"]] == ["views", "products"]


def test_store_without_records_has_no_series() -> None:
    app.dependency_overrides[get_analytics_repository] = lambda: FakeRepository()
    app.dependency_overrides[get_now] = lambda: NOW
    try:
        response = TestClient(app).get("/analytics/timeline", params={"storeId": STORE_ID})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    assert response.json()["data"] == []


def test_series_catalog(client) -> None:
    response = client.get("/analytics/series")

    catalog = response.json()["data"]
    assert len(catalog) == 8
    assert catalog[0] == {
        "key": "promotion-PERCENTAGE_DISCOUNT",
        "label": "Percentage Discount",
        "color": "#FF6B6B",
        "chartType": "line",
    }
    assert catalog[-1]["key"] == "views"


def test_insights(client) -> None:
    response = client.get("/analytics/insights", params={"storeId": STORE_ID})

    assert response.status_code == 200
    types = [card["type"] for card in response.json()["data"]]
    assert types == ["bestDay", "popularDeal", "engagement", "stockAlert"]


def test_liveness(client) -> None:
    response = client.get("/health/live")

    assert response.json() == {"success": True, "data": {"alive": True}, "error": None}


def test_summary(client) -> None:
    response = client.get("/analytics/summary", params={"storeId": STORE_ID})

    assert response.status_code == 200
    cards = response.json()["data"]
    assert [card["key"] for card in cards] == ["promotion-BOGO", "products", "views"]
    assert cards[0]["metrics"][:2] == [{"label": "Total", "value": 1}, {"label": "Active", "value": 1}]


def test_summary_requires_store_id(client) -> None:
    response = client.get("/analytics/summary")

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"
