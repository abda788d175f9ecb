"""Tests for the DummyJSON importer, with the HTTP API mocked out."""

import httpx
import pytest

from utils.import_dummy_data import DUMMY_PRODUCTS_URL, import_dummy_products

DUMMY_PAYLOAD = {
    "products": [
        {
            "id": 1,
            "title": "Essence Mascara Lash Princess",
            "category": "beauty",
            "price": 9.99,
            "stock": 99,
            "rating": 4.94,
            "thumbnail": "https://cdn.dummyjson.com/products/1/thumbnail.png",
        },
        {
            "id": 2,
            "title": "Annibale Colombo Sofa",
            "category": "home-decoration",
            "price": 2499.99,
            "stock": 7,
            "rating": 3.08,
        },
        # Too short a name, rejected by validation
        {"id": 3, "title": "X", "category": "misc", "price": 1, "stock": 1, "rating": 1},
        # Same name as an existing product
        {"id": 4, "title": "mouse", "category": "misc", "price": 1, "stock": 1, "rating": 1},
    ]
}


def _mock_client(requests):
    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=DUMMY_PAYLOAD)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_import_creates_valid_new_products(db, make_product):
    await db.create(make_product(name="Mouse"))
    requests = []

    async with _mock_client(requests) as client:
        count = await import_dummy_products(db, limit=4, client=client)

    assert count == 2
    assert str(requests[0].url).startswith(DUMMY_PRODUCTS_URL)
    assert requests[0].url.params["limit"] == "4"

    products = (await db.read_all()).data
    assert [p.name for p in products] == [
        "Mouse",
        "Essence Mascara Lash Princess",
        "Annibale Colombo Sofa",
    ]
    assert products[1].image_url == "https://cdn.dummyjson.com/products/1/thumbnail.png"
    assert products[2].category == "Home Decoration"
    assert products[2].image_url is None


@pytest.mark.asyncio
async def test_import_is_idempotent(db, make_product):
    await db.create(make_product(name="Mouse"))
    async with _mock_client([]) as client:
        first = await import_dummy_products(db, client=client)
        second = await import_dummy_products(db, client=client)

    assert first == 2
    assert second == 0


@pytest.mark.asyncio
async def test_import_raises_on_http_error(db):
    def handler(request):
        return httpx.Response(503)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(httpx.HTTPStatusError):
            await import_dummy_products(db, client=client)
