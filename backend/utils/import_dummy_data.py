import asyncio
import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from config import settings
from database import JsonDatabase, init_db
from schemas.product import ProductCreate

logger = logging.getLogger(__name__)

DUMMY_PRODUCTS_URL = "https://dummyjson.com/products"


def _to_product(p: dict) -> ProductCreate:
    return ProductCreate(
        name=p.get("title", ""),
        category=(p.get("category") or "").replace("-", " ").title(),
        price=float(p.get("price", 0)),
        stock=int(p.get("stock", 0)),
        rating=min(float(p.get("rating", 0)), 5.0),
        imageUrl=p.get("thumbnail") or "",
    )


async def import_dummy_products(
    db: JsonDatabase,
    limit: int = 50,
    client: Optional[httpx.AsyncClient] = None,
) -> int:
    """Import products from DummyJSON; returns the number of new products."""
    print("📦 Importing products from DummyJSON...")

    own_client = client is None
    client = client or httpx.AsyncClient(timeout=10.0)
    try:
        res = await client.get(DUMMY_PRODUCTS_URL, params={"limit": limit})
        res.raise_for_status()
        products = res.json().get("products", [])
    finally:
        if own_client:
            await client.aclose()

    existing = await db.read_all()
    if not existing.success:
        raise RuntimeError(f"Cannot read product database: {existing.error}")
    known_names = {p.name.lower() for p in existing.data}

    count = 0
    for p in products:
        try:
            product = _to_product(p)
        except (ValidationError, TypeError, ValueError) as e:
            logger.warning("Skipping DummyJSON product %s: %s", p.get("id"), e)
            continue

        if product.name.lower() in known_names:
            continue

        result = await db.create(product)
        if not result.success:
            raise RuntimeError(f"Failed to save product '{product.name}': {result.error}")
        known_names.add(product.name.lower())
        count += 1

    print(f"✅ Imported {count} new products.")
    return count


def main():
    logging.basicConfig(level=settings.LOG_LEVEL.upper())
    db = init_db(settings)
    asyncio.run(import_dummy_products(db))


if __name__ == "__main__":
    main()
