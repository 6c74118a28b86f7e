"""Dummy product seeding for local development.

Seeding is a no-op when the collection already holds products, so it is
safe to run on every startup.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from catalog.models.product import Product
from catalog.services.products import count_products

logger = logging.getLogger(__name__)


def build_products(count: int) -> list[Product]:
    return [
        Product(
            name=f"Product {i}",
            description=f"Description for product {i}",
            price=float(i * 10),
            category="Category A",
        )
        for i in range(1, count + 1)
    ]


async def seed_products(db: AsyncSession, count: int = 100) -> int:
    """Insert `count` dummy products if the collection is empty.

    Returns the number of products inserted (0 when already seeded).
    """
    existing = await count_products(db)
    if existing:
        logger.info(f"Seed skipped: {existing} products already present")
        return 0

    # Added one by one so autoincrement ids follow the product numbering.
    for product in build_products(count):
        db.add(product)
        await db.flush()

    logger.info(f"Database seeded with {count} products")
    return count
