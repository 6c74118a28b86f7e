"""Paginated product fetch: offset/limit over the insertion-ordered collection.

The only end-of-data signal is an empty page. There is no total count or
has-more flag in the response; callers track how many items they have
consumed and pass that count back as the next `cursor`.
"""

import re

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.models.product import Product

_LEADING_INT = re.compile(r"^\s*([+-]?)(\d+)")

# Store integers are signed 64-bit; larger offsets are still past the end.
MAX_INT = 2**63 - 1


def coerce_int(raw: str | int | None, default: int, minimum: int = 0) -> int:
    """Loosely parse a query-string integer, falling back to `default`.

    Takes the leading digit run the way a browser `parseInt` does
    ("12abc" -> 12, "3.7" -> 3). Unparseable input, or a value below
    `minimum`, yields `default` instead of an error. Values above MAX_INT
    are clamped to it.
    """
    if raw is None:
        return default
    if isinstance(raw, int):
        value = raw
    else:
        match = _LEADING_INT.match(raw)
        if not match:
            return default
        sign, digits = match.groups()
        digits = digits.lstrip("0") or "0"
        if len(digits) > 19:
            # Skip int() on arbitrarily long digit runs
            value = -MAX_INT if sign == "-" else MAX_INT
        else:
            value = int(sign + digits)
    if value < minimum:
        return default
    return min(value, MAX_INT)


def _name_filter(query: str):
    escaped = query.replace("/", "//").replace("%", "/%").replace("_", "/_")
    return Product.name.ilike(f"%{escaped}%", escape="/")


async def fetch_products(
    db: AsyncSession,
    cursor: int,
    page_size: int,
    query: str | None = None,
) -> list[Product]:
    """Return at most `page_size` products starting at offset `cursor`.

    An optional `query` narrows the collection to names containing it
    (case-insensitive) before the offset is applied. Past the end of the
    collection the result is simply empty.
    """
    stmt = select(Product)
    if query:
        stmt = stmt.where(_name_filter(query))
    stmt = stmt.order_by(Product.id).offset(cursor).limit(page_size)

    result = await db.execute(stmt)
    return list(result.scalars().all())


async def count_products(db: AsyncSession, query: str | None = None) -> int:
    stmt = select(func.count(Product.id))
    if query:
        stmt = stmt.where(_name_filter(query))
    return await db.scalar(stmt) or 0
