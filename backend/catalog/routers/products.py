"""Product search: the paginated fetch endpoint behind the scrolling page."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.config import settings
from catalog.database import get_db
from catalog.schemas.product import ErrorOut, ProductOut
from catalog.services.products import coerce_int, fetch_products

router = APIRouter()


@router.get(
    "/search",
    response_model=list[ProductOut],
    responses={500: {"model": ErrorOut}},
)
async def search_products(
    query: str | None = Query(None),
    from_: str | None = Query(None, alias="from"),
    limit: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """Return one page of products starting at offset `from`.

    `from` and `limit` are taken as raw strings and coerced, so malformed
    values fall back to the defaults (0 and 9) instead of a 422. An empty
    array means the offset is past the end of the collection.
    """
    cursor = coerce_int(from_, default=0, minimum=0)
    page_size = coerce_int(limit, default=settings.default_page_size, minimum=1)
    name_query = query if settings.search_filter_enabled else None

    products = await fetch_products(db, cursor, page_size, query=name_query)
    return [ProductOut.model_validate(product) for product in products]
