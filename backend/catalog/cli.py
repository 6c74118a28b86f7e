"""Management CLI for the catalog service.

Usage:
    python -m catalog.cli init-db        # Create the products table
    python -m catalog.cli seed [COUNT]   # Seed dummy products (only if empty)
    python -m catalog.cli serve          # Run the API on settings.host:settings.port
    python -m catalog.cli browse         # Scroll through the catalog with the incremental loader
"""

import asyncio
import logging
import sys

from catalog.client.api import ProductsClient
from catalog.client.loader import IncrementalLoader
from catalog.client.state import LoaderState, Phase
from catalog.config import settings
from catalog.database import async_session, create_tables, engine
from catalog.services.seed import seed_products


async def _seed(count: int) -> int:
    await create_tables()
    async with async_session() as db:
        inserted = await seed_products(db, count)
        await db.commit()
    await engine.dispose()
    return inserted


def init_db():
    asyncio.run(create_tables())
    print("  Tables created")


def seed(count: int):
    inserted = asyncio.run(_seed(count))
    if inserted:
        print(f"  Seeded {inserted} products")
    else:
        print("  Collection already seeded, nothing to do")


async def _browse(page_height: float) -> LoaderState:
    """Scroll through the whole catalog, one viewport-sized page at a time."""
    async with ProductsClient() as api:
        async with IncrementalLoader(api.fetch_page, on_change=_render) as loader:
            loader.mount()
            await loader.wait_settled()
            while loader.state.has_more:
                # Pretend every rendered item is one row and the viewport is
                # already at the bottom of the rendered list.
                document_height = len(loader.state.items)
                loader.on_scroll(document_height - page_height, page_height, document_height)
                await loader.wait_settled()
                await asyncio.sleep(loader.throttle_interval)
            return loader.state


def _render(state: LoaderState) -> None:
    if state.phase is Phase.LOADING:
        print("  Loading...")
    elif state.phase is Phase.EXHAUSTED:
        print(f"  No more items ({len(state.items)} loaded)")


def browse():
    state = asyncio.run(_browse(page_height=float(settings.default_page_size)))
    for item in state.items:
        print(f"  #{item.id} {item.name} - {item.price}")
    if state.failed:
        print(f"  Stopped early: {state.error}")


def serve():
    import uvicorn

    uvicorn.run("catalog.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    cmd = sys.argv[1] if len(sys.argv) > 1 else ""
    if cmd == "init-db":
        init_db()
    elif cmd == "seed":
        seed(int(sys.argv[2]) if len(sys.argv) > 2 else settings.seed_count)
    elif cmd == "serve":
        serve()
    elif cmd == "browse":
        browse()
    else:
        print("Usage: python -m catalog.cli [init-db|seed [COUNT]|serve|browse]")
