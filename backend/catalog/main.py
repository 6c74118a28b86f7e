import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from catalog.config import settings
from catalog.database import async_session, create_tables
from catalog.middleware.exceptions import register_exception_handlers
from catalog.routers import health, products
from catalog.services.seed import seed_products

logger = logging.getLogger("catalog.startup")


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.create_tables_on_startup:
        await create_tables()
    if settings.seed_on_startup:
        async with async_session() as db:
            await seed_products(db, settings.seed_count)
            await db.commit()
    logger.info(f"Catalog ready (environment={settings.environment})")
    yield


app = FastAPI(
    title="Catalog",
    description="Paginated product listing for incremental (infinite-scroll) loading",
    version="0.1.0",
    lifespan=lifespan,
)

# ── Exception Handlers ───────────────────────────────────────
register_exception_handlers(app)

# ── Middleware ───────────────────────────────────────────────
# CORS is open to every origin; there are no credentials to protect.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins.split(","),
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Routers ──────────────────────────────────────────────────
app.include_router(health.router)
app.include_router(products.router, prefix="/products", tags=["products"])
