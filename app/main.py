"""Main FastAPI application."""
from fastapi import FastAPI
from contextlib import asynccontextmanager

from app.core.config import settings
from app.core.logging import setup_logging
from app.api import health, catalog, orders


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    setup_logging()
    yield


app = FastAPI(
    title=settings.app_name,
    description="Structured orders from pasted reservation and message text",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(health.router, tags=["health"])
app.include_router(catalog.router, tags=["catalog"])
app.include_router(orders.router, tags=["orders"])


@app.get("/")
async def root():
    """Service banner."""
    return {
        "message": f"{settings.app_name} API",
        "version": "0.1.0",
    }


def run() -> None:
    """Serve the API with uvicorn."""
    import uvicorn

    uvicorn.run("app.main:app", host=settings.host, port=settings.port)
