"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backoffice.api import audit, auth, inventory, notifications, pricing, recipes, users
from backoffice.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    logger.info(f"Back office starting ({settings.environment})")
    yield


app = FastAPI(
    title="Restaurant Back Office API",
    description="Inventory, recipe costing and kitchen stock deduction",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for the local front end
if settings.is_development:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Register routers
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(inventory.router)
app.include_router(recipes.router)
app.include_router(pricing.router)
app.include_router(notifications.router)
app.include_router(audit.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "environment": settings.environment}
