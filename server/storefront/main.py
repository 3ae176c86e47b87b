"""Entrypoint for the FastAPI application."""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.api import health, product_import
from storefront.core.config import get_settings

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="[%(asctime)s] %(levelname)s %(name)s - %(message)s",
)

app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
    description="Storefront catalog bulk product import: dry-run validation and row-by-row commit",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=True,
)

# Register API routers
app.include_router(health.router)  # Health checks at root level
app.include_router(product_import.router, prefix=settings.api_prefix)
