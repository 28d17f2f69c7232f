"""Catalog dependencies for FastAPI."""

from fastapi import Request

from .service import CatalogService


def get_catalog_service(request: Request) -> CatalogService:
    """Get the catalog created at application startup."""
    return request.app.state.catalog
