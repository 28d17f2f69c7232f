"""Catalog module.

This module serves the static list of historical game builds: sorting,
search, grouping by year and download actions.
"""

from .expansion import YearExpansion
from .loader import load_updates
from .router import router
from .service import CatalogService

__all__ = [
    "CatalogService",
    "YearExpansion",
    "load_updates",
    "router",
]
