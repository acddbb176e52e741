"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import ProductRepository, Repository, ShopRepository
from .unit_of_work import (
    CatalogRepositories,
    CatalogUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "CatalogRepositories",
    "CatalogUnitOfWork",
    "ProductRepository",
    "Repository",
    "RepositoryCollection",
    "ShopRepository",
    "UnitOfWork",
]
