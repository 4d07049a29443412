"""Catalog query and optimistic sync core shared by the storefront and admin console."""

from .errors import (  # noqa: F401
    CatalogError,
    DuplicateProductError,
    NotFoundError,
    ProductValidationError,
    RemoteSyncError,
    ResolutionError,
    StoreError,
)
from .models import CATEGORIES, Product, ProductDraft, SortOrder
from .filters import filter_products, search_results, sort_products
from .search import suggest
from .debounce import Debouncer
from .urlstate import FilterState, URLStateSync, UrlDefaults, decode_state, encode_state
from .store import ProductStore
from .mutator import OptimisticMutator
from .session import CatalogSession

__all__ = [
    "CatalogError",
    "DuplicateProductError",
    "NotFoundError",
    "ProductValidationError",
    "RemoteSyncError",
    "ResolutionError",
    "StoreError",
    "CATEGORIES",
    "Product",
    "ProductDraft",
    "SortOrder",
    "filter_products",
    "search_results",
    "sort_products",
    "suggest",
    "Debouncer",
    "FilterState",
    "URLStateSync",
    "UrlDefaults",
    "decode_state",
    "encode_state",
    "ProductStore",
    "OptimisticMutator",
    "CatalogSession",
]
