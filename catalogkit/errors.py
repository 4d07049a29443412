"""Exception types shared by the catalog client and service."""

from __future__ import annotations

from typing import Mapping


class CatalogError(RuntimeError):
    """Base class for catalog failures."""


class ProductValidationError(CatalogError):
    """Raised when a product draft fails validation.

    ``errors`` maps field names (wire names, e.g. ``subCategory``) to a
    human-readable message. Nothing has been mutated when this is raised.
    """

    def __init__(self, errors: Mapping[str, str]):
        self.errors = dict(errors)
        summary = "; ".join(f"{field}: {msg}" for field, msg in self.errors.items())
        super().__init__(summary or "invalid product")


class RemoteSyncError(CatalogError):
    """Raised when a call to the remote catalog fails."""

    def __init__(self, message: str, *, status: int | None = None):
        super().__init__(message)
        self.status = status


class ResolutionError(RemoteSyncError):
    """The remote catalog could not map the id to a product."""


class NotFoundError(CatalogError, LookupError):
    """No product with the requested id exists locally."""

    def __init__(self, product_id):
        super().__init__(f"Product {product_id!r} not found")
        self.product_id = product_id


class DuplicateProductError(CatalogError):
    """A product with the same catalog id already exists."""

    def __init__(self, product_id: int):
        super().__init__("Product with this id already exists")
        self.product_id = product_id


class StoreError(CatalogError):
    """Raised when a persistence operation fails."""
