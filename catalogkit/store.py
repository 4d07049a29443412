"""Session-owned product list."""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional

from .errors import CatalogError, NotFoundError
from .models import Product

logger = logging.getLogger(__name__)

Listener = Callable[[tuple[Product, ...]], None]


class ProductStore:
    """Authoritative in-memory product list for one session.

    Readers get immutable snapshots (tuples of frozen products) and may
    subscribe to change notifications. The ``apply_*`` methods are the write
    path and are meant to be called by :class:`~catalogkit.mutator.OptimisticMutator`
    only; bulk replacement happens through :meth:`load` at session start.
    """

    def __init__(self) -> None:
        self._products: tuple[Product, ...] = ()
        self._listeners: list[Listener] = []
        self._open = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    @property
    def is_open(self) -> bool:
        return self._open

    def open(self) -> None:
        self._open = True

    def close(self) -> None:
        self._open = False
        self._products = ()
        self._listeners.clear()

    def _require_open(self) -> None:
        if not self._open:
            raise CatalogError("product store is closed")

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def snapshot(self) -> tuple[Product, ...]:
        return self._products

    def __len__(self) -> int:
        return len(self._products)

    def __contains__(self, product_id: object) -> bool:
        return any(p.id == product_id for p in self._products)

    def get(self, product_id: int) -> Optional[Product]:
        for product in self._products:
            if product.id == product_id:
                return product
        return None

    def require(self, product_id: int) -> Product:
        product = self.get(product_id)
        if product is None:
            raise NotFoundError(product_id)
        return product

    def next_id(self) -> int:
        return max((p.id for p in self._products), default=0) + 1

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; the returned callable unsubscribes it."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self) -> None:
        snapshot = self._products
        for listener in list(self._listeners):
            listener(snapshot)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def load(self, products: Iterable[Product]) -> tuple[Product, ...]:
        """Replace the whole list, keeping the first product for any repeated id."""

        self._require_open()
        seen: set[int] = set()
        items: list[Product] = []
        for product in products:
            if product.id in seen:
                logger.warning("Dropping duplicate product id %s from bulk load", product.id)
                continue
            seen.add(product.id)
            items.append(product)
        self._products = tuple(items)
        self._publish()
        return self._products

    def apply_create(self, product: Product) -> None:
        self._require_open()
        if product.id in self:
            raise CatalogError(f"product id {product.id} already present")
        self._products = self._products + (product,)
        self._publish()

    def apply_update(self, product: Product) -> Product:
        """Swap in ``product`` for the entry with the same id; returns the old one."""

        self._require_open()
        previous = self.require(product.id)
        self._products = tuple(product if p.id == product.id else p for p in self._products)
        self._publish()
        return previous

    def apply_delete(self, product_id: int) -> Optional[Product]:
        self._require_open()
        removed = self.get(product_id)
        if removed is None:
            return None
        self._products = tuple(p for p in self._products if p.id != product_id)
        self._publish()
        return removed
