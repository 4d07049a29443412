"""Optimistic create/update/delete for the admin console.

Policy: the local store is the source of truth for the session. Each
operation validates, mutates the :class:`ProductStore` synchronously and
only then schedules the matching remote call as a background task. A remote
failure is logged and otherwise ignored; it is never retried and never
rolls the local change back (last write wins, eventual consistency).
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Mapping, Optional

from .errors import NotFoundError, RemoteSyncError, ResolutionError
from .models import Product, ProductFields, validate_draft
from .remote import RemoteCatalog
from .store import ProductStore

logger = logging.getLogger(__name__)

ConfirmDelete = Callable[[Product], bool]
ResolutionHandler = Callable[[ResolutionError, str, int], None]


class OptimisticMutator:
    """Single writer for a :class:`ProductStore`.

    ``confirm_delete`` is the user-facing confirmation prompt; :meth:`delete`
    does nothing unless it returns true. ``on_resolution_error`` is told when
    the server could not find the product behind an update or delete so the
    console can surface it.

    Mutations must be called from the event loop's thread; remote calls are
    scheduled on the running loop and are not awaited by the caller.
    """

    def __init__(
        self,
        store: ProductStore,
        remote: RemoteCatalog,
        confirm_delete: ConfirmDelete,
        *,
        on_resolution_error: Optional[ResolutionHandler] = None,
    ):
        self._store = store
        self._remote = remote
        self._confirm_delete = confirm_delete
        self._on_resolution_error = on_resolution_error
        self._pending: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        """Number of remote calls still in flight."""
        return len(self._pending)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    def create(self, draft: ProductFields | Mapping[str, Any]) -> Product:
        loop = asyncio.get_running_loop()
        clean = validate_draft(draft)
        product = Product.from_draft(clean, self._store.next_id())
        self._store.apply_create(product)
        logger.info("Created product %s locally", product.id)
        self._dispatch(loop, "create", product.id, lambda: self._remote.create_product(product))
        return product

    def update(self, product: Product | Mapping[str, Any]) -> Product:
        loop = asyncio.get_running_loop()
        product_id = product.id if isinstance(product, Product) else product.get("id")
        if product_id is None:
            raise NotFoundError(product_id)
        clean = validate_draft(product)
        current = self._store.require(int(product_id))
        updated = Product.from_draft(clean, current.id)
        self._store.apply_update(updated)
        logger.info("Updated product %s locally", updated.id)
        self._dispatch(loop, "update", updated.id, lambda: self._remote.update_product(updated))
        return updated

    def delete(self, product_id: int) -> bool:
        """Remove ``product_id`` after confirmation. Returns whether it was removed."""

        loop = asyncio.get_running_loop()
        product = self._store.get(product_id)
        if product is None:
            logger.warning("Delete requested for unknown product %s", product_id)
            return False
        if not self._confirm_delete(product):
            logger.debug("Delete of product %s declined", product_id)
            return False
        self._store.apply_delete(product_id)
        logger.info("Deleted product %s locally", product_id)
        self._dispatch(loop, "delete", product_id, lambda: self._remote.delete_product(product_id))
        return True

    # ------------------------------------------------------------------
    # Remote sync
    # ------------------------------------------------------------------
    def _dispatch(
        self,
        loop: asyncio.AbstractEventLoop,
        action: str,
        product_id: int,
        call: Callable[[], Awaitable[Any]],
    ) -> None:
        task = loop.create_task(self._sync(action, product_id, call))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _sync(self, action: str, product_id: int, call: Callable[[], Awaitable[Any]]) -> None:
        try:
            await call()
        except ResolutionError as exc:
            logger.warning("Remote %s: product %s not found (%s)", action, product_id, exc)
            self._report_resolution(exc, action, product_id)
        except RemoteSyncError as exc:
            logger.error("Failed to %s product %s remotely: %s", action, product_id, exc)
        except Exception:
            logger.exception("Failed to %s product %s remotely", action, product_id)
        else:
            logger.debug("Remote %s of product %s confirmed", action, product_id)

    def _report_resolution(self, exc: ResolutionError, action: str, product_id: int) -> None:
        if self._on_resolution_error is None:
            return
        try:
            self._on_resolution_error(exc, action, product_id)
        except Exception:
            logger.exception("Resolution handler failed for %s of product %s", action, product_id)

    async def drain(self) -> None:
        """Wait for in-flight remote calls; used at session teardown and in tests."""

        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
