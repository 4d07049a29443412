"""Session lifecycle: load the catalog, hand out the store and mutator, tear down."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from .config import ClientConfig
from .errors import RemoteSyncError
from .mutator import ConfirmDelete, OptimisticMutator, ResolutionHandler
from .remote import RemoteCatalog, RemoteCatalogClient
from .search import LiveSuggestions, Suggestions
from .store import ProductStore

logger = logging.getLogger(__name__)


class CatalogSession:
    """One browsing/admin session.

    Use as an async context manager::

        async with CatalogSession(remote, confirm_delete=ask) as session:
            session.mutator.create({...})

    Entering opens the store and loads ``GET /products``; when that fails the
    store keeps its previous (possibly empty) contents. Leaving waits for
    in-flight remote calls, then closes the store.
    """

    def __init__(
        self,
        remote: RemoteCatalog,
        *,
        confirm_delete: ConfirmDelete,
        on_resolution_error: Optional[ResolutionHandler] = None,
        debounce_delay: float = 0.3,
        suggestion_limit: int = 6,
        store: Optional[ProductStore] = None,
    ):
        self.remote = remote
        self.store = store or ProductStore()
        self.mutator = OptimisticMutator(
            self.store,
            remote,
            confirm_delete,
            on_resolution_error=on_resolution_error,
        )
        self.debounce_delay = debounce_delay
        self.suggestion_limit = suggestion_limit
        self._suggestion_boxes: list[LiveSuggestions] = []

    @classmethod
    def from_config(cls, config: ClientConfig, **kwargs) -> "CatalogSession":
        kwargs.setdefault("debounce_delay", config.debounce_delay)
        kwargs.setdefault("suggestion_limit", config.suggestion_limit)
        return cls(RemoteCatalogClient.from_config(config), **kwargs)

    async def refresh(self) -> bool:
        """Reload products from the remote catalog; ``False`` keeps the current set."""

        try:
            products = await self.remote.list_products()
        except RemoteSyncError as exc:
            logger.error("Failed to load products, keeping %d local: %s", len(self.store), exc)
            return False
        self.store.load(products)
        logger.info("Loaded %d products", len(self.store))
        return True

    def suggestions(self, on_results: Callable[[Suggestions], None]) -> LiveSuggestions:
        box = LiveSuggestions(
            self.store,
            on_results,
            delay=self.debounce_delay,
            limit=self.suggestion_limit,
        )
        self._suggestion_boxes.append(box)
        return box

    async def __aenter__(self) -> "CatalogSession":
        self.store.open()
        await self.refresh()
        return self

    async def __aexit__(self, *exc_info) -> None:
        for box in self._suggestion_boxes:
            box.close()
        self._suggestion_boxes.clear()
        await self.mutator.drain()
        self.store.close()
        aclose = getattr(self.remote, "aclose", None)
        if aclose is not None:
            await aclose()
