"""Live search suggestions."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Sequence

from .debounce import Debouncer, TimerLoop
from .models import Product
from .predicates import TextMatch
from .store import ProductStore

logger = logging.getLogger(__name__)

SUGGESTION_LIMIT = 6
DEBOUNCE_DELAY = 0.3


@dataclass(frozen=True)
class TrendingLink:
    label: str
    path: str


# Shown in place of suggestions while the search box is empty.
TRENDING = (
    TrendingLink("Men Fashion", "/men"),
    TrendingLink("Women Collection", "/women"),
    TrendingLink("Shoes", "/shoes"),
    TrendingLink("Watches", "/watches"),
    TrendingLink("Kids Wear", "/kids"),
    TrendingLink("Home & Kitchen", "/home-kitchen"),
)


def suggest(products: Iterable[Product], query: str, limit: int = SUGGESTION_LIMIT) -> list[Product]:
    """Names containing ``query`` (case-insensitive), first matches first."""

    if limit <= 0:
        return []
    predicate = TextMatch(query or "", ("name",))
    if not predicate.needle:
        return []
    results: list[Product] = []
    for product in products:
        if predicate.matches(product):
            results.append(product)
            if len(results) >= limit:
                break
    return results


@dataclass(frozen=True)
class Suggestions:
    query: str
    products: list[Product]
    trending: Sequence[TrendingLink] = ()


class LiveSuggestions:
    """Search-box controller: debounces keystrokes, then suggests from the store.

    The store is read when the timer fires, never when the key is pressed,
    so results always reflect the latest snapshot.
    """

    def __init__(
        self,
        store: ProductStore,
        on_results: Callable[[Suggestions], None],
        *,
        delay: float = DEBOUNCE_DELAY,
        limit: int = SUGGESTION_LIMIT,
        loop: Optional[TimerLoop] = None,
    ):
        self._store = store
        self._on_results = on_results
        self.limit = limit
        self._debouncer: Debouncer[str] = Debouncer(delay, self._evaluate, loop=loop)

    def type(self, query: str) -> None:
        self._debouncer.push(query)

    def clear(self) -> None:
        """Empty the box: drop any pending lookup and show trending links."""

        self._debouncer.cancel()
        self._on_results(Suggestions(query="", products=[], trending=TRENDING))

    def close(self) -> None:
        self._debouncer.cancel()

    def _evaluate(self, query: str) -> None:
        if not (query or "").strip():
            self._on_results(Suggestions(query="", products=[], trending=TRENDING))
            return
        products = suggest(self._store.snapshot(), query, self.limit)
        logger.debug("%d suggestions for %r", len(products), query)
        self._on_results(Suggestions(query=query, products=products))
