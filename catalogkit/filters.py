"""Pure filtering and sorting over product snapshots.

Nothing in here mutates its input or keeps state between calls: every
function returns a fresh list, so several views derived from the same
snapshot never share or disturb each other's results.
"""

from __future__ import annotations

from typing import Iterable, Sequence, TypeVar

from .models import ProductFields, SortOrder
from .predicates import MATCH_ALL, CategoryIs, Predicate, TextMatch, all_of

P = TypeVar("P", bound=ProductFields)

SEARCH_CATEGORIES = ("all", "men", "women", "shoes", "watches")


def sort_products(products: Iterable[P], sort: SortOrder | str = SortOrder.NONE) -> list[P]:
    """Stable price sort. ``none`` keeps the input order."""

    sort = SortOrder.parse(sort)
    items = list(products)
    if sort is SortOrder.LOW:
        return sorted(items, key=lambda p: p.price)
    if sort is SortOrder.HIGH:
        return sorted(items, key=lambda p: p.price, reverse=True)
    return items


def filter_products(
    products: Iterable[P],
    predicate: Predicate = MATCH_ALL,
    sort: SortOrder | str = SortOrder.NONE,
) -> list[P]:
    """Return the products satisfying ``predicate``, ordered by ``sort``."""

    return sort_products((p for p in products if predicate.matches(p)), sort)


def search_predicate(query: str, category: str = "all") -> Predicate | None:
    """Predicate for the search page, or ``None`` when there is no input.

    The search page shows nothing, rather than everything, until the shopper
    types a term or picks a category.
    """

    term = (query or "").strip()
    category = (category or "all").strip() or "all"
    if not term and category == "all":
        return None
    parts: list[Predicate] = []
    if term:
        parts.append(TextMatch(term, ("name",)))
    if category != "all":
        parts.append(CategoryIs(category))
    return all_of(*parts)


def search_results(
    products: Iterable[P],
    query: str,
    category: str = "all",
    sort: SortOrder | str = SortOrder.NONE,
) -> list[P]:
    predicate = search_predicate(query, category)
    if predicate is None:
        return []
    return filter_products(products, predicate, sort)


def admin_filter(products: Iterable[P], term: str = "", category: str = "") -> list[P]:
    """Admin list view: term over name or description, optional category."""

    parts: list[Predicate] = [TextMatch(term or "", ("name", "description"))]
    if category:
        parts.append(CategoryIs(category))
    return filter_products(products, all_of(*parts))


def categories_present(products: Sequence[ProductFields]) -> list[str]:
    """Distinct categories in first-seen order."""

    seen: dict[str, None] = {}
    for product in products:
        seen.setdefault(product.category, None)
    return list(seen)
