"""Named storefront views built on :mod:`catalogkit.filters`.

Every view is an independent application of :func:`filter_products` over
the same snapshot; none of them caches or reuses another view's list.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence

from .errors import NotFoundError
from .filters import filter_products, categories_present
from .models import Product, SortOrder
from .predicates import (
    MATCH_ALL,
    MATCH_NONE,
    CategoryIs,
    IdIs,
    PriceAtMost,
    Predicate,
    SubCategoryIn,
    TextMatch,
    all_of,
)
from .urlstate import FilterState, UrlDefaults

PLACEHOLDER_IMAGE = "/placeholder.jpg"
FEATURED_PER_CATEGORY = 4
FEATURED_LIMIT = 20
RECOMMENDATION_LIMIT = 6


@dataclass(frozen=True)
class CategoryPage:
    """A category landing page with labelled sub-views.

    ``filters`` maps the label shown to the shopper (and written to the
    ``type`` URL parameter) to the predicate narrowing the base category.
    ``default_price`` is the price slider's resting ceiling; pages without a
    slider leave it ``None``.
    """

    category: str
    filters: Mapping[str, Predicate]
    default_label: str = "All"
    default_price: Optional[float] = None

    @property
    def labels(self) -> tuple[str, ...]:
        return tuple(self.filters)

    @property
    def url_defaults(self) -> UrlDefaults:
        return UrlDefaults(
            category=self.default_label,
            price=self.default_price,
            sort=SortOrder.NONE,
            categories=self.labels,
        )

    def predicate(self, label: str | None = None, price: float | None = None) -> Predicate:
        label = label or self.default_label
        try:
            narrowing = self.filters[label]
        except KeyError:
            raise ValueError(f"unknown {self.category} filter {label!r}") from None
        ceiling = price if price is not None else self.default_price
        parts: list[Predicate] = [CategoryIs(self.category), narrowing]
        if ceiling is not None:
            parts.append(PriceAtMost(ceiling))
        return all_of(*parts)

    def view(self, products: Sequence[Product], state: FilterState | None = None) -> list[Product]:
        state = state or FilterState.from_defaults(self.url_defaults)
        return filter_products(products, self.predicate(state.category, state.price), state.sort)


def _subcategory_filters(mapping: Mapping[str, str]) -> dict[str, Predicate]:
    filters: dict[str, Predicate] = {"All": MATCH_ALL}
    for label, value in mapping.items():
        filters[label] = SubCategoryIn({value})
    return filters


MEN_PAGE = CategoryPage(
    category="men",
    filters=_subcategory_filters(
        {
            "T-Shirts": "tshirts",
            "Shirts": "shirts",
            "Jeans": "jeans",
            "Watches": "watches",
            "Shoes": "shoes",
        }
    ),
)

WOMEN_PAGE = CategoryPage(
    category="women",
    filters=_subcategory_filters(
        {
            "Kurti": "kurti",
            "Dress": "dress",
            "Top": "tops",
            "Ethnic": "ethnic",
            "Footwear": "footwear",
            "Jewellery": "jewellery",
        }
    ),
)

# Watch types are stored as the product's sub-category.
WATCHES_PAGE = CategoryPage(
    category="watches",
    filters=_subcategory_filters(
        {
            "Luxury": "luxury",
            "Smart Watches": "smart",
            "Analog": "analog",
            "Digital": "digital",
            "Sports": "sports",
        }
    ),
    default_price=20000,
)

# Shoe types are matched against the product name.
SHOES_PAGE = CategoryPage(
    category="shoes",
    filters={
        "All": MATCH_ALL,
        **{
            label: TextMatch(label.lower(), ("name",))
            for label in ("Running", "Casual", "Sneakers", "Formal", "Sports")
        },
    },
    default_price=5000,
)

PAGES = {
    "men": MEN_PAGE,
    "women": WOMEN_PAGE,
    "watches": WATCHES_PAGE,
    "shoes": SHOES_PAGE,
}


# ---------------------------------------------------------------------------
# Kids: two sections derived from one category
# ---------------------------------------------------------------------------
KIDS_FILTERS = ("all", "boys", "girls", "winter", "party")


@dataclass(frozen=True)
class KidsSections:
    boys: list[Product]
    girls: list[Product]


def _boys_predicate(selected: str) -> Predicate:
    if selected == "winter":
        return SubCategoryIn({"winter"})
    if selected in ("all", "boys"):
        return SubCategoryIn({"tshirts", "boys"})
    return MATCH_NONE


def _girls_predicate(selected: str) -> Predicate:
    if selected == "party":
        return SubCategoryIn({"party"})
    if selected in ("all", "girls"):
        return SubCategoryIn({"girls"})
    return MATCH_NONE


def kids_sections(products: Sequence[Product], selected: str = "all") -> KidsSections:
    if selected not in KIDS_FILTERS:
        raise ValueError(f"unknown kids filter {selected!r}")
    base = CategoryIs("kids")
    return KidsSections(
        boys=filter_products(products, base & _boys_predicate(selected)),
        girls=filter_products(products, base & _girls_predicate(selected)),
    )


# ---------------------------------------------------------------------------
# Home page and product detail
# ---------------------------------------------------------------------------
def featured_products(
    products: Sequence[Product],
    per_category: int = FEATURED_PER_CATEGORY,
    limit: int = FEATURED_LIMIT,
) -> list[Product]:
    """A few products from each category, in first-seen category order."""

    mixed: list[Product] = []
    for category in categories_present(products):
        mixed.extend(filter_products(products, CategoryIs(category))[:per_category])
    return mixed[:limit]


def find_product(products: Sequence[Product], raw_id: int | str) -> Product:
    """Look a product up by its id as it appears in a URL."""

    target = str(raw_id).strip()
    for product in products:
        if str(product.id) == target:
            return product
    raise NotFoundError(raw_id)


@dataclass(frozen=True)
class ProductDetail:
    product: Optional[Product]
    gallery: tuple[str, ...] = ()
    related: list[Product] = field(default_factory=list)
    also_bought: list[Product] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.product is not None


def _shuffled(items: list[Product], rng: random.Random, limit: int) -> list[Product]:
    return rng.sample(items, len(items))[:limit]


def product_detail(
    products: Sequence[Product],
    raw_id: int | str,
    *,
    rng: random.Random | None = None,
    limit: int = RECOMMENDATION_LIMIT,
) -> ProductDetail:
    """Detail page state; an unknown id yields the not-found placeholder."""

    try:
        product = find_product(products, raw_id)
    except NotFoundError:
        return ProductDetail(product=None)

    rng = rng or random.Random()
    others = ~IdIs(product.id) & CategoryIs(product.category)
    related = filter_products(
        products, others & SubCategoryIn({product.sub_category} if product.sub_category else ())
    )
    also_bought = filter_products(products, others)
    return ProductDetail(
        product=product,
        gallery=product.gallery or (PLACEHOLDER_IMAGE,),
        related=_shuffled(related, rng, limit),
        also_bought=_shuffled(also_bought, rng, limit),
    )
