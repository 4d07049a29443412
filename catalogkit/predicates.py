"""Typed product predicates.

Each page builds one predicate value out of the small variants below instead
of keeping a table of ad hoc lambdas keyed by label. Predicates are frozen
dataclasses, so they hash, compare and print usefully, and they compose with
``&`` (all of), ``|`` (any of) and ``~`` (not).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .models import ProductFields


class _Composable:
    def __and__(self, other: "Predicate") -> "Predicate":
        return all_of(self, other)

    def __or__(self, other: "Predicate") -> "Predicate":
        return any_of(self, other)

    def __invert__(self) -> "Not":
        return Not(self)


@dataclass(frozen=True)
class MatchAll(_Composable):
    def matches(self, product: ProductFields) -> bool:
        return True


@dataclass(frozen=True)
class MatchNone(_Composable):
    def matches(self, product: ProductFields) -> bool:
        return False


MATCH_ALL = MatchAll()
MATCH_NONE = MatchNone()


@dataclass(frozen=True)
class CategoryIs(_Composable):
    """Exact, case-sensitive match on the stored category token."""

    category: str

    def matches(self, product: ProductFields) -> bool:
        return product.category == self.category


@dataclass(frozen=True)
class SubCategoryIn(_Composable):
    """Exact match of the sub-category against a set of accepted values."""

    values: frozenset[str]

    def __post_init__(self):
        object.__setattr__(self, "values", frozenset(self.values))

    def matches(self, product: ProductFields) -> bool:
        return product.sub_category is not None and product.sub_category in self.values


@dataclass(frozen=True)
class PriceAtMost(_Composable):
    """Inclusive price ceiling."""

    ceiling: float

    def matches(self, product: ProductFields) -> bool:
        return product.price <= self.ceiling


@dataclass(frozen=True)
class TextMatch(_Composable):
    """Case-insensitive substring match over name and/or description.

    A blank term matches everything.
    """

    term: str
    fields: tuple[str, ...] = ("name",)

    def __post_init__(self):
        unknown = set(self.fields) - {"name", "description"}
        if unknown or not self.fields:
            raise ValueError(f"unsupported text fields: {sorted(unknown) or 'none'}")

    @property
    def needle(self) -> str:
        return self.term.strip().lower()

    def matches(self, product: ProductFields) -> bool:
        needle = self.needle
        if not needle:
            return True
        return any(needle in getattr(product, field).lower() for field in self.fields)


@dataclass(frozen=True)
class IdIs(_Composable):
    product_id: int

    def matches(self, product) -> bool:
        return getattr(product, "id", None) == self.product_id


@dataclass(frozen=True)
class AllOf(_Composable):
    parts: tuple["Predicate", ...]

    def matches(self, product: ProductFields) -> bool:
        return all(part.matches(product) for part in self.parts)


@dataclass(frozen=True)
class AnyOf(_Composable):
    parts: tuple["Predicate", ...]

    def matches(self, product: ProductFields) -> bool:
        return any(part.matches(product) for part in self.parts)


@dataclass(frozen=True)
class Not(_Composable):
    inner: "Predicate"

    def matches(self, product: ProductFields) -> bool:
        return not self.inner.matches(product)


Predicate = Union[
    MatchAll, MatchNone, CategoryIs, SubCategoryIn, PriceAtMost, TextMatch, IdIs, AllOf, AnyOf, Not
]


def all_of(*parts: Predicate) -> Predicate:
    """AND the given predicates, flattening nested ``AllOf`` and dropping ``MATCH_ALL``."""

    flat: list[Predicate] = []
    for part in parts:
        if isinstance(part, AllOf):
            flat.extend(part.parts)
        elif isinstance(part, MatchNone):
            return MATCH_NONE
        elif not isinstance(part, MatchAll):
            flat.append(part)
    if not flat:
        return MATCH_ALL
    if len(flat) == 1:
        return flat[0]
    return AllOf(tuple(flat))


def any_of(*parts: Predicate) -> Predicate:
    flat: list[Predicate] = []
    for part in parts:
        if isinstance(part, AnyOf):
            flat.extend(part.parts)
        elif isinstance(part, MatchAll):
            return MATCH_ALL
        elif not isinstance(part, MatchNone):
            flat.append(part)
    if not flat:
        return MATCH_NONE
    if len(flat) == 1:
        return flat[0]
    return AnyOf(tuple(flat))
