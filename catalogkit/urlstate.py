"""Round-tripping filter state through the address bar.

Parameters equal to their page default are left out so shared links stay
short. Writes always *replace* the current history entry; the sync object
recognises the echo of its own writes and never re-reads them as new state.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Callable, Optional
from urllib.parse import parse_qs, quote, urlencode

from .models import SortOrder

logger = logging.getLogger(__name__)

QUERY_PARAM = "q"
TYPE_PARAM = "type"
PRICE_PARAM = "price"
SORT_PARAM = "sort"


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def _parse_number(raw: str | None) -> float | int | None:
    if raw is None:
        return None
    raw = raw.strip()
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        value = float(raw)
    except ValueError:
        return None
    if value != value or value in (float("inf"), float("-inf")):
        return None
    return int(value) if value.is_integer() else value


@dataclass(frozen=True)
class UrlDefaults:
    """Resting values for one page; ``categories`` lists accepted ``type`` labels."""

    query: str = ""
    category: str = "All"
    price: Optional[float] = None
    sort: SortOrder = SortOrder.NONE
    categories: tuple[str, ...] = ()


@dataclass(frozen=True)
class FilterState:
    """What a listing page is showing.

    ``category`` is the page's sub-view label and travels as the ``type``
    parameter; ``price`` is the inclusive ceiling. ``None`` means the page's
    default ceiling, so on a page with a price slider it is never written to
    the URL and decodes back to that default.
    """

    query: str = ""
    category: str = "All"
    price: Optional[float] = None
    sort: SortOrder = SortOrder.NONE

    def __post_init__(self):
        object.__setattr__(self, "sort", SortOrder.parse(self.sort))

    @classmethod
    def from_defaults(cls, defaults: UrlDefaults) -> "FilterState":
        return cls(
            query=defaults.query,
            category=defaults.category,
            price=defaults.price,
            sort=defaults.sort,
        )

    def replace(self, **changes) -> "FilterState":
        return dataclasses.replace(self, **changes)


def encode_state(state: FilterState, defaults: UrlDefaults = UrlDefaults()) -> str:
    """Serialise ``state`` to a query string (no leading ``?``)."""

    params: list[tuple[str, str]] = []
    if state.query != defaults.query:
        params.append((QUERY_PARAM, state.query))
    if state.category != defaults.category:
        params.append((TYPE_PARAM, state.category))
    if state.price is not None and state.price != defaults.price:
        params.append((PRICE_PARAM, _format_number(state.price)))
    if state.sort != defaults.sort:
        params.append((SORT_PARAM, state.sort.value))
    return urlencode(params, quote_via=quote)


def decode_state(query_string: str, defaults: UrlDefaults = UrlDefaults()) -> FilterState:
    """Parse a query string, falling back to defaults for missing or bad values."""

    raw = parse_qs((query_string or "").lstrip("?"), keep_blank_values=False)

    def first(name: str) -> str | None:
        values = raw.get(name)
        return values[0] if values else None

    query = first(QUERY_PARAM)
    category = first(TYPE_PARAM)
    if category is None or (defaults.categories and category not in defaults.categories):
        category = defaults.category

    price = _parse_number(first(PRICE_PARAM))
    if price is None or price <= 0:
        price = defaults.price

    return FilterState(
        query=query if query is not None else defaults.query,
        category=category,
        price=price,
        sort=SortOrder.parse(first(SORT_PARAM), defaults.sort),
    )


def href(path: str, query_string: str) -> str:
    return f"{path}?{query_string}" if query_string else path


class URLStateSync:
    """Keeps one page's filter state and its URL in step.

    ``replace_url`` receives the canonical query string and must replace the
    current history entry rather than push a new one. ``on_state`` is called
    when the URL changes for a reason other than our own write (initial load
    excluded; :meth:`load` returns the seeded state directly).
    """

    def __init__(
        self,
        defaults: UrlDefaults,
        replace_url: Callable[[str], None],
        on_state: Callable[[FilterState], None] | None = None,
    ):
        self.defaults = defaults
        self._replace_url = replace_url
        self._on_state = on_state
        self._state = FilterState.from_defaults(defaults)
        self._last_written: str | None = None
        self._writing = False

    @property
    def state(self) -> FilterState:
        return self._state

    def canonical(self, query_string: str) -> str:
        return encode_state(decode_state(query_string, self.defaults), self.defaults)

    def load(self, query_string: str) -> FilterState:
        """Seed state from the URL the page was opened with."""

        self._state = decode_state(query_string, self.defaults)
        self._last_written = encode_state(self._state, self.defaults)
        return self._state

    def push(self, state: FilterState | None = None, **changes) -> str | None:
        """Adopt a new state and replace the URL; returns what was written."""

        state = state or self._state
        if changes:
            state = state.replace(**changes)
        self._state = state
        query_string = encode_state(state, self.defaults)
        if query_string == self._last_written:
            return None
        self._writing = True
        try:
            self._replace_url(query_string)
        finally:
            self._writing = False
        self._last_written = query_string
        return query_string

    def url_changed(self, query_string: str) -> bool:
        """Handle a URL change notification; ignores echoes of our own writes."""

        if self._writing:
            return False
        canonical = self.canonical(query_string)
        if canonical == self._last_written:
            return False
        logger.debug("URL changed externally to %r", canonical)
        self._state = decode_state(query_string, self.defaults)
        self._last_written = canonical
        if self._on_state is not None:
            self._on_state(self._state)
        return True
