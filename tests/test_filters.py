import pytest

from catalogkit.filters import (
    admin_filter,
    categories_present,
    filter_products,
    search_predicate,
    search_results,
    sort_products,
)
from catalogkit.models import SortOrder
from catalogkit.predicates import MATCH_ALL, CategoryIs, PriceAtMost, SubCategoryIn


def _ids(products):
    return [p.id for p in products]


def test_filter_keeps_only_matching_products(catalog):
    predicate = CategoryIs("men") & PriceAtMost(1000)
    result = filter_products(catalog, predicate)
    assert _ids(result) == [2, 3]
    assert all(predicate.matches(p) for p in result)


def test_filter_without_sort_preserves_input_order(catalog):
    reversed_input = list(reversed(catalog))
    assert filter_products(reversed_input, MATCH_ALL) == reversed_input


def test_filter_is_idempotent(catalog):
    predicate = CategoryIs("kids") & SubCategoryIn({"boys", "tshirts"})
    once = filter_products(catalog, predicate, SortOrder.LOW)
    assert filter_products(once, predicate, SortOrder.LOW) == once


def test_filter_returns_a_fresh_list(catalog):
    result = filter_products(catalog)
    assert result == catalog
    assert result is not catalog
    result.clear()
    assert len(catalog) == 15


def test_sort_low_and_high(catalog):
    low = sort_products(catalog, SortOrder.LOW)
    high = sort_products(catalog, "high")
    prices = [p.price for p in low]
    assert prices == sorted(prices)
    assert [p.price for p in high] == sorted(prices, reverse=True)


def test_sort_is_stable_for_equal_prices(make_product):
    items = [make_product(1, price=10), make_product(2, price=5), make_product(3, price=10)]
    assert _ids(sort_products(items, SortOrder.LOW)) == [2, 1, 3]
    assert _ids(sort_products(items, SortOrder.HIGH)) == [1, 3, 2]


def test_unknown_sort_falls_back_to_input_order(catalog):
    assert sort_products(catalog, "sideways") == catalog


def test_price_ceiling_is_inclusive(make_product):
    items = [make_product(1, price=5000), make_product(2, price=5000.01)]
    assert _ids(filter_products(items, PriceAtMost(5000))) == [1]


def test_search_with_no_input_shows_nothing(catalog):
    assert search_predicate("", "all") is None
    assert search_results(catalog, "   ") == []


def test_search_by_category_only(catalog):
    assert _ids(search_results(catalog, "", "watches")) == [9, 10]


def test_search_matches_name_case_insensitively(catalog):
    result = search_results(catalog, "DENIM", "all", SortOrder.HIGH)
    assert _ids(result) == [1, 11]


def test_search_combines_term_and_category(catalog):
    assert _ids(search_results(catalog, "denim", "men")) == [1]


def test_search_ignores_description(catalog):
    assert search_results(catalog, "sequinned") == []


def test_admin_filter_searches_name_and_description(catalog):
    assert _ids(admin_filter(catalog, "sequinned")) == [5]
    assert _ids(admin_filter(catalog, "tee", "kids")) == [15]
    assert admin_filter(catalog) == catalog


@pytest.mark.parametrize("term", ["", "  "])
def test_admin_filter_blank_term_matches_everything(catalog, term):
    assert len(admin_filter(catalog, term)) == len(catalog)


def test_categories_present_in_first_seen_order(catalog):
    assert categories_present(catalog) == ["men", "women", "shoes", "watches", "kids"]
