import asyncio

import pytest

from catalogkit.errors import RemoteSyncError
from catalogkit.models import Product
from catalogkit.store import ProductStore


def build_product(product_id, **overrides):
    data = {
        "id": product_id,
        "name": f"Product {product_id}",
        "price": 100.0 * product_id,
        "category": "men",
        "description": "A product",
        "image": f"https://img.example.com/{product_id}.jpg",
        "rating": 4,
        "reviews": 0,
    }
    data.update(overrides)
    return Product.model_validate(data)


@pytest.fixture
def make_product():
    return build_product


@pytest.fixture
def catalog(make_product):
    return [
        make_product(1, name="Classic Denim Jeans", price=1499, category="men", subCategory="jeans"),
        make_product(2, name="Linen Shirt", price=999, category="men", subCategory="shirts"),
        make_product(3, name="Graphic Tee", price=499, category="men", subCategory="tshirts"),
        make_product(4, name="Floral Kurti", price=799, category="women", subCategory="kurti"),
        make_product(5, name="Party Dress", price=2499, category="women", subCategory="dress",
                     description="Sequinned evening dress"),
        make_product(6, name="Trail Running Shoe", price=3499, category="shoes"),
        make_product(7, name="Leather Formal Shoe", price=4999, category="shoes"),
        make_product(8, name="Casual Sneakers", price=2999, category="shoes"),
        make_product(9, name="Chrono Steel", price=15999, category="watches", subCategory="luxury"),
        make_product(10, name="Fit Band Smart Watch", price=4999, category="watches", subCategory="smart"),
        make_product(11, name="Boys Denim Jacket", price=1299, category="kids", subCategory="boys"),
        make_product(12, name="Girls Tutu Skirt", price=899, category="kids", subCategory="girls"),
        make_product(13, name="Kids Puffer Coat", price=1899, category="kids", subCategory="winter"),
        make_product(14, name="Sparkle Party Frock", price=1599, category="kids", subCategory="party"),
        make_product(15, name="Cartoon Tee", price=399, category="kids", subCategory="tshirts"),
    ]


@pytest.fixture
def store(catalog):
    product_store = ProductStore()
    product_store.open()
    product_store.load(catalog)
    return product_store


class FakeTimer:
    def __init__(self, when, callback, args):
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeLoop:
    """Manual clock exposing ``call_later`` like an asyncio loop."""

    def __init__(self):
        self.now = 0
        self.timers = []

    def call_later(self, delay, callback, *args):
        timer = FakeTimer(self.now + delay, callback, args)
        self.timers.append(timer)
        return timer

    @property
    def active(self):
        return [t for t in self.timers if not t.cancelled]

    def advance_to(self, when):
        while True:
            due = sorted((t for t in self.active if t.when <= when), key=lambda t: t.when)
            if not due:
                break
            timer = due[0]
            self.timers.remove(timer)
            self.now = timer.when
            timer.callback(*timer.args)
        self.now = when


@pytest.fixture
def fake_loop():
    return FakeLoop()


class FakeRemote:
    """In-memory stand-in for the remote catalog that records every call."""

    def __init__(self, products=(), fail_with=None):
        self.products = list(products)
        self.fail_with = fail_with
        self.calls = []
        self.gate = None

    async def _maybe_fail(self):
        if self.gate is not None:
            await self.gate.wait()
        await asyncio.sleep(0)
        if self.fail_with is not None:
            raise self.fail_with

    async def list_products(self):
        self.calls.append(("list", None))
        await self._maybe_fail()
        return list(self.products)

    async def create_product(self, product):
        self.calls.append(("create", product.to_wire()))
        await self._maybe_fail()
        return {"product": product.to_wire()}

    async def update_product(self, product):
        self.calls.append(("update", product.remote_update_body()))
        await self._maybe_fail()
        return {"product": product.to_wire()}

    async def delete_product(self, product_id):
        self.calls.append(("delete", product_id))
        await self._maybe_fail()


@pytest.fixture
def remote_factory():
    def factory(products=(), fail_with=None):
        return FakeRemote(products, fail_with)

    return factory


@pytest.fixture
def failing_error():
    return RemoteSyncError("Network error saving product", status=503)
