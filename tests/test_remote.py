import asyncio
import json

import httpx
import pytest

from catalogkit.errors import RemoteSyncError, ResolutionError
from catalogkit.remote import RemoteCatalogClient


def _client(handler):
    transport = httpx.MockTransport(handler)
    return RemoteCatalogClient(
        "api.example.test", client=httpx.AsyncClient(transport=transport)
    )


def _record(product_id, **overrides):
    data = {
        "id": product_id,
        "name": f"Item {product_id}",
        "price": 100,
        "category": "men",
        "description": "desc",
        "image": "https://img.example.com/x.jpg",
    }
    data.update(overrides)
    return data


def test_list_products_parses_and_skips_malformed():
    def handler(request):
        assert request.method == "GET"
        assert str(request.url) == "http://api.example.test/products"
        return httpx.Response(200, json={"products": [_record(1), {"name": "no id"}, _record(2)]})

    products = asyncio.run(_client(handler).list_products())
    assert [p.id for p in products] == [1, 2]


def test_list_products_requires_product_list():
    def handler(request):
        return httpx.Response(200, json={"items": []})

    with pytest.raises(RemoteSyncError):
        asyncio.run(_client(handler).list_products())


def test_update_sends_put_with_allow_listed_body(make_product):
    seen = {}

    def handler(request):
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"product": _record(5)})

    asyncio.run(_client(handler).update_product(make_product(5, subCategory="jeans")))
    assert seen["method"] == "PUT"
    assert seen["path"] == "/products/5"
    assert seen["body"]["id"] == 5
    assert seen["body"]["subCategory"] == "jeans"


def test_delete_sends_id_in_body():
    seen = {}

    def handler(request):
        seen["method"] = request.method
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"success": True})

    asyncio.run(_client(handler).delete_product(9))
    assert seen == {"method": "DELETE", "body": {"id": 9}}


def test_not_found_maps_to_resolution_error():
    def handler(request):
        return httpx.Response(404, json={"error": "Product not found"})

    with pytest.raises(ResolutionError) as excinfo:
        asyncio.run(_client(handler).delete_product(9))
    assert excinfo.value.status == 404


def test_server_error_carries_message_and_status(make_product):
    def handler(request):
        return httpx.Response(500, json={"error": "Product with this id already exists"})

    with pytest.raises(RemoteSyncError) as excinfo:
        asyncio.run(_client(handler).create_product(make_product(1)))
    assert str(excinfo.value) == "Product with this id already exists"
    assert excinfo.value.status == 500


def test_transport_failure_is_wrapped():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(RemoteSyncError):
        asyncio.run(_client(handler).list_products())


def test_base_url_must_be_http():
    with pytest.raises(ValueError):
        RemoteCatalogClient("ftp://example.test")
