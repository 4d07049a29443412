import pytest

from catalog_api import app as flask_app


@pytest.fixture(autouse=True)
def configure_test_env(tmp_path, monkeypatch):
    flask_app.app.config.update(TESTING=True)
    product_file = tmp_path / "products.json"
    monkeypatch.setattr(flask_app, "PRODUCT_FILE", product_file)
    monkeypatch.setattr(flask_app, "_PRODUCT_CATALOG", None)
    talisman = flask_app.app.extensions.get("talisman")
    if talisman:
        talisman.force_https = False
    if product_file.exists():
        product_file.unlink()
    yield product_file


@pytest.fixture
def client():
    return flask_app.app.test_client()


@pytest.fixture
def product_payload():
    def build(product_id=1, **overrides):
        data = {
            "id": product_id,
            "name": f"Item {product_id}",
            "price": 1200,
            "category": "watches",
            "subCategory": "analog",
            "description": "Steel case, leather strap",
            "image": f"https://img.example.com/{product_id}.jpg",
            "images": [],
            "sizes": [],
            "rating": 4,
            "reviews": 3,
        }
        data.update(overrides)
        return data

    return build
