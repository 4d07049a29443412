"""Flask JSON service backing the storefront catalog.

- Products are persisted to a local JSON snapshot with rotating backups.
- Every record carries the sequential catalog ``id`` assigned by the admin
  console and a storage ``_id`` assigned here; update and delete accept
  either, trying the catalog id first.
- There is no authentication: the admin console talks to this service
  directly.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from flask import Flask, jsonify, request
from flask_cors import CORS
from flask_talisman import Talisman
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from catalogkit.config import load_service_config
from catalogkit.errors import DuplicateProductError, StoreError
from catalogkit.logging import setup_logging
from catalogkit.models import Product

from .services.product_store import Lookup, ProductCatalog, parse_identifier

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------
CONFIG = load_service_config(BASE_DIR)
PRODUCT_FILE = CONFIG.product_file
PRODUCT_BACKUPS = CONFIG.product_backups

REQUIRED_FIELDS = ("id", "name", "price", "category", "description", "image")

# ---------------------------------------------------------------------------
# Flask app
# ---------------------------------------------------------------------------
app = Flask(__name__)

CORS(app, resources={r"/*": {"origins": list(CONFIG.allowed_origins)}})

# Security headers
Talisman(app, content_security_policy=None, force_https=CONFIG.force_tls)


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------
class ProductUpdateModel(BaseModel):
    """Allow-listed partial update; anything else in the body is ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", allow_inf_nan=False)

    name: Optional[str] = Field(None, min_length=1)
    price: Optional[float] = Field(None, gt=0)
    category: Optional[str] = Field(None, min_length=1)
    sub_category: Optional[str] = Field(None, alias="subCategory")
    description: Optional[str] = Field(None, min_length=1)
    image: Optional[str] = Field(None, min_length=1)
    images: Optional[list[str]] = None
    sizes: Optional[list[str]] = None
    rating: Optional[float] = Field(None, ge=0, le=5)
    reviews: Optional[int] = Field(None, ge=0)

    @field_validator("sub_category", mode="before")
    @classmethod
    def blank_sub_category(cls, value):
        if value is None:
            return None
        return str(value).strip() or None

    @field_validator("images", mode="before")
    @classmethod
    def prune_images(cls, value):
        if value is None:
            return None
        return [str(img) for img in value if img is not None and str(img).strip()]

    @field_validator("sizes", mode="before")
    @classmethod
    def trim_sizes(cls, value):
        if value is None:
            return None
        return [str(size).strip() for size in value if size is not None and str(size).strip()]

    def changes(self) -> dict:
        """Fields the caller sent, by wire name. A null ``subCategory`` clears it."""
        data = self.model_dump(by_alias=True, exclude_unset=True)
        return {key: value for key, value in data.items() if value is not None or key == "subCategory"}


# ---------------------------------------------------------------------------
# Catalog access
# ---------------------------------------------------------------------------
_PRODUCT_CATALOG: ProductCatalog | None = None


def product_catalog() -> ProductCatalog:
    global _PRODUCT_CATALOG
    if _PRODUCT_CATALOG is None or Path(_PRODUCT_CATALOG.path) != Path(PRODUCT_FILE):
        _PRODUCT_CATALOG = ProductCatalog(PRODUCT_FILE, backups=PRODUCT_BACKUPS)
    return _PRODUCT_CATALOG


def missing_required(body: dict) -> str | None:
    for key in REQUIRED_FIELDS:
        value = body.get(key)
        if value is None or (isinstance(value, str) and not value.strip()):
            return key
    return None


def resolve_target(product_id: str, body: dict | None) -> Lookup | None:
    """Resolve the path id, falling back to ``id``/``_id`` in the body."""

    lookup = parse_identifier(product_id)
    if lookup is not None or not body:
        return lookup
    if body.get("id") is not None:
        return parse_identifier(body["id"])
    if isinstance(body.get("_id"), str):
        return parse_identifier(body["_id"])
    return None


@app.errorhandler(StoreError)
def handle_store_error(exc: StoreError):
    logger.error("Product store failure: %s", exc)
    return jsonify({"error": str(exc)}), 500


# ---------------------------------------------------------------------------
# Routes: products
# ---------------------------------------------------------------------------
@app.route("/products", methods=["GET"])
def get_products():
    return jsonify({"products": product_catalog().all()})


@app.route("/products/<product_id>", methods=["GET"])
def get_product(product_id):
    lookup = parse_identifier(product_id)
    item = product_catalog().get(lookup) if lookup else None
    if not item:
        return jsonify({"error": "Product not found"}), 404
    return jsonify({"product": item})


@app.route("/products", methods=["POST"])
def create_product():
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return jsonify({"error": "JSON object body required"}), 400
    missing = missing_required(body)
    if missing:
        return jsonify({"error": f"{missing} is required"}), 400
    try:
        product = Product.model_validate(body)
    except ValidationError as err:
        return jsonify({"error": err.errors(include_url=False, include_context=False)}), 400
    try:
        record = product_catalog().create(product.to_wire())
    except DuplicateProductError as exc:
        logger.warning("Rejected duplicate product id %s", exc.product_id)
        return jsonify({"error": str(exc)}), 500
    logger.info("Created product %s", record["id"])
    return jsonify({"product": record}), 201


@app.route("/products/<product_id>", methods=["PUT"])
def update_product(product_id):
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        body = {}
    lookup = resolve_target(product_id, body)
    if lookup is None:
        return jsonify({"error": "Invalid product id"}), 400
    try:
        updates = ProductUpdateModel.model_validate(body).changes()
    except ValidationError as err:
        return jsonify({"error": err.errors(include_url=False, include_context=False)}), 400
    updated = product_catalog().update(lookup, updates)
    if not updated:
        return jsonify({"error": "Product not found"}), 404
    logger.info("Updated product %s", updated.get("id"))
    return jsonify({"product": updated})


@app.route("/products/<product_id>", methods=["DELETE"])
def delete_product(product_id):
    body = request.get_json(silent=True)
    lookup = resolve_target(product_id, body if isinstance(body, dict) else None)
    if lookup is None:
        return jsonify({"error": "Invalid product id"}), 400
    if not product_catalog().delete(lookup):
        return jsonify({"error": "Product not found"}), 404
    logger.info("Deleted product %s=%s", lookup.key, lookup.value)
    return jsonify({"success": True})


# ---------------------------------------------------------------------------
# Security headers
# ---------------------------------------------------------------------------
@app.after_request
def secure_headers(resp):
    resp.headers["X-Content-Type-Options"] = "nosniff"
    resp.headers["X-Frame-Options"] = "DENY"
    return resp


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    setup_logging(CONFIG.log_level)
    app.run(host=CONFIG.host, port=CONFIG.port)
