"""URL helpers for reaching the catalog API."""
from __future__ import annotations

from urllib.parse import quote


def normalise_base_url(raw: str) -> str:
    """Return ``raw`` stripped of whitespace and trailing slashes.

    A bare host such as ``127.0.0.1:7890`` gets an ``http://`` scheme.
    """

    base = (raw or "").strip().rstrip("/")
    if not base:
        raise ValueError("base URL is required")
    if "://" not in base:
        base = f"http://{base}"
    scheme = base.split("://", 1)[0].lower()
    if scheme not in {"http", "https"}:
        raise ValueError("scheme must be http or https")
    return base


def build_api_url(base: str, path: str = "/") -> str:
    """Combine a base URL with a path while avoiding double slashes."""

    base = (base or "").rstrip("/")
    if not path:
        return base
    suffix = path if path.startswith("/") else f"/{path}"
    return f"{base}{suffix}"


def product_path(product_id: int | str | None = None) -> str:
    if product_id is None:
        return "/products"
    return f"/products/{quote(str(product_id), safe='')}"
