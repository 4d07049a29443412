"""Product schema and the admin form rules applied before any mutation."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Iterable, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from .errors import ProductValidationError

logger = logging.getLogger(__name__)

CATEGORIES = ("shoes", "watches", "men", "women", "kids", "kitchen")

# Wire names the remote update call is allowed to write. ``id`` is never part
# of this set.
UPDATABLE_FIELDS = (
    "name",
    "price",
    "category",
    "subCategory",
    "description",
    "image",
    "images",
    "sizes",
    "rating",
    "reviews",
)


class SortOrder(str, Enum):
    NONE = "none"
    LOW = "low"
    HIGH = "high"

    @classmethod
    def parse(cls, raw: Any, default: "SortOrder | None" = None) -> "SortOrder":
        """Return the order named by ``raw`` or ``default`` when unknown."""

        if isinstance(raw, cls):
            return raw
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return default if default is not None else cls.NONE


class ProductFields(BaseModel):
    """Field types and normalisation shared by drafts and stored products."""

    model_config = ConfigDict(
        populate_by_name=True, frozen=True, extra="ignore", allow_inf_nan=False
    )

    name: str = ""
    price: float = 0
    category: str = ""
    sub_category: Optional[str] = Field(default=None, alias="subCategory")
    description: str = ""
    image: str = ""
    images: tuple[str, ...] = ()
    sizes: tuple[str, ...] = ()
    rating: float = 0
    reviews: int = 0

    @field_validator("sub_category", mode="before")
    @classmethod
    def _blank_sub_category_is_absent(cls, value):
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    @field_validator("images", mode="before")
    @classmethod
    def _prune_blank_images(cls, value):
        if value is None:
            return ()
        if isinstance(value, str):
            value = [value]
        return tuple(str(img) for img in value if img is not None and str(img).strip())

    @field_validator("sizes", mode="before")
    @classmethod
    def _clean_sizes(cls, value):
        if value is None:
            return ()
        if isinstance(value, str):
            value = value.split(",")
        cleaned: list[str] = []
        for size in value:
            size = str(size).strip() if size is not None else ""
            if size and size not in cleaned:
                cleaned.append(size)
        return tuple(cleaned)

    @property
    def gallery(self) -> tuple[str, ...]:
        """Images to display, falling back to the primary image."""

        if self.images:
            return self.images
        return (self.image,) if self.image else ()

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ProductDraft(ProductFields):
    """Admin form input. Rejects, never clamps, out-of-range values."""

    model_config = ConfigDict(
        populate_by_name=True,
        frozen=True,
        extra="ignore",
        allow_inf_nan=False,
        validate_default=True,
    )

    @field_validator("name")
    @classmethod
    def _name_required(cls, value: str) -> str:
        if not value.strip():
            raise PydanticCustomError("required", "Product name is required")
        return value

    @field_validator("price")
    @classmethod
    def _price_positive(cls, value: float) -> float:
        if value <= 0:
            raise PydanticCustomError("price", "Price must be greater than 0")
        return value

    @field_validator("category")
    @classmethod
    def _known_category(cls, value: str) -> str:
        if not value:
            raise PydanticCustomError("required", "Category is required")
        if value not in CATEGORIES:
            raise PydanticCustomError(
                "category", "Unknown category {category}", {"category": value}
            )
        return value

    @field_validator("description")
    @classmethod
    def _description_required(cls, value: str) -> str:
        if not value.strip():
            raise PydanticCustomError("required", "Description is required")
        return value

    @field_validator("image")
    @classmethod
    def _image_required(cls, value: str) -> str:
        if not value.strip():
            raise PydanticCustomError("required", "Main image URL is required")
        return value

    @field_validator("rating")
    @classmethod
    def _rating_range(cls, value: float) -> float:
        if value < 0 or value > 5:
            raise PydanticCustomError("rating", "Rating must be between 0 and 5")
        return value

    @field_validator("reviews")
    @classmethod
    def _reviews_non_negative(cls, value: int) -> int:
        if value < 0:
            raise PydanticCustomError("reviews", "Reviews count cannot be negative")
        return value


class Product(ProductFields):
    id: int

    @classmethod
    def from_draft(cls, draft: ProductDraft, product_id: int) -> "Product":
        return cls(id=product_id, **draft.model_dump())

    def remote_update_body(self) -> dict[str, Any]:
        """Allow-listed update payload; ``id`` only travels as a lookup hint."""

        wire = self.model_dump(mode="json", by_alias=True)
        body = {key: wire[key] for key in UPDATABLE_FIELDS}
        body["id"] = self.id
        return body


def field_errors(err: ValidationError) -> dict[str, str]:
    """Collapse a pydantic error into ``{field: first message}``."""

    errors: dict[str, str] = {}
    for item in err.errors():
        loc = item.get("loc") or ("__root__",)
        errors.setdefault(str(loc[0]), item["msg"])
    return errors


def validate_draft(data: ProductFields | Mapping[str, Any]) -> ProductDraft:
    """Run the admin form rules, raising :class:`ProductValidationError`."""

    if isinstance(data, ProductFields):
        data = data.model_dump(by_alias=True)
    try:
        return ProductDraft.model_validate(dict(data))
    except ValidationError as err:
        raise ProductValidationError(field_errors(err)) from err


def parse_products(records: Iterable[Mapping[str, Any]]) -> list[Product]:
    """Build products from remote records, skipping unreadable entries."""

    products: list[Product] = []
    for record in records:
        try:
            products.append(Product.model_validate(record))
        except ValidationError as err:
            logger.warning("Skipping malformed product record %r: %s", record.get("id"), err)
    return products
