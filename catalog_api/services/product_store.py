"""Product catalog operations over the JSON snapshot file."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, NamedTuple, Optional

from catalogkit.errors import DuplicateProductError

from ..storage import SnapshotFile

STORAGE_KEY = "_id"


class Lookup(NamedTuple):
    """Which key to match and the parsed value to match it against."""

    key: str
    value: Any


def parse_identifier(raw: Any) -> Optional[Lookup]:
    """Interpret ``raw`` as a catalog id first, then as a storage id.

    Catalog ids are the sequential integers assigned by the admin console;
    storage ids are the hex UUIDs this store attaches to every record.
    """

    if raw is None or isinstance(raw, bool):
        return None
    text = str(raw).strip()
    if not text:
        return None
    try:
        return Lookup("id", int(text))
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        pass
    else:
        return Lookup("id", int(number)) if number.is_integer() else None
    try:
        return Lookup(STORAGE_KEY, uuid.UUID(hex=text).hex)
    except ValueError:
        return None


def _sort_key(record: Dict) -> tuple:
    value = record.get("id")
    if isinstance(value, int) and not isinstance(value, bool):
        return (0, value)
    return (1, 0)


@dataclass(slots=True)
class ProductCatalog:
    """High-level operations for the product snapshot."""

    path: str | Path
    backups: int = 2
    _file: SnapshotFile = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._file = SnapshotFile(self.path, backups=self.backups, label="product catalog")

    @staticmethod
    def _find(items: list[dict], lookup: Lookup) -> Optional[dict]:
        for item in items:
            if item.get(lookup.key) == lookup.value:
                return item
        return None

    # ------------------------------------------------------------------
    # Basic CRUD operations
    # ------------------------------------------------------------------
    def all(self) -> list[dict]:
        return sorted(self._file.load(), key=_sort_key)

    def get(self, lookup: Lookup) -> Optional[dict]:
        return self._find(self._file.load(), lookup)

    def create(self, payload: Dict) -> dict:
        record = dict(payload)
        record[STORAGE_KEY] = uuid.uuid4().hex

        def change(items: list[dict]) -> None:
            if self._find(items, Lookup("id", record["id"])) is not None:
                raise DuplicateProductError(record["id"])
            items.append(record)

        self._file.transact(change)
        return record

    def update(self, lookup: Lookup, updates: Dict) -> Optional[dict]:
        def change(items: list[dict]) -> Optional[dict]:
            item = self._find(items, lookup)
            if item is None:
                return None
            for key, value in updates.items():
                if value is None:
                    item.pop(key, None)
                else:
                    item[key] = value
            return dict(item)

        return self._file.transact(change)

    def delete(self, lookup: Lookup) -> bool:
        def change(items: list[dict]) -> bool:
            item = self._find(items, lookup)
            if item is None:
                return False
            items.remove(item)
            return True

        return self._file.transact(change)
