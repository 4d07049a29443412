"""JSON snapshot file for the catalog service.

The product list lives in a single JSON array written atomically (temp file,
fsync, rename). The previous ``backups`` versions are kept as ``.bakN``
siblings and reads fall back to the newest readable one, so a torn write or a
hand-edited file never empties the catalog.
"""
from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, TypeVar

from catalogkit.errors import StoreError

logger = logging.getLogger(__name__)

Record = Dict[str, Any]
T = TypeVar("T")


class SnapshotFile:
    """List-of-records JSON file with atomic writes and backup recovery."""

    def __init__(self, path: Path | str, backups: int = 2, *, label: str = "records") -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.backups = max(0, backups)
        self.label = label
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # File helpers
    # ------------------------------------------------------------------
    def _backup_path(self, index: int) -> Path:
        return self.path.with_suffix(self.path.suffix + f".bak{index}")

    def _candidates(self) -> list[Path]:
        return [self.path] + [self._backup_path(i) for i in range(1, self.backups + 1)]

    def _read(self, path: Path) -> List[Record] | None:
        if not path.exists():
            return None
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as exc:  # pragma: no cover - surfaced to callers
            raise StoreError(str(exc)) from exc
        if not raw.strip():
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Unreadable %s snapshot %s", self.label, path.name)
            return None
        if not isinstance(data, list):
            logger.warning("Ignoring %s snapshot %s: not a list", self.label, path.name)
            return None
        return [item for item in data if isinstance(item, dict)]

    def _rotate(self) -> None:
        for idx in range(self.backups, 0, -1):
            src = self.path if idx == 1 else self._backup_path(idx - 1)
            if src.exists():
                try:
                    os.replace(src, self._backup_path(idx))
                except OSError as exc:
                    logger.warning("Could not rotate %s: %s", src.name, exc)

    def _write(self, records: List[Record]) -> None:
        payload = json.dumps(records, indent=2)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            with tmp_path.open("w", encoding="utf-8") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_path, self.path)
        except OSError as exc:  # pragma: no cover - bubbled up to callers
            raise StoreError(str(exc)) from exc
        finally:
            tmp_path.unlink(missing_ok=True)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def load(self) -> List[Record]:
        with self._lock:
            for candidate in self._candidates():
                data = self._read(candidate)
                if data is not None:
                    if candidate != self.path:
                        logger.warning("Recovered %s from backup %s", self.label, candidate.name)
                    return data
            return []

    def save(self, records: Iterable[Record]) -> List[Record]:
        snapshot = [dict(item) for item in records]
        with self._lock:
            self._rotate()
            self._write(snapshot)
        return snapshot

    def transact(self, change: Callable[[List[Record]], T]) -> T:
        """Load, let ``change`` edit the list in place, then persist it.

        Nothing is written when ``change`` raises.
        """

        with self._lock:
            records = self.load()
            outcome = change(records)
            self._rotate()
            self._write(records)
            return outcome
