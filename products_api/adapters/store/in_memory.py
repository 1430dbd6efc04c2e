"""In-memory record store.

Notes:
- Per-process only: nothing survives a restart and workers do not share data.
- Thread-safe: every public operation runs entirely under one lock.
"""

from __future__ import annotations

import threading
from itertools import islice

from products_api.adapters.store.base import AbstractRecordStore, Fields, Record


class InMemoryRecordStore(AbstractRecordStore):
    """Dictionary-backed store with monotonic integer ids.

    Ids are assigned in increasing order and never reused, so the insertion
    order of the underlying dict is also ascending id order. Updates write
    back to an existing key and keep its position.

    The lock is exclusive for reads too. Lock hold time is O(1) for
    create/find/delete and O(n) for update, all and paginate.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._records: dict[int, Fields] = {}
        self._next_id = 0

    def __repr__(self) -> str:  # pragma: no cover - representation only
        return f"InMemoryRecordStore(size={len(self._records)}, next_id={self._next_id})"

    def create(self, fields: Fields) -> Record:
        """Store a new record.

        Args:
            fields: Arbitrary JSON-compatible mapping. Ownership passes to the
                store; a shallow copy is kept.

        Returns:
            The created record with its assigned id.
        """
        with self._lock:
            self._next_id += 1
            record_id = self._next_id
            self._records[record_id] = dict(fields)
            return Record(id=record_id, fields=dict(self._records[record_id]))

    def find(self, record_id: int) -> Fields | None:
        with self._lock:
            fields = self._records.get(record_id)
            return dict(fields) if fields is not None else None

    def update(self, record_id: int, new_fields: Fields) -> Record | None:
        """Merge ``new_fields`` over the current fields of ``record_id``.

        The merge is shallow: a key present in ``new_fields`` replaces the
        stored value wholesale, including nested objects. Keys absent from
        ``new_fields`` keep their current value.

        Args:
            record_id: Id of the record to update.
            new_fields: Fields to overwrite.

        Returns:
            The record with merged fields, or None if the id is unknown.
        """
        with self._lock:
            current = self._records.get(record_id)
            if current is None:
                return None

            merged = {**current, **new_fields}
            self._records[record_id] = merged
            return Record(id=record_id, fields=dict(merged))

    def delete(self, record_id: int) -> bool:
        with self._lock:
            return self._records.pop(record_id, None) is not None

    def all(self) -> list[Record]:
        with self._lock:
            return [Record(id=rid, fields=dict(f)) for rid, f in self._records.items()]

    def paginate(self, page: int, per_page: int) -> list[Record]:
        """Return one page of records in creation order.

        Args:
            page: 1-indexed page number.
            per_page: Page size.

        Returns:
            Records at indices ``[(page-1)*per_page, page*per_page)``, clipped
            to the available records. Empty when the page starts past the end.

        Raises:
            ValueError: If page or per_page is not positive.
        """
        if page < 1:
            raise ValueError("page must be >= 1")
        if per_page < 1:
            raise ValueError("per_page must be >= 1")

        start = (page - 1) * per_page
        with self._lock:
            window = islice(self._records.items(), start, start + per_page)
            return [Record(id=rid, fields=dict(f)) for rid, f in window]

    def count(self) -> int:
        with self._lock:
            return len(self._records)

    def clear(self) -> None:
        with self._lock:
            self._records.clear()
            self._next_id = 0
