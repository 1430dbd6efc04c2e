"""Record store interfaces."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

Fields = dict[str, Any]


@dataclass(frozen=True)
class Record:
    """A stored product: integer id plus arbitrary JSON fields.

    Attributes:
        id: Store-assigned identifier, unique and never reused.
        fields: Mapping of field name to JSON value.
    """

    id: int
    fields: Fields


class AbstractRecordStore(ABC):
    """Interface for record stores.

    Absence is reported by returning ``None``, never by raising.
    """

    @abstractmethod
    def create(self, fields: Fields) -> Record:
        """Store ``fields`` under a freshly assigned id."""
        raise NotImplementedError

    @abstractmethod
    def find(self, record_id: int) -> Fields | None:
        """Return the fields stored under ``record_id`` or None."""
        raise NotImplementedError

    @abstractmethod
    def update(self, record_id: int, new_fields: Fields) -> Record | None:
        """Shallow-merge ``new_fields`` into the record, or None if absent."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, record_id: int) -> bool:
        """Remove the record if present. Returns whether anything was removed."""
        raise NotImplementedError

    @abstractmethod
    def all(self) -> list[Record]:
        """Snapshot of all records in ascending id order."""
        raise NotImplementedError

    @abstractmethod
    def paginate(self, page: int, per_page: int) -> list[Record]:
        """Return the 1-indexed ``page`` of ``per_page`` records."""
        raise NotImplementedError

    @abstractmethod
    def count(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def clear(self) -> None:
        """Drop every record and restart id assignment from 1."""
        raise NotImplementedError
