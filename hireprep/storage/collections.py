"""Generic persisted collections over a string key-value backend.

Every mutation is write-then-reflect: the new value is encoded and written
to the backend first, and in-memory state is replaced only once the write
returned. A collection that fails to decode on load starts out empty.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Callable, Generic, TypeVar

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as SchemaValidationError

from hireprep.core.errors import LocalDecodeError

from .backends import KeyValueStore

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


def _encode(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


class KeyedCollection(Generic[RecordT]):
    """Ordered list of records with a string ``id``, newest first."""

    def __init__(self, backend: KeyValueStore, key: str, record_type: type[RecordT]) -> None:
        self._backend = backend
        self._key = key
        self._record_type = record_type
        self._adapter = TypeAdapter(list[record_type])
        self._items: list[RecordT] = self._load()

    @property
    def key(self) -> str:
        return self._key

    def _decode(self, raw: str) -> list[RecordT]:
        try:
            return self._adapter.validate_json(raw)
        except SchemaValidationError as exc:
            raise LocalDecodeError(f"Stored collection '{self._key}' is corrupted: {exc.error_count()} error(s)") from exc

    def _load(self) -> list[RecordT]:
        raw = self._backend.get(self._key)
        if raw is None:
            return []
        try:
            return self._decode(raw)
        except LocalDecodeError as exc:
            logger.error("Failed to parse %s: %s", self._key, exc)
            return []

    def _persist(self, items: list[RecordT]) -> None:
        payload = _encode([item.model_dump(mode="json", by_alias=True) for item in items])
        self._backend.set(self._key, payload)
        self._items = items

    def all(self) -> list[RecordT]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def get(self, record_id: str) -> RecordT | None:
        for item in self._items:
            if getattr(item, "id", None) == record_id:
                return item
        return None

    def add(self, record: RecordT) -> RecordT:
        self._persist([record, *self._items])
        return record

    def update(self, record_id: str, **changes: Any) -> RecordT | None:
        """Merge ``changes`` into the matching record; None values are ignored."""
        changes = {key: value for key, value in changes.items() if value is not None}
        return self._replace(record_id, lambda item: item.model_copy(update=changes))

    def _replace(self, record_id: str, transform: Callable[[RecordT], RecordT]) -> RecordT | None:
        updated: RecordT | None = None
        items: list[RecordT] = []
        for item in self._items:
            if getattr(item, "id", None) == record_id:
                updated = self._record_type.model_validate(transform(item).model_dump())
                items.append(updated)
            else:
                items.append(item)
        if updated is None:
            return None
        self._persist(items)
        return updated

    def delete(self, record_id: str) -> bool:
        items = [item for item in self._items if getattr(item, "id", None) != record_id]
        if len(items) == len(self._items):
            return False
        self._persist(items)
        return True

    def clear(self) -> None:
        self._backend.remove(self._key)
        self._items = []


class SingletonSlot(Generic[RecordT]):
    """A single optional record stored under one key."""

    def __init__(self, backend: KeyValueStore, key: str, record_type: type[RecordT]) -> None:
        self._backend = backend
        self._key = key
        self._record_type = record_type
        self._value: RecordT | None = self._load()

    def _decode(self, raw: str) -> RecordT:
        try:
            return self._record_type.model_validate_json(raw)
        except SchemaValidationError as exc:
            raise LocalDecodeError(f"Stored value '{self._key}' is corrupted: {exc.error_count()} error(s)") from exc

    def _load(self) -> RecordT | None:
        raw = self._backend.get(self._key)
        if raw is None:
            return None
        try:
            return self._decode(raw)
        except LocalDecodeError as exc:
            logger.error("Failed to parse %s: %s", self._key, exc)
            return None

    @property
    def value(self) -> RecordT | None:
        return self._value

    def set(self, value: RecordT) -> RecordT:
        self._backend.set(self._key, _encode(value.model_dump(mode="json", by_alias=True)))
        self._value = value
        return value

    def clear(self) -> None:
        self._backend.remove(self._key)
        self._value = None
