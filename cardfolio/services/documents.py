"""
Per-user JSON documents (profile, about, portfolio, resume, navbar) and the
list helpers shared by the section services.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional, Type

from pydantic import ValidationError

from cardfolio.core.utils import next_id
from cardfolio.repositories.sql_repository import SQLRepository
from cardfolio.schemas import CamelModel


class SectionError(Exception):
    """Raised by section services; routers map it to `status_code`."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class SectionNotFound(SectionError):
    status_code = 404


class SectionForbidden(SectionError):
    status_code = 403


class DocumentStore:
    """Load and save one section document, filling defaults from `model`."""

    def __init__(self, section: str, model: Type[CamelModel], repository: Optional[SQLRepository] = None):
        self.section = section
        self.model = model
        self.repository = repository or SQLRepository()

    def load(self, user_id: str) -> dict:
        stored = self.repository.get_document(user_id, self.section)
        if stored is None:
            return self.repository.upsert_document(user_id, self.section, self.model().dump())
        try:
            return self.model.model_validate(stored).dump()
        except ValidationError as exc:
            raise SectionError(f"Stored {self.section} data is invalid: {exc.errors()[0]['msg']}") from exc

    def save(self, user_id: str, data: dict) -> dict:
        try:
            document = self.model.model_validate(data).dump()
        except ValidationError as exc:
            raise SectionError(f"Invalid {self.section} data: {exc.errors()[0]['msg']}") from exc
        return self.repository.upsert_document(user_id, self.section, document)

    def delete(self, user_id: str) -> bool:
        return self.repository.delete_document(user_id, self.section)


def dump_items(items: Iterable[Any]) -> list[dict]:
    return [item.dump() if isinstance(item, CamelModel) else dict(item) for item in items]


def assign_ids(items: Iterable[dict]) -> list[dict]:
    """Keep client ids once; missing or repeated ids get the next free id."""
    result = [dict(item) for item in items]
    seen = set()
    for item in result:
        if item.get("id") in seen:
            item["id"] = None
        if item.get("id"):
            seen.add(item["id"])
    taken = [item for item in result if item.get("id")]
    for item in result:
        if not item.get("id"):
            item["id"] = next_id(taken)
            taken.append(item)
    return result


def find_index(items: list[dict], item_id: int) -> int:
    for index, item in enumerate(items):
        if item.get("id") == item_id:
            return index
    return -1


def append_item(items: list[dict], item: dict) -> dict:
    created = dict(item)
    created["id"] = next_id(items)
    items.append(created)
    return created


def update_item(items: list[dict], item_id: int, changes: dict, *, label: str) -> dict:
    index = find_index(items, item_id)
    if index < 0:
        raise SectionNotFound(f"{label} not found")
    updated = {**items[index], **changes, "id": item_id}
    items[index] = updated
    return updated


def remove_item(items: list[dict], item_id: int, *, label: str) -> dict:
    index = find_index(items, item_id)
    if index < 0:
        raise SectionNotFound(f"{label} not found")
    return items.pop(index)
