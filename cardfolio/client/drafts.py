"""Rows of list editors: unsaved rows are keyed locally, never by an id."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional


def new_key() -> str:
    return uuid.uuid4().hex


@dataclass
class Draft:
    key: str
    data: dict = field(default_factory=dict)

    @property
    def id(self) -> Optional[int]:
        return self.data.get("id") or None

    @property
    def is_new(self) -> bool:
        return self.id is None


def wrap(items: Iterable[dict]) -> list[Draft]:
    return [Draft(new_key(), dict(item)) for item in items]


def strip_id(data: dict) -> dict:
    return {k: v for k, v in data.items() if k != "id"}


def unwrap(drafts: Iterable[Draft]) -> list[dict]:
    """Payload for a whole-list save; new rows go without an id."""
    return [strip_id(d.data) if d.is_new else dict(d.data) for d in drafts]


def merge_by_position(drafts: list[Draft], items: list[Any]) -> list[Draft]:
    """Keep local keys when the server echoes the list back in the same order."""
    if len(drafts) != len(items):
        return wrap(items)
    for draft, item in zip(drafts, items):
        draft.data = dict(item)
    return drafts
