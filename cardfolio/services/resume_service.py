"""Resume: list sections (education through about categories), display settings and publishing."""

from __future__ import annotations

from typing import Iterable, Optional, Type

from cardfolio.repositories.sql_repository import SQLRepository
from cardfolio.schemas import (
    AboutCategory,
    Award,
    CamelModel,
    Education,
    Reference,
    ResumeDocument,
    SkillCategory,
    WorkExperience,
)
from cardfolio.services.documents import (
    DocumentStore,
    SectionError,
    SectionNotFound,
    append_item,
    assign_ids,
    dump_items,
    remove_item,
    update_item,
)

# url segment -> (document key, item model, label)
SECTIONS: dict[str, tuple[str, Type[CamelModel], str]] = {
    "education": ("education", Education, "Education entry"),
    "work-experiences": ("workExperiences", WorkExperience, "Work experience"),
    "awards": ("awards", Award, "Award"),
    "references": ("references", Reference, "Reference"),
    "skills": ("skills", SkillCategory, "Skill category"),
    "about-categories": ("aboutCategories", AboutCategory, "About category"),
}

# fields that may not be blank, with the message shown when they are
REQUIRED_FIELDS: dict[str, tuple[str, str]] = {
    "about-categories": ("title", "Category title is required"),
}


def _section(section: str) -> tuple[str, Type[CamelModel], str]:
    try:
        return SECTIONS[section]
    except KeyError:
        raise SectionNotFound(f"Unknown resume section: {section}") from None


def _check_required(section: str, fields: dict, *, partial: bool = False) -> None:
    rule = REQUIRED_FIELDS.get(section)
    if not rule:
        return
    name, message = rule
    if partial and name not in fields:
        return
    if not str(fields.get(name) or "").strip():
        raise SectionError(message)


class ResumeService:
    def __init__(self, repository: Optional[SQLRepository] = None):
        self.repository = repository or SQLRepository()
        self.store = DocumentStore("resume", ResumeDocument, self.repository)

    def get(self, user_id: str) -> dict:
        return self.store.load(user_id)

    def public(self, user_id: str) -> dict:
        document = self.repository.get_document(user_id, "resume") if self.repository.get_user(user_id) else None
        if not document or not document.get("isPublished"):
            raise SectionNotFound("Resume not found")
        return self.store.load(user_id)

    def list_entries(self, user_id: str, section: str) -> list[dict]:
        key, _, _ = _section(section)
        return self.store.load(user_id)[key]

    def add_entry(self, user_id: str, section: str, entry: CamelModel) -> dict:
        key, _, _ = _section(section)
        document = self.store.load(user_id)
        fields = entry.dump()
        fields.pop("id", None)
        _check_required(section, fields)
        created = append_item(document[key], fields)
        self.store.save(user_id, document)
        return created

    def update_entry(self, user_id: str, section: str, entry_id: int, entry: CamelModel) -> dict:
        key, _, label = _section(section)
        document = self.store.load(user_id)
        changes = entry.model_dump(by_alias=True, mode="json", exclude_unset=True)
        _check_required(section, changes, partial=True)
        updated = update_item(document[key], entry_id, changes, label=label)
        self.store.save(user_id, document)
        return updated

    def delete_entry(self, user_id: str, section: str, entry_id: int) -> dict:
        key, _, label = _section(section)
        document = self.store.load(user_id)
        removed = remove_item(document[key], entry_id, label=label)
        self.store.save(user_id, document)
        return removed

    def replace_entries(self, user_id: str, section: str, entries: Iterable[CamelModel]) -> list[dict]:
        key, _, _ = _section(section)
        items = dump_items(entries)
        for item in items:
            _check_required(section, item)
        document = self.store.load(user_id)
        document[key] = assign_ids(items)
        return self.store.save(user_id, document)[key]

    def set_published(self, user_id: str, is_published: bool) -> dict:
        document = self.store.load(user_id)
        document["isPublished"] = bool(is_published)
        return self.store.save(user_id, document)
