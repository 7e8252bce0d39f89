"""About page content: personal info plus four replaceable lists."""

from __future__ import annotations

from typing import Iterable, Optional

from cardfolio.repositories.sql_repository import SQLRepository
from cardfolio.schemas import AboutDocument, AboutUpdate, CamelModel, PersonalInfo
from cardfolio.services.documents import DocumentStore, SectionError, assign_ids, dump_items

LIST_SECTIONS = ("services", "testimonials", "pricing", "brands")


class AboutService:
    def __init__(self, repository: Optional[SQLRepository] = None):
        self.store = DocumentStore("about", AboutDocument, repository)

    def get(self, user_id: str) -> dict:
        return self.store.load(user_id)

    def _prepare(self, section: str, items: Iterable[CamelModel]) -> list[dict]:
        prepared = assign_ids(dump_items(items))
        if section == "pricing":
            for plan in prepared:
                plan["features"] = assign_ids(plan.get("features") or [])
        return prepared

    def update(self, user_id: str, payload: AboutUpdate) -> dict:
        document = self.store.load(user_id)
        if payload.personal is not None:
            document["personal"] = payload.personal.dump()
        for section in LIST_SECTIONS:
            items = getattr(payload, section)
            if items is not None:
                document[section] = self._prepare(section, items)
        return self.store.save(user_id, document)

    def update_personal(self, user_id: str, personal: PersonalInfo) -> dict:
        document = self.store.load(user_id)
        document["personal"] = personal.dump()
        return self.store.save(user_id, document)["personal"]

    def replace_list(self, user_id: str, section: str, items: Iterable[CamelModel]) -> list[dict]:
        if section not in LIST_SECTIONS:
            raise SectionError(f"Unknown about section: {section}")
        document = self.store.load(user_id)
        document[section] = self._prepare(section, items)
        return self.store.save(user_id, document)[section]
