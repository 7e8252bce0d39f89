"""Portfolio: categories, projects, display settings and publishing."""

from __future__ import annotations

from typing import Iterable, Optional

from cardfolio.core.utils import today_iso
from cardfolio.repositories.sql_repository import SQLRepository
from cardfolio.schemas import PortfolioCategory, PortfolioDocument, PortfolioProject, PortfolioSettings
from cardfolio.services.documents import (
    DocumentStore,
    SectionError,
    SectionNotFound,
    append_item,
    assign_ids,
    dump_items,
    find_index,
    remove_item,
    update_item,
)
from cardfolio.services.upload_service import UploadService


class PortfolioService:
    def __init__(self, repository: Optional[SQLRepository] = None, uploads: Optional[UploadService] = None):
        self.repository = repository or SQLRepository()
        self.store = DocumentStore("portfolio", PortfolioDocument, self.repository)
        self.uploads = uploads or UploadService()

    def get(self, user_id: str) -> dict:
        return self.store.load(user_id)

    def public(self, user_id: str) -> dict:
        if not self.repository.get_user(user_id):
            raise SectionNotFound("Portfolio not found")
        document = self.store.repository.get_document(user_id, "portfolio")
        if not document or not document.get("isPublished"):
            raise SectionNotFound("Portfolio not found")
        return self.store.load(user_id)

    # ------------------------------------------------------------ categories
    def _check_category_name(self, categories: list[dict], name: str, *, skip_id: Optional[int] = None) -> str:
        name = (name or "").strip()
        if not name:
            raise SectionError("Category name is required")
        for category in categories:
            if category.get("id") != skip_id and (category.get("name") or "").lower() == name.lower():
                raise SectionError("Category with this name already exists")
        return name

    def add_category(self, user_id: str, category: PortfolioCategory) -> dict:
        document = self.store.load(user_id)
        name = self._check_category_name(document["categories"], category.name)
        created = append_item(document["categories"], {"name": name, "createdAt": category.created_at or today_iso()})
        self.store.save(user_id, document)
        return created

    def update_category(self, user_id: str, category_id: int, category: PortfolioCategory) -> dict:
        document = self.store.load(user_id)
        name = self._check_category_name(document["categories"], category.name, skip_id=category_id)
        updated = update_item(document["categories"], category_id, {"name": name}, label="Category")
        self.store.save(user_id, document)
        return updated

    def delete_category(self, user_id: str, category_id: int) -> dict:
        document = self.store.load(user_id)
        removed = remove_item(document["categories"], category_id, label="Category")
        self.store.save(user_id, document)
        return removed

    def replace_categories(self, user_id: str, categories: Iterable[PortfolioCategory]) -> list[dict]:
        items = dump_items(categories)
        seen = []
        for item in items:
            item["name"] = self._check_category_name(seen, item.get("name"))
            item["createdAt"] = item.get("createdAt") or today_iso()
            seen.append(item)
        document = self.store.load(user_id)
        document["categories"] = assign_ids(items)
        return self.store.save(user_id, document)["categories"]

    # ------------------------------------------------------------ projects
    def _check_project(self, project: dict) -> dict:
        if not (project.get("title") or "").strip():
            raise SectionError("Project title is required")
        return project

    def add_project(self, user_id: str, project: PortfolioProject) -> dict:
        document = self.store.load(user_id)
        fields = self._check_project(project.dump())
        fields.pop("id", None)
        created = append_item(document["projects"], fields)
        self.store.save(user_id, document)
        return created

    def update_project(self, user_id: str, project_id: int, project: PortfolioProject) -> dict:
        document = self.store.load(user_id)
        index = find_index(document["projects"], project_id)
        previous_image = document["projects"][index].get("image") if index >= 0 else None
        fields = self._check_project(project.dump())
        updated = update_item(document["projects"], project_id, fields, label="Project")
        self.store.save(user_id, document)
        if previous_image and previous_image != updated.get("image"):
            self.uploads.remove(previous_image, user_id)
        return updated

    def delete_project(self, user_id: str, project_id: int) -> dict:
        document = self.store.load(user_id)
        removed = remove_item(document["projects"], project_id, label="Project")
        self.store.save(user_id, document)
        self.uploads.remove(removed.get("image"), user_id)
        return removed

    def replace_projects(self, user_id: str, projects: Iterable[PortfolioProject]) -> list[dict]:
        items = [self._check_project(item) for item in dump_items(projects)]
        document = self.store.load(user_id)
        kept_images = {item.get("image") for item in items}
        dropped = [p.get("image") for p in document["projects"] if p.get("image") and p.get("image") not in kept_images]
        document["projects"] = assign_ids(items)
        saved = self.store.save(user_id, document)["projects"]
        for image in dropped:
            self.uploads.remove(image, user_id)
        return saved

    # ------------------------------------------------------------ settings
    def update_settings(self, user_id: str, settings: PortfolioSettings) -> dict:
        document = self.store.load(user_id)
        document["settings"] = settings.dump()
        return self.store.save(user_id, document)["settings"]

    def set_published(self, user_id: str, is_published: bool) -> dict:
        document = self.store.load(user_id)
        document["isPublished"] = bool(is_published)
        return self.store.save(user_id, document)
