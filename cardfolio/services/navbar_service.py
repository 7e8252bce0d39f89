"""Site navbar (name, logo, free text)."""

from __future__ import annotations

from typing import Optional

from cardfolio.repositories.sql_repository import SQLRepository
from cardfolio.schemas import Navbar
from cardfolio.services.documents import DocumentStore
from cardfolio.services.upload_service import UploadService


class NavbarService:
    def __init__(self, repository: Optional[SQLRepository] = None, uploads: Optional[UploadService] = None):
        self.store = DocumentStore("navbar", Navbar, repository)
        self.uploads = uploads or UploadService()

    def get(self, user_id: str) -> dict:
        return self.store.load(user_id)

    def save(self, user_id: str, navbar: Navbar) -> dict:
        previous = self.store.load(user_id).get("logo")
        saved = self.store.save(user_id, navbar.dump())
        if previous and previous != saved.get("logo"):
            self.uploads.remove(previous, user_id)
        return saved

    def delete(self, user_id: str) -> bool:
        current = self.store.repository.get_document(user_id, "navbar") or {}
        self.uploads.remove(current.get("logo"), user_id)
        return self.store.delete(user_id)
