"""
Profile use cases: the owner's editable profile plus its public card, QR code
and vCard renditions.
"""

from __future__ import annotations

import io
from typing import Optional

import qrcode

from cardfolio.core.utils import absolute_url
from cardfolio.domain.profile import card_view, fill_generated_avatar
from cardfolio.repositories.sql_repository import SQLRepository
from cardfolio.schemas import Profile
from cardfolio.services.documents import DocumentStore, SectionForbidden, SectionNotFound
from cardfolio.services.upload_service import UploadService


def _vcard_escape(value: str) -> str:
    return (
        (value or "")
        .replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\n", "\\n")
    )


class ProfileService:
    def __init__(self, repository: Optional[SQLRepository] = None, uploads: Optional[UploadService] = None):
        self.repository = repository or SQLRepository()
        self.store = DocumentStore("profile", Profile, self.repository)
        self.uploads = uploads or UploadService()

    def _ensure_user(self, user_id: str):
        user = self.repository.get_user(user_id)
        if not user:
            raise SectionNotFound("User not found")
        return user

    def _ensure_owner(self, user_id: str, actor_id: str) -> None:
        self._ensure_user(user_id)
        if user_id != actor_id:
            raise SectionForbidden("You can only edit your own profile")

    def get(self, user_id: str) -> dict:
        self._ensure_user(user_id)
        return fill_generated_avatar(self.store.load(user_id), user_id=user_id)

    def update(self, user_id: str, actor_id: str, profile: Profile) -> dict:
        """Replace the stored profile with what the owner sent."""
        self._ensure_owner(user_id, actor_id)
        saved = self.store.save(user_id, profile.dump())
        return fill_generated_avatar(saved, user_id=user_id)

    def set_picture(self, user_id: str, actor_id: str, public_path: str) -> dict:
        self._ensure_owner(user_id, actor_id)
        profile = self.store.load(user_id)
        previous = profile.get("profilePicture")
        profile["profilePicture"] = public_path
        saved = self.store.save(user_id, profile)
        if previous and previous != public_path:
            self.uploads.remove(previous, user_id)
        return saved

    def remove_picture(self, user_id: str, actor_id: str) -> dict:
        self._ensure_owner(user_id, actor_id)
        profile = self.store.load(user_id)
        self.uploads.remove(profile.get("profilePicture"), user_id)
        profile["profilePicture"] = None
        return self.store.save(user_id, profile)

    # ------------------------------------------------------------------ public
    def public_card(self, user_id: str) -> dict:
        user = self._ensure_user(user_id)
        card = card_view(self.get(user_id))
        if not card.get("fullName"):
            card["fullName"] = user.name
        card["userId"] = user_id
        card["shareUrl"] = self.share_url(user_id)
        return card

    def share_url(self, user_id: str) -> str:
        return absolute_url(f"/u/{user_id}")

    def qr_png(self, user_id: str) -> bytes:
        self._ensure_user(user_id)
        qr = qrcode.QRCode(version=None, error_correction=qrcode.constants.ERROR_CORRECT_M, box_size=8, border=4)
        qr.add_data(self.share_url(user_id))
        qr.make(fit=True)
        img = qr.make_image(fill_color="black", back_color="white")
        buf = io.BytesIO()
        img.save(buf, format="PNG")
        return buf.getvalue()

    def vcard(self, user_id: str) -> str:
        card = self.public_card(user_id)
        name = _vcard_escape(card.get("fullName") or "")
        title = card.get("jobTitle") or card.get("position") or card.get("officialPosition") or ""
        org = card.get("company") or card.get("businessName") or card.get("institutionName") or ""
        lines = [
            "BEGIN:VCARD",
            "VERSION:3.0",
            f"N:{name};;;;",
            f"FN:{name}",
        ]
        if org:
            lines.append(f"ORG:{_vcard_escape(org)}")
        if title:
            lines.append(f"TITLE:{_vcard_escape(title)}")
        if card.get("phone"):
            lines.append(f"TEL;TYPE=CELL:{card['phone']}")
        if card.get("email"):
            lines.append(f"EMAIL;TYPE=INTERNET:{card['email']}")
        photo = card.get("profilePicture") or card.get("avatar")
        if photo:
            lines.append(f"PHOTO;VALUE=URI:{absolute_url(photo)}")
        lines.append(f"URL:{card['shareUrl']}")
        lines.append("END:VCARD")
        return "\r\n".join(lines) + "\r\n"
