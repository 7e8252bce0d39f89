"""
Contact inbox: visitors write to a card owner through the public form, the
owner reads, replies to, tags and deletes those messages.
"""

from __future__ import annotations

import html
import logging
import math
from datetime import timedelta
from typing import Optional

from cardfolio.core.mailer import send_email
from cardfolio.core.utils import as_utc, utcnow
from cardfolio.db.models import ContactMessage
from cardfolio.domain.contact import contact_problem
from cardfolio.repositories.sql_repository import SQLRepository
from cardfolio.schemas import ContactStatusUpdate, ContactSubmission
from cardfolio.services.documents import SectionError, SectionNotFound

logger = logging.getLogger(__name__)

STATUSES = ("pending", "replied")
RECENT_DAYS = 7
MAX_PAGE_SIZE = 100


def _iso(value) -> Optional[str]:
    return as_utc(value).isoformat() if value else None


def message_dict(entity: ContactMessage) -> dict:
    return {
        "id": entity.id,
        "name": entity.name,
        "email": entity.email,
        "phone": entity.phone or "",
        "subject": entity.subject or "",
        "message": entity.message,
        "status": entity.status,
        "read": bool(entity.read),
        "replyMessage": entity.reply_message or "",
        "repliedAt": _iso(entity.replied_at),
        "createdAt": _iso(entity.created_at),
    }


class ContactService:
    def __init__(self, repository: Optional[SQLRepository] = None, mailer=send_email):
        self.repository = repository or SQLRepository()
        self.mailer = mailer

    # ------------------------------------------------------------ public form
    def submit(self, submission: ContactSubmission) -> dict:
        name = (submission.name or "").strip()
        email = (submission.email or "").strip().lower()
        message = (submission.message or "").strip()
        problem = contact_problem(name, email, message)
        if problem:
            raise SectionError(problem)
        recipient = self.repository.get_user(submission.recipient_id)
        if not recipient:
            raise SectionNotFound("Recipient not found")
        entity = self.repository.create_contact_message(
            recipient.id,
            {
                "name": name,
                "email": email,
                "phone": (submission.phone or "").strip(),
                "subject": (submission.subject or "").strip(),
                "message": message,
            },
        )
        logger.info("contact message %s for user %s", entity.id, recipient.id)
        return {"id": entity.id, "name": entity.name, "email": entity.email}

    # ------------------------------------------------------------ inbox
    def _status_filter(self, status: Optional[str]) -> Optional[str]:
        if not status or status == "all":
            return None
        if status not in STATUSES:
            raise SectionError("Invalid status filter")
        return status

    def inbox(
        self,
        user_id: str,
        *,
        search: Optional[str] = None,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> dict:
        """One page of messages, newest first, with pagination and overall counts."""
        page = max(int(page or 1), 1)
        limit = min(max(int(limit or 10), 1), MAX_PAGE_SIZE)
        offset = (page - 1) * limit
        rows, total = self.repository.list_contact_messages(
            user_id, search=search, status=self._status_filter(status), offset=offset, limit=limit
        )
        return {
            "messages": [message_dict(row) for row in rows],
            "pagination": {
                "currentPage": page,
                "totalPages": math.ceil(total / limit),
                "totalMessages": total,
                "hasNext": offset + len(rows) < total,
                "hasPrev": page > 1,
            },
            "stats": {
                "total": self.repository.count_contact_messages(user_id),
                "pending": self.repository.count_contact_messages(user_id, status="pending"),
                "replied": self.repository.count_contact_messages(user_id, status="replied"),
            },
        }

    def open(self, user_id: str, message_id: int) -> dict:
        """Fetch a message and mark it read."""
        entity = self.repository.get_contact_message(user_id, message_id)
        if not entity:
            raise SectionNotFound("Message not found")
        if not entity.read:
            entity = self.repository.update_contact_message(user_id, message_id, {"read": True})
        return message_dict(entity)

    def reply(self, user_id: str, message_id: int, reply_message: str) -> dict:
        text = (reply_message or "").strip()
        if not text:
            raise SectionError("Reply message is required")
        current = self.repository.get_contact_message(user_id, message_id)
        if not current:
            raise SectionNotFound("Message not found")
        entity = self.repository.update_contact_message(
            user_id,
            message_id,
            {"status": "replied", "replied_at": utcnow(), "reply_message": text, "read": True},
        )
        owner = self.repository.get_user(user_id)
        emailed = self._send_reply(entity, owner.name if owner else "", text)
        result = message_dict(entity)
        result["emailed"] = emailed
        return result

    def _send_reply(self, entity: ContactMessage, owner_name: str, text: str) -> bool:
        subject = f"Re: {entity.subject}" if entity.subject else f"Reply from {owner_name or 'Cardfolio'}"
        body = html.escape(text).replace("\n", "<br>")
        html_body = f"<p>Hi {html.escape(entity.name)},</p><p>{body}</p><p>{html.escape(owner_name)}</p>"
        return self.mailer(subject, entity.email, html_body, text)

    def update_status(self, user_id: str, message_id: int, changes: ContactStatusUpdate) -> dict:
        current = self.repository.get_contact_message(user_id, message_id)
        if not current:
            raise SectionNotFound("Message not found")
        fields: dict = {}
        if changes.status is not None:
            fields["status"] = changes.status
            if changes.status == "replied" and not current.replied_at:
                fields["replied_at"] = utcnow()
        if changes.read is not None:
            fields["read"] = changes.read
        entity = self.repository.update_contact_message(user_id, message_id, fields) if fields else current
        return message_dict(entity)

    def mark_all_read(self, user_id: str) -> int:
        return self.repository.mark_contact_messages_read(user_id)

    def delete(self, user_id: str, message_id: int) -> None:
        if not self.repository.delete_contact_message(user_id, message_id):
            raise SectionNotFound("Message not found")

    def stats(self, user_id: str) -> dict:
        count = self.repository.count_contact_messages
        return {
            "total": count(user_id),
            "pending": count(user_id, status="pending"),
            "replied": count(user_id, status="replied"),
            "unread": count(user_id, read=False),
            "recent": count(user_id, since=utcnow() - timedelta(days=RECENT_DAYS)),
        }
