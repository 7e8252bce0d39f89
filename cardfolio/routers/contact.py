from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request

from cardfolio.core.rate_limiter import rate_limit_ip
from cardfolio.core.responses import envelope
from cardfolio.db.models import User
from cardfolio.routers.errors import service_errors
from cardfolio.schemas import ContactReply, ContactStatusUpdate, ContactSubmission
from cardfolio.services.contact_service import ContactService
from cardfolio.services.session_service import require_user

router = APIRouter(prefix="/api/contact", tags=["contact"])
contact_service = ContactService()


@router.post("", status_code=201)
def submit_message(payload: ContactSubmission, request: Request):
    rate_limit_ip(request, "contact:submit", limit=5, window_seconds=600)
    with service_errors():
        sent = contact_service.submit(payload)
    return envelope(sent, "Message sent successfully!", contact=sent)


@router.get("")
def list_messages(
    search: Optional[str] = None,
    status: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
    user: User = Depends(require_user),
):
    with service_errors():
        return envelope(contact_service.inbox(user.id, search=search, status=status, page=page, limit=limit))


# fixed paths are declared before /{message_id}
@router.get("/stats/summary")
def stats_summary(user: User = Depends(require_user)):
    return envelope(contact_service.stats(user.id))


@router.put("/actions/mark-all-read")
def mark_all_read(user: User = Depends(require_user)):
    count = contact_service.mark_all_read(user.id)
    return envelope({"modifiedCount": count}, f"Marked {count} messages as read", modifiedCount=count)


@router.get("/{message_id}")
def get_message(message_id: int, user: User = Depends(require_user)):
    with service_errors():
        return envelope(contact_service.open(user.id, message_id))


@router.post("/{message_id}/reply")
def reply(message_id: int, payload: ContactReply, user: User = Depends(require_user)):
    with service_errors():
        return envelope(contact_service.reply(user.id, message_id, payload.reply_message), "Reply sent successfully!")


@router.put("/{message_id}/status")
def update_status(message_id: int, payload: ContactStatusUpdate, user: User = Depends(require_user)):
    with service_errors():
        return envelope(contact_service.update_status(user.id, message_id, payload), "Message updated successfully")


@router.delete("/{message_id}")
def delete_message(message_id: int, user: User = Depends(require_user)):
    with service_errors():
        contact_service.delete(user.id, message_id)
    return envelope({"deletedId": message_id}, "Message deleted successfully", deletedId=message_id)
