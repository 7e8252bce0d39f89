# Annotations stay evaluated here: the section routes are built in a loop and
# FastAPI needs the real model classes, not strings.
from typing import List, Type

from fastapi import APIRouter, Depends, File, UploadFile

from cardfolio.core.responses import envelope
from cardfolio.db.models import User
from cardfolio.domain.uploads import LOGO_RULES
from cardfolio.routers.errors import service_errors, store_upload
from cardfolio.schemas import CamelModel, PublishRequest
from cardfolio.services.resume_service import SECTIONS, ResumeService
from cardfolio.services.session_service import require_user
from cardfolio.services.upload_service import UploadService

router = APIRouter(prefix="/api/resume", tags=["resume"])
uploads = UploadService()
resume_service = ResumeService()


@router.get("")
def get_resume(user: User = Depends(require_user)):
    with service_errors():
        return envelope(resume_service.get(user.id))


@router.put("/publish")
def publish(payload: PublishRequest, user: User = Depends(require_user)):
    with service_errors():
        document = resume_service.set_published(user.id, payload.is_published)
    message = "Resume published successfully" if payload.is_published else "Resume unpublished successfully"
    return envelope(document, message)


@router.get("/public/{user_id}")
def public_resume(user_id: str):
    with service_errors():
        return envelope(resume_service.public(user_id))


@router.post("/upload-logo")
async def upload_logo(logo: UploadFile | None = File(None), user: User = Depends(require_user)):
    path = await store_upload(uploads, "resume", user.id, logo, rules=LOGO_RULES, max_size=(400, 400))
    return envelope({"logoUrl": path}, "Logo uploaded successfully", logoUrl=path)


def _register_section(segment: str, model: Type[CamelModel], label: str) -> None:
    def list_entries(user: User = Depends(require_user)):
        with service_errors():
            return envelope(resume_service.list_entries(user.id, segment))

    def add_entry(entry: model, user: User = Depends(require_user)):
        with service_errors():
            return envelope(resume_service.add_entry(user.id, segment, entry), f"{label} added successfully")

    def replace_entries(entries: List[model], user: User = Depends(require_user)):
        with service_errors():
            return envelope(
                resume_service.replace_entries(user.id, segment, entries), f"{label} list updated successfully"
            )

    def update_entry(entry_id: int, entry: model, user: User = Depends(require_user)):
        with service_errors():
            return envelope(
                resume_service.update_entry(user.id, segment, entry_id, entry), f"{label} updated successfully"
            )

    def delete_entry(entry_id: int, user: User = Depends(require_user)):
        with service_errors():
            resume_service.delete_entry(user.id, segment, entry_id)
        return envelope(None, f"{label} deleted successfully")

    name = segment.replace("-", "_")
    router.add_api_route(f"/{segment}", list_entries, methods=["GET"], name=f"list_{name}")
    router.add_api_route(f"/{segment}", add_entry, methods=["POST"], name=f"add_{name}")
    router.add_api_route(f"/{segment}", replace_entries, methods=["PATCH"], name=f"replace_{name}")
    router.add_api_route(f"/{segment}/{{entry_id}}", update_entry, methods=["PUT"], name=f"update_{name}")
    router.add_api_route(f"/{segment}/{{entry_id}}", delete_entry, methods=["DELETE"], name=f"delete_{name}")


for _segment, (_key, _model, _label) in SECTIONS.items():
    _register_section(_segment, _model, _label)
