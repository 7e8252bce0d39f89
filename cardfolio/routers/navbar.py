from __future__ import annotations

from fastapi import APIRouter, Depends, File, UploadFile

from cardfolio.core.responses import envelope
from cardfolio.db.models import User
from cardfolio.domain.uploads import LOGO_RULES
from cardfolio.routers.errors import service_errors, store_upload
from cardfolio.schemas import Navbar
from cardfolio.services.navbar_service import NavbarService
from cardfolio.services.session_service import require_user
from cardfolio.services.upload_service import UploadService

router = APIRouter(prefix="/api/navbar", tags=["navbar"])
uploads = UploadService()
navbar_service = NavbarService(uploads=uploads)


@router.get("")
def get_navbar(user: User = Depends(require_user)):
    with service_errors():
        return envelope(navbar_service.get(user.id))


@router.put("")
def put_navbar(navbar: Navbar, user: User = Depends(require_user)):
    with service_errors():
        return envelope(navbar_service.save(user.id, navbar), "Navbar saved successfully")


@router.delete("")
def delete_navbar(user: User = Depends(require_user)):
    with service_errors():
        navbar_service.delete(user.id)
    return envelope(None, "Navbar deleted successfully")


@router.post("/upload-logo")
async def upload_logo(logo: UploadFile | None = File(None), user: User = Depends(require_user)):
    path = await store_upload(uploads, "navbar", user.id, logo, rules=LOGO_RULES, max_size=(600, 600))
    return envelope({"logoUrl": path}, "Logo uploaded successfully", logoUrl=path)
