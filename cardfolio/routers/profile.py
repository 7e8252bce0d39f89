from __future__ import annotations

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import Response

from cardfolio.core.responses import envelope
from cardfolio.db.models import User
from cardfolio.routers.errors import service_errors, store_upload
from cardfolio.schemas import Profile
from cardfolio.services.profile_service import ProfileService
from cardfolio.services.session_service import require_user
from cardfolio.services.upload_service import UploadService

router = APIRouter(prefix="/api/profile", tags=["profile"])
uploads = UploadService()
profile_service = ProfileService(uploads=uploads)


@router.get("/public/{user_id}")
def public_card(user_id: str):
    with service_errors():
        return envelope(profile_service.public_card(user_id))


@router.get("/public/{user_id}/qr.png")
def public_qr(user_id: str):
    with service_errors():
        png = profile_service.qr_png(user_id)
    return Response(png, media_type="image/png")


@router.get("/public/{user_id}/vcard.vcf")
def public_vcard(user_id: str):
    with service_errors():
        vcf = profile_service.vcard(user_id)
    return Response(
        vcf,
        media_type="text/vcard; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{user_id}.vcf"'},
    )


@router.get("/{user_id}")
def get_profile(user_id: str, user: User = Depends(require_user)):
    with service_errors():
        return envelope(profile_service.get(user_id))


@router.put("/{user_id}")
def put_profile(user_id: str, profile: Profile, user: User = Depends(require_user)):
    with service_errors():
        return envelope(profile_service.update(user_id, user.id, profile), "Profile saved successfully")


@router.post("/{user_id}/picture")
async def upload_picture(
    user_id: str,
    profilePicture: UploadFile | None = File(None),
    user: User = Depends(require_user),
):
    path = await store_upload(uploads, "profiles", user.id, profilePicture, max_size=(800, 800))
    with service_errors():
        try:
            saved = profile_service.set_picture(user_id, user.id, path)
        except Exception:
            uploads.remove(path, user.id)
            raise
    return envelope(saved, "Profile picture uploaded", profilePicture=path)


@router.delete("/{user_id}/picture")
def delete_picture(user_id: str, user: User = Depends(require_user)):
    with service_errors():
        return envelope(profile_service.remove_picture(user_id, user.id), "Profile picture removed")
