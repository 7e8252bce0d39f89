from __future__ import annotations

from fastapi import APIRouter, Depends, File, UploadFile

from cardfolio.core.responses import envelope
from cardfolio.db.models import User
from cardfolio.routers.errors import service_errors, store_upload
from cardfolio.schemas import AboutUpdate, Brand, PersonalInfo, PricingPlan, Service, Testimonial
from cardfolio.services.about_service import AboutService
from cardfolio.services.session_service import require_user
from cardfolio.services.upload_service import UploadService

router = APIRouter(prefix="/api/about", tags=["about"])
about_service = AboutService()
uploads = UploadService()


@router.get("")
def get_about(user: User = Depends(require_user)):
    with service_errors():
        return envelope(about_service.get(user.id))


@router.put("")
def put_about(payload: AboutUpdate, user: User = Depends(require_user)):
    with service_errors():
        return envelope(about_service.update(user.id, payload), "About data updated successfully")


@router.patch("/personal")
def patch_personal(personal: PersonalInfo, user: User = Depends(require_user)):
    with service_errors():
        return envelope(about_service.update_personal(user.id, personal), "Personal information updated successfully")


@router.patch("/services")
def patch_services(items: list[Service], user: User = Depends(require_user)):
    with service_errors():
        return envelope(about_service.replace_list(user.id, "services", items), "Services updated successfully")


@router.patch("/testimonials")
def patch_testimonials(items: list[Testimonial], user: User = Depends(require_user)):
    with service_errors():
        return envelope(
            about_service.replace_list(user.id, "testimonials", items), "Testimonials updated successfully"
        )


@router.patch("/pricing")
def patch_pricing(items: list[PricingPlan], user: User = Depends(require_user)):
    with service_errors():
        return envelope(about_service.replace_list(user.id, "pricing", items), "Pricing plans updated successfully")


@router.patch("/brands")
def patch_brands(items: list[Brand], user: User = Depends(require_user)):
    with service_errors():
        return envelope(about_service.replace_list(user.id, "brands", items), "Brands updated successfully")


@router.post("/upload")
async def upload_image(image: UploadFile | None = File(None), user: User = Depends(require_user)):
    path = await store_upload(uploads, "about", user.id, image, max_size=(800, 800))
    return envelope({"imageUrl": path}, "Image uploaded successfully", imageUrl=path)
