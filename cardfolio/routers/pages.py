from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import HTMLResponse

from cardfolio.services.documents import SectionError
from cardfolio.services.profile_service import ProfileService

router = APIRouter(prefix="", tags=["pages"])
profile_service = ProfileService()


def _templates(request: Request):
    tpl = getattr(getattr(request.app, "state", None), "templates", None)
    if tpl:
        return tpl
    raise RuntimeError("Templates are not configured")


@router.get("/u/{user_id}", response_class=HTMLResponse)
def public_card_page(request: Request, user_id: str):
    try:
        card = profile_service.public_card(user_id)
    except SectionError as exc:
        raise HTTPException(exc.status_code, exc.message) from exc
    return _templates(request).TemplateResponse(
        request,
        "card.html",
        {
            "card": card,
            "qr_url": f"/api/profile/public/{user_id}/qr.png",
            "vcard_url": f"/api/profile/public/{user_id}/vcard.vcf",
        },
    )
