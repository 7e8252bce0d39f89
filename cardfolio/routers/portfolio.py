from __future__ import annotations

from fastapi import APIRouter, Depends, File, UploadFile

from cardfolio.core.responses import envelope
from cardfolio.db.models import User
from cardfolio.routers.errors import service_errors, store_upload
from cardfolio.schemas import (
    PortfolioCategoriesBulk,
    PortfolioCategory,
    PortfolioProject,
    PortfolioProjectsBulk,
    PortfolioSettings,
    PublishRequest,
)
from cardfolio.services.portfolio_service import PortfolioService
from cardfolio.services.session_service import require_user
from cardfolio.services.upload_service import UploadService

router = APIRouter(prefix="/api/portfolio", tags=["portfolio"])
uploads = UploadService()
portfolio_service = PortfolioService(uploads=uploads)


@router.get("")
def get_portfolio(user: User = Depends(require_user)):
    with service_errors():
        return envelope(portfolio_service.get(user.id))


@router.get("/public/{user_id}")
def public_portfolio(user_id: str):
    with service_errors():
        return envelope(portfolio_service.public(user_id))


@router.post("/upload-image")
async def upload_image(image: UploadFile | None = File(None), user: User = Depends(require_user)):
    path = await store_upload(uploads, "portfolio", user.id, image)
    return envelope({"imageUrl": path}, "Image uploaded successfully", imageUrl=path)


# ------------------------------------------------------------------ categories
@router.get("/categories")
def list_categories(user: User = Depends(require_user)):
    with service_errors():
        return envelope(portfolio_service.get(user.id)["categories"])


@router.post("/categories")
def add_category(category: PortfolioCategory, user: User = Depends(require_user)):
    with service_errors():
        return envelope(portfolio_service.add_category(user.id, category), "Category added successfully")


@router.post("/categories/bulk")
def bulk_categories(payload: PortfolioCategoriesBulk, user: User = Depends(require_user)):
    with service_errors():
        return envelope(
            portfolio_service.replace_categories(user.id, payload.categories), "Categories updated successfully"
        )


@router.put("/categories/{category_id}")
def update_category(category_id: int, category: PortfolioCategory, user: User = Depends(require_user)):
    with service_errors():
        return envelope(
            portfolio_service.update_category(user.id, category_id, category), "Category updated successfully"
        )


@router.delete("/categories/{category_id}")
def delete_category(category_id: int, user: User = Depends(require_user)):
    with service_errors():
        portfolio_service.delete_category(user.id, category_id)
    return envelope(None, "Category deleted successfully")


# ------------------------------------------------------------------ projects
@router.get("/projects")
def list_projects(user: User = Depends(require_user)):
    with service_errors():
        return envelope(portfolio_service.get(user.id)["projects"])


@router.post("/projects")
def add_project(project: PortfolioProject, user: User = Depends(require_user)):
    with service_errors():
        return envelope(portfolio_service.add_project(user.id, project), "Project added successfully")


@router.post("/projects/bulk")
def bulk_projects(payload: PortfolioProjectsBulk, user: User = Depends(require_user)):
    with service_errors():
        return envelope(portfolio_service.replace_projects(user.id, payload.projects), "Projects updated successfully")


@router.put("/projects/{project_id}")
def update_project(project_id: int, project: PortfolioProject, user: User = Depends(require_user)):
    with service_errors():
        return envelope(
            portfolio_service.update_project(user.id, project_id, project), "Project updated successfully"
        )


@router.delete("/projects/{project_id}")
def delete_project(project_id: int, user: User = Depends(require_user)):
    with service_errors():
        portfolio_service.delete_project(user.id, project_id)
    return envelope(None, "Project deleted successfully")


# ------------------------------------------------------------------ settings
@router.put("/settings")
def update_settings(settings: PortfolioSettings, user: User = Depends(require_user)):
    with service_errors():
        return envelope(portfolio_service.update_settings(user.id, settings), "Settings updated successfully")


@router.put("/publish")
def publish(payload: PublishRequest, user: User = Depends(require_user)):
    with service_errors():
        document = portfolio_service.set_published(user.id, payload.is_published)
    message = "Portfolio published successfully" if payload.is_published else "Portfolio unpublished successfully"
    return envelope(document, message)
