from __future__ import annotations

from fastapi import APIRouter, Depends, File, UploadFile

from cardfolio.core.responses import envelope
from cardfolio.db.models import User
from cardfolio.routers.errors import service_errors, store_upload
from cardfolio.schemas import BlogCategoryIn, BlogPostIn, BlogPostPatch
from cardfolio.services.blog_service import BlogService
from cardfolio.services.session_service import require_user
from cardfolio.services.upload_service import UploadService

posts_router = APIRouter(prefix="/api/blogs", tags=["blog"])
categories_router = APIRouter(prefix="/api/blog-categories", tags=["blog"])
blog_service = BlogService()
uploads = UploadService()


# ------------------------------------------------------------------ posts
@posts_router.get("")
def list_posts(user: User = Depends(require_user)):
    return envelope(blog_service.list_posts(user.id))


@posts_router.post("")
def create_post(post: BlogPostIn, user: User = Depends(require_user)):
    with service_errors():
        return envelope(blog_service.create_post(user.id, post), "Blog created successfully")


@posts_router.patch("")
def replace_posts(posts: list[BlogPostIn], user: User = Depends(require_user)):
    with service_errors():
        return envelope(blog_service.replace_posts(user.id, posts), "Blogs updated successfully")


@posts_router.post("/upload")
async def upload_image(image: UploadFile | None = File(None), user: User = Depends(require_user)):
    path = await store_upload(uploads, "blog", user.id, image)
    return envelope({"imageUrl": path}, "Image uploaded successfully", imageUrl=path)


@posts_router.put("/{post_id}")
def update_post(post_id: int, patch: BlogPostPatch, user: User = Depends(require_user)):
    with service_errors():
        return envelope(blog_service.update_post(user.id, post_id, patch), "Blog updated successfully")


@posts_router.delete("/{post_id}")
def delete_post(post_id: int, user: User = Depends(require_user)):
    with service_errors():
        blog_service.delete_post(user.id, post_id)
    return envelope(None, "Blog deleted successfully")


# ------------------------------------------------------------------ categories
@categories_router.get("")
def list_categories(user: User = Depends(require_user)):
    return envelope(blog_service.list_categories(user.id))


@categories_router.post("")
def create_category(category: BlogCategoryIn, user: User = Depends(require_user)):
    with service_errors():
        return envelope(blog_service.create_category(user.id, category.name), "Blog category created successfully")


@categories_router.patch("")
def replace_categories(categories: list[BlogCategoryIn], user: User = Depends(require_user)):
    with service_errors():
        return envelope(
            blog_service.replace_categories(user.id, categories), "Blog categories updated successfully"
        )


@categories_router.put("/{category_id}")
def rename_category(category_id: int, category: BlogCategoryIn, user: User = Depends(require_user)):
    with service_errors():
        return envelope(
            blog_service.rename_category(user.id, category_id, category.name), "Blog category updated successfully"
        )


@categories_router.delete("/{category_id}")
def delete_category(category_id: int, user: User = Depends(require_user)):
    with service_errors():
        blog_service.delete_category(user.id, category_id)
    return envelope(None, "Blog category deleted successfully")
