"""Blog posts and their categories (relational tables, ids sequential per user)."""

from __future__ import annotations

from typing import Iterable, Optional

from cardfolio.core.utils import today_iso
from cardfolio.db.models import BlogCategory, BlogPost
from cardfolio.repositories.sql_repository import SQLRepository
from cardfolio.schemas import BlogCategoryIn, BlogPostIn, BlogPostPatch
from cardfolio.services.documents import SectionError, SectionNotFound, assign_ids

EXCERPT_LENGTH = 150


def category_dict(entity: BlogCategory) -> dict:
    return {"id": entity.id, "name": entity.name}


def post_dict(entity: BlogPost) -> dict:
    return {
        "id": entity.id,
        "title": entity.title,
        "image": entity.image or "",
        "category": entity.category,
        "content": entity.content,
        "excerpt": entity.excerpt or "",
        "date": entity.date or "",
    }


def default_excerpt(content: str) -> str:
    return (content or "")[:EXCERPT_LENGTH] + "..."


class BlogService:
    def __init__(self, repository: Optional[SQLRepository] = None):
        self.repository = repository or SQLRepository()

    # ------------------------------------------------------------ categories
    def list_categories(self, user_id: str) -> list[dict]:
        return [category_dict(c) for c in self.repository.list_blog_categories(user_id)]

    def _clean_name(self, name: str) -> str:
        name = (name or "").strip()
        if not name:
            raise SectionError("Category name is required")
        return name

    def create_category(self, user_id: str, name: str) -> dict:
        name = self._clean_name(name)
        if self.repository.find_blog_category_by_name(user_id, name):
            raise SectionError("Category already exists")
        return category_dict(self.repository.create_blog_category(user_id, name))

    def rename_category(self, user_id: str, category_id: int, name: str) -> dict:
        name = self._clean_name(name)
        clash = self.repository.find_blog_category_by_name(user_id, name)
        if clash and clash.id != category_id:
            raise SectionError("Category already exists")
        entity = self.repository.rename_blog_category(user_id, category_id, name)
        if not entity:
            raise SectionNotFound("Category not found")
        return category_dict(entity)

    def delete_category(self, user_id: str, category_id: int) -> None:
        if not self.repository.delete_blog_category(user_id, category_id):
            raise SectionNotFound("Category not found")

    def replace_categories(self, user_id: str, categories: Iterable[BlogCategoryIn]) -> list[dict]:
        items = []
        seen = set()
        for category in categories:
            name = self._clean_name(category.name)
            if name.lower() in seen:
                raise SectionError(f"Duplicate category name: {name}")
            seen.add(name.lower())
            items.append({"id": category.id, "name": name})
        stored = self.repository.replace_blog_categories(user_id, assign_ids(items))
        return [category_dict(c) for c in stored]

    # ------------------------------------------------------------ posts
    def list_posts(self, user_id: str) -> list[dict]:
        return [post_dict(p) for p in self.repository.list_blog_posts(user_id)]

    def _post_fields(self, post: BlogPostIn) -> dict:
        title = (post.title or "").strip()
        content = post.content or ""
        category = (post.category or "").strip()
        if not (title and content.strip() and category):
            raise SectionError("Title, content and category are required")
        return {
            "title": title,
            "image": post.image or "",
            "category": category,
            "content": content,
            "excerpt": post.excerpt or default_excerpt(content),
            "date": post.date or today_iso(),
        }

    def create_post(self, user_id: str, post: BlogPostIn) -> dict:
        return post_dict(self.repository.create_blog_post(user_id, self._post_fields(post)))

    def update_post(self, user_id: str, post_id: int, patch: BlogPostPatch) -> dict:
        changes = patch.model_dump(exclude_none=True)
        for key in ("title", "content", "category"):
            if key in changes and not str(changes[key]).strip():
                raise SectionError(f"{key.capitalize()} cannot be empty")
        entity = self.repository.update_blog_post(user_id, post_id, changes)
        if not entity:
            raise SectionNotFound("Blog post not found")
        return post_dict(entity)

    def delete_post(self, user_id: str, post_id: int) -> None:
        if not self.repository.delete_blog_post(user_id, post_id):
            raise SectionNotFound("Blog post not found")

    def replace_posts(self, user_id: str, posts: Iterable[BlogPostIn]) -> list[dict]:
        items = [{"id": post.id, **self._post_fields(post)} for post in posts]
        stored = self.repository.replace_blog_posts(user_id, assign_ids(items))
        return [post_dict(p) for p in stored]
