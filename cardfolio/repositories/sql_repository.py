"""High-level data access helpers backed by SQLAlchemy."""
from __future__ import annotations

import secrets
from datetime import datetime, timezone
from typing import Iterable, Optional

from sqlalchemy import select, update, delete, func, or_

from cardfolio.db.models import (
    BlogCategory,
    BlogPost,
    ContactMessage,
    PasswordReset,
    PendingUser,
    SectionDocument,
    User,
    UserSession,
)
from cardfolio.db.session import get_session


def _now() -> datetime:
    return datetime.now(timezone.utc)


def new_user_id() -> str:
    return secrets.token_hex(12)


class SQLRepository:
    """CRUD helpers wrapping the SQLAlchemy session."""

    # -------------------------- users --------------------------
    def get_user(self, user_id: str) -> Optional[User]:
        if not user_id:
            return None
        with get_session() as session:
            return session.get(User, user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        email_value = (email or "").strip().lower()
        if not email_value:
            return None
        with get_session() as session:
            stmt = select(User).where(User.email == email_value)
            return session.execute(stmt).scalar_one_or_none()

    def create_user(self, name: str, email: str, password_hash: str, *, role: str = "user", is_premium: bool = False) -> User:
        now = _now()
        entity = User(
            id=new_user_id(),
            name=name,
            email=email.strip().lower(),
            password_hash=password_hash,
            role=role,
            is_premium=is_premium,
            created_at=now,
            updated_at=now,
        )
        with get_session() as session:
            session.add(entity)
            session.commit()
            session.refresh(entity)
            return entity

    def list_users(self) -> list[User]:
        with get_session() as session:
            return session.execute(select(User).order_by(User.created_at)).scalars().all()

    def update_user_password(self, user_id: str, password_hash: str) -> None:
        with get_session() as session:
            stmt = update(User).where(User.id == user_id).values(password_hash=password_hash, updated_at=_now())
            session.execute(stmt)
            session.commit()

    def set_user_premium(self, user_id: str, is_premium: bool) -> Optional[User]:
        with get_session() as session:
            user = session.get(User, user_id)
            if not user:
                return None
            user.is_premium = bool(is_premium)
            user.updated_at = _now()
            session.commit()
            session.refresh(user)
            return user

    def set_user_role(self, user_id: str, role: str) -> None:
        with get_session() as session:
            session.execute(update(User).where(User.id == user_id).values(role=role, updated_at=_now()))
            session.commit()

    # -------------------------- pending registrations --------------------------
    def upsert_pending_user(self, email: str, name: str, password_hash: str, code: str, expires_at: datetime) -> None:
        with get_session() as session:
            session.execute(delete(PendingUser).where(PendingUser.email == email))
            session.add(
                PendingUser(
                    email=email,
                    name=name,
                    password_hash=password_hash,
                    otp_code=code,
                    otp_expires_at=expires_at,
                    created_at=_now(),
                )
            )
            session.commit()

    def get_pending_user(self, email: str) -> Optional[PendingUser]:
        with get_session() as session:
            return session.get(PendingUser, email)

    def delete_pending_user(self, email: str) -> None:
        with get_session() as session:
            session.execute(delete(PendingUser).where(PendingUser.email == email))
            session.commit()

    # -------------------------- password reset codes --------------------------
    def upsert_password_reset(self, user_id: str, code: str, expires_at: datetime) -> None:
        with get_session() as session:
            session.merge(PasswordReset(user_id=user_id, code=code, expires_at=expires_at))
            session.commit()

    def get_password_reset(self, user_id: str) -> Optional[PasswordReset]:
        with get_session() as session:
            return session.get(PasswordReset, user_id)

    def delete_password_reset(self, user_id: str) -> None:
        with get_session() as session:
            session.execute(delete(PasswordReset).where(PasswordReset.user_id == user_id))
            session.commit()

    # -------------------------- sessions --------------------------
    def create_session(self, user_id: str, token: str, expires_at: datetime) -> None:
        with get_session() as session:
            session.add(UserSession(token=token, user_id=user_id, expires_at=expires_at))
            session.commit()

    def get_session(self, token: str) -> Optional[UserSession]:
        with get_session() as session:
            return session.get(UserSession, token)

    def delete_session(self, token: str) -> None:
        with get_session() as session:
            session.execute(delete(UserSession).where(UserSession.token == token))
            session.commit()

    def delete_user_sessions(self, user_id: str) -> None:
        with get_session() as session:
            session.execute(delete(UserSession).where(UserSession.user_id == user_id))
            session.commit()

    # -------------------------- section documents --------------------------
    def get_document(self, user_id: str, section: str) -> Optional[dict]:
        with get_session() as session:
            stmt = select(SectionDocument).where(
                SectionDocument.user_id == user_id, SectionDocument.section == section
            )
            entity = session.execute(stmt).scalar_one_or_none()
            return dict(entity.data) if entity else None

    def upsert_document(self, user_id: str, section: str, data: dict) -> dict:
        with get_session() as session:
            stmt = select(SectionDocument).where(
                SectionDocument.user_id == user_id, SectionDocument.section == section
            )
            entity = session.execute(stmt).scalar_one_or_none()
            if not entity:
                entity = SectionDocument(user_id=user_id, section=section, data=data, updated_at=_now())
                session.add(entity)
            else:
                entity.data = data
                entity.updated_at = _now()
            session.commit()
            return dict(data)

    def delete_document(self, user_id: str, section: str) -> bool:
        with get_session() as session:
            result = session.execute(
                delete(SectionDocument).where(
                    SectionDocument.user_id == user_id, SectionDocument.section == section
                )
            )
            session.commit()
            return bool(result.rowcount)

    # -------------------------- blog categories --------------------------
    def list_blog_categories(self, user_id: str) -> list[BlogCategory]:
        with get_session() as session:
            stmt = select(BlogCategory).where(BlogCategory.user_id == user_id).order_by(BlogCategory.id)
            return session.execute(stmt).scalars().all()

    def find_blog_category_by_name(self, user_id: str, name: str) -> Optional[BlogCategory]:
        with get_session() as session:
            stmt = select(BlogCategory).where(
                BlogCategory.user_id == user_id, func.lower(BlogCategory.name) == name.strip().lower()
            )
            return session.execute(stmt).scalars().first()

    def _next_blog_id(self, session, model, user_id: str) -> int:
        current = session.execute(select(func.max(model.id)).where(model.user_id == user_id)).scalar()
        return int(current or 0) + 1

    def create_blog_category(self, user_id: str, name: str) -> BlogCategory:
        with get_session() as session:
            entity = BlogCategory(
                user_id=user_id,
                id=self._next_blog_id(session, BlogCategory, user_id),
                name=name,
                created_at=_now(),
            )
            session.add(entity)
            session.commit()
            session.refresh(entity)
            return entity

    def rename_blog_category(self, user_id: str, category_id: int, name: str) -> Optional[BlogCategory]:
        with get_session() as session:
            stmt = select(BlogCategory).where(BlogCategory.user_id == user_id, BlogCategory.id == category_id)
            entity = session.execute(stmt).scalar_one_or_none()
            if not entity:
                return None
            entity.name = name
            session.commit()
            session.refresh(entity)
            return entity

    def delete_blog_category(self, user_id: str, category_id: int) -> bool:
        with get_session() as session:
            result = session.execute(
                delete(BlogCategory).where(BlogCategory.user_id == user_id, BlogCategory.id == category_id)
            )
            session.commit()
            return bool(result.rowcount)

    def replace_blog_categories(self, user_id: str, categories: Iterable[dict]) -> list[BlogCategory]:
        with get_session() as session:
            session.execute(delete(BlogCategory).where(BlogCategory.user_id == user_id))
            now = _now()
            for item in categories:
                session.add(BlogCategory(user_id=user_id, id=item["id"], name=item["name"], created_at=now))
            session.commit()
        return self.list_blog_categories(user_id)

    # -------------------------- blog posts --------------------------
    def list_blog_posts(self, user_id: str) -> list[BlogPost]:
        with get_session() as session:
            stmt = select(BlogPost).where(BlogPost.user_id == user_id).order_by(BlogPost.id)
            return session.execute(stmt).scalars().all()

    def create_blog_post(self, user_id: str, fields: dict) -> BlogPost:
        now = _now()
        with get_session() as session:
            entity = BlogPost(
                user_id=user_id,
                id=self._next_blog_id(session, BlogPost, user_id),
                created_at=now,
                updated_at=now,
                **fields,
            )
            session.add(entity)
            session.commit()
            session.refresh(entity)
            return entity

    def update_blog_post(self, user_id: str, post_id: int, fields: dict) -> Optional[BlogPost]:
        with get_session() as session:
            stmt = select(BlogPost).where(BlogPost.user_id == user_id, BlogPost.id == post_id)
            entity = session.execute(stmt).scalar_one_or_none()
            if not entity:
                return None
            for key, value in fields.items():
                setattr(entity, key, value)
            entity.updated_at = _now()
            session.commit()
            session.refresh(entity)
            return entity

    def delete_blog_post(self, user_id: str, post_id: int) -> bool:
        with get_session() as session:
            result = session.execute(delete(BlogPost).where(BlogPost.user_id == user_id, BlogPost.id == post_id))
            session.commit()
            return bool(result.rowcount)

    def replace_blog_posts(self, user_id: str, posts: Iterable[dict]) -> list[BlogPost]:
        now = _now()
        with get_session() as session:
            session.execute(delete(BlogPost).where(BlogPost.user_id == user_id))
            for item in posts:
                session.add(BlogPost(user_id=user_id, created_at=now, updated_at=now, **item))
            session.commit()
        return self.list_blog_posts(user_id)

    # -------------------------- contact messages --------------------------
    def create_contact_message(self, user_id: str, fields: dict) -> ContactMessage:
        now = _now()
        with get_session() as session:
            entity = ContactMessage(user_id=user_id, created_at=now, updated_at=now, **fields)
            session.add(entity)
            session.commit()
            session.refresh(entity)
            return entity

    def _contact_filter(self, user_id: str, search: Optional[str], status: Optional[str]) -> list:
        clauses = [ContactMessage.user_id == user_id]
        if search:
            pattern = f"%{search.strip().lower()}%"
            clauses.append(
                or_(
                    func.lower(ContactMessage.name).like(pattern),
                    func.lower(ContactMessage.email).like(pattern),
                    func.lower(ContactMessage.subject).like(pattern),
                    func.lower(ContactMessage.message).like(pattern),
                )
            )
        if status:
            clauses.append(ContactMessage.status == status)
        return clauses

    def list_contact_messages(
        self,
        user_id: str,
        *,
        search: Optional[str] = None,
        status: Optional[str] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[ContactMessage], int]:
        """Newest first; returns the requested page and the number of matching rows."""
        clauses = self._contact_filter(user_id, search, status)
        with get_session() as session:
            total = session.execute(select(func.count()).select_from(ContactMessage).where(*clauses)).scalar()
            stmt = (
                select(ContactMessage)
                .where(*clauses)
                .order_by(ContactMessage.created_at.desc(), ContactMessage.id.desc())
                .offset(offset)
                .limit(limit)
            )
            return session.execute(stmt).scalars().all(), int(total or 0)

    def get_contact_message(self, user_id: str, message_id: int) -> Optional[ContactMessage]:
        with get_session() as session:
            stmt = select(ContactMessage).where(ContactMessage.user_id == user_id, ContactMessage.id == message_id)
            return session.execute(stmt).scalar_one_or_none()

    def update_contact_message(self, user_id: str, message_id: int, fields: dict) -> Optional[ContactMessage]:
        with get_session() as session:
            stmt = select(ContactMessage).where(ContactMessage.user_id == user_id, ContactMessage.id == message_id)
            entity = session.execute(stmt).scalar_one_or_none()
            if not entity:
                return None
            for key, value in fields.items():
                setattr(entity, key, value)
            entity.updated_at = _now()
            session.commit()
            session.refresh(entity)
            return entity

    def mark_contact_messages_read(self, user_id: str) -> int:
        with get_session() as session:
            result = session.execute(
                update(ContactMessage)
                .where(ContactMessage.user_id == user_id, ContactMessage.read.is_(False))
                .values(read=True, updated_at=_now())
            )
            session.commit()
            return int(result.rowcount or 0)

    def delete_contact_message(self, user_id: str, message_id: int) -> bool:
        with get_session() as session:
            result = session.execute(
                delete(ContactMessage).where(ContactMessage.user_id == user_id, ContactMessage.id == message_id)
            )
            session.commit()
            return bool(result.rowcount)

    def count_contact_messages(self, user_id: str, **filters) -> int:
        """Count the inbox rows matching ``status``, ``read`` and ``since`` when given."""
        clauses = [ContactMessage.user_id == user_id]
        if filters.get("status"):
            clauses.append(ContactMessage.status == filters["status"])
        if filters.get("read") is not None:
            clauses.append(ContactMessage.read.is_(bool(filters["read"])))
        if filters.get("since") is not None:
            clauses.append(ContactMessage.created_at >= filters["since"])
        with get_session() as session:
            return int(session.execute(select(func.count()).select_from(ContactMessage).where(*clauses)).scalar() or 0)
