"""SQLAlchemy models for accounts, sessions and the per-user site content."""
from __future__ import annotations

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    JSON,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from .session import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String(32), primary_key=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(Text, nullable=False)
    role = Column(String(16), default="user", nullable=False)
    is_premium = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    documents = relationship("SectionDocument", back_populates="user", cascade="all,delete-orphan")


class PendingUser(Base):
    __tablename__ = "pending_users"

    email = Column(String(255), primary_key=True)
    name = Column(String(255), nullable=False)
    password_hash = Column(Text, nullable=False)
    otp_code = Column(String(8), nullable=False)
    otp_expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class PasswordReset(Base):
    __tablename__ = "password_resets"

    user_id = Column(String(32), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    code = Column(String(8), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)


class UserSession(Base):
    __tablename__ = "sessions"

    token = Column(String(128), primary_key=True)
    user_id = Column(String(32), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class SectionDocument(Base):
    """One JSON document per (user, section): profile, about, portfolio, resume, navbar."""

    __tablename__ = "section_documents"
    __table_args__ = (UniqueConstraint("user_id", "section", name="uq_section_documents_user_section"),)

    pk = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(32), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    section = Column(String(32), nullable=False)
    data = Column(JSON, nullable=False, default=dict)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    user = relationship("User", back_populates="documents")


class BlogCategory(Base):
    __tablename__ = "blog_categories"
    __table_args__ = (UniqueConstraint("user_id", "id", name="uq_blog_categories_user_id"),)

    pk = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(32), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    id = Column(Integer, nullable=False)
    name = Column(String(120), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class BlogPost(Base):
    __tablename__ = "blog_posts"
    __table_args__ = (UniqueConstraint("user_id", "id", name="uq_blog_posts_user_id"),)

    pk = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(32), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    id = Column(Integer, nullable=False)
    title = Column(String(255), nullable=False)
    image = Column(Text, nullable=False, default="")
    category = Column(String(120), nullable=False)
    content = Column(Text, nullable=False)
    excerpt = Column(Text, nullable=False, default="")
    date = Column(String(10), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class ContactMessage(Base):
    """A message sent through a public card's contact form, kept in the owner's inbox."""

    __tablename__ = "contact_messages"
    __table_args__ = (
        Index("ix_contact_messages_user_created", "user_id", "created_at"),
        Index("ix_contact_messages_user_status", "user_id", "status"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(32), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(64), nullable=False, default="")
    subject = Column(String(255), nullable=False, default="")
    message = Column(Text, nullable=False)
    status = Column(String(16), nullable=False, default="pending")
    read = Column(Boolean, nullable=False, default=False)
    reply_message = Column(Text, nullable=False, default="")
    replied_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
