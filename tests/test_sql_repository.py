"""
Smoke tests for the SQLRepository against a temporary SQLite database.
"""
from __future__ import annotations

from datetime import timedelta

from cardfolio.core.utils import utcnow
from cardfolio.repositories.sql_repository import SQLRepository


def test_user_lifecycle(db_env):
    repo = SQLRepository()
    user = repo.create_user("Alice", " Alice@Example.com ", "hash")
    assert user.email == "alice@example.com"
    assert repo.get_user_by_email("ALICE@example.com").id == user.id
    assert repo.get_user("") is None

    repo.set_user_role(user.id, "admin")
    updated = repo.set_user_premium(user.id, True)
    assert updated.role == "admin"
    assert updated.is_premium is True
    assert repo.set_user_premium("missing", True) is None


def test_pending_user_is_replaced_on_new_registration(db_env):
    repo = SQLRepository()
    expires = utcnow() + timedelta(minutes=10)
    repo.upsert_pending_user("bob@example.com", "Bob", "h1", "1111", expires)
    repo.upsert_pending_user("bob@example.com", "Bobby", "h2", "2222", expires)
    pending = repo.get_pending_user("bob@example.com")
    assert pending.name == "Bobby"
    assert pending.otp_code == "2222"
    repo.delete_pending_user("bob@example.com")
    assert repo.get_pending_user("bob@example.com") is None


def test_documents_upsert_and_delete(db_env):
    repo = SQLRepository()
    user = repo.create_user("Carol", "carol@example.com", "hash")
    assert repo.get_document(user.id, "navbar") is None
    repo.upsert_document(user.id, "navbar", {"name": "Carol"})
    repo.upsert_document(user.id, "navbar", {"name": "Carol B."})
    assert repo.get_document(user.id, "navbar") == {"name": "Carol B."}
    assert repo.delete_document(user.id, "navbar") is True
    assert repo.delete_document(user.id, "navbar") is False


def test_blog_ids_are_sequential_per_user(db_env):
    repo = SQLRepository()
    alice = repo.create_user("Alice", "alice@example.com", "hash")
    bob = repo.create_user("Bob", "bob@example.com", "hash")
    assert repo.create_blog_category(alice.id, "Travel").id == 1
    assert repo.create_blog_category(alice.id, "Food").id == 2
    assert repo.create_blog_category(bob.id, "Music").id == 1
    assert repo.find_blog_category_by_name(alice.id, "  travel ").id == 1
    assert repo.delete_blog_category(alice.id, 1) is True
    assert repo.create_blog_category(alice.id, "Tech").id == 3


def test_replace_blog_categories(db_env):
    repo = SQLRepository()
    user = repo.create_user("Dan", "dan@example.com", "hash")
    repo.create_blog_category(user.id, "Old")
    stored = repo.replace_blog_categories(user.id, [{"id": 4, "name": "A"}, {"id": 7, "name": "B"}])
    assert [(c.id, c.name) for c in stored] == [(4, "A"), (7, "B")]


def test_sessions(db_env):
    repo = SQLRepository()
    user = repo.create_user("Eve", "eve@example.com", "hash")
    repo.create_session(user.id, "tok-1", utcnow() + timedelta(hours=1))
    repo.create_session(user.id, "tok-2", utcnow() + timedelta(hours=1))
    assert repo.get_session("tok-1").user_id == user.id
    repo.delete_user_sessions(user.id)
    assert repo.get_session("tok-1") is None
    assert repo.get_session("tok-2") is None
