from __future__ import annotations

from pathlib import Path

from cardfolio.repositories.sql_repository import SQLRepository

SVG_LOGO = (
    b'<?xml version="1.0" encoding="UTF-8"?>\n'
    b'<svg xmlns="http://www.w3.org/2000/svg" width="32" height="32" viewBox="0 0 32 32">'
    b'<circle cx="16" cy="16" r="14" fill="#663399"/></svg>'
)


def _auth(token):
    return {"x-auth-token": token}


def _disk_path(db_env, public_path):
    return Path(db_env) / "uploads" / public_path[len("/uploads/"):]


# ------------------------------------------------------------------ blog
def test_blog_category_created_once(client, signup):
    token, _ = signup()
    resp = client.post("/api/blog-categories", json={"name": "Travel"}, headers=_auth(token))
    assert resp.status_code == 200
    assert resp.json()["data"] == {"id": 1, "name": "Travel"}

    listed = client.get("/api/blog-categories", headers=_auth(token)).json()["data"]
    assert listed == [{"id": 1, "name": "Travel"}]

    resp = client.post("/api/blog-categories", json={"name": "travel "}, headers=_auth(token))
    assert resp.status_code == 400
    assert resp.json()["message"] == "Category already exists"

    resp = client.post("/api/blog-categories", json={"name": "   "}, headers=_auth(token))
    assert resp.json()["message"] == "Category name is required"


def test_blog_categories_bulk_save_is_idempotent(client, signup):
    token, _ = signup()
    client.post("/api/blog-categories", json={"name": "Travel"}, headers=_auth(token))
    payload = [{"id": 1, "name": "Travel"}, {"name": "Food"}]
    first = client.patch("/api/blog-categories", json=payload, headers=_auth(token)).json()["data"]
    assert first == [{"id": 1, "name": "Travel"}, {"id": 2, "name": "Food"}]

    second = client.patch("/api/blog-categories", json=first, headers=_auth(token)).json()["data"]
    assert second == first

    resp = client.patch("/api/blog-categories", json=[{"name": "A"}, {"name": "a"}], headers=_auth(token))
    assert resp.status_code == 400


def test_blog_categories_bulk_save_reissues_repeated_ids(client, signup):
    token, _ = signup()
    payload = [{"id": 1, "name": "Travel"}, {"id": 1, "name": "Food"}]
    resp = client.patch("/api/blog-categories", json=payload, headers=_auth(token))
    assert resp.status_code == 200
    assert resp.json()["data"] == [{"id": 1, "name": "Travel"}, {"id": 2, "name": "Food"}]

    posts = [
        {"id": 3, "title": "One", "content": "a", "category": "Travel"},
        {"id": 3, "title": "Two", "content": "b", "category": "Food"},
    ]
    resp = client.patch("/api/blogs", json=posts, headers=_auth(token))
    assert resp.status_code == 200
    assert [p["id"] for p in resp.json()["data"]] == [3, 4]


def test_blog_category_rename_and_delete(client, signup):
    token, _ = signup()
    client.post("/api/blog-categories", json={"name": "Travel"}, headers=_auth(token))
    resp = client.put("/api/blog-categories/1", json={"name": "Trips"}, headers=_auth(token))
    assert resp.json()["data"]["name"] == "Trips"
    assert client.delete("/api/blog-categories/1", headers=_auth(token)).status_code == 200
    resp = client.delete("/api/blog-categories/1", headers=_auth(token))
    assert resp.status_code == 404
    assert resp.json()["message"] == "Category not found"


def test_blog_posts(client, signup):
    token, _ = signup()
    content = "x" * 200
    resp = client.post(
        "/api/blogs", json={"title": "Hello", "content": content, "category": "Travel"}, headers=_auth(token)
    )
    post = resp.json()["data"]
    assert post["id"] == 1
    assert post["excerpt"] == "x" * 150 + "..."
    assert post["date"]

    resp = client.put("/api/blogs/1", json={"title": "Hello again"}, headers=_auth(token))
    assert resp.json()["data"]["title"] == "Hello again"
    assert resp.json()["data"]["content"] == content

    resp = client.post("/api/blogs", json={"title": "No body", "category": "Travel"}, headers=_auth(token))
    assert resp.status_code == 400
    assert resp.json()["message"] == "Title, content and category are required"

    assert client.delete("/api/blogs/1", headers=_auth(token)).status_code == 200
    assert client.delete("/api/blogs/1", headers=_auth(token)).json()["message"] == "Blog post not found"


def test_blog_data_is_per_user(client, signup):
    alice, _ = signup()
    bob, _ = signup(email="bob@example.com", name="Bob")
    client.post("/api/blog-categories", json={"name": "Travel"}, headers=_auth(alice))
    assert client.get("/api/blog-categories", headers=_auth(bob)).json()["data"] == []


def test_sections_require_a_token(client):
    for path in ("/api/about", "/api/blogs", "/api/portfolio", "/api/resume", "/api/navbar"):
        resp = client.get(path)
        assert resp.status_code == 401, path


# ------------------------------------------------------------------ about
def test_about_defaults_and_list_ids(client, signup):
    token, _ = signup()
    about = client.get("/api/about", headers=_auth(token)).json()["data"]
    assert about["personal"]["freelance"] == "Available"
    assert about["services"] == []

    services = [{"title": "Design"}, {"id": 5, "title": "Development"}]
    saved = client.patch("/api/about/services", json=services, headers=_auth(token)).json()["data"]
    assert [s["id"] for s in saved] == [6, 5]

    pricing = [{"name": "Basic", "price": 10, "features": [{"text": "Email"}, {"text": "Phone", "included": False}]}]
    saved = client.patch("/api/about/pricing", json=pricing, headers=_auth(token)).json()["data"]
    assert saved[0]["id"] == 1
    assert [f["id"] for f in saved[0]["features"]] == [1, 2]

    resp = client.patch("/api/about/personal", json={"name": "Alice"}, headers=_auth(token))
    assert resp.json()["data"]["name"] == "Alice"
    about = client.get("/api/about", headers=_auth(token)).json()["data"]
    assert about["personal"]["name"] == "Alice"
    assert len(about["services"]) == 2


def test_about_list_repeated_ids_are_reissued(client, signup):
    token, _ = signup()
    services = [{"id": 2, "title": "Design"}, {"id": 2, "title": "Development"}, {"title": "Hosting"}]
    saved = client.patch("/api/about/services", json=services, headers=_auth(token)).json()["data"]
    assert [s["id"] for s in saved] == [2, 3, 4]

    stored = client.get("/api/about", headers=_auth(token)).json()["data"]["services"]
    assert [s["title"] for s in stored if s["id"] == 2] == ["Design"]


def test_about_image_upload(client, signup, make_png, db_env):
    token, user = signup()
    resp = client.post(
        "/api/about/upload",
        files={"image": ("team.png", make_png(), "image/png")},
        headers=_auth(token),
    )
    body = resp.json()
    assert resp.status_code == 200
    assert body["imageUrl"].startswith(f"/uploads/about/{user['id']}/")
    assert body["data"]["imageUrl"] == body["imageUrl"]
    assert _disk_path(db_env, body["imageUrl"]).is_file()
    assert client.get(body["imageUrl"]).status_code == 200


def test_upload_rejects_non_images(client, signup):
    token, _ = signup()
    resp = client.post(
        "/api/blogs/upload",
        files={"image": ("notes.txt", b"hello" * 100, "text/plain")},
        headers=_auth(token),
    )
    assert resp.status_code == 400
    assert resp.json()["message"] == "Only image files are allowed"

    resp = client.post(
        "/api/blogs/upload",
        files={"image": ("fake.png", b"not really a png" * 20, "image/png")},
        headers=_auth(token),
    )
    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid image file"


# ------------------------------------------------------------------ portfolio
def test_portfolio_publish_controls_public_view(client, signup):
    token, user = signup()
    public_url = f"/api/portfolio/public/{user['id']}"
    assert client.get(public_url).status_code == 404

    resp = client.put("/api/portfolio/publish", json={"isPublished": True}, headers=_auth(token))
    assert resp.json()["message"] == "Portfolio published successfully"
    resp = client.get(public_url)
    assert resp.status_code == 200
    assert resp.json()["data"]["isPublished"] is True

    client.put("/api/portfolio/publish", json={"isPublished": False}, headers=_auth(token))
    assert client.get(public_url).json()["message"] == "Portfolio not found"
    assert client.get("/api/portfolio/public/nobody").status_code == 404


def test_portfolio_categories_and_projects(client, signup):
    token, _ = signup()
    resp = client.post("/api/portfolio/categories", json={"name": "Web"}, headers=_auth(token))
    assert resp.json()["data"]["id"] == 1
    resp = client.post("/api/portfolio/categories", json={"name": "WEB"}, headers=_auth(token))
    assert resp.status_code == 400
    assert resp.json()["message"] == "Category with this name already exists"

    resp = client.post("/api/portfolio/projects", json={"title": " "}, headers=_auth(token))
    assert resp.json()["message"] == "Project title is required"

    resp = client.post(
        "/api/portfolio/projects",
        json={"title": "Shop", "category": "Web", "technologies": ["python"], "status": "completed"},
        headers=_auth(token),
    )
    project = resp.json()["data"]
    assert project["id"] == 1

    resp = client.put("/api/portfolio/projects/1", json={**project, "client": "ACME"}, headers=_auth(token))
    assert resp.json()["data"]["client"] == "ACME"

    bulk = {"projects": [project, {"title": "Blog"}]}
    saved = client.post("/api/portfolio/projects/bulk", json=bulk, headers=_auth(token)).json()["data"]
    assert [p["id"] for p in saved] == [1, 2]

    resp = client.put("/api/portfolio/settings", json={"template": "classic"}, headers=_auth(token))
    assert resp.json()["data"]["template"] == "classic"
    assert client.delete("/api/portfolio/projects/9", headers=_auth(token)).status_code == 404


def test_portfolio_project_image_removed_with_project(client, signup, make_png, db_env):
    token, _ = signup()
    path = client.post(
        "/api/portfolio/upload-image",
        files={"image": ("shot.png", make_png(), "image/png")},
        headers=_auth(token),
    ).json()["imageUrl"]
    client.post("/api/portfolio/projects", json={"title": "Shop", "image": path}, headers=_auth(token))
    assert _disk_path(db_env, path).is_file()

    client.delete("/api/portfolio/projects/1", headers=_auth(token))
    assert not _disk_path(db_env, path).exists()


# ------------------------------------------------------------------ resume
def test_resume_entries(client, signup):
    token, user = signup()
    resp = client.post("/api/resume/education", json={"degree": "BSc"}, headers=_auth(token))
    assert resp.json()["data"]["id"] == 1
    assert resp.json()["message"] == "Education entry added successfully"

    resp = client.put("/api/resume/education/1", json={"university": "MIT"}, headers=_auth(token))
    entry = resp.json()["data"]
    assert entry["degree"] == "BSc"
    assert entry["university"] == "MIT"

    client.post("/api/resume/work-experiences", json={"role": "Engineer"}, headers=_auth(token))
    resume = client.get("/api/resume", headers=_auth(token)).json()["data"]
    assert resume["workExperiences"][0]["role"] == "Engineer"

    resp = client.delete("/api/resume/education/1", headers=_auth(token))
    assert resp.status_code == 200
    resp = client.delete("/api/resume/education/1", headers=_auth(token))
    assert resp.json()["message"] == "Education entry not found"

    assert client.get(f"/api/resume/public/{user['id']}").status_code == 404
    client.put("/api/resume/publish", json={"isPublished": True}, headers=_auth(token))
    assert client.get(f"/api/resume/public/{user['id']}").status_code == 200


def test_resume_about_categories(client, signup):
    token, _ = signup()
    resp = client.post("/api/resume/about-categories", json={"title": " "}, headers=_auth(token))
    assert resp.status_code == 400
    assert resp.json()["message"] == "Category title is required"

    resp = client.post(
        "/api/resume/about-categories", json={"title": "Hobbies", "items": ["Chess"]}, headers=_auth(token)
    )
    assert resp.json()["message"] == "About category added successfully"
    created = resp.json()["data"]
    assert created == {"id": 1, "title": "Hobbies", "icon": "FiBook", "items": ["Chess"]}

    resp = client.put(
        "/api/resume/about-categories/1", json={"items": ["Chess", "Hiking"]}, headers=_auth(token)
    )
    assert resp.json()["data"]["title"] == "Hobbies"
    assert resp.json()["data"]["items"] == ["Chess", "Hiking"]
    resp = client.put("/api/resume/about-categories/1", json={"title": ""}, headers=_auth(token))
    assert resp.status_code == 400

    resume = client.get("/api/resume", headers=_auth(token)).json()["data"]
    assert resume["aboutCategories"][0]["items"] == ["Chess", "Hiking"]

    assert client.delete("/api/resume/about-categories/1", headers=_auth(token)).status_code == 200
    assert client.get("/api/resume/about-categories", headers=_auth(token)).json()["data"] == []


def test_resume_skills_levels_are_bounded(client, signup):
    token, _ = signup()
    resp = client.patch(
        "/api/resume/skills",
        json=[{"category": "Languages", "items": [{"name": "Python", "level": 120}]}],
        headers=_auth(token),
    )
    assert resp.status_code == 422
    resp = client.patch(
        "/api/resume/skills",
        json=[{"category": "Languages", "items": [{"name": "Python", "level": 90}]}],
        headers=_auth(token),
    )
    assert resp.json()["data"][0]["id"] == 1


def test_resume_logo_accepts_svg(client, signup):
    token, _ = signup()
    resp = client.post(
        "/api/resume/upload-logo",
        files={"logo": ("school.svg", SVG_LOGO, "image/svg+xml")},
        headers=_auth(token),
    )
    assert resp.status_code == 200
    assert resp.json()["logoUrl"].endswith(".svg")


# ------------------------------------------------------------------ navbar
def test_navbar_save_and_delete(client, signup, db_env):
    token, _ = signup()
    assert client.get("/api/navbar", headers=_auth(token)).json()["data"] == {"name": "", "logo": "", "content": ""}

    logo = client.post(
        "/api/navbar/upload-logo",
        files={"logo": ("logo.svg", SVG_LOGO, "image/svg+xml")},
        headers=_auth(token),
    ).json()["logoUrl"]
    resp = client.put("/api/navbar", json={"name": "Alice", "logo": logo}, headers=_auth(token))
    assert resp.json()["data"]["logo"] == logo

    assert client.delete("/api/navbar", headers=_auth(token)).status_code == 200
    assert not _disk_path(db_env, logo).exists()
    assert client.get("/api/navbar", headers=_auth(token)).json()["data"]["name"] == ""


# ------------------------------------------------------------------ profile
def test_profile_only_editable_by_owner(client, signup):
    alice, alice_user = signup()
    bob, _ = signup(email="bob@example.com", name="Bob")
    url = f"/api/profile/{alice_user['id']}"

    resp = client.put(url, json={"fullName": "Mallory"}, headers=_auth(bob))
    assert resp.status_code == 403
    assert resp.json()["message"] == "You can only edit your own profile"

    resp = client.put(url, json={"fullName": "Alice Smith", "userType": "official"}, headers=_auth(alice))
    assert resp.status_code == 200
    assert client.get(url, headers=_auth(bob)).json()["data"]["fullName"] == "Alice Smith"
    assert client.get("/api/profile/nobody", headers=_auth(alice)).status_code == 404


def test_profile_picture_replace_and_delete(client, signup, make_png, db_env):
    token, user = signup()
    url = f"/api/profile/{user['id']}/picture"
    first = client.post(url, files={"profilePicture": ("me.png", make_png(), "image/png")}, headers=_auth(token))
    first_path = first.json()["profilePicture"]
    assert first.json()["data"]["profilePicture"] == first_path
    assert _disk_path(db_env, first_path).is_file()

    second = client.post(url, files={"profilePicture": ("me2.png", make_png(), "image/png")}, headers=_auth(token))
    second_path = second.json()["profilePicture"]
    assert not _disk_path(db_env, first_path).exists()

    resp = client.delete(url, headers=_auth(token))
    assert resp.json()["data"]["profilePicture"] is None
    assert not _disk_path(db_env, second_path).exists()


def test_profile_picture_for_someone_else_is_not_kept(client, signup, make_png, db_env):
    _, alice_user = signup()
    bob, _ = signup(email="bob@example.com", name="Bob")
    resp = client.post(
        f"/api/profile/{alice_user['id']}/picture",
        files={"profilePicture": ("me.png", make_png(), "image/png")},
        headers=_auth(bob),
    )
    assert resp.status_code == 403
    profiles_dir = Path(db_env) / "uploads" / "profiles"
    assert not profiles_dir.exists() or [p for p in profiles_dir.rglob("*") if p.is_file()] == []


def test_uploads_are_stored_per_user(client, signup, make_png, db_env):
    token, user = signup()
    path = client.post(
        "/api/portfolio/upload-image",
        files={"image": ("shot.png", make_png(), "image/png")},
        headers=_auth(token),
    ).json()["imageUrl"]
    assert path.startswith(f"/uploads/portfolio/{user['id']}/")
    assert _disk_path(db_env, path).is_file()


def test_user_cannot_delete_another_users_upload(client, signup, make_png, db_env):
    alice, alice_user = signup()
    bob, _ = signup(email="bob@example.com", name="Bob")
    bob_path = client.post(
        "/api/portfolio/upload-image",
        files={"image": ("shot.png", make_png(), "image/png")},
        headers=_auth(bob),
    ).json()["imageUrl"]

    url = f"/api/profile/{alice_user['id']}"
    resp = client.put(url, json={"fullName": "Alice", "profilePicture": bob_path}, headers=_auth(alice))
    assert resp.status_code == 200
    assert client.delete(f"{url}/picture", headers=_auth(alice)).status_code == 200
    assert _disk_path(db_env, bob_path).is_file()

    client.post("/api/portfolio/projects", json={"title": "Stolen", "image": bob_path}, headers=_auth(alice))
    client.delete("/api/portfolio/projects/1", headers=_auth(alice))
    client.put("/api/navbar", json={"name": "Alice", "logo": bob_path}, headers=_auth(alice))
    client.delete("/api/navbar", headers=_auth(alice))
    assert _disk_path(db_env, bob_path).is_file()
    assert client.get(bob_path).status_code == 200


def test_public_card_qr_vcard_and_page(client, signup):
    token, user = signup()
    client.put(
        f"/api/profile/{user['id']}",
        json={"fullName": "Alice Smith", "userType": "official", "jobTitle": "CTO", "phone": "+1 555"},
        headers=_auth(token),
    )

    card = client.get(f"/api/profile/public/{user['id']}").json()["data"]
    assert card["fullName"] == "Alice Smith"
    assert card["shareUrl"] == f"http://cards.test/u/{user['id']}"

    qr = client.get(f"/api/profile/public/{user['id']}/qr.png")
    assert qr.headers["content-type"] == "image/png"
    assert qr.content.startswith(b"\x89PNG")

    vcf = client.get(f"/api/profile/public/{user['id']}/vcard.vcf").text
    assert vcf.startswith("BEGIN:VCARD\r\nVERSION:3.0\r\n")
    assert "FN:Alice Smith\r\n" in vcf
    assert "TITLE:CTO\r\n" in vcf

    page = client.get(f"/u/{user['id']}")
    assert page.status_code == 200
    assert "Alice Smith" in page.text
    assert client.get("/u/nobody").status_code == 404


def test_public_card_falls_back_to_account_name(client, signup):
    _, user = signup(name="Alice")
    card = client.get(f"/api/profile/public/{user['id']}").json()["data"]
    assert card["fullName"] == "Alice"


# ------------------------------------------------------------------ admin
def test_admin_premium_toggle(client, signup):
    admin_token, admin_user = signup(email="admin@example.com", name="Admin")
    user_token, user = signup(email="bob@example.com", name="Bob")

    assert client.get("/api/admin/users", headers=_auth(user_token)).status_code == 403

    SQLRepository().set_user_role(admin_user["id"], "admin")
    users = client.get("/api/admin/users", headers=_auth(admin_token)).json()["data"]
    assert {u["email"] for u in users} == {"admin@example.com", "bob@example.com"}

    resp = client.put(
        f"/api/admin/users/{user['id']}/premium", json={"isPremium": True}, headers=_auth(admin_token)
    )
    assert resp.json()["data"]["isPremium"] is True
    verified = client.get("/api/auth/verify", headers=_auth(user_token)).json()["data"]["user"]
    assert verified["isPremium"] is True
