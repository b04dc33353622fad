"""
Tests for the admin login flow and the content editor APIs.
Run with: pytest tests/test_admin_routes.py -v
"""

import io

import pytest
from werkzeug.security import generate_password_hash


# ---------------------------------------------------------------------------
# Login / admin creation
# ---------------------------------------------------------------------------

def test_first_admin_can_be_created_without_login(client, store):
    response = client.post("/admin/create-admin", data={
        "email": "Owner@Example.com", "password": "secret1", "confirm_password": "secret1",
    })
    assert response.status_code == 302
    admin = store.select_one("admin", {"email": "owner@example.com"})
    assert admin is not None
    assert admin["password_hash"] != "secret1"


def test_create_admin_locked_once_an_admin_exists(client, store):
    store.insert("admin", {"email": "a@example.com", "password_hash": generate_password_hash("secret1")})
    response = client.get("/admin/create-admin")
    assert response.status_code == 302
    assert "/admin/login" in response.headers["Location"]


def test_create_admin_rejects_mismatched_passwords(client, store):
    client.post("/admin/create-admin", data={
        "email": "a@example.com", "password": "secret1", "confirm_password": "secret2",
    })
    assert store.count("admin") == 0


def test_login_sets_session_and_follows_local_next(client, store):
    store.insert("admin", {"email": "a@example.com", "password_hash": generate_password_hash("secret1")})

    response = client.post("/admin/login?next=/admin/skills/",
                           data={"email": "a@example.com", "password": "secret1"})

    assert response.status_code == 302
    assert response.headers["Location"].endswith("/admin/skills/")
    with client.session_transaction() as sess:
        assert sess["admin_email"] == "a@example.com"


def test_login_ignores_external_next(client, store):
    store.insert("admin", {"email": "a@example.com", "password_hash": generate_password_hash("secret1")})
    response = client.post("/admin/login?next=//evil.example.com",
                           data={"email": "a@example.com", "password": "secret1"})
    assert "evil" not in response.headers["Location"]


def test_wrong_password_does_not_log_in(client, store):
    store.insert("admin", {"email": "a@example.com", "password_hash": generate_password_hash("secret1")})
    response = client.post("/admin/login", data={"email": "a@example.com", "password": "wrong"})
    assert response.status_code == 200
    with client.session_transaction() as sess:
        assert "admin_id" not in sess


def test_logout_clears_session(admin_client):
    admin_client.get("/admin/logout")
    assert admin_client.get("/admin/status").status_code == 401


def test_stats_counts_content(admin_client, store):
    store.insert("skills", {"name": "Python"})
    store.insert("contact_messages", {"name": "Ann", "email": "a@b.com", "message": "m" * 10})

    stats = admin_client.get("/admin/api/stats").get_json()

    assert stats["skills"] == 1
    assert stats["contact_messages"] == 1
    assert stats["unprocessed_messages"] == 1
    assert stats["projects"] == 0


# ---------------------------------------------------------------------------
# Blog posts
# ---------------------------------------------------------------------------

POSTS = "/admin/blog-editor/api/posts"


def test_blog_post_crud(admin_client):
    created = admin_client.post(POSTS, json={"title": "Hello World", "description": "**hi**"})
    assert created.status_code == 201
    post_id = created.get_json()["id"]
    assert created.get_json()["slug"] == "hello-world"

    post = admin_client.get(f"{POSTS}/{post_id}").get_json()
    assert post["description"] == "**hi**"

    updated = admin_client.put(f"{POSTS}/{post_id}", json={"title": "Renamed", "description": "x"})
    assert updated.get_json()["slug"] == "renamed"

    assert admin_client.delete(f"{POSTS}/{post_id}").status_code == 200
    assert admin_client.get(f"{POSTS}/{post_id}").status_code == 404


def test_blog_body_indent_survives_save(admin_client):
    post_id = admin_client.post(POSTS, json={"title": "Indented", "description": "    first para"}).get_json()["id"]
    assert admin_client.get(f"{POSTS}/{post_id}").get_json()["description"] == "    first para"


def test_blog_slugs_are_unique(admin_client):
    first = admin_client.post(POSTS, json={"title": "Same"}).get_json()
    second = admin_client.post(POSTS, json={"title": "Same"}).get_json()
    assert first["slug"] == "same"
    assert second["slug"] == "same-1"


def test_blog_post_without_title_is_rejected(admin_client):
    response = admin_client.post(POSTS, json={"description": "body"})
    assert response.status_code == 400
    assert "Title" in response.get_json()["error"]


def test_update_missing_post_is_404(admin_client):
    assert admin_client.put(f"{POSTS}/999", json={"title": "x"}).status_code == 404


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------

PROJECTS = "/admin/projects-editor/api/projects"


def test_project_crud_with_technologies(admin_client):
    created = admin_client.post(PROJECTS, json={"title": "Site", "technologies": "Python, Flask"})
    assert created.status_code == 201
    project_id = created.get_json()["id"]

    project = admin_client.get(f"{PROJECTS}/{project_id}").get_json()
    assert project["technologies"] == ["Python", "Flask"]

    admin_client.put(f"{PROJECTS}/{project_id}", json={"title": "Site", "technologies": ["Go"]})
    assert admin_client.get(f"{PROJECTS}/{project_id}").get_json()["technologies"] == ["Go"]

    assert admin_client.delete(f"{PROJECTS}/{project_id}").status_code == 200
    assert admin_client.delete(f"{PROJECTS}/{project_id}").status_code == 404


def test_project_update_missing_is_404(admin_client):
    assert admin_client.put(f"{PROJECTS}/42", json={"title": "x"}).status_code == 404


# ---------------------------------------------------------------------------
# Skills / experience
# ---------------------------------------------------------------------------

def test_skills_add_list_delete(admin_client):
    url = "/admin/skills/api/skills"
    skill_id = admin_client.post(url, json={"name": "Python", "icon": "Code2"}).get_json()["id"]
    assert [s["name"] for s in admin_client.get(url).get_json()] == ["Python"]
    assert admin_client.delete(f"{url}/{skill_id}").status_code == 200
    assert admin_client.get(url).get_json() == []


def test_skill_with_unknown_icon_is_rejected(admin_client):
    response = admin_client.post("/admin/skills/api/skills", json={"name": "Go", "icon": "Rocket"})
    assert response.status_code == 400


def test_experiences_listed_by_start_date(admin_client):
    url = "/admin/experience/api/experiences"
    admin_client.post(url, json={"title": "Junior", "start_date": "2018-01-01"})
    admin_client.post(url, json={"title": "Senior", "start_date": "2022-06-01"})
    admin_client.post(url, json={"title": "Mid", "start_date": "2020-03-01"})

    titles = [e["title"] for e in admin_client.get(url).get_json()]
    assert titles == ["Senior", "Mid", "Junior"]


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------

MESSAGES = "/admin/messages/api/messages"


@pytest.fixture
def inbox(store):
    store.insert("contact_messages", {"name": "Ada", "email": "ada@example.com",
                                      "message": "Question about engines"})
    store.insert("contact_messages", {"name": "Grace", "email": "grace@navy.mil",
                                      "message": "Found a bug in the relay", "is_processed": 1})
    return store


def test_messages_filter(admin_client, inbox):
    assert len(admin_client.get(MESSAGES).get_json()) == 2
    processed = admin_client.get(MESSAGES + "?filter=processed").get_json()
    assert [m["name"] for m in processed] == ["Grace"]
    unprocessed = admin_client.get(MESSAGES + "?filter=unprocessed").get_json()
    assert [m["name"] for m in unprocessed] == ["Ada"]


def test_messages_search(admin_client, inbox):
    found = admin_client.get(MESSAGES + "?search=ENGINE").get_json()
    assert [m["name"] for m in found] == ["Ada"]
    found = admin_client.get(MESSAGES + "?filter=unprocessed&search=relay").get_json()
    assert found == []


def test_messages_unknown_filter_is_rejected(admin_client, inbox):
    assert admin_client.get(MESSAGES + "?filter=spam").status_code == 400


def test_toggle_processed(admin_client, inbox):
    ada = admin_client.get(MESSAGES + "?search=ada").get_json()[0]
    response = admin_client.post(f"{MESSAGES}/{ada['id']}/toggle-processed")
    assert response.get_json()["is_processed"] is True
    response = admin_client.post(f"{MESSAGES}/{ada['id']}/toggle-processed")
    assert response.get_json()["is_processed"] is False
    assert admin_client.post(f"{MESSAGES}/999/toggle-processed").status_code == 404


# ---------------------------------------------------------------------------
# Site info / CV
# ---------------------------------------------------------------------------

INFO = "/admin/site-info/api/info"


def test_site_info_single_field_update(admin_client, store):
    response = admin_client.put(INFO, json={"field": "github_url", "value": "https://github.com/me"})
    assert response.status_code == 200
    admin_client.put(INFO, json={"field": "phone", "value": "+1 555"})

    info = admin_client.get(INFO).get_json()
    assert info["github_url"] == "https://github.com/me"
    assert info["phone"] == "+1 555"
    assert store.count("site_info") == 1


def test_site_info_rejects_unknown_field(admin_client):
    response = admin_client.put(INFO, json={"field": "id", "value": "7"})
    assert response.status_code == 400


def test_site_info_validates_email(admin_client):
    response = admin_client.put(INFO, json={"field": "email", "value": "nope"})
    assert response.status_code == 400


def test_cv_upload_stores_pdf_and_saves_url(admin_client, app):
    response = admin_client.post(
        "/admin/site-info/upload-cv",
        data={"cv": (io.BytesIO(b"%PDF-1.4 test"), "resume.pdf")},
        content_type="multipart/form-data",
    )
    assert response.status_code == 200
    result = response.get_json()
    assert result["filename"].startswith("cv_")
    assert result["filename"].endswith(".pdf")
    assert result["cv_url"] == f"/static/images/{result['filename']}"
    assert admin_client.get(INFO).get_json()["cv_url"] == result["cv_url"]


def test_cv_upload_rejects_non_pdf(admin_client):
    response = admin_client.post(
        "/admin/site-info/upload-cv",
        data={"cv": (io.BytesIO(b"\x89PNG"), "resume.png")},
        content_type="multipart/form-data",
    )
    assert response.status_code == 400
