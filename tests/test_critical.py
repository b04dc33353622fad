"""
Critical Integration Tests for the Portfolio app
================================================

Focused tests covering the integration points most likely to break.
Run with: pytest tests/test_critical.py -v

Install test dependencies with: pip install -e ".[test]"
"""

import os
import shutil
import tempfile
from unittest.mock import MagicMock

import pytest
from flask import Flask

from portfolio import Portfolio
from portfolio.app import create_app
from portfolio.core.storage import LocalBlobStore, SpacesBlobStore


# ---------------------------------------------------------------------------
# 1. Initialisation -- Portfolio(app) does not raise
# ---------------------------------------------------------------------------

def test_extension_initialisation(tmp_dir):
    """Portfolio(app) boots without errors and stores itself on the app."""
    app = Flask(__name__)
    app.config["TESTING"] = True
    app.config["DB_DIR"] = tmp_dir

    portfolio = Portfolio(app)

    assert "portfolio" in app.extensions
    assert app.extensions["portfolio"] is portfolio
    assert isinstance(portfolio.blob_store, LocalBlobStore)


# ---------------------------------------------------------------------------
# 2. Config resolution -- paths derive from DB_DIR
# ---------------------------------------------------------------------------

def test_config_paths_follow_db_dir(app):
    db_dir = app.config["DB_DIR"]
    assert app.config["PORTFOLIO_DB"] == os.path.join(db_dir, "portfolio.db")
    assert app.config["PREVIEW_DIR"] == os.path.join(db_dir, "previews")
    assert app.config["MAX_IMAGE_SIZE"] == 2 * 1024 * 1024
    assert app.config["IMAGE_ASPECT_RATIO"] == pytest.approx(16 / 9)


def test_explicit_config_wins(tmp_dir):
    app = create_app({
        "TESTING": True,
        "DB_DIR": tmp_dir,
        "PORTFOLIO_DB": os.path.join(tmp_dir, "custom.db"),
        "BRAND_NAME": "Jane Doe",
    })
    assert app.config["PORTFOLIO_DB"].endswith("custom.db")
    assert app.config["BRAND_NAME"] == "Jane Doe"
    assert os.path.exists(os.path.join(tmp_dir, "custom.db"))


def test_cloud_storage_selected_from_config(tmp_dir):
    app = create_app({
        "TESTING": True,
        "DB_DIR": tmp_dir,
        "STORAGE_TYPE": "cloud",
        "DO_SPACES_REGION": "fra1",
        "DO_SPACES_NAME": "space",
    })
    blob_store = app.extensions["portfolio"].blob_store
    assert isinstance(blob_store, SpacesBlobStore)
    assert blob_store.public_url("a.jpg") == "https://space.fra1.digitaloceanspaces.com/uploads/images/a.jpg"


def test_collaborators_can_be_injected(tmp_dir):
    blob_store = MagicMock()
    app = create_app({"TESTING": True, "DB_DIR": tmp_dir}, blob_store=blob_store)
    assert app.extensions["portfolio"].blob_store is blob_store


# ---------------------------------------------------------------------------
# 3. Blueprint registration -- every module is registered
# ---------------------------------------------------------------------------

EXPECTED_MODULES = [
    "dashboard",
    "site",
    "blog",
    "blog_public",
    "projects",
    "projects_public",
    "skills",
    "experience",
    "messages",
    "site_info",
    "media",
]


def test_all_blueprints_registered(app):
    registered = app.extensions["portfolio"].get_registered_modules()

    for mod in EXPECTED_MODULES:
        assert mod in registered, (
            f"Module '{mod}' was not registered. Registered: {registered}"
        )
    assert len(registered) == len(EXPECTED_MODULES)


def test_feature_toggle_skips_module(tmp_dir):
    app = Flask(__name__)
    app.config["DB_DIR"] = tmp_dir
    portfolio = Portfolio(app, {"features": {"skills": False}})

    assert "skills" not in portfolio.get_registered_modules()
    rules = [rule.rule for rule in app.url_map.iter_rules()]
    assert not any(rule.startswith("/admin/skills") for rule in rules)


# ---------------------------------------------------------------------------
# 4. Template context -- portfolio_config and brand_name are injected
# ---------------------------------------------------------------------------

def test_template_context_injection(app):
    with app.test_request_context("/"):
        ctx = {}
        for func in app.template_context_processors[None]:
            ctx.update(func())

        assert isinstance(ctx["portfolio_config"], dict)
        assert isinstance(ctx["brand_name"], str)
        assert len(ctx["brand_name"]) > 0
        assert callable(ctx["current_year"])


# ---------------------------------------------------------------------------
# 5. Database directory creation
# ---------------------------------------------------------------------------

def test_database_dir_creation():
    """_setup_database_dir creates the configured DB_DIR on disk."""
    d = tempfile.mkdtemp(prefix="portfolio-dbtest-")
    target = os.path.join(d, "sub", "databases")

    try:
        app = Flask(__name__)
        app.config["TESTING"] = True
        app.config["DB_DIR"] = target

        Portfolio(app)

        assert os.path.isdir(target), f"DB_DIR was not created at {target}"
        assert os.path.exists(os.path.join(target, "portfolio.db"))
    finally:
        shutil.rmtree(d, ignore_errors=True)


# ---------------------------------------------------------------------------
# 6. Admin auth guard -- unauthenticated requests are turned away
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("path", [
    "/admin/",
    "/admin/blog-editor/",
    "/admin/projects-editor/",
    "/admin/skills/",
    "/admin/experience/",
    "/admin/messages/",
    "/admin/site-info/",
])
def test_admin_pages_redirect_to_login(client, path):
    response = client.get(path, follow_redirects=False)
    assert response.status_code == 302, (
        f"Expected 302 redirect, got {response.status_code}"
    )
    assert "/admin/login" in response.headers.get("Location", "")


@pytest.mark.parametrize("method,path", [
    ("get", "/admin/blog-editor/api/posts"),
    ("post", "/admin/projects-editor/api/projects"),
    ("post", "/admin/skills/api/skills"),
    ("get", "/admin/messages/api/messages"),
    ("put", "/admin/site-info/api/info"),
    ("post", "/admin/media/intakes"),
])
def test_admin_api_requires_session(client, method, path):
    response = getattr(client, method)(path, json={})
    assert response.status_code == 401


# ---------------------------------------------------------------------------
# 7. Template filters -- custom Jinja filters are registered
# ---------------------------------------------------------------------------

def test_template_filters_registered(app):
    """A missing filter causes TemplateAssertionError at render time."""
    assert "format_blog_content" in app.jinja_env.filters
    rendered = app.jinja_env.filters["format_blog_content"]("**hi**<script>x</script>")
    assert str(rendered) == "<strong>hi</strong>"


# ---------------------------------------------------------------------------
# 8. Every page renders
# ---------------------------------------------------------------------------

def test_public_pages_render(client):
    for path in ("/", "/blog/", "/projects/"):
        response = client.get(path)
        assert response.status_code == 200, path


def test_admin_pages_render(admin_client):
    for path in ("/admin/", "/admin/blog-editor/", "/admin/projects-editor/",
                 "/admin/skills/", "/admin/experience/", "/admin/messages/",
                 "/admin/site-info/"):
        response = admin_client.get(path)
        assert response.status_code == 200, path
