"""
Shared fixtures: an isolated app per test with its database, previews and
local blob store under a temporary directory.
"""

import io
import os
import shutil
import tempfile

import pytest
from flask import Flask
from PIL import Image

from portfolio import Portfolio


@pytest.fixture
def tmp_dir():
    """Create a temporary directory for test databases, cleaned up after."""
    d = tempfile.mkdtemp(prefix="portfolio-test-")
    yield d
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def app(tmp_dir):
    """Fully initialised Flask app with every module registered."""
    app = Flask(__name__, static_folder=os.path.join(tmp_dir, "static"))
    app.config["TESTING"] = True
    app.config["SECRET_KEY"] = "test-secret"
    app.config["DB_DIR"] = os.path.join(tmp_dir, "databases")
    app.config["STORAGE_TYPE"] = "local"
    Portfolio(app)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(app):
    """Test client with an admin session already open."""
    client = app.test_client()
    with client.session_transaction() as sess:
        sess["admin_id"] = 1
        sess["admin_email"] = "admin@example.com"
    return client


@pytest.fixture
def store(app):
    return app.extensions["portfolio"].store


def _encode_image(size=(1600, 900), fmt="JPEG", color=(200, 40, 40), pad_to=None):
    """Encode a solid image; ``pad_to`` appends bytes after the image data."""
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format=fmt)
    data = buf.getvalue()
    if pad_to is not None and len(data) < pad_to:
        data += b"\0" * (pad_to - len(data))
    return data


@pytest.fixture
def make_image():
    return _encode_image

