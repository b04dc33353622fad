"""
Media Module
============

Admin image intake: select an image, crop it at a fixed aspect ratio, and
store the re-encoded JPEG in the blob store.

Provides:
- Intake handles with explicit state (idle, cropping, rasterizing, uploading, done)
- Temporary previews for the cropper
- Upload with a random base-36 object name
"""

from flask import Blueprint

media_bp = Blueprint(
    'media',
    __name__,
    url_prefix='/admin/media',
)

from . import routes

__all__ = ['media_bp']
