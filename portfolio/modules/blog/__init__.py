"""
Blog Admin Module
=================

Admin interface for blog post management.
Plugs into the admin dashboard module.

Provides:
- Post creation and editing
- Slug generation with uniqueness checking
- Cover images through the media intake
"""

from flask import Blueprint

blog_bp = Blueprint(
    'blog_admin',
    __name__,
    url_prefix='/admin/blog-editor',
    template_folder='templates',
)

from . import routes

__all__ = ['blog_bp']
