"""
Projects Admin Module
=====================

Admin interface for project portfolio management.
Plugs into the admin dashboard module.

Provides:
- Project creation and editing
- Technologies tagging
- Project images through the media intake
"""

from flask import Blueprint

projects_bp = Blueprint(
    'projects_admin',
    __name__,
    url_prefix='/admin/projects-editor',
    template_folder='templates',
)

from . import routes

__all__ = ['projects_bp']
