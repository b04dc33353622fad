"""
Skills Admin Module
===================

Skill list shown on the landing page. Skills are added and deleted,
never edited in place.
"""

from flask import Blueprint

skills_bp = Blueprint(
    'skills_admin',
    __name__,
    url_prefix='/admin/skills',
    template_folder='templates',
)

from . import routes

__all__ = ['skills_bp']
