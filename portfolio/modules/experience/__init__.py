"""
Experience Admin Module
=======================

Work history entries shown on the landing page.
"""

from flask import Blueprint

experience_bp = Blueprint(
    'experience_admin',
    __name__,
    url_prefix='/admin/experience',
    template_folder='templates',
)

from . import routes

__all__ = ['experience_bp']
