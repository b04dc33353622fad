"""
Dashboard Module
================

Admin dashboard interface for the portfolio.

Provides core admin functionality:
- Admin authentication (login/logout)
- Admin dashboard with content counts
- First admin creation

This is the foundation module that the content editors plug into.
"""

from flask import Blueprint

# Blueprint name is 'admin' so editors can redirect to 'admin.login'
dashboard_bp = Blueprint(
    'admin',
    __name__,
    url_prefix='/admin',
    template_folder='templates',
)

# Import routes after blueprint is created
from . import routes

__all__ = ['dashboard_bp']
