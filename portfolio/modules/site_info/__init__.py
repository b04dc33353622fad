"""
Site Info Admin Module
======================

Single-row contact details and social links shown in the site footer,
plus CV upload.
"""

from flask import Blueprint

site_info_bp = Blueprint(
    'site_info_admin',
    __name__,
    url_prefix='/admin/site-info',
    template_folder='templates',
)

from . import routes

__all__ = ['site_info_bp']
