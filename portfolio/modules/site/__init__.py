"""
Site Module
===========

Public landing page and the shared base layout the public templates extend.
"""

from flask import Blueprint

site_bp = Blueprint('site', __name__, template_folder='templates')

from . import routes

__all__ = ['site_bp']
