"""
Messages Module
===============

Contact form submissions.

Blueprints:
- messages_bp: public ``POST /contact`` endpoint used by the landing page form
- messages_admin_bp: admin inbox with processed/unprocessed filter and search
"""

from flask import Blueprint

messages_bp = Blueprint('messages', __name__)

messages_admin_bp = Blueprint(
    'messages_admin',
    __name__,
    url_prefix='/admin/messages',
    template_folder='templates',
)

from . import routes

__all__ = ['messages_bp', 'messages_admin_bp']
