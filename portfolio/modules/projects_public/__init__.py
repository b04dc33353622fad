"""
Projects Public Module
======================

Public project listing page and API.
"""

from .routes import projects_public_bp

__all__ = ['projects_public_bp']
