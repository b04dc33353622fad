"""
Blog Public Module
==================

Public blog listing and post pages.
"""

from .routes import blog_public_bp

__all__ = ['blog_public_bp']
