"""
Portfolio Modules
=================

Flask blueprint modules for the public site and the admin panel.
"""

__all__ = [
    'dashboard', 'site', 'blog', 'blog_public', 'projects', 'projects_public',
    'skills', 'experience', 'messages', 'site_info', 'media',
]
