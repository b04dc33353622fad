"""
Site Routes
===========
"""

import logging

from flask import render_template
from . import site_bp
from portfolio.core import get_store, StoreError
from portfolio.core.records import Project, BlogPost, Skill

logger = logging.getLogger(__name__)

LATEST_COUNT = 3


def get_landing_content():
    """Everything the landing page shows, newest first"""
    from portfolio.modules.experience.routes import get_all_experiences_db
    from portfolio.modules.site_info.routes import get_site_info_db

    store = get_store()
    return {
        'projects': [Project.from_row(row) for row in
                     store.select(Project.TABLE, order_by='created_at', limit=LATEST_COUNT)],
        'posts': [BlogPost.from_row(row) for row in
                  store.select(BlogPost.TABLE, order_by='created_at', limit=LATEST_COUNT)],
        'skills': [Skill.from_row(row) for row in store.select(Skill.TABLE, order_by='created_at')],
        'experiences': get_all_experiences_db(),
        'site_info': get_site_info_db(),
    }


@site_bp.route('/')
def index():
    """Landing page"""
    try:
        content = get_landing_content()
    except StoreError as e:
        logger.error("Could not load landing page content: %s", e)
        raise
    return render_template('site/index.html', **content)
