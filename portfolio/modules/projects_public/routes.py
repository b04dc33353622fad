"""
Projects Public Routes
======================

Public-facing project portfolio page and API.
"""

from flask import Blueprint, render_template, jsonify

projects_public_bp = Blueprint('projects', __name__, url_prefix='/projects', template_folder='templates')


@projects_public_bp.route('/')
def projects_list():
    """Public projects listing, newest first"""
    from portfolio.modules.projects.routes import get_all_projects_db
    return render_template('projects_public/projects.html', projects=get_all_projects_db())


@projects_public_bp.route('/api/projects', methods=['GET'])
def get_projects():
    """Get projects API - public endpoint"""
    from portfolio.modules.projects.routes import get_all_projects_db
    return jsonify([project.to_dict() for project in get_all_projects_db()])
