"""
Projects Admin Routes
=====================

Project portfolio management. ``technologies`` is accepted as a list or a
comma separated string and stored as a JSON list.
"""

from flask import render_template, request, redirect, url_for, session, jsonify
from . import projects_bp
from portfolio.core import get_store, db_log, StoreError
from portfolio.core.records import Project, RecordValidationError

TABLE = Project.TABLE

# ===== Database Helper Functions =====


def get_all_projects_db(limit=None):
    """All projects, newest first"""
    rows = get_store().select(TABLE, order_by='created_at', limit=limit)
    return [Project.from_row(row) for row in rows]


def get_project_db(project_id):
    row = get_store().select_one(TABLE, {'id': project_id})
    return Project.from_row(row) if row else None


def create_project_db(data):
    project = Project.from_row(data)
    project.id = get_store().insert(TABLE, project.to_row())
    return project


def update_project_db(project_id, data):
    """Replace a project's fields; False when the project does not exist"""
    project = Project.from_row(data)
    return get_store().update(TABLE, project.to_row(), {'id': project_id}) > 0


def delete_project_db(project_id):
    return get_store().delete(TABLE, {'id': project_id}) > 0


# ===== Routes =====

@projects_bp.route('/')
@projects_bp.route('/editor')
def projects_editor():
    """Projects editor - main interface"""
    if 'admin_id' not in session:
        return redirect(url_for('admin.login', next=request.path))
    return render_template('projects/projects_editor.html', projects=get_all_projects_db())


@projects_bp.route('/api/projects', methods=['GET'])
def get_projects():
    """Get all projects"""
    if 'admin_id' not in session:
        return jsonify({'error': 'Authentication required'}), 401

    try:
        return jsonify([project.to_dict() for project in get_all_projects_db()])
    except StoreError as e:
        return jsonify({'error': str(e)}), 500


@projects_bp.route('/api/projects/<int:project_id>', methods=['GET'])
def get_project(project_id):
    """Get single project"""
    if 'admin_id' not in session:
        return jsonify({'error': 'Authentication required'}), 401

    project = get_project_db(project_id)
    if project:
        return jsonify(project.to_dict())
    return jsonify({'error': 'Project not found'}), 404


@projects_bp.route('/api/projects', methods=['POST'])
def create_project():
    """Create new project"""
    if 'admin_id' not in session:
        return jsonify({'error': 'Authentication required'}), 401

    try:
        project = create_project_db(request.get_json(silent=True) or {})
    except RecordValidationError as e:
        return jsonify({'error': str(e)}), 400
    except StoreError as e:
        db_log('ERROR', 'projects', 'Could not create project', {'error': str(e)})
        return jsonify({'error': str(e)}), 500

    db_log('INFO', 'projects', f"Project created: {project.title}")
    return jsonify({'success': True, 'id': project.id}), 201


@projects_bp.route('/api/projects/<int:project_id>', methods=['PUT'])
def update_project(project_id):
    """Update project"""
    if 'admin_id' not in session:
        return jsonify({'error': 'Authentication required'}), 401

    try:
        success = update_project_db(project_id, request.get_json(silent=True) or {})
    except RecordValidationError as e:
        return jsonify({'error': str(e)}), 400
    except StoreError as e:
        db_log('ERROR', 'projects', 'Could not update project', {'id': project_id, 'error': str(e)})
        return jsonify({'error': str(e)}), 500

    if success:
        return jsonify({'success': True, 'message': 'Project updated successfully'})
    return jsonify({'error': 'Project not found'}), 404


@projects_bp.route('/api/projects/<int:project_id>', methods=['DELETE'])
def delete_project(project_id):
    """Delete project"""
    if 'admin_id' not in session:
        return jsonify({'error': 'Authentication required'}), 401

    try:
        if delete_project_db(project_id):
            db_log('INFO', 'projects', f"Project deleted: {project_id}")
            return jsonify({'success': True})
    except StoreError as e:
        return jsonify({'error': str(e)}), 500
    return jsonify({'error': 'Project not found'}), 404
