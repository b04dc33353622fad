"""
Skills Admin Routes
===================
"""

from flask import render_template, request, redirect, url_for, session, jsonify
from . import skills_bp
from portfolio.core import get_store, db_log, StoreError
from portfolio.core.records import Skill, SKILL_ICONS, RecordValidationError

TABLE = Skill.TABLE


def get_all_skills_db():
    """All skills, newest first"""
    return [Skill.from_row(row) for row in get_store().select(TABLE, order_by='created_at')]


def create_skill_db(data):
    skill = Skill.from_row(data)
    skill.id = get_store().insert(TABLE, skill.to_row())
    return skill


def delete_skill_db(skill_id):
    return get_store().delete(TABLE, {'id': skill_id}) > 0


@skills_bp.route('/')
def skills_editor():
    if 'admin_id' not in session:
        return redirect(url_for('admin.login', next=request.path))
    return render_template('skills/skills_editor.html', skills=get_all_skills_db(), icons=SKILL_ICONS)


@skills_bp.route('/api/skills', methods=['GET'])
def get_skills():
    if 'admin_id' not in session:
        return jsonify({'error': 'Authentication required'}), 401

    try:
        return jsonify([skill.to_dict() for skill in get_all_skills_db()])
    except StoreError as e:
        return jsonify({'error': str(e)}), 500


@skills_bp.route('/api/skills', methods=['POST'])
def create_skill():
    """Add a skill"""
    if 'admin_id' not in session:
        return jsonify({'error': 'Authentication required'}), 401

    try:
        skill = create_skill_db(request.get_json(silent=True) or {})
    except RecordValidationError as e:
        return jsonify({'error': str(e)}), 400
    except StoreError as e:
        db_log('ERROR', 'skills', 'Could not create skill', {'error': str(e)})
        return jsonify({'error': str(e)}), 500

    db_log('INFO', 'skills', f"Skill added: {skill.name}")
    return jsonify({'success': True, 'id': skill.id}), 201


@skills_bp.route('/api/skills/<int:skill_id>', methods=['DELETE'])
def delete_skill(skill_id):
    if 'admin_id' not in session:
        return jsonify({'error': 'Authentication required'}), 401

    try:
        if delete_skill_db(skill_id):
            return jsonify({'success': True})
    except StoreError as e:
        return jsonify({'error': str(e)}), 500
    return jsonify({'error': 'Skill not found'}), 404
