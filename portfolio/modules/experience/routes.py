"""
Experience Admin Routes
=======================

Entries are listed by ``start_date``, most recent first. Dates are stored
as the ISO strings the form submits, so they sort as text.
"""

from flask import render_template, request, redirect, url_for, session, jsonify
from . import experience_bp
from portfolio.core import get_store, db_log, StoreError
from portfolio.core.records import Experience, RecordValidationError

TABLE = Experience.TABLE


def get_all_experiences_db():
    rows = get_store().select(TABLE, order_by='start_date')
    return [Experience.from_row(row) for row in rows]


def create_experience_db(data):
    experience = Experience.from_row(data)
    experience.id = get_store().insert(TABLE, experience.to_row())
    return experience


def delete_experience_db(experience_id):
    return get_store().delete(TABLE, {'id': experience_id}) > 0


@experience_bp.route('/')
def experience_editor():
    if 'admin_id' not in session:
        return redirect(url_for('admin.login', next=request.path))
    return render_template('experience/experience_editor.html', experiences=get_all_experiences_db())


@experience_bp.route('/api/experiences', methods=['GET'])
def get_experiences():
    if 'admin_id' not in session:
        return jsonify({'error': 'Authentication required'}), 401

    try:
        return jsonify([experience.to_dict() for experience in get_all_experiences_db()])
    except StoreError as e:
        return jsonify({'error': str(e)}), 500


@experience_bp.route('/api/experiences', methods=['POST'])
def create_experience():
    """Add an experience entry"""
    if 'admin_id' not in session:
        return jsonify({'error': 'Authentication required'}), 401

    try:
        experience = create_experience_db(request.get_json(silent=True) or {})
    except RecordValidationError as e:
        return jsonify({'error': str(e)}), 400
    except StoreError as e:
        db_log('ERROR', 'experience', 'Could not create experience', {'error': str(e)})
        return jsonify({'error': str(e)}), 500

    db_log('INFO', 'experience', f"Experience added: {experience.title}")
    return jsonify({'success': True, 'id': experience.id}), 201


@experience_bp.route('/api/experiences/<int:experience_id>', methods=['DELETE'])
def delete_experience(experience_id):
    if 'admin_id' not in session:
        return jsonify({'error': 'Authentication required'}), 401

    try:
        if delete_experience_db(experience_id):
            return jsonify({'success': True})
    except StoreError as e:
        return jsonify({'error': str(e)}), 500
    return jsonify({'error': 'Experience not found'}), 404
