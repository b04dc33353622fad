"""
Site Info Routes
================

The site_info table holds one row. Fields are saved one at a time from
the admin form; the row is created on the first save.
"""

import time

from flask import render_template, request, redirect, url_for, session, jsonify
from . import site_info_bp
from portfolio.core import get_store, get_blob_store, db_log, StoreError
from portfolio.core.records import SiteInfo, RecordValidationError
from portfolio.core.storage import StorageError

TABLE = SiteInfo.TABLE


def get_site_info_db():
    """The site info row, or an empty record when none was saved yet"""
    rows = get_store().select(TABLE, order_by='id', descending=False, limit=1)
    return SiteInfo.from_row(rows[0]) if rows else SiteInfo()


def update_site_info_field_db(field, value):
    """Save a single editable field, creating the row if needed"""
    if field not in SiteInfo.EDITABLE_FIELDS:
        raise RecordValidationError(f"Field cannot be edited: {field}")

    # Validate the field in isolation
    record = SiteInfo.from_row({field: value})
    value = getattr(record, field)

    store = get_store()
    current = get_site_info_db()
    if current.id is None:
        store.insert(TABLE, {field: value})
    else:
        store.update(TABLE, {field: value}, {'id': current.id})
    return value


def cv_filename():
    return f"cv_{int(time.time() * 1000)}.pdf"


def is_pdf(filename, data):
    return filename.lower().endswith('.pdf') and data.startswith(b'%PDF')


@site_info_bp.route('/')
def site_info_editor():
    if 'admin_id' not in session:
        return redirect(url_for('admin.login', next=request.path))
    return render_template(
        'site_info/site_info.html',
        info=get_site_info_db(),
        fields=SiteInfo.EDITABLE_FIELDS,
    )


@site_info_bp.route('/api/info', methods=['GET'])
def get_info():
    if 'admin_id' not in session:
        return jsonify({'error': 'Authentication required'}), 401

    try:
        return jsonify(get_site_info_db().to_dict())
    except StoreError as e:
        return jsonify({'error': str(e)}), 500


@site_info_bp.route('/api/info', methods=['PUT'])
def update_info():
    """Update one field: {"field": "github_url", "value": "..."}"""
    if 'admin_id' not in session:
        return jsonify({'error': 'Authentication required'}), 401

    data = request.get_json(silent=True) or {}
    field = data.get('field')
    try:
        value = update_site_info_field_db(field, data.get('value'))
    except RecordValidationError as e:
        return jsonify({'error': str(e)}), 400
    except StoreError as e:
        db_log('ERROR', 'site_info', 'Could not update site info', {'field': field, 'error': str(e)})
        return jsonify({'error': str(e)}), 500

    db_log('INFO', 'site_info', f"Site info updated: {field}")
    return jsonify({'success': True, 'field': field, 'value': value})


@site_info_bp.route('/upload-cv', methods=['POST'])
def upload_cv():
    """Store a PDF CV and point site_info.cv_url at it"""
    if 'admin_id' not in session:
        return jsonify({'error': 'Authentication required'}), 401

    if 'cv' not in request.files:
        return jsonify({'error': 'No file provided'}), 400
    file = request.files['cv']
    if file.filename == '':
        return jsonify({'error': 'No file selected'}), 400

    data = file.read()
    if not is_pdf(file.filename, data):
        return jsonify({'error': 'Only PDF files are allowed'}), 400

    blob_store = get_blob_store()
    path = cv_filename()
    try:
        blob_store.upload(path, data, overwrite=True, content_type='application/pdf')
        url = blob_store.public_url(path)
        update_site_info_field_db('cv_url', url)
    except StorageError as e:
        db_log('ERROR', 'site_info', 'CV upload failed', {'error': str(e)})
        return jsonify({'error': e.message or 'Upload failed'}), 500
    except StoreError as e:
        return jsonify({'error': str(e)}), 500

    db_log('INFO', 'site_info', 'CV uploaded', {'url': url})
    return jsonify({'success': True, 'cv_url': url, 'filename': path})
