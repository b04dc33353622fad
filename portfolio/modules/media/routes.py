"""
Media Routes
============

JSON endpoints driving the admin cropper. A client creates an intake,
posts the chosen file, streams crop changes, then confirms or cancels.
"""

import math

from flask import request, session, jsonify, send_file, current_app
from . import media_bp
from .crop import CropRegionError
from .intake import (
    ImageValidationError, IntakeStateError, RasterizationError, SelectedFile, UploadError,
)
from portfolio.core import get_portfolio, db_log, LoggingService


def _number(data, key):
    value = data.get(key)
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise CropRegionError(f"{key} must be a number")
    if not math.isfinite(number):
        raise CropRegionError(f"{key} must be a number")
    return number


def _get_intake(intake_id):
    return get_portfolio().intakes.get(intake_id)


def _intake_response(intake, status=200, **extra):
    payload = intake.to_dict()
    if intake.preview is not None:
        payload['preview_url'] = f"{media_bp.url_prefix}/preview/{intake.preview.token}"
    payload.update(extra)
    return jsonify(payload), status


@media_bp.route('/intakes', methods=['POST'])
def create_intake():
    """Open a new intake handle"""
    if 'admin_id' not in session:
        return jsonify({'error': 'Authentication required'}), 401

    data = request.get_json(silent=True) or {}
    try:
        aspect_ratio = _number(data, 'aspect_ratio')
    except CropRegionError as e:
        return jsonify({'error': str(e)}), 400
    if aspect_ratio is None:
        aspect_ratio = current_app.config.get('IMAGE_ASPECT_RATIO')
    elif aspect_ratio <= 0:
        return jsonify({'error': 'Aspect ratio must be positive'}), 400

    portfolio = get_portfolio()

    def on_complete(url):
        db_log('INFO', 'media', 'Image uploaded', {'url': url})

    intake = portfolio.intakes.create(
        blob_store=portfolio.blob_store,
        previews=portfolio.previews,
        on_complete=on_complete,
        aspect_ratio=aspect_ratio,
        max_size=current_app.config.get('MAX_IMAGE_SIZE'),
        quality=current_app.config.get('JPEG_QUALITY'),
        max_pixels=current_app.config.get('MAX_IMAGE_PIXELS'),
    )
    return _intake_response(intake, 201)


@media_bp.route('/intakes/<intake_id>', methods=['GET'])
def get_intake(intake_id):
    if 'admin_id' not in session:
        return jsonify({'error': 'Authentication required'}), 401

    intake = _get_intake(intake_id)
    if not intake:
        return jsonify({'error': 'Intake not found'}), 404
    return _intake_response(intake)


@media_bp.route('/intakes/<intake_id>/file', methods=['POST'])
def select_file(intake_id):
    """Validate the chosen image and open the cropper"""
    if 'admin_id' not in session:
        return jsonify({'error': 'Authentication required'}), 401

    intake = _get_intake(intake_id)
    if not intake:
        return jsonify({'error': 'Intake not found'}), 404

    if 'image' not in request.files:
        return jsonify({'error': 'No image file provided'}), 400
    file = request.files['image']
    if file.filename == '':
        return jsonify({'error': 'No file selected'}), 400

    try:
        intake.select_file(SelectedFile.from_upload(file))
    except ImageValidationError as e:
        return jsonify({'error': str(e)}), 400
    except IntakeStateError as e:
        return jsonify({'error': str(e)}), 409

    return _intake_response(intake)


@media_bp.route('/intakes/<intake_id>/crop', methods=['PUT'])
def update_crop(intake_id):
    """Apply a drag/resize from the cropper"""
    if 'admin_id' not in session:
        return jsonify({'error': 'Authentication required'}), 401

    intake = _get_intake(intake_id)
    if not intake:
        return jsonify({'error': 'Intake not found'}), 404

    data = request.get_json(silent=True) or {}
    try:
        displayed_width = _number(data, 'displayed_width')
        displayed_height = _number(data, 'displayed_height')
        if displayed_width or displayed_height:
            intake.set_display_size(displayed_width, displayed_height)

        changes = {key: _number(data, key) for key in ('x', 'y', 'width', 'height') if key in data}
        if 'unit' in data:
            changes['unit'] = data['unit']
        if changes:
            intake.update_crop(**changes)
    except CropRegionError as e:
        return jsonify({'error': str(e)}), 400
    except IntakeStateError as e:
        return jsonify({'error': str(e)}), 409

    return _intake_response(intake)


@media_bp.route('/intakes/<intake_id>/confirm', methods=['POST'])
def confirm(intake_id):
    """Crop, encode and upload; returns the public image URL"""
    if 'admin_id' not in session:
        return jsonify({'error': 'Authentication required'}), 401

    intake = _get_intake(intake_id)
    if not intake:
        return jsonify({'error': 'Intake not found'}), 404

    data = request.get_json(silent=True) or {}
    try:
        asset = intake.confirm(
            displayed_width=_number(data, 'displayed_width'),
            displayed_height=_number(data, 'displayed_height'),
        )
    except CropRegionError as e:
        return jsonify({'error': str(e)}), 400
    except IntakeStateError as e:
        return jsonify({'error': str(e)}), 409
    except (RasterizationError, UploadError) as e:
        LoggingService.log_error_with_traceback('media', e, {'intake': intake_id})
        return jsonify({'error': str(e)}), 500

    return jsonify({
        'success': True,
        'image_url': asset.url,
        'filename': asset.path,
        'state': intake.state.value,
    })


@media_bp.route('/intakes/<intake_id>/cancel', methods=['POST'])
def cancel(intake_id):
    if 'admin_id' not in session:
        return jsonify({'error': 'Authentication required'}), 401

    intake = _get_intake(intake_id)
    if not intake:
        return jsonify({'error': 'Intake not found'}), 404

    try:
        intake.cancel()
    except IntakeStateError as e:
        return jsonify({'error': str(e)}), 409
    return _intake_response(intake)


@media_bp.route('/intakes/<intake_id>', methods=['DELETE'])
def discard_intake(intake_id):
    if 'admin_id' not in session:
        return jsonify({'error': 'Authentication required'}), 401

    get_portfolio().intakes.discard(intake_id)
    return jsonify({'success': True})


@media_bp.route('/preview/<token>')
def preview(token):
    """Serve the temporary preview shown in the cropper"""
    if 'admin_id' not in session:
        return jsonify({'error': 'Authentication required'}), 401

    handle = get_portfolio().previews.get(token)
    if not handle:
        return jsonify({'error': 'Preview not found'}), 404
    return send_file(handle.path, max_age=0)
