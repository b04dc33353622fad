"""
Messages Routes
===============
"""

from flask import render_template, request, redirect, url_for, session, jsonify
from . import messages_bp, messages_admin_bp
from portfolio.core import get_store, db_log, StoreError
from portfolio.core.records import ContactMessage, RecordValidationError

TABLE = ContactMessage.TABLE

FILTERS = {
    'all': None,
    'processed': {'is_processed': 1},
    'unprocessed': {'is_processed': 0},
}

# ===== Database Helper Functions =====


def create_message_db(data):
    message = ContactMessage.from_row({
        'name': data.get('name'),
        'email': data.get('email'),
        'message': data.get('message'),
        'is_processed': False,
    })
    message.id = get_store().insert(TABLE, message.to_row())
    return message


def get_messages_db(status='all', search=None):
    """Messages newest first, narrowed by processed status and search text"""
    if status not in FILTERS:
        raise ValueError(f"Unknown filter: {status}")
    rows = get_store().select(TABLE, FILTERS[status], order_by='created_at')
    messages = [ContactMessage.from_row(row) for row in rows]
    if search:
        messages = [message for message in messages if message.matches(search)]
    return messages


def toggle_processed_db(message_id):
    """Flip is_processed, returning the new value or None if missing"""
    store = get_store()
    row = store.select_one(TABLE, {'id': message_id})
    if not row:
        return None
    processed = not bool(row['is_processed'])
    store.update(TABLE, {'is_processed': int(processed)}, {'id': message_id})
    return processed


# ===== Public Routes =====

@messages_bp.route('/contact', methods=['POST'])
def contact():
    """Store a contact form submission"""
    data = request.get_json(silent=True) or request.form

    try:
        message = create_message_db(data)
    except RecordValidationError as e:
        return jsonify({'error': str(e)}), 400
    except StoreError as e:
        db_log('ERROR', 'messages', 'Could not store contact message', {'error': str(e)})
        return jsonify({'error': 'Could not send your message, please try again later'}), 500

    db_log('INFO', 'messages', f"Contact message from {message.email}")
    return jsonify({'success': True, 'message': 'Your message has been sent'}), 201


# ===== Admin Routes =====

@messages_admin_bp.route('/')
def messages_inbox():
    if 'admin_id' not in session:
        return redirect(url_for('admin.login', next=request.path))

    status = request.args.get('filter', 'all')
    if status not in FILTERS:
        status = 'all'
    search = request.args.get('search', '').strip()
    return render_template(
        'messages/messages.html',
        messages=get_messages_db(status, search),
        current_filter=status,
        search=search,
    )


@messages_admin_bp.route('/api/messages', methods=['GET'])
def get_messages():
    """List messages: ?filter=all|processed|unprocessed&search=text"""
    if 'admin_id' not in session:
        return jsonify({'error': 'Authentication required'}), 401

    try:
        messages = get_messages_db(
            request.args.get('filter', 'all'),
            request.args.get('search', '').strip(),
        )
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    except StoreError as e:
        return jsonify({'error': str(e)}), 500
    return jsonify([message.to_dict() for message in messages])


@messages_admin_bp.route('/api/messages/<int:message_id>/toggle-processed', methods=['POST'])
def toggle_processed(message_id):
    if 'admin_id' not in session:
        return jsonify({'error': 'Authentication required'}), 401

    try:
        processed = toggle_processed_db(message_id)
    except StoreError as e:
        return jsonify({'error': str(e)}), 500

    if processed is None:
        return jsonify({'error': 'Message not found'}), 404
    return jsonify({'success': True, 'is_processed': processed})
