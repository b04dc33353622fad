"""
Admin Dashboard Routes
======================

Admin login, first-admin creation and the dashboard overview.
"""

from datetime import datetime

from flask import render_template, request, redirect, url_for, flash, session, jsonify, current_app
from werkzeug.security import check_password_hash, generate_password_hash

from . import dashboard_bp
from portfolio.core import get_store, db_log, LoggingService, StoreError

CONTENT_TABLES = ('projects', 'blog_posts', 'skills', 'experiences', 'contact_messages')


def get_admin_by_email(email):
    return get_store().select_one('admin', {'email': email})


def admin_count():
    return get_store().count('admin')


def create_admin_db(email, password):
    """Create admin account, returning its id"""
    return get_store().insert('admin', {
        'email': email,
        'password_hash': generate_password_hash(password),
    })


def get_content_stats():
    """Row count per content table plus unprocessed messages"""
    store = get_store()
    stats = {table: store.count(table) for table in CONTENT_TABLES}
    stats['unprocessed_messages'] = store.count('contact_messages', {'is_processed': 0})
    return stats


@dashboard_bp.route('/login', methods=['GET', 'POST'])
def login():
    """Admin login route"""
    if request.method == 'POST':
        email = request.form.get('email', '').strip().lower()
        password = request.form.get('password', '')

        if not email or not password:
            flash('Please enter both email and password', 'error')
            return render_template('dashboard/login.html')

        try:
            admin = get_admin_by_email(email)
        except StoreError as e:
            flash(f'Login error: {str(e)}', 'error')
            return render_template('dashboard/login.html')

        if admin and check_password_hash(admin['password_hash'], password):
            session['admin_id'] = admin['id']
            session['admin_email'] = admin['email']
            LoggingService.log_user_action('admin', 'login', user_id=admin['id'])
            flash('Login successful', 'success')
            next_page = request.args.get('next')
            # Only follow local redirects
            if not next_page or not next_page.startswith('/') or next_page.startswith('//'):
                next_page = url_for('admin.dashboard')
            return redirect(next_page)

        LoggingService.warning('security', f"Failed admin login for {email}")
        flash('Invalid email or password', 'error')

    return render_template('dashboard/login.html')


@dashboard_bp.route('/logout')
def logout():
    """Admin logout route"""
    session.pop('admin_id', None)
    session.pop('admin_email', None)
    flash('You have been logged out', 'info')
    return redirect(url_for('admin.login'))


@dashboard_bp.route('/')
@dashboard_bp.route('/dashboard')
def dashboard():
    """Admin dashboard - the unified admin interface"""
    if 'admin_id' not in session:
        return redirect(url_for('admin.login', next=request.path))
    return render_template('dashboard/dashboard.html', stats=get_content_stats())


@dashboard_bp.route('/create-admin', methods=['GET', 'POST'])
def create_admin():
    """Create new admin (only accessible by existing admin or if no admins exist)"""
    if admin_count() > 0 and 'admin_id' not in session:
        return redirect(url_for('admin.login'))

    if request.method == 'POST':
        email = request.form.get('email', '').strip().lower()
        password = request.form.get('password', '')
        confirm_password = request.form.get('confirm_password', '')

        if not all([email, password, confirm_password]):
            flash('All fields are required', 'error')
            return render_template('dashboard/create_admin.html')

        if password != confirm_password:
            flash('Passwords do not match', 'error')
            return render_template('dashboard/create_admin.html')

        if len(password) < 6:
            flash('Password must be at least 6 characters long', 'error')
            return render_template('dashboard/create_admin.html')

        if get_admin_by_email(email):
            flash('An admin with this email already exists', 'error')
            return render_template('dashboard/create_admin.html')

        try:
            create_admin_db(email, password)
        except StoreError as e:
            flash(f'Error creating admin: {str(e)}', 'error')
            return render_template('dashboard/create_admin.html')

        db_log('INFO', 'admin', f"Admin created: {email}")
        flash(f'Admin {email} created successfully', 'success')
        return redirect(url_for('admin.dashboard'))

    return render_template('dashboard/create_admin.html')


@dashboard_bp.route('/status')
def status():
    """Check admin login status (API endpoint)"""
    if 'admin_id' in session:
        return jsonify({
            'logged_in': True,
            'admin_email': session.get('admin_email')
        })
    return jsonify({'logged_in': False}), 401


@dashboard_bp.route('/api/stats')
def api_stats():
    """Content counts for the dashboard cards"""
    if 'admin_id' not in session:
        return jsonify({'error': 'Authentication required'}), 401

    try:
        return jsonify(get_content_stats())
    except StoreError as e:
        return jsonify({'error': str(e)}), 500


@dashboard_bp.app_context_processor
def utility_processor():
    def current_year():
        """Return current year for footer"""
        return datetime.now().year

    return dict(current_year=current_year)


@dashboard_bp.route('/api/logs')
def api_logs():
    """Recent application log entries: ?source=media&limit=50"""
    if 'admin_id' not in session:
        return jsonify({'error': 'Authentication required'}), 401

    limit = min(request.args.get('limit', 100, type=int), 500)
    return jsonify(LoggingService.recent_logs(request.args.get('source'), limit))


@dashboard_bp.route('/api/logs/cleanup', methods=['POST'])
def api_logs_cleanup():
    """Delete log entries older than ?days= (default LOG_RETENTION_DAYS)"""
    if 'admin_id' not in session:
        return jsonify({'error': 'Authentication required'}), 401

    days = request.args.get('days', current_app.config.get('LOG_RETENTION_DAYS', 30), type=int)
    if days is None or days < 0:
        return jsonify({'error': 'days must be a non-negative integer'}), 400

    deleted = LoggingService.cleanup_old_logs(days_to_keep=days)
    return jsonify({'success': True, 'deleted': deleted})
