"""
Blog Admin Routes
=================

Blog post CRUD for the admin panel. Post bodies are stored as the raw
markup the editor writes; HTML is produced only when a post is displayed.
"""

import re

from flask import render_template, request, redirect, url_for, session, jsonify
from . import blog_bp
from portfolio.core import get_store, db_log, StoreError
from portfolio.core.records import BlogPost, RecordValidationError

TABLE = BlogPost.TABLE

# ===== Database Helper Functions =====


def slugify(text):
    """Lowercase, hyphen-separated URL fragment"""
    slug = re.sub(r'[^\w\s-]', '', (text or '').lower())
    slug = re.sub(r'[-\s]+', '-', slug)
    return slug.strip('-')


def create_slug(title, exclude_id=None):
    """Create URL-friendly slug with uniqueness checking"""
    store = get_store()
    base_slug = slugify(title) or 'post'
    slug = base_slug
    counter = 1

    while True:
        existing = store.select_one(TABLE, {'slug': slug})
        if not existing or existing['id'] == exclude_id:
            return slug
        slug = f"{base_slug}-{counter}"
        counter += 1


def get_all_posts_db(limit=None):
    """All posts, newest first"""
    rows = get_store().select(TABLE, order_by='created_at', limit=limit)
    return [BlogPost.from_row(row) for row in rows]


def get_post_db(post_id):
    row = get_store().select_one(TABLE, {'id': post_id})
    return BlogPost.from_row(row) if row else None


def get_post_by_slug_db(slug):
    row = get_store().select_one(TABLE, {'slug': slug})
    return BlogPost.from_row(row) if row else None


def create_post_db(data):
    """Validate and insert a post, returning the stored record"""
    post = BlogPost.from_row(data)
    post.slug = create_slug(post.slug or post.title)
    post.id = get_store().insert(TABLE, post.to_row())
    return post


def update_post_db(post_id, data):
    """Replace a post's fields; returns None when the post does not exist"""
    current = get_post_db(post_id)
    if not current:
        return None

    post = BlogPost.from_row(data)
    post.id = post_id
    if post.slug:
        post.slug = create_slug(post.slug, exclude_id=post_id)
    elif post.title != current.title:
        post.slug = create_slug(post.title, exclude_id=post_id)
    else:
        post.slug = current.slug

    get_store().update(TABLE, post.to_row(), {'id': post_id})
    return post


def delete_post_db(post_id):
    return get_store().delete(TABLE, {'id': post_id}) > 0


# ===== Routes =====

@blog_bp.route('/')
@blog_bp.route('/editor')
def blog_editor():
    """Blog editor - main interface"""
    if 'admin_id' not in session:
        return redirect(url_for('admin.login', next=request.path))
    return render_template('blog/blog_editor.html', posts=get_all_posts_db())


@blog_bp.route('/api/posts', methods=['GET'])
def get_posts():
    """Get all posts"""
    if 'admin_id' not in session:
        return jsonify({'error': 'Authentication required'}), 401

    try:
        return jsonify([post.to_dict() for post in get_all_posts_db()])
    except StoreError as e:
        return jsonify({'error': str(e)}), 500


@blog_bp.route('/api/posts/<int:post_id>', methods=['GET'])
def get_post(post_id):
    """Get single post"""
    if 'admin_id' not in session:
        return jsonify({'error': 'Authentication required'}), 401

    try:
        post = get_post_db(post_id)
    except StoreError as e:
        return jsonify({'error': str(e)}), 500
    if post:
        return jsonify(post.to_dict())
    return jsonify({'error': 'Post not found'}), 404


@blog_bp.route('/api/posts', methods=['POST'])
def create_post():
    """Create new post"""
    if 'admin_id' not in session:
        return jsonify({'error': 'Authentication required'}), 401

    try:
        post = create_post_db(request.get_json(silent=True) or {})
    except RecordValidationError as e:
        return jsonify({'error': str(e)}), 400
    except StoreError as e:
        db_log('ERROR', 'blog', 'Could not create post', {'error': str(e)})
        return jsonify({'error': str(e)}), 500

    db_log('INFO', 'blog', f"Post created: {post.slug}")
    return jsonify({'success': True, 'id': post.id, 'slug': post.slug}), 201


@blog_bp.route('/api/posts/<int:post_id>', methods=['PUT'])
def update_post(post_id):
    """Update post"""
    if 'admin_id' not in session:
        return jsonify({'error': 'Authentication required'}), 401

    try:
        post = update_post_db(post_id, request.get_json(silent=True) or {})
    except RecordValidationError as e:
        return jsonify({'error': str(e)}), 400
    except StoreError as e:
        db_log('ERROR', 'blog', 'Could not update post', {'id': post_id, 'error': str(e)})
        return jsonify({'error': str(e)}), 500

    if post:
        return jsonify({'success': True, 'slug': post.slug, 'message': 'Post updated successfully'})
    return jsonify({'error': 'Post not found'}), 404


@blog_bp.route('/api/posts/<int:post_id>', methods=['DELETE'])
def delete_post(post_id):
    """Delete post"""
    if 'admin_id' not in session:
        return jsonify({'error': 'Authentication required'}), 401

    try:
        if delete_post_db(post_id):
            db_log('INFO', 'blog', f"Post deleted: {post_id}")
            return jsonify({'success': True})
    except StoreError as e:
        return jsonify({'error': str(e)}), 500
    return jsonify({'error': 'Post not found'}), 404
