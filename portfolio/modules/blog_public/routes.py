from flask import Blueprint, render_template, jsonify, redirect, url_for, flash
from markupsafe import Markup

from portfolio.core.text_transform import render_safe

blog_public_bp = Blueprint('blog', __name__, url_prefix='/blog', template_folder='templates')


@blog_public_bp.app_template_filter('format_blog_content')
def format_blog_content_filter(content):
    """Blog markup to sanitized HTML, safe to output unescaped"""
    return Markup(render_safe(content))


@blog_public_bp.route('/')
def blog_list():
    """Public blog listing, newest first"""
    # Import here to avoid circular imports
    from portfolio.modules.blog.routes import get_all_posts_db
    posts = get_all_posts_db()
    return render_template('blog_public/blog.html', posts=posts)


@blog_public_bp.route('/<slug>')
def blog_post(slug):
    """Individual blog post page"""
    from portfolio.modules.blog.routes import get_post_by_slug_db, get_all_posts_db
    post = get_post_by_slug_db(slug)
    if not post:
        flash('Post not found', 'error')
        return redirect(url_for('blog.blog_list'))

    related_posts = [p for p in get_all_posts_db(limit=4) if p.slug != slug][:3]
    return render_template('blog_public/blog_post.html', post=post, related_posts=related_posts)


# API Routes - Public endpoint only
@blog_public_bp.route('/api/posts', methods=['GET'])
def get_posts():
    """Get all posts API - public endpoint"""
    from portfolio.modules.blog.routes import get_all_posts_db
    return jsonify([post.to_dict() for post in get_all_posts_db()])
