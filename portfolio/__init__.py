"""
Portfolio - A Flask portfolio site with an admin panel
======================================================

Public pages (landing, blog, projects, contact form) plus an admin
dashboard for editing content and uploading cropped images.

Usage:
    from flask import Flask
    from portfolio import Portfolio

    app = Flask(__name__)
    Portfolio(app)
"""

import importlib
import logging
import os

from .core.config import Config
from .core.database import RowStore
from .core.logging_service import LoggingService
from .core.storage import create_blob_store

__version__ = '0.1.0'

logger = logging.getLogger(__name__)

# feature name -> (module path, blueprint attributes)
MODULES = {
    'dashboard': ('portfolio.modules.dashboard', ['dashboard_bp']),
    'site': ('portfolio.modules.site', ['site_bp']),
    'blog': ('portfolio.modules.blog', ['blog_bp']),
    'blog_public': ('portfolio.modules.blog_public', ['blog_public_bp']),
    'projects': ('portfolio.modules.projects', ['projects_bp']),
    'projects_public': ('portfolio.modules.projects_public', ['projects_public_bp']),
    'skills': ('portfolio.modules.skills', ['skills_bp']),
    'experience': ('portfolio.modules.experience', ['experience_bp']),
    'messages': ('portfolio.modules.messages', ['messages_bp', 'messages_admin_bp']),
    'site_info': ('portfolio.modules.site_info', ['site_info_bp']),
    'media': ('portfolio.modules.media', ['media_bp']),
}


class Portfolio:
    """
    Flask extension that configures the app, builds the row store, blob
    store and preview store, and registers every enabled module.

    Collaborators can be injected, which is how tests swap in doubles:
        Portfolio(app, store=fake_store, blob_store=fake_blobs)
    """

    def __init__(self, app=None, config=None, store=None, blob_store=None, previews=None):
        self._config = config or {}
        self._registered = []
        self.store = store
        self.blob_store = blob_store
        self.previews = previews
        self.intakes = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        from .modules.media.intake import IntakeRegistry
        from .modules.media.previews import PreviewStore

        self._apply_defaults(app)
        self._setup_database_dir(app)

        if self.store is None:
            self.store = RowStore(app.config['PORTFOLIO_DB'])
        self.store.ensure_schema()
        with app.app_context():
            LoggingService.cleanup_old_logs(app.config['LOG_RETENTION_DAYS'])

        if self.blob_store is None:
            self.blob_store = create_blob_store(app)
        if self.previews is None:
            self.previews = PreviewStore(app.config['PREVIEW_DIR'])
        self.intakes = IntakeRegistry()

        app.extensions['portfolio'] = self
        self._register_modules(app)

        @app.context_processor
        def inject_portfolio_config():
            return {
                'portfolio_config': dict(self._config),
                'brand_name': app.config.get('BRAND_NAME') or 'Portfolio',
            }

    # ===== Setup helpers =====

    @staticmethod
    def _apply_defaults(app):
        """Fill app.config from Config without overriding explicit values"""
        db_dir = app.config.setdefault('DB_DIR', Config.DB_DIR)
        app.config.setdefault('PORTFOLIO_DB', os.path.join(db_dir, 'portfolio.db'))
        app.config.setdefault('PREVIEW_DIR', os.path.join(db_dir, 'previews'))
        for key in dir(Config):
            if key.isupper():
                app.config.setdefault(key, getattr(Config, key))
        if not app.config.get('SECRET_KEY'):
            app.config['SECRET_KEY'] = Config.SECRET_KEY

    @staticmethod
    def _setup_database_dir(app):
        os.makedirs(app.config['DB_DIR'], exist_ok=True)

    def _enabled(self, name):
        return self._config.get('features', {}).get(name, True)

    def _register_modules(self, app):
        for name, (module_path, blueprint_names) in MODULES.items():
            if not self._enabled(name):
                continue
            module = importlib.import_module(module_path)
            for blueprint_name in blueprint_names:
                app.register_blueprint(getattr(module, blueprint_name))
            self._registered.append(name)
            logger.debug("Registered module %s", name)

    def get_registered_modules(self):
        return list(self._registered)


__all__ = ['Portfolio', '__version__']
