"""
Portfolio Application
=====================

Run with:
    python -m portfolio.app

Visit:
    http://localhost:5000              - Landing page
    http://localhost:5000/admin        - Admin panel
    http://localhost:5000/admin/create-admin - First admin account
"""

import logging

from flask import Flask

from portfolio import Portfolio
from portfolio.core.config import Config


def create_app(config=None, **collaborators):
    """Build the Flask app. ``config`` entries override Config defaults;
    ``collaborators`` (store, blob_store, previews) are passed to Portfolio."""
    app = Flask(__name__)
    app.config.update(config or {})
    Portfolio(app, **collaborators)
    return app


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    app = create_app()

    print("\n" + "=" * 60)
    print(f"{app.config['BRAND_NAME']}")
    print("=" * 60)
    print(f"Landing page:    http://localhost:{Config.port}")
    print(f"Admin Panel:     http://localhost:{Config.port}/admin")
    print(f"Create Admin:    http://localhost:{Config.port}/admin/create-admin")
    print("=" * 60 + "\n")

    app.run(host='0.0.0.0', port=Config.port, debug=True)
