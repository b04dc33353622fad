import os
from dotenv import load_dotenv

load_dotenv(override=True)


class Config:
    """
    Base configuration for the portfolio site.
    Deployments provide database and storage settings via environment variables.
    """
    # Flask settings
    SECRET_KEY = os.getenv('FLASK_SECRET_KEY', 'dev-secret-key-change-in-production')
    BRAND_NAME = os.getenv('BRAND_NAME', 'Portfolio')

    # Get DB_DIR from environment, or use a default if not set
    DB_DIR = os.getenv('DB_DIR', os.path.join(os.getcwd(), 'databases'))
    PORTFOLIO_DB = os.getenv('PORTFOLIO_DB', os.path.join(DB_DIR, 'portfolio.db'))

    # Blob storage: 'local' writes under the static folder, 'cloud' uses Spaces
    STORAGE_TYPE = os.getenv('STORAGE_TYPE', 'local')
    STORAGE_BUCKET = os.getenv('STORAGE_BUCKET', 'images')
    SPACES_FOLDER = os.getenv('SPACES_FOLDER', 'uploads')
    DO_SPACES_REGION = os.getenv('DO_SPACES_REGION')
    DO_SPACES_NAME = os.getenv('DO_SPACES_NAME')
    DO_SPACES_KEY = os.getenv('DO_SPACES_KEY')
    DO_SPACES_SECRET = os.getenv('DO_SPACES_SECRET')

    # Image intake
    MAX_IMAGE_SIZE = int(os.getenv('MAX_IMAGE_SIZE', str(2 * 1024 * 1024)))
    IMAGE_ASPECT_RATIO = float(os.getenv('IMAGE_ASPECT_RATIO', str(16 / 9)))
    JPEG_QUALITY = int(os.getenv('JPEG_QUALITY', '95'))
    MAX_IMAGE_PIXELS = int(os.getenv('MAX_IMAGE_PIXELS', str(40_000_000)))
    PREVIEW_DIR = os.getenv('PREVIEW_DIR', os.path.join(DB_DIR, 'previews'))

    # Days of app_logs kept; older rows are removed at startup
    LOG_RETENTION_DAYS = int(os.getenv('LOG_RETENTION_DAYS', '30'))

    # Port for local server
    port = int(os.getenv('PORT', '5000'))


def get_config_value(key, default=None):
    """Get configuration value: Flask app config first, then Config, then env var"""
    try:
        from flask import current_app
        val = current_app.config.get(key)
        if val is not None:
            return val
    except RuntimeError:
        pass
    val = getattr(Config, key, None)
    if val is not None:
        return val
    return os.getenv(key, default)
