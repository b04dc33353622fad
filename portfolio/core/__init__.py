"""
Portfolio Core
==============

Core utilities and shared functionality for the portfolio modules.
"""

from flask import current_app

from .config import Config, get_config_value
from .database import Database, RowStore, StoreError
from .logging_service import LoggingService, logger, db_log


def get_portfolio():
    """The Portfolio extension registered on the current app"""
    return current_app.extensions['portfolio']


def get_store():
    return get_portfolio().store


def get_blob_store():
    return get_portfolio().blob_store


__all__ = [
    'Config', 'get_config_value', 'Database', 'RowStore', 'StoreError',
    'LoggingService', 'logger', 'db_log',
    'get_portfolio', 'get_store', 'get_blob_store',
]
