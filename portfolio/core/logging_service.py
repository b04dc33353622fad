"""
Centralized logging service for the portfolio application.
Provides structured logging with database storage and easy integration.
"""

import json
import logging
import os
import sqlite3
import traceback
from contextlib import closing
from datetime import datetime, timedelta
from flask import request, has_request_context
from .config import get_config_value
from .database import Database

console = logging.getLogger(__name__)


class LoggingService:
    """Centralized logging service for application-wide logging"""

    # Database paths whose app_logs table has already been created
    _initialised = set()

    @staticmethod
    def _db_path():
        return get_config_value('PORTFOLIO_DB')

    @staticmethod
    def _ensure_logs_table(db_path):
        """Ensure the app_logs table exists"""
        if db_path in LoggingService._initialised:
            return

        db_dir = os.path.dirname(db_path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

        with closing(Database.connect(db_path)) as conn, conn:
            cursor = conn.cursor()
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS app_logs (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    timestamp TEXT NOT NULL,
                    level TEXT NOT NULL,
                    source TEXT NOT NULL,
                    message TEXT NOT NULL,
                    details TEXT,
                    ip_address TEXT,
                    user_agent TEXT,
                    request_path TEXT,
                    user_id TEXT
                )
            """)
            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_logs_timestamp
                ON app_logs(timestamp DESC)
            """)
            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_logs_source
                ON app_logs(source)
            """)
        LoggingService._initialised.add(db_path)

    @staticmethod
    def _get_request_context():
        """Extract request context information"""
        if not has_request_context():
            return None, None, None

        ip_address = request.headers.get('X-Forwarded-For', request.remote_addr)
        if ip_address and ',' in ip_address:
            ip_address = ip_address.split(',')[0].strip()

        return ip_address, request.headers.get('User-Agent', ''), request.path

    @staticmethod
    def log(level, source, message, details=None, user_id=None):
        """
        Log a message to the database

        Args:
            level (str): Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            source (str): Source component (media, blog, messages, etc.)
            message (str): Main log message
            details (str/dict): Additional details (will be JSON-encoded if dict)
            user_id (str): Optional user identifier
        """
        level = level.upper()
        console.log(getattr(logging, level, logging.INFO), "[%s] %s", source, message)

        if isinstance(details, dict):
            details = json.dumps(details, indent=2, default=str)

        db_path = LoggingService._db_path()
        if not db_path:
            return

        try:
            LoggingService._ensure_logs_table(db_path)
            ip_address, user_agent, request_path = LoggingService._get_request_context()

            with closing(Database.connect(db_path)) as conn, conn:
                conn.execute("""
                    INSERT INTO app_logs
                    (timestamp, level, source, message, details, ip_address, user_agent, request_path, user_id)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    datetime.now().isoformat(), level, source, message, details,
                    ip_address, user_agent, request_path, user_id
                ))
        except (sqlite3.Error, OSError) as e:
            # Fallback to console logging if database fails
            console.warning("Logging service error: %s", e)

    @staticmethod
    def info(source, message, details=None, user_id=None):
        """Log info message"""
        LoggingService.log('INFO', source, message, details, user_id)

    @staticmethod
    def warning(source, message, details=None, user_id=None):
        """Log warning message"""
        LoggingService.log('WARNING', source, message, details, user_id)

    @staticmethod
    def error(source, message, details=None, user_id=None):
        """Log error message"""
        LoggingService.log('ERROR', source, message, details, user_id)

    @staticmethod
    def log_user_action(source, action, user_id=None, details=None):
        """Log admin actions (login, content edits, uploads)"""
        LoggingService.info(source, f"User action: {action}", details, user_id)

    @staticmethod
    def log_error_with_traceback(source, error, details=None):
        """Log error with full traceback"""
        error_details = {
            'error_type': type(error).__name__,
            'error_message': str(error),
            'traceback': traceback.format_exc()
        }
        if details:
            error_details['additional_details'] = details

        LoggingService.error(source, f"Exception occurred: {type(error).__name__}", error_details)

    @staticmethod
    def recent_logs(source=None, limit=100):
        """Newest log entries, optionally for one source"""
        db_path = LoggingService._db_path()
        LoggingService._ensure_logs_table(db_path)
        query = 'SELECT * FROM app_logs'
        params = []
        if source:
            query += ' WHERE source = ?'
            params.append(source)
        query += ' ORDER BY id DESC LIMIT ?'
        params.append(limit)
        with closing(Database.connect(db_path)) as conn:
            return [dict(row) for row in conn.execute(query, params).fetchall()]

    @staticmethod
    def cleanup_old_logs(days_to_keep=30):
        """Clean up old log entries"""
        cutoff_iso = (datetime.now() - timedelta(days=days_to_keep)).isoformat()
        db_path = LoggingService._db_path()

        try:
            LoggingService._ensure_logs_table(db_path)
            with closing(Database.connect(db_path)) as conn, conn:
                deleted_count = conn.execute(
                    'DELETE FROM app_logs WHERE timestamp < ?', (cutoff_iso,)
                ).rowcount
        except (sqlite3.Error, OSError) as e:
            LoggingService.error('system', f"Failed to cleanup old logs: {e}")
            return 0

        LoggingService.info('system', f"Cleaned up {deleted_count} old log entries")
        return deleted_count


# Convenience instance for easy importing
logger = LoggingService()


def db_log(level, source, message, details=None):
    """Shortcut used by modules for persistent event logging"""
    LoggingService.log(level, source, message, details)
