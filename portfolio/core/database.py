"""
Row Store
=========

SQLite-backed row store for the portfolio content tables.
Exposes a small select/insert/update/delete surface so the modules never
build SQL themselves.
"""

import logging
import os
import sqlite3
import threading
from contextlib import closing, contextmanager

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Raised when the row store rejects a read or write."""


# Column definitions per table. Order matters for CREATE TABLE; the same
# definitions drive the add-missing-column migration.
SCHEMAS = {
    'projects': [
        ('id', 'INTEGER PRIMARY KEY AUTOINCREMENT'),
        ('title', 'TEXT NOT NULL'),
        ('description', 'TEXT'),
        ('image_url', 'TEXT'),
        ('project_url', 'TEXT'),
        ('github_url', 'TEXT'),
        ('category', "TEXT DEFAULT ''"),
        ('technologies', "TEXT DEFAULT '[]'"),
        ('created_at', 'TIMESTAMP DEFAULT CURRENT_TIMESTAMP'),
        ('updated_at', 'TIMESTAMP DEFAULT CURRENT_TIMESTAMP'),
    ],
    'blog_posts': [
        ('id', 'INTEGER PRIMARY KEY AUTOINCREMENT'),
        ('title', 'TEXT NOT NULL'),
        ('slug', 'TEXT NOT NULL UNIQUE'),
        ('mini_description', 'TEXT'),
        ('description', 'TEXT'),
        ('image_url', 'TEXT'),
        ('category', 'TEXT'),
        ('read_time', 'TEXT'),
        ('created_at', 'TIMESTAMP DEFAULT CURRENT_TIMESTAMP'),
        ('updated_at', 'TIMESTAMP DEFAULT CURRENT_TIMESTAMP'),
    ],
    'skills': [
        ('id', 'INTEGER PRIMARY KEY AUTOINCREMENT'),
        ('name', 'TEXT NOT NULL'),
        ('category', 'TEXT'),
        ('icon', 'TEXT'),
        ('created_at', 'TIMESTAMP DEFAULT CURRENT_TIMESTAMP'),
    ],
    'experiences': [
        ('id', 'INTEGER PRIMARY KEY AUTOINCREMENT'),
        ('title', 'TEXT NOT NULL'),
        ('company', 'TEXT'),
        ('description', 'TEXT'),
        ('start_date', 'TEXT'),
        ('end_date', 'TEXT'),
        ('created_at', 'TIMESTAMP DEFAULT CURRENT_TIMESTAMP'),
    ],
    'contact_messages': [
        ('id', 'INTEGER PRIMARY KEY AUTOINCREMENT'),
        ('name', 'TEXT NOT NULL'),
        ('email', 'TEXT NOT NULL'),
        ('message', 'TEXT NOT NULL'),
        ('is_processed', 'BOOLEAN DEFAULT 0'),
        ('created_at', 'TIMESTAMP DEFAULT CURRENT_TIMESTAMP'),
    ],
    'site_info': [
        ('id', 'INTEGER PRIMARY KEY AUTOINCREMENT'),
        ('email', 'TEXT'),
        ('phone', 'TEXT'),
        ('address', 'TEXT'),
        ('github_url', 'TEXT'),
        ('linkedin_url', 'TEXT'),
        ('twitter_url', 'TEXT'),
        ('instagram_url', 'TEXT'),
        ('cv_url', 'TEXT'),
        ('updated_at', 'TIMESTAMP DEFAULT CURRENT_TIMESTAMP'),
    ],
    'admin': [
        ('id', 'INTEGER PRIMARY KEY AUTOINCREMENT'),
        ('email', 'TEXT UNIQUE NOT NULL'),
        ('password_hash', 'TEXT NOT NULL'),
        ('created_at', 'TIMESTAMP DEFAULT CURRENT_TIMESTAMP'),
    ],
}

INDEXES = [
    'CREATE INDEX IF NOT EXISTS idx_blog_posts_slug ON blog_posts(slug)',
    'CREATE INDEX IF NOT EXISTS idx_contact_messages_processed ON contact_messages(is_processed)',
]


class Database:
    # Serialises schema setup across request threads
    _lock = threading.Lock()

    @staticmethod
    def connect(path):
        conn = sqlite3.connect(path)
        conn.row_factory = sqlite3.Row
        return conn


class RowStore:
    """
    Table-oriented access to the portfolio database.

    Every table and column name is checked against SCHEMAS before it reaches
    SQL, so callers may pass user-supplied filter keys safely.
    """

    def __init__(self, db_path):
        self.db_path = db_path

    @contextmanager
    def _connection(self):
        with closing(Database.connect(self.db_path)) as conn:
            with conn:
                yield conn

    def ensure_schema(self):
        """Create tables and add any columns missing from older databases"""
        db_dir = os.path.dirname(self.db_path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

        with Database._lock:
            try:
                with self._connection() as conn:
                    cursor = conn.cursor()
                    for table, columns in SCHEMAS.items():
                        cols_sql = ',\n'.join(f'{name} {definition}' for name, definition in columns)
                        cursor.execute(f'CREATE TABLE IF NOT EXISTS {table} ({cols_sql})')

                        cursor.execute(f'PRAGMA table_info({table})')
                        existing = {row[1] for row in cursor.fetchall()}
                        for name, definition in columns:
                            if name not in existing:
                                logger.info("Adding %s column to %s table", name, table)
                                # SQLite refuses non-constant defaults on ALTER
                                definition = definition.replace('DEFAULT CURRENT_TIMESTAMP', '')
                                cursor.execute(f'ALTER TABLE {table} ADD COLUMN {name} {definition}')

                    for statement in INDEXES:
                        cursor.execute(statement)
            except sqlite3.Error as e:
                raise StoreError(f"Could not initialise database: {e}") from e

    # ===== Validation =====

    @staticmethod
    def _columns(table):
        if table not in SCHEMAS:
            raise StoreError(f"Unknown table: {table}")
        return [name for name, _ in SCHEMAS[table]]

    def _check_columns(self, table, names):
        allowed = self._columns(table)
        for name in names:
            if name not in allowed:
                raise StoreError(f"Unknown column {name!r} for table {table}")

    @staticmethod
    def _where(filters):
        if not filters:
            return '', []
        clauses = [f'{key} = ?' for key in filters]
        return ' WHERE ' + ' AND '.join(clauses), list(filters.values())

    # ===== Operations =====

    def select(self, table, filters=None, order_by=None, descending=True, limit=None):
        """Return matching rows as dicts"""
        filters = filters or {}
        self._check_columns(table, filters)
        if order_by:
            self._check_columns(table, [order_by])

        where, params = self._where(filters)
        query = f'SELECT * FROM {table}{where}'
        if order_by:
            direction = 'DESC' if descending else 'ASC'
            # id breaks ties between rows written in the same second
            query += f' ORDER BY {order_by} {direction}, id {direction}'
        if limit is not None:
            query += ' LIMIT ?'
            params.append(int(limit))

        try:
            with self._connection() as conn:
                rows = conn.execute(query, params).fetchall()
                return [dict(row) for row in rows]
        except sqlite3.Error as e:
            raise StoreError(str(e)) from e

    def select_one(self, table, filters):
        rows = self.select(table, filters, limit=1)
        return rows[0] if rows else None

    def count(self, table, filters=None):
        filters = filters or {}
        self._check_columns(table, filters)
        where, params = self._where(filters)
        try:
            with self._connection() as conn:
                return conn.execute(f'SELECT COUNT(*) FROM {table}{where}', params).fetchone()[0]
        except sqlite3.Error as e:
            raise StoreError(str(e)) from e

    def insert(self, table, row):
        """Insert one row, returning its id"""
        if not row:
            raise StoreError("Cannot insert an empty row")
        self._check_columns(table, row)
        names = list(row)
        placeholders = ', '.join('?' for _ in names)
        query = f'INSERT INTO {table} ({", ".join(names)}) VALUES ({placeholders})'
        try:
            with self._connection() as conn:
                cursor = conn.execute(query, [row[name] for name in names])
                return cursor.lastrowid
        except sqlite3.Error as e:
            raise StoreError(str(e)) from e

    def update(self, table, patch, filters):
        """Apply patch to matching rows, returning the number of rows changed"""
        if not patch:
            raise StoreError("Nothing to update")
        if not filters:
            raise StoreError("Refusing to update without a filter")
        self._check_columns(table, patch)
        self._check_columns(table, filters)

        set_clauses = [f'{name} = ?' for name in patch]
        values = list(patch.values())
        if 'updated_at' in self._columns(table) and 'updated_at' not in patch:
            set_clauses.append('updated_at = CURRENT_TIMESTAMP')

        where, params = self._where(filters)
        query = f'UPDATE {table} SET {", ".join(set_clauses)}{where}'
        try:
            with self._connection() as conn:
                return conn.execute(query, values + params).rowcount
        except sqlite3.Error as e:
            raise StoreError(str(e)) from e

    def delete(self, table, filters):
        """Delete matching rows, returning the number removed"""
        if not filters:
            raise StoreError("Refusing to delete without a filter")
        self._check_columns(table, filters)
        where, params = self._where(filters)
        try:
            with self._connection() as conn:
                return conn.execute(f'DELETE FROM {table}{where}', params).rowcount
        except sqlite3.Error as e:
            raise StoreError(str(e)) from e
