"""Database connection factory for SQLite (local) and PostgreSQL (cloud)."""

import sqlite3
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

import psycopg2
from psycopg2.extras import RealDictCursor

from cvmatch.config import DATA_DIR, DATABASE_URL, DB_PATH


class DatabaseConnection:
    """Wrapper for database connections that provides a consistent interface."""

    def __init__(self, conn: Any, is_postgres: bool = False):
        self.conn = conn
        self.is_postgres = is_postgres
        self._cursor = None

    def cursor(self, dictionary: bool = False) -> Any:
        """Get a cursor for executing database operations.

        Args:
            dictionary: If True, rows are returned as mappings keyed by column
                name (RealDictCursor on PostgreSQL, sqlite3.Row on SQLite).

        Returns:
            Database cursor object for executing queries and fetching results.
        """
        if self.is_postgres:
            self._cursor = self.conn.cursor(cursor_factory=RealDictCursor if dictionary else None)
        else:
            self._cursor = self.conn.cursor()
            if dictionary:
                self.conn.row_factory = sqlite3.Row
        return self._cursor

    def commit(self) -> None:
        """Commit the transaction."""
        self.conn.commit()

    def close(self) -> None:
        """Close the connection."""
        if self._cursor:
            self._cursor.close()
        self.conn.close()

    @property
    def placeholder(self) -> str:
        """Return the parameter placeholder for this database."""
        return "%s" if self.is_postgres else "?"


@contextmanager
def get_connection() -> Generator[DatabaseConnection, None, None]:
    """Get a database connection.

    Uses PostgreSQL if DATABASE_URL is set, otherwise falls back to SQLite.

    Yields:
        DatabaseConnection wrapper with consistent interface.
    """
    if DATABASE_URL:
        conn = psycopg2.connect(DATABASE_URL)
        db = DatabaseConnection(conn, is_postgres=True)
    else:
        DATA_DIR.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(DB_PATH, check_same_thread=False)
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA busy_timeout=5000")
        conn.row_factory = sqlite3.Row
        db = DatabaseConnection(conn, is_postgres=False)

    try:
        yield db
    finally:
        db.close()


def init_tables() -> None:
    """Initialize database tables.

    Creates the jobs and applications tables if they don't exist.
    Uses appropriate syntax for PostgreSQL or SQLite.
    """
    with get_connection() as db:
        if db.is_postgres:
            _init_postgres_tables(db)
        else:
            _init_sqlite_tables(db)
        db.commit()


def _init_postgres_tables(db: DatabaseConnection) -> None:
    """Create PostgreSQL tables."""
    cursor = db.cursor()

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS jobs (
            id TEXT PRIMARY KEY,
            title TEXT NOT NULL,
            description TEXT,
            requirements TEXT,
            company_id TEXT,
            shortlist_criteria TEXT,
            created_at TIMESTAMPTZ DEFAULT NOW()
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS applications (
            id TEXT PRIMARY KEY,
            job_id TEXT REFERENCES jobs(id) ON DELETE SET NULL,
            full_name TEXT,
            email TEXT,
            resume_url TEXT,
            years_of_experience INTEGER DEFAULT 0,
            current_position TEXT,
            linkedin_url TEXT,
            portfolio_url TEXT,
            status TEXT DEFAULT 'pending',
            score INTEGER DEFAULT 0,
            analysis_result TEXT,
            analyzed_at TIMESTAMPTZ,
            created_at TIMESTAMPTZ DEFAULT NOW()
        )
    """)

    # Add parsed_cv_text column if it doesn't exist (migration for existing tables)
    cursor.execute("""
        DO $$
        BEGIN
            IF NOT EXISTS (
                SELECT 1 FROM information_schema.columns
                WHERE table_name = 'applications' AND column_name = 'parsed_cv_text'
            ) THEN
                ALTER TABLE applications ADD COLUMN parsed_cv_text TEXT;
            END IF;
        END $$;
    """)

    cursor.execute("""
        CREATE INDEX IF NOT EXISTS idx_applications_job_id
        ON applications(job_id)
    """)


def _init_sqlite_tables(db: DatabaseConnection) -> None:
    """Create SQLite tables (for local development/testing)."""
    cursor = db.cursor()

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS jobs (
            id TEXT PRIMARY KEY,
            title TEXT NOT NULL,
            description TEXT,
            requirements TEXT,
            company_id TEXT,
            shortlist_criteria TEXT,
            created_at TEXT DEFAULT CURRENT_TIMESTAMP
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS applications (
            id TEXT PRIMARY KEY,
            job_id TEXT REFERENCES jobs(id) ON DELETE SET NULL,
            full_name TEXT,
            email TEXT,
            resume_url TEXT,
            years_of_experience INTEGER DEFAULT 0,
            current_position TEXT,
            linkedin_url TEXT,
            portfolio_url TEXT,
            status TEXT DEFAULT 'pending',
            score INTEGER DEFAULT 0,
            analysis_result TEXT,
            analyzed_at TEXT,
            created_at TEXT DEFAULT CURRENT_TIMESTAMP
        )
    """)

    # Add parsed_cv_text column if it doesn't exist (migration for existing tables)
    cursor.execute("""
        SELECT COUNT(*) FROM pragma_table_info('applications') WHERE name='parsed_cv_text'
    """)
    if cursor.fetchone()[0] == 0:
        cursor.execute("ALTER TABLE applications ADD COLUMN parsed_cv_text TEXT")

    cursor.execute("""
        CREATE INDEX IF NOT EXISTS idx_applications_job_id
        ON applications(job_id)
    """)
