"""Database connection module."""

from cvmatch.db.applications import (
    get_application,
    get_applications,
    get_applications_missing_text,
    get_unscored_applications,
    insert_applications,
    save_analysis,
    save_parsed_text,
)
from cvmatch.db.connection import get_connection, init_tables
from cvmatch.db.jobs import get_all_jobs, get_job, insert_jobs

__all__ = [
    "get_connection",
    "init_tables",
    "insert_jobs",
    "get_job",
    "get_all_jobs",
    "insert_applications",
    "get_application",
    "get_applications",
    "get_applications_missing_text",
    "get_unscored_applications",
    "save_parsed_text",
    "save_analysis",
]
