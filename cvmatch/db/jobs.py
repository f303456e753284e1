"""Job database operations."""

import sqlite3
from typing import Any

import psycopg2

from cvmatch.db.connection import get_connection
from cvmatch.schemas.job import Job


def insert_jobs(jobs: list[Job]) -> int:
    """Insert jobs into the database.

    Args:
        jobs: List of Job objects to insert.

    Returns:
        Number of jobs inserted (excludes duplicates).
    """
    inserted = 0

    with get_connection() as db:
        cursor = db.cursor()
        ph = db.placeholder

        for job in jobs:
            try:
                cursor.execute(
                    f"""
                    INSERT INTO jobs (
                        id, title, description, requirements, company_id, shortlist_criteria
                    ) VALUES ({", ".join([ph] * 6)})
                    """,
                    (
                        job.id, job.title, job.description, job.requirements,
                        job.company_id, job.shortlist_criteria,
                    ),
                )
                inserted += 1
            except (sqlite3.IntegrityError, psycopg2.IntegrityError):
                pass  # Job already exists

        db.commit()

    return inserted


def get_job(job_id: str) -> Job | None:
    """Retrieve a single job by its id.

    Args:
        job_id: The job id to retrieve.

    Returns:
        Job object if found, None otherwise.
    """
    with get_connection() as db:
        cursor = db.cursor(dictionary=True)
        ph = db.placeholder
        cursor.execute(f"SELECT * FROM jobs WHERE id = {ph}", (job_id,))
        row = cursor.fetchone()

    if row is None:
        return None

    return _row_to_job(row)


def get_all_jobs() -> list[Job]:
    """Retrieve all jobs from the database."""
    with get_connection() as db:
        cursor = db.cursor(dictionary=True)
        cursor.execute("SELECT * FROM jobs ORDER BY created_at, id")
        rows = cursor.fetchall()

    return [_row_to_job(row) for row in rows]


def _row_to_job(row: Any) -> Job:
    """Convert a database row to a Job object."""
    return Job(
        id=row["id"],
        title=row["title"],
        description=row["description"] or "",
        requirements=row["requirements"] or "",
        company_id=row["company_id"],
        shortlist_criteria=row["shortlist_criteria"],
    )
