"""Application database operations: records, cached CV text and analysis results."""

import sqlite3
from datetime import UTC, datetime
from typing import Any

import psycopg2

from cvmatch.db.connection import get_connection
from cvmatch.schemas.candidate import Application
from cvmatch.schemas.match import MatchResult

_COLUMNS = (
    "id", "job_id", "full_name", "email", "resume_url", "years_of_experience",
    "current_position", "linkedin_url", "portfolio_url", "status", "score",
    "analysis_result", "parsed_cv_text",
)


def insert_applications(applications: list[Application]) -> int:
    """Insert applications into the database.

    Args:
        applications: List of Application objects to insert.

    Returns:
        Number of applications inserted (excludes duplicates).
    """
    inserted = 0

    with get_connection() as db:
        cursor = db.cursor()
        ph = db.placeholder

        for application in applications:
            try:
                cursor.execute(
                    f"INSERT INTO applications ({', '.join(_COLUMNS)}) "
                    f"VALUES ({', '.join([ph] * len(_COLUMNS))})",
                    tuple(getattr(application, column) for column in _COLUMNS),
                )
                inserted += 1
            except (sqlite3.IntegrityError, psycopg2.IntegrityError):
                pass  # Application already exists

        db.commit()

    return inserted


def get_application(application_id: str) -> Application | None:
    """Retrieve a single application by its id.

    Args:
        application_id: The application id to retrieve.

    Returns:
        Application object if found, None otherwise.
    """
    with get_connection() as db:
        cursor = db.cursor(dictionary=True)
        ph = db.placeholder
        cursor.execute(f"SELECT * FROM applications WHERE id = {ph}", (application_id,))
        row = cursor.fetchone()

    if row is None:
        return None

    return _row_to_application(row)


def get_applications(
    job_id: str | None = None,
    status: str | None = None,
    has_portfolio: bool | None = None,
    has_linkedin: bool | None = None,
    min_experience: int | None = None,
    max_experience: int | None = None,
    current_position: str | None = None,
) -> list[Application]:
    """Retrieve applications with optional filters.

    Filtering is pushed down to the database so search only loads the
    candidates it can rank. Presence filters only apply when True.

    Args:
        job_id: Only applications to this job.
        status: Exact application status.
        has_portfolio: Require a non-empty portfolio URL.
        has_linkedin: Require a non-empty LinkedIn URL.
        min_experience: Minimum declared years of experience.
        max_experience: Maximum declared years of experience.
        current_position: Case-insensitive substring of the current position.

    Returns:
        Matching applications in insertion order.
    """
    with get_connection() as db:
        cursor = db.cursor(dictionary=True)
        ph = db.placeholder

        query = "SELECT * FROM applications"
        params: list[Any] = []
        conditions: list[str] = []

        if job_id:
            conditions.append(f"job_id = {ph}")
            params.append(job_id)

        if status:
            conditions.append(f"status = {ph}")
            params.append(status)

        if has_portfolio:
            conditions.append("portfolio_url IS NOT NULL AND portfolio_url != ''")

        if has_linkedin:
            conditions.append("linkedin_url IS NOT NULL AND linkedin_url != ''")

        if min_experience is not None:
            conditions.append(f"years_of_experience >= {ph}")
            params.append(min_experience)

        if max_experience is not None:
            conditions.append(f"years_of_experience <= {ph}")
            params.append(max_experience)

        if current_position:
            conditions.append(f"LOWER(current_position) LIKE {ph}")
            params.append(f"%{current_position.lower()}%")

        if conditions:
            query += " WHERE " + " AND ".join(conditions)
        query += " ORDER BY created_at, id"

        cursor.execute(query, params)
        rows = cursor.fetchall()

    return [_row_to_application(row) for row in rows]


def get_applications_missing_text(job_id: str | None = None) -> list[Application]:
    """Retrieve applications with a CV URL but no cached CV text."""
    with get_connection() as db:
        cursor = db.cursor(dictionary=True)
        ph = db.placeholder

        query = (
            "SELECT * FROM applications "
            "WHERE (parsed_cv_text IS NULL OR parsed_cv_text = '') "
            "AND resume_url IS NOT NULL AND resume_url != ''"
        )
        params: list[Any] = []
        if job_id:
            query += f" AND job_id = {ph}"
            params.append(job_id)
        query += " ORDER BY created_at, id"

        cursor.execute(query, params)
        rows = cursor.fetchall()

    return [_row_to_application(row) for row in rows]


def get_unscored_applications(
    job_id: str | None = None,
    status: str = "pending",
) -> list[Application]:
    """Retrieve applications that have never been analyzed.

    Args:
        job_id: Only applications to this job.
        status: Application status to consider.

    Returns:
        Applications without a stored analysis result.
    """
    with get_connection() as db:
        cursor = db.cursor(dictionary=True)
        ph = db.placeholder

        query = f"SELECT * FROM applications WHERE analysis_result IS NULL AND status = {ph}"
        params: list[Any] = [status]
        if job_id:
            query += f" AND job_id = {ph}"
            params.append(job_id)
        query += " ORDER BY created_at, id"

        cursor.execute(query, params)
        rows = cursor.fetchall()

    return [_row_to_application(row) for row in rows]


def save_parsed_text(application_id: str, text: str) -> None:
    """Cache extracted CV text on an application.

    Concurrent writers may race; the last write wins, which is fine because
    the text is derived from the same document.
    """
    with get_connection() as db:
        cursor = db.cursor()
        ph = db.placeholder
        cursor.execute(
            f"UPDATE applications SET parsed_cv_text = {ph} WHERE id = {ph}",
            (text, application_id),
        )
        db.commit()


def save_analysis(application_id: str, result: MatchResult) -> None:
    """Store a match result and its score on an application.

    Args:
        application_id: Application that was analyzed.
        result: Match result to store as JSON.
    """
    with get_connection() as db:
        cursor = db.cursor()
        ph = db.placeholder
        cursor.execute(
            f"""
            UPDATE applications
            SET score = {ph}, analysis_result = {ph}, analyzed_at = {ph}
            WHERE id = {ph}
            """,
            (
                result.match_score,
                result.model_dump_json(),
                datetime.now(UTC).isoformat(),
                application_id,
            ),
        )
        db.commit()


def _row_to_application(row: Any) -> Application:
    """Convert a database row to an Application object."""
    return Application(
        id=row["id"],
        job_id=row["job_id"],
        full_name=row["full_name"] or "",
        email=row["email"] or "",
        resume_url=row["resume_url"] or "",
        years_of_experience=row["years_of_experience"] or 0,
        current_position=row["current_position"] or "",
        linkedin_url=row["linkedin_url"] or "",
        portfolio_url=row["portfolio_url"] or "",
        status=row["status"] or "pending",
        score=row["score"] or 0,
        analysis_result=row["analysis_result"],
        parsed_cv_text=row["parsed_cv_text"],
    )
