"""cvmatch CLI - CV matching and candidate search."""

import json
import logging
import sys
import traceback
from pathlib import Path

import typer
from pydantic import BaseModel, ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from cvmatch.config import DATABASE_URL, DB_PATH
from cvmatch.cv.extractor import extract_document, extract_text
from cvmatch.cv.fetcher import fetch_document
from cvmatch.cv.reader import check_cv_text
from cvmatch.db.applications import insert_applications
from cvmatch.db.connection import init_tables
from cvmatch.db.jobs import get_all_jobs, insert_jobs
from cvmatch.exceptions import CVMatchError
from cvmatch.matching.scorer import match_cv
from cvmatch.schemas.candidate import Application
from cvmatch.schemas.criteria import Criteria
from cvmatch.schemas.job import Job
from cvmatch.schemas.match import MatchResult
from cvmatch.schemas.search import SearchQuery, SearchResponse
from cvmatch.services.match_service import (
    analyze_application,
    batch_analyze,
    match_from_url,
    reparse_missing_cvs,
)
from cvmatch.services.search_service import get_candidate_details, search_stored_candidates

app = typer.Typer(help="cvmatch - Score CVs against shortlisting criteria and search candidates")
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Configure logging for every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _split(value: str | None) -> list[str]:
    """Split a comma-separated option into trimmed, non-empty items."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def _require_database() -> None:
    if DATABASE_URL is None and not DB_PATH.exists():
        console.print("[red]Error: Database not found. Run 'cvmatch init-db' first.[/red]")
        raise typer.Exit(1)


def _load_records(file_path: Path, model: type[BaseModel]) -> list:
    """Load a JSON array of records from a file."""
    if not file_path.exists():
        console.print(f"[red]Error: File not found: {file_path}[/red]")
        raise typer.Exit(1)

    with open(file_path) as f:
        data = json.load(f)

    if not isinstance(data, list):
        console.print("[red]Error: Expected a JSON array of records[/red]")
        raise typer.Exit(1)

    return [model.model_validate(item) for item in data]


@app.command(name="init-db")
def init_db() -> None:
    """Create the jobs and applications tables."""
    try:
        init_tables()
    except Exception as e:
        console.print(f"[red]Error initializing database: {e}[/red]")
        raise typer.Exit(1)

    target = "PostgreSQL" if DATABASE_URL else str(DB_PATH)
    console.print(f"[bold green]Database initialized ({target})[/bold green]")


@app.command(name="import-jobs")
def import_jobs(
    jobs_file: Path = typer.Option(..., "--file", "-f", help="Path to jobs JSON file"),
) -> None:
    """Import jobs from a JSON file.

    The JSON file should contain an array of job objects:
    [{"id": "...", "title": "...", "description": "...", "requirements": "...",
      "shortlist_criteria": "{\\"required_skills\\": [\\"Python\\"]}"}]
    """
    try:
        init_tables()
        jobs = _load_records(jobs_file, Job)
        count = insert_jobs(jobs)
    except (json.JSONDecodeError, ValidationError) as e:
        console.print(f"[red]Error reading {jobs_file}: {e}[/red]")
        raise typer.Exit(1)

    if count > 0:
        console.print(f"[bold green]Imported {count} jobs from {jobs_file}[/bold green]")
    else:
        console.print("[yellow]No new jobs imported (all already exist).[/yellow]")


@app.command(name="import-applications")
def import_applications(
    applications_file: Path = typer.Option(
        ..., "--file", "-f", help="Path to applications JSON file"
    ),
) -> None:
    """Import applications from a JSON file (an array of application objects)."""
    try:
        init_tables()
        applications = _load_records(applications_file, Application)
        count = insert_applications(applications)
    except (json.JSONDecodeError, ValidationError) as e:
        console.print(f"[red]Error reading {applications_file}: {e}[/red]")
        raise typer.Exit(1)

    if count > 0:
        console.print(
            f"[bold green]Imported {count} applications from {applications_file}[/bold green]"
        )
    else:
        console.print("[yellow]No new applications imported (all already exist).[/yellow]")


@app.command(name="jobs")
def list_jobs() -> None:
    """List stored jobs and whether they carry shortlist criteria."""
    _require_database()

    jobs = get_all_jobs()
    if not jobs:
        console.print("[yellow]No jobs found.[/yellow]")
        raise typer.Exit(0)

    table = Table(title=f"Jobs ({len(jobs)})")
    table.add_column("ID", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Company")
    table.add_column("Criteria", justify="center")

    for job in jobs:
        has_criteria = bool(job.shortlist_criteria and job.shortlist_criteria.strip())
        table.add_row(job.id, job.title, job.company_id or "-", "yes" if has_criteria else "default")

    console.print(table)


@app.command()
def extract(
    url: str | None = typer.Option(None, "--url", "-u", help="CV document URL"),
    file: Path | None = typer.Option(None, "--file", "-f", help="Local CV document"),
) -> None:
    """Extract text from a CV document and print it."""
    if (url is None) == (file is None):
        console.print("[red]Error: Pass exactly one of --url or --file[/red]")
        raise typer.Exit(1)

    try:
        if url is not None:
            document = fetch_document(url)
            result = extract_document(document.content, document.content_type, document.url)
        else:
            if not file.exists():
                console.print(f"[red]Error: CV file not found: {file}[/red]")
                raise typer.Exit(1)
            result = extract_document(file.read_bytes(), url=file.name)
    except CVMatchError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if not result.ok:
        console.print(f"[red]Extraction failed: {result.failure.value}[/red]")
        raise typer.Exit(1)

    console.print(f"[dim]{len(result.text)} characters via {result.method}[/dim]", highlight=False)
    sys.stdout.write(result.text + "\n")


@app.command()
def match(
    url: str | None = typer.Option(None, "--url", "-u", help="CV document URL"),
    file: Path | None = typer.Option(None, "--file", "-f", help="Local CV document"),
    skills: str | None = typer.Option(None, "--skills", "-s", help="Comma-separated required skills"),
    min_experience: int = typer.Option(0, "--min-experience", "-e", help="Minimum years of experience"),
    languages: str | None = typer.Option(None, "--languages", "-l", help="Comma-separated languages"),
    job_description: str | None = typer.Option(
        None, "--job-description", "-d", help="Score overlap with this job description"
    ),
    output_json: bool = typer.Option(False, "--json", help="Output result as JSON"),
) -> None:
    """Score a CV against ad-hoc criteria."""
    if (url is None) == (file is None):
        console.print("[red]Error: Pass exactly one of --url or --file[/red]")
        raise typer.Exit(1)

    criteria = Criteria(
        required_skills=_split(skills),
        min_experience=min_experience,
        required_languages=_split(languages),
        match_job_description=bool(job_description),
        job_description=job_description or "",
    )

    try:
        if url is not None:
            result = match_from_url(url, criteria)
        else:
            if not file.exists():
                console.print(f"[red]Error: CV file not found: {file}[/red]")
                raise typer.Exit(1)
            text = check_cv_text(extract_text(file.read_bytes(), url=file.name))
            result = match_cv(text, criteria)
    except CVMatchError as e:
        console.print(f"[red]Error during matching: {e}[/red]")
        raise typer.Exit(1)

    if output_json:
        _output_json(result)
    else:
        _output_match(result, title=url or str(file))


@app.command()
def analyze(
    application_id: str = typer.Argument(..., help="Application id"),
    skills: str | None = typer.Option(None, "--skills", "-s", help="Override required skills"),
    min_experience: int = typer.Option(0, "--min-experience", "-e", help="Override minimum experience"),
    languages: str | None = typer.Option(None, "--languages", "-l", help="Override languages"),
    output_json: bool = typer.Option(False, "--json", help="Output result as JSON"),
) -> None:
    """Score a stored application and save the result.

    Uses the job's shortlist criteria unless override criteria are given.
    """
    _require_database()

    override = Criteria(
        required_skills=_split(skills),
        min_experience=min_experience,
        required_languages=_split(languages),
    )
    result = analyze_application(application_id, override)

    if result is None:
        console.print(f"[red]Could not analyze application {application_id} (see log)[/red]")
        raise typer.Exit(1)

    if output_json:
        _output_json(result)
    else:
        _output_match(result, title=f"Application {application_id}")


@app.command(name="analyze-job")
def analyze_job(
    job_id: str = typer.Argument(..., help="Job id"),
    status: str = typer.Option("pending", "--status", help="Only analyze applications with this status"),
    all_statuses: bool = typer.Option(False, "--all", help="Analyze applications of every status"),
) -> None:
    """Score every application to a job using its shortlist criteria."""
    _require_database()

    try:
        outcomes = batch_analyze(job_id, status=None if all_statuses else status)
    except Exception as e:
        console.print(f"[red]Error during batch analysis: {e}[/red]")
        traceback.print_exc()
        raise typer.Exit(1)

    if not outcomes:
        console.print("[yellow]No applications analyzed.[/yellow]")
        raise typer.Exit(0)

    table = Table(title=f"Analysis for job {job_id}")
    table.add_column("Application", style="dim")
    table.add_column("Candidate", style="cyan")
    table.add_column("Score", style="green", justify="right")
    table.add_column("Error", style="red")

    for outcome in sorted(outcomes, key=lambda o: o.match_score or 0, reverse=True):
        score = f"{outcome.match_score}%" if outcome.ok else "-"
        table.add_row(outcome.application_id, outcome.full_name, score, outcome.error or "")

    console.print(table)


@app.command()
def reparse(
    job_id: str | None = typer.Option(None, "--job-id", "-j", help="Only applications to this job"),
) -> None:
    """Extract and cache CV text for applications that have none."""
    _require_database()

    stats = reparse_missing_cvs(job_id)

    console.print("\n[bold green]Reparse complete![/bold green]")
    console.print(f"  Applications without text: {stats['total']}")
    console.print(f"  Parsed: {stats['succeeded']}")
    console.print(f"  Failed: {stats['failed']}")


@app.command()
def search(
    query: str = typer.Option("", "--query", "-q", help="Free-text search"),
    skills: str | None = typer.Option(None, "--skills", "-s", help="Comma-separated skills"),
    min_experience: int | None = typer.Option(None, "--min-experience", help="Minimum years"),
    max_experience: int | None = typer.Option(None, "--max-experience", help="Maximum years"),
    position: str = typer.Option("", "--position", "-p", help="Current position keyword"),
    languages: str | None = typer.Option(None, "--languages", "-l", help="Comma-separated languages"),
    has_portfolio: bool | None = typer.Option(None, "--portfolio", help="Require a portfolio URL"),
    has_linkedin: bool | None = typer.Option(None, "--linkedin", help="Require a LinkedIn URL"),
    status: str = typer.Option("", "--status", help="Application status"),
    job_id: str | None = typer.Option(None, "--job-id", "-j", help="Only applications to this job"),
    limit: int = typer.Option(50, "--limit", "-n", help="Maximum results (1-100)"),
    output_json: bool = typer.Option(False, "--json", help="Output results as JSON"),
) -> None:
    """Search stored candidates by free text and structured criteria."""
    _require_database()

    search_query = SearchQuery(
        query=query,
        skills=_split(skills),
        min_experience=min_experience,
        max_experience=max_experience,
        current_position=position,
        languages=_split(languages),
        has_portfolio=has_portfolio,
        has_linkedin=has_linkedin,
        status=status,
        limit=limit,
    )
    response = search_stored_candidates(search_query, job_id=job_id)

    if output_json:
        _output_json(response)
    else:
        _output_search(response)


@app.command()
def candidate(
    application_id: str = typer.Argument(..., help="Application id"),
    output_json: bool = typer.Option(False, "--json", help="Output details as JSON"),
) -> None:
    """Show a stored candidate with the skills and experience read from the CV."""
    _require_database()

    details = get_candidate_details(application_id)
    if details is None:
        console.print(f"[red]Candidate {application_id} not found[/red]")
        raise typer.Exit(1)

    if output_json:
        _output_json(details)
        return

    application = details.application
    content = [
        f"[cyan]Email:[/cyan] {application.email or '-'}",
        f"[cyan]Status:[/cyan] {application.status}",
        f"[cyan]Score:[/cyan] {application.score}%",
        f"[cyan]Current position:[/cyan] {application.current_position or '-'}",
        f"[cyan]Detected title:[/cyan] {details.profile.job_title or 'Not detected'}",
        f"[cyan]Experience:[/cyan] {details.profile.experience} years",
        f"[cyan]Skills:[/cyan] {', '.join(details.profile.skills) or 'None detected'}",
        f"[cyan]CV text:[/cyan] {len(details.cv_text)} characters",
    ]
    console.print(Panel("\n".join(content), title=f"[bold]{application.full_name or application.id}[/bold]"))


def _output_json(model: BaseModel) -> None:
    """Output a model as JSON to stdout."""
    json.dump(obj=model.model_dump(mode="json"), fp=sys.stdout, indent=2)
    sys.stdout.write("\n")


def _output_match(result: MatchResult, title: str) -> None:
    """Output a match result in pretty console format."""
    content = [
        f"[cyan]Match Score:[/cyan] {result.match_score}% "
        f"(Skills: {result.skills_match}%, Experience: {result.experience_match}%, "
        f"Languages: {result.language_match}%, Description: {result.job_description_match}%)",
        f"[cyan]Summary:[/cyan] {result.summary}",
        f"[cyan]Why:[/cyan] {result.match_reason}",
    ]

    if result.skills:
        content.append(f"[cyan]Matched skills:[/cyan] {', '.join(result.skills)}")
    if result.missing_skills:
        content.append(f"[yellow]Missing skills:[/yellow] {', '.join(result.missing_skills)}")
    if result.additional_skills:
        content.append(f"[cyan]Other skills:[/cyan] {', '.join(result.additional_skills)}")
    if result.strengths:
        content.append("\n[cyan]Strengths:[/cyan]")
        for strength in result.strengths:
            content.append(f"  • {strength}")

    border = "green" if result.match_score >= 70 else "blue"
    console.print(Panel("\n".join(content), title=f"[bold]{title}[/bold]", border_style=border))


def _output_search(response: SearchResponse) -> None:
    """Output search results as a table."""
    if not response.candidates:
        console.print(f"[yellow]No candidates matched (searched {response.total}).[/yellow]")
        return

    table = Table(title=f"{response.count} of {response.total} candidates")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Candidate", style="cyan")
    table.add_column("Score", style="green", justify="right")
    table.add_column("Why")

    for i, result in enumerate(response.candidates, start=1):
        application = result.application
        table.add_row(
            str(i),
            application.full_name or application.id,
            f"{result.match_score}%",
            "; ".join(result.matched_reasons),
        )

    console.print(table)


if __name__ == "__main__":
    app()
