"""Defines the Command Line Interface (CLI) using Typer."""

import asyncio
import json
import sys
from pathlib import Path
from typing import Any

import typer
from dotenv import load_dotenv
from typer import Argument, Option
from typing_extensions import Annotated

from github_notion_sync.configuration.driver import get_sync_config
from github_notion_sync.configuration.exceptions import RequiredConfigurationElementError
from github_notion_sync.configuration.models import SyncConfig
from github_notion_sync.synchronize.driver import run_event_workflow, run_reconciliation_workflow
from github_notion_sync.synchronize.exceptions import LedgerSyncError
from github_notion_sync.synchronize.results import SyncOutcome
from github_notion_sync.utils.log_setup import configure_logging

load_dotenv()

typer_app = typer.Typer(pretty_exceptions_show_locals=False, help="Synchronize GitHub issues into a Notion database.")


@typer_app.callback()
def main_callback(
    ctx: typer.Context,
    notion_token: Annotated[str | None, Option(envvar="NOTION_TOKEN", help="Notion integration token.")] = None,
    notion_database_id: Annotated[str | None, Option(envvar="NOTION_DATABASE_ID", help="ID of the Notion database to synchronize into.")] = None,
    github_token: Annotated[str | None, Option(envvar="GITHUB_TOKEN", help="GitHub token.")] = None,
    github_api_url: Annotated[str | None, Option(envvar="GITHUB_API_URL", help="GitHub API URL.")] = None,
    max_concurrency: Annotated[int | None, Option(envvar="MAX_CONCURRENCY", help="Maximum number of pages created concurrently.")] = None,
    request_timeout: Annotated[float | None, Option(envvar="REQUEST_TIMEOUT", help="Per-request timeout in seconds.")] = None,
    debug: Annotated[bool, Option(envvar="DEBUG", help="Enable debug mode.")] = False,
) -> None:
    """Store the connection options for the current context."""
    configure_logging(debug)
    ctx.ensure_object(dict)
    ctx.obj["notion_token"] = notion_token
    ctx.obj["notion_database_id"] = notion_database_id
    ctx.obj["github_token"] = github_token
    ctx.obj["github_api_url"] = github_api_url
    ctx.obj["max_concurrency"] = max_concurrency
    ctx.obj["request_timeout"] = request_timeout
    ctx.obj["debug"] = debug


def resolve_config(ctx: typer.Context) -> SyncConfig:
    """Validate the connection options before any network call, exiting on configuration errors."""
    try:
        return get_sync_config(**ctx.obj)
    except (RequiredConfigurationElementError, ValueError) as e:
        typer.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)


def report_outcome(outcome: SyncOutcome) -> None:
    """Echo a summary of a reconciliation pass."""
    typer.echo(f"Considered {outcome.issues_considered} issues, created {outcome.created} pages, {len(outcome.failures)} failures")
    for failure in outcome.failures:
        typer.echo(f"Issue #{failure.issue_number}: {failure.error}", err=True)


def load_event_payload(event_path: Path) -> dict[str, Any]:
    """Load the JSON payload of a GitHub event from disk."""
    if not event_path.exists():
        error = f"GitHub event payload not found: {event_path.absolute()}"
        typer.echo(error, err=True)
        raise FileNotFoundError(error)
    return json.loads(event_path.read_text(encoding="utf-8"))


@typer_app.command(name="sync-event")
def sync_event_cli(
    ctx: typer.Context,
    event_name: Annotated[str, Option(envvar="GITHUB_EVENT_NAME", help="Name of the GitHub event that triggered the run.")],
    event_path: Annotated[Path, Option(envvar="GITHUB_EVENT_PATH", help="Path to the JSON payload of the GitHub event.")],
) -> None:
    """Synchronize Notion with the GitHub event that triggered the run.

    An opened issue creates its page, an edited issue updates its page and a
    workflow_dispatch event reconciles the whole repository.
    """
    config = resolve_config(ctx)
    payload = load_event_payload(event_path)
    try:
        outcome = asyncio.run(run_event_workflow(config, event_name, payload))
    except LedgerSyncError as e:
        report_outcome(e.outcome)
        typer.echo(str(e), err=True)
        sys.exit(1)
    except Exception as e:
        typer.echo(f"Synchronization failed: {e}", err=True)
        sys.exit(1)
    if outcome is not None:
        report_outcome(outcome)


@typer_app.command(name="reconcile")
def reconcile_cli(
    ctx: typer.Context,
    repo: Annotated[str, Argument(envvar="GITHUB_REPOSITORY", help="Repository name (owner/repo).")],
) -> None:
    """Create a Notion page for every issue of a repository that does not have one yet."""
    config = resolve_config(ctx)
    try:
        outcome = asyncio.run(run_reconciliation_workflow(config, repo))
    except LedgerSyncError as e:
        report_outcome(e.outcome)
        typer.echo(str(e), err=True)
        sys.exit(1)
    except Exception as e:
        typer.echo(f"Synchronization failed: {e}", err=True)
        sys.exit(1)
    report_outcome(outcome)
