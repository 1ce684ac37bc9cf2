"""CLI interface for LeetCode MCP using Typer."""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from lcmcp.credentials import CredentialStore
from lcmcp.exceptions import LeetCodeError
from lcmcp.log import setup_logging
from lcmcp.models import Accepted, JudgeError, Rejected
from lcmcp.server import create_server
from lcmcp.session import SessionManager
from lcmcp.storage import Storage
from lcmcp.submission import SubmissionOrchestrator

app = typer.Typer(help="LeetCode authorization and submissions for AI agents")
console = Console()


def _handle_error(e: LeetCodeError) -> None:
    """Print a LeetCodeError and exit non-zero."""
    console.print(f"[red]{e.message}[/red]")
    raise typer.Exit(1)


def _print_failure(result: dict) -> None:
    console.print(f"[red]{result['message']}[/red]")
    console.print(f"  {result['remediation']}")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    setup_logging("DEBUG" if verbose else None)


@app.command()
def serve() -> None:
    """Run the MCP server over stdio."""
    create_server().run()


@app.command()
def login() -> None:
    """Log in through the browser and save the session cookies."""
    session = SessionManager()

    try:
        started = session.start_authorization()
        if started["browserOpened"]:
            console.print(f"Opened [cyan]{started['loginUrl']}[/cyan] in your browser.")
        else:
            console.print(f"Open [cyan]{started['loginUrl']}[/cyan] in your browser.")

        typer.prompt("Log in, then press Enter", default="", show_default=False)

        result = asyncio.run(session.confirm_authorization(started["sessionId"]))
    except LeetCodeError as e:
        _handle_error(e)

    if result["status"] != "success":
        _print_failure(result)
        raise typer.Exit(1)

    console.print(f"[green]Authenticated as[/green] [bold]{result['username']}[/bold] (via {result['browser']})")


@app.command("save-credentials")
def save_credentials(
    csrftoken: str = typer.Option(..., prompt=True, hide_input=True, help="csrftoken cookie value"),
    session_token: str = typer.Option(
        ..., "--session", prompt="LEETCODE_SESSION", hide_input=True, help="LEETCODE_SESSION cookie value"
    ),
) -> None:
    """Validate and save cookies copied from browser DevTools."""
    session = SessionManager()

    try:
        result = asyncio.run(session.save_credentials(csrftoken, session_token))
    except LeetCodeError as e:
        _handle_error(e)

    if result["status"] != "success":
        _print_failure(result)
        raise typer.Exit(1)

    console.print(f"[green]Authenticated as[/green] [bold]{result['username']}[/bold]")


@app.command()
def status() -> None:
    """Show whether saved credentials are still valid."""
    session = SessionManager()

    try:
        result = asyncio.run(session.check_auth_status())
    except LeetCodeError as e:
        _handle_error(e)

    if not result["authenticated"]:
        style = "red" if result.get("expired") else "yellow"
        console.print(f"[{style}]{result['message']}[/{style}]")
        raise typer.Exit(1)

    table = Table(show_header=False)
    table.add_row("Username", f"[bold]{result['username']}[/bold]")
    table.add_row("Age", f"{result['ageDays']} days")
    console.print(table)
    if result["warning"]:
        console.print(f"[yellow]{result['warning']}[/yellow]")


@app.command()
def logout() -> None:
    """Delete saved credentials."""
    SessionManager().clear_credentials()
    console.print("Credentials cleared.")


@app.command()
def submit(
    slug: str = typer.Argument(..., help="Problem slug (e.g., 'two-sum')"),
    solution: Path = typer.Argument(..., exists=True, dir_okay=False, help="Solution source file"),
    language: Optional[str] = typer.Option(None, "--lang", "-l", help="Language (defaults to config)"),
) -> None:
    """Submit a solution file to LeetCode."""
    storage = Storage()
    try:
        lang = language or storage.get_config().language
    except LeetCodeError as e:
        _handle_error(e)
    code = solution.read_text(encoding="utf-8")

    console.print(f"Submitting '[bold]{slug}[/bold]'...")
    result = asyncio.run(SubmissionOrchestrator(CredentialStore(storage)).submit(slug, code, lang))

    if isinstance(result, Accepted):
        console.print("[green bold]Accepted[/green bold]")
        if result.runtime:
            console.print(f"  Runtime: {result.runtime}")
        if result.memory:
            console.print(f"  Memory: {result.memory}")
        return

    console.print(f"[red bold]{result.status_msg}[/red bold]")
    if isinstance(result, Rejected):
        if result.total_testcases:
            console.print(f"  {result.total_correct}/{result.total_testcases} test cases passed")
        if result.failed_test_case:
            console.print(f"  Input: {result.failed_test_case.input}")
            console.print(f"  Expected: {result.failed_test_case.expected}")
            console.print(f"  Output: {result.failed_test_case.actual}")
        if result.stdout:
            console.print(f"  Stdout: {result.stdout}")
    elif isinstance(result, JudgeError):
        if result.detail:
            console.print(result.detail)
    else:
        console.print(f"  {result.to_dict()['errorMessage']}")
    raise typer.Exit(1)


if __name__ == "__main__":
    app()
