"""CLI entrypoint for gitpick."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

import typer
from rich.logging import RichHandler

from gitpick.actions import GitActionExecutor
from gitpick.commands import create_command
from gitpick.config import Settings, load_dotenv, load_settings
from gitpick.errors import GitPickError
from gitpick.git.provider import create_provider
from gitpick.terminal import resolve_link
from gitpick.ui.console import get_console
from gitpick.ui.host import run_console
from gitpick.ui.render import (
    render_error,
    render_info,
    render_output,
    render_success,
    render_summary_table,
    render_validation_panel,
    render_warning,
)
from gitpick.ui.views import ConsoleViews
from gitpick.validation import validate_ref_name, validate_settings
from gitpick.wizard.command import PickedVia, QuickCommand
from gitpick.wizard.engine import RunOutcome
from gitpick.wizard.services import Services, WorkbenchViews

logger = logging.getLogger(__name__)

app = typer.Typer(add_completion=False, help="Build git commands one decision at a time.")
config_app = typer.Typer(add_completion=False, help="Settings helpers and validation.")
ref_app = typer.Typer(add_completion=False, help="Reference name helpers.")
stash_app = typer.Typer(add_completion=False, help="Apply or drop a stash.")
app.add_typer(config_app, name="config")
app.add_typer(ref_app, name="ref")
app.add_typer(stash_app, name="stash")

RepoOption = typer.Option(None, "--repo", "-r", help="Repository path; skips the repository step.")
RefOption = typer.Option(None, "--ref", help="Branch, tag or commit id; skips the reference step.")
TuiOption = typer.Option(False, "--tui", help="Use the full-screen Textual picker.")
NoConfirmOption = typer.Option(False, "--no-confirm", help="Skip the confirmation step.")


@app.callback(invoke_without_command=True)
def root(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level."),
) -> None:
    """gitpick command wizard."""
    load_dotenv()
    settings = load_settings()
    _configure_logging("DEBUG" if verbose else settings.log_level)
    ctx.obj = settings
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=0)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=get_console(), show_path=False)],
        force=True,
    )


def _settings(ctx: typer.Context) -> Settings:
    return ctx.obj if isinstance(ctx.obj, Settings) else load_settings()


def _build_services(settings: Settings, views: WorkbenchViews) -> Services:
    provider = create_provider("git", paths=settings.repos)
    return Services(
        provider=provider,
        executor=GitActionExecutor(provider, views),
        views=views,
        settings=settings,
    )


def _seed(repo: str | None, **fields: Any) -> dict[str, Any]:
    state = {key: value for key, value in fields.items() if value is not None}
    if repo:
        state["repo"] = repo
    return state


def _run(ctx: typer.Context, command: QuickCommand, *, tui: bool) -> None:
    settings = _settings(ctx)
    use_tui = tui or settings.host == "tui"
    if use_tui:
        from gitpick.ui.app import NotifyViews, run_tui

        services = _build_services(settings, NotifyViews())
    else:
        services = _build_services(settings, ConsoleViews())

    try:
        if use_tui:
            outcome = run_tui(command, services)
        else:
            outcome = asyncio.run(run_console(command, services))
    except GitPickError as exc:
        render_error(str(exc))
        raise typer.Exit(code=1) from exc

    _report(outcome)


def _report(outcome: RunOutcome | None) -> None:
    if outcome is None or outcome.cancelled:
        render_info("Cancelled.")
        return
    failed = False
    for result in outcome.action_results:
        if result.output:
            render_output(result.message, result.output, syntax=result.syntax)
        elif result.ok:
            render_success(result.message)
        else:
            render_error(result.message)
        failed = failed or not result.ok
    if failed:
        raise typer.Exit(code=1)


def _command(key: str, state: dict[str, Any], *, no_confirm: bool = False) -> QuickCommand:
    if no_confirm:
        state["confirm"] = False
    return create_command(key, state, picked_via=PickedVia.CLI)


@app.command("log")
def log_command(
    ctx: typer.Context,
    repo: Optional[str] = RepoOption,
    ref: Optional[str] = RefOption,
    tui: bool = TuiOption,
) -> None:
    """Browse commit history, then act on a commit."""
    _run(ctx, _command("log", _seed(repo, reference=ref)), tui=tui)


@app.command("show")
def show_command(
    ctx: typer.Context,
    repo: Optional[str] = RepoOption,
    ref: Optional[str] = RefOption,
    file: Optional[str] = typer.Option(None, "--file", "-f", help="Changed file to open directly."),
    tui: bool = TuiOption,
) -> None:
    """Show a commit or stash, its changed files and their actions."""
    _run(ctx, _command("show", _seed(repo, reference=ref, file=file)), tui=tui)


def _stash(ctx: typer.Context, subcommand: str, repo: str | None, ref: str | None, no_confirm: bool, tui: bool) -> None:
    state = _seed(repo, subcommand=subcommand, reference=ref)
    _run(ctx, _command("stash", state, no_confirm=no_confirm), tui=tui)


@stash_app.command("apply")
def stash_apply(
    ctx: typer.Context,
    repo: Optional[str] = RepoOption,
    ref: Optional[str] = typer.Option(None, "--ref", help="Stash name, e.g. stash@{0}."),
    no_confirm: bool = NoConfirmOption,
    tui: bool = TuiOption,
) -> None:
    """Apply a stash to the working tree."""
    _stash(ctx, "apply", repo, ref, no_confirm, tui)


@stash_app.command("drop")
def stash_drop(
    ctx: typer.Context,
    repo: Optional[str] = RepoOption,
    ref: Optional[str] = typer.Option(None, "--ref", help="Stash name, e.g. stash@{0}."),
    no_confirm: bool = NoConfirmOption,
    tui: bool = TuiOption,
) -> None:
    """Drop a stash."""
    _stash(ctx, "drop", repo, ref, no_confirm, tui)


@app.command("branch")
def branch_command(
    ctx: typer.Context,
    repo: Optional[str] = RepoOption,
    ref: Optional[str] = RefOption,
    name: Optional[str] = typer.Option(None, "--name", "-n", help="New branch name."),
    no_confirm: bool = NoConfirmOption,
    tui: bool = TuiOption,
) -> None:
    """Create a branch from a branch, tag or commit."""
    _run(ctx, _command("branch", _seed(repo, reference=ref, name=name), no_confirm=no_confirm), tui=tui)


@app.command("tag")
def tag_command(
    ctx: typer.Context,
    repo: Optional[str] = RepoOption,
    ref: Optional[str] = RefOption,
    name: Optional[str] = typer.Option(None, "--name", "-n", help="New tag name."),
    message: Optional[str] = typer.Option(None, "--message", "-m", help="Annotate the tag with a message."),
    no_confirm: bool = NoConfirmOption,
    tui: bool = TuiOption,
) -> None:
    """Create a lightweight or annotated tag."""
    state = _seed(repo, reference=ref, name=name, message=message)
    _run(ctx, _command("tag", state, no_confirm=no_confirm), tui=tui)


@app.command("switch")
def switch_command(
    ctx: typer.Context,
    repo: Optional[str] = RepoOption,
    ref: Optional[str] = RefOption,
    no_confirm: bool = NoConfirmOption,
    tui: bool = TuiOption,
) -> None:
    """Switch to a branch, tag or commit."""
    _run(ctx, _command("switch", _seed(repo, reference=ref), no_confirm=no_confirm), tui=tui)


@app.command("link")
def link_command(
    ctx: typer.Context,
    text: str = typer.Argument(..., help="Token clicked in a terminal: a commit id, HEAD, or a ref name."),
    tui: bool = TuiOption,
) -> None:
    """Open the wizard a terminal link points at."""
    settings = _settings(ctx)
    provider = create_provider("git", paths=settings.repos)
    command = asyncio.run(resolve_link(provider, text))
    if command is None:
        render_warning(f"Nothing to open for '{text}'.")
        raise typer.Exit(code=1)
    _run(ctx, command, tui=tui)


@config_app.command("validate")
def config_validate() -> None:
    """Validate GITPICK_* settings from the environment and .env."""
    result = validate_settings()
    errors = [f"{issue.path}: {issue.message}" for issue in result.errors]
    warnings = [f"{issue.path}: {issue.message}" for issue in result.warnings]

    if errors:
        render_validation_panel("INVALID", errors, style="error")
        raise typer.Exit(code=1)

    if warnings:
        render_validation_panel("VALID (with warnings)", warnings, style="warning")
    else:
        render_validation_panel("VALID", ["No issues found."], style="success")


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Print the effective settings."""
    settings = _settings(ctx)
    rows = {key: ", ".join(value) if isinstance(value, list) else str(value) for key, value in settings.to_dict().items()}
    render_summary_table(rows, title="Settings")


@ref_app.command("validate")
def ref_validate(name: str = typer.Argument(..., help="Branch or tag name to check.")) -> None:
    """Check a name against git's reference naming rules."""
    result = validate_ref_name(name)
    if not result.ok:
        render_validation_panel("INVALID", [issue.message for issue in result.errors], style="error")
        raise typer.Exit(code=1)
    render_validation_panel("VALID", [f"'{name}' is a valid reference name."], style="success")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
