from __future__ import annotations

from dataclasses import replace

import typer

from modrel.cli.commands._helpers import exit_with_code, release_error_code, run_steps_or_exit
from modrel.cli.context import build_context, build_state, global_options
from modrel.core.errors import ErrorCode
from modrel.core.result import Err
from modrel.services.release.changenotes import collect_since_last_tag, format_release_note
from modrel.services.release.model import DIALECTS
from modrel.services.release.steps import ReleaseOptions, remote_steps, render_steps


def render(
    ctx: typer.Context,
    dialect: str = typer.Argument("plain", help="plain, restricted or forum"),
) -> None:
    """Print the rendered mod description."""
    opts = global_options(ctx)
    if dialect not in DIALECTS:
        typer.echo(
            f"error: unknown dialect '{dialect}' (expected: {', '.join(DIALECTS)})", err=True
        )
        exit_with_code(ErrorCode.CONFIG_ERROR)

    # Rendering only reads; dry-run would skip the steps that load the templates.
    cli = build_context(replace(opts, dry_run=False), require_git=False, console_stderr=True)
    state = build_state(cli, ReleaseOptions(name=opts.name))
    run_steps_or_exit(cli, render_steps(), state)
    typer.echo(state.descriptions[dialect], nl=False)  # type: ignore[index]


def notes(ctx: typer.Context) -> None:
    """Print change notes for commits since the last tag."""
    cli = build_context(global_options(ctx))
    collected = collect_since_last_tag(cli.repository, repo=None)
    if isinstance(collected, Err):
        cli.console.error(collected.error.message)
        exit_with_code(release_error_code(collected.error.kind))

    for line in collected.value.rejected:
        cli.console.warning(f"skipped log line with unreadable date: {line}")
    if not collected.value.notes:
        cli.console.info("no change notes since the last tag")
        return
    for note in collected.value.notes:
        typer.echo(format_release_note(note))


def remote(
    ctx: typer.Context,
    git_user: str = typer.Argument(..., help="GitHub user or organization"),
    git_repo: str | None = typer.Argument(None, help="Repository name (defaults to the mod's)"),
) -> None:
    """Point origin at a GitHub repository and record it in the descriptor."""
    opts = global_options(ctx)
    cli = build_context(opts)
    state = build_state(cli, ReleaseOptions(name=opts.name))
    run_steps_or_exit(cli, remote_steps(git_user, git_repo), state)
