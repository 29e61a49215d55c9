"""Shared helpers for CLI commands."""

from __future__ import annotations

from collections.abc import Sequence
from typing import NoReturn

import typer

from modrel.cli.context import CLIContext
from modrel.core.errors import ErrorCode
from modrel.core.result import Err
from modrel.output.console import Style
from modrel.services.release.errors import ReleaseErrorKind
from modrel.services.release.pipeline import PipelineReport, Step, run_pipeline
from modrel.services.release.steps import ReleaseState


def release_error_code(kind: ReleaseErrorKind) -> ErrorCode:
    match kind:
        case "config_invalid" | "template_missing" | "render_failed":
            return ErrorCode.CONFIG_ERROR
        case "git_failed":
            return ErrorCode.ENV_ERROR
        case "io_failed" | "parse_failed":
            return ErrorCode.IO_ERROR
        case "build_failed":
            return ErrorCode.BUILD_ERROR
        case "publish_failed" | "workshop_failed" | "forum_failed":
            return ErrorCode.NETWORK_ERROR
        case _:
            return ErrorCode.USER_ERROR


def exit_with_code(code: ErrorCode) -> NoReturn:
    raise typer.Exit(code=int(code))


def run_steps_or_exit(
    ctx: CLIContext, steps: Sequence[Step[ReleaseState]], state: ReleaseState
) -> PipelineReport:
    """Run ``steps``; on failure print the failing step and exit with its code."""
    result = run_pipeline(steps, state, console=ctx.console, dry_run=ctx.options.dry_run)
    if isinstance(result, Err):
        failure = result.error
        ctx.console.error(f"step '{failure.step}' failed: {failure.error.message}")
        if failure.error.hint:
            ctx.console.print(f"hint: {failure.error.hint}", Style.DIM)
        exit_with_code(release_error_code(failure.error.kind))
    return result.value


def print_done(ctx: CLIContext, state: ReleaseState) -> None:
    if state.descriptor is not None:
        game = f" || {ctx.config.game.name} v{state.game}" if state.game else ""
        ctx.console.print(f"\t{state.descriptor.name} v{state.descriptor.version}{game}\t", Style.DONE)
    ctx.console.print("\tAll done!\t", Style.DONE)
