from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from modrel.core.config import Config, default_config_path, load_config_or_default
from modrel.core.errors import ErrorCode
from modrel.core.result import Err
from modrel.git.repository import Repository
from modrel.output.console import ConsoleProtocol, RichConsole
from modrel.services.release.build import CommandBuildRunner
from modrel.services.release.forum import CommandForumUpdater
from modrel.services.release.gh import GhReleasePublisher
from modrel.services.release.steps import Collaborators, ReleaseOptions, ReleaseState
from modrel.services.release.workshop import CommandWorkshopUploader


@dataclass(frozen=True, slots=True)
class GlobalOptions:
    source: Path | None = None
    config: Path | None = None
    name: str | None = None
    dry_run: bool = False
    verbose: int = 0
    no_style: bool = False


@dataclass(frozen=True, slots=True)
class CLIContext:
    options: GlobalOptions
    config: Config
    console: ConsoleProtocol
    source_dir: Path
    repository: Repository


def global_options(ctx: typer.Context) -> GlobalOptions:
    obj = ctx.find_root().obj
    return obj if isinstance(obj, GlobalOptions) else GlobalOptions()


def build_context(
    options: GlobalOptions, *, require_git: bool = True, console_stderr: bool = False
) -> CLIContext:
    config_path = options.config or default_config_path()
    loaded = load_config_or_default(config_path)
    if isinstance(loaded, Err):
        typer.echo(f"error: {loaded.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.CONFIG_ERROR))

    try:
        source_dir = (options.source or Path.cwd()).expanduser().resolve()
    except OSError as e:
        typer.echo(f"error: invalid --source: {e}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))
    if not source_dir.is_dir():
        typer.echo(f"error: --source '{source_dir}' is not a directory", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    repository = Repository(source_dir)
    if require_git and not repository.exists():
        typer.echo(f"error: {source_dir} is not a git repository", err=True)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    return CLIContext(
        options=options,
        config=loaded.value,
        console=RichConsole(
            no_style=options.no_style, verbosity=options.verbose, stderr=console_stderr
        ),
        source_dir=source_dir,
        repository=repository,
    )


def build_collaborators(ctx: CLIContext) -> Collaborators:
    config = ctx.config
    return Collaborators(
        git=ctx.repository,
        publisher=GhReleasePublisher(cwd=ctx.source_dir),
        workshop=(
            CommandWorkshopUploader(config.workshop.updater) if config.workshop.updater else None
        ),
        forum=(
            CommandForumUpdater(config.forum.updater, cwd=config.base_dir)
            if config.forum.updater
            else None
        ),
        builder=CommandBuildRunner(config.build.command) if config.build.command else None,
    )


def build_state(ctx: CLIContext, options: ReleaseOptions) -> ReleaseState:
    return ReleaseState(
        config=ctx.config,
        options=options,
        source_dir=ctx.source_dir,
        console=ctx.console,
        collaborators=build_collaborators(ctx),
    )
