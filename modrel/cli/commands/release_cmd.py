from __future__ import annotations

import typer

from modrel.cli.commands._helpers import print_done, run_steps_or_exit
from modrel.cli.context import build_context, build_state, global_options
from modrel.services.release.steps import ReleaseOptions, release_steps, update_steps


def release(
    ctx: typer.Context,
    major: bool = typer.Option(
        False, "--major", "-M", help="Major release (major+1, minor reset, build+1)."
    ),
    prerelease: bool = typer.Option(
        False, "--prerelease", "-p", help="GitHub prerelease. Implies --no-steam."
    ),
    draft: bool = typer.Option(False, "--draft", "-d", help="GitHub draft. Implies --no-steam."),
    force_commit: bool = typer.Option(
        False, "--force-commit", "-f", help="Continue with uncommitted or unpushed work."
    ),
    no_version_bump: bool = typer.Option(
        False, "--no-version-bump", "-V", help="Keep the current version."
    ),
    forum_title: str | None = typer.Option(
        None, "--forum-title", "-T", help="Forum thread title addition."
    ),
    no_build: bool = typer.Option(False, "--no-build", help="Skip the build command."),
    no_steam: bool = typer.Option(False, "--no-steam", help="Skip the workshop update."),
    no_github: bool = typer.Option(False, "--no-github", help="Skip the GitHub release."),
    no_forum: bool = typer.Option(False, "--no-forum", help="Skip the forum post update."),
    reset_tag: bool = typer.Option(
        False, "--reset-tag", "-r", help="Replace local tags with origin's before collecting notes."
    ),
) -> None:
    """Bump, build, commit and publish a release."""
    opts = global_options(ctx)
    cli = build_context(opts)
    state = build_state(
        cli,
        ReleaseOptions(
            release=True,
            major=major,
            prerelease=prerelease,
            draft=draft,
            force_commit=force_commit,
            no_version_bump=no_version_bump,
            forum_title=forum_title,
            no_build=no_build,
            no_steam=no_steam,
            no_github=no_github,
            no_forum=no_forum,
            reset_tag=reset_tag,
            name=opts.name,
        ),
    )
    cli.console.header("Release")
    run_steps_or_exit(cli, release_steps(), state)
    print_done(cli, state)


def update(
    ctx: typer.Context,
    no_version_bump: bool = typer.Option(
        False, "--no-version-bump", "-V", help="Keep the current build number."
    ),
    no_build: bool = typer.Option(False, "--no-build", help="Skip the build command."),
    reset_tag: bool = typer.Option(
        False, "--reset-tag", "-r", help="Replace local tags with origin's before collecting notes."
    ),
) -> None:
    """Refresh descriptor, About.xml, readme and license, then build (build+1)."""
    opts = global_options(ctx)
    cli = build_context(opts)
    state = build_state(
        cli,
        ReleaseOptions(
            release=False,
            no_version_bump=no_version_bump,
            no_build=no_build,
            reset_tag=reset_tag,
            name=opts.name,
        ),
    )
    cli.console.header("Update")
    run_steps_or_exit(cli, update_steps(), state)
    print_done(cli, state)
