from __future__ import annotations

from pathlib import Path

import typer

from modrel import __version__
from modrel.cli.commands.content_cmd import notes, remote, render
from modrel.cli.commands.release_cmd import release, update
from modrel.cli.context import GlobalOptions


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# Commands
app.command()(release)
app.command()(update)
app.command()(render)
app.command()(notes)
app.command()(remote)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_print_version,
        is_eager=True,
        help="Show version and exit.",
    ),
    source: Path | None = typer.Option(
        None, "--source", "-s", help="Mod directory (defaults to the current directory)."
    ),
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Config file (defaults to $MODREL_CONFIG or ./modrel.toml)."
    ),
    name: str | None = typer.Option(None, "--name", "-n", help="Override the mod name."),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-m", help="Print what would happen; change nothing."
    ),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="More output."),
    no_style: bool = typer.Option(
        False, "--no-style", "-x", help="Plain output for terminals without styling."
    ),
) -> None:
    ctx.obj = GlobalOptions(
        source=source,
        config=config,
        name=name,
        dry_run=dry_run,
        verbose=verbose,
        no_style=no_style,
    )


def main() -> None:
    app()
