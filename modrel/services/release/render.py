"""Mod description rendering.

One markdown description template (``Source/Description.md`` in the mod) is
expanded into three dialects:

- plain: markdown for the repository readme and release bodies, with a game
  version badge on top and the current change notes at the bottom.
- restricted: the in-game description (``About.xml``).
- forum: bulletin-board markup for the workshop page, with the standard
  footer (license, bug reports, forum thread).

All dialects share the contributors section and the version block.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import quote

from modrel.core.config import Config, GameConfig
from modrel.core.result import Err, Ok, Result
from modrel.output.console import ConsoleProtocol
from modrel.services.release.document import parse_document
from modrel.services.release.errors import ReleaseError
from modrel.services.release.expression import fill_template, freeze
from modrel.services.release.markup import print_forum, print_restricted
from modrel.services.release.model import DIALECTS, Dialect, ModDescriptor
from modrel.services.release.version import game_version, version_to_dict

BUNDLED_TEMPLATES_DIR = Path(__file__).resolve().parents[2] / "templates"
VERSION_TEMPLATE = "Version.md"
FOOTER_TEMPLATE = "DescriptionFooter.md"


@dataclass(frozen=True, slots=True)
class Templates:
    description: str
    version: str
    footer: str


def _read_template(path: Path, *, what: str) -> Result[str, ReleaseError]:
    try:
        return Ok(path.read_text(encoding="utf-8"))
    except OSError as e:
        return Err(
            ReleaseError(
                kind="template_missing",
                message=f"failed to read {what} template: {e}",
                hint=str(path),
            )
        )


def load_templates(
    *, config: Config, source_dir: Path, console: ConsoleProtocol
) -> Result[Templates, ReleaseError]:
    """Read the description, version and footer templates.

    A mod without a description template renders an empty description (with a
    warning); the version and footer templates are required.
    """
    description = ""
    description_path = source_dir / config.templates.description
    try:
        description = description_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        console.warning(f"no description template at {description_path}")
    except OSError as e:
        return Err(
            ReleaseError(
                kind="template_missing",
                message=f"failed to read description template: {e}",
                hint=str(description_path),
            )
        )

    version_path = (
        config.shared_path(config.templates.version)
        if config.templates.version
        else BUNDLED_TEMPLATES_DIR / VERSION_TEMPLATE
    )
    version = _read_template(version_path, what="version")
    if isinstance(version, Err):
        return version

    footer_path = (
        config.shared_path(config.templates.footer)
        if config.templates.footer
        else BUNDLED_TEMPLATES_DIR / FOOTER_TEMPLATE
    )
    footer = _read_template(footer_path, what="footer")
    if isinstance(footer, Err):
        return footer

    return Ok(Templates(description=description, version=version.value, footer=footer.value))


def read_game_version(game: GameConfig, *, base_dir: Path) -> Result[str, ReleaseError]:
    """The game version string, from config or the game's version file ("" if neither)."""
    if game.version:
        return Ok(game.version)
    if not game.version_file:
        return Ok("")

    path = Path(game.version_file).expanduser()
    if not path.is_absolute():
        path = base_dir / path
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        return Err(
            ReleaseError(
                kind="config_invalid",
                message=f"failed to read game version file: {e}",
                hint=str(path),
            )
        )
    return Ok(game_version(raw, "full"))


def badge(subject: str, status: str, color: str = "brightgreen", href: str | None = None) -> str:
    """Markdown shields.io badge, optionally linked."""
    url = (
        "https://img.shields.io/badge/"
        f"{quote(subject, safe='')}-{quote(status, safe='')}-{color}.svg"
    )
    shield = f"![{subject} {status}]({url})"
    if href:
        return f"[{shield}]({href})"
    return shield


def game_badge(game: GameConfig, version: str) -> str:
    return badge(game.name, game_version(version, "main"), "brightgreen", game.url)


def render_scope(
    *, descriptor: ModDescriptor, config: Config, dialect: str, game: str
) -> Mapping[str, object]:
    """Read-only names visible to template expressions: mod, config, dialect, version."""
    version = str(descriptor.version)
    mod: dict[str, object] = {
        "name": descriptor.name,
        "package_id": descriptor.package_id,
        "version": version,
        "version_info": version_to_dict(descriptor.version),
        "tag": descriptor.version.to_tag(),
        "contributors": dict(descriptor.contributors),
        "tags": list(descriptor.tags),
        "git_user": descriptor.git_user,
        "git_repo": descriptor.git_repo,
        "repo_url": (
            f"https://github.com/{descriptor.repo_slug}" if descriptor.repo_slug else None
        ),
        "published_file_id": descriptor.published_file_id,
        "changenote": descriptor.changenote,
    }
    cfg: dict[str, object] = {
        "author": config.author,
        "forum_thread": config.forum_thread,
        "game": {
            "name": config.game.name,
            "url": config.game.url,
            "version": game,
            "main_version": game_version(game, "main"),
        },
    }
    return freeze({"mod": mod, "config": cfg, "dialect": dialect, "version": version})


def _contributors_section(contributors: Mapping[str, str]) -> str:
    lines = [f" - {name}:\t{summary}" for name, summary in contributors.items() if summary]
    if not lines:
        return ""
    return "# Contributors\n" + "\n".join(lines)


def _changenotes_section(changenote: str) -> str:
    lines = [ln for ln in changenote.splitlines() if ln.strip()]
    if not lines:
        return ""
    return "# Changenotes\n" + "\n".join(f" - {ln}" for ln in lines)


def _fill(template: str, scope: Mapping[str, object], *, what: str) -> Result[str, ReleaseError]:
    filled = fill_template(template, scope)
    if isinstance(filled, Err):
        return Err(
            ReleaseError(
                kind="render_failed",
                message=f"{what} template: {filled.error}",
            )
        )
    return Ok(filled.value)


def render_description(
    dialect: str,
    *,
    descriptor: ModDescriptor,
    config: Config,
    templates: Templates,
    game: str,
) -> Result[str, ReleaseError]:
    """Render the mod description for ``dialect``.

    Order: badge (plain), description, contributors, footer (forum), version
    block, change notes (plain); sections without content are left out.
    Any template expression failure fails the render.
    """
    if dialect not in DIALECTS:
        return Err(
            ReleaseError(
                kind="config_invalid",
                message=f"unrecognized description dialect: {dialect}",
                hint=", ".join(DIALECTS),
            )
        )
    target: Dialect = dialect  # type: ignore[assignment]
    scope = render_scope(descriptor=descriptor, config=config, dialect=target, game=game)

    parts: list[str] = []
    if target == "plain" and game:
        parts.append(game_badge(config.game, game))

    description = _fill(templates.description, scope, what="description")
    if isinstance(description, Err):
        return description
    parts.append(description.value)

    parts.append(_contributors_section(descriptor.contributors))

    if target == "forum":
        footer = _fill(templates.footer, scope, what="footer")
        if isinstance(footer, Err):
            return footer
        parts.append(footer.value)

    version_block = _fill(templates.version, scope, what="version")
    if isinstance(version_block, Err):
        return version_block
    parts.append(version_block.value)

    if target == "plain":
        parts.append(_changenotes_section(descriptor.changenote))

    text = "\n\n".join(p.strip("\n") for p in parts if p.strip())

    match target:
        case "plain":
            return Ok(text + "\n" if text else "")
        case "restricted":
            return Ok(print_restricted(parse_document(text)))
        case "forum":
            return Ok(print_forum(parse_document(text)))
