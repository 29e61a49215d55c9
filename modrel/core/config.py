"""Typed configuration loading and access.

The config file is TOML (``modrel.toml`` by default). Every key is optional;
missing keys fall back to the defaults defined on the dataclasses below.

Example:

    author = "Fluffy"
    forum_thread = "https://ludeon.com/forums/index.php?topic=16120"

    [game]
    name = "RimWorld"
    version_file = "C:/Games/RimWorld/Version.txt"

    [forum]
    updater = "thread-updater"
    template = "forum_post.bbcode.j2"
    mods_dir = "C:/Games/RimWorld/Mods"
    max_size = 20000
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_int, get_str, get_str_list, get_table

__all__ = [
    "ArchiveConfig",
    "BuildConfig",
    "Config",
    "ConfigError",
    "ForumConfig",
    "GameConfig",
    "PathsConfig",
    "TemplatesConfig",
    "WorkshopConfig",
    "CONFIG_ENV_VAR",
    "DEFAULT_CONFIG_NAME",
    "FORUM_MAX_SIZE",
    "default_config_path",
    "load_config",
    "load_config_or_default",
]

CONFIG_ENV_VAR = "MODREL_CONFIG"
DEFAULT_CONFIG_NAME = "modrel.toml"

# Hard limit on forum post size enforced by the forum software.
FORUM_MAX_SIZE = 20000

_DEFAULT_ARCHIVE_EXCLUDES = (
    ".git",
    ".git*",
    ".vs",
    "obj",
    "*.pdb",
    "*.user",
    "*.cache",
)


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class GameConfig:
    """The host game the mods target.

    ``version`` wins over ``version_file``; the file holds the game's own
    version string (e.g. ``1.4.3641 rev1003``).
    """

    name: str = "RimWorld"
    url: str = "http://rimworldgame.com/"
    version: str | None = None
    version_file: str | None = None


@dataclass(frozen=True, slots=True)
class TemplatesConfig:
    """Template locations.

    ``description`` is relative to the mod source directory; ``version`` and
    ``footer`` default to the templates bundled with modrel.
    """

    description: str = "Source/Description.md"
    version: str | None = None
    footer: str | None = None


@dataclass(frozen=True, slots=True)
class PathsConfig:
    """Paths relative to the mod source directory, except ``changenotes`` and
    ``archives`` which are shared across mods and relative to the config file."""

    descriptor: str = "Source/ModConfig.json"
    about: str = "About/About.xml"
    readme: str = "Readme.md"
    license: str = "LICENSE"
    published_file_id: str = "About/PublishedFileId.txt"
    manifest: str = "About/Manifest.xml"
    dependencies: str = "About/dependencies.json"
    changenotes: str = "changenotes.json"
    archives: str = "archives"


@dataclass(frozen=True, slots=True)
class BuildConfig:
    command: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ArchiveConfig:
    exclude: tuple[str, ...] = _DEFAULT_ARCHIVE_EXCLUDES


@dataclass(frozen=True, slots=True)
class WorkshopConfig:
    updater: str | None = None


@dataclass(frozen=True, slots=True)
class ForumConfig:
    """Forum thread settings.

    ``template`` and ``mods_dir`` are shared paths. Every directory under
    ``mods_dir`` is one entry of the thread's mod list.
    """

    updater: str | None = None
    template: str | None = None
    max_size: int = FORUM_MAX_SIZE
    title_prefix: str = ""
    mods_dir: str | None = None


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container.

    ``base_dir`` is the directory of the config file; shared paths resolve
    against it.
    """

    author: str = "Fluffy"
    forum_thread: str | None = None
    license_path: str | None = None
    tags: tuple[str, ...] = ()
    game: GameConfig = field(default_factory=GameConfig)
    templates: TemplatesConfig = field(default_factory=TemplatesConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)
    build: BuildConfig = field(default_factory=BuildConfig)
    archive: ArchiveConfig = field(default_factory=ArchiveConfig)
    workshop: WorkshopConfig = field(default_factory=WorkshopConfig)
    forum: ForumConfig = field(default_factory=ForumConfig)
    base_dir: Path = field(default_factory=Path.cwd)

    def shared_path(self, rel: str) -> Path:
        """Resolve a path that is shared across mods."""
        p = Path(rel).expanduser()
        return p if p.is_absolute() else self.base_dir / p

    @classmethod
    def from_dict(cls, data: Mapping[str, object], *, base_dir: Path) -> Config:
        """Create Config from a mapping (parsed TOML)."""
        game: StrDict = get_table(data, "game") or {}
        templates: StrDict = get_table(data, "templates") or {}
        paths: StrDict = get_table(data, "paths") or {}
        build: StrDict = get_table(data, "build") or {}
        archive: StrDict = get_table(data, "archive") or {}
        workshop: StrDict = get_table(data, "workshop") or {}
        forum: StrDict = get_table(data, "forum") or {}

        defaults = PathsConfig()
        excludes = get_str_list(archive, "exclude")
        max_size = get_int(forum, "max_size")
        if max_size is not None and max_size <= 0:
            raise ValueError(f"forum.max_size must be positive, got {max_size}")

        return cls(
            author=get_str(data, "author") or "Fluffy",
            forum_thread=get_str(data, "forum_thread"),
            license_path=get_str(data, "license_path"),
            tags=tuple(get_str_list(data, "tags") or ()),
            game=GameConfig(
                name=get_str(game, "name") or "RimWorld",
                url=get_str(game, "url") or "http://rimworldgame.com/",
                version=get_str(game, "version"),
                version_file=get_str(game, "version_file"),
            ),
            templates=TemplatesConfig(
                description=get_str(templates, "description") or "Source/Description.md",
                version=get_str(templates, "version"),
                footer=get_str(templates, "footer"),
            ),
            paths=PathsConfig(
                descriptor=get_str(paths, "descriptor") or defaults.descriptor,
                about=get_str(paths, "about") or defaults.about,
                readme=get_str(paths, "readme") or defaults.readme,
                license=get_str(paths, "license") or defaults.license,
                published_file_id=get_str(paths, "published_file_id")
                or defaults.published_file_id,
                manifest=get_str(paths, "manifest") or defaults.manifest,
                dependencies=get_str(paths, "dependencies") or defaults.dependencies,
                changenotes=get_str(paths, "changenotes") or defaults.changenotes,
                archives=get_str(paths, "archives") or defaults.archives,
            ),
            build=BuildConfig(command=tuple(get_str_list(build, "command") or ())),
            archive=ArchiveConfig(
                exclude=tuple(excludes) if excludes is not None else _DEFAULT_ARCHIVE_EXCLUDES
            ),
            workshop=WorkshopConfig(updater=get_str(workshop, "updater")),
            forum=ForumConfig(
                updater=get_str(forum, "updater"),
                template=get_str(forum, "template"),
                max_size=max_size or FORUM_MAX_SIZE,
                title_prefix=get_str(forum, "title_prefix") or "",
                mods_dir=get_str(forum, "mods_dir"),
            ),
            base_dir=base_dir,
        )


def default_config_path() -> Path:
    """Config path from ``MODREL_CONFIG``, else ``./modrel.toml``."""
    env = os.environ.get(CONFIG_ENV_VAR)
    if env:
        return Path(env).expanduser()
    return Path.cwd() / DEFAULT_CONFIG_NAME


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to the config file

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value, base_dir=path.parent.resolve()))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(path: Path) -> Result[Config, ConfigError]:
    """Load config, falling back to defaults only when the file is absent.

    A file that exists but cannot be parsed is still an error.
    """
    if not path.exists():
        return Ok(Config(base_dir=path.parent.resolve()))
    return load_config(path)
