"""Release and update runs as step lists.

Every step takes the shared ``ReleaseState`` and returns ``Ok(None)`` or a
``ReleaseError``. Steps that read or write anything also carry a ``preview``
so a dry run can say what would happen without doing it.

Descriptions for all dialects are rendered in one step before anything is
committed or published, so a broken template stops the run early.
"""

from __future__ import annotations

import fnmatch
import json
import shutil
import xml.etree.ElementTree as ET
import zipfile
from collections.abc import Iterator
from dataclasses import dataclass, field, replace
from pathlib import Path

from modrel.core.config import Config
from modrel.core.result import Err, Ok, Result
from modrel.core.structured import StrDict, as_str_dict, get_list, get_str, get_str_list
from modrel.git.repository import GitError, github_remote_url
from modrel.output.console import ConsoleProtocol
from modrel.services.release.changenotes import changenote_text, collect_since_last_tag
from modrel.services.release.collaborators import (
    BuildRunner,
    ForumPost,
    ForumUpdater,
    ReleasePublisher,
    ReleaseRequest,
    SourceControl,
    WorkshopUploader,
)
from modrel.services.release.descriptor import (
    new_descriptor,
    read_descriptor,
    read_published_file_id,
    refresh_contributors,
    write_descriptor,
)
from modrel.services.release.errors import ReleaseError
from modrel.services.release.expression import freeze
from modrel.services.release.forum_post import compose, forum_body, forum_title
from modrel.services.release.mod_list import mod_entries
from modrel.services.release.model import DIALECTS, ChangeNote, Dialect, ModDescriptor
from modrel.services.release.pipeline import Step
from modrel.services.release.render import (
    Templates,
    load_templates,
    read_game_version,
    render_description,
    render_scope,
)
from modrel.services.release.store import update_store
from modrel.services.release.version import bump, directive_for, game_version

RELEASE_COMMIT_MESSAGE = "Release {version} [nolog]"


@dataclass(frozen=True, slots=True)
class ReleaseOptions:
    """Flags of one run; ``release`` is False for ``modrel update``."""

    release: bool = False
    major: bool = False
    prerelease: bool = False
    draft: bool = False
    force_commit: bool = False
    no_version_bump: bool = False
    forum_title: str | None = None
    no_build: bool = False
    no_steam: bool = False
    no_github: bool = False
    no_forum: bool = False
    reset_tag: bool = False
    name: str | None = None


@dataclass(frozen=True, slots=True)
class Collaborators:
    git: SourceControl
    publisher: ReleasePublisher | None = None
    workshop: WorkshopUploader | None = None
    forum: ForumUpdater | None = None
    builder: BuildRunner | None = None


def _no_descriptions() -> dict[Dialect, str]:
    return {}


@dataclass(slots=True)
class ReleaseState:
    """Everything a run knows; only the running step changes it."""

    config: Config
    options: ReleaseOptions
    source_dir: Path
    console: ConsoleProtocol
    collaborators: Collaborators
    templates: Templates | None = None
    game: str = ""
    descriptor: ModDescriptor | None = None
    notes: tuple[ChangeNote, ...] = ()
    descriptions: dict[Dialect, str] = field(default_factory=_no_descriptions)
    archive: Path | None = None

    def path(self, rel: str) -> Path:
        return self.source_dir / rel

    def require_descriptor(self) -> Result[ModDescriptor, ReleaseError]:
        if self.descriptor is None:
            return Err(ReleaseError(kind="invalid_input", message="mod descriptor not loaded"))
        return Ok(self.descriptor)


def _git_failed(message: str, error: GitError) -> ReleaseError:
    return ReleaseError(kind="git_failed", message=message, hint=error.message)


# Steps


def check_git_status(state: ReleaseState) -> Result[None, ReleaseError]:
    git = state.collaborators.git
    force = state.options.force_commit

    porcelain = git.porcelain()
    if isinstance(porcelain, Err):
        return Err(_git_failed("failed to read git status", porcelain.error))
    clean = not porcelain.value
    if not clean and not force:
        return Err(
            ReleaseError(
                kind="git_dirty",
                message="uncommitted work",
                hint=porcelain.value,
            )
        )

    branch = git.current_branch()
    if isinstance(branch, Err):
        return Err(_git_failed("failed to read current branch", branch.error))

    unpushed = git.unpushed_commits(branch.value)
    if isinstance(unpushed, Err):
        return Err(_git_failed(f"failed to compare {branch.value} with origin", unpushed.error))
    if unpushed.value:
        clean = False
        if not force:
            return Err(
                ReleaseError(
                    kind="git_dirty",
                    message="commits not pushed",
                    hint=unpushed.value,
                )
            )

    if clean:
        state.console.success("git repository clean")
    else:
        state.console.warning("uncommitted or unpushed work, forced to continue")
    return Ok(None)


def resolve_templates(state: ReleaseState) -> Result[None, ReleaseError]:
    templates = load_templates(
        config=state.config, source_dir=state.source_dir, console=state.console
    )
    if isinstance(templates, Err):
        return templates
    game = read_game_version(state.config.game, base_dir=state.config.base_dir)
    if isinstance(game, Err):
        return game

    state.templates = templates.value
    state.game = game.value
    if not state.game:
        state.console.warning("game version unknown; set [game] version or version_file")
    return Ok(None)


def _game_alpha(state: ReleaseState) -> int | None:
    alpha = game_version(state.game, "alpha")
    return int(alpha) if alpha.isdigit() else None


def _read_or_new_descriptor(
    state: ReleaseState,
) -> Result[tuple[ModDescriptor, bool], ReleaseError]:
    """The descriptor on disk, or a fresh one; the flag is True when it is fresh."""
    config = state.config
    fallback_name = state.options.name or state.source_dir.name
    alpha = _game_alpha(state)

    loaded = read_descriptor(
        state.path(config.paths.descriptor),
        author=config.author,
        fallback_name=fallback_name,
        alpha=alpha,
        console=state.console,
    )
    if isinstance(loaded, Err):
        return loaded

    if loaded.value is not None:
        descriptor = loaded.value
        if state.options.name:
            descriptor = replace(descriptor, name=state.options.name)
        return Ok((descriptor, False))

    created = new_descriptor(
        name=fallback_name,
        author=config.author,
        git=state.collaborators.git,
        tags=config.tags,
        alpha=alpha,
        published_file_id=read_published_file_id(state.path(config.paths.published_file_id)),
        console=state.console,
    )
    if isinstance(created, Err):
        return created
    return Ok((created.value, True))


def load_descriptor(state: ReleaseState) -> Result[None, ReleaseError]:
    path = state.path(state.config.paths.descriptor)
    loaded = _read_or_new_descriptor(state)
    if isinstance(loaded, Err):
        return loaded
    descriptor, created = loaded.value

    if not created:
        state.descriptor = descriptor
        state.console.success(f"mod descriptor found at {path}")
        return Ok(None)

    written = write_descriptor(path, descriptor)
    if isinstance(written, Err):
        return written
    state.descriptor = descriptor
    state.console.warning(f"mod descriptor created at {path}")
    return Ok(None)


def preview_descriptor(state: ReleaseState) -> Result[None, ReleaseError]:
    """Like ``load_descriptor`` but never writes; a missing descriptor stays in memory."""
    loaded = _read_or_new_descriptor(state)
    if isinstance(loaded, Err):
        return loaded
    descriptor, created = loaded.value
    if created:
        state.console.info("no mod descriptor yet; rendering with defaults")
    state.descriptor = descriptor
    return Ok(None)


def update_descriptor(state: ReleaseState) -> Result[None, ReleaseError]:
    """Bump the version, refresh notes, contributors and tags, and persist.

    Tags are the repository's game version branches; without any the
    descriptor keeps the tags it has.
    """
    current = state.require_descriptor()
    if isinstance(current, Err):
        return current
    descriptor = current.value
    options = state.options
    git = state.collaborators.git

    version = bump(
        descriptor.version,
        directive_for(release=options.release, major=options.major),
        no_bump=options.no_version_bump,
    )

    collection = collect_since_last_tag(
        git, repo=descriptor.git_repo, reset_tags=options.reset_tag
    )
    if isinstance(collection, Err):
        return collection
    for line in collection.value.rejected:
        state.console.warning(f"skipped log line with unreadable date: {line}")
    notes = collection.value.notes

    contributors = refresh_contributors(descriptor.contributors, git, author=state.config.author)
    if isinstance(contributors, Err):
        return contributors

    branches = git.version_branches()
    if isinstance(branches, Err):
        return Err(_git_failed("failed to list version branches", branches.error))
    tags = tuple(branches.value) or descriptor.tags

    published_file_id = descriptor.published_file_id or read_published_file_id(
        state.path(state.config.paths.published_file_id)
    )
    if published_file_id is None:
        state.console.warning("no published file id found")

    updated = replace(
        descriptor,
        version=version,
        changenote=changenote_text(notes),
        changenotes=notes,
        contributors=contributors.value,
        tags=tags,
        published_file_id=published_file_id,
    )
    written = write_descriptor(state.path(state.config.paths.descriptor), updated)
    if isinstance(written, Err):
        return written

    state.descriptor = updated
    state.notes = notes
    state.console.success(f"mod descriptor updated ({descriptor.version} -> {version})")
    return Ok(None)


def render_descriptions(state: ReleaseState) -> Result[None, ReleaseError]:
    current = state.require_descriptor()
    if isinstance(current, Err):
        return current
    if state.templates is None:
        return Err(ReleaseError(kind="template_missing", message="templates not loaded"))

    for dialect in DIALECTS:
        rendered = render_description(
            dialect,
            descriptor=current.value,
            config=state.config,
            templates=state.templates,
            game=state.game,
        )
        if isinstance(rendered, Err):
            return rendered
        state.descriptions[dialect] = rendered.value
    return Ok(None)


def _set_child(parent: ET.Element, tag: str, text: str | None) -> ET.Element:
    child = parent.find(tag)
    if child is None:
        child = ET.SubElement(parent, tag)
    child.text = text
    return child


def _set_list(parent: ET.Element, tag: str, items: list[str]) -> ET.Element:
    """Replace ``<tag>`` with one ``<li>`` per item."""
    node = _set_child(parent, tag, None)
    for li in list(node):
        node.remove(li)
    for item in items:
        ET.SubElement(node, "li").text = item
    return node


def _xml_tree(path: Path) -> Result[ET.ElementTree | None, ReleaseError]:
    if not path.exists():
        return Ok(None)
    try:
        return Ok(ET.parse(path))
    except (ET.ParseError, OSError) as e:
        return Err(
            ReleaseError(kind="parse_failed", message=f"failed to read {path}: {e}", hint=str(path))
        )


def _write_xml(tree: ET.ElementTree, path: Path) -> Result[None, ReleaseError]:
    ET.indent(tree, space="  ")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tree.write(path, encoding="utf-8", xml_declaration=True)
    except OSError as e:
        return Err(ReleaseError(kind="io_failed", message=f"failed to write {path}: {e}"))
    return Ok(None)


def _read_dependencies(path: Path) -> Result[StrDict | None, ReleaseError]:
    if not path.is_file():
        return Ok(None)
    try:
        obj: object = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        return Err(
            ReleaseError(
                kind="parse_failed", message=f"failed to read dependencies: {e}", hint=str(path)
            )
        )
    data = as_str_dict(obj)
    if data is None:
        return Err(
            ReleaseError(
                kind="parse_failed",
                message="dependencies file is not a JSON object",
                hint=str(path),
            )
        )
    return Ok(data)


def _dependency_text(value: object) -> str | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _set_dependencies(root: ET.Element, dependencies: StrDict) -> None:
    """Copy the dependencies file into About.xml.

    ``depends`` entries carry ``id``, ``name``, ``steam`` (a workshop file id)
    and ``url``; ``incompatible``, ``before`` and ``after`` are package id lists.
    """
    depends = get_list(dependencies, "depends")
    if depends is not None:
        node = _set_list(root, "modDependencies", [])
        for obj in depends:
            depend = as_str_dict(obj)
            if depend is None:
                continue
            steam = _dependency_text(depend.get("steam"))
            fields = (
                ("packageId", get_str(depend, "id")),
                ("displayName", get_str(depend, "name")),
                ("steamWorkshopUrl", f"steam://url/CommunityFilePage/{steam}" if steam else None),
                ("downloadUrl", get_str(depend, "url")),
            )
            li = ET.SubElement(node, "li")
            for tag, text in fields:
                if text is not None:
                    ET.SubElement(li, tag).text = text

    for key, tag in (
        ("incompatible", "incompatibleWith"),
        ("before", "loadBefore"),
        ("after", "loadAfter"),
    ):
        ids = get_str_list(dependencies, key)
        if ids is not None:
            _set_list(root, tag, ids)


def update_about(state: ReleaseState) -> Result[None, ReleaseError]:
    """Write name, package id, versions, description and dependencies into About.xml."""
    current = state.require_descriptor()
    if isinstance(current, Err):
        return current
    descriptor = current.value
    path = state.path(state.config.paths.about)

    parsed = _xml_tree(path)
    if isinstance(parsed, Err):
        return parsed
    dependencies = _read_dependencies(state.path(state.config.paths.dependencies))
    if isinstance(dependencies, Err):
        return dependencies

    created = parsed.value is None
    if parsed.value is None:
        root = ET.Element("ModMetaData")
        tree = ET.ElementTree(root)
        _set_child(root, "author", state.config.author)
        if state.config.forum_thread:
            _set_child(root, "url", state.config.forum_thread)
    else:
        tree = parsed.value
        root = tree.getroot()

    _set_child(root, "name", descriptor.name)
    _set_child(root, "packageId", descriptor.package_id)
    for stale in root.findall("targetVersion"):
        root.remove(stale)
    main_version = game_version(state.game, "main")
    if main_version:
        _set_list(root, "supportedVersions", [main_version])
    _set_child(root, "description", state.descriptions.get("restricted", ""))
    if dependencies.value is not None:
        _set_dependencies(root, dependencies.value)

    written = _write_xml(tree, path)
    if isinstance(written, Err):
        return written

    if created:
        state.console.warning(f"{path.name} created")
    else:
        state.console.success(f"{path.name} updated")
    return Ok(None)


def update_readme(state: ReleaseState) -> Result[None, ReleaseError]:
    path = state.path(state.config.paths.readme)
    try:
        path.write_text(state.descriptions.get("plain", ""), encoding="utf-8")
    except OSError as e:
        return Err(ReleaseError(kind="io_failed", message=f"failed to write {path}: {e}"))
    state.console.success(f"{path.name} updated")
    return Ok(None)


def update_license(state: ReleaseState) -> Result[None, ReleaseError]:
    license_path = state.config.license_path
    if license_path is None:
        return Ok(None)
    source = state.config.shared_path(license_path)
    target = state.path(state.config.paths.license)
    try:
        shutil.copyfile(source, target)
    except OSError as e:
        return Err(
            ReleaseError(kind="io_failed", message=f"failed to copy license: {e}", hint=str(source))
        )
    state.console.success(f"{target.name} updated")
    return Ok(None)


def update_manifest(state: ReleaseState) -> Result[None, ReleaseError]:
    """Point the update manifest at this release.

    ``manifestUri`` follows the game's main version branch and
    ``downloadUri`` the GitHub release of this version.
    """
    current = state.require_descriptor()
    if isinstance(current, Err):
        return current
    descriptor = current.value
    if descriptor.repo_slug is None:
        return Err(
            ReleaseError(
                kind="invalid_input",
                message="mod descriptor has no GitHub repository",
                hint="Run: modrel remote <git-user> [<git-repo>]",
            )
        )
    main_version = game_version(state.game, "main")
    if not main_version:
        return Err(
            ReleaseError(
                kind="config_invalid",
                message="game version unknown; the manifest URL needs it",
                hint="Set [game] version or version_file in modrel.toml",
            )
        )

    rel = state.config.paths.manifest
    path = state.path(rel)
    parsed = _xml_tree(path)
    if isinstance(parsed, Err):
        return parsed
    tree = parsed.value or ET.ElementTree(ET.Element("Manifest"))
    root = tree.getroot()

    version = str(descriptor.version)
    slug = descriptor.repo_slug
    manifest_uri = f"https://raw.githubusercontent.com/{slug}/{main_version}/{Path(rel).as_posix()}"
    _set_child(root, "version", version)
    _set_child(root, "manifestUri", manifest_uri)
    _set_child(root, "downloadUri", f"https://github.com/{slug}/releases/v{version}")

    written = _write_xml(tree, path)
    if isinstance(written, Err):
        return written
    state.console.success(f"{path.name} updated")
    return Ok(None)


def build(state: ReleaseState) -> Result[None, ReleaseError]:
    builder = state.collaborators.builder
    if builder is None:
        return Ok(None)
    built = builder.build(source_dir=state.source_dir)
    if isinstance(built, Err):
        return built
    state.console.success("build finished")
    return Ok(None)


def commit_push(state: ReleaseState) -> Result[None, ReleaseError]:
    current = state.require_descriptor()
    if isinstance(current, Err):
        return current
    git = state.collaborators.git

    porcelain = git.porcelain()
    if isinstance(porcelain, Err):
        return Err(_git_failed("failed to read git status", porcelain.error))
    if not porcelain.value:
        state.console.info("nothing to commit")
        return Ok(None)

    message = RELEASE_COMMIT_MESSAGE.format(version=current.value.version)
    committed = git.commit_all(message)
    if isinstance(committed, Err):
        return Err(_git_failed("git commit failed", committed.error))
    state.console.success(committed.value or message)

    pushed = git.push()
    if isinstance(pushed, Err):
        return Err(_git_failed("git push failed", pushed.error))
    state.console.success("pushed")
    return Ok(None)


def archive_name(descriptor: ModDescriptor) -> str:
    return f"{descriptor.name} v{descriptor.version}.zip"


def _excluded(rel: Path, patterns: tuple[str, ...]) -> bool:
    return any(fnmatch.fnmatch(part, pat) for part in rel.parts for pat in patterns)


def _archive_files(root: Path, patterns: tuple[str, ...], skip: Path) -> Iterator[Path]:
    for path in sorted(root.rglob("*")):
        if not path.is_file() or path.is_relative_to(skip):
            continue
        if _excluded(path.relative_to(root), patterns):
            continue
        yield path


def create_archive(state: ReleaseState) -> Result[None, ReleaseError]:
    """Zip the mod into ``<archives>/<name> v<version>.zip`` under a ``<dir>/`` prefix."""
    current = state.require_descriptor()
    if isinstance(current, Err):
        return current
    archives = state.config.shared_path(state.config.paths.archives)
    target = archives / archive_name(current.value)
    root = state.source_dir

    try:
        archives.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(target, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for path in _archive_files(root, state.config.archive.exclude, archives):
                zf.write(path, Path(root.name) / path.relative_to(root))
    except OSError as e:
        return Err(ReleaseError(kind="io_failed", message=f"failed to create archive: {e}"))

    state.archive = target
    state.console.success(f"created release archive at {target}")
    return Ok(None)


def github_release(state: ReleaseState) -> Result[None, ReleaseError]:
    current = state.require_descriptor()
    if isinstance(current, Err):
        return current
    descriptor = current.value
    publisher = state.collaborators.publisher
    if publisher is None:
        return Err(ReleaseError(kind="config_invalid", message="no release publisher available"))
    if descriptor.repo_slug is None:
        return Err(
            ReleaseError(
                kind="invalid_input",
                message="mod descriptor has no GitHub repository",
                hint="Run: modrel remote <git-user> [<git-repo>]",
            )
        )

    version = str(descriptor.version)
    options = state.options
    body = state.descriptions.get("plain", "") if options.major else descriptor.changenote
    request = ReleaseRequest(
        repo_slug=descriptor.repo_slug,
        tag=descriptor.version.to_tag(),
        title=f"{descriptor.name} v{version} ({state.game})",
        body=body,
        asset=state.archive,
        asset_label=f"{descriptor.name} {version}",
        draft=options.draft,
        prerelease=options.prerelease,
    )
    created = publisher.create_release(request)
    if isinstance(created, Err):
        return created
    state.console.success(f"GitHub release created: {created.value or request.tag}")

    pulled = state.collaborators.git.pull_tags()
    if isinstance(pulled, Err):
        return Err(_git_failed("failed to pull release tag", pulled.error))
    return Ok(None)


def workshop_release(state: ReleaseState) -> Result[None, ReleaseError]:
    current = state.require_descriptor()
    if isinstance(current, Err):
        return current
    uploader = state.collaborators.workshop
    if uploader is None:
        return Err(
            ReleaseError(
                kind="config_invalid",
                message="no workshop updater configured",
                hint="Set [workshop] updater in modrel.toml, or pass --no-steam",
            )
        )
    uploaded = uploader.upload(
        source_dir=state.source_dir,
        changenote=current.value.changenote,
        description=state.descriptions.get("forum", ""),
    )
    if isinstance(uploaded, Err):
        return uploaded
    state.console.success("workshop release completed")
    return Ok(None)


def _forum_template(state: ReleaseState) -> Result[str | None, ReleaseError]:
    rel = state.config.forum.template
    if rel is None:
        return Ok(None)
    path = state.config.shared_path(rel)
    try:
        return Ok(path.read_text(encoding="utf-8"))
    except OSError as e:
        return Err(
            ReleaseError(
                kind="template_missing",
                message=f"failed to read forum template: {e}",
                hint=str(path),
            )
        )


def _forum_mods(state: ReleaseState) -> Result[list[dict[str, object]], ReleaseError]:
    mods_dir = state.config.forum.mods_dir
    if mods_dir is None:
        return Ok([])
    return mod_entries(
        state.config.shared_path(mods_dir),
        paths=state.config.paths,
        author=state.config.author,
        console=state.console,
    )


def forum_update(state: ReleaseState) -> Result[None, ReleaseError]:
    """Record the new notes in the shared store and refresh the forum thread."""
    current = state.require_descriptor()
    if isinstance(current, Err):
        return current
    updater = state.collaborators.forum
    if updater is None:
        return Err(
            ReleaseError(
                kind="config_invalid",
                message="no forum updater configured",
                hint="Set [forum] updater in modrel.toml, or pass --no-forum",
            )
        )

    template = _forum_template(state)
    if isinstance(template, Err):
        return template
    mods = _forum_mods(state)
    if isinstance(mods, Err):
        return mods
    scope = dict(
        render_scope(
            descriptor=current.value, config=state.config, dialect="forum", game=state.game
        )
    )
    scope["mods"] = freeze(mods.value)
    body = forum_body(
        template=template.value,
        scope=scope,
        description=state.descriptions.get("forum", ""),
    )
    if isinstance(body, Err):
        return body

    store_path = state.config.shared_path(state.config.paths.changenotes)
    merged = update_store(store_path, state.notes, console=state.console)
    if isinstance(merged, Err):
        return merged
    message = compose(merged.value, (), body.value, state.config.forum.max_size)

    title = forum_title(state.config.forum.title_prefix, state.options.forum_title)
    updated = updater.update(ForumPost(body=message, title=title))
    if isinstance(updated, Err):
        return updated
    state.console.success("forum post updated")
    return Ok(None)


def update_remote(
    state: ReleaseState, *, git_user: str, git_repo: str | None
) -> Result[None, ReleaseError]:
    current = state.require_descriptor()
    if isinstance(current, Err):
        return current
    repo = git_repo or current.value.git_repo or state.source_dir.name
    url = github_remote_url(git_user, repo)

    changed = state.collaborators.git.set_origin_url(url)
    if isinstance(changed, Err):
        return Err(_git_failed("failed to set origin", changed.error))

    updated = replace(current.value, git_user=git_user, git_repo=repo)
    written = write_descriptor(state.path(state.config.paths.descriptor), updated)
    if isinstance(written, Err):
        return written
    state.descriptor = updated
    state.console.success(f"remote set to {url}")
    return Ok(None)


# Step lists


def _steps_prelude() -> list[Step[ReleaseState]]:
    return [
        Step(
            "resolve_templates",
            resolve_templates,
            preview=lambda s: f"read templates ({s.config.templates.description})",
        ),
        Step(
            "load_descriptor",
            load_descriptor,
            preview=lambda s: f"read {s.path(s.config.paths.descriptor)}",
        ),
    ]


def _steps_update_files() -> list[Step[ReleaseState]]:
    return [
        Step(
            "update_descriptor",
            update_descriptor,
            preview=lambda s: "bump version, refresh change notes, contributors and tags",
        ),
        Step("render_descriptions", render_descriptions, preview=lambda s: "render descriptions"),
        Step("update_about", update_about, preview=lambda s: f"write {s.config.paths.about}"),
        Step("update_readme", update_readme, preview=lambda s: f"write {s.config.paths.readme}"),
        Step(
            "update_license",
            update_license,
            skip_if=lambda s: s.config.license_path is None,
            preview=lambda s: f"copy {s.config.license_path} to {s.config.paths.license}",
        ),
        Step(
            "build",
            build,
            skip_if=lambda s: s.options.no_build or s.collaborators.builder is None,
            preview=lambda s: "run " + " ".join(s.config.build.command),
        ),
    ]


def release_steps() -> list[Step[ReleaseState]]:
    return [
        Step(
            "check_git_status",
            check_git_status,
            preview=lambda s: "check for uncommitted or unpushed work",
        ),
        *_steps_prelude(),
        *_steps_update_files(),
        Step(
            "update_manifest",
            update_manifest,
            skip_if=lambda s: s.options.no_github or s.options.prerelease or s.options.draft,
            preview=lambda s: f"write {s.config.paths.manifest}",
        ),
        Step("commit_push", commit_push, preview=lambda s: "git commit -am && git push"),
        Step(
            "create_archive",
            create_archive,
            preview=lambda s: f"zip {s.source_dir} into {s.config.paths.archives}",
        ),
        Step(
            "github_release",
            github_release,
            skip_if=lambda s: s.options.no_github,
            preview=lambda s: "create GitHub release and upload archive",
        ),
        Step(
            "workshop_release",
            workshop_release,
            skip_if=lambda s: s.options.no_steam or s.options.prerelease or s.options.draft,
            preview=lambda s: "push workshop update",
        ),
        Step(
            "forum_update",
            forum_update,
            skip_if=lambda s: s.options.no_forum,
            preview=lambda s: "update change note store and forum post",
        ),
    ]


def update_steps() -> list[Step[ReleaseState]]:
    return [*_steps_prelude(), *_steps_update_files()]


def remote_steps(git_user: str, git_repo: str | None) -> list[Step[ReleaseState]]:
    return [
        *_steps_prelude(),
        Step(
            "update_remote",
            lambda s: update_remote(s, git_user=git_user, git_repo=git_repo),
            preview=lambda s: f"set origin to {git_user}/{git_repo or '<repo>'}",
        ),
    ]


def render_steps() -> list[Step[ReleaseState]]:
    """Load what the renderer needs without writing; the caller prints ``state.descriptions``."""
    return [
        Step(
            "resolve_templates",
            resolve_templates,
            preview=lambda s: f"read templates ({s.config.templates.description})",
        ),
        Step(
            "preview_descriptor",
            preview_descriptor,
            preview=lambda s: f"read {s.path(s.config.paths.descriptor)}",
        ),
        Step("render_descriptions", render_descriptions, preview=lambda s: "render descriptions"),
    ]
