from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from modrel import __version__
from modrel.cli.app import app
from modrel.core.errors import ErrorCode
from modrel.core.result import Err, Ok
from modrel.services.release.changenotes import Collection
from modrel.services.release.descriptor import descriptor_to_dict
from modrel.services.release.errors import ReleaseError
from modrel.services.release.model import ChangeNote, ModDescriptor, Version

runner = CliRunner()


@pytest.fixture
def mod_dir(tmp_path: Path) -> Path:
    source = tmp_path / "ColonyManager"
    (source / "Source").mkdir(parents=True)
    (source / "Source" / "Description.md").write_text(
        "# {mod.name}\n\nManages **colonies**.\n", encoding="utf-8"
    )
    descriptor = ModDescriptor(
        name="Colony Manager",
        package_id="fluffy.colonymanager",
        version=Version(1, 2, 7),
        git_user="fluffy-mods",
        git_repo="ColonyManager",
    )
    (source / "Source" / "ModConfig.json").write_text(
        json.dumps(descriptor_to_dict(descriptor), indent=4), encoding="utf-8"
    )
    return source


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "modrel.toml"
    path.write_text('author = "Fluffy"\n\n[game]\nversion = "1.4.3641"\n', encoding="utf-8")
    return path


def _invoke(mod_dir: Path, config_file: Path, *args: str):
    return runner.invoke(
        app, ["--source", str(mod_dir), "--config", str(config_file), "--no-style", *args]
    )


def _snapshot(root: Path) -> dict[str, bytes]:
    return {
        str(p.relative_to(root)): p.read_bytes() for p in sorted(root.rglob("*")) if p.is_file()
    }


def test_version() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.stdout.strip() == __version__


class TestRender:
    def test_plain(self, mod_dir: Path, config_file: Path) -> None:
        result = _invoke(mod_dir, config_file, "render", "plain")
        assert result.exit_code == 0, result.output
        assert "# Colony Manager\n\nManages **colonies**." in result.stdout
        assert result.stdout.endswith("This is version 1.2.7, for RimWorld 1.4.\n")

    def test_restricted(self, mod_dir: Path, config_file: Path) -> None:
        result = _invoke(mod_dir, config_file, "render", "restricted")
        assert result.exit_code == 0, result.output
        assert "<size=24>Colony Manager</size>\nManages <b>colonies</b>." in result.stdout

    def test_forum(self, mod_dir: Path, config_file: Path) -> None:
        result = _invoke(mod_dir, config_file, "render", "forum")
        assert result.exit_code == 0, result.output
        assert "[h1]Colony Manager[/h1]" in result.stdout
        assert "https://github.com/fluffy-mods/ColonyManager/issues" in result.stdout

    def test_unknown_dialect(self, mod_dir: Path, config_file: Path) -> None:
        result = _invoke(mod_dir, config_file, "render", "html")
        assert result.exit_code == ErrorCode.CONFIG_ERROR

    def test_broken_expression(self, mod_dir: Path, config_file: Path) -> None:
        (mod_dir / "Source" / "Description.md").write_text("{mod.missing}", encoding="utf-8")
        result = _invoke(mod_dir, config_file, "render")
        assert result.exit_code == ErrorCode.CONFIG_ERROR

    def test_changes_nothing(self, mod_dir: Path, config_file: Path) -> None:
        before = _snapshot(mod_dir)
        _invoke(mod_dir, config_file, "render", "forum")
        assert _snapshot(mod_dir) == before

    def test_without_descriptor_outside_git(self, mod_dir: Path, config_file: Path) -> None:
        (mod_dir / "Source" / "ModConfig.json").unlink()
        before = _snapshot(mod_dir)

        result = _invoke(mod_dir, config_file, "render", "plain")

        assert result.exit_code == 0, result.output
        assert "# ColonyManager\n" in result.stdout
        assert _snapshot(mod_dir) == before


class TestGlobalErrors:
    def test_invalid_config(self, mod_dir: Path, tmp_path: Path) -> None:
        bad = tmp_path / "bad.toml"
        bad.write_text("author = [unclosed\n", encoding="utf-8")
        result = _invoke(mod_dir, bad, "render")
        assert result.exit_code == ErrorCode.CONFIG_ERROR

    def test_source_not_a_directory(self, tmp_path: Path, config_file: Path) -> None:
        result = _invoke(tmp_path / "missing", config_file, "render")
        assert result.exit_code == ErrorCode.USER_ERROR

    def test_release_needs_git(self, mod_dir: Path, config_file: Path) -> None:
        result = _invoke(mod_dir, config_file, "release")
        assert result.exit_code == ErrorCode.ENV_ERROR


class TestReleaseDryRun:
    def test_changes_nothing(self, mod_dir: Path, config_file: Path) -> None:
        (mod_dir / ".git").mkdir()
        before = _snapshot(mod_dir.parent)

        result = _invoke(mod_dir, config_file, "--dry-run", "release", "--major")

        assert result.exit_code == 0, result.output
        assert "[dry-run] create GitHub release and upload archive" in result.output
        assert _snapshot(mod_dir.parent) == before

    def test_update_dry_run(self, mod_dir: Path, config_file: Path) -> None:
        (mod_dir / ".git").mkdir()
        before = _snapshot(mod_dir.parent)

        result = _invoke(mod_dir, config_file, "--dry-run", "update", "--no-build")

        assert result.exit_code == 0, result.output
        assert "skip build" in result.output
        assert _snapshot(mod_dir.parent) == before


class TestNotes:
    def test_prints_notes(
        self, mod_dir: Path, config_file: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        import modrel.cli.commands.content_cmd as content_cmd

        (mod_dir / ".git").mkdir()
        collection = Collection(
            notes=(ChangeNote(hash="c1", date="2023-05-01", author="Someone", message="Fix"),)
        )
        monkeypatch.setattr(
            content_cmd, "collect_since_last_tag", lambda source, *, repo: Ok(collection)
        )

        result = _invoke(mod_dir, config_file, "notes")

        assert result.exit_code == 0, result.output
        assert "2023-05-01 :: Someone :: Fix" in result.stdout

    def test_git_failure(
        self, mod_dir: Path, config_file: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        import modrel.cli.commands.content_cmd as content_cmd

        (mod_dir / ".git").mkdir()
        error = ReleaseError(kind="git_failed", message="failed to read last tag")
        monkeypatch.setattr(
            content_cmd, "collect_since_last_tag", lambda source, *, repo: Err(error)
        )

        result = _invoke(mod_dir, config_file, "notes")
        assert result.exit_code == ErrorCode.ENV_ERROR
