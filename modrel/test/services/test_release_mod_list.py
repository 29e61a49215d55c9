from __future__ import annotations

import json
import os
from datetime import datetime
from pathlib import Path

import pytest

from modrel.core.config import PathsConfig
from modrel.core.result import Err, Ok
from modrel.output.console import MockConsole
from modrel.services.release.descriptor import descriptor_to_dict
from modrel.services.release.mod_list import last_update, mod_entries, tagline
from modrel.services.release.model import ModDescriptor, Version

ABOUT = (
    "<ModMetaData><name>Medical Tab</name><packageId>Fluffy.MedicalTab</packageId>"
    "<author>Fluffy</author><url>https://ludeon.com/forums</url>"
    "<description>Better medical overview</description>"
    "<supportedVersions><li>1.4</li></supportedVersions></ModMetaData>"
)


def _mod(mods: Path, name: str, about: str = ABOUT) -> Path:
    path = mods / name / "About" / "About.xml"
    path.parent.mkdir(parents=True)
    path.write_text(about, encoding="utf-8")
    return mods / name


class TestTagline:
    @pytest.mark.parametrize(
        ("description", "expected"),
        [
            ("Manages colonies. Jobs too.", "Manages colonies"),
            ("Tabs; more tabs", "Tabs"),
            ("<color=red>Red</color> things, blue things", "Red things"),
            ("  first line\nsecond line", "first line"),
            ("", ""),
        ],
    )
    def test_first_clause(self, description: str, expected: str) -> None:
        assert tagline(description) == expected


class TestLastUpdate:
    @pytest.mark.parametrize(
        ("day", "expected"),
        [
            (datetime(2023, 5, 3, 12), "May 3rd"),
            (datetime(2023, 6, 1, 12), "Jun 1st"),
            (datetime(2023, 6, 11, 12), "Jun 11th"),
            (datetime(2023, 6, 22, 12), "Jun 22nd"),
        ],
    )
    def test_ordinal_day(self, day: datetime, expected: str) -> None:
        assert last_update(day.timestamp()) == expected


class TestModEntries:
    def test_about_only(self, tmp_path: Path) -> None:
        about = _mod(tmp_path, "MedicalTab") / "About" / "About.xml"
        stamp = datetime(2023, 5, 3, 12).timestamp()
        os.utime(about, (stamp, stamp))

        result = mod_entries(tmp_path, paths=PathsConfig(), author="Fluffy", console=MockConsole())

        assert result == Ok(
            [
                {
                    "name": "Medical Tab",
                    "package_id": "Fluffy.MedicalTab",
                    "author": "Fluffy",
                    "url": "https://ludeon.com/forums",
                    "description": "Better medical overview",
                    "tagline": "Better medical overview",
                    "target_version": "1.4",
                    "last_update": "May 3rd",
                    "version": None,
                    "published_file_id": None,
                    "repo_url": None,
                    "tags": [],
                }
            ]
        )

    def test_descriptor_wins(self, tmp_path: Path) -> None:
        mod = _mod(tmp_path, "MedicalTab")
        descriptor = ModDescriptor(
            name="Medical Tab Deluxe",
            package_id="fluffy.medicaltab",
            version=Version(2, 1, 0),
            git_user="fluffy-mods",
            git_repo="MedicalTab",
            published_file_id="715565817",
            tags=("1.3", "1.4"),
        )
        (mod / "Source").mkdir()
        (mod / "Source" / "ModConfig.json").write_text(
            json.dumps(descriptor_to_dict(descriptor)), encoding="utf-8"
        )

        result = mod_entries(tmp_path, paths=PathsConfig(), author="Fluffy", console=MockConsole())

        assert isinstance(result, Ok)
        entry = result.value[0]
        assert entry["name"] == "Medical Tab Deluxe"
        assert entry["package_id"] == "fluffy.medicaltab"
        assert entry["version"] == "2.1.0"
        assert entry["published_file_id"] == "715565817"
        assert entry["repo_url"] == "https://github.com/fluffy-mods/MedicalTab"
        assert entry["tags"] == ["1.3", "1.4"]
        assert entry["url"] == "https://ludeon.com/forums"

    def test_sorted_and_skips(self, tmp_path: Path) -> None:
        _mod(tmp_path, "WorkTab")
        _mod(tmp_path, "ColonyManager")
        _mod(tmp_path, ".git")
        (tmp_path / "notes").mkdir()
        (tmp_path / "README.md").write_text("", encoding="utf-8")
        console = MockConsole()

        result = mod_entries(tmp_path, paths=PathsConfig(), author="Fluffy", console=console)

        assert isinstance(result, Ok)
        assert len(result.value) == 2
        assert console.find("skipped notes")
        assert not console.find(".git")

    def test_unreadable_about(self, tmp_path: Path) -> None:
        _mod(tmp_path, "Broken", about="<ModMetaData>")
        result = mod_entries(tmp_path, paths=PathsConfig(), author="Fluffy", console=MockConsole())
        assert isinstance(result, Err)
        assert result.error.kind == "parse_failed"

    def test_missing_mods_dir(self, tmp_path: Path) -> None:
        result = mod_entries(
            tmp_path / "nope", paths=PathsConfig(), author="Fluffy", console=MockConsole()
        )
        assert isinstance(result, Err)
        assert result.error.kind == "io_failed"
