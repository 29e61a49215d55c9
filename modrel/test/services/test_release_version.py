"""Tests for release version bumping."""

from __future__ import annotations

import pytest

from modrel.services.release.model import Directive, Version
from modrel.services.release.version import (
    bump,
    directive_for,
    game_version,
    parse_version,
    version_to_dict,
)

DIRECTIVES: tuple[Directive, ...] = ("major", "standard", "none")
SAMPLES = (Version(0, 0, 0), Version(1, 2, 7), Version(3, 0, 41), Version(0, 9, 1))


class TestBump:
    def test_major(self) -> None:
        assert bump(Version(1, 2, 7), "major") == Version(2, 0, 8)

    def test_standard(self) -> None:
        assert bump(Version(1, 2, 7), "standard") == Version(1, 3, 8)

    def test_none(self) -> None:
        assert bump(Version(1, 2, 7), "none") == Version(1, 2, 8)

    def test_no_bump_is_identity(self) -> None:
        v = Version(1, 2, 7, alpha=4)
        assert bump(v, "major", no_bump=True) is v

    def test_keeps_alpha(self) -> None:
        assert bump(Version(1, 2, 7, alpha=4), "standard").alpha == 4

    @pytest.mark.parametrize("directive", DIRECTIVES)
    @pytest.mark.parametrize("current", SAMPLES)
    def test_strictly_increases(self, current: Version, directive: Directive) -> None:
        assert bump(current, directive) > current

    @pytest.mark.parametrize("current", SAMPLES)
    def test_major_resets_minor(self, current: Version) -> None:
        assert bump(current, "major").minor == 0

    def test_not_idempotent(self) -> None:
        v = Version(1, 0, 0)
        assert bump(bump(v, "none"), "none") == Version(1, 0, 2)


class TestDirectiveFor:
    def test_major_wins(self) -> None:
        assert directive_for(release=True, major=True) == "major"
        assert directive_for(release=False, major=True) == "major"

    def test_release_and_update(self) -> None:
        assert directive_for(release=True, major=False) == "standard"
        assert directive_for(release=False, major=False) == "none"


class TestVersion:
    def test_str_and_tag(self) -> None:
        v = Version(1, 2, 3)
        assert str(v) == "1.2.3"
        assert v.to_tag() == "v1.2.3"
        assert v.triple == (1, 2, 3)

    def test_alpha_not_ordered(self) -> None:
        assert Version(1, 2, 3, alpha=1) == Version(1, 2, 3, alpha=9)


class TestParseVersion:
    def test_round_trip_dict(self) -> None:
        v = Version(1, 2, 3, alpha=4)
        assert parse_version(version_to_dict(v)) == v
        assert parse_version(version_to_dict(v)).alpha == 4

    def test_missing_build(self) -> None:
        assert parse_version({"major": 1, "minor": 2}) == Version(1, 2, 0)

    def test_invalid_parts(self) -> None:
        assert parse_version({"major": -1, "minor": "2", "build": True}) == Version(0, 0, 0)

    def test_none_uses_alpha_fallback(self) -> None:
        assert parse_version(None, alpha=5).alpha == 5
        assert parse_version({"major": 1}, alpha=5).alpha == 5


class TestGameVersion:
    def test_parts(self) -> None:
        raw = "1.4.3641 rev1003\n"
        assert game_version(raw, "full") == "1.4.3641"
        assert game_version(raw, "main") == "1.4"
        assert game_version(raw, "alpha") == "4"

    def test_empty(self) -> None:
        assert game_version("", "full") == ""
        assert game_version("", "main") == ""
        assert game_version("", "alpha") == ""
