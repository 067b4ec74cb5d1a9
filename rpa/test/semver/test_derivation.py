"""Tests for semver/derivation.py."""

from __future__ import annotations

import pytest

from rpa.semver import (
    SemanticVersion,
    current_possible_versions_hotfix,
    next_possible_versions_develop,
    next_possible_versions_for_release_branch_from_develop,
    next_possible_versions_for_release_branch_from_hotfix,
    next_possible_versions_hotfix,
    next_pre_release_counter,
    next_pre_release_stage,
    next_rc,
    try_parse,
)


def _v(text: str) -> SemanticVersion:
    version = try_parse(text)
    assert version is not None, text
    return version


def _names(versions: tuple[SemanticVersion, ...]) -> list[str]:
    return [str(x) for x in versions]


class TestDevelop:
    """Tests for next_possible_versions_develop()."""

    def test_from_final_release(self) -> None:
        """A final release offers the minor and major trains."""
        assert _names(next_possible_versions_develop(_v("1.2.0"))) == [
            "1.3.0-alpha.1",
            "1.3.0-beta.1",
            "1.3.0",
            "2.0.0-alpha.1",
            "2.0.0-beta.1",
            "2.0.0",
        ]

    def test_from_final_release_without_prereleases(self) -> None:
        assert _names(next_possible_versions_develop(_v("1.2.0"), without_pre_release=True)) == ["1.3.0", "2.0.0"]

    def test_from_alpha(self) -> None:
        """An alpha may bump its counter or move on to beta."""
        assert _names(next_possible_versions_develop(_v("1.3.0-alpha.2"))) == [
            "1.3.0-alpha.3",
            "1.3.0-beta.1",
            "1.3.0",
            "2.0.0-alpha.1",
            "2.0.0-beta.1",
            "2.0.0",
        ]

    def test_from_beta(self) -> None:
        assert _names(next_possible_versions_develop(_v("1.3.0-beta.1"))) == [
            "1.3.0-beta.2",
            "1.3.0",
            "2.0.0-alpha.1",
            "2.0.0-beta.1",
            "2.0.0",
        ]

    def test_from_rc_never_offers_rc(self) -> None:
        """Release candidates are not cut from develop."""
        assert _names(next_possible_versions_develop(_v("1.3.0-rc.1"))) == [
            "1.3.0",
            "2.0.0-alpha.1",
            "2.0.0-beta.1",
            "2.0.0",
        ]

    def test_from_prerelease_without_prereleases(self) -> None:
        assert _names(next_possible_versions_develop(_v("1.3.0-beta.4"), without_pre_release=True)) == [
            "1.3.0",
            "2.0.0",
        ]


class TestHotfix:
    """Tests for the hotfix derivations."""

    def test_next_from_final(self) -> None:
        assert _names(next_possible_versions_hotfix(_v("1.2.3"))) == ["1.2.4-alpha.1", "1.2.4-beta.1", "1.2.4"]

    def test_next_from_alpha(self) -> None:
        assert _names(next_possible_versions_hotfix(_v("1.2.4-alpha.1"))) == [
            "1.2.4-alpha.2",
            "1.2.4-beta.1",
            "1.2.4",
            "1.2.5",
        ]

    def test_next_from_beta(self) -> None:
        assert _names(next_possible_versions_hotfix(_v("1.2.4-beta.1"))) == ["1.2.4-beta.2", "1.2.4", "1.2.5"]

    def test_current_from_final_includes_itself(self) -> None:
        """A hotfix branch may release its own label."""
        assert _names(current_possible_versions_hotfix(_v("1.2.4"))) == ["1.2.4-alpha.1", "1.2.4-beta.1", "1.2.4"]

    def test_current_from_beta(self) -> None:
        assert _names(current_possible_versions_hotfix(_v("1.2.4-beta.1"))) == ["1.2.4-beta.2", "1.2.4"]


class TestReleaseBranch:
    """Tests for the next tracker versions once a release branch ships."""

    def test_from_develop(self) -> None:
        assert _names(next_possible_versions_for_release_branch_from_develop(_v("1.3.0"))) == [
            "1.3.1",
            "1.4.0-alpha.1",
            "1.4.0-beta.1",
            "1.4.0",
            "2.0.0-alpha.1",
            "2.0.0-beta.1",
            "2.0.0",
        ]

    def test_from_develop_rc_uses_final(self) -> None:
        """An rc label is released as its final version first."""
        from_rc = next_possible_versions_for_release_branch_from_develop(_v("1.3.0-rc.2"))
        assert from_rc == next_possible_versions_for_release_branch_from_develop(_v("1.3.0"))

    def test_from_hotfix(self) -> None:
        assert _names(next_possible_versions_for_release_branch_from_hotfix(_v("1.2.4"))) == [
            "1.2.5-alpha.1",
            "1.2.5-beta.1",
            "1.2.5",
        ]


@pytest.mark.parametrize(
    "text",
    ["0.0.1", "1.2.0", "1.3.0-alpha.1", "1.3.0-beta.7", "1.3.0-rc.1", "2.0.0-rc.3"],
)
def test_next_versions_are_sorted_unique_and_greater(text: str) -> None:
    version = _v(text)
    for derive in (
        next_possible_versions_develop,
        next_possible_versions_hotfix,
        next_possible_versions_for_release_branch_from_develop,
        next_possible_versions_for_release_branch_from_hotfix,
    ):
        candidates = derive(version)
        assert candidates
        assert list(candidates) == sorted(set(candidates))
        assert all(c > version for c in candidates)


# =============================================================================
# Single steps
# =============================================================================


def test_next_rc() -> None:
    assert str(next_rc(_v("1.3.0"))) == "1.3.0-rc.1"
    assert str(next_rc(_v("1.3.0-rc.1"))) == "1.3.0-rc.2"
    assert str(next_rc(_v("1.3.0-beta.2"))) == "1.3.0-rc.1"


def test_next_pre_release_stage() -> None:
    assert str(next_pre_release_stage(_v("1.0.0-alpha.3"))) == "1.0.0-beta.1"
    assert str(next_pre_release_stage(_v("1.0.0-beta.3"))) == "1.0.0-rc.1"
    assert next_pre_release_stage(_v("1.0.0-rc.3")) is None


def test_next_pre_release_counter_requires_prerelease() -> None:
    assert str(next_pre_release_counter(_v("1.0.0-beta.1"))) == "1.0.0-beta.2"
    with pytest.raises(ValueError):
        next_pre_release_counter(_v("1.0.0"))
