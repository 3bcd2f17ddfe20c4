"""Tests for registry resolution and optional-entry gating."""

from pathlib import Path

import pytest

from gitcop.registry import (
    NotFound,
    Registry,
    Resolved,
    Selection,
    SelectionKind,
    SyncTarget,
)
from gitcop.repo import GitHubRepo

A = Selection.explicit(GitHubRepo("alice", "one"))
B = Selection.explicit(GitHubRepo("bob", "two"))
C = Selection.explicit(GitHubRepo("carol", "three"))


@pytest.fixture
def registry() -> Registry:
    return Registry([("one", A), ("two", B), ("three", C)])


def test_untargeted_keeps_declaration_order(registry: Registry) -> None:
    """Verifies that resolving everything yields every entry in order."""
    assert list(registry.resolve()) == [
        Resolved("one", A),
        Resolved("two", B),
        Resolved("three", C),
    ]


def test_targeted_yields_only_requested(registry: Registry) -> None:
    """Verifies that only the requested names are yielded, in request order."""
    assert list(registry.resolve(["one", "three"])) == [
        Resolved("one", A),
        Resolved("three", C),
    ]


def test_missing_name_does_not_stop_resolution(registry: Registry) -> None:
    """Verifies that a lookup miss is reported and the next name still resolves."""
    assert list(registry.resolve(["missing", "two"])) == [
        NotFound("missing"),
        Resolved("two", B),
    ]


def test_missing_name_in_empty_registry() -> None:
    """Verifies the single NotFound from an empty registry, then the end."""
    results = Registry().resolve(["missing"])
    assert next(results) == NotFound("missing")
    with pytest.raises(StopIteration):
        next(results)


def test_resolution_is_single_pass(registry: Registry) -> None:
    """Verifies that resolution is a lazy, one-shot iterator."""
    results = registry.resolve()
    assert len(list(results)) == 3
    assert list(results) == []


def test_untargeted_keeps_optional_tag() -> None:
    """Verifies that an untargeted traversal does not rewrite optional entries."""
    optional = Selection.optional(GitHubRepo("magnars", "s.el"))
    registry = Registry([("s", optional)])
    [item] = registry.resolve()
    assert isinstance(item, Resolved)
    assert item.selection.kind is SelectionKind.OPTIONAL


def test_targeted_forces_explicit() -> None:
    """Verifies that naming an optional entry overrides its gating."""
    optional = Selection.optional(GitHubRepo("magnars", "s.el"))
    registry = Registry([("s", optional)])
    [item] = registry.resolve(["s"])
    assert isinstance(item, Resolved)
    assert item.selection.kind is SelectionKind.EXPLICIT
    assert item.selection.repo == optional.repo


def test_targets_gate_optional_on_directory(tmp_path: Path) -> None:
    """Verifies that absent optional entries are skipped unless named.

    Args:
        tmp_path (Path): Pytest fixture for a temporary directory.
    """
    present = Selection.optional(GitHubRepo("a", "present"))
    absent = Selection.optional(GitHubRepo("a", "absent"))
    registry = Registry([("present", present), ("absent", absent), ("one", A)])
    (tmp_path / "present").mkdir()

    targets, missing = registry.targets(base=tmp_path)
    assert [t.directory.name for t in targets] == ["present", "one"]
    assert missing == []

    targets, missing = registry.targets(["absent", "nope"], base=tmp_path)
    assert targets == [SyncTarget(tmp_path / "absent", absent.repo)]
    assert missing == [NotFound("nope")]


def test_target_key_is_directory() -> None:
    """Verifies that a target is keyed by its directory path."""
    target = SyncTarget(Path("dash"), GitHubRepo("magnars", "dash.el"))
    assert target.key == "dash"


def test_registry_is_read_only(registry: Registry) -> None:
    """Verifies the mapping interface and that entries cannot be reassigned."""
    assert len(registry) == 3
    assert list(registry) == ["one", "two", "three"]
    assert registry["two"] == B
    assert registry.is_known("three")
    assert not registry.is_known("four")
    with pytest.raises(TypeError):
        registry["four"] = A  # type: ignore[index]


def test_duplicate_names_rejected() -> None:
    """Verifies that registry keys are unique."""
    with pytest.raises(ValueError, match="Duplicate repository name: one"):
        Registry([("one", A), ("one", B)])


def test_repeated_names_targeted_once(registry: Registry, tmp_path: Path) -> None:
    """Verifies that naming an entry twice yields a single sync target.

    Args:
        registry (Registry): The three-entry registry fixture.
        tmp_path (Path): Pytest fixture for a temporary directory.
    """
    targets, missing = registry.targets(
        ["two", "nope", "two", "nope", "one"], base=tmp_path
    )

    assert [t.directory.name for t in targets] == ["two", "one"]
    assert missing == [NotFound("nope")]
