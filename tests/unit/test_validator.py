# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for cross-file tagging rules."""

import pytest

from contractgen import (
    AmbiguousInitError,
    AmbiguousStateError,
    IncompatibleAnnotationsError,
    MethodRecord,
    MissingStateError,
    NothingToExportError,
    StateRecord,
    Tag,
    validate,
)


def _state(name: str = "Contract", relative_path: str = "main.go") -> StateRecord:
    return StateRecord(
        name=name,
        fields=(),
        file_path=f"/project/{relative_path}",
        relative_path=relative_path,
        source_code=f"{name} struct {{}}",
    )


def _method(name: str, *tags: Tag) -> MethodRecord:
    return MethodRecord(
        name=name,
        receiver_type="Contract",
        params=(),
        returns=(),
        tags=frozenset(tags),
        min_deposit=None,
        file_path="/project/main.go",
        relative_path="main.go",
        source_code=f"func (c *Contract) {name}() {{}}",
    )


def test_ph3_val_001_validate_returns_the_single_state() -> None:
    state = _state()

    assert validate([_method("Get", Tag.VIEW)], [state]) is state


def test_ph3_val_002_validate_rejects_missing_state() -> None:
    with pytest.raises(MissingStateError, match="no state declaration found"):
        validate([_method("Get", Tag.VIEW)], [])


def test_ph3_val_003_validate_rejects_multiple_states_naming_them() -> None:
    states = [_state("First", "a.go"), _state("Second", "b.go")]

    with pytest.raises(AmbiguousStateError, match="ambiguous state declaration") as exc_info:
        validate([_method("Get", Tag.VIEW)], states)

    assert "First" in str(exc_info.value)
    assert "Second" in str(exc_info.value)


def test_ph3_val_004_validate_rejects_multiple_initializers() -> None:
    methods = [_method("Init", Tag.INIT), _method("Setup", Tag.INIT, Tag.PAYABLE)]

    with pytest.raises(AmbiguousInitError, match="ambiguous initializer") as exc_info:
        validate(methods, [_state()])

    assert "Init" in str(exc_info.value)
    assert "Setup" in str(exc_info.value)


@pytest.mark.parametrize(
    ("tags", "message"),
    [
        ((Tag.VIEW, Tag.MUTATING), "@contract:view and @contract:mutating"),
        ((Tag.VIEW, Tag.PAYABLE), "@contract:view and @contract:payable"),
        ((Tag.INIT, Tag.VIEW), "@contract:init and @contract:view"),
    ],
)
def test_ph3_val_005_validate_rejects_forbidden_combinations(
    tags: tuple[Tag, ...], message: str
) -> None:
    with pytest.raises(IncompatibleAnnotationsError) as exc_info:
        validate([_method("Conflicted", *tags)], [_state()])

    assert "'Conflicted'" in str(exc_info.value)
    assert message in str(exc_info.value)
    assert exc_info.value.method_name == "Conflicted"


def test_ph3_val_006_validate_rejects_tree_without_methods() -> None:
    with pytest.raises(NothingToExportError, match="nothing to export"):
        validate([], [_state()])


def test_ph3_val_007_state_cardinality_is_checked_before_methods() -> None:
    with pytest.raises(MissingStateError):
        validate([], [])


def test_ph3_val_008_init_implies_mutating_and_public() -> None:
    method = _method("Init", Tag.INIT)

    assert method.is_init and method.is_mutating and method.is_public
    assert method.is_exported


def test_ph3_val_009_private_wins_over_public_tags() -> None:
    method = _method("Hidden", Tag.PRIVATE, Tag.VIEW)

    assert method.is_public
    assert not method.is_exported
