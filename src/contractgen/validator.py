# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Cross-file tagging rules checked before any code is generated."""

from collections.abc import Sequence

from contractgen.errors import (
    AmbiguousInitError,
    AmbiguousStateError,
    IncompatibleAnnotationsError,
    MissingStateError,
    NothingToExportError,
)
from contractgen.model import MethodRecord, StateRecord, Tag

# Checked against declared tags, in this order.
FORBIDDEN_COMBINATIONS: tuple[tuple[Tag, Tag], ...] = (
    (Tag.VIEW, Tag.MUTATING),
    (Tag.VIEW, Tag.PAYABLE),
    (Tag.INIT, Tag.VIEW),
)


def validate(methods: Sequence[MethodRecord], states: Sequence[StateRecord]) -> StateRecord:
    """Check the aggregated extraction results.

    Args:
        methods: Annotated methods from every scanned file.
        states: State structs from every scanned file.

    Returns:
        The single state record.

    Raises:
        MissingStateError: If no state struct exists.
        AmbiguousStateError: If more than one state struct exists.
        AmbiguousInitError: If more than one method is an initializer.
        IncompatibleAnnotationsError: If a method combines forbidden tags.
        NothingToExportError: If no annotated method exists.
    """
    if not states:
        raise MissingStateError(
            "no state declaration found: annotate exactly one struct with @contract:state"
        )
    if len(states) > 1:
        names = ", ".join(f"{state.name} ({state.relative_path})" for state in states)
        raise AmbiguousStateError(
            f"ambiguous state declaration: found {len(states)} structs with "
            f"@contract:state, only 1 is allowed: {names}"
        )

    init_methods = [method for method in methods if method.is_init]
    if len(init_methods) > 1:
        names = ", ".join(method.name for method in init_methods)
        raise AmbiguousInitError(
            f"ambiguous initializer: found {len(init_methods)} methods with "
            f"@contract:init, only 1 is allowed: {names}"
        )

    for method in methods:
        check_method(method)

    if not methods:
        raise NothingToExportError(
            f"nothing to export: no methods with @contract annotations found "
            f"(state {states[0].name})"
        )
    return states[0]


def check_method(method: MethodRecord) -> None:
    """Reject a method whose declared tags are mutually exclusive.

    Args:
        method: Method to check.

    Raises:
        IncompatibleAnnotationsError: If a forbidden pair is declared.
    """
    for first, second in FORBIDDEN_COMBINATIONS:
        if {first, second} <= method.tags:
            raise IncompatibleAnnotationsError(method.name, first.value, second.value)
