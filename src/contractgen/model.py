# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Domain records produced by extraction and consumed by code generation."""

from dataclasses import dataclass
from enum import Enum


class Tag(str, Enum):
    """Closed set of method annotations recognized after ``@contract:``."""

    INIT = "init"
    PUBLIC = "public"
    PRIVATE = "private"
    VIEW = "view"
    MUTATING = "mutating"
    PAYABLE = "payable"
    PROMISE_CALLBACK = "promise_callback"


# Every tag except ``private`` exposes the method to the call boundary.
PUBLIC_TAGS: frozenset[Tag] = frozenset(
    {
        Tag.INIT,
        Tag.PUBLIC,
        Tag.VIEW,
        Tag.MUTATING,
        Tag.PAYABLE,
        Tag.PROMISE_CALLBACK,
    }
)
MUTATING_TAGS: frozenset[Tag] = frozenset({Tag.INIT, Tag.MUTATING})


@dataclass(frozen=True)
class Annotation:
    """Represent one parsed ``@contract:<keyword>`` line.

    Attributes:
        tag: Recognized annotation keyword.
        min_deposit: Raw ``min_deposit`` literal; only set for ``payable``.
    """

    tag: Tag
    min_deposit: str | None = None


@dataclass(frozen=True)
class Param:
    """Represent one method parameter.

    Attributes:
        name: Parameter identifier as declared.
        type: Textual type signature (``...T`` is rendered as ``[]T``).
        variadic: Whether the parameter was declared with ``...``.
    """

    name: str
    type: str
    variadic: bool = False


@dataclass(frozen=True)
class StateField:
    """Represent one field of the state struct."""

    name: str
    type: str


@dataclass(frozen=True)
class MethodRecord:
    """Represent one annotated method.

    Flags are derived from the declared tag set rather than stored, so
    ``init`` implies ``mutating`` and ``public`` by construction.

    Attributes:
        name: Method name.
        receiver_type: Receiver type name with any pointer removed.
        params: Parameters in declaration order.
        returns: Result type signatures in declaration order.
        tags: Declared annotation tags.
        min_deposit: Raw minimum-deposit literal of a ``payable`` annotation.
        file_path: Absolute source file path.
        relative_path: Project-relative POSIX source file path.
        source_code: Verbatim method text.
    """

    name: str
    receiver_type: str
    params: tuple[Param, ...]
    returns: tuple[str, ...]
    tags: frozenset[Tag]
    min_deposit: str | None
    file_path: str
    relative_path: str
    source_code: str

    @property
    def is_init(self) -> bool:
        return Tag.INIT in self.tags

    @property
    def is_public(self) -> bool:
        return bool(self.tags & PUBLIC_TAGS)

    @property
    def is_private(self) -> bool:
        return Tag.PRIVATE in self.tags

    @property
    def is_view(self) -> bool:
        return Tag.VIEW in self.tags

    @property
    def is_mutating(self) -> bool:
        return bool(self.tags & MUTATING_TAGS)

    @property
    def is_payable(self) -> bool:
        return Tag.PAYABLE in self.tags

    @property
    def is_promise_callback(self) -> bool:
        return Tag.PROMISE_CALLBACK in self.tags

    @property
    def is_exported(self) -> bool:
        """Whether an export wrapper is generated for this method."""
        return (self.is_public or self.is_init) and not self.is_private


@dataclass(frozen=True)
class StateRecord:
    """Represent the struct persisted as contract state.

    Attributes:
        name: Struct type name.
        fields: Struct fields in declaration order.
        file_path: Absolute source file path.
        relative_path: Project-relative POSIX source file path.
        source_code: Verbatim type spec text.
    """

    name: str
    fields: tuple[StateField, ...]
    file_path: str
    relative_path: str
    source_code: str


@dataclass(frozen=True)
class FileRecord:
    """Represent one extracted source file.

    Attributes:
        file_path: Absolute source file path.
        relative_path: Project-relative POSIX source file path.
        declarations: Verbatim top-level declarations, doc comments included.
        imports: Verbatim import specs.
        is_state_file: Whether the file declares the state struct.
    """

    file_path: str
    relative_path: str
    declarations: tuple[str, ...]
    imports: tuple[str, ...]
    is_state_file: bool = False


@dataclass(frozen=True)
class FileExtraction:
    """Group everything one source file contributes."""

    file: FileRecord
    methods: tuple[MethodRecord, ...] = ()
    states: tuple[StateRecord, ...] = ()


@dataclass(frozen=True)
class SkippedFile:
    """Represent a source file dropped because it could not be parsed."""

    file_path: str
    message: str


@dataclass(frozen=True)
class ProjectScan:
    """Aggregate extraction results for a whole project tree."""

    methods: tuple[MethodRecord, ...] = ()
    states: tuple[StateRecord, ...] = ()
    files: tuple[FileRecord, ...] = ()
    skipped: tuple[SkippedFile, ...] = ()
