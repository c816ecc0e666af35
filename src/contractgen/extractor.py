# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Go source extractor built on the tree-sitter Go grammar."""

import logging
from pathlib import Path

import tree_sitter_go
from tree_sitter import Language, Node, Parser

from contractgen.annotations import has_state_marker, merge_annotations, parse_annotations
from contractgen.config import GeneratorConfig
from contractgen.errors import ExtractionError
from contractgen.model import (
    FileExtraction,
    FileRecord,
    MethodRecord,
    Param,
    StateField,
    StateRecord,
)

logger = logging.getLogger(__name__)

GO_LANGUAGE = Language(tree_sitter_go.language())

_GENERAL_DECLARATIONS: set[str] = {"type_declaration", "var_declaration", "const_declaration"}
_FUNCTION_DECLARATIONS: set[str] = {"function_declaration", "method_declaration"}
_IDENTIFIER_TYPES: set[str] = {"type_identifier", "identifier", "package_identifier"}


def extract_file(
    file_path: Path, root_path: Path, config: GeneratorConfig | None = None
) -> FileExtraction | None:
    """Extract annotated methods, state structs and passthrough text from one file.

    Args:
        file_path: Source file to extract.
        root_path: Project root used for relative paths.
        config: Generator configuration; defaults apply when omitted.

    Returns:
        The file's contribution, or ``None`` when the file belongs to a
        package other than the configured entry package.

    Raises:
        ExtractionError: If the file cannot be read, decoded or parsed.
    """
    config = config or GeneratorConfig()
    relative_path = _relative_path(file_path, root_path)
    try:
        source = file_path.read_bytes()
        source.decode("utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ExtractionError(relative_path, str(exc)) from exc

    tree = Parser(GO_LANGUAGE).parse(source)
    root = tree.root_node
    if root.has_error:
        line = _first_error_line(root)
        raise ExtractionError(relative_path, f"syntax error near line {line}")

    package_name = _package_name(root, source)
    if package_name != config.entry_package:
        logger.debug(
            f"Skipping file outside entry package (file_path={relative_path} package={package_name})"
        )
        return None

    return _FileExtractor(
        source=source, file_path=str(file_path), relative_path=relative_path
    ).extract(root)


class _FileExtractor:
    """Walk the top-level declarations of one parsed Go file."""

    def __init__(self, source: bytes, file_path: str, relative_path: str) -> None:
        self._source = source
        self._file_path = file_path
        self._relative_path = relative_path

    def extract(self, root: Node) -> FileExtraction:
        imports: list[str] = []
        declarations: list[str] = []
        methods: list[MethodRecord] = []
        states: list[StateRecord] = []

        for node in root.named_children:
            if node.type == "import_declaration":
                imports.extend(self._import_specs(node))
            elif node.type in _GENERAL_DECLARATIONS:
                declarations.append(self._declaration_text(node))
                if node.type == "type_declaration":
                    states.extend(self._state_records(node))
            elif node.type in _FUNCTION_DECLARATIONS:
                declarations.append(self._declaration_text(node))
                if node.type == "method_declaration":
                    method = self._method_record(node)
                    if method is not None:
                        methods.append(method)

        file_record = FileRecord(
            file_path=self._file_path,
            relative_path=self._relative_path,
            declarations=tuple(declarations),
            imports=tuple(imports),
            is_state_file=bool(states),
        )
        return FileExtraction(
            file=file_record, methods=tuple(methods), states=tuple(states)
        )

    def _import_specs(self, node: Node) -> list[str]:
        specs: list[str] = []
        for child in node.named_children:
            if child.type == "import_spec":
                specs.append(self._text(child))
            elif child.type == "import_spec_list":
                specs.extend(
                    self._text(spec)
                    for spec in child.named_children
                    if spec.type == "import_spec"
                )
        return specs

    def _declaration_text(self, node: Node) -> str:
        doc = _doc_comments(node)
        start = doc[0].start_byte if doc else node.start_byte
        return self._slice(start, node.end_byte)

    def _state_records(self, node: Node) -> list[StateRecord]:
        block_is_state = has_state_marker(self._texts(_doc_comments(node)))
        states: list[StateRecord] = []
        for spec in node.named_children:
            if spec.type != "type_spec":
                continue
            if not (block_is_state or has_state_marker(self._texts(_doc_comments(spec)))):
                continue
            type_node = spec.child_by_field_name("type")
            if type_node is None or type_node.type != "struct_type":
                continue
            states.append(
                StateRecord(
                    name=self._text(spec.child_by_field_name("name")),
                    fields=tuple(self._struct_fields(type_node)),
                    file_path=self._file_path,
                    relative_path=self._relative_path,
                    source_code=self._text(spec),
                )
            )
        return states

    def _struct_fields(self, struct_node: Node) -> list[StateField]:
        fields: list[StateField] = []
        for field_list in struct_node.named_children:
            if field_list.type != "field_declaration_list":
                continue
            for declaration in field_list.named_children:
                if declaration.type != "field_declaration":
                    continue
                field_type = self._render_type(declaration.child_by_field_name("type"))
                names = declaration.children_by_field_name("name")
                if not names:
                    # Embedded field: named after its type.
                    if any(child.type == "*" for child in declaration.children):
                        field_type = f"*{field_type}"
                    embedded = field_type.lstrip("*").rsplit(".", 1)[-1]
                    fields.append(StateField(name=embedded, type=field_type))
                    continue
                fields.extend(
                    StateField(name=self._text(name), type=field_type) for name in names
                )
        return fields

    def _method_record(self, node: Node) -> MethodRecord | None:
        annotations = parse_annotations(self._texts(_doc_comments(node)))
        tags, min_deposit = merge_annotations(annotations)
        if not tags:
            return None
        return MethodRecord(
            name=self._text(node.child_by_field_name("name")),
            receiver_type=self._receiver_type(node.child_by_field_name("receiver")),
            params=tuple(self._params(node.child_by_field_name("parameters"))),
            returns=tuple(self._returns(node.child_by_field_name("result"))),
            tags=tags,
            min_deposit=min_deposit,
            file_path=self._file_path,
            relative_path=self._relative_path,
            source_code=self._text(node),
        )

    def _receiver_type(self, receiver: Node | None) -> str:
        if receiver is None:
            return "Unknown"
        for declaration in receiver.named_children:
            if declaration.type == "parameter_declaration":
                return self._base_type_name(declaration.child_by_field_name("type"))
        return "Unknown"

    def _base_type_name(self, node: Node | None) -> str:
        if node is None:
            return "Unknown"
        if node.type == "type_identifier":
            return self._text(node)
        if node.type in ("pointer_type", "parenthesized_type") and node.named_children:
            return self._base_type_name(node.named_children[0])
        if node.type == "generic_type":
            return self._base_type_name(node.child_by_field_name("type"))
        return "Unknown"

    def _params(self, parameter_list: Node | None) -> list[Param]:
        params: list[Param] = []
        if parameter_list is None:
            return params
        for declaration in parameter_list.named_children:
            type_node = declaration.child_by_field_name("type")
            if declaration.type == "parameter_declaration":
                param_type = self._render_type(type_node)
                params.extend(
                    Param(name=self._text(name), type=param_type)
                    for name in declaration.children_by_field_name("name")
                )
            elif declaration.type == "variadic_parameter_declaration":
                name = declaration.child_by_field_name("name")
                if name is None:
                    continue
                params.append(
                    Param(
                        name=self._text(name),
                        type=f"[]{self._render_type(type_node)}",
                        variadic=True,
                    )
                )
        return params

    def _returns(self, result: Node | None) -> list[str]:
        if result is None:
            return []
        if result.type != "parameter_list":
            return [self._render_type(result)]
        returns: list[str] = []
        for declaration in result.named_children:
            if declaration.type not in (
                "parameter_declaration",
                "variadic_parameter_declaration",
            ):
                continue
            result_type = self._render_type(declaration.child_by_field_name("type"))
            count = max(1, len(declaration.children_by_field_name("name")))
            returns.extend([result_type] * count)
        return returns

    def _render_type(self, node: Node | None) -> str:
        if node is None:
            return "unknown"
        kind = node.type
        if kind in _IDENTIFIER_TYPES:
            return self._text(node)
        if kind == "pointer_type" and node.named_children:
            return "*" + self._render_type(node.named_children[0])
        if kind == "slice_type":
            return "[]" + self._render_type(node.child_by_field_name("element"))
        if kind == "array_type":
            length = self._text(node.child_by_field_name("length"))
            return f"[{length}]" + self._render_type(node.child_by_field_name("element"))
        if kind == "qualified_type":
            package = self._text(node.child_by_field_name("package"))
            return f"{package}.{self._text(node.child_by_field_name('name'))}"
        if kind == "map_type":
            key = self._render_type(node.child_by_field_name("key"))
            value = self._render_type(node.child_by_field_name("value"))
            return f"map[{key}]{value}"
        if kind == "interface_type" and not node.named_children:
            return "interface{}"
        if kind == "parenthesized_type" and node.named_children:
            return self._render_type(node.named_children[0])
        return " ".join(self._text(node).split())

    def _texts(self, nodes: list[Node]) -> list[str]:
        return [self._text(node) for node in nodes]

    def _text(self, node: Node | None) -> str:
        if node is None:
            return ""
        return self._slice(node.start_byte, node.end_byte)

    def _slice(self, start: int, end: int) -> str:
        return self._source[start:end].decode("utf-8")


def _doc_comments(node: Node) -> list[Node]:
    """Return the doc comment group directly above a declaration.

    The group is the run of comments ending on the line above ``node``
    with no blank line in between. A comment that shares its line with
    preceding code belongs to that code and ends the group.

    Args:
        node: Declaration or spec node.

    Returns:
        Comment nodes in source order.
    """
    comments: list[Node] = []
    next_row = node.start_point[0]
    sibling = _previous_named(node)
    while (
        sibling is not None
        and sibling.type == "comment"
        and next_row - sibling.end_point[0] <= 1
    ):
        comments.append(sibling)
        next_row = sibling.start_point[0]
        sibling = _previous_named(sibling)
    if comments and sibling is not None and sibling.end_point[0] == comments[-1].start_point[0]:
        comments.pop()
    comments.reverse()
    return comments


def _previous_named(node: Node) -> Node | None:
    sibling = node.prev_sibling
    while sibling is not None and not sibling.is_named:
        sibling = sibling.prev_sibling
    return sibling


def _package_name(root: Node, source: bytes) -> str | None:
    for child in root.named_children:
        if child.type != "package_clause":
            continue
        for identifier in child.named_children:
            if identifier.type == "package_identifier":
                return source[identifier.start_byte : identifier.end_byte].decode("utf-8")
    return None


def _first_error_line(root: Node) -> int:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node.start_point[0] + 1
        stack.extend(reversed(node.children))
    return root.start_point[0] + 1


def _relative_path(file_path: Path, root_path: Path) -> str:
    try:
        return file_path.resolve().relative_to(root_path.resolve()).as_posix()
    except ValueError:
        return file_path.as_posix()
