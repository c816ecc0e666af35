# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Identifier and type-shape helpers shared by extraction and generation."""

# Types decoded as fields of a synthesized parameter struct.
BASIC_TYPES: frozenset[str] = frozenset(
    {
        "string",
        "bool",
        "int",
        "int8",
        "int16",
        "int32",
        "int64",
        "uint",
        "uint8",
        "uint16",
        "uint32",
        "uint64",
        "uintptr",
        "byte",
        "rune",
        "float32",
        "float64",
        "complex64",
        "complex128",
        "[]byte",
        "[]string",
        "[]int",
        "[]int64",
        "[]float64",
        "[]bool",
        "map[string]string",
        "map[string]interface{}",
    }
)


def to_snake_case(name: str) -> str:
    """Convert a Go method name to a lower snake case export name.

    A word boundary goes before every upper case letter that follows a
    letter or digit, so runs of capitals split letter by letter whatever
    character follows the run:
    ``SendMessage`` -> ``send_message``, ``PDFLoad`` -> ``p_d_f_load``.
    There is no look-ahead that keeps an acronym together, so ``PDFLoad``
    never becomes ``pdf_load``; exported names depend on this.

    Args:
        name: Method identifier.

    Returns:
        Export name.
    """
    chars: list[str] = []
    for index, char in enumerate(name):
        if index > 0 and char.isupper():
            previous = name[index - 1]
            if previous.islower() or previous.isdigit() or previous.isupper():
                chars.append("_")
        chars.append(char)
    return "".join(chars).lower()


def capitalize_first(name: str) -> str:
    """Upper-case the first character only, leaving the rest untouched."""
    if not name:
        return ""
    return name[0].upper() + name[1:]


def is_basic_type(type_name: str) -> bool:
    """Check whether a type signature decodes as a plain struct field.

    Args:
        type_name: Textual Go type signature.

    Returns:
        True for primitives, primitive slices and pointers, and any map.
    """
    if type_name in BASIC_TYPES:
        return True
    if type_name.startswith("*"):
        return type_name[1:] in BASIC_TYPES
    if type_name.startswith("[]"):
        return is_basic_type(type_name[2:])
    return type_name.startswith("map[")
