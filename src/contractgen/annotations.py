# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Parse ``@contract:`` annotations out of Go doc comments."""

import logging
from collections.abc import Iterable

from contractgen.model import Annotation, Tag

logger = logging.getLogger(__name__)

ANNOTATION_PREFIX = "@contract:"
STATE_MARKER = "@contract:state"
_MIN_DEPOSIT_ARG = "min_deposit="
_TAGS_BY_KEYWORD: dict[str, Tag] = {tag.value: tag for tag in Tag}


def comment_lines(comment: str) -> list[str]:
    """Split one Go comment into bare text lines.

    Args:
        comment: Raw ``//`` or ``/* */`` comment text.

    Returns:
        Comment lines with comment markers and surrounding whitespace removed.
    """
    text = comment.strip()
    if text.startswith("//"):
        return [text[2:].strip()]
    if text.startswith("/*"):
        text = text[2:]
        if text.endswith("*/"):
            text = text[:-2]
        lines = []
        for line in text.splitlines():
            line = line.strip()
            if line.startswith("*"):
                line = line[1:].strip()
            lines.append(line)
        return lines
    return [text]


def parse_annotation(line: str) -> Annotation | None:
    """Parse a single doc-comment line.

    Args:
        line: Comment line without comment markers.

    Returns:
        Parsed annotation, or ``None`` when the line is not a recognized one.
    """
    if not line.startswith(ANNOTATION_PREFIX):
        return None
    parts = line[len(ANNOTATION_PREFIX) :].split()
    if not parts:
        return None
    tag = _TAGS_BY_KEYWORD.get(parts[0])
    if tag is None:
        logger.debug(f"Ignoring unknown annotation keyword (keyword={parts[0]})")
        return None
    if tag is not Tag.PAYABLE:
        return Annotation(tag=tag)
    min_deposit = None
    for part in parts[1:]:
        if part.startswith(_MIN_DEPOSIT_ARG):
            min_deposit = part[len(_MIN_DEPOSIT_ARG) :]
    return Annotation(tag=tag, min_deposit=min_deposit)


def parse_annotations(comments: Iterable[str]) -> list[Annotation]:
    """Parse every annotation line of a doc comment group.

    Args:
        comments: Raw comment texts of one doc comment group.

    Returns:
        Recognized annotations in source order.
    """
    annotations = []
    for comment in comments:
        for line in comment_lines(comment):
            annotation = parse_annotation(line)
            if annotation is not None:
                annotations.append(annotation)
    return annotations


def has_state_marker(comments: Iterable[str]) -> bool:
    """Check whether a doc comment group marks a struct as contract state."""
    return any(
        STATE_MARKER in line for comment in comments for line in comment_lines(comment)
    )


def merge_annotations(annotations: Iterable[Annotation]) -> tuple[frozenset[Tag], str | None]:
    """Accumulate annotations into a tag set and a minimum deposit.

    Tags only accumulate. When several ``payable`` lines carry a
    ``min_deposit``, the last one wins.

    Args:
        annotations: Parsed annotations of one method.

    Returns:
        Declared tag set and the raw minimum-deposit literal, if any.
    """
    tags: set[Tag] = set()
    min_deposit = None
    for annotation in annotations:
        tags.add(annotation.tag)
        if annotation.min_deposit:
            min_deposit = annotation.min_deposit
    return frozenset(tags), min_deposit
