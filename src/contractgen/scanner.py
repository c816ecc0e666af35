# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Discover candidate Go source files beneath a project root."""

import logging
import os
from pathlib import Path

import pathspec

from contractgen.config import GeneratorConfig
from contractgen.errors import ScanError

logger = logging.getLogger(__name__)


class ExclusionMatcher:
    """Match project-relative paths against the fixed exclusion rules."""

    def __init__(
        self, dir_spec: pathspec.GitIgnoreSpec, file_spec: pathspec.GitIgnoreSpec
    ) -> None:
        """Initialize matcher.

        Args:
            dir_spec: Compiled matcher for excluded directories.
            file_spec: Compiled matcher for excluded files.
        """
        self._dir_spec = dir_spec
        self._file_spec = file_spec

    @classmethod
    def from_config(cls, config: GeneratorConfig) -> "ExclusionMatcher":
        """Build the matcher for hidden, cache, test and generated paths.

        Args:
            config: Generator configuration.

        Returns:
            Configured exclusion matcher.
        """
        dir_patterns = [".*/"]
        dir_patterns.extend(f"{name}/" for name in sorted(config.excluded_dirs))
        file_patterns = [f"*{config.test_suffix}", f"{config.generated_prefix}*"]
        return cls(
            dir_spec=pathspec.GitIgnoreSpec.from_lines(dir_patterns),
            file_spec=pathspec.GitIgnoreSpec.from_lines(file_patterns),
        )

    def matches(self, relative_path: str, is_dir: bool) -> bool:
        """Check whether a path is excluded from the scan.

        Args:
            relative_path: Project-relative POSIX path.
            is_dir: Whether the path is a directory.

        Returns:
            True when the path should be skipped.
        """
        normalized = relative_path.replace(os.sep, "/").strip("/")
        if not normalized:
            return False
        if is_dir:
            return self._dir_spec.match_file(f"{normalized}/")
        return self._file_spec.match_file(normalized)


def scan_sources(root_path: Path, config: GeneratorConfig | None = None) -> list[Path]:
    """Collect source files to extract, in deterministic walk order.

    Directories and files are visited in lexical order. Hidden
    directories (except the root itself), excluded cache directories,
    unit-test files and previous generator output are skipped.

    Args:
        root_path: Project root directory.
        config: Generator configuration; defaults apply when omitted.

    Returns:
        Absolute paths of candidate source files.

    Raises:
        ScanError: If the root is not a directory or the walk fails.
    """
    config = config or GeneratorConfig()
    root = root_path.resolve()
    if not root.is_dir():
        raise ScanError(f"Source root is not a directory: {root}")

    matcher = ExclusionMatcher.from_config(config)
    files: list[Path] = []

    def _on_error(exc: OSError) -> None:
        raise ScanError(f"Failed to walk {exc.filename}: {exc.strerror}") from exc

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
        current = Path(dirpath)
        relative_dir = current.relative_to(root).as_posix()
        if relative_dir == ".":
            relative_dir = ""
        dirnames[:] = sorted(
            name
            for name in dirnames
            if not matcher.matches(f"{relative_dir}/{name}", is_dir=True)
        )
        for name in sorted(filenames):
            if not name.endswith(config.source_suffix):
                continue
            if matcher.matches(f"{relative_dir}/{name}", is_dir=False):
                continue
            files.append(current / name)

    logger.debug(f"Source scan completed (root={root} files={len(files)})")
    return files
