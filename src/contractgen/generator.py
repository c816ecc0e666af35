# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Scan, extract, validate and render in one pipeline."""

import concurrent.futures
import logging
from pathlib import Path

from contractgen.codegen import render_contract
from contractgen.config import GeneratorConfig
from contractgen.errors import ExtractionError
from contractgen.extractor import extract_file
from contractgen.model import (
    FileExtraction,
    FileRecord,
    MethodRecord,
    ProjectScan,
    SkippedFile,
    StateRecord,
)
from contractgen.scanner import scan_sources
from contractgen.validator import validate

logger = logging.getLogger(__name__)

_Outcome = FileExtraction | SkippedFile | None


def collect_project(root_path: Path, config: GeneratorConfig | None = None) -> ProjectScan:
    """Scan a project tree and aggregate what every file contributes.

    Files that fail to parse are logged and recorded as skipped; files of
    other packages are ignored.

    Args:
        root_path: Project root directory.
        config: Generator configuration; defaults apply when omitted.

    Returns:
        Aggregated methods, state structs, files and skipped files.

    Raises:
        ScanError: If the directory walk fails.
    """
    config = config or GeneratorConfig()
    root = root_path.resolve()
    logger.info(f"Scanning contract sources (root={root})")
    paths = scan_sources(root, config)

    if config.max_workers > 1 and len(paths) > 1:
        with concurrent.futures.ThreadPoolExecutor(
            max_workers=config.max_workers
        ) as executor:
            outcomes = list(
                executor.map(lambda path: _extract_one(path, root, config), paths)
            )
    else:
        outcomes = [_extract_one(path, root, config) for path in paths]

    methods: list[MethodRecord] = []
    states: list[StateRecord] = []
    files: list[FileRecord] = []
    skipped: list[SkippedFile] = []
    for outcome in outcomes:
        if outcome is None:
            continue
        if isinstance(outcome, SkippedFile):
            skipped.append(outcome)
            continue
        methods.extend(outcome.methods)
        states.extend(outcome.states)
        files.append(outcome.file)

    return ProjectScan(
        methods=tuple(methods),
        states=tuple(states),
        files=tuple(files),
        skipped=tuple(skipped),
    )


def generate(root_path: Path, config: GeneratorConfig | None = None) -> str:
    """Generate the export glue source for a contract project.

    Args:
        root_path: Project root directory.
        config: Generator configuration; defaults apply when omitted.

    Returns:
        Generated Go source text.

    Raises:
        ScanError: If the directory walk fails.
        ValidationError: If the tagging rules are violated.
    """
    config = config or GeneratorConfig()
    scan = collect_project(root_path, config)
    state = validate(scan.methods, scan.states)
    exported = sum(1 for method in scan.methods if method.is_exported)
    logger.info(
        f"Generating contract glue (state={state.name} exports={exported} "
        f"files={len(scan.files)} skipped={len(scan.skipped)})"
    )
    return render_contract(scan.methods, state, scan.files, config)


def _extract_one(path: Path, root: Path, config: GeneratorConfig) -> _Outcome:
    try:
        return extract_file(path, root, config)
    except ExtractionError as exc:
        logger.warning(
            f"Skipping file due to parse/read failure (file_path={exc.file_path} error={exc.message})"
        )
        return SkippedFile(file_path=exc.file_path, message=exc.message)
