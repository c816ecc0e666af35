# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Public import surface for contract glue generation."""

from contractgen.amount import to_yocto
from contractgen.codegen import render_contract
from contractgen.config import GeneratorConfig
from contractgen.errors import (
    AmbiguousInitError,
    AmbiguousStateError,
    ExtractionError,
    GenerationError,
    IncompatibleAnnotationsError,
    MissingStateError,
    NothingToExportError,
    ScanError,
    ValidationError,
)
from contractgen.extractor import extract_file
from contractgen.generator import collect_project, generate
from contractgen.model import (
    FileRecord,
    MethodRecord,
    Param,
    ProjectScan,
    SkippedFile,
    StateRecord,
    Tag,
)
from contractgen.naming import capitalize_first, is_basic_type, to_snake_case
from contractgen.scanner import scan_sources
from contractgen.validator import validate

__all__ = [
    "AmbiguousInitError",
    "AmbiguousStateError",
    "ExtractionError",
    "FileRecord",
    "GenerationError",
    "GeneratorConfig",
    "IncompatibleAnnotationsError",
    "MethodRecord",
    "MissingStateError",
    "NothingToExportError",
    "Param",
    "ProjectScan",
    "ScanError",
    "SkippedFile",
    "StateRecord",
    "Tag",
    "ValidationError",
    "capitalize_first",
    "collect_project",
    "extract_file",
    "generate",
    "is_basic_type",
    "render_contract",
    "scan_sources",
    "to_snake_case",
    "to_yocto",
    "validate",
]
