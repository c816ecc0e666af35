# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Generator configuration."""

from dataclasses import dataclass, field

DEFAULT_EXCLUDED_DIRS: frozenset[str] = frozenset({"vendor", "node_modules", "testdata"})


@dataclass(frozen=True)
class GeneratorConfig:
    """Tunable constants for one generation run.

    Attributes:
        entry_package: Go package name whose files are extracted.
        source_suffix: File suffix of candidate source files.
        test_suffix: File suffix of unit-test files to skip.
        generated_prefix: File name prefix of previous generator output.
        excluded_dirs: Directory names never descended into.
        output_file_name: File name the emitted source is written to.
        sdk_module: Import root of the contract SDK used by emitted code.
        max_workers: Number of threads used for per-file extraction.
    """

    entry_package: str = "main"
    source_suffix: str = ".go"
    test_suffix: str = "_test.go"
    generated_prefix: str = "generated_"
    excluded_dirs: frozenset[str] = field(default=DEFAULT_EXCLUDED_DIRS)
    output_file_name: str = "generated_build.go"
    sdk_module: str = "github.com/vlmoon99/near-sdk-go"
    max_workers: int = 1

    def __post_init__(self) -> None:
        if self.max_workers <= 0:
            raise ValueError("max_workers must be > 0")
        if not self.source_suffix:
            raise ValueError("source_suffix must not be empty")
        if not self.entry_package:
            raise ValueError("entry_package must not be empty")
