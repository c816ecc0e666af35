# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Exception hierarchy for contract glue generation."""


class GenerationError(RuntimeError):
    """Represent a fatal generation failure."""


class ScanError(GenerationError):
    """Represent a filesystem walk failure."""


class ExtractionError(GenerationError):
    """Represent a read or syntax failure for one source file.

    Never fatal on its own: the pipeline records the file as skipped.
    """

    def __init__(self, file_path: str, message: str) -> None:
        super().__init__(f"{file_path}: {message}")
        self.file_path = file_path
        self.message = message


class ValidationError(GenerationError):
    """Represent a violated tagging rule across the scanned tree."""


class MissingStateError(ValidationError):
    """No struct carries the state marker."""


class AmbiguousStateError(ValidationError):
    """More than one struct carries the state marker."""


class AmbiguousInitError(ValidationError):
    """More than one method carries the init annotation."""


class IncompatibleAnnotationsError(ValidationError):
    """One method carries mutually exclusive annotations."""

    def __init__(self, method_name: str, first: str, second: str) -> None:
        super().__init__(
            f"method '{method_name}' cannot be both @contract:{first} and @contract:{second}"
        )
        self.method_name = method_name


class NothingToExportError(ValidationError):
    """No annotated method exists anywhere in the tree."""
