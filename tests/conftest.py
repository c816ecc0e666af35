import sys
from collections.abc import Callable
from pathlib import Path

import pytest


def _add_src_to_path() -> None:
    root = Path(__file__).resolve().parents[1]
    src_path = root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


_add_src_to_path()


@pytest.fixture
def go_project(tmp_path: Path) -> Callable[..., Path]:
    """Return a factory writing Go files into a fresh project root."""
    root = tmp_path / "contract"

    def _write(files: dict[str, str] | None = None, **sources: str) -> Path:
        contents = dict(files or {})
        contents.update({f"{name}.go": source for name, source in sources.items()})
        for relative, source in contents.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(source, encoding="utf-8")
        root.mkdir(parents=True, exist_ok=True)
        return root

    return _write
