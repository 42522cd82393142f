"""Expose the installed DutchTax version."""

from __future__ import annotations

import re
from functools import lru_cache
from importlib import metadata
from pathlib import Path
from typing import Final

PACKAGE_NAME: Final = "dutchtax"
PYPROJECT_PATH: Final = Path(__file__).resolve().parents[3] / "pyproject.toml"

_VERSION_LINE = re.compile(r'^version\s*=\s*"(?P<version>[^"]+)"\s*$')


@lru_cache(maxsize=1)
def get_project_version() -> str:
    """Return the packaged version, falling back to ``pyproject.toml``.

    Source checkouts that were never installed have no distribution metadata,
    which is the usual case when running the test-suite from ``src``.
    """

    try:
        return metadata.version(PACKAGE_NAME)
    except metadata.PackageNotFoundError:
        return read_pyproject_version(PYPROJECT_PATH)


def read_pyproject_version(pyproject_path: Path) -> str:
    """Read ``[project].version`` from ``pyproject_path``."""

    if not pyproject_path.exists():
        raise RuntimeError(f"Unable to locate project metadata at {pyproject_path}")

    in_project = False
    for raw_line in pyproject_path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if line.startswith("[") and line.endswith("]"):
            in_project = line == "[project]"
            continue
        if not in_project:
            continue
        match = _VERSION_LINE.match(line)
        if match:
            return match.group("version")

    raise RuntimeError("Unable to determine project version from pyproject.toml")


__all__ = ["PACKAGE_NAME", "get_project_version", "read_pyproject_version"]
