"""Expose the project version consistently across the API."""

from __future__ import annotations

import re
from functools import lru_cache
from importlib import metadata
from pathlib import Path
from typing import Final

PACKAGE_NAME: Final = "perutax"
PYPROJECT_PATH: Final = Path(__file__).resolve().parents[3] / "pyproject.toml"

_SECTION_PATTERN = re.compile(r"^\[(?P<name>[^\]]+)\]\s*$")
_VERSION_PATTERN = re.compile(r'^version\s*=\s*"(?P<version>[^"]+)"')


@lru_cache(maxsize=1)
def get_project_version() -> str:
    """Return the installed version, falling back to ``pyproject.toml``."""

    try:
        return metadata.version(PACKAGE_NAME)
    except metadata.PackageNotFoundError:
        return read_pyproject_version(PYPROJECT_PATH)


def read_pyproject_version(path: Path) -> str:
    """Return ``[project].version`` from the given ``pyproject.toml``."""

    if not path.exists():
        raise RuntimeError(f"Unable to locate project metadata at {path}")

    section: str | None = None
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        header = _SECTION_PATTERN.match(line)
        if header:
            section = header.group("name")
            continue
        if section != "project":
            continue
        match = _VERSION_PATTERN.match(line)
        if match:
            return match.group("version")

    raise RuntimeError("Unable to determine project version from pyproject.toml")


__all__ = ["get_project_version", "read_pyproject_version"]
