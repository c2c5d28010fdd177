"""Minimum Python version resolution.

The project's declared minimum (``python_requires=`` in setup.py or
``requires-python`` in pyproject.toml) is reduced to ``major.minor`` and
mapped to a pinned micro release, so every contributor develops against the
oldest interpreter the project supports.
"""

from __future__ import annotations

import re
import tomllib
from pathlib import Path

from dev_bootstrap.errors import UnsupportedVersion
from dev_bootstrap.types import ProjectLayout

PINNED_VERSIONS: dict[str, str] = {
    "3.7": "3.7.13",
    "3.8": "3.8.13",
    "3.9": "3.9.11",
    "3.10": "3.10.3",
}

_VERSION_RE = re.compile(r"\d+(?:\.\d+)+")


def minor_of(constraint: str) -> str | None:
    """Return the ``major.minor`` part of the first version in *constraint*."""
    m = _VERSION_RE.search(constraint)
    if not m:
        return None
    return ".".join(m.group(0).split(".")[:2])


def _from_setup_py(path: Path) -> str | None:
    for line in path.read_text(encoding="utf-8").splitlines():
        if "python_requires=" in line:
            return minor_of(line.split("python_requires=", 1)[1])
    return None


def _from_pyproject(path: Path) -> str | None:
    with path.open("rb") as f:
        data = tomllib.load(f)
    requires = data.get("project", {}).get("requires-python")
    return minor_of(requires) if isinstance(requires, str) else None


_READERS = {
    "setup.py": _from_setup_py,
    "pyproject.toml": _from_pyproject,
}


def read_constraint(layout: ProjectLayout) -> str:
    """Find the minimum supported minor version declared by the project."""
    for name in layout.metadata_files:
        path = layout.resolve(Path(name))
        reader = _READERS.get(path.name)
        if reader is None or not path.is_file():
            continue
        try:
            minor = reader(path)
        except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as exc:
            raise UnsupportedVersion(f"Cannot read the minimum Python version from {path}: {exc}") from exc
        if minor:
            return minor
    raise UnsupportedVersion(
        f"No minimum Python version declared in {', '.join(layout.metadata_files)} "
        f"under {layout.root}"
    )


def pin(minor: str) -> str:
    try:
        return PINNED_VERSIONS[minor]
    except KeyError:
        supported = ", ".join(PINNED_VERSIONS)
        raise UnsupportedVersion(
            f"No pinned interpreter for Python {minor} (supported: {supported})"
        ) from None


def resolve_version(layout: ProjectLayout) -> str:
    return pin(read_constraint(layout))
