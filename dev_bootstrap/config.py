"""Project layout loading.

Defaults live on :class:`~dev_bootstrap.types.ProjectLayout`; a project may
override them with a ``[tool.dev-bootstrap]`` table in its pyproject.toml.
"""

from __future__ import annotations

import tomllib
from pathlib import Path

from pydantic import ValidationError

from dev_bootstrap.errors import ConfigurationError
from dev_bootstrap.logging import get_logger
from dev_bootstrap.types import ProjectLayout

log = get_logger(__name__)

TOOL_TABLE = "dev-bootstrap"


def _read_tool_table(pyproject: Path) -> dict:
    if not pyproject.is_file():
        return {}
    try:
        with pyproject.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"Cannot parse {pyproject}: {exc}") from exc
    table = data.get("tool", {}).get(TOOL_TABLE, {})
    if not isinstance(table, dict):
        raise ConfigurationError(f"[tool.{TOOL_TABLE}] in {pyproject} must be a table")
    return table


def load_layout(root: Path) -> ProjectLayout:
    root = root.resolve()
    overrides = _read_tool_table(root / "pyproject.toml")
    if overrides:
        log.info("using [tool.%s] overrides: %s", TOOL_TABLE, sorted(overrides))
    # accept snake_case spellings too
    normalized = {key.replace("_", "-"): value for key, value in overrides.items()}
    if "root" in normalized:
        raise ConfigurationError(f"[tool.{TOOL_TABLE}] cannot override 'root'")
    try:
        return ProjectLayout.model_validate({"root": root, **normalized})
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid [tool.{TOOL_TABLE}] table: {exc}") from exc
