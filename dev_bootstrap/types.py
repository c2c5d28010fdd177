"""Shared Pydantic models for a provisioning run."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_SOURCE_DEPENDENCIES = ["prophet"]


class InstallRequest(BaseModel):
    """Parsed invocation arguments; never mutated after parsing."""

    model_config = ConfigDict(frozen=True)

    target_directory: Path
    verbose: bool = False
    quiet: bool = False

    @property
    def pip_quiet(self) -> bool:
        # verbose wins over quiet
        return self.quiet and not self.verbose


class ProjectLayout(BaseModel):
    """Where the provisioner finds things inside the project being set up.

    Attributes
    ----------
    root: Path
        Project root; relative paths below are resolved against it.
    metadata_files: list[str]
        Files searched, in order, for the minimum Python version.
    dev_requirements: Path
        Requirements file with the development dependency set.
    extras: str
        Optional-dependency group installed with the editable project.
    test_plugin: Path
        In-repo test-support plugin installed in editable mode.
    hooks_dir: Path
        Directory git should run commit hooks from.
    source_dependencies: list[str]
        Packages whose requirements only ship inside their source tarball.
    test_runner: str
        Package installed last so the suite can be run straight away.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    root: Path
    metadata_files: list[str] = Field(
        default_factory=lambda: ["setup.py", "pyproject.toml"], alias="metadata-files"
    )
    dev_requirements: Path = Field(
        Path("requirements/dev-requirements.txt"), alias="dev-requirements"
    )
    extras: str = "extras"
    test_plugin: Path = Field(Path("tests/resources/mlflow-test-plugin"), alias="test-plugin")
    hooks_dir: Path = Field(Path("hooks"), alias="hooks-dir")
    source_dependencies: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SOURCE_DEPENDENCIES), alias="source-dependencies"
    )
    test_runner: str = Field("pytest", alias="test-runner")

    def resolve(self, path: Path) -> Path:
        return path if path.is_absolute() else self.root / path


class ReconcileOutcome(str, Enum):
    created = "created"
    replaced = "replaced"
    reused = "reused"


class ProvisionReport(BaseModel):
    pinned_version: str
    environment: Path
    outcome: ReconcileOutcome
    toolchain_installed: bool = False
    identity_configured: bool | None = None
    docker_available: bool = True
