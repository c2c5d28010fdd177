"""Narrow contracts for the external tools a provisioning run drives.

Each wrapper turns one CLI into a handful of intention-revealing calls on top
of :class:`~dev_bootstrap.host.HostEnvironment`, so the provisioning sequence
can be exercised against a fake host.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from dev_bootstrap.host import CommandResult


class Toolchain(Protocol):
    """Interpreter version manager (pyenv)."""

    def is_available(self) -> bool: ...

    def install_manager(self) -> None: ...

    def install(self, version: str) -> CommandResult: ...

    def set_local(self, version: str) -> CommandResult: ...

    def exec(self, *args: str | Path) -> CommandResult: ...

    def bootstrap_pip(self) -> None: ...

    def create_virtualenv(self, target: Path) -> CommandResult: ...


class Installer(Protocol):
    """Package installer (pip), running in whatever environment is active."""

    def upgrade_self(self) -> CommandResult: ...

    def install(self, *requirements: str) -> CommandResult: ...

    def install_requirements(self, path: Path) -> CommandResult: ...

    def install_editable(self, path: Path, extras: str | None = None) -> CommandResult: ...

    def download_sdist(self, name: str, dest: Path) -> CommandResult: ...


class VersionControl(Protocol):
    """Repository configuration (git config)."""

    def get_config(self, key: str) -> str | None: ...

    def set_config(self, key: str, value: str, *, global_: bool = False) -> CommandResult: ...
