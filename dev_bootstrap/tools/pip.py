"""pip wrapper.

Commands resolve ``pip`` through the host's search path, so once a virtual
environment is activated every call installs into it.
"""

from __future__ import annotations

from pathlib import Path

from dev_bootstrap.host import CommandResult, HostEnvironment


class Pip:
    def __init__(self, host: HostEnvironment, *, quiet: bool = False) -> None:
        self.host = host
        self.quiet = quiet

    def _pip(self, subcommand: str, *args: str | Path) -> CommandResult:
        q = ["-q"] if self.quiet else []
        return self.host.run(["pip", subcommand, *q, *args])

    def upgrade_self(self) -> CommandResult:
        return self._pip("install", "--upgrade", "pip")

    def install(self, *requirements: str) -> CommandResult:
        return self._pip("install", *requirements)

    def install_requirements(self, path: Path) -> CommandResult:
        return self._pip("install", "-r", path)

    def install_editable(self, path: Path, extras: str | None = None) -> CommandResult:
        target = f"{path}[{extras}]" if extras else str(path)
        return self._pip("install", "-e", target)

    def download_sdist(self, name: str, dest: Path) -> CommandResult:
        return self._pip(
            "download",
            "--no-deps",
            "--no-binary",
            name,
            "--dest",
            dest,
            "--no-cache-dir",
            name,
        )
