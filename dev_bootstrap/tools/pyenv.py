"""pyenv wrapper; pyenv itself is installed through Homebrew."""

from __future__ import annotations

from pathlib import Path

from dev_bootstrap.host import CommandResult, HostEnvironment


class Pyenv:
    def __init__(self, host: HostEnvironment, *, quiet: bool = False) -> None:
        self.host = host
        self.quiet = quiet

    def is_available(self) -> bool:
        return self.host.which("pyenv") is not None

    def install_manager(self) -> None:
        self.host.run(["brew", "update"])
        self.host.run(["brew", "install", "pyenv"])

    def install(self, version: str) -> CommandResult:
        # -s: skip when already installed
        return self.host.run(["pyenv", "install", "-s", version])

    def set_local(self, version: str) -> CommandResult:
        return self.host.run(["pyenv", "local", version])

    def exec(self, *args: str | Path) -> CommandResult:
        return self.host.run(["pyenv", "exec", *args])

    def bootstrap_pip(self) -> None:
        """Upgrade pip and add virtualenv to the pinned interpreter."""
        q = ["-q"] if self.quiet else []
        self.exec("pip", "install", *q, "--upgrade", "pip")
        self.exec("pip", "install", *q, "virtualenv")

    def create_virtualenv(self, target: Path) -> CommandResult:
        return self.exec("virtualenv", target)
