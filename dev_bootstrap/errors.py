"""Error taxonomy for provisioning runs.

Every error aborts the remaining sequence. The CLI turns them into an exit
status via ``exit_code``.
"""

from __future__ import annotations

from collections.abc import Sequence


class ProvisionError(Exception):
    exit_code: int = 1


class ToolchainMissing(ProvisionError):
    """The version manager is absent and the operator declined to install it."""


class UnsupportedVersion(ProvisionError):
    """No pinned interpreter exists for the project's minimum Python version."""


class ConfigurationError(ProvisionError):
    """The ``[tool.dev-bootstrap]`` table in pyproject.toml is invalid."""


class InstallFailure(ProvisionError):
    """An external command returned non-zero.

    The exit code of the failed command becomes the exit code of the run.
    """

    def __init__(self, message: str, command: Sequence[str] = (), returncode: int = 1) -> None:
        super().__init__(message)
        self.command = list(command)
        self.returncode = returncode
        self.exit_code = returncode if returncode > 0 else 1


class UnsafeArchive(InstallFailure):
    """A downloaded archive contains members that would escape the destination."""
