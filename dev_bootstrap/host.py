"""Host environment: the one place that touches processes and the search path.

Every external tool call goes through :class:`HostEnvironment`, so tests can
swap in a fake host and assert on the recorded commands without touching pyenv,
pip or git on the real machine.
"""

from __future__ import annotations

import os
import shlex
import shutil
import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from dev_bootstrap.errors import InstallFailure
from dev_bootstrap.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one external command."""

    command: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


@dataclass
class HostEnvironment:
    cwd: Path
    env: dict[str, str] = field(default_factory=lambda: dict(os.environ))

    # ------------------------------------------------------------------
    # Processes
    # ------------------------------------------------------------------

    def run(
        self,
        command: Sequence[str | os.PathLike[str]],
        *,
        check: bool = True,
        capture: bool = False,
        cwd: Path | None = None,
    ) -> CommandResult:
        """Run *command* to completion.

        Output streams to the terminal unless *capture* is set. With *check*,
        a non-zero exit raises :class:`InstallFailure`.
        """
        cmd = [str(part) for part in command]
        log.debug("running: %s", shlex.join(cmd), extra={"command": cmd})
        result = self._execute(cmd, cwd=cwd or self.cwd, capture=capture)
        if check and not result.ok:
            raise InstallFailure(
                f"Command failed with exit code {result.returncode}: {shlex.join(cmd)}",
                command=cmd,
                returncode=result.returncode,
            )
        return result

    def _execute(self, command: list[str], *, cwd: Path, capture: bool) -> CommandResult:
        try:
            proc = subprocess.run(
                command,
                cwd=cwd,
                env=self.env,
                capture_output=capture,
                text=True,
                check=False,
            )
        except FileNotFoundError as exc:
            # Same status a shell reports for an unknown command
            raise InstallFailure(f"Command not found: {command[0]}", command, 127) from exc
        return CommandResult(
            command=command,
            returncode=proc.returncode,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
        )

    def which(self, name: str) -> str | None:
        return shutil.which(name, path=self.env.get("PATH"))

    # ------------------------------------------------------------------
    # Virtual environments
    # ------------------------------------------------------------------

    @staticmethod
    def _bin_dir(venv_dir: Path) -> Path:
        return venv_dir / ("Scripts" if os.name == "nt" else "bin")

    @classmethod
    def _python(cls, venv_dir: Path) -> Path:
        return cls._bin_dir(venv_dir) / ("python.exe" if os.name == "nt" else "python")

    def activate(self, venv_dir: Path) -> None:
        """Put *venv_dir*'s executables first on the search path.

        Raises :class:`InstallFailure` when *venv_dir* has no interpreter, so
        later installs can never fall through to the host's own pip.
        """
        venv_dir = venv_dir.resolve()
        if not self._python(venv_dir).is_file():
            raise InstallFailure(
                f"{venv_dir} is not a virtual environment (no {self._python(venv_dir).name} "
                f"in {self._bin_dir(venv_dir)}); re-run and choose to replace it"
            )
        self.deactivate()
        path = self.env.get("PATH", "")
        bin_dir = str(self._bin_dir(venv_dir))
        self.env["PATH"] = os.pathsep.join([bin_dir, path]) if path else bin_dir
        self.env["VIRTUAL_ENV"] = str(venv_dir)
        self.env.pop("PYTHONHOME", None)
        log.debug("activated %s", venv_dir)

    def deactivate(self) -> None:
        """Undo :meth:`activate` (or an inherited activation); no-op otherwise."""
        active = self.active_env
        if active is None:
            return
        del self.env["VIRTUAL_ENV"]
        bin_dir = str(self._bin_dir(active))
        entries = self.env.get("PATH", "").split(os.pathsep)
        self.env["PATH"] = os.pathsep.join(p for p in entries if p and p != bin_dir)
        log.debug("deactivated %s", active)

    @property
    def active_env(self) -> Path | None:
        active = self.env.get("VIRTUAL_ENV")
        return Path(active) if active else None

    # ------------------------------------------------------------------
    # Filesystem
    # ------------------------------------------------------------------

    def remove_tree(self, path: Path) -> None:
        log.debug("removing %s", path)
        try:
            shutil.rmtree(path)
        except OSError as exc:
            raise InstallFailure(f"Cannot remove {path}: {exc}") from exc

    @classmethod
    def from_process(cls, cwd: Path, env: Mapping[str, str] | None = None) -> HostEnvironment:
        return cls(cwd=cwd.resolve(), env=dict(env if env is not None else os.environ))
