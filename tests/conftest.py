from __future__ import annotations

import io
import os
import tarfile
from collections.abc import Callable
from pathlib import Path

import pytest
from rich.console import Console

from dev_bootstrap.core import Provisioner, build_provisioner
from dev_bootstrap.host import CommandResult, HostEnvironment
from dev_bootstrap.types import InstallRequest


def write_sdist(dest: Path, name: str, version: str = "1.1.5") -> Path:
    """Write a tiny ``<name>-<version>.tar.gz`` carrying a requirements.txt."""
    dest.mkdir(parents=True, exist_ok=True)
    archive = dest / f"{name}-{version}.tar.gz"
    with tarfile.open(archive, "w:gz") as tar:
        for member, text in {
            f"{name}-{version}/requirements.txt": "cmdstanpy>=1.0.4\nnumpy>=1.15.4\n",
            f"{name}-{version}/setup.py": "from setuptools import setup\nsetup()\n",
        }.items():
            data = text.encode("utf-8")
            info = tarfile.TarInfo(member)
            info.size = len(data)
            info.mode = 0o644
            tar.addfile(info, io.BytesIO(data))
    return archive


def make_venv(venv: Path) -> Path:
    """Lay out the minimum a directory needs to pass as a virtualenv."""
    bin_dir = venv / ("Scripts" if os.name == "nt" else "bin")
    bin_dir.mkdir(parents=True, exist_ok=True)
    (bin_dir / ("python.exe" if os.name == "nt" else "python")).write_text("", encoding="utf-8")
    (bin_dir / "activate").write_text("# activate\n", encoding="utf-8")
    return venv


class FakeHost(HostEnvironment):
    """Records every command and simulates the side effects the provisioner relies on."""

    def __init__(self, cwd: Path, *, available: set[str] | None = None) -> None:
        super().__init__(cwd=cwd, env={"PATH": "/usr/bin"})
        self.available = {"pyenv", "docker", "git"} if available is None else set(available)
        self.commands: list[list[str]] = []
        self.git_config: dict[str, str] = {}
        self.failures: dict[tuple[str, ...], int] = {}
        self.venvs_created: list[Path] = []

    def which(self, name: str) -> str | None:
        return f"/usr/bin/{name}" if name in self.available else None

    def fail_on(self, *prefix: str, code: int = 1) -> None:
        self.failures[prefix] = code

    def _git(self, command: list[str]) -> CommandResult:
        args = [a for a in command[2:] if a != "--global"]
        if len(args) == 1:
            value = self.git_config.get(args[0])
            if value is None:
                return CommandResult(command, 1)
            return CommandResult(command, 0, value + "\n")
        self.git_config[args[0]] = args[1]
        return CommandResult(command, 0)

    def _execute(self, command: list[str], *, cwd: Path, capture: bool) -> CommandResult:
        self.commands.append(command)
        for prefix, code in self.failures.items():
            if tuple(command[: len(prefix)]) == prefix:
                return CommandResult(command, code, "", "simulated failure")

        if command[:3] == ["brew", "install", "pyenv"]:
            self.available.add("pyenv")
        elif command[:3] == ["pyenv", "exec", "virtualenv"]:
            venv = make_venv(Path(command[3]))
            self.venvs_created.append(venv)
        elif command[:2] == ["pip", "download"]:
            write_sdist(Path(command[command.index("--dest") + 1]), command[-1])
        elif command[:2] == ["git", "config"]:
            return self._git(command)
        elif command == ["python", "--version"]:
            return CommandResult(command, 0, "Python 3.9.11\n")
        return CommandResult(command, 0)

    def pip_commands(self) -> list[list[str]]:
        return [c for c in self.commands if c[0] == "pip"]


class ScriptedPrompts:
    """Pre-scripted answers; an unexpected question fails the test."""

    def __init__(self, yes_no: list[bool] | None = None, text: list[str] | None = None) -> None:
        self.yes_no = list(yes_no or [])
        self.text = list(text or [])
        self.asked: list[str] = []

    def ask_yes_no(self, prompt: str) -> bool:
        self.asked.append(prompt)
        assert self.yes_no, f"unexpected yes/no prompt: {prompt}"
        return self.yes_no.pop(0)

    def ask_text(self, prompt: str) -> str:
        self.asked.append(prompt)
        assert self.text, f"unexpected text prompt: {prompt}"
        return self.text.pop(0)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A project root declaring Python 3.9 as its minimum."""
    root = tmp_path / "project"
    root.mkdir()
    (root / "setup.py").write_text(
        "from setuptools import setup\n\n"
        "setup(\n"
        '    name="example",\n'
        '    python_requires=">=3.9",\n'
        ")\n",
        encoding="utf-8",
    )
    (root / "requirements").mkdir()
    (root / "requirements" / "dev-requirements.txt").write_text("black\n", encoding="utf-8")
    (root / "hooks").mkdir()
    return root


@pytest.fixture
def host(project: Path) -> FakeHost:
    h = FakeHost(project)
    h.git_config.update({"user.name": "Dev", "user.email": "dev@example.com"})
    return h


@pytest.fixture
def make_provisioner(project: Path) -> Callable[..., Provisioner]:
    def _make(
        host: FakeHost,
        prompts: ScriptedPrompts | None = None,
        *,
        target: Path | None = None,
        quiet: bool = False,
        verbose: bool = False,
    ) -> Provisioner:
        request = InstallRequest(
            target_directory=target or project.parent / ".venvs" / "dev",
            quiet=quiet,
            verbose=verbose,
        )
        return build_provisioner(
            request,
            project,
            console=Console(file=io.StringIO()),
            prompts=prompts or ScriptedPrompts(),
            host=host,
        )

    return _make
