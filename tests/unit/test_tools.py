from __future__ import annotations

from pathlib import Path

from conftest import FakeHost

from dev_bootstrap.tools.git import Git
from dev_bootstrap.tools.pip import Pip
from dev_bootstrap.tools.pyenv import Pyenv


def test_pip_quiet_flag_follows_subcommand(tmp_path: Path) -> None:
    host = FakeHost(tmp_path)
    Pip(host, quiet=True).upgrade_self()
    Pip(host, quiet=False).install("pytest")
    assert host.commands == [
        ["pip", "install", "-q", "--upgrade", "pip"],
        ["pip", "install", "pytest"],
    ]


def test_pip_editable_with_and_without_extras(tmp_path: Path) -> None:
    host = FakeHost(tmp_path)
    pip = Pip(host)
    pip.install_editable(tmp_path, extras="extras")
    pip.install_editable(tmp_path / "plugin")
    assert host.commands == [
        ["pip", "install", "-e", f"{tmp_path}[extras]"],
        ["pip", "install", "-e", str(tmp_path / "plugin")],
    ]


def test_pip_download_sdist_only(tmp_path: Path) -> None:
    host = FakeHost(tmp_path)
    dest = tmp_path / "dl"
    Pip(host, quiet=True).download_sdist("prophet", dest)
    assert host.commands == [
        [
            "pip",
            "download",
            "-q",
            "--no-deps",
            "--no-binary",
            "prophet",
            "--dest",
            str(dest),
            "--no-cache-dir",
            "prophet",
        ]
    ]
    assert list(dest.glob("prophet-*.tar.gz"))


def test_pyenv_install_is_skip_if_present(tmp_path: Path) -> None:
    host = FakeHost(tmp_path)
    pyenv = Pyenv(host, quiet=True)
    pyenv.install("3.9.11")
    pyenv.set_local("3.9.11")
    pyenv.bootstrap_pip()
    assert host.commands == [
        ["pyenv", "install", "-s", "3.9.11"],
        ["pyenv", "local", "3.9.11"],
        ["pyenv", "exec", "pip", "install", "-q", "--upgrade", "pip"],
        ["pyenv", "exec", "pip", "install", "-q", "virtualenv"],
    ]


def test_pyenv_manager_install_goes_through_brew(tmp_path: Path) -> None:
    host = FakeHost(tmp_path, available=set())
    pyenv = Pyenv(host)
    assert not pyenv.is_available()
    pyenv.install_manager()
    assert host.commands == [["brew", "update"], ["brew", "install", "pyenv"]]
    assert pyenv.is_available()


def test_git_get_config_unset_is_none(tmp_path: Path) -> None:
    host = FakeHost(tmp_path)
    git = Git(host)
    assert git.get_config("user.name") is None
    git.set_config("user.name", "Ada", global_=True)
    assert git.get_config("user.name") == "Ada"
    assert ["git", "config", "--global", "user.name", "Ada"] in host.commands


def test_git_set_config_twice_is_stable(tmp_path: Path) -> None:
    host = FakeHost(tmp_path)
    git = Git(host)
    git.set_config("core.hooksPath", "/repo/hooks")
    git.set_config("core.hooksPath", "/repo/hooks")
    assert git.get_config("core.hooksPath") == "/repo/hooks"
