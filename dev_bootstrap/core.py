"""Provisioning orchestration: version → toolchain → virtualenv → deps → git.

Each step either completes or raises a :class:`~dev_bootstrap.errors.ProvisionError`
that aborts the rest of the run. Nothing is rolled back: re-running after
fixing the cause is safe because every step is idempotent or asks first.
"""

from __future__ import annotations

import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console

from dev_bootstrap.config import load_layout
from dev_bootstrap.errors import InstallFailure, ToolchainMissing
from dev_bootstrap.host import HostEnvironment
from dev_bootstrap.logging import get_logger
from dev_bootstrap.prompts import ConfirmationPort, TerminalPrompts
from dev_bootstrap.security.archive import safe_extract_tar
from dev_bootstrap.tools.base import Installer, Toolchain, VersionControl
from dev_bootstrap.tools.git import Git
from dev_bootstrap.tools.pip import Pip
from dev_bootstrap.tools.pyenv import Pyenv
from dev_bootstrap.types import (
    InstallRequest,
    ProjectLayout,
    ProvisionReport,
    ReconcileOutcome,
)
from dev_bootstrap.versions import resolve_version

log = get_logger(__name__)


@dataclass
class Provisioner:
    request: InstallRequest
    layout: ProjectLayout
    host: HostEnvironment
    prompts: ConfirmationPort
    toolchain: Toolchain
    installer: Installer
    vcs: VersionControl
    console: Console = field(default_factory=Console)

    @property
    def target(self) -> Path:
        return self.layout.resolve(self.request.target_directory)

    @property
    def activate_script(self) -> Path:
        return self.target / "bin" / "activate"

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def resolve_version(self) -> str:
        pinned = resolve_version(self.layout)
        log.info("resolved pinned interpreter %s", pinned)
        return pinned

    def ensure_toolchain(self, pinned_version: str) -> bool:
        """Make sure pyenv and *pinned_version* are installed.

        Returns True when pyenv itself had to be installed.
        """
        installed_manager = False
        if not self.toolchain.is_available():
            if not self.prompts.ask_yes_no(
                "pyenv is required to be installed to manage python versions. "
                "Would you like to install it?"
            ):
                raise ToolchainMissing(
                    "pyenv is required to manage Python versions; install it and re-run."
                )
            self.console.print("Updating brew and installing pyenv...")
            self.console.print("Note: this will probably take a considerable amount of time.")
            self.toolchain.install_manager()
            installed_manager = True

        self.toolchain.install(pinned_version)
        self.toolchain.set_local(pinned_version)
        self.toolchain.bootstrap_pip()
        return installed_manager

    def reconcile_virtualenv(self, target: Path) -> ReconcileOutcome:
        if not target.is_dir():
            self.toolchain.create_virtualenv(target)
            return ReconcileOutcome.created

        if not self.prompts.ask_yes_no(
            f"A virtual environment is already located at {target / 'bin' / 'activate'}. "
            "Do you wish to replace it?"
        ):
            log.info("reusing existing environment at %s", target)
            return ReconcileOutcome.reused

        self.host.deactivate()
        self.host.remove_tree(target)
        self.console.print(
            f"Virtual environment removed from '{target}'. Installing new instance."
        )
        self.toolchain.create_virtualenv(target)
        return ReconcileOutcome.replaced

    def activate(self, target: Path) -> None:
        self.host.activate(target)
        res = self.host.run(["python", "--version"], capture=True)
        version = (res.stdout or res.stderr).strip()
        self.console.print(f"[green]Current Python version: [bold]{version}[/bold][/green]")
        self.console.print(
            f"[yellow]Activated environment is located: [bold]{self.activate_script}[/bold][/yellow]"
        )

    def _install_source_requirements(self, name: str) -> None:
        """Install the requirements file shipped inside *name*'s source tarball."""
        with tempfile.TemporaryDirectory(prefix="dev-bootstrap-sdist-") as tmp:
            tmp_dir = Path(tmp)
            self.installer.download_sdist(name, tmp_dir)
            archives = sorted(tmp_dir.glob("*.tar.gz"))
            if not archives:
                raise InstallFailure(f"No source distribution was downloaded for {name}")
            safe_extract_tar(archives[0], tmp_dir)
            found = sorted(tmp_dir.rglob("requirements.txt"), key=lambda p: (len(p.parts), p))
            if not found:
                raise InstallFailure(f"No requirements.txt inside the {name} source distribution")
            self.installer.install_requirements(found[0])

    def install_dependencies(self) -> None:
        self.console.print("Installing pip dependencies for development environment.")
        self.installer.upgrade_self()
        for name in self.layout.source_dependencies:
            self._install_source_requirements(name)
        self.installer.install_requirements(self.layout.resolve(self.layout.dev_requirements))
        self.installer.install_editable(self.layout.root, extras=self.layout.extras or None)
        self.installer.install_editable(self.layout.resolve(self.layout.test_plugin))
        self.console.print("Finished installing pip dependencies.")

    def check_container_runtime(self) -> bool:
        if self.host.which("docker"):
            return True
        self.console.print(
            "[bold red]A docker installation cannot be found. "
            "Please install docker to run all tests.[/bold red]"
        )
        return False

    def _configure_identity(self) -> bool | None:
        """Offer to set a global git identity; None when one already exists."""
        if self.vcs.get_config("user.name") and self.vcs.get_config("user.email"):
            return None
        if not self.prompts.ask_yes_no(
            "Your git environment is not setup to automatically sign your commits. "
            "Would you like to configure it?"
        ):
            self.console.print(
                "Failing to set git 'user.name' and 'user.email' will result in unsigned "
                "commits. Ensure that you sign commits manually for CI checks to pass."
            )
            return False
        name = self.prompts.ask_text(
            "Enter the user name you would like to have associated with your commit signature"
        )
        self.vcs.set_config("user.name", name, global_=True)
        self.console.print(f"Git user name set as: {self.vcs.get_config('user.name')}")
        email = self.prompts.ask_text("Enter your email address for your commit signature")
        self.vcs.set_config("user.email", email, global_=True)
        self.console.print(f"Git user email set as: {self.vcs.get_config('user.email')}")
        return True

    def configure_hooks(self) -> None:
        self.vcs.set_config("core.hooksPath", str(self.layout.resolve(self.layout.hooks_dir)))

    def configure_auxiliary(self) -> bool | None:
        identity = self._configure_identity()
        self.configure_hooks()
        return identity

    def install_test_runner(self) -> None:
        self.installer.install(self.layout.test_runner)

    # ------------------------------------------------------------------
    # Full run
    # ------------------------------------------------------------------

    def run(self) -> ProvisionReport:
        pinned = self.resolve_version()
        toolchain_installed = self.ensure_toolchain(pinned)
        target = self.target
        outcome = self.reconcile_virtualenv(target)
        log.info("virtual environment %s at %s", outcome.value, target)
        self.activate(target)
        self.install_dependencies()
        docker = self.check_container_runtime()
        identity = self.configure_auxiliary()
        self.install_test_runner()
        self.console.print(
            "[green]Your development environment can be activated by running: "
            f"[bold]source {self.activate_script}[/bold][/green]"
        )
        return ProvisionReport(
            pinned_version=pinned,
            environment=target,
            outcome=outcome,
            toolchain_installed=toolchain_installed,
            identity_configured=identity,
            docker_available=docker,
        )


def build_provisioner(
    request: InstallRequest,
    project_root: Path,
    *,
    console: Console | None = None,
    prompts: ConfirmationPort | None = None,
    host: HostEnvironment | None = None,
) -> Provisioner:
    """Wire a provisioner against the real machine (or the given host)."""
    console = console or Console()
    layout = load_layout(project_root)
    host = host or HostEnvironment.from_process(layout.root)
    quiet = request.pip_quiet
    return Provisioner(
        request=request,
        layout=layout,
        host=host,
        prompts=prompts or TerminalPrompts(console),
        toolchain=Pyenv(host, quiet=quiet),
        installer=Pip(host, quiet=quiet),
        vcs=Git(host),
        console=console,
    )
