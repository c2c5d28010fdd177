"""dev-bootstrap CLI: set up a development virtualenv for a Python project.

Long flags accept both single- and double-dash forms (``-directory`` and
``--directory``).
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from dev_bootstrap.core import build_provisioner
from dev_bootstrap.errors import ProvisionError
from dev_bootstrap.logging import get_logger
from dev_bootstrap.types import InstallRequest

HELP = """Development environment setup for a Python project.

\b
This will:
  - install pyenv if it is not installed
  - resolve the minimum Python version the project supports
  - create the virtual environment (or offer to replace an existing one)
  - activate it and install the development dependencies
  - configure git commit signing and the pre-commit hooks path

\b
Example, from the repository root:
  dev-bootstrap -d ~/.venvs/project-dev

Prefer virtualenv locations under a dot-directory (e.g. ".venvs").
"""

app = typer.Typer(add_completion=False, help="Bootstrap a Python development environment")
console = Console()


@app.command(help=HELP, context_settings={"help_option_names": ["-h", "-help", "--help"]})
def main(
    directory: Path = typer.Option(
        ...,
        "-d",
        "-directory",
        "--directory",
        help="The path to install the virtual environment into",
    ),
    verbose: bool = typer.Option(
        False, "-v", "-verbose", "--verbose", help="Echo every command that is run"
    ),
    quiet: bool = typer.Option(
        False, "-q", "-quiet", "--quiet", help="Run pip in quiet mode (ignored with --verbose)"
    ),
    project_root: Path = typer.Option(
        Path("."), "--project-root", help="Project to provision (default: current directory)"
    ),
) -> None:
    log = get_logger(verbose=verbose)
    request = InstallRequest(
        target_directory=directory.expanduser().resolve(), verbose=verbose, quiet=quiet
    )
    try:
        provisioner = build_provisioner(request, project_root, console=console)
        report = provisioner.run()
    except ProvisionError as exc:
        log.error("provisioning failed: %s", exc)
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=exc.exit_code) from exc
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted; the environment may be partially set up.[/yellow]")
        raise typer.Exit(code=130) from None
    log.info("provisioning finished: %s", report.model_dump_json())


if __name__ == "__main__":
    app()
