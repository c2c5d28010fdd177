"""git config wrapper."""

from __future__ import annotations

from dev_bootstrap.host import CommandResult, HostEnvironment


class Git:
    def __init__(self, host: HostEnvironment) -> None:
        self.host = host

    def get_config(self, key: str) -> str | None:
        """Return the effective value of *key*, or None when unset."""
        # git exits 1 for a missing key
        res = self.host.run(["git", "config", key], check=False, capture=True)
        value = res.stdout.strip()
        return value if res.ok and value else None

    def set_config(self, key: str, value: str, *, global_: bool = False) -> CommandResult:
        scope = ["--global"] if global_ else []
        return self.host.run(["git", "config", *scope, key, value])
