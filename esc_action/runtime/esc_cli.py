from __future__ import annotations

import os
import shutil
import subprocess
from typing import Callable, List, Mapping, Optional

from ..errors import CommandError, NotConfiguredError


Runner = Callable[..., subprocess.CompletedProcess]


class EscCli:
    """Thin wrapper over the `esc` executable.

    stdout of `env open` holds secret values: it is returned to the caller and
    never included in errors. Only stderr is surfaced on failure.
    """

    def __init__(
        self,
        executable: str = "esc",
        env: Optional[Mapping[str, str]] = None,
        runner: Runner = subprocess.run,
    ) -> None:
        self.executable = executable
        self.env = dict(env) if env is not None else None
        self._runner = runner
        self._resolved: Optional[str] = None

    def resolve_executable(self) -> str:
        if self._resolved is None:
            path_env = (self.env or os.environ).get("PATH")
            found = shutil.which(self.executable, path=path_env)
            if not found:
                raise NotConfiguredError(
                    f"esc executable not found: {self.executable!r} (install it before running this action)"
                )
            self._resolved = found
        return self._resolved

    def _run(self, args: List[str]) -> subprocess.CompletedProcess:
        cmd = [self.resolve_executable(), *args]
        cp = self._runner(cmd, check=False, text=True, capture_output=True, env=self.env)
        if cp.returncode != 0:
            raise CommandError(" ".join(["esc", *args[:2]]), cp.returncode, cp.stderr or "")
        return cp

    def login(self, cloud_url: str) -> None:
        self._run(["login", cloud_url])

    def open_environment(self, environment: str) -> str:
        """Open `environment` and return its values as dotenv text."""
        cp = self._run(["env", "open", environment, "--format", "dotenv"])
        return cp.stdout or ""
