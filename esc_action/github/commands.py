"""Workflow command emitters (`::add-mask::`, `::warning::`, ...).

When not running under GitHub Actions, messages are printed as
`[ESC_ACTION][LEVEL] msg` lines instead so local runs stay readable.
"""

from __future__ import annotations

import os
import sys
from contextlib import contextmanager
from typing import Dict, Iterator, Mapping, Optional, TextIO


PREFIX = "ESC_ACTION"


def escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_property(value: str) -> str:
    return escape_data(value).replace(":", "%3A").replace(",", "%2C")


def format_command(command: str, message: str = "", properties: Optional[Dict[str, str]] = None) -> str:
    props = ""
    if properties:
        items = [f"{k}={escape_property(str(v))}" for k, v in properties.items() if v is not None]
        if items:
            props = " " + ",".join(items)
    return f"::{command}{props}::{escape_data(message)}"


class WorkflowCommands:
    def __init__(self, stream: Optional[TextIO] = None, env: Optional[Mapping[str, str]] = None) -> None:
        self._stream = stream
        env_map = env if env is not None else os.environ
        self.in_actions = str(env_map.get("GITHUB_ACTIONS", "") or "").strip().lower() == "true"
        self.debug_enabled = str(env_map.get("RUNNER_DEBUG", "") or "").strip() == "1"

    def _write(self, line: str, err: bool = False) -> None:
        stream = self._stream or (sys.stderr if err else sys.stdout)
        print(line, file=stream, flush=True)

    def _log(self, command: str, level: str, message: str, err: bool = False) -> None:
        if self.in_actions:
            self._write(format_command(command, message))
        else:
            self._write(f"[{PREFIX}][{level}] {message}", err=err)

    def add_mask(self, value: str) -> None:
        # Without a runner nothing would redact the command, so the value is not echoed.
        if not self.in_actions:
            return
        # The runner masks per line, so every non-empty line is registered.
        for line in value.splitlines() or [value]:
            if line.strip():
                self._write(format_command("add-mask", line))

    def debug(self, message: str) -> None:
        if self.in_actions:
            self._write(format_command("debug", message))
        elif self.debug_enabled:
            self._write(f"[{PREFIX}][DEBUG] {message}")

    def info(self, message: str) -> None:
        if self.in_actions:
            self._write(message)
        else:
            self._write(f"[{PREFIX}][OK] {message}")

    def notice(self, message: str) -> None:
        self._log("notice", "NOTICE", message)

    def warning(self, message: str) -> None:
        self._log("warning", "WARN", message, err=True)

    def error(self, message: str) -> None:
        self._log("error", "FAIL", message, err=True)

    @contextmanager
    def group(self, name: str) -> Iterator[None]:
        if not self.in_actions:
            yield
            return
        self._write(f"::group::{name}")
        try:
            yield
        finally:
            self._write("::endgroup::")
