from __future__ import annotations

import os
import uuid
from pathlib import Path
from typing import Callable, Iterable, List, Mapping, Optional, Tuple

from ..errors import NotConfiguredError, SinkError


DELIMITER_PREFIX = "ghadelimiter_"


def _new_delimiter() -> str:
    return f"{DELIMITER_PREFIX}{uuid.uuid4()}"


def format_file_entry(name: str, value: str, delimiter: str) -> str:
    """Format one `name<<DELIMITER` block for GITHUB_OUTPUT / GITHUB_ENV.

    The heredoc form keeps multi-line values and values containing `=` intact.
    """
    if not name or "\n" in name or "\r" in name:
        raise SinkError(f"Invalid name for Actions file entry: {name!r}")
    if delimiter in name:
        raise SinkError(f"Unexpected input: name should not contain the delimiter {delimiter!r}")
    if delimiter in value:
        raise SinkError(f"Unexpected input: value for {name!r} should not contain the delimiter")
    return f"{name}<<{delimiter}\n{value}\n{delimiter}\n"


class ActionsFileSink:
    """Append-only writer for the step output and environment files."""

    def __init__(
        self,
        output_path: Optional[Path] = None,
        env_path: Optional[Path] = None,
        delimiter_factory: Callable[[], str] = _new_delimiter,
    ) -> None:
        self.output_path = output_path
        self.env_path = env_path
        self._delimiter_factory = delimiter_factory

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "ActionsFileSink":
        env_map = env if env is not None else os.environ
        out = str(env_map.get("GITHUB_OUTPUT", "") or "").strip()
        gh_env = str(env_map.get("GITHUB_ENV", "") or "").strip()
        return cls(output_path=Path(out) if out else None, env_path=Path(gh_env) if gh_env else None)

    def require_configured(self) -> None:
        missing = []
        if self.output_path is None:
            missing.append("GITHUB_OUTPUT")
        if self.env_path is None:
            missing.append("GITHUB_ENV")
        if missing:
            raise NotConfiguredError(
                f"Missing {', '.join(missing)}: this command must run inside a GitHub Actions job"
            )

    def _append(self, path: Optional[Path], label: str, text: str) -> None:
        if path is None:
            raise NotConfiguredError(f"{label} is not set")
        if not text:
            return
        try:
            with path.open("a", encoding="utf-8", newline="") as f:
                f.write(text)
        except OSError as e:
            raise SinkError(f"Failed to append to {label} ({path}): {e}") from e

    def publish(self, pairs: Iterable[Tuple[str, str]]) -> None:
        """Write every (name, value) pair as a step output and an environment variable.

        All entries are formatted and checked before either file is touched, so
        a rejected value leaves both files unchanged.
        """
        outputs: List[str] = []
        exports: List[str] = []
        for name, value in pairs:
            outputs.append(format_file_entry(name, value, self._delimiter_factory()))
            exports.append(format_file_entry(name, value, self._delimiter_factory()))
        self._append(self.output_path, "GITHUB_OUTPUT", "".join(outputs))
        self._append(self.env_path, "GITHUB_ENV", "".join(exports))
