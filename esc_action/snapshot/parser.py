from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

# Read-only name -> value mapping built from one `esc env open` call.
Snapshot = Mapping[str, str]


@dataclass(frozen=True)
class SnapshotReport:
    snapshot: Snapshot
    skipped_lines: int


def _unquote(value: str) -> str:
    # One quote is removed from each end independently; a matched pair is not required.
    if value.startswith('"'):
        value = value[1:]
    if value.endswith('"'):
        value = value[:-1]
    return value.strip()


def _parse_line(line: str) -> Optional[Tuple[str, str]]:
    if "=" not in line:
        return None
    key, value = line.split("=", 1)
    key = key.strip()
    value = _unquote(value)
    if not key or not value:
        return None
    return key, value


def parse_snapshot_report(raw: str) -> SnapshotReport:
    """Parse dotenv-style text and count the non-blank lines that were skipped.

    Malformed lines never fail the parse: the upstream output format is only
    loosely specified, so anything that is not a usable KEY=VALUE pair is
    dropped. Later duplicates of a key overwrite earlier ones.
    """
    values: Dict[str, str] = {}
    skipped = 0
    for line in (raw or "").split("\n"):
        if line.endswith("\r"):
            line = line[:-1]
        pair = _parse_line(line)
        if pair is None:
            if line.strip():
                skipped += 1
            continue
        key, value = pair
        values[key] = value
    return SnapshotReport(snapshot=MappingProxyType(values), skipped_lines=skipped)


def parse_snapshot(raw: str) -> Snapshot:
    """Parse dotenv-style text into a read-only mapping."""
    return parse_snapshot_report(raw).snapshot


def render_snapshot(snapshot: Snapshot) -> str:
    """Serialize a snapshot back to KEY="VALUE" lines that parse to the same mapping."""
    return "".join(f"{k}=\"{v}\"\n" for k, v in snapshot.items())
