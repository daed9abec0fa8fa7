"""Parsing of the dotenv text printed by `esc env open --format dotenv`."""

from .parser import Snapshot, SnapshotReport, parse_snapshot, parse_snapshot_report, render_snapshot  # noqa: F401
