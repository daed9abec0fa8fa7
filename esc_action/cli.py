from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path
from typing import List, Optional

from .config import load_action_config
from .errors import EscActionError, ValidationError
from .exports import resolve_exports
from .github import ActionsFileSink, WorkflowCommands
from .orchestration import run_action
from .runtime import EscCli
from .snapshot import parse_snapshot


def cmd_run(args: argparse.Namespace) -> int:
    env = dict(os.environ)
    config = load_action_config(env, cli_path=args.config, overrides={"environment": args.environment})
    commands = WorkflowCommands(env=env)
    sink = ActionsFileSink.from_env(env)
    cli = EscCli(executable=config.esc_path, env=env)
    run_action(config, cli, sink, commands)
    return 0


def _read_dotenv(src: str) -> str:
    if src == "-":
        return sys.stdin.read()
    try:
        return Path(src).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ValidationError(f"cannot read dotenv file: {src}") from e


def cmd_resolve(args: argparse.Namespace) -> int:
    snapshot = parse_snapshot(_read_dotenv(args.dotenv))
    resolution = resolve_exports(
        snapshot,
        raw_keys=args.keys,
        raw_mapping=args.export_environment_variables,
        raw_export_toggle=args.export,
    )
    result = resolution.result
    # Values are never printed.
    out = {
        "export_remainder": resolution.spec.export_remainder,
        "exports": [
            {"destination": e.destination, "source": e.source, "resolved": e.is_resolved}
            for e in result.entries
        ],
        "warnings": result.warnings,
    }
    print(json.dumps(out, indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="esc-action")
    sub = p.add_subparsers(dest="cmd", required=True)

    sp = sub.add_parser("run", help="Open an environment and export its values to the job")
    sp.add_argument("--config", default=None, help="YAML defaults file (overrides ESC_ACTION_CONFIG)")
    sp.add_argument("--environment", default=None, help="Environment to open (overrides the action input)")
    sp.set_defaults(func=cmd_run)

    sp = sub.add_parser("resolve", help="Show which names a dotenv snapshot would export, without values")
    sp.add_argument("--dotenv", default="-", help="Dotenv file to read ('-' for stdin)")
    sp.add_argument("--keys", default=None)
    sp.add_argument("--export-environment-variables", default=None)
    sp.add_argument("--export", default=None, help="Strict boolean toggle: true|false")
    sp.set_defaults(func=cmd_resolve)

    return p


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return int(args.func(args) or 0)
    except EscActionError as e:
        WorkflowCommands().error(str(e))
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
