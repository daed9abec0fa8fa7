#!/usr/bin/env python3
"""CI check that action.yml and the config layer agree on the action inputs.

Checks:
- every input declared in action.yml is read by esc_action.config
- every input read by esc_action.config is declared in action.yml
- every declared input is forwarded to the run step through `env:`

Usage:
  python scripts/ci_verify_action_inputs.py
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict, List

import yaml

ROOT = Path(__file__).resolve().parents[1]
ACTION_YML = ROOT / "action.yml"


def _die(msg: str) -> None:
    print(f"[CI_VERIFY][FAIL] {msg}", file=sys.stderr)
    raise SystemExit(2)


def _ok(msg: str) -> None:
    print(f"[CI_VERIFY][OK] {msg}")


def _forwarded_env(action: Dict[str, Any]) -> List[str]:
    steps = (action.get("runs") or {}).get("steps") or []
    names: List[str] = []
    for step in steps:
        env = step.get("env") or {}
        if isinstance(env, dict):
            names.extend(str(k) for k in env.keys())
    return names


def main() -> int:
    if str(ROOT) not in sys.path:
        sys.path.insert(0, str(ROOT))
    from esc_action.config.inputs import INPUT_NAMES, input_env_names

    if not ACTION_YML.exists():
        _die(f"Missing action metadata: {ACTION_YML}")
    action = yaml.safe_load(ACTION_YML.read_text(encoding="utf-8")) or {}
    declared = list((action.get("inputs") or {}).keys())

    undeclared = [n for n in INPUT_NAMES if n not in declared]
    if undeclared:
        _die(f"Inputs read by esc_action.config but missing from action.yml: {undeclared}")
    unread = [n for n in declared if n not in INPUT_NAMES]
    if unread:
        _die(f"Inputs declared in action.yml but never read: {unread}")
    _ok("action.yml inputs match esc_action.config")

    forwarded = set(_forwarded_env(action))
    missing = [n for n in declared if not forwarded.intersection(input_env_names(n))]
    if missing:
        _die(f"Inputs not forwarded to the run step env: {missing}")
    _ok("all inputs forwarded to the run step")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
