"""Action configuration.

Inputs are read once at the process boundary (action inputs from the
environment, an optional YAML defaults file, CLI flags) and passed on as an
explicit `ActionConfig`. Nothing downstream reads os.environ for settings.
"""
from __future__ import annotations

from .inputs import ActionConfig, INPUT_NAMES, get_input, load_action_config, load_config_file  # noqa: F401
