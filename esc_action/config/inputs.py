from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import jsonschema
import yaml

from ..errors import ValidationError
from ..exports.resolver import parse_strict_bool
from ..utils.yamlio import read_yaml


CONFIG_PATH_ENV = "ESC_ACTION_CONFIG"
ACCESS_TOKEN_ENV = "PULUMI_ACCESS_TOKEN"
DEFAULT_ESC_PATH = "esc"

# Action inputs read by this package, in action.yml order.
INPUT_NAMES: Tuple[str, ...] = (
    "environment",
    "keys",
    "export-environment-variables",
    "export",
    "cloud-url",
    "esc-path",
)


@dataclass(frozen=True)
class ActionConfig:
    environment: str
    keys: Optional[str] = None
    export_mapping: Optional[str] = None
    export_toggle: Optional[bool] = None
    cloud_url: Optional[str] = None
    esc_path: str = DEFAULT_ESC_PATH
    config_path: Optional[Path] = None


def _config_schema() -> Dict[str, Any]:
    string = {"type": "string"}
    return {
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "type": "object",
        "properties": {
            "environment": {"type": "string", "minLength": 1},
            "keys": {"anyOf": [string, {"type": "array", "items": string}]},
            "export-environment-variables": {"anyOf": [string, {"type": "boolean"}]},
            "export": {"type": "boolean"},
            "cloud-url": string,
            "esc-path": {"type": "string", "minLength": 1},
        },
        "additionalProperties": False,
    }


def input_env_names(name: str) -> Tuple[str, ...]:
    """Environment variable names that may carry action input `name`.

    The runner uses `INPUT_<NAME>` with spaces replaced and hyphens kept;
    the underscore form is accepted for composite steps that pass inputs
    through `env:`.
    """
    upper = name.replace(" ", "_").upper()
    names = [f"INPUT_{upper}"]
    alt = f"INPUT_{upper.replace('-', '_')}"
    if alt not in names:
        names.append(alt)
    return tuple(names)


def get_input(env: Mapping[str, str], name: str) -> Optional[str]:
    for var in input_env_names(name):
        value = str(env.get(var, "") or "").strip()
        if value:
            return value
    return None


def resolve_config_path(env: Mapping[str, str], cli_path: Optional[str] = None) -> Optional[Path]:
    """Resolve the optional YAML defaults file.

    Precedence:
      1) CLI flag --config
      2) ESC_ACTION_CONFIG
      3) none
    """
    if cli_path and str(cli_path).strip():
        return Path(str(cli_path).strip()).expanduser().resolve()
    env_path = str(env.get(CONFIG_PATH_ENV, "") or "").strip()
    if env_path:
        return Path(env_path).expanduser().resolve()
    return None


def load_config_file(path: Path) -> Dict[str, str]:
    """Load and validate the YAML defaults file, normalized to input strings."""
    if not path.exists():
        raise ValidationError(f"config file not found: {path}")
    try:
        data = read_yaml(path)
    except (ValueError, yaml.YAMLError, OSError) as e:
        raise ValidationError(f"cannot read config file {path}: {e}") from e
    try:
        jsonschema.validate(instance=data, schema=_config_schema())
    except jsonschema.ValidationError as e:
        raise ValidationError(f"config file schema validation failed ({path}): {e.message}") from e

    out: Dict[str, str] = {}
    for name, value in data.items():
        if isinstance(value, bool):
            out[name] = "true" if value else "false"
        elif isinstance(value, list):
            out[name] = ",".join(str(v) for v in value)
        else:
            out[name] = str(value)
    return out


def load_action_config(
    env: Optional[Mapping[str, str]] = None,
    cli_path: Optional[str] = None,
    overrides: Optional[Mapping[str, Optional[str]]] = None,
) -> ActionConfig:
    """Build the action configuration from flags, action inputs and the YAML file.

    Precedence per input: CLI override > action input > YAML file > default.
    Validation runs here so a bad configuration fails before any secrets CLI call.
    """
    env_map = env if env is not None else os.environ
    config_path = resolve_config_path(env_map, cli_path)
    file_values = load_config_file(config_path) if config_path else {}

    values: Dict[str, Optional[str]] = {}
    for name in INPUT_NAMES:
        value = None
        if overrides and overrides.get(name) is not None and str(overrides.get(name)).strip():
            value = str(overrides.get(name)).strip()
        if value is None:
            value = get_input(env_map, name)
        if value is None:
            value = file_values.get(name)
        values[name] = value

    environment = (values["environment"] or "").strip()
    if not environment:
        raise ValidationError("Input required and not supplied: environment")

    export_toggle = parse_strict_bool(values["export"], "export")

    cloud_url = values["cloud-url"]
    if cloud_url and not str(env_map.get(ACCESS_TOKEN_ENV, "") or "").strip():
        raise ValidationError(f"cloud-url is set but {ACCESS_TOKEN_ENV} is not available for login")

    return ActionConfig(
        environment=environment,
        keys=values["keys"],
        export_mapping=values["export-environment-variables"],
        export_toggle=export_toggle,
        cloud_url=cloud_url,
        esc_path=values["esc-path"] or DEFAULT_ESC_PATH,
        config_path=config_path,
    )
