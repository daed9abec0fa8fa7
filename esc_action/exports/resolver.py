from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple, Union

from ..errors import ValidationError


TRUE_LITERALS = ("true", "True", "TRUE")
FALSE_LITERALS = ("false", "False", "FALSE")

WILDCARD = "*"


@dataclass(frozen=True)
class ExportSpec:
    """Resolved export policy: destination -> source, plus the remainder flag."""

    mapping: Dict[str, str] = field(default_factory=dict)
    export_remainder: bool = False


@dataclass(frozen=True)
class ExportEntry:
    destination: str
    source: str
    value: Optional[str]

    @property
    def is_resolved(self) -> bool:
        return self.value is not None


@dataclass(frozen=True)
class ExportResult:
    entries: Tuple[ExportEntry, ...] = ()

    @property
    def resolved(self) -> List[ExportEntry]:
        return [e for e in self.entries if e.is_resolved]

    @property
    def unresolved(self) -> List[ExportEntry]:
        return [e for e in self.entries if not e.is_resolved]

    @property
    def warnings(self) -> List[str]:
        out: List[str] = []
        for e in self.unresolved:
            if e.destination == e.source:
                out.append(f"Key {e.source!r} was requested but is not defined in the environment")
            else:
                out.append(
                    f"Key {e.source!r} (exported as {e.destination!r}) was requested but is not defined in the environment"
                )
        return out

    def as_dict(self) -> Dict[str, str]:
        return {e.destination: e.value for e in self.entries if e.value is not None}


@dataclass(frozen=True)
class Resolution:
    spec: ExportSpec
    result: ExportResult


def parse_bool_literal(raw: Optional[str]) -> Optional[bool]:
    """Return True/False for an exact boolean literal, None for anything else."""
    if raw is None:
        return None
    text = raw.strip()
    if text in TRUE_LITERALS:
        return True
    if text in FALSE_LITERALS:
        return False
    return None


def parse_strict_bool(raw: Union[bool, str, None], name: str) -> Optional[bool]:
    """Parse a field that must be a boolean when it is set.

    Empty or missing values return None. Any other non-literal fails, since a
    boolean input is a hard contract unlike the lenient mapping string.
    """
    if raw is None or isinstance(raw, bool):
        return raw
    if not str(raw).strip():
        return None
    value = parse_bool_literal(str(raw))
    if value is None:
        raise ValidationError(
            f"Input {name!r} does not meet YAML 1.2 \"Core Schema\" specification: {raw!r}. "
            f"Support boolean input list: `{' | '.join(TRUE_LITERALS + FALSE_LITERALS)}`"
        )
    return value


def parse_key_list(raw_keys: Optional[str]) -> List[str]:
    if not raw_keys:
        return []
    return [k.strip() for k in raw_keys.split(",") if k.strip()]


def parse_mapping_spec(raw_mapping: str) -> ExportSpec:
    """Parse a comma separated list of `*`, `KEY` and `TO=FROM` tokens.

    Tokens are applied left to right, so a later token replaces an earlier
    one with the same destination.
    """
    mapping: Dict[str, str] = {}
    remainder = False
    for token in raw_mapping.split(","):
        token = token.strip()
        if not token:
            continue
        if token == WILDCARD:
            remainder = True
            continue
        if "=" in token:
            dest, source = token.split("=", 1)
            dest, source = dest.strip(), source.strip()
            if not dest or not source:
                raise ValidationError(f"Invalid export mapping {token!r}: expected TO=FROM with both names set")
        else:
            dest = source = token
        mapping[dest] = source
    return ExportSpec(mapping=mapping, export_remainder=remainder)


def _identity_spec(keys: List[str]) -> ExportSpec:
    return ExportSpec(mapping={k: k for k in keys}, export_remainder=False)


def _spec_for_toggle(enabled: bool, keys: List[str]) -> ExportSpec:
    if not enabled:
        return ExportSpec()
    if keys:
        return _identity_spec(keys)
    return ExportSpec(export_remainder=True)


def build_export_spec(
    raw_keys: Optional[str] = None,
    raw_mapping: Optional[str] = None,
    raw_export_toggle: Union[bool, str, None] = None,
) -> ExportSpec:
    """Apply the input precedence rules and return the export policy.

    Precedence (first match wins):
      1) a mapping string that is not a boolean literal; `raw_keys` is ignored
      2) a mapping string that is a boolean literal
      3) the strict boolean toggle
      4) a key list, exported under the same names
      5) nothing configured: export every key
    """
    keys = parse_key_list(raw_keys)
    mapping_text = (raw_mapping or "").strip()

    if mapping_text:
        as_bool = parse_bool_literal(mapping_text)
        if as_bool is None:
            return parse_mapping_spec(mapping_text)
        return _spec_for_toggle(as_bool, keys)

    toggle = parse_strict_bool(raw_export_toggle, "export")
    if toggle is not None:
        return _spec_for_toggle(toggle, keys)

    if keys:
        return _identity_spec(keys)

    return ExportSpec(export_remainder=True)


def expand_export_spec(spec: ExportSpec, snapshot: Mapping[str, str]) -> Dict[str, str]:
    """Return the final destination -> source mapping, remainder included.

    Remainder keys follow the explicit entries in snapshot order and skip any
    key already used as a source or as a destination.
    """
    final: Dict[str, str] = dict(spec.mapping)
    if spec.export_remainder:
        sources = set(spec.mapping.values())
        for key in snapshot:
            if key in sources or key in final:
                continue
            final[key] = key
    return final


def resolve_exports(
    snapshot: Mapping[str, str],
    raw_keys: Optional[str] = None,
    raw_mapping: Optional[str] = None,
    raw_export_toggle: Union[bool, str, None] = None,
) -> Resolution:
    """Resolve the export inputs against a parsed snapshot.

    Sources missing from the snapshot produce entries with value None. They
    are reported through `ExportResult.warnings` and never fail resolution.
    """
    spec = build_export_spec(raw_keys=raw_keys, raw_mapping=raw_mapping, raw_export_toggle=raw_export_toggle)
    entries = tuple(
        ExportEntry(destination=dest, source=source, value=snapshot.get(source))
        for dest, source in expand_export_spec(spec, snapshot).items()
    )
    return Resolution(spec=spec, result=ExportResult(entries=entries))
