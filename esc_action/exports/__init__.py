"""Resolution of the export inputs into destination/source/value entries."""

from .resolver import (  # noqa: F401
    ExportEntry,
    ExportResult,
    ExportSpec,
    Resolution,
    build_export_spec,
    parse_bool_literal,
    parse_strict_bool,
    resolve_exports,
)
