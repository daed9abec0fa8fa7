from __future__ import annotations

from ..config import ActionConfig
from ..exports import ExportResult, resolve_exports
from ..github import ActionsFileSink, WorkflowCommands
from ..runtime import EscCli
from ..snapshot import parse_snapshot_report


def run_action(
    config: ActionConfig,
    cli: EscCli,
    sink: ActionsFileSink,
    commands: WorkflowCommands,
) -> ExportResult:
    """Open the configured environment and publish the selected values.

    Every resolved value is masked before anything is written or logged.
    Missing sources produce warnings; any other failure propagates.
    """
    sink.require_configured()
    cli.resolve_executable()

    if config.cloud_url:
        commands.info(f"Logging in to {config.cloud_url}")
        cli.login(config.cloud_url)

    commands.info(f"Opening environment {config.environment}")
    raw = cli.open_environment(config.environment)

    report = parse_snapshot_report(raw)
    commands.debug(
        f"Parsed {len(report.snapshot)} values from environment output ({report.skipped_lines} lines skipped)"
    )

    resolution = resolve_exports(
        report.snapshot,
        raw_keys=config.keys,
        raw_mapping=config.export_mapping,
        raw_export_toggle=config.export_toggle,
    )
    result = resolution.result

    for entry in result.resolved:
        commands.add_mask(entry.value)

    for message in result.warnings:
        commands.warning(message)

    sink.publish((entry.destination, entry.value) for entry in result.resolved)

    with commands.group("Exported values"):
        for entry in result.resolved:
            if entry.destination == entry.source:
                commands.info(f"Exported {entry.destination}")
            else:
                commands.info(f"Exported {entry.destination} (from {entry.source})")

    commands.info(f"Exported {len(result.resolved)} value(s) from {config.environment}")
    return result
