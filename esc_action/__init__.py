"""Open a Pulumi ESC environment and export selected values to a GitHub Actions job.

The parsing and export resolution (`snapshot`, `exports`) are pure; all I/O
lives in `runtime` (the esc CLI), `github` (workflow commands and files) and
`orchestration`.
"""

__version__ = "0.1.0"
