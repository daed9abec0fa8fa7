from .esc_cli import EscCli  # noqa: F401
