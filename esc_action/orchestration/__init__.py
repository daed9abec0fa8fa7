from .runner import run_action  # noqa: F401
