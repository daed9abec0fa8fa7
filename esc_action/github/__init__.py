from .commands import WorkflowCommands  # noqa: F401
from .files import ActionsFileSink  # noqa: F401
