"""Tool implementations and the upstream clients they rely on."""

from .errors import ToolExecutionError
from .manager import ToolManager

__all__ = ["ToolExecutionError", "ToolManager"]
