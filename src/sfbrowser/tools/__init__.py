"""Named operations over a browser session, grouped the way clients see them."""

from .registry import TOOLS, ToolArgs, ToolSpec, list_tools, tool
from .toolbox import Toolbox

# Importing the group modules registers their operations
from . import session, navigation, interaction, record, setup, capture  # noqa: E402,F401

__all__ = ['TOOLS', 'ToolArgs', 'ToolSpec', 'Toolbox', 'list_tools', 'tool']
