"""Native module entry point for regexp."""

from typing import Optional

from ..modules import Module, Scope
from .command import COMMAND_NAME, RegexpCommand, ReplaceCallback


def init_module(
    max_mem: Optional[int] = None,
    callback: Optional[ReplaceCallback] = None,
) -> Module:
    """Create the module: an isolated scope exporting the regexp command."""
    module = Module(Scope())
    module.export_command(COMMAND_NAME, RegexpCommand(max_mem=max_mem, callback=callback))
    return module
