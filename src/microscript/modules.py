"""Command scopes and native modules."""

from typing import Callable, Dict, List, Optional

from .errors import ResolveError
from .values import Value


# A command receives the full argument list, element 0 being its own name
Command = Callable[[List[Value]], Value]


class Scope:
    """Named commands and variables."""

    def __init__(self):
        self._commands: Dict[str, Command] = {}
        self._variables: Dict[str, Value] = {}

    def register_named_command(self, name: str, command: Command) -> None:
        """Bind a command to a name in this scope."""
        self._commands[name] = command

    def resolve_command(self, name: str) -> Optional[Command]:
        """Find a command by name, or None."""
        return self._commands.get(name)

    def set_variable(self, name: str, value: Value) -> None:
        self._variables[name] = value

    def get_variable(self, name: str) -> Value:
        """Get a variable value.

        Raises:
            ResolveError: If the variable is not defined
        """
        if name in self._variables:
            return self._variables[name]
        raise ResolveError(f'cannot resolve variable "{name}"')


class Module:
    """A native module: an isolated scope plus its exported names."""

    def __init__(self, scope: Scope, exports: Optional[Dict[str, Value]] = None):
        self.scope = scope
        self.exports: Dict[str, Value] = exports if exports is not None else {}

    def export_command(self, name: str, command: Command) -> None:
        """Register a command in the module scope and export it under the same name."""
        self.scope.register_named_command(name, command)
        self.exports[name] = name
