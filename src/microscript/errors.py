"""Script error types and exceptions."""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Closed set of failure kinds reported by native commands."""

    WRONG_ARITY = "WrongArity"
    INVALID_ARGUMENT = "InvalidArgument"
    UNKNOWN_METHOD = "UnknownMethod"
    ENGINE_ERROR = "EngineError"
    NOT_IMPLEMENTED = "NotImplemented"


class ScriptError(Exception):
    """Base class for all script errors.

    The message is the user-visible text and is kept verbatim.
    """

    kind: Optional[ErrorKind] = None

    def __init__(self, message: str = ""):
        self.message = message
        super().__init__(message)


class ScriptSyntaxError(ScriptError):
    """Syntax error while tokenizing or parsing a script."""

    def __init__(self, message: str = "", line: int = 0, column: int = 0):
        self.line = line
        self.column = column
        super().__init__(message)

    def __str__(self) -> str:
        if self.line > 0:
            return f"{self.message} (line {self.line}, column {self.column})"
        return self.message


class ResolveError(ScriptError):
    """Unknown variable, command or module."""


class WrongArityError(ScriptError):
    """Argument count does not match a command signature."""

    kind = ErrorKind.WRONG_ARITY

    def __init__(self, usage: str):
        self.usage = usage
        super().__init__(f'wrong # args: should be "{usage}"')


class InvalidArgumentError(ScriptError):
    """A value has the wrong type for its position or fails conversion."""

    kind = ErrorKind.INVALID_ARGUMENT


class UnknownMethodError(ScriptError):
    """Method name not found in a command's method table."""

    kind = ErrorKind.UNKNOWN_METHOD

    def __init__(self, method: str):
        self.method = method
        super().__init__(f'unknown method "{method}"')


class EngineError(ScriptError):
    """Failure reported by the regular expression engine."""

    kind = ErrorKind.ENGINE_ERROR


class NotImplementedMethodError(ScriptError):
    """Method accepted by a command but not supported."""

    kind = ErrorKind.NOT_IMPLEMENTED

    def __init__(self, message: str = "not implemented"):
        super().__init__(message)
