"""
microscript - A small embeddable command language

Scripts are sentences of words; the first word names a command. The
regexp native module exposes RE2 regular expressions:

    import regexp
    set re [regexp Compile "a(x*)b"]
    regexp FindAllString $re -ab-axxb- -1
"""

__version__ = "0.1.0"

from .context import Context
from .errors import (
    EngineError,
    ErrorKind,
    InvalidArgumentError,
    NotImplementedMethodError,
    ResolveError,
    ScriptError,
    ScriptSyntaxError,
    UnknownMethodError,
    WrongArityError,
)
from .values import NIL, CustomValue, CustomValueType, display, to_integer, to_string

__all__ = [
    "Context",
    "CustomValue",
    "CustomValueType",
    "EngineError",
    "ErrorKind",
    "InvalidArgumentError",
    "NIL",
    "NotImplementedMethodError",
    "ResolveError",
    "ScriptError",
    "ScriptSyntaxError",
    "UnknownMethodError",
    "WrongArityError",
    "display",
    "to_integer",
    "to_string",
]
