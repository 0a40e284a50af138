"""Script value types.

Values are plain Python objects wherever a native type fits:

    Nil      NIL singleton
    Bool     bool
    Integer  int
    Real     float
    String   str
    List     list
    Tuple    tuple (multiple values)
    Dict     dict
    Custom   CustomValue subclasses, tagged with a CustomValueType
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple, Union
import math
import re

from .errors import InvalidArgumentError


class ScriptNil:
    """Script nil value (singleton)."""

    _instance: Optional["ScriptNil"] = None

    def __new__(cls) -> "ScriptNil":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "nil"

    def __str__(self) -> str:
        return "nil"

    def __bool__(self) -> bool:
        return False


# Singleton instance
NIL = ScriptNil()


@dataclass(frozen=True)
class CustomValueType:
    """Type tag for custom values, compared by name."""

    name: str


# Display callback for values that have no display of their own
DisplayFunction = Callable[[Any], str]


class CustomValue:
    """Base class for opaque values defined outside the core."""

    custom_type: CustomValueType

    def display(self, fn: Optional[DisplayFunction] = None) -> str:
        if fn is not None:
            return fn(self)
        return undisplayable_value()


# Type alias for script values
Value = Union[
    ScriptNil,
    bool,
    int,
    float,
    str,
    List[Any],
    Tuple[Any, ...],
    Dict[str, Any],
    CustomValue,
]


def is_custom_value(value: Any, custom_type: CustomValueType) -> bool:
    """Check whether value is a custom value carrying the given type tag."""
    return isinstance(value, CustomValue) and value.custom_type == custom_type


def type_name(value: Any) -> str:
    """Return the name of the variant a value belongs to."""
    if value is NIL:
        return "nil"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "real"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "list"
    if isinstance(value, tuple):
        return "tuple"
    if isinstance(value, dict):
        return "dictionary"
    if isinstance(value, CustomValue):
        return "custom"
    return "unknown"


def _real_to_string(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if value == float("inf"):
        return "+Inf"
    if value == float("-inf"):
        return "-Inf"
    s = repr(value)
    if s.endswith(".0"):
        return s[:-2]
    return s


def to_string(value: Value) -> str:
    """Convert a value to string.

    Raises:
        InvalidArgumentError: If the value has no string representation
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _real_to_string(value)
    raise InvalidArgumentError("value has no string representation")


_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1


def to_integer(value: Value) -> int:
    """Convert a value to a 64-bit integer.

    Raises:
        InvalidArgumentError: If the value has no string representation or
            does not spell a base-10 integer
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    s = to_string(value)
    if _INTEGER_RE.fullmatch(s):
        n = int(s)
        if _INT64_MIN <= n <= _INT64_MAX:
            return n
    raise InvalidArgumentError(f'invalid integer "{s}"')


def undisplayable_value() -> str:
    """Placeholder for values that have no display."""
    return "{#{undisplayable value}#}"


def undisplayable_value_with_label(label: str) -> str:
    """Placeholder carrying a label, as a block comment within a block."""
    return "{#{" + label + "}#}"


_PLAIN_WORD_RE = re.compile(r'[^\s;\[\](){}"$#\\]+')

_STRING_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "$": "\\$",
    "[": "\\[",
    "]": "\\]",
    "\n": "\\n",
    "\t": "\\t",
    "\r": "\\r",
}


def _display_string(value: str) -> str:
    if _PLAIN_WORD_RE.fullmatch(value):
        return value
    return '"' + "".join(_STRING_ESCAPES.get(ch, ch) for ch in value) + '"'


def display(value: Value, fn: Optional[DisplayFunction] = None) -> str:
    """Return a string that reads back as an equivalent value.

    Values without such a string use a placeholder, or fn when given.
    """
    if value is NIL:
        return "[]"
    if isinstance(value, str):
        return _display_string(value)
    if isinstance(value, (bool, int, float)):
        return to_string(value)
    if isinstance(value, list):
        return "[list (" + " ".join(display(v, fn) for v in value) + ")]"
    if isinstance(value, tuple):
        return "(" + " ".join(display(v, fn) for v in value) + ")"
    if isinstance(value, dict):
        items = []
        for key, v in value.items():
            items.append(_display_string(key))
            items.append(display(v, fn))
        return "[dict (" + " ".join(items) + ")]"
    if isinstance(value, CustomValue):
        return value.display(fn)
    if fn is not None:
        return fn(value)
    return undisplayable_value()
