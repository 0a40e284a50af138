"""Compiled pattern values."""

import logging
from typing import Optional

from ..values import (
    CustomValue,
    CustomValueType,
    DisplayFunction,
    undisplayable_value_with_label,
)
from .engine import Pattern

logger = logging.getLogger(__name__)


# Type tag shared by all pattern handles
REGEXP_VALUE_TYPE = CustomValueType("regexp:Pattern")


class RegexpValue(CustomValue):
    """Script value owning one compiled pattern.

    Values are immutable, except that the `Longest` method switches the
    owned pattern to leftmost-longest matching in place.
    """

    custom_type = REGEXP_VALUE_TYPE

    def __init__(self, pattern: Pattern):
        self.pattern = pattern

    def display(self, fn: Optional[DisplayFunction] = None) -> str:
        if fn is not None:
            try:
                return fn(self)
            except Exception:
                logger.debug("display callback failed, using default label", exc_info=True)
        return undisplayable_value_with_label(f"Pattern {self.pattern.expr}")

    def __repr__(self) -> str:
        return f"RegexpValue({self.pattern.expr!r})"
