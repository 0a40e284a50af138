"""
Regular expressions for scripts.

Exposes the RE2 engine as the `regexp` command:

    set re [regexp Compile "a(x*)b"]
    regexp ReplaceAllString $re -ab-axxb- {${1}W}

Compiled patterns are opaque RegexpValue handles.
"""

from .command import COMMAND_NAME, METHODS, RegexpCommand
from .engine import Pattern, compile, compile_posix, quote_meta
from .handle import REGEXP_VALUE_TYPE, RegexpValue
from .module import init_module
from .syntax import literal_prefix

__all__ = [
    "COMMAND_NAME",
    "METHODS",
    "Pattern",
    "REGEXP_VALUE_TYPE",
    "RegexpCommand",
    "RegexpValue",
    "compile",
    "compile_posix",
    "init_module",
    "literal_prefix",
    "quote_meta",
]
