"""
The regexp command.

A single command exposing the pattern engine through a fixed method table:

    regexp <Method> ?arg ...?

Each method checks its exact argument count, converts arguments to native
types, calls the engine and converts the result back to script values.
Methods that search return NIL when the engine reports no match, as
opposed to an empty list.

Commands run synchronously on the calling thread. Handles may be shared
between threads; only `Longest` mutates one, under the handle's own lock.
"""

import logging
from typing import Callable, Dict, List, Optional

from ..errors import (
    InvalidArgumentError,
    NotImplementedMethodError,
    ScriptError,
    UnknownMethodError,
    WrongArityError,
)
from ..values import NIL, Value, is_custom_value, to_integer, to_string
from . import engine
from .engine import Pattern
from .handle import REGEXP_VALUE_TYPE, RegexpValue

logger = logging.getLogger(__name__)


COMMAND_NAME = "regexp"

# Calls back into the host: (function value, matched text) -> result value
ReplaceCallback = Callable[[Value, str], Value]


def _check_arity(args: List[Value], count: int, signature: str) -> None:
    if len(args) != count:
        raise WrongArityError(f"{COMMAND_NAME} {signature}")


def _regexp_arg(value: Value) -> Pattern:
    if not is_custom_value(value, REGEXP_VALUE_TYPE):
        raise InvalidArgumentError("invalid regexp value")
    return value.pattern


def _nil_or(result: Optional[Value]) -> Value:
    return NIL if result is None else result


# -- method handlers ---------------------------------------------------------

def _quote_meta(command: "RegexpCommand", args: List[Value]) -> Value:
    _check_arity(args, 3, "QuoteMeta s")
    s = to_string(args[2])
    return engine.quote_meta(s)


def _compile(command: "RegexpCommand", args: List[Value]) -> Value:
    _check_arity(args, 3, "Compile expr")
    expr = to_string(args[2])
    return RegexpValue(engine.compile(expr, command.max_mem))


def _compile_posix(command: "RegexpCommand", args: List[Value]) -> Value:
    _check_arity(args, 3, "CompilePOSIX expr")
    expr = to_string(args[2])
    return RegexpValue(engine.compile_posix(expr, command.max_mem))


def _find_all_string(command: "RegexpCommand", args: List[Value]) -> Value:
    _check_arity(args, 5, "FindAllString re s n")
    pattern = _regexp_arg(args[2])
    s = to_string(args[3])
    n = to_integer(args[4])
    return _nil_or(pattern.find_all_string(s, n))


def _find_all_string_index(command: "RegexpCommand", args: List[Value]) -> Value:
    _check_arity(args, 5, "FindAllStringIndex re s n")
    pattern = _regexp_arg(args[2])
    s = to_string(args[3])
    n = to_integer(args[4])
    return _nil_or(pattern.find_all_string_index(s, n))


def _find_all_string_submatch(command: "RegexpCommand", args: List[Value]) -> Value:
    _check_arity(args, 5, "FindAllStringSubmatch re s n")
    pattern = _regexp_arg(args[2])
    s = to_string(args[3])
    n = to_integer(args[4])
    return _nil_or(pattern.find_all_string_submatch(s, n))


def _find_all_string_submatch_index(command: "RegexpCommand", args: List[Value]) -> Value:
    _check_arity(args, 5, "FindAllStringSubmatchIndex re s n")
    pattern = _regexp_arg(args[2])
    s = to_string(args[3])
    n = to_integer(args[4])
    return _nil_or(pattern.find_all_string_submatch_index(s, n))


def _find_string(command: "RegexpCommand", args: List[Value]) -> Value:
    _check_arity(args, 4, "FindString re s")
    pattern = _regexp_arg(args[2])
    s = to_string(args[3])
    return pattern.find_string(s)


def _find_string_index(command: "RegexpCommand", args: List[Value]) -> Value:
    _check_arity(args, 4, "FindStringIndex re s")
    pattern = _regexp_arg(args[2])
    s = to_string(args[3])
    return _nil_or(pattern.find_string_index(s))


def _find_string_submatch(command: "RegexpCommand", args: List[Value]) -> Value:
    _check_arity(args, 4, "FindStringSubmatch re s")
    pattern = _regexp_arg(args[2])
    s = to_string(args[3])
    return _nil_or(pattern.find_string_submatch(s))


def _find_string_submatch_index(command: "RegexpCommand", args: List[Value]) -> Value:
    _check_arity(args, 4, "FindStringSubmatchIndex re s")
    pattern = _regexp_arg(args[2])
    s = to_string(args[3])
    return _nil_or(pattern.find_string_submatch_index(s))


def _literal_prefix(command: "RegexpCommand", args: List[Value]) -> Value:
    _check_arity(args, 3, "LiteralPrefix re")
    pattern = _regexp_arg(args[2])
    prefix, complete = pattern.literal_prefix()
    return (prefix, complete)


def _longest(command: "RegexpCommand", args: List[Value]) -> Value:
    _check_arity(args, 3, "Longest re")
    pattern = _regexp_arg(args[2])
    pattern.longest()
    return NIL


def _match_string(command: "RegexpCommand", args: List[Value]) -> Value:
    _check_arity(args, 4, "MatchString re s")
    pattern = _regexp_arg(args[2])
    s = to_string(args[3])
    return pattern.match_string(s)


def _num_subexp(command: "RegexpCommand", args: List[Value]) -> Value:
    _check_arity(args, 3, "NumSubexp re")
    pattern = _regexp_arg(args[2])
    return pattern.num_subexp()


def _replace_all_literal_string(command: "RegexpCommand", args: List[Value]) -> Value:
    _check_arity(args, 5, "ReplaceAllLiteralString re src repl")
    pattern = _regexp_arg(args[2])
    src = to_string(args[3])
    repl = to_string(args[4])
    return pattern.replace_all_literal_string(src, repl)


def _replace_all_string(command: "RegexpCommand", args: List[Value]) -> Value:
    _check_arity(args, 5, "ReplaceAllString re src repl")
    pattern = _regexp_arg(args[2])
    src = to_string(args[3])
    repl = to_string(args[4])
    return pattern.replace_all_string(src, repl)


def _replace_all_string_func(command: "RegexpCommand", args: List[Value]) -> Value:
    callback = command.callback
    if callback is None:
        raise NotImplementedMethodError()
    _check_arity(args, 5, "ReplaceAllStringFunc re src fn")
    pattern = _regexp_arg(args[2])
    src = to_string(args[3])
    fn = args[4]
    return pattern.replace_all_string_func(src, lambda match: to_string(callback(fn, match)))


def _split(command: "RegexpCommand", args: List[Value]) -> Value:
    _check_arity(args, 5, "Split re s n")
    pattern = _regexp_arg(args[2])
    s = to_string(args[3])
    n = to_integer(args[4])
    return pattern.split(s, n)


def _string(command: "RegexpCommand", args: List[Value]) -> Value:
    _check_arity(args, 3, "String re")
    pattern = _regexp_arg(args[2])
    return str(pattern)


def _subexp_index(command: "RegexpCommand", args: List[Value]) -> Value:
    _check_arity(args, 4, "SubexpIndex re s")
    pattern = _regexp_arg(args[2])
    name = to_string(args[3])
    return pattern.subexp_index(name)


def _subexp_names(command: "RegexpCommand", args: List[Value]) -> Value:
    _check_arity(args, 3, "SubexpNames re")
    pattern = _regexp_arg(args[2])
    return pattern.subexp_names()


Handler = Callable[["RegexpCommand", List[Value]], Value]

# Method table; membership never changes at runtime
METHODS: Dict[str, Handler] = {
    "QuoteMeta": _quote_meta,
    "Compile": _compile,
    "CompilePOSIX": _compile_posix,
    "FindAllString": _find_all_string,
    "FindAllStringIndex": _find_all_string_index,
    "FindAllStringSubmatch": _find_all_string_submatch,
    "FindAllStringSubmatchIndex": _find_all_string_submatch_index,
    "FindString": _find_string,
    "FindStringIndex": _find_string_index,
    "FindStringSubmatch": _find_string_submatch,
    "FindStringSubmatchIndex": _find_string_submatch_index,
    "LiteralPrefix": _literal_prefix,
    "Longest": _longest,
    "MatchString": _match_string,
    "NumSubexp": _num_subexp,
    "ReplaceAllLiteralString": _replace_all_literal_string,
    "ReplaceAllString": _replace_all_string,
    "ReplaceAllStringFunc": _replace_all_string_func,
    "Split": _split,
    "String": _string,
    "SubexpIndex": _subexp_index,
    "SubexpNames": _subexp_names,
}


class RegexpCommand:
    """Dispatches `regexp <Method> ?arg ...?` to the method table.

    Args:
        max_mem: Engine memory budget per compiled pattern, in bytes
            (engine default when None)
        callback: Host capability used by ReplaceAllStringFunc to call a
            script function on each match; the method is not implemented
            when None
    """

    def __init__(
        self,
        max_mem: Optional[int] = None,
        callback: Optional[ReplaceCallback] = None,
    ):
        self.max_mem = max_mem
        self.callback = callback

    def execute(self, args: List[Value]) -> Value:
        """Run one method call; args[0] names the command, args[1] the method.

        Raises:
            ScriptError: The first failure met; see the errors module for kinds
        """
        if len(args) < 2:
            raise WrongArityError(f"{COMMAND_NAME} method ?arg ...?")
        try:
            method = to_string(args[1])
        except ScriptError:
            raise InvalidArgumentError("invalid method name") from None

        handler = METHODS.get(method)
        if handler is None:
            raise UnknownMethodError(method)

        logger.debug("%s %s (%d args)", COMMAND_NAME, method, len(args) - 2)
        return handler(self, args)

    def __call__(self, args: List[Value]) -> Value:
        return self.execute(args)
