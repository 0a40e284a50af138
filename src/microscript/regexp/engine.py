"""
Regular expression engine adapter.

Wraps the RE2 engine (linear time, no backtracking) behind a Pattern object
whose methods follow the regexp command catalog:

- successive matches never overlap; after an empty match the search moves
  one character forward, and an empty match right after a previous match
  is dropped
- offsets are UTF-8 byte offsets into the subject
- non-participating groups report offsets -1 and the empty string
- a limit n < 0 means unlimited, n == 0 means no matches

Subjects are encoded to UTF-8 once per call and every search runs on the
bytes, so a call stays linear in the subject length.

Thread safety: all methods are read-only except longest(), which swaps the
compiled program under the pattern's lock. Readers take one snapshot of the
compiled program per call.
"""

import logging
import threading
from typing import Callable, Iterator, List, Optional, Tuple, Union

import re2

from ..errors import EngineError, InvalidArgumentError
from .syntax import literal_prefix

logger = logging.getLogger(__name__)


Span = Tuple[int, int]

# Characters escaped by quote_meta
SPECIAL_CHARACTERS = frozenset("\\.+*?()|[]{}^$")


def quote_meta(s: str) -> str:
    """Escape all regular expression metacharacters in s.

    The result is a pattern matching the literal text s.
    """
    return "".join("\\" + ch if ch in SPECIAL_CHARACTERS else ch for ch in s)


def _encode(s: str) -> bytes:
    try:
        return s.encode("utf-8")
    except UnicodeEncodeError:
        raise InvalidArgumentError("invalid UTF-8 string") from None


def _decode(data: bytes) -> str:
    return data.decode("utf-8")


def _rune_width(data: bytes, pos: int) -> int:
    """Byte width of the character starting at pos, 0 at the end."""
    if pos >= len(data):
        return 0
    lead = data[pos]
    if lead < 0x80:
        return 1
    if lead < 0xE0:
        return 2
    if lead < 0xF0:
        return 3
    return 4


def _make_options(posix: bool, longest: bool, max_mem: Optional[int]) -> re2.Options:
    options = re2.Options()
    options.posix_syntax = posix
    options.longest_match = longest
    # Diagnostics travel in EngineError
    options.log_errors = False
    if max_mem is not None:
        options.max_mem = max_mem
    return options


def _compile(expr: str, posix: bool, longest: bool, max_mem: Optional[int]):
    pattern = _encode(expr)
    try:
        return re2.compile(pattern, _make_options(posix, longest, max_mem))
    except re2.error as e:
        raise EngineError(str(e)) from e


def _substrings(data: bytes, spans: List[Span]) -> List[str]:
    return [_decode(data[start:end]) if start >= 0 else "" for start, end in spans]


def _flatten(spans: List[Span]) -> List[int]:
    return [offset for span in spans for offset in span]


def _extract(template: str) -> Optional[Tuple[str, int, str]]:
    """Parse a group reference after '$'.

    Returns:
        (name, number or -1, rest of template), or None if malformed
    """
    if not template:
        return None
    brace = template[0] == "{"
    if brace:
        template = template[1:]
    i = 0
    while i < len(template) and (
        template[i].isalpha() or template[i].isdigit() or template[i] == "_"
    ):
        i += 1
    if i == 0:
        return None
    name = template[:i]
    if brace:
        if i >= len(template) or template[i] != "}":
            return None
        i += 1
    num = -1
    if name.isascii() and name.isdigit() and not (name[0] == "0" and len(name) > 1):
        num = int(name)
    return name, num, template[i:]


class Pattern:
    """A compiled regular expression."""

    def __init__(self, expr: str, posix: bool = False, max_mem: Optional[int] = None):
        self.expr = expr
        self.posix = posix
        self._max_mem = max_mem
        # POSIX patterns always use leftmost-longest semantics
        self._longest = posix
        self._lock = threading.Lock()
        self._regexp = _compile(expr, posix, self._longest, max_mem)
        names = [""] * (self._regexp.groups + 1)
        for name, index in self._regexp.groupindex.items():
            if isinstance(name, bytes):
                name = _decode(name)
            names[index] = name
        self._names = names
        self._prefix: Optional[Tuple[str, bool]] = None

    def __str__(self) -> str:
        return self.expr

    def __repr__(self) -> str:
        return f"Pattern({self.expr!r})"

    @property
    def is_longest(self) -> bool:
        return self._longest

    def longest(self) -> None:
        """Switch to leftmost-longest matching, for good."""
        with self._lock:
            if self._longest:
                return
            self._regexp = _compile(self.expr, self.posix, True, self._max_mem)
            self._longest = True
        logger.debug("pattern %r switched to leftmost-longest", self.expr)

    # -- matching primitives -------------------------------------------------

    def _search(self, regexp, data: bytes, pos: int) -> Optional[List[Span]]:
        match = regexp.search(data, pos)
        if match is None:
            return None
        return [match.span(i) for i in range(regexp.groups + 1)]

    def _iter_matches(self, data: bytes, n: int) -> Iterator[List[Span]]:
        """Yield group spans of up to n successive matches."""
        regexp = self._regexp
        end = len(data)
        if n < 0:
            n = end + 1
        pos = 0
        count = 0
        prev_match_end = -1
        while count < n and pos <= end:
            spans = self._search(regexp, data, pos)
            if spans is None:
                break
            start, stop = spans[0]
            accept = True
            if stop == pos:
                # Empty match; not allowed right after a previous match
                if start == prev_match_end:
                    accept = False
                width = _rune_width(data, pos)
                pos = pos + width if width > 0 else end + 1
            else:
                pos = stop
            prev_match_end = stop
            if accept:
                yield spans
                count += 1

    def _find_all(self, data: bytes, n: int) -> Optional[List[List[Span]]]:
        matches = list(self._iter_matches(data, n))
        return matches or None

    def _find(self, data: bytes) -> Optional[List[Span]]:
        return self._search(self._regexp, data, 0)

    def _replace_all(self, src: str, repl: Callable[[bytes, List[Span]], str]) -> str:
        regexp = self._regexp
        data = _encode(src)
        end = len(data)
        parts = []
        last_match_end = 0
        search_pos = 0
        while search_pos <= end:
            spans = self._search(regexp, data, search_pos)
            if spans is None:
                break
            start, stop = spans[0]
            parts.append(_decode(data[last_match_end:start]))
            # No replacement for an empty match right after a previous match
            if stop > last_match_end or start == 0:
                parts.append(repl(data, spans))
            last_match_end = stop
            # Always advance at least one character
            width = _rune_width(data, search_pos)
            if search_pos + width > stop:
                search_pos += width
            elif search_pos + 1 > stop:
                search_pos += 1
            else:
                search_pos = stop
        parts.append(_decode(data[last_match_end:]))
        return "".join(parts)

    def expand(self, template: str, src: Union[str, bytes], spans: List[Span]) -> str:
        """Expand $name and ${name} group references in template.

        spans are byte offsets into the UTF-8 encoding of src.
        """
        data = _encode(src) if isinstance(src, str) else src
        parts = []
        while template:
            before, dollar, after = template.partition("$")
            if not dollar:
                break
            parts.append(before)
            template = after
            if template.startswith("$"):
                parts.append("$")
                template = template[1:]
                continue
            reference = _extract(template)
            if reference is None:
                # Malformed; treat $ as raw text
                parts.append("$")
                continue
            name, num, template = reference
            if num >= 0:
                if num < len(spans) and spans[num][0] >= 0:
                    parts.append(_decode(data[spans[num][0]:spans[num][1]]))
            else:
                for i, group_name in enumerate(self._names):
                    if name == group_name and spans[i][0] >= 0:
                        parts.append(_decode(data[spans[i][0]:spans[i][1]]))
                        break
        parts.append(template)
        return "".join(parts)

    # -- catalog -------------------------------------------------------------

    def find_all_string(self, s: str, n: int) -> Optional[List[str]]:
        data = _encode(s)
        matches = self._find_all(data, n)
        if matches is None:
            return None
        return [_decode(data[spans[0][0]:spans[0][1]]) for spans in matches]

    def find_all_string_index(self, s: str, n: int) -> Optional[List[List[int]]]:
        matches = self._find_all(_encode(s), n)
        if matches is None:
            return None
        return [list(spans[0]) for spans in matches]

    def find_all_string_submatch(self, s: str, n: int) -> Optional[List[List[str]]]:
        data = _encode(s)
        matches = self._find_all(data, n)
        if matches is None:
            return None
        return [_substrings(data, spans) for spans in matches]

    def find_all_string_submatch_index(self, s: str, n: int) -> Optional[List[List[int]]]:
        matches = self._find_all(_encode(s), n)
        if matches is None:
            return None
        return [_flatten(spans) for spans in matches]

    def find_string(self, s: str) -> str:
        """Return the leftmost match, or the empty string if none."""
        data = _encode(s)
        spans = self._find(data)
        if spans is None:
            return ""
        return _decode(data[spans[0][0]:spans[0][1]])

    def find_string_index(self, s: str) -> Optional[List[int]]:
        spans = self._find(_encode(s))
        if spans is None:
            return None
        return list(spans[0])

    def find_string_submatch(self, s: str) -> Optional[List[str]]:
        data = _encode(s)
        spans = self._find(data)
        if spans is None:
            return None
        return _substrings(data, spans)

    def find_string_submatch_index(self, s: str) -> Optional[List[int]]:
        spans = self._find(_encode(s))
        if spans is None:
            return None
        return _flatten(spans)

    def literal_prefix(self) -> Tuple[str, bool]:
        """Return the literal text every match starts with, and whether
        it makes up the whole pattern."""
        if self._prefix is None:
            self._prefix = literal_prefix(self.expr, self.posix)
        return self._prefix

    def match_string(self, s: str) -> bool:
        return self._regexp.search(_encode(s)) is not None

    def num_subexp(self) -> int:
        return self._regexp.groups

    def replace_all_literal_string(self, src: str, repl: str) -> str:
        return self._replace_all(src, lambda data, spans: repl)

    def replace_all_string(self, src: str, repl: str) -> str:
        return self._replace_all(src, lambda data, spans: self.expand(repl, data, spans))

    def replace_all_string_func(self, src: str, repl: Callable[[str], str]) -> str:
        return self._replace_all(
            src, lambda data, spans: repl(_decode(data[spans[0][0]:spans[0][1]]))
        )

    def split(self, s: str, n: int) -> List[str]:
        """Slice s into substrings separated by matches.

        n > 0 returns at most n pieces, the last one being the unsplit
        remainder; n == 0 returns no pieces; n < 0 returns all pieces.
        """
        if n == 0:
            return []
        if self.expr and not s:
            return [""]
        data = _encode(s)
        strings: List[str] = []
        begin = 0
        end = 0
        for spans in self._iter_matches(data, n):
            if n > 0 and len(strings) == n - 1:
                break
            start, stop = spans[0]
            end = start
            if stop != 0:
                strings.append(_decode(data[begin:end]))
            begin = stop
        if end != len(data):
            strings.append(_decode(data[begin:]))
        return strings

    def subexp_index(self, name: str) -> int:
        """Return the index of the group with the given name, or -1."""
        if name:
            for i, group_name in enumerate(self._names):
                if name == group_name:
                    return i
        return -1

    def subexp_names(self) -> List[str]:
        return list(self._names)


def compile(expr: str, max_mem: Optional[int] = None) -> Pattern:
    """Compile a pattern with leftmost-first semantics.

    Raises:
        EngineError: If the engine rejects the pattern
        InvalidArgumentError: If the pattern is not valid Unicode text
    """
    logger.debug("compiling %r", expr)
    return Pattern(expr, posix=False, max_mem=max_mem)


def compile_posix(expr: str, max_mem: Optional[int] = None) -> Pattern:
    """Compile a POSIX ERE pattern with leftmost-longest semantics.

    Raises:
        EngineError: If the engine rejects the pattern
        InvalidArgumentError: If the pattern is not valid Unicode text
    """
    logger.debug("compiling POSIX %r", expr)
    return Pattern(expr, posix=True, max_mem=max_mem)
