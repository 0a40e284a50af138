"""
Regular expression syntax analysis.

Parses RE2 patterns into a small AST, enough to answer structural questions
that the engine bindings do not expose, such as the literal prefix.
Patterns are expected to have been accepted by the engine already, so
constructs that cannot contribute literal text parse as opaque atoms
instead of raising.

Grammar (simplified):
    Pattern     ::= Disjunction
    Disjunction ::= Alternative ('|' Alternative)*
    Alternative ::= Term*
    Term        ::= Anchor | Atom Quantifier?
    Anchor      ::= '^' | '$' | '\\A' | '\\z' | '\\b' | '\\B'
    Atom        ::= Char | '.' | CharClass | '(' Disjunction ')' | Escape
    Quantifier  ::= ('*' | '+' | '?' | '{' n (',' n?)? '}') '?'?
"""

from dataclasses import dataclass
from os.path import commonprefix
from typing import List, Optional, Tuple, Union


# AST Node Types

@dataclass
class Char:
    """Literal character."""
    char: str
    fold: bool = False  # case-insensitive


@dataclass
class Opaque:
    """Atom matching something other than one fixed character (., classes, \\d...)."""
    text: str


@dataclass
class Anchor:
    """Empty-width assertion."""
    type: str  # 'begin_text', 'end_text', 'begin_line', 'end_line', 'boundary', 'not_boundary'


@dataclass
class Group:
    """Capturing or non-capturing group."""
    body: 'Node'
    capturing: bool = True
    name: Optional[str] = None


@dataclass
class Quantifier:
    """Quantifier like *, +, ?, {n,m}."""
    body: 'Node'
    min: int
    max: int  # -1 means unlimited
    greedy: bool = True


@dataclass
class Alternative:
    """Sequence of terms (AND)."""
    terms: List['Node']


@dataclass
class Disjunction:
    """Alternation (OR)."""
    alternatives: List['Node']


Node = Union[Char, Opaque, Anchor, Group, Quantifier, Alternative, Disjunction]


HEX_DIGITS = '0123456789abcdefABCDEF'
OCTAL_DIGITS = '01234567'


class RegexParser:
    """Parser for RE2 regex patterns.

    Args:
        pattern: The pattern source, already accepted by the engine
        posix: Parse with POSIX ERE rules (^ and $ match at line boundaries)
    """

    def __init__(self, pattern: str, posix: bool = False):
        self.pattern = pattern
        self.posix = posix
        self.pos = 0
        self.flags = ''
        self._quoted: List[str] = []

    def parse(self) -> Node:
        """Parse the pattern and return its AST."""
        self.pos = 0
        self.flags = ''
        self._quoted = []
        return self._parse_disjunction()

    def _peek(self, offset: int = 0) -> Optional[str]:
        """Look at a character without consuming."""
        pos = self.pos + offset
        if pos < len(self.pattern):
            return self.pattern[pos]
        return None

    def _advance(self) -> Optional[str]:
        """Consume and return current character."""
        if self.pos < len(self.pattern):
            ch = self.pattern[self.pos]
            self.pos += 1
            return ch
        return None

    def _match(self, ch: str) -> bool:
        """Match and consume specific character."""
        if self._peek() == ch:
            self.pos += 1
            return True
        return False

    def _char(self, ch: str) -> Char:
        return Char(ch, 'i' in self.flags)

    def _parse_disjunction(self) -> Node:
        """Parse alternation (a|b|c)."""
        alternatives = [self._parse_alternative()]

        while self._match('|'):
            alternatives.append(self._parse_alternative())

        if len(alternatives) == 1:
            return alternatives[0]
        return Disjunction(alternatives)

    def _parse_alternative(self) -> Alternative:
        """Parse sequence of terms."""
        terms = []

        while self._quoted or (self._peek() is not None and self._peek() not in '|)'):
            term = self._parse_term()
            if term is not None:
                terms.append(term)

        return Alternative(terms)

    def _parse_term(self) -> Optional[Node]:
        """Parse a single term (anchor or atom with optional quantifier)."""
        if self._quoted:
            ch = self._quoted.pop(0)
            atom: Optional[Node] = self._char(ch)
            # Only the last quoted character can carry a quantifier
            if self._quoted:
                return atom
        else:
            atom = self._parse_atom()
            if atom is None or isinstance(atom, Anchor) or self._quoted:
                return atom

        quantifier = self._try_parse_quantifier(atom)
        if quantifier is not None:
            return quantifier
        return atom

    def _parse_atom(self) -> Optional[Node]:
        """Parse an atom (char, dot, class, group, escape, anchor)."""
        ch = self._peek()

        if ch == '.':
            self._advance()
            return Opaque('.')

        if ch == '^':
            self._advance()
            if self.posix or 'm' in self.flags:
                return Anchor('begin_line')
            return Anchor('begin_text')

        if ch == '$':
            self._advance()
            if self.posix or 'm' in self.flags:
                return Anchor('end_line')
            return Anchor('end_text')

        if ch == '[':
            return self._parse_char_class()

        if ch == '(':
            return self._parse_group()

        if ch == '\\':
            return self._parse_escape()

        # Anything else is literal, including { when not a repetition
        self._advance()
        return self._char(ch)

    def _parse_char_class(self) -> Node:
        """Parse character class [...].

        A class holding a single character is the same as that character.
        """
        start = self.pos
        self._advance()  # consume '['

        negated = self._match('^')
        chars: List[str] = []
        single = True

        first = True
        while self._peek() is not None and (first or self._peek() != ']'):
            first = False
            ch = self._advance()
            if ch == '[' and self._peek() == ':':
                end = self.pattern.find(':]', self.pos)
                if end >= 0:
                    self.pos = end + 2
                    single = False
                    continue
            if ch == '\\':
                escaped = self._advance()
                if escaped is None:
                    break
                if escaped in 'dDwWsSpP':
                    single = False
                    if escaped in 'pP':
                        self._skip_unicode_class_name()
                    continue
                ch = self._escape_char(escaped)
                if ch is None:
                    single = False
                    continue
            if self._peek() == '-' and self._peek(1) not in (None, ']'):
                single = False
            chars.append(ch)

        self._match(']')

        if single and not negated and len(set(chars)) == 1:
            return self._char(chars[0])
        return Opaque(self.pattern[start:self.pos])

    def _skip_unicode_class_name(self) -> None:
        """Skip the name after \\p or \\P: a single letter or {Name}."""
        if self._peek() == '{':
            end = self.pattern.find('}', self.pos)
            self.pos = len(self.pattern) if end < 0 else end + 1
        else:
            self._advance()

    def _parse_group(self) -> Optional[Node]:
        """Parse group (...), (?:...), (?P<name>...), (?flags) or (?flags:...)."""
        self._advance()  # consume '('

        capturing = True
        name = None
        saved_flags = self.flags

        if self._match('?'):
            if self._peek() == 'P' and self._peek(1) == '<':
                self.pos += 2
                name = self._read_group_name()
            elif self._peek() == '<':
                self._advance()
                name = self._read_group_name()
            else:
                capturing = False
                enabled, disabled, closing = self._read_flags()
                flags = ''.join(f for f in self.flags if f not in disabled)
                flags += ''.join(f for f in enabled if f not in flags)
                if closing == ')':
                    # Flags apply to the rest of the enclosing group
                    self.flags = flags
                    return None
                self.flags = flags

        body = self._parse_disjunction()
        self._match(')')
        self.flags = saved_flags

        return Group(body, capturing, name)

    def _read_group_name(self) -> str:
        end = self.pattern.find('>', self.pos)
        if end < 0:
            end = len(self.pattern)
        name = self.pattern[self.pos:end]
        self.pos = end + 1
        return name

    def _read_flags(self) -> Tuple[str, str, Optional[str]]:
        """Read flags up to ':' or ')'; return (enabled, disabled, terminator)."""
        enabled = ''
        disabled = ''
        negate = False
        while self._peek() is not None:
            ch = self._advance()
            if ch in ':)':
                return enabled, disabled, ch
            if ch == '-':
                negate = True
            elif negate:
                disabled += ch
            else:
                enabled += ch
        return enabled, disabled, None

    def _escape_char(self, ch: str) -> Optional[str]:
        """Decode an escape standing for one character, or None."""
        simple = {'a': '\a', 'f': '\f', 't': '\t', 'n': '\n', 'r': '\r', 'v': '\v'}
        if ch in simple:
            return simple[ch]

        if ch == 'x':
            if self._match('{'):
                end = self.pattern.find('}', self.pos)
                if end < 0:
                    return None
                digits = self.pattern[self.pos:end]
                self.pos = end + 1
            else:
                digits = ''
                while len(digits) < 2 and self._peek() is not None and self._peek() in HEX_DIGITS:
                    digits += self._advance()
            try:
                return chr(int(digits, 16))
            except ValueError:
                return None

        if ch in OCTAL_DIGITS:
            digits = ch
            while len(digits) < 3 and self._peek() is not None and self._peek() in OCTAL_DIGITS:
                digits += self._advance()
            return chr(int(digits, 8))

        if ch.isalnum():
            return None

        # Escaped punctuation stands for itself
        return ch

    def _parse_escape(self) -> Node:
        """Parse escape sequence."""
        start = self.pos
        self._advance()  # consume '\\'
        ch = self._advance()

        if ch is None:
            return Opaque('\\')

        anchors = {
            'A': 'begin_text',
            'z': 'end_text',
            'b': 'boundary',
            'B': 'not_boundary',
        }
        if ch in anchors:
            return Anchor(anchors[ch])

        if ch == 'Q':
            end = self.pattern.find('\\E', self.pos)
            if end < 0:
                end = len(self.pattern)
                text = self.pattern[self.pos:]
                self.pos = end
            else:
                text = self.pattern[self.pos:end]
                self.pos = end + 2
            self._quoted = list(text)
            if not self._quoted:
                return Alternative([])
            first = self._quoted.pop(0)
            return self._char(first)

        if ch in 'pP':
            self._skip_unicode_class_name()
            return Opaque(self.pattern[start:self.pos])

        literal = self._escape_char(ch)
        if literal is None:
            return Opaque(self.pattern[start:self.pos])
        return self._char(literal)

    def _is_repetition_start(self) -> bool:
        """Check if we're at the start of a {n}, {n,} or {n,m} repetition."""
        i = self.pos + 1
        digits = i
        while i < len(self.pattern) and self.pattern[i].isdigit():
            i += 1
        if i == digits or i >= len(self.pattern):
            return False
        if self.pattern[i] == '}':
            return True
        if self.pattern[i] != ',':
            return False
        i += 1
        while i < len(self.pattern) and self.pattern[i].isdigit():
            i += 1
        return i < len(self.pattern) and self.pattern[i] == '}'

    def _try_parse_quantifier(self, atom: Node) -> Optional[Quantifier]:
        """Try to parse a quantifier after an atom."""
        ch = self._peek()

        if ch == '*':
            self._advance()
            min_count, max_count = 0, -1
        elif ch == '+':
            self._advance()
            min_count, max_count = 1, -1
        elif ch == '?':
            self._advance()
            min_count, max_count = 0, 1
        elif ch == '{' and self._is_repetition_start():
            self._advance()  # consume '{'
            min_str = ''
            while self._peek() is not None and self._peek().isdigit():
                min_str += self._advance()
            min_count = max_count = int(min_str)
            if self._match(','):
                max_str = ''
                while self._peek() is not None and self._peek().isdigit():
                    max_str += self._advance()
                max_count = int(max_str) if max_str else -1
            self._match('}')
        else:
            return None

        # Check for lazy modifier
        greedy = not self._match('?')
        if 'U' in self.flags:
            greedy = not greedy

        return Quantifier(atom, min_count, max_count, greedy)


class _PrefixBuilder:
    """Collects the literal text every match must start with."""

    def __init__(self):
        self.chars: List[str] = []

    @property
    def text(self) -> str:
        return ''.join(self.chars)

    def walk(self, node: Node) -> bool:
        """Append the literal text of node; return True if node was entirely literal."""
        if isinstance(node, Char):
            if node.fold and node.char.lower() != node.char.upper():
                return False
            self.chars.append(node.char)
            return True

        if isinstance(node, Group):
            return self.walk(node.body)

        if isinstance(node, Alternative):
            for term in node.terms:
                if not self.walk(term):
                    return False
            return True

        if isinstance(node, Quantifier):
            if node.min == 0:
                return False
            body = _PrefixBuilder()
            if not body.walk(node.body):
                self.chars.extend(body.chars)
                return False
            self.chars.append(body.text * node.min)
            return node.min == node.max

        if isinstance(node, Disjunction):
            prefixes = []
            literal = True
            for alternative in node.alternatives:
                branch = _PrefixBuilder()
                literal = branch.walk(alternative) and literal
                prefixes.append(branch.text)
            self.chars.append(commonprefix(prefixes))
            # Identical literal branches collapse to one
            return literal and len(set(prefixes)) == 1

        return False


def _is_anchor(node: Node, anchor_type: str) -> bool:
    return isinstance(node, Anchor) and node.type == anchor_type


def literal_prefix(pattern: str, posix: bool = False) -> Tuple[str, bool]:
    """
    Compute the literal prefix of a pattern.

    Args:
        pattern: The regex pattern, already accepted by the engine
        posix: Whether the pattern uses POSIX ERE rules

    Returns:
        Tuple of (prefix every match starts with, whether the prefix
        is the entire pattern)
    """
    node = RegexParser(pattern, posix).parse()
    terms = node.terms if isinstance(node, Alternative) else [node]
    builder = _PrefixBuilder()

    if terms and _is_anchor(terms[0], 'begin_text'):
        # Only ^literal$ has a prefix once anchored at the start
        body = terms[1:-1]
        if (
            len(terms) > 2
            and _is_anchor(terms[-1], 'end_text')
            and all(isinstance(term, Char) and builder.walk(term) for term in body)
        ):
            return builder.text, True
        return '', False

    complete = all(builder.walk(term) for term in terms)
    return builder.text, complete
