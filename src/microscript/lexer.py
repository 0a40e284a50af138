"""Script lexer (tokenizer)."""

from typing import Iterator
from .tokens import Token, TokenType
from .errors import ScriptSyntaxError


# Characters that end a bare word or a variable name
WORD_DELIMITERS = " \t\r\n;[]()"

HEX_DIGITS = "0123456789abcdefABCDEF"


class Lexer:
    """Tokenizes script source code."""

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1
        self.length = len(source)
        self._sentence_start = True

    def _current(self) -> str:
        """Get current character or empty string if at end."""
        if self.pos >= self.length:
            return ""
        return self.source[self.pos]

    def _peek(self, offset: int = 1) -> str:
        """Peek ahead at character."""
        pos = self.pos + offset
        if pos >= self.length:
            return ""
        return self.source[pos]

    def _advance(self) -> str:
        """Advance and return current character."""
        if self.pos >= self.length:
            return ""
        ch = self.source[self.pos]
        self.pos += 1
        if ch == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return ch

    def _skip_blanks(self) -> None:
        """Skip blanks, line continuations and comments."""
        while self.pos < self.length:
            ch = self._current()

            if ch in " \t\r":
                self._advance()
                continue

            # Line continuation
            if ch == "\\" and self._peek() == "\n":
                self._advance()
                self._advance()
                continue

            # Comment, only where a sentence may start
            if ch == "#" and self._sentence_start:
                while self._current() and self._current() != "\n":
                    self._advance()
                continue

            break

    def _read_escape(self) -> str:
        """Read an escape sequence after the backslash."""
        line = self.line
        column = self.column
        escape = self._advance()
        if escape == "n":
            return "\n"
        if escape == "r":
            return "\r"
        if escape == "t":
            return "\t"
        if escape in ("x", "u"):
            size = 2 if escape == "x" else 4
            hex_chars = ""
            for _ in range(size):
                hex_chars += self._advance()
            if len(hex_chars) != size or any(c not in HEX_DIGITS for c in hex_chars):
                raise ScriptSyntaxError(
                    f"invalid escape sequence \\{escape}{hex_chars}", line, column
                )
            return chr(int(hex_chars, 16))
        if escape == "":
            raise ScriptSyntaxError("unmatched string delimiter", line, column)
        # Anything else stands for itself: \\ \" \$ \[ \] ...
        return escape

    def _read_string(self) -> str:
        """Read a double-quoted string."""
        line = self.line
        column = self.column
        result = []
        self._advance()  # Skip opening quote

        while self._current() and self._current() != '"':
            ch = self._advance()
            if ch == "\\":
                result.append(self._read_escape())
            else:
                result.append(ch)

        if not self._current():
            raise ScriptSyntaxError("unmatched string delimiter", line, column)

        self._advance()  # Skip closing quote
        return "".join(result)

    def _read_block_string(self) -> str:
        """Read a raw triple-quoted string."""
        line = self.line
        column = self.column
        for _ in range(3):
            self._advance()

        end = self.source.find('"""', self.pos)
        if end < 0:
            raise ScriptSyntaxError("unmatched block delimiter", line, column)

        value = self.source[self.pos:end]
        while self.pos < end + 3:
            self._advance()
        return value

    def _read_braced(self) -> str:
        """Read a raw braced string, braces nesting."""
        line = self.line
        column = self.column
        self._advance()  # {
        start = self.pos
        depth = 1

        while self._current():
            ch = self._current()
            if ch == "\\":
                self._advance()
            elif ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    value = self.source[start:self.pos]
                    self._advance()  # }
                    return value
            self._advance()

        raise ScriptSyntaxError("unmatched left brace", line, column)

    def _read_text(self) -> str:
        """Read a bare word."""
        start = self.pos
        while self._current() and self._current() not in WORD_DELIMITERS:
            self._advance()
        return self.source[start:self.pos]

    def next_token(self) -> Token:
        """Get the next token."""
        self._skip_blanks()

        line = self.line
        column = self.column

        if self.pos >= self.length:
            return Token(TokenType.EOF, None, line, column)

        ch = self._current()

        if ch in "\n;":
            self._advance()
            self._sentence_start = True
            return Token(TokenType.SEPARATOR, None, line, column)

        if ch in "[]()":
            self._advance()
            # A new sentence starts right after an opening bracket
            self._sentence_start = ch == "["
            token_type = {
                "[": TokenType.LBRACKET,
                "]": TokenType.RBRACKET,
                "(": TokenType.LPAREN,
                ")": TokenType.RPAREN,
            }[ch]
            return Token(token_type, None, line, column)

        self._sentence_start = False

        if ch == '"':
            if self._peek() == '"' and self._peek(2) == '"':
                value = self._read_block_string()
                return Token(TokenType.BLOCK_STRING, value, line, column)
            value = self._read_string()
            return Token(TokenType.STRING, value, line, column)

        if ch == "{":
            value = self._read_braced()
            return Token(TokenType.BRACED, value, line, column)

        if ch == "}":
            self._advance()
            raise ScriptSyntaxError("unmatched right brace", line, column)

        if ch == "$" and self._peek() and self._peek() not in WORD_DELIMITERS:
            self._advance()  # $
            name = self._read_text()
            return Token(TokenType.VARIABLE, name, line, column)

        value = self._read_text()
        return Token(TokenType.TEXT, value, line, column)

    def tokenize(self) -> Iterator[Token]:
        """Tokenize the entire source."""
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                break
