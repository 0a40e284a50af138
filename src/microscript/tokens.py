"""Token types for the script lexer."""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any


class TokenType(Enum):
    """Script token types."""

    # End of file
    EOF = auto()

    # Words
    TEXT = auto()  # bare word
    STRING = auto()  # "..."
    BLOCK_STRING = auto()  # """..."""
    BRACED = auto()  # {...}
    VARIABLE = auto()  # $name

    # Punctuation
    LBRACKET = auto()  # [
    RBRACKET = auto()  # ]
    LPAREN = auto()  # (
    RPAREN = auto()  # )

    # Sentence separator: newline or ;
    SEPARATOR = auto()


# Token types that form a complete word on their own
LITERAL_TOKENS = frozenset(
    {TokenType.TEXT, TokenType.STRING, TokenType.BLOCK_STRING, TokenType.BRACED}
)


@dataclass
class Token:
    """A token from the script source."""

    type: TokenType
    value: Any
    line: int
    column: int

    def __repr__(self) -> str:
        if self.value is not None:
            return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"
        return f"Token({self.type.name}, {self.line}:{self.column})"
