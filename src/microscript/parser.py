"""Script parser - produces an AST from tokens."""

from typing import List, Optional
from .lexer import Lexer
from .tokens import Token, TokenType, LITERAL_TOKENS
from .errors import ScriptSyntaxError
from .ast_nodes import (
    Script, Sentence, Word, Literal, VariableReference,
    CommandSubstitution, TupleWord,
)


class Parser:
    """Recursive descent parser for scripts."""

    def __init__(self, source: str):
        self.lexer = Lexer(source)
        self.current: Token = self.lexer.next_token()
        self.previous: Optional[Token] = None

    def _error(self, message: str, token: Optional[Token] = None) -> ScriptSyntaxError:
        """Create a syntax error at a token position."""
        token = token or self.current
        return ScriptSyntaxError(message, token.line, token.column)

    def _advance(self) -> Token:
        """Advance to next token and return previous."""
        self.previous = self.current
        self.current = self.lexer.next_token()
        return self.previous

    def _check(self, *types: TokenType) -> bool:
        """Check if current token is one of the given types."""
        return self.current.type in types

    def parse(self) -> Script:
        """Parse the whole source as a script."""
        script = self._parse_script()
        if not self._check(TokenType.EOF):
            # Only a stray closer can stop the top-level script early
            if self._check(TokenType.RBRACKET):
                raise self._error("unmatched right bracket")
            raise self._error("unmatched right parenthesis")
        return script

    def _parse_script(self) -> Script:
        """Parse sentences until EOF or a closing token."""
        sentences: List[Sentence] = []
        words: List[Word] = []

        while not self._check(TokenType.EOF, TokenType.RBRACKET, TokenType.RPAREN):
            if self._check(TokenType.SEPARATOR):
                self._advance()
                if words:
                    sentences.append(Sentence(words))
                    words = []
                continue
            words.append(self._parse_word())

        if words:
            sentences.append(Sentence(words))
        return Script(sentences)

    def _parse_word(self) -> Word:
        """Parse a single word."""
        token = self.current

        if token.type in LITERAL_TOKENS:
            self._advance()
            return Literal(token.value)

        if token.type == TokenType.VARIABLE:
            self._advance()
            return VariableReference(token.value)

        if token.type == TokenType.LBRACKET:
            self._advance()
            script = self._parse_script()
            if not self._check(TokenType.RBRACKET):
                if self._check(TokenType.EOF):
                    raise self._error("unmatched left bracket", token)
                raise self._error("mismatched right parenthesis")
            self._advance()
            return CommandSubstitution(script)

        if token.type == TokenType.LPAREN:
            self._advance()
            words: List[Word] = []
            while not self._check(TokenType.RPAREN):
                if self._check(TokenType.EOF):
                    raise self._error("unmatched left parenthesis", token)
                if self._check(TokenType.RBRACKET):
                    raise self._error("mismatched right bracket")
                if self._check(TokenType.SEPARATOR):
                    self._advance()
                    continue
                words.append(self._parse_word())
            self._advance()
            return TupleWord(words)

        raise self._error(f"unexpected token {token.type.name}")
