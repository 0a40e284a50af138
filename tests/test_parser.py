"""Tests for the script parser."""

import pytest
from microscript.parser import Parser
from microscript.ast_nodes import (
    CommandSubstitution, Literal, Script, Sentence, TupleWord, VariableReference,
)
from microscript.errors import ScriptSyntaxError


class TestParserStructure:
    """Test sentences and words."""

    def test_empty(self):
        """Empty source parses to an empty script."""
        assert Parser("").parse() == Script([])

    def test_sentences(self):
        """Separators split sentences; blank sentences are dropped."""
        script = Parser("a b;\n\nc").parse()
        assert script == Script([
            Sentence([Literal("a"), Literal("b")]),
            Sentence([Literal("c")]),
        ])

    def test_variable(self):
        """Variable references become nodes."""
        script = Parser("get $x").parse()
        assert script.sentences[0].words[1] == VariableReference("x")

    def test_command_substitution(self):
        """Brackets hold a nested script."""
        script = Parser("set re [regexp Compile a.]").parse()
        word = script.sentences[0].words[2]
        assert isinstance(word, CommandSubstitution)
        assert word.script == Script([
            Sentence([Literal("regexp"), Literal("Compile"), Literal("a.")]),
        ])

    def test_empty_substitution(self):
        """Empty brackets hold an empty script."""
        script = Parser("[]").parse()
        assert script.sentences[0].words[0] == CommandSubstitution(Script([]))

    def test_tuple(self):
        """Parentheses group words; separators inside are ignored."""
        script = Parser("(a\n$b [c])").parse()
        word = script.sentences[0].words[0]
        assert isinstance(word, TupleWord)
        assert word.words[0] == Literal("a")
        assert word.words[1] == VariableReference("b")
        assert isinstance(word.words[2], CommandSubstitution)

    def test_to_dict(self):
        """Nodes convert to dictionaries."""
        assert Parser("set x 1").parse().to_dict() == {
            "type": "Script",
            "sentences": [{
                "type": "Sentence",
                "words": [
                    {"type": "Literal", "value": "set"},
                    {"type": "Literal", "value": "x"},
                    {"type": "Literal", "value": "1"},
                ],
            }],
        }


class TestParserErrors:
    """Test syntax errors."""

    @pytest.mark.parametrize("source,message", [
        ("]", "unmatched right bracket"),
        (")", "unmatched right parenthesis"),
        ("[a", "unmatched left bracket"),
        ("(a", "unmatched left parenthesis"),
        ("[a)", "mismatched right parenthesis"),
        ("(a]", "mismatched right bracket"),
    ])
    def test_unbalanced(self, source, message):
        """Unbalanced brackets and parentheses are reported."""
        with pytest.raises(ScriptSyntaxError) as exc_info:
            Parser(source).parse()
        assert exc_info.value.message == message

    def test_error_position(self):
        """Errors report where the opener was."""
        with pytest.raises(ScriptSyntaxError) as exc_info:
            Parser("a\n  [b").parse()
        assert exc_info.value.line == 2
        assert exc_info.value.column == 3
        assert str(exc_info.value) == "unmatched left bracket (line 2, column 3)"
