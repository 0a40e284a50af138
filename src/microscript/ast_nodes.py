"""AST node types for the script parser."""

from dataclasses import dataclass, field
from typing import List, Union


@dataclass
class Node:
    """Base class for all AST nodes."""

    def to_dict(self) -> dict:
        """Convert node to dictionary for testing/serialization."""
        result = {"type": self.__class__.__name__}
        for key, value in self.__dict__.items():
            if isinstance(value, Node):
                result[key] = value.to_dict()
            elif isinstance(value, list):
                result[key] = [
                    v.to_dict() if isinstance(v, Node) else v
                    for v in value
                ]
            else:
                result[key] = value
        return result


# Words
@dataclass
class Literal(Node):
    """Literal word: bare text, "string", \"\"\"block\"\"\" or {braced}"""
    value: str


@dataclass
class VariableReference(Node):
    """Variable reference: $name"""
    name: str


@dataclass
class CommandSubstitution(Node):
    """Command substitution: [cmd arg ...]"""
    script: "Script"


@dataclass
class TupleWord(Node):
    """Tuple of words: (a b c)"""
    words: List["Word"] = field(default_factory=list)


Word = Union[Literal, VariableReference, CommandSubstitution, TupleWord]


# Structure
@dataclass
class Sentence(Node):
    """One command invocation: a non-empty list of words."""
    words: List[Word]


@dataclass
class Script(Node):
    """Sequence of sentences."""
    sentences: List[Sentence] = field(default_factory=list)
