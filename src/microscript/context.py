"""Script execution context."""

import logging
from typing import Callable, Dict, List, Optional

from .ast_nodes import (
    CommandSubstitution,
    Literal,
    Script,
    Sentence,
    TupleWord,
    VariableReference,
    Word,
)
from .errors import ResolveError, WrongArityError
from .modules import Module, Scope
from .parser import Parser
from .regexp.module import init_module as init_regexp_module
from .values import NIL, Value, display, to_string

logger = logging.getLogger(__name__)


class Context:
    """Script execution context with the native module registry."""

    def __init__(
        self,
        allow_callbacks: bool = False,
        max_mem: Optional[int] = None,
    ):
        """Create a new context.

        Args:
            allow_callbacks: Let native commands call back into scripts
                (enables regexp ReplaceAllStringFunc)
            max_mem: Engine memory budget per compiled pattern, in bytes
        """
        self.allow_callbacks = allow_callbacks
        self.max_mem = max_mem
        self.root = Scope()
        self._modules: Dict[str, Module] = {}
        self._registry: Dict[str, Callable[[], Module]] = {
            "regexp": self._create_regexp_module,
        }
        self._setup_builtins()

    def _setup_builtins(self) -> None:
        """Register the built-in commands."""
        self.root.register_named_command("set", self._set_command)
        self.root.register_named_command("get", self._get_command)
        self.root.register_named_command("import", self._import_command)
        self.root.register_named_command("list", self._list_command)

    def _create_regexp_module(self) -> Module:
        callback = self._invoke_callback if self.allow_callbacks else None
        return init_regexp_module(max_mem=self.max_mem, callback=callback)

    # Built-in commands

    def _set_command(self, args: List[Value]) -> Value:
        if len(args) != 3:
            raise WrongArityError("set name value")
        self.root.set_variable(to_string(args[1]), args[2])
        return args[2]

    def _get_command(self, args: List[Value]) -> Value:
        if len(args) != 2:
            raise WrongArityError("get name")
        return self.root.get_variable(to_string(args[1]))

    def _import_command(self, args: List[Value]) -> Value:
        if len(args) != 2:
            raise WrongArityError("import name")
        self.import_module(to_string(args[1]))
        return NIL

    def _list_command(self, args: List[Value]) -> Value:
        if len(args) > 2:
            raise WrongArityError("list ?value?")
        if len(args) == 1:
            return []
        value = args[1]
        if isinstance(value, (list, tuple)):
            return list(value)
        return [value]

    def _invoke_callback(self, fn: Value, match: str) -> Value:
        """Run a command prefix with the matched text appended."""
        if isinstance(fn, (list, tuple)):
            prefix = list(fn)
        else:
            prefix = [fn]
        return self.call(*prefix, match)

    # Evaluation

    def _eval_word(self, word: Word) -> Value:
        if isinstance(word, Literal):
            return word.value
        if isinstance(word, VariableReference):
            return self.root.get_variable(word.name)
        if isinstance(word, CommandSubstitution):
            return self._eval_script(word.script)
        if isinstance(word, TupleWord):
            return tuple(self._eval_word(w) for w in word.words)
        raise TypeError(f"Unknown word type: {type(word).__name__}")

    def _eval_sentence(self, sentence: Sentence) -> Value:
        args = [self._eval_word(word) for word in sentence.words]
        return self.call(*args)

    def _eval_script(self, script: Script) -> Value:
        result: Value = NIL
        for sentence in script.sentences:
            result = self._eval_sentence(sentence)
        return result

    def eval(self, source: str) -> Value:
        """Evaluate a script and return the value of its last sentence.

        Args:
            source: Script source code

        Returns:
            The last sentence value, or NIL for an empty script

        Raises:
            ScriptSyntaxError: If the source does not parse
            ScriptError: If a command fails
        """
        script = Parser(source).parse()
        return self._eval_script(script)

    def call(self, *args: Value) -> Value:
        """Execute one command from already evaluated words.

        Raises:
            ResolveError: If the first word names no command
            ScriptError: If the command fails
        """
        if not args:
            return NIL
        head = args[0]
        command = None
        if isinstance(head, str):
            command = self.root.resolve_command(head)
        if command is None:
            name = head if isinstance(head, str) else display(head)
            raise ResolveError(f'cannot resolve command "{name}"')
        return command(list(args))

    def get(self, name: str) -> Value:
        """Get a root variable.

        Raises:
            ResolveError: If the variable is not defined
        """
        return self.root.get_variable(name)

    def set(self, name: str, value: Value) -> None:
        """Set a root variable."""
        self.root.set_variable(name, value)

    def import_module(self, name: str) -> Module:
        """Load a native module and copy its exported commands into the root scope.

        Modules are created once per context.

        Raises:
            ResolveError: If no native module has that name
        """
        module = self._modules.get(name)
        if module is None:
            factory = self._registry.get(name)
            if factory is None:
                raise ResolveError(f'unknown module "{name}"')
            module = factory()
            self._modules[name] = module
            logger.debug("loaded module %s", name)

        for export in module.exports:
            command = module.scope.resolve_command(export)
            if command is not None:
                self.root.register_named_command(export, command)
        return module
