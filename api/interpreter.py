"""
TclScript Interpreter

Tree-walking evaluator. Commands are pulled from the parser one at a time
and executed before the next one is parsed, so side effects and output of
earlier statements survive a later parse or evaluation error.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional

from compiler.ast import (
    ASTVisitor, Block, BlockCommand, BinaryExpr, Command, ExprCommand,
    GroupExpr, InvokeCommand, NumberExpr, PutsCommand, Script, SetCommand,
    StringExpr, SubstitutionExpr, UnaryExpr, UnsetCommand, VariableExpr,
    WordExpr,
)
from compiler.errors import (
    EvaluationError, InterpreterStateError, TclError, UnknownCommandError,
    UnresolvedVariableError,
)
from compiler.parser import Parser

from .context import Context
from .types import TclValue, arithmetic, negate

log = logging.getLogger("tclscript.interpreter")
trace_log = logging.getLogger("tclscript.trace")

BANNER = "Tcl> "


class InterpreterState(Enum):
    """Lifecycle of an interpreter; every run is one-shot."""
    READY = auto()
    RUNNING = auto()
    DONE = auto()
    FAILED = auto()


class AbstractInterpreter(ABC):
    """
    Base class for interpreters.

    Owns the parser supplying commands, the output buffer (which starts
    with a banner), and the context variables are read from and written to.
    """

    def __init__(self,
                 parser: Optional[Parser] = None,
                 context: Optional[Context] = None,
                 new_context: bool = False,
                 banner: str = BANNER):
        """
        Create a new interpreter.

        Args:
            parser: Parser supplying the script's commands
            context: Enclosing or current context; a fresh global context
                is created when omitted
            new_context: Run in a new child of ``context`` instead of in
                ``context`` itself
            banner: Text the output starts with
        """
        self.parser = parser
        if context is None:
            context = Context()
        # Child contexts only hold a weak reference to their parent
        self._outer_context = context
        self.context = context.child_scope() if new_context else context
        self._output: List[str] = [banner]
        self.state = InterpreterState.READY
        self.result = TclValue.empty()

    @classmethod
    def from_source(cls, source: str, filename: Optional[str] = None,
                    **kwargs) -> 'AbstractInterpreter':
        """Create an interpreter for script text."""
        return cls(Parser.from_source(source, filename), **kwargs)

    @property
    def filename(self) -> Optional[str]:
        return self.parser.filename if self.parser is not None else None

    @property
    def output(self) -> str:
        """Everything written so far, banner included."""
        return ''.join(self._output)

    def write(self, text: str) -> None:
        """Append text to the output buffer."""
        self._output.append(text)

    @abstractmethod
    def run(self) -> TclValue:
        """
        Run the script.

        Returns:
            Value of the last command
        """
        pass


class TclInterpreter(AbstractInterpreter, ASTVisitor):
    """
    Strict evaluator: the first error aborts the run.

    Example:
        interp = TclInterpreter.from_source('set x 2; expr $x * 3')
        interp.run()        # TclValue(number, 6)
        interp.output       # 'Tcl> '
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._scope = self.context

    def run(self) -> TclValue:
        if self.state is not InterpreterState.READY:
            raise InterpreterStateError(
                f"interpreter is {self.state.name}; create a new one to run again")
        if self.parser is None:
            raise InterpreterStateError("no parser set")

        self.state = InterpreterState.RUNNING
        log.info("running %s", self.filename or "<script>")

        try:
            for command in self.parser:
                self.result = self.execute(command)
            self.state = InterpreterState.DONE
        except TclError as error:
            log.info("%s failed: %s", self.filename or "<script>", error)
            raise error.locate(filename=self.filename)
        finally:
            if self.state is InterpreterState.RUNNING:
                self.state = InterpreterState.FAILED

        log.info("finished %s", self.filename or "<script>")
        return self.result

    def execute(self, command: Command) -> TclValue:
        """Execute one command in the active context."""
        try:
            return command.accept(self)
        except EvaluationError as error:
            raise error.locate(command.token.line, command.token.column)

    def run_block(self, block: Block, context: Optional[Context] = None) -> TclValue:
        """
        Parse and execute a deferred block.

        Args:
            block: Block to run
            context: Context to run in; a child of the interpreter's
                context when omitted

        Returns:
            Value of the block's last command
        """
        if context is None:
            context = self.context.child_scope()

        parser = Parser.from_source(block.text, self.filename, block.line, block.column)
        saved = self._scope
        self._scope = context
        try:
            result = TclValue.empty()
            for command in parser:
                result = self.execute(command)
            return result
        finally:
            self._scope = saved

    # =========================================================================
    # Expressions
    # =========================================================================

    def visit_number(self, node: NumberExpr) -> TclValue:
        return TclValue.string(node.text)

    def visit_word(self, node: WordExpr) -> TclValue:
        return TclValue.string(node.text)

    def visit_variable(self, node: VariableExpr) -> TclValue:
        try:
            return self._scope.lookup(node.name)
        except UnresolvedVariableError as error:
            raise error.locate(node.token.line, node.token.column)

    def visit_string(self, node: StringExpr) -> TclValue:
        return TclValue.string(''.join(str(part.accept(self)) for part in node.parts))

    def visit_substitution(self, node: SubstitutionExpr) -> TclValue:
        result = TclValue.empty()
        for command in node.commands:
            result = self.execute(command)
        return result

    def visit_unary(self, node: UnaryExpr) -> TclValue:
        operand = node.operand.accept(self)
        op = node.operator
        if op.text == '-':
            return negate(operand, op.line, op.column)
        return TclValue.from_number(operand.as_number(op.line, op.column))

    def visit_binary(self, node: BinaryExpr) -> TclValue:
        left = node.left.accept(self)
        right = node.right.accept(self)
        op = node.operator
        return arithmetic(op.text, left, right, op.line, op.column)

    def visit_group(self, node: GroupExpr) -> TclValue:
        return node.expression.accept(self)

    # =========================================================================
    # Commands
    # =========================================================================

    def visit_set(self, node: SetCommand) -> TclValue:
        value = node.value.accept(self)
        return self._scope.define(node.target, value)

    def visit_unset(self, node: UnsetCommand) -> TclValue:
        self._scope.remove(node.target)
        return TclValue.empty()

    def visit_puts(self, node: PutsCommand) -> TclValue:
        value = node.value.accept(self)
        self.write(f"{value}\n")
        return TclValue.empty()

    def visit_expr(self, node: ExprCommand) -> TclValue:
        value = node.expression.accept(self)
        return TclValue.from_number(value.as_number(node.token.line, node.token.column))

    def visit_block(self, node: BlockCommand) -> TclValue:
        return self.run_block(node.block, self._scope.child_scope())

    def visit_invoke(self, node: InvokeCommand) -> TclValue:
        raise UnknownCommandError(node.name, node.token.line, node.token.column)

    def visit_script(self, node: Script) -> TclValue:
        result = TclValue.empty()
        for command in node.commands:
            result = self.execute(command)
        return result


@dataclass
class TraceEntry:
    """One executed command."""
    line: int
    command: str
    value: str
    depth: int


class TracingInterpreter(TclInterpreter):
    """Evaluator that logs and records every command it executes."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.trace: List[TraceEntry] = []

    def execute(self, command: Command) -> TclValue:
        depth = self._scope.depth
        trace_log.info("%s:%d: %s", self.filename or "<script>", command.line, command.name)
        value = super().execute(command)
        self.trace.append(TraceEntry(command.line, command.name, str(value), depth))
        return value


def run_script(source: str, filename: Optional[str] = None,
               tracing: bool = False, **kwargs) -> TclInterpreter:
    """
    Parse and run script text.

    Args:
        source: Script text
        filename: Optional filename for error messages
        tracing: Use the tracing interpreter
        **kwargs: Interpreter options

    Returns:
        The finished interpreter (see ``result`` and ``output``)
    """
    cls = TracingInterpreter if tracing else TclInterpreter
    interp = cls.from_source(source, filename, **kwargs)
    interp.run()
    return interp


def run_file(path: str, **kwargs) -> TclInterpreter:
    """Read a script file and run it."""
    with open(path, 'r', encoding='utf-8') as f:
        source = f.read()
    return run_script(source, filename=path, **kwargs)
