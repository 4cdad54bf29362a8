"""
TclScript Abstract Syntax Tree

Defines the executable node classes produced by the parser.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Tuple
from .tokens import Token


# =============================================================================
# Base Classes
# =============================================================================

class ASTNode(ABC):
    """Base class for all AST nodes."""

    @abstractmethod
    def accept(self, visitor: 'ASTVisitor') -> Any:
        """Accept a visitor for traversal."""
        pass


class Expression(ASTNode):
    """Base class for value and arithmetic nodes."""
    pass


class Command(ASTNode):
    """Base class for statement nodes."""

    #: Name reported in traces and diagnostics
    name = ''

    @property
    def line(self) -> int:
        return self.token.line


# =============================================================================
# Expressions
# =============================================================================

@dataclass(frozen=True)
class NumberExpr(Expression):
    """Numeric literal, text kept verbatim."""
    text: str
    token: Token

    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_number(self)


@dataclass(frozen=True)
class WordExpr(Expression):
    """Bare word or brace text used as a literal value."""
    text: str
    token: Token

    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_word(self)


@dataclass(frozen=True)
class VariableExpr(Expression):
    """Variable reference ($name)."""
    name: str
    token: Token

    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_variable(self)


@dataclass(frozen=True)
class StringExpr(Expression):
    """Quoted string; parts are concatenated at execution time."""
    parts: Tuple[Expression, ...]
    token: Token

    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_string(self)


@dataclass(frozen=True)
class SubstitutionExpr(Expression):
    """Command substitution ([...]); the value of the last command."""
    commands: Tuple['Command', ...]
    token: Token

    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_substitution(self)


@dataclass(frozen=True)
class UnaryExpr(Expression):
    """Unary sign expression (-x, +x)."""
    operator: Token
    operand: Expression

    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_unary(self)


@dataclass(frozen=True)
class BinaryExpr(Expression):
    """Binary arithmetic expression."""
    left: Expression
    operator: Token
    right: Expression

    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_binary(self)


@dataclass(frozen=True)
class GroupExpr(Expression):
    """Parenthesized expression."""
    expression: Expression

    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_group(self)


@dataclass(frozen=True)
class Block:
    """
    Brace-delimited script text whose parsing is deferred.

    The position is that of the first character of the body so that errors
    raised while running the block point into the enclosing script.
    """
    text: str
    line: int
    column: int


# =============================================================================
# Commands
# =============================================================================

@dataclass(frozen=True)
class SetCommand(Command):
    """Assignment: set name value."""
    token: Token
    target: str
    value: Expression

    name = 'set'

    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_set(self)


@dataclass(frozen=True)
class UnsetCommand(Command):
    """Deletion: unset name."""
    token: Token
    target: str

    name = 'unset'

    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_unset(self)


@dataclass(frozen=True)
class PutsCommand(Command):
    """Output: puts value."""
    token: Token
    value: Expression

    name = 'puts'

    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_puts(self)


@dataclass(frozen=True)
class ExprCommand(Command):
    """Arithmetic evaluation: expr expression."""
    token: Token
    expression: Expression

    name = 'expr'

    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_expr(self)


@dataclass(frozen=True)
class BlockCommand(Command):
    """A bare brace block used as a statement."""
    token: Token
    block: Block

    name = 'block'

    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_block(self)


@dataclass(frozen=True)
class InvokeCommand(Command):
    """Call of a command that is not built in."""
    token: Token
    arguments: Tuple[Expression, ...]

    @property
    def name(self) -> str:
        return self.token.text

    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_invoke(self)


@dataclass(frozen=True)
class Script(ASTNode):
    """Root node of the AST."""
    commands: Tuple[Command, ...]

    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_script(self)


# =============================================================================
# Visitor Interface
# =============================================================================

class ASTVisitor(ABC):
    """Visitor interface for AST traversal."""

    # Expressions
    @abstractmethod
    def visit_number(self, node: NumberExpr) -> Any:
        pass

    @abstractmethod
    def visit_word(self, node: WordExpr) -> Any:
        pass

    @abstractmethod
    def visit_variable(self, node: VariableExpr) -> Any:
        pass

    @abstractmethod
    def visit_string(self, node: StringExpr) -> Any:
        pass

    @abstractmethod
    def visit_substitution(self, node: SubstitutionExpr) -> Any:
        pass

    @abstractmethod
    def visit_unary(self, node: UnaryExpr) -> Any:
        pass

    @abstractmethod
    def visit_binary(self, node: BinaryExpr) -> Any:
        pass

    @abstractmethod
    def visit_group(self, node: GroupExpr) -> Any:
        pass

    # Commands
    @abstractmethod
    def visit_set(self, node: SetCommand) -> Any:
        pass

    @abstractmethod
    def visit_unset(self, node: UnsetCommand) -> Any:
        pass

    @abstractmethod
    def visit_puts(self, node: PutsCommand) -> Any:
        pass

    @abstractmethod
    def visit_expr(self, node: ExprCommand) -> Any:
        pass

    @abstractmethod
    def visit_block(self, node: BlockCommand) -> Any:
        pass

    @abstractmethod
    def visit_invoke(self, node: InvokeCommand) -> Any:
        pass

    @abstractmethod
    def visit_script(self, node: Script) -> Any:
        pass


# =============================================================================
# AST Printer (for debugging)
# =============================================================================

class ASTPrinter(ASTVisitor):
    """Prints AST for debugging."""

    def __init__(self):
        self.indent = 0

    def print(self, node: ASTNode) -> str:
        return node.accept(self)

    def _indent(self) -> str:
        return "  " * self.indent

    def _nested(self, label: str, *children: ASTNode) -> str:
        self.indent += 1
        lines = [child.accept(self) for child in children]
        self.indent -= 1
        return "\n".join([f"{self._indent()}{label}"] + lines)

    def visit_number(self, node: NumberExpr) -> str:
        return f"{self._indent()}Number({node.text})"

    def visit_word(self, node: WordExpr) -> str:
        return f"{self._indent()}Word({node.text!r})"

    def visit_variable(self, node: VariableExpr) -> str:
        return f"{self._indent()}Variable(${node.name})"

    def visit_string(self, node: StringExpr) -> str:
        return self._nested("String", *node.parts)

    def visit_substitution(self, node: SubstitutionExpr) -> str:
        return self._nested("Substitution", *node.commands)

    def visit_unary(self, node: UnaryExpr) -> str:
        return self._nested(f"Unary({node.operator.text})", node.operand)

    def visit_binary(self, node: BinaryExpr) -> str:
        return self._nested(f"Binary({node.operator.text})", node.left, node.right)

    def visit_group(self, node: GroupExpr) -> str:
        return node.expression.accept(self)

    def visit_set(self, node: SetCommand) -> str:
        return self._nested(f"Set({node.target})", node.value)

    def visit_unset(self, node: UnsetCommand) -> str:
        return f"{self._indent()}Unset({node.target})"

    def visit_puts(self, node: PutsCommand) -> str:
        return self._nested("Puts", node.value)

    def visit_expr(self, node: ExprCommand) -> str:
        return self._nested("Expr", node.expression)

    def visit_block(self, node: BlockCommand) -> str:
        return f"{self._indent()}Block({node.block.text!r})"

    def visit_invoke(self, node: InvokeCommand) -> str:
        return self._nested(f"Invoke({node.name})", *node.arguments)

    def visit_script(self, node: Script) -> str:
        stmts = [cmd.accept(self) for cmd in node.commands]
        return "Script\n" + "\n".join(stmts)
