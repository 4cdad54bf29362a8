"""
TclScript Context

Variable scopes chained to their enclosing scope.
"""

import logging
import weakref
from typing import Any, Dict, Iterator, List, Optional

from compiler.errors import UnresolvedVariableError
from .types import TclValue

log = logging.getLogger("tclscript.context")


class Context:
    """
    A variable scope.

    Holds the local variables of one execution frame, a per-scope attribute
    dict, and a back reference to the enclosing scope. The back reference is
    weak: a child never keeps its parent alive, so the parent must outlive
    its children.

    Example:
        globals_ = Context()
        globals_.define("x", 1)
        local = globals_.child_scope()
        local.lookup("x")   # falls back to the parent
    """

    def __init__(self, parent: Optional['Context'] = None):
        """
        Create a new scope.

        Args:
            parent: Enclosing scope, or None for the global scope
        """
        self._variables: Dict[str, TclValue] = {}
        self._parent = weakref.ref(parent) if parent is not None else None
        self.attributes: Dict[str, Any] = {}

    @property
    def parent(self) -> Optional['Context']:
        """
        The enclosing scope, or None at the global scope.

        Raises:
            ReferenceError: If the parent scope no longer exists
        """
        if self._parent is None:
            return None
        parent = self._parent()
        if parent is None:
            raise ReferenceError("parent scope no longer exists")
        return parent

    @property
    def depth(self) -> int:
        """Number of enclosing scopes."""
        depth = 0
        scope = self.parent
        while scope is not None:
            depth += 1
            scope = scope.parent
        return depth

    def child_scope(self) -> 'Context':
        """Create a scope nested in this one."""
        return Context(self)

    def define(self, name: str, value: Any) -> TclValue:
        """
        Set a variable in this scope, replacing any local binding.

        Args:
            name: Variable name
            value: Value to set (will be converted to TclValue)

        Returns:
            The stored value
        """
        value = TclValue.from_python(value)
        self._variables[name] = value
        return value

    def lookup(self, name: str) -> TclValue:
        """
        Find a variable in this scope or the nearest enclosing one.

        Raises:
            UnresolvedVariableError: If no scope in the chain defines it
        """
        scope: Optional[Context] = self
        while scope is not None:
            if name in scope._variables:
                return scope._variables[name]
            scope = scope.parent
        raise UnresolvedVariableError(name)

    def remove(self, name: str) -> None:
        """
        Delete a local binding.

        Enclosing scopes are never touched, and removing a name that is not
        bound locally does nothing.
        """
        if self._variables.pop(name, None) is not None:
            log.debug("removed %r at depth %d", name, self.depth)

    def is_local(self, name: str) -> bool:
        """Check if the name is bound in this scope itself."""
        return name in self._variables

    def local_names(self) -> List[str]:
        """Names bound in this scope, in definition order."""
        return list(self._variables)

    def __contains__(self, name: str) -> bool:
        try:
            self.lookup(name)
        except UnresolvedVariableError:
            return False
        return True

    def __len__(self) -> int:
        return len(self._variables)

    def __iter__(self) -> Iterator[str]:
        return iter(self._variables)

    def __repr__(self) -> str:
        return f"Context(depth={self.depth}, variables={self.local_names()})"
