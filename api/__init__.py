"""
TclScript Python API

Provides the Python interface for running TclScript code.
"""

from .context import Context
from .types import TclValue
from .interpreter import (
    AbstractInterpreter, TclInterpreter, TracingInterpreter, InterpreterState,
    BANNER, run_script, run_file,
)

__all__ = [
    'Context',
    'TclValue',
    'AbstractInterpreter',
    'TclInterpreter',
    'TracingInterpreter',
    'InterpreterState',
    'BANNER',
    'run_script',
    'run_file',
]
