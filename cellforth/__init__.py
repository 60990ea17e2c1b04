"""
CellForth - Interactive threaded-code Forth
Modular package implementation

Usage:
    from cellforth import InteractiveForth
    forth = InteractiveForth()
    forth.execute(": double dup + ; 5 double .")
"""

from .core import (
    ForthException, ForthBase, BoundedStack, Dictionary, Tokenizer,
    NativeWord, CompiledWord, Op, Construct, parse_number, to_cell,
)
from .arithmetic import ForthArithmetic
from .stack_ops import ForthStack
from .memory import ForthMemory
from .io_words import ForthIO
from .control_flow import ForthControlFlow
from .compiler import ForthCompiler
from .engine import ForthEngine
from .repl import Forth, ForthREPL, InteractiveForth, main

__all__ = ['Forth', 'InteractiveForth', 'ForthException', 'main']
__version__ = '1.0.0'
