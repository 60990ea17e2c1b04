"""
CellForth REPL - Line interpreter, interactive loop, DSL interface and CLI
"""

import argparse
import logging
import sys
from pathlib import Path

from .core import (
    ForthBase, ForthException, ResourceExhaustion, UnknownWord, logger,
    parse_number,
)
from .arithmetic import ForthArithmetic
from .stack_ops import ForthStack
from .memory import ForthMemory
from .io_words import ForthIO
from .control_flow import ForthControlFlow
from .compiler import ForthCompiler
from .engine import ForthEngine


class Forth(ForthBase, ForthArithmetic, ForthStack, ForthMemory, ForthIO,
            ForthControlFlow, ForthCompiler, ForthEngine):
    """Complete Forth interpreter combining all mixins"""

    def __init__(self, **config):
        super().__init__(**config)
        self._running = True
        self._register_all_words()

    def _register_all_words(self):
        """Register all words from all mixins"""
        self._register_arithmetic_words()
        self._register_stack_words()
        self._register_memory_words()
        self._register_io_words()
        self._register_control_flow_words()
        self._register_compiler_words()
        self.define_native('quit', self._quit)
        self.define_native('bye', self._quit)

    def _quit(self):
        self._running = False
        self._input.discard()

    @property
    def running(self):
        return self._running

    def execute(self, text):
        """Execute Forth code, line by line"""
        for line in text.splitlines():
            if not self._running:
                break
            self.interpret(line)
        return self

    def interpret(self, line):
        """Interpret one line of input; returns False if an error was reported"""
        self._input.restart(line)
        try:
            for token in self._input:
                self.interpret_token(token)
        except ForthException as e:
            self._report(e)
            return False
        except RecursionError:
            self._report(ResourceExhaustion("host call stack exhausted"))
            return False
        except MemoryError:
            self._report(ResourceExhaustion("host memory exhausted"))
            return False
        return True

    def interpret_token(self, token):
        if self._compiling:
            self.compile_token(token)
            return

        word = self.lookup(token)
        if word is not None:
            self.execute_word(word)
            return

        value = parse_number(token, self.base)
        if value is None:
            raise UnknownWord(token)
        self.stack.push(value)

    def _report(self, error):
        """Print the error, drop the rest of the line and reset"""
        sys.stdout.flush()
        print(f"Error: {error.message}", file=sys.stderr)
        logger.debug("%s (throw code %d)", type(error).__name__, error.code)
        self._input.discard()
        self.reset()


class ForthREPL:
    """Mixin providing REPL functionality"""

    banner = "CellForth ready. Type 'quit' to exit."

    def repl(self, get_input=input):
        """Start interactive REPL

        Args:
            get_input: callable taking a prompt and returning a line;
                       raises EOFError at end of input.
        """
        print(self.banner)

        while self._running:
            prompt = "...> " if self._compiling else "ok> "
            try:
                line = get_input(prompt)
            except EOFError:
                print()
                break
            except KeyboardInterrupt:
                print("\n(Ctrl+C) type 'quit' to exit")
                continue

            try:
                ok = self.interpret(line)
            except KeyboardInterrupt:
                self._input.discard()
                self.reset()
                print("\n(Ctrl+C) interrupted; type 'quit' to exit")
                continue

            if ok and self._running and not self._compiling:
                print(" ok")

        return self


class InteractiveForth(Forth, ForthREPL):
    """Complete Interactive Forth with REPL and DSL support"""

    def __repr__(self):
        return f"<InteractiveForth {self.stack.as_list()}>"

    def __call__(self, *values):
        return self.push(*values)

    def push(self, *values):
        for value in values:
            self.stack.push(value)
        return self

    def pop(self):
        return self.stack.pop()

    def peek(self):
        return self.stack.peek()

    def run(self, code):
        return self.execute(code)

    def define(self, name, body):
        """Define a word from Python: f.define('sq', 'dup *')"""
        return self.execute(f": {name} {body} ;")


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="cellforth",
        description="Interactive threaded-code Forth",
    )
    parser.add_argument("file", nargs="?", help="Forth source file to run")
    parser.add_argument("-e", "--eval", dest="expr",
                        help="Forth source to run before exiting")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="log definitions, errors and resets")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.ERROR)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    forth = InteractiveForth()

    if args.file:
        path = Path(args.file)
        if not path.exists():
            print(f"Error: File not found: {path}", file=sys.stderr)
            return 1
        forth.execute(path.read_text())
    if args.expr:
        forth.execute(args.expr)

    if args.file or args.expr:
        if forth.compiling:
            logger.warning("input ended inside a definition")
        print()
    else:
        forth.repl()
    return 0


def cli():
    sys.exit(main())
