"""
CellForth Compiler - Word definitions and threaded-code emission

A definition is compiled into a private buffer of cells. Immediate words
run while compiling and may emit or patch cells; every other word is
compiled as a reference to its Word object, and numbers as [LIT value].
The finished buffer is sealed into a CompiledWord and only then added to
the dictionary, so a failed definition leaves nothing behind.

Branch operands hold the displacement from the cell after the operand
to the branch target.
"""

from .core import (
    CodeBufferOverflow, CompiledWord, DuplicateDefinition, ForthException,
    ModeError, NativeWord, Op, UnknownWord, UnterminatedConstruct, Word,
    logger, parse_number, to_cell,
)


class ForthCompiler:
    """Mixin providing word compilation and definition"""

    def _register_compiler_words(self):
        """Register compiler words"""
        define = self.define_native
        define(':', self._colon, immediate=True)
        define(';', self._semicolon, immediate=True)
        define('recurse', self._recurse, immediate=True)
        define('see', self._see)

    # -- definition lifecycle -------------------------------------------------

    def begin_definition(self, name):
        """Open a new definition and enter compiling mode"""
        if self._compiling:
            raise ModeError(':', compiling=True)
        name = name.lower()
        if name in self.dictionary:
            raise DuplicateDefinition(name)
        self._current = CompiledWord(name)
        self._buffer = []
        self.control.clear()
        self._compiling = True

    def compile_token(self, token):
        """Compile one token into the open definition

        Any error abandons the whole definition before propagating.
        """
        if not self._compiling:
            raise ModeError(token)
        try:
            self._compile_token(token)
        except ForthException:
            self._abort_definition()
            raise

    def _compile_token(self, token):
        name = token.lower()
        if name == self._current.name:
            self._emit(self._current)
            return

        word = self.dictionary.find(name)
        if word is not None:
            if word.immediate:
                self.execute_word(word)
            else:
                self._emit(word)
            return

        value = parse_number(token, self.base)
        if value is None:
            raise UnknownWord(token)
        self._emit(Op.LIT, value)

    def end_definition(self):
        """Close the open definition and publish it"""
        if not self._compiling:
            raise ModeError(';')
        if len(self.control):
            _, kind = self.control.peek()
            self._abort_definition()
            raise UnterminatedConstruct(kind)

        word = self._current.seal(self._buffer)
        try:
            self.dictionary.add(word)
        finally:
            self._abort_definition()
        logger.debug("defined %s (%d cells)", word.name, len(word.code))
        return word

    def _abort_definition(self):
        self._compiling = False
        self._buffer = []
        self._current = None
        self.control.clear()

    def _define_literal_word(self, name, value):
        """Publish a word whose whole body is [LIT value]"""
        return self.dictionary.add(CompiledWord(name, (Op.LIT, to_cell(value))))

    # -- emission ---------------------------------------------------------------

    def _emit(self, *cells):
        """Append cells; returns the position of the last one"""
        if len(self._buffer) + len(cells) > self.code_size:
            raise CodeBufferOverflow(self.code_size)
        self._buffer.extend(cells)
        return len(self._buffer) - 1

    def _emit_branch(self, op, target=None):
        """Emit [op offset]; without a target the offset is left for _patch"""
        operand = self._emit(op, 0)
        if target is not None:
            self._patch(operand, target)
        return operand

    def _patch(self, operand, target):
        self._buffer[operand] = target - (operand + 1)

    # -- words ----------------------------------------------------------------

    def _colon(self):
        if self._compiling:
            raise ModeError(':', compiling=True)
        self.begin_definition(self._next_name(':'))

    def _semicolon(self):
        self.end_definition()

    def _recurse(self):
        if not self._compiling:
            raise ModeError('recurse')
        self._emit(self._current)

    def disassemble(self, code):
        parts = []
        ip = 0
        while ip < len(code):
            cell = code[ip]
            if isinstance(cell, Word):
                parts.append(cell.name)
                ip += 1
            elif cell is Op.LIT:
                parts.append(self._format_cell(code[ip + 1]))
                ip += 2
            else:
                parts.append(f"{cell.value}({code[ip + 1]:+d})")
                ip += 2
        return ' '.join(parts)

    def _see(self):
        name = self._next_name('see')
        word = self.dictionary.find(name)
        if word is None:
            raise UnknownWord(name)
        if isinstance(word, NativeWord):
            suffix = ' immediate' if word.immediate else ''
            print(f": {name} <native> ;{suffix}")
        else:
            body = self.disassemble(word.code)
            print(f": {name} {body} ;" if body else f": {name} ;")
