"""
CellForth Memory - Flat cell memory, variables, constants
"""

import sys

from .core import DuplicateDefinition, InvalidMemoryAddress, logger, to_cell


class ForthMemory:
    """Mixin providing memory management operations"""

    def _register_memory_words(self):
        """Register memory words"""
        define = self.define_native
        define('@', self._fetch)
        define('!', self._store)
        define('+!', self._plus_store)
        define('?', self._question)

        define('here', self._here)
        define('allot', self._allot)
        define(',', self._comma)
        define('cells', self._cells)
        define('cell+', self._cell_plus)

        define('variable', self._variable)
        define('constant', self._constant)

    def _check_address(self, addr):
        if not 0 <= addr < self._memory_size:
            raise InvalidMemoryAddress(addr)
        return addr

    def mem_fetch(self, addr):
        return self.memory[self._check_address(addr)]

    def mem_store(self, addr, value):
        self.memory[self._check_address(addr)] = to_cell(value)

    def _fetch(self):
        self.stack.push(self.mem_fetch(self.stack.pop()))

    def _store(self):
        """( x addr -- )"""
        self.stack.need(2)
        addr = self.stack.pop()
        value = self.stack.pop()
        self.mem_store(addr, value)

    def _plus_store(self):
        self.stack.need(2)
        addr = self.stack.pop()
        value = self.stack.pop()
        self.mem_store(addr, self.mem_fetch(addr) + value)

    def _question(self):
        print(self._format_cell(self.mem_fetch(self.stack.pop())), end=' ')
        sys.stdout.flush()

    def _here(self):
        self.stack.push(self.here)

    def allot(self, n):
        """Reserve n cells of data space and return the first address"""
        start = self.here
        end = start + n
        if end < 0 or end > self._memory_size:
            raise InvalidMemoryAddress(end)
        self.here = end
        return start

    def _allot(self):
        self.allot(self.stack.pop())

    def _comma(self):
        value = self.stack.pop()
        self.mem_store(self.allot(1), value)

    def _cells(self):
        # one address unit per cell
        self.stack.push(self.stack.pop())

    def _cell_plus(self):
        self.stack.push(to_cell(self.stack.pop() + 1))

    def _variable(self):
        """variable <name> ( -- ) allocate one cell; <name> ( -- addr )"""
        name = self._next_name('variable')
        if name in self.dictionary:
            raise DuplicateDefinition(name)
        addr = self.allot(1)
        self.memory[addr] = 0
        self._define_literal_word(name, addr)
        logger.debug("variable %s at %d", name, addr)

    def _constant(self):
        """<x> constant <name> ( x -- ); <name> ( -- x )"""
        name = self._next_name('constant')
        value = self.stack.pop()
        self._define_literal_word(name, value)
