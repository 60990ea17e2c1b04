"""
CellForth Stack Operations - Stack manipulation words
"""

import sys


class ForthStack:
    """Mixin providing stack manipulation operations"""

    def _register_stack_words(self):
        """Register stack words"""
        define = self.define_native
        define('dup', self._dup)
        define('?dup', self._qdup)
        define('drop', self._drop)
        define('swap', self._swap)
        define('over', self._over)
        define('rot', self._rot)
        define('-rot', self._nrot)
        define('nip', self._nip)
        define('tuck', self._tuck)

        define('2dup', self._2dup)
        define('2drop', self._2drop)

        define('pick', self._pick)
        define('depth', self._depth)
        define('clear', self._clear_stack)

        define('.', self._dot)
        define('.s', self._dot_s)

    def _dup(self):
        self.stack.push(self.stack.peek())

    def _qdup(self):
        top = self.stack.peek()
        if top != 0:
            self.stack.push(top)

    def _drop(self):
        self.stack.pop()

    def _swap(self):
        b = self.stack.pop()
        a = self.stack.pop()
        self.stack.push(b)
        self.stack.push(a)

    def _over(self):
        self.stack.push(self.stack.peek(1))

    def _rot(self):
        self.stack.need(3)
        c = self.stack.pop()
        b = self.stack.pop()
        a = self.stack.pop()
        for item in (b, c, a):
            self.stack.push(item)

    def _nrot(self):
        self.stack.need(3)
        c = self.stack.pop()
        b = self.stack.pop()
        a = self.stack.pop()
        for item in (c, a, b):
            self.stack.push(item)

    def _nip(self):
        a = self.stack.pop()
        self.stack.pop()
        self.stack.push(a)

    def _tuck(self):
        self.stack.need(2)
        a = self.stack.pop()
        b = self.stack.pop()
        for item in (a, b, a):
            self.stack.push(item)

    def _2dup(self):
        self.stack.need(2)
        a, b = self.stack.peek(1), self.stack.peek()
        self.stack.push(a)
        self.stack.push(b)

    def _2drop(self):
        self.stack.need(2)
        self.stack.pop()
        self.stack.pop()

    def _pick(self):
        n = self.stack.pop()
        self.stack.push(self.stack.peek(n))

    def _depth(self):
        self.stack.push(len(self.stack))

    def _clear_stack(self):
        self.stack.clear()

    def _format_cell(self, value):
        """Format a cell in the current base"""
        if self.base == 16:
            return format(value, 'x')
        elif self.base == 2:
            return format(value, 'b')
        elif self.base == 8:
            return format(value, 'o')
        return str(value)

    def _dot(self):
        value = self.stack.pop()
        print(self._format_cell(value), end=' ')
        sys.stdout.flush()

    def _dot_s(self):
        items = ' '.join(self._format_cell(item) for item in self.stack)
        print(f"<{len(self.stack)}> {items}", end=' ' if items else '')
        sys.stdout.flush()
