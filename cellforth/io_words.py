"""
CellForth I/O - Output words and number base
"""

import sys

from .core import MAX_SPACES, ResourceExhaustion


class ForthIO:
    """Mixin providing I/O operations"""

    def _register_io_words(self):
        """Register I/O words"""
        define = self.define_native
        define('cr', self._cr)
        define('emit', self._emit_char)
        define('space', self._space)
        define('spaces', self._spaces)

        define('decimal', self._decimal)
        define('hex', self._hex)

        define('words', self._list_words)

    def _cr(self):
        print()

    def _emit_char(self):
        code = self.stack.pop()
        print(chr(code & 0xFF), end='')
        sys.stdout.flush()

    def _space(self):
        print(' ', end='')

    def _spaces(self):
        n = self.stack.pop()
        if n > MAX_SPACES:
            raise ResourceExhaustion(f"{n} spaces requested, limit is {MAX_SPACES}")
        print(' ' * max(n, 0), end='')

    def _decimal(self):
        self.base = 10

    def _hex(self):
        self.base = 16

    def _list_words(self):
        print(' '.join(self.dictionary.names()))
