"""
CellForth Arithmetic - Integer, comparison and logic operations

All results wrap to the signed cell range. Division truncates toward
zero and the remainder takes the sign of the dividend.
"""

import operator

from .core import DivisionByZero, ModuloByZero, TRUE, FALSE, flag, to_cell


def _truncated_divmod(a, b):
    q = abs(a) // abs(b)
    if (a < 0) != (b < 0):
        q = -q
    return q, a - b * q


class ForthArithmetic:
    """Mixin providing arithmetic operations"""

    def _register_arithmetic_words(self):
        """Register arithmetic words"""
        define = self.define_native
        define('+', self._binary(operator.add))
        define('-', self._binary(operator.sub))
        define('*', self._binary(operator.mul))
        define('/', self._div)
        define('mod', self._mod)
        define('/mod', self._divmod)
        define('1+', self._unary(lambda a: a + 1))
        define('1-', self._unary(lambda a: a - 1))
        define('2*', self._unary(lambda a: a * 2))
        define('2/', self._unary(lambda a: a >> 1))
        define('negate', self._unary(operator.neg))
        define('abs', self._unary(abs))
        define('min', self._binary(min))
        define('max', self._binary(max))

        define('=', self._compare(operator.eq))
        define('<>', self._compare(operator.ne))
        define('<', self._compare(operator.lt))
        define('>', self._compare(operator.gt))
        define('<=', self._compare(operator.le))
        define('>=', self._compare(operator.ge))
        define('0=', self._unary(lambda a: flag(a == 0)))
        define('0<', self._unary(lambda a: flag(a < 0)))
        define('0>', self._unary(lambda a: flag(a > 0)))

        define('and', self._binary(operator.and_))
        define('or', self._binary(operator.or_))
        define('xor', self._binary(operator.xor))
        define('invert', self._unary(operator.invert))
        define('true', lambda: self.stack.push(TRUE))
        define('false', lambda: self.stack.push(FALSE))

    def _binary(self, fn):
        def word():
            b = self.stack.pop()
            a = self.stack.pop()
            self.stack.push(to_cell(fn(a, b)))
        return word

    def _unary(self, fn):
        def word():
            self.stack.push(to_cell(fn(self.stack.pop())))
        return word

    def _compare(self, fn):
        def word():
            b = self.stack.pop()
            a = self.stack.pop()
            self.stack.push(flag(fn(a, b)))
        return word

    def _div(self):
        self.stack.need(2)
        b = self.stack.pop()
        a = self.stack.pop()
        if b == 0:
            raise DivisionByZero()
        self.stack.push(to_cell(_truncated_divmod(a, b)[0]))

    def _mod(self):
        self.stack.need(2)
        b = self.stack.pop()
        a = self.stack.pop()
        if b == 0:
            raise ModuloByZero()
        self.stack.push(to_cell(_truncated_divmod(a, b)[1]))

    def _divmod(self):
        """( a b -- rem quot )"""
        self.stack.need(2)
        b = self.stack.pop()
        a = self.stack.pop()
        if b == 0:
            raise DivisionByZero()
        quot, rem = _truncated_divmod(a, b)
        self.stack.push(to_cell(rem))
        self.stack.push(to_cell(quot))
