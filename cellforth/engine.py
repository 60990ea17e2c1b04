"""
CellForth Engine - Threaded-code inner interpreter

Each call between compiled words costs two host frames (_call and
_run_threaded); the depth is capped by max_call_depth so runaway recursion
raises ResourceExhaustion instead of exhausting the host stack.
"""

from .core import (
    CompiledWord, InvalidWordReference, NativeWord, Op, ResourceExhaustion,
)


class ForthEngine:
    """Mixin providing word execution"""

    def execute_word(self, word):
        if isinstance(word, NativeWord):
            word.handler()
        elif isinstance(word, CompiledWord):
            self._call(word)
        else:
            raise InvalidWordReference(word)

    def _call(self, word):
        if word.code is None:
            raise InvalidWordReference(word)
        if self._call_depth >= self.max_call_depth:
            raise ResourceExhaustion(
                f"more than {self.max_call_depth} nested calls in '{word.name}'")
        self._call_depth += 1
        try:
            self._run_threaded(word.code)
        finally:
            self._call_depth -= 1

    def _run_threaded(self, code):
        stack = self.stack
        loops = self.loops
        ip = 0
        end = len(code)
        while ip < end:
            cell = code[ip]
            ip += 1
            if isinstance(cell, CompiledWord):
                self._call(cell)
                continue
            if isinstance(cell, NativeWord):
                cell.handler()
                continue
            if not isinstance(cell, Op):
                raise InvalidWordReference(cell)

            operand = code[ip]
            ip += 1
            if cell is Op.LIT:
                stack.push(operand)
            elif cell is Op.BRANCH:
                ip += operand
            elif cell is Op.ZBRANCH:
                if stack.pop() == 0:
                    ip += operand
            elif cell is Op.DO:
                # ( limit start -- )
                stack.need(2)
                start = stack.pop()
                limit = stack.pop()
                if start < limit:
                    loops.push([limit, start])
                else:
                    ip += operand
            elif cell is Op.LOOP:
                frame = loops.peek()
                frame[1] += 1
                if frame[1] < frame[0]:
                    ip += operand
                else:
                    loops.pop()
