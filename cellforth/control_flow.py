"""
CellForth Control Flow - IF, ELSE, THEN, BEGIN, UNTIL, WHILE, REPEAT, DO, LOOP

Each control word is immediate and compile-only. It records the open
construct on the control stack as (position, kind):
- IF / ELSE / WHILE / DO: position of the operand still to be patched
- BEGIN: position of the first cell of the loop body
"""

from .core import (
    Construct, ModeError, Op, UnmatchedBegin, UnmatchedElse, UnmatchedLoop,
    UnmatchedRepeat, UnmatchedThen, UnmatchedUntil, UnmatchedWhile,
)


class ForthControlFlow:
    """Mixin providing control flow structures"""

    def _register_control_flow_words(self):
        """Register control flow words"""
        self.define_native('i', self._loop_i)
        self.define_native('j', self._loop_j)

        for name, action in (('if', self._if_marker),
                             ('else', self._else_marker),
                             ('then', self._then_marker),
                             ('begin', self._begin_marker),
                             ('until', self._until_marker),
                             ('while', self._while_marker),
                             ('repeat', self._repeat_marker),
                             ('do', self._do_marker),
                             ('loop', self._loop_marker)):
            self.define_native(name, self._compile_only(name, action), immediate=True)

    def _compile_only(self, name, action):
        def word():
            if not self._compiling:
                raise ModeError(name)
            action()
        return word

    def _loop_i(self):
        self.stack.push(self.loops.peek()[1])

    def _loop_j(self):
        self.stack.push(self.loops.peek(1)[1])

    def _pop_construct(self, error, *kinds):
        if not len(self.control) or self.control.peek()[1] not in kinds:
            raise error()
        return self.control.pop()[0]

    def _if_marker(self):
        self.control.push((self._emit_branch(Op.ZBRANCH), Construct.IF))

    def _else_marker(self):
        origin = self._pop_construct(UnmatchedElse, Construct.IF)
        operand = self._emit_branch(Op.BRANCH)
        self._patch(origin, len(self._buffer))
        self.control.push((operand, Construct.ELSE))

    def _then_marker(self):
        origin = self._pop_construct(UnmatchedThen, Construct.IF, Construct.ELSE)
        self._patch(origin, len(self._buffer))

    def _begin_marker(self):
        self.control.push((len(self._buffer), Construct.BEGIN))

    def _until_marker(self):
        target = self._pop_construct(UnmatchedUntil, Construct.BEGIN)
        self._emit_branch(Op.ZBRANCH, target)

    def _while_marker(self):
        if not len(self.control) or self.control.peek()[1] is not Construct.BEGIN:
            raise UnmatchedWhile()
        self.control.push((self._emit_branch(Op.ZBRANCH), Construct.WHILE))

    def _repeat_marker(self):
        exit_operand = self._pop_construct(UnmatchedRepeat, Construct.WHILE)
        target = self._pop_construct(UnmatchedBegin, Construct.BEGIN)
        self._emit_branch(Op.BRANCH, target)
        self._patch(exit_operand, len(self._buffer))

    def _do_marker(self):
        self.control.push((self._emit_branch(Op.DO), Construct.DO))

    def _loop_marker(self):
        origin = self._pop_construct(UnmatchedLoop, Construct.DO)
        self._emit_branch(Op.LOOP, origin + 1)
        self._patch(origin, len(self._buffer))
