"""
CellForth Core - Base class with fundamental infrastructure
- Limits and cell arithmetic
- Exception classes
- Bounded stacks, words and dictionary
- Parser/tokenizer
- Base initialization and reset
"""

import enum
import logging


logger = logging.getLogger('cellforth')

STACK_SIZE = 1024
DICT_SIZE = 1024
MEMORY_SIZE = 1024
CODE_SIZE = 1024
MAX_CALL_DEPTH = 300
MAX_SPACES = 1 << 16

CELL_BITS = 64
_CELL_MOD = 1 << CELL_BITS
_CELL_SIGN = 1 << (CELL_BITS - 1)

TRUE = -1
FALSE = 0


def to_cell(value):
    """Wrap an integer to the signed cell range"""
    return ((int(value) + _CELL_SIGN) % _CELL_MOD) - _CELL_SIGN


def flag(condition):
    return TRUE if condition else FALSE


# -- Exceptions ---------------------------------------------------------------

class ForthException(Exception):
    """Base error; code is the matching ANS Forth THROW code"""
    code = -1

    def __init__(self, message=None):
        self.message = message or self.__class__.__name__
        super().__init__(self.message)


class StackUnderflow(ForthException):
    code = -4

    def __init__(self, stack_name='value stack'):
        self.stack_name = stack_name
        super().__init__(f"Stack underflow ({stack_name})")


class StackOverflow(ForthException):
    code = -3

    def __init__(self, stack_name='value stack'):
        self.stack_name = stack_name
        super().__init__(f"Stack overflow ({stack_name})")


class DivisionByZero(ForthException):
    code = -10

    def __init__(self):
        super().__init__("Division by zero")


class ModuloByZero(ForthException):
    code = -10

    def __init__(self):
        super().__init__("Modulo by zero")


class InvalidMemoryAddress(ForthException):
    code = -9

    def __init__(self, address):
        self.address = address
        super().__init__(f"Invalid memory address: {address}")


class DictionaryFull(ForthException):
    code = -8

    def __init__(self):
        super().__init__("Dictionary full")


class DuplicateDefinition(ForthException):
    code = -32

    def __init__(self, name):
        self.name = name
        super().__init__(f"'{name}' is already defined")


class UnknownWord(ForthException):
    code = -13

    def __init__(self, token):
        self.token = token
        super().__init__(f"Unknown word '{token}'")


class MissingName(ForthException):
    code = -16

    def __init__(self, word):
        super().__init__(f"'{word}' needs a name")


class ModeError(ForthException):
    code = -14

    def __init__(self, word, compiling=False):
        self.word = word
        where = "inside" if compiling else "outside"
        super().__init__(f"'{word}' used {where} a definition")


class UnmatchedConstruct(ForthException):
    code = -22
    keyword = '?'
    expected = '?'

    def __init__(self):
        super().__init__(f"{self.keyword.upper()} without matching {self.expected}")


class UnmatchedElse(UnmatchedConstruct):
    keyword, expected = 'else', 'IF'


class UnmatchedThen(UnmatchedConstruct):
    keyword, expected = 'then', 'IF'


class UnmatchedUntil(UnmatchedConstruct):
    keyword, expected = 'until', 'BEGIN'


class UnmatchedWhile(UnmatchedConstruct):
    keyword, expected = 'while', 'BEGIN'


class UnmatchedRepeat(UnmatchedConstruct):
    keyword, expected = 'repeat', 'WHILE'


class UnmatchedBegin(UnmatchedConstruct):
    keyword, expected = 'repeat', 'BEGIN'


class UnmatchedLoop(UnmatchedConstruct):
    keyword, expected = 'loop', 'DO'


class UnterminatedConstruct(ForthException):
    code = -22

    def __init__(self, kind):
        self.kind = kind
        super().__init__(f"Unterminated {kind.name} in definition")


class CodeBufferOverflow(ForthException):
    code = -8

    def __init__(self, limit):
        super().__init__(f"Definition exceeds {limit} cells")


class ResourceExhaustion(ForthException):
    code = -5

    def __init__(self, detail="call nesting too deep"):
        super().__init__(f"Resource exhausted: {detail}")


class UnterminatedComment(ForthException):
    code = -39

    def __init__(self):
        super().__init__("Unterminated ( comment: missing ')' on this line")


class InvalidWordReference(ForthException):
    code = -13

    def __init__(self, cell):
        super().__init__(f"Invalid word reference: {cell!r}")


# -- Stacks -------------------------------------------------------------------

class BoundedStack:
    """Fixed-capacity LIFO; depth 0 is the top"""

    def __init__(self, name, size=STACK_SIZE):
        self.name = name
        self.size = size
        self._items = []

    def __len__(self):
        return len(self._items)

    def __iter__(self):
        return iter(self._items)

    def __repr__(self):
        return f"<{self.name} {self._items}>"

    def push(self, item):
        if len(self._items) >= self.size:
            raise StackOverflow(self.name)
        self._items.append(item)

    def pop(self):
        if not self._items:
            raise StackUnderflow(self.name)
        return self._items.pop()

    def peek(self, depth=0):
        if depth < 0 or depth >= len(self._items):
            raise StackUnderflow(self.name)
        return self._items[-1 - depth]

    def need(self, n):
        if len(self._items) < n:
            raise StackUnderflow(self.name)

    def clear(self):
        self._items.clear()

    def as_list(self):
        return list(self._items)


# -- Threaded code ------------------------------------------------------------

class Op(enum.Enum):
    """Instruction tags; each tag is followed by one operand cell"""
    LIT = 'lit'
    BRANCH = 'branch'
    ZBRANCH = '0branch'
    DO = 'do'
    LOOP = 'loop'


class Construct(enum.Enum):
    """Open control constructs tracked while compiling"""
    IF = 'if'
    ELSE = 'else'
    BEGIN = 'begin'
    WHILE = 'while'
    DO = 'do'


class Word:
    """Named dictionary entry"""
    __slots__ = ('name', 'immediate')

    def __init__(self, name, immediate=False):
        self.name = name
        self.immediate = immediate


class NativeWord(Word):
    """Word backed by a Python handler"""
    __slots__ = ('handler',)

    def __init__(self, name, handler, immediate=False):
        super().__init__(name, immediate)
        self.handler = handler

    def __repr__(self):
        return f"<native {self.name}>"


class CompiledWord(Word):
    """Word backed by threaded code; code is None until sealed"""
    __slots__ = ('code',)

    def __init__(self, name, code=None):
        super().__init__(name)
        self.code = None if code is None else tuple(code)

    def __repr__(self):
        return f"<compiled {self.name} {len(self.code or ())} cells>"

    def seal(self, cells):
        if self.code is not None:
            raise ValueError(f"word '{self.name}' is already sealed")
        self.code = tuple(cells)
        return self


class Dictionary:
    """Insertion-ordered, append-only name -> Word map"""

    def __init__(self, size=DICT_SIZE):
        self.size = size
        self._words = {}

    def __contains__(self, name):
        return name in self._words

    def __len__(self):
        return len(self._words)

    def __iter__(self):
        return iter(self._words.values())

    def names(self):
        return list(self._words)

    def find(self, name):
        return self._words.get(name)

    def add(self, word):
        if word.name in self._words:
            raise DuplicateDefinition(word.name)
        if len(self._words) >= self.size:
            raise DictionaryFull()
        self._words[word.name] = word
        return word


# -- Input --------------------------------------------------------------------

class Tokenizer:
    """Pull-based whitespace tokenizer over one line of input

    Skips ``( ... )`` comments and ``\\`` line comments. A ``(`` comment
    must close on the same line, otherwise UnterminatedComment is raised.
    ``next_token`` returns None once the line is exhausted.
    """

    def __init__(self, text=''):
        self.text = text
        self.pos = 0

    def restart(self, text):
        self.text = text
        self.pos = 0

    def __iter__(self):
        while True:
            token = self.next_token()
            if token is None:
                return
            yield token

    def _skip_space(self):
        text, n = self.text, len(self.text)
        while self.pos < n and text[self.pos].isspace():
            self.pos += 1

    def next_token(self):
        text, n = self.text, len(self.text)
        while True:
            self._skip_space()
            if self.pos >= n:
                return None
            start = self.pos
            while self.pos < n and not text[self.pos].isspace():
                self.pos += 1
            token = text[start:self.pos]
            if token == '(':
                end = text.find(')', self.pos)
                if end < 0:
                    self.pos = n
                    raise UnterminatedComment()
                self.pos = end + 1
                continue
            if token == '\\':
                end = text.find('\n', self.pos)
                self.pos = n if end < 0 else end + 1
                continue
            return token

    def discard(self):
        self.pos = len(self.text)


def parse_number(token, base=10):
    """Parse a token as a cell in the given base; None if it is not a number"""
    text = token
    sign = 1
    if text[:1] in ('-', '+') and len(text) > 1:
        sign = -1 if text[0] == '-' else 1
        text = text[1:]
    if text.startswith(('0x', '0X')):
        text, base = text[2:], 16
    elif text.startswith('$'):
        text, base = text[1:], 16
    elif text.startswith('%'):
        text, base = text[1:], 2
    if not text or not text.isalnum() or not text.isascii():
        return None
    try:
        return to_cell(sign * int(text, base))
    except ValueError:
        return None


# -- Session ------------------------------------------------------------------

class ForthBase:
    """Base mixin holding all interpreter state for one session"""

    def __init__(self, stack_size=STACK_SIZE, dict_size=DICT_SIZE,
                 memory_size=MEMORY_SIZE, code_size=CODE_SIZE,
                 max_call_depth=MAX_CALL_DEPTH):
        self.stack = BoundedStack('value stack', stack_size)
        self.loops = BoundedStack('loop stack', stack_size)
        self.control = BoundedStack('control stack', stack_size)
        self.dictionary = Dictionary(dict_size)

        self._memory_size = memory_size
        self.memory = [0] * memory_size
        self.here = 0

        self.base = 10
        self.code_size = code_size
        self.max_call_depth = max_call_depth
        self._call_depth = 0

        self._compiling = False
        self._buffer = []
        self._current = None

        self._input = Tokenizer()

        self._register_core_words()

    def _register_core_words(self):
        """Register core words - to be extended by mixins"""
        pass

    @property
    def compiling(self):
        return self._compiling

    def define_native(self, name, handler, immediate=False):
        return self.dictionary.add(NativeWord(name, handler, immediate))

    def lookup(self, name):
        return self.dictionary.find(name.lower())

    def _next_name(self, word):
        """Pull the name following a defining word from the current input"""
        token = self._input.next_token()
        if token is None:
            raise MissingName(word)
        return token.lower()

    def reset(self):
        """Clear stacks and compile state after an error"""
        self.stack.clear()
        self.loops.clear()
        self.control.clear()
        self._compiling = False
        self._buffer = []
        self._current = None
        self._call_depth = 0
        logger.debug("interpreter state reset")
