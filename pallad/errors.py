# Errors shared by every stage of the pipeline.
#
# Each stage has a base class and the base knows which stage it belongs to,
# which is what the cli uses to label a failure. The concrete errors carry
# just enough context (line, operand, operation) to render a precise message.
#
# Errors are dataclasses so their fields are easy to assert on in tests. They
# use eq=False so they keep the identity based hash every Exception has.

from .imports import *

class PalladError(Exception):
    stage = None

    def __str__(self):
        return self.msg()

    def msg(self) -> str:
        return type(self).__name__

class LexError(PalladError):     stage = 'tokenize'
class ParseError(PalladError):   stage = 'parse'
class CompileError(PalladError): stage = 'compile'
class VmError(PalladError):      stage = 'run'


##########################
# Lexical

@dataclass(eq=False)
class UnknownCharacter(LexError):
    char: str
    line: int

    def msg(self): return f"Line {self.line}: Unknown character: {self.char}"

@dataclass(eq=False)
class InvalidNumber(LexError):
    text: str
    line: int

    def msg(self): return f"Line {self.line}: Invalid number: {self.text}"

@dataclass(eq=False)
class InvalidEscape(LexError):
    char: str
    line: int

    def msg(self): return f"Line {self.line}: Invalid escape: \\{self.char}"

@dataclass(eq=False)
class UnterminatedString(LexError):
    line: int

    def msg(self): return f"Line {self.line}: Unterminated string"


##########################
# Syntax

@dataclass(eq=False)
class UnexpectedToken(ParseError):
    got: str
    expected: str
    line: int

    def msg(self):
        return f"Line {self.line}: Expected {self.expected}, got {self.got}"

@dataclass(eq=False)
class EndOfInput(ParseError):
    expected: str
    line: int

    def msg(self):
        return f"Line {self.line}: Expected {self.expected}, got end of input"


##########################
# Runtime

@dataclass(eq=False)
class UndefinedVariable(VmError):
    name: str

    def msg(self): return f"Undefined variable: {self.name}"

@dataclass(eq=False)
class StackUnderflow(VmError):
    operation: str

    def msg(self): return f"Stack underflow: {self.operation}"

@dataclass(eq=False)
class UnknownBuiltin(VmError):
    name: str

    def msg(self): return f"Unknown builtin: {self.name}"

@dataclass(eq=False)
class TypeMismatch(VmError):
    left: Any   # Value
    right: Any  # Value
    operation: str

    def msg(self):
        return (f"Type mismatch: cannot {self.operation} "
                f"{self.left.tyName()} and {self.right.tyName()}")

@dataclass(eq=False)
class DivisionByZero(VmError):
    operation: str

    def msg(self):
        return f"Division by zero at {self.operation} operation is not valid"

class IntDivOverflow(VmError):
    def msg(self): return "Integer division overflow"

class NegativeRepeat(VmError):
    def msg(self): return "Cannot repeat a string a negative number of times"

class RepeatOverflow(VmError):
    def msg(self): return "String repetition is too large"


def testMessages():
    assert "Line 3: Unknown character: $" == str(UnknownCharacter('$', 3))
    assert "Line 1: Expected ')', got end of input" == str(EndOfInput("')'", 1))
    assert "Undefined variable: y" == str(UndefinedVariable('y'))
    assert "Integer division overflow" == str(IntDivOverflow())

def testStages():
    assert 'tokenize' == InvalidNumber('1..', 1).stage
    assert 'parse' == UnexpectedToken('Comma', 'identifier', 2).stage
    assert 'run' == NegativeRepeat().stage
    assert isinstance(DivisionByZero('mod'), VmError)
