# The IR: a flat list of stack machine instructions.
#
# There are no jumps or labels since the language has no control flow. The
# binary operations take no arguments, their operands are the top two values
# of the stack.

from .imports import *

class Op(enum.Enum):
    LOAD_NONE = 0x00
    LOAD_INT = 0x01
    LOAD_FLOAT = 0x02
    LOAD_STR = 0x03
    LOAD_VAR = 0x04
    STORE_VAR = 0x05

    ADD = 0x10
    SUB = 0x11
    MUL = 0x12
    DIV = 0x13
    INT_DIV = 0x14
    MOD = 0x15

    CALL_BUILTIN = 0x20
    POP = 0x21

BINARY_OPS = {Op.ADD, Op.SUB, Op.MUL, Op.DIV, Op.INT_DIV, Op.MOD}


@dataclass(frozen=True)
class Instr:
    op: Op
    arg: Any = None
    argc: int = 0

    def __str__(self):
        name = self.op.name.lower()
        if self.op is Op.CALL_BUILTIN:
            return f"{name} {self.arg} {self.argc}"
        elif self.op is Op.LOAD_NONE or self.op is Op.POP or self.op in BINARY_OPS:
            return name
        elif self.op is Op.LOAD_STR:
            return f"{name} {self.arg!r}"
        return f"{name} {self.arg}"


def renderIr(program: List[Instr]) -> str:
    """Render a program as a listing, one instruction per line."""
    return "\n".join(map(str, program))


def testInstrStr():
    assert 'load_int 42' == str(Instr(Op.LOAD_INT, 42))
    assert 'load_float 2.5' == str(Instr(Op.LOAD_FLOAT, 2.5))
    assert "load_str 'a b'" == str(Instr(Op.LOAD_STR, 'a b'))
    assert 'store_var x' == str(Instr(Op.STORE_VAR, 'x'))
    assert 'int_div' == str(Instr(Op.INT_DIV))
    assert 'call_builtin print 2' == str(Instr(Op.CALL_BUILTIN, 'print', 2))

def testInstrAPI():
    assert 0x10 == Op.ADD.value
    assert "POP" == Op.POP.name
    assert Instr(Op.LOAD_VAR, 'x') == Instr(Op.LOAD_VAR, 'x')
