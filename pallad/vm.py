# The stack machine.
#
# Each Op has a subroutine in vmSubroutines which is called with the vm and
# the instruction. A subroutine pops its operands from the data stack and
# pushes its result, so the Vm itself is only a loop over the program.
#
# All arithmetic goes through `binary`, which holds the coercion rules between
# the value kinds. Integers behave like a signed 64bit machine integer:
# add, sub and mul wrap around instead of growing.

from .imports import *
from .errors import (
    UndefinedVariable, StackUnderflow, UnknownBuiltin, TypeMismatch,
    DivisionByZero, IntDivOverflow, NegativeRepeat, RepeatOverflow,
)
from .value import Value, ValueTy, NONE
from .ir import Op, Instr

# The longest string (in utf-8 bytes) that repetition may produce.
STR_MAX_BYTES = 1 * GiB

log = logging.getLogger(__name__)

INT, FLOAT, STR = ValueTy.INT, ValueTy.FLOAT, ValueTy.STR

# Names used in error messages
OP_NAMES = {
    Op.ADD: 'add',
    Op.SUB: 'subtract',
    Op.MUL: 'multiply',
    Op.DIV: 'divide',
    Op.INT_DIV: 'integer-divide',
    Op.MOD: 'mod',
}

DIVIDING = {Op.DIV, Op.INT_DIV, Op.MOD}


class Stack(list):
    """The operand stack. push/popv are the only way values move."""
    def __repr__(self):
        return f"Stk{list(self)}"

    def push(self, value: Value):
        return super().append(value)

    def popv(self, operation: str) -> Value:
        """Pop a value, raising StackUnderflow(operation) if empty."""
        if not self: raise StackUnderflow(operation)
        return super().pop()

    def assertEq(self, expectedList):
        assert expectedList == list(self)


################################
# Arithmetic

def remainder(left: int, right: int) -> int:
    """The remainder of a truncating division, it has the sign of the
    dividend (left). Floor division (//) and remainder (%) therefore do not
    pair up for negative operands.
    """
    sign = -1 if left < 0 else 1
    return sign * (abs(left) % abs(right))

def _intOp(op: Op, l: int, r: int) -> Value:
    if op is Op.ADD:   return Value.int_(wrapI64(l + r))
    elif op is Op.SUB: return Value.int_(wrapI64(l - r))
    elif op is Op.MUL: return Value.int_(wrapI64(l * r))
    elif op is Op.DIV: return Value.float_(l / r)
    elif op is Op.INT_DIV:
        if l == I64_MIN and r == -1: raise IntDivOverflow()
        return Value.int_(l // r)
    elif op is Op.MOD: return Value.int_(remainder(l, r))
    raise TypeError(op)

def _floatOp(op: Op, l: float, r: float) -> Value:
    if op is Op.ADD:   return Value.float_(l + r)
    elif op is Op.SUB: return Value.float_(l - r)
    elif op is Op.MUL: return Value.float_(l * r)
    elif op is Op.DIV: return Value.float_(l / r)
    elif op is Op.INT_DIV:
        q = l / r
        if not math.isfinite(q): raise IntDivOverflow()
        q = math.floor(q)
        if not fitsI64(q): raise IntDivOverflow()
        return Value.int_(q)
    elif op is Op.MOD: return Value.float_(math.fmod(l, r))
    raise TypeError(op)

def _repeat(s: str, count: int, maxStrBytes: int) -> Value:
    if count < 0: raise NegativeRepeat()
    if len(s.encode('utf-8')) * count > maxStrBytes: raise RepeatOverflow()
    return Value.str_(s * count)

def binary(op: Op, left: Value, right: Value,
           maxStrBytes: int = STR_MAX_BYTES) -> Value:
    """Apply a binary operation to two values."""
    if op in DIVIDING and right.isZero():
        raise DivisionByZero(OP_NAMES[op])

    lt, rt = left.ty, right.ty
    if lt is INT and rt is INT:
        return _intOp(op, left.v, right.v)
    if left.isNumber() and right.isNumber():
        return _floatOp(op, float(left.v), float(right.v))

    if op is Op.ADD:
        if left.isNumber() and rt is STR:
            return Value.str_(left.render() + right.v)
        if lt is STR and (right.isNumber() or rt is STR):
            return Value.str_(left.v + right.render())
    elif op is Op.MUL and lt is STR and rt is INT:
        return _repeat(left.v, right.v, maxStrBytes)

    raise TypeMismatch(left, right, OP_NAMES[op])


################################
# Subroutines

def _loadConst(mkValue):
    def impl(vm, instr):
        vm.stack.push(mkValue(instr.arg))
    return impl

def _loadNone(vm, instr):
    vm.stack.push(NONE)

def _loadVar(vm, instr):
    value = vm.globals.get(instr.arg)
    if value is None: raise UndefinedVariable(instr.arg)
    vm.stack.push(value)

def _storeVar(vm, instr):
    vm.globals[instr.arg] = vm.stack.popv("store variable")

def _doBinary(op: Op):
    name = OP_NAMES[op]
    def impl(vm, instr):
        right = vm.stack.popv(name)
        left = vm.stack.popv(name)
        vm.stack.push(binary(op, left, right, vm.maxStrBytes))
    return impl

def _print(vm, argc: int):
    if len(vm.stack) < argc: raise StackUnderflow("print")
    args = [vm.stack.popv("print") for _ in range(argc)]
    for value in reversed(args):
        print(value.render(), file=vm.out)

BUILTINS = {
    'print': _print,
}

def _callBuiltin(vm, instr):
    builtin = BUILTINS.get(instr.arg)
    if builtin is None: raise UnknownBuiltin(instr.arg)
    builtin(vm, instr.argc)

def _pop(vm, instr):
    vm.stack.popv("Pop")

vmSubroutines = {
    Op.LOAD_NONE: _loadNone,
    Op.LOAD_INT: _loadConst(Value.int_),
    Op.LOAD_FLOAT: _loadConst(Value.float_),
    Op.LOAD_STR: _loadConst(Value.str_),
    Op.LOAD_VAR: _loadVar,
    Op.STORE_VAR: _storeVar,

    Op.ADD: _doBinary(Op.ADD),
    Op.SUB: _doBinary(Op.SUB),
    Op.MUL: _doBinary(Op.MUL),
    Op.DIV: _doBinary(Op.DIV),
    Op.INT_DIV: _doBinary(Op.INT_DIV),
    Op.MOD: _doBinary(Op.MOD),

    Op.CALL_BUILTIN: _callBuiltin,
    Op.POP: _pop,
}


class Vm(object):
    def __init__(self, out=None, maxStrBytes: int = STR_MAX_BYTES):
        self.out = sys.stdout if out is None else out
        self.maxStrBytes = maxStrBytes
        self.stack = Stack()
        self.globals: Dict[str, Value] = {}

    def run(self, program: List[Instr]):
        """Run a program with a fresh stack and globals."""
        self.stack = Stack()
        self.globals = {}
        for instr in program:
            log.debug("%-24s %s", instr, self.stack)
            vmSubroutines[instr.op](self, instr)
        assert not self.stack, f"stack not empty after run: {self.stack}"


def testBinaryInts():
    i = Value.int_
    assert i(3) == binary(Op.INT_DIV, i(7), i(2))
    assert i(-4) == binary(Op.INT_DIV, i(-7), i(2))
    assert i(-1) == binary(Op.MOD, i(-7), i(2))
    assert Value.float_(3.5) == binary(Op.DIV, i(7), i(2))
    assert i(I64_MIN) == binary(Op.ADD, i(I64_MAX), i(1))

def testBinaryStrings():
    s = Value.str_
    assert s('a1') == binary(Op.ADD, s('a'), Value.int_(1))
    assert s('2.5a') == binary(Op.ADD, Value.float_(2.5), s('a'))
    assert s('ababab') == binary(Op.MUL, s('ab'), Value.int_(3))

def testRunPrint():
    out = io.StringIO()
    Vm(out).run([
        Instr(Op.LOAD_INT, 1),
        Instr(Op.STORE_VAR, 'x'),
        Instr(Op.LOAD_VAR, 'x'),
        Instr(Op.LOAD_NONE),
        Instr(Op.CALL_BUILTIN, 'print', 2),
    ])
    assert '1\n<none>\n' == out.getvalue()
