# Runtime values.
#
# The value set is closed: none, a 64bit int, a 64bit float or a string. A
# Value is a tag (ValueTy) plus the python payload, the same way a Lexeme is
# a variant plus its text. Every consumer matches on the tag.

from .imports import *
from decimal import Decimal

NONE_TEXT = '<none>'

class ValueTy(enum.Enum):
    NONE = enum.auto()
    INT = enum.auto()
    FLOAT = enum.auto()
    STR = enum.auto()

_tyNames = {
    ValueTy.NONE: 'None',
    ValueTy.INT: 'Integer',
    ValueTy.FLOAT: 'Float',
    ValueTy.STR: 'String',
}

@dataclass(frozen=True)
class Value:
    ty: ValueTy
    v: Any = None

    @classmethod
    def int_(cls, v: int):
        # every producer narrows first, a wide int here is a bug
        assert fitsI64(v), v
        return cls(ValueTy.INT, v)

    @classmethod
    def float_(cls, v: float): return cls(ValueTy.FLOAT, float(v))

    @classmethod
    def str_(cls, v: str): return cls(ValueTy.STR, v)

    def tyName(self) -> str:
        return _tyNames[self.ty]

    def isNumber(self) -> bool:
        return self.ty in {ValueTy.INT, ValueTy.FLOAT}

    def isZero(self) -> bool:
        return self.isNumber() and self.v == 0

    def render(self) -> str:
        """The text `print` writes for this value."""
        ty = self.ty
        if ty is ValueTy.NONE:    return NONE_TEXT
        elif ty is ValueTy.INT:   return str(self.v)
        elif ty is ValueTy.FLOAT: return renderFloat(self.v)
        elif ty is ValueTy.STR:   return self.v
        raise TypeError(ty)

NONE = Value(ValueTy.NONE)


def renderFloat(v: float) -> str:
    """Positional decimal notation with the fewest digits that round trip.

    There is never an exponent and an integral float has no fraction, so
    3.0 renders as 3 and 1e20 as 100000000000000000000.
    """
    if math.isnan(v): return "NaN"
    if math.isinf(v): return "inf" if v > 0 else "-inf"
    text = format(Decimal(repr(v)), "f")
    if "." in text: text = text.rstrip("0").rstrip(".")
    return text


def testRender():
    assert '42' == Value.int_(42).render()
    assert '-7' == Value.int_(-7).render()
    assert '3.5' == Value.float_(3.5).render()
    assert '2' == Value.float_(2).render()
    assert 'hi there' == Value.str_('hi there').render()
    assert '<none>' == NONE.render()

def testZero():
    assert Value.int_(0).isZero()
    assert Value.float_(-0.0).isZero()
    assert not Value.str_('').isZero()
    assert not NONE.isZero()

def testIntRange():
    assert I64_MAX == Value.int_(I64_MAX).v
    caught = False
    try: Value.int_(I64_MAX + 1)
    except AssertionError: caught = True
    assert caught

def testEquality():
    assert Value.int_(3) == Value.int_(3)
    assert Value.int_(3) != Value.float_(3.0)
    assert 'Integer' == Value.int_(1).tyName()
    assert 'None' == NONE.tyName()

def testRenderFloat():
    assert '3' == renderFloat(3.0)
    assert '-0' == renderFloat(-0.0)
    assert '0.1' == renderFloat(0.1)
    assert '100000000000000000000' == renderFloat(1e20)
    assert '0.00001' == renderFloat(0.00001)
    assert '-1.5' == renderFloat(-1.5)
    assert 'inf' == renderFloat(math.inf)
