# ########################################
# Lexer
#
# The lexer converts source text into a flat list of Tokens. It works one line
# at a time: the line is cut at the first '#' that is not inside a string,
# trimmed and skipped if nothing is left. Every line that does produce tokens
# is terminated by exactly one EOL token, which the parser uses both to end
# statements and to count lines.

from .imports import *
from .errors import UnknownCharacter, InvalidNumber, InvalidEscape
from .errors import UnterminatedString

# Whether `none` is a keyword (and therefore a literal) of the language.
NONE_KEYWORD = True

log = logging.getLogger(__name__)

class TokenVariant(enum.Enum):
    # Keywords
    VAR = enum.auto()
    PRINT = enum.auto()
    NONE = enum.auto()

    # Values
    IDENT = enum.auto()
    INT = enum.auto()
    FLOAT = enum.auto()
    STR = enum.auto()

    # Operators
    PLUS = enum.auto()    # +
    MINUS = enum.auto()   # -
    STAR = enum.auto()    # *
    SLASH = enum.auto()   # /
    INT_DIV = enum.auto() # //
    MOD = enum.auto()     # %
    EQ = enum.auto()      # =

    LPAREN = enum.auto()  # (
    RPAREN = enum.auto()  # )
    COMMA = enum.auto()   # ,

    EOL = enum.auto()


TV = TokenVariant

_tvToStr = {
    TV.VAR: "'var'", TV.PRINT: "'print'", TV.NONE: "'none'",
    TV.PLUS: "'+'", TV.MINUS: "'-'", TV.STAR: "'*'", TV.SLASH: "'/'",
    TV.INT_DIV: "'//'", TV.MOD: "'%'", TV.EQ: "'='",
    TV.LPAREN: "'('", TV.RPAREN: "')'", TV.COMMA: "','",
    TV.EOL: "end of line",
}


@dataclass(frozen=True)
class Token:
    variant: TV
    value: Any = None

    def describe(self) -> str:
        """How the token is named in syntax errors."""
        v = self.variant
        if v is TV.IDENT: return f"identifier '{self.value}'"
        elif v is TV.INT: return f"integer {self.value}"
        elif v is TV.FLOAT: return f"float {self.value!r}"
        elif v is TV.STR: return f"string {self.value!r}"
        return _tvToStr[v]


VAR = Token(TV.VAR)
PRINT = Token(TV.PRINT)
NONE = Token(TV.NONE)

PLUS = Token(TV.PLUS)
MINUS = Token(TV.MINUS)
STAR = Token(TV.STAR)
SLASH = Token(TV.SLASH)
INT_DIV = Token(TV.INT_DIV)
MOD = Token(TV.MOD)
EQ = Token(TV.EQ)
LPAREN = Token(TV.LPAREN)
RPAREN = Token(TV.RPAREN)
COMMA = Token(TV.COMMA)
EOL = Token(TV.EOL)

def Ident(name: str) -> Token: return Token(TV.IDENT, name)
def Int(value: int) -> Token: return Token(TV.INT, value)
def Float(value: float) -> Token: return Token(TV.FLOAT, value)
def Str(value: str) -> Token: return Token(TV.STR, value)

_singleChar = {
    '+': PLUS, '-': MINUS, '*': STAR, '%': MOD, '=': EQ,
    '(': LPAREN, ')': RPAREN, ',': COMMA,
}

_escapes = {'n': '\n', 't': '\t', 'r': '\r', '\\': '\\'}

COMMENT = '#'
QUOTES = {'"', "'"}


def isDigit(c: str) -> bool:
    return '0' <= c <= '9'

def isIdentStart(c: str) -> bool:
    return ('a' <= c <= 'z') or ('A' <= c <= 'Z')

def isIdentChar(c: str) -> bool:
    return c != '' and (c.isalnum() or c == '_')


def commentStart(line: str) -> int:
    """Return the index of the first '#' outside of a string literal.

    Returns len(line) if there is no comment.
    """
    quote = None
    i = 0
    while i < len(line):
        c = line[i]
        if quote:
            if c == '\\': i += 1 # skip the escaped character
            elif c == quote: quote = None
        elif c in QUOTES: quote = c
        elif c == COMMENT: return i
        i += 1
    return len(line)

def testCommentStart():
    assert 5 == commentStart('x = 1# two')
    assert 3 == commentStart('abc')
    assert 8 == commentStart('"a # b" # c')
    assert 7 == commentStart(r"'\'#'  #")


################################
# Scanner
# Reads the characters of a single (already trimmed) line. Returns '' when
# the line is exhausted, the same way a scanner returns 0 at EOF.

class Scanner(object):
    def __init__(self, text: str, line: int):
        self.text = text
        self.line = line
        self.i = 0

    def peek(self) -> str:
        if self.i >= len(self.text): return ''
        return self.text[self.i]

    def next(self) -> str:
        c = self.peek()
        if c: self.i += 1
        return c


class Lexer(object):
    def __init__(self, text: str, noneKeyword: bool = NONE_KEYWORD):
        self.text = text
        self.keywords = {'var': VAR, 'print': PRINT}
        if noneKeyword: self.keywords['none'] = NONE

    def tokenize(self) -> List[Token]:
        out = []
        for lineNo, raw in enumerate(self.text.split('\n'), start=1):
            content = raw[:commentStart(raw)].strip()
            if not content: continue
            self.lexLine(Scanner(content, lineNo), out)
            out.append(EOL)
        log.debug("tokenized %s tokens", len(out))
        return out

    def lexLine(self, sc: Scanner, out: List[Token]):
        while True:
            c = sc.peek()
            if c == '': return

            if c in (' ', '\t'):
                sc.next()
            elif isDigit(c):
                out.append(self.lexNumber(sc))
            elif isIdentStart(c):
                out.append(self.lexName(sc))
            elif c in QUOTES:
                sc.next()
                out.append(Str(self.lexString(sc, c)))
            elif c == '/':
                sc.next()
                if sc.peek() == '/':
                    sc.next()
                    out.append(INT_DIV)
                else:
                    out.append(SLASH)
            elif c in _singleChar:
                sc.next()
                out.append(_singleChar[c])
            else:
                raise UnknownCharacter(c, sc.line)

    def lexNumber(self, sc: Scanner) -> Token:
        num = []
        isFloat = False
        while True:
            c = sc.peek()
            if isDigit(c):
                num.append(sc.next())
            elif c == '.':
                if isFloat:
                    raise InvalidNumber(''.join(num) + '.', sc.line)
                isFloat = True
                num.append(sc.next())
            else:
                break

        text = ''.join(num)
        if isFloat:
            return Float(float(text))
        value = int(text)
        if not fitsI64(value):
            raise InvalidNumber(text, sc.line)
        return Int(value)

    def lexName(self, sc: Scanner) -> Token:
        name = []
        while isIdentChar(sc.peek()):
            name.append(sc.next())
        name = ''.join(name)
        if name in self.keywords:
            return self.keywords[name]
        return Ident(name)

    def lexString(self, sc: Scanner, quote: str) -> str:
        """Lex the rest of a string literal, the opening quote is consumed."""
        out = []
        while True:
            c = sc.next()
            if c == '':
                raise UnterminatedString(sc.line)
            elif c == quote:
                return ''.join(out)
            elif c == '\\':
                e = sc.next()
                if e == '':
                    raise UnterminatedString(sc.line)
                elif e == quote:
                    out.append(e)
                elif e in _escapes:
                    out.append(_escapes[e])
                else:
                    raise InvalidEscape(e, sc.line)
            else:
                out.append(c)


def tokenize(text: str, noneKeyword: bool = NONE_KEYWORD) -> List[Token]:
    return Lexer(text, noneKeyword).tokenize()


def testTokenize_basic():
    result = tokenize('var x = 42\nprint(x)\n')
    assert [
        VAR, Ident('x'), EQ, Int(42), EOL,
        PRINT, LPAREN, Ident('x'), RPAREN, EOL,
    ] == result

def testTokenize_operators():
    result = tokenize('1 + 2 - 3 * 4 / 5 // 6 % 7')
    assert [
        Int(1), PLUS, Int(2), MINUS, Int(3), STAR, Int(4),
        SLASH, Int(5), INT_DIV, Int(6), MOD, Int(7), EOL,
    ] == result

def testTokenize_noneKeyword():
    assert [NONE, EOL] == tokenize('none')
    assert [Ident('none'), EOL] == tokenize('none', noneKeyword=False)
