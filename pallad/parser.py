################################
# Parser
# The parser implements the syntax defined in grammar/pallad.peg, which is
# structured (ordered) such that it can be transparently implemented by a
# recursive-descent style parser.
#
# The parser consumes the tokens from the lexer and converts them into AST
# nodes. We implement the "least complicated" expressions first and work our
# way up. Each precedence level parses one operand of the next level and then
# folds any operators of its own level into left-associative Binary nodes.
#
# There is no error recovery: the first problem raises UnexpectedToken or
# EndOfInput with the line the parser is on.

from .imports import *
from .errors import UnexpectedToken, EndOfInput
from .lexer import Token, TV, tokenize
from .nodes import *

STMT_START = "'var', 'print', or end of line"
ATOM = "integer, float, string, none, variable, or '('"

_additive = {TV.PLUS: BinOp.ADD, TV.MINUS: BinOp.SUB}
_multiplicative = {
    TV.STAR: BinOp.MUL, TV.SLASH: BinOp.DIV,
    TV.INT_DIV: BinOp.INT_DIV, TV.MOD: BinOp.MOD,
}


class Parser(object):
    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0
        self.line = 1

    def peek(self) -> Token:
        """The current token, None at the end of input."""
        if self.pos >= len(self.tokens): return None
        return self.tokens[self.pos]

    def pop(self) -> Token:
        tok = self.peek()
        if tok is None: return None
        if tok.variant is TV.EOL: self.line += 1
        self.pos += 1
        return tok

    def unexpected(self, expected: str):
        tok = self.peek()
        if tok is None:
            return EndOfInput(expected, self.line)
        return UnexpectedToken(tok.describe(), expected, self.line)

    def expect(self, variant: TV, expected: str) -> Token:
        tok = self.peek()
        if tok is None or tok.variant is not variant:
            raise self.unexpected(expected)
        return self.pop()

    # Grammar: file = (stmt? EOL)*
    def parse(self) -> List[Stmt]:
        out = []
        while self.peek() is not None:
            variant = self.peek().variant
            if variant is TV.EOL:
                self.pop()
                continue
            elif variant is TV.VAR:
                out.append(self.parseLet())
            elif variant is TV.PRINT:
                out.append(self.parsePrint())
            else:
                raise self.unexpected(STMT_START)

            # a statement runs to the end of its line
            tok = self.peek()
            if tok is not None and tok.variant is not TV.EOL:
                raise self.unexpected("end of line")
        return out

    # Grammar: let = "var" IDENT "=" expr
    def parseLet(self) -> Let:
        assert self.pop().variant is TV.VAR
        name = self.expect(TV.IDENT, "identifier").value
        self.expect(TV.EQ, "'='")
        return Let(name, self.parseExpr())

    # Grammar: print = "print" "(" (expr ("," expr)*)? ")"
    def parsePrint(self) -> ExprStmt:
        assert self.pop().variant is TV.PRINT
        self.expect(TV.LPAREN, "'('")
        args = []
        tok = self.peek()
        if tok is not None and tok.variant is TV.RPAREN:
            self.pop()
            return ExprStmt(Call('print', args))

        while True:
            args.append(self.parseExpr())
            tok = self.peek()
            if tok is not None and tok.variant is TV.COMMA:
                self.pop()
            elif tok is not None and tok.variant is TV.RPAREN:
                self.pop()
                return ExprStmt(Call('print', args))
            else:
                raise self.unexpected("',' or ')'")

    # Grammar: expr = additive
    def parseExpr(self) -> Expr:
        return self.parseAdditive()

    def _parseLeftAssoc(self, ops: Dict[TV, BinOp], parseOperand) -> Expr:
        left = parseOperand()
        while True:
            tok = self.peek()
            if tok is None or tok.variant not in ops:
                return left
            self.pop()
            left = Binary(left, ops[tok.variant], parseOperand())

    # Grammar: additive = multiplicative (("+" / "-") multiplicative)*
    def parseAdditive(self) -> Expr:
        return self._parseLeftAssoc(_additive, self.parseMultiplicative)

    # Grammar: multiplicative = unary (("*" / "//" / "/" / "%") unary)*
    def parseMultiplicative(self) -> Expr:
        return self._parseLeftAssoc(_multiplicative, self.parseUnary)

    # Grammar: unary = "-" unary / atom
    def parseUnary(self) -> Expr:
        tok = self.peek()
        if tok is not None and tok.variant is TV.MINUS:
            self.pop()
            return Binary(IntLit(0), BinOp.SUB, self.parseUnary())
        return self.parseAtom()

    # Grammar: atom = INT / FLOAT / STR / "none" / IDENT / "(" expr ")"
    def parseAtom(self) -> Expr:
        tok = self.peek()
        if tok is None: raise self.unexpected(ATOM)

        variant = tok.variant
        if variant is TV.INT:       node = IntLit(tok.value)
        elif variant is TV.FLOAT:   node = FloatLit(tok.value)
        elif variant is TV.STR:     node = StrLit(tok.value)
        elif variant is TV.NONE:    node = NoneLit()
        elif variant is TV.IDENT:   node = Var(tok.value)
        elif variant is TV.LPAREN:
            self.pop()
            node = self.parseExpr()
            self.expect(TV.RPAREN, "')'")
            return node
        else:
            raise self.unexpected(ATOM)

        self.pop()
        return node


def parse(tokens: List[Token]) -> List[Stmt]:
    return Parser(tokens).parse()

def parseSource(text: str) -> List[Stmt]:
    """Tokenize then parse, used in testing."""
    return parse(tokenize(text))


def testParseExpr():
    [stmt] = parseSource('print(1 + 2 * 3)')
    assert ('print', [(1, '+', (2, '*', 3))]) == unwrapAST(stmt)
    [stmt] = parseSource('var x = 1 - 2 - 3')
    assert ('var', 'x', ((1, '-', 2), '-', 3)) == unwrapAST(stmt)

def testParseUnary():
    [stmt] = parseSource('var x = -y * 2')
    assert ('var', 'x', ((0, '-', 'y'), '*', 2)) == unwrapAST(stmt)

def testParseLines():
    p = Parser(tokenize('\nvar a = 1\n\nprint(a)\n'))
    stmts = p.parse()
    assert 2 == len(stmts)
    assert 3 == p.line
