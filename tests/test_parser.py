import pytest

from pallad.nodes import ExprStmt, Call, unwrapAST
from pallad.parser import Parser, parse, parseSource
from pallad.lexer import TV, tokenize
from pallad.errors import UnexpectedToken, EndOfInput

def parseOne(text):
    [stmt] = parseSource(text)
    return unwrapAST(stmt)

def testPrecedence():
    assert ('print', [(1, '+', (2, '*', 3))]) == parseOne('print(1 + 2 * 3)')
    assert ('print', [((1, '+', 2), '*', 3)]) == parseOne('print((1 + 2) * 3)')
    assert ('var', 'x', (('a', '//', 'b'), '%', 'c')) == parseOne('var x = a // b % c')
    assert ('var', 'x', (('a', '/', 'b'), '-', 'c')) == parseOne('var x = a / b - c')

def testUnaryBindsTighter():
    assert ('var', 'x', ((0, '-', 7), '//', 2)) == parseOne('var x = -7 // 2')
    assert ('var', 'x', (0, '-', (0, '-', 1))) == parseOne('var x = --1')

def testLiterals():
    assert ('print', [None, 1.5, '"s"', 'v']) == parseOne('print(none, 1.5, "s", v)')
    assert ('print', []) == parseOne('print()')

def testStatements():
    stmts = parseSource('var a = 1\n# comment\n\nprint(a)\nvar b = a')
    assert [
        ('var', 'a', 1),
        ('print', ['a']),
        ('var', 'b', 'a'),
    ] == [unwrapAST(s) for s in stmts]
    assert isinstance(stmts[1], ExprStmt)
    assert isinstance(stmts[1].expr, Call)

def testEmpty():
    assert [] == parseSource('')
    assert [] == parseSource('\n# nothing\n')

def testBadStatementStart():
    with pytest.raises(UnexpectedToken) as e:
        parseSource('x = 1')
    assert "Line 1: Expected 'var', 'print', or end of line, got identifier 'x'" \
        == str(e.value)

def testMissingParen():
    with pytest.raises(EndOfInput) as e:
        parse([t for t in tokenize('print(1, 2') if t.variant is not TV.EOL])
    assert "',' or ')'" == e.value.expected

def testMissingParenBeforeEol():
    with pytest.raises(UnexpectedToken) as e:
        parseSource('print(1\nprint(2)')
    assert 'end of line' == e.value.got
    assert 1 == e.value.line

def testTrailingTokens():
    with pytest.raises(UnexpectedToken) as e:
        parseSource('var a = 1\nprint(a) a')
    assert 'end of line' == e.value.expected
    assert 2 == e.value.line

def testMissingName():
    with pytest.raises(UnexpectedToken) as e:
        parseSource('var = 3')
    assert 'identifier' == e.value.expected
    assert "'='" == e.value.got

def testMissingExpr():
    with pytest.raises(UnexpectedToken) as e:
        parseSource('var x = )')
    assert "')'" == e.value.got

def testUnwrapAST():
    from pallad.nodes import Binary, BinOp, IntLit, FloatLit, Var, Let, NoneLit
    node = Binary(IntLit(1), BinOp.ADD, Binary(Var('x'), BinOp.MUL, FloatLit(2.5)))
    assert (1, '+', ('x', '*', 2.5)) == unwrapAST(node)
    assert ('var', 'y', None) == unwrapAST(Let('y', NoneLit()))
