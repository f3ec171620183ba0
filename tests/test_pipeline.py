import io
import os
import random

import pytest

from pallad.imports import I64_MAX
from pallad.compiler import compile
from pallad.errors import (
    DivisionByZero, NegativeRepeat, UndefinedVariable, UnterminatedString,
)
from pallad.ir import renderIr
from pallad.lexer import tokenize, Ident, Int, VAR, PRINT, EQ, LPAREN, RPAREN, EOL
from pallad.parser import parseSource
from pallad.pipeline import runSource, compileSource
from pallad.vm import Vm
from pallad.__main__ import main

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
EXAMPLES = os.path.join(ROOT, 'examples')

# update/modify for randomized round trip tests
ROUND_TRIP_SEED = "the answer is always 42"
ROUND_TRIP_LOOPS = 200

def readf(path):
    with open(path, encoding='utf-8') as f:
        return f.read()

def output(text):
    outcome = runSource(text)
    assert outcome.ok, outcome.describe()
    return outcome.output

def failure(text):
    outcome = runSource(text)
    assert not outcome.ok
    return outcome


def testTokenizeProgram():
    assert [
        VAR, Ident('x'), EQ, Int(42), EOL,
        PRINT, LPAREN, Ident('x'), RPAREN, EOL,
    ] == tokenize('var x = 42\nprint(x)\n')

def testArithmetic():
    assert '3.5\n' == output('print(1 + 2.5)')
    assert 'a1\n' == output('print("a" + 1)')
    assert 'ababab\n' == output('print("ab" * 3)')
    assert '3\n-4\n' == output('print(7 // 2, -7 // 2)')

def testDivisionByZero():
    outcome = failure('print(5 / 0)')
    assert 'run' == outcome.stage
    assert isinstance(outcome.error, DivisionByZero)
    assert 'divide' == outcome.error.operation
    assert 'mod' == failure('print(5 % 0)').error.operation

def testNegativeRepeat():
    assert isinstance(failure('print("ab" * -1)').error, NegativeRepeat)

def testUndefinedVariable():
    outcome = failure('var x = 1\nprint(y)')
    assert isinstance(outcome.error, UndefinedVariable)
    assert 'y' == outcome.error.name

def testUnterminatedString():
    outcome = failure('print("abc')
    assert 'tokenize' == outcome.stage
    assert isinstance(outcome.error, UnterminatedString)
    assert 1 == outcome.error.line
    assert 'Tokenizer error: Line 1: Unterminated string' == outcome.describe()

def testFirstErrorWins():
    # the lexer fails before the parser ever sees the bad statement
    outcome = failure('x = 1\nprint("abc')
    assert 'tokenize' == outcome.stage
    # nothing runs when a later line does not parse
    outcome = failure('print(1)\nprint(1')
    assert 'parse' == outcome.stage
    assert '' == outcome.output

def testOutputBeforeRuntimeError():
    outcome = failure('print("before")\nvar z = "a" - 1\nprint("after")')
    assert 'before\n' == outcome.output
    assert 'Runtime error: Type mismatch: cannot subtract String and Integer' \
        == outcome.describe()

def testNoneKeyword():
    assert '<none>\n' == output('print(none)')
    outcome = runSource('print(none)', noneKeyword=False)
    assert isinstance(outcome.error, UndefinedVariable)
    assert '5\n' == runSource('var none = 5\nprint(none)', noneKeyword=False).output

def testOutTarget():
    out = io.StringIO()
    outcome = runSource('print(1, 2)', out=out)
    assert '1\n2\n' == out.getvalue() == outcome.output

def testOutputIsStreamed():
    writes = []
    class Recorder:
        def write(self, s):
            writes.append(s)
    outcome = runSource('print("a")\nprint("b")\nprint(1 / 0)', out=Recorder())
    assert 'divide' == outcome.error.operation
    assert 'a\nb\n' == ''.join(writes)
    # each print reaches `out` by itself, not as one copy after the run
    assert 'a' == writes[0]

def testFloatsPrintInDecimal():
    assert '3\n100000000000000000000\n0.00001\na2\n' == output(
        'print(3.0, 10.0 * 10000000000000000000.0, 0.00001, "a" + 2.0)')

def testRemainderFollowsDividend():
    assert '-1\n1\n-1.5\n' == output('print(-7 % 2, 7 % -2, -7.5 % 2)')

def testMaxStrBytes():
    outcome = runSource('print("abc" * 4)', maxStrBytes=10)
    assert 'Runtime error: String repetition is too large' == outcome.describe()

def testIntegerRoundTrip():
    rand = random.Random(ROUND_TRIP_SEED)
    values = [0, 1, -1, I64_MAX, -I64_MAX]
    values.extend(rand.randint(-I64_MAX, I64_MAX) for _ in range(ROUND_TRIP_LOOPS))
    for n in values:
        assert f'{n}\n' == output(f'print({n})')

def testCompileTwice():
    stmts = parseSource(readf(os.path.join(EXAMPLES, 'example.pd')))
    assert compile(stmts) == compile(stmts)
    assert renderIr(compile(stmts)) == renderIr(compile(stmts))


################################
# Example programs

EXPECTED = {
    'example.pd': [
        'Hello, world!',
        '9', '5', '14',
        '3.5', '3', '1',
        '-4', '-1',
        'ratio: 3.5',
        'ababab',
        '<none>',
    ],
    'strings.pd': [
        'a\tb', "it's", 'line\\break',
        '1 and 2.5',
        '# not a comment',
    ],
    'numbers.pd': [
        '-9223372036854775808',
        '2.5', '2', '1.5',
        '6',
    ],
}

@pytest.mark.parametrize('name', sorted(EXPECTED))
def testExamples(name):
    text = readf(os.path.join(EXAMPLES, name))
    assert EXPECTED[name] == output(text).splitlines()

@pytest.mark.parametrize('name', sorted(EXPECTED))
def testStackBalanced(name):
    vm = Vm(io.StringIO())
    vm.run(compileSource(readf(os.path.join(EXAMPLES, name))))
    assert 0 == len(vm.stack)


################################
# Command line

def testCliRun(capsys):
    assert 0 == main([os.path.join(EXAMPLES, 'numbers.pd')])
    out, err = capsys.readouterr()
    assert '-9223372036854775808\n2.5\n2\n1.5\n6\n' == out
    assert '' == err

def testCliIr(tmp_path, capsys):
    path = tmp_path / 'ir.pd'
    path.write_text('var x = 1\nprint(x + 2)\n')
    assert 0 == main(['--ir', str(path)])
    out, _ = capsys.readouterr()
    assert [
        'load_int 1', 'store_var x',
        'load_var x', 'load_int 2', 'add', 'call_builtin print 1',
    ] == out.splitlines()

def testCliErrors(tmp_path, capsys):
    path = tmp_path / 'bad.pd'
    path.write_text('print(1)\nvar = 2\n')
    assert 1 == main([str(path)])
    out, err = capsys.readouterr()
    assert '' == out
    assert "Parse error: Line 2: Expected identifier, got '='\n" == err

    path.write_text('print(1)\nprint(1 / 0)\n')
    assert 1 == main([str(path)])
    out, err = capsys.readouterr()
    assert '1\n' == out
    assert 'Runtime error: Division by zero at divide operation is not valid\n' == err

    path.write_text('print(1 / 0 /)\n')
    assert 1 == main(['--ir', str(path)])
    assert capsys.readouterr().err.startswith('Parse error: ')

def testCliMissingFile(tmp_path, capsys):
    assert 1 == main([str(tmp_path / 'missing.pd')])
    assert capsys.readouterr().err.startswith('Read error: ')
