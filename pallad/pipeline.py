# Running source text end to end.
#
# Every stage raises its own PalladError subclass. runSource is the one place
# they are caught: it turns the first failure into an Outcome so a caller
# (the cli, tests) can inspect which stage failed without a try block.

from .imports import *
from .errors import PalladError
from .lexer import tokenize, NONE_KEYWORD
from .parser import parse
from .compiler import compile
from .vm import Vm, STR_MAX_BYTES

log = logging.getLogger(__name__)

# How each stage is named when reporting an error.
STAGE_LABELS = {
    'read': 'Read',
    'tokenize': 'Tokenizer',
    'parse': 'Parse',
    'compile': 'Compile',
    'run': 'Runtime',
}


@dataclass
class Outcome:
    stage: str = None              # the failing stage, None on success
    error: PalladError = None
    output: str = ''               # everything printed before stopping

    @property
    def ok(self) -> bool:
        return self.error is None

    def describe(self) -> str:
        """The error line the cli reports."""
        if self.ok: return ''
        return f"{STAGE_LABELS[self.stage]} error: {self.error}"


class Capture(io.StringIO):
    """Keeps everything written, passing each write on to `echo` as it
    happens."""
    def __init__(self, echo=None):
        super().__init__()
        self.echo = echo

    def write(self, s):
        if self.echo is not None: self.echo.write(s)
        return super().write(s)


def compileSource(text: str, noneKeyword: bool = NONE_KEYWORD):
    """Run every stage up to (not including) the vm."""
    tokens = tokenize(text, noneKeyword)
    log.debug("parse %s tokens", len(tokens))
    stmts = parse(tokens)
    log.debug("compile %s statements", len(stmts))
    return compile(stmts)


def runSource(text: str, out=None, noneKeyword: bool = NONE_KEYWORD,
              maxStrBytes: int = STR_MAX_BYTES) -> Outcome:
    """Tokenize, parse, compile and run text.

    Output of print goes to `out` as it is printed if given. It is always
    captured into Outcome.output as well.
    """
    captured = Capture(out)
    try:
        program = compileSource(text, noneKeyword)
        log.debug("run %s instructions", len(program))
        Vm(captured, maxStrBytes).run(program)
        outcome = Outcome(output=captured.getvalue())
    except PalladError as e:
        log.debug("%s failed: %s", e.stage, e)
        outcome = Outcome(e.stage, e, captured.getvalue())
    return outcome


def testRunSource():
    outcome = runSource('var x = 2\nprint(x * 3, "done")\n')
    assert outcome.ok
    assert '6\ndone\n' == outcome.output

def testRunSourceError():
    outcome = runSource('print(1)\nprint(y)')
    assert 'run' == outcome.stage
    assert '1\n' == outcome.output
    assert 'Runtime error: Undefined variable: y' == outcome.describe()
