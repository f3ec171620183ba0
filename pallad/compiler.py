# Lowering: AST -> IR
#
# Expressions are lowered postorder (operands before their operator) so every
# expression leaves exactly one value on the stack. Statements consume that
# value: `var` stores it, a call statement hands it to the builtin and any
# other expression statement pops it.
#
# Lowering cannot fail on an AST the parser produced. errors.CompileError
# only exists so that callers handle this stage like every other one.

from .imports import *
from .nodes import *
from .ir import Op, Instr, renderIr

log = logging.getLogger(__name__)

_binOps = {
    BinOp.ADD: Op.ADD,
    BinOp.SUB: Op.SUB,
    BinOp.MUL: Op.MUL,
    BinOp.DIV: Op.DIV,
    BinOp.INT_DIV: Op.INT_DIV,
    BinOp.MOD: Op.MOD,
}


def compileExpr(expr: Expr, out: List[Instr]):
    if isinstance(expr, NoneLit):    out.append(Instr(Op.LOAD_NONE))
    elif isinstance(expr, IntLit):   out.append(Instr(Op.LOAD_INT, expr.value))
    elif isinstance(expr, FloatLit): out.append(Instr(Op.LOAD_FLOAT, expr.value))
    elif isinstance(expr, StrLit):   out.append(Instr(Op.LOAD_STR, expr.value))
    elif isinstance(expr, Var):      out.append(Instr(Op.LOAD_VAR, expr.name))
    elif isinstance(expr, Binary):
        compileExpr(expr.left, out)
        compileExpr(expr.right, out)
        out.append(Instr(_binOps[expr.op]))
    elif isinstance(expr, Call):
        compileCall(expr, out)
    else:
        raise TypeError(expr)

def compileCall(call: Call, out: List[Instr]):
    for arg in call.args:
        compileExpr(arg, out)
    out.append(Instr(Op.CALL_BUILTIN, call.name, len(call.args)))


def compileStmt(stmt: Stmt, out: List[Instr]):
    if isinstance(stmt, Let):
        compileExpr(stmt.expr, out)
        out.append(Instr(Op.STORE_VAR, stmt.name))
    elif isinstance(stmt, ExprStmt) and isinstance(stmt.expr, Call):
        compileCall(stmt.expr, out)
    elif isinstance(stmt, ExprStmt):
        compileExpr(stmt.expr, out)
        out.append(Instr(Op.POP))
    else:
        raise TypeError(stmt)


def compile(stmts: List[Stmt]) -> List[Instr]:
    out = []
    for stmt in stmts:
        compileStmt(stmt, out)
    log.debug("compiled %s statements into %s instructions", len(stmts), len(out))
    return out


def testCompileLet():
    program = compile([Let('x', Binary(IntLit(1), BinOp.ADD, FloatLit(2.5)))])
    assert [
        Instr(Op.LOAD_INT, 1),
        Instr(Op.LOAD_FLOAT, 2.5),
        Instr(Op.ADD),
        Instr(Op.STORE_VAR, 'x'),
    ] == program

def testCompilePrint():
    program = compile([ExprStmt(Call('print', [StrLit('a'), Var('x')]))])
    assert "load_str 'a'\nload_var x\ncall_builtin print 2" == renderIr(program)

def testCompileExprStmt():
    assert [Instr(Op.LOAD_NONE), Instr(Op.POP)] == compile([ExprStmt(NoneLit())])
