# AST Nodes
#
# Pure data produced by the parser and consumed by the compiler. A program is
# a list of statements, executed in order.

from .imports import *

class BinOp(enum.Enum):
    ADD = enum.auto()
    SUB = enum.auto()
    MUL = enum.auto()
    DIV = enum.auto()
    INT_DIV = enum.auto()
    MOD = enum.auto()


class ASTNode:
    """The base AST node type."""

class Expr(ASTNode): pass
class Stmt(ASTNode): pass

@dataclass
class NoneLit(Expr):
    pass

@dataclass
class IntLit(Expr):
    value: int

@dataclass
class FloatLit(Expr):
    value: float

@dataclass
class StrLit(Expr):
    value: str

@dataclass
class Var(Expr):
    name: str

@dataclass
class Binary(Expr):
    left: Expr
    op: BinOp
    right: Expr

@dataclass
class Call(Expr):
    name: str
    args: List[Expr]

@dataclass
class Let(Stmt):
    name: str
    expr: Expr

@dataclass
class ExprStmt(Stmt):
    expr: Expr


_opToStr = {
    BinOp.ADD: '+', BinOp.SUB: '-', BinOp.MUL: '*',
    BinOp.DIV: '/', BinOp.INT_DIV: '//', BinOp.MOD: '%',
}

# Test Helpers
def unwrapAST(node: ASTNode) -> Any:
    """Takes a node and "unwraps" it into nested python values that we can
    easily write assertions for.

    Binary nodes become (left, op, right) tuples, strings keep their quotes
    so they can be told apart from variables.
    """
    if isinstance(node, NoneLit): return None
    elif isinstance(node, (IntLit, FloatLit)): return node.value
    elif isinstance(node, StrLit): return f'"{node.value}"'
    elif isinstance(node, Var): return node.name
    elif isinstance(node, Binary):
        return (unwrapAST(node.left), _opToStr[node.op], unwrapAST(node.right))
    elif isinstance(node, Call):
        return (node.name, [unwrapAST(a) for a in node.args])
    elif isinstance(node, Let):
        return ('var', node.name, unwrapAST(node.expr))
    elif isinstance(node, ExprStmt):
        return unwrapAST(node.expr)
    raise TypeError(node)
