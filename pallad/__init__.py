import logging

from .errors import PalladError
from .lexer import tokenize
from .parser import parse
from .compiler import compile
from .vm import Vm
from .pipeline import Outcome, runSource

logging.getLogger(__name__).addHandler(logging.NullHandler())
