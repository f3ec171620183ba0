# These are imported by every module
from pdb import set_trace as dbg

from typing import Any
from typing import Dict
from typing import List
import math

from dataclasses import dataclass
import enum
import io
import logging
import sys

# The VM works on fixed width numbers. Python ints are unbounded so the
# ctypes types are used to narrow (and check) values the way a 64bit machine
# would store them.
from ctypes import c_int64 as I64

I64_MIN = -2**63
I64_MAX = 2**63 - 1

KiB = 2**10
MiB = 2**20
GiB = 2**30


def wrapI64(value: int) -> int:
    """Narrow an unbounded int to a signed 64bit int (two's complement)."""
    return I64(value).value

def fitsI64(value: int) -> bool:
    return I64_MIN <= value <= I64_MAX
