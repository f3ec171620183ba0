# Command line: python -m pallad [--ir] [-v] [path]

from .imports import *
from .errors import PalladError
from .ir import renderIr
from .pipeline import STAGE_LABELS, compileSource, runSource

import argparse

DEFAULT_SOURCE = 'examples/example.pd'

def readSource(path: str) -> str:
    with open(path, encoding='utf-8') as f:
        return f.read()

def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog='pallad', description="Run a pallad program")
    parser.add_argument("path", nargs="?", default=DEFAULT_SOURCE,
                        help=f"source file (default: {DEFAULT_SOURCE})")
    parser.add_argument("--ir", action="store_true",
                        help="print the compiled program instead of running it")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="log each stage and the instruction trace")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr)

    try:
        text = readSource(args.path)
    except (OSError, UnicodeDecodeError) as e:
        print(f"{STAGE_LABELS['read']} error: {e}", file=sys.stderr)
        return 1

    if args.ir:
        try:
            program = compileSource(text)
        except PalladError as e:
            print(f"{STAGE_LABELS[e.stage]} error: {e}", file=sys.stderr)
            return 1
        if program: print(renderIr(program))
        return 0

    outcome = runSource(text, out=sys.stdout)
    if not outcome.ok:
        print(outcome.describe(), file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
