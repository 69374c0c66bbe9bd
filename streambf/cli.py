#!/usr/bin/env python3
"""
Command-line front end: open the program and I/O streams, run, and turn the
terminal status into a message and an exit code.
"""

import argparse
import sys
from typing import List, Optional

from streambf import __version__
from streambf.brainfuck import BrainfuckError, Status
from streambf.brainfuck_debugger import format_tape
from streambf.core.bf_runner import execute
from streambf.core.settings import load_config

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

STATUS_MESSAGES = {cls.status: cls.message for cls in BrainfuckError.__subclasses__()}


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="streambf",
                                 description="A bulletproof interpreter for Brainfuck.")
    ap.add_argument("program", help="Brainfuck source file, or - to read it from stdin")
    ap.add_argument("-i", "--input", default=None, help="Read , input from this file instead of stdin")
    ap.add_argument("-o", "--output", default=None, help="Write . output to this file instead of stdout")
    ap.add_argument("--config", default=None, help="JSON or YAML file with interpreter settings")
    ap.add_argument("--tape-size", type=int, default=None, help="Initial number of tape cells")
    ap.add_argument("--tape-limit", type=int, default=None, help="Maximum number of tape cells")
    ap.add_argument("--stack-limit", type=int, default=None, help="Maximum number of open brackets")
    ap.add_argument("--debug", action="store_true", default=None, help="Dump the tape to stderr on #")
    ap.add_argument("--dump", action="store_true", help="Dump the tape to stderr when the run ends")
    ap.add_argument("--stats", action="store_true", help="Print step and I/O counters to stderr")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return ap


def error(msg: str) -> int:
    print(f"ERROR: {msg}", file=sys.stderr)
    return EXIT_FAILURE


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        cfg = load_config(args.config, {
            "initial_tape_size": args.tape_size,
            "tape_limit": args.tape_limit,
            "stack_limit": args.stack_limit,
            "debug": args.debug,
        })
    except (OSError, ValueError) as e:
        return error(f"Invalid configuration: {e}")

    opened = []
    try:
        try:
            if args.program == "-":
                program = sys.stdin.buffer
            else:
                program = open(args.program, 'rb')
                opened.append(program)
        except OSError:
            return error("Could not open file.")
        try:
            stdin = open(args.input, 'rb') if args.input else sys.stdin.buffer
            if args.input:
                opened.append(stdin)
            stdout = open(args.output, 'wb') if args.output else sys.stdout.buffer
            if args.output:
                opened.append(stdout)
        except OSError as e:
            return error(f"Could not open {e.filename}.")

        result = execute(program, stdin, stdout, cfg, debug_out=sys.stderr)
        stdout.flush()
    finally:
        for f in opened:
            f.close()

    if args.dump and result.tape is not None:
        print(format_tape(result.tape, cfg.dump_width, label="FINAL TAPE"), file=sys.stderr)
    if args.stats:
        print(f"Steps: {result.steps}  Input reads: {result.input_reads}  "
              f"Output writes: {result.output_writes}", file=sys.stderr)

    if result.status is not Status.OK:
        return error(STATUS_MESSAGES[result.status])
    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
