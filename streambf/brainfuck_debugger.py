#!/usr/bin/env python3
"""
Brainfuck Tape Dump

Formats the state of the memory tape for humans: a window of cells around the
pointer, a marker under the current cell and the cell addresses, plus the
bracket stack depth and whether a loop is being skipped.

BrainfuckDebugger extends the stream interpreter with a ninth instruction, #,
which prints that dump while the program runs.
"""

import sys
from typing import BinaryIO, Optional, TextIO

from streambf.brainfuck import BracketStack, BrainfuckInterpreter, Tape

DEBUG_COMMAND = b'#'
DEFAULT_DUMP_WIDTH = 10


def tape_window(tape: Tape, width: int = DEFAULT_DUMP_WIDTH):
    """Range of addresses to show: `width` cells, pointer centred where possible."""
    start = max(0, tape.cursor - width // 2)
    end = min(len(tape), start + width)

    # Adjust start if we're near the end
    if end - start < width:
        start = max(0, end - width)
    return range(start, end)


def format_tape(tape: Tape, width: int = DEFAULT_DUMP_WIDTH,
                stack: Optional[BracketStack] = None, label: Optional[str] = None) -> str:
    lines = []
    if label:
        lines.append(f"{label}:")

    memory_vals = []
    memory_ptrs = []
    memory_addrs = []

    for i in tape_window(tape, width):
        memory_vals.append(f"{int(tape.cells[i]):3d}")
        memory_ptrs.append(" ^ " if i == tape.cursor else "   ")
        memory_addrs.append(f"{i:3d}")

    lines.append("Memory:   [" + "|".join(memory_vals) + "]")
    lines.append("Pointer:   " + " ".join(memory_ptrs))
    lines.append("Address:   " + " ".join(memory_addrs))
    lines.append(f"Tape:     {len(tape)} cells, pointer at {tape.cursor}")
    if stack is not None:
        lines.append(f"Brackets: {len(stack)} open" + (" (skipping)" if stack.skipping else ""))
    return "\n".join(lines)


class BrainfuckDebugger(BrainfuckInterpreter):
    """Stream interpreter that dumps the tape whenever it executes #."""

    def __init__(self, stdin: Optional[BinaryIO] = None, stdout: Optional[BinaryIO] = None,
                 debug_out: Optional[TextIO] = None, show_memory_range: int = DEFAULT_DUMP_WIDTH,
                 **kwargs):
        super().__init__(stdin, stdout, **kwargs)
        self.debug_out = debug_out
        self.show_memory_range = show_memory_range
        self.dump_count = 0

    def _execute(self, cmd: bytes, position: int, stream: BinaryIO):
        if cmd == DEBUG_COMMAND:
            if not self.stack.skipping:
                self.dump_count += 1
                self._show_state(f"DUMP {self.dump_count} (step {self.step_count})")
            return
        super()._execute(cmd, position, stream)

    def _show_state(self, label: str):
        # Flush program output first so the dump lands after it on a shared terminal.
        if self.stdout is not None and hasattr(self.stdout, "flush"):
            self.stdout.flush()
        out = self.debug_out if self.debug_out is not None else sys.stderr
        print(format_tape(self.tape, self.show_memory_range, self.stack, label), file=out)
