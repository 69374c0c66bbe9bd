#!/usr/bin/env python3
"""
Brainfuck Stream Interpreter

Brainfuck is an esoteric programming language with only 8 commands:
    >   Move the pointer to the right
    <   Move the pointer to the left
    +   Increment the memory cell at the pointer
    -   Decrement the memory cell at the pointer
    .   Output the byte in the cell at the pointer
    ,   Input a byte and store it in the cell at the pointer (0 on EOF)
    [   Skip past the matching ] if the cell at the pointer is 0
    ]   Jump back to the matching [ if the cell at the pointer is nonzero

All other characters are treated as comments and ignored.

Programs are executed straight from a seekable byte stream. Nothing is parsed
up front and there is no jump table: every [ pushes the stream position it was
read from, and ] seeks back to that position when the current cell is nonzero.
A loop whose header tests zero is skipped by scanning forward with every side
effect suppressed until its matching ] is read.

The tape is unbounded to the right (it doubles when the pointer reaches its
end) and hard-bounded on the left: moving left from cell 0 is an error.
"""

import io
import sys
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO, List, Optional

import numpy as np

INITIAL_TAPE_SIZE = 1000
CELL_VALUE_EOF = 0  # What the current cell is set to on EOF.

COMMANDS = b'><+-.,[]'


class Status(Enum):
    """Terminal status of a run."""
    OK = "ok"
    ALLOCATION = "allocation"
    LEFT_BOUND = "left_bound"
    NESTING = "nesting"


class BrainfuckError(Exception):
    """Base class for errors that abort a run."""
    status: Optional[Status] = None  # set by each concrete error
    message = "Brainfuck execution failed."

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail or self.message)
        self.detail = detail


class AllocationError(BrainfuckError):
    status = Status.ALLOCATION
    message = "Error while allocating memory."


class LeftBoundError(BrainfuckError):
    status = Status.LEFT_BOUND
    message = "The program went past the start of the tape."


class NestingError(BrainfuckError):
    status = Status.NESTING
    message = "Improperly nested jumps [ and ]."


class Tape:
    """Left-bounded tape of unsigned byte cells that doubles on demand."""

    def __init__(self, size: int = INITIAL_TAPE_SIZE, limit: Optional[int] = None):
        if size < 1:
            raise ValueError("tape size must be at least 1")
        if limit is not None and limit < size:
            raise ValueError("tape limit must not be smaller than the tape size")
        self.cells = np.zeros(size, dtype=np.uint8)
        self.cursor = 0
        self.limit = limit

    def __len__(self):
        return len(self.cells)

    def move_right(self):
        if self.cursor == len(self.cells) - 1:
            self._grow()
        self.cursor += 1

    def move_left(self):
        if self.cursor == 0:
            raise LeftBoundError("Move left at cell 0")
        self.cursor -= 1

    def increment(self):
        self.cells[self.cursor] = (int(self.cells[self.cursor]) + 1) % 256

    def decrement(self):
        self.cells[self.cursor] = (int(self.cells[self.cursor]) - 1) % 256

    def read_cell(self) -> int:
        return int(self.cells[self.cursor])

    def write_cell(self, value: int):
        self.cells[self.cursor] = value % 256

    def _grow(self):
        size = len(self.cells)
        new_size = size * 2
        if self.limit is not None:
            new_size = min(new_size, self.limit)
            if new_size <= size:
                raise AllocationError(f"Tape limit of {self.limit} cells reached")
        try:
            grown = np.zeros(new_size, dtype=np.uint8)
        except MemoryError as e:
            raise AllocationError(f"Could not grow tape to {new_size} cells") from e
        grown[:size] = self.cells
        self.cells = grown


@dataclass
class Frame:
    """An open bracket: where it was read from, and whether it started a skip."""
    position: int
    skip: bool = False


class BracketStack:
    """
    Stream positions of the [ instructions that are still open.

    At most one frame is marked as the skip frame. While it is on the stack the
    interpreter is skipping: brackets are still pushed and popped so nesting
    stays balanced, but nothing else has any effect.
    """

    def __init__(self, limit: Optional[int] = None):
        self.frames: List[Frame] = []
        self.limit = limit
        self._skipping = False

    def __len__(self):
        return len(self.frames)

    @property
    def skipping(self) -> bool:
        return self._skipping

    def push(self, position: int) -> Frame:
        if self.limit is not None and len(self.frames) >= self.limit:
            raise AllocationError(f"Bracket stack limit of {self.limit} reached")
        frame = Frame(position)
        try:
            self.frames.append(frame)
        except MemoryError as e:
            raise AllocationError("Could not grow bracket stack") from e
        return frame

    def open_bracket(self, position: int, cell: int):
        """Push the [ read at `position`; start skipping if `cell` is zero."""
        frame = self.push(position)
        if self._skipping:
            return
        if cell == 0:
            frame.skip = True
            self._skipping = True

    def close_bracket(self, cell: int) -> Optional[int]:
        """Pop the matching [. Returns the position to jump back to, or None to fall through."""
        if not self.frames:
            raise NestingError("Unmatched ']'")
        frame = self.frames.pop()
        if frame.skip:
            self._skipping = False
        if cell != 0:
            return frame.position
        return None


def seekable_stream(program) -> BinaryIO:
    """Return a binary stream that supports tell()/seek() for the given program source."""
    if isinstance(program, (bytes, bytearray)):
        return io.BytesIO(bytes(program))
    if isinstance(program, str):
        return io.BytesIO(program.encode('utf-8'))
    if isinstance(program, io.TextIOBase):
        raise TypeError("program stream must be opened in binary mode")
    if program.seekable():
        return program
    # Pipes and terminals can't seek back, so buffer them.
    return io.BytesIO(program.read())


class BrainfuckInterpreter:
    def __init__(self, stdin: Optional[BinaryIO] = None, stdout: Optional[BinaryIO] = None,
                 tape_size: int = INITIAL_TAPE_SIZE, tape_limit: Optional[int] = None,
                 stack_limit: Optional[int] = None):
        self.stdin = stdin
        self.stdout = stdout
        self.tape_size = tape_size
        self.tape_limit = tape_limit
        self.stack_limit = stack_limit
        self.tape: Optional[Tape] = None
        self.stack: Optional[BracketStack] = None
        self.step_count = 0
        self.input_reads = 0
        self.output_writes = 0

    def run(self, program) -> Status:
        """
        Execute a program from a binary stream (or bytes/str) until it is exhausted.

        Raises a BrainfuckError subclass on the first failure. Output written
        before the failure stays written.
        """
        stream = seekable_stream(program)
        if self.stdin is None:
            self.stdin = sys.stdin.buffer
        if self.stdout is None:
            self.stdout = sys.stdout.buffer

        self.tape = Tape(self.tape_size, self.tape_limit)
        self.stack = BracketStack(self.stack_limit)
        self.step_count = 0
        self.input_reads = 0
        self.output_writes = 0

        read = stream.read
        tell = stream.tell

        try:
            # Position of the next byte, i.e. where a [ about to be read sits.
            position = tell()
            while True:
                cmd = read(1)
                if not cmd:
                    break
                self._execute(cmd, position, stream)
                position = tell()

            if self.stack:
                raise NestingError(f"{len(self.stack)} unclosed '['")
        finally:
            self.stack = None

        return Status.OK

    def _execute(self, cmd: bytes, position: int, stream: BinaryIO):
        if cmd not in COMMANDS:
            return

        stack = self.stack
        tape = self.tape

        if cmd == b'[':
            if not stack.skipping:
                self.step_count += 1
            stack.open_bracket(position, tape.read_cell())
            return

        if cmd == b']':
            if not stack.skipping:
                self.step_count += 1
            target = stack.close_bracket(tape.read_cell())
            if target is not None:
                stream.seek(target)
            return

        if stack.skipping:
            return

        self.step_count += 1

        if cmd == b'>':
            tape.move_right()
        elif cmd == b'<':
            tape.move_left()
        elif cmd == b'+':
            tape.increment()
        elif cmd == b'-':
            tape.decrement()
        elif cmd == b'.':
            self.stdout.write(bytes((tape.read_cell(),)))
            self.output_writes += 1
        elif cmd == b',':
            # A prompt written by . must be visible before we block on input.
            self.stdout.flush()
            data = self.stdin.read(1)
            if data:
                tape.write_cell(data[0])
                self.input_reads += 1
            else:
                tape.write_cell(CELL_VALUE_EOF)
