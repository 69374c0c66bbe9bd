from dataclasses import dataclass
from typing import BinaryIO, Optional, TextIO, Union
import io

from streambf.brainfuck import BrainfuckError, BrainfuckInterpreter, Status, Tape
from streambf.brainfuck_debugger import BrainfuckDebugger
from streambf.core.settings import InterpreterConfig


@dataclass
class RunResult:
    output: bytes
    status: Status
    error: Optional[str] = None
    steps: int = 0
    input_reads: int = 0
    output_writes: int = 0
    tape: Optional[Tape] = None

    @property
    def ok(self) -> bool:
        return self.status is Status.OK

    @property
    def text(self) -> str:
        """Output as text, one character per byte."""
        return self.output.decode('latin-1')


def make_interpreter(config: InterpreterConfig, stdin: Optional[BinaryIO] = None,
                     stdout: Optional[BinaryIO] = None,
                     debug_out: Optional[TextIO] = None) -> BrainfuckInterpreter:
    kwargs = dict(tape_size=config.initial_tape_size, tape_limit=config.tape_limit,
                  stack_limit=config.stack_limit)
    if config.debug:
        return BrainfuckDebugger(stdin, stdout, debug_out=debug_out,
                                 show_memory_range=config.dump_width, **kwargs)
    return BrainfuckInterpreter(stdin, stdout, **kwargs)


def execute(program, stdin: BinaryIO, stdout: BinaryIO, config: Optional[InterpreterConfig] = None,
            debug_out: Optional[TextIO] = None) -> RunResult:
    """Run `program` against the given sinks. The terminal status of a failed run is returned, not raised."""
    itp = make_interpreter(config or InterpreterConfig(), stdin, stdout, debug_out)
    status, error = Status.OK, None
    try:
        itp.run(program)
    except BrainfuckError as e:
        if e.status is None:
            raise
        status, error = e.status, str(e)
    output = stdout.getvalue() if isinstance(stdout, io.BytesIO) else b''
    return RunResult(output, status, error, itp.step_count, itp.input_reads,
                     itp.output_writes, itp.tape)


def run_program(code: Union[str, bytes], input_data: Union[str, bytes] = b'',
                config: Optional[InterpreterConfig] = None,
                debug_out: Optional[TextIO] = None) -> RunResult:
    """Execute BF code held in memory against in-memory input, capturing the output."""
    if isinstance(input_data, str):
        input_data = input_data.encode('latin-1')
    return execute(code, io.BytesIO(input_data), io.BytesIO(), config, debug_out)


def run_file(path: str, stdin: BinaryIO, stdout: BinaryIO,
             config: Optional[InterpreterConfig] = None,
             debug_out: Optional[TextIO] = None) -> RunResult:
    with open(path, 'rb') as f:
        return execute(f, stdin, stdout, config, debug_out)
