from dataclasses import dataclass
from typing import Iterable, Optional, Union

from brainfuck import BrainfuckError, BrainfuckInterpreter
from bf_io import BufferOutput, ScriptedInput
from bf_loader import filter_source
from bf_log import init_logger
from bf_settings import DEFAULT_STEP_LIMIT

logger = init_logger("BF_RUNNER")


@dataclass
class RunResult:
    """Outcome of a bounded run."""
    output: str
    steps: int
    hit_step_limit: bool = False
    error: Optional[BrainfuckError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and not self.hit_step_limit


def run_program(code: Union[str, bytes], input_lines: Iterable[str] = (),
                step_limit: int = DEFAULT_STEP_LIMIT) -> RunResult:
    """Execute BF code for at most step_limit instructions.
    Output is collected in memory; errors are captured in the result.
    """
    out = BufferOutput()
    itp = None
    try:
        itp = BrainfuckInterpreter(filter_source(code), output=out,
                                   input_source=ScriptedInput(input_lines))
        while itp.steps < step_limit and itp.step():
            pass
    except BrainfuckError as e:
        steps = itp.steps if itp is not None else 0
        return RunResult(out.getvalue(), steps, error=e)

    hit = not itp.finished
    if hit:
        logger.warning("Step limit %d reached at position %d", step_limit, itp.instruction_pointer)
    return RunResult(out.getvalue(), itp.steps, hit_step_limit=hit)


def run_once(code: str, x: int, step_limit: int = DEFAULT_STEP_LIMIT) -> Optional[int]:
    """Execute BF code with single byte input, return single byte output.
    Input travels as one text line, so x must be ASCII.
    """
    if not 0 <= x < 128:
        raise ValueError(f"input byte {x} is not ASCII")
    result = run_program(code, [chr(x)], step_limit=step_limit)
    if result.error is not None or not result.output:
        return None
    return ord(result.output[0])
