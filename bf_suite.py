from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from bf_loader import load_program_file
from bf_log import init_logger
from bf_runner import RunResult, run_program
from bf_settings import DEFAULT_STEP_LIMIT

logger = init_logger("BF_SUITE")


@dataclass
class ProgramCase:
    name: str
    code: str
    input: List[str] = field(default_factory=list)
    expect: Optional[str] = None
    expect_error: Optional[str] = None
    expect_step_limit: bool = False
    step_limit: Optional[int] = None


@dataclass
class CaseOutcome:
    case: ProgramCase
    result: RunResult
    passed: bool
    reason: str = ""


def _coerce_input(val: Any) -> List[str]:
    if val is None:
        return []
    if isinstance(val, str):
        return [val]
    if isinstance(val, (list, tuple)) and all(isinstance(x, str) for x in val):
        return list(val)
    raise ValueError("input must be a string or a list of strings")


def _case_from_dict(obj: Dict[str, Any], base_dir: Path) -> ProgramCase:
    if not isinstance(obj, dict):
        raise ValueError("Each case must be a mapping")
    name = obj.get("name")
    if not name:
        raise ValueError("Each case must have 'name'")
    if ("program" in obj) == ("file" in obj):
        raise ValueError(f"Case '{name}' must have exactly one of 'program' or 'file'")
    if "program" in obj:
        code = str(obj["program"])
    else:
        code = load_program_file(base_dir / obj["file"]).decode("ascii")

    step_limit = obj.get("step_limit")
    if step_limit is not None and (not isinstance(step_limit, int) or step_limit <= 0):
        raise ValueError(f"Case '{name}': step_limit must be a positive integer")

    return ProgramCase(
        name=name,
        code=code,
        input=_coerce_input(obj.get("input")),
        expect=None if obj.get("expect") is None else str(obj["expect"]),
        expect_error=obj.get("expect_error"),
        expect_step_limit=bool(obj.get("expect_step_limit", False)),
        step_limit=step_limit,
    )


def load_program_cases(path) -> List[ProgramCase]:
    """Load program cases from a YAML file.
    Supported formats:
      1) { cases: [ { name, program | file, ... }, ... ] }
      2) A bare list of case objects
    'file' entries are resolved relative to the YAML file.
    """
    path = Path(path)
    with open(path, "r") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e

    if isinstance(data, dict) and isinstance(data.get("cases"), list):
        items = data["cases"]
    elif isinstance(data, list):
        items = data
    else:
        raise ValueError("Unsupported suite structure; expected 'cases' list or a list")

    cases = [_case_from_dict(obj, path.parent) for obj in items]
    logger.info("Loaded %d cases from %s", len(cases), path)
    return cases


def run_case(case: ProgramCase, default_step_limit: int = DEFAULT_STEP_LIMIT) -> CaseOutcome:
    limit = case.step_limit or default_step_limit
    result = run_program(case.code, case.input, step_limit=limit)

    if case.expect_error is not None:
        kind = result.error.kind if result.error is not None else None
        if kind != case.expect_error:
            return CaseOutcome(case, result, False, f"expected {case.expect_error}, got {kind}")
        return CaseOutcome(case, result, True)

    if result.error is not None:
        return CaseOutcome(case, result, False, str(result.error))

    if result.hit_step_limit != case.expect_step_limit:
        if result.hit_step_limit:
            return CaseOutcome(case, result, False, f"step limit {limit} reached")
        return CaseOutcome(case, result, False, f"finished in {result.steps} steps")

    if case.expect is not None and result.output != case.expect:
        return CaseOutcome(case, result, False, f"output {result.output!r} != {case.expect!r}")

    return CaseOutcome(case, result, True)


def run_suite(cases: List[ProgramCase], default_step_limit: int = DEFAULT_STEP_LIMIT) -> List[CaseOutcome]:
    outcomes = [run_case(c, default_step_limit) for c in cases]
    failed = sum(1 for o in outcomes if not o.passed)
    logger.info("%d/%d cases passed", len(outcomes) - failed, len(outcomes))
    return outcomes
