from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from modrel.core.result import Err, Ok, Result
from modrel.output.console import MockConsole, Style
from modrel.services.release.errors import ReleaseError
from modrel.services.release.pipeline import Step, StepFailure, run_pipeline


@dataclass
class _State:
    ran: list[str] = field(default_factory=list[str])
    skip: set[str] = field(default_factory=set[str])


def _ok(name: str):
    def run(state: _State) -> Result[None, ReleaseError]:
        state.ran.append(name)
        return Ok(None)

    return run


def _fail(name: str):
    def run(state: _State) -> Result[None, ReleaseError]:
        state.ran.append(name)
        return Err(ReleaseError(kind="build_failed", message=f"{name} broke"))

    return run


def _steps(n: int, *, failing: int | None = None) -> list[Step[_State]]:
    steps: list[Step[_State]] = []
    for i in range(n):
        name = f"s{i}"
        run = _fail(name) if i == failing else _ok(name)
        steps.append(Step(name, run, skip_if=lambda s, name=name: name in s.skip))
    return steps


def test_runs_all_steps_in_order() -> None:
    state = _State()
    result = run_pipeline(_steps(4), state, console=MockConsole())
    assert isinstance(result, Ok)
    assert state.ran == ["s0", "s1", "s2", "s3"]
    assert result.value.completed == ["s0", "s1", "s2", "s3"]
    assert result.value.status == "success"
    assert result.value.current is None


@pytest.mark.parametrize("failing", [0, 1, 2, 3])
def test_stops_at_first_failure(failing: int) -> None:
    state = _State()
    result = run_pipeline(_steps(4, failing=failing), state, console=MockConsole())

    assert isinstance(result, Err)
    assert result.error == StepFailure(
        step=f"s{failing}",
        error=ReleaseError(kind="build_failed", message=f"s{failing} broke"),
    )
    assert state.ran == [f"s{i}" for i in range(failing + 1)]


def test_failure_pretty() -> None:
    failure = StepFailure(
        step="build", error=ReleaseError(kind="build_failed", message="exit 1", hint="log")
    )
    assert failure.pretty() == "step 'build' failed: exit 1 (hint: log)"


def test_skipped_step_is_reported() -> None:
    state = _State(skip={"s1"})
    console = MockConsole()
    result = run_pipeline(_steps(3), state, console=console)

    assert isinstance(result, Ok)
    assert state.ran == ["s0", "s2"]
    assert result.value.skipped == ["s1"]
    assert result.value.completed == ["s0", "s2"]
    assert console.find("skip s1")[0].style == Style.DIM


def test_skipped_failing_step_does_not_fail() -> None:
    state = _State(skip={"s1"})
    result = run_pipeline(_steps(3, failing=1), state, console=MockConsole())
    assert isinstance(result, Ok)


def test_dry_run_calls_no_step() -> None:
    state = _State()
    console = MockConsole()
    steps = [
        Step("with_preview", _fail("with_preview"), preview=lambda s: "would do things"),
        Step("bare", _fail("bare")),
    ]

    result = run_pipeline(steps, state, console=console, dry_run=True)

    assert isinstance(result, Ok)
    assert state.ran == []
    assert result.value.completed == ["with_preview", "bare"]
    assert console.messages == ["[dry-run] would do things", "[dry-run] bare"]


def test_dry_run_still_skips() -> None:
    state = _State(skip={"s0"})
    console = MockConsole()
    result = run_pipeline(_steps(2), state, console=console, dry_run=True)
    assert isinstance(result, Ok)
    assert result.value.skipped == ["s0"]
    assert console.messages == ["skip s0", "[dry-run] s1"]


def test_verbose_logs_each_step() -> None:
    console = MockConsole(verbosity=1)
    run_pipeline(_steps(2), _State(), console=console)
    assert console.messages == ["step 1/2: s0", "step 2/2: s1"]


def test_empty_pipeline_succeeds() -> None:
    result = run_pipeline([], _State(), console=MockConsole())
    assert isinstance(result, Ok)
    assert result.value.completed == []
