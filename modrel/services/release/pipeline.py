"""Ordered step runner for release runs.

A run is a list of named steps over one shared state. Steps execute in
order and the first failure stops the run; nothing already done is undone.
In dry-run mode no step body runs: a step's ``preview`` (which must not touch
files, processes or the network) is called instead, or its name is logged.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Literal

from modrel.core.result import Err, Ok, Result
from modrel.output.console import ConsoleProtocol, Style
from modrel.services.release.errors import ReleaseError

type StepRun[S] = Callable[[S], Result[None, ReleaseError]]
type SkipIf[S] = Callable[[S], bool]
type Preview[S] = Callable[[S], str]

PipelineStatus = Literal["pending", "running", "success", "failed"]


@dataclass(frozen=True, slots=True)
class Step[S]:
    name: str
    run: StepRun[S]
    skip_if: SkipIf[S] | None = None
    preview: Preview[S] | None = None


@dataclass(frozen=True, slots=True)
class StepFailure:
    step: str
    error: ReleaseError

    def pretty(self) -> str:
        return f"step '{self.step}' failed: {self.error.pretty()}"


@dataclass(slots=True)
class PipelineReport:
    completed: list[str] = field(default_factory=list[str])
    skipped: list[str] = field(default_factory=list[str])
    status: PipelineStatus = "pending"
    # Index of the running (or failed) step.
    current: int | None = None


def run_pipeline[S](
    steps: Sequence[Step[S]],
    state: S,
    *,
    console: ConsoleProtocol,
    dry_run: bool = False,
) -> Result[PipelineReport, StepFailure]:
    report = PipelineReport()

    for index, step in enumerate(steps):
        report.status = "running"
        report.current = index

        if step.skip_if is not None and step.skip_if(state):
            console.print(f"skip {step.name}", Style.DIM)
            report.skipped.append(step.name)
            continue

        if dry_run:
            intent = step.preview(state) if step.preview is not None else step.name
            console.print(f"[dry-run] {intent}", Style.DIM)
            report.completed.append(step.name)
            continue

        console.debug(f"step {index + 1}/{len(steps)}: {step.name}")
        outcome = step.run(state)
        if isinstance(outcome, Err):
            report.status = "failed"
            return Err(StepFailure(step=step.name, error=outcome.error))
        report.completed.append(step.name)

    report.status = "success"
    report.current = None
    return Ok(report)
