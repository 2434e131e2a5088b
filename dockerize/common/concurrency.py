"""Fan-out/fan-in execution of independent pipeline steps."""
from __future__ import annotations

import concurrent.futures
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional


@dataclass(slots=True)
class TaskOutcome:
    """Tagged result of one concurrently executed step."""

    name: str
    value: Any = None
    error: Optional[BaseException] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass(slots=True)
class PhaseResult:
    """Outcomes of every step of a phase, in submission order."""

    phase: str
    outcomes: List[TaskOutcome]

    def first_failure(self) -> Optional[TaskOutcome]:
        return next((outcome for outcome in self.outcomes if outcome.failed), None)

    def values(self) -> Dict[str, Any]:
        return {outcome.name: outcome.value for outcome in self.outcomes}


def run_phase(
    phase: str,
    tasks: Mapping[str, Callable[[], Any]],
    logger: Optional[logging.Logger] = None,
) -> Dict[str, Any]:
    """
    Run independent tasks concurrently and wait for all of them.

    Every task runs to completion; threads cannot be cancelled once started.
    Failures are captured per task, and the first one in submission order is
    re-raised, so the reported error does not depend on scheduling.

    Returns:
        Mapping of task name to return value

    Raises:
        The first captured exception, if any task failed
    """
    logger = logger or logging.getLogger(__name__)
    result = collect_phase(phase, tasks, logger)

    failure = result.first_failure()
    if failure is not None:
        logger.debug("Phase %s failed in step %s: %s", phase, failure.name, failure.error)
        raise failure.error

    return result.values()


def collect_phase(
    phase: str,
    tasks: Mapping[str, Callable[[], Any]],
    logger: logging.Logger,
) -> PhaseResult:
    """Run ``tasks`` concurrently and return their tagged outcomes."""
    if not tasks:
        return PhaseResult(phase=phase, outcomes=[])

    logger.debug("Running phase %s: %s", phase, ", ".join(tasks))
    with concurrent.futures.ThreadPoolExecutor(max_workers=len(tasks), thread_name_prefix=f"dockerize-{phase}") as executor:
        futures = {name: executor.submit(task) for name, task in tasks.items()}
        concurrent.futures.wait(futures.values())

    outcomes: List[TaskOutcome] = []
    for name, future in futures.items():
        error = future.exception()
        outcomes.append(TaskOutcome(name=name, value=None if error else future.result(), error=error))

    return PhaseResult(phase=phase, outcomes=outcomes)
