"""
PipelineContext: the state object carried through every step.

Holds the read-only initiation payload and an append-only mapping from
step identifier to that step's validated output.  Any step may read the
initiation payload or any earlier step's output; nothing recorded is
ever overwritten.  The engine also appends a StepResult trace entry per
executed step for logging and the final PipelineResult.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from types import MappingProxyType
from typing import Any, Mapping

from release_validator.pipeline.errors import PipelineError


# ═══════════════════════════════════════════════════════════
#  StepResult
# ═══════════════════════════════════════════════════════════

@dataclass
class StepResult:
    """Trace record of a single step execution."""

    step_name: str
    status: str                     # StepStatus value
    started_at: datetime | None = None
    completed_at: datetime | None = None
    duration_ms: int = 0
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "step_name": self.step_name,
            "status": self.status,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_ms": self.duration_ms,
            "error": self.error,
        }


# ═══════════════════════════════════════════════════════════
#  PipelineContext
# ═══════════════════════════════════════════════════════════

class PipelineContext:
    """
    Append-only result context for one pipeline run.

    Created by the engine at invocation and discarded when the run
    finishes.  Step outputs are recorded under the step's identifier
    and exposed through a read-only view.
    """

    def __init__(
        self,
        init_data: Mapping[str, Any],
        execution_id: str | None = None,
    ) -> None:
        self.execution_id = execution_id or str(uuid.uuid4())
        self._init_data = MappingProxyType(dict(init_data))
        self._outputs: dict[str, Any] = {}
        self.step_results: list[StepResult] = []

    # ─── Reads ─────────────────────────────────────────

    def get_init_data(self) -> Mapping[str, Any]:
        """The payload the pipeline was started with."""
        return self._init_data

    def get_step_result(self, step: Any) -> Any:
        """
        Return the recorded output of an earlier step.

        Accepts a step identifier or any object with a ``name`` attribute.
        Raises PipelineError if that step has not produced an output.
        """
        step_id = step if isinstance(step, str) else step.name
        try:
            return self._outputs[step_id]
        except KeyError:
            raise PipelineError(
                f"No result recorded for step '{step_id}'",
                execution_id=self.execution_id,
                step_name=step_id,
            ) from None

    def has_step_result(self, step_id: str) -> bool:
        return step_id in self._outputs

    @property
    def step_outputs(self) -> Mapping[str, Any]:
        """Read-only view of every recorded output, in recording order."""
        return MappingProxyType(self._outputs)

    # ─── Writes ────────────────────────────────────────

    def record(self, step_id: str, output: Any) -> None:
        """Record a step's output.  Each identifier may be written once."""
        if step_id in self._outputs:
            raise PipelineError(
                f"Output for step '{step_id}' is already recorded",
                execution_id=self.execution_id,
                step_name=step_id,
            )
        self._outputs[step_id] = output

    def add_step_result(self, result: StepResult) -> None:
        self.step_results.append(result)
