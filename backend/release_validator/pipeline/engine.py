"""
PipelineEngine: the orchestrator that runs stages sequentially.

Responsibilities:
    - Build the PipelineContext for one run
    - Execute each stage strictly in declaration order, feeding it the
      previous stage's output (the initiation payload for the first)
    - Record every output in the context under the stage's identifier
    - Stop scheduling as soon as a step bails, returning its payload
    - Abort on the first error and re-raise it unchanged (no rollback)
    - Return a PipelineResult with the final output and a step trace
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping, Sequence

import structlog
from pydantic import BaseModel

from release_validator.core.constants import PipelineStatus, StepStatus
from release_validator.pipeline.context import PipelineContext, StepResult
from release_validator.pipeline.errors import PipelineConfigError
from release_validator.pipeline.step import Stage, Terminate


@dataclass
class PipelineResult:
    """Final outcome of a pipeline execution that did not raise."""

    execution_id: str
    status: str                     # PipelineStatus value
    output: Any = None
    started_at: datetime | None = None
    completed_at: datetime | None = None
    total_duration_ms: int = 0
    steps_completed: int = 0
    total_steps: int = 0
    bailed_at: str | None = None
    step_results: list[dict[str, Any]] = field(default_factory=list)

    @property
    def bailed(self) -> bool:
        return self.status == PipelineStatus.BAILED

    def output_payload(self) -> Any:
        """The final output in wire form (camelCase dict for models)."""
        if isinstance(self.output, BaseModel):
            return self.output.model_dump(mode="json", by_alias=True)
        return self.output


class PipelineEngine:
    """
    Runs an ordered list of stages against a fresh PipelineContext.

    Usage::

        engine = PipelineEngine(build_review_stages(services), name="pr-workflow")
        result = await engine.run({"pullRequestUrl": url})
    """

    def __init__(self, stages: Sequence[Stage], name: str = "pipeline") -> None:
        seen: set[str] = set()
        for stage in stages:
            if stage.name in seen:
                raise PipelineConfigError(
                    f"Duplicate step identifier '{stage.name}' in pipeline '{name}'",
                    step_name=stage.name,
                )
            seen.add(stage.name)

        self.name = name
        self.stages = list(stages)
        self.logger = structlog.get_logger("pipeline.engine")

    async def run(
        self,
        init_payload: Mapping[str, Any] | BaseModel,
        execution_id: str | None = None,
    ) -> PipelineResult:
        """
        Execute every stage in order.

        Returns a PipelineResult whose ``output`` is the last stage's
        output, or the bail payload if a step terminated the run early.
        Any exception raised by a stage propagates to the caller.
        """
        if isinstance(init_payload, BaseModel):
            init_payload = init_payload.model_dump(mode="json", by_alias=True)

        ctx = PipelineContext(init_data=init_payload, execution_id=execution_id)
        return await self.run_stages(ctx)

    async def run_stages(self, ctx: PipelineContext) -> PipelineResult:
        """
        Execute the configured stages against an existing context.

        Can be called directly with a pre-built context for testing.
        """
        started_at = datetime.now(timezone.utc)
        total_steps = len(self.stages)

        log = self.logger.bind(
            pipeline=self.name,
            execution_id=ctx.execution_id,
            total_steps=total_steps,
        )
        log.info("Pipeline started")

        data: Any = dict(ctx.get_init_data())
        steps_completed = 0

        for index, stage in enumerate(self.stages):
            step_number = index + 1
            step_log = log.bind(
                step_name=stage.name,
                step_index=step_number,
                step_description=stage.description,
            )
            step_log.info(f"Step {step_number}/{total_steps}: {stage.description}")

            step_started = datetime.now(timezone.utc)
            try:
                outcome = await stage.run(data, ctx)
            except Exception as exc:
                ctx.add_step_result(self._trace(stage.name, StepStatus.FAILED, step_started, str(exc)))
                step_log.error(
                    "Step failed, pipeline stopping",
                    error=str(exc),
                    error_type=type(exc).__name__,
                    steps_completed=steps_completed,
                )
                raise

            steps_completed += 1

            if isinstance(outcome, Terminate):
                ctx.add_step_result(self._trace(stage.name, StepStatus.BAILED, step_started))
                step_log.info(
                    "Step bailed, skipping remaining steps",
                    skipped_steps=[s.name for s in self.stages[step_number:]],
                )
                return self._finish(
                    ctx, log, started_at, PipelineStatus.BAILED,
                    output=outcome.result,
                    steps_completed=steps_completed,
                    bailed_at=stage.name,
                )

            ctx.record(stage.name, outcome.output)
            ctx.add_step_result(self._trace(stage.name, StepStatus.COMPLETED, step_started))
            step_log.info("Step completed")
            data = outcome.output

        return self._finish(
            ctx, log, started_at, PipelineStatus.COMPLETED,
            output=data,
            steps_completed=steps_completed,
        )

    # ─── Internals ─────────────────────────────────────

    def _finish(
        self,
        ctx: PipelineContext,
        log: structlog.BoundLogger,
        started_at: datetime,
        status: PipelineStatus,
        *,
        output: Any,
        steps_completed: int,
        bailed_at: str | None = None,
    ) -> PipelineResult:
        completed_at = datetime.now(timezone.utc)
        total_duration_ms = int((completed_at - started_at).total_seconds() * 1000)

        log.info(
            "Pipeline finished",
            status=status,
            steps_completed=steps_completed,
            duration_ms=total_duration_ms,
        )

        return PipelineResult(
            execution_id=ctx.execution_id,
            status=status,
            output=output,
            started_at=started_at,
            completed_at=completed_at,
            total_duration_ms=total_duration_ms,
            steps_completed=steps_completed,
            total_steps=len(self.stages),
            bailed_at=bailed_at,
            step_results=[sr.to_dict() for sr in ctx.step_results],
        )

    @staticmethod
    def _trace(
        name: str,
        status: StepStatus,
        started_at: datetime,
        error: str | None = None,
    ) -> StepResult:
        now = datetime.now(timezone.utc)
        return StepResult(
            step_name=name,
            status=status,
            started_at=started_at,
            completed_at=now,
            duration_ms=int((now - started_at).total_seconds() * 1000),
            error=error,
        )
