"""
Pipeline engine: sequential, contract-checked steps with early bail-out.

This package provides the step abstraction, the engine that chains
steps over an append-only context, the bounded poller and the
concurrent task executor.  The review workflow itself lives in
``release_validator.pipeline.flow``.
"""

from release_validator.pipeline.context import PipelineContext, StepResult
from release_validator.pipeline.engine import PipelineEngine, PipelineResult
from release_validator.pipeline.executor import ConcurrentTaskExecutor
from release_validator.pipeline.polling import poll_until
from release_validator.pipeline.step import Continue, MapStage, PipelineStep, Terminate

__all__ = [
    "ConcurrentTaskExecutor",
    "Continue",
    "MapStage",
    "PipelineContext",
    "PipelineEngine",
    "PipelineResult",
    "PipelineStep",
    "StepResult",
    "Terminate",
    "poll_until",
]
