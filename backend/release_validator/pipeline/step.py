"""
PipelineStep: abstract base class for all pipeline steps.

A step is a named async operation with a declared input model and
output model.  The engine calls run(), which validates the incoming
data, awaits execute() and validates what comes back.  Steps only need
to implement the business logic.

A step ends the whole pipeline early by returning ``self.bail(payload)``.
The bail payload is handed back to the caller as the final result and
is not checked against any downstream contract.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Generic, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from release_validator.pipeline.context import PipelineContext
from release_validator.pipeline.errors import StepValidationError

T = TypeVar("T")


# ═══════════════════════════════════════════════════════════
#  Step outcomes
# ═══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Continue(Generic[T]):
    """Normal completion: hand ``output`` to the next step."""

    output: T


@dataclass(frozen=True)
class Terminate(Generic[T]):
    """Controlled early termination: ``result`` becomes the pipeline result."""

    result: T


StepOutcome = Union[Continue[Any], Terminate[Any]]


def coerce_model(model: type[BaseModel], data: Any) -> BaseModel:
    """Validate ``data`` (a dict or another model) against ``model``."""
    if isinstance(data, model):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump()
    return model.model_validate(data)


# ═══════════════════════════════════════════════════════════
#  Stage base
# ═══════════════════════════════════════════════════════════

class Stage(ABC):
    """Anything the engine can schedule: a contract step or a map stage."""

    name: str = "unnamed_stage"
    description: str = "No description"

    @abstractmethod
    async def run(self, data: Any, ctx: PipelineContext) -> StepOutcome:
        ...


class PipelineStep(Stage):
    """
    Base class for every contract-validated step.

    Subclasses MUST define:
        - name (str)            unique identifier, e.g. "execute-tests"
        - description (str)     human-readable label for logs
        - input_model           pydantic model the incoming data must satisfy
        - output_model          pydantic model execute() must produce
        - execute(data, ctx)    the actual business logic
    """

    input_model: ClassVar[type[BaseModel]]
    output_model: ClassVar[type[BaseModel]]

    @abstractmethod
    async def execute(self, data: Any, ctx: PipelineContext) -> Any:
        """
        Run the step's logic.

        Returns an output satisfying ``output_model`` (a model instance or
        a dict), or the result of ``self.bail(payload)``.
        """
        ...

    def bail(self, payload: Any) -> Terminate[Any]:
        """Stop the pipeline after this step and return ``payload``."""
        return Terminate(payload)

    async def run(self, data: Any, ctx: PipelineContext) -> StepOutcome:
        validated_input = self._validate(self.input_model, data, ctx, "input")

        outcome = await self.execute(validated_input, ctx)
        if isinstance(outcome, Terminate):
            return outcome
        if isinstance(outcome, Continue):
            outcome = outcome.output

        return Continue(self._validate(self.output_model, outcome, ctx, "output"))

    def _validate(
        self,
        model: type[BaseModel],
        data: Any,
        ctx: PipelineContext,
        boundary: str,
    ) -> BaseModel:
        try:
            return coerce_model(model, data)
        except PydanticValidationError as exc:
            raise StepValidationError(
                f"Step '{self.name}' {boundary} failed {model.__name__} contract: "
                f"{exc.error_count()} error(s)",
                execution_id=ctx.execution_id,
                step_name=self.name,
                details={"errors": exc.errors(include_url=False)},
            ) from exc


class MapStage(Stage):
    """
    Pure reshaping stage between two steps.

    ``fn`` receives the previous output and the context and returns the
    next step's input.  No contract of its own: the following step's
    input check is the only validation applied.
    """

    def __init__(
        self,
        name: str,
        fn: Callable[[Any, PipelineContext], Any],
        description: str = "Reshape data between steps",
    ) -> None:
        self.name = name
        self.description = description
        self._fn = fn

    async def run(self, data: Any, ctx: PipelineContext) -> StepOutcome:
        return Continue(self._fn(data, ctx))
