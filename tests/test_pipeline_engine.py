"""Tests for PipelineEngine, PipelineStep and PipelineContext."""

from __future__ import annotations

import pytest
from pydantic import BaseModel

from release_validator.core.constants import PipelineStatus, StepStatus
from release_validator.pipeline.context import PipelineContext
from release_validator.pipeline.engine import PipelineEngine
from release_validator.pipeline.errors import PipelineConfigError, PipelineError, StepValidationError
from release_validator.pipeline.step import Continue, MapStage, PipelineStep


class Number(BaseModel):
    value: int


class Doubled(BaseModel):
    value: int


class DoubleStep(PipelineStep):
    name = "double"
    description = "Double the value"
    input_model = Number
    output_model = Doubled

    def __init__(self, calls: list[str]) -> None:
        self.calls = calls

    async def execute(self, data, ctx):
        self.calls.append(self.name)
        return {"value": data.value * 2}


class AddInitStep(PipelineStep):
    """Adds the initiation payload value to the doubled value."""

    name = "add-init"
    description = "Add the original value back"
    input_model = Doubled
    output_model = Number

    def __init__(self, calls: list[str]) -> None:
        self.calls = calls

    async def execute(self, data, ctx):
        self.calls.append(self.name)
        doubled = ctx.get_step_result("double")
        return Continue(Number(value=doubled.value + ctx.get_init_data()["value"]))


class BailingStep(PipelineStep):
    name = "maybe-bail"
    description = "Bail when the value is zero"
    input_model = Number
    output_model = Number

    def __init__(self, calls: list[str]) -> None:
        self.calls = calls

    async def execute(self, data, ctx):
        self.calls.append(self.name)
        if data.value == 0:
            return self.bail({"success": True, "reason": "nothing to do"})
        return data


class ExplodingStep(PipelineStep):
    name = "explode"
    description = "Always raises"
    input_model = Number
    output_model = Number

    def __init__(self, calls: list[str]) -> None:
        self.calls = calls

    async def execute(self, data, ctx):
        self.calls.append(self.name)
        raise RuntimeError("boom")


class BadOutputStep(PipelineStep):
    name = "bad-output"
    description = "Returns something that is not a Number"
    input_model = Number
    output_model = Number

    async def execute(self, data, ctx):
        return {"unexpected": "shape"}


class RecordingStep(PipelineStep):
    name = "record"
    description = "Records that it ran"
    input_model = Number
    output_model = Number

    def __init__(self, calls: list[str]) -> None:
        self.calls = calls

    async def execute(self, data, ctx):
        self.calls.append(self.name)
        return data


@pytest.fixture
def calls() -> list[str]:
    return []


class TestSequentialExecution:

    @pytest.mark.asyncio
    async def test_steps_run_in_order_and_hand_off_outputs(self, calls):
        engine = PipelineEngine([DoubleStep(calls), AddInitStep(calls)])

        result = await engine.run({"value": 5})

        assert calls == ["double", "add-init"]
        assert result.status == PipelineStatus.COMPLETED
        assert result.output == Number(value=15)
        assert result.steps_completed == 2
        assert [sr["status"] for sr in result.step_results] == [StepStatus.COMPLETED] * 2

    @pytest.mark.asyncio
    async def test_map_stage_reshapes_between_steps(self, calls):
        engine = PipelineEngine([
            DoubleStep(calls),
            MapStage("to-number", lambda data, ctx: {"value": data.value + 1}),
            RecordingStep(calls),
        ])

        result = await engine.run({"value": 3})

        assert result.output == Number(value=7)
        assert calls == ["double", "record"]

    @pytest.mark.asyncio
    async def test_accepts_model_as_initiation_payload(self, calls):
        engine = PipelineEngine([DoubleStep(calls)])

        result = await engine.run(Number(value=2))

        assert result.output == Doubled(value=4)


class TestBail:

    @pytest.mark.asyncio
    async def test_bail_returns_payload_and_skips_remaining_steps(self, calls):
        engine = PipelineEngine([BailingStep(calls), DoubleStep(calls), RecordingStep(calls)])

        result = await engine.run({"value": 0})

        assert result.status == PipelineStatus.BAILED
        assert result.bailed
        assert result.bailed_at == "maybe-bail"
        assert result.output == {"success": True, "reason": "nothing to do"}
        assert calls == ["maybe-bail"]
        assert [sr["status"] for sr in result.step_results] == [StepStatus.BAILED]

    @pytest.mark.asyncio
    async def test_bail_payload_is_not_validated_downstream(self, calls):
        # payload does not match DoubleStep's Number input
        engine = PipelineEngine([BailingStep(calls), DoubleStep(calls)])

        result = await engine.run({"value": 0})

        assert result.output["reason"] == "nothing to do"

    @pytest.mark.asyncio
    async def test_no_bail_continues(self, calls):
        engine = PipelineEngine([BailingStep(calls), RecordingStep(calls)])

        result = await engine.run({"value": 1})

        assert result.status == PipelineStatus.COMPLETED
        assert calls == ["maybe-bail", "record"]


class TestFailures:

    @pytest.mark.asyncio
    async def test_step_error_propagates_and_stops_pipeline(self, calls):
        engine = PipelineEngine([RecordingStep(calls), ExplodingStep(calls), DoubleStep(calls)])

        with pytest.raises(RuntimeError, match="boom"):
            await engine.run({"value": 1})

        assert calls == ["record", "explode"]

    @pytest.mark.asyncio
    async def test_output_contract_violation_raises_validation_error(self, calls):
        engine = PipelineEngine([BadOutputStep(), RecordingStep(calls)])

        with pytest.raises(StepValidationError) as exc_info:
            await engine.run({"value": 1})

        assert exc_info.value.step_name == "bad-output"
        assert "output" in str(exc_info.value)
        assert calls == []

    @pytest.mark.asyncio
    async def test_input_contract_violation_raises_validation_error(self, calls):
        engine = PipelineEngine([RecordingStep(calls)])

        with pytest.raises(StepValidationError, match="input"):
            await engine.run({"wrong": "payload"})

        assert calls == []

    def test_duplicate_step_identifiers_rejected(self, calls):
        with pytest.raises(PipelineConfigError, match="double"):
            PipelineEngine([DoubleStep(calls), DoubleStep(calls)])


class TestPipelineContext:

    def test_init_data_is_read_only(self):
        ctx = PipelineContext({"pullRequestUrl": "x"})

        with pytest.raises(TypeError):
            ctx.get_init_data()["pullRequestUrl"] = "y"

    def test_outputs_are_append_only(self):
        ctx = PipelineContext({})
        ctx.record("a", 1)

        with pytest.raises(PipelineError, match="already recorded"):
            ctx.record("a", 2)
        assert ctx.get_step_result("a") == 1

    def test_missing_step_result_raises(self):
        ctx = PipelineContext({})

        with pytest.raises(PipelineError, match="No result recorded"):
            ctx.get_step_result("generate-testplan")

    def test_lookup_by_step_object(self, calls):
        ctx = PipelineContext({})
        ctx.record("double", Doubled(value=2))

        assert ctx.get_step_result(DoubleStep(calls)) == Doubled(value=2)
        assert ctx.has_step_result("double")
        assert list(ctx.step_outputs) == ["double"]

    @pytest.mark.asyncio
    async def test_engine_records_each_output_under_step_name(self, calls):
        engine = PipelineEngine([DoubleStep(calls), RecordingStep(calls)])
        ctx = PipelineContext({"value": 1}, execution_id="exec-1")

        # RecordingStep accepts the Doubled output through shape compatibility
        result = await engine.run_stages(ctx)

        assert result.execution_id == "exec-1"
        assert ctx.get_step_result("double") == Doubled(value=2)
        assert ctx.get_step_result("record") == Number(value=2)
