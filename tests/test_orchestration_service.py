from __future__ import annotations

import asyncio

import pytest

from multitranslate.models.translation import RunStatus, StepStatus
from multitranslate.services.exceptions import GatewayFailureError, InvalidInputError
from multitranslate.services.orchestration import RUN_OPERATION, STEP_OPERATION


def _assert_bracketed(tracer) -> None:
    for operation_id, closures in tracer.closures_by_id().items():
        assert len(closures) == 1, f"operation {operation_id} closed {closures}"


@pytest.mark.asyncio
async def test_two_step_run_chains_output(make_orchestrator, scripted_gateway, tracer) -> None:
    gateway = scripted_gateway("Bonjour", "fr", "こんにちは")
    orchestrator = make_orchestrator(gateway)

    final_text = await orchestrator.run("Hello", 2)

    assert final_text == "こんにちは"
    snapshot = orchestrator.snapshot()
    assert snapshot.status is RunStatus.COMPLETED
    assert snapshot.final_text == "こんにちは"
    assert [step.status for step in snapshot.steps] == [StepStatus.COMPLETED, StepStatus.COMPLETED]
    assert snapshot.steps[0].input_text == "Hello"
    assert snapshot.steps[1].input_text == "こんにちは"
    assert snapshot.steps[1].intermediate_text == "Bonjour"
    assert snapshot.steps[1].intermediate_language == "fr"
    assert gateway.calls == ["Hello", "こんにちは"]
    assert not orchestrator.is_running
    _assert_bracketed(tracer)


@pytest.mark.asyncio
@pytest.mark.parametrize("count", range(1, 11))
async def test_successful_runs_complete_every_step(make_orchestrator, scripted_gateway, count: int) -> None:
    gateway = scripted_gateway(final_text=lambda text, call: f"{text}>{call}")
    orchestrator = make_orchestrator(gateway)

    final_text = await orchestrator.run("seed", count)

    snapshot = orchestrator.snapshot()
    assert len(snapshot.steps) == count
    assert all(step.status is StepStatus.COMPLETED for step in snapshot.steps)
    assert final_text == snapshot.steps[-1].final_text
    assert snapshot.progress == 1.0
    for previous, following in zip(snapshot.steps, snapshot.steps[1:]):
        assert following.input_text == previous.final_text


@pytest.mark.asyncio
@pytest.mark.parametrize(("count", "failing_step"), [(1, 1), (3, 2), (5, 1), (5, 5), (10, 7)])
async def test_failure_halts_run(
    make_orchestrator, scripted_gateway, tracer, count: int, failing_step: int
) -> None:
    gateway = scripted_gateway(fail_on_call=failing_step)
    orchestrator = make_orchestrator(gateway)

    with pytest.raises(GatewayFailureError) as excinfo:
        await orchestrator.run("Hello", count)

    assert excinfo.value.step_id == failing_step
    snapshot = orchestrator.snapshot()
    statuses = [step.status for step in snapshot.steps]
    assert statuses[: failing_step - 1] == [StepStatus.COMPLETED] * (failing_step - 1)
    assert statuses[failing_step - 1] is StepStatus.FAILED
    assert statuses[failing_step:] == [StepStatus.PENDING] * (count - failing_step)
    assert snapshot.status is RunStatus.FAILED
    assert snapshot.failed_step == failing_step
    assert snapshot.final_text is None
    assert len(gateway.calls) == failing_step
    assert not orchestrator.is_running
    _assert_bracketed(tracer)


@pytest.mark.asyncio
async def test_failure_on_second_of_three_steps(make_orchestrator, scripted_gateway, tracer) -> None:
    orchestrator = make_orchestrator(scripted_gateway(fail_on_call=2))

    with pytest.raises(GatewayFailureError) as excinfo:
        await orchestrator.run("Hello", 3)

    assert "step 2" in str(excinfo.value)
    assert "service unavailable" in excinfo.value.reason
    snapshot = orchestrator.snapshot()
    assert [step.status for step in snapshot.steps] == [
        StepStatus.COMPLETED,
        StepStatus.FAILED,
        StepStatus.PENDING,
    ]

    run_events = tracer.named(RUN_OPERATION)
    assert [event[0] for event in run_events] == ["start", "error"]
    step_events = tracer.named(STEP_OPERATION)
    assert [event[0] for event in step_events] == ["start", "complete", "start", "error"]
    assert step_events[1][3]["intermediate_language"] == "fr"


@pytest.mark.asyncio
async def test_empty_gateway_result_counts_as_failure(make_orchestrator, scripted_gateway) -> None:
    orchestrator = make_orchestrator(scripted_gateway(final_text="   "))

    with pytest.raises(GatewayFailureError) as excinfo:
        await orchestrator.run("Hello", 2)

    assert excinfo.value.step_id == 1
    assert orchestrator.snapshot().steps[0].status is StepStatus.FAILED


@pytest.mark.asyncio
@pytest.mark.parametrize(("text", "count"), [("", 2), ("   ", 2), ("Hello", 0), ("Hello", 11)])
async def test_invalid_input_has_no_side_effects(
    make_orchestrator, scripted_gateway, tracer, text: str, count: int
) -> None:
    gateway = scripted_gateway()
    orchestrator = make_orchestrator(gateway)

    with pytest.raises(InvalidInputError):
        await orchestrator.run(text, count)

    snapshot = orchestrator.snapshot()
    assert snapshot.steps == []
    assert snapshot.generation == 0
    assert tracer.events == []
    assert gateway.calls == []


@pytest.mark.asyncio
async def test_reset_mid_run_discards_late_result(make_orchestrator, gated_gateway, tracer) -> None:
    gateway = gated_gateway()
    orchestrator = make_orchestrator(gateway)

    task = asyncio.create_task(orchestrator.run("Hello", 3))
    await gateway.started.wait()
    assert orchestrator.is_running
    assert orchestrator.snapshot().current_step == 1

    orchestrator.reset()
    gateway.release.set()

    assert await task is None
    snapshot = orchestrator.snapshot()
    assert snapshot.status is RunStatus.IDLE
    assert snapshot.steps == []
    assert gateway.calls == ["Hello"]
    assert not orchestrator.is_running
    _assert_bracketed(tracer)


@pytest.mark.asyncio
async def test_late_result_never_leaks_into_new_run(make_orchestrator, gated_gateway, store) -> None:
    gateway = gated_gateway()
    orchestrator = make_orchestrator(gateway)

    task = asyncio.create_task(orchestrator.run("Hello", 2))
    await gateway.started.wait()

    store.initialize("Fresh", 2)
    gateway.release.set()

    assert await task is None
    snapshot = orchestrator.snapshot()
    assert snapshot.original_text == "Fresh"
    assert [step.status for step in snapshot.steps] == [StepStatus.PENDING, StepStatus.PENDING]
    assert all(step.input_text == "Fresh" for step in snapshot.steps)
    assert all(step.final_text == "" for step in snapshot.steps)


@pytest.mark.asyncio
async def test_late_failure_after_reset_is_not_raised(make_orchestrator, gated_gateway, tracer) -> None:
    gateway = gated_gateway(fail=True)
    orchestrator = make_orchestrator(gateway)

    task = asyncio.create_task(orchestrator.run("Hello", 2))
    await gateway.started.wait()
    orchestrator.reset()
    gateway.release.set()

    assert await task is None
    assert orchestrator.snapshot().status is RunStatus.IDLE
    _assert_bracketed(tracer)


@pytest.mark.asyncio
async def test_progress_is_observable_between_steps(make_orchestrator, scripted_gateway) -> None:
    orchestrator = make_orchestrator(scripted_gateway(), step_delay=0.05)

    task = asyncio.create_task(orchestrator.run("Hello", 2))
    for _ in range(100):
        if orchestrator.progress() > 0:
            break
        await asyncio.sleep(0.005)

    snapshot = orchestrator.snapshot()
    assert snapshot.progress == pytest.approx(0.5)
    assert snapshot.status is RunStatus.RUNNING
    assert await task == "こんにちは"
    assert orchestrator.progress() == 1.0


@pytest.mark.asyncio
async def test_cancellation_closes_open_spans(make_orchestrator, gated_gateway, tracer) -> None:
    gateway = gated_gateway()
    orchestrator = make_orchestrator(gateway)

    task = asyncio.create_task(orchestrator.run("Hello", 2))
    await gateway.started.wait()
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task

    assert not orchestrator.is_running
    _assert_bracketed(tracer)
    assert [event[0] for event in tracer.named(RUN_OPERATION)] == ["start", "error"]
    snapshot = orchestrator.snapshot()
    assert snapshot.status is RunStatus.FAILED
    assert snapshot.failed_step == 1
    assert snapshot.error == "cancelled"
    assert [step.status for step in snapshot.steps] == [StepStatus.FAILED, StepStatus.PENDING]
