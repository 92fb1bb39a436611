import asyncio

import pytest

from ccm_cluster_tests.utils import sequential


class StepFailedError(Exception):
    pass


@pytest.mark.asyncio
async def test_run_sequentially_order():
    started = []
    running = []

    async def _step(item: int) -> int:
        assert not running, "steps overlap"
        running.append(item)
        started.append(item)
        await asyncio.sleep(0)
        running.remove(item)
        return item * 10

    results = await sequential.run_sequentially([3, 1, 2], _step)

    assert started == [3, 1, 2]
    assert results == [30, 10, 20]


@pytest.mark.asyncio
@pytest.mark.parametrize("failing", (0, 2, 4))
async def test_run_sequentially_stops_on_failure(failing: int):
    called = []
    err = StepFailedError(f"step {failing}")

    async def _step(item: int) -> None:
        called.append(item)
        if item == failing:
            raise err

    with pytest.raises(StepFailedError) as excinfo:
        await sequential.run_sequentially(range(5), _step)

    # The original exception is propagated, not wrapped
    assert excinfo.value is err
    assert called == list(range(failing + 1))


@pytest.mark.asyncio
async def test_run_sequentially_empty():
    async def _step(item: int) -> None:
        raise AssertionError(item)

    assert await sequential.run_sequentially([], _step) == []


@pytest.mark.asyncio
async def test_run_steps():
    called = []

    async def _ok(name: str) -> str:
        called.append(name)
        return name

    async def _fail() -> None:
        called.append("fail")
        msg = "no space left"
        raise StepFailedError(msg)

    steps: list[sequential.NamedStep] = [
        ("first", lambda: _ok("first")),
        ("second", _fail),
        ("third", lambda: _ok("third")),
    ]

    with pytest.raises(StepFailedError, match="no space left"):
        await sequential.run_steps(steps)
    assert called == ["first", "fail"]

    called.clear()
    assert await sequential.run_steps(steps[:1]) == ["first"]
