"""Running asynchronous steps one at a time."""

import logging
import typing as tp

LOGGER = logging.getLogger(__name__)

T = tp.TypeVar("T")
R = tp.TypeVar("R")

NamedStep = tuple[str, tp.Callable[[], tp.Awaitable[tp.Any]]]


async def run_sequentially(
    items: tp.Iterable[T], step: tp.Callable[[T], tp.Awaitable[R]]
) -> list[R]:
    """Await `step` for every item, strictly in order.

    The next step is started only after the previous one finished. The first exception is
    propagated unchanged and the remaining items are never processed.

    Returns:
        list: Results of the steps, in the order of `items`.
    """
    results: list[R] = []
    for item in items:
        results.append(await step(item))
    return results


async def run_steps(steps: tp.Iterable[NamedStep]) -> list[tp.Any]:
    """Run ordered workflow steps, stop on the first failure."""

    async def _run_step(named_step: NamedStep) -> tp.Any:
        name, step_func = named_step
        LOGGER.debug(f"Running step '{name}'.")
        try:
            return await step_func()
        except Exception:
            LOGGER.debug(f"Step '{name}' failed.")
            raise

    return await run_sequentially(steps, _run_step)
