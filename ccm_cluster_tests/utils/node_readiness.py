"""Waiting for a freshly started cluster to accept CQL clients.

The node log is the only readiness signal available from `ccm`. The log line announcing the CQL
listener can lag behind the start command, so the log is polled a bounded number of times with
a fixed delay between attempts.
"""

import asyncio
import dataclasses
import enum
import logging
import re

from ccm_cluster_tests.utils import ccm_runner
from ccm_cluster_tests.utils import configuration
from ccm_cluster_tests.utils import node_names

LOGGER = logging.getLogger(__name__)

# NOTE: The regex needs to be unanchored.
READY_RE = re.compile("Starting listening for CQL clients", re.IGNORECASE | re.MULTILINE)

_poll_sleep = asyncio.sleep


class PollState(enum.StrEnum):
    POLLING = "polling"
    SATISFIED = "satisfied"
    EXHAUSTED = "exhausted"


class ExhaustionPolicy(enum.StrEnum):
    """What to report when the readiness marker was never found."""

    # Historical behavior, the caller is not failed when polling budget is exhausted
    REPORT_SUCCESS = "report_success"
    FAIL = "fail"


class CCMReadinessTimeoutError(Exception):
    pass


@dataclasses.dataclass
class RetryState:
    max_attempts: int
    interval: float
    attempt: int = 0
    satisfied: bool = False
    state: PollState = PollState.POLLING


def is_cql_listening(log_text: str) -> bool:
    """Check if the node log announces that the node accepts CQL clients."""
    return bool(READY_RE.search(log_text))


async def wait_for_up(
    *,
    node_index: int = 1,
    max_attempts: int = configuration.UP_POLL_ATTEMPTS,
    interval: float = configuration.UP_POLL_INTERVAL,
    on_exhaustion: ExhaustionPolicy | str = configuration.UP_EXHAUSTION_POLICY,
) -> RetryState:
    """Poll the log of a node until the node accepts CQL clients.

    Failure of the log retrieval command is not retried and is propagated to the caller.

    Args:
        node_index: 1-based index of the node whose log is checked.
        max_attempts: Maximal number of log checks.
        interval: Seconds to wait between two log checks.
        on_exhaustion: Whether to report success or fail when the marker was never found.

    Returns:
        RetryState: The final polling state, `satisfied` or `exhausted`.
    """
    if max_attempts < 1:
        msg = f"Invalid number of attempts '{max_attempts}': must be >= 1"
        raise ValueError(msg)
    on_exhaustion = ExhaustionPolicy(on_exhaustion)

    retry_state = RetryState(max_attempts=max_attempts, interval=interval)
    node_name = node_names.get_node_name(node_index)

    while retry_state.state == PollState.POLLING:
        result = await ccm_runner.run_ccm([node_name, "showlog"])
        retry_state.attempt += 1

        if is_cql_listening(result.stdout_text):
            retry_state.satisfied = True
            retry_state.state = PollState.SATISFIED
            LOGGER.info(
                f"Node '{node_name}' accepts CQL clients (attempt {retry_state.attempt})."
            )
        elif retry_state.attempt >= retry_state.max_attempts:
            retry_state.state = PollState.EXHAUSTED
        else:
            LOGGER.debug(
                f"Node '{node_name}' doesn't accept CQL clients yet "
                f"(attempt {retry_state.attempt}/{retry_state.max_attempts})."
            )
            await _poll_sleep(retry_state.interval)

    if retry_state.state == PollState.EXHAUSTED:
        msg = (
            f"Node '{node_name}' didn't start listening for CQL clients "
            f"after {retry_state.attempt} attempts."
        )
        if on_exhaustion == ExhaustionPolicy.FAIL:
            raise CCMReadinessTimeoutError(msg)
        LOGGER.warning(f"{msg} Reporting success anyway.")

    return retry_state
