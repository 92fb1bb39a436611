"""Functionality for cluster setup and interaction with cluster nodes.

No cluster state is kept here. The `ccm` tool is the only authority on which cluster exists,
so every operation just builds the `ccm` arguments and runs the command.
"""

import logging
import typing as tp

from ccm_cluster_tests.utils import ccm_runner
from ccm_cluster_tests.utils import configuration
from ccm_cluster_tests.utils import node_names
from ccm_cluster_tests.utils import node_readiness
from ccm_cluster_tests.utils import sequential
from ccm_cluster_tests.utils import types as ttypes

LOGGER = logging.getLogger(__name__)


def format_topology(topology: ttypes.TopologyType) -> str:
    """Return node count spec in the `x:y:z` notation understood by `ccm populate -n`.

    >>> format_topology([3, 2])
    '3:2'
    """
    counts: list[int]
    if isinstance(topology, bool):
        msg = f"Invalid topology '{topology}'"
        raise ValueError(msg)
    if isinstance(topology, int):
        counts = [topology]
    elif isinstance(topology, str):
        try:
            counts = [int(c) for c in topology.strip().split(":")]
        except ValueError as exc:
            msg = f"Invalid topology '{topology}'"
            raise ValueError(msg) from exc
    else:
        counts = list(topology)

    if not counts or any(c < 1 for c in counts):
        msg = f"Invalid topology '{topology}': every datacenter needs at least one node"
        raise ValueError(msg)

    return ":".join(str(c) for c in counts)


def get_node_ip(index: int) -> str:
    node_names.check_node_index(index)
    return f"{configuration.IP_PREFIX}{index}"


def get_node_jmx_port(index: int) -> int:
    node_names.check_node_index(index)
    return configuration.JMX_PORT_BASE + configuration.JMX_PORT_STEP * index


def get_create_args(
    *, name: str = configuration.CLUSTER_NAME, version: str = configuration.CASSANDRA_VERSION
) -> ttypes.CCMArgs:
    return ("create", name, "-v", version)


def get_populate_args(topology: ttypes.TopologyType) -> ttypes.CCMArgs:
    return ("populate", "-n", format_topology(topology))


def get_bootstrap_node_args(index: int) -> ttypes.CCMArgs:
    """Return arguments for adding a new node with binary protocol enabled.

    >>> get_bootstrap_node_args(3)
    ('add', 'node3', '-i', '127.0.0.3', '-j', '7300', '-b')
    """
    return (
        "add",
        node_names.get_node_name(index),
        "-i",
        get_node_ip(index),
        "-j",
        str(get_node_jmx_port(index)),
        "-b",
    )


def get_start_node_args(index: int) -> ttypes.CCMArgs:
    return (node_names.get_node_name(index), "start")


async def start_all(topology: ttypes.TopologyType = 1) -> node_readiness.RetryState:
    """Remove previous cluster and create, populate and start a new one.

    Returns after the first node announced it accepts CQL clients (or the polling budget was
    exhausted, see `node_readiness.ExhaustionPolicy`).
    """
    nodes_spec = format_topology(topology)
    LOGGER.info(
        f"Starting cluster '{configuration.CLUSTER_NAME}' "
        f"(Cassandra {configuration.CASSANDRA_VERSION}, nodes '{nodes_spec}')."
    )

    steps: list[sequential.NamedStep] = [
        # It won't hurt to remove, there may be no cluster at all
        ("remove", lambda: ccm_runner.run_ccm(["remove"], ignore_fail=True)),
        ("create", lambda: ccm_runner.run_ccm(get_create_args())),
        ("populate", lambda: ccm_runner.run_ccm(get_populate_args(nodes_spec))),
        ("start", lambda: ccm_runner.run_ccm(["start"])),
        ("wait for up", node_readiness.wait_for_up),
    ]
    results = await sequential.run_steps(steps)

    LOGGER.info("Cluster started.")
    return tp.cast(node_readiness.RetryState, results[-1])


async def remove() -> ccm_runner.CCMResult:
    """Remove the current cluster."""
    LOGGER.info("Removing cluster.")
    return await ccm_runner.run_ccm(["remove"])


async def bootstrap_node(index: int) -> ccm_runner.CCMResult:
    """Add a new node to the cluster.

    Args:
        index: 1-based index of the node.
    """
    LOGGER.info(f"Bootstrapping node '{node_names.get_node_name(index)}'.")
    return await ccm_runner.run_ccm(get_bootstrap_node_args(index))


async def start_node(index: int) -> ccm_runner.CCMResult:
    """Start a single node of the cluster."""
    LOGGER.info(f"Starting node '{node_names.get_node_name(index)}'.")
    return await ccm_runner.run_ccm(get_start_node_args(index))


async def exec_ccm(args: tp.Iterable[str]) -> ccm_runner.CCMResult:
    """Run any other `ccm` command."""
    return await ccm_runner.run_ccm(args)
