"""Pytest plugin providing ccm cluster for integration tests.

Enable it in `conftest.py`:

    pytest_plugins = ("ccm_cluster_tests.pytest_plugins.ccm_cluster",)
"""

import asyncio
import logging
import typing as tp

import pytest
from _pytest.config import Config
from _pytest.tmpdir import TempPathFactory

from ccm_cluster_tests.utils import cluster_nodes
from ccm_cluster_tests.utils import configuration
from ccm_cluster_tests.utils import framework_log

LOGGER = logging.getLogger(__name__)

TOPOLOGY_ARG = "--ccm-topology"


def pytest_addoption(parser: tp.Any) -> None:
    parser.addoption(
        TOPOLOGY_ARG,
        action="store",
        default=configuration.CLUSTER_TOPOLOGY,
        help="Number of cluster nodes, use `x:y` notation for multiple datacenters",
    )


@pytest.fixture(scope="session")
def ccm_cluster(
    pytestconfig: Config,
    tmp_path_factory: TempPathFactory,
) -> tp.Generator[str, None, None]:
    """Start a fresh ccm cluster for the test session, remove it afterwards."""
    log_dir = tmp_path_factory.getbasetemp()
    try:
        topology = cluster_nodes.format_topology(pytestconfig.getoption(TOPOLOGY_ARG))
        asyncio.run(cluster_nodes.start_all(topology))
    except Exception as err:
        LOGGER.error(f"Failed to start cluster: {err}")  # noqa: TRY400
        framework_log.log_cluster_failure("start", err, log_dir=log_dir)
        pytest.exit(reason=f"Failed to start cluster: {err}", returncode=1)

    yield topology

    if configuration.KEEP_CLUSTER_RUNNING:
        LOGGER.info("Keeping the cluster running as 'KEEP_CLUSTER_RUNNING' is set.")
        return

    try:
        asyncio.run(cluster_nodes.remove())
    except Exception as err:
        framework_log.log_cluster_failure("remove", err, log_dir=log_dir)
        raise


@pytest.fixture
def ccm_node_bootstrapper(ccm_cluster: str) -> tp.Callable[[int], None]:  # noqa: ARG001
    """Return function that adds a new node to the running cluster and starts it."""
    # pylint: disable=unused-argument

    def _bootstrap(index: int) -> None:
        async def _add_and_start() -> None:
            await cluster_nodes.bootstrap_node(index)
            await cluster_nodes.start_node(index)

        asyncio.run(_add_and_start())

    return _bootstrap
