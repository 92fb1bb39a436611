import logging
import pathlib as pl
import shutil

import pytest

from ccm_cluster_tests.utils import configuration

LOGGER = logging.getLogger(__name__)

TESTS_DIR = pl.Path(__file__).parent

pytest_plugins = ("ccm_cluster_tests.pytest_plugins.ccm_cluster",)


def pytest_collection_modifyitems(config: pytest.Config, items: list) -> None:  # noqa: ARG001
    # pylint: disable=unused-argument
    if shutil.which(configuration.CCM_BIN):
        return

    LOGGER.warning(f"The `{configuration.CCM_BIN}` tool is not available, skipping tests.")
    marker = pytest.mark.skip(reason=f"`{configuration.CCM_BIN}` not available")
    for item in items:
        if TESTS_DIR in item.path.parents:
            item.add_marker(marker)
