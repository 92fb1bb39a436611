import os
import pathlib as pl

import pytest

pytest_plugins = ("pytester",)

MOCKDIR = pl.Path(__file__).parent / "mocks"

# Make sure the fake `ccm` is used, before the configuration is loaded
os.environ.pop("CCM_BIN", None)
os.environ["PATH"] = f"{MOCKDIR}:{os.environ['PATH']}"
(MOCKDIR / "ccm").chmod(0o755)

from ccm_cluster_tests.utils import node_readiness  # noqa: E402

MOCK_VARS = (
    "CCM_MOCK_FAIL",
    "CCM_MOCK_FAIL_CODE",
    "CCM_MOCK_STDERR",
    "CCM_MOCK_NOT_READY",
    "CCM_MOCK_READY_AFTER",
)


@pytest.fixture
def ccm_log(tmp_path: pl.Path, monkeypatch: pytest.MonkeyPatch) -> pl.Path:
    """Record invocations of the fake `ccm` into a file."""
    for var in MOCK_VARS:
        monkeypatch.delenv(var, raising=False)
    log_file = tmp_path / "ccm.log"
    log_file.touch()
    monkeypatch.setenv("CCM_MOCK_LOG", str(log_file))
    return log_file


@pytest.fixture
def sleeps(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    """Record delays between readiness polls instead of sleeping."""
    recorded: list[float] = []

    async def _sleep(delay: float) -> None:
        recorded.append(delay)

    monkeypatch.setattr(node_readiness, "_poll_sleep", _sleep)
    return recorded
