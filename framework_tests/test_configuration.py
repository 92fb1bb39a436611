import importlib
import typing as tp

import pytest

from ccm_cluster_tests.utils import configuration


@pytest.fixture
def reload_configuration(monkeypatch: pytest.MonkeyPatch) -> tp.Generator:
    """Return function that re-reads the configuration from environment.

    The configuration is restored from the original environment afterwards.
    """
    yield lambda: importlib.reload(configuration)
    monkeypatch.undo()
    importlib.reload(configuration)


@pytest.mark.parametrize(
    ("var", "value"),
    (
        ("UP_POLL_ATTEMPTS", "ten"),
        ("UP_POLL_ATTEMPTS", "1.5"),
        ("UP_POLL_ATTEMPTS", "0"),
        ("UP_POLL_INTERVAL", "1s"),
        ("UP_POLL_INTERVAL", "-1"),
        ("UP_EXHAUSTION_POLICY", "retry"),
        ("CASSANDRA_VERSION", "latest-ish"),
        ("CCM_IP_PREFIX", "127.0.0"),
    ),
)
def test_invalid_value(
    monkeypatch: pytest.MonkeyPatch, reload_configuration: tp.Callable, var: str, value: str
):
    monkeypatch.setenv(var, value)
    with pytest.raises(RuntimeError, match=f"Invalid {var}"):
        reload_configuration()


def test_values_from_environment(
    monkeypatch: pytest.MonkeyPatch, reload_configuration: tp.Callable
):
    monkeypatch.setenv("UP_POLL_ATTEMPTS", "3")
    monkeypatch.setenv("UP_POLL_INTERVAL", "0.5")
    monkeypatch.setenv("CASSANDRA_VERSION", "3.11.4")

    reload_configuration()

    assert configuration.UP_POLL_ATTEMPTS == 3
    assert configuration.UP_POLL_INTERVAL == 0.5
    assert configuration.CASSANDRA_VERSION == "3.11.4"
