import functools
import logging
import pathlib as pl
import time

from ccm_cluster_tests.utils import ccm_runner

FRAMEWORK_LOG_NAME = "framework.log"


def get_framework_log_path(log_dir: pl.Path) -> pl.Path:
    return log_dir / FRAMEWORK_LOG_NAME


@functools.cache
def framework_logger(log_dir: pl.Path) -> logging.Logger:
    """Get logger for the `framework.log` file in the given directory.

    The log directory is the pytest base temporary directory. The logger is used for logging
    (and later reporting) events like a failure to start the ccm cluster.
    """

    class UTCFormatter(logging.Formatter):
        converter = time.gmtime  # type: ignore[assignment]

    formatter = UTCFormatter("%(asctime)s %(levelname)s %(message)s")
    handler = logging.FileHandler(get_framework_log_path(log_dir))
    handler.setFormatter(formatter)

    # Not registered with `logging.getLogger`, every log directory gets its own logger
    logger = logging.Logger("ccm_framework", level=logging.INFO)
    logger.addHandler(handler)

    return logger


def log_cluster_failure(action: str, err: Exception, *, log_dir: pl.Path) -> None:
    """Record failed cluster operation, including return code of the failed `ccm` command."""
    logger = framework_logger(log_dir)
    if isinstance(err, ccm_runner.CCMError):
        logger.error(
            "Failed to %s cluster, `ccm` returned %s:\n%s", action, err.result.returncode, err
        )
    else:
        logger.error("Failed to %s cluster:\n%s", action, err)
