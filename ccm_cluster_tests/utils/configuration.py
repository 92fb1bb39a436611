"""Cluster and test environment configuration."""

import os

from packaging import version

# The cluster management tool, looked up on `PATH` unless an absolute path is given
CCM_BIN = os.environ.get("CCM_BIN") or "ccm"

CLUSTER_NAME = os.environ.get("CCM_CLUSTER_NAME") or "test"

# Reference Cassandra version the cluster is created with
CASSANDRA_VERSION = os.environ.get("CASSANDRA_VERSION") or "2.0.8"
try:
    version.Version(CASSANDRA_VERSION)
except version.InvalidVersion as exc:
    msg = f"Invalid CASSANDRA_VERSION: {CASSANDRA_VERSION}"
    raise RuntimeError(msg) from exc

# Node N listens on `IP_PREFIX + N`
IP_PREFIX = os.environ.get("CCM_IP_PREFIX") or "127.0.0."
if not IP_PREFIX.endswith("."):
    msg = f"Invalid CCM_IP_PREFIX '{IP_PREFIX}': must end with '.'"
    raise RuntimeError(msg)

# JMX port of node N is `JMX_PORT_BASE + JMX_PORT_STEP * N`
JMX_PORT_BASE = 7000
JMX_PORT_STEP = 100

# Number of nodes, use `x:y:z` notation for multiple datacenters
CLUSTER_TOPOLOGY = os.environ.get("CCM_TOPOLOGY") or "1"

try:
    UP_POLL_ATTEMPTS = int(os.environ.get("UP_POLL_ATTEMPTS") or 10)
except ValueError as exc:
    msg = f"Invalid UP_POLL_ATTEMPTS '{os.environ.get('UP_POLL_ATTEMPTS')}': must be an integer"
    raise RuntimeError(msg) from exc
if UP_POLL_ATTEMPTS < 1:
    msg = f"Invalid UP_POLL_ATTEMPTS '{UP_POLL_ATTEMPTS}': must be >= 1"
    raise RuntimeError(msg)

# Seconds between two readiness checks
try:
    UP_POLL_INTERVAL = float(os.environ.get("UP_POLL_INTERVAL") or 1)
except ValueError as exc:
    msg = f"Invalid UP_POLL_INTERVAL '{os.environ.get('UP_POLL_INTERVAL')}': must be a number"
    raise RuntimeError(msg) from exc
if UP_POLL_INTERVAL < 0:
    msg = f"Invalid UP_POLL_INTERVAL '{UP_POLL_INTERVAL}': must be >= 0"
    raise RuntimeError(msg)

# What to do when the readiness marker never shows up in the node log
UP_EXHAUSTION_POLICY = os.environ.get("UP_EXHAUSTION_POLICY") or "report_success"
if UP_EXHAUSTION_POLICY not in ("report_success", "fail"):
    msg = f"Invalid UP_EXHAUSTION_POLICY: {UP_EXHAUSTION_POLICY}"
    raise RuntimeError(msg)

# Cluster is kept running after tests finish
KEEP_CLUSTER_RUNNING = bool(os.environ.get("KEEP_CLUSTER_RUNNING"))
