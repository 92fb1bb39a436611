#!/usr/bin/env python3
"""Manage the ccm test cluster outside of pytest.

For settings it uses the same env variables as when running the tests.
"""

import argparse
import asyncio
import logging
import sys
import typing as tp

from ccm_cluster_tests.utils import cluster_nodes
from ccm_cluster_tests.utils import configuration
from ccm_cluster_tests.utils import node_readiness

LOGGER = logging.getLogger(__name__)


def get_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Get command line arguments."""
    parser = argparse.ArgumentParser(description=(__doc__ or "").split("\n", maxsplit=1)[0])
    subparsers = parser.add_subparsers(dest="command", required=True)

    parser_start = subparsers.add_parser("start", help="Recreate and start the cluster")
    parser_start.add_argument(
        "-n",
        "--topology",
        default=configuration.CLUSTER_TOPOLOGY,
        help=(
            "Number of nodes, use `x:y` notation for multiple datacenters "
            f"(default: {configuration.CLUSTER_TOPOLOGY})"
        ),
    )

    subparsers.add_parser("remove", help="Remove the cluster")

    for name, help_str in (
        ("bootstrap-node", "Add a new node to the cluster"),
        ("start-node", "Start a single node"),
    ):
        parser_node = subparsers.add_parser(name, help=help_str)
        parser_node.add_argument(
            "-i", "--index", required=True, type=int, help="1-based index of the node"
        )

    parser_wait = subparsers.add_parser("wait-up", help="Wait until a node accepts CQL clients")
    parser_wait.add_argument(
        "--node", type=int, default=1, help="1-based index of the node (default: 1)"
    )

    parser_exec = subparsers.add_parser("exec", help="Run any other ccm command")
    parser_exec.add_argument("ccm_args", nargs=argparse.REMAINDER, help="Arguments for ccm")

    return parser.parse_args(argv)


def get_coroutine(args: argparse.Namespace) -> tp.Coroutine[tp.Any, tp.Any, tp.Any]:
    """Return the cluster operation selected on command line."""
    if args.command == "start":
        return cluster_nodes.start_all(args.topology)
    if args.command == "remove":
        return cluster_nodes.remove()
    if args.command == "bootstrap-node":
        return cluster_nodes.bootstrap_node(args.index)
    if args.command == "start-node":
        return cluster_nodes.start_node(args.index)
    if args.command == "wait-up":
        return node_readiness.wait_for_up(node_index=args.node)

    ccm_args = args.ccm_args
    if ccm_args and ccm_args[0] == "--":
        ccm_args = ccm_args[1:]
    return cluster_nodes.exec_ccm(ccm_args)


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        format="%(name)s:%(levelname)s:%(message)s",
        level=logging.INFO,
    )
    args = get_args(argv)

    try:
        asyncio.run(get_coroutine(args))
    except Exception as exc:
        LOGGER.error(str(exc))  # noqa: TRY400
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
