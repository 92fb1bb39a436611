"""Naming of cluster nodes.

Nodes are numbered from 1, node N is called `node<N>` by `ccm`.
"""


def check_node_index(index: int) -> None:
    if isinstance(index, bool) or index < 1:
        msg = f"Invalid node index '{index}': nodes are numbered from 1"
        raise ValueError(msg)


def get_node_name(index: int) -> str:
    """Return name of the node with the given 1-based index."""
    check_node_index(index)
    return f"node{index}"
