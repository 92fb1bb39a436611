import typing as tp

# Arguments passed to the cluster management tool
CCMArgs = tuple[str, ...]
# Node count, `x:y:z` string for multiple datacenters, or list of per-datacenter counts
TopologyType = int | str | tp.Sequence[int]
