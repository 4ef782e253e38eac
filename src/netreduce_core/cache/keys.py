# src/netreduce_core/cache/keys.py
"""
Centralizes cache key construction for analysis results.

A tree build depends on the netlist snapshot, the two endpoints and the
configuration. Nodes and netlists hash by value (components by identity), so
the key can hold them directly; the same component objects must be reused for
a hit, which is exactly the snapshot contract.
"""
from typing import Tuple

from ..config import AnalysisConfig
from ..data_structures import Netlist, Node


def create_tree_key(netlist: Netlist, start: Node, end: Node, config: AnalysisConfig) -> Tuple:
    """Creates the cache key for a single TreeBuilder result."""
    return ("tree_build", netlist, start, end, config)


def create_topology_key(netlist: Netlist, start: Node, end: Node) -> Tuple:
    """Creates the cache key for a series/parallel reducibility check."""
    return ("series_parallel", netlist, start, end)
