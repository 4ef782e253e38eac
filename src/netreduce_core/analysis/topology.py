# src/netreduce_core/analysis/topology.py
"""
Series/parallel reducibility check for the network between two nodes.

The TreeBuilder always produces a series/parallel expression. For a bridge
network (e.g. a Wheatstone bridge) no such expression is exact, and the tree it
returns is best-effort. This module detects that case so the caller can be
warned. It never changes the tree.
"""
import logging
from typing import Dict, Optional

import networkx as nx

from ..cache.keys import create_topology_key
from ..cache.service import AnalysisCache
from ..components import IInternalLinkProvider
from ..data_structures import Netlist, Node

logger = logging.getLogger(__name__)


class TopologyAnalyzer:
    """
    Builds the group-level link graph of a netlist and reduces it.

    Vertices are group indices; every internal link between terminals that sit
    in two different groups is one edge of a `networkx.MultiGraph`.
    """
    def __init__(self, netlist: Netlist, cache: Optional[AnalysisCache] = None):
        if not isinstance(netlist, Netlist):
            raise TypeError("TopologyAnalyzer requires a Netlist snapshot.")
        self.netlist = netlist
        self.cache = cache
        self._vertex_of: Dict[Node, int] = {}
        for index, group in enumerate(netlist.groups):
            for node in group:
                self._vertex_of.setdefault(node, index)

    def build_link_graph(self) -> nx.MultiGraph:
        graph = nx.MultiGraph()
        graph.add_nodes_from(range(len(self.netlist.groups)))
        for component in self.netlist.components():
            provider = component.get_capability(IInternalLinkProvider)
            if provider is None:
                continue
            count = component.terminal_count
            for i in range(count):
                for j in range(i + 1, count):
                    link_name = provider.get_internal_link(component, i, j)
                    if link_name is None:
                        continue
                    u = self._vertex_of.get(Node(component, i))
                    v = self._vertex_of.get(Node(component, j))
                    # A component shorted within one group adds no structure.
                    if u is not None and v is not None and u != v:
                        graph.add_edge(u, v, component=component.instance_id, link=link_name)
        return graph

    def is_series_parallel(self, start: Node, end: Node) -> bool:
        """
        True when the part of the network lying on start-end paths reduces to
        a single edge by series and parallel reductions. Trivial cases (missing
        nodes, same group, no connection) count as reducible.
        """
        if self.cache is None:
            return self._check(start, end)
        key = create_topology_key(self.netlist, start, end)
        return self.cache.get_or_compute(key, lambda: self._check(start, end), scope='process')

    def _check(self, start: Node, end: Node) -> bool:
        s = self._vertex_of.get(start)
        t = self._vertex_of.get(end)
        if s is None or t is None or s == t:
            return True

        graph = self.build_link_graph()
        if not nx.has_path(graph, s, t):
            return True

        # Only the biconnected block holding a virtual s-t edge lies on s-t paths.
        closure = nx.Graph(graph)
        closure.add_edge(s, t)
        block = next(c for c in nx.biconnected_components(closure) if s in c and t in c)
        reduced = nx.MultiGraph(graph.subgraph(block))

        _reduce(reduced, terminals=(s, t))
        reducible = (
            set(reduced.nodes) == {s, t}
            and reduced.number_of_edges() == 1
        )
        if not reducible:
            logger.debug(
                f"Network between '{start}' and '{end}' did not reduce: "
                f"{reduced.number_of_nodes()} vertices, {reduced.number_of_edges()} edges left."
            )
        return reducible


def _reduce(graph: nx.MultiGraph, terminals) -> None:
    """Applies parallel, self-loop, dangling and series reductions until none applies."""
    changed = True
    while changed:
        changed = False
        graph.remove_edges_from(list(nx.selfloop_edges(graph)))
        for u, v in set(graph.edges()):
            while graph.number_of_edges(u, v) > 1:
                graph.remove_edge(u, v)
                changed = True
        for vertex in list(graph.nodes):
            if vertex in terminals:
                continue
            degree = graph.degree(vertex)
            if degree <= 1:
                graph.remove_node(vertex)
                changed = True
            elif degree == 2:
                (_, a), (_, b) = list(graph.edges(vertex))
                graph.remove_node(vertex)
                graph.add_edge(a, b)
                changed = True
                break


def is_series_parallel(netlist: Netlist, start: Node, end: Node) -> bool:
    """Convenience wrapper around `TopologyAnalyzer.is_series_parallel`."""
    return TopologyAnalyzer(netlist).is_series_parallel(start, end)
