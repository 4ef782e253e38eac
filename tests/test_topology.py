# tests/test_topology.py
import pytest

from netreduce_core import AnalysisCache, Node, Potentiometer
from netreduce_core.analysis import TopologyAnalyzer, is_series_parallel


class TestLinkGraph:

    def test_one_edge_per_internal_link_between_groups(self, wheatstone):
        netlist, _, _ = wheatstone
        graph = TopologyAnalyzer(netlist).build_link_graph()
        assert graph.number_of_nodes() == 4
        assert graph.number_of_edges() == 5
        assert {data["component"] for _, _, data in graph.edges(data=True)} == {"R1", "R2", "R3", "R4", "R5"}

    def test_potentiometer_contributes_two_edges(self, netlist_factory, jacks):
        j1, j2 = jacks
        pot = Potentiometer("VR1")
        netlist = netlist_factory([(j1, 0), (pot, 0)], [(pot, 1)], [(pot, 2), (j2, 0)])
        graph = TopologyAnalyzer(netlist).build_link_graph()
        assert sorted(data["link"] for _, _, data in graph.edges(data=True)) == ["VR1 CCW", "VR1 CW"]

    def test_component_inside_one_group_adds_no_edge(self, netlist_factory, resistors):
        r1 = resistors[0]
        netlist = netlist_factory([(r1, 0), (r1, 1)])
        assert TopologyAnalyzer(netlist).build_link_graph().number_of_edges() == 0


class TestSeriesParallelCheck:

    def test_wheatstone_bridge_is_not_reducible(self, wheatstone):
        netlist, start, end = wheatstone
        assert not is_series_parallel(netlist, start, end)

    def test_ladder_is_reducible(self, netlist_factory, jacks, resistors):
        j1, j2 = jacks
        r1, r2, r3, r4 = resistors[:4]
        netlist = netlist_factory(
            [(j1, 0), (r1, 0), (r2, 0)],
            [(r1, 1), (r2, 1), (r3, 0)],
            [(r3, 1), (r4, 0), (j2, 0)],
            [(r4, 1)],
        )
        assert is_series_parallel(netlist, Node(j1, 0), Node(j2, 0))

    def test_bridge_outside_the_start_end_block_is_ignored(self, netlist_factory, jacks, resistors):
        """A bridge hanging off the start group does not lie on any start-end path."""
        j1, j2 = jacks
        r1, r2, r3, r4, r5, r6 = resistors
        netlist = netlist_factory(
            [(j1, 0), (r6, 0), (r1, 0), (r2, 0)],
            [(r1, 1), (r3, 0), (r5, 0)],
            [(r2, 1), (r4, 0), (r5, 1)],
            [(r3, 1), (r4, 1)],
            [(r6, 1), (j2, 0)],
        )
        assert is_series_parallel(netlist, Node(j1, 0), Node(j2, 0))

    def test_trivial_cases_count_as_reducible(self, netlist_factory, jacks, resistors):
        j1, j2 = jacks
        r1 = resistors[0]
        same_group = netlist_factory([(j1, 0), (j2, 0)])
        disconnected = netlist_factory([(j1, 0), (r1, 0)], [(j2, 0)])
        assert is_series_parallel(same_group, Node(j1, 0), Node(j2, 0))
        assert is_series_parallel(disconnected, Node(j1, 0), Node(j2, 0))
        assert is_series_parallel(disconnected, Node(j1, 1), Node(j2, 0))

    def test_result_is_cached_in_process_scope(self, wheatstone):
        netlist, start, end = wheatstone
        cache = AnalysisCache()
        analyzer = TopologyAnalyzer(netlist, cache)
        assert analyzer.is_series_parallel(start, end) is False
        assert analyzer.is_series_parallel(start, end) is False
        stats = cache.get_stats()["process"]
        assert (stats["hits"], stats["misses"], stats["entries"]) == (1, 1, 1)

    def test_requires_a_netlist(self):
        with pytest.raises(TypeError):
            TopologyAnalyzer(None)
