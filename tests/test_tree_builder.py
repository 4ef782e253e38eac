# tests/test_tree_builder.py
import threading

import pytest

from netreduce_core import (
    AnalysisCache, AnalysisConfig, Leaf, MalformedInternalLinkError, NetlistValidationError,
    Node, Parallel, Potentiometer, RecursionLimitExceededError, Series, ToggleSwitch,
    TreeBuildCancelledError, TreeBuilder, build_tree, build_trees, find_all_paths, normalize,
)
from netreduce_core.analysis.tools import _PathSearch
from netreduce_core.components import LeadedComponent
from netreduce_core.errors import FrameworkLogicError


def R(name):
    return Leaf(name, 0, 1)


def leaf_sequences(tree):
    """Every leaf sequence a tree stands for: series concatenates, parallel unions."""
    if isinstance(tree, Leaf):
        return {(tree,)}
    if isinstance(tree, Parallel):
        return set().union(*(leaf_sequences(child) for child in tree.children))
    sequences = {()}
    for child in tree.children:
        sequences = {head + tail for head in sequences for tail in leaf_sequences(child)}
    return sequences


class TestBasicShapes:

    def test_direct_connection_is_an_empty_series(self, netlist_factory, jacks):
        j1, j2 = jacks
        netlist = netlist_factory([(j1, 0), (j2, 0)])
        assert build_tree(netlist, Node(j1, 0), Node(j2, 0)) == Parallel((Series(()),))

    def test_start_equal_to_end(self, netlist_factory, jacks):
        j1, j2 = jacks
        netlist = netlist_factory([(j1, 0), (j2, 0)])
        assert build_tree(netlist, Node(j1, 0), Node(j1, 0)) == Parallel((Series(()),))

    def test_single_resistor(self, netlist_factory, jacks, resistors):
        j1, j2 = jacks
        r1 = resistors[0]
        netlist = netlist_factory([(j1, 0), (r1, 0)], [(r1, 1), (j2, 0)])
        tree = build_tree(netlist, Node(j1, 0), Node(j2, 0))
        assert tree == Parallel((Series((Leaf("R1", 0, 1),)),))

    def test_two_parallel_resistors(self, netlist_factory, jacks, resistors):
        j1, j2 = jacks
        r1, r2 = resistors[:2]
        netlist = netlist_factory([(j1, 0), (r1, 0), (r2, 0)], [(r1, 1), (r2, 1), (j2, 0)])
        tree = build_tree(netlist, Node(j1, 0), Node(j2, 0))
        assert normalize(tree) == normalize(Series((Parallel((R("R1"), R("R2"))),)))
        assert set(tree.components()) == {"R1", "R2"}

    def test_series_chain_with_parallel_middle(self, netlist_factory, jacks, resistors):
        j1, j2 = jacks
        r1, r2, r3, r4 = resistors[:4]
        netlist = netlist_factory(
            [(j1, 0), (r1, 0)],
            [(r1, 1), (r2, 0), (r3, 0)],
            [(r2, 1), (r3, 1), (r4, 0)],
            [(r4, 1), (j2, 0)],
        )
        tree = build_tree(netlist, Node(j1, 0), Node(j2, 0))
        assert tree == Parallel((Series((R("R1"), Parallel((R("R2"), R("R3"))), R("R4"))),))

    def test_potentiometer_track_is_traversed_through_the_wiper(self, netlist_factory, jacks):
        j1, j2 = jacks
        pot = Potentiometer("VR1", value="500k")
        netlist = netlist_factory([(j1, 0), (pot, 0)], [(pot, 1)], [(pot, 2), (j2, 0)])
        tree = build_tree(netlist, Node(j1, 0), Node(j2, 0))
        assert normalize(tree) == Series((Leaf("VR1", 0, 1), Leaf("VR1", 1, 2)))

    def test_no_path_returns_none(self, netlist_factory, jacks, resistors):
        j1, j2 = jacks
        r1 = resistors[0]
        netlist = netlist_factory([(j1, 0), (r1, 0)], [(r1, 1)], [(j2, 0)])
        results = TreeBuilder().analyze(netlist, Node(j1, 0), Node(j2, 0))
        assert results.tree is None
        assert not results.found
        assert not results.truncated

    def test_missing_start_node_is_reported(self, netlist_factory, jacks, resistors):
        j1, j2 = jacks
        r1 = resistors[0]
        netlist = netlist_factory([(r1, 0), (j2, 0)])
        results = TreeBuilder().analyze(netlist, Node(j1, 0), Node(j2, 0))
        assert results.tree is None
        assert [i.code for i in results.issues] == ["TREE_START_MISSING"]

    def test_rejects_wrong_argument_types(self, netlist_factory, jacks):
        j1, j2 = jacks
        netlist = netlist_factory([(j1, 0), (j2, 0)])
        with pytest.raises(TypeError):
            TreeBuilder().analyze(netlist, "J1.Tip", Node(j2, 0))
        with pytest.raises(TypeError):
            TreeBuilder(config={"max_depth": 3})


class TestCyclesAndDeterminism:

    @pytest.fixture
    def triangle(self, netlist_factory, jacks, resistors):
        j1, j2 = jacks
        r1, r2, r3 = resistors[:3]
        netlist = netlist_factory(
            [(j1, 0), (r1, 0), (r3, 1)],
            [(r1, 1), (r2, 0)],
            [(r2, 1), (r3, 0), (j2, 0)],
        )
        return netlist, Node(j1, 0), Node(j2, 0)

    def test_loop_terminates_and_finds_both_routes(self, triangle):
        netlist, start, end = triangle
        tree = build_tree(netlist, start, end)
        assert normalize(tree) == Parallel((Series((R("R1"), R("R2"))), R("R3")))

    def test_find_all_paths_enumerates_without_merging(self, triangle):
        netlist, start, end = triangle
        assert find_all_paths(netlist, start, end) == [[R("R1"), R("R2")], [R("R3")]]

    def test_no_leaf_repeats_within_a_path(self, wheatstone):
        netlist, start, end = wheatstone
        for path in find_all_paths(netlist, start, end):
            assert len(path) == len(set(path))

    def test_built_tree_expands_to_the_enumerated_paths(self, wheatstone):
        netlist, start, end = wheatstone
        sequences = leaf_sequences(build_tree(netlist, start, end))
        for sequence in sequences:
            assert len(sequence) == len(set(sequence))
        assert sequences == {tuple(path) for path in find_all_paths(netlist, start, end)}
        assert len(sequences) == 4

    def test_repeated_builds_are_identical(self, triangle):
        netlist, start, end = triangle
        first = build_tree(netlist, start, end)
        second = TreeBuilder().build(netlist, start, end)
        assert first == second
        assert str(first) == str(second)

    def test_concurrent_builds_share_one_builder(self, triangle):
        netlist, start, end = triangle
        builder = TreeBuilder()
        expected = builder.build(netlist, start, end)
        results = []
        threads = [threading.Thread(target=lambda: results.append(builder.build(netlist, start, end))) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert results == [expected] * 4


class TestBridgeDetection:

    def test_wheatstone_bridge_yields_a_warning(self, wheatstone):
        netlist, start, end = wheatstone
        results = TreeBuilder().analyze(netlist, start, end)
        assert results.found
        assert results.is_series_parallel is False
        assert [w.code for w in results.warnings] == ["TOPO_BRIDGE_001"]

    def test_detection_never_changes_the_tree(self, wheatstone):
        netlist, start, end = wheatstone
        checked = TreeBuilder().analyze(netlist, start, end)
        unchecked = TreeBuilder(AnalysisConfig(detect_bridges=False)).analyze(netlist, start, end)
        assert checked.tree == unchecked.tree
        assert unchecked.is_series_parallel is None
        assert unchecked.warnings == ()

    def test_series_parallel_network_has_no_warning(self, netlist_factory, jacks, resistors):
        j1, j2 = jacks
        r1, r2 = resistors[:2]
        netlist = netlist_factory([(j1, 0), (r1, 0), (r2, 0)], [(r1, 1), (r2, 1), (j2, 0)])
        results = TreeBuilder().analyze(netlist, Node(j1, 0), Node(j2, 0))
        assert results.is_series_parallel is True
        assert results.issues == ()


class TestLimits:

    @pytest.fixture
    def short_and_long(self, netlist_factory, jacks, resistors):
        """R1 straight across; R2-R3-R4 as a longer alternative."""
        j1, j2 = jacks
        r1, r2, r3, r4 = resistors[:4]
        netlist = netlist_factory(
            [(j1, 0), (r1, 0), (r2, 0)],
            [(r2, 1), (r3, 0)],
            [(r3, 1), (r4, 0)],
            [(r1, 1), (r4, 1), (j2, 0)],
        )
        return netlist, Node(j1, 0), Node(j2, 0)

    def test_depth_limit_returns_partial_result(self, short_and_long):
        netlist, start, end = short_and_long
        results = TreeBuilder(AnalysisConfig(max_depth=2, detect_bridges=False)).analyze(netlist, start, end)
        assert results.truncated
        assert results.tree == Parallel((Series((R("R1"),)),))
        assert [w.code for w in results.warnings] == ["TREE_LIMIT_DEPTH"]

    def test_unlimited_search_finds_the_long_route_too(self, short_and_long):
        netlist, start, end = short_and_long
        results = TreeBuilder().analyze(netlist, start, end)
        assert not results.truncated
        assert normalize(results.tree) == Parallel((R("R1"), Series((R("R2"), R("R3"), R("R4")))))

    def test_strict_depth_limit_raises(self, short_and_long):
        netlist, start, end = short_and_long
        with pytest.raises(RecursionLimitExceededError) as excinfo:
            TreeBuilder(AnalysisConfig(max_depth=2, strict_limits=True)).analyze(netlist, start, end)
        assert excinfo.value.limit_name == "max_depth"
        assert "Recursion Limit Exceeded" in excinfo.value.get_diagnostic_report()

    def test_branch_limit(self, netlist_factory, jacks, resistors):
        j1, j2 = jacks
        r1 = resistors[0]
        netlist = netlist_factory([(j1, 0), (r1, 0)], [(r1, 1), (j2, 0)])
        results = TreeBuilder(AnalysisConfig(max_branches=1)).analyze(netlist, Node(j1, 0), Node(j2, 0))
        assert results.tree is None
        assert results.truncated
        assert [w.code for w in results.warnings] == ["TREE_LIMIT_BRANCHES"]


class TestCancellation:

    def test_set_token_cancels_the_build(self, wheatstone):
        netlist, start, end = wheatstone
        token = threading.Event()
        token.set()
        with pytest.raises(TreeBuildCancelledError):
            TreeBuilder(cancel_token=token).analyze(netlist, start, end)

    def test_unset_token_does_not_interfere(self, wheatstone):
        netlist, start, end = wheatstone
        assert TreeBuilder(cancel_token=threading.Event()).build(netlist, start, end) is not None


class TestInternalConsistency:

    def test_child_result_that_is_not_a_series_is_a_framework_error(self, monkeypatch, netlist_factory, jacks, resistors):
        j1, j2 = jacks
        r1 = resistors[0]
        netlist = netlist_factory([(j1, 0), (r1, 0)], [(r1, 1), (j2, 0)])
        search = _PathSearch.connect

        def connect_returning_bare_leaf(self, current, path, visited):
            if path:
                return [Leaf("RX", 0, 1)]
            return search(self, current, path, visited)

        monkeypatch.setattr(_PathSearch, "connect", connect_returning_bare_leaf)
        with pytest.raises(FrameworkLogicError, match="returned a Leaf instead of a Series"):
            TreeBuilder().analyze(netlist, Node(j1, 0), Node(j2, 0))


class SelfLinkedResistor(LeadedComponent):
    def internal_links(self):
        return [(0, 1, self.instance_id), (1, 1, "loop")]


class OverreachingResistor(LeadedComponent):
    def internal_links(self):
        return [(0, 1, self.instance_id), (0, 4, "ghost")]


class TestMalformedInput:

    @pytest.mark.parametrize("component_class", [SelfLinkedResistor, OverreachingResistor])
    def test_malformed_internal_links_are_rejected_before_search(self, netlist_factory, jacks, component_class):
        j1, j2 = jacks
        bad = component_class("RX")
        netlist = netlist_factory([(j1, 0), (bad, 0)], [(bad, 1), (j2, 0)])
        with pytest.raises(MalformedInternalLinkError) as excinfo:
            build_tree(netlist, Node(j1, 0), Node(j2, 0))
        assert excinfo.value.issues[0].component_fqn == "RX"

    def test_duplicate_membership_is_a_validation_error(self, netlist_factory, jacks, resistors):
        j1, j2 = jacks
        r1 = resistors[0]
        netlist = netlist_factory([(j1, 0), (r1, 0)], [(r1, 0), (r1, 1), (j2, 0)])
        with pytest.raises(NetlistValidationError) as excinfo:
            build_tree(netlist, Node(j1, 0), Node(j2, 0))
        assert not isinstance(excinfo.value, MalformedInternalLinkError)
        assert excinfo.value.issues[0].code == "NET_PART_001"


def switched_netlist(netlist_factory, j1, j2, r1, position, center_off=False):
    """J1.Tip -> S1.1C; throw A reaches J2 through R1, throw B reaches J2 directly."""
    switch = ToggleSwitch("S1", position=position, center_off=center_off)
    return netlist_factory(
        [(j1, 0), (switch, 1)],
        [(switch, 0), (r1, 0)],
        [(r1, 1), (switch, 2), (j2, 0)],
        switch_setup=[f"S1 {switch.position_name(position)}"],
    )


class TestSwitchConfigurations:

    def test_each_position_yields_its_own_tree(self, netlist_factory, jacks, resistors):
        j1, j2 = jacks
        r1 = resistors[0]
        snapshots = [switched_netlist(netlist_factory, j1, j2, r1, p) for p in (0, 1)]
        trees = build_trees(snapshots, Node(j1, 0), Node(j2, 0))
        assert trees == {
            ("S1 On A",): Parallel((Series((Leaf("S1", 1, 0), R("R1"))),)),
            ("S1 On B",): Parallel((Series((Leaf("S1", 1, 2),)),)),
        }

    def test_center_off_position_has_no_path(self, netlist_factory, jacks, resistors):
        j1, j2 = jacks
        netlist = switched_netlist(netlist_factory, j1, j2, resistors[0], 1, center_off=True)
        assert build_tree(netlist, Node(j1, 0), Node(j2, 0)) is None


class TestCaching:

    def test_results_are_served_from_the_process_cache(self, wheatstone):
        netlist, start, end = wheatstone
        cache = AnalysisCache()
        builder = TreeBuilder(cache=cache)
        first = builder.analyze(netlist, start, end)
        second = builder.analyze(netlist, start, end)
        assert second is first
        assert cache.get_stats()["process"]["hits"] == 1

    def test_different_config_is_a_different_entry(self, wheatstone):
        netlist, start, end = wheatstone
        cache = AnalysisCache()
        TreeBuilder(cache=cache).analyze(netlist, start, end)
        other = TreeBuilder(AnalysisConfig(detect_bridges=False), cache=cache).analyze(netlist, start, end)
        assert other.is_series_parallel is None
