# tests/conftest.py
import pytest

from netreduce_core import AnalysisCache, Jack, Netlist, Node, Resistor


@pytest.fixture(autouse=True)
def clear_process_cache():
    AnalysisCache.clear_process_cache()
    yield
    AnalysisCache.clear_process_cache()


def wire(*groups, switch_setup=()):
    """
    Builds a Netlist from groups given as lists of (component, terminal_index)
    pairs, e.g. wire([(j1, 0), (r1, 0)], [(r1, 1), (j2, 0)]).
    """
    return Netlist.from_node_lists(
        [[Node(component, index) for component, index in group] for group in groups],
        switch_setup=switch_setup,
    )


@pytest.fixture
def netlist_factory():
    return wire


@pytest.fixture
def jacks():
    """Input and output jacks; their tips are the usual search endpoints."""
    return Jack("J1"), Jack("J2")


@pytest.fixture
def resistors():
    return [Resistor(f"R{i}", value="10k") for i in range(1, 7)]


@pytest.fixture
def wheatstone(jacks, resistors):
    """
    J1.Tip -> A; R1: A-B, R2: A-C, R3: B-D, R4: C-D, R5 bridges B-C; D -> J2.Tip.
    """
    j1, j2 = jacks
    r1, r2, r3, r4, r5 = resistors[:5]
    netlist = wire(
        [(j1, 0), (r1, 0), (r2, 0)],
        [(r1, 1), (r3, 0), (r5, 0)],
        [(r2, 1), (r4, 0), (r5, 1)],
        [(r3, 1), (r4, 1), (j2, 0)],
    )
    return netlist, Node(j1, 0), Node(j2, 0)
