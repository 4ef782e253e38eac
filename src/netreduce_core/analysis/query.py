# src/netreduce_core/analysis/query.py
"""
Read-only lookups over a Netlist snapshot.

These helpers let a caller locate the terminals to hand to the TreeBuilder:
by component type (the registry type string), by terminal display name
(case-insensitive), restricted to a subset of components, or restricted to
groups that also contain a given set of nodes. None of them mutate anything.
"""
import logging
from typing import Collection, Iterable, List, Optional

from ..components import ComponentBase
from ..data_structures import Group, Netlist, Node

logger = logging.getLogger(__name__)


def _matches(
    node: Node,
    type_ids: Collection[str],
    name_filter: Optional[str],
    belong_to: Optional[Collection[ComponentBase]] = None,
) -> bool:
    if belong_to is not None and node.component not in belong_to:
        return False
    if node.component.component_type not in type_ids:
        return False
    return name_filter is None or node.display_name.lower() == name_filter.lower()


def find_group(netlist: Netlist, node: Node) -> Optional[Group]:
    """Returns the group containing `node`, or None if it is not in the netlist."""
    return netlist.group_of(node)


def find_nodes_by_type(
    netlist: Netlist,
    type_ids: Collection[str],
    name_filter: Optional[str] = None,
    belong_to: Optional[Collection[ComponentBase]] = None,
) -> List[Node]:
    """All nodes of components of the given types, optionally filtered by terminal name and component subset."""
    return [
        node
        for group in netlist.groups
        for node in group
        if _matches(node, type_ids, name_filter, belong_to)
    ]


def find_nodes_in_group(group: Group, type_ids: Collection[str], name_filter: Optional[str] = None) -> List[Node]:
    return [node for node in group if _matches(node, type_ids, name_filter)]


def find_nodes_in_group_with(
    netlist: Netlist,
    type_ids: Collection[str],
    name_filter: Optional[str] = None,
    in_group_with: Optional[Collection[Node]] = None,
) -> List[Node]:
    """
    Like `find_nodes_by_type`, but only searches groups that contain every node
    of `in_group_with` (all groups when it is None).
    """
    result = []
    for group in netlist.groups:
        if in_group_with is not None and not all(n in group for n in in_group_with):
            continue
        result.extend(node for node in group if _matches(node, type_ids, name_filter))
    return result


def find_groups_by_type(
    netlist: Netlist,
    type_ids: Collection[str],
    name_filter: Optional[str] = None,
    belong_to: Optional[Collection[ComponentBase]] = None,
) -> List[Group]:
    """Groups holding at least one node that matches the filters, in netlist order."""
    return [
        group
        for group in netlist.groups
        if any(_matches(node, type_ids, name_filter, belong_to) for node in group)
    ]


def all_match(nodes: Iterable[Node], name: str) -> bool:
    """True if every node's display name equals `name` (case-insensitive)."""
    return all(node.display_name.lower() == name.lower() for node in nodes)


def extract_components(nodes: Iterable[Node]) -> List[ComponentBase]:
    """The distinct components owning `nodes`, first-seen order."""
    seen = {}
    for node in nodes:
        seen.setdefault(id(node.component), node.component)
    return list(seen.values())


def all_components_match(nodes: Iterable[Node], components: Iterable[ComponentBase]) -> bool:
    """True if every component in `components` owns at least one of `nodes`."""
    owners = extract_components(nodes)
    return all(component in owners for component in components)


def extract_name(component: ComponentBase) -> str:
    return component.display_name


def extract_names(components: Iterable[ComponentBase]) -> List[str]:
    return sorted(extract_name(c) for c in components)


def intersects(groups: Iterable[Group], node: Node) -> bool:
    return any(node in group for group in groups)


def intersecting_node(groups: Iterable[Group], group: Group) -> Optional[Node]:
    """The first node of `group` that also appears in one of `groups`."""
    groups = list(groups)
    for candidate in groups:
        for node in group:
            if node in candidate:
                return node
    return None


def simplify(netlist: Netlist, nodes_to_merge: Collection[Node], nodes_to_purge: Collection[Node] = ()) -> Netlist:
    """
    Builds a new snapshot in which every group touching `nodes_to_merge` is
    fused into one group (the merge nodes themselves are dropped), and the
    nodes in `nodes_to_purge` are removed from all groups. Typically used to
    collapse a component out of the netlist before searching around it.
    """
    kept: List[List[Node]] = []
    merged: List[Node] = []
    for group in netlist.groups:
        if any(n in group for n in nodes_to_merge):
            merged.extend(n for n in group if n not in nodes_to_merge)
        else:
            kept.append(list(group))
    if merged:
        kept.append(merged)

    purge = set(nodes_to_purge)
    result = Netlist.from_node_lists(
        ([n for n in nodes if n not in purge] for nodes in kept),
        switch_setup=netlist.switch_setup,
    )
    logger.debug(f"Simplified netlist from {len(netlist.groups)} to {len(result.groups)} group(s).")
    return result
