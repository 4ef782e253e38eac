# src/netreduce_core/data_structures.py
# Required for forward references in type hints (e.g., 'ComponentBase')
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, TYPE_CHECKING

from .constants import NODE_REFERENCE_SEPARATOR

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from .components.base import ComponentBase


@dataclass(frozen=True)
class Node:
    """
    A single terminal of a single component: `(component, terminal_index)`.

    Equality and hashing use both fields. Components compare by identity, so
    the terminals of two distinct parts never collide even if their ids do.
    """
    component: ComponentBase
    terminal_index: int

    @property
    def component_id(self) -> str:
        return self.component.instance_id

    @property
    def display_name(self) -> str:
        """The terminal's name as declared by its component (e.g. 'Wiper')."""
        return self.component.terminal_name(self.terminal_index)

    def __lt__(self, other: Node) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return str(self).lower() < str(other).lower()

    def __str__(self) -> str:
        names = self.component.terminal_names()
        name = names[self.terminal_index] if 0 <= self.terminal_index < len(names) else str(self.terminal_index)
        return f"{self.component.instance_id}{NODE_REFERENCE_SEPARATOR}{name}"


@dataclass(frozen=True, eq=False)
class Group:
    """
    A set of nodes at the same electrical potential (joined by wire only).

    The nodes keep the order they were supplied in, which makes the search
    deterministic; membership tests go through a frozen set.
    """
    nodes: Tuple[Node, ...]
    _members: frozenset = field(init=False, repr=False)

    def __post_init__(self):
        unique = tuple(dict.fromkeys(self.nodes))
        object.__setattr__(self, 'nodes', unique)
        object.__setattr__(self, '_members', frozenset(unique))

    def __contains__(self, node: object) -> bool:
        return node in self._members

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Group):
            return NotImplemented
        return self._members == other._members

    def __hash__(self) -> int:
        return hash(self._members)

    def __str__(self) -> str:
        return "(" + ", ".join(sorted(str(n) for n in self.nodes)) + ")"


@dataclass(frozen=True)
class Netlist:
    """
    One immutable connectivity snapshot: the groups computed upstream for a
    single switch configuration, plus the identifiers of that configuration.
    A new Netlist is built whenever switch positions change; the reducer never
    mutates one.
    """
    groups: Tuple[Group, ...]
    switch_setup: Tuple[str, ...] = ()
    _group_index: Dict[Node, Group] = field(init=False, repr=False, compare=False, hash=False)

    def __post_init__(self):
        object.__setattr__(self, 'groups', tuple(self.groups))
        object.__setattr__(self, 'switch_setup', tuple(self.switch_setup))
        index: Dict[Node, Group] = {}
        for group in self.groups:
            for node in group:
                # First group wins; duplicate membership is reported by the validator.
                index.setdefault(node, group)
        object.__setattr__(self, '_group_index', index)

    @classmethod
    def from_node_lists(cls, groups: Iterable[Iterable[Node]], switch_setup: Iterable[str] = ()) -> Netlist:
        return cls(groups=tuple(Group(tuple(g)) for g in groups), switch_setup=tuple(switch_setup))

    def group_of(self, node: Node) -> Optional[Group]:
        return self._group_index.get(node)

    def nodes(self) -> List[Node]:
        return [node for group in self.groups for node in group]

    def components(self) -> List[ComponentBase]:
        """Every component with at least one terminal in the netlist, in first-seen order."""
        seen: Dict[int, ComponentBase] = {}
        for node in self.nodes():
            seen.setdefault(id(node.component), node.component)
        return list(seen.values())

    def __str__(self) -> str:
        lines = [f"Switch setup: {list(self.switch_setup)}"]
        lines.extend(str(group) for group in self.groups)
        return "\n".join(lines)
