# src/netreduce_core/tree.py
"""
The path-expression type produced by the TreeBuilder.

A `Tree` is one of three immutable variants:

- `Leaf`: traversal through one component between two of its terminals.
- `Series`: children traversed one after another.
- `Parallel`: children that are electrically alternative routes between the
  same two endpoints.

All variants are frozen and hold their children in tuples. Extending a path
therefore always builds a new value, and sibling search branches can never
alias each other's child lists. `clone()` exists for callers that want an
independent copy; it cannot fail.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Tuple

logger = logging.getLogger(__name__)


class Tree(ABC):
    """Common behaviour of the three tree variants."""

    @abstractmethod
    def leaves(self) -> Iterator[Leaf]:
        """Yields every Leaf in left-to-right order."""

    @abstractmethod
    def clone(self) -> Tree:
        """Returns a structurally equal, independent copy."""

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """Nested plain-dict form, suitable for JSON/YAML dumps."""

    def components(self) -> List[str]:
        """Ids of the traversed components, first-seen order, no duplicates."""
        return list(dict.fromkeys(leaf.component_id for leaf in self.leaves()))

    def contains(self, other: Tree) -> bool:
        """True if `other` is this tree or appears anywhere below it."""
        return self == other

    def __repr__(self) -> str:
        return str(self)


@dataclass(frozen=True, eq=False, repr=False)
class Leaf(Tree):
    """
    Traversal through `component_id` from `entry_terminal` to `exit_terminal`.

    Two leaves are equal when they cross the same component between the same
    pair of terminals, in either direction: they are electrically identical.
    """
    component_id: str
    entry_terminal: int
    exit_terminal: int

    def __post_init__(self):
        if self.entry_terminal == self.exit_terminal:
            raise ValueError(
                f"Leaf for component '{self.component_id}' cannot enter and exit through "
                f"the same terminal ({self.entry_terminal})."
            )

    @property
    def terminals(self) -> frozenset:
        return frozenset((self.entry_terminal, self.exit_terminal))

    def leaves(self) -> Iterator[Leaf]:
        yield self

    def clone(self) -> Leaf:
        return Leaf(self.component_id, self.entry_terminal, self.exit_terminal)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "leaf",
            "component": self.component_id,
            "entry": self.entry_terminal,
            "exit": self.exit_terminal,
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Leaf):
            return NotImplemented
        return self.component_id == other.component_id and self.terminals == other.terminals

    def __hash__(self) -> int:
        return hash(("leaf", self.component_id, self.terminals))

    def __str__(self) -> str:
        return f"{self.component_id}({self.entry_terminal}->{self.exit_terminal})"


@dataclass(frozen=True, eq=False, repr=False)
class _Container(Tree):
    children: Tuple[Tree, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'children', tuple(self.children))

    def leaves(self) -> Iterator[Leaf]:
        for child in self.children:
            yield from child.leaves()

    def clone(self) -> _Container:
        return type(self)(tuple(child.clone() for child in self.children))

    def contains(self, other: Tree) -> bool:
        return self == other or any(child.contains(other) for child in self.children)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": type(self).__name__.lower(),
            "children": [child.to_dict() for child in self.children],
        }

    def __len__(self) -> int:
        return len(self.children)

    def __str__(self) -> str:
        return f"{type(self).__name__}[{', '.join(str(c) for c in self.children)}]"


@dataclass(frozen=True, eq=False, repr=False)
class Series(_Container):
    """Children traversed one after another. Order is part of equality."""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Series):
            return NotImplemented
        return self.children == other.children

    def __hash__(self) -> int:
        return hash(("series", self.children))


@dataclass(frozen=True, eq=False, repr=False)
class Parallel(_Container):
    """Alternative routes between the same endpoints. Compared as a multiset."""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Parallel):
            return NotImplemented
        return Counter(self.children) == Counter(other.children)

    def __hash__(self) -> int:
        return hash(("parallel", frozenset(Counter(self.children).items())))


def normalize(tree: Tree) -> Tree:
    """
    Returns an electrically equivalent tree with redundant nesting removed:
    single-child containers are replaced by their child, nested containers of
    the same kind are flattened, and empty series (bare wire) inside a series
    are dropped. An empty series inside a parallel is kept, it is a short.

    Useful for comparing trees that differ only in grouping, e.g.
    `Parallel[Series[A], Series[B]]` and `Series[Parallel[A, B]]`.
    """
    if isinstance(tree, Leaf):
        return tree

    children: List[Tree] = []
    for child in (normalize(c) for c in tree.children):
        if isinstance(tree, Series) and isinstance(child, Series):
            children.extend(child.children)
        elif isinstance(tree, Parallel) and isinstance(child, Parallel):
            children.extend(child.children)
        else:
            children.append(child)

    if len(children) == 1:
        return children[0]
    return type(tree)(tuple(children))
