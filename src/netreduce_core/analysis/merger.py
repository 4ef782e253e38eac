# src/netreduce_core/analysis/merger.py
"""
Factors shared structure out of sibling search branches.

Every branch handed to the merger is an alternative path between the same two
endpoints, usually a Series of leaves. Branches that start with the same
element are grouped, and their longest common prefix and suffix are pulled out:

    [A, B, C], [A, B, D]   ->   Series[A, B, Parallel[C, D]]

Branches left ungrouped by the leading element get a second chance grouped by
their trailing element, since a shared suffix behind divergent prefixes is
only visible from that end. Output order follows the position of each result's
first member in the input, so merging is deterministic.
"""
import logging
from typing import Dict, List, Sequence, Tuple

from ..tree import Parallel, Series, Tree

logger = logging.getLogger(__name__)


def merge_branches(branches: Sequence[Tree]) -> List[Tree]:
    """Returns the merged sibling list. The input is not modified."""
    return [tree for _, tree in _merge_pass(list(branches), backward=False)]


def _merge_pass(branches: List[Tree], backward: bool) -> List[Tuple[int, Tree]]:
    partitions: Dict[Tree, List[int]] = {}
    for index, branch in enumerate(branches):
        if isinstance(branch, Series) and branch.children:
            key = branch.children[-1] if backward else branch.children[0]
            partitions.setdefault(key, []).append(index)

    placed: List[Tuple[int, Tree]] = []
    consumed = set()
    for key, members in partitions.items():
        if len(members) < 2:
            continue
        logger.debug(f"Merging {len(members)} branches sharing {'trailing' if backward else 'leading'} element {key}.")
        placed.append((members[0], _factor([branches[i] for i in members], backward)))
        consumed.update(members)

    leftovers = [i for i in range(len(branches)) if i not in consumed]
    if backward or not leftovers:
        placed.extend((i, branches[i]) for i in leftovers)
    else:
        retried = _merge_pass([branches[i] for i in leftovers], backward=True)
        placed.extend((leftovers[j], tree) for j, tree in retried)

    placed.sort(key=lambda item: item[0])
    return placed


def _common_length(sequences: List[Tuple[Tree, ...]], limit: int) -> int:
    length = 0
    first = sequences[0]
    while length < limit and all(seq[length] == first[length] for seq in sequences):
        length += 1
    return length


def _factor(members: List[Series], backward: bool) -> Series:
    """
    Rebuilds a merge group as Series(prefix..., Parallel(remainders), suffix...).
    The partitioning end is measured first, so when prefix and suffix would
    overlap on a short member the partitioning end keeps the shared elements.
    """
    forward = [m.children for m in members]
    reverse = [tuple(reversed(seq)) for seq in forward]
    shortest = min(len(seq) for seq in forward)

    if backward:
        suffix = _common_length(reverse, shortest)
        prefix = _common_length(forward, shortest - suffix)
    else:
        prefix = _common_length(forward, shortest)
        suffix = _common_length(reverse, shortest - prefix)

    remainders = []
    for seq in forward:
        middle = seq[prefix:len(seq) - suffix]
        remainders.append(middle[0] if len(middle) == 1 else Series(middle))

    head = forward[0][:prefix]
    tail = forward[0][len(forward[0]) - suffix:] if suffix else ()
    return Series(head + (Parallel(tuple(remainders)),) + tail)
