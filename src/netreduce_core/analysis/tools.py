# src/netreduce_core/analysis/tools.py

"""
Provides the TreeBuilder: the depth-first path search that reduces the network
between two nodes of a netlist snapshot to a series/parallel Tree.
"""

import logging
from typing import Dict, FrozenSet, Iterable, List, Optional, Protocol, Set, Tuple

from ..cache.keys import create_tree_key
from ..cache.service import AnalysisCache
from ..components import IInternalLinkProvider
from ..config import AnalysisConfig
from ..data_structures import Netlist, Node
from ..errors import FrameworkLogicError, NetReduceError
from ..tree import Leaf, Parallel, Series, Tree
from ..validation import NetlistIssueCode, NetlistValidator, ValidationIssue, ValidationIssueLevel
from .exceptions import RecursionLimitExceededError, TreeAnalysisError, TreeBuildCancelledError
from .merger import merge_branches
from .results import TreeBuildResults
from .topology import TopologyAnalyzer

logger = logging.getLogger(__name__)

Path = Tuple[Tree, ...]


class CancellationToken(Protocol):
    """Anything with an `is_set()` method, e.g. `threading.Event`."""
    def is_set(self) -> bool:
        ...


class _PathSearch:
    """
    State of one build. Only the counters live here; the partial path and the
    visited set travel down the recursion as immutable values, so sibling
    branches never see each other's progress.
    """
    def __init__(
        self,
        netlist: Netlist,
        start: Node,
        end: Node,
        config: AnalysisConfig,
        cancel_token: Optional[CancellationToken],
    ):
        self.netlist = netlist
        self.start = start
        self.end = end
        self.config = config
        self.cancel_token = cancel_token
        self.calls = 0
        self.limits_hit: Set[str] = set()

    def connect(self, current: Node, path: Path, visited: FrozenSet[Node]) -> List[Tree]:
        """Returns every complete path from `current` to the end, merged."""
        if self.cancel_token is not None and self.cancel_token.is_set():
            raise TreeBuildCancelledError(start=str(self.start), end=str(self.end))

        self.calls += 1
        if self.calls > self.config.max_branches:
            self._limit_reached('max_branches', self.config.max_branches)
            return []

        if current == self.end:
            return [Series(path)]

        group = self.netlist.group_of(current)
        if group is None:
            return []

        # Wire-connected to the end: nothing more to traverse.
        if self.end in group:
            return [Series(path)]

        if len(path) >= self.config.max_depth:
            self._limit_reached('max_depth', self.config.max_depth)
            return []

        visited = visited | frozenset(group.nodes)

        branches: List[Tree] = []
        for node in group:
            component = node.component
            provider = component.get_capability(IInternalLinkProvider)
            if provider is None:
                continue
            for index in range(component.terminal_count):
                if index == node.terminal_index:
                    continue
                if provider.get_internal_link(component, index, node.terminal_index) is None:
                    continue
                candidate = Node(component, index)
                if candidate in visited:
                    continue
                leaf = Leaf(component.instance_id, node.terminal_index, index)
                extended = path if path and path[-1] == leaf else path + (leaf,)
                branches.extend(self.connect(candidate, extended, visited))

        if not branches:
            return []

        if len(branches) == 1:
            only = branches[0]
            # A child result already carries `path` as its prefix.
            if not isinstance(only, Series):
                raise FrameworkLogicError(
                    f"Path search below '{current}' returned a {type(only).__name__} instead of a Series."
                )
            return [only]

        return merge_branches(branches)

    def _limit_reached(self, limit_name: str, limit: int):
        if self.config.strict_limits:
            raise RecursionLimitExceededError(
                limit_name=limit_name, limit=limit, start=str(self.start), end=str(self.end)
            )
        if limit_name not in self.limits_hit:
            logger.warning(
                f"Search limit '{limit_name}' ({limit}) reached between '{self.start}' and '{self.end}'; "
                f"returning a partial result."
            )
        self.limits_hit.add(limit_name)


class TreeBuilder:
    """
    Builds the series/parallel Tree describing every non-cyclic electrical
    path between two nodes of a netlist snapshot.

    A builder holds only configuration and injected services, so one instance
    can serve many builds, including concurrent builds over snapshots that are
    not being mutated.
    """
    def __init__(
        self,
        config: Optional[AnalysisConfig] = None,
        cache: Optional[AnalysisCache] = None,
        cancel_token: Optional[CancellationToken] = None,
    ):
        """
        Args:
            config: Search limits and checks. Defaults to `AnalysisConfig()`.
            cache: Optional cache; results are stored in its 'process' scope.
            cancel_token: Checked once per recursive call; when set, the build
                          raises TreeBuildCancelledError.
        """
        self.config: AnalysisConfig = config or AnalysisConfig()
        if not isinstance(self.config, AnalysisConfig):
            raise TypeError("TreeBuilder requires an AnalysisConfig instance.")
        if cache is not None and not isinstance(cache, AnalysisCache):
            raise TypeError("TreeBuilder requires a valid AnalysisCache instance.")
        self.cache = cache
        self.cancel_token = cancel_token
        logger.debug(f"TreeBuilder initialized with {self.config}.")

    def analyze(self, netlist: Netlist, start: Node, end: Node) -> TreeBuildResults:
        """
        Runs validation, the path search and the bridge check.

        Raises:
            MalformedInternalLinkError / NetlistValidationError: invalid snapshot.
            RecursionLimitExceededError: a limit was hit with `strict_limits`.
            TreeBuildCancelledError: the cancellation token was set.
            TreeAnalysisError: an unexpected internal failure.
        """
        if not isinstance(netlist, Netlist):
            raise TypeError("TreeBuilder requires a Netlist snapshot.")
        if not isinstance(start, Node) or not isinstance(end, Node):
            raise TypeError("TreeBuilder requires Node endpoints.")

        cache_key = create_tree_key(netlist, start, end, self.config)
        if self.cache is not None:
            cached = self.cache.get(key=cache_key, scope='process')
            if cached is not None:
                if isinstance(cached, TreeBuildResults):
                    return cached
                logger.warning(
                    f"Cache integrity issue: expected TreeBuildResults but got {type(cached)}. Re-computing."
                )

        issues: List[ValidationIssue] = []
        if self.config.validate_links:
            issues.extend(NetlistValidator(netlist).raise_for_errors())

        if start != end and netlist.group_of(start) is None:
            issues.append(NetlistIssueCode.TREE_START_MISSING.issue(ValidationIssueLevel.INFO, node=str(start)))

        search = _PathSearch(netlist, start, end, self.config, self.cancel_token)
        try:
            paths = search.connect(start, (), frozenset())
        except NetReduceError:
            raise
        except Exception as e:
            raise TreeAnalysisError(
                context=f"'{start}' -> '{end}'",
                details=f"An unexpected error occurred during the path search: {e}"
            ) from e

        tree = Parallel(tuple(paths)) if paths else None

        for limit_name in sorted(search.limits_hit):
            code = NetlistIssueCode.TREE_LIMIT_DEPTH if limit_name == 'max_depth' else NetlistIssueCode.TREE_LIMIT_BRANCHES
            issues.append(code.issue(
                ValidationIssueLevel.WARNING,
                limit=getattr(self.config, limit_name), start=str(start), end=str(end),
            ))

        series_parallel = None
        if self.config.detect_bridges and tree is not None:
            series_parallel = TopologyAnalyzer(netlist, self.cache).is_series_parallel(start, end)
            if not series_parallel:
                issue = NetlistIssueCode.TOPO_BRIDGE_001.issue(ValidationIssueLevel.WARNING, start=str(start), end=str(end))
                logger.warning(issue.message)
                issues.append(issue)

        results = TreeBuildResults(
            tree=tree,
            issues=tuple(issues),
            truncated=bool(search.limits_hit),
            is_series_parallel=series_parallel,
        )
        logger.debug(f"Built tree between '{start}' and '{end}' in {search.calls} call(s): {tree}")

        if self.cache is not None:
            self.cache.put(key=cache_key, value=results, scope='process')
        return results

    def build(self, netlist: Netlist, start: Node, end: Node) -> Optional[Tree]:
        """Returns only the tree of `analyze`; None means no path exists."""
        return self.analyze(netlist, start, end).tree


def build_tree(netlist: Netlist, start: Node, end: Node, config: Optional[AnalysisConfig] = None) -> Optional[Tree]:
    """Builds the path tree between `start` and `end`, or None if there is no path."""
    return TreeBuilder(config).build(netlist, start, end)


def build_trees(
    netlists: Iterable[Netlist],
    start: Node,
    end: Node,
    config: Optional[AnalysisConfig] = None,
) -> Dict[Tuple[str, ...], Optional[Tree]]:
    """
    Builds one tree per snapshot, keyed by the snapshot's switch setup. This is
    how all positions of the switches in a project are explored: upstream
    produces one Netlist per configuration.
    """
    builder = TreeBuilder(config)
    return {tuple(netlist.switch_setup): builder.build(netlist, start, end) for netlist in netlists}


def find_all_paths(netlist: Netlist, start: Node, end: Node) -> List[List[Leaf]]:
    """
    Enumerates every path from `start` to `end` as a flat list of leaves,
    without merging. Whole groups are marked visited, exactly as in the
    TreeBuilder, so a path never re-enters a group it has left and the result
    matches the leaf sequences of the built tree one for one.
    """
    paths: List[List[Leaf]] = []

    def walk(current: Node, path: Tuple[Leaf, ...], visited: FrozenSet[Node]):
        if current == end:
            paths.append(list(path))
            return
        group = netlist.group_of(current)
        if group is None:
            return
        if end in group:
            paths.append(list(path))
            return
        visited = visited | frozenset(group.nodes)
        for node in group:
            provider = node.component.get_capability(IInternalLinkProvider)
            if provider is None:
                continue
            for index in range(node.component.terminal_count):
                if index == node.terminal_index or provider.get_internal_link(node.component, index, node.terminal_index) is None:
                    continue
                candidate = Node(node.component, index)
                if candidate not in visited:
                    leaf = Leaf(node.component.instance_id, node.terminal_index, index)
                    walk(candidate, path if leaf in path else path + (leaf,), visited)

    walk(start, (), frozenset())
    return paths
