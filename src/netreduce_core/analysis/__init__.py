"""
Defines the public interface for the analysis services package: the
TreeBuilder path search, the branch merger, the series/parallel topology check
and the read-only query helpers used to locate endpoints.
"""
from .results import TreeBuildResults
from .tools import TreeBuilder, CancellationToken, build_tree, build_trees, find_all_paths
from .merger import merge_branches
from .topology import TopologyAnalyzer, is_series_parallel
from .query import (
    find_group,
    find_nodes_by_type,
    find_nodes_in_group,
    find_nodes_in_group_with,
    find_groups_by_type,
    all_match,
    all_components_match,
    extract_components,
    extract_name,
    extract_names,
    intersects,
    intersecting_node,
    simplify,
)
from .exceptions import TreeAnalysisError, RecursionLimitExceededError, TreeBuildCancelledError

__all__ = [
    # Result Contract
    "TreeBuildResults",
    # Services
    "TreeBuilder",
    "CancellationToken",
    "build_tree",
    "build_trees",
    "find_all_paths",
    "merge_branches",
    "TopologyAnalyzer",
    "is_series_parallel",
    # Queries
    "find_group",
    "find_nodes_by_type",
    "find_nodes_in_group",
    "find_nodes_in_group_with",
    "find_groups_by_type",
    "all_match",
    "all_components_match",
    "extract_components",
    "extract_name",
    "extract_names",
    "intersects",
    "intersecting_node",
    "simplify",
    # Exceptions
    "TreeAnalysisError",
    "RecursionLimitExceededError",
    "TreeBuildCancelledError",
]
