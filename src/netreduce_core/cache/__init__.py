"""
Exposes the public interface of the cache package.
"""
from .service import AnalysisCache
from .keys import create_tree_key, create_topology_key

__all__ = [
    "AnalysisCache",
    "create_tree_key",
    "create_topology_key",
]
