# src/netreduce_core/cache/service.py
"""
Caching service for tree builds and topology checks.

Both results are pure functions of an immutable netlist snapshot, two nodes and
(for tree builds) a configuration, so they can be memoized for as long as the
snapshot is alive. Keys are built in `cache.keys`.
"""
import logging
from typing import Any, Callable, Dict, Tuple

logger = logging.getLogger(__name__)

_SCOPES = ('run', 'process')


class AnalysisCache:
    """
    Two-scope cache for analysis results.

    - 'run': private to this instance, e.g. one editing session over a
             project. Dropped with the instance.
    - 'process': shared by every AnalysisCache in the process. The TreeBuilder
                 and TopologyAnalyzer store their results here.

    Snapshots are rebuilt upstream whenever the wiring or a switch position
    changes; `discard_netlist` evicts the entries of a retired snapshot.
    """
    _process_cache: Dict[Tuple, Any] = {}

    def __init__(self):
        self._run_cache: Dict[Tuple, Any] = {}
        self.clear_stats()
        logger.debug("AnalysisCache instance created.")

    def get(self, key: Tuple, scope: str = 'run') -> Any:
        """Returns the cached value for `key`, or None."""
        entries = self._entries(scope)
        if key in entries:
            self._stats[scope]['hits'] += 1
            logger.debug(f"Cache HIT in '{scope}' scope for key: {str(key)[:150]}...")
            return entries[key]

        self._stats[scope]['misses'] += 1
        logger.debug(f"Cache MISS in '{scope}' scope for key: {str(key)[:150]}...")
        return None

    def put(self, key: Tuple, value: Any, scope: str = 'run'):
        entries = self._entries(scope)
        if key in entries:
            logger.warning(f"Cache key collision detected in '{scope}' scope. Overwriting existing value.")
        entries[key] = value

    def get_or_compute(self, key: Tuple, compute: Callable[[], Any], scope: str = 'run') -> Any:
        """
        Returns the cached value for `key`, calling `compute()` and storing its
        result on a miss. A computed None is returned but not stored.
        """
        value = self.get(key, scope)
        if value is None:
            value = compute()
            if value is not None:
                self.put(key, value, scope)
        return value

    def discard_netlist(self, netlist) -> int:
        """Evicts every entry, in both scopes, whose key refers to `netlist`. Returns the count."""
        removed = 0
        for scope in _SCOPES:
            entries = self._entries(scope)
            stale = [key for key in entries if any(part is netlist for part in key)]
            for key in stale:
                del entries[key]
            removed += len(stale)
        if removed:
            logger.debug(f"Evicted {removed} cache entr{'y' if removed == 1 else 'ies'} for a retired netlist snapshot.")
        return removed

    def _entries(self, scope: str) -> Dict[Tuple, Any]:
        if scope == 'run':
            return self._run_cache
        if scope == 'process':
            return type(self)._process_cache
        raise ValueError(f"Invalid cache scope '{scope}'. Must be one of {_SCOPES}.")

    def get_stats(self) -> Dict[str, Dict[str, int]]:
        """Hit/miss counts of this instance plus the current entry count, per scope."""
        return {
            scope: dict(self._stats[scope], entries=len(self._entries(scope)))
            for scope in _SCOPES
        }

    def clear_stats(self):
        self._stats = {scope: {'hits': 0, 'misses': 0} for scope in _SCOPES}

    def clear_run_cache(self):
        self._run_cache.clear()

    @classmethod
    def clear_process_cache(cls):
        """Clears the process-level cache shared by all instances."""
        cls._process_cache.clear()
        logger.info("Cleared the process-level analysis cache.")
