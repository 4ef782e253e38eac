# --- src/netreduce_core/constants.py ---
import logging

logger = logging.getLogger(__name__)

# --- Search Limits ---

#: Maximum number of component traversals in a single path before the
#: TreeBuilder stops descending and reports a truncated result.
DEFAULT_MAX_DEPTH: int = 256

#: Maximum number of recursive search calls for a single build. Guards against
#: the exponential blow-up of heavily meshed netlists.
DEFAULT_MAX_BRANCHES: int = 100_000

#: Separator used between a component id and a terminal in textual node
#: references, e.g. "R1.2" or "VR1.Wiper".
NODE_REFERENCE_SEPARATOR: str = "."
