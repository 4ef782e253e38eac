# src/netreduce_core/analysis/results.py
"""
Defines the immutable result contract of the TreeBuilder.
"""
from dataclasses import dataclass
from typing import Optional, Tuple

from ..tree import Tree
from ..validation.issues import ValidationIssue, ValidationIssueLevel


@dataclass(frozen=True)
class TreeBuildResults:
    """
    The outcome of one build between two nodes of one netlist snapshot.

    - tree: the root `Parallel`, or None when no path exists.
    - issues: non-fatal findings (limits reached, bridge topology, warnings
      from validation).
    - truncated: True when a search limit cut the exploration short, in which
      case `tree` holds only the paths found before the cut.
    - is_series_parallel: result of the bridge check, None when not run.
    """
    tree: Optional[Tree]
    issues: Tuple[ValidationIssue, ...] = ()
    truncated: bool = False
    is_series_parallel: Optional[bool] = None

    @property
    def found(self) -> bool:
        return self.tree is not None

    @property
    def warnings(self) -> Tuple[ValidationIssue, ...]:
        return tuple(i for i in self.issues if i.level == ValidationIssueLevel.WARNING)
