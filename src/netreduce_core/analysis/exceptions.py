# src/netreduce_core/analysis/exceptions.py
"""
Defines custom, diagnosable exceptions for the tree analysis services.
"""
from dataclasses import dataclass

from ..errors import DiagnosableError, format_diagnostic_report


@dataclass()
class TreeAnalysisError(DiagnosableError):
    """Wraps an unexpected internal failure during a tree build."""
    context: str
    details: str

    def __str__(self) -> str:
        return f"Tree analysis failed for {self.context}: {self.details}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Tree Analysis Error",
            details=self.details,
            suggestion="This may indicate an internal error or a component plugin that violates its capability contract.",
            context={'fqn': self.context}
        )


@dataclass()
class RecursionLimitExceededError(DiagnosableError):
    """
    Raised when a search limit is reached and the builder runs with
    `strict_limits=True`. Without strict limits the same condition produces a
    partial result carrying a warning issue instead.
    """
    limit_name: str
    limit: int
    start: str
    end: str

    def __str__(self) -> str:
        return f"Search limit '{self.limit_name}' ({self.limit}) exceeded between '{self.start}' and '{self.end}'."

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Recursion Limit Exceeded",
            details=str(self),
            suggestion=f"Raise '{self.limit_name}' in the analysis configuration, or simplify the netlist around the two nodes.",
            context={'node': f"{self.start} -> {self.end}"}
        )


@dataclass()
class TreeBuildCancelledError(DiagnosableError):
    """Raised when the cancellation token passed to the TreeBuilder is set."""
    start: str
    end: str

    def __str__(self) -> str:
        return f"Tree build between '{self.start}' and '{self.end}' was cancelled."

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Tree Build Cancelled",
            details=str(self),
            suggestion="",
            context={'node': f"{self.start} -> {self.end}"}
        )
