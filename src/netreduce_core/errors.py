# src/netreduce_core/errors.py
import logging
from abc import abstractmethod
from typing import Any, Dict, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

# --- User-Facing Exception Hierarchy ---

class NetReduceError(Exception):
    """Base class for all custom, user-facing errors in NetReduce Core."""
    pass


class FrameworkLogicError(NetReduceError):
    """
    Raised when an internal invariant of the reducer is violated. This always
    indicates a bug in the library (or a component plugin breaking its contract),
    never a problem with the user's netlist.
    """
    pass


# --- Diagnostic Protocol & Base Exception ---

@runtime_checkable
class Diagnosable(Protocol):
    """
    A protocol for exceptions that can generate their own rich diagnostic report.
    Code that only needs the report can depend on this protocol instead of a
    concrete exception type.
    """
    def get_diagnostic_report(self) -> str:
        """Generates a complete, user-friendly, multi-line report string."""
        ...


class DiagnosableError(NetReduceError, Diagnosable):
    """
    The common, concrete base class for all diagnosable exceptions.

    It is a real `Exception` subclass, so it can be used in `except` clauses,
    and it declares `get_diagnostic_report` abstract so every subclass must
    provide a report.
    """
    @abstractmethod
    def get_diagnostic_report(self) -> str:
        """
        Abstract method to generate the diagnostic report.
        Subclasses MUST implement this.
        """
        raise NotImplementedError


# --- Stateless Formatting Utility ---

def format_diagnostic_report(
    error_type: str,
    details: str,
    suggestion: str,
    context: Dict[str, Any]
) -> str:
    """
    A stateless helper to format the final multi-line report string, ensuring a
    consistent look and feel for all user-facing diagnostics.

    Args:
        error_type: The high-level category of the error (e.g., "Malformed Internal Link").
        details: A detailed, potentially multi-line description of the problem.
        suggestion: Actionable advice for the user to resolve the issue.
        context: A dictionary of contextual information (FQN, file path, node, ...).

    Returns:
        A formatted, user-friendly diagnostic report string ready for display.
    """
    lines = [
        "\n",
        "============== NetReduce Core: Actionable Diagnostic Report ==============",
        f"Error Type:     {error_type}",
    ]
    if fqn := context.get('fqn'):
        lines.append(f"FQN:            {fqn}")
    if source_file := context.get('source_file'):
        lines.append(f"Source File:    {source_file}")
    if user_input := context.get('user_input'):
        lines.append(f"User Input:     '{user_input}'")
    if node := context.get('node'):
        lines.append(f"Node:           {node}")

    lines.append("\nDetails:")
    for line in details.splitlines():
        lines.append(f"  {line}")

    if suggestion:
        lines.append("\nSuggestion:")
        for line in suggestion.splitlines():
            lines.append(f"  {line}")

    lines.append("========================================================================")
    return "\n".join(lines)
