# src/netreduce_core/validation/exceptions.py
"""
Defines the diagnosable exceptions raised when a netlist snapshot fails
validation before any search begins.

`MalformedInternalLinkError` is the specific case where a component declares a
link from a terminal to itself or to a terminal it does not have. It is a
subclass of `NetlistValidationError`, so callers can catch either.
"""
from typing import List

from .issues import ValidationIssue, ValidationIssueLevel
from ..errors import DiagnosableError, format_diagnostic_report


class NetlistValidationError(DiagnosableError):
    """
    Raised when netlist validation detects one or more ERROR-level issues.
    Holds only the error-level issues; warnings are returned, not raised.
    """
    error_type = "Netlist Validation Error"
    suggestion = "Fix the netlist snapshot so that every node belongs to exactly one group and every component id is unique."

    def __init__(self, issues: List[ValidationIssue]):
        self.issues: List[ValidationIssue] = [
            issue for issue in issues if issue.level == ValidationIssueLevel.ERROR
        ]
        if not self.issues:
            summary_message = f"{type(self).__name__} was raised with no error-level issues."
        else:
            summary_message = (
                f"Netlist validation failed with {len(self.issues)} error(s):\n"
                + "\n".join(f"  - {issue}" for issue in self.issues)
            )
        super().__init__(summary_message)

    def get_diagnostic_report(self) -> str:
        details = (
            f"Found {len(self.issues)} error(s) before path search could begin:\n\n"
            + "\n".join(f"  - {issue}" for issue in self.issues)
        )
        first_issue = self.issues[0] if self.issues else None
        context = {}
        if first_issue:
            context['fqn'] = first_issue.component_fqn or 'Multiple'
            if first_issue.node:
                context['node'] = first_issue.node

        return format_diagnostic_report(
            error_type=self.error_type,
            details=details,
            suggestion=self.suggestion,
            context=context
        )


class MalformedInternalLinkError(NetlistValidationError):
    """A component reports a self-link or a link to an out-of-range terminal."""
    error_type = "Malformed Internal Link"
    suggestion = (
        "Check the component's internal link declarations: a link must join two "
        "different terminals, and both must be within the declared terminal range."
    )
