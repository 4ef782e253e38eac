# src/netreduce_core/components/exceptions.py
"""
Defines the diagnosable exception for the components subsystem.
"""
from dataclasses import dataclass

from ..errors import DiagnosableError, format_diagnostic_report


@dataclass()
class ComponentError(DiagnosableError):
    """
    The canonical, diagnosable exception for all component-related errors.

    Raised when a component is constructed with invalid arguments or is asked
    about a terminal it does not have.
    """
    component_fqn: str
    details: str

    def __str__(self) -> str:
        return f"Component '{self.component_fqn}': {self.details}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Component Error",
            details=self.details,
            suggestion="Check the component's constructor arguments and the terminal indices used to reference it.",
            context={'fqn': self.component_fqn}
        )
