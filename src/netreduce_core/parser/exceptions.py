# src/netreduce_core/parser/exceptions.py
"""
Defines the diagnosable exceptions for netlist snapshot loading.

`ParsingError` covers file-level problems and references that cannot be
resolved; `SchemaValidationError` covers structural violations reported by
Cerberus. Both derive from `DiagnosableError`.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from ..errors import DiagnosableError, format_diagnostic_report


class BaseParsingError(DiagnosableError):
    """A local base class for all snapshot parsing errors."""
    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Generic Parsing Error",
            details=str(self),
            suggestion="Please check the format and content of the netlist snapshot file.",
            context={}
        )


@dataclass(frozen=True)
class ParsingError(BaseParsingError):
    """
    A file could not be read, is not valid YAML, or refers to components and
    terminals that do not exist.
    """
    details: str
    file_path: Path

    def __str__(self):
        return f"Parsing error in file '{self.file_path}': {self.details}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Snapshot Parsing or File Error",
            details=self.details,
            suggestion="Ensure the file exists, contains valid YAML, and that every group entry names a declared component and terminal.",
            context={'source_file': self.file_path}
        )


@dataclass(frozen=True)
class SchemaValidationError(BaseParsingError):
    """The YAML is well-formed but does not match the snapshot schema."""
    errors: Dict[str, Any]
    file_path: Path

    def __str__(self):
        error_lines = [
            f"  - In field '{k}': {v[0]}"
            for k, v in sorted(self.errors.items(), key=lambda item: str(item[0]))
        ]
        return (
            f"YAML schema validation failed for file '{self.file_path}':\n"
            + "\n".join(error_lines)
        )

    def get_diagnostic_report(self) -> str:
        error_list_str = "\n".join(
            f"  - Field '{k}': {v[0]}"
            for k, v in sorted(self.errors.items(), key=lambda item: str(item[0]))
        )
        details = (
            "The structure of the snapshot file does not conform to the required schema.\n"
            f"See details for {len(self.errors)} issue(s) below:\n\n{error_list_str}"
        )
        return format_diagnostic_report(
            error_type="YAML Schema Validation Error",
            details=details,
            suggestion="Correct the specified fields. Check for invalid identifiers (e.g. containing '.'), duplicate component ids, or a missing 'components' or 'groups' section.",
            context={'source_file': self.file_path}
        )
