# src/netreduce_core/validation/__init__.py
import logging
logger = logging.getLogger(__name__)

from .issues import ValidationIssue, ValidationIssueLevel
from .issue_codes import NetlistIssueCode
from .netlist_validator import NetlistValidator
from .exceptions import NetlistValidationError, MalformedInternalLinkError

__all__ = [
    "ValidationIssue",
    "ValidationIssueLevel",
    "NetlistIssueCode",
    "NetlistValidator",
    "NetlistValidationError",
    "MalformedInternalLinkError",
]
