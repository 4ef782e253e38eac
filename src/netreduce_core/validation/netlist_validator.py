# src/netreduce_core/validation/netlist_validator.py
import logging
from collections import Counter
from typing import List, Set, Tuple

from ..components import ComponentBase, IInternalLinkProvider
from ..data_structures import Netlist
from .exceptions import MalformedInternalLinkError, NetlistValidationError
from .issue_codes import NetlistIssueCode
from .issues import ValidationIssue, ValidationIssueLevel


logger = logging.getLogger(__name__)

_LINK_CODES = {
    NetlistIssueCode.LINK_SELF_001.code,
    NetlistIssueCode.LINK_RANGE_001.code,
    NetlistIssueCode.NODE_RANGE_001.code,
}


class NetlistValidator:
    """
    Checks a netlist snapshot and the link declarations of its components
    before the TreeBuilder starts searching it.

    Malformed input is reported up front, so the recursive search never has to
    discover a broken declaration halfway through a path.
    """

    def __init__(self, netlist: Netlist):
        if not isinstance(netlist, Netlist):
            raise TypeError("NetlistValidator requires a Netlist snapshot.")
        self.netlist = netlist
        self.issues: List[ValidationIssue] = []

    def validate(self) -> List[ValidationIssue]:
        """
        Runs every check and returns all issues found (errors and warnings).
        Use `raise_for_errors()` to turn error-level issues into an exception.
        """
        self.issues = []
        self._check_groups()
        self._check_component_ids()
        for component in self.netlist.components():
            self._check_internal_links(component)
        self._check_node_ranges()

        if self.issues:
            errors = sum(1 for i in self.issues if i.level == ValidationIssueLevel.ERROR)
            logger.debug(f"Netlist validation found {len(self.issues)} issue(s), {errors} error(s).")
        return self.issues

    def raise_for_errors(self) -> List[ValidationIssue]:
        """
        Validates and raises when error-level issues exist. Link declaration
        problems raise MalformedInternalLinkError, anything else raises
        NetlistValidationError. Returns the non-fatal issues otherwise.
        """
        issues = self.validate()
        errors = [i for i in issues if i.level == ValidationIssueLevel.ERROR]
        if errors:
            if any(i.code in _LINK_CODES for i in errors):
                raise MalformedInternalLinkError(errors)
            raise NetlistValidationError(errors)
        return issues

    def _add_issue(self, level: ValidationIssueLevel, code_enum: NetlistIssueCode, **kwargs):
        issue = code_enum.issue(level, **kwargs)
        self.issues.append(issue)
        if level == ValidationIssueLevel.ERROR:
            logger.debug(f"Validation error: {issue}")

    def _check_groups(self):
        membership: Counter = Counter()
        for index, group in enumerate(self.netlist.groups):
            if len(group) == 0:
                self._add_issue(ValidationIssueLevel.WARNING, NetlistIssueCode.NET_GROUP_001, group_index=index)
            membership.update(group.nodes)
        for node, count in membership.items():
            if count > 1:
                self._add_issue(
                    ValidationIssueLevel.ERROR, NetlistIssueCode.NET_PART_001,
                    node=str(node), component_fqn=node.component_id, group_count=count,
                )

    def _check_component_ids(self):
        ids = Counter(c.instance_id for c in self.netlist.components())
        for instance_id, count in ids.items():
            if count > 1:
                self._add_issue(ValidationIssueLevel.ERROR, NetlistIssueCode.COMP_ID_001, component_fqn=instance_id, count=count)

    def _check_internal_links(self, component: ComponentBase):
        terminal_count = component.terminal_count
        provider = component.get_capability(IInternalLinkProvider)
        if provider is None:
            return

        for terminal in range(terminal_count):
            link_name = provider.get_internal_link(component, terminal, terminal)
            if link_name is not None:
                self._add_issue(
                    ValidationIssueLevel.ERROR, NetlistIssueCode.LINK_SELF_001,
                    component_fqn=component.instance_id, link_name=link_name, terminal=terminal,
                )

        reported: Set[Tuple[int, int]] = set()
        for index1, index2, link_name in component.internal_links():
            in_range = 0 <= index1 < terminal_count and 0 <= index2 < terminal_count
            if not in_range and (index1, index2) not in reported:
                reported.add((index1, index2))
                self._add_issue(
                    ValidationIssueLevel.ERROR, NetlistIssueCode.LINK_RANGE_001,
                    component_fqn=component.instance_id, link_name=link_name,
                    index1=index1, index2=index2, terminal_count=terminal_count,
                )

    def _check_node_ranges(self):
        for node in self.netlist.nodes():
            terminal_count = node.component.terminal_count
            if not 0 <= node.terminal_index < terminal_count:
                self._add_issue(
                    ValidationIssueLevel.ERROR, NetlistIssueCode.NODE_RANGE_001,
                    node=str(node), component_fqn=node.component_id,
                    terminal=node.terminal_index, terminal_count=terminal_count,
                )
