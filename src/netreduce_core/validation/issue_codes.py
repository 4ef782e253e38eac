# src/netreduce_core/validation/issue_codes.py
import logging
from enum import Enum

from .issues import ValidationIssue, ValidationIssueLevel

logger = logging.getLogger(__name__)


class NetlistIssueCode(Enum):
    """
    Registry of netlist validation and analysis issue codes and their message
    templates. Each member's value is a tuple: (code_str, message_template_str).
    """

    # --- Internal Link Declarations (LINK_...) ---
    LINK_SELF_001 = ("LINK_SELF_001", "Component '{component_fqn}' reports internal link '{link_name}' from terminal {terminal} to itself.")
    LINK_RANGE_001 = ("LINK_RANGE_001", "Component '{component_fqn}' declares internal link '{link_name}' between terminals {index1} and {index2}, but it has only {terminal_count} terminal(s).")

    # --- Node References (NODE_...) ---
    NODE_RANGE_001 = ("NODE_RANGE_001", "Node '{node}' references terminal {terminal} of component '{component_fqn}', which has only {terminal_count} terminal(s).")

    # --- Group Partition (NET_...) ---
    NET_PART_001 = ("NET_PART_001", "Node '{node}' belongs to {group_count} groups; every node must belong to exactly one group.")
    NET_GROUP_001 = ("NET_GROUP_001", "Group #{group_index} contains no nodes.")
    COMP_ID_001 = ("COMP_ID_001", "Component id '{component_fqn}' is shared by {count} distinct components; path leaves could not tell them apart.")

    # --- Search Outcome (TREE_...) ---
    TREE_START_MISSING = ("TREE_START_MISSING", "Start node '{node}' is not present in any group; no path can be built.")
    TREE_LIMIT_DEPTH = ("TREE_LIMIT_DEPTH", "Search depth limit of {limit} traversals reached between '{start}' and '{end}'. The result is partial.")
    TREE_LIMIT_BRANCHES = ("TREE_LIMIT_BRANCHES", "Search branch limit of {limit} calls reached between '{start}' and '{end}'. The result is partial.")

    # --- Topology (TOPO_...) ---
    TOPO_BRIDGE_001 = ("TOPO_BRIDGE_001", "The network between '{start}' and '{end}' is not series/parallel reducible (bridge topology). The tree may not faithfully represent it.")

    @property
    def code(self) -> str:
        return self.value[0]

    @property
    def template(self) -> str:
        return self.value[1]

    def format_message(self, **kwargs) -> str:
        """Formats the message template with provided keyword arguments."""
        try:
            return self.template.format(**kwargs)
        except KeyError as e:
            logger.error(f"Missing key {e} for formatting message template of {self.name} (code: {self.code}): '{self.template}'. Provided args: {kwargs}")
            return f"Error formatting message for {self.code}: Missing key {e}. Template: '{self.template}' Args: {kwargs}"

    def issue(self, level: ValidationIssueLevel, component_fqn=None, node=None, **kwargs) -> ValidationIssue:
        """Builds a ValidationIssue for this code."""
        details = dict(kwargs)
        if component_fqn is not None:
            details['component_fqn'] = component_fqn
        if node is not None:
            details['node'] = node
        return ValidationIssue(
            level=level,
            code=self.code,
            message=self.format_message(**details),
            component_fqn=component_fqn,
            node=node,
            details=details,
        )
