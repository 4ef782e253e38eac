# src/netreduce_core/parser/parser.py
import logging
import re
import string
from pathlib import Path
from typing import Any, Dict, List, Union

import cerberus
import yaml

from ..components import COMPONENT_REGISTRY, ComponentBase, ComponentError
from ..constants import NODE_REFERENCE_SEPARATOR
from ..data_structures import Group, Netlist, Node
from .exceptions import ParsingError, SchemaValidationError

logger = logging.getLogger(__name__)

# Component ids may not contain the node reference separator.
ID_REGEX = r"^[a-zA-Z_][a-zA-Z0-9_]*$"
ALLOWED_ID_CHARS = set(string.ascii_letters + string.digits + "_")


class EnhancedValidator(cerberus.Validator):
    """Custom Cerberus validator for identifier and uniqueness rules."""
    def __init__(self, *args, **kwargs):
        super(EnhancedValidator, self).__init__(*args, **kwargs)
        self.rules['id_regex'] = {'schema': {'type': 'boolean'}}
        self.rules['unique_elements_by_key'] = {'schema': {'type': 'string'}}

    def _validate_id_regex(self, constraint: bool, field: str, value: Any):
        """
        Validates that an identifier cannot be confused with a node reference.
        The rule's arguments are validated against this schema:
        {'type': 'boolean'}
        """
        if not constraint: return
        if not isinstance(value, str):
            self._error(field, "must be a string to be validated by id_regex.")
            return

        if not re.match(ID_REGEX, value):
            invalid_chars = sorted(set(value) - ALLOWED_ID_CHARS)
            self._error(
                field,
                f"Identifier '{value}' is invalid. Identifiers must start with a letter or underscore "
                f"and contain only letters, numbers and underscores. Forbidden character(s): {invalid_chars}"
            )

    def _validate_unique_elements_by_key(self, key_for_uniqueness: str, field: str, value: List[Dict]):
        """
        Validates that all dictionaries in a list have a unique value for a given key.
        The rule's arguments are validated against this schema:
        {'type': 'string'}
        """
        if not isinstance(value, list):
            return

        seen_keys = set()
        duplicates = []
        for item in value:
            if not isinstance(item, dict):
                continue
            item_key = item.get(key_for_uniqueness)
            if item_key is not None:
                if item_key in seen_keys:
                    duplicates.append(item_key)
                else:
                    seen_keys.add(item_key)

        if duplicates:
            self._error(field, f"Duplicate values found for key '{key_for_uniqueness}': {sorted(set(duplicates))}")


class NetlistParser:
    """
    Loads a netlist snapshot from YAML. The snapshot already contains the
    groups computed by the upstream wiring resolution; this parser only
    instantiates the components and resolves the node references.

    Example:

        switch_setup: [S1 On A]
        components:
          - {id: R1, type: Resistor, value: 10k}
          - {id: S1, type: ToggleSwitch, params: {position: 0}}
        groups:
          - [R1.1, S1.1C]
          - [R1.2, {component: S1, terminal: 0}]

    A string reference is `<component id>.<terminal name>`; the mapping form
    addresses a terminal by index.
    """
    _id_rule = {"type": "string", "required": True, "empty": False, "id_regex": True}

    _node_reference_schema = {
        "oneof": [
            {"type": "string", "regex": r"^[^.]+\..+$"},
            {"type": "dict", "schema": {
                "component": {"type": "string", "required": True, "empty": False},
                "terminal": {"type": "integer", "required": True, "min": 0},
            }},
        ]
    }

    _schema = {
        "name": {"type": "string", "required": False},
        "switch_setup": {"type": "list", "required": False, "default": [], "schema": {"type": "string"}},
        "components": {
            "type": "list", "required": True, "minlength": 1, "unique_elements_by_key": "id",
            "schema": {"type": "dict", "schema": {
                "id": _id_rule,
                "type": {"type": "string", "required": True, "empty": False},
                "value": {"type": ["string", "number"], "required": False},
                "params": {"type": "dict", "required": False, "keysrules": {"type": "string"}},
            }},
        },
        "groups": {
            "type": "list", "required": True,
            "schema": {"type": "list", "schema": _node_reference_schema},
        },
    }

    def __init__(self):
        self._validator = EnhancedValidator(self._schema)
        self._validator.allow_unknown = False

    def parse(self, yaml_path: Union[str, Path]) -> Netlist:
        """Parses one snapshot file into a Netlist."""
        source = Path(yaml_path).resolve()
        logger.debug(f"Parsing netlist snapshot: {source}")
        content = self._load_yaml(source)
        return self.parse_dict(content, source)

    def parse_dict(self, content: Dict[str, Any], source: Path = Path("<memory>")) -> Netlist:
        """Parses an already-loaded snapshot mapping."""
        if not self._validator.validate(content):
            raise SchemaValidationError(self._validator.errors, source)
        document = self._validator.document

        components: Dict[str, ComponentBase] = {}
        for raw in document["components"]:
            components[raw["id"]] = self._instantiate(raw, source)

        seen: Dict[Node, int] = {}
        groups = []
        for group_index, raw_group in enumerate(document["groups"]):
            nodes = []
            for reference in raw_group:
                node = self._resolve(reference, components, source)
                if node in seen and seen[node] != group_index:
                    raise ParsingError(
                        details=f"Node '{node}' appears in group #{seen[node]} and group #{group_index}.",
                        file_path=source,
                    )
                seen[node] = group_index
                nodes.append(node)
            groups.append(Group(tuple(nodes)))

        netlist = Netlist(groups=tuple(groups), switch_setup=tuple(document.get("switch_setup", [])))
        logger.debug(f"Parsed snapshot with {len(components)} component(s) and {len(groups)} group(s).")
        return netlist

    def _instantiate(self, raw: Dict[str, Any], source: Path) -> ComponentBase:
        type_str = raw["type"]
        cls = COMPONENT_REGISTRY.get(type_str)
        if cls is None:
            raise ParsingError(
                details=f"Component '{raw['id']}' has unregistered type '{type_str}'. Available types: {sorted(COMPONENT_REGISTRY)}.",
                file_path=source,
            )
        value = raw.get("value")
        try:
            return cls(raw["id"], value=None if value is None else str(value), **raw.get("params", {}))
        except (TypeError, ComponentError) as e:
            raise ParsingError(
                details=f"Could not instantiate component '{raw['id']}' of type '{type_str}': {e}",
                file_path=source,
            ) from e

    def _resolve(self, reference: Union[str, Dict[str, Any]], components: Dict[str, ComponentBase], source: Path) -> Node:
        if isinstance(reference, dict):
            component_id, terminal = reference["component"], reference["terminal"]
        else:
            component_id, terminal = reference.split(NODE_REFERENCE_SEPARATOR, 1)

        component = components.get(component_id)
        if component is None:
            raise ParsingError(details=f"Group entry '{reference}' refers to unknown component '{component_id}'.", file_path=source)

        try:
            if isinstance(terminal, int):
                component.terminal_name(terminal)
                return Node(component, terminal)
            return Node(component, component.terminal_index(terminal))
        except ComponentError as e:
            raise ParsingError(details=f"Group entry '{reference}' is invalid: {e}", file_path=source) from e

    def _load_yaml(self, source: Path) -> Dict[str, Any]:
        """Loads and performs basic sanity checks on a YAML file."""
        if not source.is_file():
            raise ParsingError(details=f"Snapshot file not found at path: {source}", file_path=source)
        try:
            with source.open("r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
        except PermissionError as e:
            raise ParsingError(details=f"Permission denied when trying to read file: {e}", file_path=source) from e
        except yaml.YAMLError as e:
            raise ParsingError(details=f"Invalid YAML syntax: {e}", file_path=source) from e
        if content is None:
            raise ParsingError(details="The YAML file is empty or contains no valid content.", file_path=source)
        if not isinstance(content, dict):
            raise ParsingError(details="The root of the YAML file must be a dictionary (mapping).", file_path=source)
        return content
