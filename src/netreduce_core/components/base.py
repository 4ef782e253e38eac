# src/netreduce_core/components/base.py

import logging
import inspect
from abc import ABC, abstractmethod
from typing import Dict, List, Tuple, ClassVar, Optional, Type

from .capabilities import (
    ComponentCapability, TCapability, IInternalLinkProvider, provides
)
from .exceptions import ComponentError


logger = logging.getLogger(__name__)

# (terminal_i, terminal_j, link_name)
InternalLink = Tuple[int, int, str]


class ComponentBase(ABC):
    """
    The abstract base class for all components known to NetReduce Core.

    A component is identified by its `instance_id` and exposes an ordered list
    of terminals. Electrical relationships between its own terminals are
    published through the `IInternalLinkProvider` capability; the analysis
    engines never inspect a concrete component type.

    Components have identity semantics: two instances are distinct components
    even when they share an id, which is exactly how nodes of two different
    parts must be told apart in a netlist.
    """
    component_type_str: ClassVar[str] = "BaseComponent"

    def __init__(self, instance_id: str, value: Optional[str] = None):
        """
        Initializes the base attributes of a component instance.

        Args:
            instance_id: The unique ID of this component instance (e.g., 'R1').
            value: An optional display value (e.g., '10k'), used only for naming.
        """
        if not isinstance(instance_id, str) or not instance_id:
            raise ComponentError(
                component_fqn=repr(instance_id),
                details="Component instance id must be a non-empty string."
            )
        self.instance_id: str = instance_id
        self.value: Optional[str] = value

        self._capability_cache: Dict[Type[ComponentCapability], ComponentCapability] = {}
        logger.debug(f"Initialized {type(self).__name__} '{self.instance_id}'")

    @property
    def component_type(self) -> str:
        """The registry type identifier of this component (e.g., 'Resistor')."""
        return type(self).component_type_str

    @property
    def terminal_count(self) -> int:
        return len(self.terminal_names())

    def terminal_names(self) -> List[str]:
        """The terminal names of this instance. Defaults to the class declaration."""
        return type(self).declare_terminals()

    def terminal_name(self, index: int) -> str:
        """Returns the display name of terminal `index`."""
        names = self.terminal_names()
        if not 0 <= index < len(names):
            raise ComponentError(
                component_fqn=self.instance_id,
                details=f"Terminal index {index} is out of range; '{self.component_type}' has {len(names)} terminal(s)."
            )
        return names[index]

    def terminal_index(self, name: str) -> int:
        """Resolves a terminal name (case-insensitive) to its index."""
        for index, terminal in enumerate(self.terminal_names()):
            if terminal.lower() == name.lower():
                return index
        raise ComponentError(
            component_fqn=self.instance_id,
            details=f"Unknown terminal '{name}'. Declared terminals are: {self.terminal_names()}."
        )

    def internal_links(self) -> List[InternalLink]:
        """
        Returns the links this instance declares between its own terminals.
        Components with no internal continuity (connectors, jacks) return `[]`.
        """
        return []

    @property
    def display_name(self) -> str:
        """Name plus value, e.g. 'R1 10k'."""
        return f"{self.instance_id} {self.value}" if self.value else self.instance_id

    @provides(IInternalLinkProvider)
    class InternalLinkProvider:
        """
        Default implementation of the IInternalLinkProvider capability, backed by
        the component's `internal_links()` table. The lookup is symmetric.
        """
        def get_internal_link(self, component: "ComponentBase", index1: int, index2: int) -> Optional[str]:
            for a, b, name in component.internal_links():
                if (a == index1 and b == index2) or (a == index2 and b == index1):
                    return name
            return None

    @classmethod
    def declare_capabilities(cls) -> Dict[Type[ComponentCapability], Type]:
        """
        Discovers the capabilities map by inspecting the class hierarchy (MRO)
        for nested classes decorated with `@provides`. The most specific
        implementation wins.

        Returns:
            A dictionary mapping a capability Protocol to the nested class that
            provides its implementation.
        """
        discovered_capabilities = {}
        for base_class in cls.__mro__:
            for _, member_obj in inspect.getmembers(base_class):
                if hasattr(member_obj, '_implements_capability'):
                    protocol = member_obj._implements_capability
                    if protocol not in discovered_capabilities:
                        discovered_capabilities[protocol] = member_obj
        return discovered_capabilities

    def get_capability(self, capability_type: Type[TCapability]) -> Optional[TCapability]:
        """
        Queries the component instance for a specific capability.

        Args:
            capability_type: The Protocol class representing the desired capability.

        Returns:
            An instance of the capability implementation if supported, otherwise `None`.
        """
        if capability_type in self._capability_cache:
            return self._capability_cache[capability_type]

        declared = type(self).declare_capabilities()
        impl_class = declared.get(capability_type)

        if impl_class:
            instance = impl_class()
            self._capability_cache[capability_type] = instance
            return instance

        return None

    @classmethod
    @abstractmethod
    def declare_terminals(cls) -> List[str]:
        """
        Declare the names of the component's terminals, in index order.
        For a leaded two-terminal part this returns, for example, `['1', '2']`.
        """
        pass

    def __str__(self) -> str:
        return self.instance_id

    def __repr__(self) -> str:
        return f"{type(self).__name__}(instance_id='{self.instance_id}')"


# --- Global Component Registry and Decorator ---

COMPONENT_REGISTRY: Dict[str, type[ComponentBase]] = {}


def register_component(type_str: str):
    """
    A class decorator to register a component class in the global component
    registry, making it available to the snapshot parser and the query layer.
    """
    def decorator(cls: type[ComponentBase]):
        if not issubclass(cls, ComponentBase):
            raise TypeError(f"Class {cls.__name__} must inherit from ComponentBase.")

        try:
            terminals = cls.declare_terminals()
        except Exception as e:
            raise TypeError(
                f"A failure occurred while attempting to validate the API contract of "
                f"component class '{cls.__name__}'. Error during call to declare_terminals(): {e}"
            ) from e
        if not isinstance(terminals, list) or not all(isinstance(t, str) and t for t in terminals):
            raise TypeError(
                f"Component class '{cls.__name__}' violates API contract. "
                f"declare_terminals() must return a list of non-empty strings, but returned: {terminals}."
            )
        if len({t.lower() for t in terminals}) != len(terminals):
            raise TypeError(
                f"Component class '{cls.__name__}' violates API contract. "
                f"declare_terminals() must return unique names, but found duplicates in: {terminals}."
            )

        if type_str in COMPONENT_REGISTRY:
            logger.warning(f"Component type '{type_str}' is being redefined/overwritten.")
        cls.component_type_str = type_str
        COMPONENT_REGISTRY[type_str] = cls
        logger.debug(f"Registered component type '{type_str}' -> {cls.__name__}")
        return cls
    return decorator
