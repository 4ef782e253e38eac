# src/netreduce_core/components/capabilities.py
"""
Defines the capability architecture for NetReduce Core components.

Capabilities are `typing.Protocol` contracts that the analysis engines query a
component for, instead of relying on a monolithic base class. The TreeBuilder
only ever asks a component one question: "is there an internal electrical link
between these two of your terminals?" That question is answered by the
`IInternalLinkProvider` capability.

Key elements:
- ComponentCapability: A marker protocol for all capabilities.
- IInternalLinkProvider: Reports component-declared links between terminals.
- @provides: A class decorator registering a nested class as the implementation
  of a capability, discovered automatically through the MRO.
- TCapability: A TypeVar for precise type-hinting of capability queries.
"""

import logging
from typing import (
    Optional,
    Protocol,
    Type,
    TypeVar,
    TYPE_CHECKING,
    runtime_checkable,
)

if TYPE_CHECKING:
    from .base import ComponentBase

logger = logging.getLogger(__name__)


@runtime_checkable
class ComponentCapability(Protocol):
    """
    A marker protocol for all component capabilities. Any class that provides
    a specific functionality to an analysis engine should conform to a
    protocol that inherits from this one.
    """

    pass


TCapability = TypeVar("TCapability", bound=ComponentCapability)


@runtime_checkable
class IInternalLinkProvider(ComponentCapability, Protocol):
    """
    Defines the capability of a component to report whether current can flow
    internally between two of its own terminals.

    CONTRACT:
    1.  The answer is symmetric: `(i, j)` and `(j, i)` report the same link.
    2.  A terminal is never linked to itself. Returning a name for `i == j` is a
        malformed declaration and is rejected by the NetlistValidator.
    3.  The answer depends only on the component's own state (e.g. the position
        a switch was instantiated in), never on the netlist it is placed in.
    """

    def get_internal_link(
        self,
        component: "ComponentBase",
        index1: int,
        index2: int,
    ) -> Optional[str]:
        """
        Returns the name of the internal link between terminals `index1` and
        `index2`, or `None` when the two terminals are not electrically related.
        """
        ...


def provides(capability_protocol: Type[ComponentCapability]):
    """
    A class decorator to register a class as an implementation for a capability.

    This decorator attaches a private attribute, `_implements_capability`, to the
    decorated class. `ComponentBase.declare_capabilities` uses this attribute for
    automatic discovery.

    Args:
        capability_protocol: The capability Protocol (e.g., IInternalLinkProvider)
                             that this class implements.
    """

    def decorator(cls: Type) -> Type:
        if not issubclass(capability_protocol, ComponentCapability):
            raise TypeError(
                f"Decorator argument for @provides must be a ComponentCapability "
                f"Protocol, but got {capability_protocol}."
            )
        cls._implements_capability = capability_protocol
        logger.debug(
            f"Class '{cls.__name__}' registered as providing capability '{capability_protocol.__name__}'."
        )
        return cls

    return decorator
