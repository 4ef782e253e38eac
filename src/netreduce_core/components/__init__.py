# --- src/netreduce_core/components/__init__.py ---
import logging
logger = logging.getLogger(__name__)

# Import base first to define registry and decorator
from .base import ComponentBase, COMPONENT_REGISTRY, register_component, InternalLink
from .capabilities import ComponentCapability, IInternalLinkProvider, provides
from .exceptions import ComponentError
# Import concrete elements to trigger registration
from .elements import (
    LeadedComponent, Resistor, Capacitor, Inductor, Potentiometer, Jack,
    SingleCoilPickup, HumbuckerPickup, ToggleSwitch,
)

logger.debug(f"Available component types: {list(COMPONENT_REGISTRY.keys())}")

__all__ = [
    "ComponentBase",
    "COMPONENT_REGISTRY",
    "register_component",
    "InternalLink",
    "ComponentCapability",
    "IInternalLinkProvider",
    "provides",
    "ComponentError",
    "LeadedComponent",
    "Resistor",
    "Capacitor",
    "Inductor",
    "Potentiometer",
    "Jack",
    "SingleCoilPickup",
    "HumbuckerPickup",
    "ToggleSwitch",
]
