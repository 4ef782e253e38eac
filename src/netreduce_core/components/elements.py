# src/netreduce_core/components/elements.py
"""
Concrete component implementations shipped with NetReduce Core.

Only the electrical relationships between terminals matter to the reducer, so
each element is little more than a terminal declaration plus an internal link
table. Switch-like parts compute their table from the position they were
instantiated in; a new netlist snapshot (and new instances) is built upstream
whenever a position changes.
"""

import logging
from typing import List, Optional

from .base import ComponentBase, InternalLink, register_component
from .capabilities import IInternalLinkProvider
from .exceptions import ComponentError


logger = logging.getLogger(__name__)


class LeadedComponent(ComponentBase):
    """Two-terminal part whose leads are linked through its body."""

    @classmethod
    def declare_terminals(cls) -> List[str]:
        return ["1", "2"]

    def internal_links(self) -> List[InternalLink]:
        return [(0, 1, self.instance_id)]


@register_component("Resistor")
class Resistor(LeadedComponent):
    """Represents a Resistor."""


@register_component("Capacitor")
class Capacitor(LeadedComponent):
    """Represents a Capacitor."""


@register_component("Inductor")
class Inductor(LeadedComponent):
    """Represents an Inductor."""


@register_component("Potentiometer")
class Potentiometer(ComponentBase):
    """
    Three-terminal potentiometer. The track is split by the wiper, so the two
    track halves are the only internal links (CW-wiper and wiper-CCW); a path
    from CW to CCW traverses both halves in series.
    """

    @classmethod
    def declare_terminals(cls) -> List[str]:
        return ["CW", "Wiper", "CCW"]

    def internal_links(self) -> List[InternalLink]:
        return [
            (0, 1, f"{self.instance_id} CW"),
            (1, 2, f"{self.instance_id} CCW"),
        ]


@register_component("Jack")
class Jack(ComponentBase):
    """A connector. Its terminals are never linked internally."""

    @classmethod
    def declare_terminals(cls) -> List[str]:
        return ["Tip", "Ring", "Sleeve"]


@register_component("SingleCoilPickup")
class SingleCoilPickup(LeadedComponent):
    """A single coil; the start and finish leads are linked through the winding."""

    @classmethod
    def declare_terminals(cls) -> List[str]:
        return ["Start", "Finish"]


@register_component("HumbuckerPickup")
class HumbuckerPickup(ComponentBase):
    """Two coils, each linking its own start and finish leads."""

    @classmethod
    def declare_terminals(cls) -> List[str]:
        return ["North Start", "North Finish", "South Start", "South Finish"]

    def internal_links(self) -> List[InternalLink]:
        return [(0, 1, f"{self.instance_id} North"), (2, 3, f"{self.instance_id} South")]


@register_component("ToggleSwitch")
class ToggleSwitch(ComponentBase):
    """
    Toggle switch with `poles` poles (two by default). Each pole has a common
    contact and two throws, declared as "<pole>A", "<pole>C", "<pole>B". In
    position 0 every common is linked to its throw A, in position 1 to throw B.
    With `center_off=True` a third position (index 1, "Off") links nothing and
    throw B moves to index 2.
    """

    def __init__(
        self,
        instance_id: str,
        value: Optional[str] = None,
        position: int = 0,
        center_off: bool = False,
        poles: int = 2,
    ):
        super().__init__(instance_id, value)
        if not isinstance(poles, int) or poles < 1:
            raise ComponentError(component_fqn=instance_id, details=f"A switch needs at least one pole, got {poles!r}.")
        self.poles = poles
        self.center_off = center_off
        if not 0 <= position < self.position_count:
            raise ComponentError(
                component_fqn=instance_id,
                details=f"Switch position {position} is out of range; valid positions are 0..{self.position_count - 1}."
            )
        self.position = position

    @classmethod
    def declare_terminals(cls) -> List[str]:
        return cls._pole_terminals(2)

    @staticmethod
    def _pole_terminals(poles: int) -> List[str]:
        return [f"{pole}{contact}" for pole in range(1, poles + 1) for contact in "ACB"]

    def terminal_names(self) -> List[str]:
        return self._pole_terminals(self.poles)

    @property
    def position_count(self) -> int:
        return 3 if self.center_off else 2

    def position_name(self, position: int) -> str:
        names = ["On A", "Off", "On B"] if self.center_off else ["On A", "On B"]
        return names[position]

    def _active_throw(self) -> Optional[int]:
        """Offset of the throw linked to the common contact in the current position."""
        if self.center_off and self.position == 1:
            return None
        on_b = self.position == (2 if self.center_off else 1)
        return 2 if on_b else 0

    def are_terminals_connected(self, index1: int, index2: int) -> bool:
        return self.get_capability(IInternalLinkProvider).get_internal_link(self, index1, index2) is not None

    def internal_links(self) -> List[InternalLink]:
        throw = self._active_throw()
        if throw is None:
            return []
        links = []
        for pole in range(self.poles):
            base = pole * 3
            links.append((base + 1, base + throw, f"{self.instance_id} {pole + 1}{'AB'[throw // 2]}"))
        return links
