"""Base class for vessel-bound autopilot modules.

A module is attached to one vessel for its whole life. Activating it
subscribes ``apply_module`` to the vessel's autopilot update; deactivating
it unsubscribes. Per-session state is created in ``on_activate`` and dropped
in ``on_deactivate``.
"""

import logging
from abc import abstractmethod

from beartype import beartype

from autopilot.gui.window import GUIWindow
from autopilot.vessel.host import Vessel
from autopilot.vessel.state import FlightCtrlState

logger = logging.getLogger(__name__)


class AutopilotModule(GUIWindow):
    """Autopilot module with an attached diagnostic window."""

    @beartype
    def __init__(self, vessel: Vessel, module_name: str, wnd_id: int) -> None:
        super().__init__(module_name, wnd_id)
        self.vessel = vessel
        self.module_name = module_name
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def activate(self) -> None:
        """Start receiving autopilot updates. No-op if already active."""
        if self._active:
            return
        self.on_activate()
        self.vessel.subscribe(self.apply_module)
        self._active = True
        logger.info("%s activated", self.module_name)

    def deactivate(self) -> None:
        """Stop receiving autopilot updates. No-op if not active."""
        if not self._active:
            return
        self.vessel.unsubscribe(self.apply_module)
        self.on_deactivate()
        self._active = False
        logger.info("%s deactivated", self.module_name)

    def on_activate(self) -> None:
        """Create per-session state."""

    def on_deactivate(self) -> None:
        """Release per-session state."""

    @abstractmethod
    def apply_module(self, ctrl: FlightCtrlState) -> None:
        """Adjust the outgoing control command for this tick."""
