"""Host-side vessel handle.

The host simulation owns the loop. Every physics tick it refreshes
``Vessel.status``, builds the pilot's ``FlightCtrlState`` and calls
``autopilot_update`` so subscribed modules can adjust the command before it
is applied:

    >>> vessel = Vessel(fixed_delta_time=0.02)
    >>> dampers = rate_dampers(vessel)
    >>> for damper in dampers.values():
    ...     damper.activate()
    >>>
    >>> while flying:
    ...     vessel.status = read_sensors()
    ...     ctrl = read_pilot_input()
    ...     vessel.autopilot_update(ctrl)
    ...     apply_to_plant(ctrl)
"""

from collections.abc import Callable

from beartype import beartype

from autopilot.vessel.state import FlightCtrlState, VesselStatus

AutopilotCallback = Callable[[FlightCtrlState], None]


class Vessel:
    """Vessel seen from the autopilot.

    Attributes:
        status: Physical status for the current tick
        fixed_delta_time: Length of one physics tick [s]
    """

    @beartype
    def __init__(
        self,
        status: VesselStatus | None = None,
        fixed_delta_time: float = 0.02,
    ) -> None:
        if not fixed_delta_time > 0:
            raise ValueError(f"fixed_delta_time must be positive, got {fixed_delta_time}")
        self.status = status if status is not None else VesselStatus()
        self.fixed_delta_time = fixed_delta_time
        self._callbacks: list[AutopilotCallback] = []

    def check_landed(self) -> bool:
        return self.status.landed

    @property
    def callbacks(self) -> tuple[AutopilotCallback, ...]:
        """Subscribed callbacks in call order."""
        return tuple(self._callbacks)

    def subscribe(self, callback: AutopilotCallback) -> None:
        """Call ``callback`` once per autopilot update, after earlier subscribers.

        Subscribing a callback that is already subscribed does nothing.
        """
        if callback not in self._callbacks:
            self._callbacks.append(callback)

    def unsubscribe(self, callback: AutopilotCallback) -> None:
        """Stop calling ``callback``. Unknown callbacks are ignored."""
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def autopilot_update(self, ctrl: FlightCtrlState) -> None:
        """Run one tick of every subscribed autopilot module."""
        for callback in list(self._callbacks):
            callback(ctrl)
