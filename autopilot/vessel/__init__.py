"""Vessel boundary between the host simulation and the autopilot.

Example:
    >>> from autopilot.vessel import FlightCtrlState, Vessel, VesselStatus
    >>>
    >>> vessel = Vessel(VesselStatus.from_rates(z=0.3), fixed_delta_time=0.02)
    >>> ctrl = FlightCtrlState()
    >>> vessel.autopilot_update(ctrl)
"""

from autopilot.vessel.host import Vessel
from autopilot.vessel.state import FlightCtrlState, VesselStatus

__all__ = [
    "FlightCtrlState",
    "Vessel",
    "VesselStatus",
]
