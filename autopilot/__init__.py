"""Autopilot - Angular rate damping for piloted vessels.

This package provides per-axis PID rate dampers that cooperate with the
pilot and with the stability assist, plus the small amount of host glue
and diagnostics they need.

Example:
    >>> from autopilot import FlightCtrlState, Vessel, VesselStatus, rate_dampers
    >>>
    >>> vessel = Vessel(VesselStatus.from_rates(z=0.5), fixed_delta_time=0.02)
    >>> for damper in rate_dampers(vessel).values():
    ...     damper.activate()
    >>>
    >>> ctrl = FlightCtrlState()
    >>> vessel.autopilot_update(ctrl)
    >>> print(f"Yaw command: {ctrl.yaw:.3f}")
"""

__version__ = "0.1.0"

# Control
from autopilot.control import (
    AngularRateDamper,
    AxisBinding,
    PIDController,
    PIDGains,
    pitch_damper,
    rate_dampers,
    roll_damper,
    yaw_damper,
)

# Diagnostics
from autopilot.gui import GUIWindow, InspectorSession

# Module lifecycle
from autopilot.modules import AutopilotModule

# Vessel boundary
from autopilot.vessel import FlightCtrlState, Vessel, VesselStatus

__all__ = [
    # Version
    "__version__",
    # Control
    "PIDController",
    "PIDGains",
    "AngularRateDamper",
    "AxisBinding",
    "yaw_damper",
    "pitch_damper",
    "roll_damper",
    "rate_dampers",
    # Modules
    "AutopilotModule",
    # Vessel
    "FlightCtrlState",
    "Vessel",
    "VesselStatus",
    # Diagnostics
    "GUIWindow",
    "InspectorSession",
]
