"""Control algorithms for the autopilot.

Provides the PID engine and the per-axis angular rate dampers built on it.
"""

from autopilot.control.damper import (
    PITCH_AXIS,
    ROLL_AXIS,
    YAW_AXIS,
    AngularRateDamper,
    AxisBinding,
    axis_binding,
    pitch_damper,
    rate_dampers,
    roll_damper,
    yaw_damper,
)
from autopilot.control.pid import (
    PIDController,
    PIDGains,
)

__all__ = [
    # PID
    "PIDController",
    "PIDGains",
    # Dampers
    "AngularRateDamper",
    "AxisBinding",
    "axis_binding",
    "YAW_AXIS",
    "PITCH_AXIS",
    "ROLL_AXIS",
    "yaw_damper",
    "pitch_damper",
    "roll_damper",
    "rate_dampers",
]
