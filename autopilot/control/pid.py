"""PID controller implementation.

Provides the discrete-time PID engine used by the rate dampers:
- Anti-windup clamping of the integral accumulator
- Guarded time step (first call, stalled or backwards clock)
- Explicit state reset for authority handbacks

Example:
    >>> from autopilot.control import PIDController
    >>>
    >>> # Yaw rate damper controller
    >>> ctrl = PIDController(kp=1.0, ki=0.0, kd=0.01, integral_clamp=1.0)
    >>>
    >>> # Drive measured yaw rate towards zero
    >>> command = ctrl.control(measured=yaw_rate, setpoint=0.0, current_time=t)
"""

from dataclasses import dataclass, field
from typing import SupportsFloat

import numpy as np
from beartype import beartype

from autopilot.gui.inspector import gui_field

# =============================================================================
# PID Gains
# =============================================================================


@beartype
@dataclass
class PIDGains:
    """PID controller gains.

    Attributes:
        kp: Proportional gain
        ki: Integral gain
        kd: Derivative gain
    """
    kp: float = 1.0
    ki: float = 0.0
    kd: float = 0.0


# =============================================================================
# PID Controller
# =============================================================================


@beartype
@dataclass
class PIDController:
    """General-purpose PID controller.

    Implements the parallel PID form:
        u = kp * e + ki * integral(e) + kd * de/dt

    Time is supplied by the caller as an absolute clock value, not as a
    step. A call without a valid step (first call, or a clock that did not
    advance) contributes neither to the integral nor to the derivative.

    Attributes:
        kp: Proportional gain
        ki: Integral gain
        kd: Derivative gain
        integral_clamp: Bound on |integral| (anti-windup)
    """
    kp: float = gui_field("KP", editable=True, default=1.0)
    ki: float = gui_field("KI", editable=True, default=0.0)
    kd: float = gui_field("KD", editable=True, default=0.0)
    integral_clamp: float = gui_field("Integral clamp", editable=True, default=1.0)

    # Internal state
    _integral: float = field(default=0.0, init=False, repr=False)
    _last_error: float = field(default=0.0, init=False, repr=False)
    _last_time: float | None = field(default=None, init=False, repr=False)

    @classmethod
    def from_gains(
        cls,
        gains: PIDGains,
        integral_clamp: float = 1.0,
    ) -> "PIDController":
        """Create controller from PIDGains object."""
        return cls(
            kp=gains.kp,
            ki=gains.ki,
            kd=gains.kd,
            integral_clamp=integral_clamp,
        )

    @beartype
    def reset(self) -> None:
        """Reset controller state so the next call acts like the first one."""
        self._integral = 0.0
        self._last_error = 0.0
        self._last_time = None

    @beartype
    def control(
        self,
        measured: SupportsFloat,
        setpoint: SupportsFloat,
        current_time: SupportsFloat,
    ) -> float:
        """Compute PID control output.

        Any real number is accepted (int, numpy scalars) and handled as float.

        Args:
            measured: Current measurement of the controlled quantity
            setpoint: Desired value of the controlled quantity
            current_time: Controller clock [s]

        Returns:
            Unsaturated control output
        """
        measured = float(measured)
        setpoint = float(setpoint)
        current_time = float(current_time)
        error = setpoint - measured

        dt = None if self._last_time is None else current_time - self._last_time
        derivative = 0.0
        if dt is not None and dt > 0:
            self._integral += error * dt
            derivative = (error - self._last_error) / dt

        # Anti-windup
        limit = abs(self.integral_clamp)
        self._integral = float(np.clip(self._integral, -limit, limit))

        self._last_error = error
        self._last_time = current_time

        return self.kp * error + self.ki * self._integral + self.kd * derivative

    @property
    def integral(self) -> float:
        """Current integral accumulator."""
        return self._integral

    @property
    def last_error(self) -> float:
        """Error seen on the previous call."""
        return self._last_error

    @property
    def last_time(self) -> float | None:
        """Clock value of the previous call, None before the first call."""
        return self._last_time

    @property
    def gains(self) -> PIDGains:
        """Get current gains as PIDGains object."""
        return PIDGains(kp=self.kp, ki=self.ki, kd=self.kd)

    @gains.setter
    def gains(self, value: PIDGains) -> None:
        """Set gains from PIDGains object."""
        self.kp = value.kp
        self.ki = value.ki
        self.kd = value.kd
