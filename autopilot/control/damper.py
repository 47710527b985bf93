"""Angular rate dampers.

One damper per controlled axis drives the body rate about that axis to
zero with a PID loop, while sharing the axis with the pilot and with the
stability assist (SAS). Every tick it:

1. Projects the vessel's angular velocity onto its axis
2. Advances its own clock by the fixed tick length
3. Runs the PID loop with a zero rate setpoint
4. Arbitrates, first match wins:
   - SAS holding rotation: output discarded
   - Pilot input at trim: clamped output written to the axis
   - Pilot flying the axis: controller reset, nothing written
5. Resets the controller if the vessel is landed

The three axes share one class and differ only by their ``AxisBinding``.

Example:
    >>> from autopilot.control import rate_dampers
    >>> from autopilot.vessel import FlightCtrlState, Vessel
    >>>
    >>> vessel = Vessel(fixed_delta_time=0.02)
    >>> dampers = rate_dampers(vessel)
    >>> dampers["yaw"].activate()
    >>>
    >>> ctrl = FlightCtrlState()
    >>> vessel.autopilot_update(ctrl)   # ctrl.yaw now opposes the yaw rate
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from operator import attrgetter

import numpy as np
from beartype import beartype
from numpy.typing import NDArray

from autopilot.control.pid import PIDController, PIDGains
from autopilot.gui.inspector import gui_property
from autopilot.modules.base import AutopilotModule
from autopilot.vessel.host import Vessel
from autopilot.vessel.state import FlightCtrlState

logger = logging.getLogger(__name__)

# =============================================================================
# Axis Bindings
# =============================================================================


@beartype
@dataclass(frozen=True, slots=True)
class AxisBinding:
    """How a damper reads and writes one control axis.

    Attributes:
        name: Axis name
        project: Angular velocity vector -> rate about this axis
        read_input: Pilot input on this axis
        read_trim: Pilot trim on this axis
        write_output: Store a command on this axis
    """
    name: str
    project: Callable[[NDArray[np.float64]], float]
    read_input: Callable[[FlightCtrlState], float]
    read_trim: Callable[[FlightCtrlState], float]
    write_output: Callable[[FlightCtrlState, float], None]


@beartype
def axis_binding(name: str, component: int, sign: float = 1.0) -> AxisBinding:
    """Bind a ``FlightCtrlState`` axis to an angular velocity component.

    Args:
        name: Axis attribute on FlightCtrlState; its trim is ``<name>_trim``
        component: Index into the angular velocity vector
        sign: Frame handedness correction (+1.0 or -1.0)

    Returns:
        AxisBinding for the axis
    """
    def project(omega: NDArray[np.float64]) -> float:
        return sign * float(omega[component])

    def write_output(ctrl: FlightCtrlState, value: float) -> None:
        setattr(ctrl, name, value)

    return AxisBinding(
        name=name,
        project=project,
        read_input=attrgetter(name),
        read_trim=attrgetter(f"{name}_trim"),
        write_output=write_output,
    )


# z points the other way from the yaw command (vector to right wing)
YAW_AXIS = axis_binding("yaw", component=2, sign=-1.0)
PITCH_AXIS = axis_binding("pitch", component=0)
ROLL_AXIS = axis_binding("roll", component=1)


# =============================================================================
# Damper
# =============================================================================


class AngularRateDamper(AutopilotModule):
    """PID damper for the angular rate about one axis.

    The controller and the damper clock live for one activation. Gains
    tuned through the inspector are kept across deactivate/activate.

    Attributes:
        binding: Axis the damper acts on
        gains: Gains used for the next activation
        integral_clamp: Anti-windup bound used for the next activation
        output_limit: Symmetric bound on the written command
        pid: Active controller, None while inactive
    """

    @beartype
    def __init__(
        self,
        vessel: Vessel,
        binding: AxisBinding,
        module_name: str,
        wnd_id: int,
        gains: PIDGains | None = None,
        integral_clamp: float = 1.0,
        output_limit: float = 1.0,
    ) -> None:
        super().__init__(vessel, module_name, wnd_id)
        self.binding = binding
        self.gains = gains if gains is not None else PIDGains(kp=1.0, ki=0.0, kd=0.01)
        self.integral_clamp = integral_clamp
        self.output_limit = output_limit
        self.pid: PIDController | None = None
        self._time = 0.0
        self._angular_velocity = 0.0
        self._output = 0.0

    @gui_property("Angular velocity", format=".4f")
    def angular_velocity(self) -> float:
        """Rate about the axis measured on the last tick [rad/s]."""
        return self._angular_velocity

    @gui_property("Output", format=".4f")
    def output(self) -> float:
        """Unclamped controller output of the last tick."""
        return self._output

    @property
    def time(self) -> float:
        """Damper clock [s]."""
        return self._time

    def on_activate(self) -> None:
        self.pid = PIDController.from_gains(self.gains, integral_clamp=self.integral_clamp)
        self._time = 0.0
        self._angular_velocity = 0.0
        self._output = 0.0

    def on_deactivate(self) -> None:
        self.gains = self.pid.gains
        self.integral_clamp = self.pid.integral_clamp
        self.inspector.forget(self.pid)
        self.pid = None

    @beartype
    def apply_module(self, ctrl: FlightCtrlState) -> None:
        """Run one damper tick against ``ctrl``."""
        if self.pid is None:
            raise RuntimeError(f"{self.module_name} is not active")

        self._angular_velocity = self.binding.project(self.vessel.status.angular_velocity)
        self._time += self.vessel.fixed_delta_time
        self._output = self.pid.control(self._angular_velocity, 0.0, self._time)

        if ctrl.kill_rot:
            # SAS has the axis
            pass
        elif self.binding.read_input(ctrl) == self.binding.read_trim(ctrl):
            command = np.clip(self._output, -self.output_limit, self.output_limit)
            self.binding.write_output(ctrl, float(command))
        else:
            logger.debug("%s: pilot input on %s, resetting", self.module_name, self.binding.name)
            self.pid.reset()

        if self.vessel.check_landed():
            self.pid.reset()

    def _draw_gui(self) -> str:
        sections = [self.inspector.render(self)]
        if self.pid is not None:
            sections.append(self.inspector.render(self.pid))
        return "\n".join(sections)


# =============================================================================
# Factories
# =============================================================================


@beartype
def yaw_damper(
    vessel: Vessel,
    gains: PIDGains | None = None,
    integral_clamp: float = 1.0,
) -> AngularRateDamper:
    """Create the yaw rate damper."""
    return AngularRateDamper(vessel, YAW_AXIS, "Yaw dampener", 752348, gains, integral_clamp)


@beartype
def pitch_damper(
    vessel: Vessel,
    gains: PIDGains | None = None,
    integral_clamp: float = 1.0,
) -> AngularRateDamper:
    """Create the pitch rate damper."""
    return AngularRateDamper(vessel, PITCH_AXIS, "Pitch dampener", 752349, gains, integral_clamp)


@beartype
def roll_damper(
    vessel: Vessel,
    gains: PIDGains | None = None,
    integral_clamp: float = 1.0,
) -> AngularRateDamper:
    """Create the roll rate damper."""
    return AngularRateDamper(vessel, ROLL_AXIS, "Roll dampener", 752350, gains, integral_clamp)


@beartype
def rate_dampers(vessel: Vessel) -> dict[str, AngularRateDamper]:
    """Create inactive yaw, pitch and roll dampers for a vessel, keyed by axis."""
    return {
        "yaw": yaw_damper(vessel),
        "pitch": pitch_damper(vessel),
        "roll": roll_damper(vessel),
    }
