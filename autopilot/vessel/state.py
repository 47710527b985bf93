"""Per-tick vessel state seen by autopilot modules.

Two records cross the boundary between the host simulation and the
autopilot every tick:

- ``VesselStatus``: read-only physical status (angular rates, landed flag)
- ``FlightCtrlState``: the pilot's control snapshot, which doubles as the
  outgoing control command modules write into

Axis convention for ``VesselStatus.angular_velocity`` is the vessel frame:
x about the wing axis (pitch), y about the longitudinal axis (roll),
z about the vertical axis (yaw).
"""

from dataclasses import dataclass

import numpy as np
from beartype import beartype
from numpy.typing import NDArray

from autopilot.gui.inspector import gui_field

# =============================================================================
# Control State
# =============================================================================


@beartype
@dataclass
class FlightCtrlState:
    """Pilot control snapshot and outgoing control command.

    All axis inputs and trims are in [-1, 1]. An axis whose input equals its
    trim is not being flown by the pilot.

    Attributes:
        yaw: Yaw input
        pitch: Pitch input
        roll: Roll input
        yaw_trim: Yaw trim
        pitch_trim: Pitch trim
        roll_trim: Roll trim
        kill_rot: Stability assist (SAS) is holding rotation this tick
    """
    yaw: float = 0.0
    pitch: float = 0.0
    roll: float = 0.0
    yaw_trim: float = 0.0
    pitch_trim: float = 0.0
    roll_trim: float = 0.0
    kill_rot: bool = False

    def neutralize(self) -> None:
        """Return every axis to its trim position."""
        self.yaw = self.yaw_trim
        self.pitch = self.pitch_trim
        self.roll = self.roll_trim


# =============================================================================
# Vessel Status
# =============================================================================


@beartype
@dataclass
class VesselStatus:
    """Physical vessel status for the current tick.

    Attributes:
        angular_velocity: [x, y, z] body angular rates [rad/s]
        landed: Vessel is resting on the ground
    """
    angular_velocity: NDArray[np.float64] = gui_field(
        "Angular velocity",
        default_factory=lambda: np.zeros(3),
    )
    landed: bool = gui_field("Landed", default=False)

    def __post_init__(self) -> None:
        """Validate state shape."""
        self.angular_velocity = np.asarray(self.angular_velocity, dtype=np.float64)
        if self.angular_velocity.shape != (3,):
            raise ValueError(f"Angular velocity must be shape (3,), got {self.angular_velocity.shape}")

    @classmethod
    def from_rates(
        cls,
        x: float = 0.0,
        y: float = 0.0,
        z: float = 0.0,
        landed: bool = False,
    ) -> "VesselStatus":
        """Create status from individual body rates [rad/s]."""
        return cls(angular_velocity=np.array([x, y, z], dtype=np.float64), landed=landed)
