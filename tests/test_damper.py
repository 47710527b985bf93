"""Unit tests for the angular rate dampers.

Exercises the per-tick arbitration between the damper, the pilot and the
stability assist, and the handoff resets around landing and pilot input.
"""

import logging
import math

import numpy as np
import pytest
from numpy.testing import assert_allclose

from autopilot.control.damper import (
    PITCH_AXIS,
    ROLL_AXIS,
    YAW_AXIS,
    AngularRateDamper,
    axis_binding,
    pitch_damper,
    rate_dampers,
    roll_damper,
    yaw_damper,
)
from autopilot.control.pid import PIDGains
from autopilot.vessel import FlightCtrlState, Vessel, VesselStatus

DT = 0.02


def make_damper(
    status: VesselStatus | None = None,
    gains: PIDGains | None = None,
) -> AngularRateDamper:
    """Active yaw damper on a fresh vessel."""
    vessel = Vessel(status, fixed_delta_time=DT)
    damper = yaw_damper(vessel, gains=gains or PIDGains(kp=1.0, ki=0.0, kd=0.0))
    damper.activate()
    return damper


# =============================================================================
# Axis Bindings
# =============================================================================


class TestAxisBindings:
    """Test axis projections and accessors."""

    def test_yaw_projection_negates_z(self) -> None:
        """Yaw rate is the negated z component."""
        omega = np.array([1.0, 2.0, 3.0])
        assert YAW_AXIS.project(omega) == -3.0

    def test_pitch_projection(self) -> None:
        """Pitch rate is the x component."""
        assert PITCH_AXIS.project(np.array([1.0, 2.0, 3.0])) == 1.0

    def test_roll_projection(self) -> None:
        """Roll rate is the y component."""
        assert ROLL_AXIS.project(np.array([1.0, 2.0, 3.0])) == 2.0

    def test_accessors(self) -> None:
        """Input, trim and output accessors hit the named axis only."""
        ctrl = FlightCtrlState(pitch=0.3, pitch_trim=0.1)

        assert PITCH_AXIS.read_input(ctrl) == 0.3
        assert PITCH_AXIS.read_trim(ctrl) == 0.1

        PITCH_AXIS.write_output(ctrl, -0.5)
        assert ctrl.pitch == -0.5
        assert ctrl.yaw == 0.0
        assert ctrl.roll == 0.0

    def test_custom_binding(self) -> None:
        """Custom bindings project any component with any sign."""
        binding = axis_binding("roll", component=0, sign=-1.0)
        assert binding.name == "roll"
        assert binding.project(np.array([0.25, 0.0, 0.0])) == -0.25


# =============================================================================
# Arbitration Scenarios
# =============================================================================


class TestArbitration:
    """Test who gets the axis each tick."""

    def test_pilot_at_trim_writes_clamped_output(self) -> None:
        """Damper output is clamped to +-1 and written when the pilot is at trim."""
        # Measured yaw rate of 2.0 rad/s
        damper = make_damper(VesselStatus.from_rates(z=-2.0))
        ctrl = FlightCtrlState()

        damper.vessel.autopilot_update(ctrl)

        assert damper.angular_velocity == pytest.approx(2.0)
        assert damper.output == pytest.approx(-2.0)
        assert ctrl.yaw == -1.0

    def test_small_output_written_unclamped(self) -> None:
        """Output inside the limit is written as is."""
        damper = make_damper(VesselStatus.from_rates(z=-0.25))
        ctrl = FlightCtrlState(yaw=0.1, yaw_trim=0.1)

        damper.apply_module(ctrl)

        assert ctrl.yaw == pytest.approx(-0.25)

    def test_kill_rot_leaves_command_untouched(self) -> None:
        """SAS keeps the axis; the damper still advances its state."""
        damper = make_damper(VesselStatus.from_rates(z=-5.0))
        ctrl = FlightCtrlState(yaw=0.25, yaw_trim=0.25, kill_rot=True)

        damper.apply_module(ctrl)

        assert ctrl.yaw == 0.25
        assert damper.pid.last_time == pytest.approx(DT)
        assert damper.pid.last_error == pytest.approx(-5.0)
        assert damper.time == pytest.approx(DT)

    def test_kill_rot_does_not_reset(self) -> None:
        """SAS override keeps the integral accumulating."""
        damper = make_damper(
            VesselStatus.from_rates(z=-1.0),
            gains=PIDGains(kp=0.0, ki=1.0, kd=0.0),
        )
        ctrl = FlightCtrlState(kill_rot=True)

        for _ in range(3):
            damper.apply_module(ctrl)

        assert damper.pid.integral == pytest.approx(-2.0 * DT)
        assert ctrl.yaw == 0.0

    def test_landed_resets_after_tick(self) -> None:
        """Landed vessel gets the command but starts the next tick clean."""
        damper = make_damper(
            VesselStatus.from_rates(z=-0.5, landed=True),
            gains=PIDGains(kp=1.0, ki=1.0, kd=1.0),
        )
        ctrl = FlightCtrlState()

        damper.apply_module(ctrl)
        assert ctrl.yaw == pytest.approx(-0.5)
        assert damper.pid.integral == 0.0
        assert damper.pid.last_time is None

        # Next tick acts as a first call: no derivative, no integral
        damper.vessel.status = VesselStatus.from_rates(z=-0.2)
        ctrl = FlightCtrlState()
        damper.apply_module(ctrl)
        assert ctrl.yaw == pytest.approx(-0.2)
        assert damper.output == pytest.approx(-0.2)
        assert damper.pid.integral == 0.0

    def test_landed_resets_under_kill_rot(self) -> None:
        """Landing reset happens whatever the arbitration outcome."""
        damper = make_damper(VesselStatus.from_rates(z=-0.5, landed=True))
        ctrl = FlightCtrlState(kill_rot=True)

        damper.apply_module(ctrl)

        assert ctrl.yaw == 0.0
        assert damper.pid.last_time is None

    def test_pilot_input_resets_and_writes_nothing(self) -> None:
        """Pilot flying the axis resets the controller and keeps the command."""
        damper = make_damper(
            VesselStatus.from_rates(z=-1.0),
            gains=PIDGains(kp=1.0, ki=1.0, kd=0.0),
        )
        # Fresh snapshot per tick, as the host builds one
        damper.apply_module(FlightCtrlState())
        damper.apply_module(FlightCtrlState())
        assert damper.pid.integral == pytest.approx(-DT)

        ctrl = FlightCtrlState(yaw=0.5)
        damper.apply_module(ctrl)

        assert ctrl.yaw == 0.5
        assert damper.pid.integral == 0.0
        assert damper.pid.last_time is None

    def test_return_to_trim_starts_from_zero_integral(self) -> None:
        """After the pilot lets go, the integral rebuilds from zero."""
        damper = make_damper(
            VesselStatus.from_rates(z=-1.0),
            gains=PIDGains(kp=0.0, ki=1.0, kd=0.0),
        )
        ctrl = FlightCtrlState(yaw=0.5)
        for _ in range(5):
            damper.apply_module(ctrl)

        ctrl.neutralize()
        damper.apply_module(ctrl)
        assert damper.pid.integral == 0.0
        assert ctrl.yaw == 0.0

        damper.apply_module(ctrl)
        assert damper.pid.integral == pytest.approx(-DT)
        assert ctrl.yaw == pytest.approx(-DT)

    def test_pilot_override_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Pilot override is reported at debug level."""
        damper = make_damper()
        with caplog.at_level(logging.DEBUG, logger="autopilot.control.damper"):
            damper.apply_module(FlightCtrlState(yaw=0.5))
        assert "pilot input on yaw" in caplog.text

    def test_non_finite_rate_propagates(self) -> None:
        """NaN angular velocity is passed through, not rejected."""
        damper = make_damper(VesselStatus.from_rates(z=float("nan")))
        ctrl = FlightCtrlState()

        damper.apply_module(ctrl)

        assert math.isnan(damper.output)
        assert math.isnan(ctrl.yaw)


# =============================================================================
# Clock and Determinism
# =============================================================================


class TestDamperState:
    """Test damper clock, determinism and lifecycle."""

    def test_clock_advances_by_fixed_step(self) -> None:
        """Damper clock advances one fixed step per tick, whatever happens."""
        damper = make_damper()
        ctrls = [
            FlightCtrlState(),
            FlightCtrlState(kill_rot=True),
            FlightCtrlState(yaw=1.0),
        ]
        for ctrl in ctrls:
            damper.apply_module(ctrl)
        assert damper.time == pytest.approx(3 * DT)

    def test_one_tick_per_update(self) -> None:
        """A damper subscribed twice still ticks once per update."""
        damper = make_damper()
        damper.vessel.subscribe(damper.apply_module)

        damper.vessel.autopilot_update(FlightCtrlState())

        assert damper.time == pytest.approx(DT)

    def test_identical_dampers_agree(self) -> None:
        """Same inputs and same prior state give the same outputs and state."""
        gains = PIDGains(kp=0.8, ki=0.3, kd=0.05)
        first = make_damper(gains=gains)
        second = make_damper(gains=gains)

        rates = [0.4, -0.1, 0.3, 0.3, 0.0, -0.7]
        inputs = [0.0, 0.0, 0.2, 0.0, 0.0, 0.0]
        for rate, yaw in zip(rates, inputs):
            outputs = []
            for damper in (first, second):
                damper.vessel.status = VesselStatus.from_rates(z=rate, landed=rate == 0.0)
                ctrl = FlightCtrlState(yaw=yaw)
                damper.apply_module(ctrl)
                outputs.append(ctrl.yaw)
            assert outputs[0] == outputs[1]
            assert first.pid == second.pid

    def test_inactive_damper_raises(self) -> None:
        """Ticking a damper that was never activated is an error."""
        damper = yaw_damper(Vessel())
        with pytest.raises(RuntimeError, match="not active"):
            damper.apply_module(FlightCtrlState())

    def test_activation_creates_fresh_session(self) -> None:
        """Reactivation starts a new clock and a clean controller."""
        damper = make_damper(VesselStatus.from_rates(z=-1.0))
        damper.apply_module(FlightCtrlState())
        damper.deactivate()
        assert damper.pid is None

        damper.activate()
        assert damper.time == 0.0
        assert damper.pid.last_time is None
        assert damper.pid.integral == 0.0

    def test_tuned_gains_survive_reactivation(self) -> None:
        """Gains edited on the live controller are kept for the next session."""
        damper = make_damper()
        damper.pid.kp = 2.5
        damper.pid.integral_clamp = 0.3

        damper.deactivate()
        damper.activate()

        assert damper.pid.kp == 2.5
        assert damper.pid.integral_clamp == 0.3

    def test_window_shows_live_values(self) -> None:
        """Damper window lists measured rate, output and tunable gains."""
        damper = make_damper(VesselStatus.from_rates(z=-0.5))
        damper.apply_module(FlightCtrlState())
        damper.show_gui()

        text = damper.on_gui()

        assert text.startswith("Yaw dampener")
        assert "Angular velocity: 0.5000" in text
        assert "Output: -0.5000" in text
        assert "KP: 1.0" in text
        assert "Integral clamp: 1.0" in text


# =============================================================================
# Factories
# =============================================================================


class TestFactories:
    """Test damper construction helpers."""

    def test_default_tuning(self) -> None:
        """Factories use the stock rate damper tuning."""
        damper = yaw_damper(Vessel())
        assert damper.gains == PIDGains(kp=1.0, ki=0.0, kd=0.01)
        assert damper.integral_clamp == 1.0
        assert damper.output_limit == 1.0

    def test_axis_factories(self) -> None:
        """Each factory binds its own axis and window."""
        vessel = Vessel()
        dampers = [yaw_damper(vessel), pitch_damper(vessel), roll_damper(vessel)]

        assert [d.binding.name for d in dampers] == ["yaw", "pitch", "roll"]
        assert len({d.wnd_id for d in dampers}) == 3
        assert dampers[0].window_name == "Yaw dampener"

    def test_rate_dampers_drive_all_axes(self) -> None:
        """All three dampers act on their own axis in one update."""
        vessel = Vessel(VesselStatus.from_rates(x=0.1, y=0.2, z=0.3), fixed_delta_time=DT)
        dampers = rate_dampers(vessel)
        for damper in dampers.values():
            damper.gains = PIDGains(kp=1.0, ki=0.0, kd=0.0)
            damper.activate()

        ctrl = FlightCtrlState()
        vessel.autopilot_update(ctrl)

        assert_allclose([ctrl.pitch, ctrl.roll, ctrl.yaw], [-0.1, -0.2, 0.3])
        pids = [d.pid for d in dampers.values()]
        assert len({id(p) for p in pids}) == 3
