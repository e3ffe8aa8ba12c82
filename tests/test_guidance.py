"""
InterceptSim Guidance Law Test Suite

Closed-form checks for proportional navigation, pure pursuit and lead
pursuit, plus the name registry.

Reference: Zarchan, P. (2012). "Tactical and Strategic Missile Guidance"
"""

import os
import sys

import numpy as np
import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from intercept_sim.guidance import (
    GUIDANCE_LAWS,
    GuidanceLaw,
    LeadPursuit,
    ProportionalNavigation,
    PurePursuit,
    available_guidance_modes,
    get_guidance_law,
    register_guidance_law,
    resolve_guidance_mode,
)
from intercept_sim.physics.vector import Vector3
from intercept_sim.simulation.objects import EntityRole, EntityState

DT = 0.016


def make_state(role, position, velocity, max_acceleration=300.0):
    """Build an immutable entity state from tuples."""
    return EntityState(
        entity_id=role.value.lower(),
        role=role,
        position=Vector3(*position),
        velocity=Vector3(*velocity),
        acceleration=Vector3.zero(),
        max_acceleration=max_acceleration,
    )


def missile_at(position, velocity, max_acceleration=300.0):
    return make_state(EntityRole.MISSILE, position, velocity, max_acceleration)


def target_at(position, velocity=(0.0, 0.0, 0.0)):
    return make_state(EntityRole.TARGET, position, velocity, 90.0)


# =============================================================================
# PROPORTIONAL NAVIGATION
# =============================================================================


class TestProportionalNavigation:
    """a = N * Vc * (omega x r_hat)"""

    def test_closed_form_crossing(self):
        """
        LOS along +x at 1000 m, relative velocity (-200, 100, 0):
        Vc = 200 m/s, omega = 0.1 rad/s about +z, so a = N * 20 along +y.
        """
        law = ProportionalNavigation(navigation_gain=4.0)
        missile = missile_at((0.0, 0.0, 0.0), (200.0, 0.0, 0.0))
        target = target_at((1000.0, 0.0, 0.0), (0.0, 100.0, 0.0))

        cmd = law.compute_command(missile, target, DT)

        assert cmd.x == pytest.approx(0.0, abs=1e-12)
        assert cmd.y == pytest.approx(80.0)
        assert cmd.z == pytest.approx(0.0, abs=1e-12)

    def test_gain_scales_command(self):
        missile = missile_at((0.0, 0.0, 0.0), (200.0, 0.0, 0.0))
        target = target_at((1000.0, 0.0, 0.0), (0.0, 100.0, 0.0))

        cmd_3 = ProportionalNavigation(3.0).compute_command(missile, target, DT)
        cmd_5 = ProportionalNavigation(5.0).compute_command(missile, target, DT)

        assert cmd_5.y / cmd_3.y == pytest.approx(5.0 / 3.0)

    def test_perpendicular_to_line_of_sight(self):
        """Command never has a component along the LOS."""
        rng = np.random.default_rng(7)
        law = ProportionalNavigation()

        for _ in range(100):
            missile = missile_at(rng.uniform(-5000, 5000, 3), rng.uniform(-400, 400, 3))
            target = target_at(rng.uniform(-5000, 5000, 3), rng.uniform(-300, 300, 3))

            cmd = law.compute_command(missile, target, DT)
            los = (target.position - missile.position).normalized()

            assert abs(cmd.dot(los)) <= 1e-9 * max(1.0, cmd.magnitude)

    def test_collision_course_zero_command(self):
        """No LOS rotation, no command."""
        law = ProportionalNavigation()
        missile = missile_at((0.0, 1000.0, 0.0), (300.0, 0.0, 0.0))
        target = target_at((4000.0, 1000.0, 0.0), (-200.0, 0.0, 0.0))

        assert law.compute_command(missile, target, DT).magnitude == pytest.approx(0.0, abs=1e-12)

    def test_colocated_zero_command(self):
        law = ProportionalNavigation()
        missile = missile_at((10.0, 20.0, 30.0), (100.0, 0.0, 0.0))
        target = target_at((10.0, 20.0, 30.0), (0.0, 50.0, 0.0))

        cmd = law.compute_command(missile, target, DT)

        assert cmd == Vector3.zero()
        assert cmd.is_finite()

    def test_stateless(self):
        """Same inputs give the same command regardless of call history."""
        law = ProportionalNavigation()
        missile = missile_at((0.0, 0.0, 0.0), (200.0, 50.0, 0.0))
        target = target_at((3000.0, 1000.0, 2000.0), (-150.0, 0.0, 80.0))

        first = law.compute_command(missile, target, DT)
        law.compute_command(target_at((1.0, 2.0, 3.0)), missile, DT)
        second = law.compute_command(missile, target, DT)

        assert first == second


# =============================================================================
# PURE PURSUIT
# =============================================================================


class TestPurePursuit:
    """Velocity is steered onto the current bearing to the target."""

    def test_aligned_zero_command(self):
        law = PurePursuit()
        missile = missile_at((0.0, 0.0, 0.0), (100.0, 0.0, 0.0))
        target = target_at((1000.0, 0.0, 0.0))

        assert law.compute_command(missile, target, DT) == Vector3.zero()

    def test_turn_toward_bearing(self):
        """Full velocity rotation within one step, speed kept."""
        law = PurePursuit()
        missile = missile_at((0.0, 0.0, 0.0), (0.0, 100.0, 0.0))
        target = target_at((1000.0, 0.0, 0.0))

        cmd = law.compute_command(missile, target, 0.1)

        assert cmd.x == pytest.approx(1000.0)
        assert cmd.y == pytest.approx(-1000.0)
        assert cmd.z == pytest.approx(0.0, abs=1e-12)

    def test_stationary_interceptor_full_authority(self):
        law = PurePursuit()
        missile = missile_at((0.0, 0.0, 0.0), (0.0, 0.0, 0.0), max_acceleration=250.0)
        target = target_at((0.0, 0.0, 1000.0))

        cmd = law.compute_command(missile, target, DT)

        assert cmd.z == pytest.approx(250.0)
        assert cmd.x == pytest.approx(0.0)
        assert cmd.y == pytest.approx(0.0)

    def test_ignores_target_velocity(self):
        law = PurePursuit()
        missile = missile_at((0.0, 0.0, 0.0), (0.0, 100.0, 0.0))
        still = target_at((1000.0, 500.0, 0.0))
        moving = target_at((1000.0, 500.0, 0.0), (0.0, 0.0, 300.0))

        assert law.compute_command(missile, still, DT) == law.compute_command(
            missile, moving, DT
        )

    def test_colocated_zero_command(self):
        law = PurePursuit()
        missile = missile_at((5.0, 5.0, 5.0), (100.0, 0.0, 0.0))

        assert law.compute_command(missile, target_at((5.0, 5.0, 5.0)), DT) == Vector3.zero()


# =============================================================================
# LEAD PURSUIT
# =============================================================================


class TestLeadPursuit:
    """Aim at p_t + v_t * t_go."""

    def test_stationary_target_matches_pure_pursuit(self):
        missile = missile_at((0.0, 0.0, 0.0), (150.0, 80.0, -20.0))
        target = target_at((3000.0, 1500.0, -700.0))

        lead = LeadPursuit().compute_command(missile, target, DT)
        pure = PurePursuit().compute_command(missile, target, DT)

        assert lead.to_tuple() == pytest.approx(pure.to_tuple())

    def test_leads_crossing_target(self):
        """
        Target 3000 m ahead crossing at 100 m/s; missile closes at 300 m/s.
        t_go = 10 s, so the aim point is 1000 m off the current bearing.
        """
        missile = missile_at((0.0, 0.0, 0.0), (300.0, 0.0, 0.0))
        target = target_at((3000.0, 0.0, 0.0), (0.0, 100.0, 0.0))

        pure = PurePursuit().compute_command(missile, target, DT)
        lead = LeadPursuit().compute_command(missile, target, DT)

        assert pure == Vector3.zero()
        assert lead.y > 0.0

        # Commanded velocity lies along the bearing to (3000, 1000, 0)
        new_vel = missile.velocity + lead * DT
        expected_bearing = Vector3(3000.0, 1000.0, 0.0).normalized()
        assert new_vel.normalized().to_tuple() == pytest.approx(expected_bearing.to_tuple())

    def test_opening_geometry_stays_finite(self):
        """Receding target: closing speed floored, command finite."""
        missile = missile_at((0.0, 0.0, 0.0), (50.0, 0.0, 0.0))
        target = target_at((1000.0, 0.0, 0.0), (400.0, 30.0, 0.0))

        cmd = LeadPursuit().compute_command(missile, target, DT)

        assert cmd.is_finite()


# =============================================================================
# REGISTRY
# =============================================================================


class TestGuidanceRegistry:
    """Name lookup with fallback to ProNav."""

    def test_builtin_modes(self):
        assert available_guidance_modes()[:3] == ["ProNav", "PurePursuit", "LeadPursuit"]

    @pytest.mark.parametrize(
        "name, expected_type",
        [
            ("ProNav", ProportionalNavigation),
            ("PurePursuit", PurePursuit),
            ("LeadPursuit", LeadPursuit),
        ],
    )
    def test_exact_names(self, name, expected_type):
        law = get_guidance_law(name)

        assert isinstance(law, expected_type)
        assert law.name == name

    @pytest.mark.parametrize("name", ["pure pursuit", "PUREPURSUIT", "pure_pursuit"])
    def test_lenient_matching(self, name):
        assert resolve_guidance_mode(name) == "PurePursuit"

    @pytest.mark.parametrize("name", ["Bogus", "", None])
    def test_unknown_falls_back_to_pronav(self, name):
        assert resolve_guidance_mode(name) == "ProNav"
        assert isinstance(get_guidance_law(name), ProportionalNavigation)

    def test_fresh_instance_per_lookup(self):
        assert get_guidance_law("ProNav") is not get_guidance_law("ProNav")

    def test_register_custom_law(self):
        class HoldCourse(GuidanceLaw):
            name = "HoldCourse"

            def compute_command(self, interceptor, target, dt):
                return Vector3.zero()

        register_guidance_law(HoldCourse.name, HoldCourse)
        try:
            assert "HoldCourse" in available_guidance_modes()
            assert isinstance(get_guidance_law("hold course"), HoldCourse)
        finally:
            GUIDANCE_LAWS.pop(HoldCourse.name, None)

        assert resolve_guidance_mode("HoldCourse") == "ProNav"


# =============================================================================
# MAIN EXECUTION
# =============================================================================

if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
