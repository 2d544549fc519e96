"""
Unit Tests for the Spreader Physics Stages
==========================================
Tests the size model, population synthesis, vane motion, launch and
flight stages for correctness.
Run: python -m pytest tests/ -v
"""

import sys
import os
import io
import logging
import dataclasses
import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from spreadsim.config import SpreaderConfig, BlendComponent, Blend
from spreadsim.errors import (
    ConfigurationError, FitDivergence, GeometryError, NoExitFound,
    InvalidLaunchGeometry, IntegrationTimeout,
)
from spreadsim.particles import Granule
from spreadsim.size_distribution import WeibullFit, weibull_cdf, fit_weibull, fit_table
from spreadsim.population import generate_component, generate_population
from spreadsim.inlet import sample_inlet_point, entry_from_point, entry_from_vane
from spreadsim.disk import DiskState, VaneMotion, find_exit_time, solve_disk_trajectory
from spreadsim.launch import LaunchConditions, compute_launch_conditions
from spreadsim.drag_model import reynolds_number, drag_coefficient, drag_intensity, acceleration
from spreadsim.integrator import simulate_flight
from spreadsim.validation import vacuum_trajectory_error
from spreadsim.logging_config import setup_logging

import pandas as pd


def _granule(**kwargs):
    params = dict(component='urea', diameter=0.004, density=1690.0, sphericity=0.907)
    params.update(kwargs)
    return Granule(**params)


def _launch(**kwargs):
    params = dict(x=0.4, y=0.0, height=0.8, speed=30.0,
                  outlet_speed=30.0 / np.cos(np.radians(8.0)),
                  direction_deg=30.0, hout_deg=30.0, zout_deg=8.0, muzout_deg=8.0)
    params.update(kwargs)
    return LaunchConditions(**params)


class TestConfig:
    """Verify configuration validation."""

    def test_omega_from_rpm(self):
        cfg = SpreaderConfig(disk_speed_rpm=60.0)
        assert abs(cfg.omega - 2 * np.pi) < 1e-12

    def test_exit_coordinate(self):
        cfg = SpreaderConfig()
        assert abs(cfg.exit_rp - np.sqrt(0.395 ** 2 - 0.05 ** 2)) < 1e-12

    def test_pitch_radius_must_be_inside_tip(self):
        with pytest.raises(ConfigurationError):
            SpreaderConfig(vane_pitch_radius=0.5, vane_tip_radius=0.4)

    def test_from_dict_rejects_unknown_keys(self):
        with pytest.raises(ConfigurationError):
            SpreaderConfig.from_dict({'disk_speed': 800})

    def test_from_dict(self):
        cfg = SpreaderConfig.from_dict({'friction': 0.25, 'seed': 3})
        assert cfg.friction == 0.25 and cfg.seed == 3

    def test_unknown_flight_method(self):
        with pytest.raises(ConfigurationError):
            SpreaderConfig(flight_method='rk4')

    def test_weight_fractions_must_sum_to_one(self):
        with pytest.raises(ConfigurationError):
            Blend((BlendComponent('a', 1690.0, weight_fraction=0.5),
                   BlendComponent('b', 1500.0, weight_fraction=0.4)), total_mass=1.0)

    def test_negative_weight_fraction(self):
        with pytest.raises(ConfigurationError):
            BlendComponent('a', 1690.0, weight_fraction=-0.1)

    def test_target_mass(self):
        blend = Blend.from_records(
            [{'name': 'a', 'density': 1690.0, 'weight_fraction': 0.7},
             {'name': 'b', 'density': 1500.0, 'weight_fraction': 0.3}],
            total_mass=2.0)
        assert abs(blend.target_mass(blend.components[1]) - 0.6) < 1e-12


class TestGranule:
    """Verify derived granule properties."""

    def test_mass_uses_pi_over_three(self):
        g = _granule()
        assert abs(g.mass - 1690.0 * np.pi / 3 * 0.004 ** 3) < 1e-15

    def test_frontal_area_ignores_sphericity(self):
        g1 = _granule(sphericity=1.0)
        g2 = _granule(sphericity=0.5)
        assert g1.area == g2.area == pytest.approx(np.pi * 0.002 ** 2)

    def test_non_positive_diameter_rejected(self):
        with pytest.raises(ValueError):
            _granule(diameter=0.0)


class TestSizeDistribution:
    """Verify the Weibull fit of sieve data."""

    DIAMETERS = np.array([1.0, 2.0, 2.5, 3.15, 4.0, 5.0, 6.3])

    def _retained(self, shape=3.5, scale=3.2):
        return 1.0 - weibull_cdf(self.DIAMETERS, shape, scale)

    def test_recovers_parameters(self):
        fit = fit_weibull(self.DIAMETERS, self._retained())
        assert fit.shape == pytest.approx(3.5, rel=1e-3)
        assert fit.scale == pytest.approx(3.2, rel=1e-3)

    def test_percent_input(self):
        fit = fit_weibull(self.DIAMETERS, 100.0 * self._retained())
        assert fit.shape == pytest.approx(3.5, rel=1e-3)

    def test_unsorted_rows(self):
        order = np.array([3, 0, 6, 1, 5, 2, 4])
        fit = fit_weibull(self.DIAMETERS[order], self._retained()[order])
        assert fit.scale == pytest.approx(3.2, rel=1e-3)

    def test_per_sieve_fractions(self):
        cumulative = self._retained()
        per_sieve = cumulative - np.append(cumulative[1:], 0.0)
        diameters = np.append(0.0, self.DIAMETERS)        # pan
        fractions = np.append(1.0 - cumulative[0], per_sieve)
        fit = fit_weibull(diameters, fractions, cumulative=False)
        assert fit.shape == pytest.approx(3.5, rel=1e-3)
        assert fit.scale == pytest.approx(3.2, rel=1e-3)

    def test_too_few_rows(self):
        with pytest.raises(FitDivergence):
            fit_weibull([2.0], [0.5])

    def test_optimizer_failure_surfaces(self, monkeypatch):
        def diverge(*args, **kwargs):
            raise RuntimeError("Optimal parameters not found")
        monkeypatch.setattr('spreadsim.size_distribution.curve_fit', diverge)
        with pytest.raises(FitDivergence):
            fit_weibull(self.DIAMETERS, self._retained())

    def test_fit_table_keeps_failures(self):
        table = pd.DataFrame({
            'diameter': self.DIAMETERS,
            'urea': self._retained(),
            'broken': [np.nan] * 6 + [0.1],
        })
        fits = fit_table(table)
        assert isinstance(fits['urea'], WeibullFit)
        assert isinstance(fits['broken'], FitDivergence)
        assert fits['broken'].component == 'broken'


class _ScriptedFit:
    """Fit stand-in returning preset draws (table units)."""

    def __init__(self, draws):
        self._draws = iter(draws)

    def sample(self, rng, size=None):
        return next(self._draws)


class TestPopulation:
    """Verify mass-targeted granule synthesis."""

    COMPONENT = BlendComponent('urea', density=1690.0, sphericity=0.907)

    def test_mass_reaches_target_with_single_overshoot(self):
        rng = np.random.default_rng(1)
        target = 0.02
        granules, sampled = generate_component(
            self.COMPONENT, WeibullFit(3.5, 3.2), target, rng)
        assert sampled >= target
        assert sampled - granules[-1].mass < target
        assert sampled == pytest.approx(sum(g.mass for g in granules))

    def test_zero_target_gives_no_granules(self):
        granules, sampled = generate_component(
            self.COMPONENT, WeibullFit(3.5, 3.2), 0.0, np.random.default_rng(0))
        assert granules == [] and sampled == 0.0

    def test_non_positive_draws_redrawn(self):
        fit = _ScriptedFit([0.0, -1.0, 4.0])
        granules, _ = generate_component(self.COMPONENT, fit, 1e-9, np.random.default_rng(0))
        assert len(granules) == 1
        assert granules[0].diameter == pytest.approx(0.004)

    def test_failed_component_skipped(self):
        blend = Blend((BlendComponent('a', 1690.0, weight_fraction=0.5),
                       BlendComponent('b', 1500.0, weight_fraction=0.5)), total_mass=0.01)
        fits = {'a': WeibullFit(3.5, 3.2), 'b': FitDivergence("diverged", 'b')}
        result = generate_population(blend, fits, seed=7)
        assert 'b' in result.failed_components
        assert {g.component for g in result.granules} == {'a'}

    def test_all_components_failed(self):
        blend = Blend((BlendComponent('a', 1690.0),), total_mass=0.01)
        with pytest.raises(FitDivergence):
            generate_population(blend, {'a': FitDivergence("diverged", 'a')}, seed=7)

    def test_seeded_population_reproducible(self):
        blend = Blend((BlendComponent('a', 1690.0),), total_mass=0.01)
        fits = {'a': WeibullFit(3.5, 3.2)}
        d1 = [g.diameter for g in generate_population(blend, fits, seed=11).granules]
        d2 = [g.diameter for g in generate_population(blend, fits, seed=11).granules]
        assert d1 == d2


class TestInlet:
    """Verify entry-point sampling and vane-local conversion."""

    def test_points_inside_orifice(self):
        cfg = SpreaderConfig()
        rng = np.random.default_rng(3)
        for _ in range(500):
            x, y = sample_inlet_point(cfg, rng)
            assert np.hypot(x - cfg.inlet_center_x, y - cfg.inlet_center_y) <= cfg.inlet_radius

    def test_vane_local_coordinates(self):
        cfg = SpreaderConfig()
        entry = entry_from_point(0.1, 0.05, cfg)
        assert entry.rv == pytest.approx(np.hypot(0.1, 0.05))
        assert entry.rp == pytest.approx(np.sqrt(entry.rv ** 2 - cfg.vane_pitch_radius ** 2))
        assert entry.dr == 0.0

    def test_entry_inside_pitch_radius(self):
        with pytest.raises(GeometryError):
            entry_from_point(0.02, 0.0, SpreaderConfig())

    def test_entry_beyond_tip(self):
        with pytest.raises(GeometryError):
            entry_from_point(0.5, 0.0, SpreaderConfig())

    def test_entry_from_vane_angle(self):
        entry = entry_from_vane(0.12, 0.0, SpreaderConfig())
        assert entry.hp == pytest.approx(0.0, abs=1e-12)
        assert entry.rv == pytest.approx(0.12)

    def test_entry_on_axis_without_pitch_radius(self):
        cfg = SpreaderConfig(vane_pitch_radius=0.0)
        with pytest.raises(GeometryError):
            entry_from_vane(0.0, 0.0, cfg)


class TestDiskTrajectory:
    """Verify the vane motion solver."""

    CONFIG = SpreaderConfig()

    def _entry(self):
        return entry_from_vane(0.12, 0.0, self.CONFIG)

    def test_exit_on_tip_radius(self):
        traj = solve_disk_trajectory(self._entry(), self.CONFIG)
        assert abs(traj.exit_state.rv - self.CONFIG.vane_tip_radius) <= 1e-6

    def test_radius_increases_monotonically(self):
        traj = solve_disk_trajectory(self._entry(), self.CONFIG)
        assert np.all(np.diff(traj.rv) > 0)
        assert np.all(traj.dr[1:] > 0)

    def test_exit_time_within_last_step(self):
        traj = solve_disk_trajectory(self._entry(), self.CONFIG)
        steps = traj.time[:-1]
        assert np.allclose(steps, np.arange(len(steps)) * self.CONFIG.vane_dt)
        assert steps[-1] < traj.exit_time <= steps[-1] + self.CONFIG.vane_dt

    def test_initial_state_matches_entry(self):
        entry = entry_from_point(0.1, 0.03, self.CONFIG)
        state = VaneMotion.from_entry(entry, self.CONFIG).state(0.0)
        assert state.x == pytest.approx(entry.x, abs=1e-12)
        assert state.y == pytest.approx(entry.y, abs=1e-12)
        assert state.dr == pytest.approx(0.0, abs=1e-12)

    def test_vane_angle_follows_disk_rotation(self):
        traj = solve_disk_trajectory(self._entry(), self.CONFIG)
        assert np.allclose(traj.hp, -self.CONFIG.omega * traj.time)

    def test_closed_form_satisfies_ode(self):
        motion = VaneMotion.from_entry(self._entry(), self.CONFIG)
        t, h = 0.01, 1e-5
        rpp = (motion.rp(t + h) - 2 * motion.rp(t) + motion.rp(t - h)) / h ** 2
        w = motion.omega
        lhs = rpp + 2 * motion.C * w * motion.dr(t) - motion.A * w ** 2 * motion.rp(t)
        assert lhs == pytest.approx(-motion.A * w ** 2 * motion.r_eq, rel=1e-4)

    def test_excessive_friction_never_exits(self):
        cfg = dataclasses.replace(self.CONFIG, friction=5.0)
        with pytest.raises(NoExitFound):
            solve_disk_trajectory(entry_from_vane(0.12, 0.0, cfg), cfg)

    def test_entry_inside_equilibrium_radius(self):
        cfg = dataclasses.replace(self.CONFIG, friction=2.0)
        with pytest.raises(NoExitFound):
            solve_disk_trajectory(entry_from_vane(0.12, 0.0, cfg), cfg)

    def test_step_budget_exhausted(self):
        cfg = dataclasses.replace(self.CONFIG, disk_max_steps=5)
        with pytest.raises(NoExitFound):
            solve_disk_trajectory(entry_from_vane(0.12, 0.0, cfg), cfg)

    def test_states_hold_python_floats(self):
        traj = solve_disk_trajectory(self._entry(), self.CONFIG)
        for value in dataclasses.astuple(traj.exit_state):
            assert type(value) is float

    def test_inward_motion_detected(self, monkeypatch):
        # Hand-built solution with K < 0: the granule slides towards the axis
        w = self.CONFIG.omega
        C, A = 0.3, 0.9
        root = np.sqrt(C ** 2 + A)
        motion = VaneMotion(omega=w, pitch_radius=self.CONFIG.vane_pitch_radius,
                            hp0=0.0, rp0=0.15, C=C, A=A, r_eq=0.2, K=-0.05,
                            lam1=w * (-C + root), lam2=w * (-C - root))
        monkeypatch.setattr(VaneMotion, 'from_entry', lambda entry, config: motion)
        with pytest.raises(NoExitFound, match="stopped increasing"):
            solve_disk_trajectory(self._entry(), self.CONFIG)


class TestFindExitTime:
    """Verify the exit-time root finder in isolation."""

    def test_linear_target(self):
        t = find_exit_time(lambda t: 2.0 * t, 0.0, 1.0, target=0.5)
        assert t == pytest.approx(0.25, abs=1e-10)

    def test_not_bracketed(self):
        with pytest.raises(NoExitFound):
            find_exit_time(lambda t: t, 0.0, 1.0, target=2.0)

    def test_endpoint_root(self):
        assert find_exit_time(lambda t: t, 0.0, 1.0, target=1.0) == 1.0


class TestLaunchConditions:
    """Verify the conversion of the exit state to a launch state."""

    CONFIG = SpreaderConfig()

    def _exit(self):
        return solve_disk_trajectory(entry_from_vane(0.12, 0.0, self.CONFIG), self.CONFIG).exit_state

    def test_fixed_vertical_angle(self):
        launch = compute_launch_conditions(self._exit(), self.CONFIG, zout_deg=10.0)
        v = launch.initial_velocity_vector()
        assert np.hypot(v[0], v[1]) == pytest.approx(launch.speed)
        assert v[2] == pytest.approx(launch.speed * np.tan(np.radians(10.0)))
        assert 0.0 < launch.hout_deg < 90.0

    def test_launch_position(self):
        exit_state = self._exit()
        launch = compute_launch_conditions(exit_state, self.CONFIG, zout_deg=0.0)
        assert np.allclose(launch.initial_position(),
                           [exit_state.x, exit_state.y, self.CONFIG.launch_height])

    def test_speed_combines_vane_and_tip_velocity(self):
        exit_state = self._exit()
        launch = compute_launch_conditions(exit_state, self.CONFIG, zout_deg=0.0)
        assert launch.speed > self.CONFIG.omega * self.CONFIG.vane_tip_radius
        assert launch.speed > exit_state.dr

    def test_velocity_leaves_the_disk(self):
        exit_state = self._exit()
        launch = compute_launch_conditions(exit_state, self.CONFIG, zout_deg=0.0)
        radial = np.array([exit_state.x, exit_state.y]) / exit_state.rv
        assert np.dot(launch.initial_velocity_vector()[:2], radial) > 0

    def test_scatter_is_seeded(self):
        exit_state = self._exit()
        a = compute_launch_conditions(exit_state, self.CONFIG, rng=np.random.default_rng(5))
        b = compute_launch_conditions(exit_state, self.CONFIG, rng=np.random.default_rng(5))
        assert a.zout_deg == b.zout_deg

    def test_no_scatter_gives_mean_angle(self):
        cfg = dataclasses.replace(self.CONFIG, vertical_angle_sd=0.0)
        launch = compute_launch_conditions(self._exit(), cfg, rng=np.random.default_rng(0))
        assert launch.zout_deg == pytest.approx(launch.muzout_deg)
        assert launch.muzout_deg > 0

    def test_vertical_launch_rejected(self):
        with pytest.raises(InvalidLaunchGeometry):
            compute_launch_conditions(self._exit(), self.CONFIG, zout_deg=90.0)

    @pytest.mark.parametrize('zout', [120.0, -95.0, 270.0])
    def test_angle_past_vertical_rejected(self, zout):
        with pytest.raises(InvalidLaunchGeometry):
            compute_launch_conditions(self._exit(), self.CONFIG, zout_deg=zout)

    def test_steep_but_valid_angle_accepted(self):
        launch = compute_launch_conditions(self._exit(), self.CONFIG, zout_deg=-80.0)
        assert launch.outlet_speed > launch.speed > 0

    def test_stationary_granule_rejected(self):
        state = DiskState(time=0.0, rp=self.CONFIG.exit_rp, rv=self.CONFIG.vane_tip_radius,
                          dr=0.0, hp=0.0, x=0.3918, y=0.05)
        with pytest.raises(InvalidLaunchGeometry):
            compute_launch_conditions(state, self.CONFIG, zout_deg=0.0)

    def test_rng_required_without_fixed_angle(self):
        with pytest.raises(ValueError):
            compute_launch_conditions(self._exit(), self.CONFIG)


class TestDragModel:
    """Verify the drag correlation."""

    CONFIG = SpreaderConfig()

    def test_reynolds_number(self):
        re = reynolds_number(0.004, 30.0, 1.225, 1.81e-5)
        assert re == pytest.approx(0.004 * 30.0 * 1.225 / 1.81e-5)

    def test_drag_coefficient(self):
        cd = drag_coefficient(1000.0, 1.0)
        assert cd == pytest.approx(0.03 + 67.289 * np.exp(-5.03))

    def test_rounder_granules_have_less_drag(self):
        assert drag_coefficient(5000.0, 1.0) < drag_coefficient(5000.0, 0.8)

    def test_no_drag_without_air(self):
        cfg = dataclasses.replace(self.CONFIG, air_density=0.0)
        assert drag_intensity(_granule(), 30.0, cfg) == 0.0

    def test_no_drag_at_rest(self):
        acc = acceleration(np.zeros(3), _granule(), self.CONFIG)
        assert np.allclose(acc, [0.0, 0.0, -self.CONFIG.gravity])

    def test_drag_opposes_motion(self):
        v = np.array([20.0, -5.0, 3.0])
        acc = acceleration(v, _granule(), self.CONFIG)
        acc[2] += self.CONFIG.gravity
        assert np.dot(acc, v) < 0


class TestIntegrator:
    """Verify the ballistic flight integration."""

    CONFIG = SpreaderConfig()

    def test_default_method_is_semi_implicit(self):
        flight = simulate_flight(_granule(), _launch(), self.CONFIG)
        assert flight.method == 'semi_implicit'

    def test_semi_implicit_step(self):
        cfg = dataclasses.replace(self.CONFIG, air_density=0.0)
        flight = simulate_flight(_granule(), _launch(), cfg)
        v0 = _launch().initial_velocity_vector()
        dt, g = cfg.flight_dt, cfg.gravity
        assert flight.vz[1] == pytest.approx(v0[2] - g * dt)
        assert flight.z[1] == pytest.approx(0.8 + (v0[2] - g * dt) * dt)
        assert flight.x[1] == pytest.approx(0.4 + v0[0] * dt)

    def test_vacuum_within_first_order_bound(self):
        errors = vacuum_trajectory_error(_launch(), _granule(), self.CONFIG)
        assert 0.0 < errors['max_error'] <= errors['height_error_bound'] * (1 + 1e-6) + 1e-12
        assert errors['landing_x_error'] < 0.05
        assert errors['landing_y_error'] < 0.05

    def test_vacuum_error_halves_with_step(self):
        coarse = vacuum_trajectory_error(_launch(), _granule(), self.CONFIG)
        fine = vacuum_trajectory_error(
            _launch(), _granule(), dataclasses.replace(self.CONFIG, flight_dt=self.CONFIG.flight_dt / 2))
        assert fine['max_error'] < 0.6 * coarse['max_error']
        assert fine['landing_x_error'] < 0.6 * coarse['landing_x_error']

    def test_vacuum_constant_acceleration_exact(self):
        cfg = dataclasses.replace(self.CONFIG, flight_method='constant_acceleration')
        errors = vacuum_trajectory_error(_launch(), _granule(), cfg)
        assert errors['height_error_bound'] == 0.0
        assert errors['max_error'] < 1e-9
        assert errors['landing_x_error'] < 1e-3
        assert errors['landing_y_error'] < 1e-3

    def test_methods_differ_only_by_step_error(self):
        semi = simulate_flight(_granule(), _launch(), self.CONFIG)
        exact = simulate_flight(
            _granule(), _launch(), dataclasses.replace(self.CONFIG, flight_method='constant_acceleration'))
        assert exact.method == 'constant_acceleration'
        gap = np.hypot(semi.landing.x - exact.landing.x, semi.landing.y - exact.landing.y)
        assert 0.0 < gap < 0.1

    def test_lands_exactly_on_ground(self):
        flight = simulate_flight(_granule(), _launch(), self.CONFIG)
        landing = flight.landing
        assert landing.z == 0.0
        assert np.isfinite(landing.x) and np.isfinite(landing.y)
        assert np.all(flight.z[:-1] > 0)

    def test_drag_shortens_flight(self):
        vacuum = dataclasses.replace(self.CONFIG, air_density=0.0)
        with_air = simulate_flight(_granule(), _launch(), self.CONFIG)
        without_air = simulate_flight(_granule(), _launch(), vacuum)
        assert with_air.horizontal_distance < without_air.horizontal_distance

    def test_larger_granules_fly_further(self):
        small = simulate_flight(_granule(diameter=0.002), _launch(), self.CONFIG)
        large = simulate_flight(_granule(diameter=0.005), _launch(), self.CONFIG)
        assert large.horizontal_distance > small.horizontal_distance

    def test_fixed_time_grid(self):
        flight = simulate_flight(_granule(), _launch(), self.CONFIG)
        steps = flight.time[:-1]
        assert np.allclose(steps, np.arange(len(steps)) * self.CONFIG.flight_dt)
        assert steps[-1] < flight.flight_time <= steps[-1] + self.CONFIG.flight_dt

    def test_timeout(self):
        cfg = dataclasses.replace(self.CONFIG, flight_max_steps=10)
        with pytest.raises(IntegrationTimeout):
            simulate_flight(_granule(), _launch(), cfg)

class TestLogging:
    """Verify the package logging setup."""

    @pytest.fixture(autouse=True)
    def _restore_logger(self):
        logger = logging.getLogger('spreadsim')
        level, handlers = logger.level, list(logger.handlers)
        yield
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.setLevel(level)
        for handler in handlers:
            logger.addHandler(handler)

    def test_console_and_file_handlers(self, tmp_path):
        log_file = tmp_path / 'run.log'
        logger = setup_logging(logging.DEBUG, log_file, stream=io.StringIO())
        assert logger.name == 'spreadsim'
        assert len(logger.handlers) == 2
        assert all(h.level == logging.DEBUG for h in logger.handlers)

        logging.getLogger('spreadsim.simulation').debug("granule %d failed", 7)
        for handler in logger.handlers:
            handler.flush()
        text = log_file.read_text(encoding='utf-8')
        assert 'spreadsim.simulation: granule 7 failed' in text
        assert 'DEBUG' in text

    def test_repeated_setup_replaces_handlers(self):
        setup_logging(logging.INFO, stream=io.StringIO())
        logger = setup_logging(logging.INFO, stream=io.StringIO())
        assert len(logger.handlers) == 1

    def test_level_by_name(self):
        stream = io.StringIO()
        logger = setup_logging('warning', stream=stream)
        assert logger.level == logging.WARNING
        logging.getLogger('spreadsim.population').info("hidden")
        logging.getLogger('spreadsim.population').warning("Skipping component 'KCl'")
        assert 'hidden' not in stream.getvalue()
        assert "Skipping component 'KCl'" in stream.getvalue()

    def test_fit_messages_reach_handler(self):
        stream = io.StringIO()
        setup_logging(logging.INFO, stream=stream)
        d = np.array([1.0, 2.0, 3.0, 4.0, 5.0])
        fit_weibull(d, 1.0 - weibull_cdf(d, 3.0, 3.0), component='CAN')
        assert 'Weibull fit [CAN]' in stream.getvalue()

    def test_unknown_level_name(self):
        with pytest.raises(ConfigurationError):
            setup_logging('loud')


if __name__ == "__main__":
    pytest.main([__file__, '-v'])
