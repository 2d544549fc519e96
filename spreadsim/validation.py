"""
Validation Against Closed-Form Results
======================================
Checks the numerical stages against cases with known answers:

  - Vacuum flight: with air density 0 the flight is a parabola
        x = x0 + vx·t,  y = y0 + vy·t,  z = z0 + vz·t − ½·g·t²
    matched to rounding error by the constant-acceleration step and within
    ½·g·dt·t in height by semi-implicit Euler
  - Vane exit: the refined exit state lies on the tip radius

and runs the reference spreader scenario used as a regression fixture:
a 4 mm granule (1690 kg/m³, sphericity 0.907) entering the vane at
rv = 0.12 m, hp = 0 on a disk turning at 810 rpm.
"""

import dataclasses
import logging

import numpy as np
from typing import Dict

from .config import SpreaderConfig
from .inlet import entry_from_vane
from .integrator import simulate_flight
from .launch import LaunchConditions
from .logging_config import setup_logging
from .particles import Granule
from .simulation import GranuleTrace, trace_granule


REFERENCE_SCENARIO = {
    'name': '4 mm granule, 810 rpm',
    'diameter': 0.004,
    'density': 1690.0,
    'sphericity': 0.907,
    'entry_rv': 0.12,
    'entry_hp': 0.0,
    'config': {
        'disk_speed_rpm': 810.0,
        'vane_tip_radius': 0.395,
        'vane_pitch_radius': 0.05,
        'vane_tilt_deg': 13.5,
        'friction': 0.3,
        'launch_height': 0.8,
    },
}


def vacuum_trajectory_error(launch: LaunchConditions, granule: Granule,
                            config: SpreaderConfig = None) -> Dict[str, float]:
    """
    Integrate a flight without air and compare it with the parabola.

    Returns the maximum absolute position error over the sampled flight,
    the landing-point errors (m) and ``height_error_bound``, the largest
    height error the configured stepping method allows: ½·g·dt·t for
    semi-implicit Euler, zero for the constant-acceleration update.
    """
    config = dataclasses.replace(config or SpreaderConfig(), air_density=0.0)
    flight = simulate_flight(granule, launch, config)

    x0, y0, z0 = launch.initial_position()
    vx, vy, vz = launch.initial_velocity_vector()
    g = config.gravity

    t = flight.time[:-1]
    err = np.max(np.abs(np.stack([
        flight.x[:-1] - (x0 + vx * t),
        flight.y[:-1] - (y0 + vy * t),
        flight.z[:-1] - (z0 + vz * t - 0.5 * g * t ** 2),
    ])))

    if config.flight_method == 'semi_implicit':
        bound = 0.5 * g * config.flight_dt * float(t[-1])
    else:
        bound = 0.0

    t_land = (vz + np.sqrt(vz ** 2 + 2.0 * g * z0)) / g
    return {
        'max_error': float(err),
        'height_error_bound': bound,
        'landing_x_error': float(abs(flight.x[-1] - (x0 + vx * t_land))),
        'landing_y_error': float(abs(flight.y[-1] - (y0 + vy * t_land))),
        'landing_time_error': float(abs(flight.time[-1] - t_land)),
    }


def reference_scenario(seed: int = 0, zout_deg: float = None,
                       scenario: dict = REFERENCE_SCENARIO) -> GranuleTrace:
    """Trace the reference granule through all stages."""
    config = SpreaderConfig.from_dict(scenario['config'])
    granule = Granule(
        component=scenario['name'],
        diameter=scenario['diameter'],
        density=scenario['density'],
        sphericity=scenario['sphericity'],
    )
    entry = entry_from_vane(scenario['entry_rv'], scenario['entry_hp'], config)
    rng = np.random.default_rng(seed)
    return trace_granule(granule, config, rng, entry=entry, zout_deg=zout_deg)


def run_all_validations(verbose: bool = True) -> Dict[str, float]:
    """Run the closed-form checks and the reference scenario."""
    config = SpreaderConfig()
    granule = Granule('vacuum check', diameter=0.004, density=1690.0, sphericity=0.907)
    launch = LaunchConditions(x=0.4, y=0.0, height=config.launch_height,
                              speed=30.0, outlet_speed=30.0 / np.cos(np.radians(8.0)),
                              direction_deg=30.0, hout_deg=30.0,
                              zout_deg=8.0, muzout_deg=8.0)
    vacuum = vacuum_trajectory_error(launch, granule, config)
    exact = vacuum_trajectory_error(
        launch, granule, dataclasses.replace(config, flight_method='constant_acceleration'))

    trace = reference_scenario()
    exit_state = trace.disk.exit_state
    landing = trace.flight.landing
    results = dict(vacuum)
    results.update({
        'exact_max_error': exact['max_error'],
        'exact_landing_error': max(exact['landing_x_error'], exact['landing_y_error']),
        'exit_time': exit_state.time,
        'exit_tip_error': abs(exit_state.rv - REFERENCE_SCENARIO['config']['vane_tip_radius']),
        'landing_x': landing.x,
        'landing_y': landing.y,
    })
    passed = (vacuum['max_error'] <= vacuum['height_error_bound'] + 1e-9
              and results['exact_landing_error'] < 1e-3
              and results['exit_tip_error'] < 1e-6)
    results['passed'] = passed

    if verbose:
        print(f"\n{'='*60}")
        print(f"  VALIDATION: {REFERENCE_SCENARIO['name']}")
        print(f"{'='*60}")
        print(f"  Vacuum max error          : {vacuum['max_error']:.3e} m"
              f"  (bound {vacuum['height_error_bound']:.3e} m)")
        print(f"  Vacuum landing error (x)  : {vacuum['landing_x_error']:.3e} m")
        print(f"  Exact-step landing error  : {results['exact_landing_error']:.3e} m")
        print(f"  Vane exit time            : {exit_state.time*1000:.3f} ms")
        print(f"  Exit radius − tip radius  : {results['exit_tip_error']:.3e} m")
        print(f"  Outlet speed              : {trace.launch.outlet_speed:.2f} m/s")
        print(f"  Horizontal outlet angle   : {trace.launch.hout_deg:.2f} °")
        print(f"  Landing point             : ({landing.x:.3f}, {landing.y:.3f}) m")
        print(f"  Flight time               : {trace.flight.flight_time:.3f} s")
        status = "✓ PASS" if passed else "✗ FAIL"
        print(f"  Status: {status}")
        print(f"{'='*60}\n")

    return results


if __name__ == "__main__":
    setup_logging(logging.INFO)
    run_all_validations(verbose=True)
