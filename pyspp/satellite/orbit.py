# Copyright 2024 inuex35
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Keplerian orbit propagation from broadcast orbital elements

The propagation follows the two-body model:

1. mean motion n = sqrt(mu / A^3)
2. mean anomaly M = M0 + n * (t - toe), wrapped into (-pi, pi]
3. eccentric anomaly E from Kepler's equation E - e*sin(E) = M by Newton
   iteration starting at E = M
4. true anomaly and orbital radius r = A * (1 - e*cos(E))
5. perifocal position rotated to ECI by Rz(OMG0) @ Rx(i0) @ Rz(omg)

The Newton solve stops after ``max_iter`` corrections or as soon as a
correction is smaller than ``tol``. Hitting the cap without meeting the
tolerance is a propagation failure.
"""

import logging
import math
from typing import NamedTuple

import numpy as np
from numba import njit

from ..coordinate.dcm import perifocal2eci_dcm
from ..core.constants import KEPLER_MAXITR, KEPLER_TOL, MU
from ..core.data_structures import OrbitalElements
from ..core.exceptions import DegenerateOrbitError, InvalidElementsError, KeplerConvergenceError

logger = logging.getLogger(__name__)

TWO_PI = 2.0 * math.pi


class KeplerState(NamedTuple):
    """Intermediate quantities of one propagation"""
    M: float           # mean anomaly (rad)
    E: float           # eccentric anomaly (rad)
    nu: float          # true anomaly (rad)
    r: float           # orbital radius (m)
    iterations: int    # Newton iterations used


@njit(cache=True)
def solve_kepler(M, e, max_iter=KEPLER_MAXITR, tol=KEPLER_TOL):
    """
    Solve Kepler's equation E - e*sin(E) = M by Newton iteration

    Parameters
    ----------
    M : float
        Mean anomaly (rad)
    e : float
        Eccentricity, 0 <= e < 1
    max_iter : int
        Maximum number of Newton corrections
    tol : float
        Stop once |dE| < tol (rad)

    Returns
    -------
    E : float
        Eccentric anomaly (rad)
    iterations : int
        Corrections applied
    converged : bool
        False if the cap was reached without meeting the tolerance
    """
    E = M * 1.0
    for k in range(max_iter):
        f = E - e * np.sin(E) - M
        fp = 1.0 - e * np.cos(E)
        dE = -f / fp
        E += dE
        if abs(dE) < tol:
            return E, k + 1, True
    return E, max_iter, False


def mean_motion(A: float, mu: float = MU) -> float:
    """Mean motion sqrt(mu / A^3) (rad/s)"""
    if not A > 0.0:
        raise InvalidElementsError(f"semi-major axis {A} <= 0")
    return math.sqrt(mu / (A * A * A))


def normalize_mean_anomaly(M: float) -> float:
    """Wrap an angle into (-pi, pi]"""
    return math.pi - (math.pi - M) % TWO_PI


def true_anomaly(E: float, e: float) -> float:
    """True anomaly from eccentric anomaly"""
    return math.atan2(math.sqrt(max(0.0, 1.0 - e * e)) * math.sin(E), math.cos(E) - e)


def kepler_state(eph: OrbitalElements, t: float, mu: float = MU,
                 max_iter: int = KEPLER_MAXITR, tol: float = KEPLER_TOL) -> KeplerState:
    """
    Solve the orbit geometry of an element set at time t

    Parameters
    ----------
    eph : OrbitalElements
        Element set
    t : float
        Target time (s), same time base as eph.toe
    mu : float
        Gravitational parameter (m^3/s^2)
    max_iter : int
        Newton iteration cap
    tol : float
        Newton tolerance (rad)

    Returns
    -------
    KeplerState

    Raises
    ------
    InvalidElementsError
        Non-physical element set or non-finite time
    KeplerConvergenceError
        Newton iteration did not converge within max_iter
    DegenerateOrbitError
        Non-positive or non-finite orbital radius
    """
    eph.validate()
    if not math.isfinite(t):
        raise InvalidElementsError(f"PRN {eph.sat}: non-finite target time {t}", sat=eph.sat)

    n = mean_motion(eph.A, mu)
    dt = t - eph.toe
    M = normalize_mean_anomaly(eph.M0 + n * dt)

    E, iterations, converged = solve_kepler(M, eph.e, max_iter, tol)
    if not converged:
        raise KeplerConvergenceError(
            f"PRN {eph.sat}: Kepler iteration did not converge in {max_iter} steps "
            f"(M={M:.6f}, e={eph.e:.6f})", sat=eph.sat)

    r = eph.A * (1.0 - eph.e * math.cos(E))
    if not (r > 0.0 and math.isfinite(r)):
        raise DegenerateOrbitError(f"PRN {eph.sat}: orbital radius {r}", sat=eph.sat)

    return KeplerState(M=M, E=float(E), nu=true_anomaly(E, eph.e), r=r, iterations=int(iterations))


def propagate_eci(eph: OrbitalElements, t: float, mu: float = MU,
                  max_iter: int = KEPLER_MAXITR, tol: float = KEPLER_TOL) -> np.ndarray:
    """
    Satellite position in the inertial frame at time t

    Parameters
    ----------
    eph : OrbitalElements
        Element set
    t : float
        Target time (s)
    mu : float
        Gravitational parameter (m^3/s^2)
    max_iter : int
        Newton iteration cap
    tol : float
        Newton tolerance (rad)

    Returns
    -------
    np.ndarray
        ECI position [x, y, z] (m)

    Raises
    ------
    PropagationError
        See kepler_state
    """
    state = kepler_state(eph, t, mu, max_iter, tol)
    pqw = np.array([state.r * math.cos(state.nu), state.r * math.sin(state.nu), 0.0])
    return perifocal2eci_dcm(eph.OMG0, eph.i0, eph.omg) @ pqw


def orbit_trace(eph: OrbitalElements, step: float = 0.01) -> np.ndarray:
    """
    Sample the full orbital ellipse of an element set in the inertial frame

    True anomaly is swept from 0 to 2*pi inclusive with the given step.

    Parameters
    ----------
    eph : OrbitalElements
        Element set
    step : float
        True anomaly step (rad)

    Returns
    -------
    np.ndarray
        ECI positions, shape (n, 3) (m)
    """
    if not step > 0.0:
        raise ValueError(f"step must be positive, got {step}")
    eph.validate()

    n_steps = max(int(TWO_PI / step) + 1, 2)
    nu = np.minimum(np.arange(n_steps + 1) * step, TWO_PI)
    r = eph.A * (1.0 - eph.e**2) / (1.0 + eph.e * np.cos(nu))

    pqw = np.column_stack([r * np.cos(nu), r * np.sin(nu), np.zeros_like(nu)])
    C_p_i = perifocal2eci_dcm(eph.OMG0, eph.i0, eph.omg)
    return pqw @ C_p_i.T
