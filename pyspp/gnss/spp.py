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

"""Single Point Positioning (SPP) core implementation"""

import logging
from dataclasses import dataclass

import numpy as np
from numpy.linalg import norm

from ..coordinate.transforms import ecef2geodetic
from ..core.config import DEFAULT_CONFIG, EngineConfig
from ..core.data_structures import AlignedEpoch, ReceiverEstimate, SolveStatus
from .linalg import normal_equations_solve

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NavSolution:
    """Raw output of the iterative least-squares solve.

    Attributes
    ----------
    rr : np.ndarray
        Receiver ECEF position (m)
    clock_bias : float
        Receiver clock bias, range equivalent (m)
    iterations : int
        Iterations performed
    degenerate : bool
        True if any line-of-sight was zero or non-finite during the solve
    residuals : np.ndarray
        Pseudorange residuals at the final estimate (m)
    """
    rr: np.ndarray
    clock_bias: float
    iterations: int
    degenerate: bool
    residuals: np.ndarray


def geodist(sat_pos, rec_pos):
    """
    Geometric distances and unit line-of-sight vectors

    A zero or non-finite distance is replaced by 1.0 and its unit vector by
    zeros, so one bad sample cannot put NaN into the design matrix.

    Parameters
    ----------
    sat_pos : np.ndarray
        Satellite positions, shape (n, 3) or (3,)
    rec_pos : np.ndarray
        Receiver position, shape (3,)

    Returns
    -------
    r : np.ndarray
        Distances (m), shape (n,)
    e : np.ndarray
        Unit vectors from receiver to satellite, shape (n, 3)
    degenerate : np.ndarray
        Boolean mask of substituted samples, shape (n,)
    """
    diff = np.atleast_2d(np.asarray(sat_pos, dtype=np.float64)) - np.asarray(rec_pos, dtype=np.float64)
    r = norm(diff, axis=1)
    degenerate = ~(np.isfinite(r) & (r > 0.0))
    r[degenerate] = 1.0
    e = diff / r[:, None]
    e[degenerate] = 0.0
    return r, e, degenerate


def solve_position(sat_positions, pseudoranges, config: EngineConfig = DEFAULT_CONFIG,
                   initial_pos=None, initial_clock_bias: float = 0.0):
    """
    Estimate receiver position and clock bias by iterative least squares

    Gauss-Newton refinement of [x, y, z, clock_bias] with a fixed iteration
    bound. Each iteration linearizes the pseudorange model
    ``P_i = |s_i - x| + b`` at the current estimate, builds the design matrix
    with rows ``[-e_x, -e_y, -e_z, 1]`` and solves the normal equations.
    The geometry is checked again at the final estimate, so a converged
    estimate with a singular normal matrix is reported as singular.

    Parameters:
    -----------
    sat_positions : np.ndarray
        Satellite ECEF positions, shape (n, 3)
    pseudoranges : np.ndarray
        Pseudoranges (m), shape (n,)
    config : EngineConfig
        solver_max_iter, singular_threshold, convergence_threshold and
        min_satellites are used
    initial_pos : np.ndarray, optional
        Initial position estimate (ECEF); the Earth's center if None
    initial_clock_bias : float
        Initial clock bias (m)

    Returns:
    --------
    solution : NavSolution or None
        None unless status is OK
    status : SolveStatus
        OK, INSUFFICIENT_SATELLITES or SINGULAR_GEOMETRY
    """
    sat_positions = np.asarray(sat_positions, dtype=np.float64)
    pseudoranges = np.asarray(pseudoranges, dtype=np.float64)
    if sat_positions.size == 0:
        sat_positions = sat_positions.reshape(0, 3)
    if sat_positions.ndim != 2 or sat_positions.shape[1] != 3:
        raise ValueError(f"Satellite positions must have shape (n, 3), got {sat_positions.shape}")
    if pseudoranges.shape != (sat_positions.shape[0],):
        raise ValueError(f"Expected {sat_positions.shape[0]} pseudoranges, got shape {pseudoranges.shape}")

    n = sat_positions.shape[0]
    if n < config.min_satellites:
        logger.debug(f"{n} satellites, need {config.min_satellites}")
        return None, SolveStatus.INSUFFICIENT_SATELLITES

    x = np.zeros(3) if initial_pos is None else np.array(initial_pos, dtype=np.float64)
    clock_bias = float(initial_clock_bias)
    degenerate = False
    iterations = 0

    G = np.ones((n, 4))
    for iterations in range(1, config.solver_max_iter + 1):
        r, e, bad = geodist(sat_positions, x)
        if bad.any():
            degenerate = True
            logger.debug(f"Iteration {iterations}: {int(bad.sum())} degenerate line-of-sight vectors")

        v = pseudoranges - r - clock_bias
        G[:, :3] = -e

        ok, dx = normal_equations_solve(G, v, config.singular_threshold)
        if not ok:
            logger.debug(f"Singular normal matrix at iteration {iterations}")
            return None, SolveStatus.SINGULAR_GEOMETRY

        x += dx[:3]
        clock_bias += dx[3]

        logger.trace(f"Iteration {iterations}: |dx|={norm(dx[:3]):.6f} m, "
                     f"rms={np.sqrt(np.mean(v**2)):.3f} m, clk={clock_bias:.3f} m")

        if config.convergence_threshold is not None and norm(dx[:3]) < config.convergence_threshold:
            break

    if not (np.all(np.isfinite(x)) and np.isfinite(clock_bias)):
        logger.debug(f"Non-finite estimate after {iterations} iterations")
        return None, SolveStatus.SINGULAR_GEOMETRY

    # Satellites on a cone around the receiver leave a whole line of exact
    # solutions, which only shows as a singular matrix at the estimate itself
    r, e, bad = geodist(sat_positions, x)
    degenerate = degenerate or bool(bad.any())
    v = pseudoranges - r - clock_bias
    G[:, :3] = -e
    ok, _ = normal_equations_solve(G, v, config.singular_threshold)
    if not ok:
        logger.debug(f"Singular normal matrix at the final estimate {x}")
        return None, SolveStatus.SINGULAR_GEOMETRY

    rr = x
    rr.setflags(write=False)
    v.setflags(write=False)
    return NavSolution(rr=rr, clock_bias=float(clock_bias), iterations=iterations,
                       degenerate=degenerate, residuals=v), SolveStatus.OK


def solve_epoch(epoch: AlignedEpoch, config: EngineConfig = DEFAULT_CONFIG):
    """
    Solve one aligned epoch and convert the result to geodetic coordinates

    Parameters:
    -----------
    epoch : AlignedEpoch
        Satellites sharing the epoch
    config : EngineConfig
        Engine configuration

    Returns:
    --------
    estimate : ReceiverEstimate or None
    status : SolveStatus
    """
    solution, status = solve_position(epoch.positions, epoch.pseudoranges, config)
    if solution is None:
        return None, status

    lat, lon, alt = ecef2geodetic(solution.rr)
    estimate = ReceiverEstimate(
        time=epoch.time,
        ecef=solution.rr,
        clock_bias=solution.clock_bias,
        lat=lat,
        lon=lon,
        alt=alt,
        sats=epoch.sats,
        iterations=solution.iterations,
        degenerate=solution.degenerate,
    )
    return estimate, status
