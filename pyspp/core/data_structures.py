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

"""Core data structures for GPS single point positioning"""

import math
from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from .exceptions import InvalidElementsError


def _frozen_array(values, shape) -> np.ndarray:
    arr = np.array(values, dtype=np.float64)
    if arr.shape != shape:
        raise ValueError(f"Expected array of shape {shape}, got {arr.shape}")
    arr.setflags(write=False)
    return arr


class SolveStatus(Enum):
    """Outcome of a single-epoch navigation solve.

    Attributes
    ----------
    OK : str
        Estimate produced
    INSUFFICIENT_SATELLITES : str
        Fewer satellites than unknowns
    SINGULAR_GEOMETRY : str
        Normal matrix could not be inverted
    """
    OK = "ok"
    INSUFFICIENT_SATELLITES = "insufficient_satellites"
    SINGULAR_GEOMETRY = "singular_geometry"


@dataclass(frozen=True)
class OrbitalElements:
    """Keplerian element set decoded from one broadcast ephemeris message.

    Attributes
    ----------
    sat : int
        Satellite PRN (1..32)
    e : float
        Eccentricity
    i0 : float
        Inclination (rad)
    M0 : float
        Mean anomaly at reference time (rad)
    A : float
        Semi-major axis (m)
    OMG0 : float
        Right ascension of ascending node (rad)
    omg : float
        Argument of perigee (rad)
    toe : float
        Time of ephemeris (s), same time base as the observations

    Notes
    -----
    Field names follow the RTKLIB ephemeris naming. Physical validity is
    checked by ``validate`` at propagation time, not at construction, so a
    corrupt broadcast only excludes its own satellite.
    """
    sat: int
    e: float
    i0: float
    M0: float
    A: float
    OMG0: float
    omg: float
    toe: float

    def validate(self) -> None:
        """Raise InvalidElementsError if the element set is non-physical"""
        for name in ('e', 'i0', 'M0', 'A', 'OMG0', 'omg', 'toe'):
            if not math.isfinite(getattr(self, name)):
                raise InvalidElementsError(f"PRN {self.sat}: non-finite {name}", sat=self.sat)
        if not self.A > 0.0:
            raise InvalidElementsError(f"PRN {self.sat}: semi-major axis {self.A} <= 0", sat=self.sat)
        if not 0.0 <= self.e < 1.0:
            raise InvalidElementsError(f"PRN {self.sat}: eccentricity {self.e} outside [0, 1)", sat=self.sat)


@dataclass(frozen=True)
class PseudorangeObservation:
    """Pseudorange measured for one satellite at one epoch.

    Attributes
    ----------
    sat : int
        Satellite PRN
    time : float
        Measurement epoch (s)
    P : float
        Pseudorange (m)
    """
    sat: int
    time: float
    P: float

    def is_usable(self) -> bool:
        return math.isfinite(self.P) and self.P > 0.0


@dataclass(frozen=True)
class SatelliteState:
    """Satellite position at one observation epoch.

    Attributes
    ----------
    sat : int
        Satellite PRN
    time : float
        Observation epoch the state was propagated to (s)
    eci : np.ndarray
        Position in the inertial frame [x, y, z] (m), read-only
    ecef : np.ndarray
        Position in the Earth-fixed frame [x, y, z] (m), read-only
    toe : float
        Time of ephemeris of the element set used
    """
    sat: int
    time: float
    eci: np.ndarray
    ecef: np.ndarray
    toe: float = float('nan')

    def __post_init__(self):
        object.__setattr__(self, 'eci', _frozen_array(self.eci, (3,)))
        object.__setattr__(self, 'ecef', _frozen_array(self.ecef, (3,)))


@dataclass(frozen=True)
class AlignedEpoch:
    """Satellites that share one epoch, ready for the navigation solver.

    Attributes
    ----------
    time : float
        Epoch (s)
    sats : tuple
        PRNs in ascending order
    positions : np.ndarray
        Satellite ECEF positions, shape (n, 3)
    pseudoranges : np.ndarray
        Pseudoranges (m), shape (n,)
    dropped : int
        Satellites left out because of the per-epoch cap
    """
    time: float
    sats: tuple
    positions: np.ndarray
    pseudoranges: np.ndarray
    dropped: int = 0

    def __post_init__(self):
        n = len(self.sats)
        object.__setattr__(self, 'sats', tuple(self.sats))
        object.__setattr__(self, 'positions',
                           _frozen_array(np.reshape(self.positions, (n, 3)), (n, 3)))
        object.__setattr__(self, 'pseudoranges', _frozen_array(self.pseudoranges, (n,)))

    @property
    def ns(self) -> int:
        return len(self.sats)


@dataclass(frozen=True)
class ReceiverEstimate:
    """Receiver position and clock bias solved for one epoch.

    Attributes
    ----------
    time : float
        Epoch (s)
    ecef : np.ndarray
        Receiver position [x, y, z] (m), read-only
    clock_bias : float
        Receiver clock bias, range equivalent (m)
    lat : float
        Geodetic latitude (deg)
    lon : float
        Geodetic longitude (deg)
    alt : float
        Height above the WGS84 ellipsoid (m)
    sats : tuple
        PRNs used in the solution
    iterations : int
        Gauss-Newton iterations performed
    degenerate : bool
        True if a zero or non-finite line-of-sight was substituted
    """
    time: float
    ecef: np.ndarray
    clock_bias: float
    lat: float
    lon: float
    alt: float
    sats: tuple = field(default_factory=tuple)
    iterations: int = 0
    degenerate: bool = False

    def __post_init__(self):
        object.__setattr__(self, 'ecef', _frozen_array(self.ecef, (3,)))
        object.__setattr__(self, 'sats', tuple(self.sats))

    @property
    def ns(self) -> int:
        return len(self.sats)

    @property
    def llh(self) -> tuple[float, float, float]:
        return self.lat, self.lon, self.alt
