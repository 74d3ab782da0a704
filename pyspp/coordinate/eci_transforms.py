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

"""Earth-Centered Inertial (ECI) <-> Earth-Fixed (ECEF) rotation

The Earth rotation angle is derived from the absolute observation time with
one of two models, fixed per run:

- ``solar``: theta = frac(t / 86400) * 2*pi
- ``sidereal``: theta = (OMGE * t) mod 2*pi

and ECEF = Rz(theta)^T @ ECI for column vectors.
"""

import numpy as np

from ..core.constants import DAY_SECONDS, OMGE, ROT_SIDEREAL, ROT_SOLAR
from .dcm import ecef2eci_dcm, eci2ecef_dcm

TWO_PI = 2.0 * np.pi


def earth_rotation_angle(t: float, model: str = ROT_SOLAR) -> float:
    """
    Earth rotation angle at an absolute time

    Parameters:
    -----------
    t : float
        Absolute time (s)
    model : str
        'solar' or 'sidereal'

    Returns:
    --------
    theta : float
        Rotation angle in [0, 2*pi) (rad)
    """
    if model == ROT_SOLAR:
        frac_day = np.mod(t / DAY_SECONDS, 1.0)
        return float(frac_day * TWO_PI)
    if model == ROT_SIDEREAL:
        return float(np.mod(OMGE * t, TWO_PI))
    raise ValueError(f"Unknown earth rotation model '{model}'")


def eci2ecef(xyz_eci: np.ndarray, t: float, model: str = ROT_SOLAR) -> np.ndarray:
    """
    Convert ECI to ECEF coordinates

    Parameters:
    -----------
    xyz_eci : np.ndarray
        ECI coordinates [x, y, z] (m)
    t : float
        Absolute observation time (s)
    model : str
        Earth rotation model

    Returns:
    --------
    xyz_ecef : np.ndarray
        ECEF coordinates [x, y, z] (m)
    """
    C_i_e = eci2ecef_dcm(earth_rotation_angle(t, model))
    return C_i_e @ np.asarray(xyz_eci, dtype=np.float64)


def ecef2eci(xyz_ecef: np.ndarray, t: float, model: str = ROT_SOLAR) -> np.ndarray:
    """
    Convert ECEF to ECI coordinates

    Parameters:
    -----------
    xyz_ecef : np.ndarray
        ECEF coordinates [x, y, z] (m)
    t : float
        Absolute observation time (s)
    model : str
        Earth rotation model

    Returns:
    --------
    xyz_eci : np.ndarray
        ECI coordinates [x, y, z] (m)
    """
    C_e_i = ecef2eci_dcm(earth_rotation_angle(t, model))
    return C_e_i @ np.asarray(xyz_ecef, dtype=np.float64)
