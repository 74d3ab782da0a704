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

"""Direction Cosine Matrix (DCM) rotations between orbital and Earth frames

Convention: column vectors, ``out = R @ v``. ``rot_x`` and ``rot_z`` are
active right-hand rotations of a vector by a positive angle.
"""

import numpy as np
from numba import njit


@njit(cache=True, fastmath=True)
def rot_x(angle):
    """
    Rotation matrix about the x-axis

    Parameters
    ----------
    angle : float
        Rotation angle in radians

    Returns
    -------
    R : ndarray, shape (3, 3)
    """
    s = np.sin(angle)
    c = np.cos(angle)
    R = np.array([[1.0, 0.0, 0.0],
                  [0.0,   c,  -s],
                  [0.0,   s,   c]],
                 dtype=np.double)
    return R


@njit(cache=True, fastmath=True)
def rot_z(angle):
    """
    Rotation matrix about the z-axis

    Parameters
    ----------
    angle : float
        Rotation angle in radians

    Returns
    -------
    R : ndarray, shape (3, 3)
    """
    s = np.sin(angle)
    c = np.cos(angle)
    R = np.array([[  c,  -s, 0.0],
                  [  s,   c, 0.0],
                  [0.0, 0.0, 1.0]],
                 dtype=np.double)
    return R


def perifocal2eci_dcm(OMG: float, inc: float, omg: float) -> np.ndarray:
    """
    Perifocal (PQW) to inertial direction cosine matrix

    Composition Rz(OMG) @ Rx(inc) @ Rz(omg): the perifocal vector is rotated
    by the argument of perigee first, then the inclination, then the right
    ascension of the ascending node.

    Parameters
    ----------
    OMG : float
        Right ascension of ascending node (rad)
    inc : float
        Inclination (rad)
    omg : float
        Argument of perigee (rad)

    Returns
    -------
    C_p_i : ndarray, shape (3, 3)
    """
    return rot_z(OMG) @ rot_x(inc) @ rot_z(omg)


def eci2ecef_dcm(theta: float) -> np.ndarray:
    """
    Earth-Centered-Inertial to Earth-Centered-Earth-Fixed direction cosine matrix

    Parameters:
    -----------
    theta : float
        Earth rotation angle since the inertial reference (rad)

    Returns:
    --------
    C_i_e : np.ndarray
        ECI->ECEF direction cosine matrix (3x3), equal to Rz(theta)^T
    """
    sin_t = np.sin(theta)
    cos_t = np.cos(theta)

    C_i_e = np.array([
        [cos_t, sin_t, 0.0],
        [-sin_t, cos_t, 0.0],
        [0.0, 0.0, 1.0]
    ], dtype=np.float64)

    return C_i_e


def ecef2eci_dcm(theta: float) -> np.ndarray:
    """
    Earth-Centered-Earth-Fixed to Earth-Centered-Inertial direction cosine matrix

    Parameters:
    -----------
    theta : float
        Earth rotation angle since the inertial reference (rad)

    Returns:
    --------
    C_e_i : np.ndarray
        ECEF->ECI direction cosine matrix (3x3), equal to Rz(theta)
    """
    return eci2ecef_dcm(theta).T.copy()
