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

"""Geodetic coordinate transformation utilities"""

import numpy as np

from ..core.constants import D2R, E2_WGS84, EP2_WGS84, R2D, RE_WGS84, RP_WGS84


def ecef2llh(xyz: np.ndarray) -> np.ndarray:
    """Convert ECEF coordinates to geodetic coordinates

    Closed-form conversion using Bowring's formula on the WGS84 ellipsoid.

    Parameters
    ----------
    xyz : np.ndarray
        ECEF coordinates [x, y, z] in meters

    Returns
    -------
    np.ndarray
        Geodetic coordinates [lat, lon, height] where:
        - lat: latitude in radians (-π/2 to π/2)
        - lon: longitude in radians (-π to π)
        - height: height above WGS84 ellipsoid in meters

    Notes
    -----
    The Earth's center (p = 0 and z = 0) has no defined latitude; it maps
    to lat = 0, lon = 0, height = -RE_WGS84.

    Examples
    --------
    >>> import numpy as np
    >>> ecef = np.array([4193790.895, 454436.195, 4768166.813])
    >>> llh = ecef2llh(ecef)
    >>> lat_deg, lon_deg = np.degrees(llh[0]), np.degrees(llh[1])
    """
    x, y, z = float(xyz[0]), float(xyz[1]), float(xyz[2])

    p = np.sqrt(x**2 + y**2)
    if p == 0.0 and z == 0.0:
        return np.array([0.0, 0.0, -RE_WGS84])

    lon = np.arctan2(y, x)

    # Reduced latitude seed
    theta = np.arctan2(z * RE_WGS84, p * RP_WGS84)
    st = np.sin(theta)
    ct = np.cos(theta)
    lat = np.arctan2(z + EP2_WGS84 * RP_WGS84 * st**3,
                     p - E2_WGS84 * RE_WGS84 * ct**3)

    N = RE_WGS84 / np.sqrt(1.0 - E2_WGS84 * np.sin(lat)**2)
    cos_lat = np.cos(lat)
    if abs(cos_lat) < 1e-12:
        # On the polar axis
        h = abs(z) - RP_WGS84
    else:
        h = p / cos_lat - N

    return np.array([lat, lon, h])


def ecef2geodetic(xyz: np.ndarray) -> tuple[float, float, float]:
    """Convert ECEF coordinates to latitude/longitude in degrees and altitude

    Parameters
    ----------
    xyz : np.ndarray
        ECEF coordinates [x, y, z] in meters

    Returns
    -------
    tuple
        (lat_deg, lon_deg, alt_m)
    """
    lat, lon, h = ecef2llh(xyz)
    return float(lat * R2D), float(lon * R2D), float(h)


def llh2ecef(llh: np.ndarray) -> np.ndarray:
    """Convert geodetic coordinates to ECEF coordinates

    Parameters
    ----------
    llh : np.ndarray
        Geodetic coordinates [lat, lon, height] where:
        - lat: latitude in radians
        - lon: longitude in radians
        - height: height above WGS84 ellipsoid in meters

    Returns
    -------
    np.ndarray
        ECEF coordinates [x, y, z] in meters
    """
    lat, lon, h = llh[0], llh[1], llh[2]

    sin_lat = np.sin(lat)
    cos_lat = np.cos(lat)

    N = RE_WGS84 / np.sqrt(1.0 - E2_WGS84 * sin_lat**2)

    x = (N + h) * cos_lat * np.cos(lon)
    y = (N + h) * cos_lat * np.sin(lon)
    z = (N * (1.0 - E2_WGS84) + h) * sin_lat

    return np.array([x, y, z])


def geodetic2ecef(lat_deg: float, lon_deg: float, alt: float) -> np.ndarray:
    """Convert latitude/longitude in degrees and altitude to ECEF coordinates"""
    return llh2ecef(np.array([lat_deg * D2R, lon_deg * D2R, alt]))
