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

"""Coordinate frames and rotations

This module provides:
- DCM rotations (perifocal -> ECI, ECI <-> ECEF)
- Earth rotation angle models and ECI/ECEF transforms
- Geodetic conversion on the WGS84 ellipsoid
"""

from .dcm import ecef2eci_dcm, eci2ecef_dcm, perifocal2eci_dcm, rot_x, rot_z
from .eci_transforms import earth_rotation_angle, ecef2eci, eci2ecef
from .transforms import ecef2geodetic, ecef2llh, geodetic2ecef, llh2ecef

__all__ = [
    'rot_x', 'rot_z', 'perifocal2eci_dcm', 'eci2ecef_dcm', 'ecef2eci_dcm',
    'earth_rotation_angle', 'eci2ecef', 'ecef2eci',
    'ecef2llh', 'ecef2geodetic', 'llh2ecef', 'geodetic2ecef',
]
