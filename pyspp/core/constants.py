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

"""GPS Constants and Engine Parameters"""

import numpy as np

# Physical Constants
EARTH_MASS = 5.9722E24              # earth mass (kg)
GRAVITATIONAL_CONSTANT = 6.67430E-11  # gravitational constant (m^3 kg^-1 s^-2)
MU = EARTH_MASS * GRAVITATIONAL_CONSTANT  # earth gravitational parameter (m^3/s^2)

# Earth Parameters (WGS84)
RE_WGS84 = 6378137.0                # earth semimajor axis (m)
FE_WGS84 = 1.0 / 298.257223563      # earth flattening
RP_WGS84 = RE_WGS84 * (1.0 - FE_WGS84)  # polar radius (semi-minor axis) (m)
E2_WGS84 = FE_WGS84 * (2.0 - FE_WGS84)  # first eccentricity squared
EP2_WGS84 = (RE_WGS84**2 - RP_WGS84**2) / RP_WGS84**2  # second eccentricity squared
OMGE = 7.2921151467E-5              # earth angular velocity (rad/s)

# Time Parameters
DAY_SECONDS = 86400.0               # solar day (s)
WEEK_SECONDS = 604800.0             # GPS week (s)

# Satellite identifiers
MIN_PRN = 1
MAX_PRN = 32
MAXSAT = MAX_PRN - MIN_PRN + 1

# Capacity limits
MAX_EPOCHS = 100000                 # distinct epochs per run
MAX_SATS_PER_EPOCH = MAXSAT         # satellites gathered per epoch
MAX_RECORDS_PER_SAT = 100000        # history length per satellite

# Kepler solver
KEPLER_MAXITR = 10                  # Newton iteration cap
KEPLER_TOL = 1E-12                  # correction magnitude for early exit (rad)

# Navigation solver
MAXITR = 10                         # Gauss-Newton iterations
MIN_SATS = 4                        # x, y, z, clock bias
SINGULAR_EPS = 1E-12                # relative pivot and reciprocal condition threshold

# Earth rotation models
ROT_SOLAR = "solar"
ROT_SIDEREAL = "sidereal"

# Unit conversions
R2D = 180.0 / np.pi                 # radians to degrees
D2R = np.pi / 180.0                 # degrees to radians


def prn_in_range(sat) -> bool:
    """Check that a satellite identifier is a valid GPS PRN"""
    return isinstance(sat, (int, np.integer)) and not isinstance(sat, bool) \
        and MIN_PRN <= sat <= MAX_PRN
