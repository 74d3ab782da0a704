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

"""Exception types raised by the positioning engine"""


class PySPPError(Exception):
    """Base class for all pyspp errors"""


class SatelliteOutOfRangeError(PySPPError, ValueError):
    """Satellite identifier outside the supported PRN range"""

    def __init__(self, sat):
        self.sat = sat
        super().__init__(f"Satellite PRN {sat!r} outside valid range [1, 32]")


class PropagationError(PySPPError, ValueError):
    """Satellite state could not be computed from an element set"""

    def __init__(self, message, sat=None):
        self.sat = sat
        super().__init__(message)


class InvalidElementsError(PropagationError):
    """Non-physical orbital elements"""


class KeplerConvergenceError(PropagationError):
    """Newton iteration for Kepler's equation did not converge"""


class DegenerateOrbitError(PropagationError):
    """Orbital radius is non-positive or non-finite"""


class MissingEphemerisError(PySPPError, LookupError):
    """No ephemeris available at or before the requested time"""

    def __init__(self, sat, time):
        self.sat = sat
        self.time = time
        super().__init__(f"No ephemeris for PRN {sat} with toe <= {time}")


class ConfigurationError(PySPPError, ValueError):
    """Invalid engine configuration"""
