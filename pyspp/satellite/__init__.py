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

"""
Satellite state computation from broadcast orbital elements.

Modules
-------
ephemeris : module
    Per-satellite element set history with closest-preceding selection
orbit : module
    Kepler's equation, two-body propagation and full-orbit sampling
satellite_position : module
    Satellite ECI/ECEF states at observation epochs

Usage Examples
--------------
    >>> from pyspp.satellite import EphemerisStore, propagate_eci
    >>> store = EphemerisStore()
    >>> store.store_ephemeris(1, eph)
    >>> eci = propagate_eci(store.select_ephemeris(1, t), t)
"""

from .ephemeris import EphemerisStore
from .orbit import (
    KeplerState,
    kepler_state,
    mean_motion,
    normalize_mean_anomaly,
    orbit_trace,
    propagate_eci,
    solve_kepler,
    true_anomaly,
)
from .satellite_position import SatelliteStateTable, compute_satellite_state, compute_satellite_states
