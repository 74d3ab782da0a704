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

"""Satellite position computation at observation epochs"""

import logging
from collections import defaultdict
from typing import Optional

from ..coordinate.eci_transforms import eci2ecef
from ..core.config import DEFAULT_CONFIG, EngineConfig
from ..core.data_structures import OrbitalElements, SatelliteState
from ..core.exceptions import PropagationError
from ..observation.pseudorange import ObservationStore
from .ephemeris import EphemerisStore
from .orbit import propagate_eci

logger = logging.getLogger(__name__)


def compute_satellite_state(eph: OrbitalElements, time: float,
                            config: EngineConfig = DEFAULT_CONFIG) -> SatelliteState:
    """
    Propagate an element set to an observation epoch and rotate it Earth-fixed.

    Parameters
    ----------
    eph : OrbitalElements
        Element set
    time : float
        Observation epoch (s)
    config : EngineConfig
        Kepler iteration settings, gravitational parameter and rotation model

    Returns
    -------
    SatelliteState

    Raises
    ------
    PropagationError
        Non-physical elements, Kepler non-convergence or degenerate radius
    """
    eci = propagate_eci(eph, time, config.mu, config.kepler_max_iter, config.kepler_tol)
    ecef = eci2ecef(eci, time, config.rotation_model)
    return SatelliteState(sat=eph.sat, time=time, eci=eci, ecef=ecef, toe=eph.toe)


class SatelliteStateTable:
    """
    Satellite states keyed by satellite and epoch.

    A state exists only for (sat, epoch) pairs that were propagated
    successfully, so an epoch of 0.0 is as valid as any other.

    Attributes
    ----------
    missing_ephemeris : int
        Observation epochs skipped because no toe <= epoch was available
    failed : int
        Observation epochs skipped because propagation failed
    failures : dict
        sat -> list of (epoch, reason) for skipped epochs
    """

    def __init__(self):
        self._states = defaultdict(dict)  # sat -> {epoch: SatelliteState}
        self.missing_ephemeris = 0
        self.failed = 0
        self.failures = defaultdict(list)

    def add(self, state: SatelliteState) -> None:
        self._states[state.sat][state.time] = state

    def get(self, sat: int, time: float) -> Optional[SatelliteState]:
        return self._states.get(sat, {}).get(time)

    def has(self, sat: int, time: float) -> bool:
        return time in self._states.get(sat, {})

    def track(self, sat: int) -> tuple:
        """States of one satellite ordered by epoch"""
        states = self._states.get(sat, {})
        return tuple(states[t] for t in sorted(states))

    def prns(self) -> list:
        return sorted(sat for sat, states in self._states.items() if states)

    def __len__(self) -> int:
        return sum(len(states) for states in self._states.values())


def _last_kept_epoch(obs_store: ObservationStore, max_epochs: int) -> Optional[float]:
    """Latest epoch inside the epoch cap, None when nothing is truncated"""
    epochs = sorted({obs.time for obs in obs_store})
    if len(epochs) <= max_epochs:
        return None
    return epochs[max_epochs - 1]


def compute_satellite_states(eph_store: EphemerisStore, obs_store: ObservationStore,
                             config: EngineConfig = DEFAULT_CONFIG) -> SatelliteStateTable:
    """
    Compute a satellite state for every distinct observation epoch of every satellite.

    For each observation the element set with the greatest toe not after the
    epoch is propagated. Satellites without a usable element set are excluded
    at that epoch and the failure is logged; nothing is raised. Epochs beyond
    ``config.max_epochs`` are not propagated, since alignment drops them.

    Parameters
    ----------
    eph_store : EphemerisStore
        Broadcast element set histories
    obs_store : ObservationStore
        Pseudorange histories
    config : EngineConfig
        Engine configuration

    Returns
    -------
    SatelliteStateTable
    """
    table = SatelliteStateTable()
    last = _last_kept_epoch(obs_store, config.max_epochs)

    for sat in obs_store.prns():
        epochs = [t for t in dict.fromkeys(obs_store.epochs(sat)) if last is None or t <= last]
        if sat not in eph_store:
            table.missing_ephemeris += len(epochs)
            logger.warning(f"PRN {sat}: no ephemeris, {len(epochs)} epochs excluded")
            continue

        for time in epochs:
            eph = eph_store.select_ephemeris(sat, time)
            if eph is None:
                table.missing_ephemeris += 1
                table.failures[sat].append((time, "no ephemeris with toe <= epoch"))
                logger.debug(f"PRN {sat}: no ephemeris with toe <= {time}")
                continue

            try:
                state = compute_satellite_state(eph, time, config)
            except PropagationError as e:
                table.failed += 1
                table.failures[sat].append((time, str(e)))
                logger.warning(f"PRN {sat} excluded at epoch {time}: {e}")
                continue

            table.add(state)
            logger.trace(f"PRN {sat} t={time}: ECEF={state.ecef}")

    logger.info(f"Computed {len(table)} satellite states for {len(table.prns())} satellites")
    return table
