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

"""Epoch alignment of per-satellite observations and satellite states"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import numpy as np

from ..core.config import DEFAULT_CONFIG, EngineConfig
from ..core.constants import MAX_EPOCHS
from ..core.data_structures import AlignedEpoch, PseudorangeObservation
from ..observation.pseudorange import ObservationStore
from ..satellite.satellite_position import SatelliteStateTable

logger = logging.getLogger(__name__)


def collect_epochs(obs_store: ObservationStore, max_epochs: int = MAX_EPOCHS) -> Tuple[tuple, int]:
    """
    Distinct observation epochs across all satellites

    Parameters:
    -----------
    obs_store : ObservationStore
        Pseudorange histories
    max_epochs : int
        Number of distinct epochs kept; the earliest ones are kept

    Returns:
    --------
    epochs : tuple
        Strictly increasing epochs (s)
    truncated : int
        Number of distinct epochs beyond the cap
    """
    epochs = sorted({obs.time for obs in obs_store})
    truncated = max(0, len(epochs) - max_epochs)
    if truncated:
        logger.warning(f"{len(epochs)} distinct epochs exceed the cap of {max_epochs}, "
                       f"{truncated} latest epochs truncated")
    return tuple(epochs[:max_epochs]), truncated


def first_observations(obs_store: ObservationStore) -> Dict[int, Dict[float, PseudorangeObservation]]:
    """sat -> {epoch: first observation recorded at that epoch}"""
    index = {}
    for sat in obs_store.prns():
        by_epoch = {}
        for obs in obs_store.observations(sat):
            by_epoch.setdefault(obs.time, obs)
        index[sat] = by_epoch
    return index


@dataclass(frozen=True)
class AlignmentResult:
    """Aligned epochs with their truncation counts

    Attributes
    ----------
    epochs : tuple
        One AlignedEpoch per distinct epoch kept, ascending
    truncated_epochs : int
        Distinct epochs dropped by the epoch cap
    truncated_sats : int
        Satellite samples dropped by the per-epoch satellite cap
    """
    epochs: tuple
    truncated_epochs: int = 0
    truncated_sats: int = 0

    @property
    def times(self) -> tuple:
        return tuple(epoch.time for epoch in self.epochs)


class EpochAligner:
    """
    Group satellites that share an observation epoch.

    A satellite contributes to an epoch when its first observation at that
    epoch has a usable pseudorange and a satellite state exists for that
    exact epoch. At most ``max_sats_per_epoch`` satellites are kept per
    epoch, lowest PRN first; the rest are counted in ``AlignedEpoch.dropped``.

    Parameters
    ----------
    config : EngineConfig
        ``max_epochs`` and ``max_sats_per_epoch`` are used
    """

    def __init__(self, config: EngineConfig = DEFAULT_CONFIG):
        self.config = config

    def align(self, obs_store: ObservationStore, state_table: SatelliteStateTable) -> AlignmentResult:
        """
        Align every distinct epoch of the observation store

        Parameters:
        -----------
        obs_store : ObservationStore
            Pseudorange histories
        state_table : SatelliteStateTable
            Satellite states computed for the observation epochs

        Returns:
        --------
        AlignmentResult
        """
        epochs, truncated_epochs = collect_epochs(obs_store, self.config.max_epochs)
        index = first_observations(obs_store)

        aligned = []
        truncated_sats = 0
        for time in epochs:
            epoch = self.gather(time, obs_store, state_table, index)
            truncated_sats += epoch.dropped
            aligned.append(epoch)

        if truncated_sats:
            logger.warning(f"{truncated_sats} satellite samples beyond "
                           f"{self.config.max_sats_per_epoch} per epoch truncated")
        logger.info(f"Aligned {len(aligned)} epochs")

        return AlignmentResult(epochs=tuple(aligned), truncated_epochs=truncated_epochs,
                               truncated_sats=truncated_sats)

    def gather(self, time: float, obs_store: ObservationStore, state_table: SatelliteStateTable,
               index: Optional[dict] = None) -> AlignedEpoch:
        """
        Satellites with both a usable pseudorange and a state at one epoch

        Parameters:
        -----------
        time : float
            Epoch (s)
        obs_store : ObservationStore
            Pseudorange histories
        state_table : SatelliteStateTable
            Satellite states
        index : dict, optional
            Result of first_observations(obs_store), rebuilt if None

        Returns:
        --------
        AlignedEpoch
        """
        if index is None:
            index = first_observations(obs_store)

        sats = []
        positions = []
        pseudoranges = []
        dropped = 0
        for sat in sorted(index):
            obs = index[sat].get(time)
            if obs is None or not obs.is_usable():
                continue
            state = state_table.get(sat, time)
            if state is None:
                continue
            if len(sats) >= self.config.max_sats_per_epoch:
                dropped += 1
                continue
            sats.append(sat)
            positions.append(state.ecef)
            pseudoranges.append(obs.P)

        if dropped:
            logger.debug(f"Epoch {time}: {dropped} satellites beyond the per-epoch cap")

        return AlignedEpoch(
            time=time,
            sats=tuple(sats),
            positions=np.array(positions, dtype=np.float64).reshape(len(sats), 3),
            pseudoranges=np.array(pseudoranges, dtype=np.float64),
            dropped=dropped,
        )
