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

"""Pseudorange observation storage"""

import logging
from collections import defaultdict
from typing import Iterator

from ..core.constants import MAX_RECORDS_PER_SAT, prn_in_range
from ..core.data_structures import PseudorangeObservation
from ..core.exceptions import SatelliteOutOfRangeError
from ..core.time import TIME_UNITS, to_seconds

logger = logging.getLogger(__name__)


class ObservationStore:
    """
    Append-only per-satellite history of pseudorange measurements.

    Observations keep their arrival order; several observations of one
    satellite may share an epoch. Histories are capacity-bounded, and
    observations beyond the capacity are counted in ``dropped``.

    Parameters
    ----------
    time_unit : str
        Unit of incoming epochs ('s' or 'ms'); stored epochs are seconds
    max_records_per_sat : int
        Capacity of each satellite history
    """

    def __init__(self, time_unit: str = 's', max_records_per_sat: int = MAX_RECORDS_PER_SAT):
        if time_unit not in TIME_UNITS:
            raise ValueError(f"Unknown time unit '{time_unit}'")
        self.time_unit = time_unit
        self.max_records_per_sat = max_records_per_sat
        self._observations = {}  # sat -> list of PseudorangeObservation
        self.dropped = defaultdict(int)

    def store_observation(self, sat: int, time: float, pseudorange: float) -> bool:
        """
        Append one pseudorange measurement.

        Parameters
        ----------
        sat : int
            Satellite PRN (1..32)
        time : float
            Measurement epoch in ``time_unit``
        pseudorange : float
            Pseudorange (m)

        Returns
        -------
        bool
            True if stored, False if the satellite history is full

        Raises
        ------
        SatelliteOutOfRangeError
            PRN outside [1, 32]
        ValueError
            Non-finite epoch. A non-finite pseudorange is stored and left out
            of alignment
        """
        if not prn_in_range(sat):
            raise SatelliteOutOfRangeError(sat)

        obs = PseudorangeObservation(sat=sat, time=to_seconds(time, self.time_unit),
                                     P=float(pseudorange))

        history = self._observations.setdefault(sat, [])
        if len(history) >= self.max_records_per_sat:
            self.dropped[sat] += 1
            logger.warning(f"PRN {sat}: observation history full ({self.max_records_per_sat}), "
                           f"epoch {obs.time} dropped")
            return False

        history.append(obs)
        return True

    def observations(self, sat: int) -> tuple:
        """Read-only history of one satellite in arrival order"""
        return tuple(self._observations.get(sat, ()))

    def prns(self) -> list:
        """Satellites with at least one observation, ascending"""
        return sorted(sat for sat, history in self._observations.items() if history)

    def epochs(self, sat: int) -> list:
        """Epochs recorded for one satellite, in arrival order"""
        return [obs.time for obs in self._observations.get(sat, ())]

    @property
    def dropped_count(self) -> int:
        return sum(self.dropped.values())

    def __contains__(self, sat) -> bool:
        return bool(self._observations.get(sat))

    def __len__(self) -> int:
        return sum(len(history) for history in self._observations.values())

    def __iter__(self) -> Iterator[PseudorangeObservation]:
        for sat in self.prns():
            yield from self._observations[sat]
