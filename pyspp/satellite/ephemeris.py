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

"""Ephemeris history storage and selection"""

import bisect
import logging
import math
from collections import defaultdict
from dataclasses import replace
from typing import Iterator, Optional

from ..core.constants import MAX_RECORDS_PER_SAT, prn_in_range
from ..core.data_structures import OrbitalElements
from ..core.exceptions import InvalidElementsError, MissingEphemerisError, SatelliteOutOfRangeError
from ..core.time import TIME_UNITS, to_seconds

logger = logging.getLogger(__name__)


class EphemerisStore:
    """
    Per-satellite history of broadcast orbital element sets.

    Element sets are kept ordered by time of ephemeris (toe). Sets sharing a
    toe keep their insertion order, and an exact duplicate of a stored set is
    ignored. Each satellite history holds at most ``max_records_per_sat``
    entries; further sets are dropped and counted in ``dropped``.

    Parameters
    ----------
    time_unit : str
        Unit of incoming toe values ('s' or 'ms'); stored values are seconds
    max_records_per_sat : int
        Capacity of each satellite history

    Examples
    --------
    >>> store = EphemerisStore()
    >>> store.store_ephemeris(1, eph)
    >>> eph = store.select_ephemeris(sat=1, time=current_time)
    """

    def __init__(self, time_unit: str = 's', max_records_per_sat: int = MAX_RECORDS_PER_SAT):
        if time_unit not in TIME_UNITS:
            raise ValueError(f"Unknown time unit '{time_unit}'")
        self.time_unit = time_unit
        self.max_records_per_sat = max_records_per_sat
        self._ephemerides = {}  # sat -> list of OrbitalElements sorted by toe
        self._toes = {}         # sat -> parallel list of toe
        self.dropped = defaultdict(int)

    def store_ephemeris(self, sat: int, eph: OrbitalElements) -> bool:
        """
        Append an element set to a satellite's history.

        Parameters
        ----------
        sat : int
            Satellite PRN (1..32)
        eph : OrbitalElements
            Element set; its ``sat`` must match

        Returns
        -------
        bool
            True if stored, False if it was a duplicate or over capacity

        Raises
        ------
        SatelliteOutOfRangeError
            PRN outside [1, 32]
        InvalidElementsError
            Non-finite toe; such a set can never be selected by time. Other
            element values are checked at propagation time
        """
        if not prn_in_range(sat):
            raise SatelliteOutOfRangeError(sat)
        if not isinstance(eph, OrbitalElements):
            raise TypeError(f"Expected OrbitalElements, got {type(eph).__name__}")
        if eph.sat != sat:
            raise ValueError(f"Element set is for PRN {eph.sat}, not PRN {sat}")
        if not math.isfinite(eph.toe):
            raise InvalidElementsError(f"PRN {sat}: toe {eph.toe} is not finite", sat=sat)

        toe = to_seconds(eph.toe, self.time_unit)
        if toe != eph.toe:
            eph = replace(eph, toe=toe)

        history = self._ephemerides.setdefault(sat, [])
        toes = self._toes.setdefault(sat, [])

        lo = bisect.bisect_left(toes, eph.toe)
        hi = bisect.bisect_right(toes, eph.toe)
        if any(existing == eph for existing in history[lo:hi]):
            logger.debug(f"PRN {sat}: duplicate ephemeris toe={eph.toe} ignored")
            return False

        if len(history) >= self.max_records_per_sat:
            self.dropped[sat] += 1
            logger.warning(f"PRN {sat}: ephemeris history full ({self.max_records_per_sat}), "
                           f"toe={eph.toe} dropped")
            return False

        history.insert(hi, eph)
        toes.insert(hi, eph.toe)
        return True

    def select_ephemeris(self, sat: int, time: float) -> Optional[OrbitalElements]:
        """
        Element set with the greatest toe not after ``time``.

        Parameters
        ----------
        sat : int
            Satellite PRN
        time : float
            Time of interest (s)

        Returns
        -------
        OrbitalElements or None
            None when the satellite has no element set with toe <= time
        """
        toes = self._toes.get(sat)
        if not toes:
            return None
        idx = bisect.bisect_right(toes, time)
        if idx == 0:
            return None
        return self._ephemerides[sat][idx - 1]

    def require_ephemeris(self, sat: int, time: float) -> OrbitalElements:
        """Same as select_ephemeris but raises MissingEphemerisError"""
        eph = self.select_ephemeris(sat, time)
        if eph is None:
            raise MissingEphemerisError(sat, time)
        return eph

    def history(self, sat: int) -> tuple:
        """Read-only toe-ordered history of one satellite"""
        return tuple(self._ephemerides.get(sat, ()))

    def prns(self) -> list:
        """Satellites with at least one element set, ascending"""
        return sorted(sat for sat, history in self._ephemerides.items() if history)

    @property
    def dropped_count(self) -> int:
        return sum(self.dropped.values())

    def __contains__(self, sat) -> bool:
        return bool(self._ephemerides.get(sat))

    def __len__(self) -> int:
        return sum(len(history) for history in self._ephemerides.values())

    def __iter__(self) -> Iterator[OrbitalElements]:
        for sat in self.prns():
            yield from self._ephemerides[sat]
