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
Batch positioning pipeline

Stages run strictly downstream over one pair of stores:
satellite states -> epoch alignment -> navigation solve -> geodetic conversion.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from ..core.config import DEFAULT_CONFIG, EngineConfig
from ..core.data_structures import SolveStatus
from ..observation.pseudorange import ObservationStore
from ..satellite.ephemeris import EphemerisStore
from ..satellite.satellite_position import SatelliteStateTable, compute_satellite_states
from .epoch_aligner import EpochAligner
from .spp import solve_epoch

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessingStats:
    """Counters describing what a run excluded or truncated"""
    epochs: int = 0
    solved: int = 0
    unsolved: int = 0
    insufficient_satellites: int = 0
    singular_geometry: int = 0
    missing_ephemeris: int = 0
    propagation_failures: int = 0
    truncated_epochs: int = 0
    truncated_sats: int = 0
    dropped_ephemerides: int = 0
    dropped_observations: int = 0

    @property
    def truncated(self) -> bool:
        return bool(self.truncated_epochs or self.truncated_sats
                    or self.dropped_ephemerides or self.dropped_observations)


@dataclass(frozen=True)
class ProcessingResult:
    """
    Read-only output of one positioning run

    Attributes
    ----------
    epochs : tuple
        Distinct epochs processed, ascending
    estimates : tuple
        ReceiverEstimate for every solvable epoch, ascending by time
    aligned : tuple
        AlignedEpoch for every processed epoch
    satellite_tracks : Mapping
        PRN -> tuple of SatelliteState ordered by epoch
    pseudoranges : Mapping
        PRN -> tuple of PseudorangeObservation in arrival order
    unsolved : Mapping
        epoch -> SolveStatus for epochs without an estimate
    stats : ProcessingStats
        Exclusion and truncation counters
    """
    epochs: tuple
    estimates: tuple
    aligned: tuple = ()
    satellite_tracks: Mapping = field(default_factory=lambda: MappingProxyType({}))
    pseudoranges: Mapping = field(default_factory=lambda: MappingProxyType({}))
    unsolved: Mapping = field(default_factory=lambda: MappingProxyType({}))
    stats: ProcessingStats = field(default_factory=ProcessingStats)

    def estimate_at(self, time: float):
        """Estimate for one epoch, or None if it was not solved"""
        for estimate in self.estimates:
            if estimate.time == time:
                return estimate
        return None

    def __len__(self) -> int:
        return len(self.estimates)

    def __iter__(self):
        return iter(self.estimates)


class PositioningEngine:
    """
    Single point positioning over a batch of stored ephemerides and observations

    Parameters
    ----------
    eph_store : EphemerisStore
        Broadcast element set histories
    obs_store : ObservationStore
        Pseudorange histories
    config : EngineConfig
        Engine configuration

    Examples
    --------
    >>> engine = PositioningEngine(eph_store, obs_store)
    >>> result = engine.run()
    >>> for est in result.estimates:
    ...     print(est.time, est.lat, est.lon, est.alt)
    """

    def __init__(self, eph_store: EphemerisStore, obs_store: ObservationStore,
                 config: EngineConfig = DEFAULT_CONFIG):
        if eph_store is None or obs_store is None:
            raise TypeError("Both an ephemeris store and an observation store are required")
        if not isinstance(eph_store, EphemerisStore):
            raise TypeError(f"eph_store must be an EphemerisStore, got {type(eph_store).__name__}")
        if not isinstance(obs_store, ObservationStore):
            raise TypeError(f"obs_store must be an ObservationStore, got {type(obs_store).__name__}")
        if not isinstance(config, EngineConfig):
            raise TypeError(f"config must be an EngineConfig, got {type(config).__name__}")

        self.eph_store = eph_store
        self.obs_store = obs_store
        self.config = config
        self.aligner = EpochAligner(config)

    def run(self) -> ProcessingResult:
        """
        Process every distinct epoch of the observation store

        Satellite and epoch failures are excluded and counted; nothing
        raised by one satellite or one epoch aborts the run.

        Returns
        -------
        ProcessingResult
        """
        logger.info(f"Processing {len(self.obs_store)} observations of "
                    f"{len(self.obs_store.prns())} satellites, "
                    f"{len(self.eph_store)} ephemerides")

        states = compute_satellite_states(self.eph_store, self.obs_store, self.config)
        alignment = self.aligner.align(self.obs_store, states)

        estimates = []
        unsolved = {}
        for epoch in alignment.epochs:
            estimate, status = solve_epoch(epoch, self.config)
            if estimate is None:
                unsolved[epoch.time] = status
                logger.debug(f"Epoch {epoch.time}: unsolved ({status.value}, {epoch.ns} satellites)")
                continue
            estimates.append(estimate)
            logger.debug(f"Epoch {epoch.time}: lat={estimate.lat:.8f} lon={estimate.lon:.8f} "
                         f"alt={estimate.alt:.3f} clk={estimate.clock_bias:.3f} ns={estimate.ns}")

        statuses = list(unsolved.values())
        stats = ProcessingStats(
            epochs=len(alignment.epochs),
            solved=len(estimates),
            unsolved=len(unsolved),
            insufficient_satellites=statuses.count(SolveStatus.INSUFFICIENT_SATELLITES),
            singular_geometry=statuses.count(SolveStatus.SINGULAR_GEOMETRY),
            missing_ephemeris=states.missing_ephemeris,
            propagation_failures=states.failed,
            truncated_epochs=alignment.truncated_epochs,
            truncated_sats=alignment.truncated_sats,
            dropped_ephemerides=self.eph_store.dropped_count,
            dropped_observations=self.obs_store.dropped_count,
        )

        if unsolved:
            logger.warning(f"{len(unsolved)} of {stats.epochs} epochs unsolved "
                           f"({stats.insufficient_satellites} insufficient satellites, "
                           f"{stats.singular_geometry} singular geometry)")
        self._log_satellite_summary(states)
        logger.info(f"Solved {stats.solved} of {stats.epochs} epochs")

        return ProcessingResult(
            epochs=alignment.times,
            estimates=tuple(estimates),
            aligned=alignment.epochs,
            satellite_tracks=MappingProxyType({sat: states.track(sat) for sat in states.prns()}),
            pseudoranges=MappingProxyType({sat: self.obs_store.observations(sat)
                                           for sat in self.obs_store.prns()}),
            unsolved=MappingProxyType(unsolved),
            stats=stats,
        )

    def _log_satellite_summary(self, states: SatelliteStateTable) -> None:
        for sat in self.obs_store.prns():
            epochs = self.obs_store.epochs(sat)
            track = states.track(sat)
            logger.info(f"PRN {sat:2d}: {len(epochs)} pseudoranges, {len(track)} positions, "
                        f"epochs {min(epochs)} .. {max(epochs)}")


def process(eph_store: EphemerisStore, obs_store: ObservationStore,
            config: EngineConfig = DEFAULT_CONFIG) -> ProcessingResult:
    """Run the positioning pipeline once"""
    return PositioningEngine(eph_store, obs_store, config).run()
