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

"""GNSS processing module.

Epoch alignment and single point positioning (SPP) for GPS.

Key Components:
- Epoch alignment of pseudoranges and satellite states
- Gauss-Newton navigation solver with a 4x4 normal-equation inverse
- Batch pipeline driving every stage over a pair of stores

Examples:
    >>> from pyspp.gnss import PositioningEngine
    >>> result = PositioningEngine(eph_store, obs_store).run()
    >>> est = result.estimates[0]
    >>> est.lat, est.lon, est.alt
"""

from .epoch_aligner import AlignmentResult, EpochAligner, collect_epochs, first_observations
from .linalg import invert_4x4, normal_equations_solve, reciprocal_condition
from .pipeline import PositioningEngine, ProcessingResult, ProcessingStats, process
from .spp import NavSolution, geodist, solve_epoch, solve_position

__all__ = [
    'collect_epochs', 'first_observations', 'EpochAligner', 'AlignmentResult',
    'invert_4x4', 'normal_equations_solve', 'reciprocal_condition',
    'geodist', 'solve_position', 'solve_epoch', 'NavSolution',
    'PositioningEngine', 'ProcessingResult', 'ProcessingStats', 'process',
]
