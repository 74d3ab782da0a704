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

"""Core Module.

Fundamental components shared by every processing stage:

- **Constants**: physical and WGS84 parameters, PRN range, capacity limits,
  iteration caps and tolerances
- **Data Structures**: orbital element sets, pseudorange observations,
  satellite states, aligned epochs and receiver estimates
- **Configuration**: ``EngineConfig`` with validated defaults
- **Exceptions**: the error taxonomy of the engine
- **Time**: unit normalization to absolute seconds

Example Usage:
    >>> from pyspp.core import *
    >>>
    >>> eph = OrbitalElements(sat=1, e=0.01, i0=0.95, M0=0.1, A=26560000.0,
    ...                       OMG0=1.0, omg=0.5, toe=100000.0)
    >>> eph.validate()
    >>> config = EngineConfig(rotation_model='sidereal')
"""

from .config import *
from .constants import *
from .data_structures import *
from .exceptions import *
from .time import *
