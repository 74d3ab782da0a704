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

"""Engine configuration"""

import math
from dataclasses import dataclass, fields, replace
from typing import Optional

from .constants import (
    KEPLER_MAXITR, KEPLER_TOL, MAX_EPOCHS, MAX_RECORDS_PER_SAT,
    MAX_SATS_PER_EPOCH, MAXITR, MIN_SATS, MU, ROT_SIDEREAL, ROT_SOLAR,
    SINGULAR_EPS,
)
from .exceptions import ConfigurationError


@dataclass(frozen=True)
class EngineConfig:
    """Tunable parameters of the positioning engine.

    Attributes
    ----------
    max_epochs : int
        Cap on distinct epochs processed per run; later epochs are dropped
    max_sats_per_epoch : int
        Cap on satellites gathered per epoch; highest PRNs are dropped
    max_records_per_sat : int
        Capacity of each per-satellite history in the stores
    kepler_max_iter : int
        Newton iteration cap for Kepler's equation
    kepler_tol : float
        Newton correction magnitude for early exit (rad)
    solver_max_iter : int
        Gauss-Newton iteration bound
    singular_threshold : float
        Relative pivot size and reciprocal condition number at or below
        which the normal matrix is singular
    convergence_threshold : float or None
        Early exit when the position correction norm (m) falls below this;
        None runs the full iteration bound
    min_satellites : int
        Minimum satellites for a solve (at least 4)
    rotation_model : str
        'solar' (fraction of a solar day) or 'sidereal' (earth rotation rate)
    mu : float
        Gravitational parameter for mean motion (m^3/s^2)
    """
    max_epochs: int = MAX_EPOCHS
    max_sats_per_epoch: int = MAX_SATS_PER_EPOCH
    max_records_per_sat: int = MAX_RECORDS_PER_SAT
    kepler_max_iter: int = KEPLER_MAXITR
    kepler_tol: float = KEPLER_TOL
    solver_max_iter: int = MAXITR
    singular_threshold: float = SINGULAR_EPS
    convergence_threshold: Optional[float] = None
    min_satellites: int = MIN_SATS
    rotation_model: str = ROT_SOLAR
    mu: float = MU

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Raise ConfigurationError on an invalid parameter"""
        for name in ('max_epochs', 'max_sats_per_epoch', 'max_records_per_sat',
                     'kepler_max_iter', 'solver_max_iter'):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                raise ConfigurationError(f"{name} must be a positive integer, got {value!r}")

        if self.min_satellites < MIN_SATS:
            raise ConfigurationError(
                f"min_satellites must be at least {MIN_SATS}, got {self.min_satellites}")

        for name in ('kepler_tol', 'singular_threshold', 'mu'):
            value = getattr(self, name)
            if not (math.isfinite(value) and value > 0.0):
                raise ConfigurationError(f"{name} must be positive and finite, got {value!r}")

        if not self.singular_threshold < 1.0:
            raise ConfigurationError(
                f"singular_threshold must be below 1, got {self.singular_threshold!r}")

        if self.convergence_threshold is not None and not self.convergence_threshold > 0.0:
            raise ConfigurationError(
                f"convergence_threshold must be positive or None, got {self.convergence_threshold!r}")

        if self.rotation_model not in (ROT_SOLAR, ROT_SIDEREAL):
            raise ConfigurationError(
                f"rotation_model must be '{ROT_SOLAR}' or '{ROT_SIDEREAL}', got {self.rotation_model!r}")

    @classmethod
    def from_dict(cls, config: dict) -> 'EngineConfig':
        """Build a configuration from a dictionary

        Example config:
        {
            'max_epochs': 5000,
            'rotation_model': 'sidereal',
            'convergence_threshold': 1e-4
        }
        """
        known = {f.name for f in fields(cls)}
        unknown = set(config) - known
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {sorted(unknown)}")
        return cls(**config)

    def updated(self, **changes) -> 'EngineConfig':
        """Copy of this configuration with some fields changed"""
        return replace(self, **changes)


DEFAULT_CONFIG = EngineConfig()
