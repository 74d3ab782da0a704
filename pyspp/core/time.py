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

"""Time unit normalization

All times inside the engine are absolute seconds. Records arriving in other
units are converted once, at insertion into a store.
"""

import math

from .constants import WEEK_SECONDS

# Units per second
TIME_UNITS = {
    's': 1.0,
    'ms': 1000.0,
}


def to_seconds(value: float, unit: str = 's') -> float:
    """
    Convert a time value to seconds

    Parameters:
    -----------
    value : float
        Time value in the given unit
    unit : str
        's' (seconds) or 'ms' (milliseconds)

    Returns:
    --------
    float
        Time in seconds
    """
    try:
        per_second = TIME_UNITS[unit]
    except KeyError:
        raise ValueError(f"Unknown time unit '{unit}', expected one of {sorted(TIME_UNITS)}") from None

    seconds = float(value) / per_second
    if not math.isfinite(seconds):
        raise ValueError(f"Time value must be finite, got {value!r}")
    return seconds


def gps_seconds(week: int, tow: float) -> float:
    """Absolute GPS seconds from week number and time of week"""
    if week < 0:
        raise ValueError(f"GPS week must be non-negative, got {week}")
    if not 0.0 <= tow < WEEK_SECONDS:
        raise ValueError(f"Time of week must be in [0, {WEEK_SECONDS}), got {tow}")
    return week * WEEK_SECONDS + tow


def split_gps_seconds(seconds: float) -> tuple[int, float]:
    """Split absolute GPS seconds into (week, time of week)"""
    week = int(math.floor(seconds / WEEK_SECONDS))
    return week, seconds - week * WEEK_SECONDS
