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

"""Whitespace-delimited track export for plotting tools"""

import logging
from pathlib import Path
from typing import Union

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

RECEIVER_COLUMNS = ['time', 'x', 'y', 'z', 'clock_bias', 'lat', 'lon', 'alt', 'ns']
SATELLITE_COLUMNS = ['prn', 'time', 'x', 'y', 'z']
PSEUDORANGE_COLUMNS = ['prn', 'time', 'P']


def receiver_track_frame(result) -> pd.DataFrame:
    """
    Receiver estimates of a run as a DataFrame

    Parameters
    ----------
    result : ProcessingResult
        Output of PositioningEngine.run

    Returns
    -------
    pd.DataFrame
        Columns: time, x, y, z, clock_bias, lat, lon, alt, ns
    """
    rows = [
        (est.time, est.ecef[0], est.ecef[1], est.ecef[2], est.clock_bias,
         est.lat, est.lon, est.alt, est.ns)
        for est in result.estimates
    ]
    df = pd.DataFrame(rows, columns=RECEIVER_COLUMNS)
    return df.astype({col: float for col in RECEIVER_COLUMNS[:-1]} | {'ns': int})


def satellite_track_frame(result, frame: str = 'ecef') -> pd.DataFrame:
    """
    Satellite positions of a run as a DataFrame, ordered by PRN then epoch

    Parameters
    ----------
    result : ProcessingResult
        Output of PositioningEngine.run
    frame : str
        'ecef' or 'eci'

    Returns
    -------
    pd.DataFrame
        Columns: prn, time, x, y, z
    """
    if frame not in ('ecef', 'eci'):
        raise ValueError(f"Unknown frame '{frame}', expected 'ecef' or 'eci'")

    rows = []
    for sat in sorted(result.satellite_tracks):
        for state in result.satellite_tracks[sat]:
            pos = getattr(state, frame)
            rows.append((sat, state.time, pos[0], pos[1], pos[2]))
    df = pd.DataFrame(rows, columns=SATELLITE_COLUMNS)
    return df.astype({'prn': int, 'time': float, 'x': float, 'y': float, 'z': float})


def pseudorange_frame(result) -> pd.DataFrame:
    """Pseudorange time series of a run, columns: prn, time, P"""
    rows = [
        (sat, obs.time, obs.P)
        for sat in sorted(result.pseudoranges)
        for obs in result.pseudoranges[sat]
    ]
    df = pd.DataFrame(rows, columns=PSEUDORANGE_COLUMNS)
    return df.astype({'prn': int, 'time': float, 'P': float})


def _write_frame(df: pd.DataFrame, path: Union[str, Path], float_format: str, name: str) -> int:
    path = Path(path)
    df.to_csv(path, sep=' ', header=False, index=False, float_format=float_format,
              lineterminator='\n')
    if len(df) == 0:
        logger.warning(f"{name}: wrote 0 lines to {path}")
    else:
        logger.info(f"{name}: wrote {len(df)} lines to {path}")
    return len(df)


def write_receiver_track_ecef(result, path: Union[str, Path], scale: float = 1.0) -> int:
    """
    Write the receiver ECEF track, one ``x y z`` line per solved epoch

    Parameters
    ----------
    result : ProcessingResult
        Output of PositioningEngine.run
    path : str or Path
        Output file
    scale : float
        Multiplier for the coordinates, e.g. 1e-3 for kilometers

    Returns
    -------
    int
        Lines written
    """
    df = receiver_track_frame(result)[['x', 'y', 'z']] * scale
    df = df[np.isfinite(df.to_numpy()).all(axis=1)]
    return _write_frame(df, path, '%.8f', 'write_receiver_track_ecef')


def write_receiver_track_geo(result, path: Union[str, Path], with_altitude: bool = False) -> int:
    """
    Write the receiver geodetic track, one ``lat lon`` line per solved epoch

    Parameters
    ----------
    result : ProcessingResult
        Output of PositioningEngine.run
    path : str or Path
        Output file
    with_altitude : bool
        Append the ellipsoidal height (m) as a third column

    Returns
    -------
    int
        Lines written
    """
    columns = ['lat', 'lon', 'alt'] if with_altitude else ['lat', 'lon']
    df = receiver_track_frame(result)[columns]
    df = df[np.isfinite(df.to_numpy()).all(axis=1)]
    return _write_frame(df, path, '%.8f', 'write_receiver_track_geo')


def write_satellite_tracks(result, path: Union[str, Path], scale: float = 1.0,
                           frame: str = 'ecef') -> int:
    """
    Write satellite tracks as ``prn x y z`` lines

    Each satellite is one block; blocks are separated by two blank lines so
    gnuplot can address them with ``index``.

    Parameters
    ----------
    result : ProcessingResult
        Output of PositioningEngine.run
    path : str or Path
        Output file
    scale : float
        Multiplier for the coordinates
    frame : str
        'ecef' or 'eci'

    Returns
    -------
    int
        Lines written, block separators excluded
    """
    path = Path(path)
    df = satellite_track_frame(result, frame)
    df[['x', 'y', 'z']] = df[['x', 'y', 'z']] * scale

    lines = 0
    with open(path, 'w', newline='') as f:
        for _, block in df.groupby('prn', sort=True):
            block[['prn', 'x', 'y', 'z']].to_csv(f, sep=' ', header=False, index=False,
                                                 float_format='%.6f', lineterminator='\n')
            f.write('\n\n')
            lines += len(block)

    if lines == 0:
        logger.warning(f"write_satellite_tracks: wrote 0 lines to {path}")
    else:
        logger.info(f"write_satellite_tracks: wrote {lines} lines "
                    f"for {df['prn'].nunique()} satellites to {path}")
    return lines


def write_pseudoranges(result, path: Union[str, Path], scale: float = 1.0) -> int:
    """
    Write the pseudorange time series as ``prn time P`` lines

    Parameters
    ----------
    result : ProcessingResult
        Output of PositioningEngine.run
    path : str or Path
        Output file
    scale : float
        Multiplier for the pseudoranges, e.g. 1e-3 for kilometers

    Returns
    -------
    int
        Lines written
    """
    df = pseudorange_frame(result)
    df['P'] = df['P'] * scale
    return _write_frame(df, path, '%.6f', 'write_pseudoranges')
