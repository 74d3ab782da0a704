#!/usr/bin/env python3
"""Single point positioning on a synthetic GPS scenario

Builds circular orbits that pass over a receiver site, generates noiseless
pseudoranges with a receiver clock bias, solves every epoch and writes the
tracks as whitespace-delimited files.
"""

import math
import sys
from pathlib import Path

import numpy as np

from pyspp import (EphemerisStore, ObservationStore, OrbitalElements,
                   PositioningEngine, compute_satellite_state, ecef2eci,
                   geodetic2ecef, mean_motion, setup_logger)
from pyspp.io import (write_pseudoranges, write_receiver_track_ecef,
                      write_receiver_track_geo, write_satellite_tracks)

# Receiver site and clock bias
SITE = (40.0, -105.0, 1600.0)
CLOCK_BIAS = 12345.6

TOE = 100000.0
EPOCHS = np.arange(100010.0, 100610.0, 10.0)

# PRN -> (azimuth, elevation) in degrees at the first epoch
SKY = {
    3: (0.0, 80.0),
    8: (45.0, 30.0),
    11: (135.0, 45.0),
    17: (225.0, 35.0),
    22: (315.0, 50.0),
    30: (90.0, 20.0),
}


def sky_target(rec, lat_deg, lon_deg, az_deg, el_deg, slant_range=20200e3):
    lat, lon, az, el = np.radians([lat_deg, lon_deg, az_deg, el_deg])
    east = np.array([-np.sin(lon), np.cos(lon), 0.0])
    north = np.array([-np.sin(lat) * np.cos(lon), -np.sin(lat) * np.sin(lon), np.cos(lat)])
    up = np.array([np.cos(lat) * np.cos(lon), np.cos(lat) * np.sin(lon), np.sin(lat)])
    return rec + slant_range * (np.cos(el) * np.sin(az) * east
                                + np.cos(el) * np.cos(az) * north
                                + np.sin(el) * up)


def elements_through(sat, target_ecef, t, inc=1.5):
    """Circular orbit passing through an ECEF point at time t"""
    eci = ecef2eci(target_ecef, t)
    A = float(np.linalg.norm(eci))
    d = eci / A
    u = math.asin(d[2] / math.sin(inc))
    OMG0 = math.atan2(d[1], d[0]) - math.atan2(math.cos(inc) * math.sin(u), math.cos(u))
    M0 = u - mean_motion(A) * (t - TOE)
    return OrbitalElements(sat=sat, e=0.0, i0=inc, M0=M0, A=A, OMG0=OMG0, omg=0.0, toe=TOE)


def main():
    out_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else Path('spp_output')
    out_dir.mkdir(parents=True, exist_ok=True)

    setup_logger(level='INFO')

    rec = geodetic2ecef(*SITE)
    eph_store = EphemerisStore()
    obs_store = ObservationStore()

    for sat, (az, el) in SKY.items():
        eph = elements_through(sat, sky_target(rec, SITE[0], SITE[1], az, el), EPOCHS[0])
        eph_store.store_ephemeris(sat, eph)

    for t in EPOCHS:
        for eph in eph_store:
            state = compute_satellite_state(eph, float(t))
            obs_store.store_observation(eph.sat, float(t),
                                        np.linalg.norm(state.ecef - rec) + CLOCK_BIAS)

    result = PositioningEngine(eph_store, obs_store).run()

    print(f"\nSolved {result.stats.solved} of {result.stats.epochs} epochs")
    for est in result.estimates[:5]:
        err = np.linalg.norm(est.ecef - rec)
        print(f"  t={est.time:.1f}  lat={est.lat:.8f}  lon={est.lon:.8f}  "
              f"alt={est.alt:.3f} m  clk={est.clock_bias:.3f} m  err={err:.2e} m")

    write_receiver_track_ecef(result, out_dir / 'receiver_track.txt')
    write_receiver_track_geo(result, out_dir / 'receiver_track_geo.txt')
    write_satellite_tracks(result, out_dir / 'sat_orbits.txt', scale=1e-3)
    write_pseudoranges(result, out_dir / 'pseudoranges.txt', scale=1e-3)
    print(f"Tracks written to {out_dir}/")


if __name__ == '__main__':
    main()
