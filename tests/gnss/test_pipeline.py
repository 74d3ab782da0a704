#!/usr/bin/env python3
"""Test suite for the batch positioning pipeline"""

import math
import unittest
import numpy as np

from pyspp.core.config import EngineConfig
from pyspp.core.data_structures import OrbitalElements, SolveStatus
from pyspp.coordinate.eci_transforms import ecef2eci
from pyspp.coordinate.transforms import geodetic2ecef
from pyspp.gnss.pipeline import PositioningEngine, ProcessingResult, process
from pyspp.observation.pseudorange import ObservationStore
from pyspp.satellite.ephemeris import EphemerisStore
from pyspp.satellite.orbit import mean_motion
from pyspp.satellite.satellite_position import compute_satellite_state

EPOCHS = (100010.0, 100020.0, 100030.0, 100040.0)
TOE = 100000.0


def elements_through(sat, target_ecef, t, toe=TOE, inc=1.5):
    """Circular orbit element set passing through an ECEF point at time t"""
    eci = ecef2eci(target_ecef, t)
    A = float(np.linalg.norm(eci))
    d = eci / A
    u = math.asin(d[2] / math.sin(inc))
    v = np.array([math.cos(u), math.cos(inc) * math.sin(u), math.sin(inc) * math.sin(u)])
    OMG0 = math.atan2(d[1], d[0]) - math.atan2(v[1], v[0])
    M0 = u - mean_motion(A) * (t - toe)
    return OrbitalElements(sat=sat, e=0.0, i0=inc, M0=M0, A=A, OMG0=OMG0, omg=0.0, toe=toe)


def sky_target(rec, lat_deg, lon_deg, az_deg, el_deg, slant_range=20200e3):
    lat, lon, az, el = np.radians([lat_deg, lon_deg, az_deg, el_deg])
    east = np.array([-np.sin(lon), np.cos(lon), 0.0])
    north = np.array([-np.sin(lat) * np.cos(lon), -np.sin(lat) * np.sin(lon), np.cos(lat)])
    up = np.array([np.cos(lat) * np.cos(lon), np.cos(lat) * np.sin(lon), np.sin(lat)])
    los = np.cos(el) * np.sin(az) * east + np.cos(el) * np.cos(az) * north + np.sin(el) * up
    return rec + slant_range * los


def observe(eph_store, obs_store, rec, clk, epochs=EPOCHS):
    """Noiseless pseudoranges of every stored satellite from a static receiver"""
    for eph in eph_store:
        for t in epochs:
            state = compute_satellite_state(eph, t)
            obs_store.store_observation(eph.sat, t, np.linalg.norm(state.ecef - rec) + clk)


class TestScenario(unittest.TestCase):
    """Four satellites, one element set each, four epochs"""

    def setUp(self):
        self.eph_store = EphemerisStore()
        self.obs_store = ObservationStore()
        elements = [
            OrbitalElements(sat=1, e=0.01, i0=0.95, M0=0.1, A=26560000.0, OMG0=1.0, omg=0.5, toe=TOE),
            OrbitalElements(sat=2, e=0.005, i0=0.96, M0=1.7, A=26560000.0, OMG0=2.5, omg=0.2, toe=TOE),
            OrbitalElements(sat=3, e=0.012, i0=0.30, M0=-1.2, A=26560000.0, OMG0=4.0, omg=1.4, toe=TOE),
            OrbitalElements(sat=4, e=0.002, i0=0.94, M0=2.8, A=26560000.0, OMG0=5.5, omg=1.0, toe=TOE),
        ]
        for eph in elements:
            self.eph_store.store_ephemeris(eph.sat, eph)

        self.rec = geodetic2ecef(35.0, 135.0, 100.0)
        observe(self.eph_store, self.obs_store, self.rec, clk=3000.0)

    def test_one_estimate_per_epoch(self):
        result = PositioningEngine(self.eph_store, self.obs_store).run()

        self.assertEqual(result.epochs, EPOCHS)
        self.assertEqual(len(result.estimates), 4)
        self.assertEqual(tuple(est.time for est in result.estimates), EPOCHS)
        for est in result.estimates:
            self.assertTrue(np.all(np.isfinite(est.ecef)))
            self.assertGreater(np.linalg.norm(est.ecef), 0.0)
            self.assertTrue(all(np.isfinite(est.llh)))
            self.assertEqual(est.sats, (1, 2, 3, 4))

        self.assertEqual(result.stats.solved, 4)
        self.assertEqual(result.stats.unsolved, 0)
        self.assertFalse(result.stats.truncated)

    def test_satellite_tracks(self):
        result = process(self.eph_store, self.obs_store)
        self.assertEqual(sorted(result.satellite_tracks), [1, 2, 3, 4])
        for sat, track in result.satellite_tracks.items():
            self.assertEqual(tuple(s.time for s in track), EPOCHS)
            for state in track:
                self.assertAlmostEqual(np.linalg.norm(state.ecef), np.linalg.norm(state.eci), delta=1e-6)

    def test_read_only_outputs(self):
        result = process(self.eph_store, self.obs_store)
        self.assertIsInstance(result.estimates, tuple)
        with self.assertRaises(TypeError):
            result.satellite_tracks[5] = ()
        with self.assertRaises(TypeError):
            result.unsolved[1.0] = SolveStatus.OK
        with self.assertRaises(ValueError):
            result.estimates[0].ecef[0] = 0.0

    def test_summary_logging(self):
        with self.assertLogs('pyspp.gnss.pipeline', level='INFO') as logs:
            PositioningEngine(self.eph_store, self.obs_store).run()
        summary = [line for line in logs.output if 'pseudoranges' in line and 'PRN' in line]
        self.assertEqual(len(summary), 4)
        self.assertTrue(any('Solved 4 of 4 epochs' in line for line in logs.output))


class TestPositionRecovery(unittest.TestCase):
    """Receiver recovery from orbits placed over a known site"""

    def setUp(self):
        self.lat, self.lon, self.alt = 40.0, -105.0, 1600.0
        self.rec = geodetic2ecef(self.lat, self.lon, self.alt)
        self.clk = 12345.6

        sky = [(0.0, 80.0), (45.0, 30.0), (135.0, 45.0), (225.0, 35.0), (315.0, 50.0), (90.0, 20.0)]
        self.eph_store = EphemerisStore()
        self.obs_store = ObservationStore()
        for sat, (az, el) in zip((3, 8, 11, 17, 22, 30), sky):
            target = sky_target(self.rec, self.lat, self.lon, az, el)
            self.eph_store.store_ephemeris(sat, elements_through(sat, target, EPOCHS[0]))
        observe(self.eph_store, self.obs_store, self.rec, self.clk)

    def test_recovers_receiver(self):
        result = PositioningEngine(self.eph_store, self.obs_store).run()
        self.assertEqual(len(result), 4)
        for est in result:
            np.testing.assert_allclose(est.ecef, self.rec, atol=0.01)
            self.assertAlmostEqual(est.clock_bias, self.clk, delta=0.01)
            self.assertAlmostEqual(est.lat, self.lat, delta=1e-6)
            self.assertAlmostEqual(est.lon, self.lon, delta=1e-6)
            self.assertAlmostEqual(est.alt, self.alt, delta=0.01)
            self.assertEqual(est.ns, 6)
            self.assertEqual(est.iterations, 10)

    def test_sidereal_model(self):
        """Estimates are consistent whichever rotation model produced the tracks"""
        config = EngineConfig(rotation_model='sidereal')
        eph_store = EphemerisStore()
        obs_store = ObservationStore()
        for eph in self.eph_store:
            eph_store.store_ephemeris(eph.sat, eph)
        for t in EPOCHS:
            for eph in eph_store:
                state = compute_satellite_state(eph, t, config)
                obs_store.store_observation(eph.sat, t, np.linalg.norm(state.ecef - self.rec))

        result = PositioningEngine(eph_store, obs_store, config).run()
        self.assertEqual(len(result), 4)
        for est in result:
            np.testing.assert_allclose(est.ecef, self.rec, atol=0.01)

    def test_millisecond_epochs(self):
        obs_store = ObservationStore(time_unit='ms')
        for obs in self.obs_store:
            obs_store.store_observation(obs.sat, obs.time * 1000.0, obs.P)
        result = PositioningEngine(self.eph_store, obs_store).run()
        self.assertEqual(result.epochs, EPOCHS)
        np.testing.assert_allclose(result.estimates[-1].ecef, self.rec, atol=0.01)

    def test_bad_satellite_excluded(self):
        self.eph_store.store_ephemeris(9, OrbitalElements(sat=9, e=0.01, i0=0.95, M0=0.1, A=-1.0,
                                                          OMG0=1.0, omg=0.5, toe=TOE))
        for t in EPOCHS:
            self.obs_store.store_observation(9, t, 2.2e7)
            self.obs_store.store_observation(12, t, 2.2e7)

        with self.assertLogs('pyspp', level='WARNING'):
            result = PositioningEngine(self.eph_store, self.obs_store).run()

        self.assertEqual(len(result), 4)
        for est in result:
            self.assertNotIn(9, est.sats)
            self.assertNotIn(12, est.sats)
            np.testing.assert_allclose(est.ecef, self.rec, atol=0.01)
        self.assertEqual(result.stats.propagation_failures, 4)
        self.assertEqual(result.stats.missing_ephemeris, 4)
        self.assertNotIn(9, result.satellite_tracks)
        self.assertIn(9, result.pseudoranges)

    def test_unsolvable_epoch_continues(self):
        # Three satellites only at a later epoch
        for sat in (3, 8, 11):
            eph = self.eph_store.select_ephemeris(sat, 100050.0)
            state = compute_satellite_state(eph, 100050.0)
            self.obs_store.store_observation(sat, 100050.0, np.linalg.norm(state.ecef - self.rec))

        result = PositioningEngine(self.eph_store, self.obs_store).run()
        self.assertEqual(result.epochs, EPOCHS + (100050.0,))
        self.assertEqual(len(result.estimates), 4)
        self.assertEqual(dict(result.unsolved), {100050.0: SolveStatus.INSUFFICIENT_SATELLITES})
        self.assertEqual(result.stats.insufficient_satellites, 1)
        self.assertIsNone(result.estimate_at(100050.0))
        self.assertIsNotNone(result.estimate_at(100020.0))

    def test_epoch_cap(self):
        config = EngineConfig(max_epochs=2)
        result = PositioningEngine(self.eph_store, self.obs_store, config).run()
        self.assertEqual(result.epochs, EPOCHS[:2])
        self.assertEqual(result.stats.truncated_epochs, 2)
        self.assertTrue(result.stats.truncated)
        for track in result.satellite_tracks.values():
            self.assertEqual(tuple(s.time for s in track), EPOCHS[:2])


class TestEngineInput(unittest.TestCase):
    """Malformed inputs fail fast"""

    def test_missing_store(self):
        with self.assertRaises(TypeError):
            PositioningEngine(None, ObservationStore())
        with self.assertRaises(TypeError):
            PositioningEngine(EphemerisStore(), None)

    def test_wrong_types(self):
        with self.assertRaises(TypeError):
            PositioningEngine({}, ObservationStore())
        with self.assertRaises(TypeError):
            PositioningEngine(EphemerisStore(), [])
        with self.assertRaises(TypeError):
            PositioningEngine(EphemerisStore(), ObservationStore(), config={'max_epochs': 1})

    def test_empty_stores(self):
        result = PositioningEngine(EphemerisStore(), ObservationStore()).run()
        self.assertIsInstance(result, ProcessingResult)
        self.assertEqual(result.epochs, ())
        self.assertEqual(result.estimates, ())
        self.assertEqual(result.stats.epochs, 0)


if __name__ == '__main__':
    unittest.main()
