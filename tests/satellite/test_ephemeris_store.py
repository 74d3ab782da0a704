#!/usr/bin/env python3
"""Test suite for ephemeris history storage"""

import unittest
from pyspp.core.data_structures import OrbitalElements
from pyspp.core.exceptions import InvalidElementsError, MissingEphemerisError, SatelliteOutOfRangeError
from pyspp.satellite.ephemeris import EphemerisStore


def make_elements(sat=1, toe=100000.0, **kwargs):
    params = dict(e=0.01, i0=0.95, M0=0.1, A=26560000.0, OMG0=1.0, omg=0.5)
    params.update(kwargs)
    return OrbitalElements(sat=sat, toe=toe, **params)


class TestEphemerisStore(unittest.TestCase):
    """Test EphemerisStore insertion and selection"""

    def setUp(self):
        self.store = EphemerisStore()

    def test_store_and_select(self):
        self.assertTrue(self.store.store_ephemeris(1, make_elements()))
        eph = self.store.select_ephemeris(1, 100010.0)
        self.assertIsNotNone(eph)
        self.assertEqual(eph.toe, 100000.0)
        self.assertIn(1, self.store)
        self.assertEqual(len(self.store), 1)

    def test_out_of_range_prn(self):
        for sat in (0, 33, -5):
            with self.assertRaises(SatelliteOutOfRangeError):
                self.store.store_ephemeris(sat, make_elements(sat=1))
        with self.assertRaises(ValueError):
            self.store.store_ephemeris(40, make_elements(sat=1))
        self.assertEqual(len(self.store), 0)

    def test_sat_mismatch(self):
        with self.assertRaises(ValueError):
            self.store.store_ephemeris(2, make_elements(sat=1))

    def test_wrong_type(self):
        with self.assertRaises(TypeError):
            self.store.store_ephemeris(1, {'sat': 1})

    def test_non_physical_elements_are_stored(self):
        """Physical validity is checked at propagation time"""
        self.assertTrue(self.store.store_ephemeris(1, make_elements(A=-1.0)))

    def test_greatest_toe_not_after_time(self):
        for toe in (107200.0, 100000.0, 114400.0):
            self.store.store_ephemeris(3, make_elements(sat=3, toe=toe))

        self.assertEqual([e.toe for e in self.store.history(3)], [100000.0, 107200.0, 114400.0])
        self.assertEqual(self.store.select_ephemeris(3, 100000.0).toe, 100000.0)
        self.assertEqual(self.store.select_ephemeris(3, 107199.0).toe, 100000.0)
        self.assertEqual(self.store.select_ephemeris(3, 107200.0).toe, 107200.0)
        self.assertEqual(self.store.select_ephemeris(3, 1e9).toe, 114400.0)

    def test_no_ephemeris_before_time(self):
        self.store.store_ephemeris(3, make_elements(sat=3, toe=100000.0))
        self.assertIsNone(self.store.select_ephemeris(3, 99999.0))
        self.assertIsNone(self.store.select_ephemeris(4, 100010.0))
        with self.assertRaises(MissingEphemerisError):
            self.store.require_ephemeris(3, 99999.0)
        with self.assertRaises(LookupError):
            self.store.require_ephemeris(4, 100010.0)

    def test_same_toe_latest_wins(self):
        first = make_elements(sat=5, M0=0.1)
        second = make_elements(sat=5, M0=0.2)
        self.store.store_ephemeris(5, first)
        self.store.store_ephemeris(5, second)
        self.assertEqual(self.store.history(5), (first, second))
        self.assertEqual(self.store.select_ephemeris(5, 100010.0), second)

    def test_duplicate_ignored(self):
        eph = make_elements(sat=6)
        self.assertTrue(self.store.store_ephemeris(6, eph))
        self.assertFalse(self.store.store_ephemeris(6, make_elements(sat=6)))
        self.assertEqual(len(self.store), 1)

    def test_capacity(self):
        store = EphemerisStore(max_records_per_sat=2)
        self.assertTrue(store.store_ephemeris(7, make_elements(sat=7, toe=0.0)))
        self.assertTrue(store.store_ephemeris(7, make_elements(sat=7, toe=7200.0)))
        self.assertFalse(store.store_ephemeris(7, make_elements(sat=7, toe=14400.0)))
        self.assertEqual(len(store.history(7)), 2)
        self.assertEqual(store.dropped[7], 1)
        self.assertEqual(store.dropped_count, 1)

    def test_milliseconds(self):
        store = EphemerisStore(time_unit='ms')
        store.store_ephemeris(1, make_elements(toe=100000000.0))
        self.assertAlmostEqual(store.history(1)[0].toe, 100000.0)
        self.assertIsNotNone(store.select_ephemeris(1, 100000.0))

    def test_unknown_unit(self):
        with self.assertRaises(ValueError):
            EphemerisStore(time_unit='min')

    def test_non_finite_toe(self):
        """A set without a usable toe is rejected at insertion"""
        for toe in (float('nan'), float('inf')):
            with self.assertRaises(InvalidElementsError):
                self.store.store_ephemeris(1, make_elements(toe=toe))
        self.assertEqual(len(self.store), 0)
        self.assertNotIn(1, self.store)

    def test_iteration_order(self):
        self.store.store_ephemeris(9, make_elements(sat=9))
        self.store.store_ephemeris(2, make_elements(sat=2))
        self.assertEqual(self.store.prns(), [2, 9])
        self.assertEqual([e.sat for e in self.store], [2, 9])


if __name__ == '__main__':
    unittest.main()
