#!/usr/bin/env python3
"""Test suite for pseudorange observation storage"""

import unittest
from pyspp.core.exceptions import SatelliteOutOfRangeError
from pyspp.observation.pseudorange import ObservationStore


class TestObservationStore(unittest.TestCase):
    """Test ObservationStore"""

    def setUp(self):
        self.store = ObservationStore()

    def test_append_in_arrival_order(self):
        self.store.store_observation(4, 100020.0, 2.2e7)
        self.store.store_observation(4, 100010.0, 2.1e7)
        self.store.store_observation(4, 100010.0, 2.3e7)
        obs = self.store.observations(4)
        self.assertEqual([o.time for o in obs], [100020.0, 100010.0, 100010.0])
        self.assertEqual(self.store.epochs(4), [100020.0, 100010.0, 100010.0])
        self.assertEqual(obs[1].P, 2.1e7)
        self.assertEqual(len(self.store), 3)

    def test_out_of_range_prn(self):
        for sat in (0, 33, 3.0):
            with self.assertRaises(SatelliteOutOfRangeError):
                self.store.store_observation(sat, 1.0, 2.0e7)
        self.assertEqual(len(self.store), 0)

    def test_read_only_history(self):
        self.store.store_observation(1, 10.0, 2.0e7)
        self.assertIsInstance(self.store.observations(1), tuple)
        self.assertEqual(self.store.observations(2), ())

    def test_capacity(self):
        store = ObservationStore(max_records_per_sat=1)
        self.assertTrue(store.store_observation(1, 10.0, 2.0e7))
        self.assertFalse(store.store_observation(1, 20.0, 2.0e7))
        self.assertTrue(store.store_observation(2, 20.0, 2.0e7))
        self.assertEqual(store.dropped_count, 1)
        self.assertEqual(len(store), 2)

    def test_milliseconds(self):
        store = ObservationStore(time_unit='ms')
        store.store_observation(1, 100010000.0, 2.0e7)
        self.assertAlmostEqual(store.epochs(1)[0], 100010.0)

    def test_non_finite_epoch(self):
        with self.assertRaises(ValueError):
            self.store.store_observation(1, float('inf'), 2.0e7)

    def test_zero_epoch(self):
        self.assertTrue(self.store.store_observation(1, 0.0, 2.0e7))
        self.assertEqual(self.store.epochs(1), [0.0])

    def test_prns_and_iteration(self):
        self.store.store_observation(12, 1.0, 2.0e7)
        self.store.store_observation(3, 1.0, 2.0e7)
        self.assertEqual(self.store.prns(), [3, 12])
        self.assertEqual([o.sat for o in self.store], [3, 12])
        self.assertIn(3, self.store)
        self.assertNotIn(4, self.store)


if __name__ == '__main__':
    unittest.main()
