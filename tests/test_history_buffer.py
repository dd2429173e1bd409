import unittest

from swara_tuner.detection.history import HistoryBuffer


class TestHistoryBuffer(unittest.TestCase):
    def setUp(self):
        self.history = HistoryBuffer()

    def test_keeps_most_recent_hundred(self):
        for i in range(150):
            self.history.push(float(i + 1))
        snapshot = self.history.snapshot()
        self.assertEqual(len(snapshot), 100)
        self.assertEqual(snapshot, tuple(float(i + 1) for i in range(50, 150)))

    def test_length_never_exceeds_capacity(self):
        for i in range(250):
            self.history.push(None if i % 3 else 440.0)
            self.assertLessEqual(len(self.history), 100)

    def test_silence_decays_previous_value(self):
        self.history.push(440.0)
        self.history.push(None)
        self.history.push(None)
        snapshot = self.history.snapshot()
        self.assertAlmostEqual(snapshot[1], 440.0 * 0.98)
        self.assertAlmostEqual(snapshot[2], 440.0 * 0.98 * 0.98)

    def test_sustained_silence_reaches_zero(self):
        self.history.push(100.0)
        for _ in range(300):
            self.history.push(None)
        self.assertEqual(self.history.latest, 0.0)

    def test_silence_on_empty_buffer(self):
        self.assertEqual(self.history.push(None), 0.0)
        self.assertEqual(self.history.snapshot(), (0.0,))

    def test_snapshot_is_a_copy(self):
        self.history.push(220.0)
        snapshot = self.history.snapshot()
        self.history.push(330.0)
        self.assertEqual(snapshot, (220.0,))

    def test_custom_capacity_and_clear(self):
        history = HistoryBuffer(capacity=3)
        for value in [1.0, 2.0, 3.0, 4.0]:
            history.push(value)
        self.assertEqual(history.capacity, 3)
        self.assertEqual(history.snapshot(), (2.0, 3.0, 4.0))
        history.clear()
        self.assertEqual(len(history), 0)


if __name__ == "__main__":
    unittest.main()
