import unittest

from swara_tuner.note_recorder import NoteRecorder
from swara_tuner.note_types import UNKNOWN
from swara_tuner.note_utils import classify_frequency

A4 = classify_frequency(440.0)
B4 = classify_frequency(493.88)
C5 = classify_frequency(523.25)


def summary(recorder):
    return [(e.classification.note_name, round(e.timestamp, 3)) for e in recorder.events]


class TestNoteRecorder(unittest.TestCase):
    def setUp(self):
        self.recorder = NoteRecorder()
        self.recorder.start()

    def feed(self, sequence):
        for note, ms in sequence:
            self.recorder.observe(note, ms / 1000.0)

    def test_debounced_sequence(self):
        self.feed([(A4, 0), (A4, 50), (A4, 150), (B4, 210), (B4, 220), (A4, 500)])
        self.assertEqual(summary(self.recorder), [("A", 0.0), ("B", 0.21), ("A", 0.5)])

    def test_change_within_debounce_interval_is_dropped(self):
        self.feed([(A4, 0), (B4, 100), (B4, 199), (B4, 260)])
        self.assertEqual(summary(self.recorder), [("A", 0.0), ("B", 0.26)])

    def test_exactly_debounce_interval_is_dropped(self):
        self.feed([(A4, 1000), (B4, 1200)])
        self.assertEqual(summary(self.recorder), [("A", 1.0)])

    def test_unknown_is_ignored_and_keeps_timer(self):
        self.feed([(A4, 0), (UNKNOWN, 100), (B4, 150), (B4, 250)])
        self.assertEqual(summary(self.recorder), [("A", 0.0), ("B", 0.25)])

    def test_same_note_after_silence_is_not_repeated(self):
        self.feed([(A4, 0), (UNKNOWN, 300), (A4, 600)])
        self.assertEqual(summary(self.recorder), [("A", 0.0)])

    def test_observe_returns_new_event(self):
        event = self.recorder.observe(A4, 0.0)
        self.assertEqual(event.classification, A4)
        self.assertIsNone(self.recorder.observe(A4, 1.0))

    def test_idle_recorder_ignores_notes(self):
        recorder = NoteRecorder()
        self.assertFalse(recorder.is_armed)
        self.assertIsNone(recorder.observe(A4, 0.0))
        self.assertEqual(recorder.events, ())

    def test_stop_keeps_log(self):
        self.feed([(A4, 0), (B4, 300)])
        self.recorder.stop()
        self.assertFalse(self.recorder.is_armed)
        self.feed([(C5, 900)])
        self.assertEqual(summary(self.recorder), [("A", 0.0), ("B", 0.3)])

    def test_stop_is_idempotent(self):
        self.recorder.stop()
        self.recorder.stop()
        self.assertFalse(self.recorder.is_armed)

    def test_restart_clears_log_and_trackers(self):
        self.feed([(A4, 0), (B4, 300)])
        self.recorder.stop()
        self.recorder.start()
        self.assertEqual(self.recorder.events, ())
        # Same note and within the old debounce window, accepted after reset
        self.feed([(B4, 350)])
        self.assertEqual(summary(self.recorder), [("B", 0.35)])

    def test_timestamps_strictly_increasing(self):
        self.feed([(A4, 0), (B4, 250), (C5, 100), (A4, 600), (C5, 900)])
        times = [e.timestamp for e in self.recorder.events]
        self.assertEqual(times, sorted(set(times)))

    def test_export(self):
        self.feed([(A4, 0), (B4, 300)])
        self.assertEqual(
            self.recorder.export(),
            [
                {"note_name": "A", "octave": 4, "swara": "Dha", "solfege": "La", "timestamp": 0.0},
                {"note_name": "B", "octave": 4, "swara": "Ni", "solfege": "Ti", "timestamp": 0.3},
            ],
        )


if __name__ == "__main__":
    unittest.main()
