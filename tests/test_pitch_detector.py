import unittest

import numpy as np
import pytest

from swara_tuner.audio.pitch_detector import PitchDetector
from swara_tuner.core.errors import MalformedFrameError
from swara_tuner.note_types import SampleFrame

from synth import SAMPLE_RATE, sine_frame, silent_frame


@pytest.mark.parametrize(
    "frequency", [82.41, 110.0, 196.0, 261.63, 440.0, 880.0, 1318.51, 2000.0]
)
def test_sine_frequency_within_one_percent(frequency):
    detector = PitchDetector()
    estimate = detector.detect(sine_frame(frequency))
    assert estimate is not None
    assert estimate == pytest.approx(frequency, rel=0.01)


@pytest.mark.parametrize("amplitude", [0.05, 0.2, 0.9])
def test_a4_detected_across_levels(amplitude):
    estimate = PitchDetector().detect(sine_frame(440.0, amplitude=amplitude))
    assert estimate == pytest.approx(440.0, rel=0.01)


class TestPitchDetector(unittest.TestCase):
    def setUp(self):
        self.detector = PitchDetector()

    def test_all_zero_frame_is_silent(self):
        self.assertIsNone(self.detector.detect(silent_frame()))

    def test_signal_below_rms_floor_is_silent(self):
        # amplitude 0.01 gives an RMS of about 0.007
        self.assertIsNone(self.detector.detect(sine_frame(440.0, amplitude=0.01)))

    def test_unpitched_noise_is_silent(self):
        rng = np.random.default_rng(1234)
        frame = SampleFrame.from_samples(rng.uniform(-1.0, 1.0, 2048), SAMPLE_RATE)
        self.assertIsNone(self.detector.detect(frame))

    def test_uses_frame_sample_rate(self):
        estimate = self.detector.detect(sine_frame(440.0, sample_rate=48000))
        self.assertAlmostEqual(estimate, 440.0, delta=4.4)

    def test_wrong_length_is_rejected(self):
        with self.assertRaises(MalformedFrameError):
            self.detector.detect(sine_frame(440.0, size=1024))

    def test_non_finite_samples_are_rejected(self):
        samples = np.array(sine_frame(440.0).samples)
        samples[100] = np.nan
        with self.assertRaises(MalformedFrameError):
            self.detector.detect(SampleFrame.from_samples(samples, SAMPLE_RATE))

        samples[100] = np.inf
        with self.assertRaises(MalformedFrameError):
            self.detector.detect(SampleFrame.from_samples(samples, SAMPLE_RATE))

    def test_malformed_frame_is_a_value_error(self):
        with self.assertRaises(ValueError):
            self.detector.detect(sine_frame(440.0, size=4096))

    def test_frame_size_must_be_power_of_two(self):
        with self.assertRaises(ValueError):
            PitchDetector(frame_size=2000)

    def test_smaller_frame_size(self):
        detector = PitchDetector(frame_size=1024)
        estimate = detector.detect(sine_frame(880.0, size=1024))
        self.assertAlmostEqual(estimate, 880.0, delta=8.8)

    def test_frames_are_read_only(self):
        frame = sine_frame(440.0)
        with self.assertRaises(ValueError):
            frame.samples[0] = 1.0


if __name__ == "__main__":
    unittest.main()
