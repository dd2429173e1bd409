import json

import numpy as np
import pytest
import soundfile as sf

from swara_tuner.audio.file_source import WavFileSource
from swara_tuner.audio.tuner_service import Tuner
from swara_tuner.cli.main import build_parser
from swara_tuner.cli.tuner_cli import run_analyze
from swara_tuner.core.config import ConfigManager
from swara_tuner.core.errors import DeviceUnavailableError
from swara_tuner.core.factory import ComponentFactory

from synth import FRAME_SIZE, SAMPLE_RATE, sine_samples


@pytest.fixture
def melody_wav(tmp_path):
    """A4 for ten frames, a short rest, then B4 for ten frames."""
    a4 = sine_samples(440.0, size=FRAME_SIZE * 10)
    rest = np.zeros(FRAME_SIZE * 6)
    b4 = sine_samples(493.88, size=FRAME_SIZE * 10)
    path = tmp_path / "melody.wav"
    sf.write(str(path), np.concatenate((a4, rest, b4)), SAMPLE_RATE, subtype="FLOAT")
    return path


def test_reads_consecutive_frames(melody_wav):
    source = WavFileSource(str(melody_wav))
    source.open()
    try:
        assert source.sample_rate == SAMPLE_RATE
        frames = []
        while True:
            frame = source.read_frame()
            if frame is None:
                break
            frames.append(frame)
    finally:
        source.close()

    assert len(frames) == 26
    assert all(len(f) == FRAME_SIZE for f in frames)
    assert source.exhausted
    assert not source.is_open


def test_last_frame_is_zero_padded(tmp_path):
    path = tmp_path / "short.wav"
    sf.write(str(path), sine_samples(440.0, size=FRAME_SIZE + 100), SAMPLE_RATE, subtype="FLOAT")
    source = WavFileSource(str(path))
    source.open()
    source.read_frame()
    last = source.read_frame()
    source.close()
    assert len(last) == FRAME_SIZE
    assert np.all(last.samples[100:] == 0.0)


def test_loop_restarts_file(tmp_path):
    path = tmp_path / "one.wav"
    sf.write(str(path), sine_samples(440.0, size=FRAME_SIZE), SAMPLE_RATE, subtype="FLOAT")
    source = WavFileSource(str(path), loop=True)
    source.open()
    for _ in range(5):
        assert source.read_frame() is not None
    assert not source.exhausted
    source.close()


def test_gain_scales_samples(tmp_path):
    path = tmp_path / "quiet.wav"
    sf.write(str(path), sine_samples(440.0, amplitude=0.1, size=FRAME_SIZE), SAMPLE_RATE, subtype="FLOAT")
    source = WavFileSource(str(path), gain=4.0)
    source.open()
    frame = source.read_frame()
    source.close()
    assert np.max(np.abs(frame.samples)) == pytest.approx(0.4, rel=0.01)


def test_missing_file_is_unavailable(tmp_path):
    tuner = Tuner()
    source = WavFileSource(str(tmp_path / "missing.wav"))
    with pytest.raises(DeviceUnavailableError):
        tuner.start(source)
    assert tuner.session is None
    assert not source.is_open


def test_read_before_open_is_unavailable(melody_wav):
    with pytest.raises(DeviceUnavailableError):
        WavFileSource(str(melody_wav)).read_frame()


def test_tuner_over_file(melody_wav):
    tuner = Tuner()
    tuner.start_recording()
    source = WavFileSource(str(melody_wav))
    with tuner.start(source) as session:
        tick = 0
        while not source.exhausted:
            session.tick(now=tick * FRAME_SIZE / SAMPLE_RATE)
            tick += 1
    tuner.stop_recording()

    names = [str(e.classification) for e in tuner.recorded_events()]
    assert names == ["A4", "B4"]


def test_analyze_command_exports_events(melody_wav, tmp_path, capsys):
    factory = ComponentFactory(ConfigManager(str(tmp_path / "config")))
    export_path = tmp_path / "notes.json"
    args = build_parser().parse_args(
        ["analyze", str(melody_wav), "--export", str(export_path), "--target", "auto"]
    )

    assert run_analyze(args, factory=factory) == 0

    with open(export_path) as f:
        events = json.load(f)
    assert [(e["note_name"], e["swara"], e["solfege"]) for e in events] == [
        ("A", "Dha", "La"),
        ("B", "Ni", "Ti"),
    ]
    assert "in-tune" in capsys.readouterr().out
