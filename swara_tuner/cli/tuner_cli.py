"""Command implementations for the Swara Tuner CLI."""

import json
from typing import Optional

from ..logger import get_logger
from ..note_types import NoteEvent, Reading, SignalStatus
from ..note_utils import note_number, standard_frequency
from ..tuning import cents_off, parse_target_frequency, tuning_status
from ..audio.tuner_service import Tuner
from ..core.errors import DeviceUnavailableError
from ..core.factory import ComponentFactory
from .scheduler import FixedRateScheduler

logger = get_logger(__name__)

AUTO_TARGET = "auto"


class ReadingPrinter:
    """Prints a line whenever the displayed note or status changes."""

    def __init__(self, target: Optional[float], in_tune_cents: float):
        self._target = target
        self._in_tune_cents = in_tune_cents
        self._last_key: Optional[tuple] = None

    def _target_for(self, frequency: float) -> float:
        # Without a fixed target, tune against the nearest equal-tempered pitch
        return self._target or standard_frequency(note_number(frequency))

    def format(self, reading: Reading) -> str:
        if reading.status is SignalStatus.UNAVAILABLE:
            return "Audio device unavailable"
        if reading.frequency is None:
            return "Waiting for sound..."

        target = self._target_for(reading.frequency)
        status = tuning_status(reading.frequency, target, self._in_tune_cents)
        return (
            f"{reading.frequency:7.1f}Hz  {reading.note_name}{reading.octave:<3} "
            f"{reading.swara:<4} {reading.solfege:<4} "
            f"{cents_off(reading.frequency, target):+6.1f} cents  {status}"
        )

    def __call__(self, reading: Reading) -> None:
        # Frequencies jitter every tick, only print on note or status changes
        key = (reading.status, reading.note_name, reading.octave)
        if reading.frequency is not None:
            target = self._target_for(reading.frequency)
            key += (tuning_status(reading.frequency, target, self._in_tune_cents),)
        if key != self._last_key:
            print(self.format(reading))
            self._last_key = key


def _resolve_target(value: Optional[str], factory: ComponentFactory) -> Optional[float]:
    if value is None:
        value = factory.config_manager.get_config("tuner")["target_frequency"]
    if value == AUTO_TARGET:
        return None
    return parse_target_frequency(value)


def _attach_display(tuner: Tuner, factory: ComponentFactory, target: Optional[str]) -> None:
    tuner_config = factory.config_manager.get_config("tuner")
    tuner.events.on_reading(
        ReadingPrinter(_resolve_target(target, factory), tuner_config["in_tune_cents"])
    )

    def note_recorded(event: NoteEvent) -> None:
        logger.info(
            f"[{event.timestamp:.2f}s] recorded {event.classification} "
            f"({event.classification.swara} / {event.classification.solfege})"
        )

    tuner.events.on_note_recorded(note_recorded)


def _export(tuner: Tuner, path: Optional[str]) -> None:
    events = tuner.export_events()
    logger.info(f"Recorded {len(events)} notes")
    if path:
        with open(path, "w") as f:
            json.dump(events, f, indent=2)
        logger.info(f"Exported note events to {path}")


def run_listen(args, factory: Optional[ComponentFactory] = None) -> int:
    """Tune from the live input device for args.duration seconds."""
    factory = factory or ComponentFactory()
    tuner = factory.create_tuner()
    _attach_display(tuner, factory, args.target)

    source_kwargs = {}
    if args.device is not None:
        source_kwargs["device_id"] = args.device
    source = factory.create_audio_source("default", **source_kwargs)

    if args.record:
        tuner.start_recording()

    try:
        session = tuner.start(source)
    except DeviceUnavailableError as e:
        logger.error(f"Cannot start tuner: {e}")
        return 1

    tick_hz = factory.config_manager.get_config("tuner")["tick_hz"]
    scheduler = FixedRateScheduler(session, tick_hz=tick_hz)
    logger.info(f"Listening for {args.duration} seconds...")

    exit_code = 0
    try:
        scheduler.run(args.duration)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except DeviceUnavailableError as e:
        logger.error(f"Capture stopped: {e}")
        exit_code = 1
    finally:
        tuner.stop()
        tuner.stop_recording()

    if args.record:
        _export(tuner, args.export)
    return exit_code


def run_analyze(args, factory: Optional[ComponentFactory] = None) -> int:
    """Run the tuner over a sound file, one frame per tick."""
    factory = factory or ComponentFactory()
    tuner = factory.create_tuner()
    _attach_display(tuner, factory, args.target)
    source = factory.create_audio_source("wav", file_path=args.file, gain=args.gain)

    tuner.start_recording()
    try:
        session = tuner.start(source)
    except DeviceUnavailableError as e:
        logger.error(f"Cannot analyze file: {e}")
        return 1

    ticks = 0
    try:
        with session:
            while True:
                # Tick times follow the file position, not the wall clock
                now = ticks * source.frame_size / source.sample_rate
                session.tick(now)
                if source.exhausted:
                    break
                ticks += 1
    except DeviceUnavailableError as e:
        logger.error(f"Analysis stopped: {e}")
        return 1
    finally:
        tuner.stop_recording()

    logger.info(f"Analyzed {ticks} frames")
    _export(tuner, args.export)
    return 0


def run_devices(args) -> int:
    """Print the available input devices."""
    from ..audio.audio_input import list_input_devices

    for device in list_input_devices():
        print(
            f"Device {device['id']}: {device['name']} "
            f"({device['channels']} in, {device['default_samplerate']:.0f} Hz)"
        )
    return 0
