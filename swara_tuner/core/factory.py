"""Factory for creating Swara Tuner components."""

from typing import Optional

from ..logger import get_logger
from ..audio.tuner_service import Tuner
from .config import ConfigManager
from .interfaces import IAudioSource

logger = get_logger(__name__)


class ComponentFactory:
    """Factory for creating Swara Tuner components from configuration."""

    AUDIO_SOURCES = ("default", "wav")

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        """Initialize the component factory.

        Args:
            config_manager: Configuration manager, or None to create a default one
        """
        self.config_manager = config_manager or ConfigManager()

    def create_audio_source(
        self, implementation: str = "default", **kwargs
    ) -> IAudioSource:
        """Create an audio source.

        Args:
            implementation: "default" for live input, "wav" for a sound file
            **kwargs: Additional parameters to pass to the constructor

        Returns:
            Audio source instance

        Raises:
            ValueError: If the implementation is not registered
        """
        if implementation not in self.AUDIO_SOURCES:
            raise ValueError(f"Unknown audio source implementation: {implementation}")

        config = self.config_manager.get_config("audio_input")

        # Imported here so that PortAudio is only loaded for live capture
        if implementation == "wav":
            from ..audio.file_source import WavFileSource

            kwargs.setdefault("frame_size", config["frame_size"])
            instance = WavFileSource(**kwargs)
        else:
            from ..audio.audio_input import SoundDeviceSource

            config.update(kwargs)
            instance = SoundDeviceSource(**config)

        logger.info(f"Created audio source: {implementation}")
        return instance

    def create_tuner(self, **kwargs) -> Tuner:
        """Create a tuner sized to the configured frame size.

        Args:
            **kwargs: Additional parameters to pass to the constructor

        Returns:
            Tuner instance
        """
        config = self.config_manager.get_config("audio_input")
        kwargs.setdefault("frame_size", config["frame_size"])
        instance = Tuner(**kwargs)
        logger.info(f"Created tuner: frame_size={kwargs['frame_size']}")
        return instance
