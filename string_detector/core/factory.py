"""Factory for creating string detector components from configuration."""

from typing import Optional

from ..logger import get_logger
from ..audio.pitch_estimator import PitchEstimator
from ..audio.wav_source import WavFileFrameSource
from ..detection.frame_pipeline import FramePipeline
from ..detection.stability_tracker import StabilityTracker
from ..detection.string_classifier import StringClassifier
from ..services.string_detection_service import StringDetectionService
from .config import ConfigManager
from .errors import DeviceUnavailableError
from .interfaces import IFrameSource

logger = get_logger(__name__)


class ComponentFactory:
    """Factory for creating string detector components."""

    FRAME_SOURCES = ("default", "wav")

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        """Initialize the component factory.

        Args:
            config_manager: Configuration manager, or None to create a default one
        """
        self.config_manager = config_manager or ConfigManager()

    def create_frame_source(self, implementation: str = "default", **kwargs) -> IFrameSource:
        """Create a frame source.

        Args:
            implementation: "default" for the sound card, "wav" for a file
                (requires ``file_path``)
            **kwargs: Overrides for the audio_input configuration

        Raises:
            ValueError: If the implementation is not registered
        """
        if implementation not in self.FRAME_SOURCES:
            raise ValueError(f"Unknown frame source implementation: {implementation}")

        config = self.config_manager.get_config("audio_input")
        config.update(kwargs)

        if implementation == "wav":
            instance = WavFileFrameSource(
                file_path=config["file_path"],
                frame_size=config["frame_size"],
                loop=config.get("loop", False),
                gain=config.get("gain", 1.0),
            )
        else:
            # Imported here so PortAudio is only needed for live capture
            try:
                from ..audio.audio_input import SoundDeviceFrameSource
            except OSError as e:
                raise DeviceUnavailableError(f"PortAudio is not available: {e}") from e

            instance = SoundDeviceFrameSource(
                device_id=config["device_id"],
                sample_rate=config["sample_rate"],
                frame_size=config["frame_size"],
                channels=config["channels"],
            )

        logger.info(f"Created frame source: {implementation}")
        return instance

    def create_pipeline(self, sample_rate: Optional[int] = None, **kwargs) -> FramePipeline:
        """Create a frame pipeline from the detector configuration.

        Args:
            sample_rate: Sample rate of the frames, or None for the audio_input default
            **kwargs: Overrides for the detector configuration
        """
        config = self.config_manager.get_config("detector")
        config.update(kwargs)
        if sample_rate is None:
            sample_rate = self.config_manager.get_config("audio_input")["sample_rate"]

        return FramePipeline(
            pitch_estimator=PitchEstimator(
                sample_rate=sample_rate,
                min_frequency=config["min_frequency"],
                max_frequency=config["max_frequency"],
                correlation_threshold=config["correlation_threshold"],
            ),
            classifier=StringClassifier(tolerance=config["frequency_tolerance"]),
            tracker=StabilityTracker(
                required_confirmations=config["required_confirmations"],
                history_size=config["history_size"],
            ),
            volume_threshold=config["volume_threshold"],
        )

    def create_service(
        self, frame_source: Optional[IFrameSource] = None, **kwargs
    ) -> StringDetectionService:
        """Create a detection service.

        Args:
            frame_source: Frame source, or None to create the default one
            **kwargs: Overrides for the service configuration
        """
        if frame_source is None:
            frame_source = self.create_frame_source()

        config = self.config_manager.get_config("service")
        config.update(kwargs)

        instance = StringDetectionService(
            frame_source=frame_source,
            pipeline=self.create_pipeline(sample_rate=frame_source.sample_rate),
            cycle_interval=config["cycle_interval"],
        )
        logger.info("Created string detection service")
        return instance
