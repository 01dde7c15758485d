"""Configuration management for string detector components."""

from typing import Dict, Any, Optional
import json
import os
from pathlib import Path

from ..logger import get_logger
from ..string_types import (
    FRAME_SIZE,
    FREQUENCY_TOLERANCE,
    HISTORY_SIZE,
    REQUIRED_CONFIRMATIONS,
    SAMPLE_RATE,
    VOLUME_THRESHOLD,
)

logger = get_logger(__name__)

DEFAULT_CONFIGS: Dict[str, Dict[str, Any]] = {
    "detector": {
        "volume_threshold": VOLUME_THRESHOLD,
        "required_confirmations": REQUIRED_CONFIRMATIONS,
        "history_size": HISTORY_SIZE,
        "frequency_tolerance": FREQUENCY_TOLERANCE,
        "min_frequency": 70.0,
        "max_frequency": 400.0,
        "correlation_threshold": 0.4,
    },
    "audio_input": {
        "sample_rate": SAMPLE_RATE,
        "frame_size": FRAME_SIZE,
        "channels": 1,
        "device_id": None,
    },
    "service": {
        "cycle_interval": 0.1,
    },
}


class ConfigManager:
    """Configuration manager for string detector components."""

    def __init__(self, config_dir: Optional[str] = None):
        """Initialize the configuration manager.

        Args:
            config_dir: Directory to store configuration files, or None to use default
        """
        if config_dir is None:
            # Use ~/.config/guitar_string_detector by default
            home = os.path.expanduser("~")
            config_dir = os.path.join(home, ".config", "guitar_string_detector")

        self.config_dir = Path(config_dir)
        self.config_dir.mkdir(parents=True, exist_ok=True)

        self.default_configs = {
            name: values.copy() for name, values in DEFAULT_CONFIGS.items()
        }

        # Load existing configurations or create default ones
        self.configs = {}
        for config_name, default_config in self.default_configs.items():
            self.configs[config_name] = self.load_config(config_name, default_config)

    def load_config(self, name: str, default_config: Dict[str, Any]) -> Dict[str, Any]:
        """Load configuration from file or create default.

        Args:
            name: Configuration name
            default_config: Default configuration to use if file doesn't exist

        Returns:
            Configuration dictionary
        """
        config_file = self.config_dir / f"{name}.json"

        if config_file.exists():
            try:
                with open(config_file, "r") as f:
                    config = json.load(f)
                logger.info(f"Loaded configuration from {config_file}")
            except (OSError, ValueError) as e:
                logger.error(f"Error loading configuration from {config_file}: {e}")
                return default_config.copy()

            if not isinstance(config, dict):
                logger.error(f"Ignoring non-object configuration in {config_file}")
                return default_config.copy()

            # Ensure all default keys are present
            for key, value in default_config.items():
                if key not in config:
                    config[key] = value

            return config

        config = default_config.copy()
        self.save_config(name, config)
        return config

    def save_config(self, name: str, config: Dict[str, Any]) -> bool:
        """Save configuration to file.

        Returns:
            True if saved successfully, False otherwise
        """
        config_file = self.config_dir / f"{name}.json"

        try:
            with open(config_file, "w") as f:
                json.dump(config, f, indent=2)
            logger.debug(f"Saved configuration to {config_file}")
            return True
        except OSError as e:
            logger.error(f"Error saving configuration to {config_file}: {e}")
            return False

    def get_config(self, name: str) -> Dict[str, Any]:
        """Get a copy of the configuration section called ``name``."""
        return self.configs.get(name, {}).copy()

    def update_config(self, name: str, updates: Dict[str, Any]) -> bool:
        """Update configuration and save to file.

        Args:
            name: Configuration name
            updates: Dictionary of updates to apply

        Returns:
            True if updated and saved successfully, False otherwise
        """
        if name not in self.configs:
            logger.error(f"Unknown configuration: {name}")
            return False

        self.configs[name].update(updates)
        return self.save_config(name, self.configs[name])

    def reset_config(self, name: str) -> bool:
        """Reset configuration to default.

        Returns:
            True if reset successfully, False otherwise
        """
        if name not in self.default_configs:
            logger.error(f"Unknown configuration: {name}")
            return False

        self.configs[name] = self.default_configs[name].copy()
        return self.save_config(name, self.configs[name])
