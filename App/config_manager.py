"""Configuration persistence manager for the color replacer.

This module handles loading and saving of rule presets and export settings
to/from JSON files.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Tuple

from models import CONFIG_FILE, AppConfig, ReplacementRule

logger = logging.getLogger(__name__)


class ConfigManager:
    """Handles loading and saving of application configuration."""

    def __init__(self, config_path: Path = CONFIG_FILE):
        """Initialize config manager.

        Args:
            config_path: Path to configuration file
                (defaults to ~/.color_replacer_config.json)
        """
        self.config_path = Path(config_path)

    def load(self) -> AppConfig:
        """Load configuration from file, returning defaults if not found.

        Returns:
            AppConfig with loaded or default values
        """
        config = AppConfig()

        try:
            if self.config_path.exists():
                with open(self.config_path, "r") as f:
                    data = json.load(f)
                    # Update config with loaded values (fallback to defaults)
                    if "rules" in data:
                        config.rules = [
                            ReplacementRule.from_dict(item) for item in data["rules"]
                        ]
                    config.output_dir = data.get("output_dir", config.output_dir)
                    config.archive_name = data.get("archive_name", config.archive_name)
                logger.info("Loaded configuration from %s", self.config_path)
        except Exception as e:
            logger.warning("Could not load config file %s: %s", self.config_path, e)
            config = AppConfig()

        return config

    def save(self, config: AppConfig) -> Tuple[bool, Optional[str]]:
        """Save configuration to file.

        Args:
            config: AppConfig to save

        Returns:
            Tuple of (success: bool, error_message: Optional[str])
        """
        data = {
            "rules": [rule.to_dict() for rule in config.rules],
            "output_dir": config.output_dir,
            "archive_name": config.archive_name,
        }
        try:
            with open(self.config_path, "w") as f:
                json.dump(data, f, indent=2)
            return True, None
        except Exception as e:
            return False, str(e)
