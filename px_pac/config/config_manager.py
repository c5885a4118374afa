"""
Configuration manager for loading and saving resolver settings.
"""

import os
import json
import logging
import shutil
from pathlib import Path
from typing import Optional
from .resolver_settings import ResolverSettings


class ConfigManager:
    """
    Manages loading and saving of resolver configuration.

    Settings live in a JSON file inside the user configuration directory.
    A missing or unreadable file yields default settings.
    """

    CONFIG_FILE_NAME = "px_pac_config.json"

    def __init__(self, config_dir: Optional[str] = None):
        """
        Initialize the configuration manager.

        Args:
            config_dir: Custom configuration directory path.
                       If None, uses default user config directory.
        """
        self.logger = logging.getLogger(__name__)

        if config_dir:
            self.config_dir = Path(config_dir)
        else:
            self.config_dir = self._get_default_config_dir()

        self.config_file = self.config_dir / self.CONFIG_FILE_NAME

    def _get_default_config_dir(self) -> Path:
        """Get the default configuration directory based on OS."""
        if os.name == 'nt':  # Windows
            config_base = os.environ.get('APPDATA', os.path.expanduser('~'))
        else:
            config_base = os.environ.get('XDG_CONFIG_HOME', os.path.expanduser('~/.config'))
        return Path(config_base) / "px-pac"

    def load_settings(self) -> ResolverSettings:
        """
        Load resolver settings from the configuration file.

        Returns:
            ResolverSettings with loaded or default values.
        """
        if not self.config_file.exists():
            self.logger.info("Configuration file not found, using defaults")
            return ResolverSettings()

        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                data = json.load(f)

            settings = ResolverSettings.from_dict(data)
            self.logger.info(f"Loaded settings from {self.config_file}")
            return settings

        except (json.JSONDecodeError, ValueError, TypeError, AttributeError) as e:
            self.logger.error(f"Failed to load settings from {self.config_file}: {e}")
            self.logger.info("Using default settings")
            return ResolverSettings()
        except OSError as e:
            self.logger.error(f"Failed to read config file {self.config_file}: {e}")
            return ResolverSettings()

    def save_settings(self, settings: ResolverSettings) -> bool:
        """
        Save resolver settings to the configuration file.

        Args:
            settings: ResolverSettings object to save.

        Returns:
            True if saved successfully, False otherwise.
        """
        temp_file = self.config_file.with_suffix('.json.tmp')
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)

            # The live file is only replaced once the new one is fully written
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(settings.to_dict(), f, indent=2)

            if self.config_file.exists():
                backup_file = self.config_file.with_suffix('.json.bak')
                shutil.copy2(self.config_file, backup_file)

            temp_file.replace(self.config_file)

            self.logger.info(f"Saved settings to {self.config_file}")
            return True

        except OSError as e:
            self.logger.error(f"Failed to save settings to {self.config_file}: {e}")
            temp_file.unlink(missing_ok=True)
            return False
