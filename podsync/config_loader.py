"""Handles loading configuration from YAML files."""

import yaml
import os
import logging
from typing import Any, Dict, Optional
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    'rss_url': 'https://podcasts.files.bbci.co.uk/p0h6d6nm.rss',
    'data_dir': 'data',
    'episodes_file': 'latest_episodes.json',
    'transcripts_dir': 'transcripts',
    'temp_dir': 'temp',
    'log_dir': 'logs',
    'log_file': 'podsync.log',
    'device': 'cuda',
    'whisper_model': 'medium',
    'whisper_fp16': True,
    'translation_model': 'Helsinki-NLP/opus-mt-ar-en',
    'translation_batch_size': 10,
    'latin_marker': 'bbc news',
    'native_marker': 'بي بي سي نيوز عربي',
    'max_new_episodes': 25,
    'request_timeout': 60,
    'ffmpeg_path': None,
}

class ConfigLoader:
    """Loads configuration settings from a YAML file."""

    def load_config(self, config_path: Optional[str]) -> dict:
        """
        Loads configuration from the specified YAML file path.

        Keys missing from the file take their values from DEFAULT_CONFIG. When
        `config_path` is None the defaults are returned as-is.

        Args:
            config_path: The path to the YAML configuration file.

        Returns:
            A dictionary containing the loaded configuration settings.

        Raises:
            FileNotFoundError: If the configuration file does not exist.
            ConfigurationError: If the file cannot be parsed as YAML or
                              if there are other reading errors.
        """
        config = dict(DEFAULT_CONFIG)
        if config_path is None:
            logger.info("No configuration file given, using defaults.")
            return config

        logger.info(f"Attempting to load configuration from: {config_path}")
        if not os.path.exists(config_path):
            logger.error(f"Configuration file not found at path: {config_path}")
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        if not os.path.isfile(config_path):
            logger.error(f"Configuration path is not a file: {config_path}")
            raise ConfigurationError(f"Configuration path is not a file: {config_path}")

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"Error parsing YAML configuration file {config_path}: {e}", exc_info=True)
            raise ConfigurationError(f"Invalid YAML format in {config_path}: {e}") from e
        except IOError as e:
            logger.error(f"Error reading configuration file {config_path}: {e}", exc_info=True)
            raise ConfigurationError(f"Could not read configuration file {config_path}: {e}") from e

        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            logger.error(f"Configuration file {config_path} did not load as a dictionary (root object).")
            raise ConfigurationError(f"Invalid YAML structure in {config_path}. Root must be a mapping (dictionary).")

        unknown = sorted(set(loaded) - set(DEFAULT_CONFIG))
        if unknown:
            logger.warning(f"Ignoring unknown configuration keys: {', '.join(unknown)}")
        config.update({k: v for k, v in loaded.items() if k in DEFAULT_CONFIG})
        logger.info(f"Configuration loaded successfully from {config_path}")
        return config

def resolve_path(config: dict, key: str) -> str:
    """Returns a data path from `config`, placing relative file names under data_dir."""
    value = config[key]
    if os.path.isabs(value):
        return value
    return os.path.join(config['data_dir'], value)
