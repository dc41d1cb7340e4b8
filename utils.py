# utils.py
"""
Utility functions for the particle field application.

This module provides logging setup, configuration loading and the
parsing of the particle_field config section. None of it belongs to the
simulation or rendering themselves.
"""
import logging
import logging.handlers
import json
import os
from typing import Dict, Any, Optional

from constants import DEFAULT_BASE_COUNT, DEFAULT_OPACITY, DEFAULT_LINK

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs:
#     - config: A dictionary containing a "logging" key with "level",
#       "format", and "log_file" sub-keys.
#   - Outputs: None
#   - Side Effects: Configures the root Python logger. Creates a log
#     directory if it doesn't exist. Sets up a console handler and a
#     rotating file handler.
#
# load_config(path: str) -> Dict[str, Any]:
#   - Raises FileNotFoundError / json.JSONDecodeError after logging them.
#
# class FieldConfig:
#   - from_dict(params: Dict[str, Any]) -> FieldConfig
#     - Inputs: the "particle_field" section of config.json.
#     - Invariants: base_count > 0, 0 <= opacity <= 1, link is a bool.
#     - Raises ValueError (after a critical log) for unusable values.

def setup_logging(config: Dict[str, Any]) -> None:
    """
    Configures the logging system from a configuration dictionary.

    Sets up logging to both the console and a rotating file.
    """
    log_config = config.get('logging', {})
    log_level = log_config.get('level', 'INFO').upper()
    log_format = log_config.get('format', '%(asctime)s - %(levelname)s - %(message)s')
    log_file_path = log_config.get('log_file', 'logs/particle_field.log')

    log_dir = os.path.dirname(log_file_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    logger = logging.getLogger()
    logger.setLevel(log_level)

    # Clear existing handlers to avoid duplication
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # Rotates when the log reaches 1MB, keeps 5 backup logs.
    file_handler = logging.handlers.RotatingFileHandler(
        log_file_path, maxBytes=1024*1024, backupCount=5
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    logging.info("Logging system initialized.")
    logging.debug(f"Log level set to {log_level}.")
    logging.debug(f"Log file path: {log_file_path}")

def load_config(path: str) -> Dict[str, Any]:
    """Loads a JSON configuration file."""
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r') as f:
            config = json.load(f)
        logging.info("Configuration loaded successfully.")
        return config
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError:
        logging.error(f"Error decoding JSON from {path}.")
        raise


class FieldConfig:
    """
    Options recognised by the particle field engine.
    """
    KEYS = ('base_count', 'opacity', 'link', 'seed')

    def __init__(self, base_count: float = DEFAULT_BASE_COUNT, opacity: float = DEFAULT_OPACITY,
                 link: bool = DEFAULT_LINK, seed: Optional[int] = None):
        self.base_count = base_count
        self.opacity = opacity
        self.link = link
        self.seed = seed

    def __repr__(self):
        return (
            f"FieldConfig(base_count={self.base_count}, opacity={self.opacity}, "
            f"link={self.link}, seed={self.seed})"
        )

    @classmethod
    def from_dict(cls, params: Optional[Dict[str, Any]]) -> "FieldConfig":
        """Builds a FieldConfig from a config section, validating each value."""
        params = params or {}

        unknown = sorted(set(params) - set(cls.KEYS))
        if unknown:
            logging.warning(f"Ignoring unknown particle_field options: {', '.join(unknown)}.")

        base_count = params.get('base_count', DEFAULT_BASE_COUNT)
        if isinstance(base_count, bool) or not isinstance(base_count, (int, float)) or base_count <= 0:
            msg = f"Configuration error: base_count must be a positive number, got {base_count!r}."
            logging.critical(msg)
            raise ValueError(msg)

        opacity = params.get('opacity', DEFAULT_OPACITY)
        if isinstance(opacity, bool) or not isinstance(opacity, (int, float)):
            msg = f"Configuration error: opacity must be a number in [0, 1], got {opacity!r}."
            logging.critical(msg)
            raise ValueError(msg)
        if not 0.0 <= opacity <= 1.0:
            clamped = min(max(float(opacity), 0.0), 1.0)
            logging.warning(f"opacity {opacity} is outside [0, 1]; using {clamped}.")
            opacity = clamped

        link = params.get('link', DEFAULT_LINK)
        if not isinstance(link, bool):
            msg = f"Configuration error: link must be true or false, got {link!r}."
            logging.critical(msg)
            raise ValueError(msg)

        seed = params.get('seed')
        if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
            msg = f"Configuration error: seed must be an integer or null, got {seed!r}."
            logging.critical(msg)
            raise ValueError(msg)

        return cls(base_count=base_count, opacity=float(opacity), link=link, seed=seed)
