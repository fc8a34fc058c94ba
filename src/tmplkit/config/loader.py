"""
Configuration loading from files and environment variables.
"""
import logging
import os
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from .configuration import (
    TemplaterConfiguration,
    ensure_templater_config,
    load_config_file,
    load_configuration_from_env,
    merge_configs,
)

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = ["tmplkit.yaml", "tmplkit.yml", "tmplkit.json"]


def find_config_file(search_paths: Optional[List[str]] = None) -> Optional[str]:
    """Return the first tmplkit config file found in search_paths."""
    if search_paths is None:
        search_paths = [os.getcwd(), os.path.join(os.getcwd(), "config")]

    for path in search_paths:
        for filename in CONFIG_FILENAMES:
            full_path = os.path.join(path, filename)
            if os.path.exists(full_path):
                return full_path
    return None


def load_config(
    config_path: Optional[str] = None,
    defaults: Optional[Dict[str, Any]] = None,
    search_paths: Optional[List[str]] = None,
    use_dotenv: bool = True,
) -> TemplaterConfiguration:
    """
    Load a templater configuration from defaults, a file and the environment.

    Args:
        config_path: Path to the configuration file (optional)
        defaults: Default configuration values
        search_paths: Directories searched when config_path is not given
        use_dotenv: Whether to read a .env file into the environment first

    Returns:
        TemplaterConfiguration with environment values taking precedence
    """
    config = dict(defaults or {})

    if config_path:
        logger.info(f"Loading configuration from specified file: {config_path}")
        config = merge_configs(config, load_config_file(config_path))
    else:
        found = find_config_file(search_paths)
        if found:
            logger.info(f"Loading configuration from discovered file: {found}")
            config = merge_configs(config, load_config_file(found))
        else:
            logger.debug("No configuration file found, using defaults and environment variables")

    if use_dotenv:
        load_dotenv()

    config = merge_configs(config, load_configuration_from_env())
    return ensure_templater_config(config)
