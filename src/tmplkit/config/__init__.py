"""
Configuration components for tmplkit.
"""
from .configuration import (
    TemplaterConfiguration,
    DEFAULT_EXTENSIONS,
    MARKDOWN_EXTENSION,
    DEBUG_ENV_VAR,
    debug_from_env,
    ensure_templater_config,
    load_config_file,
    load_configuration_from_env,
    merge_configs,
)
from .loader import load_config, find_config_file

__all__ = [
    "TemplaterConfiguration",
    "DEFAULT_EXTENSIONS",
    "MARKDOWN_EXTENSION",
    "DEBUG_ENV_VAR",
    "debug_from_env",
    "ensure_templater_config",
    "load_config_file",
    "load_configuration_from_env",
    "merge_configs",
    "load_config",
    "find_config_file",
]
