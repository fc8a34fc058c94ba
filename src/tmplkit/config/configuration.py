"""
Configuration model for templaters.
"""
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..error.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEBUG_ENV_VAR = "TMPL_DEBUG"
ENV_PREFIX = "TMPL_"

# Extensions a file must have to be picked up by preregister.
DEFAULT_EXTENSIONS = [".html", ".htm", ".md"]
MARKDOWN_EXTENSION = ".md"


def debug_from_env() -> bool:
    """Report whether TMPL_DEBUG is set to a non-empty value."""
    return os.environ.get(DEBUG_ENV_VAR, "") != ""


def _normalize_extension(value: str) -> str:
    value = value.strip().lower()
    if value and not value.startswith("."):
        value = "." + value
    return value


class TemplaterConfiguration(BaseModel):
    """Configuration for a Templater.

    The debug flag is resolved once, when the configuration object is
    created. With debug on, every load recompiles the templates from source
    and registrations, rebuilds and render failures are logged.
    """

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
        arbitrary_types_allowed=True,
    )

    # General settings
    debug: bool = Field(default_factory=debug_from_env, description="Hot-reload and verbose logging")
    log_level: str = "INFO"
    log_file: Optional[str] = None
    structured_logging: bool = False

    # Template discovery
    extensions: List[str] = Field(
        default_factory=lambda: list(DEFAULT_EXTENSIONS),
        description="File extensions considered templates by preregister",
    )
    markdown_extension: str = Field(default=MARKDOWN_EXTENSION, description="Sources post-processed as Markdown")
    template_dir: Optional[Path] = Field(default=None, description="Directory served by DirFS")

    # Jinja2 environment settings
    autoescape: bool = True
    strict_undefined: bool = True
    trim_blocks: bool = True
    lstrip_blocks: bool = True
    keep_trailing_newline: bool = True

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        value_upper = value.upper()
        if value_upper not in valid_levels:
            raise ValueError(f"Invalid log level '{value}'. Must be one of: {valid_levels}")
        return value_upper

    @field_validator("extensions", mode="before")
    @classmethod
    def validate_extensions(cls, value: Any) -> List[str]:
        """Accept a list or a comma separated string of extensions."""
        if isinstance(value, str):
            value = value.split(",")
        if not isinstance(value, (list, tuple)):
            raise ValueError("extensions must be a list or comma separated string")
        extensions = [_normalize_extension(str(v)) for v in value]
        return [ext for ext in extensions if ext]

    @field_validator("markdown_extension")
    @classmethod
    def validate_markdown_extension(cls, value: str) -> str:
        """Normalize the Markdown extension."""
        value = _normalize_extension(value)
        if not value:
            raise ValueError("markdown_extension must not be empty")
        return value

    @field_validator("template_dir", mode="before")
    @classmethod
    def convert_path(cls, value: Any) -> Optional[Path]:
        """Convert path strings to Path objects."""
        if value is None or value == "":
            return None
        if isinstance(value, (str, Path)):
            return Path(value).expanduser().resolve()
        raise ValueError(f"Invalid path value: {value}")

    def is_template(self, path: str) -> bool:
        """Report whether path has one of the configured template extensions."""
        return os.path.splitext(path)[1].lower() in self.extensions

    def is_markdown(self, path: Optional[str]) -> bool:
        """Report whether path is a Markdown source."""
        if not path:
            return False
        return os.path.splitext(path)[1].lower() == self.markdown_extension


def ensure_templater_config(config: Optional[Any] = None) -> TemplaterConfiguration:
    """Ensure a valid templater configuration."""
    if isinstance(config, TemplaterConfiguration):
        return config

    if config is None:
        config = {}

    try:
        return TemplaterConfiguration(**config)
    except (ValidationError, TypeError) as e:
        raise ConfigurationError(f"Invalid configuration: {str(e)}") from e


def load_config_file(file_path: str) -> Dict[str, Any]:
    """
    Load configuration from a file (YAML or JSON).

    Args:
        file_path: Path to the configuration file

    Returns:
        Dictionary with configuration

    Raises:
        ConfigurationError: If the file is not found or cannot be parsed
    """
    path = Path(file_path).expanduser()

    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {file_path}")

    try:
        content = path.read_text(encoding='utf-8')
    except OSError as e:
        raise ConfigurationError(f"Error reading config file {file_path}: {str(e)}")

    try:
        if path.suffix in (".yaml", ".yml"):
            loaded_config = yaml.safe_load(content) or {}
        elif path.suffix == ".json":
            loaded_config = json.loads(content) or {}
        else:
            raise ConfigurationError(f"Unsupported config file format: {file_path}")
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML format in {file_path}: {str(e)}")
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON format in {file_path}: {str(e)}")

    if not isinstance(loaded_config, dict):
        raise ConfigurationError(f"Configuration in {file_path} must be a mapping")

    logger.debug(f"Loaded configuration from {file_path}")
    return loaded_config


def load_configuration_from_env(environ: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """
    Collect TMPL_* environment variables into a configuration dictionary.

    TMPL_DEBUG follows the "non-empty means on" rule instead of boolean
    parsing, so TMPL_DEBUG=0 still enables debug mode.
    """
    environ = os.environ if environ is None else environ
    config: Dict[str, Any] = {}

    for key, value in environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        field = key[len(ENV_PREFIX):].lower()
        if field == "debug":
            config["debug"] = value != ""
        elif field in TemplaterConfiguration.model_fields:
            config[field] = value

    return config


def merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge two configuration dictionaries."""
    result = base.copy()
    for key, value in override.items():
        if isinstance(value, dict) and key in result and isinstance(result[key], dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value
    return result
