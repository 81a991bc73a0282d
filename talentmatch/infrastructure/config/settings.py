"""Provides functions for loading and accessing configuration settings.

Supports loading from .env files, environment variables, and a dedicated
configuration file (~/.talentmatch/config.yaml).
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from dotenv import load_dotenv

from talentmatch.domain.models.common import BackoffPolicy

logger = logging.getLogger(__name__)

# --- Configuration Constants ---
DEFAULT_CONFIG_DIR = Path.home() / ".talentmatch"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"
ENV_FILE_NAME = ".env"

DEFAULT_AWS_REGION = "us-east-1"
DEFAULT_BEDROCK_MODEL_ID = "anthropic.claude-3-5-sonnet-20240620-v1:0"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"

# --- Global Configuration Store ---
_config: Dict[str, Any] = {}
_test_config: Dict[str, Any] = {}
_loaded = False


def _flatten(data: Mapping[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Flattens nested YAML mappings into dotted keys ('aws': {'region': x} -> 'aws.region')."""
    flat: Dict[str, Any] = {}
    for key, value in data.items():
        full_key = f"{prefix}{key}"
        if isinstance(value, Mapping):
            flat.update(_flatten(value, prefix=f"{full_key}."))
        else:
            flat[full_key] = value
    return flat


def load_configuration(config_file: Path = DEFAULT_CONFIG_FILE, env_file: Optional[Path] = None) -> None:
    """Loads configuration from environment, .env file, and YAML file.

    Priority order (highest to lowest):
    1. Environment Variables
    2. .env file
    3. YAML configuration file
    4. Default values passed to get_config

    Args:
        config_file: Path to the YAML configuration file.
        env_file: Path to the .env file (searches upwards from cwd if None).
    """
    global _config, _loaded
    if _loaded:
        logger.debug("Configuration already loaded.")
        return

    _config = {}

    # 1. YAML file (lowest priority)
    if config_file.exists():
        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                yaml_config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load or parse YAML config {config_file}: {e}")
        else:
            if isinstance(yaml_config, Mapping):
                _config.update(_flatten(yaml_config))
                logger.info(f"Loaded configuration from YAML: {config_file}")
            elif yaml_config is not None:
                logger.warning(f"YAML config file {config_file} did not contain a mapping.")
    else:
        logger.debug(f"YAML config file not found: {config_file}")

    # 2. .env file; override=False so real environment variables take precedence
    dotenv_path = env_file or find_dotenv_path()
    if dotenv_path:
        if load_dotenv(dotenv_path=dotenv_path, override=False):
            logger.info(f"Loaded environment variables from: {dotenv_path}")
    else:
        logger.debug(".env file not found at or above current directory.")

    _loaded = True
    logger.info("Configuration loading process completed.")


def reset_configuration() -> None:
    """Forgets loaded configuration so the next load_configuration() re-reads it."""
    global _config, _loaded
    _config = {}
    _loaded = False


def _coerce(value: str) -> Any:
    lowered = value.lower()
    if lowered == 'true':
        return True
    if lowered == 'false':
        return False
    try:
        if '.' in value:
            return float(value)
        return int(value)
    except ValueError:
        return value


def env_var_name(key: str) -> str:
    """Environment variable consulted for a dotted key ('aws.region' -> 'AWS_REGION')."""
    return key.upper().replace('.', '_').replace('-', '_')


def get_config(key: str, default: Any = None) -> Any:
    """
    Get a configuration value by key.

    Priority:
    1. Test configuration (if in testing mode)
    2. Environment variable
    3. YAML config
    4. Default value

    Args:
        key: The configuration key (dotted, e.g. 'retry.max_retries')
        default: Default value if the key is not found

    Returns:
        The configuration value
    """
    if key in _test_config:
        return _test_config[key]

    env_key = env_var_name(key)
    if env_key in os.environ:
        return _coerce(os.environ[env_key])

    if key in _config:
        return _config[key]

    return default


def find_dotenv_path() -> Optional[Path]:
    """Searches for the .env file upwards from the current directory."""
    cwd = Path.cwd()
    for path in [cwd] + list(cwd.parents):
        env_path = path / ENV_FILE_NAME
        if env_path.is_file():
            return env_path
    return None


# --- Convenience Functions ---

def _optional_str(key: str) -> Optional[str]:
    value = get_config(key)
    return str(value) if value not in (None, "") else None


def get_openai_api_key() -> Optional[str]:
    """Reads ENV OPENAI_API_KEY first, then yaml openai.api_key."""
    return _optional_str('openai.api_key')


def get_openai_model() -> str:
    return _optional_str('openai.model') or DEFAULT_OPENAI_MODEL


def get_aws_region() -> str:
    return _optional_str('aws.region') or DEFAULT_AWS_REGION


def get_bedrock_model_id() -> str:
    return _optional_str('aws.bedrock_model_id') or DEFAULT_BEDROCK_MODEL_ID


def get_throttle_interval() -> float:
    """Minimum seconds between two Bedrock requests."""
    return float(get_config('throttle.min_interval_seconds', 2.0))


def get_backoff_policy() -> BackoffPolicy:
    """Retry settings for the primary provider."""
    max_delay = get_config('retry.max_delay_seconds')
    return BackoffPolicy(
        max_retries=int(get_config('retry.max_retries', 3)),
        base_delay_s=float(get_config('retry.base_delay_seconds', 1.0)),
        max_jitter_s=float(get_config('retry.max_jitter_seconds', 1.0)),
        max_delay_s=float(max_delay) if max_delay not in (None, "") else None,
    )


def get_batch_size() -> int:
    return int(get_config('batch.size', 3))


def get_batch_delay() -> float:
    return float(get_config('batch.delay_seconds', 5.0))


def get_log_level() -> str:
    return str(get_config('logging.level', 'INFO')).upper()


def set_config(key: str, value: Any) -> None:
    """Sets an in-memory configuration value by key (not persisted)."""
    logger.debug(f"Setting config: {key} = {value!r}")
    _config[key] = value


def set_config_for_testing(config_dict: Dict[str, Any]) -> None:
    """
    Set configuration values for testing purposes.
    These values will override any existing configuration.

    Args:
        config_dict: Dictionary of configuration values to set
    """
    _test_config.update(config_dict)
    logger.debug(f"Set testing configuration: {config_dict}")


def clear_test_config() -> None:
    """Clear all testing configuration values."""
    _test_config.clear()
    logger.debug("Cleared testing configuration")
