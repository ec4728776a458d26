"""Provides functions for loading and accessing configuration settings.

Supports loading from .env files, environment variables, and an optional
YAML configuration file (~/.megaverse/config.yaml). Everything except the
candidate identity has a compiled-in default.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from megaverse.domain.models.common import BatchPolicy, CandidateId, RetryPolicy

logger = logging.getLogger(__name__)

# --- Configuration Constants ---
DEFAULT_CONFIG_DIR = Path.home() / ".megaverse"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"
ENV_FILE_NAME = ".env"

DEFAULTS: Dict[str, Any] = {
    "api.base_url": "https://challenge.crossmint.io/api",
    "api.timeout_seconds": 30.0,
    "batch.size": 3,
    "batch.cooldown_seconds": 3.0,
    "retry.base_delay_seconds": 0.5,
    "retry.max_attempts": 3,
    "retry.backoff_multiplier": 2.0,
    "decoder.strict": False,
    "logging.level": "INFO",
    "logging.format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    "logging.file": None,
}

# --- Global Configuration Store ---
_config: Dict[str, Any] = {}
_test_config: Dict[str, Any] = {}
_loaded = False


def _flatten(data: Dict[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Flattens nested YAML mappings into dotted keys ('api': {'base_url'} -> 'api.base_url')."""
    flat: Dict[str, Any] = {}
    for key, value in data.items():
        dotted = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(_flatten(value, prefix=f"{dotted}."))
        else:
            flat[dotted] = value
    return flat


def load_configuration(config_file: Optional[Path] = None, env_file: Optional[Path] = None) -> None:
    """Loads configuration from environment, .env file, and YAML file.

    Priority order (highest to lowest):
    1. Environment Variables
    2. .env file
    3. YAML configuration file
    4. Compiled-in defaults

    Args:
        config_file: Path to the YAML configuration file (defaults to ~/.megaverse/config.yaml).
        env_file: Path to the .env file (searches upwards from cwd if None).
    """
    global _config, _loaded
    if _loaded:
        logger.debug("Configuration already loaded.")
        return

    _config = {}
    config_file = config_file or DEFAULT_CONFIG_FILE

    # 1. Load from YAML file (Lowest priority)
    if config_file.is_file():
        try:
            with open(config_file, "r", encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load or parse YAML config {config_file}: {e}")
        else:
            if isinstance(yaml_config, dict):
                _config.update(_flatten(yaml_config))
                logger.info(f"Loaded configuration from YAML: {config_file}")
            elif yaml_config is not None:
                logger.warning(f"YAML config file {config_file} did not contain a dictionary.")
    else:
        logger.debug(f"YAML config file not found: {config_file}")

    # 2. Load from .env file (Medium priority)
    dotenv_path = env_file or find_dotenv_path()
    if dotenv_path:
        # override=False: ENV VARS take precedence
        if load_dotenv(dotenv_path=dotenv_path, override=False):
            logger.info(f"Loaded environment variables from: {dotenv_path}")
    else:
        logger.debug(".env file not found at or above current directory.")

    # 3. Environment Variables (Highest priority) are handled by os.getenv in get_config

    _loaded = True
    logger.info("Configuration loading process completed.")


def reset_configuration() -> None:
    """Forgets loaded configuration so the next load_configuration() reads again."""
    global _config, _loaded
    _config = {}
    _loaded = False


def _coerce(value: str) -> Any:
    if value.lower() == "true":
        return True
    if value.lower() == "false":
        return False
    try:
        if "." in value:
            return float(value)
        return int(value)
    except ValueError:
        return value


def get_config(key: str, default: Any = None) -> Any:
    """
    Get a configuration value by key.

    Priority:
    1. Test configuration (if in testing mode)
    2. Environment variable (key upper-cased, dots replaced by underscores)
    3. YAML config
    4. Compiled-in default, then `default`

    Args:
        key: The configuration key, e.g. 'batch.size'
        default: Default value if the key is not found anywhere

    Returns:
        The configuration value
    """
    if key in _test_config:
        return _test_config[key]

    env_key = key.upper().replace(".", "_")
    if env_key in os.environ:
        return _coerce(os.environ[env_key])

    if key in _config:
        return _config[key]

    if key in DEFAULTS and DEFAULTS[key] is not None:
        return DEFAULTS[key]
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

def get_candidate_id() -> CandidateId:
    """Returns the candidate identity from CANDIDATE_ID.

    Raises:
        ValueError: If no identity is configured.
    """
    # Read raw: ids like "0042" must reach the API unchanged
    if "candidate_id" in _test_config:
        value = _test_config["candidate_id"]
    else:
        value = os.environ.get("CANDIDATE_ID", _config.get("candidate_id"))
    if value is None or str(value).strip() == "":
        raise ValueError("CANDIDATE_ID is not set. Export it or add it to a .env file.")
    return CandidateId(str(value).strip())


def get_api_base_url() -> str:
    return str(get_config("api.base_url"))


def get_api_timeout() -> float:
    return float(get_config("api.timeout_seconds"))


def get_strict_decoding() -> bool:
    """Returns decoder.strict as a real boolean, parsing quoted YAML values."""
    value = get_config("decoder.strict")
    if isinstance(value, str):
        value = _coerce(value.strip())
    return value is True


def get_retry_policy() -> RetryPolicy:
    """Builds the RetryPolicy from configuration."""
    return RetryPolicy(
        base_delay_s=float(get_config("retry.base_delay_seconds")),
        max_attempts=int(get_config("retry.max_attempts")),
        backoff_multiplier=float(get_config("retry.backoff_multiplier")),
    )


def get_batch_policy() -> BatchPolicy:
    """Builds the BatchPolicy from configuration."""
    return BatchPolicy(
        batch_size=int(get_config("batch.size")),
        cooldown_s=float(get_config("batch.cooldown_seconds")),
    )


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
