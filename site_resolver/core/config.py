"""Configuration management for the Company Website Resolver."""

import logging
import os
from dataclasses import dataclass, replace
from typing import Dict, Any, Optional

import yaml
from dotenv import load_dotenv

from site_resolver.core.exceptions import ConfigurationError
from site_resolver.scoring.relevance import DEFAULT_WEIGHTS


logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/config.yaml"

API_KEY_ENV_VAR = "GOOGLE_API_KEY"
SEARCH_ENGINE_ID_ENV_VAR = "GOOGLE_SEARCH_ENGINE_ID"


@dataclass(frozen=True)
class SearchConfig:
    """Settings for one resolution run. Shared read-only by every component."""
    api_key: str
    search_engine_id: str
    max_links_per_company: int = 4
    search_delay_ms: int = 500        # pause between companies
    query_delay_ms: int = 1000        # pause between queries of one company
    request_timeout: float = 15.0     # seconds, search API GET
    probe_timeout: float = 5.0        # seconds, fallback HEAD probe
    max_retries: int = 3
    initial_retry_delay_ms: int = 1000
    max_jitter_ms: int = 500

    def validate(self) -> 'SearchConfig':
        """Check the settings before a run starts.

        Returns:
            The same config, so calls can be chained

        Raises:
            ConfigurationError: If a required value is missing or out of range
        """
        if not self.api_key or not self.api_key.strip():
            raise ConfigurationError(
                "Google API key is required but not configured. "
                f"Please set the {API_KEY_ENV_VAR} environment variable."
            )
        if not self.search_engine_id or not self.search_engine_id.strip():
            raise ConfigurationError(
                "Google search engine ID is required but not configured. "
                f"Please set the {SEARCH_ENGINE_ID_ENV_VAR} environment variable."
            )
        if not isinstance(self.max_links_per_company, int) or self.max_links_per_company <= 0:
            raise ConfigurationError("max_links_per_company must be a positive integer")
        for name in ('search_delay_ms', 'query_delay_ms', 'initial_retry_delay_ms',
                     'max_jitter_ms', 'max_retries'):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"{name} must not be negative")
        if self.request_timeout <= 0 or self.probe_timeout <= 0:
            raise ConfigurationError("Timeouts must be positive")
        return self

    def with_overrides(self, **overrides: Any) -> 'SearchConfig':
        """Return a copy with the given non-None fields replaced."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)

    @property
    def masked_api_key(self) -> str:
        """API key safe for logging."""
        if not self.api_key:
            return ''
        return self.api_key[:5] + '...'


class Config:
    """Configuration manager for the application."""

    def __init__(self, config_path: str = DEFAULT_CONFIG_PATH):
        """
        Initialize configuration.

        Args:
            config_path: Path to YAML configuration file
        """
        load_dotenv()  # Load environment variables from .env file
        self.config_path = config_path

        if os.getenv(API_KEY_ENV_VAR):
            logger.info(f"API key found in environment (length: {len(os.getenv(API_KEY_ENV_VAR))} characters)")
        else:
            logger.warning(f"{API_KEY_ENV_VAR} not found in environment or .env file")

        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        try:
            with open(self.config_path, 'r') as file:
                config = yaml.safe_load(file) or {}
        except FileNotFoundError:
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML configuration: {e}")

        if not isinstance(config, dict):
            raise ConfigurationError("Configuration root must be a mapping")
        return self._process_env_variables(config)

    def _process_env_variables(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Process environment variable placeholders in configuration.

        Unset variables resolve to an empty string; required values are
        checked later by SearchConfig.validate().
        """
        def process_value(value):
            if isinstance(value, str) and value.startswith("${") and value.endswith("}"):
                env_var = value[2:-1]
                env_value = os.getenv(env_var)
                if env_value is None:
                    logger.warning(f"Environment variable not set: {env_var}")
                    return ''
                return env_value
            elif isinstance(value, dict):
                return {k: process_value(v) for k, v in value.items()}
            elif isinstance(value, list):
                return [process_value(item) for item in value]
            return value

        return process_value(config)

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get configuration value using dot notation.

        Args:
            key_path: Dot-separated key path (e.g., 'search.max_retries')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split('.')
        value = self._config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    @property
    def search_section(self) -> Dict[str, Any]:
        return self._config.get('search') or {}

    @property
    def scoring_config(self) -> Dict[str, Any]:
        return self._config.get('scoring') or {}

    def scoring_weights(self) -> Optional[Dict[str, int]]:
        """Weight overrides from scoring.weights, checked against the known weights.

        Raises:
            ConfigurationError: If a weight is unknown or not an integer
        """
        weights = self.scoring_config.get('weights')
        if not weights:
            return None
        if not isinstance(weights, dict):
            raise ConfigurationError("Scoring weights must be a mapping")

        unknown = sorted(str(name) for name in weights if name not in DEFAULT_WEIGHTS)
        if unknown:
            raise ConfigurationError(f"Unknown scoring weight(s): {', '.join(unknown)}")
        for name, weight in weights.items():
            if not isinstance(weight, int):
                raise ConfigurationError(f"Scoring weight '{name}' must be an integer")
        return dict(weights)

    @property
    def filtering_config(self) -> Dict[str, Any]:
        return self._config.get('filtering') or {}

    @property
    def logging_config(self) -> Dict[str, Any]:
        return self._config.get('logging') or {}

    def get_all(self) -> Dict[str, Any]:
        """Get entire configuration as dictionary."""
        return self._config.copy()

    def search_config(self, **overrides: Any) -> SearchConfig:
        """Build the SearchConfig for a run.

        Args:
            **overrides: Values taking precedence over the file (None is ignored)

        Returns:
            SearchConfig instance (not yet validated)
        """
        search = self.search_section
        values = {
            'api_key': str(search.get('api_key') or ''),
            'search_engine_id': str(search.get('search_engine_id') or ''),
        }
        for name in ('max_links_per_company', 'search_delay_ms', 'query_delay_ms',
                     'max_retries', 'initial_retry_delay_ms', 'max_jitter_ms'):
            if search.get(name) is not None:
                values[name] = int(search[name])
        for name in ('request_timeout', 'probe_timeout'):
            if search.get(name) is not None:
                values[name] = float(search[name])

        return SearchConfig(**values).with_overrides(**overrides)

    def validate(self) -> bool:
        """Validate configuration completeness.

        Returns:
            True if configuration is valid

        Raises:
            ConfigurationError: If configuration is invalid
        """
        if 'search' not in self._config:
            raise ConfigurationError("Missing configuration section: search")

        try:
            self.search_config().validate()
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid search configuration: {e}")

        self.scoring_weights()

        blacklist = self.filtering_config.get('blacklist')
        if blacklist is not None and not isinstance(blacklist, list):
            raise ConfigurationError("filtering.blacklist must be a list of domains")

        return True
