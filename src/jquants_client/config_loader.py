"""
ConfigLoader module for building client configuration from TOML files and the environment
"""

import os
import tomllib
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import JQuantsError

BASE_URL = "https://api.jquants.com/v2"
API_KEY_ENV = "J_QUANTS_API_KEY"

DEFAULT_REQUESTS_PER_SECOND = 1.0
DEFAULT_TIMEOUT = 8.0
DEFAULT_RETRY_INTERVAL = 5.0
DEFAULT_LOOP_TIMEOUT = 20.0


class ConfigurationError(JQuantsError):
    """Raised when configuration is invalid or incomplete"""
    pass


class EnvironmentError(JQuantsError):
    """Raised when required environment variables are missing"""
    pass


class Plan(Enum):
    """J-Quants subscription plan, which fixes the request rate"""
    LIGHT = "Light"
    STANDARD = "Standard"
    PREMIUM = "Premium"

    @property
    def requests_per_second(self) -> float:
        # Premium allows 500 requests per minute
        return {Plan.LIGHT: 1.0, Plan.STANDARD: 2.0, Plan.PREMIUM: 8.0}[self]


@dataclass
class ClientConfig:
    """Connection, retry and pagination settings for JQuantsClient"""
    api_key: Optional[str] = None
    base_url: str = BASE_URL
    requests_per_second: float = DEFAULT_REQUESTS_PER_SECOND
    timeout: float = DEFAULT_TIMEOUT
    retry_interval: float = DEFAULT_RETRY_INTERVAL
    loop_timeout: float = DEFAULT_LOOP_TIMEOUT
    # Package logging is left alone unless one of these is set
    log_level: Optional[str] = None
    log_file_name: Optional[str] = None

    def __post_init__(self):
        # Zero values fall back to defaults
        if not self.base_url:
            self.base_url = BASE_URL
        if not self.requests_per_second:
            self.requests_per_second = DEFAULT_REQUESTS_PER_SECOND
        if not self.timeout:
            self.timeout = DEFAULT_TIMEOUT
        if not self.retry_interval:
            self.retry_interval = DEFAULT_RETRY_INTERVAL
        if not self.loop_timeout:
            self.loop_timeout = DEFAULT_LOOP_TIMEOUT

        for name in ('requests_per_second', 'timeout', 'retry_interval', 'loop_timeout'):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"'{name}' must not be negative")

    @classmethod
    def for_plan(cls, plan: Plan, **kwargs: Any) -> 'ClientConfig':
        """Build a configuration rate limited for a subscription plan"""
        return cls(requests_per_second=plan.requests_per_second, **kwargs)

    def resolve_api_key(self) -> str:
        """
        Return the configured API key, falling back to the environment

        Raises:
            EnvironmentError: If neither the config nor J_QUANTS_API_KEY provides a key
        """
        if self.api_key:
            return self.api_key
        return ConfigLoader.get_api_key(API_KEY_ENV)


class ConfigLoader:
    """Loads and validates TOML configuration files"""

    # Sections that may appear in the file and the keys each one accepts
    KNOWN_SECTIONS = {
        'api': ['base_url', 'api_key_env'],
        'rate_limits': ['plan', 'requests_per_second'],
        'http': ['timeout_seconds'],
        'retries': ['retry_interval_seconds'],
        'pagination': ['loop_timeout_seconds'],
        'logging': ['level', 'log_file_name'],
    }

    @staticmethod
    def load_toml_config(config_path: Path) -> ClientConfig:
        """
        Load client configuration from a TOML file

        Args:
            config_path: Path to the TOML configuration file

        Returns:
            ClientConfig with defaults applied for anything not set

        Raises:
            FileNotFoundError: If config file doesn't exist
            ConfigurationError: If the file is not valid TOML or holds invalid values
            EnvironmentError: If [api].api_key_env names an unset variable
        """
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, 'rb') as f:
                config_data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Invalid TOML syntax in {config_path}: {e}")

        ConfigLoader._validate_sections(config_data)

        api = config_data.get('api', {})
        rate_limits = config_data.get('rate_limits', {})
        logging_section = config_data.get('logging', {})

        api_key = None
        if 'api_key_env' in api:
            api_key = ConfigLoader.get_api_key(api['api_key_env'])

        return ClientConfig(
            api_key=api_key,
            base_url=api.get('base_url', BASE_URL),
            requests_per_second=ConfigLoader._requests_per_second(rate_limits),
            timeout=config_data.get('http', {}).get('timeout_seconds', DEFAULT_TIMEOUT),
            retry_interval=config_data.get('retries', {}).get(
                'retry_interval_seconds', DEFAULT_RETRY_INTERVAL),
            loop_timeout=config_data.get('pagination', {}).get(
                'loop_timeout_seconds', DEFAULT_LOOP_TIMEOUT),
            log_level=logging_section.get('level'),
            log_file_name=logging_section.get('log_file_name'),
        )

    @staticmethod
    def _validate_sections(config_data: Dict[str, Any]) -> None:
        """
        Reject unknown keys and non-table sections

        Args:
            config_data: Parsed TOML configuration data

        Raises:
            ConfigurationError: If any section or key is not recognised
        """
        unknown_items = []

        for section_name, section_data in config_data.items():
            if section_name not in ConfigLoader.KNOWN_SECTIONS:
                unknown_items.append(f"Section [{section_name}]")
                continue
            if not isinstance(section_data, dict):
                unknown_items.append(f"Section [{section_name}] is not a table")
                continue
            for key in section_data:
                if key not in ConfigLoader.KNOWN_SECTIONS[section_name]:
                    unknown_items.append(f"Key '{key}' in section [{section_name}]")

        if unknown_items:
            raise ConfigurationError(
                f"Unrecognised configuration items: {', '.join(unknown_items)}"
            )

    @staticmethod
    def _requests_per_second(rate_limits: Dict[str, Any]) -> float:
        """Resolve the request rate from an explicit value or a plan name"""
        if 'requests_per_second' in rate_limits:
            return float(rate_limits['requests_per_second'])
        if 'plan' in rate_limits:
            try:
                return Plan(rate_limits['plan']).requests_per_second
            except ValueError:
                raise ConfigurationError(f"Unknown subscription plan: {rate_limits['plan']}")
        return DEFAULT_REQUESTS_PER_SECOND

    @staticmethod
    def get_api_key(env_var_name: str) -> str:
        """
        Get the API key from an environment variable

        Args:
            env_var_name: Name of the environment variable

        Returns:
            Value of the environment variable

        Raises:
            EnvironmentError: If environment variable is not set
        """
        value = os.getenv(env_var_name)
        if not value:
            raise EnvironmentError(f"{env_var_name} environment variable is not set")
        return value
