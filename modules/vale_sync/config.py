"""
Configuration management for Vale Sync module.

Loads environment variables and provides typed config access.
"""

import os
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from dotenv import load_dotenv

from .exceptions import ConfigError

# Find project root and load .env
PROJECT_ROOT = Path(__file__).parent.parent.parent
load_dotenv(PROJECT_ROOT / '.env')


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == 'true'


class Config:
    """Vale sync configuration."""

    # Environment
    VALE_ENV: str = os.getenv('VALE_ENV', 'dev')

    # Vale API
    API_BASE_URL: str = os.getenv('VALE_API_BASE_URL', 'https://keystonevale.org')
    API_TOKEN: str = os.getenv('VALE_API_TOKEN', '')
    HTTP_TIMEOUT: float = float(os.getenv('VALE_HTTP_TIMEOUT', '30'))

    # HubSpot (secondary CRM)
    HUBSPOT_ACCESS_TOKEN: str = os.getenv('HUBSPOT_ACCESS_TOKEN', '')
    HUBSPOT_BASE_URL: str = os.getenv('HUBSPOT_BASE_URL', 'https://api.hubapi.com')
    HUBSPOT_SYNC_ENABLED: bool = _env_bool('HUBSPOT_SYNC_ENABLED', 'true')

    # Logging (set VALE_LOG_LEVEL=DEBUG for verbose output)
    LOG_LEVEL: str = os.getenv('VALE_LOG_LEVEL', 'INFO')
    LOG_FILE: Optional[str] = os.getenv('VALE_LOG_FILE') or None

    # Keys a YAML file may override (secrets stay in the environment)
    YAML_KEYS = {
        'env': 'VALE_ENV',
        'api_base_url': 'API_BASE_URL',
        'http_timeout': 'HTTP_TIMEOUT',
        'hubspot_base_url': 'HUBSPOT_BASE_URL',
        'hubspot_sync_enabled': 'HUBSPOT_SYNC_ENABLED',
        'log_level': 'LOG_LEVEL',
        'log_file': 'LOG_FILE',
    }

    def is_dev(self) -> bool:
        return self.VALE_ENV == 'dev'

    def is_prod(self) -> bool:
        return self.VALE_ENV == 'prod'

    @property
    def hubspot_enabled(self) -> bool:
        """HubSpot push runs only when switched on and a token is present."""
        return self.HUBSPOT_SYNC_ENABLED and bool(self.HUBSPOT_ACCESS_TOKEN)

    def validate(self) -> list[str]:
        """Validate required configuration. Returns list of errors."""
        errors = []

        if not self.API_BASE_URL:
            errors.append("VALE_API_BASE_URL is required")
        elif not self.API_BASE_URL.startswith(('http://', 'https://')):
            errors.append("VALE_API_BASE_URL must start with http:// or https://")

        if self.HTTP_TIMEOUT <= 0:
            errors.append("VALE_HTTP_TIMEOUT must be positive")

        if self.HUBSPOT_SYNC_ENABLED and not self.HUBSPOT_ACCESS_TOKEN:
            errors.append("HUBSPOT_ACCESS_TOKEN required when HubSpot sync is enabled")

        return errors

    @classmethod
    def from_yaml(cls, config_path: Union[str, Path]) -> 'Config':
        """
        Build a config from a YAML file layered over the environment.

        Values of the form ${VAR} are expanded from the environment.
        Unknown keys are ignored.

        Raises:
            ConfigError: If the file is not a YAML mapping or a numeric
                setting cannot be read as a number
        """
        instance = cls()
        path = Path(config_path)
        if not path.exists():
            return instance

        with open(path, 'r') as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"{path} must contain a mapping of settings")

        for key, value in _expand_env_vars(data).items():
            attr = cls.YAML_KEYS.get(key)
            if attr is None:
                continue
            current = getattr(cls, attr)
            if isinstance(current, bool):
                value = value if isinstance(value, bool) else str(value).lower() == 'true'
            elif isinstance(current, float):
                try:
                    value = float(value)
                except (TypeError, ValueError) as e:
                    raise ConfigError(f"{key} must be a number, got {value!r}") from e
            setattr(instance, attr, value)

        return instance

    def as_dict(self) -> dict:
        """Settings for display, with secrets masked."""
        def mask(secret: str) -> str:
            return f"{secret[:4]}..." if secret else '(not set)'

        return {
            'env': self.VALE_ENV,
            'api_base_url': self.API_BASE_URL,
            'api_token': mask(self.API_TOKEN),
            'http_timeout': self.HTTP_TIMEOUT,
            'hubspot_base_url': self.HUBSPOT_BASE_URL,
            'hubspot_access_token': mask(self.HUBSPOT_ACCESS_TOKEN),
            'hubspot_sync_enabled': self.HUBSPOT_SYNC_ENABLED,
            'log_level': self.LOG_LEVEL,
            'log_file': self.LOG_FILE,
        }


def _expand_env_vars(obj: Any) -> Any:
    """Recursively expand ${VAR} references in config values."""
    if isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(item) for item in obj]
    elif isinstance(obj, str) and obj.startswith('${') and obj.endswith('}'):
        var_name = obj[2:-1]
        return os.environ.get(var_name, obj)
    return obj


# Default instance for the CLI; library code takes a Config explicitly
config = Config()
