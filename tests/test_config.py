"""Config validation and YAML overlay."""

import pytest

from modules.vale_sync.config import Config
from modules.vale_sync.exceptions import ConfigError


def test_validate_accepts_defaults_without_hubspot():
    cfg = Config()
    cfg.HUBSPOT_SYNC_ENABLED = False
    cfg.API_BASE_URL = 'https://keystonevale.org'
    cfg.HTTP_TIMEOUT = 30.0
    assert cfg.validate() == []


def test_validate_reports_problems():
    cfg = Config()
    cfg.API_BASE_URL = 'keystonevale.org'
    cfg.HTTP_TIMEOUT = 0
    cfg.HUBSPOT_SYNC_ENABLED = True
    cfg.HUBSPOT_ACCESS_TOKEN = ''

    errors = cfg.validate()

    assert "VALE_API_BASE_URL must start with http:// or https://" in errors
    assert "VALE_HTTP_TIMEOUT must be positive" in errors
    assert "HUBSPOT_ACCESS_TOKEN required when HubSpot sync is enabled" in errors


def test_hubspot_enabled_needs_token():
    cfg = Config()
    cfg.HUBSPOT_SYNC_ENABLED = True
    cfg.HUBSPOT_ACCESS_TOKEN = ''
    assert not cfg.hubspot_enabled

    cfg.HUBSPOT_ACCESS_TOKEN = 'pat-123'
    assert cfg.hubspot_enabled


def test_from_yaml_overrides_and_coerces(tmp_path, env_vars):
    path = tmp_path / 'vale.yaml'
    path.write_text(
        "env: prod\n"
        "api_base_url: ${VALE_API_BASE_URL}\n"
        "http_timeout: 12\n"
        "hubspot_sync_enabled: 'false'\n"
        "api_token: ignored-secret\n"
    )

    cfg = Config.from_yaml(path)

    assert cfg.is_prod()
    assert cfg.API_BASE_URL == 'https://staging.vale.test'
    assert cfg.HTTP_TIMEOUT == 12.0
    assert cfg.HUBSPOT_SYNC_ENABLED is False
    assert cfg.API_TOKEN != 'ignored-secret'


def test_from_yaml_missing_file_returns_defaults(tmp_path):
    cfg = Config.from_yaml(tmp_path / 'nope.yaml')
    assert cfg.API_BASE_URL == Config.API_BASE_URL


def test_as_dict_masks_secrets():
    cfg = Config()
    cfg.API_TOKEN = 'secret-token'
    cfg.HUBSPOT_ACCESS_TOKEN = ''

    shown = cfg.as_dict()

    assert shown['api_token'] == 'secr...'
    assert shown['hubspot_access_token'] == '(not set)'



def test_from_yaml_non_numeric_timeout_is_config_error(tmp_path):
    path = tmp_path / 'vale.yaml'
    path.write_text("http_timeout: abc\n")

    with pytest.raises(ConfigError, match="http_timeout"):
        Config.from_yaml(path)


def test_from_yaml_rejects_non_mapping(tmp_path):
    path = tmp_path / 'vale.yaml'
    path.write_text("- just\n- a list\n")

    with pytest.raises(ConfigError):
        Config.from_yaml(path)


def test_cli_reports_bad_config_file(tmp_path, capsys):
    from modules.vale_sync import __main__ as cli

    path = tmp_path / 'vale.yaml'
    path.write_text("http_timeout: abc\n")

    assert cli.main(['--config', str(path), 'config']) == 1
    assert "http_timeout must be a number" in capsys.readouterr().out
