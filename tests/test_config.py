"""Unit tests for the pydantic-settings configuration loader."""

import pytest
from pydantic import SecretStr, ValidationError

from jiralite.config import JiraSettings, get_config, reset_config


class TestJiraSettings:
    """Test JiraSettings with pydantic-settings BaseSettings."""

    def test_default_values(self, clean_settings):
        config = JiraSettings()

        assert config.url == ""
        assert config.username == ""
        assert config.password.get_secret_value() == ""
        assert config.api_version == "2"
        assert config.timeout_connect == 3.0
        assert config.timeout_read == 15.0
        assert config.log_level == "INFO"
        assert config.log_format == "json"

    def test_environment_overrides(self, clean_settings, monkeypatch):
        monkeypatch.setenv("JIRA_URL", "https://jira.example.org")
        monkeypatch.setenv("JIRA_USERNAME", "alice")
        monkeypatch.setenv("JIRA_PASSWORD", "s3cret")
        monkeypatch.setenv("JIRA_API_VERSION", "3")
        monkeypatch.setenv("JIRA_LOG_LEVEL", "debug")

        config = JiraSettings()

        assert config.url == "https://jira.example.org"
        assert config.username == "alice"
        assert isinstance(config.password, SecretStr)
        assert config.password.get_secret_value() == "s3cret"
        assert config.api_version == "3"
        assert config.log_level == "DEBUG"

    def test_dotenv_file(self, clean_settings, tmp_path):
        (tmp_path / ".env").write_text("JIRA_URL=https://from-dotenv.example.org\n")

        assert JiraSettings().url == "https://from-dotenv.example.org"

    def test_password_not_in_repr(self, clean_settings):
        config = JiraSettings(password="s3cret")
        assert "s3cret" not in repr(config)

    def test_rejects_non_http_url(self, clean_settings):
        with pytest.raises(ValidationError):
            JiraSettings(url="ftp://jira.example.org")

    @pytest.mark.parametrize("field,value", [("log_format", "xml"), ("log_level", "LOUD")])
    def test_rejects_invalid_logging_values(self, clean_settings, field, value):
        with pytest.raises(ValidationError):
            JiraSettings(**{field: value})

    def test_rejects_non_positive_timeout(self, clean_settings):
        with pytest.raises(ValidationError):
            JiraSettings(timeout_read=0)

    def test_frozen(self, clean_settings):
        config = JiraSettings()
        with pytest.raises(ValidationError):
            config.url = "https://other.example.org"


class TestConfigSingleton:
    def test_get_config_cached(self, clean_settings):
        assert get_config() is get_config()

    def test_reset_config_reloads(self, clean_settings, monkeypatch):
        first = get_config()
        monkeypatch.setenv("JIRA_USERNAME", "bob")
        assert get_config().username == first.username

        reset_config()
        assert get_config().username == "bob"
