"""
Settings tests
"""
import pytest
from pydantic import ValidationError

from sympcheck.core.config import Settings


@pytest.mark.unit
class TestSettings:
    """Test configuration parsing and validation"""

    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.SCORING_STRATEGY == "rule_based"
        assert settings.MAX_CONCURRENT_ADVICE == 3
        assert settings.gemini_enabled is False

    def test_allowed_hosts_from_comma_list(self):
        settings = Settings(_env_file=None, ALLOWED_HOSTS="http://a.test, http://b.test")
        assert settings.ALLOWED_HOSTS == ["http://a.test", "http://b.test"]

    def test_allowed_hosts_from_json_list(self):
        settings = Settings(_env_file=None, ALLOWED_HOSTS='["http://a.test"]')
        assert settings.ALLOWED_HOSTS == ["http://a.test"]

    def test_allowed_hosts_from_environment(self, monkeypatch):
        monkeypatch.setenv("ALLOWED_HOSTS", "http://env.test,http://other.test")
        assert Settings(_env_file=None).ALLOWED_HOSTS == ["http://env.test", "http://other.test"]

    def test_short_secret_key_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, SECRET_KEY="short")

    def test_unknown_scoring_strategy_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, SCORING_STRATEGY="neural")

    def test_concurrency_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, MAX_CONCURRENT_ADVICE=0)

    def test_database_url_safe_hides_credentials(self):
        settings = Settings(_env_file=None, DATABASE_URL="postgresql://user:pw@db:5432/sympcheck")
        assert settings.database_url_safe == "postgresql://***@db:5432/sympcheck"

    def test_process_strategy_requires_script_path(self):
        with pytest.raises(ValidationError, match="SCORING_SCRIPT_PATH"):
            Settings(_env_file=None, SCORING_STRATEGY="process", SCORING_SCRIPT_PATH=None)

    def test_process_strategy_with_script_path(self):
        settings = Settings(
            _env_file=None, SCORING_STRATEGY="process", SCORING_SCRIPT_PATH="/opt/model/predict.py"
        )
        assert settings.SCORING_SCRIPT_PATH == "/opt/model/predict.py"
