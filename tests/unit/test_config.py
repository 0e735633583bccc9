"""
Unit tests for configuration management.
"""
from website.config import Config


class TestConfig:
    """Test suite for Config class."""

    def test_config_initialization(self):
        """Test that Config initializes properly."""
        config = Config()
        assert config is not None

    def test_get_with_default(self):
        """Test get method with default value."""
        config = Config()
        value = config.get("NONEXISTENT_KEY", "default_value")
        assert value == "default_value"

    def test_defaults(self, monkeypatch):
        """Test default values when nothing is set."""
        for key in ("STATE_DIR", "ARTICLES_FILE", "IMAGES_DIR", "ID_STRATEGY",
                    "ADMIN_PASSWORD_HASH", "ADMIN_COOKIE_NAME", "ALLOW_EMPTY_STORE",
                    "SNAPSHOT_WRITE_RETRIES", "SNAPSHOT_RETRY_DELAY", "SITE_HOST", "SITE_PORT"):
            monkeypatch.delenv(key, raising=False)
        config = Config()
        assert config.state_dir == "state"
        assert config.articles_file == "articles.json"
        assert config.images_dir == "images"
        assert config.id_strategy == "sequential"
        assert config.admin_password_hash == ""
        assert config.admin_cookie_name == "admin"
        assert config.allow_empty_store is False
        assert config.snapshot_write_retries == 2
        assert config.snapshot_retry_delay == 0.1
        assert config.site_host == "0.0.0.0"
        assert config.site_port == 80

    def test_state_settings(self, monkeypatch):
        """Test state and image directory settings."""
        monkeypatch.setenv("STATE_DIR", "/tmp/site")
        monkeypatch.setenv("ARTICLES_FILE", "posts.json")
        monkeypatch.setenv("IMAGES_DIR", "/tmp/site/img")
        config = Config()
        assert config.state_dir == "/tmp/site"
        assert config.articles_file == "posts.json"
        assert config.images_dir == "/tmp/site/img"

    def test_id_strategy_random(self, monkeypatch):
        """Test that ID_STRATEGY is normalized to lower case."""
        monkeypatch.setenv("ID_STRATEGY", "Random")
        assert Config().id_strategy == "random"

    def test_unknown_id_strategy_falls_back(self, monkeypatch):
        """Test that an unknown ID_STRATEGY falls back to sequential."""
        monkeypatch.setenv("ID_STRATEGY", "snowflake")
        assert Config().id_strategy == "sequential"

    def test_admin_password_hash_is_normalized(self, monkeypatch):
        """Test that the hash is stripped and lower-cased."""
        monkeypatch.setenv("ADMIN_PASSWORD_HASH", "  ABCDEF \n")
        assert Config().admin_password_hash == "abcdef"

    def test_allow_empty_store_true(self, monkeypatch):
        """Test allow_empty_store accepts truthy strings."""
        for value in ("true", "1", "YES"):
            monkeypatch.setenv("ALLOW_EMPTY_STORE", value)
            assert Config().allow_empty_store is True

    def test_numeric_properties(self, monkeypatch):
        """Test that numeric settings are converted."""
        monkeypatch.setenv("SNAPSHOT_WRITE_RETRIES", "5")
        monkeypatch.setenv("SNAPSHOT_RETRY_DELAY", "0.5")
        monkeypatch.setenv("SITE_PORT", "8080")
        config = Config()
        assert config.snapshot_write_retries == 5
        assert config.snapshot_retry_delay == 0.5
        assert config.site_port == 8080
        assert isinstance(config.site_port, int)
