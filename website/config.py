"""
Configuration management for the website backend.
Loads environment variables and provides access to configuration settings.
"""
import logging
import os
from typing import Optional

from dotenv import load_dotenv

# Configure logging
logger = logging.getLogger(__name__)


class Config:
    """Configuration settings loaded from environment variables."""

    def __init__(self):
        """Initialize configuration by loading environment variables."""
        load_dotenv()

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """
        Get a configuration value by key.

        Args:
            key: Configuration key name
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        return os.getenv(key, default)

    @property
    def state_dir(self) -> str:
        """Get the directory holding the article snapshot."""
        return os.getenv("STATE_DIR", "state")

    @property
    def articles_file(self) -> str:
        """Get the snapshot file name inside the state directory."""
        return os.getenv("ARTICLES_FILE", "articles.json")

    @property
    def images_dir(self) -> str:
        """Get the directory where uploaded images are stored."""
        return os.getenv("IMAGES_DIR", "images")

    @property
    def id_strategy(self) -> str:
        """Get the identifier allocation strategy ('sequential' or 'random')."""
        value = os.getenv("ID_STRATEGY", "sequential").lower()
        if value not in ("sequential", "random"):
            logger.warning("Unknown ID_STRATEGY %r, using 'sequential'", value)
            return "sequential"
        return value

    @property
    def admin_password_hash(self) -> str:
        """Get the SHA-256 hex digest of the admin password.

        Empty means no one can log in as admin.
        """
        return os.getenv("ADMIN_PASSWORD_HASH", "").strip().lower()

    @property
    def admin_cookie_name(self) -> str:
        """Get the name of the admin cookie."""
        return os.getenv("ADMIN_COOKIE_NAME", "admin")

    @property
    def allow_empty_store(self) -> bool:
        """Check if the server may start without a readable snapshot."""
        value = os.getenv("ALLOW_EMPTY_STORE", "false").lower()
        return value in ["true", "1", "yes"]

    @property
    def snapshot_write_retries(self) -> int:
        """Get the number of extra attempts after a failed snapshot write."""
        return int(os.getenv("SNAPSHOT_WRITE_RETRIES", "2"))

    @property
    def snapshot_retry_delay(self) -> float:
        """Get the delay in seconds between snapshot write attempts."""
        return float(os.getenv("SNAPSHOT_RETRY_DELAY", "0.1"))

    @property
    def site_host(self) -> str:
        """Get the site server host."""
        return os.getenv("SITE_HOST", "0.0.0.0")

    @property
    def site_port(self) -> int:
        """Get the site server port."""
        return int(os.getenv("SITE_PORT", "80"))
