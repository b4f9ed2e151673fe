# ==============================================
# Configuration Management
# ==============================================
#
# PURPOSE:
#   Load all configuration from environment variables / .env file
#   and provide typed config objects to the rest of the package.
#   This is where the two outside inputs of a FlatStore come from:
#   the base data directory and the environment tag.
#
# CLASSES:
# --------
# - StoreConfig (dataclass)
#     data_dir: str          (default "data/")
#     env_tag: bytes         (default bf0c6bbd)
#     atomic_writes: bool    (default False)
#
# - AppConfig (dataclass)
#     store: StoreConfig
#     log_level: str         (default "INFO")
#
# FUNCTIONS:
# ----------
# - get_config() -> AppConfig
#     Load .env using python-dotenv, construct AppConfig.
#     Returns the same singleton on repeated calls.
#
# - configure_logging(level: str = None) -> None
#     Basic stream logging for command line use.
#
# ENVIRONMENT:
# ------------
#   FLATDB_DATA_DIR, FLATDB_ENV_TAG, FLATDB_ATOMIC_WRITES, FLATDB_LOG_LEVEL
#
# USAGE:
# ------
#   from flatdb.config import get_config
#   config = get_config()
#   print(config.store.data_dir)
#
# ==============================================

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from flatdb.persistence.serialize import parse_env_tag

DEFAULT_ENV_TAG = "bf0c6bbd"


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class StoreConfig:
    """Where store files live and which environment they belong to."""
    data_dir: str = "data/"
    env_tag: bytes = field(default_factory=lambda: parse_env_tag(DEFAULT_ENV_TAG))
    atomic_writes: bool = False

    def resolve_data_dir(self) -> Path:
        """
        Return the data directory, creating it if it doesn't exist.

        Returns:
            Path to the data directory
        """
        path = Path(self.data_dir)
        path.mkdir(parents=True, exist_ok=True)
        return path


@dataclass
class AppConfig:
    """Main application configuration."""
    store: StoreConfig
    log_level: str = "INFO"


# Singleton instance
_config_instance: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Load configuration from environment variables / .env file.
    Returns the same singleton instance on repeated calls.

    Returns:
        AppConfig: Application configuration

    Raises:
        ValueError: If FLATDB_ENV_TAG is not 8 hex digits
    """
    global _config_instance

    if _config_instance is not None:
        return _config_instance

    # Load .env file from project root
    env_path = Path(__file__).parent.parent / ".env"
    load_dotenv(dotenv_path=env_path)

    store_config = StoreConfig(
        data_dir=os.getenv("FLATDB_DATA_DIR", "data/"),
        env_tag=parse_env_tag(os.getenv("FLATDB_ENV_TAG", DEFAULT_ENV_TAG)),
        atomic_writes=_env_flag("FLATDB_ATOMIC_WRITES"),
    )

    _config_instance = AppConfig(
        store=store_config,
        log_level=os.getenv("FLATDB_LOG_LEVEL", "INFO").upper(),
    )

    return _config_instance


def configure_logging(level: Optional[str] = None) -> None:
    """Send log records to stderr with a timestamped format."""
    logging.basicConfig(
        level=(level or get_config().log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
