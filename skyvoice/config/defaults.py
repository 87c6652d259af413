"""Default values shared by the session, storage and CLI."""

from skyvoice.config.schema import AppConfig

DEFAULT_PERSONALITY = "default"
DEFAULT_CONFIG_PATH = "configs/default.yaml"
DEFAULT_DB_PATH = "data/skyvoice.db"

DEFAULT_CONFIG = AppConfig()
