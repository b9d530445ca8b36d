# webirc_core/app_config.py
import configparser
import os
import logging
from typing import Type, Any, Optional

from webirc_core.config_defs import (
    DEFAULT_COMMAND_PREFIX,
    DEFAULT_LOG_BACKUP_COUNT,
    DEFAULT_LOG_ENABLED,
    DEFAULT_LOG_ERROR_FILE,
    DEFAULT_LOG_ERROR_LEVEL,
    DEFAULT_LOG_FILE,
    DEFAULT_LOG_LEVEL,
    DEFAULT_LOG_MAX_BYTES,
    DEFAULT_NICK,
    LoggingConfig,
    SessionConfig,
)

logger = logging.getLogger("webirc.config")


class ConfigError(ValueError):
    """Raised when a session cannot be started from the given settings."""


class AppConfig:
    def __init__(self, config_file_path: Optional[str] = None):
        self.BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
        self.CONFIG_FILE_NAME = "webirc_config.ini"
        self.CONFIG_DIR = os.path.join(self.BASE_DIR, "config")
        self.CONFIG_FILE_PATH = config_file_path or os.path.join(self.CONFIG_DIR, self.CONFIG_FILE_NAME)
        self._config_parser = configparser.ConfigParser()
        self.session: SessionConfig = SessionConfig()
        self.logging: LoggingConfig = LoggingConfig()
        self._load_config_file()
        self._load_all_settings()

    def _load_config_file(self):
        if os.path.exists(self.CONFIG_FILE_PATH):
            try:
                self._config_parser.read(self.CONFIG_FILE_PATH, encoding="utf-8")
            except configparser.Error as e:
                logger.warning(f"Could not parse {self.CONFIG_FILE_PATH}, using defaults: {e}")
                self._config_parser = configparser.ConfigParser()

    def _get_config_value(self, section: str, key: str, fallback: Any, value_type: Type = str) -> Any:
        if self._config_parser.has_section(section) and self._config_parser.has_option(section, key):
            try:
                if value_type == bool:
                    return self._config_parser.getboolean(section, key)
                elif value_type == int:
                    return self._config_parser.getint(section, key)
                elif value_type == list:
                    val = self._config_parser.get(section, key)
                    return [item.strip() for item in val.split(",") if item.strip()] if val and val.strip() else []
                return self._config_parser.get(section, key)
            except (ValueError, configparser.Error):
                logger.warning(f"Invalid value for [{section}] {key}, falling back to {fallback!r}")
                return fallback
        return fallback

    def _load_all_settings(self):
        self.session = SessionConfig(
            nick=self._get_config_value("Session", "nick", DEFAULT_NICK, str),
            command_prefix=self._get_config_value("Session", "command_prefix", DEFAULT_COMMAND_PREFIX, str),
        )
        log_level_raw = self._get_config_value("Logging", "log_level", DEFAULT_LOG_LEVEL, str)
        log_error_level_raw = self._get_config_value("Logging", "log_error_level", DEFAULT_LOG_ERROR_LEVEL, str)
        self.logging = LoggingConfig(
            enabled=self._get_config_value("Logging", "log_enabled", DEFAULT_LOG_ENABLED, bool),
            log_file=self._get_config_value("Logging", "log_file", DEFAULT_LOG_FILE, str),
            log_level=log_level_raw.split('#')[0].strip().upper(),
            error_file=self._get_config_value("Logging", "log_error_file", DEFAULT_LOG_ERROR_FILE, str),
            error_level=log_error_level_raw.split('#')[0].strip().upper(),
            max_bytes=self._get_config_value("Logging", "log_max_bytes", DEFAULT_LOG_MAX_BYTES, int),
            backup_count=self._get_config_value("Logging", "log_backup_count", DEFAULT_LOG_BACKUP_COUNT, int),
            extra_loggers=tuple(self._get_config_value("Logging", "extra_loggers", [], list)),
        )

    def rehash(self) -> bool:
        logger.info(f"Rehashing configuration from {self.CONFIG_FILE_PATH}...")
        self._config_parser = configparser.ConfigParser()
        self._load_config_file()
        self._load_all_settings()
        logger.info("Configuration rehashed successfully.")
        return True

    @property
    def nick(self) -> str:
        return self.session.nick

    @property
    def command_prefix(self) -> str:
        return self.session.command_prefix

    @property
    def log_level_int(self) -> int:
        return self.logging.get_log_level_int()

    @property
    def log_error_level_int(self) -> int:
        return self.logging.get_error_level_int()
