# webirc_core/config_defs.py
import logging
from dataclasses import dataclass, field
from typing import Tuple

# --- Default Fallback Constants ---
# These are used as fallbacks if values are not found in the INI file.

# Session
DEFAULT_NICK = "WebIRC"
DEFAULT_COMMAND_PREFIX = "/"

STATUS_CHANNEL_NAME = "status"
CHANNEL_PREFIXES: Tuple[str, ...] = ("#", "&", "!", "+")
MEMBERSHIP_PREFIXES: Tuple[str, ...] = ("@", "+", "%", "&", "~")

# Synthetic message commands
NOTICE_MARKER = "*notice*"
LOCAL_ECHO_MARKER = "*self*"

# Logging
DEFAULT_LOG_ENABLED = True
DEFAULT_LOG_FILE = "webirc.log"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_ERROR_FILE = "webirc_error.log"
DEFAULT_LOG_ERROR_LEVEL = "WARNING"
DEFAULT_LOG_MAX_BYTES = 1024 * 1024 * 5
DEFAULT_LOG_BACKUP_COUNT = 3


# --- Data Classes ---

@dataclass
class SessionConfig:
    nick: str = DEFAULT_NICK
    command_prefix: str = DEFAULT_COMMAND_PREFIX

    def __post_init__(self) -> None:
        self.nick = (self.nick or "").strip()
        if not self.command_prefix:
            self.command_prefix = DEFAULT_COMMAND_PREFIX


@dataclass
class LoggingConfig:
    enabled: bool = DEFAULT_LOG_ENABLED
    log_file: str = DEFAULT_LOG_FILE
    log_level: str = DEFAULT_LOG_LEVEL
    error_file: str = DEFAULT_LOG_ERROR_FILE
    error_level: str = DEFAULT_LOG_ERROR_LEVEL
    max_bytes: int = DEFAULT_LOG_MAX_BYTES
    backup_count: int = DEFAULT_LOG_BACKUP_COUNT
    extra_loggers: Tuple[str, ...] = field(default_factory=tuple)

    def get_log_level_int(self) -> int:
        level = getattr(logging, self.log_level.upper(), None)
        return level if isinstance(level, int) else logging.INFO

    def get_error_level_int(self) -> int:
        level = getattr(logging, self.error_level.upper(), None)
        return level if isinstance(level, int) else logging.WARNING
