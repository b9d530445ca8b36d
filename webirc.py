# webirc.py
import argparse
import json
import logging
import logging.handlers
import os
import sys
from typing import Any, Dict, Iterable, List, Optional

from webirc_core.app_config import AppConfig, ConfigError
from webirc_core.client.irc_client_logic import IRCSession
from webirc_core.context_manager import SessionSnapshot
from webirc_core.network_handler import LoggingTransport

app_logger = logging.getLogger("webirc.main_app")


def setup_logging(config: AppConfig, console: bool = True) -> None:
    """Set up logging for the application using the config object."""
    if not config.logging.enabled:
        logging.disable(logging.CRITICAL + 1)
        return

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Clear existing handlers to prevent duplication on rehash
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    log_dir = os.path.join(config.BASE_DIR, "logs")
    if not os.path.exists(log_dir):
        try:
            os.makedirs(log_dir)
        except OSError as e:
            print(f"Error creating log directory {log_dir}: {e}. Logging to project root.", file=sys.stderr)
            log_dir = config.BASE_DIR

    try:
        full_log_path = os.path.join(log_dir, config.logging.log_file)
        full_handler = logging.handlers.RotatingFileHandler(
            full_log_path,
            maxBytes=config.logging.max_bytes,
            backupCount=config.logging.backup_count,
            encoding="utf-8",
        )
        full_handler.setFormatter(formatter)
        full_handler.setLevel(config.log_level_int)
        root_logger.addHandler(full_handler)

        error_log_path = os.path.join(log_dir, config.logging.error_file)
        error_handler = logging.handlers.RotatingFileHandler(
            error_log_path,
            maxBytes=config.logging.max_bytes,
            backupCount=config.logging.backup_count,
            encoding="utf-8",
        )
        error_handler.setFormatter(formatter)
        error_handler.setLevel(config.log_error_level_int)
        root_logger.addHandler(error_handler)

        if console:
            # stdout carries the snapshot, so console logging goes to stderr
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setFormatter(formatter)
            console_handler.setLevel(logging.WARNING)
            root_logger.addHandler(console_handler)

        base_logger = logging.getLogger("webirc")
        base_logger.setLevel(config.log_level_int)
        base_logger.info(f"Logging initialized. Full log: {full_log_path}, Error log: {error_log_path}")

        for logger_name in config.logging.extra_loggers:
            logging.getLogger(logger_name).setLevel(config.log_level_int)
    except OSError as e:
        print(f"Failed to initialize file logging: {e}", file=sys.stderr)
        logging.basicConfig(
            level=config.log_level_int,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            handlers=[logging.StreamHandler(sys.stderr)],
        )
        logging.getLogger("webirc").error(f"File logging setup failed. Using console logging. Error: {e}")


def snapshot_to_dict(snapshot: SessionSnapshot) -> Dict[str, Any]:
    channels = {}
    for name, channel in snapshot.channels.items():
        channels[name] = {
            "selected": channel.selected,
            "unread_count": channel.unread_count,
            "users": sorted(channel.users, key=lambda x: x.lower()),
            "messages": [
                {
                    "timestamp": message.timestamp.isoformat(),
                    "source": message.source,
                    "command": message.command,
                    "args": list(message.args),
                }
                for message in channel.messages
            ],
        }
    return {"nick": snapshot.nick, "selected": snapshot.selected, "channels": channels}


def replay_transcript(session: IRCSession, lines: Iterable[str]) -> int:
    """
    Feeds JSON-lines transcript records into the session in order.

    Each record is one of `{"event": kind, ...payload}`, `{"command": text}` or
    `{"select": channel}`. Returns the number of records that were applied.
    """
    applied = 0
    for line_no, line in enumerate(lines, start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        try:
            record = json.loads(line)
        except json.JSONDecodeError as e:
            app_logger.warning(f"Transcript line {line_no}: invalid JSON ({e}). Skipping.")
            continue
        if not isinstance(record, dict):
            app_logger.warning(f"Transcript line {line_no}: expected an object. Skipping.")
            continue

        if "event" in record:
            payload = {k: v for k, v in record.items() if k != "event"}
            session.handle_event(record["event"], payload)
        elif "command" in record:
            session.on_command(record["command"])
        elif "select" in record:
            session.on_channel_selected(record["select"])
        else:
            app_logger.warning(f"Transcript line {line_no}: no 'event', 'command' or 'select' key. Skipping.")
            continue
        applied += 1
    return applied


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="webirc session replay")
    parser.add_argument("transcript", nargs="?", default="-", help="JSON-lines transcript file, '-' for stdin. (Default: -)")
    parser.add_argument("--config", default=None, help="Path to the INI configuration file.")
    parser.add_argument("--nick", default=None, help="Nickname of the local user. Overrides config.")
    parser.add_argument("--show-sent", action="store_true", help="Include outbound transport actions in the output.")
    parser.add_argument("--no-console-log", action="store_true", help="Only log to files.")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_arguments(argv)
    app_config = AppConfig(args.config)
    setup_logging(app_config, console=not args.no_console_log)

    transport = LoggingTransport()
    try:
        session = IRCSession(args.nick if args.nick is not None else app_config.nick, transport, config=app_config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    try:
        if args.transcript == "-":
            applied = replay_transcript(session, sys.stdin)
        else:
            with open(args.transcript, "r", encoding="utf-8") as transcript_file:
                applied = replay_transcript(session, transcript_file)
    except OSError as e:
        print(f"Error reading transcript {args.transcript}: {e}", file=sys.stderr)
        return 1

    app_logger.info(f"Replayed {applied} transcript record(s).")
    output = snapshot_to_dict(session.snapshot())
    if args.show_sent:
        output["sent"] = [{"action": action, "args": list(action_args)} for action, action_args in transport.sent]
    print(json.dumps(output, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
