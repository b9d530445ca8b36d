# webirc_core/commands/command_handler.py
import importlib
import logging
import pkgutil
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

import webirc_core.commands
from webirc_core.message_formatter import format_local_echo

if TYPE_CHECKING:
    from webirc_core.client.irc_client_logic import IRCSession
    CommandHandlerCallable = Callable[["IRCSession", str], bool]

logger = logging.getLogger("webirc.command_handler")


def load_command_definitions() -> Dict[str, Dict[str, Any]]:
    """
    Walks the `webirc_core.commands` package and collects every entry of each
    module's COMMAND_DEFINITIONS list, keyed by lower-cased name and alias.
    """
    command_map: Dict[str, Dict[str, Any]] = {}
    for _, module_name, is_pkg in pkgutil.walk_packages(
        path=webirc_core.commands.__path__,
        prefix=webirc_core.commands.__name__ + ".",
        onerror=lambda name: logger.error(f"Error importing module during walk_packages: {name}"),
    ):
        if is_pkg:
            continue
        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            logger.error(f"Failed to import module {module_name}: {e}", exc_info=True)
            continue

        for cmd_def in getattr(module, "COMMAND_DEFINITIONS", []):
            cmd_name = cmd_def["name"].lower()
            handler_func = getattr(module, cmd_def["handler"], None)
            if not callable(handler_func):
                logger.error(f"Could not find handler '{cmd_def['handler']}' in {module_name} for command '{cmd_name}'.")
                continue

            help_info = cmd_def.get("help", {})
            entry = {
                "name": cmd_name,
                "handler": handler_func,
                "usage": help_info.get("usage", f"/{cmd_name}"),
                "description": help_info.get("description", ""),
                "aliases": [a.lower() for a in help_info.get("aliases", [])],
                "module_path": module_name,
            }
            for key in [cmd_name] + entry["aliases"]:
                if key in command_map:
                    logger.warning(f"Command '{key}' from {module_name} conflicts with existing command. Overwriting.")
                command_map[key] = entry
            logger.debug(f"Registered command '{cmd_name}' (aliases: {entry['aliases']}) from {module_name}.")
    return command_map


class CommandHandler:
    """Interprets text typed into the input bar."""

    def __init__(self, client: "IRCSession", command_prefix: str = "/"):
        self.client = client
        self.command_prefix = command_prefix or "/"
        self.command_map = load_command_definitions()

    def get_help_text_for_command(self, command_name: str) -> Optional[Dict[str, Any]]:
        entry = self.command_map.get(command_name.lower())
        if not entry:
            return None
        return {
            "help_text": f"{entry['usage']}\n  {entry['description']}",
            "aliases": list(entry["aliases"]),
            "is_alias": command_name.lower() != entry["name"],
            "primary_command": entry["name"],
        }

    def get_available_commands(self) -> List[str]:
        return sorted({entry["name"] for entry in self.command_map.values()})

    def process_user_command(self, line: Optional[str]) -> bool:
        """
        Handles one line of user input and reports whether it did anything.

        Plain text is sent to the selected channel with a local echo, unless
        status is selected. Prefixed text is dispatched to a registered command.
        Bad input returns False and leaves the session untouched.
        """
        if not line:
            return False

        if not line.startswith(self.command_prefix):
            return self._send_chat_text(line)

        command_parts = line[len(self.command_prefix):].split(None, 1)
        if not command_parts:
            return False
        cmd = command_parts[0].lower()
        args_str = command_parts[1].strip() if len(command_parts) > 1 else ""

        entry = self.command_map.get(cmd)
        if entry is None:
            logger.info(f"Unknown command: '{cmd}'")
            return False

        logger.debug(f"Dispatching '{cmd}' to {entry['module_path']}.{entry['handler'].__name__} with args '{args_str}'")
        try:
            return bool(entry["handler"](self.client, args_str))
        except Exception as e:
            logger.error(f"Error executing command '{cmd}': {e}", exc_info=True)
            return False

    def _send_chat_text(self, text: str) -> bool:
        selected = self.client.registry.get_selected()
        if selected.is_status:
            logger.debug("Chat text typed while status is selected. Ignoring.")
            return False

        self.client.add_message(selected.name, format_local_echo(self.client.nick, text))
        self.client.send_message(selected.name, text)
        return True
