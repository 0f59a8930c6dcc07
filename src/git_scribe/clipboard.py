"""Copy text to the system clipboard through the platform's clipboard tool."""

import logging
import shutil
import subprocess

from git_scribe.errors import ClipboardError

logger = logging.getLogger(__name__)

# Tried in order; the text is written to the command's stdin
CLIPBOARD_COMMANDS = [
    ["pbcopy"],
    ["xclip", "-selection", "clipboard"],
    ["xsel", "--clipboard", "--input"],
    ["wl-copy"],
    ["termux-clipboard-set"],
    ["clip"],
]


def available_commands() -> list[list[str]]:
    """Clipboard commands found on PATH."""
    return [cmd for cmd in CLIPBOARD_COMMANDS if shutil.which(cmd[0])]


def is_clipboard_available() -> bool:
    return bool(available_commands())


def clipboard_info() -> str:
    """Human-readable list of the clipboard tools found."""
    names = [cmd[0] for cmd in available_commands()]
    if not names:
        return "No clipboard utilities found"
    return f"Available: {', '.join(names)}"


def copy_to_clipboard(text: str) -> str:
    """Copy ``text`` with the first available clipboard tool.

    Returns:
        Name of the tool used

    Raises:
        ClipboardError: If no tool is available or the tool fails
    """
    commands = available_commands()
    if not commands:
        tried = ", ".join(cmd[0] for cmd in CLIPBOARD_COMMANDS)
        raise ClipboardError(f"no clipboard utility found (tried: {tried})")

    command = commands[0]
    try:
        subprocess.run(command, input=text, text=True, check=True, capture_output=True)
    except (OSError, subprocess.CalledProcessError) as e:
        raise ClipboardError(f"{command[0]} failed", cause=e) from e

    logger.debug(f"Copied {len(text)} chars with {command[0]}")
    return command[0]
