"""Cross-platform process helpers for Windows and POSIX systems.

The tunneling agent runs in its own session/process group so that:
- it outlives the bot when the bot exits on a signal, and
- termination can target the whole group (agents may fork helpers).
"""

import os
import signal
import subprocess
import sys
from typing import Any, Final

from tunnel_bot.constants import (
    EXIT_DESCRIPTION_SIGNAL_FORMAT,
    EXIT_DESCRIPTION_STATUS_FORMAT,
)

# Platform detection
IS_WINDOWS: Final[bool] = sys.platform == "win32"


def get_process_group_kwargs() -> dict[str, Any]:
    """Get subprocess.Popen kwargs that start the child in a new process group.

    Returns:
        Dictionary of kwargs to pass to subprocess.Popen.
    """
    if IS_WINDOWS:
        CREATE_NEW_PROCESS_GROUP = 0x00000200
        return {"creationflags": CREATE_NEW_PROCESS_GROUP}
    return {"start_new_session": True}


def signal_terminate(process: subprocess.Popen) -> None:  # type: ignore[type-arg]
    """Send a graceful termination signal to a process and its group.

    SIGTERM to the process group on POSIX, TerminateProcess on Windows.
    Falls back to signaling the process alone if the group is gone or
    not ours.

    Raises:
        ProcessLookupError: If the process no longer exists.
    """
    if IS_WINDOWS:
        process.terminate()
        return
    try:
        os.killpg(os.getpgid(process.pid), signal.SIGTERM)
    except PermissionError:
        process.terminate()


def signal_kill(process: subprocess.Popen) -> None:  # type: ignore[type-arg]
    """Forcefully kill a process and its group (SIGKILL on POSIX).

    Raises:
        ProcessLookupError: If the process no longer exists.
    """
    if IS_WINDOWS:
        process.kill()
        return
    try:
        os.killpg(os.getpgid(process.pid), signal.SIGKILL)
    except PermissionError:
        process.kill()


def describe_exit(returncode: int) -> str:
    """Describe a Popen return code in words ("exit status 2", "terminated by signal SIGKILL")."""
    if returncode < 0 and not IS_WINDOWS:
        try:
            name = signal.Signals(-returncode).name
        except ValueError:
            name = str(-returncode)
        return EXIT_DESCRIPTION_SIGNAL_FORMAT.format(signal=name)
    return EXIT_DESCRIPTION_STATUS_FORMAT.format(code=returncode)
