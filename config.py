#!/usr/bin/env python3
# config.py - constants and environment lookups for microshell

import logging
import os
import pwd

SHELL_NAME = "Microshell"
SHELL_VERSION = "0.0.1"

HISTORY_FILE_NAME = ".microshell_history"
CP_BUFFER_SIZE = 1024
DEFAULT_HEAD_LINES = 10
PROC_ROOT = "/proc"

LOG_LEVEL_ENV = "MICROSHELL_LOG_LEVEL"
LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"


def get_home_directory():
    """$HOME, or the password database entry of the current user."""
    home = os.environ.get("HOME")
    if home is None:
        home = pwd.getpwuid(os.getuid()).pw_dir
    return home


def get_history_file_path():
    return os.path.join(get_home_directory(), HISTORY_FILE_NAME)


def get_log_level():
    name = os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
    level = logging.getLevelName(name)
    # getLevelName returns "Level X" for unknown names
    return level if isinstance(level, int) else logging.WARNING
