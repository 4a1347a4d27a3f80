# external_runner.py
from __future__ import annotations
import errno, logging, os, shutil, subprocess, sys
from typing import Tuple, Optional

from config import SHELL_NAME

logger = logging.getLogger(__name__)

FAILURE   = 1
NOT_FOUND = 127
NOT_EXEC  = 126

# errors from fork() itself rather than from loading the program
_SPAWN_ERRNOS = (errno.EAGAIN, errno.ENOMEM)

def resolve_executable(cmd: str) -> Optional[str]:
    """Return absolute path to executable or None.
    If cmd contains '/', treat it as a direct path. Otherwise search PATH."""
    if "/" in cmd:
        return cmd if os.path.exists(cmd) else None
    return shutil.which(cmd)

def _report(code: int, message: str, capture: bool) -> Tuple[int, str, str]:
    if capture:
        return code, "", message
    print(message, end="", file=sys.stderr)
    return code, "", ""

def _wait(proc: subprocess.Popen) -> Tuple[str, str]:
    # Ctrl-C reaches the child through the terminal; keep waiting for it
    while True:
        try:
            return proc.communicate()
        except KeyboardInterrupt:
            logger.debug("interrupted while waiting for pid %d", proc.pid)

def run_external(argv: list[str], *, capture: bool = False) -> Tuple[int, str, str]:
    """Run an external program and block until it terminates.
    Returns (exit_code, stdout_text, stderr_text).
    If capture=False, streams directly to terminal and returns empty strings;
    diagnostics go to stderr. If capture=True they come back in stderr_text."""
    command = argv[0]
    exe = resolve_executable(command)
    if not exe:
        return _report(NOT_FOUND, f"{SHELL_NAME}: {command}: command not found\n", capture)

    if not capture:
        sys.stdout.flush()
    pipe = subprocess.PIPE if capture else None
    try:
        proc = subprocess.Popen(argv, executable=exe, stdout=pipe, stderr=pipe,
                                text=capture or None)
    except OSError as e:
        if e.errno in _SPAWN_ERRNOS:
            return _report(FAILURE, f"[{SHELL_NAME}] Cannot create child process\n", capture)
        if isinstance(e, FileNotFoundError):
            return _report(NOT_FOUND, f"{SHELL_NAME}: {command}: command not found\n", capture)
        return _report(NOT_EXEC, f"{SHELL_NAME}: {command}: {e.strerror or e}\n", capture)

    logger.debug("spawned %s as pid %d", command, proc.pid)
    out, err = _wait(proc)
    logger.debug("pid %d exited with %d", proc.pid, proc.returncode)
    return proc.returncode, out or "", err or ""
