#!/usr/bin/env python3
# commands.py - builtins for microshell

import logging
import os
import shutil
import stat
import sys
from types import MappingProxyType

from config import CP_BUFFER_SIZE, PROC_ROOT, SHELL_NAME, SHELL_VERSION
from exceptions import BuiltinUsageError, ExitRequested, shell_perror

logger = logging.getLogger(__name__)


# -----------------------
# Dispatch table
# -----------------------
class Builtin:
    """A command handled inside the shell process.

    Calling it with the full argument vector (its own name first) parses
    the remaining arguments and runs the handler. Usage errors are
    reported here and never reach the loop.
    """

    def __init__(self, name, parser, func):
        self.name = name
        self.parser = parser
        self.func = func

    def __call__(self, argv):
        try:
            args, extra = self.parser.parse_builtin_args(argv[1:])
        except BuiltinUsageError as e:
            if e.usage:
                print(e.usage, end="", file=sys.stderr)
            print(f"{SHELL_NAME}: {e}", file=sys.stderr)
            return
        if extra:
            logger.debug("%s: ignoring extra arguments %r", self.name, extra)
        self.func(args)

    def __repr__(self):
        return f"Builtin({self.name!r})"


class BuiltinRegistry:
    """Read-only, ordered mapping from command name to Builtin."""

    def __init__(self, builtins):
        table = {}
        for builtin in builtins:
            table.setdefault(builtin.name, builtin)
        self._table = MappingProxyType(table)

    def lookup(self, name):
        """The builtin named exactly `name`, or None."""
        return self._table.get(name)

    def names(self):
        return list(self._table)

    def __contains__(self, name):
        return name in self._table

    def __len__(self):
        return len(self._table)


# -----------------------
# Builtin commands
# Each function accepts argparse-style 'args' from the parser
# -----------------------
def change_directory(args):
    path = args.operands[0] if args.operands else None
    if path is None or path == "~":
        path = os.environ.get("HOME")
        if path is None:
            print(f"[{SHELL_NAME}] Home directory not specified", file=sys.stderr)
            return
    try:
        os.chdir(path)
    except OSError as e:
        shell_perror("cd", e)


def exit_shell(args):
    # the loop owns the history log and performs the shutdown
    raise ExitRequested(0)


HELP_ROWS = (
    ("cd [dir]", "change current working directory"),
    ("exit", "close shell"),
    ("help", "details about shell"),
    ("cp [from] [to]", "copy files and directories"),
    ("ps", "list currently running processes"),
    ("head [-n num] [file]", "output the first lines of file"),
    ("history", "show history"),
)

HELP_FEATURES = (
    "Username in command prompt",
    "Colored command prompt",
    "Move through commands history by pressing arrows",
    "Filename completion on tab",
    "Save history to file on exit (by EOF or exit command)",
    "Parse arguments placed between quotes",
)

HELP_AUTHOR = (
    "Created by Patryk Malczewski ",
    "as operating systems final project ",
    "at Adam Mickiewicz University AD 2023/2024",
)


def show_help(args):
    print(f"---===   {SHELL_NAME}   ===---\n")
    print(f"Version {SHELL_VERSION}")
    print("Shell builtins: ")
    for usage, summary in HELP_ROWS:
        print(f"{usage:<20} {summary}")
    print("\nAdditional features:")
    for feature in HELP_FEATURES:
        print(f"\t> {feature}")
    print("\nAUTHOR")
    for line in HELP_AUTHOR:
        print(line)


# -----------------------
# cp
# -----------------------
def copy_command(args):
    if not args.operands:
        print(f"{SHELL_NAME}: cp: Missing file operand", file=sys.stderr)
        return
    if len(args.operands) < 2:
        print(f"{SHELL_NAME}: cp: Missing destination file operand", file=sys.stderr)
        return
    source, destination = args.operands[:2]
    if os.path.isdir(source) and _is_inside(destination, source):
        print(f"{SHELL_NAME}: cp: cannot copy a directory into itself", file=sys.stderr)
        return
    try:
        copy_path(source, destination)
    except RecursionError:
        print(f"{SHELL_NAME}: cp: directory tree too deep", file=sys.stderr)


def _is_inside(path, directory):
    path = os.path.realpath(path)
    directory = os.path.realpath(directory)
    return os.path.commonpath([path, directory]) == directory


def copy_path(source, destination):
    """Copy a regular file or a directory tree; other file types are skipped."""
    try:
        mode = os.lstat(source).st_mode
    except OSError as e:
        shell_perror("cp", e)
        return
    if stat.S_ISREG(mode):
        copy_regular_file(source, destination)
    elif stat.S_ISDIR(mode):
        copy_directory(source, destination)
    else:
        print(f"{SHELL_NAME}: cp: {source}: Unsupported file type", file=sys.stderr)


def copy_regular_file(source, destination):
    try:
        with open(source, "rb") as src, open(destination, "wb") as dst:
            shutil.copyfileobj(src, dst, CP_BUFFER_SIZE)
    except OSError as e:
        shell_perror("cp", e)


def copy_directory(source, destination):
    try:
        entries = sorted(os.listdir(source))
    except OSError as e:
        shell_perror("cp", e)
        return
    try:
        os.mkdir(destination, 0o777)
    except OSError as e:
        shell_perror("cp", e)
        return
    # listdir never yields "." or ".."
    for name in entries:
        copy_path(os.path.join(source, name), os.path.join(destination, name))


# -----------------------
# ps
# -----------------------
def parse_stat_record(record):
    """Return (pid, command) from a "pid (command) state ..." record.

    The command ends at the first ") ", so a command name that itself
    contains ") " comes out truncated.
    """
    pid_text, _, rest = record.strip("\n").partition(" ")
    if rest.startswith("("):
        rest = rest[1:]
    command, found, _ = rest.partition(") ")
    if not found and command.endswith(")"):
        command = command[:-1]
    return int(pid_text), command


def list_processes(args):
    try:
        names = os.listdir(PROC_ROOT)
    except OSError as e:
        shell_perror("ps", e)
        return
    pids = sorted((name for name in names if name.isascii() and name.isdigit()), key=int)
    print(f"{'PID':<6} CMD")
    for name in pids:
        try:
            with open(os.path.join(PROC_ROOT, name, "stat"), "r", encoding="utf-8", errors="replace") as f:
                record = f.readline()
        except OSError as e:
            # the process may have exited since the listing
            shell_perror("ps", e)
            continue
        try:
            pid, command = parse_stat_record(record)
        except ValueError:
            print(f"{SHELL_NAME}: ps: {name}: malformed stat record", file=sys.stderr)
            continue
        print(f"{pid:<6} {command}")


# -----------------------
# head
# -----------------------
def _binary_stdout():
    # text already printed must come out before the raw bytes
    sys.stdout.flush()
    return sys.stdout.buffer


def _copy_lines(source, target, count):
    printed = 0
    while printed < count:
        line = source.readline()
        if not line:
            break
        target.write(line)
        printed += 1
    target.flush()


def head_file(args):
    target = _binary_stdout()
    if args.path is None:
        _copy_lines(sys.stdin.buffer, target, args.n)
        return
    try:
        with open(args.path, "rb") as f:
            _copy_lines(f, target, args.n)
    except OSError as e:
        shell_perror("head", e)


# -----------------------
# history
# -----------------------
def show_history(args, history):
    # entries may hold undecodable bytes from the history file
    target = _binary_stdout()
    for index, line in enumerate(history, start=1):
        target.write(f"{index:<5} {line}\n".encode("utf-8", "surrogateescape"))
    target.flush()
