#!/usr/bin/env python3
# Repl.py - read-eval loop: prompt, tokenize, dispatch to builtins or external programs
import getpass
import glob
import logging
import os
import sys

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.formatted_text import FormattedText

import argparser
import config
from exceptions import ExitRequested, ParseError, unexpected_error
from external_runner import run_external
from history import HistoryLog, PromptHistory
from tokenizer import split_line

logger = logging.getLogger(__name__)

STYLE_USER = 'ansicyan'
STYLE_CWD = 'ansigreen'


def get_username():
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "?"


def get_command_prompt():
    """[user:cwd] $ with the user in cyan and the directory in green."""
    try:
        cwd = os.getcwd()
    except OSError:
        # working directory removed from under us
        cwd = "?"
    return FormattedText([
        ("", "["),
        (STYLE_USER, get_username()),
        ("", ":"),
        (STYLE_CWD, cwd),
        ("", "] $ "),
    ])


class ShellCompleter(Completer):
    def __init__(self, builtins):
        self.builtins = builtins

    def get_completions(self, document, complete_event):
        # The word the user is currently typing
        word_before_cursor = document.get_word_before_cursor(WORD=True)
        word_len = len(word_before_cursor)

        # 1. Builtin names for the first word
        if document.text_before_cursor.strip() == word_before_cursor:
            for name in self.builtins:
                if name.startswith(word_before_cursor):
                    yield Completion(name, -word_len)

        # 2. File paths
        if word_before_cursor:
            for path in sorted(glob.glob(glob.escape(word_before_cursor) + '*')):
                display = path
                if os.path.isdir(path):
                    display += os.sep
                yield Completion(display, -word_len)


# -----------------------
# Line readers
# -----------------------
class PromptReader:
    """Interactive line editing through prompt_toolkit."""

    def __init__(self, history, builtin_names):
        self.session = PromptSession(history=PromptHistory(history),
                                     completer=ShellCompleter(builtin_names))

    def read_line(self):
        """Next line, or None at end of input (Ctrl-D)."""
        while True:
            try:
                return self.session.prompt(get_command_prompt())
            except KeyboardInterrupt:
                print()
                continue
            except EOFError:
                return None


class StreamReader:
    """Reads lines from a non-interactive stream; no prompt is shown."""

    def __init__(self, stream):
        self.stream = stream

    def read_line(self):
        line = self.stream.readline()
        if not line:
            return None
        return line[:-1] if line.endswith("\n") else line


# -----------------------
# Shell
# -----------------------
class Shell:
    def __init__(self, reader, history, builtins=None):
        self.reader = reader
        self.history = history
        self.builtins = builtins if builtins is not None else argparser.build_registry(history)

    def run(self):
        """Load history, then read and execute lines until exit or end of input."""
        self.history.load()
        while True:
            line = self.reader.read_line()
            if line is None:
                return self.terminate()
            self.history.append(line)
            try:
                self.execute(line)
            except ExitRequested as e:
                return self.terminate(e.exit_code)
            except KeyboardInterrupt:
                print()

    def terminate(self, exit_code=0):
        self.history.save()
        print("bye")
        return exit_code

    def execute(self, line):
        try:
            argv = split_line(line)
        except ParseError as e:
            logger.debug("parse error in %r: %s", line, e)
            self.report_parse_error()
            return
        except MemoryError:
            unexpected_error("Memory allocation error")
        self.dispatch(argv)

    def dispatch(self, argv):
        if not argv:
            self.report_parse_error()
            return
        builtin = self.builtins.lookup(argv[0])
        if builtin is not None:
            logger.debug("builtin %s %r", argv[0], argv[1:])
            builtin(argv)
            return
        logger.debug("external %r", argv)
        run_external(argv)

    @staticmethod
    def report_parse_error():
        print(f"[{config.SHELL_NAME}] Cannot parse command properly", file=sys.stderr)


def make_reader(history, builtin_names):
    if sys.stdin.isatty():
        return PromptReader(history, builtin_names)
    return StreamReader(sys.stdin)


def main():
    os.umask(0o022)
    logging.basicConfig(level=config.get_log_level(), format=config.LOG_FORMAT)
    history = HistoryLog(config.get_history_file_path())
    builtins = argparser.build_registry(history)
    shell = Shell(make_reader(history, builtins.names()), history, builtins)
    sys.exit(shell.run())


if __name__ == "__main__":
    main()
