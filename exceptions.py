"""
Exceptions and diagnostics for microshell.

Builtins and the process executor report their own failures and return;
only the classes below travel further:

- ParseError: the tokenizer could not make sense of a line
- BuiltinUsageError: a builtin was given arguments it cannot use
- ExitRequested: the exit builtin asks the loop to terminate
"""

import sys
from typing import Optional

from config import SHELL_NAME


class ShellError(Exception):
    """Base class for microshell errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return self.message


class ParseError(ShellError):
    """Raised when an input line cannot be split into arguments."""

    def __init__(self, message: str, line: Optional[str] = None, position: Optional[int] = None):
        super().__init__(message)
        self.line = line
        self.position = position


class UnterminatedQuoteError(ParseError):
    """
    Raised when a double quote is never closed.

    Example:
        raise UnterminatedQuoteError('echo "abc', 5)
    """

    def __init__(self, line: str, position: int):
        super().__init__(f"Unterminated quote at column {position + 1}", line=line, position=position)


class BuiltinUsageError(ShellError):
    """Raised by a builtin's argument parser instead of exiting."""

    def __init__(self, command: str, details: str, usage: str = ""):
        super().__init__(f"{command}: {details}")
        self.command = command
        self.usage = usage


class ExitRequested(Exception):
    """Raised by the exit builtin; the loop saves history and stops."""

    def __init__(self, exit_code: int = 0):
        super().__init__(exit_code)
        self.exit_code = exit_code


def shell_perror(command: str, error: OSError) -> None:
    """Print "Microshell: <command>: <system message>" to stderr."""
    message = error.strerror or str(error)
    print(f"{SHELL_NAME}: {command}: {message}", file=sys.stderr)


def unexpected_error(message: str) -> None:
    """Report an unrecoverable failure and terminate the process."""
    print(f"[{SHELL_NAME}] {message}", file=sys.stderr)
    sys.exit(1)
