# argparser.py
import argparse
import commands
from commands import Builtin, BuiltinRegistry
from config import DEFAULT_HEAD_LINES
from exceptions import BuiltinUsageError


class BuiltinArgumentParser(argparse.ArgumentParser):
    """ArgumentParser for builtins: errors are raised, never sys.exit().

    With positional_only=True every argument is an operand, even one
    starting with "-", so `cp -file dst` copies a file named -file.
    """

    def __init__(self, positional_only=False, **kwargs):
        kwargs.setdefault("add_help", False)
        super().__init__(**kwargs)
        self.positional_only = positional_only

    def parse_builtin_args(self, arguments):
        """parse_known_args over a builtin's arguments (argv without its name)."""
        if self.positional_only:
            arguments = ["--", *arguments]
        return self.parse_known_args(arguments)

    def error(self, message):
        raise BuiltinUsageError(self.prog, message, self.format_usage())


def line_count(text):
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number of lines: '{text}'")
    if value < 0:
        raise argparse.ArgumentTypeError(f"invalid number of lines: '{text}'")
    return value


def build_builtins(history):
    """The builtin table, in lookup order. `history` is the shell's HistoryLog."""
    cd = BuiltinArgumentParser(prog="cd", positional_only=True)
    cd.add_argument("operands", nargs="*", metavar="dir")

    exit_ = BuiltinArgumentParser(prog="exit")

    help_ = BuiltinArgumentParser(prog="help")

    cp = BuiltinArgumentParser(prog="cp", positional_only=True)
    cp.add_argument("operands", nargs="*", metavar="path")

    ps = BuiltinArgumentParser(prog="ps")

    head = BuiltinArgumentParser(prog="head")
    head.add_argument("-n", type=line_count, default=DEFAULT_HEAD_LINES)
    head.add_argument("path", nargs="?")

    history_ = BuiltinArgumentParser(prog="history")

    return [
        Builtin("cd", cd, commands.change_directory),
        Builtin("exit", exit_, commands.exit_shell),
        Builtin("help", help_, commands.show_help),
        Builtin("cp", cp, commands.copy_command),
        Builtin("ps", ps, commands.list_processes),
        Builtin("head", head, commands.head_file),
        Builtin("history", history_, lambda args: commands.show_history(args, history)),
    ]


def build_registry(history):
    return BuiltinRegistry(build_builtins(history))
