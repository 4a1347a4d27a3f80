#!/usr/bin/env python3
# history.py - the history log and its view for the line editor

import logging
from typing import Iterable, Iterator, List

from prompt_toolkit.history import History

from exceptions import shell_perror

logger = logging.getLogger(__name__)


class HistoryLog:
    """Lines entered at the prompt, oldest first, persisted one per line."""

    def __init__(self, path: str):
        self.path = path
        self._entries: List[str] = []

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def __len__(self):
        return len(self._entries)

    @property
    def entries(self) -> List[str]:
        return list(self._entries)

    def append(self, line: str) -> None:
        self._entries.append(line)

    def load(self) -> None:
        """Read entries from the history file; a missing file is not an error."""
        try:
            with open(self.path, "r", encoding="utf-8", errors="surrogateescape") as f:
                loaded = [line.rstrip("\n") for line in f]
        except FileNotFoundError:
            logger.debug("no history file at %s", self.path)
            return
        except OSError as e:
            shell_perror("load history from file", e)
            return
        self._entries.extend(loaded)
        logger.debug("loaded %d history entries from %s", len(loaded), self.path)

    def save(self) -> bool:
        """Rewrite the history file. Returns False if it could not be written."""
        try:
            with open(self.path, "w", encoding="utf-8", errors="surrogateescape") as f:
                for line in self._entries:
                    f.write(line + "\n")
        except OSError as e:
            shell_perror("save history to file", e)
            return False
        logger.debug("saved %d history entries to %s", len(self._entries), self.path)
        return True


class PromptHistory(History):
    """Read-only view of a HistoryLog for prompt_toolkit's arrow-key navigation."""

    def __init__(self, log: HistoryLog):
        super().__init__()
        self.log = log

    def load_history_strings(self) -> Iterable[str]:
        # prompt_toolkit expects the most recent entry first
        return list(reversed(self.log.entries))

    def store_string(self, string: str) -> None:
        # the read-eval loop records every line in the log itself
        pass
