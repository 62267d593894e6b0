"""Persisted JSON stores.

Every store loads on start and saves on change.  A store whose file is
missing, unreadable or the wrong shape silently falls back to its built-in
default; loading never raises to the caller.
"""

import logging
import os
from typing import Any, Optional

from .lexicon import Lexicon, default_lexicon, lexicon_to_dict, parse_lexicon
from .utils import atomic_write_json, read_json

logger = logging.getLogger("emotion_radar")


class JsonStore:
    """A single JSON document at *path* with a built-in default.

    Subclasses override :meth:`default`, :meth:`decode` and :meth:`encode`.
    ``decode`` raises ``ValueError`` for a payload of the wrong shape.
    """

    def __init__(self, path: str):
        self.path = path

    def default(self) -> Any:
        raise NotImplementedError

    def decode(self, data) -> Any:
        return data

    def encode(self, value) -> Any:
        return value

    def load(self) -> Any:
        """Return the stored value, or the default if there is none usable."""
        try:
            data = read_json(self.path, default=None)
            if data is None:
                return self.default()
            return self.decode(data)
        except (OSError, ValueError, RecursionError) as e:
            logger.warning(f"Ignoring unreadable store {self.path}: {e}")
            return self.default()

    def save(self, value) -> str:
        atomic_write_json(self.path, self.encode(value))
        return self.path

    def reset(self) -> None:
        """Delete the stored document so the next load returns the default."""
        try:
            os.unlink(self.path)
        except FileNotFoundError:
            pass


class LexiconStore(JsonStore):
    """Persists the user's lexicon (``lexicon.json``)."""

    FILENAME = "lexicon.json"

    def __init__(self, workspace: Optional[str] = None, path: Optional[str] = None):
        super().__init__(path or os.path.join(workspace or ".", self.FILENAME))

    def default(self) -> Lexicon:
        return default_lexicon()

    def decode(self, data) -> Lexicon:
        # LexiconError is a ValueError, so a bad shape falls back to the default
        return parse_lexicon(data)

    def encode(self, lexicon: Lexicon):
        return lexicon_to_dict(lexicon)
