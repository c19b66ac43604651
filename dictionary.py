#!/usr/bin/env python3
"""
Dictionary v1.0.0
=================
Case-insensitive word set backed by a fixed-size bucket hash table.

Lifecycle: empty -> load() -> check()/size() -> unload().

Words are stored lower-cased; each entry lives in exactly one bucket.
A bucket is a plain list holding colliding entries in insertion order.
"""

import io
import os
import re
from typing import Dict, Iterable, List, Optional, Union

from config_logging import (
    MAX_WORD_LENGTH, DEFAULT_BUCKETS, get_logger,
    AllocationError, DictionaryStateError, SourceUnavailableError,
)

__version__ = "1.0.0"

logger = get_logger('dictionary')

Source = Union[str, os.PathLike, io.TextIOBase]

# One entry per line: ASCII letters and apostrophes only
_VALID_ENTRY = re.compile(r"[A-Za-z']+")

HASH_MULTIPLIER = 31


def hash_word(word: str, n_buckets: int = DEFAULT_BUCKETS) -> int:
    """Rolling multiplicative hash over the lower-cased word."""
    h = 0
    for ch in word.lower():
        h = (h * HASH_MULTIPLIER + ord(ch)) % n_buckets
    return h


class Dictionary:
    """
    Case-insensitive membership structure built from a word-list source.

    Usage:
        d = Dictionary()
        if d.load('dictionaries/large'):
            d.check('Hello')
            d.size()
        d.unload()

    Or as a context manager, which unloads on exit:
        with Dictionary() as d:
            d.load(path)
    """

    def __init__(self, n_buckets: int = DEFAULT_BUCKETS, max_word_length: int = MAX_WORD_LENGTH):
        if n_buckets < 1:
            raise ValueError("n_buckets must be at least 1")
        self.n_buckets = n_buckets
        self.max_word_length = max_word_length
        self._buckets: Optional[List[List[str]]] = None
        self._count = 0
        self.skipped_lines = 0

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def load(self, source: Source) -> bool:
        """
        Load every word in `source` (a path or an open text stream).

        Returns False if the source cannot be read or storage runs out;
        the dictionary is left empty in that case. Loading twice without
        an unload in between raises DictionaryStateError.
        """
        if self._buckets is not None:
            raise DictionaryStateError("Dictionary is already loaded; unload it first")

        name = _source_name(source)
        try:
            if isinstance(source, io.IOBase):
                self._populate(source)
            else:
                try:
                    with open(source, 'r', encoding='utf-8', newline='') as f:
                        self._populate(f)
                except OSError as e:
                    raise SourceUnavailableError(f"Could not open {name}: {e}", source=name) from e
        except (SourceUnavailableError, AllocationError) as e:
            self._release()
            logger.error(f"Dictionary load failed: {e.message}", code=e.code, source=name)
            return False
        except BaseException:
            self._release()
            raise

        if self.skipped_lines:
            logger.warning(
                f"Skipped {self.skipped_lines} malformed line(s) in {name}",
                source=name, skipped=self.skipped_lines,
            )
        logger.info(f"Loaded {self._count} words from {name}", source=name, words=self._count)
        return True

    def check(self, word: str) -> bool:
        """Return True if `word` is in the dictionary, ignoring case."""
        if self._buckets is None or not word or len(word) > self.max_word_length:
            return False
        # Only ASCII input can match; str.lower() folds some other letters onto ASCII
        if not word.isascii():
            return False
        key = word.lower()
        return key in self._buckets[hash_word(key, self.n_buckets)]

    def size(self) -> int:
        """Number of distinct words loaded, or 0 if not loaded."""
        return self._count

    def unload(self) -> bool:
        """Release every bucket and entry. Returns True once storage is dropped."""
        freed = self._count
        try:
            self._release()
        except Exception as e:
            # Whatever was not cleared is dropped with the table reference
            self._buckets = None
            self._count = 0
            logger.error(f"Dictionary unload incomplete: {e}", code='TEARDOWN_FAILURE')
            return False
        logger.info(f"Unloaded {freed} words", words=freed)
        return True

    # ------------------------------------------------------------------
    # Python protocol helpers
    # ------------------------------------------------------------------

    @property
    def loaded(self) -> bool:
        return self._buckets is not None

    def __len__(self) -> int:
        return self._count

    def __contains__(self, word) -> bool:
        return isinstance(word, str) and self.check(word)

    def __enter__(self) -> 'Dictionary':
        return self

    def __exit__(self, exc_type, exc, tb):
        if self.loaded:
            self.unload()
        return False

    def __repr__(self) -> str:
        state = f"{self._count} words" if self.loaded else "unloaded"
        return f"<Dictionary {state}, {self.n_buckets} buckets>"

    def bucket_stats(self) -> Dict[str, float]:
        """Occupancy summary of the hash table."""
        if self._buckets is None:
            return {'buckets': self.n_buckets, 'used': 0, 'longest': 0, 'mean': 0.0}
        lengths = [len(b) for b in self._buckets if b]
        return {
            'buckets': self.n_buckets,
            'used': len(lengths),
            'longest': max(lengths, default=0),
            'mean': round(self._count / len(lengths), 3) if lengths else 0.0,
        }

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _populate(self, lines: Iterable[str]):
        """Build a fresh table from `lines`; raises on read or allocation failure."""
        self.skipped_lines = 0
        try:
            self._buckets = [[] for _ in range(self.n_buckets)]
            for line in lines:
                self._insert(line.rstrip('\r\n'))
        except MemoryError as e:
            raise AllocationError("Out of memory while loading dictionary",
                                  loaded=self._count) from e
        except (OSError, ValueError) as e:
            # ValueError covers undecodable bytes and closed streams
            raise SourceUnavailableError(f"Could not read dictionary: {e}") from e

    def _insert(self, word: str):
        if not word:
            return
        if len(word) > self.max_word_length or not _VALID_ENTRY.fullmatch(word):
            self.skipped_lines += 1
            return
        key = word.lower()
        bucket = self._buckets[hash_word(key, self.n_buckets)]
        if key not in bucket:
            bucket.append(key)
            self._count += 1

    def _release(self):
        if self._buckets is not None:
            for bucket in self._buckets:
                bucket.clear()
        self._buckets = None
        self._count = 0


def _source_name(source: Source) -> str:
    if isinstance(source, io.IOBase):
        return getattr(source, 'name', '<stream>')
    return os.fspath(source)
