#!/usr/bin/env python3
"""
Word Tokenizer v1.0.0
=====================
Single-pass scanner that pulls candidate words out of a character stream.

Rules:
- A token is a run of ASCII letters, plus apostrophes once the run has
  started ("don't" is one token, a leading apostrophe is dropped).
- A run longer than MAX_WORD_LENGTH is discarded along with the rest of
  its alphabetic run.
- A digit discards the whole alphanumeric run it belongs to ("abc123def"
  yields nothing).
- Anything else ends the current token.

The character that ends a discarded run is consumed with it.
"""

import string
from typing import Iterator, NamedTuple, TextIO, Union

from config_logging import MAX_WORD_LENGTH

__version__ = "1.0.0"

LETTERS = frozenset(string.ascii_letters)
DIGITS = frozenset(string.digits)
ALNUM = LETTERS | DIGITS
APOSTROPHE = "'"

CHUNK_SIZE = 64 * 1024

# Scanner states
_SCANNING = 0
_SKIP_ALPHA = 1     # inside an overlong run
_SKIP_ALNUM = 2     # inside a run that contains a digit


class Token(NamedTuple):
    """A word found in the text and its character offset."""
    text: str
    offset: int


def _chars(stream: Union[str, TextIO]) -> Iterator[str]:
    if isinstance(stream, str):
        yield from stream
        return
    while True:
        chunk = stream.read(CHUNK_SIZE)
        if not chunk:
            return
        if isinstance(chunk, bytes):
            raise TypeError("tokenizer needs a text stream, not a binary one")
        yield from chunk


def scan(stream: Union[str, TextIO], max_length: int = MAX_WORD_LENGTH) -> Iterator[Token]:
    """
    Lazily yield Tokens from `stream` (a string or a text file object).

    The stream is consumed as the generator advances, so the result can
    only be iterated once.
    """
    buf = []
    start = 0
    state = _SCANNING

    for pos, ch in enumerate(_chars(stream)):
        if state == _SKIP_ALPHA:
            if ch not in LETTERS:
                state = _SCANNING
            continue
        if state == _SKIP_ALNUM:
            if ch not in ALNUM:
                state = _SCANNING
            continue

        if ch in LETTERS or (ch == APOSTROPHE and buf):
            if not buf:
                start = pos
            buf.append(ch)
            if len(buf) > max_length:
                buf = []
                state = _SKIP_ALPHA
        elif ch in DIGITS:
            buf = []
            state = _SKIP_ALNUM
        elif buf:
            yield Token(''.join(buf), start)
            buf = []

    if buf:
        yield Token(''.join(buf), start)


def tokenize(stream: Union[str, TextIO], max_length: int = MAX_WORD_LENGTH) -> Iterator[str]:
    """Lazily yield word strings from `stream`."""
    for token in scan(stream, max_length):
        yield token.text
