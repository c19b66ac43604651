#!/usr/bin/env python3
"""
Speller - command-line spell checker
====================================
Loads a dictionary, checks every word of a text file against it, and
reports the misspellings with per-operation CPU timings.

Usage:
    speller [DICTIONARY] TEXT
    speller --json texts/pangram.txt

Exit status is 0 on success and 1 if the dictionary cannot be loaded, the
text cannot be opened or read, or the dictionary cannot be unloaded.
"""

import argparse
import json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from benchmark import Benchmark, TimedDictionary
from config_logging import (
    DEFAULT_BUCKETS, VERSION, get_config, get_logger,
    SpellerError, SourceUnavailableError, TeardownError,
)
from dictionary import Dictionary
from tokenizer import tokenize

__version__ = VERSION

logger = get_logger('speller')

# Console messages per failure stage
FAILURE_MESSAGES = {
    'load': "Could not load {source}.",
    'open': "Could not open {source}.",
    'read': "Error reading {source}.",
    'unload': "Could not unload {source}.",
}


@dataclass
class SpellReport:
    """Outcome of one spell-check run."""
    dictionary: str
    text: str
    misspelled: List[str] = field(default_factory=list)
    words: int = 0
    dictionary_size: int = 0
    timings: Dict[str, float] = field(default_factory=dict)

    @property
    def misspellings(self) -> int:
        return len(self.misspelled)

    def to_dict(self) -> Dict:
        return {
            'dictionary': self.dictionary,
            'text': self.text,
            'misspelled': self.misspelled,
            'words_misspelled': self.misspellings,
            'words_in_dictionary': self.dictionary_size,
            'words_in_text': self.words,
            'timings': self.timings,
        }


def run(text_path, dictionary_path, n_buckets: int = DEFAULT_BUCKETS) -> SpellReport:
    """
    Spell-check `text_path` against the words in `dictionary_path`.

    Raises SourceUnavailableError (details['stage'] is 'load', 'open' or
    'read') or TeardownError. The dictionary is always unloaded before an
    error leaves this function.
    """
    benchmark = Benchmark()
    dictionary = TimedDictionary(Dictionary(n_buckets=n_buckets), benchmark)
    report = SpellReport(dictionary=str(dictionary_path), text=str(text_path))

    if not dictionary.load(dictionary_path):
        raise SourceUnavailableError(f"Could not load {dictionary_path}",
                                     source=str(dictionary_path), stage='load')

    try:
        # Undecodable bytes become U+FFFD, which the tokenizer treats as a separator
        text = open(text_path, 'r', encoding='utf-8', errors='replace')
    except OSError as e:
        dictionary.unload()
        raise SourceUnavailableError(f"Could not open {text_path}: {e}",
                                     source=str(text_path), stage='open') from e

    with text:
        try:
            for word in tokenize(text):
                report.words += 1
                if not dictionary.check(word):
                    report.misspelled.append(word)
        except OSError as e:
            dictionary.unload()
            raise SourceUnavailableError(f"Error reading {text_path}: {e}",
                                         source=str(text_path), stage='read') from e

    report.dictionary_size = dictionary.size()

    if not dictionary.unload():
        raise TeardownError(f"Could not unload {dictionary_path}",
                            source=str(dictionary_path), stage='unload')

    report.timings = benchmark.to_dict()
    return report


def format_report(report: SpellReport) -> str:
    """Render a report the way the console driver prints it."""
    lines = ["", "MISSPELLED WORDS", ""]
    lines.extend(report.misspelled)
    t = report.timings
    lines.extend([
        "",
        f"WORDS MISSPELLED:     {report.misspellings}",
        f"WORDS IN DICTIONARY:  {report.dictionary_size}",
        f"WORDS IN TEXT:        {report.words}",
        f"TIME IN load:         {t.get('load', 0.0):.2f}",
        f"TIME IN check:        {t.get('check', 0.0):.2f}",
        f"TIME IN size:         {t.get('size', 0.0):.2f}",
        f"TIME IN unload:       {t.get('unload', 0.0):.2f}",
        f"TIME IN TOTAL:        {t.get('total', 0.0):.2f}",
    ])
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='speller',
        usage='speller [dictionary] text',
        description='Report the words of a text that are not in a dictionary.',
    )
    parser.add_argument('dictionary', nargs='?', help='Word list, one word per line '
                        '(default: $SPELLER_DICTIONARY or dictionaries/large)')
    parser.add_argument('text', help='Text file to spell-check')
    parser.add_argument('--json', action='store_true', help='Print the report as JSON')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = get_config()
    dictionary_path = Path(args.dictionary) if args.dictionary else config.resolve_dictionary()

    try:
        report = run(args.text, dictionary_path, n_buckets=config.n_buckets)
    except SpellerError as e:
        logger.error(e.message, code=e.code, **e.details)
        stage = e.details.get('stage', 'load')
        print(FAILURE_MESSAGES[stage].format(source=e.details.get('source')))
        return 1

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print(format_report(report))
    return 0


if __name__ == '__main__':
    sys.exit(main())
