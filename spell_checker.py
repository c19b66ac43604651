#!/usr/bin/env python3
"""
Dictionary Spell Checker v1.0.0
===============================
Document checker that flags every word missing from a loaded Dictionary.

Words are found with the speller tokenizer, so digits-in-words and
overlong runs are ignored the same way the command-line driver ignores
them.
"""

from typing import List, Dict, Tuple, Any

from base_checker import BaseChecker
from dictionary import Dictionary
from tokenizer import scan
from config_logging import DictionaryStateError

__version__ = "1.0.0"

CONTEXT_CHARS = 15


class DictionarySpellChecker(BaseChecker):
    """Flags words that are not in the supplied dictionary."""

    CHECKER_NAME = "Spelling"
    CHECKER_VERSION = "1.0.0"

    def __init__(self, dictionary: Dictionary, enabled: bool = True):
        super().__init__(enabled)
        self.dictionary = dictionary
        self._words_checked = 0
        self._misspellings = 0

    def check(self, paragraphs: List[Tuple[int, str]], **kwargs) -> List[Dict[str, Any]]:
        """Check spelling in paragraphs."""
        self._words_checked = 0
        self._misspellings = 0

        if not self.enabled:
            return []
        if not self.dictionary.loaded:
            raise DictionaryStateError("Spell checker needs a loaded dictionary")

        issues = []
        for idx, text in paragraphs:
            if not text:
                continue
            for token in scan(text, self.dictionary.max_word_length):
                self._words_checked += 1
                if self.dictionary.check(token.text):
                    continue
                self._misspellings += 1
                end = token.offset + len(token.text)
                issues.append(self.create_issue(
                    severity='Low',
                    message=f'Possible misspelling: "{token.text}"',
                    context=text[max(0, token.offset - CONTEXT_CHARS):end + CONTEXT_CHARS],
                    paragraph_index=idx,
                    suggestion='Check spelling',
                    rule_id='SP001',
                    flagged_text=token.text,
                    start_offset=token.offset,
                    end_offset=end,
                ))

        return issues

    def stats(self) -> Dict[str, int]:
        """Counts from the most recent check() call."""
        return {
            'words': self._words_checked,
            'misspellings': self._misspellings,
            'dictionary_size': self.dictionary.size(),
        }
