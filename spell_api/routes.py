"""
Spell API Flask Routes
======================
API endpoints for checking words and text against the loaded dictionary.
"""

import threading
import time
from functools import wraps
from typing import List, Tuple

from flask import Blueprint, current_app, jsonify, request

from config_logging import (
    VERSION, get_logger, handle_errors,
    SpellerError, SourceUnavailableError,
)
from dictionary import Dictionary
from spell_checker import DictionarySpellChecker

logger = get_logger('spell_api')

spell_blueprint = Blueprint('spell_api', __name__)

# Key under app.extensions holding the app's Dictionary
DICTIONARY_KEY = 'speller.dictionary'

SLOW_CALL_SECONDS = 2.0

_load_lock = threading.Lock()


# =============================================================================
# STANDARDIZED ERROR HANDLING DECORATOR
# =============================================================================

def handle_api_errors(f):
    """Render SpellerError as a JSON error response."""
    @wraps(f)
    def decorated(*args, **kwargs):
        start_time = time.time()
        try:
            result = f(*args, **kwargs)
        except SpellerError as e:
            logger.warning(f"{e.code} in {f.__name__}: {e.message}")
            return jsonify(e.to_dict()), e.status_code

        elapsed = time.time() - start_time
        if elapsed > SLOW_CALL_SECONDS:
            logger.warning(f"Slow spell API call: {f.__name__} took {elapsed:.1f}s")
        return result
    return decorated


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def _load_dictionary(config) -> Dictionary:
    path = config.resolve_dictionary()
    dictionary = Dictionary(n_buckets=config.n_buckets)
    with logger.log_operation("dictionary load", source=str(path)):
        if not dictionary.load(path):
            raise SourceUnavailableError(f"Could not load dictionary {path}", source=str(path))
    return dictionary


def get_dictionary() -> Dictionary:
    """Return the app's dictionary, loading it from config on first use."""
    dictionary = current_app.extensions.get(DICTIONARY_KEY)
    if dictionary is not None:
        return dictionary
    with _load_lock:
        dictionary = current_app.extensions.get(DICTIONARY_KEY)
        if dictionary is None:
            dictionary = _load_dictionary(current_app.config['SPELLER_CONFIG'])
            current_app.extensions[DICTIONARY_KEY] = dictionary
    return dictionary


@handle_errors(logger)
def _paragraphs_from(payload) -> List[Tuple[int, str]]:
    """Accept {"text": str} or {"paragraphs": [str, ...]}."""
    if not isinstance(payload, dict):
        raise ValueError("Request body must be a JSON object")

    if 'paragraphs' in payload:
        paragraphs = payload['paragraphs']
        if not isinstance(paragraphs, list) or not all(isinstance(p, str) for p in paragraphs):
            raise ValueError("'paragraphs' must be a list of strings")
        return list(enumerate(paragraphs))

    text = payload.get('text')
    if not isinstance(text, str):
        raise ValueError("'text' must be a string")
    return [(0, text)]


# =============================================================================
# API ENDPOINTS
# =============================================================================

@spell_blueprint.route('/health', methods=['GET'])
def health():
    """Service status. Does not trigger a dictionary load."""
    dictionary = current_app.extensions.get(DICTIONARY_KEY)
    return jsonify({
        'success': True,
        'version': VERSION,
        'dictionary_loaded': bool(dictionary is not None and dictionary.loaded),
        'dictionary_size': dictionary.size() if dictionary is not None else 0,
    })


@spell_blueprint.route('/spell/word/<word>', methods=['GET'])
@handle_api_errors
def check_word(word):
    """
    Look up a single word.

    Returns:
        {success: true, word: "Hello", valid: true}
    """
    dictionary = get_dictionary()
    return jsonify({
        'success': True,
        'word': word,
        'valid': dictionary.check(word),
    })


@spell_blueprint.route('/spell/check', methods=['POST'])
@handle_api_errors
def check_text():
    """
    Spell-check text.

    Body:
        {text: "..."} or {paragraphs: ["...", "..."]}

    Returns:
        {
            success: true,
            issues: [{message, paragraph_index, flagged_text, source, ...}],
            stats: {words, misspellings, dictionary_size}
        }
    """
    paragraphs = _paragraphs_from(request.get_json(silent=True))
    checker = DictionarySpellChecker(get_dictionary())
    issues = checker.check(paragraphs)
    return jsonify({
        'success': True,
        'issues': issues,
        'stats': checker.stats(),
    })
