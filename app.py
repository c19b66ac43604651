"""
Speller - Flask Application
Serves dictionary lookups and text spell-checking over HTTP.

Run with: python app.py
"""
from typing import Optional

from flask import Flask

from config_logging import SpellerConfig, get_config, get_logger
from dictionary import Dictionary
from spell_api import spell_blueprint, DICTIONARY_KEY

logger = get_logger('app')


def create_app(dictionary: Optional[Dictionary] = None,
               config: Optional[SpellerConfig] = None) -> Flask:
    """
    Build the Flask app.

    A dictionary passed in is used as-is; otherwise one is loaded from
    config.dictionary_path on the first spell request.
    """
    config = config or get_config()

    is_valid, errors = config.validate()
    if not is_valid:
        raise ValueError("Invalid configuration: " + "; ".join(errors))

    flask_app = Flask(__name__)
    flask_app.config['MAX_CONTENT_LENGTH'] = config.max_text_bytes
    flask_app.config['SPELLER_CONFIG'] = config
    if dictionary is not None:
        flask_app.extensions[DICTIONARY_KEY] = dictionary

    flask_app.register_blueprint(spell_blueprint, url_prefix='/api')
    return flask_app


app = create_app()


if __name__ == '__main__':
    config = get_config()
    logger.info(f"Starting Speller API on {config.host}:{config.port}")
    app.run(host=config.host, port=config.port)
