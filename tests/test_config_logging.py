"""
Tests for Configuration & Logging
=================================
"""

import json

import pytest

from config_logging import (
    DEFAULT_BUCKETS, DEFAULT_DICTIONARY, MAX_WORD_LENGTH, VERSION,
    SpellerConfig, StructuredLogger, get_config, reset_config, handle_errors,
    AllocationError, SourceUnavailableError, SpellerError, ValidationError,
)


@pytest.fixture(autouse=True)
def fresh_config():
    reset_config()
    yield
    reset_config()


class TestConfig:
    def test_defaults(self):
        config = SpellerConfig()
        assert config.dictionary_path == DEFAULT_DICTIONARY
        assert config.n_buckets == DEFAULT_BUCKETS
        assert config.validate() == (True, [])

    def test_word_length_constant(self):
        assert MAX_WORD_LENGTH == 45

    def test_version(self):
        assert VERSION == "1.0.0"

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv('SPELLER_DICTIONARY', '/tmp/words')
        monkeypatch.setenv('SPELLER_BUCKETS', '101')
        monkeypatch.setenv('SPELLER_PORT', '8080')
        monkeypatch.setenv('SPELLER_LOG_FORMAT', 'json')
        config = get_config()
        assert config.dictionary_path == '/tmp/words'
        assert config.n_buckets == 101
        assert config.port == 8080
        assert config.log_format == 'json'
        assert get_config() is config

    def test_validate_errors(self):
        config = SpellerConfig(n_buckets=0, log_format='xml', log_level='LOUD')
        is_valid, errors = config.validate()
        assert not is_valid
        assert len(errors) == 3

    def test_resolve_relative_to_base_dir(self, tmp_path):
        config = SpellerConfig(base_dir=tmp_path)
        assert config.resolve_dictionary('wordlists/custom') == tmp_path / 'wordlists' / 'custom'

    def test_resolve_absolute(self, tmp_path):
        config = SpellerConfig()
        assert config.resolve_dictionary(str(tmp_path / 'x')) == tmp_path / 'x'

    def test_bundled_default_exists(self):
        """The default dictionary ships with the project."""
        assert SpellerConfig().resolve_dictionary().is_file()

    def test_log_dir_created_when_logging_to_file(self, tmp_path):
        log_dir = tmp_path / 'logs'
        SpellerConfig(log_dir=log_dir, log_to_file=True)
        assert log_dir.is_dir()


class TestStructuredLogger:
    def test_json_records(self, capsys):
        config = SpellerConfig(log_format='json', log_level='INFO')
        log = StructuredLogger('speller_test_json', config)
        log.info("loaded", words=3)
        record = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert record['message'] == 'loaded'
        assert record['words'] == 3
        assert record['level'] == 'INFO'
        assert 'correlation_id' in record

    def test_level_filtering(self, capsys):
        config = SpellerConfig(log_level='WARNING')
        log = StructuredLogger('speller_test_level', config)
        log.info("quiet")
        log.warning("loud")
        err = capsys.readouterr().err
        assert "quiet" not in err
        assert "loud" in err

    def test_file_handler(self, tmp_path):
        config = SpellerConfig(log_dir=tmp_path, log_to_file=True, log_to_console=False,
                               log_level='INFO')
        log = StructuredLogger('Speller_File', config)
        log.info("to disk")
        for handler in log.logger.handlers:
            handler.flush()
        assert "to disk" in (tmp_path / 'speller_file.log').read_text()
        for handler in log.logger.handlers:
            handler.close()

    def test_correlation_id(self):
        cid = StructuredLogger.new_correlation_id()
        assert StructuredLogger.get_correlation_id() == cid

    def test_log_operation(self, capsys):
        config = SpellerConfig(log_level='INFO')
        log = StructuredLogger('speller_test_op', config)
        with log.log_operation('load'):
            pass
        assert "load completed" in capsys.readouterr().err
        with pytest.raises(RuntimeError):
            with log.log_operation('unload'):
                raise RuntimeError("boom")
        assert "unload failed: boom" in capsys.readouterr().err


class TestErrors:
    def test_to_dict(self):
        err = SourceUnavailableError("gone", source='words.txt')
        assert err.to_dict() == {
            'success': False,
            'error': {
                'code': 'SOURCE_UNAVAILABLE',
                'message': 'gone',
                'details': {'source': 'words.txt'},
            },
        }
        assert err.status_code == 503
        assert isinstance(err, SpellerError)

    @pytest.mark.parametrize("raised, expected", [
        (FileNotFoundError("x"), SourceUnavailableError),
        (PermissionError("x"), SourceUnavailableError),
        (MemoryError(), AllocationError),
        (ValueError("x"), ValidationError),
    ])
    def test_handle_errors_mapping(self, raised, expected):
        @handle_errors()
        def fail():
            raise raised

        with pytest.raises(expected):
            fail()

    def test_handle_errors_passes_speller_errors(self):
        @handle_errors()
        def fail():
            raise ValidationError("bad", field='text')

        with pytest.raises(ValidationError) as exc:
            fail()
        assert exc.value.details['field'] == 'text'
